"""
Doppler Panel

Top-down view of the car passing the tower, live Doppler metrics and an
oscilloscope of the received tone whose frequency follows the shift.
"""

import pyqtgraph as pg
from PyQt6.QtCore import pyqtSlot
from PyQt6.QtWidgets import (
    QDoubleSpinBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QPushButton,
    QVBoxLayout, QWidget,
)

from wirelab.ui.config import (
    APPROACH_COLOR, CARRIER_RANGE_GHZ, NEUTRAL_COLOR, RECEDE_COLOR,
    SPEED_RANGE_KMH,
)

TREND_COLORS = {
    "approaching": APPROACH_COLOR,
    "receding": RECEDE_COLOR,
    "perpendicular": NEUTRAL_COLOR,
}


class DopplerPanel(QWidget):
    def __init__(self, controller):
        super().__init__()
        self.controller = controller
        animation = controller.doppler
        geometry = animation.geometry

        layout = QHBoxLayout(self)

        controls = QGroupBox("DOPPLER SHIFT")
        form = QFormLayout(controls)
        self.speed_box = QDoubleSpinBox()
        self.speed_box.setRange(*SPEED_RANGE_KMH[:2])
        self.speed_box.setSingleStep(SPEED_RANGE_KMH[2])
        self.speed_box.setValue(animation.velocity_kmh)
        self.speed_box.setSuffix(" km/h")
        self.carrier_box = QDoubleSpinBox()
        self.carrier_box.setRange(*CARRIER_RANGE_GHZ[:2])
        self.carrier_box.setSingleStep(CARRIER_RANGE_GHZ[2])
        self.carrier_box.setValue(animation.carrier_freq_ghz)
        self.carrier_box.setSuffix(" GHz")
        form.addRow("Velocity", self.speed_box)
        form.addRow("Carrier", self.carrier_box)

        self.metric_labels = {}
        for key, title in (("wavelength", "Wavelength λ"), ("angle", "Angle θ"),
                           ("cos", "cos θ"), ("shift", "Doppler Δf"),
                           ("received", "Received f"), ("trend", "Trend")):
            self.metric_labels[key] = QLabel("--")
            form.addRow(title, self.metric_labels[key])

        self.play_button = QPushButton("Pause")
        self.play_button.setCheckable(True)
        form.addRow(self.play_button)
        layout.addWidget(controls, stretch=1)

        charts = QVBoxLayout()
        self.scene_plot = pg.PlotWidget(title="Road view")
        self.scene_plot.setMouseEnabled(x=False, y=False)
        self.scene_plot.invertY(True)
        self.scene_plot.setXRange(-geometry.wrap_margin, geometry.road_length + geometry.wrap_margin)
        self.scene_plot.setYRange(0, geometry.road_y + 40)
        road = pg.PlotDataItem([0, geometry.road_length], [geometry.road_y, geometry.road_y],
                               pen=pg.mkPen('#555', width=6))
        tower = pg.ScatterPlotItem([geometry.tower_x], [geometry.tower_y], size=16,
                                   symbol='t1', brush='#ccc')
        self.ray = pg.PlotDataItem([], [], pen=pg.mkPen('#888', width=1))
        self.car = pg.ScatterPlotItem(size=14, symbol='s')
        for item in (road, tower, self.ray, self.car):
            self.scene_plot.addItem(item)
        charts.addWidget(self.scene_plot)

        self.scope_plot = pg.PlotWidget(title="Received waveform")
        self.scope_plot.setYRange(-1.2, 1.2)
        self.scope_plot.setMouseEnabled(x=False, y=False)
        self.trace = pg.PlotDataItem([], [], pen=pg.mkPen(NEUTRAL_COLOR, width=2))
        self.scope_plot.addItem(self.trace)
        charts.addWidget(self.scope_plot)
        layout.addLayout(charts, stretch=3)

        self.speed_box.valueChanged.connect(self._push_parameters)
        self.carrier_box.valueChanged.connect(self._push_parameters)
        self.play_button.toggled.connect(self._toggle_pause)
        controller.doppler_updated.connect(self.update_frame)

    def _push_parameters(self, *_):
        self.controller.set_doppler(self.speed_box.value(), self.carrier_box.value())

    def _toggle_pause(self, paused: bool):
        self.play_button.setText("Play" if paused else "Pause")
        if paused:
            self.controller.doppler.pause()
        else:
            self.controller.doppler.play()

    @pyqtSlot(object)
    def update_frame(self, frame):
        animation = self.controller.doppler
        g = animation.geometry
        color = TREND_COLORS[frame.trend]

        self.car.setData([animation.car_x], [g.road_y], brush=color)
        self.ray.setData([g.tower_x, animation.car_x], [g.tower_y, g.road_y])
        self.trace.setData(animation.oscilloscope_trace())
        self.trace.setPen(pg.mkPen(color, width=2))

        labels = self.metric_labels
        labels["wavelength"].setText(f"{frame.wavelength_m * 100:.2f} cm")
        labels["angle"].setText(f"{frame.angle_deg:.1f}°")
        labels["cos"].setText(f"{frame.cos_theta:+.3f}")
        labels["shift"].setText(f"{frame.delta_f_hz:+.1f} Hz")
        labels["received"].setText(f"{frame.received_freq_hz / 1e9:.9f} GHz")
        labels["trend"].setText(frame.trend.upper())
