"""
Handoff Panel - Two-Cell Drive Test

Signal strength from both base stations along the route, with the
receiver position, the trigger level of the active algorithm, and
markers for every handoff and drop.
"""

from dataclasses import replace

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import Qt, pyqtSlot
from PyQt6.QtWidgets import (
    QComboBox, QDoubleSpinBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel,
    QPushButton, QVBoxLayout, QWidget,
)

from wirelab.engine import (
    Environment, HandoffEventKind, HandoffMode, received_power_dbm, signal_profile,
    theoretical_handoff_point,
)
from wirelab.ui.config import (
    BS1_COLOR, BS2_COLOR, DROP_COLOR, HANDOFF_COLOR, HYSTERESIS_RANGE_DB,
    SPEED_RANGE_KMH, THRESHOLD_RANGE_DB,
)


class HandoffPanel(QWidget):
    """Controls, signal chart and status for the handoff lab."""

    def __init__(self, controller):
        super().__init__()
        self.controller = controller
        config = controller.handoff.config

        layout = QHBoxLayout(self)

        controls = QGroupBox("DRIVE TEST")
        form = QFormLayout(controls)

        self.env_combo = QComboBox()
        for env in Environment:
            self.env_combo.addItem(env.label.title(), env)
        self.env_combo.setCurrentIndex(list(Environment).index(config.environment))

        self.mode_combo = QComboBox()
        for mode in HandoffMode:
            self.mode_combo.addItem(mode.value.title(), mode)
        self.mode_combo.setCurrentIndex(list(HandoffMode).index(config.mode))

        self.speed_box = self._spin(SPEED_RANGE_KMH, config.speed_kmh, " km/h")
        self.threshold_box = self._spin(THRESHOLD_RANGE_DB, config.threshold_margin_db, " dB")
        self.hysteresis_box = self._spin(HYSTERESIS_RANGE_DB, config.hysteresis_margin_db, " dB")

        form.addRow("Environment", self.env_combo)
        form.addRow("Algorithm", self.mode_combo)
        form.addRow("Speed", self.speed_box)
        form.addRow("Threshold margin Δ", self.threshold_box)
        form.addRow("Hysteresis H", self.hysteresis_box)

        self.cell_label = QLabel()
        self.position_label = QLabel()
        self.handoffs_label = QLabel()
        self.status_label = QLabel()
        form.addRow("Serving cell", self.cell_label)
        form.addRow("Position", self.position_label)
        form.addRow("Handoffs", self.handoffs_label)
        form.addRow("Status", self.status_label)

        buttons = QHBoxLayout()
        self.start_button = QPushButton("Start")
        self.stop_button = QPushButton("Stop")
        self.reset_button = QPushButton("Reset")
        for button in (self.start_button, self.stop_button, self.reset_button):
            buttons.addWidget(button)
        form.addRow(buttons)
        layout.addWidget(controls, stretch=1)

        charts = QVBoxLayout()
        self.plot = pg.PlotWidget(title="Received signal strength")
        self.plot.setLabel('bottom', 'Distance from BS1 (m)')
        self.plot.setLabel('left', 'Power (dBm)')
        self.plot.addLegend()
        self.bs1_curve = pg.PlotDataItem([], [], pen=pg.mkPen(BS1_COLOR, width=2), name="BS1")
        self.bs2_curve = pg.PlotDataItem([], [], pen=pg.mkPen(BS2_COLOR, width=2), name="BS2")
        self.trigger_line = pg.InfiniteLine(angle=90, pen=pg.mkPen('w', style=Qt.PenStyle.DashLine))
        self.position_line = pg.InfiniteLine(angle=90, pen=pg.mkPen(HANDOFF_COLOR, width=2))
        self.event_markers = pg.ScatterPlotItem(size=9)
        for item in (self.bs1_curve, self.bs2_curve, self.trigger_line,
                     self.position_line, self.event_markers):
            self.plot.addItem(item)
        charts.addWidget(self.plot)
        layout.addLayout(charts, stretch=3)

        self.env_combo.currentIndexChanged.connect(self._push_config)
        self.mode_combo.currentIndexChanged.connect(self._push_config)
        for box in (self.speed_box, self.threshold_box, self.hysteresis_box):
            box.valueChanged.connect(self._push_config)
        self.start_button.clicked.connect(controller.start_handoff)
        self.stop_button.clicked.connect(controller.stop_handoff)
        self.reset_button.clicked.connect(controller.reset_handoff)
        controller.handoff_updated.connect(self.update_state)

        self._redraw_profile()
        self.update_state(controller.handoff.state)

    @staticmethod
    def _spin(bounds, value, suffix):
        lo, hi, step = bounds
        box = QDoubleSpinBox()
        box.setRange(lo, hi)
        box.setSingleStep(step)
        box.setValue(value)
        box.setSuffix(suffix)
        return box

    def _push_config(self, *_):
        config = replace(
            self.controller.handoff.config,
            environment=self.env_combo.currentData(),
            mode=self.mode_combo.currentData(),
            speed_kmh=self.speed_box.value(),
            threshold_margin_db=self.threshold_box.value(),
            hysteresis_margin_db=self.hysteresis_box.value(),
        )
        self.controller.set_handoff_config(config)
        self._redraw_profile()

    def _redraw_profile(self):
        config = self.controller.handoff.config
        positions, s1, s2 = signal_profile(config)
        self.bs1_curve.setData(positions, s1)
        self.bs2_curve.setData(positions, s2)
        point = theoretical_handoff_point(config)
        self.trigger_line.setValue(float(np.clip(point, 0.0, config.total_distance)))

    @pyqtSlot(object)
    def update_state(self, state):
        self.position_line.setValue(state.position)
        self.cell_label.setText(f"BS{state.active_cell}")
        self.position_label.setText(f"{state.position:.0f} / {state.total_distance:.0f} m")
        self.handoffs_label.setText(str(state.handoff_count))

        if state.dropped:
            status = "CALL DROPPED"
        elif state.ping_pong:
            status = "PING-PONG"
        elif state.moving:
            status = "DRIVING"
        else:
            status = "STOPPED"
        self.status_label.setText(status)

        config = self.controller.handoff.config
        spots = []
        for event in state.events:
            power = received_power_dbm(event.position, config.path_loss_exponent, config.tx_power_dbm)
            color = DROP_COLOR if event.kind is HandoffEventKind.DROP else HANDOFF_COLOR
            spots.append({'pos': (event.position, power), 'brush': color})
        self.event_markers.setData(spots)
