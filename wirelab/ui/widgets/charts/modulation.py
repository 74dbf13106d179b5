"""
Modulation Panel - Why We Need a Carrier

Carrier slider (30 kHz .. 3 GHz, log scale) drives the quarter-wave
antenna size; the AM waveform scrolls on its own timer and the block
spectrum shows baseband vs. the shifted sidebands.
"""

import pyqtgraph as pg
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import (
    QDoubleSpinBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QSlider,
    QVBoxLayout, QWidget,
)

from wirelab.engine import modulation
from wirelab.ui.config import (
    ACCENT_COLOR, BANDWIDTH_RANGE_KHZ, MODULATION_INDEX_RANGE,
    MODULATION_REFRESH_MS, MODULATION_TIME_STEP, SIMULATION_COLOR,
    THEORY_COLOR,
)

# kHz of audio bandwidth -> bins on the -100..100 visual axis
BANDWIDTH_SCALE = 2.0


def _format_hz(f):
    for unit, scale in (("GHz", 1e9), ("MHz", 1e6), ("kHz", 1e3)):
        if f >= scale:
            return f"{f / scale:.2f} {unit}"
    return f"{f:.0f} Hz"


def _format_m(h):
    if h >= 1000:
        return f"{h / 1000:.2f} km"
    if h >= 1:
        return f"{h:.2f} m"
    return f"{h * 100:.1f} cm"


class ModulationPanel(QWidget):
    def __init__(self):
        super().__init__()
        self.time = 0.0
        layout = QHBoxLayout(self)

        controls = QGroupBox("CARRIER")
        form = QFormLayout(controls)
        self.carrier_slider = QSlider(Qt.Orientation.Horizontal)
        self.carrier_slider.setRange(0, 100)
        self.carrier_slider.setValue(50)
        self.index_box = QDoubleSpinBox()
        self.index_box.setRange(*MODULATION_INDEX_RANGE[:2])
        self.index_box.setSingleStep(MODULATION_INDEX_RANGE[2])
        self.index_box.setValue(0.5)
        self.bandwidth_box = QDoubleSpinBox()
        self.bandwidth_box.setRange(*BANDWIDTH_RANGE_KHZ[:2])
        self.bandwidth_box.setSingleStep(BANDWIDTH_RANGE_KHZ[2])
        self.bandwidth_box.setValue(5.0)
        self.bandwidth_box.setSuffix(" kHz")
        form.addRow("Carrier", self.carrier_slider)
        form.addRow("Modulation index", self.index_box)
        form.addRow("Audio bandwidth", self.bandwidth_box)

        self.freq_label = QLabel()
        self.antenna_label = QLabel()
        self.class_label = QLabel()
        form.addRow("Carrier frequency", self.freq_label)
        form.addRow("Antenna (λ/4)", self.antenna_label)
        form.addRow("Comparable to", self.class_label)
        layout.addWidget(controls, stretch=1)

        charts = QVBoxLayout()
        self.wave_plot = pg.PlotWidget(title="AM signal")
        self.wave_plot.setYRange(-2.1, 2.1)
        self.upper = self.wave_plot.plot(pen=pg.mkPen(THEORY_COLOR, style=Qt.PenStyle.DashLine))
        self.lower = self.wave_plot.plot(pen=pg.mkPen(THEORY_COLOR, style=Qt.PenStyle.DashLine))
        self.signal = self.wave_plot.plot(pen=pg.mkPen(ACCENT_COLOR, width=2))
        charts.addWidget(self.wave_plot)

        self.spec_plot = pg.PlotWidget(title="Spectrum")
        self.spec_plot.setYRange(0, 1)
        self.spectrum = self.spec_plot.plot(stepMode='center', fillLevel=0,
                                            brush=SIMULATION_COLOR, pen=pg.mkPen(SIMULATION_COLOR))
        charts.addWidget(self.spec_plot)
        layout.addLayout(charts, stretch=3)

        self.carrier_slider.valueChanged.connect(self.refresh)
        self.bandwidth_box.valueChanged.connect(self.refresh)
        self.index_box.valueChanged.connect(self._redraw_wave)

        self.timer = QTimer(self)
        self.timer.setInterval(MODULATION_REFRESH_MS)
        self.timer.timeout.connect(self._tick)
        self.timer.start()
        self.refresh()

    def _tick(self):
        self.time += MODULATION_TIME_STEP
        self._redraw_wave()

    def _redraw_wave(self, *_):
        position = self.carrier_slider.value()
        wave = modulation.am_waveform(self.index_box.value(), self.time,
                                      carrier_speed_ratio=modulation.carrier_speed(position))
        self.upper.setData(wave.t, wave.upper_envelope)
        self.lower.setData(wave.t, wave.lower_envelope)
        self.signal.setData(wave.t, wave.signal)

    def refresh(self, *_):
        position = self.carrier_slider.value()
        carrier = modulation.carrier_from_slider(position)
        height = modulation.antenna_height(carrier)
        self.freq_label.setText(_format_hz(carrier))
        self.antenna_label.setText(_format_m(height))
        self.class_label.setText(modulation.classify_antenna(height).value)

        freqs, spectrum = modulation.am_spectrum(self.bandwidth_box.value() * BANDWIDTH_SCALE, position)
        edges = list(freqs - 0.5) + [freqs[-1] + 0.5]
        self.spectrum.setData(edges, spectrum)
        self._redraw_wave()
