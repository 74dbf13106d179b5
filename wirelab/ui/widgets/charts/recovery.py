"""
Signal Recovery Panel - Zero-Forcing Equalization Walkthrough

Each press of "Next step" runs one pipeline stage:
GENERATE → CHANNEL → CONVOLVE → TRANSFORM → EQUALIZE.
Plots fill in as their artifacts become available.
"""

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import pyqtSlot
from PyQt6.QtWidgets import (
    QDoubleSpinBox, QFormLayout, QGridLayout, QGroupBox, QHBoxLayout, QLabel,
    QLineEdit, QPushButton, QSpinBox, QWidget,
)

from wirelab.engine import PipelineStage
from wirelab.ui.config import (
    DROP_COLOR, HANDOFF_COLOR, NOISE_VARIANCE_RANGE, SAMPLES_PER_SYMBOL_RANGE,
    SIMULATION_COLOR, THEORY_COLOR,
)

STAGE_HINTS = {
    PipelineStage.GENERATE: "Next: map bits to a ±1 waveform",
    PipelineStage.CHANNEL: "Next: build the multipath impulse response h[n]",
    PipelineStage.CONVOLVE: "Next: y = x * h + noise",
    PipelineStage.TRANSFORM: "Next: FFT and Zero-Forcing equalizer E = 1/H",
    PipelineStage.EQUALIZE: "Next: x̂ = IFFT(Y·E) and decode",
    PipelineStage.COMPLETE: "Done",
}


def _plot(title, bottom):
    plot = pg.PlotWidget(title=title)
    plot.setLabel('bottom', bottom)
    return plot


class RecoveryPanel(QWidget):
    def __init__(self, controller):
        super().__init__()
        self.controller = controller
        pipeline = controller.recovery

        layout = QHBoxLayout(self)

        controls = QGroupBox("SIGNAL RECOVERY")
        form = QFormLayout(controls)
        self.bits_edit = QLineEdit(pipeline.bits)
        self.sps_box = QSpinBox()
        self.sps_box.setRange(*SAMPLES_PER_SYMBOL_RANGE[:2])
        self.sps_box.setValue(pipeline.samples_per_symbol)
        self.noise_box = QDoubleSpinBox()
        self.noise_box.setRange(*NOISE_VARIANCE_RANGE[:2])
        self.noise_box.setSingleStep(NOISE_VARIANCE_RANGE[2])
        self.noise_box.setValue(pipeline.noise_variance)
        form.addRow("Bits", self.bits_edit)
        form.addRow("Samples / symbol", self.sps_box)
        form.addRow("Noise variance", self.noise_box)

        self.apply_button = QPushButton("Apply && reset")
        self.step_button = QPushButton("Next step")
        self.finish_button = QPushButton("Run all")
        for button in (self.apply_button, self.step_button, self.finish_button):
            form.addRow(button)

        self.stage_label = QLabel()
        self.stage_label.setWordWrap(True)
        self.decoded_label = QLabel("--")
        self.floored_label = QLabel("--")
        form.addRow("Stage", self.stage_label)
        form.addRow("Decoded", self.decoded_label)
        form.addRow("Floored bins", self.floored_label)
        layout.addWidget(controls, stretch=1)

        grid = QGridLayout()
        self.tx_plot = _plot("Transmitted x[n]", "Sample")
        self.h_plot = _plot("Impulse response h[n]", "Delay (samples)")
        self.rx_plot = _plot("Received y[n]", "Sample")
        self.freq_plot = _plot("Magnitude spectra", "FFT bin")
        self.freq_plot.addLegend()
        self.out_plot = _plot("Recovered x̂[n]", "Sample")

        self.tx_curve = self.tx_plot.plot(pen=pg.mkPen(THEORY_COLOR, width=2))
        self.h_stems = self.h_plot.plot(pen=pg.mkPen(SIMULATION_COLOR, width=2), connect='pairs')
        self.clean_curve = self.rx_plot.plot(pen=pg.mkPen('#777', width=1))
        self.noisy_curve = self.rx_plot.plot(pen=pg.mkPen(SIMULATION_COLOR, width=2))
        self.y_curve = self.freq_plot.plot(pen=pg.mkPen(SIMULATION_COLOR), name="|Y|")
        self.hf_curve = self.freq_plot.plot(pen=pg.mkPen(DROP_COLOR), name="|H|")
        self.e_curve = self.freq_plot.plot(pen=pg.mkPen(HANDOFF_COLOR), name="|E|")
        self.out_curve = self.out_plot.plot(pen=pg.mkPen(HANDOFF_COLOR, width=2))
        self.ref_curve = self.out_plot.plot(pen=pg.mkPen('#777', width=1))

        grid.addWidget(self.tx_plot, 0, 0)
        grid.addWidget(self.h_plot, 0, 1)
        grid.addWidget(self.rx_plot, 1, 0)
        grid.addWidget(self.freq_plot, 1, 1)
        grid.addWidget(self.out_plot, 2, 0, 1, 2)
        layout.addLayout(grid, stretch=3)

        self.apply_button.clicked.connect(self._apply)
        self.step_button.clicked.connect(controller.advance_recovery)
        self.finish_button.clicked.connect(controller.finish_recovery)
        controller.recovery_updated.connect(self.update_state)

        self.update_state(pipeline.state)

    def _apply(self):
        self.controller.configure_recovery(
            self.bits_edit.text().strip(), self.sps_box.value(), self.noise_box.value()
        )

    @pyqtSlot(object)
    def update_state(self, state):
        self.stage_label.setText(STAGE_HINTS[state.stage])
        self.step_button.setEnabled(not state.complete)
        self.finish_button.setEnabled(not state.complete)

        for curve in (self.tx_curve, self.h_stems, self.clean_curve, self.noisy_curve,
                      self.y_curve, self.hf_curve, self.e_curve, self.out_curve, self.ref_curve):
            curve.setData([], [])

        if state.waveform is not None:
            self.tx_curve.setData(state.waveform)
        if state.impulse_response is not None:
            h = state.impulse_response
            n = np.arange(h.size)
            self.h_stems.setData(np.repeat(n, 2), np.column_stack([np.zeros_like(h), h]).ravel())
        if state.noisy is not None:
            self.clean_curve.setData(state.convolved)
            self.noisy_curve.setData(state.noisy)
        if state.spectrum_y is not None:
            self.y_curve.setData(np.abs(state.spectrum_y))
            self.hf_curve.setData(np.abs(state.spectrum_h))
            self.e_curve.setData(np.abs(state.spectrum_e))
            self.floored_label.setText(str(state.floored_bins))
        else:
            self.floored_label.setText("--")

        if state.recovered is not None:
            self.out_curve.setData(state.recovered)
            self.ref_curve.setData(state.waveform)
            verdict = "OK" if state.recovered_ok else f"{state.bit_errors} bit error(s)"
            self.decoded_label.setText(f"{state.decoded_bits} ({verdict})")
        else:
            self.decoded_label.setText("--")
