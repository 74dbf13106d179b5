"""
Trunking Panel - Erlang B and Live Channel Occupancy

Left column: parameter controls and summary metrics.
Right column:
- Blocking probability vs offered load (theory curve + operating point)
- M/M/C/C state distribution with the live busy count highlighted
- Channel grid and the most recent call events
"""

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import pyqtSlot
from PyQt6.QtWidgets import (
    QDoubleSpinBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QListWidget,
    QPushButton, QSpinBox, QVBoxLayout, QWidget,
)

from wirelab.engine import EventKind, blocking_curve, evaluate
from wirelab.ui.config import (
    ARRIVAL_RATE_RANGE, CHANNEL_RANGE, DROP_COLOR, HANDOFF_COLOR,
    SERVICE_RATE_RANGE, SIMULATION_COLOR, THEORY_COLOR,
)

EVENT_TEXT = {
    EventKind.SUCCESS: "call connected",
    EventKind.DROP: "call blocked",
    EventKind.END: "call ended",
}


def _spin(kind, bounds, value):
    lo, hi, step = bounds
    box = kind()
    box.setRange(lo, hi)
    box.setSingleStep(step)
    box.setValue(value)
    return box


class TrunkingPanel(QWidget):
    """Controls and charts for the trunking lab."""

    def __init__(self, controller):
        super().__init__()
        self.controller = controller
        params = controller.occupancy.params

        layout = QHBoxLayout(self)

        # --- Controls ---
        controls = QGroupBox("TRAFFIC PARAMETERS")
        form = QFormLayout(controls)
        self.channels_box = _spin(QSpinBox, CHANNEL_RANGE, params.channels)
        self.arrival_box = _spin(QDoubleSpinBox, ARRIVAL_RATE_RANGE, params.arrival_rate)
        self.service_box = _spin(QDoubleSpinBox, SERVICE_RATE_RANGE, params.service_rate)
        form.addRow("Channels (C)", self.channels_box)
        form.addRow("Arrival rate λ", self.arrival_box)
        form.addRow("Service rate μ", self.service_box)

        self.load_label = QLabel()
        self.theory_label = QLabel()
        self.observed_label = QLabel()
        self.calls_label = QLabel()
        form.addRow("Offered load A", self.load_label)
        form.addRow("Erlang B", self.theory_label)
        form.addRow("Observed blocking", self.observed_label)
        form.addRow("Calls (total / dropped)", self.calls_label)

        buttons = QHBoxLayout()
        self.play_button = QPushButton("Play")
        self.play_button.setCheckable(True)
        self.reset_button = QPushButton("Reset")
        buttons.addWidget(self.play_button)
        buttons.addWidget(self.reset_button)
        form.addRow(buttons)

        self.event_list = QListWidget()
        form.addRow(QLabel("Recent events"))
        form.addRow(self.event_list)
        layout.addWidget(controls, stretch=1)

        # --- Charts ---
        charts = QVBoxLayout()
        self.curve_plot = pg.PlotWidget(title="Blocking probability vs offered load")
        self.curve_plot.setLabel('bottom', 'Offered load (Erlangs)')
        self.curve_plot.setLabel('left', 'P(block)')
        self.curve_item = pg.PlotDataItem([], [], pen=pg.mkPen(THEORY_COLOR, width=2))
        self.point_item = pg.ScatterPlotItem(size=10, brush=SIMULATION_COLOR)
        self.curve_plot.addItem(self.curve_item)
        self.curve_plot.addItem(self.point_item)
        charts.addWidget(self.curve_plot)

        self.dist_plot = pg.PlotWidget(title="State distribution P(n busy)")
        self.dist_plot.setLabel('bottom', 'Busy channels')
        self.dist_bars = pg.BarGraphItem(x=[0], height=[0], width=0.8, brush=THEORY_COLOR)
        self.busy_line = pg.InfiniteLine(angle=90, pen=pg.mkPen(SIMULATION_COLOR, width=2))
        self.dist_plot.addItem(self.dist_bars)
        self.dist_plot.addItem(self.busy_line)
        charts.addWidget(self.dist_plot)

        self.grid_plot = pg.PlotWidget(title="Channel pool")
        self.grid_plot.hideAxis('left')
        self.grid_plot.setMouseEnabled(x=False, y=False)
        self.grid_bars = pg.BarGraphItem(x=[0], height=[0], width=0.9, brush=HANDOFF_COLOR)
        self.grid_plot.addItem(self.grid_bars)
        charts.addWidget(self.grid_plot)
        layout.addLayout(charts, stretch=3)

        # --- Wiring ---
        for box in (self.channels_box, self.arrival_box, self.service_box):
            box.valueChanged.connect(self._push_parameters)
        self.play_button.toggled.connect(self._toggle_play)
        self.reset_button.clicked.connect(controller.reset_occupancy)
        controller.traffic_changed.connect(self.update_theory)
        controller.occupancy_updated.connect(self.update_occupancy)

        self.update_theory(params)
        self.update_occupancy(controller.occupancy.state)

    def _push_parameters(self, *_):
        self.controller.set_traffic(
            self.channels_box.value(), self.arrival_box.value(), self.service_box.value()
        )

    def _toggle_play(self, checked: bool):
        self.play_button.setText("Pause" if checked else "Play")
        if checked:
            self.controller.start_occupancy()
        else:
            self.controller.stop_occupancy()

    @pyqtSlot(object)
    def update_theory(self, params):
        result = evaluate(params)
        loads, probs = blocking_curve(params.channels, params.traffic_load)
        self.curve_item.setData(loads, probs)
        self.point_item.setData([params.traffic_load], [result.blocking_probability])

        states = np.asarray(result.state_probabilities)
        self.dist_bars.setOpts(x=np.arange(states.size), height=states)

        self.load_label.setText(f"{params.traffic_load:.2f} E")
        self.theory_label.setText(f"{result.blocking_probability * 100:.2f} %")

    @pyqtSlot(object)
    def update_occupancy(self, state):
        self.busy_line.setValue(state.busy_channels)
        self.observed_label.setText(f"{state.observed_blocking * 100:.2f} %")
        self.calls_label.setText(f"{state.total_calls} / {state.dropped_calls}")

        x = np.arange(state.channels)
        brushes = [pg.mkBrush(DROP_COLOR if i < state.busy_channels else HANDOFF_COLOR) for i in x]
        self.grid_bars.setOpts(x=x, height=np.ones(state.channels), brushes=brushes)

        self.event_list.clear()
        for event in state.events:
            self.event_list.addItem(
                f"#{event.id}  t={event.timestamp:6.1f}  {EVENT_TEXT[event.kind]}"
            )
        if state.events and state.events[0].kind is EventKind.DROP:
            self.event_list.item(0).setForeground(pg.mkColor(DROP_COLOR))
