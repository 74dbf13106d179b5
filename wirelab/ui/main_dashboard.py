"""
WireLab Dashboard - Main Window

One tab per lab, a status HUD summarizing the live models, and a status
bar that shows engine errors reported by the controller.

Layout:
┌─────────────────────────────────────────────────────────┐
│  [Blocking]  [Serving cell]  [Doppler Δf]  [Recovery]    │
├─────────────────────────────────────────────────────────┤
│  Trunking | Handoff | Doppler | Multipath | Recovery |   │
│  Reuse | Modulation                                      │
│  ┌─────────────────────────────────────────────────┐    │
│  │  controls  │            charts                   │    │
│  └─────────────────────────────────────────────────┘    │
└─────────────────────────────────────────────────────────┘
"""

import logging
import signal
import sys

import qtawesome as qta
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import (
    QApplication, QFrame, QHBoxLayout, QLabel, QMainWindow, QStatusBar,
    QTabWidget, QVBoxLayout, QWidget,
)

from wirelab.ui.config import (
    ACCENT_COLOR, APP_BACKGROUND_COLOR, DROP_COLOR, HANDOFF_COLOR,
    PANEL_COLOR, SIMULATION_COLOR, THEORY_COLOR, WINDOW_HEIGHT, WINDOW_TITLE,
    WINDOW_WIDTH, X_OFFSET, Y_OFFSET,
)
from wirelab.ui.core.system import SimulationController
from wirelab.ui.widgets.charts import (
    DopplerPanel, HandoffPanel, ModulationPanel, MultipathPanel, RecoveryPanel,
    ReusePanel, TrunkingPanel,
)

logger = logging.getLogger(__name__)

STYLESHEET = f"""
    QMainWindow {{
        background-color: {APP_BACKGROUND_COLOR};
    }}
    QWidget {{
        color: #E0E0E0;
        font-family: 'Segoe UI', 'Roboto', sans-serif;
    }}
    QGroupBox {{
        background-color: {PANEL_COLOR};
        border: 1px solid #333333;
        border-radius: 6px;
        margin-top: 12px;
        padding-top: 10px;
        font-weight: bold;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 10px;
        padding: 0 5px;
        color: {ACCENT_COLOR};
    }}
    QFrame#statusCard {{
        background-color: {PANEL_COLOR};
        border-radius: 8px;
        padding: 8px;
    }}
    QLabel#cardTitle {{
        color: #888888;
        font-size: 11px;
        font-weight: bold;
    }}
    QLabel#cardValue {{
        font-size: 20px;
        font-weight: bold;
        font-family: 'Consolas', 'Monaco', monospace;
    }}
    QLabel#cardSubtitle {{
        color: #666666;
        font-size: 9px;
    }}
    QTabWidget::pane {{
        border: 1px solid #333;
        background-color: {PANEL_COLOR};
    }}
    QTabBar::tab {{
        background-color: {APP_BACKGROUND_COLOR};
        color: #888;
        padding: 8px 15px;
        border: 1px solid #333;
        margin-right: 2px;
    }}
    QTabBar::tab:selected {{
        background-color: {PANEL_COLOR};
        color: {ACCENT_COLOR};
        border-bottom: 2px solid {ACCENT_COLOR};
    }}
"""


class StatusCard(QFrame):
    """HUD card: a title, one big value and a one-line detail."""

    def __init__(self, title: str, initial_value: str, accent_color: str):
        super().__init__()
        self.setObjectName("statusCard")
        self.accent_color = accent_color

        layout = QVBoxLayout(self)
        layout.setSpacing(2)

        self.title_label = QLabel(title)
        self.title_label.setObjectName("cardTitle")
        self.value_label = QLabel(initial_value)
        self.value_label.setObjectName("cardValue")
        self.subtitle_label = QLabel("")
        self.subtitle_label.setObjectName("cardSubtitle")
        for label in (self.title_label, self.value_label, self.subtitle_label):
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            layout.addWidget(label)

        self.set_accent(accent_color)

    def set_accent(self, color: str):
        """Recolor border and value, e.g. red while a call is dropped."""
        self.accent_color = color
        self.setStyleSheet(
            f"QFrame#statusCard {{ border: 2px solid {color}; }}"
            f"QLabel#cardValue {{ color: {color}; }}"
        )

    def set_value(self, value: str, subtitle: str = ""):
        self.value_label.setText(value)
        self.subtitle_label.setText(subtitle)


class WireLabDashboard(QMainWindow):
    """
    Tabbed dashboard for the wireless communications labs.

    Parameters
    ----------
    seed : int, optional
        Seed forwarded to every stochastic engine
    autostart : bool
        Start the animation timer immediately
    """

    def __init__(self, seed=None, autostart: bool = True):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.setGeometry(X_OFFSET, Y_OFFSET, WINDOW_WIDTH, WINDOW_HEIGHT)
        self.setWindowIcon(QIcon(qta.icon('mdi.radio-tower').pixmap(32, 32)))
        self.setStyleSheet(STYLESHEET)

        self.status_bar = QStatusBar()
        self.status_bar.setStyleSheet("background-color: #1A1A1A; color: #888888;")
        self.setStatusBar(self.status_bar)

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(10, 10, 10, 10)
        main_layout.setSpacing(10)

        # === SIMULATION CONTROLLER ===
        self.controller = SimulationController(seed=seed, parent=self)

        # === STATUS HUD ===
        hud_layout = QHBoxLayout()
        hud_layout.setSpacing(15)
        self.card_blocking = StatusCard("BLOCKING (ERLANG B)", "--", THEORY_COLOR)
        self.card_cell = StatusCard("SERVING CELL", "BS1", HANDOFF_COLOR)
        self.card_doppler = StatusCard("DOPPLER SHIFT", "--", SIMULATION_COLOR)
        self.card_recovery = StatusCard("RECOVERY", "GENERATE", ACCENT_COLOR)
        for card in (self.card_blocking, self.card_cell, self.card_doppler, self.card_recovery):
            hud_layout.addWidget(card)
        main_layout.addLayout(hud_layout)

        # === LAB TABS ===
        self.tabs = QTabWidget()
        self.trunking_panel = TrunkingPanel(self.controller)
        self.handoff_panel = HandoffPanel(self.controller)
        self.doppler_panel = DopplerPanel(self.controller)
        self.multipath_panel = MultipathPanel(self.controller)
        self.recovery_panel = RecoveryPanel(self.controller)
        self.reuse_panel = ReusePanel()
        self.modulation_panel = ModulationPanel()

        for panel, icon, title in (
            (self.trunking_panel, 'mdi.phone-in-talk', "Trunking"),
            (self.handoff_panel, 'mdi.car-connected', "Handoff"),
            (self.doppler_panel, 'mdi.sine-wave', "Doppler"),
            (self.multipath_panel, 'mdi.city', "Multipath"),
            (self.recovery_panel, 'mdi.waveform', "Signal Recovery"),
            (self.reuse_panel, 'mdi.hexagon-multiple', "Frequency Reuse"),
            (self.modulation_panel, 'mdi.radio-tower', "Modulation"),
        ):
            self.tabs.addTab(panel, qta.icon(icon, color=ACCENT_COLOR), title)
        main_layout.addWidget(self.tabs, stretch=1)

        self._connect_signals()
        self._update_blocking(self.controller.occupancy.params)

        if autostart:
            self.controller.start_system()
        self.status_bar.showMessage("Ready")

    def _connect_signals(self):
        """Connect controller signals to the HUD and status bar."""
        c = self.controller
        c.traffic_changed.connect(self._update_blocking)
        c.handoff_updated.connect(self._update_cell)
        c.doppler_updated.connect(self._update_doppler)
        c.recovery_updated.connect(self._update_recovery)
        c.error_occurred.connect(self._show_error)

    def _update_blocking(self, params):
        blocking = self.controller.occupancy.theoretical_blocking
        self.card_blocking.set_value(f"{blocking * 100:.2f} %",
                                     f"C={params.channels}, A={params.traffic_load:.2f} E")

    def _update_cell(self, state):
        if state.dropped:
            self.card_cell.set_accent(DROP_COLOR)
            self.card_cell.set_value("DROPPED", f"at {state.events[-1].position:.0f} m")
        else:
            self.card_cell.set_accent(HANDOFF_COLOR)
            subtitle = "ping-pong" if state.ping_pong else f"{state.handoff_count} handoff(s)"
            self.card_cell.set_value(f"BS{state.active_cell}", subtitle)

    def _update_doppler(self, frame):
        self.card_doppler.set_value(f"{frame.delta_f_hz:+.0f} Hz", frame.trend)

    def _update_recovery(self, state):
        subtitle = ""
        if state.decoded_bits is not None:
            subtitle = f"decoded {state.decoded_bits}"
        # Bit errors turn the card red until the next reset
        failed = state.complete and not state.recovered_ok
        self.card_recovery.set_accent(DROP_COLOR if failed else ACCENT_COLOR)
        self.card_recovery.set_value(state.stage.name, subtitle)

    def _show_error(self, lab: str, message: str):
        self.status_bar.showMessage(f"[{lab}] {message}")
        self.status_bar.setStyleSheet(f"background-color: #1A1A1A; color: {DROP_COLOR};")

    def closeEvent(self, event):
        """Clean shutdown."""
        logger.info("Shutting down WireLab dashboard")
        self.controller.stop_system()
        self.modulation_panel.timer.stop()
        event.accept()


def launch(seed=None) -> int:
    """Create the application, show the dashboard and run the event loop."""
    app = QApplication.instance() or QApplication(sys.argv)
    app.setStyle('Fusion')

    window = WireLabDashboard(seed=seed)
    window.show()

    # Handle Ctrl+C gracefully
    def signal_handler(sig, frame):
        logger.info("Signal received, closing")
        window.close()

    signal.signal(signal.SIGINT, signal_handler)

    return app.exec()
