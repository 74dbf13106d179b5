import logging
import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
pytest.importorskip("pyqtgraph")
pytest.importorskip("qtawesome")

# Make project root importable when running tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Ensure a QApplication exists for widget tests
app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)

from wirelab.engine import HandoffConfig, PipelineStage
from wirelab.engine.handoff import HandoffEvent, HandoffEventKind
from wirelab.ui.config import ACCENT_COLOR, DROP_COLOR, HANDOFF_COLOR
from wirelab.ui.core.system import SimulationController
from wirelab.ui.main_dashboard import WireLabDashboard


def capture(signal):
    received = []
    signal.connect(lambda *args: received.append(args))
    return received


def test_occupancy_tick_emits_snapshot():
    controller = SimulationController(seed=0)
    states = capture(controller.occupancy_updated)
    for _ in range(5):
        controller.tick_occupancy()
    assert len(states) == 5
    assert states[-1][0].time == pytest.approx(0.5)


def test_fast_rates_use_stable_step():
    controller = SimulationController(seed=0)
    errors = capture(controller.error_occurred)
    controller.set_traffic(50, 20.0, 5.0)
    controller.tick_occupancy()
    assert errors == []
    assert controller.occupancy.state.time == pytest.approx(controller.occupancy.max_stable_dt())


def test_shortened_occupancy_step_is_logged(caplog):
    controller = SimulationController(seed=0)
    with caplog.at_level(logging.DEBUG, logger="wirelab.ui.core.system"):
        controller.tick_occupancy()
        assert "shortened" not in caplog.text

        controller.set_traffic(50, 20.0, 5.0)
        controller.tick_occupancy()
    assert "Occupancy step shortened to 0.0040 s" in caplog.text

def test_invalid_traffic_is_reported_not_applied():
    controller = SimulationController(seed=0)
    errors = capture(controller.error_occurred)
    controller.set_traffic(0, 5.0, 1.0)
    assert errors and errors[0][0] == "trunking"
    assert controller.occupancy.params.channels == 10


def test_handoff_timer_lifecycle():
    controller = SimulationController(seed=0)
    controller.set_handoff_config(HandoffConfig(noise_scale_db=0.0))
    controller.start_handoff()
    assert controller.handoff_timer.isActive()

    states = capture(controller.handoff_updated)
    controller.tick_handoff()
    assert states[-1][0].position > 0

    controller.handoff.position = 9999.0
    controller.tick_handoff()
    assert not controller.handoff.moving
    assert not controller.handoff_timer.isActive()

    controller.reset_handoff()
    assert controller.handoff.state.position == 0.0


def test_recovery_steps_and_reports_illegal_advance():
    controller = SimulationController(seed=0)
    states = capture(controller.recovery_updated)
    errors = capture(controller.error_occurred)

    for _ in range(5):
        controller.advance_recovery()
    assert states[-1][0].stage is PipelineStage.COMPLETE
    assert states[-1][0].decoded_bits == "10110"

    controller.advance_recovery()
    assert errors and errors[-1][0] == "recovery"

    controller.configure_recovery("0110", 6, 0.0)
    assert controller.recovery.state.stage is PipelineStage.GENERATE
    controller.finish_recovery()
    assert controller.recovery.state.decoded_bits == "0110"


def test_frame_tick_moves_doppler_and_multipath():
    controller = SimulationController()
    frames = capture(controller.doppler_updated)
    profiles = capture(controller.multipath_updated)
    controller.tick_frame()
    assert len(frames) == 1 and len(profiles) == 1
    assert controller.doppler.car_x > 0
    assert controller.multipath.rx_x == 102.0


def test_dashboard_builds_all_tabs():
    window = WireLabDashboard(seed=0, autostart=False)
    try:
        titles = [window.tabs.tabText(i) for i in range(window.tabs.count())]
        assert titles == ["Trunking", "Handoff", "Doppler", "Multipath",
                          "Signal Recovery", "Frequency Reuse", "Modulation"]
        assert window.card_blocking.value_label.text() == "1.84 %"

        window.controller.tick_frame()
        assert window.card_doppler.value_label.text().endswith("Hz")

        window.controller.advance_recovery()
        assert window.card_recovery.value_label.text() == "CHANNEL"

        window.trunking_panel.channels_box.setValue(20)
        assert window.controller.occupancy.params.channels == 20
    finally:
        window.close()


def test_status_cards_flag_dropped_call():
    window = WireLabDashboard(seed=0, autostart=False)
    try:
        controller = window.controller
        assert window.card_cell.accent_color == HANDOFF_COLOR

        controller.handoff.dropped = True
        controller.handoff.events.append(HandoffEvent(512.0, HandoffEventKind.DROP))
        controller.handoff_updated.emit(controller.handoff.state)
        assert window.card_cell.value_label.text() == "DROPPED"
        assert window.card_cell.accent_color == DROP_COLOR

        controller.reset_handoff()
        assert window.card_cell.accent_color == HANDOFF_COLOR

        controller.finish_recovery()
        assert window.card_recovery.accent_color == ACCENT_COLOR
    finally:
        window.close()
