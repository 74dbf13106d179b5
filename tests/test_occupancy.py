import os
import sys

import pytest

# Make project root importable when running tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from wirelab.engine.erlang import TrafficParameters, erlang_b
from wirelab.engine.occupancy import EventKind, OccupancySimulator


def test_initial_state_is_idle():
    state = OccupancySimulator(seed=0).state
    assert state.busy_channels == 0
    assert state.total_calls == 0
    assert state.dropped_calls == 0
    assert state.events == ()
    assert state.observed_blocking == 0.0


def test_advance_rejects_non_positive_dt():
    sim = OccupancySimulator(seed=0)
    with pytest.raises(ValueError):
        sim.advance(0.0)
    with pytest.raises(ValueError):
        sim.advance(-0.1)


def test_advance_rejects_probability_above_one():
    sim = OccupancySimulator(TrafficParameters(arrival_rate=5.0), seed=0)
    with pytest.raises(ValueError, match="too large"):
        sim.advance(0.5)
    # State untouched by the failed tick
    assert sim.state.time == 0.0


def test_max_stable_dt():
    sim = OccupancySimulator(TrafficParameters(channels=10, arrival_rate=5.0, service_rate=1.0))
    assert sim.max_stable_dt() == pytest.approx(0.1)


def test_counters_stay_consistent():
    params = TrafficParameters(channels=4, arrival_rate=6.0, service_rate=1.0)
    sim = OccupancySimulator(params, seed=42)
    for _ in range(2000):
        state = sim.advance(0.1)
        assert 0 <= state.busy_channels <= params.channels
        assert state.dropped_calls <= state.total_calls
        assert len(state.events) <= 5
    assert state.time == pytest.approx(200.0)
    assert state.total_calls > 0
    assert state.dropped_calls > 0


def test_event_log_newest_first():
    sim = OccupancySimulator(seed=3)
    for _ in range(300):
        sim.advance(0.1)
    ids = [e.id for e in sim.state.events]
    assert len(ids) == 5
    assert ids == sorted(ids, reverse=True)
    times = [e.timestamp for e in sim.state.events]
    assert times == sorted(times, reverse=True)


def test_single_channel_saturation_drops_calls():
    # arrival probability exactly 1: a call arrives every tick
    sim = OccupancySimulator(TrafficParameters(channels=1, arrival_rate=10.0, service_rate=0.1), seed=1)
    first = sim.advance(0.1)
    assert first.busy_channels == 1
    assert first.events[0].kind is EventKind.SUCCESS

    for _ in range(9):
        state = sim.advance(0.1)
    assert state.total_calls == 10
    assert state.dropped_calls >= 5
    assert any(e.kind is EventKind.DROP for e in state.events)


def test_same_seed_same_trajectory():
    a = OccupancySimulator(seed=11)
    b = OccupancySimulator(seed=11)
    for _ in range(500):
        sa, sb = a.advance(0.1), b.advance(0.1)
    assert sa == sb


def test_long_run_blocking_tracks_erlang_b():
    params = TrafficParameters(channels=2, arrival_rate=2.0, service_rate=1.0)
    sim = OccupancySimulator(params, seed=2024)
    for _ in range(200000):
        sim.advance(0.05)
    assert sim.theoretical_blocking == pytest.approx(erlang_b(2, 2.0))
    assert sim.state.observed_blocking == pytest.approx(0.4, abs=0.06)


def test_shrinking_pool_truncates_busy_channels():
    sim = OccupancySimulator(TrafficParameters(channels=10), seed=0)
    sim.busy_channels = 7
    sim.total_calls = 12
    sim.set_parameters(TrafficParameters(channels=3))
    state = sim.state
    assert state.busy_channels == 3
    assert state.channels == 3
    assert state.total_calls == 12


def test_reset_clears_everything():
    sim = OccupancySimulator(seed=5)
    for _ in range(100):
        sim.advance(0.1)
    sim.reset()
    state = sim.state
    assert state.busy_channels == 0
    assert state.total_calls == 0
    assert state.time == 0.0
    assert state.events == ()
