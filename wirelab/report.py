"""
Headless snapshot of every lab model.

Used by ``main.py --report`` to print the default scenario of each model
without starting Qt.
"""

import logging

from wirelab.engine import (
    DopplerAnimation, HandoffController, MultipathScene, OccupancySimulator,
    SignalRecoveryPipeline, evaluate,
)
from wirelab.engine import modulation, reuse

logger = logging.getLogger(__name__)

OCCUPANCY_TICKS = 2000
HANDOFF_TICK_LIMIT = 100000


def _trunking(seed):
    sim = OccupancySimulator(seed=seed)
    theory = evaluate(sim.params)
    for _ in range(OCCUPANCY_TICKS):
        sim.advance(0.1)
    state = sim.state
    return [
        "[Trunking]",
        f"  C={sim.params.channels}  A={sim.params.traffic_load:.2f} E",
        f"  Erlang B             {theory.blocking_probability:.4f}",
        f"  Mean busy channels   {theory.mean_busy_channels:.2f}",
        f"  Simulated {state.time:.0f} time units: {state.total_calls} calls, "
        f"{state.dropped_calls} blocked ({state.observed_blocking:.4f})",
    ]


def _handoff(seed):
    ctrl = HandoffController(seed=seed)
    ctrl.start()
    ticks = 0
    while ctrl.moving and ticks < HANDOFF_TICK_LIMIT:
        ctrl.advance(1.0)
        ticks += 1
    state = ctrl.state
    lines = [
        "[Handoff]",
        f"  {ctrl.config.environment.label}, {state.mode.value} ({state.margin_db:.1f} dB), "
        f"{ctrl.config.speed_kmh:.0f} km/h",
    ]
    for event in state.events:
        lines.append(f"  {event.kind.value:8s} at {event.position:8.1f} m")
    outcome = "dropped" if state.dropped else f"reached BS2 on BS{state.active_cell}"
    lines.append(f"  {state.handoff_count} handoff(s), {outcome}")
    return lines


def _doppler():
    anim = DopplerAnimation()
    lines = ["[Doppler]", f"  {anim.velocity_kmh:.0f} km/h at {anim.carrier_freq_ghz:.1f} GHz"]
    for x in (0.0, anim.geometry.tower_x, anim.geometry.road_length):
        anim.car_x = x
        frame = anim.frame()
        lines.append(f"  x={x:5.0f} m  θ={frame.angle_deg:6.1f}°  Δf={frame.delta_f_hz:+8.1f} Hz  ({frame.trend})")
    return lines


def _multipath():
    profile = MultipathScene().profile()
    lines = ["[Multipath]"]
    for path in profile.paths:
        lines.append(f"  {path.id:7s} delay={path.delay:.3f}  amplitude={path.amplitude:.5f}")
    lines.append(f"  max spread={profile.max_delay_spread:.3f}  rms spread={profile.rms_delay_spread:.3f}")
    return lines


def _recovery(seed):
    state = SignalRecoveryPipeline(seed=seed).run_to_end()
    return [
        "[Signal recovery]",
        f"  sent {state.bits}  decoded {state.decoded_bits}  "
        f"errors {state.bit_errors}  floored bins {state.floored_bins}",
    ]


def _reuse():
    lines = ["[Frequency reuse]"]
    for i, j in ((1, 0), (1, 1), (2, 0), (1, 2)):
        n = reuse.cluster_size(i, j)
        lines.append(f"  i={i} j={j}  N={n:2d}  Q={reuse.reuse_ratio(n):.2f}  "
                     f"S/I={reuse.cochannel_sir_db(n, 4.0):.1f} dB")
    return lines


def _modulation():
    lines = ["[Modulation]"]
    for position in (0, 50, 100):
        f = modulation.carrier_from_slider(position)
        h = modulation.antenna_height(f)
        lines.append(f"  f={f:12.0f} Hz  antenna={h:10.3f} m  ({modulation.classify_antenna(h).value})")
    return lines


def build_report(seed=None) -> str:
    """Text summary of the default scenario of every model."""
    logger.info("Building headless report (seed=%s)", seed)
    sections = [
        _trunking(seed), _handoff(seed), _doppler(), _multipath(),
        _recovery(seed), _reuse(), _modulation(),
    ]
    return "\n\n".join("\n".join(lines) for lines in sections)
