"""
Engine Module - Numeric Models of the Wireless Lab

Every model is UI-agnostic: parameters go in as plain values or
dataclasses, snapshots come out as frozen dataclasses, and timed models
expose ``advance(dt)`` for an external scheduler to call.

Features
--------
- Erlang-B blocking and M/M/C/C state distribution
- Channel occupancy birth–death simulator
- Log-distance path loss with threshold / hysteresis handoff
- Doppler shift kinematics
- Geometric multipath power-delay profile
- Zero-Forcing signal recovery pipeline
- Hexagonal frequency reuse and AM modulation helpers

Usage
-----
>>> from wirelab.engine import erlang_b, SignalRecoveryPipeline
>>> erlang_b(1, 1.0)
0.5
>>> SignalRecoveryPipeline("10110").run_to_end().decoded_bits
'10110'
"""

from .erlang import TrafficParameters, BlockingResult, erlang_b, state_probabilities, evaluate, blocking_curve
from .occupancy import OccupancySimulator, OccupancyState, OccupancyEvent, EventKind
from .handoff import (
    Environment, HandoffMode, HandoffConfig, HandoffController, HandoffState,
    HandoffEvent, HandoffEventKind, received_power_dbm, theoretical_handoff_point,
    signal_profile,
)
from .doppler import DopplerFrame, DopplerGeometry, DopplerAnimation, doppler_shift
from .multipath import (
    Point, Reflector, MultipathConfig, MultipathPath, PowerDelayProfile,
    MultipathScene, compute_multipath,
)
from .dsp import ChannelTap
from .recovery import SignalRecoveryPipeline, RecoveryPipelineState, PipelineStage

__all__ = [
    "TrafficParameters", "BlockingResult", "erlang_b", "state_probabilities",
    "evaluate", "blocking_curve",
    "OccupancySimulator", "OccupancyState", "OccupancyEvent", "EventKind",
    "Environment", "HandoffMode", "HandoffConfig", "HandoffController",
    "HandoffState", "HandoffEvent", "HandoffEventKind", "received_power_dbm",
    "theoretical_handoff_point", "signal_profile",
    "DopplerFrame", "DopplerGeometry", "DopplerAnimation", "doppler_shift",
    "Point", "Reflector", "MultipathConfig", "MultipathPath",
    "PowerDelayProfile", "MultipathScene", "compute_multipath",
    "ChannelTap",
    "SignalRecoveryPipeline", "RecoveryPipelineState", "PipelineStage",
]
