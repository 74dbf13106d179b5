"""
Channel Occupancy Simulator

Fixed-timestep Monte-Carlo rendition of the M/M/C/C birth–death process,
run side by side with the closed-form Erlang-B prediction.

Per tick (timestep dt):
  1. Arrival phase   - with probability λ·dt a call arrives. It is carried
                       if a channel is free, otherwise blocked.
  2. Departure phase - independently, with probability n·μ·dt one of the
                       n busy calls ends.

Only one event per tick is logged; the arrival event wins the log slot
when both phases fire. The log keeps the most recent events only.
"""

import itertools
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .erlang import BlockingResult, TrafficParameters, erlang_b, evaluate
from .units import require_positive

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kinds of call events shown in the live log."""
    SUCCESS = "success"     # Arrival carried on a free channel
    DROP = "drop"           # Arrival blocked, all channels busy
    END = "end"             # Call completed, channel released


@dataclass(frozen=True)
class OccupancyEvent:
    id: int
    kind: EventKind
    timestamp: float        # Simulation time of the tick


@dataclass(frozen=True)
class OccupancyState:
    """Read-only snapshot of the simulator after a tick."""
    channels: int
    busy_channels: int
    total_calls: int
    dropped_calls: int
    events: Tuple[OccupancyEvent, ...]   # Newest first
    time: float

    @property
    def observed_blocking(self) -> float:
        """Fraction of arrivals that were blocked so far."""
        if self.total_calls == 0:
            return 0.0
        return self.dropped_calls / self.total_calls


class OccupancySimulator:
    """
    Birth–death simulator for a pool of trunked channels.

    Parameters
    ----------
    params : TrafficParameters
        Channel count and arrival / service rates
    seed : int, optional
        Random seed for reproducibility
    log_size : int
        Number of recent events retained (5 in the lab)
    """

    EVENT_LOG_SIZE = 5

    def __init__(self, params: Optional[TrafficParameters] = None,
                 seed: Optional[int] = None, log_size: int = EVENT_LOG_SIZE):
        self.params = params or TrafficParameters()
        self.rng = np.random.default_rng(seed)
        self.log_size = log_size
        self._event_ids = itertools.count(1)

        self.busy_channels = 0
        self.total_calls = 0
        self.dropped_calls = 0
        self.current_time = 0.0
        self.events = deque(maxlen=log_size)

    # ─────────────────────────────────────────────────────────────────────────
    # Parameters
    # ─────────────────────────────────────────────────────────────────────────

    def set_parameters(self, params: TrafficParameters) -> None:
        """Swap parameters mid-run; counters are kept."""
        self.params = params
        if self.busy_channels > params.channels:
            logger.debug("Channel pool shrank to %d, truncating %d busy calls",
                         params.channels, self.busy_channels)
            self.busy_channels = params.channels

    def max_stable_dt(self) -> float:
        """Largest dt keeping both per-tick probabilities <= 1."""
        p = self.params
        return min(1.0 / p.arrival_rate, 1.0 / (p.channels * p.service_rate))

    @property
    def theoretical(self) -> BlockingResult:
        return evaluate(self.params)

    @property
    def theoretical_blocking(self) -> float:
        return erlang_b(self.params.channels, self.params.traffic_load)

    # ─────────────────────────────────────────────────────────────────────────
    # Simulation
    # ─────────────────────────────────────────────────────────────────────────

    def advance(self, dt: float = 0.1) -> OccupancyState:
        """
        Advance the birth–death process by one tick.

        Raises
        ------
        ValueError
            If dt <= 0 or either tick probability exceeds 1 (dt too large
            for the current rates, see ``max_stable_dt``).
        """
        require_positive("dt", dt)
        p = self.params

        arrival_prob = p.arrival_rate * dt
        departure_prob = self.busy_channels * p.service_rate * dt
        if arrival_prob > 1.0 or departure_prob > 1.0:
            raise ValueError(
                f"dt={dt} too large: arrival probability {arrival_prob:.3f}, "
                f"departure probability {departure_prob:.3f} (must be <= 1, "
                f"max stable dt is {self.max_stable_dt():.4f})"
            )

        self.current_time += dt
        rand_arrival = self.rng.random()
        rand_departure = self.rng.random()
        event_kind = None

        # Step 1: Arrival phase
        if rand_arrival < arrival_prob:
            self.total_calls += 1
            if self.busy_channels < p.channels:
                self.busy_channels += 1
                event_kind = EventKind.SUCCESS
            else:
                self.dropped_calls += 1
                event_kind = EventKind.DROP
                logger.debug("Call blocked at t=%.2f (%d/%d busy)",
                             self.current_time, self.busy_channels, p.channels)

        # Step 2: Departure phase (arrival keeps the log slot)
        if rand_departure < departure_prob and self.busy_channels > 0:
            self.busy_channels -= 1
            if event_kind is None:
                event_kind = EventKind.END

        if event_kind is not None:
            self.events.appendleft(
                OccupancyEvent(next(self._event_ids), event_kind, self.current_time)
            )

        return self.state

    @property
    def state(self) -> OccupancyState:
        return OccupancyState(
            channels=self.params.channels,
            busy_channels=self.busy_channels,
            total_calls=self.total_calls,
            dropped_calls=self.dropped_calls,
            events=tuple(self.events),
            time=self.current_time,
        )

    def reset(self):
        """Reset simulation to initial state."""
        self.busy_channels = 0
        self.total_calls = 0
        self.dropped_calls = 0
        self.current_time = 0.0
        self.events = deque(maxlen=self.log_size)
        logger.info("Occupancy simulator reset")
