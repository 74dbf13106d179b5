"""
Path Loss & Handoff State Machine

A mobile drives from base station 1 (x = 0) toward base station 2
(x = total distance) while a hard-handoff controller decides which cell
serves the call.

Signal model (log-distance):
    P_rx(d) = P_tx - 10·γ·log10(max(d, 1))      [dBm]

Handoff algorithms:
    THRESHOLD  - leave the serving cell when its own signal drops below
                 P_min + Δ. Ignores the other cell, so it ping-pongs.
    HYSTERESIS - leave only when the other cell is stronger by H dB.

A call is dropped when the serving signal falls below P_min; the drop
check runs before the handoff rule on every tick.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .units import MIN_DISTANCE_M, kmh_to_ms, require_non_negative, require_positive

logger = logging.getLogger(__name__)


TX_POWER_DBM = 30.0             # Base station transmit power
MIN_USABLE_POWER_DBM = -90.0    # Receiver sensitivity (usable threshold)


class Environment(Enum):
    """Propagation environment presets: (path-loss exponent, route length in m)."""
    URBAN = ("urban", 4.0, 1000.0)
    HIGHWAY = ("highway", 3.0, 10000.0)

    def __init__(self, label: str, path_loss_exponent: float, total_distance: float):
        self.label = label
        self.path_loss_exponent = path_loss_exponent
        self.total_distance = total_distance


class HandoffMode(Enum):
    THRESHOLD = "threshold"
    HYSTERESIS = "hysteresis"


class HandoffEventKind(Enum):
    HANDOFF = "handoff"
    DROP = "drop"


def received_power_dbm(distance_m: float, path_loss_exponent: float,
                       tx_power_dbm: float = TX_POWER_DBM,
                       noise_scale_db: float = 0.0,
                       rng: Optional[np.random.Generator] = None) -> float:
    """
    Received power at ``distance_m`` from a transmitter.

    Distances below 1 m are clamped to 1 m. When ``noise_scale_db`` > 0 a
    zero-mean uniform jitter in [-noise/2, +noise/2) is added.
    """
    require_positive("path_loss_exponent", path_loss_exponent)
    require_non_negative("noise_scale_db", noise_scale_db)

    dist = max(distance_m, MIN_DISTANCE_M)
    power = tx_power_dbm - 10 * path_loss_exponent * np.log10(dist)
    if noise_scale_db > 0:
        if rng is None:
            rng = np.random.default_rng()
        power += rng.uniform(-noise_scale_db / 2, noise_scale_db / 2)
    return float(power)


@dataclass(frozen=True)
class HandoffConfig:
    """Handoff lab parameters (defaults match the classroom preset)."""
    speed_kmh: float = 50.0
    mode: HandoffMode = HandoffMode.HYSTERESIS
    threshold_margin_db: float = 10.0       # Δ
    hysteresis_margin_db: float = 6.0       # H
    environment: Environment = Environment.HIGHWAY
    tx_power_dbm: float = TX_POWER_DBM
    min_usable_power_dbm: float = MIN_USABLE_POWER_DBM
    noise_scale_db: float = 1.5
    # Optional overrides of the environment preset
    path_loss_override: Optional[float] = None
    distance_override: Optional[float] = None

    def __post_init__(self):
        require_non_negative("speed_kmh", self.speed_kmh)
        require_non_negative("noise_scale_db", self.noise_scale_db)
        require_positive("path_loss_exponent", self.path_loss_exponent)
        require_positive("total_distance", self.total_distance)

    @property
    def path_loss_exponent(self) -> float:
        if self.path_loss_override is not None:
            return self.path_loss_override
        return self.environment.path_loss_exponent

    @property
    def total_distance(self) -> float:
        if self.distance_override is not None:
            return self.distance_override
        return self.environment.total_distance

    @property
    def margin_db(self) -> float:
        """The margin used by the active algorithm."""
        if self.mode is HandoffMode.THRESHOLD:
            return self.threshold_margin_db
        return self.hysteresis_margin_db


@dataclass(frozen=True)
class HandoffEvent:
    position: float
    kind: HandoffEventKind


@dataclass(frozen=True)
class HandoffState:
    """Read-only snapshot of the handoff controller."""
    active_cell: int
    position: float
    total_distance: float
    mode: HandoffMode
    margin_db: float
    ping_pong: bool
    moving: bool
    dropped: bool
    events: Tuple[HandoffEvent, ...]

    @property
    def handoff_count(self) -> int:
        return sum(1 for e in self.events if e.kind is HandoffEventKind.HANDOFF)


def theoretical_handoff_point(config: HandoffConfig) -> float:
    """
    Closed-form position of the (noise-free) handoff.

    Hysteresis: solve S2 = S1 + H on the line between the stations.
    Threshold:  solve P_tx - 10γ·log10(x) = P_min + Δ.
    """
    gamma = config.path_loss_exponent
    if config.mode is HandoffMode.HYSTERESIS:
        factor = 10 ** (config.hysteresis_margin_db / (10 * gamma))
        return config.total_distance * factor / (1 + factor)

    exponent = (config.tx_power_dbm - config.min_usable_power_dbm
                - config.threshold_margin_db) / (10 * gamma)
    return 10 ** exponent


def signal_profile(config: HandoffConfig, points: int = 101) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Noise-free received power from both stations along the route."""
    positions = np.linspace(0.0, config.total_distance, points)
    gamma = config.path_loss_exponent
    s1 = config.tx_power_dbm - 10 * gamma * np.log10(np.maximum(positions, MIN_DISTANCE_M))
    s2 = config.tx_power_dbm - 10 * gamma * np.log10(
        np.maximum(config.total_distance - positions, MIN_DISTANCE_M))
    return positions, s1, s2


class HandoffController:
    """
    Two-cell hard-handoff controller driven by a moving receiver.

    Parameters
    ----------
    config : HandoffConfig
        Mobility, algorithm and propagation parameters
    seed : int, optional
        Seed of the signal jitter generator
    """

    def __init__(self, config: Optional[HandoffConfig] = None, seed: Optional[int] = None):
        self.config = config or HandoffConfig()
        self.rng = np.random.default_rng(seed)
        self.reset()

    def reset(self):
        self.active_cell = 1
        self.position = 0.0
        self.moving = False
        self.dropped = False
        self.ping_pong = False
        self.handoff_in_last_tick = False
        self.events: List[HandoffEvent] = []

    def start(self):
        """Resume movement (no effect after a drop or at the route end)."""
        if self.dropped or self.position >= self.config.total_distance:
            return
        self.moving = True
        logger.info("Handoff run started at x=%.1f m (%s)", self.position, self.config.mode.value)

    def stop(self):
        self.moving = False

    def set_config(self, config: HandoffConfig):
        """Change algorithm, margins or speed mid-run."""
        self.config = config
        self.position = min(self.position, config.total_distance)

    def set_mode(self, mode: HandoffMode):
        self.set_config(replace(self.config, mode=mode))

    def current_signals(self) -> Tuple[float, float]:
        """Noise-free (signal1, signal2) at the current position."""
        return self._signals(self.position, noise_scale_db=0.0)

    def _signals(self, position: float, noise_scale_db: float) -> Tuple[float, float]:
        cfg = self.config
        s1 = received_power_dbm(position, cfg.path_loss_exponent, cfg.tx_power_dbm,
                                noise_scale_db, self.rng)
        s2 = received_power_dbm(cfg.total_distance - position, cfg.path_loss_exponent,
                                cfg.tx_power_dbm, noise_scale_db, self.rng)
        return s1, s2

    def _wants_handoff(self, s1: float, s2: float) -> bool:
        cfg = self.config
        if cfg.mode is HandoffMode.THRESHOLD:
            serving = s1 if self.active_cell == 1 else s2
            return serving < cfg.min_usable_power_dbm + cfg.threshold_margin_db

        if self.active_cell == 1:
            return s2 > s1 + cfg.hysteresis_margin_db
        return s1 > s2 + cfg.hysteresis_margin_db

    def advance(self, dt: float = 1.0) -> HandoffState:
        """
        Move the receiver by one tick and apply the drop and handoff rules.

        No-op while stopped. Reaching the far station stops movement.
        """
        require_positive("dt", dt)
        if not self.moving:
            return self.state

        cfg = self.config
        step = kmh_to_ms(cfg.speed_kmh) * dt
        candidate = self.position + step

        if candidate >= cfg.total_distance:
            self.position = cfg.total_distance
            self.moving = False
            logger.info("Reached base station 2, run finished")
            return self.state

        s1, s2 = self._signals(candidate, cfg.noise_scale_db)

        # Drop check precedes the handoff decision
        serving = s1 if self.active_cell == 1 else s2
        if serving < cfg.min_usable_power_dbm:
            self.moving = False
            self.dropped = True
            self.ping_pong = False
            self.events.append(HandoffEvent(candidate, HandoffEventKind.DROP))
            logger.debug("Call dropped at x=%.1f m (BS%d at %.1f dBm)",
                         candidate, self.active_cell, serving)
            return self.state

        self.position = candidate
        handoff_now = self._wants_handoff(s1, s2)
        if handoff_now:
            self.active_cell = 2 if self.active_cell == 1 else 1
            self.events.append(HandoffEvent(candidate, HandoffEventKind.HANDOFF))
            logger.debug("Handoff to BS%d at x=%.1f m", self.active_cell, candidate)

        if handoff_now and self.handoff_in_last_tick:
            if not self.ping_pong:
                logger.debug("Ping-pong detected at x=%.1f m", candidate)
            self.ping_pong = True
        elif not handoff_now:
            self.ping_pong = False
        self.handoff_in_last_tick = handoff_now

        return self.state

    @property
    def state(self) -> HandoffState:
        return HandoffState(
            active_cell=self.active_cell,
            position=self.position,
            total_distance=self.config.total_distance,
            mode=self.config.mode,
            margin_db=self.config.margin_db,
            ping_pong=self.ping_pong,
            moving=self.moving,
            dropped=self.dropped,
            events=tuple(self.events),
        )
