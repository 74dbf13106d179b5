"""
Multipath Geometric Channel Model

Builds the power-delay profile of a transmitter / receiver pair surrounded
by point reflectors (buildings):

    LOS    d_0 = |rx - tx|                      a_0 = K / d_0^γ
    NLOS k d_k = |b_k - tx| + |rx - b_k|        a_k = K·Γ / d_k^γ
    delay  τ = d / c_scaled

Paths are returned sorted by delay. The scene is measured in canvas units
with a scaled speed of light so delays are readable numbers.
"""

import itertools
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .units import MIN_DISTANCE_M, require_positive

logger = logging.getLogger(__name__)

LOS_ID = "LOS"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Reflector(Point):
    id: int = 0


@dataclass(frozen=True)
class MultipathConfig:
    propagation_speed: float = 300.0        # Scaled speed of light (units/tick)
    path_loss_exponent: float = 2.0
    reference_gain: float = 1000.0          # K
    reflection_coefficient: float = 0.5     # Γ

    def __post_init__(self):
        require_positive("propagation_speed", self.propagation_speed)
        require_positive("path_loss_exponent", self.path_loss_exponent)
        require_positive("reference_gain", self.reference_gain)
        require_positive("reflection_coefficient", self.reflection_coefficient)


@dataclass(frozen=True)
class MultipathPath:
    id: str
    delay: float
    amplitude: float
    distance: float

    @property
    def is_los(self) -> bool:
        return self.id == LOS_ID


@dataclass(frozen=True)
class PowerDelayProfile:
    """Paths sorted ascending by delay."""
    paths: Tuple[MultipathPath, ...]

    @property
    def los(self) -> MultipathPath:
        return next(p for p in self.paths if p.is_los)

    @property
    def delays(self) -> np.ndarray:
        return np.array([p.delay for p in self.paths])

    @property
    def amplitudes(self) -> np.ndarray:
        return np.array([p.amplitude for p in self.paths])

    @property
    def max_delay_spread(self) -> float:
        """max(τ) - min(τ): the ISI window of the channel."""
        delays = self.delays
        return float(delays.max() - delays.min())

    @property
    def mean_excess_delay(self) -> float:
        """Power-weighted mean delay relative to the first arrival."""
        delays = self.delays - self.delays.min()
        power = self.amplitudes ** 2
        return float(np.sum(power * delays) / np.sum(power))

    @property
    def rms_delay_spread(self) -> float:
        delays = self.delays - self.delays.min()
        power = self.amplitudes ** 2
        mean = np.sum(power * delays) / np.sum(power)
        second = np.sum(power * delays ** 2) / np.sum(power)
        return float(np.sqrt(max(second - mean ** 2, 0.0)))


def compute_multipath(tx: Point, rx: Point, reflectors: Iterable[Point],
                      config: Optional[MultipathConfig] = None) -> PowerDelayProfile:
    """
    Power-delay profile for one LOS path plus one NLOS path per reflector.

    Path lengths below 1 unit are clamped to 1 before the amplitude and
    delay are computed.
    """
    cfg = config or MultipathConfig()

    def make_path(path_id: str, distance: float, gain: float) -> MultipathPath:
        d = max(distance, MIN_DISTANCE_M)
        return MultipathPath(
            id=path_id,
            delay=d / cfg.propagation_speed,
            amplitude=gain / d ** cfg.path_loss_exponent,
            distance=d,
        )

    paths = [make_path(LOS_ID, tx.distance_to(rx), cfg.reference_gain)]
    for idx, b in enumerate(reflectors, start=1):
        d = tx.distance_to(b) + b.distance_to(rx)
        paths.append(make_path(f"NLOS {idx}", d, cfg.reference_gain * cfg.reflection_coefficient))

    paths.sort(key=lambda p: p.delay)
    return PowerDelayProfile(tuple(paths))


class MultipathScene:
    """
    Moving receiver on a road below a transmitter and editable buildings.

    The receiver advances ``RX_STEP`` units per tick and wraps back to the
    start of the road.
    """

    WIDTH = 800.0
    ROAD_Y = 350.0
    RX_START = 100.0
    RX_STEP = 2.0
    TX_POSITION = Point(100.0, 100.0)
    DEFAULT_REFLECTORS = ((300.0, 200.0), (500.0, 150.0), (650.0, 250.0))

    def __init__(self, config: Optional[MultipathConfig] = None,
                 reflectors: Optional[List[Tuple[float, float]]] = None):
        self.config = config or MultipathConfig()
        self.tx = self.TX_POSITION
        self.rx_x = self.RX_START
        self.moving = True
        self._ids = itertools.count(1)
        self.reflectors: Dict[int, Reflector] = {}
        for x, y in (reflectors if reflectors is not None else self.DEFAULT_REFLECTORS):
            self.add_reflector(x, y)

    @property
    def rx(self) -> Point:
        return Point(self.rx_x, self.ROAD_Y)

    def add_reflector(self, x: float, y: float) -> int:
        rid = next(self._ids)
        self.reflectors[rid] = Reflector(x, y, rid)
        return rid

    def move_reflector(self, reflector_id: int, x: float, y: float):
        if reflector_id not in self.reflectors:
            raise ValueError(f"unknown reflector {reflector_id}")
        self.reflectors[reflector_id] = Reflector(x, y, reflector_id)
        logger.debug("Reflector %d moved to (%.0f, %.0f)", reflector_id, x, y)

    def remove_reflector(self, reflector_id: int):
        if self.reflectors.pop(reflector_id, None) is None:
            raise ValueError(f"unknown reflector {reflector_id}")

    def advance(self) -> PowerDelayProfile:
        if self.moving:
            self.rx_x += self.RX_STEP
            if self.rx_x > self.WIDTH - 100:
                self.rx_x = self.RX_START
        return self.profile()

    def profile(self) -> PowerDelayProfile:
        return compute_multipath(self.tx, self.rx, self.reflectors.values(), self.config)
