"""
Doppler Kinematics Model

A car drives along a straight road (moving in +x) past a fixed tower.
The shift seen by the car is

    Δf = (v / λ) · cos θ

where θ is the angle between the velocity (1, 0) and the direction from
the car to the tower, so cos θ = dx / d. Approaching gives Δf > 0,
receding gives Δf < 0 and the closest point of approach gives Δf = 0.

Physics is stateless per frame; ``DopplerAnimation`` only owns the car
position and the oscilloscope phase.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .units import kmh_to_ms, require_non_negative, require_positive, wavelength

# Trend band (Hz) inside which the shift is shown as "perpendicular"
TREND_BAND_HZ = 50.0


@dataclass(frozen=True)
class DopplerGeometry:
    """Scene layout in meters (1 canvas unit = 1 m)."""
    tower_x: float = 400.0
    tower_y: float = 60.0
    road_y: float = 320.0
    road_length: float = 800.0
    wrap_margin: float = 50.0


DEFAULT_GEOMETRY = DopplerGeometry()


@dataclass(frozen=True)
class DopplerFrame:
    velocity_ms: float
    wavelength_m: float
    angle_deg: float
    distance_m: float
    delta_f_hz: float
    cos_theta: float
    carrier_freq_hz: float

    @property
    def received_freq_hz(self) -> float:
        return self.carrier_freq_hz + self.delta_f_hz

    @property
    def trend(self) -> str:
        """'approaching', 'receding' or 'perpendicular' (|Δf| <= 50 Hz)."""
        if self.delta_f_hz > TREND_BAND_HZ:
            return "approaching"
        if self.delta_f_hz < -TREND_BAND_HZ:
            return "receding"
        return "perpendicular"


def doppler_shift(car_x: float, velocity_kmh: float, carrier_freq_ghz: float,
                  geometry: DopplerGeometry = DEFAULT_GEOMETRY) -> DopplerFrame:
    """
    Doppler frame for a car at ``car_x`` on the road.

    Raises
    ------
    ValueError
        For a negative speed, a non-positive carrier, or a car located
        exactly at the tower (distance 0, angle undefined).
    """
    require_non_negative("velocity_kmh", velocity_kmh)
    require_positive("carrier_freq_ghz", carrier_freq_ghz)

    v_ms = kmh_to_ms(velocity_kmh)
    f_hz = carrier_freq_ghz * 1e9
    lam = wavelength(f_hz)

    dx = geometry.tower_x - car_x
    dy = geometry.tower_y - geometry.road_y
    distance = math.hypot(dx, dy)
    if distance == 0:
        raise ValueError("car is at the tower position, Doppler angle is undefined")

    cos_theta = dx / distance
    theta_deg = math.degrees(math.acos(max(-1.0, min(1.0, cos_theta))))

    return DopplerFrame(
        velocity_ms=v_ms,
        wavelength_m=lam,
        angle_deg=theta_deg,
        distance_m=distance,
        delta_f_hz=(v_ms / lam) * cos_theta,
        cos_theta=cos_theta,
        carrier_freq_hz=f_hz,
    )


class DopplerAnimation:
    """
    Car position and oscilloscope phase for the Doppler lab.

    The car moves ``speed_scale`` times faster than real time so motion is
    visible on an 800 m road, and wraps around past the road end.
    """

    SPEED_SCALE = 5.0
    BASE_VISUAL_FREQ = 0.05
    VISUAL_SHIFT_SCALE = 0.0002

    def __init__(self, velocity_kmh: float = 100.0, carrier_freq_ghz: float = 2.5,
                 geometry: Optional[DopplerGeometry] = None):
        self.geometry = geometry or DEFAULT_GEOMETRY
        self.velocity_kmh = velocity_kmh
        self.carrier_freq_ghz = carrier_freq_ghz
        self.car_x = 0.0
        self.wave_phase = 0.0
        self.playing = True

    def play(self):
        self.playing = True

    def pause(self):
        self.playing = False

    def set_velocity(self, velocity_kmh: float):
        require_non_negative("velocity_kmh", velocity_kmh)
        self.velocity_kmh = velocity_kmh

    def set_carrier(self, carrier_freq_ghz: float):
        require_positive("carrier_freq_ghz", carrier_freq_ghz)
        self.carrier_freq_ghz = carrier_freq_ghz

    def frame(self) -> DopplerFrame:
        return doppler_shift(self.car_x, self.velocity_kmh, self.carrier_freq_ghz, self.geometry)

    def visual_frequency(self, delta_f_hz: float) -> float:
        """Oscilloscope cycles per pixel for a given shift."""
        return self.BASE_VISUAL_FREQ + delta_f_hz * self.VISUAL_SHIFT_SCALE

    def advance(self, dt: float = 1 / 60) -> DopplerFrame:
        """Move the car one animation frame and return the new physics frame."""
        require_positive("dt", dt)
        g = self.geometry
        if self.playing:
            self.car_x += kmh_to_ms(self.velocity_kmh) * dt * self.SPEED_SCALE
            if self.car_x > g.road_length + g.wrap_margin:
                self.car_x = -g.wrap_margin

        frame = self.frame()
        if self.playing:
            self.wave_phase += self.visual_frequency(frame.delta_f_hz) * 5
        return frame

    def oscilloscope_trace(self, width: int = 400) -> np.ndarray:
        """Normalized sine trace (-1..1) of the received tone."""
        freq = self.visual_frequency(self.frame().delta_f_hz)
        x = np.arange(width)
        return np.sin(x * freq + self.wave_phase)
