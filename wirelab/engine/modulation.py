"""
Amplitude modulation and antenna sizing.

Shows why baseband audio is put on a carrier: a quarter-wave antenna for
a 5 kHz tone would be kilometers tall, while at GHz it fits in a phone.

    s(t) = [1 + k_a·m(t)]·cos(ω_c·t),   m(t) = cos(t)
    h_antenna = λ / 4
"""

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .units import require_positive, wavelength

MIN_CARRIER_HZ = 30e3
MAX_CARRIER_HZ = 3e9


class AntennaClass(Enum):
    PHONE = "phone"              # h < 1 m
    CELL_TOWER = "cell tower"    # 1 m <= h < 100 m
    SKYSCRAPER = "skyscraper"    # 100 m <= h < 10 km
    GIANT = "giant"              # h >= 10 km


def carrier_from_slider(position: float) -> float:
    """Map a 0..100 slider onto 30 kHz .. 3 GHz on a log scale."""
    if not 0 <= position <= 100:
        raise ValueError(f"slider position must be in [0, 100], got {position}")
    lo, hi = math.log10(MIN_CARRIER_HZ), math.log10(MAX_CARRIER_HZ)
    return 10 ** (lo + position / 100 * (hi - lo))


def antenna_height(carrier_hz: float) -> float:
    """Quarter-wave antenna length in meters."""
    return wavelength(carrier_hz) / 4


def classify_antenna(height_m: float) -> AntennaClass:
    if height_m >= 10000:
        return AntennaClass.GIANT
    if height_m >= 100:
        return AntennaClass.SKYSCRAPER
    if height_m >= 1:
        return AntennaClass.CELL_TOWER
    return AntennaClass.PHONE


@dataclass(frozen=True)
class AMWaveform:
    t: np.ndarray
    upper_envelope: np.ndarray
    lower_envelope: np.ndarray
    signal: np.ndarray


def _require_index(modulation_index: float):
    if not 0 < modulation_index <= 1:
        raise ValueError(f"modulation index must be in (0, 1], got {modulation_index}")


def carrier_speed(position: float) -> float:
    """Visual carrier-to-baseband speed ratio for a slider position."""
    return 2 + position / 100 * 20


def am_waveform(modulation_index: float, time: float = 0.0, points: int = 100,
                carrier_speed_ratio: float = 2.0) -> AMWaveform:
    """
    Two baseband periods of a standard AM signal, shifted by ``time``.

    The carrier runs ``carrier_speed_ratio`` times faster than the tone.
    """
    _require_index(modulation_index)
    require_positive("carrier_speed_ratio", carrier_speed_ratio)

    t = np.arange(points) / points * 4 * np.pi + time
    envelope = 1 + modulation_index * np.cos(t)
    return AMWaveform(
        t=t,
        upper_envelope=envelope,
        lower_envelope=-envelope,
        signal=envelope * np.cos(t * carrier_speed_ratio),
    )


def am_spectrum(bandwidth: float, carrier_position: float):
    """
    Block spectrum on a -100..100 visual frequency axis.

    Baseband occupies |f| <= W/2 (height 0.8); the modulated signal
    occupies |f ∓ f_c| <= W (height 0.6) and overwrites overlaps.
    """
    require_positive("bandwidth", bandwidth)
    freqs = np.arange(-100, 101)
    spectrum = np.zeros(freqs.size)
    spectrum[np.abs(freqs) <= bandwidth / 2] = 0.8
    sidebands = (np.abs(freqs - carrier_position) <= bandwidth) | \
                (np.abs(freqs + carrier_position) <= bandwidth)
    spectrum[sidebands] = 0.6
    return freqs, spectrum
