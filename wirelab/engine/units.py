"""
Shared numeric conventions for every engine model.

All models work in SI-ish teaching units: dB / dBm for power, Hz for
frequency, meters for distance and Erlangs for traffic.
"""

import numpy as np


# ═══════════════════════════════════════════════════════════════════════════════
#  PHYSICAL CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════════

SPEED_OF_LIGHT = 3e8        # Speed of light [m/s]
KMH_TO_MS = 5.0 / 18.0      # 1 km/h in m/s
MIN_DISTANCE_M = 1.0        # Path-loss reference distance (clamp floor)


def kmh_to_ms(speed_kmh: float) -> float:
    """Convert km/h to m/s."""
    return speed_kmh * KMH_TO_MS


def wavelength(frequency_hz: float) -> float:
    """Wavelength in meters for a carrier frequency in Hz."""
    require_positive("frequency_hz", frequency_hz)
    return SPEED_OF_LIGHT / frequency_hz


def db_to_linear(db_value):
    """Convert dB to linear power ratio."""
    return 10 ** (np.asarray(db_value) / 10)


def linear_to_db(linear_value):
    """Convert linear power ratio to dB (floored to avoid log(0))."""
    return 10 * np.log10(np.maximum(linear_value, 1e-30))


# ═══════════════════════════════════════════════════════════════════════════════
#  PRECONDITION HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be > 0, got {value}")


def require_non_negative(name: str, value: float) -> None:
    if not value >= 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def require_count(name: str, value, minimum: int = 0) -> None:
    """Integer count check; bools are rejected even though they are ints."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
