"""
DSP primitives for the signal recovery lab.

Baseband BPSK over a tapped-delay-line channel, recovered with a
frequency-domain Zero-Forcing equalizer:

    x[n] --(*h)--> y[n] --(+noise)--> FFT --(·1/H)--> IFFT --> decide

Zero-Forcing amplifies noise wherever |H(f)| is small; that degradation
is part of what the lab demonstrates, not something to correct here.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple, Union

import numpy as np

from .units import require_count, require_non_negative

EQUALIZER_EPSILON = 1e-6


@dataclass(frozen=True)
class ChannelTap:
    delay: int          # In samples
    amplitude: float

    def __post_init__(self):
        require_count("tap delay", self.delay)


TapLike = Union[ChannelTap, Tuple[int, float]]


def as_taps(taps: Iterable[TapLike]) -> Tuple[ChannelTap, ...]:
    """Normalize (delay, amplitude) pairs into ``ChannelTap`` records."""
    result = tuple(t if isinstance(t, ChannelTap) else ChannelTap(*t) for t in taps)
    if not result:
        raise ValueError("channel needs at least one tap")
    return result


def validate_bits(bits: str) -> None:
    if not bits:
        raise ValueError("bit string is empty")
    if set(bits) - {"0", "1"}:
        raise ValueError(f"bit string may only contain '0' and '1', got {bits!r}")


def bits_to_waveform(bits: str, samples_per_symbol: int) -> np.ndarray:
    """
    Rectangular BPSK waveform: '1' -> +1, '0' -> -1, each held for
    ``samples_per_symbol`` samples, followed by a zero tail of two symbol
    periods so the channel's echo tail stays visible.
    """
    validate_bits(bits)
    require_count("samples_per_symbol", samples_per_symbol, minimum=1)

    symbols = np.array([1.0 if b == "1" else -1.0 for b in bits])
    waveform = np.repeat(symbols, samples_per_symbol)
    tail = np.zeros(2 * samples_per_symbol)
    return np.concatenate([waveform, tail])


def build_impulse_response(taps: Iterable[TapLike]) -> np.ndarray:
    """FIR of length max(delay) + 1; taps sharing a delay are summed."""
    taps = as_taps(taps)
    h = np.zeros(max(t.delay for t in taps) + 1)
    for tap in taps:
        h[tap.delay] += tap.amplitude
    return h


def convolve(x: np.ndarray, h: np.ndarray) -> np.ndarray:
    """Full linear convolution, output length len(x) + len(h) - 1."""
    x = np.asarray(x, dtype=float)
    h = np.asarray(h, dtype=float)
    if x.size == 0 or h.size == 0:
        raise ValueError("convolution operands must be non-empty")
    return np.convolve(x, h, mode="full")


def box_muller(n: int, rng: np.random.Generator) -> np.ndarray:
    """Standard normal samples from pairs of independent uniform draws."""
    u1 = 1.0 - rng.random(n)     # (0, 1] keeps log() finite
    u2 = rng.random(n)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def add_noise(signal: np.ndarray, noise_variance: float,
              rng: np.random.Generator) -> np.ndarray:
    """
    Add Gaussian noise scaled by ``noise_variance`` to every sample.

    A level of 0 returns an unchanged copy.
    """
    require_non_negative("noise_variance", noise_variance)
    signal = np.asarray(signal, dtype=float)
    if noise_variance == 0:
        return signal.copy()
    return signal + box_muller(signal.size, rng) * noise_variance


def pad_to(h: np.ndarray, length: int) -> np.ndarray:
    """Zero-pad a channel response to ``length`` samples."""
    if h.size > length:
        raise ValueError(f"channel response ({h.size} taps) longer than signal ({length} samples)")
    padded = np.zeros(length)
    padded[:h.size] = h
    return padded


def zero_forcing_equalizer(H: np.ndarray, epsilon: float = EQUALIZER_EPSILON) -> Tuple[np.ndarray, np.ndarray]:
    """
    E(f) = 1 / H(f) with an epsilon floor.

    Bins with |H| < epsilon get epsilon added to their real part before
    inversion.

    Returns
    -------
    E : np.ndarray
        Complex equalizer response
    floored : np.ndarray
        Boolean mask of the bins that were floored
    """
    H = np.asarray(H, dtype=complex)
    floored = np.abs(H) < epsilon
    denom = np.where(floored, H + epsilon, H)
    return 1.0 / denom, floored


def equalize(Y: np.ndarray, E: np.ndarray) -> np.ndarray:
    """Apply the equalizer in frequency and return the real time signal."""
    if len(Y) != len(E):
        raise ValueError(f"spectrum lengths differ: {len(Y)} vs {len(E)}")
    return np.real(np.fft.ifft(Y * E))


def decode_bits(recovered: np.ndarray, n_bits: int, samples_per_symbol: int) -> str:
    """Sample each symbol at its midpoint and threshold at zero."""
    require_count("n_bits", n_bits)
    require_count("samples_per_symbol", samples_per_symbol, minimum=1)

    decoded = []
    for i in range(n_bits):
        idx = i * samples_per_symbol + samples_per_symbol // 2
        if idx < len(recovered):
            decoded.append("1" if recovered[idx] > 0 else "0")
    return "".join(decoded)


def bit_errors(sent: str, received: str) -> int:
    """Hamming distance; missing trailing bits count as errors."""
    errors = sum(1 for a, b in zip(sent, received) if a != b)
    return errors + abs(len(sent) - len(received))
