"""
Erlang Traffic Model

Closed-form loss-system (M/M/C/C) analysis used by the trunking lab.

┌─────────────────────────────────────────────────────────────────────────┐
│  Offered traffic      A = λ / μ                       [Erlangs]         │
│  Blocking (Erlang B)  B(C, A) = (A^C / C!) / Σ_{i=0..C} A^i / i!        │
│  State distribution   P_n = (A^n / n!) · P_0                            │
└─────────────────────────────────────────────────────────────────────────┘

Factorials overflow quickly, so both quantities are computed with the
standard recurrences:

    B(0) = 1,   B(c) = A·B(c-1) / (c + A·B(c-1))
    p_0 = 1,    p_i = p_{i-1} · A / i          (then normalized)
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .units import require_count, require_non_negative, require_positive


def erlang_b(channels: int, load: float) -> float:
    """
    Blocking probability of a loss system with ``channels`` servers.

    Parameters
    ----------
    channels : int
        Number of trunked channels C (>= 0)
    load : float
        Offered traffic A in Erlangs (>= 0)

    Returns
    -------
    float
        Probability in [0, 1] that an arriving call finds every channel busy.
        Zero offered load never blocks.
    """
    require_count("channels", channels)
    require_non_negative("load", load)

    if load == 0:
        return 0.0

    b = 1.0
    for c in range(1, channels + 1):
        b = (load * b) / (c + load * b)
    return b


def state_probabilities(channels: int, load: float) -> np.ndarray:
    """
    Steady-state probability of having n busy channels, n = 0..channels.

    Returns
    -------
    np.ndarray
        Array of length ``channels + 1`` summing to 1.
    """
    require_count("channels", channels)
    require_non_negative("load", load)

    terms = np.empty(channels + 1, dtype=float)
    current = 1.0
    terms[0] = current
    for i in range(1, channels + 1):
        current = current * load / i
        terms[i] = current

    return terms / terms.sum()


@dataclass(frozen=True)
class TrafficParameters:
    """Inputs of the trunking lab (λ, μ in calls per unit time)."""
    channels: int = 10
    arrival_rate: float = 5.0
    service_rate: float = 1.0

    def __post_init__(self):
        require_count("channels", self.channels, minimum=1)
        require_positive("arrival_rate", self.arrival_rate)
        require_positive("service_rate", self.service_rate)

    @property
    def traffic_load(self) -> float:
        """Offered traffic in Erlangs."""
        return self.arrival_rate / self.service_rate


@dataclass(frozen=True)
class BlockingResult:
    blocking_probability: float
    state_probabilities: Tuple[float, ...]

    @property
    def mean_busy_channels(self) -> float:
        """Expected number of busy channels (carried traffic)."""
        return float(sum(n * p for n, p in enumerate(self.state_probabilities)))


def evaluate(params: TrafficParameters) -> BlockingResult:
    """Theoretical blocking and state distribution for a parameter set."""
    load = params.traffic_load
    return BlockingResult(
        blocking_probability=erlang_b(params.channels, load),
        state_probabilities=tuple(float(p) for p in state_probabilities(params.channels, load)),
    )


def blocking_curve(channels: int, load: float, step: float = 0.5) -> Tuple[np.ndarray, np.ndarray]:
    """
    Erlang-B curve for the blocking-vs-load chart.

    The load axis starts at 0.1 Erlang and extends to ``max(2 * load, 20)``
    so the current operating point is always inside the plotted range.
    """
    require_positive("step", step)
    upper = max(load * 2, 20.0)
    loads = np.arange(0.1, upper + 1e-9, step)
    probs = np.array([erlang_b(channels, a) for a in loads])
    return loads, probs
