"""
Signal Recovery Pipeline

Five strictly forward stages, each triggered by the user:

    GENERATE   bits -> rectangular BPSK waveform x
    CHANNEL    taps -> impulse response h
    CONVOLVE   y = x * h, plus Gaussian noise
    TRANSFORM  Y = FFT(y), H = FFT(h padded), E = 1/H
    EQUALIZE   x_hat = Re(IFFT(Y·E)), midpoint decisions

Artifacts are read-only once produced. Going back requires ``reset()``,
which clears every stage. Stage inputs may only change before the stage
that consumes them has run.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Tuple

import numpy as np

from . import dsp
from .units import require_count, require_non_negative

logger = logging.getLogger(__name__)


class PipelineStage(IntEnum):
    """Next stage to run. COMPLETE once bits are decoded."""
    GENERATE = 1
    CHANNEL = 2
    CONVOLVE = 3
    TRANSFORM = 4
    EQUALIZE = 5
    COMPLETE = 6


DEFAULT_BITS = "10110"
DEFAULT_SAMPLES_PER_SYMBOL = 10
DEFAULT_TAPS = (
    dsp.ChannelTap(0, 1.0),    # LOS
    dsp.ChannelTap(5, 0.5),    # Echo 1
    dsp.ChannelTap(12, -0.3),  # Echo 2
)


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class RecoveryPipelineState:
    """Snapshot of every artifact produced so far (None = not yet computed)."""
    stage: PipelineStage
    bits: str
    samples_per_symbol: int
    taps: Tuple[dsp.ChannelTap, ...]
    noise_variance: float
    waveform: Optional[np.ndarray] = None
    impulse_response: Optional[np.ndarray] = None
    convolved: Optional[np.ndarray] = None
    noisy: Optional[np.ndarray] = None
    spectrum_y: Optional[np.ndarray] = None
    spectrum_h: Optional[np.ndarray] = None
    spectrum_e: Optional[np.ndarray] = None
    recovered: Optional[np.ndarray] = None
    decoded_bits: Optional[str] = None
    floored_bins: int = 0

    @property
    def complete(self) -> bool:
        return self.stage is PipelineStage.COMPLETE

    @property
    def bit_errors(self) -> Optional[int]:
        if self.decoded_bits is None:
            return None
        return dsp.bit_errors(self.bits, self.decoded_bits)

    @property
    def recovered_ok(self) -> bool:
        return self.decoded_bits == self.bits


class SignalRecoveryPipeline:
    """
    Stage-by-stage Zero-Forcing recovery of a BPSK bit string.

    Parameters
    ----------
    bits : str
        Bit string of '0'/'1' characters
    samples_per_symbol : int
        Rectangular pulse length in samples
    taps : iterable of ChannelTap or (delay, amplitude)
        Tapped-delay-line channel
    noise_variance : float
        Scale of the additive Gaussian noise (0 = noiseless)
    seed : int, optional
        Seed of the noise generator
    """

    def __init__(self, bits: str = DEFAULT_BITS,
                 samples_per_symbol: int = DEFAULT_SAMPLES_PER_SYMBOL,
                 taps: Iterable[dsp.TapLike] = DEFAULT_TAPS,
                 noise_variance: float = 0.0,
                 seed: Optional[int] = None):
        dsp.validate_bits(bits)
        require_count("samples_per_symbol", samples_per_symbol, minimum=1)
        require_non_negative("noise_variance", noise_variance)

        self.bits = bits
        self.samples_per_symbol = samples_per_symbol
        self.taps = dsp.as_taps(taps)
        self.noise_variance = noise_variance
        self.rng = np.random.default_rng(seed)
        self.reset()

    def reset(self):
        """Back to GENERATE; every artifact is cleared."""
        self.stage = PipelineStage.GENERATE
        self._waveform = None
        self._impulse_response = None
        self._convolved = None
        self._noisy = None
        self._Y = None
        self._H = None
        self._E = None
        self._recovered = None
        self._decoded = None
        self._floored = 0
        logger.debug("Recovery pipeline reset")

    # ─────────────────────────────────────────────────────────────────────────
    # Stage inputs
    # ─────────────────────────────────────────────────────────────────────────

    def _require_before(self, stage: PipelineStage, what: str):
        if self.stage > stage:
            raise RuntimeError(
                f"cannot change {what} after the {stage.name} stage has run; reset first"
            )

    def set_bits(self, bits: str, samples_per_symbol: Optional[int] = None):
        self._require_before(PipelineStage.GENERATE, "bits")
        dsp.validate_bits(bits)
        if samples_per_symbol is not None:
            require_count("samples_per_symbol", samples_per_symbol, minimum=1)
            self.samples_per_symbol = samples_per_symbol
        self.bits = bits

    def set_taps(self, taps: Iterable[dsp.TapLike]):
        self._require_before(PipelineStage.CHANNEL, "channel taps")
        self.taps = dsp.as_taps(taps)

    def set_noise_variance(self, noise_variance: float):
        self._require_before(PipelineStage.CONVOLVE, "noise variance")
        require_non_negative("noise_variance", noise_variance)
        self.noise_variance = noise_variance

    # ─────────────────────────────────────────────────────────────────────────
    # Stages
    # ─────────────────────────────────────────────────────────────────────────

    def _generate(self):
        self._waveform = _frozen(dsp.bits_to_waveform(self.bits, self.samples_per_symbol))

    def _channel(self):
        self._impulse_response = _frozen(dsp.build_impulse_response(self.taps))

    def _convolve(self):
        y = dsp.convolve(self._waveform, self._impulse_response)
        self._convolved = _frozen(y)
        self._noisy = _frozen(dsp.add_noise(y, self.noise_variance, self.rng))

    def _transform(self):
        n = len(self._noisy)
        h_padded = dsp.pad_to(self._impulse_response, n)
        self._Y = _frozen(np.fft.fft(self._noisy))
        self._H = _frozen(np.fft.fft(h_padded))
        E, floored = dsp.zero_forcing_equalizer(self._H)
        self._E = _frozen(E)
        self._floored = int(floored.sum())
        if self._floored:
            logger.debug("Equalizer floored %d of %d bins", self._floored, n)

    def _equalize(self):
        self._recovered = _frozen(dsp.equalize(self._Y, self._E))
        self._decoded = dsp.decode_bits(self._recovered, len(self.bits), self.samples_per_symbol)

    _STAGE_ACTIONS = {
        PipelineStage.GENERATE: _generate,
        PipelineStage.CHANNEL: _channel,
        PipelineStage.CONVOLVE: _convolve,
        PipelineStage.TRANSFORM: _transform,
        PipelineStage.EQUALIZE: _equalize,
    }

    def advance(self) -> RecoveryPipelineState:
        """Run the current stage and move to the next one."""
        if self.stage is PipelineStage.COMPLETE:
            raise RuntimeError("pipeline already complete; reset to run again")

        ran = self.stage
        self._STAGE_ACTIONS[ran](self)
        self.stage = PipelineStage(ran + 1)
        logger.debug("Recovery stage %s done", ran.name)
        return self.state

    def run_to_end(self) -> RecoveryPipelineState:
        while self.stage is not PipelineStage.COMPLETE:
            self.advance()
        return self.state

    @property
    def state(self) -> RecoveryPipelineState:
        return RecoveryPipelineState(
            stage=self.stage,
            bits=self.bits,
            samples_per_symbol=self.samples_per_symbol,
            taps=self.taps,
            noise_variance=self.noise_variance,
            waveform=self._waveform,
            impulse_response=self._impulse_response,
            convolved=self._convolved,
            noisy=self._noisy,
            spectrum_y=self._Y,
            spectrum_h=self._H,
            spectrum_e=self._E,
            recovered=self._recovered,
            decoded_bits=self._decoded,
            floored_bins=self._floored,
        )
