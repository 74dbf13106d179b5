import os
import sys

import numpy as np
import pytest

# Make project root importable when running tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from wirelab.engine import dsp


def test_bits_to_waveform_with_tail():
    x = dsp.bits_to_waveform("10", 3)
    np.testing.assert_array_equal(x, [1, 1, 1, -1, -1, -1, 0, 0, 0, 0, 0, 0])


def test_bits_validation():
    for bad in ("", "10a1", "2"):
        with pytest.raises(ValueError):
            dsp.bits_to_waveform(bad, 4)
    with pytest.raises(ValueError):
        dsp.bits_to_waveform("101", 0)


def test_impulse_response_sums_shared_delays():
    h = dsp.build_impulse_response([(0, 1.0), (3, 0.5), (3, 0.25)])
    np.testing.assert_allclose(h, [1.0, 0.0, 0.0, 0.75])


def test_tap_validation():
    with pytest.raises(ValueError):
        dsp.ChannelTap(-1, 0.5)
    with pytest.raises(ValueError):
        dsp.as_taps([])
    taps = dsp.as_taps([(2, 0.1), dsp.ChannelTap(0, 1.0)])
    assert taps == (dsp.ChannelTap(2, 0.1), dsp.ChannelTap(0, 1.0))


def test_convolve_full_length():
    y = dsp.convolve([1.0, 2.0, 3.0], [1.0, 0.0, -1.0])
    np.testing.assert_allclose(y, [1.0, 2.0, 2.0, -2.0, -3.0])
    with pytest.raises(ValueError):
        dsp.convolve([], [1.0])


def test_box_muller_is_standard_normal():
    z = dsp.box_muller(20000, np.random.default_rng(7))
    assert np.all(np.isfinite(z))
    assert abs(z.mean()) < 0.05
    assert z.std() == pytest.approx(1.0, abs=0.05)


def test_add_noise():
    rng = np.random.default_rng(0)
    x = np.ones(1000)

    clean = dsp.add_noise(x, 0.0, rng)
    np.testing.assert_array_equal(clean, x)
    assert clean is not x

    noisy = dsp.add_noise(x, 0.5, rng)
    assert noisy.std() == pytest.approx(0.5, rel=0.15)
    with pytest.raises(ValueError):
        dsp.add_noise(x, -0.1, rng)


def test_pad_to():
    np.testing.assert_array_equal(dsp.pad_to(np.array([1.0, 2.0]), 4), [1.0, 2.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        dsp.pad_to(np.ones(5), 3)


def test_zero_forcing_floors_spectral_nulls():
    H = np.array([2.0 + 0j, 0.0 + 0j, 1e-9 + 0j, 0.5j])
    E, floored = dsp.zero_forcing_equalizer(H)
    np.testing.assert_array_equal(floored, [False, True, True, False])
    assert np.all(np.isfinite(E))
    assert E[0] == pytest.approx(0.5)
    assert E[1] == pytest.approx(1e6)
    assert E[3] == pytest.approx(-2j)


def test_equalize_inverts_circular_channel():
    x = np.array([1.0, -1.0, 1.0, 1.0, 0.0, 0.0, 0.0, 0.0])
    h = dsp.pad_to(np.array([1.0, 0.5]), x.size)
    H = np.fft.fft(h)
    Y = np.fft.fft(x) * H
    E, _ = dsp.zero_forcing_equalizer(H)
    np.testing.assert_allclose(dsp.equalize(Y, E), x, atol=1e-12)

    with pytest.raises(ValueError):
        dsp.equalize(Y, E[:-1])


def test_decode_bits_samples_midpoints():
    recovered = np.array([0.9, -5.0, 0.1, -0.2, 3.0, -0.4])
    # samples_per_symbol=2 -> indices 1, 3, 5
    assert dsp.decode_bits(recovered, 3, 2) == "000"
    # samples_per_symbol=3 -> indices 1, 4
    assert dsp.decode_bits(recovered, 2, 3) == "01"
    # Symbols past the end of the signal are not decoded
    assert dsp.decode_bits(recovered, 5, 2) == "000"


def test_bit_errors():
    assert dsp.bit_errors("10110", "10110") == 0
    assert dsp.bit_errors("10110", "00111") == 2
    assert dsp.bit_errors("10110", "101") == 2
