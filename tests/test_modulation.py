import math
import os
import sys

import numpy as np
import pytest

# Make project root importable when running tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from wirelab.engine import modulation
from wirelab.engine.modulation import AntennaClass


def test_carrier_slider_is_logarithmic():
    assert modulation.carrier_from_slider(0) == pytest.approx(30e3)
    assert modulation.carrier_from_slider(100) == pytest.approx(3e9)
    assert modulation.carrier_from_slider(50) == pytest.approx(math.sqrt(30e3 * 3e9))
    with pytest.raises(ValueError):
        modulation.carrier_from_slider(101)


@pytest.mark.parametrize("carrier, expected", [
    (3e9, AntennaClass.PHONE),
    (1e6, AntennaClass.CELL_TOWER),
    (30e3, AntennaClass.SKYSCRAPER),
    (5e3, AntennaClass.GIANT),
])
def test_antenna_classes(carrier, expected):
    assert modulation.classify_antenna(modulation.antenna_height(carrier)) is expected


def test_quarter_wave_height():
    assert modulation.antenna_height(3e9) == pytest.approx(0.025)
    with pytest.raises(ValueError):
        modulation.antenna_height(0.0)


def test_am_waveform_stays_inside_envelope():
    wave = modulation.am_waveform(0.8, time=1.3, carrier_speed_ratio=modulation.carrier_speed(40))
    assert wave.t.shape == wave.signal.shape == (100,)
    assert wave.t[0] == pytest.approx(1.3)
    np.testing.assert_allclose(wave.lower_envelope, -wave.upper_envelope)
    assert np.all(np.abs(wave.signal) <= wave.upper_envelope + 1e-12)
    assert wave.upper_envelope.min() >= 0.2 - 1e-12


def test_am_waveform_rejects_bad_index():
    for k in (0.0, -0.5, 1.5):
        with pytest.raises(ValueError):
            modulation.am_waveform(k)


def test_carrier_speed():
    assert modulation.carrier_speed(0) == 2.0
    assert modulation.carrier_speed(100) == 22.0


def test_am_spectrum_blocks():
    freqs, spectrum = modulation.am_spectrum(10.0, 60.0)
    assert freqs.size == spectrum.size == 201
    level = dict(zip(freqs.tolist(), spectrum.tolist()))
    assert level[0] == 0.8
    assert level[5] == 0.8
    assert level[6] == 0.0
    assert level[60] == level[-60] == 0.6
    assert level[70] == 0.6
    assert level[71] == 0.0

    with pytest.raises(ValueError):
        modulation.am_spectrum(0.0, 60.0)
