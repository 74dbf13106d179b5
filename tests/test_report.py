import os
import sys

# Make project root importable when running tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from wirelab.report import build_report


def test_report_has_every_section():
    text = build_report(seed=1)
    for header in ("[Trunking]", "[Handoff]", "[Doppler]", "[Multipath]",
                   "[Signal recovery]", "[Frequency reuse]", "[Modulation]"):
        assert header in text


def test_report_content():
    text = build_report(seed=1)
    erlang_line = next(line for line in text.splitlines() if "Erlang B" in line)
    assert erlang_line.split()[-1] == "0.0184"
    assert "decoded 10110" in text
    assert "errors 0" in text
    assert "reached BS2 on BS2" in text
    assert "(perpendicular)" in text


def test_report_is_reproducible():
    assert build_report(seed=3) == build_report(seed=3)
