import math
import os
import sys

import pytest

# Make project root importable when running tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from wirelab.engine.multipath import (
    LOS_ID, MultipathConfig, MultipathScene, Point, Reflector, compute_multipath,
)


def test_line_of_sight_only():
    profile = compute_multipath(Point(0, 0), Point(30, 40), [])
    assert len(profile.paths) == 1
    los = profile.los
    assert los.id == LOS_ID
    assert los.distance == pytest.approx(50.0)
    assert los.delay == pytest.approx(50.0 / 300.0)
    assert los.amplitude == pytest.approx(1000.0 / 50.0 ** 2)
    assert profile.max_delay_spread == 0.0
    assert profile.rms_delay_spread == 0.0


def test_reflected_path_is_weaker_and_later():
    tx, rx = Point(0, 0), Point(100, 0)
    profile = compute_multipath(tx, rx, [Reflector(50, 50, 1)])
    los, nlos = profile.paths
    assert los.is_los
    assert nlos.id == "NLOS 1"

    d = 2 * math.hypot(50, 50)
    assert nlos.distance == pytest.approx(d)
    assert nlos.delay == pytest.approx(d / 300.0)
    assert nlos.amplitude == pytest.approx(500.0 / d ** 2)
    assert nlos.amplitude < los.amplitude
    assert profile.max_delay_spread == pytest.approx((d - 100.0) / 300.0)


def test_paths_sorted_by_delay():
    profile = compute_multipath(Point(0, 0), Point(10, 0),
                                [Point(5, 200), Point(5, 20), Point(5, 80)])
    delays = list(profile.delays)
    assert delays == sorted(delays)
    assert profile.paths[0].is_los


def test_coincident_nodes_clamp_distance():
    profile = compute_multipath(Point(5, 5), Point(5, 5), [])
    assert profile.los.distance == 1.0
    assert profile.los.amplitude == pytest.approx(1000.0)


def test_delay_spread_statistics():
    # Coincident arrivals have no spread
    config = MultipathConfig(reflection_coefficient=1.0)
    profile = compute_multipath(Point(0, 0), Point(0, 100), [Point(0, 100)], config)
    assert profile.rms_delay_spread == pytest.approx(0.0)

    profile = compute_multipath(Point(0, 0), Point(100, 0), [Point(50, 50)], config)
    tau = profile.max_delay_spread
    assert profile.mean_excess_delay < tau / 2
    assert 0.0 < profile.rms_delay_spread <= tau / 2


def test_config_validation():
    with pytest.raises(ValueError):
        MultipathConfig(propagation_speed=0.0)
    with pytest.raises(ValueError):
        MultipathConfig(reflection_coefficient=-0.5)


def test_scene_defaults_and_motion():
    scene = MultipathScene()
    assert len(scene.reflectors) == 3
    assert scene.rx == Point(100.0, 350.0)
    assert len(scene.profile().paths) == 4

    scene.advance()
    assert scene.rx_x == 102.0

    scene.rx_x = 700.0
    scene.advance()
    assert scene.rx_x == 100.0


def test_scene_frozen_receiver_does_not_move():
    scene = MultipathScene()
    scene.moving = False
    scene.advance()
    assert scene.rx_x == 100.0


def test_reflector_editing():
    scene = MultipathScene(reflectors=[])
    assert len(scene.profile().paths) == 1

    rid = scene.add_reflector(400.0, 200.0)
    assert len(scene.profile().paths) == 2

    scene.move_reflector(rid, 400.0, 100.0)
    assert scene.reflectors[rid] == Reflector(400.0, 100.0, rid)

    scene.remove_reflector(rid)
    assert scene.reflectors == {}

    with pytest.raises(ValueError):
        scene.move_reflector(rid, 0.0, 0.0)
    with pytest.raises(ValueError):
        scene.remove_reflector(99)
