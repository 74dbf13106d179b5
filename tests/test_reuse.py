import math
import os
import sys

import pytest

# Make project root importable when running tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from wirelab.engine import reuse


@pytest.mark.parametrize("i, j, n", [(1, 0, 1), (1, 1, 3), (2, 0, 4), (1, 2, 7), (2, 2, 12), (0, 0, 1)])
def test_cluster_size(i, j, n):
    assert reuse.cluster_size(i, j) == n


def test_reuse_distance_and_sir():
    assert reuse.reuse_ratio(7) == pytest.approx(math.sqrt(21))
    assert reuse.reuse_distance(2.0, 7) == pytest.approx(2 * math.sqrt(21))
    # N = 7, γ = 4: (√21)^4 / 6 = 73.5
    assert reuse.cochannel_sir_db(7, 4.0) == pytest.approx(10 * math.log10(73.5))


def test_invalid_shift_parameters():
    with pytest.raises(ValueError):
        reuse.cluster_size(-1, 2)
    with pytest.raises(ValueError):
        reuse.cluster_size(1.5, 0)
    with pytest.raises(ValueError):
        reuse.reuse_distance(0.0, 7)


def test_layout_groups():
    cells = reuse.cell_layout(1, 2, radius=30.0, rings=4)
    assert len(cells) == 61
    assert {c.group for c in cells} == set(range(7))

    origin = next(c for c in cells if c.q == 0 and c.r == 0)
    assert origin.co_channel
    assert (origin.x, origin.y) == (0.0, 0.0)


def test_first_cochannel_cell_sits_at_reuse_distance():
    i, j, radius = 1, 2, 30.0
    n = reuse.cluster_size(i, j)
    assert reuse.cluster_index(i, j, i, j) == 0
    x, y = reuse.hex_center(i, j, radius)
    assert math.hypot(x, y) == pytest.approx(reuse.reuse_distance(radius, n))


def test_neighbours_of_reference_cell_use_other_groups():
    # All six adjacent cells differ from the reference for N = 7
    neighbours = [(1, 0), (-1, 0), (0, 1), (0, -1), (1, -1), (-1, 1)]
    groups = {reuse.cluster_index(q, r, 1, 2) for q, r in neighbours}
    assert 0 not in groups
    assert len(groups) == 6


def test_hexagon_vertices_on_circumcircle():
    vertices = reuse.hexagon_vertices(10.0, -5.0, 30.0)
    assert len(vertices) == 6
    for vx, vy in vertices:
        assert math.hypot(vx - 10.0, vy + 5.0) == pytest.approx(30.0)
