"""
Hexagonal frequency reuse.

Cluster size for shift parameters (i, j):   N = i² + i·j + j²
Co-channel reuse distance:                  D = R·√(3N)
Worst-case first-tier S/I (6 interferers):  S/I = (D/R)^γ / 6

Cells use pointy-topped axial coordinates (q, r). A cell belongs to
frequency group (q·i + r·(i + j)) mod N; group 0 marks the co-channel
cells of the reference cell at the origin.
"""

import math
from dataclasses import dataclass
from typing import List

from .units import require_count, require_positive


def cluster_size(i: int, j: int) -> int:
    """Cells per cluster. The degenerate (0, 0) shift is treated as N = 1."""
    require_count("i", i)
    require_count("j", j)
    n = i * i + i * j + j * j
    return n if n > 0 else 1


def reuse_ratio(n: int) -> float:
    """Co-channel reuse ratio Q = D / R."""
    require_count("N", n, minimum=1)
    return math.sqrt(3 * n)


def reuse_distance(cell_radius: float, n: int) -> float:
    require_positive("cell_radius", cell_radius)
    return cell_radius * reuse_ratio(n)


def cochannel_sir_db(n: int, path_loss_exponent: float, interferers: int = 6) -> float:
    """First-tier signal-to-interference ratio in dB."""
    require_positive("path_loss_exponent", path_loss_exponent)
    require_count("interferers", interferers, minimum=1)
    sir = reuse_ratio(n) ** path_loss_exponent / interferers
    return 10 * math.log10(sir)


def cluster_index(q: int, r: int, i: int, j: int) -> int:
    """Frequency group of cell (q, r), always in [0, N)."""
    n = cluster_size(i, j)
    return (q * i + r * (i + j)) % n


def hex_center(q: int, r: int, radius: float):
    """Cartesian center of axial cell (q, r) for pointy-topped hexagons."""
    x = radius * math.sqrt(3) * (q + r / 2.0)
    y = radius * 1.5 * r
    return x, y


def hexagon_vertices(x: float, y: float, radius: float):
    """Six corners of a pointy-topped hexagon, counter-clockwise from -30°."""
    vertices = []
    for k in range(6):
        angle = math.radians(60 * k - 30)
        vertices.append((x + radius * math.cos(angle), y + radius * math.sin(angle)))
    return vertices


@dataclass(frozen=True)
class Cell:
    q: int
    r: int
    x: float
    y: float
    group: int

    @property
    def co_channel(self) -> bool:
        """True for cells sharing the reference cell's frequency group."""
        return self.group == 0


def cell_layout(i: int, j: int, radius: float = 30.0, rings: int = 4) -> List[Cell]:
    """All cells within ``rings`` hex steps of the origin with their groups."""
    require_positive("radius", radius)
    require_count("rings", rings)

    cells = []
    for q in range(-rings, rings + 1):
        for r in range(-rings, rings + 1):
            s = -q - r
            if max(abs(q), abs(r), abs(s)) > rings:
                continue
            x, y = hex_center(q, r, radius)
            cells.append(Cell(q, r, x, y, cluster_index(q, r, i, j)))
    return cells
