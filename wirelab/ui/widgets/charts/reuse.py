"""
Frequency Reuse Panel

Hexagonal layout colored by frequency group for shift parameters (i, j),
with the co-channel cells of the center cell outlined and the reuse
metrics N, Q = D/R, D and first-tier S/I.
"""

import pyqtgraph as pg
from PyQt6.QtWidgets import (
    QDoubleSpinBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QSpinBox,
    QWidget,
)

from wirelab.engine import reuse
from wirelab.ui.config import ACCENT_COLOR, CLUSTER_COLORS, REUSE_SHIFT_RANGE

CELL_RADIUS = 30.0
RINGS = 4


class ReusePanel(QWidget):
    def __init__(self):
        super().__init__()
        layout = QHBoxLayout(self)

        controls = QGroupBox("CLUSTER")
        form = QFormLayout(controls)
        self.i_box = QSpinBox()
        self.j_box = QSpinBox()
        for box, value in ((self.i_box, 1), (self.j_box, 2)):
            box.setRange(*REUSE_SHIFT_RANGE[:2])
            box.setValue(value)
        self.gamma_box = QDoubleSpinBox()
        self.gamma_box.setRange(2.0, 6.0)
        self.gamma_box.setSingleStep(0.5)
        self.gamma_box.setValue(4.0)
        form.addRow("Shift i", self.i_box)
        form.addRow("Shift j", self.j_box)
        form.addRow("Path-loss exponent γ", self.gamma_box)

        self.n_label = QLabel()
        self.q_label = QLabel()
        self.d_label = QLabel()
        self.sir_label = QLabel()
        form.addRow("Cluster size N", self.n_label)
        form.addRow("Reuse ratio Q", self.q_label)
        form.addRow("Reuse distance D", self.d_label)
        form.addRow("S/I (6 interferers)", self.sir_label)
        layout.addWidget(controls, stretch=1)

        self.plot = pg.PlotWidget(title="Cell layout")
        self.plot.setAspectLocked(True)
        self.plot.hideAxis('left')
        self.plot.hideAxis('bottom')
        self.fills = pg.ScatterPlotItem(pxMode=False, symbol='o')
        self.outlines = pg.PlotDataItem([], [], connect='pairs', pen=pg.mkPen('#333', width=1))
        self.cochannel = pg.PlotDataItem([], [], connect='pairs', pen=pg.mkPen(ACCENT_COLOR, width=3))
        for item in (self.fills, self.outlines, self.cochannel):
            self.plot.addItem(item)
        layout.addWidget(self.plot, stretch=3)

        for box in (self.i_box, self.j_box, self.gamma_box):
            box.valueChanged.connect(self.refresh)
        self.refresh()

    @staticmethod
    def _edges(cells):
        xs, ys = [], []
        for cell in cells:
            corners = reuse.hexagon_vertices(cell.x, cell.y, CELL_RADIUS)
            for a, b in zip(corners, corners[1:] + corners[:1]):
                xs += [a[0], b[0]]
                ys += [a[1], b[1]]
        return xs, ys

    def refresh(self, *_):
        i, j = self.i_box.value(), self.j_box.value()
        n = reuse.cluster_size(i, j)
        cells = reuse.cell_layout(i, j, CELL_RADIUS, RINGS)

        self.fills.setData([{'pos': (c.x, c.y), 'size': CELL_RADIUS * 1.6,
                             'brush': CLUSTER_COLORS[c.group % len(CLUSTER_COLORS)]}
                            for c in cells])
        self.outlines.setData(*self._edges(cells))
        self.cochannel.setData(*self._edges([c for c in cells if c.co_channel]))

        self.n_label.setText(str(n))
        self.q_label.setText(f"{reuse.reuse_ratio(n):.2f}")
        self.d_label.setText(f"{reuse.reuse_distance(CELL_RADIUS, n):.1f} (R = {CELL_RADIUS:.0f})")
        self.sir_label.setText(f"{reuse.cochannel_sir_db(n, self.gamma_box.value()):.1f} dB")
