"""
Multipath Panel

Geometric scene (transmitter, buildings, moving receiver) with every ray
drawn, and the resulting power-delay profile as a stem chart.
Click the scene to drop a new building; "Remove" deletes the newest one.
"""

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import pyqtSlot
from PyQt6.QtWidgets import (
    QFormLayout, QGroupBox, QHBoxLayout, QLabel, QPushButton, QVBoxLayout,
    QWidget,
)

from wirelab.ui.config import LOS_COLOR, NLOS_COLOR


class MultipathPanel(QWidget):
    def __init__(self, controller):
        super().__init__()
        self.controller = controller
        scene = controller.multipath

        layout = QHBoxLayout(self)

        controls = QGroupBox("MULTIPATH")
        form = QFormLayout(controls)
        self.paths_label = QLabel("--")
        self.spread_label = QLabel("--")
        self.mean_label = QLabel("--")
        self.rms_label = QLabel("--")
        form.addRow("Paths", self.paths_label)
        form.addRow("Max delay spread", self.spread_label)
        form.addRow("Mean excess delay", self.mean_label)
        form.addRow("RMS delay spread", self.rms_label)

        self.pause_button = QPushButton("Pause")
        self.pause_button.setCheckable(True)
        self.remove_button = QPushButton("Remove building")
        form.addRow(self.pause_button)
        form.addRow(self.remove_button)
        layout.addWidget(controls, stretch=1)

        charts = QVBoxLayout()
        self.scene_plot = pg.PlotWidget(title="Scene (click to add a building)")
        self.scene_plot.setMouseEnabled(x=False, y=False)
        self.scene_plot.invertY(True)
        self.scene_plot.setXRange(0, scene.WIDTH)
        self.scene_plot.setYRange(0, scene.ROAD_Y + 30)
        self.rays = pg.PlotDataItem([], [], connect='pairs', pen=pg.mkPen('#666', width=1))
        self.los_ray = pg.PlotDataItem([], [], pen=pg.mkPen(LOS_COLOR, width=2))
        self.nodes = pg.ScatterPlotItem(size=14)
        for item in (self.rays, self.los_ray, self.nodes):
            self.scene_plot.addItem(item)
        charts.addWidget(self.scene_plot)

        self.pdp_plot = pg.PlotWidget(title="Power-delay profile")
        self.pdp_plot.setLabel('bottom', 'Delay (ticks)')
        self.pdp_plot.setLabel('left', 'Amplitude')
        self.stems = pg.PlotDataItem([], [], connect='pairs', pen=pg.mkPen('#aaa', width=2))
        self.heads = pg.ScatterPlotItem(size=8)
        self.pdp_plot.addItem(self.stems)
        self.pdp_plot.addItem(self.heads)
        charts.addWidget(self.pdp_plot)
        layout.addLayout(charts, stretch=3)

        self.pause_button.toggled.connect(self._toggle_pause)
        self.remove_button.clicked.connect(self._remove_newest)
        self.scene_plot.scene().sigMouseClicked.connect(self._add_at_click)
        controller.multipath_updated.connect(self.update_profile)

        self.update_profile(scene.profile())

    def _toggle_pause(self, paused: bool):
        self.pause_button.setText("Resume" if paused else "Pause")
        self.controller.multipath.moving = not paused

    def _remove_newest(self):
        scene = self.controller.multipath
        if scene.reflectors:
            scene.remove_reflector(max(scene.reflectors))
            self.update_profile(scene.profile())

    def _add_at_click(self, event):
        point = self.scene_plot.getPlotItem().vb.mapSceneToView(event.scenePos())
        scene = self.controller.multipath
        if 0 <= point.x() <= scene.WIDTH and 0 <= point.y() < scene.ROAD_Y:
            scene.add_reflector(point.x(), point.y())
            self.update_profile(scene.profile())

    @pyqtSlot(object)
    def update_profile(self, profile):
        scene = self.controller.multipath
        tx, rx = scene.tx, scene.rx
        buildings = list(scene.reflectors.values())

        ray_x, ray_y = [], []
        for b in buildings:
            ray_x += [tx.x, b.x, b.x, rx.x]
            ray_y += [tx.y, b.y, b.y, rx.y]
        self.rays.setData(ray_x, ray_y)
        self.los_ray.setData([tx.x, rx.x], [tx.y, rx.y])

        spots = [{'pos': (tx.x, tx.y), 'brush': '#ccc', 'symbol': 't1'},
                 {'pos': (rx.x, rx.y), 'brush': LOS_COLOR, 'symbol': 's'}]
        spots += [{'pos': (b.x, b.y), 'brush': '#8899aa', 'symbol': 's'} for b in buildings]
        self.nodes.setData(spots)

        delays, amplitudes = profile.delays, profile.amplitudes
        self.stems.setData(np.repeat(delays, 2), np.column_stack([np.zeros_like(amplitudes), amplitudes]).ravel())
        self.heads.setData([{'pos': (p.delay, p.amplitude),
                             'brush': LOS_COLOR if p.is_los else NLOS_COLOR} for p in profile.paths])

        self.paths_label.setText(str(len(profile.paths)))
        self.spread_label.setText(f"{profile.max_delay_spread:.3f}")
        self.mean_label.setText(f"{profile.mean_excess_delay:.3f}")
        self.rms_label.setText(f"{profile.rms_delay_spread:.3f}")
