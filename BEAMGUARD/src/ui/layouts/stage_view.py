"""Stage side view: beam cone, safety line, fixture, performer and floor marks."""

from __future__ import annotations

import numpy as np
from PyQt5 import QtCore, QtGui, QtWidgets
import pyqtgraph as pg

from BEAMGUARD.config import Config
from BEAMGUARD.src.core.coords import (
    beam_polygon,
    safety_line_points,
    screen_to_stage,
    stage_to_screen,
    to_screen_array,
)
from BEAMGUARD.src.core.geometry import SAFETY_MARGIN_M
from BEAMGUARD.src.core.scene import on_stage
from BEAMGUARD.src.core.types import SceneReport
from BEAMGUARD.src.ui import theme


def _pen(color, width=1.0, dash=None):
    pen = pg.mkPen(color, width=width)
    if dash is not None:
        pen.setStyle(QtCore.Qt.CustomDashLine)
        pen.setDashPattern(dash)
    pen.setCosmetic(True)
    return pen


class StageView(QtWidgets.QWidget):
    cursor_moved = QtCore.pyqtSignal(float, float)

    def __init__(self, config: Config, parent=None):
        super().__init__(parent)
        self.config = config
        self._build_ui()

    def _to_px(self, depth: float, height: float) -> tuple[float, float]:
        return stage_to_screen(depth, height, self.config.STAGE_HEIGHT_M, self.config.SCALE_PX_PER_M)

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        colors = theme.get_plot_colors()
        self.container = pg.GraphicsLayoutWidget()
        self.container.setBackground(colors['background'])
        self.vb = self.container.addViewBox()
        self.vb.invertY(True)
        self.vb.setAspectLocked(True)
        self.vb.setMenuEnabled(False)
        self.vb.setMouseEnabled(x=False, y=False)
        layout.addWidget(self.container)

        width_px = self.config.STAGE_DEPTH_M * self.config.SCALE_PX_PER_M
        height_px = self.config.STAGE_HEIGHT_M * self.config.SCALE_PX_PER_M
        self.vb.setRange(xRange=(0, width_px), yRange=(0, height_px + 40), padding=0.02)

        if self.config.SHOW_GRID:
            self.vb.addItem(self._make_grid(width_px, height_px, colors['grid']))

        floor_y = self._to_px(0.0, 0.0)[1]
        self.floor_line = pg.PlotDataItem([0, width_px], [floor_y, floor_y], pen=_pen(theme.HEX_FLOOR, 3))
        self.vb.addItem(self.floor_line)
        lbl_floor = pg.TextItem("Stage floor", color=theme.HEX_FLOOR, anchor=(0, 1))
        lbl_floor.setPos(10, floor_y - 2)
        self.vb.addItem(lbl_floor)

        self.beam_item = QtWidgets.QGraphicsPolygonItem()
        self.beam_item.setBrush(QtGui.QBrush(QtGui.QColor(*theme.RGBA_BEAM_FILL)))
        self.beam_item.setPen(_pen(theme.HEX_BEAM_EDGE, 2))
        self.vb.addItem(self.beam_item)

        self.safety_curve = pg.PlotDataItem(pen=_pen(theme.HEX_SAFETY_LINE, 2, dash=[3, 3]))
        self.vb.addItem(self.safety_curve)

        self.hanger = pg.PlotDataItem(pen=_pen(theme.HEX_FIXTURE, 2, dash=[5, 5]))
        self.vb.addItem(self.hanger)
        self.fixture_body = QtWidgets.QGraphicsRectItem(-12, -15, 24, 30)
        self.fixture_body.setBrush(QtGui.QBrush(QtGui.QColor(theme.HEX_FIXTURE)))
        self.fixture_body.setPen(_pen(theme.HEX_FIXTURE_EDGE, 2))
        self.vb.addItem(self.fixture_body)
        self.lbl_fixture = pg.TextItem("Laser", color=theme.HEX_FIXTURE, anchor=(0.5, 1))
        self.vb.addItem(self.lbl_fixture)
        self.lbl_fixture_height = pg.TextItem("", color=theme.HEX_FIXTURE, anchor=(0, 0.5))
        self.vb.addItem(self.lbl_fixture_height)

        self.performer_body = QtWidgets.QGraphicsRectItem()
        self.performer_body.setBrush(QtGui.QBrush(QtGui.QColor(theme.HEX_PERFORMER_BODY)))
        self.performer_body.setPen(_pen(theme.HEX_PERFORMER, 2))
        self.vb.addItem(self.performer_body)
        self.performer_head = QtWidgets.QGraphicsEllipseItem()
        self.performer_head.setBrush(QtGui.QBrush(QtGui.QColor(theme.HEX_PERFORMER)))
        self.performer_head.setPen(_pen(theme.HEX_PERFORMER, 2))
        self.vb.addItem(self.performer_head)
        self.lbl_performer = pg.TextItem("Performer", color=theme.HEX_PERFORMER, anchor=(0.5, 1))
        self.vb.addItem(self.lbl_performer)

        # Floor marks: upper edge, lower edge, safety line
        self.marks = {}
        specs = [
            ("upper", theme.HEX_UPPER_MARK, "Upper edge", (0.5, 0.0), 4),
            ("lower", theme.HEX_LOWER_MARK, "Lower edge", (0.5, 1.0), 4),
            ("safety", theme.HEX_SAFETY_LINE, f"Head +{SAFETY_MARGIN_M:g} m", (0.5, -1.0), 5),
        ]
        for key, color, caption, anchor, size in specs:
            dot = pg.ScatterPlotItem(size=2 * size, brush=pg.mkBrush(color), pen=_pen(color, 2))
            text = pg.TextItem("", color=color, anchor=anchor)
            self.vb.addItem(dot)
            self.vb.addItem(text)
            self.marks[key] = (dot, text, caption)

        self.container.scene().sigMouseMoved.connect(self._on_mouse_moved)

    def _make_grid(self, width_px: float, height_px: float, color) -> pg.PlotDataItem:
        step_px = self.config.GRID_STEP_M * self.config.SCALE_PX_PER_M
        xs = np.arange(0.0, width_px + 0.5 * step_px, step_px)
        ys = np.arange(0.0, height_px + 0.5 * step_px, step_px)

        seg_x = []
        seg_y = []
        for x in xs:
            seg_x += [x, x]
            seg_y += [0.0, height_px]
        for y in ys:
            seg_x += [0.0, width_px]
            seg_y += [y, y]
        grid = pg.PlotDataItem(np.array(seg_x), np.array(seg_y), connect="pairs", pen=_pen(color, 1))
        grid.setZValue(-20)
        return grid

    def _on_mouse_moved(self, pos) -> None:
        if not self.vb.sceneBoundingRect().contains(pos):
            return
        pt = self.vb.mapSceneToView(pos)
        depth, height = screen_to_stage(pt.x(), pt.y(), self.config.STAGE_HEIGHT_M, self.config.SCALE_PX_PER_M)
        self.cursor_moved.emit(depth, height)

    def update_scene(self, report: SceneReport) -> None:
        cfg = self.config
        scale = cfg.SCALE_PX_PER_M
        fixture = report.fixture
        performer = report.performer

        poly = to_screen_array(beam_polygon(fixture, report.edges), cfg.STAGE_HEIGHT_M, scale)
        self.beam_item.setPolygon(QtGui.QPolygonF([QtCore.QPointF(x, y) for x, y in poly]))

        safety_depth = report.safety_floor_depth if on_stage(report.safety_floor_depth, cfg.STAGE_DEPTH_M) else None
        line = to_screen_array(
            safety_line_points(fixture, performer, safety_depth, SAFETY_MARGIN_M), cfg.STAGE_HEIGHT_M, scale
        )
        self.safety_curve.setData(line[:, 0], line[:, 1])

        fx, fy = self._to_px(fixture.depth, fixture.height)
        self.hanger.setData([fx, fx], [0.0, fy])
        self.fixture_body.setPos(fx, fy)
        self.lbl_fixture.setPos(fx, fy - 20)
        self.lbl_fixture_height.setText(f"{fixture.height:.1f}m")
        self.lbl_fixture_height.setPos(fx + 16, fy)

        r_px = performer.radius * scale
        hx, hy = self._to_px(performer.depth, performer.height + performer.radius)
        self.performer_head.setRect(hx - r_px, hy - r_px, 2 * r_px, 2 * r_px)
        bx, by = self._to_px(performer.depth, performer.height)
        self.performer_body.setRect(bx - 0.7 * r_px, by, 1.4 * r_px, performer.height * scale)
        self.lbl_performer.setPos(hx, hy - r_px - 4)

        self._place_mark("upper", report.upper_floor_depth)
        self._place_mark("lower", report.lower_floor_depth)
        self._place_mark("safety", report.safety_floor_depth)

    def _place_mark(self, key: str, depth) -> None:
        dot, text, caption = self.marks[key]
        if not on_stage(depth, self.config.STAGE_DEPTH_M):
            dot.setData([], [])
            text.setText("")
            return
        x, y = self._to_px(depth, 0.0)
        dot.setData([x], [y])
        text.setText(f"{caption}: {depth:.{self.config.DECIMALS}f}m")
        text.setPos(x, y)
