from typing import Optional

from PyQt5 import QtWidgets

from BEAMGUARD.src.core.geometry import SAFETY_MARGIN_M
from BEAMGUARD.src.core.scene import on_stage
from BEAMGUARD.src.core.types import SceneReport
from BEAMGUARD.src.ui.theme import HEX_TEXT_DIM, HEX_UPPER_MARK, HEX_LOWER_MARK, HEX_SAFETY_LINE


class ReadoutWidget(QtWidgets.QGroupBox):
    def __init__(self, decimals: int = 2, parent=None):
        super().__init__("Results", parent)
        self.decimals = decimals
        self.layout = QtWidgets.QGridLayout(self)

        self.lbl_distance = self._add_row(0, "Distance to performer:")
        self.lbl_bearing = self._add_row(1, "Bearing to performer:")
        self.lbl_aim = self._add_row(2, "Aim angle:")
        self.lbl_spread = self._add_row(3, "Spread:")
        self.lbl_spread.setStyleSheet("color: #fde047;")

        floor_title = QtWidgets.QLabel("Floor marks")
        floor_title.setStyleSheet("font-weight: bold; margin-top: 6px;")
        self.layout.addWidget(floor_title, 4, 0, 1, 2)

        self.lbl_upper = self._add_row(5, "Upper edge:")
        self.lbl_lower = self._add_row(6, "Lower edge:")
        self.lbl_safety = self._add_row(7, f"Head +{SAFETY_MARGIN_M:g} m line:")
        self.lbl_width = self._add_row(8, "Illuminated width:")

    def _add_row(self, row: int, caption: str) -> QtWidgets.QLabel:
        value = QtWidgets.QLabel("---")
        value.setProperty("class", "value")
        self.layout.addWidget(QtWidgets.QLabel(caption), row, 0)
        self.layout.addWidget(value, row, 1)
        return value

    def _set_floor(self, lbl: QtWidgets.QLabel, depth: Optional[float], stage_depth: float, color: str):
        if on_stage(depth, stage_depth):
            lbl.setText(f"{depth:.{self.decimals}f} m")
            lbl.setStyleSheet(f"color: {color};")
        else:
            lbl.setText("does not reach the floor")
            lbl.setStyleSheet(f"color: {HEX_TEXT_DIM};")

    def update_report(self, report: SceneReport):
        self.lbl_distance.setText(f"{report.distance.distance:.{self.decimals}f} m")
        self.lbl_bearing.setText(f"{report.distance.bearing_deg:.1f}°")
        self.lbl_aim.setText(f"{report.fixture.aim_angle:.1f}°")
        self.lbl_spread.setText(f"{report.fixture.spread:g}° fixed")

        self._set_floor(self.lbl_upper, report.upper_floor_depth, report.stage_depth, HEX_UPPER_MARK)
        self._set_floor(self.lbl_lower, report.lower_floor_depth, report.stage_depth, HEX_LOWER_MARK)
        self._set_floor(self.lbl_safety, report.safety_floor_depth, report.stage_depth, HEX_SAFETY_LINE)

        if report.floor_width is not None:
            self.lbl_width.setText(f"{report.floor_width:.{self.decimals}f} m")
        else:
            self.lbl_width.setText("---")


class WarningBanner(QtWidgets.QLabel):
    def __init__(self, parent=None):
        super().__init__("⚠  WARNING: the lower beam edge is grazing the performer!", parent)
        self.setProperty("class", "banner")
        self.setVisible(False)

    def update_report(self, report: SceneReport):
        self.setVisible(report.in_beam)
