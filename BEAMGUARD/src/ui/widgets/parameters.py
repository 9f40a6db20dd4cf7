from PyQt5 import QtWidgets, QtCore
import numpy as np

from BEAMGUARD.config import Config
from BEAMGUARD.src.core.types import BEAM_SPREAD_DEG, FixtureState, PerformerState


class ParameterSlider(QtWidgets.QWidget):
    """Labelled slider over a float range with a fixed step."""

    value_changed = QtCore.pyqtSignal(float)

    def __init__(self, label: str, lo: float, hi: float, step: float, value: float,
                 decimals: int = 1, suffix: str = " m", parent=None):
        super().__init__(parent)
        self.lo = float(lo)
        self.hi = float(hi)
        self.step = float(step)
        self.decimals = decimals
        self.suffix = suffix

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        header = QtWidgets.QHBoxLayout()
        header.addWidget(QtWidgets.QLabel(label))
        header.addStretch()
        self.lbl_value = QtWidgets.QLabel()
        self.lbl_value.setProperty("class", "value")
        header.addWidget(self.lbl_value)
        layout.addLayout(header)

        self.slider = QtWidgets.QSlider(QtCore.Qt.Horizontal)
        self.slider.setRange(0, int(round((self.hi - self.lo) / self.step)))
        self.slider.valueChanged.connect(self._on_slider)
        layout.addWidget(self.slider)

        self.set_value(value)

    def value(self) -> float:
        raw = self.lo + self.slider.value() * self.step
        return float(np.clip(round(raw, 6), self.lo, self.hi))

    def set_value(self, value: float) -> None:
        value = float(np.clip(value, self.lo, self.hi))
        self.slider.setValue(int(round((value - self.lo) / self.step)))
        self._update_label()

    def _update_label(self):
        self.lbl_value.setText(f"{self.value():.{self.decimals}f}{self.suffix}")

    def _on_slider(self, _):
        self._update_label()
        self.value_changed.emit(self.value())


class FixtureControls(QtWidgets.QGroupBox):
    changed = QtCore.pyqtSignal()

    def __init__(self, config: Config, parent=None):
        super().__init__("Laser Fixture", parent)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setSpacing(10)

        self.sld_depth = ParameterSlider(
            "Depth", config.FIXTURE_DEPTH_MIN_M, config.FIXTURE_DEPTH_MAX_M, 0.1,
            config.DEFAULT_FIXTURE_DEPTH_M,
        )
        self.sld_height = ParameterSlider(
            "Height (rigging point)", config.FIXTURE_HEIGHT_MIN_M, config.FIXTURE_HEIGHT_MAX_M, 0.1,
            config.DEFAULT_FIXTURE_HEIGHT_M,
        )
        self.sld_aim = ParameterSlider(
            "Aim angle", config.AIM_MIN_DEG, config.AIM_MAX_DEG, 1.0,
            config.DEFAULT_AIM_DEG, suffix="°",
        )
        self.sld_aim.setToolTip("-90° up, 0° horizontal, +90° down")

        for sld in (self.sld_depth, self.sld_height, self.sld_aim):
            sld.value_changed.connect(lambda _: self.changed.emit())
            layout.addWidget(sld)

        lbl_spread = QtWidgets.QLabel(f"Spread: {BEAM_SPREAD_DEG:g}° fixed")
        lbl_spread.setProperty("class", "fixed")
        layout.addWidget(lbl_spread)

    def state(self) -> FixtureState:
        return FixtureState(self.sld_depth.value(), self.sld_height.value(), self.sld_aim.value())


class PerformerControls(QtWidgets.QGroupBox):
    changed = QtCore.pyqtSignal()

    def __init__(self, config: Config, parent=None):
        super().__init__("Performer", parent)
        layout = QtWidgets.QVBoxLayout(self)
        layout.setSpacing(10)

        self.sld_depth = ParameterSlider(
            "Depth", config.PERFORMER_DEPTH_MIN_M, config.PERFORMER_DEPTH_MAX_M, 0.1,
            config.DEFAULT_PERFORMER_DEPTH_M,
        )
        self.sld_height = ParameterSlider(
            "Height", config.PERFORMER_HEIGHT_MIN_M, config.PERFORMER_HEIGHT_MAX_M, 0.01,
            config.DEFAULT_PERFORMER_HEIGHT_M, decimals=2,
        )
        self.sld_radius = ParameterSlider(
            "Width (safety radius)", config.PERFORMER_RADIUS_MIN_M, config.PERFORMER_RADIUS_MAX_M, 0.05,
            config.DEFAULT_PERFORMER_RADIUS_M, decimals=2,
        )

        for sld in (self.sld_depth, self.sld_height, self.sld_radius):
            sld.value_changed.connect(lambda _: self.changed.emit())
            layout.addWidget(sld)

    def state(self) -> PerformerState:
        return PerformerState(self.sld_depth.value(), self.sld_height.value(), self.sld_radius.value())
