import sys
import argparse
import logging
from pathlib import Path

from PyQt5 import QtCore, QtWidgets

from BEAMGUARD.config import Config
from BEAMGUARD.src.core.scene import evaluate_scene, format_report
from BEAMGUARD.src.core.types import FixtureState, PerformerState
from BEAMGUARD.src.ui.layouts.stage_view import StageView
from BEAMGUARD.src.ui.widgets.parameters import FixtureControls, PerformerControls
from BEAMGUARD.src.ui.widgets.readouts import ReadoutWidget, WarningBanner

logger = logging.getLogger(__name__)

USAGE_NOTES = (
    "Side view of the stage.\n"
    "The laser hangs from the rigging at the chosen depth and height.\n"
    "Aim ranges from -90° (up) through 0° (horizontal) to +90° (down).\n"
    "The beam spread is fixed at 50°.\n"
    "Note: the drawn cone treats positive angles as upward while floor marks\n"
    "treat them as downward, so a cone that looks like it hits the floor can\n"
    "still read \"does not reach the floor\".\n"
    "Move the performer and change their height to check the beam.\n"
    "Depth and height range from 0 to 20 m."
)


def default_scene(config: Config) -> tuple[FixtureState, PerformerState]:
    fixture = FixtureState(
        config.DEFAULT_FIXTURE_DEPTH_M,
        config.DEFAULT_FIXTURE_HEIGHT_M,
        config.DEFAULT_AIM_DEG,
    )
    performer = PerformerState(
        config.DEFAULT_PERFORMER_DEPTH_M,
        config.DEFAULT_PERFORMER_HEIGHT_M,
        config.DEFAULT_PERFORMER_RADIUS_M,
    )
    return fixture, performer


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, config: Config):
        super().__init__()
        self.config = config

        self.setWindowTitle("BEAMGUARD: Stage Laser Coverage Calculator")
        self.resize(1100, 760)

        self.init_menu()

        splitter = QtWidgets.QSplitter(QtCore.Qt.Horizontal)
        self.setCentralWidget(splitter)

        left = QtWidgets.QWidget()
        left_layout = QtWidgets.QVBoxLayout(left)
        self.stage_view = StageView(config)
        self.banner = WarningBanner()
        self.readouts = ReadoutWidget(decimals=config.DECIMALS)
        left_layout.addWidget(self.stage_view, stretch=4)
        left_layout.addWidget(self.banner)
        left_layout.addWidget(self.readouts, stretch=1)
        splitter.addWidget(left)

        right = QtWidgets.QWidget()
        right_layout = QtWidgets.QVBoxLayout(right)
        self.fixture_controls = FixtureControls(config)
        self.performer_controls = PerformerControls(config)
        right_layout.addWidget(self.fixture_controls)
        right_layout.addWidget(self.performer_controls)
        right_layout.addStretch()
        splitter.addWidget(right)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)

        self.fixture_controls.changed.connect(self.recompute)
        self.performer_controls.changed.connect(self.recompute)
        self.stage_view.cursor_moved.connect(self.on_cursor_moved)

        self.recompute()

    def init_menu(self):
        menubar = self.menuBar()

        app_menu = menubar.addMenu("BEAMGUARD")
        app_menu.addAction("Reset", self.on_reset)
        app_menu.addSeparator()
        app_menu.addAction("Quit", self.close)

        help_menu = menubar.addMenu("Help")
        help_menu.addAction("How to use", self.on_usage)

    def recompute(self):
        report = evaluate_scene(
            self.fixture_controls.state(),
            self.performer_controls.state(),
            stage_depth=self.config.STAGE_DEPTH_M,
        )
        self.stage_view.update_scene(report)
        self.banner.update_report(report)
        self.readouts.update_report(report)

    def on_reset(self):
        fixture, performer = default_scene(self.config)
        self.fixture_controls.sld_depth.set_value(fixture.depth)
        self.fixture_controls.sld_height.set_value(fixture.height)
        self.fixture_controls.sld_aim.set_value(fixture.aim_angle)
        self.performer_controls.sld_depth.set_value(performer.depth)
        self.performer_controls.sld_height.set_value(performer.height)
        self.performer_controls.sld_radius.set_value(performer.radius)
        self.recompute()

    def on_usage(self):
        QtWidgets.QMessageBox.information(self, "How to use", USAGE_NOTES)

    def on_cursor_moved(self, depth: float, height: float):
        self.statusBar().showMessage(f"Depth {depth:.2f} m | Height {height:.2f} m")


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--report", action="store_true", help="Print results for the default scene and exit")
    parser.add_argument("--config", type=Path, default=None, help="Settings file (JSON)")
    parser.add_argument("--log-level", default="INFO", help="Root logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = Config.load(args.config)

    if args.report:
        fixture, performer = default_scene(config)
        report = evaluate_scene(fixture, performer, stage_depth=config.STAGE_DEPTH_M)
        print(format_report(report, decimals=config.DECIMALS))
        return 0

    app = QtWidgets.QApplication(sys.argv)

    from BEAMGUARD.src.ui.theme import apply_theme
    apply_theme(app)

    window = MainWindow(config)
    window.show()
    logger.info("Window ready")

    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
