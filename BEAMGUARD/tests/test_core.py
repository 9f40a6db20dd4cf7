import importlib.util
import json
import math
import unittest
from pathlib import Path
import tempfile
import sys
import numpy as np

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from BEAMGUARD.config import Config
from BEAMGUARD.src.core.coords import (
    beam_polygon,
    downward_component,
    safety_line_points,
    screen_to_stage,
    stage_to_screen,
    to_screen_array,
)
from BEAMGUARD.src.core.geometry import (
    BEAM_LENGTH_M,
    check_intersection,
    compute_beam_edges,
    compute_distance_and_bearing,
    edge_angles,
    floor_intersection,
    safety_line_floor_intersection,
)
from BEAMGUARD.src.core.scene import evaluate_scene, floor_width, format_report, on_stage
from BEAMGUARD.src.core.types import BEAM_SPREAD_DEG, FixtureState, PerformerState


def on_ray_height(fixture: FixtureState, depth: float, angle_deg: float) -> float:
    return fixture.height + (depth - fixture.depth) * math.tan(math.radians(angle_deg))


class TestConfig(unittest.TestCase):
    def test_save_load_roundtrip(self):
        cfg = Config()
        cfg.SCALE_PX_PER_M = 32.0
        cfg.DEFAULT_AIM_DEG = 30.0
        cfg.SHOW_GRID = False

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            cfg.save(path)
            loaded = Config.load(path)

        self.assertAlmostEqual(loaded.SCALE_PX_PER_M, 32.0)
        self.assertAlmostEqual(loaded.DEFAULT_AIM_DEG, 30.0)
        self.assertFalse(loaded.SHOW_GRID)

    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            loaded = Config.load(Path(td) / "absent.json")
        self.assertEqual(loaded, Config())

    def test_corrupt_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text("{not json")
            with self.assertLogs("BEAMGUARD.config", level="ERROR"):
                loaded = Config.load(path)
        self.assertEqual(loaded, Config())

    def test_invalid_value_is_skipped(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text(json.dumps({"SCALE_PX_PER_M": "wide", "DECIMALS": 3}))
            with self.assertLogs("BEAMGUARD.config", level="WARNING"):
                loaded = Config.load(path)
        self.assertEqual(loaded.SCALE_PX_PER_M, Config().SCALE_PX_PER_M)
        self.assertEqual(loaded.DECIMALS, 3)

    def test_normalize_swaps_ranges_and_clamps_defaults(self):
        cfg = Config()
        cfg.AIM_MIN_DEG, cfg.AIM_MAX_DEG = 90.0, -90.0
        cfg.DEFAULT_PERFORMER_HEIGHT_M = 2.4
        cfg.DEFAULT_AIM_DEG = -120.0
        cfg.normalize()
        self.assertEqual((cfg.AIM_MIN_DEG, cfg.AIM_MAX_DEG), (-90.0, 90.0))
        self.assertEqual(cfg.DEFAULT_PERFORMER_HEIGHT_M, cfg.PERFORMER_HEIGHT_MAX_M)
        self.assertEqual(cfg.DEFAULT_AIM_DEG, -90.0)

    def test_negative_decimals_are_clamped(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text(json.dumps({"DECIMALS": -1}))
            with self.assertLogs("BEAMGUARD.config", level="WARNING"):
                loaded = Config.load(path)
        self.assertEqual(loaded.DECIMALS, 0)

        report = evaluate_scene(FixtureState(0.0, 10.0, 60.0), PerformerState(5.0, 1.7, 0.3))
        text = format_report(report, decimals=loaded.DECIMALS)
        self.assertIn("Distance to performer:", text)

    def test_large_decimals_are_clamped(self):
        cfg = Config()
        cfg.DECIMALS = 40
        cfg.normalize()
        self.assertEqual(cfg.DECIMALS, 6)

    def test_non_positive_grid_step_restored(self):
        for step in (0, -2.0):
            with tempfile.TemporaryDirectory() as td:
                path = Path(td) / "config.json"
                path.write_text(json.dumps({"GRID_STEP_M": step}))
                with self.assertLogs("BEAMGUARD.config", level="WARNING"):
                    loaded = Config.load(path)
            self.assertEqual(loaded.GRID_STEP_M, Config().GRID_STEP_M)
            step_px = loaded.GRID_STEP_M * loaded.SCALE_PX_PER_M
            width_px = loaded.STAGE_DEPTH_M * loaded.SCALE_PX_PER_M
            xs = np.arange(0.0, width_px + 0.5 * step_px, step_px)
            self.assertEqual(len(xs), 21)


class TestBeamEdges(unittest.TestCase):
    def test_spread_is_fixed(self):
        fixture = FixtureState(0.0, 10.0, 0.0)
        self.assertEqual(fixture.spread, BEAM_SPREAD_DEG)
        self.assertEqual(edge_angles(fixture), (-25.0, 25.0))

    def test_spread_cannot_be_overridden(self):
        with self.assertRaises(TypeError):
            FixtureState(0.0, 10.0, 0.0, 80.0)
        with self.assertRaises(AttributeError):
            FixtureState(0.0, 10.0, 0.0).spread = 80.0
        self.assertEqual(len(FixtureState(0.0, 10.0, 0.0)), 3)

    def test_horizontal_endpoints(self):
        fixture = FixtureState(2.0, 10.0, 0.0)
        edges = compute_beam_edges(fixture)
        self.assertEqual(edges.upper_angle, -25.0)
        self.assertEqual(edges.lower_angle, 25.0)

        c = math.cos(math.radians(25.0)) * BEAM_LENGTH_M
        s = math.sin(math.radians(25.0)) * BEAM_LENGTH_M
        self.assertAlmostEqual(edges.upper_end[0], 2.0 + c)
        self.assertAlmostEqual(edges.upper_end[1], 10.0 - s)
        self.assertAlmostEqual(edges.lower_end[0], 2.0 + c)
        self.assertAlmostEqual(edges.lower_end[1], 10.0 + s)

    def test_aim_recovered_from_endpoints(self):
        for aim in (-90.0, -45.0, -10.0, 0.0, 30.0, 72.0, 90.0):
            fixture = FixtureState(3.0, 8.0, aim)
            edges = compute_beam_edges(fixture)
            angles = [
                math.degrees(math.atan2(end[1] - fixture.height, end[0] - fixture.depth))
                for end in (edges.upper_end, edges.lower_end)
            ]
            self.assertAlmostEqual(sum(angles) / 2.0, aim, places=9)


class TestFloorIntersection(unittest.TestCase):
    def test_horizontal_aim(self):
        fixture = FixtureState(0.0, 10.0, 0.0)
        upper, lower = edge_angles(fixture)
        self.assertIsNone(floor_intersection(fixture, upper))
        self.assertAlmostEqual(floor_intersection(fixture, lower), 10.0 / math.tan(math.radians(25.0)))
        self.assertAlmostEqual(floor_intersection(fixture, lower), 21.45, places=2)

    def test_straight_down_lands_below_fixture(self):
        fixture = FixtureState(0.0, 10.0, 90.0)
        self.assertAlmostEqual(floor_intersection(fixture, fixture.aim_angle), 0.0, places=9)

        moved = FixtureState(4.5, 6.0, 90.0)
        self.assertAlmostEqual(floor_intersection(moved, 90.0), 4.5, places=9)

    def test_level_and_rising_rays_never_land(self):
        fixture = FixtureState(0.0, 10.0, 0.0)
        for angle in (0.0, -1.0, -45.0, -90.0, -135.0):
            self.assertIsNone(floor_intersection(fixture, angle))

    def test_past_vertical_lands_behind_fixture(self):
        fixture = FixtureState(5.0, 10.0, 90.0)
        depth = floor_intersection(fixture, 115.0)
        self.assertLess(depth, 5.0)
        self.assertAlmostEqual(depth, 5.0 - 10.0 / math.tan(math.radians(65.0)))

    def test_downward_component(self):
        self.assertAlmostEqual(downward_component(90.0), 1.0)
        self.assertLess(downward_component(-25.0), 0.0)
        self.assertAlmostEqual(downward_component(0.0), 0.0)


class TestCheckIntersection(unittest.TestCase):
    def setUp(self):
        self.fixture = FixtureState(0.0, 10.0, -45.0)

    def test_performer_behind_fixture_is_never_flagged(self):
        self.assertFalse(check_intersection(FixtureState(5.0, 5.0, -45.0), PerformerState(0.0, 0.0, 0.3)))
        self.assertFalse(check_intersection(FixtureState(5.0, 5.0, 0.0), PerformerState(5.0, 1.7, 0.3)))
        for aim in (-90.0, -20.0, 0.0, 45.0, 90.0):
            fixture = FixtureState(8.0, 10.0, aim)
            self.assertFalse(check_intersection(fixture, PerformerState(3.0, 1.7, 0.3)))

    def test_performer_on_lower_edge(self):
        _, lower = edge_angles(self.fixture)
        self.assertEqual(lower, -20.0)
        performer = PerformerState(10.0, on_ray_height(self.fixture, 10.0, -20.0), 0.3)
        self.assertTrue(check_intersection(self.fixture, performer))

    def test_tolerance_window(self):
        for offset, expected in ((4.0, True), (-4.0, True), (6.0, False), (-6.0, False)):
            height = on_ray_height(self.fixture, 10.0, -20.0 + offset)
            performer = PerformerState(10.0, height, 0.3)
            self.assertEqual(check_intersection(self.fixture, performer), expected, offset)

    def test_radius_does_not_widen_window(self):
        height = on_ray_height(self.fixture, 10.0, -26.0)
        for radius in (0.2, 1.0, 5.0):
            self.assertFalse(check_intersection(self.fixture, PerformerState(10.0, height, radius)))


class TestDistanceAndBearing(unittest.TestCase):
    def test_fixture_above_performer(self):
        res = compute_distance_and_bearing(FixtureState(0.0, 10.0, 0.0), PerformerState(5.0, 1.7, 0.3))
        self.assertAlmostEqual(res.distance, math.hypot(5.0, 8.3))
        self.assertAlmostEqual(res.bearing_deg, math.degrees(math.atan2(8.3, 5.0)))
        self.assertGreater(res.bearing_deg, 0.0)

    def test_swapping_vertical_order(self):
        above = compute_distance_and_bearing(FixtureState(1.0, 9.0, 0.0), PerformerState(6.0, 2.0, 0.3))
        below = compute_distance_and_bearing(FixtureState(1.0, 2.0, 0.0), PerformerState(6.0, 9.0, 0.3))
        self.assertAlmostEqual(above.distance, below.distance)
        self.assertAlmostEqual(above.bearing_deg, -below.bearing_deg)

    def test_zero_distance(self):
        res = compute_distance_and_bearing(FixtureState(3.0, 1.8, 0.0), PerformerState(3.0, 1.8, 0.3))
        self.assertEqual(res.distance, 0.0)
        self.assertEqual(res.bearing_deg, 0.0)


class TestSafetyLine(unittest.TestCase):
    def test_floor_point_beyond_performer(self):
        fixture = FixtureState(0.0, 10.0, -45.0)
        performer = PerformerState(5.0, 1.7, 0.3)
        depth = safety_line_floor_intersection(fixture, performer)
        target = 1.7 + 0.3 + 0.3
        expected = 5.0 + target / ((10.0 - target) / 5.0)
        self.assertAlmostEqual(depth, expected)
        self.assertGreater(depth, performer.depth)

    def test_line_is_straight(self):
        fixture = FixtureState(1.0, 12.0, 0.0)
        performer = PerformerState(7.0, 1.8, 0.5)
        depth = safety_line_floor_intersection(fixture, performer, margin=0.3)
        target = performer.height + performer.radius + 0.3
        slope_head = (fixture.height - target) / (performer.depth - fixture.depth)
        slope_floor = fixture.height / (depth - fixture.depth)
        self.assertAlmostEqual(slope_head, slope_floor)

    def test_target_at_or_above_fixture(self):
        performer = PerformerState(5.0, 1.5, 0.5)
        self.assertIsNone(safety_line_floor_intersection(FixtureState(0.0, 2.5, 0.0), performer, margin=0.5))
        self.assertIsNone(safety_line_floor_intersection(FixtureState(0.0, 2.0, 0.0), performer))
        self.assertIsNotNone(safety_line_floor_intersection(FixtureState(0.0, 2.6, 0.0), performer, margin=0.5))

    def test_performer_not_downstage(self):
        performer = PerformerState(2.0, 1.7, 0.3)
        self.assertIsNone(safety_line_floor_intersection(FixtureState(2.0, 10.0, 0.0), performer))
        self.assertIsNone(safety_line_floor_intersection(FixtureState(6.0, 10.0, 0.0), performer))

    def test_custom_margin(self):
        fixture = FixtureState(0.0, 10.0, 0.0)
        performer = PerformerState(5.0, 1.7, 0.3)
        near = safety_line_floor_intersection(fixture, performer, margin=0.0)
        far = safety_line_floor_intersection(fixture, performer, margin=1.0)
        self.assertLess(near, far)


class TestScene(unittest.TestCase):
    def test_on_stage(self):
        self.assertFalse(on_stage(None))
        self.assertFalse(on_stage(-0.01))
        self.assertTrue(on_stage(0.0))
        self.assertTrue(on_stage(20.0))
        self.assertFalse(on_stage(20.01))
        self.assertTrue(on_stage(25.0, stage_depth=30.0))

    def test_floor_width(self):
        self.assertAlmostEqual(floor_width(3.0, 11.5), 8.5)
        self.assertAlmostEqual(floor_width(11.5, 3.0), 8.5)
        self.assertIsNone(floor_width(None, 3.0))
        self.assertIsNone(floor_width(3.0, 27.0))

    def test_default_scene(self):
        fixture = FixtureState(0.0, 10.0, -45.0)
        performer = PerformerState(5.0, 1.7, 0.3)
        report = evaluate_scene(fixture, performer)

        self.assertEqual((report.edges.upper_angle, report.edges.lower_angle), (-70.0, -20.0))
        self.assertFalse(report.in_beam)
        self.assertIsNone(report.upper_floor_depth)
        self.assertIsNone(report.lower_floor_depth)
        self.assertIsNone(report.floor_width)
        self.assertAlmostEqual(report.safety_floor_depth, safety_line_floor_intersection(fixture, performer))

        text = format_report(report)
        self.assertNotIn("WARNING", text)
        self.assertEqual(text.count("does not reach the floor"), 2)
        self.assertIn(f"{report.safety_floor_depth:.2f} m", text)
        self.assertIn("Spread: 50° (fixed)", text)

    def test_downward_scene_reports_width(self):
        fixture = FixtureState(0.0, 10.0, 60.0)
        report = evaluate_scene(fixture, PerformerState(5.0, 1.7, 0.3))
        upper = 10.0 / math.tan(math.radians(35.0))
        lower = 10.0 / math.tan(math.radians(85.0))
        self.assertAlmostEqual(report.upper_floor_depth, upper)
        self.assertAlmostEqual(report.lower_floor_depth, lower)
        self.assertAlmostEqual(report.floor_width, upper - lower)
        self.assertIn("Illuminated floor width", format_report(report))

    def test_off_stage_mark_is_hidden(self):
        fixture = FixtureState(0.0, 10.0, 45.0)
        report = evaluate_scene(fixture, PerformerState(5.0, 1.7, 0.3))
        self.assertGreater(report.upper_floor_depth, 20.0)
        self.assertIsNone(report.floor_width)
        self.assertIn("Upper edge floor mark: does not reach the floor", format_report(report))

    def test_warning_line(self):
        fixture = FixtureState(0.0, 10.0, -45.0)
        performer = PerformerState(10.0, on_ray_height(fixture, 10.0, -20.0), 0.3)
        report = evaluate_scene(fixture, performer)
        self.assertTrue(report.in_beam)
        self.assertTrue(format_report(report).startswith("WARNING"))

    def test_evaluation_is_repeatable(self):
        fixture = FixtureState(1.0, 7.5, 20.0)
        performer = PerformerState(6.0, 1.8, 0.4)
        self.assertEqual(evaluate_scene(fixture, performer), evaluate_scene(fixture, performer))


class TestCoords(unittest.TestCase):
    def test_stage_to_screen_flips_height(self):
        self.assertEqual(stage_to_screen(0.0, 0.0, 20.0, 20.0), (0.0, 400.0))
        self.assertEqual(stage_to_screen(5.0, 10.0, 20.0, 20.0), (100.0, 200.0))
        self.assertEqual(screen_to_stage(100.0, 200.0, 20.0, 20.0), (5.0, 10.0))

    def test_to_screen_array(self):
        pts = np.array([[0.0, 0.0], [5.0, 10.0], [20.0, 20.0]])
        out = to_screen_array(pts, 20.0, 20.0)
        np.testing.assert_allclose(out, [[0.0, 400.0], [100.0, 200.0], [400.0, 0.0]])

    def test_beam_polygon(self):
        fixture = FixtureState(2.0, 9.0, 10.0)
        edges = compute_beam_edges(fixture)
        poly = beam_polygon(fixture, edges)
        self.assertEqual(poly.shape, (3, 2))
        np.testing.assert_allclose(poly[0], [2.0, 9.0])
        np.testing.assert_allclose(poly[1], edges.upper_end)
        np.testing.assert_allclose(poly[2], edges.lower_end)

    def test_safety_line_points(self):
        fixture = FixtureState(0.0, 10.0, 0.0)
        performer = PerformerState(5.0, 1.7, 0.3)
        short = safety_line_points(fixture, performer, None, 0.3)
        self.assertEqual(short.shape, (2, 2))
        np.testing.assert_allclose(short[1], [5.0, 2.3])

        full = safety_line_points(fixture, performer, 6.5, 0.3)
        self.assertEqual(full.shape, (3, 2))
        np.testing.assert_allclose(full[2], [6.5, 0.0])


@unittest.skipUnless(importlib.util.find_spec("PyQt5"), "PyQt5 not installed")
class TestUiText(unittest.TestCase):
    def test_help_mentions_cone_and_floor_mark_conventions(self):
        from BEAMGUARD.main import USAGE_NOTES
        self.assertIn("does not reach the floor", USAGE_NOTES)
        self.assertIn("upward", USAGE_NOTES)
        self.assertIn("downward", USAGE_NOTES)

    def test_plot_colors_only_expose_used_keys(self):
        from BEAMGUARD.src.ui import theme
        self.assertEqual(set(theme.get_plot_colors()), {"background", "grid"})
        for name in ("HEX_BG_DARK", "HEX_TEXT", "HEX_ACCENT", "COLOR_SUCCESS", "COLOR_WARNING"):
            self.assertFalse(hasattr(theme, name), name)


if __name__ == "__main__":
    unittest.main()
