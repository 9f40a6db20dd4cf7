"""Per-snapshot evaluation: run every engine operation once and summarize."""

from __future__ import annotations

import logging
from typing import Optional

from BEAMGUARD.src.core.geometry import (
    SAFETY_MARGIN_M,
    check_intersection,
    compute_beam_edges,
    compute_distance_and_bearing,
    floor_intersection,
    safety_line_floor_intersection,
)
from BEAMGUARD.src.core.types import FixtureState, PerformerState, SceneReport

logger = logging.getLogger(__name__)

DEFAULT_STAGE_DEPTH_M = 20.0


def on_stage(depth: Optional[float], stage_depth: float = DEFAULT_STAGE_DEPTH_M) -> bool:
    """True when a floor mark exists and lands between the back wall and the stage edge."""
    return depth is not None and 0.0 <= depth <= stage_depth


def floor_width(
    upper: Optional[float], lower: Optional[float], stage_depth: float = DEFAULT_STAGE_DEPTH_M
) -> Optional[float]:
    if on_stage(upper, stage_depth) and on_stage(lower, stage_depth):
        return abs(lower - upper)
    return None


def evaluate_scene(
    fixture: FixtureState,
    performer: PerformerState,
    stage_depth: float = DEFAULT_STAGE_DEPTH_M,
) -> SceneReport:
    edges = compute_beam_edges(fixture)
    upper_floor = floor_intersection(fixture, edges.upper_angle)
    lower_floor = floor_intersection(fixture, edges.lower_angle)
    in_beam = check_intersection(fixture, performer)

    report = SceneReport(
        fixture=fixture,
        performer=performer,
        edges=edges,
        in_beam=in_beam,
        distance=compute_distance_and_bearing(fixture, performer),
        upper_floor_depth=upper_floor,
        lower_floor_depth=lower_floor,
        safety_floor_depth=safety_line_floor_intersection(fixture, performer),
        floor_width=floor_width(upper_floor, lower_floor, stage_depth),
        stage_depth=stage_depth,
    )
    if in_beam:
        logger.debug("Lower beam edge meets performer at depth %.2f m", performer.depth)
    return report


def _floor_line(label: str, depth: Optional[float], stage_depth: float, decimals: int) -> str:
    if on_stage(depth, stage_depth):
        return f"{label}: {depth:.{decimals}f} m"
    return f"{label}: does not reach the floor"


def format_report(report: SceneReport, decimals: int = 2) -> str:
    """Human readable summary of a scene, one fact per line."""
    f = report.fixture
    lines = []
    if report.in_beam:
        lines.append("WARNING: lower beam edge is grazing the performer!")

    lines += [
        f"Distance to performer: {report.distance.distance:.{decimals}f} m",
        f"Bearing to performer: {report.distance.bearing_deg:.1f}°",
        f"Aim angle: {f.aim_angle:.1f}°",
        f"Spread: {f.spread:g}° (fixed)",
        _floor_line("Upper edge floor mark", report.upper_floor_depth, report.stage_depth, decimals),
        _floor_line("Lower edge floor mark", report.lower_floor_depth, report.stage_depth, decimals),
        _floor_line(
            f"Head +{SAFETY_MARGIN_M:g} m line floor mark",
            report.safety_floor_depth,
            report.stage_depth,
            decimals,
        ),
    ]
    if report.floor_width is not None:
        lines.append(f"Illuminated floor width: {report.floor_width:.{decimals}f} m")
    return "\n".join(lines)
