"""Conversions between the stage frame and degrees/radians or screen pixels.

Stage frame: depth grows away from the fixture wall, heights are measured up
from the floor, aim angles are positive toward the floor. Screen frame: pixel
y grows downward from the top of the stage.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from BEAMGUARD.src.core.types import BeamEdges, FixtureState, PerformerState


def deg_to_rad(deg: float) -> float:
    return float(np.radians(deg))


def rad_to_deg(rad: float) -> float:
    return float(np.degrees(rad))


def downward_component(angle_deg: float) -> float:
    """Fraction of a unit ray along `angle_deg` that points at the floor (> 0 descends)."""
    return float(np.sin(deg_to_rad(angle_deg)))


def stage_to_screen(depth: float, height: float, stage_height: float, scale: float) -> tuple[float, float]:
    """Map a stage point (m) to pixel coordinates with the y axis flipped."""
    return depth * scale, (stage_height - height) * scale


def screen_to_stage(x: float, y: float, stage_height: float, scale: float) -> tuple[float, float]:
    return x / scale, stage_height - y / scale


def beam_polygon(fixture: FixtureState, edges: BeamEdges) -> np.ndarray:
    """Triangle (fixture, upper endpoint, lower endpoint) as a (3, 2) array of stage points."""
    return np.array(
        [
            (fixture.depth, fixture.height),
            edges.upper_end,
            edges.lower_end,
        ],
        dtype=np.float64,
    )


def safety_line_points(
    fixture: FixtureState,
    performer: PerformerState,
    floor_depth: Optional[float],
    margin: float,
) -> np.ndarray:
    """Polyline from the fixture over the performer's head-plus-margin point to the floor.

    When the line never reaches the floor only the first segment is returned.
    """
    target = (performer.depth, performer.height + performer.radius + margin)
    points = [(fixture.depth, fixture.height), target]
    if floor_depth is not None:
        points.append((floor_depth, 0.0))
    return np.array(points, dtype=np.float64)


def to_screen_array(points: np.ndarray, stage_height: float, scale: float) -> np.ndarray:
    """Vectorized `stage_to_screen` over an (N, 2) array."""
    pts = np.asarray(points, dtype=np.float64)
    out = np.empty_like(pts)
    out[:, 0] = pts[:, 0] * scale
    out[:, 1] = (stage_height - pts[:, 1]) * scale
    return out
