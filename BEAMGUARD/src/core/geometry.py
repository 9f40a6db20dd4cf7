"""Beam geometry engine: edge rays, head intersection and floor projections.

All functions are pure. Distances are metres, angles are degrees unless a
name says otherwise, heights are measured up from the floor.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from BEAMGUARD.src.core.coords import deg_to_rad, downward_component, rad_to_deg
from BEAMGUARD.src.core.types import BeamEdges, DistanceBearing, FixtureState, PerformerState

BEAM_LENGTH_M = 30.0
HEAD_TOLERANCE_DEG = 5.0
SAFETY_MARGIN_M = 0.3


def edge_angles(fixture: FixtureState) -> tuple[float, float]:
    """Return (upper, lower) edge angles; lower is aim + spread/2."""
    half = fixture.spread / 2.0
    return fixture.aim_angle - half, fixture.aim_angle + half


def compute_beam_edges(fixture: FixtureState, length: float = BEAM_LENGTH_M) -> BeamEdges:
    upper_deg, lower_deg = edge_angles(fixture)

    def endpoint(angle_deg: float) -> tuple[float, float]:
        theta = deg_to_rad(angle_deg)
        return (
            float(fixture.depth + np.cos(theta) * length),
            float(fixture.height + np.sin(theta) * length),
        )

    return BeamEdges(upper_deg, lower_deg, endpoint(upper_deg), endpoint(lower_deg))


def check_intersection(fixture: FixtureState, performer: PerformerState) -> bool:
    """True when the performer's head sits within 5 degrees of the lower beam edge.

    The tolerance is a fixed angular window and ignores `performer.radius`.
    Performers at or behind the fixture depth are never flagged.
    """
    _, lower_deg = edge_angles(fixture)
    d_depth = performer.depth - fixture.depth
    d_height = performer.height - fixture.height

    if d_depth <= 0:
        return False

    angle_to_top = float(np.arctan2(d_height, d_depth))
    angle_diff = abs(angle_to_top - deg_to_rad(lower_deg))
    return angle_diff < deg_to_rad(HEAD_TOLERANCE_DEG)


def compute_distance_and_bearing(fixture: FixtureState, performer: PerformerState) -> DistanceBearing:
    """Straight-line distance and bearing (positive when the fixture is above the performer)."""
    d_depth = performer.depth - fixture.depth
    d_height = fixture.height - performer.height
    distance = float(np.hypot(d_depth, d_height))
    bearing = rad_to_deg(float(np.arctan2(d_height, d_depth)))
    return DistanceBearing(distance, bearing)


def floor_intersection(fixture: FixtureState, angle_deg: float) -> Optional[float]:
    """Depth where a ray from the fixture at `angle_deg` meets the floor, or None if it never descends."""
    down = downward_component(angle_deg)
    if down <= 0:
        return None

    theta = deg_to_rad(angle_deg)
    distance_along_ray = fixture.height / abs(down)
    return float(fixture.depth + distance_along_ray * np.cos(theta))


def safety_line_floor_intersection(
    fixture: FixtureState,
    performer: PerformerState,
    margin: float = SAFETY_MARGIN_M,
) -> Optional[float]:
    """Floor depth of a taut line from the fixture grazing the performer's head plus `margin`.

    Returns None when the performer is not downstage of the fixture or the
    head-plus-margin point is not below the fixture.
    """
    target_height = performer.height + performer.radius + margin
    d_depth = performer.depth - fixture.depth
    d_height = target_height - fixture.height

    if d_depth <= 0 or d_height >= 0:
        return None

    angle_to_target = float(np.arctan2(d_height, d_depth))
    depth_from_performer = target_height / abs(float(np.tan(angle_to_target)))
    return performer.depth + depth_from_performer
