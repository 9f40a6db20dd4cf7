"""Value records passed into and out of the beam geometry engine."""

from __future__ import annotations

from typing import NamedTuple, Optional

BEAM_SPREAD_DEG = 50.0


class FixtureState(NamedTuple):
    """Laser fixture in stage coordinates (metres, degrees; positive aim = downward)."""

    depth: float
    height: float
    aim_angle: float

    @property
    def spread(self) -> float:
        return BEAM_SPREAD_DEG


class PerformerState(NamedTuple):
    depth: float
    height: float
    radius: float


class BeamEdges(NamedTuple):
    """Boundary rays of the beam cone and their endpoints at the projection length."""

    upper_angle: float
    lower_angle: float
    upper_end: tuple[float, float]
    lower_end: tuple[float, float]


class DistanceBearing(NamedTuple):
    distance: float
    bearing_deg: float


class SceneReport(NamedTuple):
    """Everything computed for one fixture/performer snapshot."""

    fixture: FixtureState
    performer: PerformerState
    edges: BeamEdges
    in_beam: bool
    distance: DistanceBearing
    upper_floor_depth: Optional[float]
    lower_floor_depth: Optional[float]
    safety_floor_depth: Optional[float]
    floor_width: Optional[float]
    stage_depth: float
