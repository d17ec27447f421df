"""
Crossing search between two piecewise-linear trajectories.

Every trajectory is treated as a polyline through ``(age, value)`` vertices.
The search is exhaustive over segment pairs; trajectories are bounded by a
human lifespan so the quadratic cost never matters.
"""

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict

from freedom_point.models.trajectory import Point, Trajectory

PointLike = Union[Point, Tuple[float, float]]
Polyline = Union[Trajectory, Sequence[PointLike]]


class NoFreedomPoint(BaseModel):
    """The savings and required capital curves never meet within the plan."""

    model_config = ConfigDict(frozen=True)

    reason: str = "Plan does not reach financial freedom within its horizon"

    def __bool__(self) -> bool:
        return False


FreedomPointOutcome = Union[Point, NoFreedomPoint]


def _xy(point: PointLike) -> Tuple[float, float]:
    if isinstance(point, Point):
        return point.x, point.y
    x, y = point
    return float(x), float(y)


def _vertices(polyline: Polyline) -> List[Tuple[float, float]]:
    if isinstance(polyline, Trajectory):
        return [point.as_tuple() for point in polyline.points()]
    return [_xy(point) for point in polyline]


def segment_intersection(
    p0: PointLike, p1: PointLike, p2: PointLike, p3: PointLike
) -> Optional[Point]:
    """
    Intersection of segment p0->p1 with segment p2->p3.

    Args:
        p0, p1: Endpoints of the first segment
        p2, p3: Endpoints of the second segment

    Returns:
        The crossing point, or None when the segments do not touch. Parallel
        and zero-length segments make the parameters non-finite and also
        yield None.
    """
    p0_x, p0_y = _xy(p0)
    p1_x, p1_y = _xy(p1)
    p2_x, p2_y = _xy(p2)
    p3_x, p3_y = _xy(p3)

    s1_x = p1_x - p0_x
    s1_y = p1_y - p0_y
    s2_x = p3_x - p2_x
    s2_y = p3_y - p2_y

    denominator = np.float64(-s2_x * s1_y + s1_x * s2_y)
    with np.errstate(divide="ignore", invalid="ignore"):
        s = np.float64(-s1_y * (p0_x - p2_x) + s1_x * (p0_y - p2_y)) / denominator
        t = np.float64(s2_x * (p0_y - p2_y) - s2_y * (p0_x - p2_x)) / denominator

    if not (np.isfinite(s) and np.isfinite(t)):
        return None

    if 0 <= s <= 1 and 0 <= t <= 1:
        return Point(x=float(p0_x + t * s1_x), y=float(p0_y + t * s1_y))

    return None


def find_all_crossings(trajectory_a: Polyline, trajectory_b: Polyline) -> List[Point]:
    """
    Every crossing of two polylines, in discovery order.

    Segments of ``trajectory_a`` drive the outer loop and segments of
    ``trajectory_b`` the inner one, so hits are ordered A-segment first.
    A crossing exactly on a shared vertex is reported once per segment pair
    that touches it.
    """
    vertices_a = _vertices(trajectory_a)
    vertices_b = _vertices(trajectory_b)

    crossings: List[Point] = []
    for i in range(1, len(vertices_a)):
        for j in range(1, len(vertices_b)):
            hit = segment_intersection(
                vertices_a[i - 1], vertices_a[i], vertices_b[j - 1], vertices_b[j]
            )
            if hit is not None:
                crossings.append(hit)
    return crossings


def first_crossing(crossings: Sequence[Point]) -> FreedomPointOutcome:
    """First discovered crossing, or the explicit no-crossing outcome."""
    if not crossings:
        return NoFreedomPoint()
    return crossings[0]


def financial_freedom_point(
    trajectory_a: Polyline, trajectory_b: Polyline
) -> FreedomPointOutcome:
    """
    The Financial Freedom Point of two trajectories.

    This is the first crossing in discovery order, which is not necessarily
    the chronologically earliest one when the curves cross several times.
    """
    return first_crossing(find_all_crossings(trajectory_a, trajectory_b))
