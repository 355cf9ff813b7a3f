"""
Geometry helpers for node boundaries and edge curves.

The connection point is an angular parametrization of the node ellipse,
not an exact ray/ellipse intersection: the angle from the node center to
the target is fed straight into (rx*cos, ry*sin). For circles the two
agree; for other ellipses the point lands slightly off the true
intersection. Saved documents and golden outputs depend on this formula,
so it must not be "corrected".
"""

import math
from typing import Iterable, Tuple

from .models import Bounds, Center, NodeGeometryProvider, Point, Radii


def resolve_connection_point(center: Center, radii: Radii, target: Point) -> Point:
    """
    Return where an edge heading towards target meets the node boundary.

    Args:
        center: Node center.
        radii: Node radii.
        target: Point the edge is heading towards.

    Returns:
        Point on the node's boundary ellipse.
    """
    angle = math.atan2(target.y - center.cy, target.x - center.cx)
    return Point(
        center.cx + radii.rx * math.cos(angle),
        center.cy + radii.ry * math.sin(angle),
    )


class ConnectionPointResolver:
    """Computes edge endpoints on elliptical node boundaries."""

    def resolve(self, center: Center, radii: Radii, target: Point) -> Point:
        return resolve_connection_point(center, radii, target)

    def resolve_for(self, provider: NodeGeometryProvider, target: Point) -> Point:
        """Resolve using a node's geometry provider."""
        return resolve_connection_point(
            provider.get_center(), provider.get_radii(), target
        )


def center_point(provider: NodeGeometryProvider) -> Point:
    """Return a provider's center as a Point."""
    center = provider.get_center()
    return Point(center.cx, center.cy)


def point_on_ellipse(center: Center, rx: float, ry: float, angle: float) -> Point:
    """Return the point at a given parametric angle on an ellipse."""
    return Point(center.cx + rx * math.cos(angle), center.cy + ry * math.sin(angle))


def perpendicular_control_point(
    start: Point, end: Point, offset: float
) -> Tuple[Point, bool]:
    """
    Displace the midpoint of start->end perpendicularly by offset.

    The perpendicular is the baseline direction rotated by +90 degrees,
    (-dy, dx) normalized.

    Returns:
        (control point, True) normally, or (midpoint, False) when start
        and end coincide and no perpendicular exists.
    """
    mid_x = (start.x + end.x) / 2
    mid_y = (start.y + end.y) / 2
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return Point(mid_x, mid_y), False
    perp_x = -dy / length
    perp_y = dx / length
    return Point(mid_x + perp_x * offset, mid_y + perp_y * offset), True


def quadratic_bezier_point(start: Point, ctrl: Point, end: Point, t: float) -> Point:
    mt = 1 - t
    return Point(
        mt * mt * start.x + 2 * mt * t * ctrl.x + t * t * end.x,
        mt * mt * start.y + 2 * mt * t * ctrl.y + t * t * end.y,
    )


def cubic_bezier_point(
    start: Point, ctrl1: Point, ctrl2: Point, end: Point, t: float
) -> Point:
    mt = 1 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(
        a * start.x + b * ctrl1.x + c * ctrl2.x + d * end.x,
        a * start.y + b * ctrl1.y + c * ctrl2.y + d * end.y,
    )


def distance_to_segment(point: Point, start: Point, end: Point) -> float:
    """Shortest distance from point to the segment start-end."""
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(point.x - start.x, point.y - start.y)

    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (start.x + t * dx), point.y - (start.y + t * dy))


def points_to_bounds(points: Iterable[Point]) -> Bounds:
    """Bounding box of a set of points; zero box for no points."""
    points = list(points)
    if not points:
        return Bounds(0, 0, 0, 0)
    min_x = min(p.x for p in points)
    min_y = min(p.y for p in points)
    max_x = max(p.x for p in points)
    max_y = max(p.y for p in points)
    return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)


def format_number(value: float) -> str:
    """Format a coordinate for path data: at most 3 decimals, no trailing zeros."""
    rounded = round(value, 3)
    if rounded == 0:
        return "0"
    return f"{rounded:.3f}".rstrip("0").rstrip(".")
