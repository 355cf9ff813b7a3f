"""
Edge path geometry.

Turns an EdgeRecord plus its endpoints' geometry providers into the
concrete path the rendering layer draws:

- straight edges: a line between the two connection points
- curved edges: a quadratic bezier whose control point is the baseline
  midpoint pushed sideways by the effective curve offset, with both
  endpoints re-resolved towards that control point
- self-loops: a cubic bezier leaving and re-entering the node boundary
  pi/6 either side of the loop's angular slot

Everything here is a pure function of the current node geometry; nothing
is cached, so a path computed right after a node moves reflects the move.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .geometry import (
    ConnectionPointResolver,
    center_point,
    cubic_bezier_point,
    distance_to_segment,
    format_number,
    perpendicular_control_point,
    point_on_ellipse,
    points_to_bounds,
    quadratic_bezier_point,
)
from .models import (
    ArrowPlacement,
    Bounds,
    EdgeDirection,
    EdgeRecord,
    NodeGeometryProvider,
    Point,
)

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Self-loop reach beyond the boundary, as a multiple of the larger radius
SELF_LOOP_SIZE_FACTOR = 1.5

# Half-angle between a self-loop's exit and entry points
SELF_LOOP_SPREAD = math.pi / 6

# Fraction of the loop size at which the loop's label anchor sits
SELF_LOOP_LABEL_FACTOR = 0.7

# Default pick tolerance (canvas units) for hit testing
HIT_TEST_TOLERANCE = 5

# Segments used to approximate curves for hit testing and previews
CURVE_SAMPLE_STEPS = 20


class PathKind(Enum):
    """Shape of a computed edge path."""

    LINE = "line"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"


@dataclass
class EdgePath:
    """
    A computed edge path.

    Attributes:
        kind: LINE, QUADRATIC or CUBIC.
        start: First point of the path (on the source boundary).
        end: Last point of the path (on the target boundary).
        controls: 0, 1 or 2 bezier control points depending on kind.
    """

    kind: PathKind
    start: Point
    end: Point
    controls: List[Point] = field(default_factory=list)

    def point_at(self, t: float) -> Point:
        """Point at parameter t in [0, 1]."""
        if self.kind == PathKind.QUADRATIC:
            return quadratic_bezier_point(self.start, self.controls[0], self.end, t)
        if self.kind == PathKind.CUBIC:
            return cubic_bezier_point(
                self.start, self.controls[0], self.controls[1], self.end, t
            )
        return Point(
            self.start.x + (self.end.x - self.start.x) * t,
            self.start.y + (self.end.y - self.start.y) * t,
        )

    def sample(self, steps: int = CURVE_SAMPLE_STEPS) -> List[Point]:
        """Polyline approximation: steps+1 points for curves, 2 for lines."""
        if self.kind == PathKind.LINE:
            return [self.start, self.end]
        return [self.point_at(i / steps) for i in range(steps + 1)]

    def to_path_data(self) -> str:
        """SVG path data string."""
        f = format_number
        head = f"M {f(self.start.x)} {f(self.start.y)}"
        end = f"{f(self.end.x)} {f(self.end.y)}"
        if self.kind == PathKind.QUADRATIC:
            c = self.controls[0]
            return f"{head} Q {f(c.x)} {f(c.y)} {end}"
        if self.kind == PathKind.CUBIC:
            c1, c2 = self.controls
            return f"{head} C {f(c1.x)} {f(c1.y)} {f(c2.x)} {f(c2.y)} {end}"
        return f"{head} L {end}"


class EdgePathBuilder:
    """
    Computes path, marker, label anchor, bounds and hit tests for one edge.

    Example:
        >>> source = EllipseNode(0, 0)
        >>> target = EllipseNode(200, 0)
        >>> record = EdgeRecord("e1", "a", "b")
        >>> EdgePathBuilder(record, source, target).path_data()
        'M 30 0 L 170 0'
    """

    def __init__(
        self,
        record: EdgeRecord,
        source: NodeGeometryProvider,
        target: NodeGeometryProvider,
        resolver: Optional[ConnectionPointResolver] = None,
        self_loop_size_factor: float = SELF_LOOP_SIZE_FACTOR,
        self_loop_spread: float = SELF_LOOP_SPREAD,
    ):
        self.record = record
        self.source = source
        self.target = target
        self.resolver = resolver or ConnectionPointResolver()
        self.self_loop_size_factor = self_loop_size_factor
        self.self_loop_spread = self_loop_spread

    # ------------------------------------------------------------------
    # Path construction
    # ------------------------------------------------------------------

    def straight_endpoints(self):
        """Connection points along the center-to-center line."""
        start = self.resolver.resolve_for(self.source, center_point(self.target))
        end = self.resolver.resolve_for(self.target, center_point(self.source))
        return start, end

    def path(self) -> EdgePath:
        """Compute the edge path for the current node geometry."""
        if self.record.is_self_loop:
            return self._self_loop_path()

        start, end = self.straight_endpoints()
        offset = self.record.effective_offset
        if offset == 0:
            return EdgePath(PathKind.LINE, start, end)

        ctrl, ok = perpendicular_control_point(start, end, offset)
        if not ok:
            return EdgePath(PathKind.LINE, start, end)

        new_start = self.resolver.resolve_for(self.source, ctrl)
        new_end = self.resolver.resolve_for(self.target, ctrl)
        return EdgePath(PathKind.QUADRATIC, new_start, new_end, [ctrl])

    def _loop_size(self) -> float:
        radii = self.source.get_radii()
        return max(radii.rx, radii.ry) * self.self_loop_size_factor

    def _self_loop_path(self) -> EdgePath:
        center = self.source.get_center()
        radii = self.source.get_radii()
        loop = self._loop_size()
        start_angle = self.record.self_loop_angle - self.self_loop_spread
        end_angle = self.record.self_loop_angle + self.self_loop_spread

        start = point_on_ellipse(center, radii.rx, radii.ry, start_angle)
        end = point_on_ellipse(center, radii.rx, radii.ry, end_angle)
        ctrl1 = point_on_ellipse(center, radii.rx + loop, radii.ry + loop, start_angle)
        ctrl2 = point_on_ellipse(center, radii.rx + loop, radii.ry + loop, end_angle)
        return EdgePath(PathKind.CUBIC, start, end, [ctrl1, ctrl2])

    def path_data(self) -> str:
        return self.path().to_path_data()

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------

    def arrow_placement(
        self, direction: Optional[EdgeDirection] = None
    ) -> Optional[ArrowPlacement]:
        """
        Tip position and tangent angle of the direction marker.

        Args:
            direction: Overrides the record's direction when given.

        Returns:
            None for EdgeDirection.NONE. A zero-length edge still gets a
            marker, pointing along angle 0.
        """
        direction = direction or self.record.direction
        if direction == EdgeDirection.NONE:
            return None

        path = self.path()
        if direction == EdgeDirection.FORWARD:
            tip = path.end
            before = path.controls[-1] if path.controls else path.start
        else:
            tip = path.start
            before = path.controls[0] if path.controls else path.end

        angle = math.atan2(tip.y - before.y, tip.x - before.x)
        return ArrowPlacement(tip.x, tip.y, angle)

    def midpoint(self) -> Point:
        """Anchor for the edge label."""
        if self.record.is_self_loop:
            center = self.source.get_center()
            radii = self.source.get_radii()
            reach = self._loop_size() * SELF_LOOP_LABEL_FACTOR
            return point_on_ellipse(
                center, radii.rx + reach, radii.ry + reach, self.record.self_loop_angle
            )
        return self.path().point_at(0.5)

    def bounds(self) -> Bounds:
        """Bounding box of the path's endpoints and control points."""
        path = self.path()
        return points_to_bounds([path.start, path.end, *path.controls])

    def hit_test(self, point: Point, tolerance: float = HIT_TEST_TOLERANCE) -> bool:
        """True when point lies within tolerance of the drawn path."""
        samples = self.path().sample()
        return any(
            distance_to_segment(point, a, b) <= tolerance
            for a, b in zip(samples, samples[1:])
        )
