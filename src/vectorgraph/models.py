"""
Data models for the graph topology and geometry core.

This module contains the small value types passed between the topology
ledger, the geometry algorithms and the (external) rendering layer. None of
these types owns visual state: node geometry lives in the shape layer and is
only reached through the narrow NodeGeometryProvider capability.

Classes:
    Point: A 2D point.
    Center: Center of an elliptical node footprint.
    Radii: Horizontal and vertical radii of an elliptical node footprint.
    EdgeConnection: Source/target node ids of a registered edge.
    Bounds: Axis-aligned bounding box.
    ArrowPlacement: Position and tangent angle of a direction marker.
    NodeGeometryProvider: Protocol for querying a node's center and radii.
    EllipseNode: Minimal mutable NodeGeometryProvider implementation.
    EdgeLineType: How an edge between two distinct nodes is drawn.
    EdgeDirection: Which end of an edge carries the direction marker.
    EdgeRecord: Geometry values persisted with an edge.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

# Default radius for nodes created without an explicit size
DEFAULT_NODE_RADIUS = 30.0


@dataclass(frozen=True)
class Point:
    """A point in canvas coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Center:
    """Center of a node's boundary ellipse."""

    cx: float
    cy: float


@dataclass(frozen=True)
class Radii:
    """Radii of a node's boundary ellipse."""

    rx: float
    ry: float


@dataclass(frozen=True)
class EdgeConnection:
    """
    Endpoints of a registered edge.

    Attributes:
        source_id: Id of the node the edge starts at.
        target_id: Id of the node the edge ends at. Equal to source_id
            for a self-loop.
    """

    source_id: str
    target_id: str

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.target_id


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ArrowPlacement:
    """
    Where a direction marker sits and which way it points.

    Attributes:
        x: Marker tip x coordinate.
        y: Marker tip y coordinate.
        angle: Tangent direction in radians, pointing out of the path.
    """

    x: float
    y: float
    angle: float


@runtime_checkable
class NodeGeometryProvider(Protocol):
    """Capability for reading a node's elliptical footprint."""

    def get_center(self) -> Center:
        """Return the current center of the node."""
        ...

    def get_radii(self) -> Radii:
        """Return the current radii of the node."""
        ...


class EllipseNode:
    """
    Plain NodeGeometryProvider backed by four numbers.

    Useful for headless callers (imports, previews, tests) that have no
    shape object of their own. Attributes may be reassigned freely; the
    topology only ever reads them.
    """

    def __init__(
        self,
        cx: float,
        cy: float,
        rx: float = DEFAULT_NODE_RADIUS,
        ry: float = DEFAULT_NODE_RADIUS,
    ):
        self.cx = cx
        self.cy = cy
        self.rx = rx
        self.ry = ry

    def get_center(self) -> Center:
        return Center(self.cx, self.cy)

    def get_radii(self) -> Radii:
        return Radii(self.rx, self.ry)

    def move_to(self, cx: float, cy: float) -> None:
        self.cx = cx
        self.cy = cy

    def resize(self, rx: float, ry: float) -> None:
        self.rx = rx
        self.ry = ry

    def __repr__(self) -> str:
        return f"EllipseNode(cx={self.cx}, cy={self.cy}, rx={self.rx}, ry={self.ry})"


class EdgeLineType(Enum):
    """How an edge between two nodes is drawn."""

    STRAIGHT = "straight"
    CURVE = "curve"


class EdgeDirection(Enum):
    """Which end of an edge carries the direction marker."""

    FORWARD = "forward"
    BACKWARD = "backward"
    NONE = "none"


@dataclass
class EdgeRecord:
    """
    Geometry values written into an edge's persisted representation.

    These are computed once when the edge is created (or read back from a
    document) and stay fixed afterwards, so that reloading a file or
    replaying undo/redo reproduces the same drawing.

    Attributes:
        edge_id: Id of the edge.
        source_id: Id of the source node.
        target_id: Id of the target node.
        curve_offset: Signed perpendicular displacement of the control point.
        is_self_loop: True when source and target are the same node.
        self_loop_angle: Angular slot (radians) of a self-loop; 0 otherwise.
        line_type: Straight or curved rendering for non-loop edges.
        curve_amount: User override for curve_offset; 0 means "use offset".
        direction: Where the direction marker is drawn.
    """

    edge_id: str
    source_id: str
    target_id: str
    curve_offset: float = 0.0
    is_self_loop: bool = False
    self_loop_angle: float = 0.0
    line_type: EdgeLineType = EdgeLineType.STRAIGHT
    curve_amount: float = 0.0
    direction: EdgeDirection = EdgeDirection.FORWARD

    @property
    def effective_offset(self) -> float:
        """Offset actually used for drawing: curve_amount wins when set."""
        if self.line_type == EdgeLineType.STRAIGHT:
            return 0.0
        if self.curve_amount != 0:
            return self.curve_amount
        return self.curve_offset
