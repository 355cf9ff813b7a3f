"""
vectorgraph - graph topology and layout geometry for a vector diagram editor

Keeps a node/edge graph consistent while shapes are created, moved, resized
and deleted, and derives the geometry needed to draw it: boundary connection
points, parallel-edge curve offsets and self-loop slots.

Example:
    >>> from vectorgraph import EllipseNode, GraphSession
    >>> session = GraphSession()
    >>> session.add_node("a", EllipseNode(0, 0))
    >>> session.add_node("b", EllipseNode(200, 0))
    >>> record = session.add_edge("e1", "a", "b")
    >>> session.edge_path("e1").path_data()
    'M 30 0 L 170 0'

Redrawing edges when a node moves:
    >>> session.propagator.set_update_callback(redraw_edge)
    >>> session.move_node("a")  # calls redraw_edge("e1")
"""

from .debug import TopologyInspector
from .edge_geometry import EdgePath, EdgePathBuilder, PathKind
from .export import GraphExporter, LabelValidationResult, LabelWarning, export_graph
from .geometry import ConnectionPointResolver, resolve_connection_point
from .models import (
    ArrowPlacement,
    Bounds,
    Center,
    EdgeConnection,
    EdgeDirection,
    EdgeLineType,
    EdgeRecord,
    EllipseNode,
    NodeGeometryProvider,
    Point,
    Radii,
)
from .offsets import PARALLEL_EDGE_STEP, ParallelEdgeOffsetAssigner
from .parser import GraphFileParser, ParsedEdge, ParsedGraph, ParseError, parse_graph
from .png_preview import PNGPreviewRenderer, render_to_png
from .propagation import EdgeGeometryUpdatePropagator
from .self_loops import SelfLoopSlotAllocator
from .session import GraphSession
from .topology import GraphTopology

__version__ = "0.1.0"

__all__ = [
    # Main API
    "GraphSession",
    "GraphTopology",
    # Geometry algorithms
    "ConnectionPointResolver",
    "resolve_connection_point",
    "ParallelEdgeOffsetAssigner",
    "PARALLEL_EDGE_STEP",
    "SelfLoopSlotAllocator",
    "EdgeGeometryUpdatePropagator",
    "EdgePathBuilder",
    "EdgePath",
    "PathKind",
    # Models
    "Point",
    "Center",
    "Radii",
    "Bounds",
    "ArrowPlacement",
    "EdgeConnection",
    "EdgeRecord",
    "EdgeLineType",
    "EdgeDirection",
    "NodeGeometryProvider",
    "EllipseNode",
    # Import / export
    "GraphFileParser",
    "ParsedGraph",
    "ParsedEdge",
    "ParseError",
    "parse_graph",
    "GraphExporter",
    "LabelValidationResult",
    "LabelWarning",
    "export_graph",
    # Debug
    "TopologyInspector",
    "PNGPreviewRenderer",
    "render_to_png",
]
