"""
Per-document graph session.

A GraphSession owns one GraphTopology and the algorithms that read it.
Editor commands (add/delete/import/load) and interaction handlers
(drag/resize) talk to the session of the document they act on; two open
documents, or two tests, never share state.

Example:
    >>> session = GraphSession()
    >>> session.add_node("a", EllipseNode(0, 0))
    >>> session.add_node("b", EllipseNode(200, 0))
    >>> first = session.add_edge("e1", "a", "b")
    >>> second = session.add_edge("e2", "a", "b")
    >>> first.curve_offset, second.curve_offset
    (0, -25)
"""

import logging
from typing import Dict, Iterable, List, Optional

from .edge_geometry import EdgePathBuilder
from .geometry import ConnectionPointResolver
from .models import EdgeDirection, EdgeLineType, EdgeRecord, NodeGeometryProvider
from .offsets import PARALLEL_EDGE_STEP, ParallelEdgeOffsetAssigner
from .parser import ParsedGraph
from .propagation import EdgeGeometryUpdatePropagator
from .self_loops import SelfLoopSlotAllocator
from .topology import GraphTopology

logger = logging.getLogger(__name__)


class GraphSession:
    """
    Graph state and geometry services for a single document.

    Attributes:
        topology: Adjacency ledger for the document.
        offsets: Parallel-edge offset assigner.
        self_loops: Self-loop slot allocator bound to topology.
        propagator: Node-moved -> edge-redraw relay bound to topology.
        resolver: Connection point resolver.
        records: Edge id -> persisted geometry values, for edges created or
            loaded through this session.
        edge_labels: Edge id -> label text for imported edges that carry one.
    """

    def __init__(
        self,
        topology: Optional[GraphTopology] = None,
        offset_step: float = PARALLEL_EDGE_STEP,
    ):
        """
        Initialize the session.

        Args:
            topology: Existing topology to adopt; a fresh one by default.
            offset_step: Fan-out distance for parallel edges.
        """
        self.topology = topology if topology is not None else GraphTopology()
        self.offsets = ParallelEdgeOffsetAssigner(step=offset_step)
        self.self_loops = SelfLoopSlotAllocator(self.topology)
        self.propagator = EdgeGeometryUpdatePropagator(self.topology)
        self.resolver = ConnectionPointResolver()
        self.records: Dict[str, EdgeRecord] = {}
        self.edge_labels: Dict[str, str] = {}

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(
        self, node_id: str, provider: Optional[NodeGeometryProvider] = None
    ) -> None:
        """Register a node and, if given, its geometry provider."""
        self.topology.register_node(node_id)
        if provider is not None:
            self.topology.set_node_geometry_provider(node_id, provider)

    def remove_node(self, node_id: str) -> List[str]:
        """
        Remove a node and every edge attached to it.

        Returns:
            Ids of the removed edges, so the caller can drop their visuals.
        """
        removed = self.topology.unregister_node(node_id)
        for edge_id in removed:
            self.records.pop(edge_id, None)
            self.edge_labels.pop(edge_id, None)
        return removed

    def move_node(self, node_id: str) -> int:
        """Signal that a node moved or was resized; returns edges notified."""
        return self.propagator.notify_node_moved(node_id)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def create_edge_record(
        self,
        edge_id: str,
        source_id: str,
        target_id: str,
        direction: EdgeDirection = EdgeDirection.FORWARD,
    ) -> EdgeRecord:
        """
        Compute the geometry values for a new edge without registering it.

        Self-loops get the next angular slot and no offset. Other edges
        get the next parallel offset; the first edge between two nodes is
        straight, later ones are curved.
        """
        is_self_loop = source_id == target_id
        if is_self_loop:
            curve_offset = 0
            self_loop_angle = self.self_loops.next_angle(source_id, exclude=edge_id)
        else:
            existing = [
                other
                for other in self.topology.get_edge_ids_between(source_id, target_id)
                if other != edge_id
            ]
            curve_offset = self.offsets.preview_offset_for_next_edge(existing)
            self_loop_angle = 0.0

        if is_self_loop or curve_offset != 0:
            line_type = EdgeLineType.CURVE
        else:
            line_type = EdgeLineType.STRAIGHT

        return EdgeRecord(
            edge_id=edge_id,
            source_id=source_id,
            target_id=target_id,
            curve_offset=curve_offset,
            is_self_loop=is_self_loop,
            self_loop_angle=self_loop_angle,
            line_type=line_type,
            curve_amount=curve_offset,
            direction=direction,
        )

    def add_edge(
        self,
        edge_id: str,
        source_id: str,
        target_id: str,
        direction: EdgeDirection = EdgeDirection.FORWARD,
    ) -> EdgeRecord:
        """Create, register and remember a new edge."""
        record = self.create_edge_record(edge_id, source_id, target_id, direction)
        self.register_record(record)
        return record

    def register_record(self, record: EdgeRecord) -> None:
        """Register an edge whose geometry values are already known."""
        self.topology.register_edge(record.edge_id, record.source_id, record.target_id)
        self.records[record.edge_id] = record

    def remove_edge(self, edge_id: str, refan: bool = False) -> Dict[str, float]:
        """
        Remove an edge.

        Args:
            edge_id: Edge to remove. Unknown ids are ignored.
            refan: Recompute the offsets of the remaining parallel edges so
                they fan out again from the straight line.

        Returns:
            New offsets of the remaining family when refan is set (also
            written into their records), otherwise an empty dict.
        """
        connection = self.topology.get_edge_connection(edge_id)
        self.topology.unregister_edge(edge_id)
        self.records.pop(edge_id, None)
        self.edge_labels.pop(edge_id, None)

        if not refan or connection is None or connection.is_self_loop:
            return {}
        return self.refan(connection.source_id, connection.target_id)

    def refan(self, node_id1: str, node_id2: str) -> Dict[str, float]:
        """Recompute and store offsets for the family between two nodes."""
        family = self.topology.get_edge_ids_between(node_id1, node_id2)
        family = [
            edge_id
            for edge_id in family
            if not self.topology.get_edge_connection(edge_id).is_self_loop
        ]
        offsets = self.offsets.recompute_all_offsets(family)

        for edge_id, offset in offsets.items():
            record = self.records.get(edge_id)
            if record is None:
                continue
            record.curve_offset = offset
            record.curve_amount = offset
            record.line_type = (
                EdgeLineType.CURVE if offset != 0 else EdgeLineType.STRAIGHT
            )
        logger.debug(
            "Re-fanned %d edges between %s and %s", len(offsets), node_id1, node_id2
        )
        return offsets

    def edge_path(self, edge_id: str) -> Optional[EdgePathBuilder]:
        """
        Path builder for a known edge.

        Returns:
            None if the edge has no record or an endpoint has no geometry
            provider.
        """
        record = self.records.get(edge_id)
        if record is None:
            return None
        source = self.topology.get_node_geometry_provider(record.source_id)
        target = self.topology.get_node_geometry_provider(record.target_id)
        if source is None or target is None:
            return None
        return EdgePathBuilder(record, source, target, resolver=self.resolver)

    # ------------------------------------------------------------------
    # Whole-document operations
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self.topology.clear()
        self.records.clear()
        self.edge_labels.clear()

    def load(
        self,
        nodes: Dict[str, Optional[NodeGeometryProvider]],
        edges: Iterable[EdgeRecord],
    ) -> None:
        """
        Replace the session contents with a document's definitions.

        Persisted offsets and angles are kept exactly as given, so a
        reloaded document draws the same as when it was saved.

        Args:
            nodes: Node id -> geometry provider (or None), in document order.
            edges: Persisted edge records, in document order.
        """
        self.clear()
        for node_id, provider in nodes.items():
            self.add_node(node_id, provider)
        count = 0
        for record in edges:
            self.register_record(record)
            count += 1
        logger.debug("Loaded document with %d nodes and %d edges", len(nodes), count)

    def import_graph(
        self,
        parsed: ParsedGraph,
        clear: bool = False,
        direction: EdgeDirection = EdgeDirection.FORWARD,
        id_prefix: str = "",
    ) -> List[EdgeRecord]:
        """
        Add the nodes and edges of a parsed graph file.

        Node ids are the file's labels (with id_prefix); edge ids are
        "<prefix>e<n>" numbered from 1 and skipping ids already in use.

        Args:
            parsed: Output of parse_graph().
            clear: Drop the current contents first.
            direction: Direction for every imported edge.
            id_prefix: Prefix for generated node and edge ids.

        Returns:
            Records of the created edges, in file order.
        """
        if clear:
            self.clear()

        for label in parsed.node_labels:
            self.add_node(f"{id_prefix}{label}")

        created = []
        counter = 0
        for edge in parsed.edges:
            counter += 1
            edge_id = f"{id_prefix}e{counter}"
            while self.topology.has_edge(edge_id):
                counter += 1
                edge_id = f"{id_prefix}e{counter}"
            created.append(
                self.add_edge(
                    edge_id,
                    f"{id_prefix}{edge.source}",
                    f"{id_prefix}{edge.target}",
                    direction,
                )
            )
            if edge.label:
                self.edge_labels[edge_id] = edge.label

        logger.debug(
            "Imported %d nodes and %d edges (%s)",
            len(parsed.node_labels),
            len(created),
            parsed.format,
        )
        return created

    def __repr__(self) -> str:
        return f"GraphSession({self.topology!r})"
