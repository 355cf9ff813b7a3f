"""
Topology module: the node/edge adjacency ledger.

GraphTopology keeps three pieces of state in sync:
- node id -> ordered set of incident edge ids
- edge id -> (source id, target id)
- node id -> geometry provider (a read-only capability owned elsewhere)

Every public operation is total: unknown ids yield empty results, None,
False or a no-op, never an exception. Incident sets preserve insertion
order because the parallel-offset and self-loop algorithms depend on it.

Instances are not thread-safe. A host that mutates one topology from
several threads must serialize all calls behind a single lock.
"""

import logging
from typing import Dict, List, Optional

import networkx as nx

from .models import EdgeConnection, NodeGeometryProvider

logger = logging.getLogger(__name__)


class GraphTopology:
    """Bidirectional node <-> edge membership for one document."""

    def __init__(self):
        # dict keys double as insertion-ordered sets
        self._node_edges: Dict[str, Dict[str, None]] = {}
        self._edge_connections: Dict[str, EdgeConnection] = {}
        self._geometry_providers: Dict[str, NodeGeometryProvider] = {}

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def register_node(self, node_id: str) -> None:
        """Ensure an (initially empty) incident-edge set exists for a node."""
        if node_id not in self._node_edges:
            self._node_edges[node_id] = {}
            logger.debug("Registered node %s", node_id)

    def unregister_node(self, node_id: str) -> List[str]:
        """
        Remove a node together with every edge touching it.

        Args:
            node_id: Node to remove.

        Returns:
            Ids of the edges removed along with the node, in incident-set
            order. Empty for an unknown node.
        """
        incident = self._node_edges.pop(node_id, None)
        self._geometry_providers.pop(node_id, None)
        if incident is None:
            return []

        removed = list(incident)
        for edge_id in removed:
            connection = self._edge_connections.pop(edge_id, None)
            if connection is None:
                continue
            # Drop the edge from the other endpoint's set
            for endpoint in (connection.source_id, connection.target_id):
                if endpoint != node_id and endpoint in self._node_edges:
                    self._node_edges[endpoint].pop(edge_id, None)

        logger.debug(
            "Unregistered node %s (cascaded %d edges)", node_id, len(removed)
        )
        return removed

    def has_node(self, node_id: str) -> bool:
        return node_id in self._node_edges

    def get_all_node_ids(self) -> List[str]:
        """Return all node ids in registration order."""
        return list(self._node_edges)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def register_edge(self, edge_id: str, source_id: str, target_id: str) -> None:
        """
        Record an edge and add it to its endpoints' incident sets.

        Missing endpoint nodes are registered first. A self-loop is added
        to its node's incident set exactly once. Re-registering a known
        edge id with different endpoints moves it to the new endpoints.
        """
        previous = self._edge_connections.get(edge_id)
        if previous is not None and previous != EdgeConnection(source_id, target_id):
            self.unregister_edge(edge_id)

        self.register_node(source_id)
        self.register_node(target_id)

        self._edge_connections[edge_id] = EdgeConnection(source_id, target_id)
        self._node_edges[source_id][edge_id] = None
        if target_id != source_id:
            self._node_edges[target_id][edge_id] = None

        logger.debug("Registered edge %s (%s -> %s)", edge_id, source_id, target_id)

    def unregister_edge(self, edge_id: str) -> None:
        """Remove an edge from the registry and both endpoints. No-op if unknown."""
        connection = self._edge_connections.pop(edge_id, None)
        if connection is None:
            return

        for endpoint in (connection.source_id, connection.target_id):
            incident = self._node_edges.get(endpoint)
            if incident is not None:
                incident.pop(edge_id, None)

        logger.debug("Unregistered edge %s", edge_id)

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edge_connections

    def get_all_edge_ids(self) -> List[str]:
        """Return all edge ids in registration order."""
        return list(self._edge_connections)

    def get_edge_connection(self, edge_id: str) -> Optional[EdgeConnection]:
        """Return the endpoints of an edge, or None if it is unknown."""
        return self._edge_connections.get(edge_id)

    def get_edge_ids_for_node(self, node_id: str) -> List[str]:
        """Return the incident edge ids of a node, in insertion order."""
        return list(self._node_edges.get(node_id, ()))

    def get_edge_ids_between(self, node_id1: str, node_id2: str) -> List[str]:
        """
        Return edges incident to both nodes, ordered as in node_id1's set.

        For two distinct nodes this is the parallel-edge family between
        them (regardless of direction). When both ids are the same, it is
        every edge incident to that node, which includes its self-loops.
        """
        edges1 = self._node_edges.get(node_id1)
        edges2 = self._node_edges.get(node_id2)
        if edges1 is None or edges2 is None:
            return []
        return [edge_id for edge_id in edges1 if edge_id in edges2]

    def get_self_loop_ids(self, node_id: str) -> List[str]:
        """Return the self-loops on a node, in insertion order."""
        return [
            edge_id
            for edge_id in self._node_edges.get(node_id, ())
            if self._edge_connections[edge_id].is_self_loop
        ]

    # ------------------------------------------------------------------
    # Geometry providers
    # ------------------------------------------------------------------

    def set_node_geometry_provider(
        self, node_id: str, provider: NodeGeometryProvider
    ) -> None:
        """Attach (or replace) the geometry capability for a node."""
        self._geometry_providers[node_id] = provider

    def get_node_geometry_provider(
        self, node_id: str
    ) -> Optional[NodeGeometryProvider]:
        return self._geometry_providers.get(node_id)

    def remove_node_geometry_provider(self, node_id: str) -> None:
        self._geometry_providers.pop(node_id, None)

    # ------------------------------------------------------------------
    # Whole-graph operations
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Drop all nodes, edges and geometry providers."""
        self._node_edges.clear()
        self._edge_connections.clear()
        self._geometry_providers.clear()
        logger.debug("Cleared topology")

    def to_networkx(self) -> nx.MultiDiGraph:
        """
        Snapshot the topology as a networkx multigraph.

        Nodes and edges appear in registration order; each edge is keyed by
        its edge id. The snapshot is a copy and does not track later
        mutations.
        """
        graph = nx.MultiDiGraph()
        graph.add_nodes_from(self._node_edges)
        for edge_id, connection in self._edge_connections.items():
            graph.add_edge(connection.source_id, connection.target_id, key=edge_id)
        return graph

    def __repr__(self) -> str:
        return (
            f"GraphTopology(nodes={len(self._node_edges)}, "
            f"edges={len(self._edge_connections)})"
        )
