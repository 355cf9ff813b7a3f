"""
Debug utilities for vectorgraph.

TopologyInspector reads a GraphTopology through its public queries and
reports anything that breaks the node <-> edge membership rules:

1. every registered edge is in the incident set of its source and its
   target (exactly once for a self-loop)
2. every id in an incident set is a registered edge that has the node as
   an endpoint

It also summarizes the graph (self-loops, parallel families) for logging
and for test failure messages.

Usage:
    >>> inspector = TopologyInspector(session.topology)
    >>> assert inspector.check_invariants() == []
    >>> print(inspector.summary())
"""

from typing import Dict, FrozenSet, List

from .topology import GraphTopology


class TopologyInspector:
    """Consistency checks and summaries for a GraphTopology."""

    def __init__(self, topology: GraphTopology):
        """
        Initialize the inspector.

        Args:
            topology: The topology to inspect
        """
        self._topology = topology

    def check_invariants(self) -> List[str]:
        """
        Return a description of every membership violation found.

        An empty list means the topology is consistent.
        """
        topology = self._topology
        problems: List[str] = []

        for edge_id in topology.get_all_edge_ids():
            connection = topology.get_edge_connection(edge_id)
            for endpoint in (connection.source_id, connection.target_id):
                if not topology.has_node(endpoint):
                    problems.append(
                        f"edge {edge_id}: endpoint {endpoint} not registered"
                    )
                    continue
                count = topology.get_edge_ids_for_node(endpoint).count(edge_id)
                if count != 1:
                    problems.append(
                        f"edge {edge_id}: listed {count} times on node {endpoint}"
                    )

        for node_id in topology.get_all_node_ids():
            for edge_id in topology.get_edge_ids_for_node(node_id):
                connection = topology.get_edge_connection(edge_id)
                if connection is None:
                    problems.append(f"node {node_id}: unknown edge {edge_id}")
                elif node_id not in (connection.source_id, connection.target_id):
                    problems.append(
                        f"node {node_id}: edge {edge_id} connects "
                        f"{connection.source_id} -> {connection.target_id}"
                    )

        return problems

    def self_loops(self) -> Dict[str, List[str]]:
        """Node id -> its self-loop ids, for nodes that have any."""
        loops = {}
        for node_id in self._topology.get_all_node_ids():
            node_loops = self._topology.get_self_loop_ids(node_id)
            if node_loops:
                loops[node_id] = node_loops
        return loops

    def parallel_families(self) -> Dict[FrozenSet[str], List[str]]:
        """
        Unordered node pair -> edge ids, for pairs joined by 2+ edges.

        Direction is ignored, matching get_edge_ids_between().
        """
        families: Dict[FrozenSet[str], List[str]] = {}
        for edge_id in self._topology.get_all_edge_ids():
            connection = self._topology.get_edge_connection(edge_id)
            if connection.is_self_loop:
                continue
            pair = frozenset((connection.source_id, connection.target_id))
            families.setdefault(pair, []).append(edge_id)
        return {pair: ids for pair, ids in families.items() if len(ids) > 1}

    def summary(self) -> str:
        """Human-readable overview of the topology."""
        topology = self._topology
        loops = self.self_loops()
        families = self.parallel_families()
        problems = self.check_invariants()

        lines = [
            "=" * 60,
            "TOPOLOGY SUMMARY",
            "=" * 60,
            f"Nodes: {len(topology.get_all_node_ids())}",
            f"Edges: {len(topology.get_all_edge_ids())}",
            f"Self-loops: {sum(len(ids) for ids in loops.values())}",
            f"Parallel families: {len(families)}",
        ]
        for pair, ids in sorted(families.items(), key=lambda item: sorted(item[0])):
            a, b = sorted(pair)
            lines.append(f"  {a} <-> {b}: {', '.join(ids)}")

        if problems:
            lines.append(f"Invariant violations: {len(problems)}")
            lines.extend(f"  {problem}" for problem in problems)
        else:
            lines.append("Invariants: OK")

        return "\n".join(lines)
