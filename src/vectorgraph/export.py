"""
Graph text export.

This module writes a topology back out in the two formats the parser
reads:

- Edge list: one "source target [label]" line per edge. Isolated nodes
  are not written, so a graph without edges exports as an empty edge
  list that parse_graph() rejects; use DIMACS for such graphs.
- DIMACS: "p n m" header, one "c k: label" comment per node mapping its
  1-based number to its label, then one "e a b" line per edge. Edge labels
  are not written.

Direction is not represented in either format. Labels containing
whitespace would not survive a round trip; validate_labels() reports them
so the caller can warn before exporting.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .parser import DIMACS, EDGE_LIST
from .topology import GraphTopology

logger = logging.getLogger(__name__)

# How many offending labels a warning lists before summarizing
MAX_REPORTED_LABELS = 5

_WHITESPACE = re.compile(r"\s")


@dataclass
class LabelWarning:
    """
    Labels of one kind that will not survive export.

    Attributes:
        kind: "node" or "edge".
        labels: Up to MAX_REPORTED_LABELS offending labels.
        total_count: Number of offending labels in total.
    """

    kind: str
    labels: List[str] = field(default_factory=list)
    total_count: int = 0

    def message(self) -> str:
        quoted = ", ".join(f"'{label}'" for label in self.labels)
        text = f"The following {self.kind} labels contain whitespace: {quoted}"
        remaining = self.total_count - len(self.labels)
        if remaining > 0:
            text += f" (and {remaining} more)"
        return text


@dataclass
class LabelValidationResult:
    """Outcome of validate_labels()."""

    valid: bool
    warnings: List[LabelWarning] = field(default_factory=list)


def _problem_labels(labels: List[str], kind: str) -> Optional[LabelWarning]:
    bad = [label for label in labels if label and _WHITESPACE.search(label)]
    if not bad:
        return None
    return LabelWarning(
        kind=kind, labels=bad[:MAX_REPORTED_LABELS], total_count=len(bad)
    )


class GraphExporter:
    """
    Exports a topology to edge-list or DIMACS text.

    Attributes:
        node_labels: Node id -> label. Unlabelled nodes export their id.
        edge_labels: Edge id -> label (edge list only).
    """

    def __init__(
        self,
        node_labels: Optional[Dict[str, str]] = None,
        edge_labels: Optional[Dict[str, str]] = None,
    ):
        self.node_labels = node_labels or {}
        self.edge_labels = edge_labels or {}

    def _label(self, node_id: str) -> str:
        return self.node_labels.get(node_id) or node_id

    def validate_labels(self, topology: GraphTopology) -> LabelValidationResult:
        """Report node and edge labels that contain whitespace."""
        graph = topology.to_networkx()
        warnings = []

        node_warning = _problem_labels([self._label(n) for n in graph.nodes], "node")
        if node_warning:
            warnings.append(node_warning)

        edge_warning = _problem_labels(
            [self.edge_labels.get(key, "") for _, _, key in graph.edges(keys=True)],
            "edge",
        )
        if edge_warning:
            warnings.append(edge_warning)

        for warning in warnings:
            logger.warning(warning.message())
        return LabelValidationResult(valid=not warnings, warnings=warnings)

    def to_edge_list(self, topology: GraphTopology) -> str:
        """
        Edge-list text, one line per edge.

        Edges are written in registration order, so a re-import rebuilds
        parallel families (and their offsets) in the same order.
        """
        lines = []
        for edge_id in topology.get_all_edge_ids():
            connection = topology.get_edge_connection(edge_id)
            source = self._label(connection.source_id)
            target = self._label(connection.target_id)
            line = f"{source} {target}"
            label = self.edge_labels.get(edge_id)
            if label:
                line += f" {label}"
            lines.append(line)
        return "\n".join(lines) + "\n"

    def to_dimacs(self, topology: GraphTopology) -> str:
        """DIMACS text; nodes are numbered 1..n, edges follow registration order."""
        graph = topology.to_networkx()
        numbers = {node_id: index for index, node_id in enumerate(graph.nodes, 1)}

        lines = [f"p {graph.number_of_nodes()} {graph.number_of_edges()}"]
        for node_id, number in numbers.items():
            lines.append(f"c {number}: {self._label(node_id)}")
        for edge_id in topology.get_all_edge_ids():
            connection = topology.get_edge_connection(edge_id)
            source = numbers[connection.source_id]
            target = numbers[connection.target_id]
            lines.append(f"e {source} {target}")
        return "\n".join(lines) + "\n"

    def export(self, topology: GraphTopology, format: str) -> str:
        """
        Export in the named format.

        Raises:
            ValueError: If format is not "edgelist" or "dimacs".
        """
        if format == EDGE_LIST:
            return self.to_edge_list(topology)
        if format == DIMACS:
            return self.to_dimacs(topology)
        raise ValueError(f"Unknown export format: {format}")

    def save(self, topology: GraphTopology, filename: str, format: str) -> None:
        """Export and write to a file (UTF-8)."""
        text = self.export(topology, format)
        Path(filename).write_text(text, encoding="utf-8")
        logger.debug("Wrote %s graph to %s", format, filename)


def export_graph(
    topology: GraphTopology,
    format: str,
    node_labels: Optional[Dict[str, str]] = None,
    edge_labels: Optional[Dict[str, str]] = None,
) -> str:
    """Convenience wrapper around GraphExporter.export()."""
    return GraphExporter(node_labels, edge_labels).export(topology, format)
