"""
Parser module for graph text files.

Handles the two plain-text graph formats the editor can import:

Edge list:
    # comment
    source target [label]

DIMACS:
    c comment
    p [edge] <vertex count> <edge count>
    e <source> <target>

Node labels are returned in first-seen order so that imported node ids
(and therefore incident-set order and parallel offsets) are reproducible.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import List, Optional

logger = logging.getLogger(__name__)

EDGE_LIST = "edgelist"
DIMACS = "dimacs"

# File extensions that force DIMACS parsing
DIMACS_EXTENSIONS = (".dimacs", ".col")


class ParseError(Exception):
    """Raised when graph text parsing fails."""

    pass


@dataclass
class ParsedEdge:
    """One edge read from a graph file."""

    source: str
    target: str
    label: Optional[str] = None


@dataclass
class ParsedGraph:
    """
    Result of parsing a graph file.

    Attributes:
        format: EDGE_LIST or DIMACS.
        node_labels: Unique node labels in first-seen order.
        edges: Edges in file order.
        vertex_count: Vertex count from a DIMACS problem line, if any.
        edge_count: Edge count from a DIMACS problem line, if any.
    """

    format: str
    node_labels: List[str] = field(default_factory=list)
    edges: List[ParsedEdge] = field(default_factory=list)
    vertex_count: Optional[int] = None
    edge_count: Optional[int] = None


class GraphFileParser:
    """Parses edge-list and DIMACS graph text."""

    # p n m  or  p edge n m
    PROBLEM_PATTERN = re.compile(r"^p\s+(?:\w+\s+)?(\d+)\s+(\d+)")
    # Looser form used for format sniffing and for error reporting
    PROBLEM_PREFIX = re.compile(r"^p\s")
    EDGE_PATTERN = re.compile(r"^e\s+(\S+)\s+(\S+)")

    def detect_format(self, content: str, filename: Optional[str] = None) -> str:
        """
        Guess the format of graph text.

        A .dimacs or .col filename wins. Otherwise the first significant
        line decides: a problem line or an "e a b" line means DIMACS,
        anything else means edge list.
        """
        if filename and PurePath(filename).suffix.lower() in DIMACS_EXTENSIONS:
            return DIMACS

        for line in content.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or stripped.startswith("c "):
                continue
            if self.PROBLEM_PATTERN.match(stripped) or self.EDGE_PATTERN.match(
                stripped
            ):
                return DIMACS
            break

        return EDGE_LIST

    def parse(self, content: str, filename: Optional[str] = None) -> ParsedGraph:
        """
        Parse graph text in either format.

        Args:
            content: File contents.
            filename: Optional name used as a format hint.

        Returns:
            ParsedGraph

        Raises:
            ParseError: If the text is malformed or describes no nodes.
        """
        if self.detect_format(content, filename) == DIMACS:
            result = self.parse_dimacs(content)
        else:
            result = self.parse_edge_list(content)

        if not result.node_labels:
            raise ParseError("No nodes found in input")

        logger.debug(
            "Parsed %s graph: %d nodes, %d edges",
            result.format,
            len(result.node_labels),
            len(result.edges),
        )
        return result

    def parse_edge_list(self, content: str) -> ParsedGraph:
        """Parse "source target [label]" lines; short lines are skipped."""
        result = ParsedGraph(format=EDGE_LIST)
        seen = {}

        for line_num, line in enumerate(content.splitlines(), 1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            parts = stripped.split()
            if len(parts) < 2:
                logger.warning(
                    "Line %d: skipping line without target: %s", line_num, stripped
                )
                continue

            source, target = parts[0], parts[1]
            label = parts[2] if len(parts) >= 3 else None
            seen.setdefault(source, None)
            seen.setdefault(target, None)
            result.edges.append(ParsedEdge(source, target, label))

        result.node_labels = list(seen)
        return result

    def parse_dimacs(self, content: str) -> ParsedGraph:
        """
        Parse DIMACS text.

        Vertices named by the problem line but never used by an edge are
        added as isolated nodes labelled "1", "2", ... (skipping labels
        already taken) until the declared count is reached.

        Raises:
            ParseError: On a malformed problem line, or an edge whose
                numeric endpoint is outside 1..n when n was declared.
        """
        result = ParsedGraph(format=DIMACS)
        seen = {}

        for line_num, line in enumerate(content.splitlines(), 1):
            stripped = line.strip()
            if not stripped or stripped == "c" or stripped.startswith("c "):
                continue

            problem = self.PROBLEM_PATTERN.match(stripped)
            if problem:
                result.vertex_count = int(problem.group(1))
                result.edge_count = int(problem.group(2))
                continue
            if self.PROBLEM_PREFIX.match(stripped):
                raise ParseError(
                    f"Line {line_num}: Invalid problem line: {stripped}"
                )

            edge = self.EDGE_PATTERN.match(stripped)
            if edge:
                source, target = edge.group(1), edge.group(2)
                self._check_vertex(source, result.vertex_count, line_num)
                self._check_vertex(target, result.vertex_count, line_num)
                seen.setdefault(source, None)
                seen.setdefault(target, None)
                result.edges.append(ParsedEdge(source, target))
                continue

            logger.warning(
                "Line %d: skipping unrecognized line: %s", line_num, stripped
            )

        labels = list(seen)
        if result.vertex_count and result.vertex_count > len(labels):
            index = 1
            while len(labels) < result.vertex_count:
                label = str(index)
                if label not in seen:
                    labels.append(label)
                    seen[label] = None
                index += 1

        if result.edge_count is not None and result.edge_count != len(result.edges):
            logger.warning(
                "Problem line declares %d edges but %d were found",
                result.edge_count,
                len(result.edges),
            )

        result.node_labels = labels
        return result

    def _check_vertex(self, name: str, vertex_count: Optional[int], line_num: int):
        if vertex_count is None or not name.isdigit():
            return
        if not 1 <= int(name) <= vertex_count:
            raise ParseError(
                f"Line {line_num}: Vertex {name} outside declared range "
                f"1..{vertex_count}"
            )


def parse_graph(content: str, filename: Optional[str] = None) -> ParsedGraph:
    """
    Convenience function to parse graph text.

    Args:
        content: Edge-list or DIMACS text.
        filename: Optional name used as a format hint.

    Returns:
        ParsedGraph
    """
    parser = GraphFileParser()
    return parser.parse(content, filename)
