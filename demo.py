#!/usr/bin/env python3
"""
Demo script for vectorgraph.

Walks through the geometry core the way an editor uses it: parallel
edges, self-loops, dragging a node, deleting and re-fanning, and a text
import/export round trip. Pass --png to also write a preview image.
"""

import logging
import sys

from vectorgraph import (
    EllipseNode,
    GraphExporter,
    GraphSession,
    TopologyInspector,
    parse_graph,
    render_to_png,
)
from vectorgraph.parser import DIMACS


def print_header(title):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70 + "\n")


def two_nodes():
    session = GraphSession()
    session.add_node("a", EllipseNode(0, 0))
    session.add_node("b", EllipseNode(200, 0))
    return session


def demo_1():
    """Demo 1: Parallel edges"""
    print_header("Demo 1: Parallel Edges Fan Out")

    session = two_nodes()
    for i in range(4):
        record = session.add_edge(f"e{i}", "a", "b")
        path_data = session.edge_path(record.edge_id).path_data()
        print(f"{record.edge_id}: offset {record.curve_offset:>4}  {path_data}")
    return session


def demo_2():
    """Demo 2: Self-loops"""
    print_header("Demo 2: Self-Loops Take Successive Slots")

    session = two_nodes()
    for i in range(6):
        record = session.add_edge(f"loop{i}", "a", "a")
        print(f"{record.edge_id}: angle {record.self_loop_angle:.4f} rad")
    return session


def demo_3():
    """Demo 3: Dragging a node"""
    print_header("Demo 3: Dragging Redraws Attached Edges")

    session = two_nodes()
    session.add_node("c", EllipseNode(100, 150, 40, 20))
    session.add_edge("ab", "a", "b")
    session.add_edge("bc", "b", "c")
    session.add_edge("ca", "c", "a")

    def redraw(edge_id):
        print(f"  redraw {edge_id}: {session.edge_path(edge_id).path_data()}")

    session.propagator.set_update_callback(redraw)
    session.topology.get_node_geometry_provider("b").move_to(300, 50)
    print("Moved b to (300, 50)")
    session.move_node("b")
    return session


def demo_4():
    """Demo 4: Deleting and re-fanning"""
    print_header("Demo 4: Delete an Edge and Re-fan the Family")

    session = two_nodes()
    for i in range(3):
        session.add_edge(f"e{i}", "a", "b")
    print("Before:", {k: r.curve_offset for k, r in session.records.items()})
    session.remove_edge("e0", refan=True)
    print("After: ", {k: r.curve_offset for k, r in session.records.items()})
    print()
    print(TopologyInspector(session.topology).summary())
    return session


def demo_5():
    """Demo 5: Import and export"""
    print_header("Demo 5: Edge List In, DIMACS Out")

    input_text = """
    # service dependencies
    web api calls
    api db
    api db reads
    worker db
    """
    print("Input:")
    print("------")
    print(input_text)

    session = GraphSession()
    session.import_graph(parse_graph(input_text))
    print("Output:")
    print("-------")
    print(GraphExporter().export(session.topology, DIMACS))
    return session


def main():
    """Main demo function."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")

    demos = [demo_1, demo_2, demo_3, demo_4, demo_5]
    sessions = [demo() for demo in demos]

    if "--png" in sys.argv[1:]:
        path = render_to_png(sessions[0], "parallel_edges.png", {"a": "A", "b": "B"})
        print(f"\nWrote preview to {path}")


if __name__ == "__main__":
    main()
