"""Integration tests for editor-style session workflows.

These tests drive a GraphSession the way the editor does: create shapes,
connect them, drag them around, delete things, save and reload, and check
that topology and geometry stay consistent throughout.
"""

import math

import pytest

from vectorgraph import (
    EdgeDirection,
    EdgeLineType,
    EdgeRecord,
    EllipseNode,
    GraphExporter,
    GraphSession,
    PathKind,
    TopologyInspector,
    parse_graph,
)
from vectorgraph.parser import DIMACS, EDGE_LIST


def assert_consistent(session):
    problems = TopologyInspector(session.topology).check_invariants()
    assert problems == [], "\n".join(problems)


class TestDrawingSession:
    """Building a diagram interactively."""

    def test_build_drag_and_redraw(self):
        """Dragging a node redraws exactly the edges attached to it."""
        session = GraphSession()
        nodes = {
            "a": EllipseNode(0, 0),
            "b": EllipseNode(200, 0),
            "c": EllipseNode(100, 150),
        }
        for node_id, node in nodes.items():
            session.add_node(node_id, node)
        session.add_edge("ab", "a", "b")
        session.add_edge("ab2", "a", "b")
        session.add_edge("bc", "b", "c")
        session.add_edge("loop", "c", "c")

        redrawn = {}

        def redraw(edge_id):
            redrawn[edge_id] = session.edge_path(edge_id).path_data()

        session.propagator.set_update_callback(redraw)
        nodes["b"].move_to(400, 0)
        session.move_node("b")

        assert list(redrawn) == ["ab", "ab2", "bc"]
        assert redrawn["ab"] == "M 30 0 L 370 0"
        assert " Q " in redrawn["ab2"]
        assert_consistent(session)

    def test_parallel_family_geometry(self, two_node_session):
        """Fanned edges are mirror images around the straight edge."""
        records = [two_node_session.add_edge(f"e{i}", "a", "b") for i in range(4)]
        paths = [two_node_session.edge_path(r.edge_id).path() for r in records]

        assert paths[0].kind == PathKind.LINE
        assert [p.kind for p in paths[1:]] == [PathKind.QUADRATIC] * 3
        # -50 and +50 bend by the same amount on opposite sides
        assert paths[2].controls[0].y == pytest.approx(-paths[3].controls[0].y)
        assert paths[1].controls[0].y == pytest.approx(-25)

    def test_self_loops_spread_around_node(self, two_node_session):
        """Four loops on a node use the four cardinal directions."""
        for i in range(4):
            two_node_session.add_edge(f"l{i}", "a", "a")

        anchors = [
            two_node_session.edge_path(f"l{i}").midpoint() for i in range(4)
        ]
        angles = [math.atan2(p.y, p.x) % (2 * math.pi) for p in anchors]
        assert angles == pytest.approx(
            [0, math.pi / 2, math.pi, 3 * math.pi / 2], abs=1e-9
        )


class TestDeletion:
    """Deleting shapes and connectors."""

    def test_delete_node_then_refan(self):
        """Deleting edges and nodes keeps the ledger consistent."""
        session = GraphSession()
        session.add_node("a", EllipseNode(0, 0))
        session.add_node("b", EllipseNode(200, 0))
        session.add_node("c", EllipseNode(0, 200))
        for i in range(3):
            session.add_edge(f"ab{i}", "a", "b")
        session.add_edge("ac", "a", "c")
        session.add_edge("cc", "c", "c")

        offsets = session.remove_edge("ab0", refan=True)
        assert offsets == {"ab1": 0, "ab2": -25}
        assert session.records["ab1"].line_type == EdgeLineType.STRAIGHT
        assert_consistent(session)

        removed = session.remove_node("c")
        assert removed == ["ac", "cc"]
        assert session.topology.get_edge_ids_for_node("a") == ["ab1", "ab2"]
        assert_consistent(session)

        # New edges continue the re-fanned sequence
        assert session.add_edge("ab3", "a", "b").curve_offset == 50

    def test_delete_everything(self, triangle_session):
        """Removing every node leaves an empty ledger."""
        for node_id in ["a", "b", "c"]:
            triangle_session.remove_node(node_id)
        assert triangle_session.topology.get_all_edge_ids() == []
        assert triangle_session.records == {}
        assert_consistent(triangle_session)


class TestSaveAndReload:
    """Persisting records and reloading a document."""

    def test_reload_reproduces_geometry(self, two_node_session):
        """A reloaded document draws exactly as before."""
        for i in range(3):
            two_node_session.add_edge(f"e{i}", "a", "b")
        two_node_session.add_edge("loop", "b", "b")
        before = {
            edge_id: two_node_session.edge_path(edge_id).path_data()
            for edge_id in two_node_session.records
        }

        # Persist plain values, as a file would
        saved = [
            EdgeRecord(**vars(record)) for record in two_node_session.records.values()
        ]
        nodes = {
            node_id: two_node_session.topology.get_node_geometry_provider(node_id)
            for node_id in two_node_session.topology.get_all_node_ids()
        }

        reloaded = GraphSession()
        reloaded.load(nodes, saved)

        after = {
            edge_id: reloaded.edge_path(edge_id).path_data()
            for edge_id in reloaded.records
        }
        assert after == before
        assert_consistent(reloaded)

    def test_reload_keeps_stored_offsets(self, session):
        """Stored offsets win over what the assigner would compute now."""
        session.load(
            {"a": EllipseNode(0, 0), "b": EllipseNode(200, 0)},
            [
                EdgeRecord(
                    "e1",
                    "a",
                    "b",
                    curve_offset=80,
                    line_type=EdgeLineType.CURVE,
                    curve_amount=80,
                )
            ],
        )
        path = session.edge_path("e1").path()
        assert path.controls[0].y == pytest.approx(80)


class TestImportExport:
    """Importing text graphs and exporting them again."""

    def test_edge_list_round_trip(self, edge_list_input):
        """An imported edge list exports to the same lines."""
        session = GraphSession()
        session.import_graph(parse_graph(edge_list_input))

        exporter = GraphExporter(edge_labels=session.edge_labels)
        text = exporter.export(session.topology, EDGE_LIST)

        assert text == "web api calls\napi db\napi db reads\nworker db\n"

    def test_dimacs_import_then_export(self, dimacs_input):
        """DIMACS export keeps vertex and edge counts."""
        session = GraphSession()
        session.import_graph(parse_graph(dimacs_input))

        text = GraphExporter().export(session.topology, DIMACS)

        assert text.splitlines()[0] == "p 4 3"
        assert "e 1 2" in text.splitlines()

    def test_two_imports_side_by_side(self, edge_list_input):
        """Prefixed imports do not collide with each other."""
        session = GraphSession()
        session.import_graph(parse_graph(edge_list_input), id_prefix="v1:")
        session.import_graph(
            parse_graph(edge_list_input),
            id_prefix="v2:",
            direction=EdgeDirection.NONE,
        )

        assert len(session.topology.get_all_edge_ids()) == 8
        assert session.topology.get_edge_ids_between("v1:api", "v2:api") == []
        assert session.records["v2:e1"].direction == EdgeDirection.NONE
        assert_consistent(session)
