"""Unit tests for the topology module."""

import networkx as nx

from vectorgraph import EdgeConnection, EllipseNode, GraphTopology, TopologyInspector


class TestNodeRegistration:
    """Tests for registering and removing nodes."""

    def test_register_node(self, topology):
        """A registered node exists with no edges."""
        topology.register_node("a")
        assert topology.has_node("a")
        assert topology.get_edge_ids_for_node("a") == []

    def test_register_node_is_idempotent(self, topology):
        """Registering a node twice keeps its incident edges."""
        topology.register_edge("e1", "a", "b")
        topology.register_node("a")
        assert topology.get_edge_ids_for_node("a") == ["e1"]
        assert topology.get_all_node_ids() == ["a", "b"]

    def test_node_ids_in_registration_order(self, topology):
        """get_all_node_ids preserves registration order."""
        for node_id in ["c", "a", "b"]:
            topology.register_node(node_id)
        assert topology.get_all_node_ids() == ["c", "a", "b"]

    def test_unregister_unknown_node(self, topology):
        """Removing an unknown node is a no-op returning nothing."""
        assert topology.unregister_node("missing") == []

    def test_unregister_node_cascades(self, topology):
        """Removing a node removes every edge touching it."""
        topology.register_edge("e1", "a", "b")
        topology.register_edge("e2", "b", "c")
        topology.register_edge("e3", "c", "a")
        topology.register_edge("loop", "a", "a")

        removed = topology.unregister_node("a")

        assert removed == ["e1", "e3", "loop"]
        assert not topology.has_node("a")
        for edge_id in removed:
            assert not topology.has_edge(edge_id)
        assert topology.get_edge_ids_for_node("b") == ["e2"]
        assert topology.get_edge_ids_for_node("c") == ["e2"]
        assert topology.get_all_edge_ids() == ["e2"]

    def test_unregister_node_drops_provider(self, topology):
        """Removing a node also removes its geometry provider."""
        topology.register_node("a")
        topology.set_node_geometry_provider("a", EllipseNode(0, 0))
        topology.unregister_node("a")
        assert topology.get_node_geometry_provider("a") is None


class TestEdgeRegistration:
    """Tests for registering and removing edges."""

    def test_register_edge_auto_registers_nodes(self, topology):
        """Unknown endpoints are registered on demand."""
        topology.register_edge("e1", "x", "y")

        assert topology.has_node("x")
        assert topology.has_node("y")
        assert topology.get_edge_ids_for_node("x") == ["e1"]
        assert topology.get_edge_ids_for_node("y") == ["e1"]
        assert topology.get_edge_connection("e1") == EdgeConnection("x", "y")

    def test_self_loop_listed_once(self, topology):
        """A self-loop appears once in its node's incident set."""
        topology.register_edge("loop", "a", "a")
        assert topology.get_edge_ids_for_node("a") == ["loop"]
        assert topology.get_edge_connection("loop").is_self_loop

    def test_register_same_edge_twice(self, topology):
        """Re-registering an identical edge does not duplicate it."""
        topology.register_edge("e1", "a", "b")
        topology.register_edge("e1", "a", "b")
        assert topology.get_edge_ids_for_node("a") == ["e1"]
        assert topology.get_all_edge_ids() == ["e1"]

    def test_reregister_edge_with_new_endpoints(self, topology):
        """Re-registering an edge id moves it to the new endpoints."""
        topology.register_edge("e1", "a", "b")
        topology.register_edge("e1", "a", "c")

        assert topology.get_edge_connection("e1") == EdgeConnection("a", "c")
        assert topology.get_edge_ids_for_node("b") == []
        assert topology.get_edge_ids_for_node("c") == ["e1"]
        assert TopologyInspector(topology).check_invariants() == []

    def test_unregister_edge(self, topology):
        """Removing an edge clears it from both endpoints."""
        topology.register_edge("e1", "a", "b")
        topology.unregister_edge("e1")

        assert not topology.has_edge("e1")
        assert topology.get_edge_connection("e1") is None
        assert topology.get_edge_ids_for_node("a") == []
        assert topology.get_edge_ids_for_node("b") == []
        # Nodes survive their edges
        assert topology.has_node("a")
        assert topology.has_node("b")

    def test_unregister_unknown_edge(self, topology):
        """Removing an unknown edge is a no-op."""
        topology.register_edge("e1", "a", "b")
        topology.unregister_edge("nope")
        assert topology.get_all_edge_ids() == ["e1"]

    def test_unregister_self_loop(self, topology):
        """Removing a self-loop leaves the node's other edges alone."""
        topology.register_edge("e1", "a", "b")
        topology.register_edge("loop", "a", "a")
        topology.unregister_edge("loop")
        assert topology.get_edge_ids_for_node("a") == ["e1"]


class TestQueries:
    """Tests for read-only topology queries."""

    def test_unknown_ids_yield_empty_results(self, topology):
        """Queries on unknown ids never raise."""
        assert topology.get_edge_ids_for_node("x") == []
        assert topology.get_edge_ids_between("x", "y") == []
        assert topology.get_self_loop_ids("x") == []
        assert topology.get_edge_connection("e") is None
        assert topology.get_node_geometry_provider("x") is None
        assert not topology.has_node("x")
        assert not topology.has_edge("e")

    def test_edge_ids_between_filters_other_edges(self, topology):
        """Only edges shared by both nodes are returned."""
        topology.register_edge("e1", "a", "b")
        topology.register_edge("e2", "a", "c")
        topology.register_edge("e3", "b", "a")
        topology.register_edge("e4", "b", "c")

        assert topology.get_edge_ids_between("a", "b") == ["e1", "e3"]

    def test_edge_ids_between_ignores_direction(self, topology):
        """Both argument orders find the same family."""
        topology.register_edge("e1", "a", "b")
        topology.register_edge("e2", "b", "a")
        assert set(topology.get_edge_ids_between("b", "a")) == {"e1", "e2"}

    def test_edge_ids_between_ordered_by_first_node(self, topology):
        """Results follow the first node's incident-set order."""
        topology.register_edge("x", "b", "c")
        topology.register_edge("e1", "a", "b")
        topology.register_edge("e2", "a", "b")
        assert topology.get_edge_ids_between("a", "b") == ["e1", "e2"]
        assert topology.get_edge_ids_between("b", "a") == ["e1", "e2"]

    def test_edge_ids_between_unknown_node(self, topology):
        """A missing second node gives an empty list."""
        topology.register_edge("e1", "a", "b")
        assert topology.get_edge_ids_between("a", "zzz") == []

    def test_edge_ids_between_same_node(self, topology):
        """Asking for a node with itself returns all its incident edges."""
        topology.register_edge("e1", "a", "b")
        topology.register_edge("loop", "a", "a")
        assert topology.get_edge_ids_between("a", "a") == ["e1", "loop"]

    def test_self_loop_ids(self, topology):
        """Only self-loops are returned, in insertion order."""
        topology.register_edge("l1", "a", "a")
        topology.register_edge("e1", "a", "b")
        topology.register_edge("l2", "a", "a")
        assert topology.get_self_loop_ids("a") == ["l1", "l2"]
        assert topology.get_self_loop_ids("b") == []

    def test_repr(self, topology):
        """repr reports node and edge counts."""
        topology.register_edge("e1", "a", "b")
        assert repr(topology) == "GraphTopology(nodes=2, edges=1)"


class TestGeometryProviders:
    """Tests for geometry provider storage."""

    def test_set_and_get_provider(self, topology):
        """A stored provider is returned as-is."""
        node = EllipseNode(10, 20)
        topology.set_node_geometry_provider("a", node)
        assert topology.get_node_geometry_provider("a") is node

    def test_replace_provider(self, topology):
        """Setting a provider again replaces the old one."""
        topology.set_node_geometry_provider("a", EllipseNode(0, 0))
        newer = EllipseNode(5, 5)
        topology.set_node_geometry_provider("a", newer)
        assert topology.get_node_geometry_provider("a") is newer

    def test_remove_provider(self, topology):
        """Removing a provider leaves the node registered."""
        topology.register_node("a")
        topology.set_node_geometry_provider("a", EllipseNode(0, 0))
        topology.remove_node_geometry_provider("a")
        topology.remove_node_geometry_provider("a")
        assert topology.get_node_geometry_provider("a") is None
        assert topology.has_node("a")


class TestWholeGraph:
    """Tests for clear() and the networkx snapshot."""

    def test_clear_drops_everything(self, topology):
        """clear() forgets nodes, edges and providers."""
        topology.register_edge("e1", "a", "b")
        topology.set_node_geometry_provider("a", EllipseNode(0, 0))

        topology.clear()

        assert topology.get_all_node_ids() == []
        assert topology.get_all_edge_ids() == []
        assert topology.get_node_geometry_provider("a") is None

    def test_to_networkx(self, topology):
        """The snapshot is a multigraph keyed by edge id."""
        topology.register_node("lonely")
        topology.register_edge("e1", "a", "b")
        topology.register_edge("e2", "a", "b")
        topology.register_edge("loop", "b", "b")

        graph = topology.to_networkx()

        assert isinstance(graph, nx.MultiDiGraph)
        assert list(graph.nodes) == ["lonely", "a", "b"]
        assert graph.number_of_edges() == 3
        assert set(graph["a"]["b"]) == {"e1", "e2"}
        assert graph.has_edge("b", "b", key="loop")

    def test_to_networkx_is_a_copy(self, topology):
        """Later mutations do not show up in an earlier snapshot."""
        topology.register_edge("e1", "a", "b")
        graph = topology.to_networkx()
        topology.unregister_node("a")
        assert graph.has_node("a")
        assert graph.number_of_edges() == 1

    def test_independent_instances(self):
        """Two topologies never share state."""
        first = GraphTopology()
        second = GraphTopology()
        first.register_edge("e1", "a", "b")
        assert second.get_all_node_ids() == []
