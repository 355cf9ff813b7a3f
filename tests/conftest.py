"""Pytest configuration and shared fixtures for vectorgraph tests."""

import pytest

from vectorgraph import EllipseNode, GraphSession, GraphTopology


@pytest.fixture
def topology():
    """Empty GraphTopology instance."""
    return GraphTopology()


@pytest.fixture
def session():
    """Empty GraphSession instance."""
    return GraphSession()


@pytest.fixture
def two_node_session():
    """Session with nodes a at (0, 0) and b at (200, 0), radius 30."""
    session = GraphSession()
    session.add_node("a", EllipseNode(0, 0))
    session.add_node("b", EllipseNode(200, 0))
    return session


@pytest.fixture
def triangle_session():
    """Session with three positioned nodes joined in a cycle."""
    session = GraphSession()
    session.add_node("a", EllipseNode(0, 0))
    session.add_node("b", EllipseNode(200, 0))
    session.add_node("c", EllipseNode(100, 150, 40, 20))
    session.add_edge("ab", "a", "b")
    session.add_edge("bc", "b", "c")
    session.add_edge("ca", "c", "a")
    return session


@pytest.fixture
def edge_list_input():
    """Edge-list text with comments, labels and a parallel pair."""
    return """
    # service dependencies
    web api calls
    api db
    api db reads
    worker db
    """


@pytest.fixture
def dimacs_input():
    """DIMACS text declaring an isolated vertex."""
    return """c small example
p edge 4 3
e 1 2
e 2 3
e 3 1
"""
