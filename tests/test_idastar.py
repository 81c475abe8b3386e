"""Tests for IDA* search algorithm."""

import pytest

from graph_pathfinder.core.data_models import TerminationReason
from graph_pathfinder.core.graph import InMemoryGraph
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search.idastar import IDAStarSearcher, create_idastar_searcher


def ids(result):
    return [node.id for node in result]


class TestIDAStarSearcher:
    """Test IDA* searcher behaviour."""

    @pytest.fixture
    def searcher(self):
        return create_idastar_searcher()

    @pytest.fixture
    def triangle(self):
        graph = InMemoryGraph()
        graph.add_edge("A", "B", weight=1)
        graph.add_edge("B", "C", weight=1)
        graph.add_edge("A", "C", weight=5)
        graph.add_node("D")
        return graph

    def test_searcher_name(self, searcher):
        assert isinstance(searcher, IDAStarSearcher)
        assert searcher.name == "idastar"

    def test_prefers_cheaper_longer_route(self, searcher, triangle):
        result = searcher.search(triangle.get_node("A"), triangle.get_node("C"), triangle)

        assert ids(result) == ["A", "B", "C"]
        assert result.total_cost == 2.0
        assert result.termination_reason == TerminationReason.FOUND

    def test_threshold_iterations(self, searcher, triangle):
        """With h = 0 the threshold walks through 0, 1 and 2."""
        result = searcher.search(triangle.get_node("A"), triangle.get_node("C"), triangle)
        assert result.iterations == 3

    def test_unreachable_returns_empty(self, searcher, triangle):
        result = searcher.search(triangle.get_node("A"), triangle.get_node("D"), triangle)

        assert len(result) == 0
        assert result.termination_reason == TerminationReason.EXHAUSTED

    def test_source_equals_destination(self, searcher, triangle):
        a = triangle.get_node("A")
        result = searcher.search(a, a, triangle)

        assert ids(result) == ["A"]
        assert result.total_cost == 0.0
        assert result.iterations == 1

    def test_cycles_do_not_loop(self, searcher):
        graph = InMemoryGraph()
        graph.add_edge("A", "B", weight=1)
        graph.add_edge("B", "A", weight=1)
        graph.add_edge("B", "C", weight=1)
        graph.add_edge("C", "B", weight=1)
        graph.add_node("Z")

        result = searcher.search(graph.get_node("A"), graph.get_node("Z"), graph)
        assert len(result) == 0

    def test_deep_chain_does_not_recurse(self, searcher):
        """Depth far beyond the default recursion limit."""
        graph = InMemoryGraph()
        for i in range(1500):
            graph.add_edge(i, i + 1, weight=1)
        config = SearchConfig.from_options({'vertexAxisNames': ['pos']})
        for i in range(1501):
            graph.add_node(i, pos=i)

        result = searcher.search(graph.get_node(0), graph.get_node(1500), graph, config=config)

        assert len(result) == 1501
        assert result.total_cost == 1500.0

    def test_heuristic_guides_threshold(self, searcher):
        graph = InMemoryGraph()
        for node_id, x in (("A", 0), ("B", 1), ("C", 2)):
            graph.add_node(node_id, x=x)
        graph.add_edge("A", "B", weight=1)
        graph.add_edge("B", "C", weight=1)

        config = SearchConfig.from_options({'vertexAxisNames': ['x']})
        result = searcher.search(graph.get_node("A"), graph.get_node("C"), graph, config=config)

        # Exact heuristic: the first threshold already admits the optimal path
        assert result.iterations == 1
        assert ids(result) == ["A", "B", "C"]


class TestIDAStarMaxDepth:
    """Test depth limiting."""

    @pytest.fixture
    def chain(self):
        graph = InMemoryGraph()
        for a, b in (("A", "B"), ("B", "C"), ("C", "D")):
            graph.add_edge(a, b, weight=1)
        return graph

    def test_max_depth_zero_empty_policy(self, chain):
        config = SearchConfig.from_options({'maxDepth': 0, 'emptyIfMaxDepth': True})
        result = IDAStarSearcher().search(chain.get_node("A"), chain.get_node("D"), chain,
                                          config=config)

        assert len(result) == 0
        assert result.termination_reason == TerminationReason.DEPTH_CUTOFF

    def test_max_depth_returns_partial_path(self, chain):
        config = SearchConfig.from_options({'maxDepth': 2})
        result = IDAStarSearcher().search(chain.get_node("A"), chain.get_node("D"), chain,
                                          config=config)

        assert ids(result) == ["A", "B", "C"]
        assert result.termination_reason == TerminationReason.DEPTH_CUTOFF

    def test_empty_policy_when_depth_reached(self, chain):
        config = SearchConfig.from_options({'maxDepth': 2, 'emptyIfMaxDepth': True})
        result = IDAStarSearcher().search(chain.get_node("A"), chain.get_node("D"), chain,
                                          config=config)
        assert len(result) == 0

    def test_enough_depth_finds_goal(self, chain):
        config = SearchConfig.from_options({'maxDepth': 4, 'emptyIfMaxDepth': True})
        result = IDAStarSearcher().search(chain.get_node("A"), chain.get_node("D"), chain,
                                          config=config)
        assert ids(result) == ["A", "B", "C", "D"]
