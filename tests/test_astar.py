"""Tests for A* search algorithm."""

import pytest

from graph_pathfinder.core.data_models import Direction, Node, TerminationReason
from graph_pathfinder.core.exceptions import ConfigurationError
from graph_pathfinder.core.graph import InMemoryGraph
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search.astar import AStarSearcher, create_astar_searcher
from graph_pathfinder.search.base import MIN_DISTANCE, edge_distance, expand_neighbors


def ids(result):
    return [node.id for node in result]


@pytest.fixture
def triangle():
    """A -> B (1), B -> C (1), A -> C (5), plus an isolated node D."""
    graph = InMemoryGraph()
    graph.add_edge("A", "B", weight=1)
    graph.add_edge("B", "C", weight=1)
    graph.add_edge("A", "C", weight=5)
    graph.add_node("D")
    return graph


@pytest.fixture
def grid():
    """4x4 grid with unit edges both ways and x/y coordinates on every node."""
    graph = InMemoryGraph()
    for x in range(4):
        for y in range(4):
            graph.add_node((x, y), x=x, y=y)
    for x in range(4):
        for y in range(4):
            for dx, dy in ((1, 0), (0, 1)):
                if x + dx < 4 and y + dy < 4:
                    graph.add_edge((x, y), (x + dx, y + dy), weight=1)
                    graph.add_edge((x + dx, y + dy), (x, y), weight=1)
    return graph


class TestAStarSearcher:
    """Test A* searcher behaviour."""

    @pytest.fixture
    def searcher(self):
        return create_astar_searcher()

    def test_searcher_name(self, searcher):
        assert isinstance(searcher, AStarSearcher)
        assert searcher.name == "astar"

    def test_prefers_cheaper_longer_route(self, searcher, triangle):
        """Two unit hops beat one direct edge of weight 5."""
        result = searcher.search(triangle.get_node("A"), triangle.get_node("C"), triangle)

        assert ids(result) == ["A", "B", "C"]
        assert result.total_cost == 2.0
        assert result.termination_reason == TerminationReason.FOUND
        assert result.algorithm == "astar"

    def test_unreachable_returns_empty(self, searcher, triangle):
        result = searcher.search(triangle.get_node("A"), triangle.get_node("D"), triangle)

        assert len(result) == 0
        assert not result.found
        assert result.termination_reason == TerminationReason.EXHAUSTED

    def test_source_equals_destination(self, searcher, triangle):
        a = triangle.get_node("A")
        result = searcher.search(a, a, triangle)

        assert ids(result) == ["A"]
        assert result.total_cost == 0.0

    def test_direction_in(self, searcher, triangle):
        config = SearchConfig(direction=Direction.IN)
        result = searcher.search(triangle.get_node("C"), triangle.get_node("A"), triangle,
                                 config=config)
        assert ids(result) == ["C", "B", "A"]

    def test_direction_out_does_not_walk_backwards(self, searcher, triangle):
        result = searcher.search(triangle.get_node("C"), triangle.get_node("A"), triangle)
        assert len(result) == 0

    def test_direction_both(self, searcher, triangle):
        config = SearchConfig(direction=Direction.BOTH)
        result = searcher.search(triangle.get_node("C"), triangle.get_node("A"), triangle,
                                 config=config)
        assert ids(result) == ["C", "B", "A"]
        assert result.total_cost == 2.0

    def test_edge_type_filter(self, searcher):
        graph = InMemoryGraph()
        graph.add_edge("A", "B", "fast", weight=1)
        graph.add_edge("B", "C", "slow", weight=1)
        graph.add_edge("A", "C", "fast", weight=5)

        config = SearchConfig.from_options({'edgeTypeNames': ['fast']})
        result = searcher.search(graph.get_node("A"), graph.get_node("C"), graph, config=config)

        assert ids(result) == ["A", "C"]
        assert result.total_cost == 5.0

    def test_custom_weight_field(self, searcher):
        graph = InMemoryGraph()
        graph.add_edge("A", "B", weight=1, length=10)
        graph.add_edge("B", "C", weight=1, length=10)
        graph.add_edge("A", "C", weight=5, length=1)

        result = searcher.search(graph.get_node("A"), graph.get_node("C"), graph, "length")
        assert ids(result) == ["A", "C"]
        assert result.total_cost == 1.0

    def test_missing_weight_uses_minimum_distance(self, searcher):
        graph = InMemoryGraph()
        graph.add_edge("A", "B")
        graph.add_edge("B", "C", weight="heavy")
        graph.add_edge("A", "C", weight=1)

        result = searcher.search(graph.get_node("A"), graph.get_node("C"), graph)
        assert ids(result) == ["A", "B", "C"]
        assert result.total_cost == pytest.approx(2 * MIN_DISTANCE)

    def test_parallel_edges_use_cheapest(self, searcher):
        graph = InMemoryGraph()
        graph.add_edge("A", "B", weight=7)
        graph.add_edge("A", "B", weight=2)

        result = searcher.search(graph.get_node("A"), graph.get_node("B"), graph)
        assert result.total_cost == 2.0

    def test_grid_with_heuristic(self, searcher, grid):
        config = SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y'], 'heuristicFormula': 'MANHATTAN'
        })
        result = searcher.search(grid.get_node((0, 0)), grid.get_node((3, 3)), grid, config=config)

        assert len(result) == 7
        assert result.total_cost == 6.0
        assert result[0].id == (0, 0)
        assert result[-1].id == (3, 3)

    def test_heuristic_reduces_expansions(self, searcher, grid):
        source, goal = grid.get_node((0, 0)), grid.get_node((3, 0))
        blind = searcher.search(source, goal, grid)
        guided = searcher.search(source, goal, grid, config=SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y'], 'heuristicFormula': 'EUCLIDEAN'
        }))

        assert blind.total_cost == guided.total_cost == 3.0
        assert guided.nodes_expanded < blind.nodes_expanded

    def test_statistics(self, searcher, triangle):
        result = searcher.search(triangle.get_node("A"), triangle.get_node("C"), triangle)

        assert result.nodes_expanded == 2
        assert result.neighbor_lookups == 2
        assert result.computation_time >= 0.0


class TestAStarMaxDepth:
    """Test depth limiting."""

    @pytest.fixture
    def chain(self):
        graph = InMemoryGraph()
        for a, b in (("A", "B"), ("B", "C"), ("C", "D")):
            graph.add_edge(a, b, weight=1)
        return graph

    def test_max_depth_zero_empty_policy(self, chain):
        config = SearchConfig.from_options({'maxDepth': 0, 'emptyIfMaxDepth': True})
        result = AStarSearcher().search(chain.get_node("A"), chain.get_node("D"), chain,
                                        config=config)

        assert len(result) == 0
        assert result.termination_reason == TerminationReason.DEPTH_CUTOFF

    def test_max_depth_returns_partial_path(self, chain):
        config = SearchConfig.from_options({'maxDepth': 2})
        result = AStarSearcher().search(chain.get_node("A"), chain.get_node("D"), chain,
                                        config=config)

        assert ids(result) == ["A", "B", "C"]
        assert result.termination_reason == TerminationReason.DEPTH_CUTOFF

    def test_enough_depth_finds_goal(self, chain):
        config = SearchConfig.from_options({'maxDepth': 4, 'emptyIfMaxDepth': True})
        result = AStarSearcher().search(chain.get_node("A"), chain.get_node("D"), chain,
                                        config=config)

        assert ids(result) == ["A", "B", "C", "D"]


class TestNeighborHelpers:
    """Test shared neighbor expansion helpers."""

    def test_edge_distance_fallback(self):
        graph = InMemoryGraph()
        edge = graph.add_edge("A", "B", weight=True)
        assert edge_distance(graph, edge, "weight") == MIN_DISTANCE
        assert edge_distance(graph, edge, "other") == MIN_DISTANCE

    def test_expand_neighbors_order(self):
        graph = InMemoryGraph()
        graph.add_edge("A", "C", weight=3)
        graph.add_edge("A", "B", weight=2)
        graph.add_edge("A", "C", weight=1)

        neighbors = expand_neighbors(graph, graph.get_node("A"), SearchConfig(), "weight")
        assert [(n.id, d) for n, d in neighbors] == [("C", 1.0), ("B", 2.0)]

    def test_search_rejects_missing_nodes(self):
        with pytest.raises(ConfigurationError):
            AStarSearcher().search(None, Node("B"), InMemoryGraph())
