"""Cross-algorithm checks on randomly generated graphs."""

import heapq
import math

import numpy as np
import pytest

from graph_pathfinder.core.graph import InMemoryGraph
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search import AStarSearcher, IDAStarSearcher, LRTAStarSearcher


def random_geometric_graph(seed, node_count=8, edge_count=18):
    """Nodes on a plane; each edge costs at least the straight-line distance.

    That keeps the Euclidean heuristic admissible and consistent.
    """
    rng = np.random.default_rng(seed)
    graph = InMemoryGraph()
    coords = rng.uniform(0, 10, size=(node_count, 2))
    for i, (x, y) in enumerate(coords):
        graph.add_node(i, x=float(x), y=float(y))

    for _ in range(edge_count):
        a, b = rng.choice(node_count, size=2, replace=False)
        straight = float(np.linalg.norm(coords[a] - coords[b]))
        graph.add_edge(int(a), int(b), weight=straight * (1.0 + rng.uniform(0, 1)))
    return graph


def dijkstra(graph, source_id, goal_id):
    """Reference shortest path cost, ``inf`` when unreachable."""
    best = {source_id: 0.0}
    heap = [(0.0, source_id)]
    while heap:
        cost, node_id = heapq.heappop(heap)
        if node_id == goal_id:
            return cost
        if cost > best.get(node_id, math.inf):
            continue
        for edge in graph.edges:
            if edge.out_node.id != node_id:
                continue
            new_cost = cost + edge.get("weight")
            if new_cost < best.get(edge.in_node.id, math.inf):
                best[edge.in_node.id] = new_cost
                heapq.heappush(heap, (new_cost, edge.in_node.id))
    return math.inf


def path_cost(graph, path):
    """Cost of a path using the cheapest edge for every hop."""
    total = 0.0
    for a, b in zip(path, path[1:]):
        weights = [e.get("weight") for e in graph.edges if e.out_node == a and e.in_node == b]
        assert weights, f"no edge {a!r} -> {b!r}"
        total += min(weights)
    return total


EUCLIDEAN = SearchConfig.from_options({'vertexAxisNames': ['x', 'y'], 'heuristicFormula': 'EUCLIDEAN'})


class TestOptimality:
    """A* and IDA* agree with Dijkstra; LRTA* returns valid routes."""

    @pytest.mark.parametrize("seed", range(12))
    def test_astar_matches_dijkstra(self, seed):
        graph = random_geometric_graph(seed)
        expected = dijkstra(graph, 0, 7)
        result = AStarSearcher().search(graph.get_node(0), graph.get_node(7), graph, config=EUCLIDEAN)

        if math.isinf(expected):
            assert len(result) == 0
        else:
            assert result.total_cost == pytest.approx(expected)
            assert path_cost(graph, result.nodes) == pytest.approx(expected)

    @pytest.mark.parametrize("seed", range(12))
    def test_idastar_matches_astar(self, seed):
        graph = random_geometric_graph(seed)
        astar = AStarSearcher().search(graph.get_node(0), graph.get_node(7), graph, config=EUCLIDEAN)
        idastar = IDAStarSearcher().search(graph.get_node(0), graph.get_node(7), graph, config=EUCLIDEAN)

        assert idastar.found == astar.found
        assert idastar.total_cost == pytest.approx(astar.total_cost)

    @pytest.mark.parametrize("seed", range(12))
    def test_blind_search_matches_guided(self, seed):
        graph = random_geometric_graph(seed)
        blind = AStarSearcher().search(graph.get_node(0), graph.get_node(7), graph)
        guided = AStarSearcher().search(graph.get_node(0), graph.get_node(7), graph, config=EUCLIDEAN)

        assert blind.total_cost == pytest.approx(guided.total_cost)

    @pytest.mark.parametrize("seed", range(12))
    def test_lrtastar_route_is_valid(self, seed):
        graph = random_geometric_graph(seed)
        expected = dijkstra(graph, 0, 7)
        result = LRTAStarSearcher().search(graph.get_node(0), graph.get_node(7), graph, config=EUCLIDEAN)

        if math.isinf(expected):
            assert len(result) == 0
            return

        path = result.nodes
        assert path[0].id == 0 and path[-1].id == 7
        assert len(path) == len(set(path))
        assert result.total_cost == pytest.approx(path_cost(graph, path))
        assert result.total_cost >= expected - 1e-9

    @pytest.mark.parametrize("seed", range(12))
    def test_lrtastar_learned_scores_stay_admissible(self, seed):
        graph = random_geometric_graph(seed)
        snapshots = []
        searcher = LRTAStarSearcher(trial_callback=lambda trial, h: snapshots.append(h))

        searcher.search(graph.get_node(0), graph.get_node(7), graph, config=EUCLIDEAN)

        assert snapshots
        for learned in snapshots:
            for node, score in learned.items():
                assert score <= dijkstra(graph, node.id, 7) + 1e-9


class TestTieBreaking:
    """The tie-breaking term changes the order of expansion, never the cost."""

    @pytest.fixture
    def grid(self):
        graph = InMemoryGraph()
        for x in range(6):
            for y in range(6):
                graph.add_node((x, y), x=x, y=y)
        for x in range(6):
            for y in range(6):
                for dx, dy in ((1, 0), (0, 1)):
                    if x + dx < 6 and y + dy < 6:
                        graph.add_edge((x, y), (x + dx, y + dy), weight=1)
                        graph.add_edge((x + dx, y + dy), (x, y), weight=1)
        return graph

    @pytest.mark.parametrize("searcher_cls", [AStarSearcher, IDAStarSearcher])
    def test_cost_unchanged(self, grid, searcher_cls):
        source, goal = grid.get_node((0, 0)), grid.get_node((5, 3))
        plain = searcher_cls().search(source, goal, grid, config=SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y']
        }))
        tied = searcher_cls().search(source, goal, grid, config=SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y'], 'tieBreaker': True
        }))

        assert plain.total_cost == tied.total_cost == 8.0

    def test_fewer_expansions(self, grid):
        source, goal = grid.get_node((0, 0)), grid.get_node((5, 5))
        plain = AStarSearcher().search(source, goal, grid, config=SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y']
        }))
        tied = AStarSearcher().search(source, goal, grid, config=SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y'], 'tieBreaker': True
        }))

        assert tied.nodes_expanded <= plain.nodes_expanded

    @pytest.mark.parametrize("searcher_cls", [AStarSearcher, IDAStarSearcher])
    def test_cost_unchanged_with_large_coordinates(self, searcher_cls):
        """Off-line route is 1 cheaper than the straight one, coordinates in metres."""
        graph = InMemoryGraph()
        graph.add_node("S", x=0, y=0)
        graph.add_node("G", x=10000, y=0)
        graph.add_node("P", x=5000, y=0)
        graph.add_node("Q", x=5000, y=100)
        graph.add_edge("S", "Q", weight=5100)
        graph.add_edge("Q", "G", weight=5100)
        graph.add_edge("S", "P", weight=5100)
        graph.add_edge("P", "G", weight=5101)

        source, goal = graph.get_node("S"), graph.get_node("G")
        plain = searcher_cls().search(source, goal, graph, config=SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y']
        }))
        tied = searcher_cls().search(source, goal, graph, config=SearchConfig.from_options({
            'vertexAxisNames': ['x', 'y'], 'tieBreaker': True
        }))

        assert [n.id for n in tied] == [n.id for n in plain] == ["S", "Q", "G"]
        assert plain.total_cost == tied.total_cost == 10200.0
