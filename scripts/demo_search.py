#!/usr/bin/env python3
"""Demonstrate the three searchers on a small grid with obstacles."""

import numpy as np

from graph_pathfinder.core.graph import InMemoryGraph
from graph_pathfinder.search import available_algorithms, find_path


def build_grid(size: int = 8, obstacle_ratio: float = 0.2, seed: int = 7) -> InMemoryGraph:
    """Four-connected grid; blocked cells get no edges."""
    rng = np.random.default_rng(seed)
    blocked = rng.random((size, size)) < obstacle_ratio
    blocked[0, 0] = blocked[size - 1, size - 1] = False

    graph = InMemoryGraph()
    for x in range(size):
        for y in range(size):
            graph.add_node((x, y), x=x, y=y)

    for x in range(size):
        for y in range(size):
            if blocked[x, y]:
                continue
            for dx, dy in ((1, 0), (0, 1), (-1, 0), (0, -1)):
                nx, ny = x + dx, y + dy
                if 0 <= nx < size and 0 <= ny < size and not blocked[nx, ny]:
                    graph.add_edge((x, y), (nx, ny), "step", weight=1.0)
    return graph


def main():
    """Run every algorithm with several heuristic settings."""
    print("Heuristic path search demo")
    print("=" * 60)

    graph = build_grid()
    source, goal = graph.get_node((0, 0)), graph.get_node((7, 7))

    settings = [
        ("no heuristic", {}),
        ("manhattan", {'vertexAxisNames': ['x', 'y']}),
        ("manhattan + tie-break", {'vertexAxisNames': ['x', 'y'], 'tieBreaker': True}),
        ("euclidean", {'vertexAxisNames': ['x', 'y'], 'heuristicFormula': 'EUCLIDEAN'}),
    ]

    for label, options in settings:
        print(f"\n{label}")
        for algorithm in available_algorithms():
            result = find_path(algorithm, source, goal, options=options, accessor=graph)
            print(f"  {algorithm:<9} nodes={len(result):>3} cost={result.total_cost:>6.2f} "
                  f"expanded={result.nodes_expanded:>4} iterations={result.iterations:>3} "
                  f"time={result.computation_time*1000:.2f}ms ({result.termination_reason.value})")

    print("\nLRTA* with a 1ms budget")
    result = find_path("lrtastar", source, goal, options={'timeout': 1}, accessor=graph)
    print(f"  nodes={len(result)} reason={result.termination_reason.value}")


if __name__ == '__main__':
    main()
