"""A* search over a weighted, directed graph.

Classic best-first search ordered by f = g + h with a closed set. Optimal
when the heuristic is admissible and consistent; with no axis properties the
heuristic is zero and the search degenerates to uniform-cost (Dijkstra).
"""

import logging

from graph_pathfinder.core.data_models import Node, PathResult, SearchState, TerminationReason
from graph_pathfinder.core.graph import GraphAccessor
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search.base import PathSearcher, reconstruct_path
from graph_pathfinder.search.heuristics import HeuristicEvaluator

logger = logging.getLogger(__name__)


class AStarSearcher(PathSearcher):
    """A* search with an open heap, closed set and predecessor map."""

    name = "astar"

    def _run(self, state: SearchState, source: Node, destination: Node,
             accessor: GraphAccessor, weight_field: str, config: SearchConfig,
             evaluator: HeuristicEvaluator) -> PathResult:
        # The cost of going from start to start is zero
        state.g_score[source] = 0.0
        state.f_score[source] = evaluator.estimate(source, None, destination, 0)
        state.push(source, state.f_score[source])

        while True:
            current = state.pop()
            if current is None:
                break

            if config.empty_if_max_depth and state.depth >= config.max_depth:
                logger.debug(f"A* reached max depth {config.max_depth}; returning empty path")
                return self._empty(TerminationReason.DEPTH_CUTOFF,
                                   max_depth_reached=state.depth)

            reached_goal = current == destination
            if reached_goal or state.depth >= config.max_depth:
                path = reconstruct_path(state.came_from, current)
                reason = TerminationReason.FOUND if reached_goal else TerminationReason.DEPTH_CUTOFF
                return PathResult(
                    nodes=path,
                    total_cost=state.g_score[current],
                    termination_reason=reason,
                    max_depth_reached=state.depth,
                )

            state.closed.add(current)
            state.nodes_expanded += 1
            current_g = state.g_score[current]

            for neighbor, distance in self._neighbors(state, accessor, current, config, weight_field):
                # Ignore neighbors which are already evaluated
                if neighbor in state.closed:
                    continue

                tentative_g = current_g + distance
                known_g = state.g_score.get(neighbor)
                if known_g is None or tentative_g < known_g:
                    state.g_score[neighbor] = tentative_g
                    state.f_score[neighbor] = tentative_g + evaluator.estimate(
                        neighbor, current, destination, state.depth
                    )
                    state.came_from[neighbor] = current
                    state.push(neighbor, state.f_score[neighbor])

            state.depth += 1
            state.max_depth_reached = state.depth

        logger.debug(f"A* open set exhausted after {state.nodes_expanded} expansions")
        return self._empty(TerminationReason.EXHAUSTED, max_depth_reached=state.depth)


def create_astar_searcher() -> AStarSearcher:
    """Factory function to create an A* searcher."""
    return AStarSearcher()
