"""Iterative-Deepening A* search.

Repeats a cost-bounded depth-first search with a growing f threshold,
trading recomputation for memory: only the current path and per-iteration
g-scores are kept. The depth-first pass runs on an explicit stack, so deep
graphs cannot exhaust the interpreter's recursion limit.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from graph_pathfinder.core.data_models import Node, PathResult, SearchState, TerminationReason
from graph_pathfinder.core.graph import GraphAccessor
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search.base import PathSearcher, reconstruct_path
from graph_pathfinder.search.heuristics import HeuristicEvaluator

logger = logging.getLogger(__name__)


@dataclass
class BoundedResult:
    """Outcome of one bounded depth-first pass (or of a single node in it)."""
    solution: Optional[Node] = None
    limit: float = math.inf  # smallest f that exceeded the threshold
    depth: int = 0  # deepest depth explored


@dataclass
class _Frame:
    node: Node
    depth: int
    neighbors: Iterator[Tuple[Node, float]]
    min_limit: float = math.inf
    max_depth: int = 0

    def absorb(self, child: BoundedResult) -> None:
        self.min_limit = min(self.min_limit, child.limit)
        self.max_depth = max(self.max_depth, child.depth)


@dataclass
class _Bounds:
    """Read-only inputs of one bounded pass."""
    destination: Node
    limit: float
    config: SearchConfig
    evaluator: HeuristicEvaluator
    accessor: GraphAccessor
    weight_field: str
    deepest: int = field(default=0)


class IDAStarSearcher(PathSearcher):
    """IDA* with predecessor-chain cycle avoidance instead of a closed set."""

    name = "idastar"

    def _run(self, state: SearchState, source: Node, destination: Node,
             accessor: GraphAccessor, weight_field: str, config: SearchConfig,
             evaluator: HeuristicEvaluator) -> PathResult:
        limit = evaluator.estimate(source, None, destination, 0)
        iterations = 0

        while True:
            iterations += 1
            state.reset_iteration(source)
            bounds = _Bounds(destination, limit, config, evaluator, accessor, weight_field)
            result = self._bounded_search(state, source, bounds)
            state.max_depth_reached = max(state.max_depth_reached, bounds.deepest)

            logger.debug(f"IDA* iteration {iterations}: threshold={limit:.6g}, "
                         f"next={result.limit:.6g}, deepest={bounds.deepest}")

            if config.empty_if_max_depth and bounds.deepest >= config.max_depth:
                return self._empty(TerminationReason.DEPTH_CUTOFF, iterations=iterations)

            if result.solution is not None:
                solution = result.solution
                reason = (TerminationReason.FOUND if solution == destination
                          else TerminationReason.DEPTH_CUTOFF)
                return PathResult(
                    nodes=reconstruct_path(state.came_from, solution),
                    total_cost=state.g_score[solution],
                    termination_reason=reason,
                    iterations=iterations,
                )

            if math.isinf(result.limit):
                # No node exceeded the threshold: the space is fully enumerated
                return self._empty(TerminationReason.EXHAUSTED, iterations=iterations)

            limit = result.limit

    def _enter(self, state: SearchState, node: Node, parent: Optional[Node],
               depth: int, bounds: _Bounds) -> Optional[BoundedResult]:
        """Evaluate a node on arrival.

        Returns a final result for the node (threshold exceeded, goal reached or
        depth cut-off), or None when its neighbors must be explored.
        """
        bounds.deepest = max(bounds.deepest, depth)
        f = state.g_score[node] + bounds.evaluator.estimate(node, parent, bounds.destination, depth)
        if f > bounds.limit:
            return BoundedResult(None, f, depth)
        if node == bounds.destination or depth >= bounds.config.max_depth:
            return BoundedResult(node, bounds.limit, depth)
        return None

    def _is_on_path(self, state: SearchState, check: Node, current: Optional[Node]) -> bool:
        while current is not None:
            if current == check:
                return True
            current = state.came_from.get(current)
        return False

    def _open_frame(self, state: SearchState, node: Node, depth: int, bounds: _Bounds) -> _Frame:
        state.nodes_expanded += 1
        neighbors = self._neighbors(state, bounds.accessor, node, bounds.config, bounds.weight_field)
        return _Frame(node, depth, iter(neighbors))

    def _bounded_search(self, state: SearchState, source: Node, bounds: _Bounds) -> BoundedResult:
        """Depth-first search bounded by ``bounds.limit`` on an explicit stack."""
        outcome = self._enter(state, source, None, 0, bounds)
        if outcome is not None:
            return outcome

        stack = [self._open_frame(state, source, 0, bounds)]
        while stack:
            frame = stack[-1]
            descended = False

            for neighbor, distance in frame.neighbors:
                if self._is_on_path(state, neighbor, frame.node):
                    continue

                state.came_from[neighbor] = frame.node
                state.g_score[neighbor] = state.g_score[frame.node] + distance
                child_depth = frame.depth + 1

                outcome = self._enter(state, neighbor, frame.node, child_depth, bounds)
                if outcome is None:
                    stack.append(self._open_frame(state, neighbor, child_depth, bounds))
                    descended = True
                    break
                if outcome.solution is not None:
                    return outcome
                frame.absorb(outcome)

            if descended:
                continue

            stack.pop()
            finished = BoundedResult(None, frame.min_limit, frame.max_depth)
            if not stack:
                return finished
            stack[-1].absorb(finished)

        return BoundedResult()


def create_idastar_searcher() -> IDAStarSearcher:
    """Factory function to create an IDA* searcher."""
    return IDAStarSearcher()
