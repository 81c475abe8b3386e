"""Learning Real-Time A* (LRTA*) search.

An agent walks from source to goal one step at a time, always moving to the
neighbor with the lowest ``distance + h`` and raising the learned h-score of
the node it leaves. Trials repeat until a whole trial leaves the learned
table unchanged, or until the wall-clock budget runs out, in which case the
best route completed so far is returned.

Learned scores only ever increase. A node from which the goal is provably
unreachable (no successors, or a closed region of already expanded nodes
without the goal) learns an infinite score so the agent stops entering it.
When the agent closes a loop without learning anything (zero-cost edges), it
walks the cheapest known route to the goal or to a node not expanded yet.
"""

import heapq
import logging
import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from graph_pathfinder.core.data_models import Node, PathResult, SearchState, TerminationReason
from graph_pathfinder.core.graph import GraphAccessor
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search.base import PathSearcher
from graph_pathfinder.search.heuristics import HeuristicEvaluator

logger = logging.getLogger(__name__)

TrialCallback = Callable[[int, Dict[Node, float]], None]


def remove_cycles(route: List[Node]) -> List[Node]:
    """Collapse every loop in a route.

    When a node shows up again, everything between its first and last
    occurrence is dropped, e.g. ``A B C B D`` becomes ``A B D``.
    """
    result: List[Node] = []
    positions: Dict[Node, int] = {}
    for node in route:
        index = positions.get(node)
        if index is None:
            positions[node] = len(result)
            result.append(node)
            continue
        for dropped in result[index + 1:]:
            del positions[dropped]
        del result[index + 1:]
    return result


@dataclass
class TrialOutcome:
    """Route walked by one trial and how the trial ended."""
    route: List[Node]
    completed: bool = False
    timed_out: bool = False


@dataclass
class LearningState:
    """Per-invocation LRTA* bookkeeping on top of the shared counters."""
    search: SearchState
    destination: Node
    config: SearchConfig
    evaluator: HeuristicEvaluator
    accessor: GraphAccessor
    weight_field: str
    start_time: float
    learned: Dict[Node, float] = field(default_factory=dict)
    successors: Dict[Node, List[Tuple[Node, float]]] = field(default_factory=dict)
    updates: int = 0

    def learn(self, node: Node, score: float) -> None:
        self.learned[node] = score
        self.updates += 1

    def timed_out(self) -> bool:
        if self.config.timeout is None:
            return False
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000.0
        return elapsed_ms >= self.config.timeout

    def h_score(self, node: Node, parent: Optional[Node], depth: int = 0) -> float:
        """Learned score if one exists, otherwise the static estimate."""
        score = self.learned.get(node)
        if score is None:
            return self.evaluator.estimate(node, parent, self.destination, depth)
        return score


class LRTAStarSearcher(PathSearcher):
    """LRTA* with per-invocation learned heuristic table."""

    name = "lrtastar"

    def __init__(self, trial_callback: Optional[TrialCallback] = None):
        """Initialize LRTA* searcher.

        Args:
            trial_callback: Called after every trial with the trial number and a
                snapshot of the learned h-scores
        """
        self.trial_callback = trial_callback

    def _run(self, state: SearchState, source: Node, destination: Node,
             accessor: GraphAccessor, weight_field: str, config: SearchConfig,
             evaluator: HeuristicEvaluator) -> PathResult:
        learning = LearningState(
            search=state,
            destination=destination,
            config=config,
            evaluator=evaluator,
            accessor=accessor,
            weight_field=weight_field,
            start_time=time.perf_counter(),
        )
        best_route: Optional[List[Node]] = None
        best_cost = math.inf
        trials = 0

        while True:
            previous = dict(learning.learned)
            trials += 1
            outcome = self._trial(learning, source)
            state.max_depth_reached = max(state.max_depth_reached, len(outcome.route) - 1)

            if self.trial_callback is not None:
                self.trial_callback(trials, dict(learning.learned))

            if outcome.timed_out:
                logger.warning(f"LRTA* timed out after {trials} trials "
                               f"(budget {config.timeout}ms)")
                if best_route is None:
                    return self._empty(TerminationReason.TIMED_OUT, iterations=trials)
                return self._finish(learning, best_route, TerminationReason.TIMED_OUT, trials)

            if outcome.completed:
                route = remove_cycles(outcome.route)
                cost = self._route_cost(learning, route)
                if best_route is None or (len(route), cost) < (len(best_route), best_cost):
                    best_route, best_cost = route, cost
                logger.debug(f"LRTA* trial {trials}: {len(outcome.route)} steps, "
                             f"{len(route)} nodes after cycle removal, cost={cost:.6g}")
                if learning.learned == previous:
                    return self._finish(learning, route, TerminationReason.FOUND, trials)
            else:
                logger.debug(f"LRTA* trial {trials} hit a dead end")
                if math.isinf(learning.learned.get(source, 0.0)):
                    return self._empty(TerminationReason.EXHAUSTED, iterations=trials)

    def _trial(self, learning: LearningState, source: Node) -> TrialOutcome:
        """Walk once from source towards the goal, updating learned scores."""
        current = source
        route = [source]
        # learned-table version at the last visit of each node
        last_seen = {source: learning.updates}

        while current != learning.destination:
            if learning.timed_out():
                return TrialOutcome(route, timed_out=True)

            depth = len(route) - 1
            pick, pick_score = None, math.inf
            for neighbor, distance in self._successors(learning, current):
                score = distance + learning.h_score(neighbor, current, depth + 1)
                if score < pick_score:
                    pick, pick_score = neighbor, score

            if pick is None:
                learning.learn(current, math.inf)
                return TrialOutcome(route)

            # Backup rule: h(current) = max(h(current), dist + h(successor))
            if learning.h_score(current, None, depth) < pick_score:
                learning.learn(current, pick_score)

            route.append(pick)
            current = pick

            if current in last_seen and current != learning.destination:
                if self._mark_if_trapped(learning, current):
                    return TrialOutcome(route)
                if last_seen[current] == learning.updates:
                    # Nothing learned since the last visit, so walk out of the loop
                    escape = self._escape_route(learning, current)
                    logger.debug(f"LRTA* left a zero-cost loop at {current!r} "
                                 f"through {len(escape)} known steps")
                    route.extend(escape)
                    current = escape[-1]
            last_seen[current] = learning.updates

        return TrialOutcome(route, completed=True)

    def _successors(self, learning: LearningState, node: Node) -> List[Tuple[Node, float]]:
        successors = learning.successors.get(node)
        if successors is None:
            learning.search.nodes_expanded += 1
            successors = self._neighbors(learning.search, learning.accessor, node,
                                         learning.config, learning.weight_field)
            learning.successors[node] = successors
        return successors

    def _mark_if_trapped(self, learning: LearningState, start: Node) -> bool:
        """Check whether the goal is unreachable from ``start``.

        Explores the already expanded region reachable from ``start``. If it
        contains neither the goal nor a node whose neighbors are still
        unknown, every node in it learns an infinite score.
        """
        region = {start}
        queue = deque([start])
        while queue:
            node = queue.popleft()
            successors = learning.successors.get(node)
            if successors is None:
                return False
            for neighbor, _ in successors:
                if neighbor == learning.destination:
                    return False
                if neighbor in region or math.isinf(learning.learned.get(neighbor, 0.0)):
                    continue
                region.add(neighbor)
                queue.append(neighbor)

        logger.debug(f"LRTA* found {len(region)} nodes that cannot reach the goal")
        for node in region:
            learning.learn(node, math.inf)
        return True

    def _escape_route(self, learning: LearningState, start: Node) -> List[Node]:
        """Cheapest known way from ``start`` to the goal or to unexplored ground.

        Dijkstra over the expanded part of the graph. Among the goal and nodes
        whose neighbors are still unknown, picks the one minimising
        ``cost + h`` and returns the steps after ``start`` leading to it.
        Only called when ``_mark_if_trapped`` found such a node.
        """
        costs = {start: 0.0}
        parents: Dict[Node, Node] = {}
        heap = [(0.0, 0, start)]
        counter = 1
        best, best_score = None, math.inf

        while heap:
            cost, _, node = heapq.heappop(heap)
            if cost > costs[node]:
                continue
            successors = learning.successors.get(node)
            if node != start and (node == learning.destination or successors is None):
                score = cost + learning.h_score(node, parents[node])
                if score < best_score:
                    best, best_score = node, score
                continue
            for neighbor, distance in successors:
                if math.isinf(learning.learned.get(neighbor, 0.0)):
                    continue
                new_cost = cost + distance
                if new_cost < costs.get(neighbor, math.inf):
                    costs[neighbor] = new_cost
                    parents[neighbor] = node
                    heapq.heappush(heap, (new_cost, counter, neighbor))
                    counter += 1

        if best is None:
            raise RuntimeError(f"No way out of the loop at {start!r}")
        steps = [best]
        while parents[steps[-1]] != start:
            steps.append(parents[steps[-1]])
        steps.reverse()
        return steps

    def _route_cost(self, learning: LearningState, route: List[Node]) -> float:
        cost = 0.0
        for node, successor in zip(route, route[1:]):
            cost += min(d for n, d in learning.successors[node] if n == successor)
        return cost

    def _finish(self, learning: LearningState, route: List[Node],
                reason: TerminationReason, trials: int) -> PathResult:
        """Apply the max-depth policy to the final route.

        A truncated route keeps at least the source node.
        """
        config = learning.config
        if len(route) > config.max_depth:
            if config.empty_if_max_depth:
                return self._empty(TerminationReason.DEPTH_CUTOFF, iterations=trials)
            route = route[:max(config.max_depth, 1)]
            if route[-1] != learning.destination:
                reason = TerminationReason.DEPTH_CUTOFF

        return PathResult(
            nodes=list(route),
            total_cost=self._route_cost(learning, route),
            termination_reason=reason,
            iterations=trials,
        )


def create_lrtastar_searcher(trial_callback: Optional[TrialCallback] = None) -> LRTAStarSearcher:
    """Factory function to create an LRTA* searcher."""
    return LRTAStarSearcher(trial_callback)
