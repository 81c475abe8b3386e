"""Common contract and helpers shared by the A*-family searchers."""

import logging
import numbers
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from graph_pathfinder.core.data_models import Node, PathResult, SearchState, TerminationReason
from graph_pathfinder.core.exceptions import ConfigurationError
from graph_pathfinder.core.graph import GraphAccessor
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search.heuristics import HeuristicEvaluator, create_heuristic_evaluator

logger = logging.getLogger(__name__)

# Cost used for edges whose weight property is absent or not numeric
MIN_DISTANCE = 0.000001


def edge_distance(accessor: GraphAccessor, edge: Any, weight_field: str) -> float:
    """Read an edge weight, falling back to ``MIN_DISTANCE``."""
    value = accessor.weight(edge, weight_field)
    if value is None or isinstance(value, bool) or not isinstance(value, numbers.Real):
        return MIN_DISTANCE
    return float(value)


def expand_neighbors(accessor: GraphAccessor, node: Node, config: SearchConfig,
                     weight_field: str) -> List[Tuple[Node, float]]:
    """List ``(neighbor, distance)`` pairs reachable from ``node``.

    Parallel edges to the same neighbor collapse to the cheapest one. Order
    follows the accessor's edge order so searches stay deterministic.
    """
    best: Dict[Node, float] = {}
    for edge in accessor.neighbor_edges(node, config.direction, config.edge_type_names):
        if edge is None:
            continue
        neighbor = accessor.other_endpoint(edge, node)
        if neighbor is None:
            continue
        distance = edge_distance(accessor, edge, weight_field)
        previous = best.get(neighbor)
        if previous is None or distance < previous:
            best[neighbor] = distance
    return list(best.items())


def reconstruct_path(came_from: Dict[Any, Any], end: Any) -> List[Any]:
    """Walk predecessors back from ``end`` and return the path source-first."""
    path = []
    current = end
    seen = set()
    while current is not None and current not in seen:
        seen.add(current)
        path.append(current)
        current = came_from.get(current)
    path.reverse()
    return path


class PathSearcher(ABC):
    """Interface every search algorithm satisfies.

    ``search`` validates its inputs and builds the heuristic evaluator before
    handing over to ``_run`` with a brand-new ``SearchState``. Nothing about a
    call is kept on the instance, so one searcher can serve concurrent callers.
    """

    name: str = "abstract"

    def search(self, source: Node, destination: Node, accessor: GraphAccessor,
               weight_field: str = "weight",
               config: Optional[SearchConfig] = None) -> PathResult:
        """Find a path from ``source`` to ``destination``.

        Args:
            source: Start node
            destination: Goal node
            accessor: Graph the search reads from
            weight_field: Edge property holding the traversal cost
            config: Search options (defaults when None)

        Returns:
            PathResult; empty when no path exists or a budget ran out under
            the empty-result policy

        Raises:
            ConfigurationError: If arguments are malformed
            MissingCapabilityError: If a custom formula is selected but not registered
        """
        config = config or SearchConfig()
        if not isinstance(config, SearchConfig):
            raise ConfigurationError(f"config must be a SearchConfig, got {type(config).__name__}")
        if source is None or destination is None:
            raise ConfigurationError("Both source and destination nodes are required")
        if not isinstance(weight_field, str):
            raise ConfigurationError(f"weight field name must be a string, got {weight_field!r}")

        evaluator = create_heuristic_evaluator(config, source)

        logger.info(f"Starting {self.name} search: {source!r} -> {destination!r} "
                    f"(formula={config.heuristic_formula.value}, axes={list(config.vertex_axis_names)})")
        start_time = time.perf_counter()

        state = SearchState()
        result = self._run(state, source, destination, accessor, weight_field, config, evaluator)

        result.algorithm = self.name
        result.computation_time = time.perf_counter() - start_time
        result.nodes_expanded = state.nodes_expanded
        result.neighbor_lookups = state.neighbor_lookups
        result.max_depth_reached = max(result.max_depth_reached, state.max_depth_reached)

        logger.info(f"{self.name} search finished: {result.termination_reason.value}, "
                    f"{len(result)} nodes, cost={result.total_cost:.6g}, "
                    f"expanded={result.nodes_expanded}, time={result.computation_time*1000:.2f}ms")
        return result

    @abstractmethod
    def _run(self, state: SearchState, source: Node, destination: Node,
             accessor: GraphAccessor, weight_field: str, config: SearchConfig,
             evaluator: HeuristicEvaluator) -> PathResult:
        """Algorithm body; owns ``state`` for the duration of the call."""
        pass

    def _neighbors(self, state: SearchState, accessor: GraphAccessor, node: Node,
                   config: SearchConfig, weight_field: str) -> List[Tuple[Node, float]]:
        state.neighbor_lookups += 1
        return expand_neighbors(accessor, node, config, weight_field)

    @staticmethod
    def _empty(reason: TerminationReason, **stats) -> PathResult:
        return PathResult(nodes=[], total_cost=0.0, termination_reason=reason, **stats)
