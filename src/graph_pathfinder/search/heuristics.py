"""Heuristic cost estimation for A*-family searches.

Implements the distance formulas selectable through ``heuristicFormula``:
- 1 axis: scaled absolute difference
- 2+ axes: Manhattan, MaxAxis, Diagonal (octile), Euclidean, Euclidean without
  square root, Haversine (first two axes as latitude/longitude) and Custom
- optional tie-breaking term preferring nodes close to the source-goal line

Custom formulas live in a module-level registry and are resolved once, when
the evaluator is built.
"""

import logging
import math
import numbers
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from graph_pathfinder.core.data_models import HeuristicFormula, Node
from graph_pathfinder.core.exceptions import ConfigurationError, MissingCapabilityError
from graph_pathfinder.core.search_config import SearchConfig

logger = logging.getLogger(__name__)

TIE_BREAK_FACTOR = 0.0001
SQRT2 = math.sqrt(2.0)

# fn(axis_names, source, goal, current, parent, depth, d_factor) -> float
CustomFormula = Callable[[Sequence[str], Node, Node, Node, Node, int, float], float]

_custom_formulas: Dict[str, CustomFormula] = {}


def register_heuristic_formula(name: str, formula: CustomFormula) -> None:
    """Register a custom heuristic formula under ``name``.

    Args:
        name: Value callers pass as ``customHeuristicFormula``
        formula: Callable receiving axis names, source, goal, current and
            parent nodes, current depth and the distance factor
    """
    if not name:
        raise ConfigurationError("Custom heuristic formula name must not be empty")
    if not callable(formula):
        raise ConfigurationError(f"Custom heuristic formula '{name}' is not callable")
    if name in _custom_formulas:
        logger.warning(f"Replacing custom heuristic formula '{name}'")
    _custom_formulas[name] = formula
    logger.debug(f"Registered custom heuristic formula '{name}'")


def heuristic_formula(name: str) -> Callable[[CustomFormula], CustomFormula]:
    """Decorator form of ``register_heuristic_formula``."""
    def decorator(formula: CustomFormula) -> CustomFormula:
        register_heuristic_formula(name, formula)
        return formula
    return decorator


def unregister_heuristic_formula(name: str) -> None:
    _custom_formulas.pop(name, None)


def get_heuristic_formula(name: str) -> CustomFormula:
    """Look up a registered custom formula.

    Raises:
        MissingCapabilityError: If nothing is registered under ``name``
    """
    try:
        return _custom_formulas[name]
    except KeyError:
        raise MissingCapabilityError(name)


def list_heuristic_formulas() -> List[str]:
    return sorted(_custom_formulas)


def axis_value(node: Node, name: str) -> float:
    """Numeric property of a node; missing or non-numeric values read as 0."""
    value = node.get(name) if node is not None else None
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return 0.0
    return float(value)


def manhattan_distance(delta: np.ndarray, d_factor: float) -> float:
    return float(d_factor * np.sum(np.abs(delta)))


def max_axis_distance(delta: np.ndarray, d_factor: float) -> float:
    return float(d_factor * np.max(np.abs(delta)))


def diagonal_distance(delta: np.ndarray, d_factor: float) -> float:
    """Octile distance: straight moves cost d, diagonal moves cost d*sqrt(2)."""
    abs_delta = np.abs(delta)
    h_diagonal = float(np.min(abs_delta))
    h_straight = float(np.sum(abs_delta))
    return d_factor * h_straight + (SQRT2 - 2.0) * d_factor * h_diagonal


def euclidean_distance(delta: np.ndarray, d_factor: float) -> float:
    return float(d_factor * np.linalg.norm(delta))


def euclidean_no_sqr_distance(delta: np.ndarray, d_factor: float) -> float:
    """Squared Euclidean distance; only meaningful for relative comparisons."""
    return float(d_factor * np.dot(delta, delta))


def haversine_distance(lat: float, lon: float, goal_lat: float, goal_lon: float,
                       d_factor: float, radius: float) -> float:
    """Great-circle distance between two latitude/longitude pairs in degrees."""
    lat1 = math.radians(lat)
    lat2 = math.radians(goal_lat)
    d_lat = math.radians(goal_lat - lat)
    d_lon = math.radians(goal_lon - lon)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return d_factor * radius * c


def tie_breaking_term(current: np.ndarray, source: np.ndarray, goal: np.ndarray,
                      value: float) -> float:
    """Tie-breaking adjustment for a heuristic value.

    The sine of the angle between current->goal and source->goal, times
    ``TIE_BREAK_FACTOR * value``. Zero for nodes on the straight source-goal
    line and never more than ``TIE_BREAK_FACTOR`` of the value, whatever the
    coordinate scale. The cross-product magnitude comes from the Lagrange
    identity |a x b|^2 = |a|^2 |b|^2 - (a.b)^2 so it works for any number of axes.
    """
    if value <= 0.0:
        return 0.0
    a = current - goal
    b = source - goal
    norms_sq = float(np.dot(a, a) * np.dot(b, b))
    if norms_sq == 0.0:
        return 0.0
    cross_sq = max(0.0, norms_sq - float(np.dot(a, b)) ** 2)
    return TIE_BREAK_FACTOR * value * math.sqrt(cross_sq / norms_sq)


_VECTOR_FORMULAS = {
    HeuristicFormula.MANHATTAN: manhattan_distance,
    HeuristicFormula.MAXAXIS: max_axis_distance,
    HeuristicFormula.DIAGONAL: diagonal_distance,
    HeuristicFormula.EUCLIDEAN: euclidean_distance,
    HeuristicFormula.EUCLIDEANNOSQR: euclidean_no_sqr_distance,
}


class HeuristicEvaluator:
    """Estimates remaining cost from a node to the goal.

    One evaluator is built per search invocation. It is a pure function of
    its arguments and the immutable configuration; the only mutable field is
    the ``computation_count`` statistic.
    """

    def __init__(self, config: SearchConfig, source: Node):
        """Initialize evaluator.

        Args:
            config: Search configuration
            source: Search source node, needed by tie-breaking and custom formulas

        Raises:
            MissingCapabilityError: If a custom formula is selected but not registered
        """
        self.config = config
        self.source = source
        self.axis_names = tuple(config.vertex_axis_names)
        self.custom_formula: Optional[CustomFormula] = None
        self.computation_count = 0

        if config.heuristic_formula == HeuristicFormula.CUSTOM:
            self.custom_formula = get_heuristic_formula(config.custom_heuristic_formula)

        self._source_vector = self._vector(source) if len(self.axis_names) >= 2 else None

    def _vector(self, node: Node) -> np.ndarray:
        return np.array([axis_value(node, name) for name in self.axis_names], dtype=np.float64)

    def estimate(self, node: Node, parent: Optional[Node], goal: Node, depth: int = 0) -> float:
        """Compute heuristic value.

        Args:
            node: Node being evaluated
            parent: Node it was reached from (``None`` means the node itself)
            goal: Search destination
            depth: Current search depth, forwarded to custom formulas

        Returns:
            Non-negative estimated remaining cost
        """
        self.computation_count += 1
        axis_count = len(self.axis_names)

        if axis_count == 0:
            return 0.0

        d_factor = self.config.d_factor
        if axis_count == 1:
            name = self.axis_names[0]
            return d_factor * abs(axis_value(node, name) - axis_value(goal, name))

        if parent is None:
            parent = node

        current = self._vector(node)
        target = self._vector(goal)
        formula = self.config.heuristic_formula

        if formula == HeuristicFormula.CUSTOM:
            value = float(self.custom_formula(
                self.axis_names, self.source, goal, node, parent, depth, d_factor
            ))
        elif formula == HeuristicFormula.HAVERSINE:
            value = haversine_distance(
                current[0], current[1], target[0], target[1],
                d_factor, self.config.haversine_radius
            )
        else:
            value = _VECTOR_FORMULAS[formula](current - target, d_factor)

        if self.config.tie_breaker:
            value += tie_breaking_term(current, self._source_vector, target, value)

        if value < 0.0:
            logger.debug(f"Clamping negative heuristic {value} for {node!r} to 0")
            return 0.0
        return value

    def get_stats(self) -> Dict[str, Any]:
        """Get computation statistics."""
        return {
            'formula': self.config.heuristic_formula.value,
            'axes': list(self.axis_names),
            'tie_breaker': self.config.tie_breaker,
            'computation_count': self.computation_count,
        }


def create_heuristic_evaluator(config: SearchConfig, source: Node) -> HeuristicEvaluator:
    """Factory function to create a heuristic evaluator."""
    return HeuristicEvaluator(config, source)
