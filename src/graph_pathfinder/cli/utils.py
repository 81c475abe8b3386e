"""CLI utility functions."""

import logging
from typing import Any, Dict, List, Optional

from graph_pathfinder.core.data_models import PathResult


def setup_logging(level: int = logging.INFO,
                  format_string: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        level: Logging level
        format_string: Custom format string
    """
    if format_string is None:
        if level <= logging.DEBUG:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True
    )

    # Hydra is chatty at INFO
    logging.getLogger('hydra').setLevel(logging.WARNING)


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.0f}µs"
    elif seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    else:
        minutes = int(seconds // 60)
        return f"{minutes}m {seconds - minutes * 60:.1f}s"


def build_options(args) -> Dict[str, Any]:
    """Collect search options from parsed ``search``/``compare`` arguments.

    Only flags the user actually gave end up in the map, so configured
    defaults still apply to everything else.
    """
    options: Dict[str, Any] = {}
    if args.direction is not None:
        options['direction'] = args.direction
    if args.edge_types:
        options['edgeTypeNames'] = split_names(args.edge_types)
    if args.axes:
        options['vertexAxisNames'] = split_names(args.axes)
    if args.formula is not None:
        options['heuristicFormula'] = args.formula
    if args.custom_formula is not None:
        options['customHeuristicFormula'] = args.custom_formula
    if args.d_factor is not None:
        options['dFactor'] = args.d_factor
    if args.tie_breaker:
        options['tieBreaker'] = True
    if args.max_depth is not None:
        options['maxDepth'] = args.max_depth
    if args.empty_if_max_depth:
        options['emptyIfMaxDepth'] = True
    if args.timeout is not None:
        options['timeout'] = args.timeout
    if args.haversine_radius is not None:
        options['haversineRadius'] = args.haversine_radius
    return options


def split_names(value: str) -> List[str]:
    return [name.strip() for name in value.split(',') if name.strip()]


def format_result(result: PathResult) -> str:
    """One-line human readable summary of a search result."""
    if not result.found:
        return (f"{result.algorithm}: no path ({result.termination_reason.value}) "
                f"after {result.nodes_expanded} expansions in {format_duration(result.computation_time)}")
    path = " -> ".join(str(node_id) for node_id in result.node_ids())
    return (f"{result.algorithm}: {path} (cost {result.total_cost:.6g}, "
            f"{result.termination_reason.value}, {result.nodes_expanded} expansions, "
            f"{format_duration(result.computation_time)})")


def print_comparison(results: List[PathResult]) -> None:
    """Print a table comparing several search results."""
    print(f"{'algorithm':<10} {'nodes':>6} {'cost':>12} {'expanded':>9} {'iters':>6} "
          f"{'time':>10}  reason")
    print("-" * 72)
    for result in results:
        print(f"{result.algorithm:<10} {len(result):>6} {result.total_cost:>12.6g} "
              f"{result.nodes_expanded:>9} {result.iterations:>6} "
              f"{format_duration(result.computation_time):>10}  {result.termination_reason.value}")
