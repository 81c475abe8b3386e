"""Search algorithms for graph_pathfinder.

Three interchangeable strategies share one contract (``PathSearcher``) and
one heuristic evaluator: best-first A*, memory-bounded IDA* and the
online, time-bounded LRTA*.
"""

from .heuristics import (
    HeuristicEvaluator, create_heuristic_evaluator, heuristic_formula,
    register_heuristic_formula, unregister_heuristic_formula, get_heuristic_formula,
    list_heuristic_formulas
)
from .base import PathSearcher, MIN_DISTANCE, edge_distance, expand_neighbors
from .astar import AStarSearcher, create_astar_searcher
from .idastar import IDAStarSearcher, create_idastar_searcher
from .lrtastar import LRTAStarSearcher, create_lrtastar_searcher, remove_cycles
from .pathfinder import available_algorithms, create_searcher, find_path

__all__ = [
    'HeuristicEvaluator',
    'create_heuristic_evaluator',
    'heuristic_formula',
    'register_heuristic_formula',
    'unregister_heuristic_formula',
    'get_heuristic_formula',
    'list_heuristic_formulas',
    'PathSearcher',
    'MIN_DISTANCE',
    'edge_distance',
    'expand_neighbors',
    'AStarSearcher',
    'create_astar_searcher',
    'IDAStarSearcher',
    'create_idastar_searcher',
    'LRTAStarSearcher',
    'create_lrtastar_searcher',
    'remove_cycles',
    'available_algorithms',
    'create_searcher',
    'find_path'
]
