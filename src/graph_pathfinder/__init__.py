"""Heuristic path search (A*, IDA*, LRTA*) over weighted directed graphs."""

from .core import (
    ConfigurationError, Direction, Edge, GraphAccessor, HeuristicFormula, InMemoryGraph,
    MissingCapabilityError, Node, PathfinderError, PathResult, SearchConfig, TerminationReason
)
from .search import (
    AStarSearcher, IDAStarSearcher, LRTAStarSearcher, find_path, heuristic_formula,
    register_heuristic_formula
)

__version__ = "0.1.0"

__all__ = [
    'ConfigurationError',
    'Direction',
    'Edge',
    'GraphAccessor',
    'HeuristicFormula',
    'InMemoryGraph',
    'MissingCapabilityError',
    'Node',
    'PathfinderError',
    'PathResult',
    'SearchConfig',
    'TerminationReason',
    'AStarSearcher',
    'IDAStarSearcher',
    'LRTAStarSearcher',
    'find_path',
    'heuristic_formula',
    'register_heuristic_formula'
]
