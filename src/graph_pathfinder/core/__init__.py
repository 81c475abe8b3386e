"""Graph model, configuration value objects and errors shared by all searchers."""

from .data_models import (
    Direction, Edge, HeuristicFormula, Node, PathResult, SearchState, TerminationReason
)
from .exceptions import ConfigurationError, MissingCapabilityError, PathfinderError
from .graph import GraphAccessor, InMemoryGraph
from .search_config import SearchConfig

__all__ = [
    'Direction',
    'Edge',
    'HeuristicFormula',
    'Node',
    'PathResult',
    'SearchState',
    'TerminationReason',
    'ConfigurationError',
    'MissingCapabilityError',
    'PathfinderError',
    'GraphAccessor',
    'InMemoryGraph',
    'SearchConfig'
]
