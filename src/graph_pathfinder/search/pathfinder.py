"""Public entry point: pick an algorithm, resolve arguments, run the search."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Type, Union

from omegaconf import OmegaConf

from graph_pathfinder.core.data_models import Node, PathResult
from graph_pathfinder.core.exceptions import ConfigurationError
from graph_pathfinder.core.graph import GraphAccessor
from graph_pathfinder.core.search_config import SearchConfig
from graph_pathfinder.search.astar import AStarSearcher
from graph_pathfinder.search.base import PathSearcher
from graph_pathfinder.search.idastar import IDAStarSearcher
from graph_pathfinder.search.lrtastar import LRTAStarSearcher

logger = logging.getLogger(__name__)

SEARCHERS: Dict[str, Type[PathSearcher]] = {
    AStarSearcher.name: AStarSearcher,
    IDAStarSearcher.name: IDAStarSearcher,
    LRTAStarSearcher.name: LRTAStarSearcher,
}


def available_algorithms() -> List[str]:
    return list(SEARCHERS)


def create_searcher(algorithm: str, **kwargs) -> PathSearcher:
    """Instantiate a searcher by name ("astar", "idastar" or "lrtastar").

    Raises:
        ConfigurationError: If the name is unknown
    """
    if not isinstance(algorithm, str):
        raise ConfigurationError(f"Algorithm name must be a string, got {algorithm!r}")
    searcher_cls = SEARCHERS.get(algorithm.strip().lower())
    if searcher_cls is None:
        raise ConfigurationError(
            f"Unknown search algorithm '{algorithm}'; expected one of {available_algorithms()}"
        )
    return searcher_cls(**kwargs)


def resolve_node(value: Any, accessor: GraphAccessor, role: str) -> Node:
    """Turn a node argument into exactly one node.

    Accepts a node, a reference the accessor can resolve through ``get_node``,
    or a one-element collection of either.
    """
    if isinstance(value, (list, tuple, set, frozenset)):
        if len(value) > 1:
            raise ConfigurationError(f"Only one {role} node is allowed, got {len(value)}")
        if not value:
            raise ConfigurationError(f"No {role} node given")
        value = next(iter(value))

    if isinstance(value, Node):
        return value
    if value is None:
        raise ConfigurationError(f"No {role} node given")

    get_node = getattr(accessor, 'get_node', None)
    if get_node is None:
        raise ConfigurationError(
            f"Cannot resolve {role} reference {value!r}: accessor has no get_node()"
        )
    node = get_node(value)
    if node is None:
        raise ConfigurationError(f"Unknown {role} node {value!r}")
    return node


def default_options() -> Dict[str, Any]:
    """Option defaults from the loaded Hydra configuration, if any."""
    from graph_pathfinder.config import get_config

    cfg = get_config()
    if cfg is None:
        return {}
    defaults = OmegaConf.select(cfg, 'search.defaults')
    if defaults is None:
        return {}
    return OmegaConf.to_container(defaults, resolve=True)


def build_config(options: Union[None, SearchConfig, Mapping]) -> SearchConfig:
    """Merge configured defaults with per-call options."""
    if isinstance(options, SearchConfig):
        return options
    if options is not None and not isinstance(options, Mapping):
        raise ConfigurationError(
            f"Search options must be a mapping, got {type(options).__name__}"
        )
    base = SearchConfig.from_options(default_options())
    return SearchConfig.from_options(options, base=base)


def find_path(algorithm: Union[str, PathSearcher], source: Any, destination: Any,
              weight_field: str = "weight",
              options: Union[None, SearchConfig, Mapping] = None,
              accessor: Optional[GraphAccessor] = None) -> PathResult:
    """Search a path between two nodes.

    Args:
        algorithm: Algorithm name or a searcher instance
        source: Source node, node reference or one-element collection
        destination: Destination node, node reference or one-element collection
        weight_field: Edge property holding the traversal cost
        options: Option mapping (camelCase keys) or a SearchConfig
        accessor: Graph to search

    Returns:
        PathResult ordered from source to destination; empty if no path

    Raises:
        ConfigurationError: On malformed arguments or options
        MissingCapabilityError: If a custom formula is selected but not registered
    """
    if accessor is None:
        raise ConfigurationError("A graph accessor is required")

    searcher = algorithm if isinstance(algorithm, PathSearcher) else create_searcher(algorithm)
    config = build_config(options)
    source_node = resolve_node(source, accessor, 'source')
    destination_node = resolve_node(destination, accessor, 'destination')

    return searcher.search(source_node, destination_node, accessor, weight_field, config)
