"""CLI command implementations."""

import json
import logging
from typing import Any, Optional

from omegaconf import DictConfig, OmegaConf

from graph_pathfinder.config import (
    load_config, clear_config, validate_config, check_config_consistency, ConfigValidationError
)
from graph_pathfinder.core.exceptions import PathfinderError
from graph_pathfinder.core.graph import InMemoryGraph
from graph_pathfinder.integration.io import GraphFormatError, load_graph, save_results
from graph_pathfinder.search.pathfinder import available_algorithms, find_path

from .utils import build_options, format_result, print_comparison

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_PATH = 2


def load_configuration(args) -> Optional[DictConfig]:
    """Load the Hydra configuration for a command.

    A missing configuration directory is not fatal: searches then run with
    built-in defaults.
    """
    overrides = list(getattr(args, 'config', None) or [])
    try:
        cfg = load_config(overrides=overrides, config_dir=getattr(args, 'config_dir', None))
    except FileNotFoundError as e:
        if overrides:
            raise
        logger.warning(f"{e}; using built-in defaults")
        clear_config()
        return None

    # Command line verbosity flags win over the configured level
    level = OmegaConf.select(cfg, 'logging.level', default=None)
    if level and not getattr(args, 'verbose', 0) and not getattr(args, 'quiet', False):
        logging.getLogger().setLevel(str(level).upper())
    return cfg


def node_ref(graph: InMemoryGraph, value: str) -> Any:
    """Map a command-line node reference onto a graph id (ids may be numbers in JSON)."""
    if value in graph:
        return value
    for convert in (int, float):
        try:
            converted = convert(value)
        except ValueError:
            continue
        if converted in graph:
            return converted
    return value


def _setting(cfg: Optional[DictConfig], key: str, explicit: Optional[str], default: str) -> str:
    if explicit:
        return explicit
    if cfg is not None:
        return OmegaConf.select(cfg, key, default=default)
    return default


def search_command(args) -> int:
    """Handle search command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        cfg = load_configuration(args)
        graph = load_graph(args.graph_file)

        algorithm = _setting(cfg, 'search.algorithm', args.algorithm, 'astar')
        weight_field = _setting(cfg, 'search.weight_field', args.weight_field, 'weight')

        result = find_path(
            algorithm,
            node_ref(graph, args.source),
            node_ref(graph, args.destination),
            weight_field=weight_field,
            options=build_options(args),
            accessor=graph,
        )
    except (PathfinderError, GraphFormatError, FileNotFoundError) as e:
        logger.error(f"Search failed: {e}")
        return EXIT_ERROR

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(format_result(result))

    if args.output:
        save_results(result.to_dict(), args.output)

    return EXIT_OK if result.found else EXIT_NO_PATH


def compare_command(args) -> int:
    """Run every algorithm on the same query and print a comparison table."""
    try:
        cfg = load_configuration(args)
        graph = load_graph(args.graph_file)
        weight_field = _setting(cfg, 'search.weight_field', args.weight_field, 'weight')
        options = build_options(args)
        source = node_ref(graph, args.source)
        destination = node_ref(graph, args.destination)

        results = [
            find_path(algorithm, source, destination, weight_field=weight_field,
                      options=options, accessor=graph)
            for algorithm in available_algorithms()
        ]
    except (PathfinderError, GraphFormatError, FileNotFoundError) as e:
        logger.error(f"Comparison failed: {e}")
        return EXIT_ERROR

    print_comparison(results)

    if args.output:
        save_results({r.algorithm: r.to_dict() for r in results}, args.output)

    return EXIT_OK if any(r.found for r in results) else EXIT_NO_PATH


def config_command(args) -> int:
    """Handle config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        if args.config_action == 'show':
            config = load_config(overrides=list(args.config or []), config_dir=args.config_dir,
                                 validate=False)
            print("Current Configuration:")
            print("=" * 50)
            print(OmegaConf.to_yaml(config, resolve=True))
            return EXIT_OK

        elif args.config_action == 'validate':
            try:
                config = load_config(overrides=list(args.config or []), config_dir=args.config_dir,
                                     validate=False)
                validate_config(config)
            except ConfigValidationError as e:
                print(f"Configuration validation failed: {e}")
                return EXIT_ERROR

            for issue in check_config_consistency(config):
                print(f"warning: {issue}")
            print("Configuration is valid")
            return EXIT_OK

        else:
            print("Unknown config action")
            return EXIT_ERROR

    except Exception as e:
        logger.error(f"Config command failed: {e}")
        return EXIT_ERROR
