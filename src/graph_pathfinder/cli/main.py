"""Main CLI entry point for graph_pathfinder."""

import sys
import argparse
import logging
from typing import List, Optional

from graph_pathfinder.core.data_models import Direction, HeuristicFormula

from . import commands
from .utils import setup_logging


def _add_search_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by ``search`` and ``compare``."""
    parser.add_argument(
        'graph_file',
        type=str,
        help='Path to graph JSON file'
    )

    parser.add_argument('source', type=str, help='Source node id')
    parser.add_argument('destination', type=str, help='Destination node id')

    parser.add_argument(
        '--weight-field', '-w',
        type=str,
        help='Edge property holding the edge weight (default: from config)'
    )

    parser.add_argument(
        '--direction',
        type=str.upper,
        choices=[d.value for d in Direction],
        help='Edge traversal direction (default: OUT)'
    )

    parser.add_argument(
        '--edge-types',
        type=str,
        help='Comma separated edge labels to follow (default: all)'
    )

    parser.add_argument(
        '--axes',
        type=str,
        help='Comma separated node properties used as heuristic coordinates'
    )

    parser.add_argument(
        '--formula',
        type=str.upper,
        choices=[f.value for f in HeuristicFormula],
        help='Heuristic formula (default: MANHATTAN)'
    )

    parser.add_argument(
        '--custom-formula',
        type=str,
        help='Registered heuristic name used with --formula CUSTOM'
    )

    parser.add_argument(
        '--d-factor',
        type=float,
        help='Heuristic scale factor (default: 1.0)'
    )

    parser.add_argument(
        '--tie-breaker',
        action='store_true',
        help='Prefer nodes close to the straight source-goal line'
    )

    parser.add_argument(
        '--max-depth',
        type=int,
        help='Maximum number of expansions / path length'
    )

    parser.add_argument(
        '--empty-if-max-depth',
        action='store_true',
        help='Return no path when the depth limit is hit'
    )

    parser.add_argument(
        '--timeout',
        type=int,
        help='LRTA* time limit in milliseconds'
    )

    parser.add_argument(
        '--haversine-radius',
        type=float,
        help='Sphere radius for HAVERSINE (default: 6371.0)'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog='graph-pathfinder',
        description='Heuristic shortest path search (A*, IDA*, LRTA*) over weighted graphs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  graph-pathfinder search graph.json A C                     # A* with configured defaults
  graph-pathfinder search graph.json A C -a idastar --axes x,y
  graph-pathfinder compare graph.json A C --formula EUCLIDEAN --axes x,y
  graph-pathfinder -c search.defaults.maxDepth=10 config show
        """
    )

    # Global options
    parser.add_argument(
        '--config', '-c',
        type=str,
        action='append',
        metavar='OVERRIDE',
        help='Configuration override (e.g., search.defaults.dFactor=2.0); repeatable'
    )

    parser.add_argument(
        '--config-dir',
        type=str,
        help='Configuration directory (default: $GRAPH_PATHFINDER_CONFIG_DIR or ./conf)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Increase verbosity (use -v or -vv)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress all output except results'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output file for results (JSON format)'
    )

    # Subcommands
    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        metavar='COMMAND'
    )

    # Search command
    search_parser = subparsers.add_parser(
        'search',
        help='Find a path between two nodes',
        description='Find a path between two nodes of a JSON graph'
    )
    _add_search_arguments(search_parser)

    search_parser.add_argument(
        '--algorithm', '-a',
        type=str.lower,
        choices=['astar', 'idastar', 'lrtastar'],
        help='Search algorithm (default: from config)'
    )

    search_parser.add_argument(
        '--json',
        action='store_true',
        help='Print the result as JSON'
    )

    # Compare command
    compare_parser = subparsers.add_parser(
        'compare',
        help='Run every algorithm on the same query',
        description='Run A*, IDA* and LRTA* on the same query and compare the results'
    )
    _add_search_arguments(compare_parser)

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Show or validate the search configuration'
    )

    config_subparsers = config_parser.add_subparsers(
        dest='config_action',
        help='Configuration actions'
    )

    config_subparsers.add_parser(
        'show',
        help='Show current configuration'
    )

    config_subparsers.add_parser(
        'validate',
        help='Validate configuration'
    )

    return parser


def main_cli(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 2 when no path exists, 1 for errors)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    # Setup logging based on verbosity
    if parsed_args.quiet:
        log_level = logging.ERROR
    elif parsed_args.verbose == 0:
        log_level = logging.WARNING
    elif parsed_args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        if not parsed_args.command:
            parser.print_help()
            return 1

        if parsed_args.command == 'search':
            return commands.search_command(parsed_args)
        if parsed_args.command == 'compare':
            return commands.compare_command(parsed_args)
        if parsed_args.command == 'config':
            return commands.config_command(parsed_args)

        logger.error(f"Unknown command: {parsed_args.command}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130  # Standard exit code for SIGINT
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def main() -> None:
    """Entry point for console script."""
    sys.exit(main_cli())


if __name__ == '__main__':
    main()
