"""Command-line interface for graph_pathfinder.

This module provides CLI commands for running and comparing path searches
over JSON graph files.
"""

from .main import main_cli
from .commands import search_command, compare_command, config_command
from .utils import setup_logging, format_result

__all__ = [
    'main_cli',
    'search_command',
    'compare_command',
    'config_command',
    'setup_logging',
    'format_result'
]
