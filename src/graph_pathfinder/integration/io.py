"""Loading graphs from JSON and writing search results."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np

from graph_pathfinder.core.data_models import PathResult
from graph_pathfinder.core.graph import InMemoryGraph

logger = logging.getLogger(__name__)


class GraphFormatError(ValueError):
    """Raised when a graph document does not follow the expected layout."""
    pass


def graph_from_dict(data: Dict[str, Any]) -> InMemoryGraph:
    """Build an in-memory graph from a parsed JSON document.

    Expected layout::

        {"nodes": [{"id": "A", "x": 0, "y": 0}, ...],
         "edges": [{"from": "A", "to": "B", "label": "road", "weight": 1.5}, ...]}

    Every key other than ``id`` on a node, and other than ``from``/``to``/
    ``label``/``id`` on an edge, becomes a property.
    """
    if not isinstance(data, dict):
        raise GraphFormatError("Graph document must be a JSON object")

    graph = InMemoryGraph()

    for index, entry in enumerate(data.get('nodes', [])):
        if not isinstance(entry, dict) or 'id' not in entry:
            raise GraphFormatError(f"Node #{index} must be an object with an 'id'")
        properties = {k: v for k, v in entry.items() if k != 'id'}
        graph.add_node(entry['id'], **properties)

    for index, entry in enumerate(data.get('edges', [])):
        if not isinstance(entry, dict) or 'from' not in entry or 'to' not in entry:
            raise GraphFormatError(f"Edge #{index} must be an object with 'from' and 'to'")
        properties = {k: v for k, v in entry.items() if k not in ('from', 'to', 'label', 'id')}
        graph.add_edge(entry['from'], entry['to'], label=entry.get('label', 'E'),
                       edge_id=entry.get('id'), **properties)

    logger.debug(f"Loaded graph with {len(graph)} nodes and {len(graph.edges)} edges")
    return graph


def load_graph(file_path: Union[str, Path]) -> InMemoryGraph:
    """Load a graph from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        GraphFormatError: If the file is not valid JSON or has the wrong layout
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Graph file not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise GraphFormatError(f"Invalid JSON in {file_path}: {e}")

    return graph_from_dict(data)


def _convert_numpy(obj):
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def result_to_json(result: PathResult, indent: int = 2) -> str:
    return json.dumps(result.to_dict(), indent=indent, default=_convert_numpy)


def save_results(results: Dict[str, Any], output_path: Union[str, Path]) -> None:
    """Save a results dictionary to a JSON file, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2, default=_convert_numpy)

    logger.info(f"Results saved to {output_path}")
