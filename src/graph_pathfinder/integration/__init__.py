"""Graph file loading and result serialisation."""

from .io import GraphFormatError, graph_from_dict, load_graph, result_to_json, save_results

__all__ = [
    'GraphFormatError',
    'graph_from_dict',
    'load_graph',
    'result_to_json',
    'save_results'
]
