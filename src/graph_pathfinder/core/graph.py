"""Graph access boundary.

The searchers never own a graph. They read it through ``GraphAccessor``,
which the embedding engine implements over its own storage. ``InMemoryGraph``
is a small dictionary-backed accessor used by the command line and tests.
"""

import itertools
import logging
from typing import Any, Dict, Hashable, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from .data_models import Direction, Edge, Node

logger = logging.getLogger(__name__)


@runtime_checkable
class GraphAccessor(Protocol):
    """Read-only view of a directed, weighted graph.

    Implementations must be synchronous and side-effect free from the
    search's point of view.
    """

    def neighbor_edges(self, node: Node, direction: Direction,
                       edge_type_names: Sequence[str] = ()) -> Iterable[Edge]: ...

    def other_endpoint(self, edge: Edge, node: Node) -> Node: ...

    def weight(self, edge: Edge, field_name: str) -> Optional[Any]: ...


class InMemoryGraph:
    """Dictionary-backed graph implementing ``GraphAccessor``."""

    def __init__(self):
        self._nodes: Dict[Hashable, Node] = {}
        self._out: Dict[Hashable, List[Edge]] = {}
        self._in: Dict[Hashable, List[Edge]] = {}
        self._edge_ids = itertools.count()

    def add_node(self, node_id: Hashable, **properties) -> Node:
        """Add a node, or update the properties of an existing one."""
        node = self._nodes.get(node_id)
        if node is None:
            node = Node(node_id, dict(properties))
            self._nodes[node_id] = node
            self._out[node_id] = []
            self._in[node_id] = []
        else:
            node.properties.update(properties)
        return node

    def add_edge(self, out_id: Hashable, in_id: Hashable, label: str = "E",
                 edge_id: Optional[Hashable] = None, **properties) -> Edge:
        """Add a directed edge; missing endpoints are created on the fly."""
        out_node = self._nodes.get(out_id) or self.add_node(out_id)
        in_node = self._nodes.get(in_id) or self.add_node(in_id)
        if edge_id is None:
            edge_id = f"e{next(self._edge_ids)}"
        edge = Edge(edge_id, out_node, in_node, label, dict(properties))
        self._out[out_id].append(edge)
        self._in[in_id].append(edge)
        return edge

    def get_node(self, node_id: Hashable) -> Optional[Node]:
        return self._nodes.get(node_id)

    def __contains__(self, node_id: Hashable) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return [edge for edges in self._out.values() for edge in edges]

    def neighbor_edges(self, node: Node, direction: Direction,
                       edge_type_names: Sequence[str] = ()) -> List[Edge]:
        """Edges touching ``node`` in the given direction, in insertion order."""
        if node is None or node.id not in self._nodes:
            return []

        if direction == Direction.OUT:
            candidates = self._out[node.id]
        elif direction == Direction.IN:
            candidates = self._in[node.id]
        else:
            # A self-loop appears in both lists; report it once
            candidates = self._out[node.id] + [
                e for e in self._in[node.id] if e.out_node != e.in_node
            ]

        if edge_type_names:
            allowed = set(edge_type_names)
            return [e for e in candidates if e.label in allowed]
        return list(candidates)

    def other_endpoint(self, edge: Edge, node: Node) -> Node:
        if edge.out_node == node:
            return edge.in_node
        return edge.out_node

    def weight(self, edge: Edge, field_name: str) -> Optional[Any]:
        return edge.get(field_name)
