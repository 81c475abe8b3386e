"""Core data models for the path search core."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Iterator, List, Optional, Set, Tuple
import heapq


class Direction(Enum):
    """Which edges of a node are traversed."""
    OUT = "OUT"
    IN = "IN"
    BOTH = "BOTH"


class HeuristicFormula(Enum):
    """Distance formulas understood by the heuristic evaluator."""
    MANHATTAN = "MANHATTAN"
    MAXAXIS = "MAXAXIS"
    DIAGONAL = "DIAGONAL"
    EUCLIDEAN = "EUCLIDEAN"
    EUCLIDEANNOSQR = "EUCLIDEANNOSQR"
    HAVERSINE = "HAVERSINE"
    CUSTOM = "CUSTOM"


class TerminationReason(Enum):
    """Why a search stopped."""
    FOUND = "found"
    EXHAUSTED = "exhausted"
    DEPTH_CUTOFF = "depth_cutoff"
    TIMED_OUT = "timed_out"


@dataclass(eq=False)
class Node:
    """Graph vertex: an opaque identity plus numeric properties read by heuristics."""
    id: Hashable
    properties: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def __eq__(self, other: object) -> bool:
        """Equality based on identity only."""
        if not isinstance(other, Node):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Node({self.id!r})"


@dataclass(eq=False)
class Edge:
    """Directed connection from ``out_node`` to ``in_node``."""
    id: Hashable
    out_node: Node
    in_node: Node
    label: str = "E"
    properties: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Edge({self.id!r}: {self.out_node.id!r}->{self.in_node.id!r})"


@dataclass
class PathResult:
    """Result of one search invocation.

    Behaves as a read-only sequence of nodes ordered from source to
    destination. An empty sequence means no path was found or the depth/time
    budget ran out under the empty-result policy.
    """
    nodes: List[Any] = field(default_factory=list)
    total_cost: float = 0.0
    termination_reason: TerminationReason = TerminationReason.EXHAUSTED
    algorithm: str = ""
    nodes_expanded: int = 0
    neighbor_lookups: int = 0
    max_depth_reached: int = 0
    iterations: int = 0  # IDA* thresholds or LRTA* trials
    computation_time: float = 0.0

    @property
    def found(self) -> bool:
        """True when a non-empty path was produced."""
        return len(self.nodes) > 0

    def node_ids(self) -> List[Hashable]:
        return [getattr(node, "id", node) for node in self.nodes]

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a JSON-friendly dictionary."""
        return {
            'algorithm': self.algorithm,
            'path': self.node_ids(),
            'total_cost': self.total_cost,
            'termination_reason': self.termination_reason.value,
            'nodes_expanded': self.nodes_expanded,
            'neighbor_lookups': self.neighbor_lookups,
            'max_depth_reached': self.max_depth_reached,
            'iterations': self.iterations,
            'computation_time': self.computation_time,
        }

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.nodes)

    def __getitem__(self, index):
        return self.nodes[index]


@dataclass
class SearchState:
    """Mutable bookkeeping owned by exactly one running search call.

    Searchers build a fresh instance at the start of every invocation and
    drop it when they return, so concurrent calls never share progress.
    """
    g_score: Dict[Any, float] = field(default_factory=dict)
    f_score: Dict[Any, float] = field(default_factory=dict)
    came_from: Dict[Any, Any] = field(default_factory=dict)
    closed: Set[Any] = field(default_factory=set)
    open_heap: List[Tuple[float, int, Any]] = field(default_factory=list)
    depth: int = 0
    nodes_expanded: int = 0
    neighbor_lookups: int = 0
    max_depth_reached: int = 0
    _counter: int = 0

    def push(self, node: Any, priority: float) -> None:
        """Insert a node into the open heap; older entries become stale."""
        self._counter += 1
        heapq.heappush(self.open_heap, (priority, self._counter, node))

    def pop(self) -> Optional[Any]:
        """Pop the open node with the smallest f, skipping stale entries."""
        while self.open_heap:
            priority, _, node = heapq.heappop(self.open_heap)
            if node in self.closed:
                continue
            if priority != self.f_score.get(node):
                continue
            return node
        return None

    def reset_iteration(self, source: Any) -> None:
        """Clear per-iteration maps, keeping the cumulative counters."""
        self.g_score.clear()
        self.f_score.clear()
        self.came_from.clear()
        self.closed.clear()
        self.open_heap.clear()
        self.depth = 0
        self.g_score[source] = 0.0
