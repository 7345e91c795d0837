"""
berserk/graph.py - State Graph and Deduplication Table

The graph is the output of the explorers:
- StateNode: one per distinct board, owns a snapshot of that board
- Edge: directed, weighted by action cost, parallel edges allowed
- DedupTable: fingerprint -> node id, the authoritative "already seen" record

Nodes are never removed during a run. Node ids are dense and assigned in
discovery order, which makes them usable as a deterministic tie-breaker.
"""

from typing import Dict, List, Optional, Any, Iterator
from dataclasses import dataclass, field

from .core import Action


@dataclass
class StateNode:
    """A distinct visited board"""
    id: int
    board: Any
    fingerprint: int
    depth: int = 0


@dataclass(frozen=True)
class Edge:
    """Transition between two nodes"""
    source: int
    target: int
    weight: int
    action: Optional[Action] = None


class DedupTable:
    """
    Maps fingerprints to node ids.

    By default a fingerprint match IS identity: two different boards with the
    same fingerprint collapse into one node. With verify_equality=True every
    fingerprint owns a bucket of node ids and boards are compared with ==,
    so a collision creates a separate node instead of a misdirected edge.
    """

    def __init__(self, verify_equality: bool = False):
        self.verify_equality = verify_equality
        self._buckets: Dict[int, List[int]] = {}
        self._boards: Dict[int, Any] = {}
        self.collisions = 0

    def __len__(self) -> int:
        return sum(len(ids) for ids in self._buckets.values())

    def __contains__(self, fp: int) -> bool:
        return fp in self._buckets

    def lookup(self, fp: int, board: Any = None) -> Optional[int]:
        """Node id already holding this board, or None"""
        ids = self._buckets.get(fp)
        if not ids:
            return None
        if not self.verify_equality:
            return ids[0]
        for node_id in ids:
            if self._boards[node_id] == board:
                return node_id
        return None

    def record(self, fp: int, node_id: int, board: Any = None):
        """Register a freshly created node"""
        ids = self._buckets.setdefault(fp, [])
        if ids:
            self.collisions += 1
        ids.append(node_id)
        if self.verify_equality:
            self._boards[node_id] = board

    def fingerprints(self) -> List[int]:
        return list(self._buckets.keys())


@dataclass
class StateGraph:
    """
    Directed, edge-weighted graph over visited states.

    Adjacency is kept as outgoing edge lists per node; the path finder only
    ever walks edges forward from the root.
    """
    nodes: List[StateNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    adjacency: Dict[int, List[Edge]] = field(default_factory=dict)

    def add_node(self, board: Any, fingerprint: int, depth: int = 0) -> int:
        node_id = len(self.nodes)
        self.nodes.append(StateNode(node_id, board, fingerprint, depth))
        self.adjacency[node_id] = []
        return node_id

    def add_edge(self, source: int, target: int, weight: int = 1,
                 action: Optional[Action] = None) -> Edge:
        edge = Edge(source, target, weight, action)
        self.edges.append(edge)
        self.adjacency[source].append(edge)
        return edge

    def out_edges(self, node_id: int) -> List[Edge]:
        return self.adjacency.get(node_id, [])

    def board(self, node_id: int) -> Any:
        return self.nodes[node_id].board

    @property
    def root(self) -> Optional[int]:
        return 0 if self.nodes else None

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def __iter__(self) -> Iterator[StateNode]:
        return iter(self.nodes)

    def summary(self) -> str:
        return f"{self.node_count():,} nodes, {self.edge_count():,} edges"
