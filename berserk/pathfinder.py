"""
berserk/pathfinder.py - Weighted Shortest Paths over the State Graph

Dijkstra with a heapq priority queue. The search heuristic carries no
information (A* with h=0), so plain Dijkstra is used.

best_path() resolves every winner independently from the root and picks the
minimum by (cost, node id sequence). Node ids follow discovery order, so the
same board, strategy and action order always produce the same route.
"""

import heapq
from typing import Dict, List, Optional, Tuple, Iterable

from .core import GraphInvariantError
from .graph import StateGraph, Edge


def shortest_path(graph: StateGraph, source: int,
                  target: int) -> Optional[Tuple[int, List[int]]]:
    """
    Minimum-weight path between two nodes.

    Returns:
        (cost, [node ids from source to target]) or None if unreachable
    """
    if source == target:
        return 0, [source]

    dist: Dict[int, int] = {source: 0}
    came_from: Dict[int, Edge] = {}
    heap = [(0, source)]

    while heap:
        cost, node = heapq.heappop(heap)
        if cost > dist.get(node, cost):
            continue  # stale entry
        if node == target:
            break
        for edge in graph.out_edges(node):
            new_cost = cost + edge.weight
            if new_cost < dist.get(edge.target, new_cost + 1):
                dist[edge.target] = new_cost
                came_from[edge.target] = edge
                heapq.heappush(heap, (new_cost, edge.target))

    if target not in dist:
        return None

    path = [target]
    while path[-1] != source:
        path.append(came_from[path[-1]].source)
    path.reverse()
    return dist[target], path


def winner_path(graph: StateGraph, root: int, winner: int) -> Tuple[int, List[int]]:
    """Cheapest root -> winner path; a recorded winner must be reachable"""
    found = shortest_path(graph, root, winner)
    if found is None:
        raise GraphInvariantError(f"no path from node {root} to winner node {winner}")
    return found


def best_path(graph: StateGraph, root: int,
              winners: Iterable[int]) -> Optional[Tuple[int, List[int]]]:
    """
    Cheapest route from root to any winner.

    Raises:
        GraphInvariantError: a winner was recorded but cannot be reached
    """
    paths = []
    for winner in winners:
        cost, nodes = winner_path(graph, root, winner)
        paths.append((cost, tuple(nodes)))

    if not paths:
        return None

    cost, nodes = min(paths)
    return cost, list(nodes)


def edge_actions(graph: StateGraph, nodes: List[int]) -> List[Tuple[Edge, int]]:
    """
    Edges along a node path, cheapest edge per hop.

    Parallel edges between the same pair are allowed; when several actions
    lead to the same successor the cheapest, then the earliest added, wins.
    Returns [(edge, cumulative cost)].
    """
    hops = []
    total = 0
    for source, target in zip(nodes, nodes[1:]):
        candidates = [e for e in graph.out_edges(source) if e.target == target]
        if not candidates:
            raise GraphInvariantError(f"path hop {source} -> {target} has no edge")
        edge = min(candidates, key=lambda e: e.weight)
        total += edge.weight
        hops.append((edge, total))
    return hops
