#!/usr/bin/env python3
"""
test_search.py - Engine tests independent of the board variants

Uses a one-dimensional counter game where the fingerprint can be forced to
collide, plus hand-built graphs for the path finder.
"""

import sys
import os

import pytest

# Setup path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from berserk.core import (
    Action, GameInterface, Outcome, SearchDepthExceeded, GraphInvariantError,
)
from berserk.graph import StateGraph, DedupTable
from berserk.pathfinder import shortest_path, winner_path, best_path, edge_actions
from berserk.explorer import Explorer, ExhaustiveExplorer, BranchAndBoundExplorer
from berserk.games.chase import ChaseGame, ChaseBoard, sample_board


class CounterGame(GameInterface[int]):
    """RIGHT counts up, LEFT counts down, reaching `goal` wins"""

    name = "counter"

    def __init__(self, goal: int = 4, collide: bool = False):
        self.goal = goal
        self.collide = collide

    def fingerprint(self, state: int) -> int:
        return 0 if self.collide else state

    def apply(self, state: int, action: Action) -> Outcome[int]:
        if action is Action.RIGHT:
            nxt = state + 1
        elif action is Action.LEFT and state > 0:
            nxt = state - 1
        else:
            return Outcome.blocked(state)
        if nxt == self.goal:
            return Outcome.victory(nxt)
        return Outcome.moved(nxt)


SMALL = "\n".join([
    "#######",
    "#@   K#",
    "#  #  #",
    "#    $#",
    "#######",
])


# ============================================================
# PATH FINDER
# ============================================================

def test_shortest_path_prefers_cheaper_route():
    print("\n" + "=" * 60)
    print("TEST: Dijkstra over a hand-built graph")
    print("=" * 60)

    graph = StateGraph()
    for i in range(3):
        graph.add_node(i, i)
    graph.add_edge(0, 2, 5, Action.UP)
    graph.add_edge(0, 1, 1, Action.RIGHT)
    graph.add_edge(1, 2, 3, Action.UP)
    graph.add_edge(1, 2, 1, Action.RIGHT)

    cost, path = shortest_path(graph, 0, 2)
    print(f"Cost {cost}, path {path}")
    assert cost == 2
    assert path == [0, 1, 2]

    hops = edge_actions(graph, path)
    assert [edge.action for edge, _ in hops] == [Action.RIGHT, Action.RIGHT]
    assert hops[-1][1] == 2

    assert shortest_path(graph, 2, 0) is None
    assert shortest_path(graph, 1, 1) == (0, [1])
    print("✓ Dijkstra OK")


def test_unreachable_winner_is_an_invariant_error():
    graph = StateGraph()
    graph.add_node("root", 1)
    graph.add_node("island", 2)
    with pytest.raises(GraphInvariantError):
        best_path(graph, 0, [1])
    with pytest.raises(GraphInvariantError):
        winner_path(graph, 0, 1)
    assert best_path(graph, 0, []) is None

    graph.add_edge(0, 1, 3)
    assert winner_path(graph, 0, 1) == (3, [0, 1])


def test_best_path_tie_break():
    graph = StateGraph()
    for i in range(4):
        graph.add_node(i, i)
    graph.add_edge(0, 2, 1)
    graph.add_edge(0, 1, 1)
    graph.add_edge(1, 3, 5)
    cost, path = best_path(graph, 0, [2, 1])
    assert (cost, path) == (1, [0, 1])


# ============================================================
# DEDUPLICATION
# ============================================================

def test_dedup_table():
    table = DedupTable()
    assert table.lookup(7) is None
    table.record(7, 0)
    assert table.lookup(7) == 0
    assert 7 in table
    assert len(table) == 1

    strict = DedupTable(verify_equality=True)
    strict.record(7, 0, "a")
    assert strict.lookup(7, "a") == 0
    assert strict.lookup(7, "b") is None
    strict.record(7, 1, "b")
    assert strict.lookup(7, "b") == 1
    assert strict.collisions == 1


def test_fingerprint_collisions():
    """Colliding fingerprints merge states unless equality is verified"""
    print("\n" + "=" * 60)
    print("TEST: Fingerprint collisions")
    print("=" * 60)

    merged = ExhaustiveExplorer(CounterGame(collide=True))
    assert merged.explore(0) is None
    assert merged.graph.node_count() == 1

    strict = ExhaustiveExplorer(CounterGame(collide=True), verify_equality=True)
    cost, path = strict.explore(0)
    print(f"Verified: {strict.graph.summary()}, cost {cost}")
    assert cost == 4
    assert [strict.graph.board(n) for n in path] == [0, 1, 2, 3, 4]
    assert strict.table.collisions == 4
    print("✓ Collision handling OK")


# ============================================================
# EXPLORERS
# ============================================================

def test_counter_game_graph():
    explorer = ExhaustiveExplorer(CounterGame(goal=4))
    cost, path = explorer.explore(0)
    assert cost == 4
    assert path == [0, 1, 2, 3, 4]
    # 0..3 expanded, 4 is terminal
    assert explorer.graph.node_count() == 5
    assert explorer.winners == [4]
    # RIGHT and LEFT from 1..3, RIGHT from 0
    assert explorer.graph.edge_count() == 7


def test_depth_cap():
    print("\n" + "=" * 60)
    print("TEST: Depth cap")
    print("=" * 60)

    game = ChaseGame()
    with pytest.raises(SearchDepthExceeded):
        ExhaustiveExplorer(game, max_depth=3).explore(sample_board())

    # Branch and bound treats the cap as a bound, not an error
    assert BranchAndBoundExplorer(game, max_depth=3).explore(sample_board()) is None
    print("✓ Depth cap OK")


def test_branch_and_bound_matches_exhaustive():
    game = ChaseGame()
    for initial, max_score in [(ChaseBoard.from_text(SMALL), None), (sample_board(), 12)]:
        full = ExhaustiveExplorer(game, max_depth=5000).explore(initial)
        bounded = BranchAndBoundExplorer(game, max_depth=5000, max_score=max_score).explore(initial)
        print(f"Exhaustive: {full and full[0]}, branch and bound: {bounded and bounded[0]}")
        assert (full is None) == (bounded is None)
        if full is not None:
            assert bounded[0] == full[0]


def test_branch_and_bound_counter():
    explorer = BranchAndBoundExplorer(CounterGame(goal=6), max_score=20)
    cost, path = explorer.explore(0)
    assert cost == 6
    assert len(path) == 7
    assert explorer.best == (cost, path)

    capped = BranchAndBoundExplorer(CounterGame(goal=6), max_score=5)
    assert capped.explore(0) is None
    assert capped.reporter.stats['pruned'] > 0


def test_explorer_is_abstract():
    with pytest.raises(TypeError):
        Explorer(CounterGame())


def run_full_test():
    """Run all tests"""
    print("=" * 60)
    print("SEARCH ENGINE - FULL TEST")
    print("=" * 60)

    test_shortest_path_prefers_cheaper_route()
    test_unreachable_winner_is_an_invariant_error()
    test_best_path_tie_break()
    test_dedup_table()
    test_fingerprint_collisions()
    test_counter_game_graph()
    test_depth_cap()
    test_branch_and_bound_matches_exhaustive()
    test_branch_and_bound_counter()
    test_explorer_is_abstract()

    print("\n" + "=" * 60)
    print("ALL TESTS COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    run_full_test()
