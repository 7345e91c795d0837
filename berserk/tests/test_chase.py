#!/usr/bin/env python3
"""
test_chase.py - Chase variant: loader, physics, and full solves

The sample board is small enough for the exhaustive strategy, so its answer
is checked against an independent breadth-first search written here.
"""

import sys
import os
from collections import deque

import pytest

# Setup path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from berserk.core import Action, OutcomeKind
from berserk.config import SolverConfig, Strategy
from berserk.explorer import ExhaustiveExplorer
from berserk.solver import solve
from berserk.games.chase import ChaseGame, ChaseBoard, Pos, sample_board, load_board


DEEP = 5000  # above the number of reachable sample-board states

TRAPPED = "\n".join([
    "#####",
    "#@K$#",
    "#####",
])

RUNWAY = "\n".join([
    "########",
    "#@ $  K#",
    "########",
])


def bfs(game, initial):
    """(moves to the nearest victory or None, fingerprints of all reachable nodes)"""
    root = game.fingerprint(initial)
    seen = {root}
    queue = deque([(initial, 0)])
    nearest = None
    while queue:
        board, dist = queue.popleft()
        for action in game.actions():
            outcome = game.apply(board, action)
            if outcome.kind in (OutcomeKind.BLOCKED, OutcomeKind.DEAD):
                continue
            fp = game.fingerprint(outcome.state)
            if outcome.kind is OutcomeKind.VICTORY and (nearest is None or dist + 1 < nearest):
                nearest = dist + 1
            if fp in seen:
                continue
            seen.add(fp)
            if outcome.kind is OutcomeKind.MOVED:
                queue.append((outcome.state, dist + 1))
    return nearest, seen


def quiet(strategy=Strategy.EXHAUSTIVE, **kwargs):
    kwargs.setdefault('max_depth', DEEP)
    return SolverConfig(strategy=strategy, verbose=False, **kwargs)


# ============================================================
# LOADER
# ============================================================

def test_loader():
    """Valid maps parse, malformed maps raise ValueError"""
    print("\n" + "=" * 60)
    print("TEST: Chase loader")
    print("=" * 60)

    board = sample_board()
    print(board.display())
    assert board.width == 12 and board.height == 8
    assert board.player == Pos(3, 1)
    assert board.hunters == (Pos(10, 1),)
    assert board.exit == Pos(8, 6)

    aliased = ChaseBoard.from_text("#####\n#@=$#\n#####")
    assert aliased.at(Pos(2, 1)) == 'K'

    bad_maps = {
        "empty": "",
        "ragged": "#####\n#@K$\n#####",
        "unknown glyph": "#####\n#@K$?\n#####",
        "two players": "######\n#@@K$#\n######",
        "no exit": "#####\n#@K #\n#####",
        "two exits": "######\n#@K$$#\n######",
        "no adversary": "#####\n#@ $#\n#####",
    }
    for name, text in bad_maps.items():
        with pytest.raises(ValueError):
            ChaseBoard.from_text(text)
        print(f"  rejected: {name}")

    print("✓ Loader OK")


def test_load_board_file(tmp_path):
    path = tmp_path / "map.txt"
    path.write_text(RUNWAY + "\n")
    board = load_board(str(path))
    assert board == ChaseBoard.from_text(RUNWAY)


# ============================================================
# PHYSICS
# ============================================================

def test_walls_block():
    print("\n" + "=" * 60)
    print("TEST: Walls block the player")
    print("=" * 60)

    game = ChaseGame()
    board = sample_board()
    outcome = game.apply(board, Action.UP)
    assert outcome.kind is OutcomeKind.BLOCKED
    assert outcome.state is board
    print("✓ Blocked move returns the input board")


def test_hunter_chases_two_steps():
    game = ChaseGame()
    board = ChaseBoard.from_text("#######\n#@   K#\n#     #\n#  $  #\n#######")

    outcome = game.apply(board, Action.RIGHT)
    print(outcome.state.display())
    assert outcome.kind is OutcomeKind.MOVED
    assert outcome.state.player == Pos(2, 1)
    assert outcome.state.hunters == (Pos(3, 1),)

    # The input board is untouched
    assert board.hunters == (Pos(5, 1),)
    assert board.at(Pos(5, 1)) == 'K'

    # Walking into the adversary
    outcome = game.apply(outcome.state, Action.RIGHT)
    assert outcome.kind is OutcomeKind.DEAD


def test_hunter_catches_player():
    game = ChaseGame()
    board = ChaseBoard.from_text("#######\n#@  K$#\n#######")
    outcome = game.apply(board, Action.RIGHT)
    assert outcome.kind is OutcomeKind.DEAD
    assert outcome.state.hunters == (Pos(2, 1),)


def test_hunter_restores_exit():
    game = ChaseGame()
    board = ChaseBoard.from_text("#######\n#@ $ K#\n#     #\n#######")

    first = game.apply(board, Action.RIGHT)
    assert first.kind is OutcomeKind.MOVED
    assert first.state.hunters == (Pos(3, 1),)
    assert first.state.at(Pos(3, 1)) == 'K'

    second = game.apply(first.state, Action.DOWN)
    assert second.kind is OutcomeKind.DEAD
    assert second.state.at(Pos(3, 1)) == '$'


def test_victory_before_hunters_move():
    game = ChaseGame()
    board = ChaseBoard.from_text(RUNWAY)
    state, kind = game.replay(board, [Action.RIGHT, Action.RIGHT])
    assert kind is OutcomeKind.VICTORY
    assert state.player == Pos(3, 1)


# ============================================================
# SOLVING
# ============================================================

def test_sample_board_exhaustive():
    """Exhaustive answer matches an independent BFS and replays to a win"""
    print("\n" + "=" * 60)
    print("TEST: Sample board, exhaustive")
    print("=" * 60)

    game = ChaseGame()
    initial = sample_board()
    nearest, _ = bfs(game, initial)
    solution = solve(initial, game, quiet())

    assert solution is not None
    print(f"Solution: {solution.moves} moves, BFS distance {nearest}")
    print("  " + ", ".join(game.describe(a) for a in solution.actions))
    assert solution.cost == nearest
    assert solution.cost <= 12
    assert solution.moves == solution.cost

    state, kind = game.replay(initial, solution.actions)
    assert kind is OutcomeKind.VICTORY
    assert state == solution.states[-1]

    for board, action, following in zip(solution.states, solution.actions, solution.states[1:]):
        assert game.apply(board, action).state == following

    print("✓ Exhaustive solve OK")


def test_sample_board_sweep_agrees():
    game = ChaseGame()
    initial = sample_board()
    exhaustive = solve(initial, game, quiet())
    sweep = solve(initial, game, quiet(Strategy.SWEEP))
    assert sweep is not None
    assert sweep.cost == exhaustive.cost
    assert game.replay(initial, sweep.actions)[1] is OutcomeKind.VICTORY


def test_node_count_matches_reachable_states():
    game = ChaseGame()
    initial = sample_board()
    _, reachable = bfs(game, initial)

    explorer = ExhaustiveExplorer(game, max_depth=DEEP)
    explorer.explore(initial)
    print(f"Reachable: {len(reachable)}, graph: {explorer.graph.summary()}")
    assert explorer.graph.node_count() == len(reachable)
    assert set(explorer.table.fingerprints()) == reachable
    assert len(explorer.winners) > 0


def test_trapped_board_has_no_solution():
    """Exit behind the adversary: every strategy reports no solution"""
    game = ChaseGame()
    initial = ChaseBoard.from_text(TRAPPED)
    for strategy in Strategy:
        config = quiet(strategy, sequence_length=3, workers=2,
                       session_dir=os.devnull)
        assert solve(initial, game, config) is None, strategy


def test_solve_is_deterministic():
    game = ChaseGame()
    first = solve(sample_board(), game, quiet())
    second = solve(sample_board(), game, quiet())
    assert first.actions == second.actions
    assert first.nodes == second.nodes


def run_full_test():
    """Run all tests"""
    print("=" * 60)
    print("CHASE VARIANT - FULL TEST")
    print("=" * 60)

    test_loader()
    test_walls_block()
    test_hunter_chases_two_steps()
    test_hunter_catches_player()
    test_hunter_restores_exit()
    test_victory_before_hunters_move()
    test_sample_board_exhaustive()
    test_sample_board_sweep_agrees()
    test_node_count_matches_reachable_states()
    test_trapped_board_has_no_solution()
    test_solve_is_deterministic()

    print("\n" + "=" * 60)
    print("ALL TESTS COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    run_full_test()
