"""
berserk/storage.py - Persistent Artifacts

1. SolutionPath: a solved route stored as moves, not boards
   - start fingerprint, actions, end fingerprint, total cost
   - checkpoints: fingerprint before each action, for lookups
   - The boards are reconstructed deterministically by replaying the
     actions through the game's transition function

2. FrontierSnapshot: the state of a resumable breadth-first sweep
   - frontier boards of the current generation
   - parent pointers fingerprint -> (parent fingerprint, action)
   - keyed by the fingerprint of the initial board

Both are pickled.
"""

from typing import Dict, List, Tuple, Optional, Any
from dataclasses import dataclass, field
import pickle
import os

from .core import Action, GameInterface


@dataclass
class SolutionPath:
    """
    Compressed replay of a solution.

    Walk it to get any intermediate board:
        board = initial
        for action in path.actions[:i]:
            board = game.apply(board, action).state
    """
    start_hash: int
    actions: List[Action]
    end_hash: int
    cost: int
    checkpoints: List[int] = field(default_factory=list)
    variant: str = ""

    @property
    def depth(self) -> int:
        return len(self.actions)

    def get_action_at(self, position_hash: int) -> Optional[Action]:
        """Next solution action from a board on this path, or None"""
        for i, h in enumerate(self.checkpoints):
            if h == position_hash and i < len(self.actions):
                return self.actions[i]
        return None

    def boards(self, game: GameInterface, initial: Any) -> List[Any]:
        """Replay the actions from the initial board"""
        boards = [initial]
        for action in self.actions:
            boards.append(game.apply(boards[-1], action).state)
        return boards

    def save(self, path: str):
        with open(path, 'wb') as f:
            pickle.dump(self, f)

    @staticmethod
    def load(path: str) -> 'SolutionPath':
        with open(path, 'rb') as f:
            return pickle.load(f)

    def summary(self) -> str:
        return (f"SolutionPath ({self.variant or 'unknown'}): "
                f"{self.depth} moves, cost {self.cost}, "
                f"{self.start_hash:016x} -> {self.end_hash:016x}")


@dataclass
class FrontierSnapshot:
    """
    Persisted breadth-first sweep.

    generation is the number of completed generations; frontier holds the
    boards discovered in the last one, which are the next to expand.
    """
    board_key: str
    generation: int = 0
    frontier: List[Any] = field(default_factory=list)
    parents: Dict[int, Optional[Tuple[int, Action]]] = field(default_factory=dict)
    costs: Dict[int, int] = field(default_factory=dict)
    winners: List[int] = field(default_factory=list)

    @staticmethod
    def path_for(session_dir: str, board_key: str) -> str:
        return os.path.join(session_dir, f"{board_key}_frontier.pkl")

    def save(self, session_dir: str) -> str:
        os.makedirs(session_dir, exist_ok=True)
        path = self.path_for(session_dir, self.board_key)
        tmp = path + ".tmp"
        with open(tmp, 'wb') as f:
            pickle.dump(self, f)
        os.replace(tmp, path)
        return path

    @staticmethod
    def load(session_dir: str, board_key: str) -> Optional['FrontierSnapshot']:
        """Saved snapshot for this board key, or None"""
        path = FrontierSnapshot.path_for(session_dir, board_key)
        if not os.path.exists(path):
            return None
        with open(path, 'rb') as f:
            snapshot = pickle.load(f)
        if snapshot.board_key != board_key:
            return None
        return snapshot

    def trace(self, fp: int) -> List[Action]:
        """Actions from the root to fp, following parent pointers"""
        actions = []
        link = self.parents[fp]
        while link is not None:
            parent, action = link
            actions.append(action)
            link = self.parents[parent]
        actions.reverse()
        return actions

    def summary(self) -> str:
        return "\n".join([
            f"Sweep: {self.board_key}",
            f"  Generation: {self.generation}",
            f"  Frontier: {len(self.frontier):,}",
            f"  Seen: {len(self.parents):,}",
            f"  Winners: {len(self.winners):,}",
        ])
