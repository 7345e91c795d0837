"""
berserk/core.py - Transition Contract for the Solver

This module contains everything the search engine knows about a game:
- Action: the closed set of moves every board variant interprets
- OutcomeKind / Outcome: what a single transition reports
- GameInterface: abstract transition function (pure, deterministic)
- fingerprint_bytes: deterministic 64-bit digest used for deduplication

The engine never looks at tiles. A game module owns the board, the physics
and the fingerprint; the explorers only call apply() and fingerprint().
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Tuple, Any
from dataclasses import dataclass
from enum import Enum
import hashlib

# Board state type
S = TypeVar('S')


class SearchDepthExceeded(RuntimeError):
    """Exhaustive search reached max_depth; the map is too deep for the strategy."""


class GraphInvariantError(RuntimeError):
    """A recorded winner is unreachable from the root."""


class Action(Enum):
    """Directional key, interpreted by each board variant"""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


# Fixed expansion order
ACTIONS: Tuple[Action, ...] = (Action.LEFT, Action.RIGHT, Action.UP, Action.DOWN)


class OutcomeKind(Enum):
    """Result category of one transition"""
    BLOCKED = "blocked"   # No effect, never a new node
    MOVED = "moved"       # New non-terminal state
    DEAD = "dead"         # Loss, never expanded
    VICTORY = "victory"   # Goal reached, recorded as winner

    @property
    def is_terminal(self) -> bool:
        return self in (OutcomeKind.DEAD, OutcomeKind.VICTORY)


@dataclass(frozen=True)
class Outcome(Generic[S]):
    """Transition result: the category plus the successor board"""
    kind: OutcomeKind
    state: S

    @staticmethod
    def blocked(state: S) -> 'Outcome[S]':
        return Outcome(OutcomeKind.BLOCKED, state)

    @staticmethod
    def moved(state: S) -> 'Outcome[S]':
        return Outcome(OutcomeKind.MOVED, state)

    @staticmethod
    def dead(state: S) -> 'Outcome[S]':
        return Outcome(OutcomeKind.DEAD, state)

    @staticmethod
    def victory(state: S) -> 'Outcome[S]':
        return Outcome(OutcomeKind.VICTORY, state)


def fingerprint_bytes(data: bytes) -> int:
    """
    Deterministic 64-bit fingerprint of raw tile bytes.

    Python's hash() of str/bytes is salted per process, so it cannot key a
    frontier that must survive a restart. The first 16 hex digits of MD5 are
    stable everywhere.
    """
    return int(hashlib.md5(data).hexdigest()[:16], 16)


class GameInterface(ABC, Generic[S]):
    """
    Abstract transition function the solver is parameterized over.

    A game is defined by:
    - An ordered, fixed action set (expansion order is part of determinism)
    - apply(): pure (state, action) -> Outcome, never mutating its input
    - action_cost(): edge weight of an action
    - fingerprint(): dedup key over tile contents only

    Any post-processing the physics needs (e.g. gravity settling) happens
    inside apply(), never in the engine.
    """

    name: str = "game"

    def actions(self) -> Tuple[Action, ...]:
        """Actions in expansion order"""
        return ACTIONS

    @abstractmethod
    def apply(self, state: S, action: Action) -> Outcome[S]:
        """Apply one action to a copy of state"""
        pass

    @abstractmethod
    def fingerprint(self, state: S) -> int:
        """Hash of tile contents for deduplication"""
        pass

    def action_cost(self, action: Action) -> int:
        """Edge weight of an action (uniform by default)"""
        return 1

    def describe(self, action: Action) -> str:
        """Human-readable label of what an action does in this variant"""
        return action.value

    def render(self, state: S) -> str:
        """Plain-text board for replay output"""
        return str(state)

    def replay(self, state: S, actions: Any) -> Tuple[S, OutcomeKind]:
        """
        Replay a sequence of actions from state.

        Stops at the first terminal outcome. Returns the last state and the
        last outcome kind (MOVED if the sequence ran out first).
        """
        kind = OutcomeKind.MOVED
        for action in actions:
            outcome = self.apply(state, action)
            kind = outcome.kind
            state = outcome.state
            if kind.is_terminal:
                break
        return state, kind
