"""
berserk/games - Board variants for the solver

- chase: evade the berserker king(s) 'K' and reach the exit '$'
  - Four directional moves, cost 1
  - Adversaries take two chase steps per player move
  - Text map format

- gravity: collect every target on a 12x12 tensor board
  - Lateral shifts (cost 1) and whole-grid rotations (cost 2)
  - Gravity settles player and targets after every action
  - Raw 144-byte format

Each variant implements GameInterface from berserk.core:
- apply: (state, action) -> Outcome
- fingerprint: dedup key over tile contents
- action_cost: edge weight
"""

from .chase import ChaseGame, ChaseBoard, Pos
from .gravity import GravityGame, GravityBoard

VARIANTS = {
    "chase": ChaseGame,
    "gravity": GravityGame,
}

__all__ = [
    "ChaseGame",
    "ChaseBoard",
    "Pos",
    "GravityGame",
    "GravityBoard",
    "VARIANTS",
]
