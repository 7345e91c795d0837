"""
berserk - Tile-Grid Puzzle Solver

Explores the state space of a tile-grid puzzle and returns the cheapest
winning move sequence.

Key Concepts:
- GameInterface: pure (state, action) -> Outcome transition function
- StateGraph: one node per distinct board, weighted edges per action
- Explorers: exhaustive and branch-and-bound graph builders
- Path finder: Dijkstra from the initial board to every winner
- Brute force: threaded enumeration of fixed-length sequences
- Sweep: breadth-first search with a resumable on-disk frontier

Variants (berserk.games):
- chase: reach the '$' before the berserker king 'K' catches you
- gravity: collect every target on a rotating 12x12 gravity grid
"""

from .core import (
    Action,
    ACTIONS,
    OutcomeKind,
    Outcome,
    GameInterface,
    SearchDepthExceeded,
    GraphInvariantError,
    fingerprint_bytes,
)

from .graph import (
    StateGraph,
    StateNode,
    Edge,
    DedupTable,
)

from .pathfinder import (
    shortest_path,
    best_path,
)

from .explorer import (
    ExhaustiveExplorer,
    BranchAndBoundExplorer,
)

from .brute_force import BruteForceSearch
from .session import SweepSession
from .storage import SolutionPath, FrontierSnapshot
from .progress import ProgressReporter
from .config import SolverConfig, Strategy
from .solver import Solution, solve

__version__ = "0.1.0"

__all__ = [
    # Core
    "Action",
    "ACTIONS",
    "OutcomeKind",
    "Outcome",
    "GameInterface",
    "SearchDepthExceeded",
    "GraphInvariantError",
    "fingerprint_bytes",
    # Graph
    "StateGraph",
    "StateNode",
    "Edge",
    "DedupTable",
    "shortest_path",
    "best_path",
    # Strategies
    "ExhaustiveExplorer",
    "BranchAndBoundExplorer",
    "BruteForceSearch",
    "SweepSession",
    # Storage
    "SolutionPath",
    "FrontierSnapshot",
    # Entry point
    "ProgressReporter",
    "SolverConfig",
    "Strategy",
    "Solution",
    "solve",
]
