"""
berserk/config.py - Solver Configuration

One dataclass selects the strategy and carries every bound the strategies
use. Values are checked once in __post_init__ so strategies can trust them.
"""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class Strategy(Enum):
    """Search strategy behind solve()"""
    EXHAUSTIVE = "exhaustive"              # Full graph, all winners
    BRANCH_AND_BOUND = "branch-and-bound"  # Graph pruned by best cost
    BRUTE_FORCE = "brute-force"            # Fixed-length sequences, threaded
    SWEEP = "sweep"                        # Breadth-first, resumable


@dataclass
class SolverConfig:
    """Configuration for solve()"""
    strategy: Strategy = Strategy.EXHAUSTIVE
    max_depth: int = 1000                  # Exhaustive: fatal cap; B&B: branch cap; sweep: generations
    max_score: Optional[int] = 10_000      # B&B absolute cost ceiling (None = no ceiling)
    sequence_length: int = 8               # Brute force: L
    workers: int = 4                       # Brute force: threads
    report_every: int = 1_000_000          # Brute force: sequences between status lines
    verify_equality: bool = False          # Compare boards on fingerprint match
    resume: bool = False                   # Sweep: continue from a saved frontier
    session_dir: str = "./berserk_sessions"
    verbose: bool = True

    def __post_init__(self):
        if isinstance(self.strategy, str):
            self.strategy = Strategy(self.strategy)
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_score is not None and self.max_score < 0:
            raise ValueError(f"max_score must be >= 0, got {self.max_score}")
        if self.sequence_length < 1:
            raise ValueError(f"sequence_length must be >= 1, got {self.sequence_length}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.report_every < 1:
            raise ValueError(f"report_every must be >= 1, got {self.report_every}")
