"""
berserk/progress.py - Progress Reporting Context

One reporter object is created per solve() call and handed to whichever
strategy runs. Strategies call methods on it; nothing is kept in module
globals. With verbose=False every method still counts but prints nothing,
which is what the tests use.
"""

import time
from typing import Dict, Optional, Any

import psutil


class ProgressReporter:
    """
    Counts search events and prints periodic status lines.

    Counters:
        nodes       - graph nodes created
        edges       - graph edges added
        expanded    - states whose actions were applied
        pruned      - frames dropped by a bound
        winners     - victory nodes recorded
        evaluated   - brute-force sequences replayed
    """

    def __init__(self, name: str = "berserk", verbose: bool = True,
                 report_every: int = 100_000):
        self.name = name
        self.verbose = verbose
        self.report_every = report_every
        self.start_time = time.time()
        self.best_cost: Optional[int] = None
        self.stats: Dict[str, int] = {
            'nodes': 0,
            'edges': 0,
            'expanded': 0,
            'pruned': 0,
            'winners': 0,
            'evaluated': 0,
        }

    def memory_mb(self) -> float:
        """Resident memory of this process in MB"""
        return psutil.Process().memory_info().rss / (1024 * 1024)

    def elapsed(self) -> float:
        return time.time() - self.start_time

    def log(self, message: str):
        if self.verbose:
            print(message)

    def banner(self, title: str):
        self.log(f"\n{'='*60}")
        self.log(title)
        self.log(f"{'='*60}")

    # ------------------------------------------------------------
    # Graph search events
    # ------------------------------------------------------------

    def node_added(self):
        self.stats['nodes'] += 1
        if self.stats['nodes'] % self.report_every == 0:
            self.log(f"  Nodes: {self.stats['nodes']:,}, Edges: {self.stats['edges']:,}, "
                     f"Best: {self.best_cost}, Memory: {self.memory_mb():.0f} MB")

    def edge_added(self):
        self.stats['edges'] += 1

    def expanded(self):
        self.stats['expanded'] += 1

    def pruned(self):
        self.stats['pruned'] += 1

    def winner_found(self):
        self.stats['winners'] += 1

    def best_improved(self, cost: int):
        """The running best solution got strictly cheaper"""
        if self.best_cost is None or cost < self.best_cost:
            self.best_cost = cost
            self.log(f"  ** New best: cost {cost} (winners so far: {self.stats['winners']}) **")

    # ------------------------------------------------------------
    # Brute-force / sweep events
    # ------------------------------------------------------------

    def sequences_done(self, done: int, total: int, best: Any = None):
        """Periodic brute-force status, called from the sampling thread"""
        self.stats['evaluated'] = done
        pct = 100.0 * done / total if total else 100.0
        self.log(f"  {done:,}/{total:,} sequences ({pct:.1f}%), best: {best}")

    def generation_done(self, generation: int, frontier: int, seen: int):
        self.log(f"  Generation {generation}: frontier {frontier:,}, seen {seen:,}, "
                 f"Memory: {self.memory_mb():.0f} MB")

    def summary(self) -> str:
        elapsed = self.elapsed()
        rate = self.stats['nodes'] / elapsed if elapsed > 0 else 0
        lines = [
            f"Search: {self.name}",
            f"  Nodes: {self.stats['nodes']:,}",
            f"  Edges: {self.stats['edges']:,}",
            f"  Expanded: {self.stats['expanded']:,}",
            f"  Pruned: {self.stats['pruned']:,}",
            f"  Winners: {self.stats['winners']:,}",
            f"  Best cost: {self.best_cost}",
            f"  Time: {elapsed:.2f}s ({rate:.0f} nodes/s)",
        ]
        if self.stats['evaluated']:
            lines.append(f"  Sequences: {self.stats['evaluated']:,}")
        return "\n".join(lines)
