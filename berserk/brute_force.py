"""
berserk/brute_force.py - Parallel Fixed-Length Enumeration

Alternative to graph search for very small sequence lengths: replay every
one of |actions|^L action sequences from the initial board and keep the one
that wins at the earliest step. No graph is retained.

Shared mutable state between workers is limited to the two registers below;
the calling thread samples them for progress output:
- BestResult: smallest (victory step, sequence index), lock-guarded
- ProgressCounter: sequences evaluated so far, its own lock

Sequence i is the i-th element of itertools.product(actions, repeat=L), so
the (step, index) tie-break is the same no matter how threads interleave.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, List, Optional, Sequence, Tuple

from .core import Action, GameInterface, OutcomeKind
from .progress import ProgressReporter


class BestResult:
    """Best victory found so far; every read-modify-write holds the lock"""

    def __init__(self):
        self._lock = threading.Lock()
        self.steps: Optional[int] = None
        self.index: Optional[int] = None

    def offer(self, steps: int, index: int) -> bool:
        with self._lock:
            if self.steps is None or (steps, index) < (self.steps, self.index):
                self.steps = steps
                self.index = index
                return True
            return False

    def get(self) -> Tuple[Optional[int], Optional[int]]:
        with self._lock:
            return self.steps, self.index


class ProgressCounter:
    """Advisory count of evaluated sequences"""

    def __init__(self):
        self._lock = threading.Lock()
        self._value = 0

    def increment(self, n: int = 1) -> int:
        with self._lock:
            self._value += n
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def sequence_at(index: int, alphabet: Sequence[Action], length: int) -> Tuple[Action, ...]:
    """index-th sequence in itertools.product(alphabet, repeat=length) order"""
    base = len(alphabet)
    digits = []
    for _ in range(length):
        index, r = divmod(index, base)
        digits.append(alphabet[r])
    return tuple(reversed(digits))


def victory_step(game: GameInterface, initial: Any, sequence: Sequence[Action],
                 limit: Optional[int] = None) -> Optional[int]:
    """
    Number of actions after which the sequence wins, or None.

    BLOCKED actions still consume a step. DEAD ends the replay. limit stops
    the replay early once the step count can no longer beat a known best.
    """
    state = initial
    for i, action in enumerate(sequence):
        if limit is not None and i + 1 > limit:
            return None
        outcome = game.apply(state, action)
        if outcome.kind is OutcomeKind.VICTORY:
            return i + 1
        if outcome.kind is OutcomeKind.DEAD:
            return None
        state = outcome.state
    return None


def chunks(total: int, parts: int) -> List[Tuple[int, int]]:
    """Split range(total) into at most `parts` contiguous [start, stop) ranges"""
    parts = max(1, min(parts, total))
    size, extra = divmod(total, parts)
    ranges = []
    start = 0
    for i in range(parts):
        stop = start + size + (1 if i < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


class BruteForceSearch:
    """
    Threaded enumeration of all action sequences of one length.

    Workers only write to the BestResult and the ProgressCounter. The
    calling thread samples both every poll_interval seconds and does all
    the reporting.

    Usage:
        search = BruteForceSearch(game, initial, length=6, workers=4)
        found = search.run()   # (steps, actions) or None
    """

    def __init__(self, game: GameInterface, initial: Any, length: int,
                 workers: int = 4, report_every: int = 1_000_000,
                 reporter: ProgressReporter = None,
                 poll_interval: float = 0.5):
        self.game = game
        self.initial = initial
        self.length = length
        self.workers = workers
        self.report_every = report_every
        self.poll_interval = poll_interval
        self.reporter = reporter or ProgressReporter(verbose=False)
        self.alphabet = tuple(game.actions())
        self.total = len(self.alphabet) ** length
        self.best = BestResult()
        self.progress = ProgressCounter()
        self._reported = 0

    def _work(self, start: int, stop: int):
        for index in range(start, stop):
            limit, _ = self.best.get()
            sequence = sequence_at(index, self.alphabet, self.length)
            steps = victory_step(self.game, self.initial, sequence, limit)
            if steps is not None:
                self.best.offer(steps, index)
            self.progress.increment()

    def _sample(self):
        """Report a new best and every crossed report_every boundary"""
        steps, _ = self.best.get()
        if steps is not None:
            self.reporter.best_improved(steps)
        done = self.progress.value
        if done // self.report_every > self._reported:
            self._reported = done // self.report_every
            self.reporter.sequences_done(done, self.total, steps)

    def run(self) -> Optional[Tuple[int, Tuple[Action, ...]]]:
        self.reporter.log(f"Brute force: {self.total:,} sequences of length {self.length} "
                          f"on {self.workers} workers")

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            pending = {executor.submit(self._work, start, stop)
                       for start, stop in chunks(self.total, self.workers)}
            while pending:
                done, pending = wait(pending, timeout=self.poll_interval)
                for future in done:
                    future.result()
                if pending:
                    self._sample()

        steps, index = self.best.get()
        if steps is not None:
            self.reporter.best_improved(steps)
        self.reporter.sequences_done(self.progress.value, self.total, steps)

        if steps is None:
            return None
        return steps, sequence_at(index, self.alphabet, self.length)[:steps]
