"""
berserk/session.py - Resumable Breadth-First Sweep

A sweep expands the search one generation (one move) at a time:
- Generation n's frontier holds every distinct board first reached in n moves
- Parent pointers record how each board was first reached
- After every generation the snapshot is saved when persistence is on

The sweep stops at the first generation that contains a victory, so the
result uses the fewest moves. A sweep cut short by max_generations leaves its
snapshot on disk; running again with resume continues from that generation
instead of starting over. Snapshots are keyed by the game name plus the
fingerprint of the initial board, so a different map never picks up a
stale frontier.
"""

from typing import Any, List, Optional, Tuple

from .core import Action, GameInterface, OutcomeKind
from .progress import ProgressReporter
from .storage import FrontierSnapshot


class SweepSession:
    """
    Breadth-first sweep with optional frontier persistence.

    Args:
        game: transition function
        initial: initial board
        session_dir: where snapshots live
        persist: save the snapshot after every generation
        resume: load an existing snapshot for this board if there is one
        max_generations: generations to run in this call
    """

    def __init__(self, game: GameInterface, initial: Any,
                 session_dir: str = "./berserk_sessions",
                 persist: bool = False, resume: bool = False,
                 max_generations: int = 1000,
                 reporter: ProgressReporter = None):
        self.game = game
        self.initial = initial
        self.session_dir = session_dir
        self.persist = persist
        self.max_generations = max_generations
        self.reporter = reporter or ProgressReporter(verbose=False)
        self.board_key = f"{game.name}_{game.fingerprint(initial):016x}"
        self.resumed = False
        self.snapshot = self._load_or_create(resume)

    def _load_or_create(self, resume: bool) -> FrontierSnapshot:
        if resume:
            snapshot = FrontierSnapshot.load(self.session_dir, self.board_key)
            if snapshot is not None:
                self.reporter.log(f"Resuming sweep: {self.board_key} "
                                  f"(generation {snapshot.generation})")
                self.resumed = True
                return snapshot
        self.reporter.log(f"Creating new sweep: {self.board_key}")
        root = self.game.fingerprint(self.initial)
        return FrontierSnapshot(
            board_key=self.board_key,
            frontier=[self.initial],
            parents={root: None},
            costs={root: 0},
        )

    def save(self) -> str:
        return self.snapshot.save(self.session_dir)

    def run(self) -> Optional[Tuple[int, List[Action]]]:
        """
        Sweep until a generation contains a victory.

        Returns:
            (cost, actions) of the cheapest winner of the first winning
            generation, or None if the frontier emptied or the generation
            budget ran out
        """
        snap = self.snapshot
        if snap.winners:
            return self._best()

        stop = snap.generation + self.max_generations
        while snap.frontier and snap.generation < stop:
            snap.frontier = self._expand(snap.frontier)
            snap.generation += 1
            self.reporter.generation_done(snap.generation, len(snap.frontier), len(snap.parents))

            if self.persist:
                self.save()

            if snap.winners:
                return self._best()

        return None

    def _expand(self, frontier: List[Any]) -> List[Any]:
        snap = self.snapshot
        next_frontier = []
        for board in frontier:
            fp = self.game.fingerprint(board)
            self.reporter.expanded()
            for action in self.game.actions():
                outcome = self.game.apply(board, action)
                if outcome.kind in (OutcomeKind.BLOCKED, OutcomeKind.DEAD):
                    continue
                child = self.game.fingerprint(outcome.state)
                if child in snap.parents:
                    continue
                snap.parents[child] = (fp, action)
                snap.costs[child] = snap.costs[fp] + self.game.action_cost(action)
                self.reporter.node_added()
                if outcome.kind is OutcomeKind.VICTORY:
                    snap.winners.append(child)
                    self.reporter.winner_found()
                else:
                    next_frontier.append(outcome.state)
        return next_frontier

    def _best(self) -> Tuple[int, List[Action]]:
        snap = self.snapshot
        cost, index = min((snap.costs[w], i) for i, w in enumerate(snap.winners))
        self.reporter.best_improved(cost)
        return cost, snap.trace(snap.winners[index])
