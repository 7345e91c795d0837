"""
berserk/explorer.py - Graph-Building Search Strategies

Two explorers share one work-stack traversal:

1. ExhaustiveExplorer: visit every distinct reachable state exactly once and
   collect every victory node. Meant for small discrete spaces (chase).
   Hitting max_depth is fatal: a single search is expected to complete.

2. BranchAndBoundExplorer: carry the accumulated path cost and prune any
   partial path that cannot beat the best complete solution found so far.
   Meant for large spaces (gravity). Hitting max_depth only stops a branch.

The work stack holds Frame records instead of native call frames, so search
depth is bounded by max_depth and memory, never by the interpreter's
recursion limit. Children are pushed in reverse action order, which makes
the pop order identical to a depth-first recursion over the action list.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Any
from dataclasses import dataclass

from .core import (
    Action, GameInterface, OutcomeKind, SearchDepthExceeded,
)
from .graph import StateGraph, DedupTable
from .pathfinder import winner_path, best_path
from .progress import ProgressReporter


@dataclass
class Frame:
    """A board waiting to be processed on the work stack"""
    board: Any
    depth: int
    parent: Optional[int] = None
    action: Optional[Action] = None
    weight: int = 0
    score: int = 0
    kind: OutcomeKind = OutcomeKind.MOVED


class Explorer(ABC):
    """
    Shared state for graph-building strategies.

    After explore() returns:
        graph   - every node and edge that was discovered
        table   - fingerprint -> node id
        winners - victory node ids in discovery order
    """

    def __init__(self, game: GameInterface, max_depth: int = 1000,
                 verify_equality: bool = False,
                 reporter: ProgressReporter = None):
        self.game = game
        self.max_depth = max_depth
        self.graph = StateGraph()
        self.table = DedupTable(verify_equality)
        self.winners: List[int] = []
        self.reporter = reporter or ProgressReporter(verbose=False)

    @abstractmethod
    def explore(self, initial: Any) -> Optional[Tuple[int, List[int]]]:
        """Run the search; return (cost, node path) of the best winner or None"""
        pass

    def _lookup(self, frame: Frame) -> Tuple[int, Optional[int]]:
        fp = self.game.fingerprint(frame.board)
        return fp, self.table.lookup(fp, frame.board)

    def _add(self, frame: Frame, fp: int) -> int:
        node = self.graph.add_node(frame.board, fp, frame.depth)
        self.table.record(fp, node, frame.board)
        self.reporter.node_added()
        self._link(frame, node)
        return node

    def _link(self, frame: Frame, node: int):
        if frame.parent is not None:
            self.graph.add_edge(frame.parent, node, frame.weight, frame.action)
            self.reporter.edge_added()

    def _children(self, frame: Frame, node: int) -> List[Frame]:
        """Successor frames in action order (BLOCKED and DEAD dropped)"""
        self.reporter.expanded()
        children = []
        for action in self.game.actions():
            outcome = self.game.apply(frame.board, action)
            if outcome.kind in (OutcomeKind.BLOCKED, OutcomeKind.DEAD):
                continue
            cost = self.game.action_cost(action)
            children.append(Frame(
                board=outcome.state,
                depth=frame.depth + 1,
                parent=node,
                action=action,
                weight=cost,
                score=frame.score + cost,
                kind=outcome.kind,
            ))
        return children


class ExhaustiveExplorer(Explorer):
    """Visit every distinct reachable state; collect all winners"""

    def explore(self, initial: Any) -> Optional[Tuple[int, List[int]]]:
        stack = [Frame(initial, 0)]

        while stack:
            frame = stack.pop()
            fp, existing = self._lookup(frame)

            # Already seen: link and do not re-expand (graph, not tree)
            if existing is not None:
                self._link(frame, existing)
                continue

            if frame.kind is not OutcomeKind.VICTORY and frame.depth >= self.max_depth:
                raise SearchDepthExceeded(
                    f"Search depth {frame.depth} reached max_depth={self.max_depth}, "
                    f"please try with a simpler map")

            node = self._add(frame, fp)

            if frame.kind is OutcomeKind.VICTORY:
                self.winners.append(node)
                self.reporter.winner_found()
                continue

            stack.extend(reversed(self._children(frame, node)))

        best = best_path(self.graph, self.graph.root, self.winners)
        if best is not None:
            self.reporter.best_improved(best[0])
        return best


class BranchAndBoundExplorer(Explorer):
    """
    Depth-first search pruned by the best known solution cost.

    A seen state is expanded again only when reached with a strictly lower
    score than every earlier visit; its edge is recorded either way, so
    shortest paths computed on the graph stay exact for what was explored.
    """

    def __init__(self, game: GameInterface, max_depth: int = 1000,
                 max_score: Optional[int] = 10_000,
                 verify_equality: bool = False,
                 reporter: ProgressReporter = None):
        super().__init__(game, max_depth, verify_equality, reporter)
        self.max_score = max_score
        self.best: Optional[Tuple[int, List[int]]] = None
        self.best_score: Dict[int, int] = {}

    def _beaten(self, score: int) -> bool:
        if self.best is not None and score >= self.best[0]:
            return True
        return self.max_score is not None and score > self.max_score

    def explore(self, initial: Any) -> Optional[Tuple[int, List[int]]]:
        stack = [Frame(initial, 0)]

        while stack:
            frame = stack.pop()

            if self._beaten(frame.score):
                self.reporter.pruned()
                continue

            fp, node = self._lookup(frame)
            fresh = node is None
            if fresh:
                node = self._add(frame, fp)
            else:
                self._link(frame, node)

            if frame.kind is OutcomeKind.VICTORY:
                if fresh:
                    self.winners.append(node)
                    self.reporter.winner_found()
                self._offer(node)
                continue

            if not fresh and frame.score >= self.best_score[node]:
                continue
            self.best_score[node] = frame.score

            if frame.depth >= self.max_depth:
                continue

            stack.extend(reversed(self._children(frame, node)))

        return self.best

    def _offer(self, winner: int):
        """Replace the best slot if the winner's real-weight path is strictly cheaper"""
        cost, path = winner_path(self.graph, self.graph.root, winner)
        if self.best is None or cost < self.best[0]:
            self.best = (cost, path)
            self.reporter.best_improved(cost)
