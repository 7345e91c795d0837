"""
berserk/solver.py - Solver Entry Point

solve(initial, game, config) runs the strategy selected in the config and
returns a Solution (ordered boards, actions, total cost) or None when no
winning sequence exists within the configured bounds.

Strategies:
- exhaustive:        full state graph, every winner, cheapest route
- branch-and-bound:  state graph pruned by the best known cost
- brute-force:       all fixed-length action sequences on worker threads
- sweep:             breadth-first by generation, frontier can be resumed

All four only use the GameInterface transition contract.
"""

from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field

from .core import Action, GameInterface, OutcomeKind
from .config import SolverConfig, Strategy
from .explorer import Explorer, ExhaustiveExplorer, BranchAndBoundExplorer
from .pathfinder import edge_actions
from .brute_force import BruteForceSearch
from .session import SweepSession
from .progress import ProgressReporter
from .storage import SolutionPath


@dataclass
class Solution:
    """
    A winning route.

    states[0] is the initial board, states[-1] the victory board, and
    states[i + 1] = game.apply(states[i], actions[i]).state.
    """
    states: List[Any]
    actions: List[Action]
    cost: int
    strategy: Strategy
    nodes: List[int] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def moves(self) -> int:
        return len(self.actions)

    def to_path(self, game: GameInterface) -> SolutionPath:
        checkpoints = [game.fingerprint(s) for s in self.states]
        return SolutionPath(
            start_hash=checkpoints[0],
            actions=list(self.actions),
            end_hash=checkpoints[-1],
            cost=self.cost,
            checkpoints=checkpoints[:-1],
            variant=game.name,
        )

    def describe(self, game: GameInterface) -> List[str]:
        """One line per action, e.g. "3. rotate-cw (cost 2)" """
        return [f"{i + 1}. {game.describe(a)} (cost {game.action_cost(a)})"
                for i, a in enumerate(self.actions)]


# ============================================================
# STRATEGIES
# ============================================================

def _from_graph(explorer: Explorer, found, strategy: Strategy) -> Optional[Solution]:
    if found is None:
        return None
    cost, nodes = found
    hops = edge_actions(explorer.graph, nodes)
    return Solution(
        states=[explorer.graph.board(n) for n in nodes],
        actions=[edge.action for edge, _ in hops],
        cost=cost,
        strategy=strategy,
        nodes=list(nodes),
    )


def _from_actions(game: GameInterface, initial: Any, actions,
                  strategy: Strategy) -> Solution:
    """Replay actions, dropping the ones that had no effect"""
    states = [initial]
    kept = []
    cost = 0
    for action in actions:
        outcome = game.apply(states[-1], action)
        if outcome.kind is OutcomeKind.BLOCKED:
            continue
        states.append(outcome.state)
        kept.append(action)
        cost += game.action_cost(action)
        if outcome.kind.is_terminal:
            break
    return Solution(states=states, actions=kept, cost=cost, strategy=strategy)


def _solve_exhaustive(initial, game, config, reporter) -> Optional[Solution]:
    explorer = ExhaustiveExplorer(game, config.max_depth, config.verify_equality, reporter)
    found = explorer.explore(initial)
    reporter.log(f"Graph: {explorer.graph.summary()}, winners: {len(explorer.winners)}")
    return _from_graph(explorer, found, Strategy.EXHAUSTIVE)


def _solve_branch_and_bound(initial, game, config, reporter) -> Optional[Solution]:
    explorer = BranchAndBoundExplorer(game, config.max_depth, config.max_score,
                                      config.verify_equality, reporter)
    found = explorer.explore(initial)
    reporter.log(f"Graph: {explorer.graph.summary()}, winners: {len(explorer.winners)}")
    return _from_graph(explorer, found, Strategy.BRANCH_AND_BOUND)


def _solve_brute_force(initial, game, config, reporter) -> Optional[Solution]:
    search = BruteForceSearch(game, initial, config.sequence_length,
                              config.workers, config.report_every, reporter)
    found = search.run()
    if found is None:
        return None
    _, sequence = found
    return _from_actions(game, initial, sequence, Strategy.BRUTE_FORCE)


def _solve_sweep(initial, game, config, reporter) -> Optional[Solution]:
    session = SweepSession(game, initial,
                           session_dir=config.session_dir,
                           persist=config.resume,
                           resume=config.resume,
                           max_generations=config.max_depth,
                           reporter=reporter)
    found = session.run()
    if found is None:
        return None
    _, actions = found
    return _from_actions(game, initial, actions, Strategy.SWEEP)


STRATEGIES: Dict[Strategy, Callable] = {
    Strategy.EXHAUSTIVE: _solve_exhaustive,
    Strategy.BRANCH_AND_BOUND: _solve_branch_and_bound,
    Strategy.BRUTE_FORCE: _solve_brute_force,
    Strategy.SWEEP: _solve_sweep,
}


# ============================================================
# ENTRY POINT
# ============================================================

def solve(initial: Any, game: GameInterface, config: SolverConfig = None,
          reporter: ProgressReporter = None) -> Optional[Solution]:
    """
    Find a cheapest winning action sequence from an initial board.

    Args:
        initial: board produced by the game's loader
        game: transition function for that board variant
        config: strategy and bounds (defaults to exhaustive, max_depth 1000)
        reporter: progress context; one is created from config.verbose if omitted

    Returns:
        Solution, or None if no victory is reachable within the bounds

    Raises:
        SearchDepthExceeded: exhaustive search hit max_depth
        GraphInvariantError: a recorded winner is unreachable (bug)
    """
    config = config or SolverConfig()
    reporter = reporter or ProgressReporter(name=f"{game.name}/{config.strategy.value}",
                                            verbose=config.verbose)

    reporter.banner(f"berserk solver: {game.name} ({config.strategy.value})")
    solution = STRATEGIES[config.strategy](initial, game, config, reporter)

    if solution is None:
        reporter.log("No winner path")
    else:
        solution.stats = dict(reporter.stats)
        reporter.log(f"Found {solution.moves} moves, cost {solution.cost}, "
                     f"in {reporter.elapsed():.2f}s")
    reporter.log(reporter.summary())
    return solution
