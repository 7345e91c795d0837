"""
berserk/cli.py - Command Line Interface

Usage:
    python -m berserk.cli <command> [options]

Commands:
    solve       Solve a map (or the built-in sample board)
    show        Print a board
    demo        Solve the built-in sample boards of both variants

Examples:
    # Sample chase board, full graph
    python -m berserk.cli solve --variant chase

    # Gravity board from a raw 144-byte file
    python -m berserk.cli solve --variant gravity --map level.bin --strategy branch-and-bound

    # Resumable breadth-first sweep, 20 generations at a time
    python -m berserk.cli solve --variant chase --strategy sweep --max-depth 20 --resume

    # Fixed-length brute force on 8 threads
    python -m berserk.cli solve --variant chase --strategy brute-force --length 8 --workers 8
"""

import argparse
import sys

from .config import SolverConfig, Strategy
from .core import SearchDepthExceeded
from .games import VARIANTS, chase, gravity
from .solver import solve


LOADERS = {
    "chase": (chase.load_board, chase.sample_board),
    "gravity": (gravity.load_board, gravity.sample_board),
}


def load_initial(variant: str, path: str = None):
    """Board from a map file, or the variant's sample board without one"""
    load, sample = LOADERS[variant]
    if path is None:
        return sample()
    return load(path)


def print_replay(game, solution):
    """Step-by-step rendering of a solution"""
    print("\nStart:")
    print(game.render(solution.states[0]))
    total = 0
    for i, (action, board) in enumerate(zip(solution.actions, solution.states[1:])):
        total += game.action_cost(action)
        print(f"\nStep {i + 1}: {game.describe(action)} (total cost {total})")
        print(game.render(board))


def cmd_solve(args):
    """Solve one board"""
    game = VARIANTS[args.variant]()
    try:
        initial = load_initial(args.variant, args.map)
        config = SolverConfig(
            strategy=Strategy(args.strategy),
            max_depth=args.max_depth,
            max_score=args.max_score,
            sequence_length=args.length,
            workers=args.workers,
            report_every=args.report_every,
            verify_equality=args.verify_equality,
            resume=args.resume,
            session_dir=args.session_dir,
            verbose=not args.quiet,
        )
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return 1

    try:
        solution = solve(initial, game, config)
    except SearchDepthExceeded as e:
        print(f"Error: {e}")
        return 1

    if solution is None:
        print("\nNo winning sequence found")
        return 0

    if args.replay:
        print_replay(game, solution)

    print("\n" + "=" * 60)
    print(f"SOLUTION: {solution.moves} moves, cost {solution.cost}")
    print("=" * 60)
    for line in solution.describe(game):
        print(f"  {line}")

    if args.save:
        path = solution.to_path(game)
        path.save(args.save)
        print(f"\nSaved: {path.summary()} -> {args.save}")
    return 0


def cmd_show(args):
    """Print a board"""
    game = VARIANTS[args.variant]()
    try:
        board = load_initial(args.variant, args.map)
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return 1
    print(game.render(board))
    print(f"\n{board!r}")
    print(f"Fingerprint: {game.fingerprint(board):016x}")
    return 0


def cmd_demo(args):
    """Solve both sample boards"""
    demos = [
        ("chase", Strategy.EXHAUSTIVE),
        ("gravity", Strategy.BRANCH_AND_BOUND),
    ]
    for variant, strategy in demos:
        game = VARIANTS[variant]()
        initial = load_initial(variant)
        config = SolverConfig(strategy=strategy, max_depth=args.max_depth)
        solution = solve(initial, game, config)
        if solution is None:
            print(f"\n{variant}: no winning sequence")
            continue
        print(f"\n{variant}: {solution.moves} moves, cost {solution.cost}")
        print("  " + ", ".join(game.describe(a) for a in solution.actions))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="berserk - Tile-Grid Puzzle Solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  solve     Solve a map (sample board without --map)
  show      Print a board
  demo      Solve both sample boards

Examples:
  python -m berserk.cli solve --variant chase
  python -m berserk.cli solve --variant gravity --strategy branch-and-bound
  python -m berserk.cli show --variant gravity --map level.bin
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # === SOLVE command ===
    solve_parser = subparsers.add_parser("solve", help="Solve a board")
    solve_parser.add_argument("--map", default=None,
                              help="Map file (chase: text, gravity: 144 raw bytes)")
    solve_parser.add_argument("--variant", default="chase", choices=sorted(VARIANTS),
                              help="Board variant (default: chase)")
    solve_parser.add_argument("--strategy", default="exhaustive",
                              choices=[s.value for s in Strategy],
                              help="Search strategy (default: exhaustive)")
    solve_parser.add_argument("--max-depth", type=int, default=1000,
                              help="Depth / generation cap (default: 1000)")
    solve_parser.add_argument("--max-score", type=int, default=10_000,
                              help="Branch-and-bound cost ceiling (default: 10000)")
    solve_parser.add_argument("--length", type=int, default=8,
                              help="Brute-force sequence length (default: 8)")
    solve_parser.add_argument("--workers", type=int, default=4,
                              help="Brute-force threads (default: 4)")
    solve_parser.add_argument("--report-every", type=int, default=1_000_000,
                              help="Brute-force sequences per status line")
    solve_parser.add_argument("--resume", action="store_true",
                              help="Sweep: save the frontier and continue a saved one")
    solve_parser.add_argument("--session-dir", default="./berserk_sessions",
                              help="Sweep snapshot directory")
    solve_parser.add_argument("--verify-equality", action="store_true",
                              help="Compare boards when fingerprints match")
    solve_parser.add_argument("--save", default=None,
                              help="Write the solution path (pickle) to this file")
    solve_parser.add_argument("--replay", action="store_true",
                              help="Print every board along the solution")
    solve_parser.add_argument("--quiet", action="store_true",
                              help="No progress output")

    # === SHOW command ===
    show_parser = subparsers.add_parser("show", help="Print a board")
    show_parser.add_argument("--map", default=None, help="Map file")
    show_parser.add_argument("--variant", default="chase", choices=sorted(VARIANTS),
                             help="Board variant (default: chase)")

    # === DEMO command ===
    demo_parser = subparsers.add_parser("demo", help="Solve the sample boards")
    demo_parser.add_argument("--max-depth", type=int, default=5000,
                             help="Depth cap (default: 5000)")

    args = parser.parse_args(argv)

    if args.command == "solve":
        return cmd_solve(args)
    elif args.command == "show":
        return cmd_show(args)
    elif args.command == "demo":
        return cmd_demo(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
