"""
satlab command-line driver: solve, generate, verify and compare K-CNF instances.
"""

import argparse
import logging
import sys

from satlab.benchmark import find_problem_files, run_comparison, summarize
from satlab.exceptions import ConfigurationError, SATBaseException, SolutionWriteError
from satlab.solvers import (
    SolverRegistry,
    SolverResult,
    SolverStatus,
    WalkSATSolver,
    format_assignment,
    get_config,
    load_config,
)
from satlab.utils.cnf import load_formula, read_solution, write_solution
from satlab.utils.logging_utils import configure_logging, create_logger
from satlab.utils.sat_generator import generate_problem_files

logger = logging.getLogger(__name__)

METHOD_LABELS = {"dpll": "DPLL", "walksat": "WalkSAT"}


def render_report(result: SolverResult, solver_name: str) -> str:
    """Human readable verdict, assignment, time spent and number of steps."""
    label = METHOD_LABELS.get(solver_name, solver_name)
    lines = []
    if result.status == SolverStatus.SATISFIABLE:
        lines.append(f"Solution found with {label}!")
        lines.append(format_assignment(result))
    elif result.status == SolverStatus.UNSATISFIABLE:
        lines.append("There is no solution to the problem...")
    else:
        lines.append(f"NO SOLUTION found with {label}...")
    lines.append(f"Time spent: {result.runtime:.6f} secs")
    lines.append(f"Number of steps: {result.steps}")
    return "\n".join(lines)


def _setup(args):
    config = load_config(args.config) if args.config else get_config()
    configure_logging(
        args.log_level or config.get("logging.level", "INFO"),
        log_file=config.get("logging.file"),
        fmt=config.get("logging.format"),
    )
    try:
        SolverRegistry.set_default(config.get("solver.name", "dpll"))
    except ValueError as e:
        raise ConfigurationError(f"solver.name: {e}") from e
    return config


def _cmd_solve(args) -> int:
    _setup(args)
    formula = load_formula(args.input, fmt=args.format)

    solver_cls = SolverRegistry.get(args.method)
    if issubclass(solver_cls, WalkSATSolver):
        solver = solver_cls(
            max_steps=args.max_steps, noise_probability=args.noise, seed=args.seed
        )
    else:
        solver = solver_cls()

    result = solver.solve(formula)
    print(render_report(result, solver_cls.solver_name))

    if result.is_sat:
        try:
            write_solution(args.output, result)
        except SolutionWriteError as e:
            # The verdict above stands; only persisting it failed.
            logger.error(f"Solution found but could not be saved: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


def _or_config(value, config, key):
    return value if value is not None else config.get(key)


def _cmd_generate(args) -> int:
    config = _setup(args)
    seed = args.seed if args.seed is not None else config.get("generator.seed")
    paths = generate_problem_files(
        args.count,
        args.prefix,
        num_variables=_or_config(args.num_variables, config, "generator.num_variables"),
        num_clauses=_or_config(args.num_clauses, config, "generator.num_clauses"),
        clause_width=_or_config(args.clause_width, config, "generator.clause_width"),
        seed=seed,
    )
    for path in paths:
        print(path)
    return 0


def _cmd_verify(args) -> int:
    _setup(args)
    formula = load_formula(args.input, fmt=args.format)
    assignment = read_solution(args.solution)
    if assignment.size != formula.num_variables:
        print(
            f"Solution has {assignment.size} values but the formula has "
            f"{formula.num_variables} variables",
            file=sys.stderr,
        )
        return 1

    satisfied = formula.count_satisfied(assignment)
    print(f"Satisfied clauses: {satisfied}/{formula.num_clauses}")
    if satisfied == formula.num_clauses:
        print("The assignment satisfies the formula.")
        return 0
    print("The assignment does NOT satisfy the formula.")
    return 1


def _cmd_compare(args) -> int:
    config = _setup(args)
    paths = []
    for path in args.paths:
        paths.extend(find_problem_files(path))
    if not paths:
        print("No problem files found", file=sys.stderr)
        return 1

    out_dir = _or_config(args.out_dir, config, "experiment.results_dir")
    structured_logger = None
    if out_dir:
        structured_logger = create_logger(
            config.get("experiment.name", "default"), output_dir=out_dir
        )
    try:
        rows = run_comparison(
            paths,
            runs=_or_config(args.runs, config, "experiment.runs"),
            max_steps=args.max_steps,
            seed=args.seed,
            structured_logger=structured_logger,
        )
    finally:
        if structured_logger is not None:
            structured_logger.finalize()

    print(f"{'solver':<10} {'runs':>5} {'sat':>5} {'rate':>6} {'time(s)':>10} {'steps':>10}")
    for name, stats in summarize(rows).items():
        print(
            f"{name:<10} {stats['runs']:>5} {stats['satisfiable']:>5} "
            f"{stats['solve_rate']:>6.2f} {stats['mean_runtime_sec']:>10.4f} {stats['mean_steps']:>10.1f}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="satlab", description="Exact (DPLL) and heuristic (WalkSAT) K-CNF solving"
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, help="YAML/JSON configuration file")
    common.add_argument("--log-level", type=str, help="Logging level, e.g. DEBUG")

    subparsers = parser.add_subparsers(dest="command")

    solve_parser = subparsers.add_parser("solve", parents=[common], help="Solve one problem file")
    solve_parser.add_argument(
        "method", nargs="?", choices=["dpll", "walk", "walksat"], default=None,
        help="Solver to use (default: solver.name from the configuration)",
    )
    solve_parser.add_argument("input", help="Problem description file")
    solve_parser.add_argument("output", help="File to write the solution to")
    solve_parser.add_argument("--format", choices=["auto", "kcnf", "dimacs"], default="auto")
    solve_parser.add_argument("--max-steps", type=int, default=None)
    solve_parser.add_argument("--noise", type=float, default=None, help="Noise move probability")
    solve_parser.add_argument("--seed", type=int, default=None)
    solve_parser.set_defaults(handler=_cmd_solve)

    generate_parser = subparsers.add_parser(
        "generate", parents=[common], help="Generate random problem files"
    )
    # M N K fall back to the generator section of the configuration.
    generate_parser.add_argument("num_clauses", type=int, metavar="M", nargs="?")
    generate_parser.add_argument("num_variables", type=int, metavar="N", nargs="?")
    generate_parser.add_argument("clause_width", type=int, metavar="K", nargs="?")
    generate_parser.add_argument("count", type=int, help="Number of problems to generate")
    generate_parser.add_argument("prefix", help="Files are named <prefix>_<i>.txt")
    generate_parser.add_argument("--seed", type=int, default=None)
    generate_parser.set_defaults(handler=_cmd_generate)

    verify_parser = subparsers.add_parser(
        "verify", parents=[common], help="Check a solution file against a problem"
    )
    verify_parser.add_argument("input")
    verify_parser.add_argument("solution")
    verify_parser.add_argument("--format", choices=["auto", "kcnf", "dimacs"], default="auto")
    verify_parser.set_defaults(handler=_cmd_verify)

    compare_parser = subparsers.add_parser(
        "compare", parents=[common], help="Run both solvers on many problems"
    )
    compare_parser.add_argument("paths", nargs="+", help="Problem files or directories")
    compare_parser.add_argument("--runs", type=int, default=None)
    compare_parser.add_argument("--max-steps", type=int, default=None)
    compare_parser.add_argument("--seed", type=int, default=None)
    compare_parser.add_argument(
        "--out-dir", type=str, default=None,
        help="Directory for JSONL run records (default: experiment.results_dir)",
    )
    compare_parser.set_defaults(handler=_cmd_compare)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    try:
        return args.handler(args)
    except SATBaseException as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
