"""Comparison harness: run the exact and the heuristic solver on many instances."""

import logging
import os
from collections.abc import Iterable

from satlab.core.indices import build_indices
from satlab.exceptions import InvalidFormulaError, ParseError
from satlab.solvers import DPLLSolver, SolverRegistry, SolverResult
from satlab.utils.cnf import load_formula
from satlab.utils.logging_utils import StructuredLogger

logger = logging.getLogger(__name__)

DEFAULT_SOLVERS = ("dpll", "walksat")


def find_problem_files(path: str, suffixes: tuple[str, ...] = (".txt", ".cnf")) -> list[str]:
    """If path is a file -> [path]. If directory -> all problem files under it."""
    if os.path.isfile(path):
        return [path]

    found: list[str] = []
    for root, _, files in os.walk(path):
        for f in files:
            if f.endswith(suffixes):
                found.append(os.path.join(root, f))
    found.sort()
    return found


def _result_to_row(path: str, solver: str, run: int, result: SolverResult) -> dict[str, object]:
    return {
        "file": os.path.basename(path),
        "path": path,
        "solver": solver,
        "run": run,
        "status": result.status.value,
        "runtime_sec": round(result.runtime, 6),
        "steps": result.steps,
        "satisfied_clauses": result.satisfied_clauses,
        "total_clauses": result.total_clauses,
    }


def run_comparison(
    paths: Iterable[str],
    runs: int = 1,
    max_steps: int | None = None,
    seed: int | None = None,
    solvers: Iterable[str] = DEFAULT_SOLVERS,
    structured_logger: StructuredLogger | None = None,
) -> list[dict[str, object]]:
    """
    Run every solver on every instance.

    Files that do not parse as a formula are skipped with a warning.

    DPLL is deterministic and runs once per instance; randomized solvers run
    ``runs`` times, run ``r`` seeded with ``seed + r`` when a seed is given.

    Args:
        paths: Problem files
        runs: Repetitions of each randomized solver
        max_steps: WalkSAT flip budget (configuration default when None)
        seed: Base seed of the randomized runs
        solvers: Registered solver names to compare
        structured_logger: Optional sink receiving one record per run

    Returns:
        One row per run
    """
    solvers = list(solvers)
    rows: list[dict[str, object]] = []

    for path in paths:
        try:
            formula = load_formula(path)
        except (ParseError, InvalidFormulaError) as e:
            # Directories often hold solution files next to the problems.
            logger.warning(f"Skipping {path}: {e}")
            continue
        indices = build_indices(formula)

        for name in solvers:
            solver_cls = SolverRegistry.get(name)
            deterministic = issubclass(solver_cls, DPLLSolver)
            for run in range(1 if deterministic else runs):
                if deterministic:
                    result = solver_cls().solve(formula, index=indices.occurrences)
                else:
                    run_seed = seed + run if seed is not None else None
                    solver = solver_cls(max_steps=max_steps, seed=run_seed)
                    result = solver.solve(formula, index=indices.polarity)

                row = _result_to_row(path, name, run, result)
                rows.append(row)
                if structured_logger is not None:
                    structured_logger.log_solver_run(path, name, run, result)

                logger.info(
                    f"[{name}] {row['file']} -> {row['status']} "
                    f"({row['runtime_sec']}s, steps={row['steps']})"
                )

    return rows


def summarize(rows: list[dict[str, object]]) -> dict[str, dict[str, float]]:
    """Solve rate and mean runtime / steps per solver."""
    summary: dict[str, dict[str, float]] = {}
    for name in dict.fromkeys(row["solver"] for row in rows):
        mine = [row for row in rows if row["solver"] == name]
        solved = [row for row in mine if row["status"] == "satisfiable"]
        summary[name] = {
            "runs": len(mine),
            "satisfiable": len(solved),
            "solve_rate": len(solved) / len(mine),
            "mean_runtime_sec": sum(row["runtime_sec"] for row in mine) / len(mine),
            "mean_steps": sum(row["steps"] for row in mine) / len(mine),
        }
    return summary
