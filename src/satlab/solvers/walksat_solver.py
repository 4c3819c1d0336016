"""
WalkSAT solver implementation using the unified solver interface.

This version uses 0-break values: when some literal of the chosen clause can be
flipped without breaking any satisfied clause, one such literal is flipped.
Otherwise a greedy (minimum break) move is taken with probability
``1 - noise_probability`` and a random literal of the clause is flipped
otherwise.
"""

import logging
import time
from typing import Any

import numpy as np

from satlab.core.formula import Formula
from satlab.core.indices import PolarityIndex, build_polarity_index
from satlab.exceptions import ConfigurationError
from satlab.utils.seed import make_rng, rng_seed

from .base import SolverBase, SolverResult, SolverStatus, solution_from_values
from .config import get_config
from .registry import register_solver

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 20000
DEFAULT_NOISE_PROBABILITY = 0.433


@register_solver("walksat", "walk")
class WalkSATSolver(SolverBase):
    """
    WalkSAT algorithm implementation for SAT solving.
    """

    solver_name = "walksat"

    def __init__(
        self,
        max_steps: int | None = None,
        noise_probability: float | None = None,
        seed: int | None = None,
        **kwargs,
    ):
        """
        Initialize the WalkSAT solver.

        Args:
            max_steps: Flip budget of one run
            noise_probability: Probability of a random move when no 0-break flip exists
            seed: Seed of the random stream; None draws a fresh seed per run
            **kwargs: Additional configuration parameters
        """
        config = get_config()

        self.max_steps = config.get("solver.walksat.max_steps", DEFAULT_MAX_STEPS)
        self.noise_probability = config.get(
            "solver.walksat.noise_probability", DEFAULT_NOISE_PROBABILITY
        )
        self.seed = config.get("solver.walksat.seed")

        if max_steps is not None:
            self.max_steps = max_steps
        if noise_probability is not None:
            self.noise_probability = noise_probability
        if seed is not None:
            self.seed = seed

        self.configure(kwargs)

        self.stats: dict[str, Any] = {}
        self.last_seed: int | None = None

    def _validate(self) -> None:
        if not isinstance(self.max_steps, (int, np.integer)) or self.max_steps < 0:
            raise ConfigurationError(f"max_steps must be a non-negative integer, got {self.max_steps!r}")
        if not 0.0 <= float(self.noise_probability) <= 1.0:
            raise ConfigurationError(
                f"noise_probability must be within [0, 1], got {self.noise_probability!r}"
            )

    def _new_stats(self, seed: int | None) -> dict[str, Any]:
        return {
            "flips": 0,
            "freebie_moves": 0,
            "greedy_moves": 0,
            "noise_moves": 0,
            "best_satisfied_clauses": 0,
            "seed": seed,
            "solver_name": self.solver_name,
        }

    @staticmethod
    def _true_counts(
        literal_vars: np.ndarray, positive: np.ndarray, assignment: np.ndarray
    ) -> np.ndarray:
        """Number of true literals in every clause."""
        return np.count_nonzero(assignment[literal_vars] == positive, axis=1)

    @staticmethod
    def _break_value(
        variable: int, assignment: np.ndarray, true_counts: np.ndarray, index: PolarityIndex
    ) -> int:
        """
        Number of satisfied clauses that flipping ``variable`` would break.

        Only clauses where the variable currently makes its literal true are
        scanned; those with exactly one true literal would become unsatisfied.
        """
        occurs = index.clauses_with(variable, positive=bool(assignment[variable - 1]))
        return int(np.count_nonzero(true_counts[occurs] == 1))

    def _pick_variable(
        self,
        clause: np.ndarray,
        assignment: np.ndarray,
        true_counts: np.ndarray,
        index: PolarityIndex,
        rng: np.random.Generator,
    ) -> int:
        """
        Choose the variable to flip from an unsatisfied clause.

        Args:
            clause: Literals of the clause
            assignment: Current assignment
            true_counts: True literal count of every clause under ``assignment``
            index: Polarity index of the formula
            rng: Random stream of this run

        Returns:
            The variable (1-based) to flip
        """
        min_break = None
        min_break_vars: list[int] = []
        for literal in clause.tolist():
            variable = abs(literal)
            break_value = self._break_value(variable, assignment, true_counts, index)
            if min_break is None or break_value < min_break:
                min_break = break_value
                min_break_vars = [variable]
            elif break_value == min_break:
                min_break_vars.append(variable)

        if min_break == 0:
            self.stats["freebie_moves"] += 1
            return min_break_vars[rng.integers(len(min_break_vars))]

        if rng.random() < self.noise_probability:
            self.stats["noise_moves"] += 1
            return abs(int(clause[rng.integers(len(clause))]))

        self.stats["greedy_moves"] += 1
        return min_break_vars[rng.integers(len(min_break_vars))]

    def solve(
        self,
        formula: Formula,
        rng: np.random.Generator | None = None,
        index: PolarityIndex | None = None,
    ) -> SolverResult:
        """
        Solve the SAT instance using WalkSAT.

        Args:
            formula: The formula to solve
            rng: Random stream to draw from; created from ``self.seed`` if omitted
            index: Prebuilt polarity index for ``formula`` (built if omitted)

        Returns:
            SolverResult with status SATISFIABLE, or TIMEOUT once the step
            budget is spent
        """
        if rng is None:
            rng = make_rng(self.seed)
        if index is None:
            index = build_polarity_index(formula)

        # Seed of this run; differs from self.seed when a fresh one was drawn.
        self.last_seed = rng_seed(rng)
        self.stats = self._new_stats(self.last_seed)

        clauses = formula.clauses
        literal_vars = np.abs(clauses) - 1
        positive = clauses > 0

        start_time = time.time()

        assignment = rng.integers(0, 2, size=formula.num_variables).astype(bool)
        true_counts = self._true_counts(literal_vars, positive, assignment)

        steps = 0
        found = False
        while True:
            satisfied = int(np.count_nonzero(true_counts))
            if satisfied > self.stats["best_satisfied_clauses"]:
                self.stats["best_satisfied_clauses"] = satisfied

            if satisfied == formula.num_clauses:
                found = True
                break
            if steps >= self.max_steps:
                break

            unsatisfied = np.flatnonzero(true_counts == 0)
            clause_idx = int(unsatisfied[rng.integers(unsatisfied.size)])

            variable = self._pick_variable(
                clauses[clause_idx], assignment, true_counts, index, rng
            )
            assignment[variable - 1] = not assignment[variable - 1]
            true_counts = self._true_counts(literal_vars, positive, assignment)
            steps += 1

        runtime = time.time() - start_time
        self.stats["flips"] = steps
        self.stats["runtime"] = runtime

        if found:
            logger.info(f"WalkSAT found a solution after {steps} steps ({runtime:.4f}s)")
            return SolverResult(
                status=SolverStatus.SATISFIABLE,
                solution=solution_from_values(assignment),
                runtime=runtime,
                steps=steps,
                satisfied_clauses=formula.num_clauses,
                total_clauses=formula.num_clauses,
                statistics=dict(self.stats),
            )

        logger.info(
            f"WalkSAT found no solution within {self.max_steps} steps ({runtime:.4f}s)"
        )
        return SolverResult(
            status=SolverStatus.TIMEOUT,
            runtime=runtime,
            steps=steps,
            satisfied_clauses=satisfied,
            total_clauses=formula.num_clauses,
            statistics=dict(self.stats),
        )

    def get_statistics(self) -> dict[str, Any]:
        """
        Get statistics of the last run.

        Returns:
            Dictionary of statistics
        """
        return self.stats

    def configure(self, config: dict[str, Any]) -> None:
        """
        Configure the solver with the given parameters.

        Args:
            config: Dictionary of configuration parameters
        """
        for key, value in config.items():
            if key in ("max_steps", "noise_probability", "seed"):
                setattr(self, key, value)
                logger.debug(f"Set {key}={value} for WalkSAT solver")
            else:
                logger.warning(f"Unknown configuration parameter: {key}")
        self._validate()


def walksat_solve(
    formula: Formula,
    max_steps: int = DEFAULT_MAX_STEPS,
    noise_probability: float = DEFAULT_NOISE_PROBABILITY,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> SolverResult:
    """
    Search a formula with WalkSAT.

    Args:
        formula: The formula to solve
        max_steps: Flip budget
        noise_probability: Probability of a random move when no 0-break flip exists
        rng: Random stream to draw from (takes precedence over ``seed``)
        seed: Seed for a fresh random stream

    Returns:
        SATISFIABLE with an assignment, or TIMEOUT with the steps taken
    """
    solver = WalkSATSolver(max_steps=max_steps, noise_probability=noise_probability, seed=seed)
    return solver.solve(formula, rng=rng)
