"""
Base interface for all SAT solvers in the framework.
Defines the result contract handed to the reporting layer and the
interface that each solving engine implements.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import numpy as np

from satlab.core.formula import Formula


class SolverStatus(Enum):
    """Enum representing the verdict of a solver run."""

    SATISFIABLE = "satisfiable"
    # Proven by an exhaustive search.
    UNSATISFIABLE = "unsatisfiable"
    # Step budget exhausted by an incomplete search; not a proof.
    TIMEOUT = "timeout"


class SolverResult:
    """
    Standardized result object returned by all solvers.
    """

    def __init__(
        self,
        status: SolverStatus,
        solution: list[int] | None = None,
        runtime: float = 0.0,
        steps: int = 0,
        satisfied_clauses: int = 0,
        total_clauses: int = 0,
        statistics: dict[str, Any] | None = None,
    ):
        """
        Args:
            status: The verdict
            solution: Signed literals in variable order, e.g. ``[1, -2, 3]``.
                Present only for satisfiable results.
            runtime: Wall-clock seconds spent searching
            steps: Assignments (DPLL) or flips (WalkSAT) performed
            satisfied_clauses: Clauses satisfied by the final assignment
            total_clauses: Number of clauses in the formula
            statistics: Solver specific counters
        """
        self.status = status
        self.solution = solution
        self.runtime = runtime
        self.steps = steps
        self.satisfied_clauses = satisfied_clauses
        self.total_clauses = total_clauses
        self.statistics = statistics or {}

    @property
    def is_sat(self) -> bool:
        """Returns True if the problem is satisfiable."""
        return self.status == SolverStatus.SATISFIABLE

    @property
    def is_unsat(self) -> bool:
        """Returns True if the problem was proven unsatisfiable."""
        return self.status == SolverStatus.UNSATISFIABLE

    @property
    def satisfaction_ratio(self) -> float:
        """Returns the ratio of satisfied clauses."""
        if self.total_clauses == 0:
            return 0.0
        return self.satisfied_clauses / self.total_clauses

    @property
    def assignment(self) -> np.ndarray | None:
        """The solution as a boolean vector, ``assignment[v - 1]`` for variable v."""
        if self.solution is None:
            return None
        return np.array([lit > 0 for lit in self.solution], dtype=bool)

    def signs(self) -> list[int]:
        """
        The report encoding of the solution: ``1`` for true, ``-1`` for false,
        one value per variable in id order.

        Raises:
            ValueError: If the result carries no solution
        """
        if self.solution is None:
            raise ValueError(f"No solution available for a {self.status.value} result")
        return [1 if lit > 0 else -1 for lit in self.solution]

    def to_dict(self) -> dict[str, Any]:
        """Flat summary suitable for structured logging."""
        return {
            "status": self.status.value,
            "runtime": self.runtime,
            "steps": self.steps,
            "satisfied_clauses": self.satisfied_clauses,
            "total_clauses": self.total_clauses,
            "statistics": dict(self.statistics),
        }

    def __str__(self) -> str:
        """String representation of the result."""
        status_str = str(self.status.value).upper()
        if self.status == SolverStatus.SATISFIABLE:
            return f"SAT Result: {status_str} ({self.satisfied_clauses}/{self.total_clauses} clauses, {self.runtime:.4f}s)"
        elif self.status == SolverStatus.UNSATISFIABLE:
            return f"SAT Result: {status_str} (proved in {self.runtime:.4f}s)"
        else:
            return f"SAT Result: {status_str} ({self.satisfied_clauses}/{self.total_clauses} clauses after {self.steps} steps, {self.runtime:.4f}s)"


def solution_from_values(values: np.ndarray) -> list[int]:
    """Convert a boolean vector into signed literals ``[1, -2, ...]``."""
    return [i + 1 if value else -(i + 1) for i, value in enumerate(values.tolist())]


def format_assignment(result: SolverResult) -> str:
    """Render a solution as ``P1=true P2=false ...``."""
    if result.solution is None:
        return ""
    return " ".join(
        f"P{abs(lit)}={'true' if lit > 0 else 'false'}" for lit in result.solution
    )


class SolverBase(ABC):
    """
    Abstract base class for SAT solver implementations.
    All solver implementations must inherit from this class.

    A solver instance holds configuration only; every call to ``solve`` owns
    its own search state, so one instance can be reused across formulas.
    """

    solver_name = "base"

    @abstractmethod
    def solve(self, formula: Formula) -> SolverResult:
        """
        Attempt to solve the SAT instance.

        Args:
            formula: The formula to solve

        Returns:
            SolverResult containing the verdict and, if satisfiable, the assignment
        """

    @abstractmethod
    def get_statistics(self) -> dict[str, Any]:
        """
        Get statistics of the last run.

        Returns:
            Dictionary of statistics
        """

    @abstractmethod
    def configure(self, config: dict[str, Any]) -> None:
        """
        Configure the solver with the given parameters.

        Args:
            config: Dictionary of configuration parameters
        """
