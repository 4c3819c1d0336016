"""
DPLL solver implementation using the unified solver interface.

The search keeps per-clause status incrementally: assigning a variable marks the
clauses it makes true as satisfied and eliminates its false occurrences, and
unassigning it applies the exact inverse. Nothing is recomputed from scratch
between search steps.

Each step follows the classic order: succeed when every clause is satisfied,
fail on a clause with no candidate literal left, then try a pure literal, then
a unit clause, and finally branch on the lowest unassigned variable, true
before false. Forced choices (pure, unit) have no alternative branch.
"""

import logging
import time
from typing import Any, NamedTuple

import numpy as np

from satlab.core.formula import Formula, literal_for
from satlab.core.indices import OccurrenceIndex, build_occurrence_index

from .base import SolverBase, SolverResult, SolverStatus, solution_from_values
from .registry import register_solver

# Set up logging
logger = logging.getLogger(__name__)

UNASSIGNED = -1


class ClauseState:
    """
    Clause and literal-occurrence status for one DPLL search.

    A clause is SATISFIED while at least one of its occurrences evaluates true
    and PENDING otherwise. Inside a clause, an occurrence is a CANDIDATE while
    its variable is unassigned or makes it true, and ELIMINATED once its
    variable makes it false. A PENDING clause without candidates is falsified.
    """

    def __init__(self, formula: Formula, index: OccurrenceIndex | None = None):
        self.formula = formula
        self.index = index if index is not None else build_occurrence_index(formula)

        num_clauses, width = formula.num_clauses, formula.clause_width
        # Slot 0 is unused so variables index directly.
        self.values = np.full(formula.num_variables + 1, UNASSIGNED, dtype=np.int8)
        self.candidate = np.ones((num_clauses, width), dtype=bool)
        self.candidate_count = np.full(num_clauses, width, dtype=np.int64)
        self.true_count = np.zeros(num_clauses, dtype=np.int64)
        self.satisfied = np.zeros(num_clauses, dtype=bool)
        self.satisfied_count = 0

    def is_assigned(self, variable: int) -> bool:
        return self.values[variable] != UNASSIGNED

    def value(self, variable: int) -> bool | None:
        """Current truth value of ``variable``, or None if unassigned."""
        value = self.values[variable]
        if value == UNASSIGNED:
            return None
        return bool(value)

    def assign(self, variable: int, value: bool) -> None:
        """
        Give ``variable`` a truth value and update the clause status.

        Raises:
            ValueError: If the variable already has a value
        """
        if self.values[variable] != UNASSIGNED:
            raise ValueError(f"Variable {variable} is already assigned")

        self.values[variable] = 1 if value else 0
        for occ in self.index.occurrences(variable):
            if occ.positive == value:
                self.true_count[occ.clause] += 1
                if self.true_count[occ.clause] == 1:
                    self.satisfied[occ.clause] = True
                    self.satisfied_count += 1
            else:
                self.candidate[occ.clause, occ.position] = False
                self.candidate_count[occ.clause] -= 1

    def unassign(self, variable: int) -> None:
        """
        Exact inverse of ``assign`` for the variable's current value.

        Raises:
            ValueError: If the variable has no value
        """
        if self.values[variable] == UNASSIGNED:
            raise ValueError(f"Variable {variable} is not assigned")

        value = bool(self.values[variable])
        for occ in self.index.occurrences(variable):
            if occ.positive == value:
                self.true_count[occ.clause] -= 1
                if self.true_count[occ.clause] == 0:
                    self.satisfied[occ.clause] = False
                    self.satisfied_count -= 1
            else:
                self.candidate[occ.clause, occ.position] = True
                self.candidate_count[occ.clause] += 1
        self.values[variable] = UNASSIGNED

    def all_satisfied(self) -> bool:
        return self.satisfied_count == self.formula.num_clauses

    def has_falsified_clause(self) -> bool:
        return bool(np.any(~self.satisfied & (self.candidate_count == 0)))

    def find_pure_literal(self) -> int | None:
        """
        First unassigned variable (ascending id) that occurs with a single
        polarity across all PENDING clauses.

        Returns:
            The literal that satisfies those occurrences, or None
        """
        for variable in range(1, self.formula.num_variables + 1):
            if self.values[variable] != UNASSIGNED:
                continue
            polarities = {
                occ.positive
                for occ in self.index.occurrences(variable)
                if not self.satisfied[occ.clause]
            }
            if len(polarities) == 1:
                return literal_for(variable, polarities.pop())
        return None

    def find_unit_literal(self) -> int | None:
        """
        The remaining candidate of the first PENDING clause that has exactly one.

        Returns:
            That literal, or None if there is no unit clause
        """
        units = np.flatnonzero(~self.satisfied & (self.candidate_count == 1))
        if units.size == 0:
            return None
        clause = int(units[0])
        position = int(np.argmax(self.candidate[clause]))
        return int(self.formula.clauses[clause, position])

    def first_unassigned(self) -> int | None:
        free = np.flatnonzero(self.values[1:] == UNASSIGNED)
        if free.size == 0:
            return None
        return int(free[0]) + 1

    def assignment_vector(self) -> np.ndarray:
        """Boolean assignment; unassigned variables read as false."""
        return self.values[1:] == 1


class Decision(NamedTuple):
    """One entry of the search trail."""

    variable: int
    value: bool
    # True only for a branch on `true` whose `false` side is still untried.
    retry: bool


@register_solver("dpll")
class DPLLSolver(SolverBase):
    """
    Complete DPLL search with pure-literal and unit-clause rules.
    """

    solver_name = "dpll"

    def __init__(self, **kwargs):
        """
        Initialize the DPLL solver.

        Args:
            **kwargs: Configuration parameters (DPLL has none; unknown keys are reported)
        """
        self.stats: dict[str, Any] = {}
        self.configure(kwargs)

    def _new_stats(self) -> dict[str, Any]:
        return {
            "decisions": 0,
            "pure_literals": 0,
            "unit_propagations": 0,
            "backtracks": 0,
            "assignments": 0,
            "max_depth": 0,
            "solver_name": self.solver_name,
        }

    def _push(self, state: ClauseState, trail: list[Decision], decision: Decision) -> None:
        state.assign(decision.variable, decision.value)
        trail.append(decision)
        self.stats["assignments"] += 1
        if len(trail) > self.stats["max_depth"]:
            self.stats["max_depth"] = len(trail)

    def _decide(self, state: ClauseState, trail: list[Decision]) -> bool:
        """
        Extend the trail by one assignment.

        Returns:
            False if no variable is left to assign
        """
        literal = state.find_pure_literal()
        if literal is not None:
            self.stats["pure_literals"] += 1
            self._push(state, trail, Decision(abs(literal), literal > 0, retry=False))
            return True

        literal = state.find_unit_literal()
        if literal is not None:
            self.stats["unit_propagations"] += 1
            self._push(state, trail, Decision(abs(literal), literal > 0, retry=False))
            return True

        variable = state.first_unassigned()
        if variable is None:
            return False

        self.stats["decisions"] += 1
        self._push(state, trail, Decision(variable, True, retry=True))
        return True

    def _backtrack(self, state: ClauseState, trail: list[Decision]) -> bool:
        """
        Undo assignments until a branch with an untried value is found and
        switch it to false.

        Returns:
            False if the trail is exhausted, i.e. the formula is unsatisfiable
        """
        while trail:
            decision = trail.pop()
            state.unassign(decision.variable)
            self.stats["backtracks"] += 1
            if decision.retry:
                self._push(state, trail, Decision(decision.variable, False, retry=False))
                return True
        return False

    def _search(self, state: ClauseState) -> bool:
        trail: list[Decision] = []
        while True:
            if state.all_satisfied():
                return True
            if state.has_falsified_clause() or not self._decide(state, trail):
                if not self._backtrack(state, trail):
                    return False

    def solve(self, formula: Formula, index: OccurrenceIndex | None = None) -> SolverResult:
        """
        Solve the SAT instance using DPLL.

        Args:
            formula: The formula to solve
            index: Prebuilt occurrence index for ``formula`` (built if omitted)

        Returns:
            SolverResult with status SATISFIABLE or UNSATISFIABLE
        """
        self.stats = self._new_stats()
        state = ClauseState(formula, index)

        logger.debug(f"DPLL search started on {formula!r}")
        start_time = time.time()
        found = self._search(state)
        runtime = time.time() - start_time
        self.stats["runtime"] = runtime

        if found:
            values = state.assignment_vector()
            logger.info(
                f"DPLL found a solution after {self.stats['assignments']} assignments ({runtime:.4f}s)"
            )
            return SolverResult(
                status=SolverStatus.SATISFIABLE,
                solution=solution_from_values(values),
                runtime=runtime,
                steps=self.stats["assignments"],
                satisfied_clauses=formula.count_satisfied(values),
                total_clauses=formula.num_clauses,
                statistics=dict(self.stats),
            )

        logger.info(
            f"DPLL proved unsatisfiability after {self.stats['assignments']} assignments ({runtime:.4f}s)"
        )
        return SolverResult(
            status=SolverStatus.UNSATISFIABLE,
            runtime=runtime,
            steps=self.stats["assignments"],
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
        for key in config:
            logger.warning(f"Unknown configuration parameter for DPLL: {key}")


def dpll_solve(formula: Formula) -> SolverResult:
    """
    Decide a formula with DPLL.

    Returns:
        SATISFIABLE with a complete assignment, or UNSATISFIABLE
    """
    return DPLLSolver().solve(formula)
