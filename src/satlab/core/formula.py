"""
Formula model for fixed-width CNF instances.

A formula holds N variables and M clauses of exactly K literals each. Literals
are nonzero signed integers: the absolute value names the variable (1-based)
and the sign is the polarity.
"""

from collections.abc import Iterable, Sequence

import numpy as np

from satlab.exceptions import InvalidFormulaError

MIN_CLAUSE_WIDTH = 2


def literal_is_true(literal: int, value: bool) -> bool:
    """
    Evaluate a literal against the truth value of its variable.

    Args:
        literal: Signed literal
        value: Current truth value of ``abs(literal)``

    Returns:
        True if the literal is positive and the variable true, or negative and false
    """
    return (literal > 0) == bool(value)


def literal_for(variable: int, value: bool) -> int:
    """Return the literal of ``variable`` that is made true by ``value``."""
    return variable if value else -variable


class Formula:
    """
    An immutable K-CNF formula.

    Clauses are stored as an ``M x K`` integer matrix; row ``i`` is clause ``i``.
    """

    def __init__(self, num_variables: int, clauses: np.ndarray | Sequence[Sequence[int]]):
        """
        Initialize and validate the formula.

        Args:
            num_variables: Number of variables N (variables are 1..N)
            clauses: M rows of K signed literals each

        Raises:
            InvalidFormulaError: If an invariant of the formula does not hold
        """
        try:
            matrix = np.array(clauses, dtype=np.int64)
        except (TypeError, ValueError) as e:
            raise InvalidFormulaError(f"Clauses do not form an M x K integer matrix ({e})") from e

        if num_variables < 1:
            raise InvalidFormulaError(f"Formula needs at least one variable, got N={num_variables}")
        if matrix.ndim != 2 or matrix.shape[0] < 1:
            raise InvalidFormulaError("Formula needs at least one clause of uniform width")
        if matrix.shape[1] < MIN_CLAUSE_WIDTH:
            raise InvalidFormulaError(
                f"Clauses need at least {MIN_CLAUSE_WIDTH} literals, got K={matrix.shape[1]}"
            )

        bad_rows = np.flatnonzero(((matrix == 0) | (np.abs(matrix) > num_variables)).any(axis=1))
        if bad_rows.size:
            row = int(bad_rows[0])
            raise InvalidFormulaError(
                f"Literal out of range [-{num_variables}, {num_variables}] or zero in clause {row + 1}",
                clause=matrix[row].tolist(),
            )

        matrix.setflags(write=False)
        self._num_variables = int(num_variables)
        self._clauses = matrix

    @classmethod
    def from_clauses(cls, num_variables: int, clauses: Iterable[Iterable[int]]) -> "Formula":
        """Build a formula from any iterable of literal rows."""
        return cls(num_variables, [list(clause) for clause in clauses])

    @property
    def num_variables(self) -> int:
        """N, the number of variables."""
        return self._num_variables

    @property
    def num_clauses(self) -> int:
        """M, the number of clauses."""
        return self._clauses.shape[0]

    @property
    def clause_width(self) -> int:
        """K, the number of literals per clause."""
        return self._clauses.shape[1]

    @property
    def clauses(self) -> np.ndarray:
        """Read-only ``M x K`` literal matrix."""
        return self._clauses

    def clause(self, index: int) -> list[int]:
        """Return clause ``index`` (0-based) as a list of literals."""
        return self._clauses[index].tolist()

    def __iter__(self):
        return iter(self._clauses.tolist())

    def __len__(self) -> int:
        return self.num_clauses

    def __eq__(self, other) -> bool:
        if not isinstance(other, Formula):
            return False
        return self._num_variables == other._num_variables and np.array_equal(
            self._clauses, other._clauses
        )

    def __hash__(self):
        return hash((self._num_variables, self._clauses.tobytes(), self._clauses.shape))

    def __repr__(self) -> str:
        return (
            f"Formula(N={self.num_variables}, M={self.num_clauses}, K={self.clause_width})"
        )

    def true_literal_counts(self, assignment: np.ndarray | Sequence[bool]) -> np.ndarray:
        """
        Count the true literal occurrences of every clause.

        Args:
            assignment: Complete assignment, ``assignment[v - 1]`` is the value of variable v

        Returns:
            Integer array of length M
        """
        values = np.asarray(assignment, dtype=bool)
        if values.shape != (self.num_variables,):
            raise ValueError(
                f"Assignment must have {self.num_variables} values, got shape {values.shape}"
            )
        literal_values = values[np.abs(self._clauses) - 1]
        return np.count_nonzero(literal_values == (self._clauses > 0), axis=1)

    def count_satisfied(self, assignment: np.ndarray | Sequence[bool]) -> int:
        """Number of clauses satisfied by a complete assignment."""
        return int(np.count_nonzero(self.true_literal_counts(assignment)))

    def is_satisfied_by(self, assignment: np.ndarray | Sequence[bool]) -> bool:
        """True if every clause has at least one true literal under the assignment."""
        return bool(np.all(self.true_literal_counts(assignment) > 0))
