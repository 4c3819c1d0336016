"""
Inverted indices over a formula, built once at load time.

The DPLL engine walks every occurrence of a variable when it assigns or
unassigns it, so it uses an occurrence list per variable. WalkSAT only needs
to know which clauses contain a variable with a given polarity, which is two
boolean ``M x N`` membership matrices.
"""

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from satlab.core.formula import Formula


class Occurrence(NamedTuple):
    """One literal occurrence: clause row, position inside the row, polarity."""

    clause: int
    position: int
    positive: bool


class OccurrenceIndex:
    """
    Per-variable occurrence lists.

    Every occurrence is recorded, so a clause that repeats a variable contributes
    one entry per repeat.
    """

    def __init__(self, formula: Formula):
        self.num_variables = formula.num_variables
        # Slot 0 is unused so variables index directly.
        self._occurrences: list[list[Occurrence]] = [
            [] for _ in range(formula.num_variables + 1)
        ]
        for clause_idx, row in enumerate(formula.clauses.tolist()):
            for position, literal in enumerate(row):
                self._occurrences[abs(literal)].append(
                    Occurrence(clause_idx, position, literal > 0)
                )

    def occurrences(self, variable: int) -> list[Occurrence]:
        """Occurrences of ``variable`` in clause order."""
        return self._occurrences[variable]

    def clauses_of(self, variable: int) -> list[int]:
        """Distinct clause rows that mention ``variable``."""
        return sorted({occ.clause for occ in self._occurrences[variable]})


class PolarityIndex:
    """
    Two ``M x N`` membership matrices.

    ``positive[i, v - 1]`` is True when clause ``i`` contains literal ``v``;
    ``negative[i, v - 1]`` when it contains ``-v``. Both are read-only.
    """

    def __init__(self, formula: Formula):
        clauses = formula.clauses
        shape = (formula.num_clauses, formula.num_variables)
        rows = np.repeat(np.arange(formula.num_clauses), formula.clause_width)
        columns = np.abs(clauses).ravel() - 1
        signs = clauses.ravel() > 0

        positive = np.zeros(shape, dtype=bool)
        negative = np.zeros(shape, dtype=bool)
        positive[rows[signs], columns[signs]] = True
        negative[rows[~signs], columns[~signs]] = True
        positive.setflags(write=False)
        negative.setflags(write=False)

        self.positive = positive
        self.negative = negative

    def clauses_with(self, variable: int, positive: bool) -> np.ndarray:
        """Boolean mask of clauses holding ``variable`` with the given polarity."""
        matrix = self.positive if positive else self.negative
        return matrix[:, variable - 1]


@dataclass(frozen=True)
class FormulaIndices:
    """Both index families for one formula."""

    occurrences: OccurrenceIndex
    polarity: PolarityIndex


def build_occurrence_index(formula: Formula) -> OccurrenceIndex:
    return OccurrenceIndex(formula)


def build_polarity_index(formula: Formula) -> PolarityIndex:
    return PolarityIndex(formula)


def build_indices(formula: Formula) -> FormulaIndices:
    """
    Build the DPLL and WalkSAT indices of a formula in one pass each.

    Args:
        formula: The formula to index

    Returns:
        FormulaIndices holding the occurrence lists and polarity matrices
    """
    return FormulaIndices(
        occurrences=build_occurrence_index(formula),
        polarity=build_polarity_index(formula),
    )
