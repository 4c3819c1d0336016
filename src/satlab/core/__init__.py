"""
Formula model and the inverted indices the solvers search over.
"""

from .formula import Formula, literal_for, literal_is_true
from .indices import (
    FormulaIndices,
    Occurrence,
    OccurrenceIndex,
    PolarityIndex,
    build_indices,
    build_occurrence_index,
    build_polarity_index,
)

__all__ = [
    "Formula",
    "literal_for",
    "literal_is_true",
    "FormulaIndices",
    "Occurrence",
    "OccurrenceIndex",
    "PolarityIndex",
    "build_indices",
    "build_occurrence_index",
    "build_polarity_index",
]
