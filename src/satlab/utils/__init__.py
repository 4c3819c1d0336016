"""
Utilities for the satlab package.
"""

from satlab.utils.cnf import (
    formula_to_dimacs,
    formula_to_text,
    load_formula,
    parse_dimacs,
    parse_formula,
    read_solution,
    save_formula,
    write_solution,
)
from satlab.exceptions import (
    ConfigurationError,
    FormulaReadError,
    InvalidFormulaError,
    ParseError,
    SATBaseException,
    SATIOError,
    SolutionWriteError,
)

__all__ = [
    "load_formula",
    "parse_formula",
    "parse_dimacs",
    "formula_to_text",
    "formula_to_dimacs",
    "save_formula",
    "write_solution",
    "read_solution",
    "SATBaseException",
    "ParseError",
    "InvalidFormulaError",
    "SATIOError",
    "FormulaReadError",
    "SolutionWriteError",
    "ConfigurationError",
]
