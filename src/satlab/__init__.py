"""
satlab: exact (DPLL) and heuristic (WalkSAT) solving of fixed-width CNF formulas.
"""

from satlab.core import Formula, build_indices
from satlab.exceptions import (
    ConfigurationError,
    FormulaReadError,
    InvalidFormulaError,
    ParseError,
    SATBaseException,
    SATIOError,
    SolutionWriteError,
)
from satlab.solvers import (
    DPLLSolver,
    SolverRegistry,
    SolverResult,
    SolverStatus,
    WalkSATSolver,
    dpll_solve,
    walksat_solve,
)
from satlab.utils.cnf import load_formula, parse_formula, write_solution

__version__ = "0.1.0"

# Short names of the core call contract.
load = load_formula
write = write_solution

__all__ = [
    "Formula",
    "build_indices",
    "load",
    "load_formula",
    "parse_formula",
    "write",
    "write_solution",
    "dpll_solve",
    "walksat_solve",
    "DPLLSolver",
    "WalkSATSolver",
    "SolverRegistry",
    "SolverResult",
    "SolverStatus",
    "SATBaseException",
    "ParseError",
    "InvalidFormulaError",
    "SATIOError",
    "FormulaReadError",
    "SolutionWriteError",
    "ConfigurationError",
]
