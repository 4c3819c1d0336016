"""
SAT solver package with unified interface.
"""

from .base import SolverBase, SolverResult, SolverStatus, format_assignment
from .config import SolverConfig, get_config, load_config
from .registry import SolverRegistry, register_solver

# Importing the engines registers them.
from .dpll_solver import ClauseState, DPLLSolver, dpll_solve  # noqa: E402
from .walksat_solver import WalkSATSolver, walksat_solve  # noqa: E402

__all__ = [
    "SolverBase",
    "SolverResult",
    "SolverStatus",
    "format_assignment",
    "SolverRegistry",
    "register_solver",
    "get_config",
    "load_config",
    "SolverConfig",
    "ClauseState",
    "DPLLSolver",
    "dpll_solve",
    "WalkSATSolver",
    "walksat_solve",
]
