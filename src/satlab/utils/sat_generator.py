"""
Random K-CNF instance generator for experiments and tests.
"""

import logging
import os

import numpy as np

from satlab.core.formula import MIN_CLAUSE_WIDTH, Formula
from satlab.exceptions import InvalidFormulaError
from satlab.utils.cnf import save_formula

# Set up logging
logger = logging.getLogger(__name__)


def generate_random_kcnf(num_variables, num_clauses, clause_width=3, seed=None):
    """
    Generate a random K-CNF formula.

    Every clause holds ``clause_width`` distinct variables, each negated with
    probability one half.

    Args:
        num_variables: N, number of variables
        num_clauses: M, number of clauses
        clause_width: K, literals per clause (must not exceed N)
        seed: Seed or numpy Generator for reproducibility

    Returns:
        Formula
    """
    if num_variables < 1 or num_clauses < 1 or clause_width < MIN_CLAUSE_WIDTH:
        raise InvalidFormulaError(
            f"Need N >= 1, M >= 1 and K >= {MIN_CLAUSE_WIDTH}, got "
            f"N={num_variables}, M={num_clauses}, K={clause_width}"
        )
    if clause_width > num_variables:
        raise InvalidFormulaError(
            f"Clause width K={clause_width} exceeds the number of variables N={num_variables}"
        )

    rng = np.random.default_rng(seed)
    clauses = np.empty((num_clauses, clause_width), dtype=np.int64)
    variables = np.arange(1, num_variables + 1)
    for i in range(num_clauses):
        vars_ = rng.choice(variables, size=clause_width, replace=False)
        signs = rng.choice([-1, 1], size=clause_width)
        clauses[i] = vars_ * signs
    return Formula(num_variables, clauses)


def batch_generate_kcnf(num_variables, num_clauses, clause_width=3, n_instances=10, seed=None):
    """Batch-generate random K-CNF formulas with consecutive seeds."""
    seeds = [seed + i if seed is not None else None for i in range(n_instances)]
    return [generate_random_kcnf(num_variables, num_clauses, clause_width, s) for s in seeds]


def generate_problem_files(
    count, prefix, num_variables, num_clauses, clause_width=3, seed=None
):
    """
    Write ``count`` random problems as ``<prefix>_1.txt`` .. ``<prefix>_<count>.txt``.

    Args:
        count: Number of problems, must be positive
        prefix: Path prefix of the generated files
        num_variables: N
        num_clauses: M
        clause_width: K
        seed: Base seed; file i uses ``seed + i - 1``

    Returns:
        List of written paths
    """
    if count <= 0:
        raise InvalidFormulaError(f"The number of problems must be positive, got {count}")

    directory = os.path.dirname(os.path.abspath(prefix))
    os.makedirs(directory, exist_ok=True)

    paths = []
    formulas = batch_generate_kcnf(num_variables, num_clauses, clause_width, count, seed)
    for i, formula in enumerate(formulas, start=1):
        path = f"{prefix}_{i}.txt"
        save_formula(path, formula)
        paths.append(path)

    logger.info(f"Generated {count} problem(s) with N={num_variables}, M={num_clauses}, K={clause_width}")
    return paths
