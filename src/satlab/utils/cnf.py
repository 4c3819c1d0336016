"""
CNF file handling utilities.

This module provides functions for loading, parsing and writing fixed-width
CNF formulas in the native ``N M K`` row format and in DIMACS format, as well
as writing and reading back solution files.

Native format::

    N M K
    <K signed nonzero integers in [-N, N]>   (repeated M times)

Solution format: N whitespace-separated integers, ``1`` for true and ``-1``
for false, in variable order.
"""

import logging
import os
from collections.abc import Sequence
from typing import TextIO

import numpy as np

from satlab.core.formula import MIN_CLAUSE_WIDTH, Formula
from satlab.exceptions import (
    FormulaReadError,
    ParseError,
    SATIOError,
    SolutionWriteError,
)

# Set up logging
logger = logging.getLogger(__name__)

FORMAT_NATIVE = "kcnf"
FORMAT_DIMACS = "dimacs"
FORMAT_AUTO = "auto"


def _read_source(source: str | TextIO) -> str:
    if isinstance(source, str):
        return source
    return source.read()


def _header_int(tokens: list[str], index: int, what: str) -> int:
    if index >= len(tokens):
        raise ParseError(f"Cannot read the number of {what}")
    try:
        return int(tokens[index])
    except ValueError:
        raise ParseError(f"Cannot read the number of {what}", token=tokens[index]) from None


def parse_formula(source: str | TextIO) -> Formula:
    """
    Parse a formula from the native ``N M K`` format.

    Row breaks are not significant: the input is read as one stream of
    whitespace-separated tokens.

    Args:
        source: Problem text as a string or file-like object

    Returns:
        The parsed Formula

    Raises:
        ParseError: If a token is missing or malformed, or a value is out of range
    """
    tokens = _read_source(source).split()

    num_variables = _header_int(tokens, 0, "propositions")
    if num_variables < 1:
        raise ParseError(f"Small number of propositions (N={num_variables})")

    num_clauses = _header_int(tokens, 1, "sentences")
    if num_clauses < 1:
        raise ParseError(f"Low number of sentences (M={num_clauses})")

    width = _header_int(tokens, 2, "propositions per sentence")
    if width < MIN_CLAUSE_WIDTH:
        raise ParseError(f"Low number of propositions per sentence (K={width})")

    body = tokens[3:]
    clauses = np.empty((num_clauses, width), dtype=np.int64)
    for i in range(num_clauses):
        for j in range(width):
            offset = i * width + j
            if offset >= len(body):
                raise ParseError(
                    f"Cannot read the #{j + 1} proposition of the #{i + 1} sentence",
                    clause=i + 1,
                    position=j + 1,
                )
            try:
                literal = int(body[offset])
            except ValueError:
                raise ParseError(
                    f"Cannot read the #{j + 1} proposition of the #{i + 1} sentence",
                    clause=i + 1,
                    position=j + 1,
                    token=body[offset],
                ) from None
            if literal == 0 or abs(literal) > num_variables:
                raise ParseError(
                    f"Wrong value for the #{j + 1} proposition of the #{i + 1} sentence",
                    clause=i + 1,
                    position=j + 1,
                    token=body[offset],
                )
            clauses[i, j] = literal

    extra = len(body) - num_clauses * width
    if extra > 0:
        logger.warning(f"Ignoring {extra} trailing token(s) after the last clause")

    return Formula(num_variables, clauses)


def parse_dimacs(source: str | TextIO) -> Formula:
    """
    Parse a fixed-width formula from DIMACS format.

    Args:
        source: DIMACS content as a string or file-like object

    Returns:
        The parsed Formula

    Raises:
        ParseError: If the format is invalid or clause widths are not uniform
    """
    lines = _read_source(source).strip().split("\n")

    clauses: list[list[int]] = []
    num_variables = 0
    num_clauses = 0
    found_problem_line = False
    current_clause: list[int] = []

    for line in lines:
        line = line.strip()

        if not line or line.startswith("c") or line.startswith("%"):
            continue

        if line.startswith("p"):
            if found_problem_line:
                raise ParseError("Multiple problem lines in CNF file")

            parts = line.split()
            if len(parts) < 4 or parts[1] != "cnf":
                raise ParseError(f"Invalid problem line: {line}")
            try:
                num_variables = int(parts[2])
                num_clauses = int(parts[3])
            except ValueError:
                raise ParseError(f"Invalid numbers in problem line: {line}") from None

            found_problem_line = True
            continue

        for token in line.split():
            try:
                value = int(token)
            except ValueError:
                raise ParseError(
                    "Invalid literal in clause data", clause=len(clauses) + 1, token=token
                ) from None
            if value == 0:
                if current_clause:
                    clauses.append(current_clause)
                    current_clause = []
            else:
                current_clause.append(value)

    if current_clause:
        clauses.append(current_clause)

    if not found_problem_line:
        raise ParseError("No problem line found in CNF file")
    if num_variables < 1:
        raise ParseError(f"Small number of propositions (N={num_variables})")
    if len(clauses) != num_clauses:
        raise ParseError(f"Expected {num_clauses} clauses, but found {len(clauses)}")
    if num_clauses < 1:
        raise ParseError(f"Low number of sentences (M={num_clauses})")

    width = len(clauses[0])
    for i, clause in enumerate(clauses):
        if len(clause) != width:
            raise ParseError(
                f"Clause #{i + 1} has {len(clause)} literals, expected {width}",
                clause=i + 1,
            )
        for j, literal in enumerate(clause):
            if abs(literal) > num_variables:
                raise ParseError(
                    f"Wrong value for the #{j + 1} proposition of the #{i + 1} sentence",
                    clause=i + 1,
                    position=j + 1,
                    token=str(literal),
                )
    if width < MIN_CLAUSE_WIDTH:
        raise ParseError(f"Low number of propositions per sentence (K={width})")

    return Formula(num_variables, clauses)


def _detect_format(content: str) -> str:
    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith("c") or line.startswith("p"):
            return FORMAT_DIMACS
        return FORMAT_NATIVE
    return FORMAT_NATIVE


def load_formula(file_path: str | os.PathLike, fmt: str = FORMAT_AUTO) -> Formula:
    """
    Load a formula from a file.

    Args:
        file_path: Path to the problem file
        fmt: "kcnf" for the native format, "dimacs", or "auto" to detect

    Returns:
        The parsed Formula

    Raises:
        FormulaReadError: If the file cannot be opened or read
        ParseError: If the file content is invalid
    """
    try:
        with open(file_path) as f:
            content = f.read()
    except OSError as e:
        raise FormulaReadError(path=os.fspath(file_path)) from e

    if fmt == FORMAT_AUTO:
        fmt = _detect_format(content)
    if fmt == FORMAT_DIMACS:
        formula = parse_dimacs(content)
    elif fmt == FORMAT_NATIVE:
        formula = parse_formula(content)
    else:
        raise ValueError(f"Unknown formula format: {fmt}")

    logger.debug(f"Loaded {formula!r} from {file_path}")
    return formula


def formula_to_text(formula: Formula) -> str:
    """Render a formula in the native format, one clause per row."""
    lines = [f"{formula.num_variables} {formula.num_clauses} {formula.clause_width}"]
    for clause in formula:
        lines.append(" ".join(map(str, clause)))
    return "\n".join(lines) + "\n"


def formula_to_dimacs(formula: Formula, comments: list[str] | None = None) -> str:
    """
    Convert a formula to DIMACS format.

    Args:
        formula: The formula to convert
        comments: List of comment lines to include

    Returns:
        DIMACS format string representation
    """
    lines = [f"c {comment}" for comment in comments or []]
    lines.append(f"p cnf {formula.num_variables} {formula.num_clauses}")
    for clause in formula:
        lines.append(" ".join(map(str, clause)) + " 0")
    return "\n".join(lines) + "\n"


def save_formula(
    file_path: str | os.PathLike, formula: Formula, fmt: str = FORMAT_NATIVE
) -> None:
    """
    Save a formula to a file.

    Args:
        file_path: Path to save the formula to
        formula: The formula
        fmt: "kcnf" (native) or "dimacs"

    Raises:
        SATIOError: If the file cannot be written
    """
    if fmt == FORMAT_DIMACS:
        content = formula_to_dimacs(formula)
    elif fmt == FORMAT_NATIVE:
        content = formula_to_text(formula)
    else:
        raise ValueError(f"Unknown formula format: {fmt}")

    try:
        with open(file_path, "w") as f:
            f.write(content)
    except OSError as e:
        raise SATIOError("Cannot write problem file", path=os.fspath(file_path)) from e


def solution_signs(assignment: Sequence[bool] | np.ndarray) -> list[int]:
    """Map a boolean assignment to the ``1`` / ``-1`` report encoding."""
    return [1 if value else -1 for value in np.asarray(assignment, dtype=bool).tolist()]


def write_solution(file_path: str | os.PathLike, solution) -> None:
    """
    Write a solution file.

    Args:
        file_path: Path of the output file (overwritten)
        solution: A SolverResult with a solution, or a boolean assignment vector

    Raises:
        SolutionWriteError: If the file cannot be written. The exception keeps
            the result so the caller still holds the solution.
        ValueError: If a result without a solution is passed
    """
    result = None
    if hasattr(solution, "signs"):
        result = solution
        signs = result.signs()
    else:
        signs = solution_signs(solution)

    try:
        with open(file_path, "w") as f:
            f.write(" ".join(map(str, signs)) + "\n")
    except OSError as e:
        raise SolutionWriteError(path=os.fspath(file_path), result=result) from e

    logger.debug(f"Wrote {len(signs)} values to {file_path}")


def read_solution(file_path: str | os.PathLike) -> np.ndarray:
    """
    Read a solution file back into a boolean assignment vector.

    Raises:
        FormulaReadError: If the file cannot be read
        ParseError: If a value is not 1 or -1
    """
    try:
        with open(file_path) as f:
            tokens = f.read().split()
    except OSError as e:
        raise FormulaReadError("Cannot open solution file", path=os.fspath(file_path)) from e

    values = []
    for position, token in enumerate(tokens, start=1):
        if token not in ("1", "-1"):
            raise ParseError(
                f"Wrong value for variable #{position} in solution file",
                position=position,
                token=token,
            )
        values.append(token == "1")
    return np.array(values, dtype=bool)
