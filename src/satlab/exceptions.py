"""
Custom exception classes for SAT solving operations.

This module defines specialized exceptions for the failure modes of
loading, validating and persisting K-CNF instances and their solutions.
The solving engines themselves raise nothing on a valid formula.
"""


class SATBaseException(Exception):
    """Base exception class for all satlab exceptions."""

    pass


class ParseError(SATBaseException):
    """
    Raised when a problem description cannot be parsed.

    Attributes:
        clause: 1-based clause (sentence) number the error was found in
        position: 1-based literal position inside that clause
        token: The offending token, if one was read
    """

    def __init__(self, message="Malformed problem description", clause=None,
                 position=None, token=None):
        self.clause = clause
        self.position = position
        self.token = token
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        if self.token is not None:
            return f"{self.message} (got {self.token!r})"
        return self.message


class InvalidFormulaError(SATBaseException):
    """
    Raised when a formula built in code violates the K-CNF invariants
    (e.g. a zero literal, a literal outside [-N, N] or a clause of the wrong width).
    """

    def __init__(self, message="Invalid formula", clause=None):
        self.clause = clause
        self.message = message
        if clause is not None:
            self.message = f"{message}: {clause}"
        super().__init__(self.message)


class SATIOError(SATBaseException):
    """
    Raised when a problem or solution file cannot be read or written.

    Attributes:
        path: The file that could not be accessed
    """

    def __init__(self, message="File access failed", path=None):
        self.path = path
        self.message = message
        if path is not None:
            self.message = f"{message}: {path}"
        super().__init__(self.message)


class FormulaReadError(SATIOError):
    """Raised when the input problem file cannot be opened or read."""

    def __init__(self, message="Cannot open input file", path=None):
        super().__init__(message, path)


class SolutionWriteError(SATIOError):
    """
    Raised when a solution cannot be persisted.

    The solver result that was being written is kept on the exception so a
    caller never loses the fact that a solution was found.
    """

    def __init__(self, message="Cannot write solution file", path=None, result=None):
        self.result = result
        super().__init__(message, path)


class ConfigurationError(SATBaseException):
    """
    Raised when there's a problem with solver configuration.
    """

    pass
