"""
Registry for SAT solvers in the framework.

Engines register a canonical name plus any number of aliases, so the
command-line method names (``dpll``, ``walk``, ``walksat``) resolve to one class
and reports can always show the canonical name.
"""

import logging
from collections.abc import Callable

from .base import SolverBase

# Set up logging
logger = logging.getLogger(__name__)


class SolverRegistry:
    """
    Class-level mapping of solver names to solver classes.
    Lookups are case-insensitive.
    """

    _solvers: dict[str, type[SolverBase]] = {}
    _aliases: dict[str, str] = {}
    _default_solver: str | None = None

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().lower()

    @classmethod
    def register(
        cls, name: str, solver_cls: type[SolverBase], aliases: tuple[str, ...] = ()
    ) -> None:
        """
        Register a solver under a canonical name and optional aliases.

        Args:
            name: Canonical name of the solver
            solver_cls: Solver class (must inherit from SolverBase)
            aliases: Further names resolving to ``name``

        Raises:
            TypeError: If ``solver_cls`` is not a SolverBase subclass
        """
        if not isinstance(solver_cls, type) or not issubclass(solver_cls, SolverBase):
            raise TypeError(f"{solver_cls!r} must be a subclass of SolverBase")

        canonical = cls._key(name)
        previous = cls._solvers.get(canonical)
        if previous is not None and previous is not solver_cls:
            logger.warning(
                f"Solver '{canonical}' re-registered: {previous.__name__} -> {solver_cls.__name__}"
            )
        cls._solvers[canonical] = solver_cls

        for alias in aliases:
            cls._aliases[cls._key(alias)] = canonical

        if cls._default_solver is None:
            cls._default_solver = canonical

    @classmethod
    def register_as(
        cls, name: str, *aliases: str
    ) -> Callable[[type[SolverBase]], type[SolverBase]]:
        """
        Class decorator form of ``register``.

        Example::

            @register_solver("walksat", "walk")
            class WalkSATSolver(SolverBase): ...
        """

        def decorator(solver_cls: type[SolverBase]) -> type[SolverBase]:
            cls.register(name, solver_cls, aliases)
            return solver_cls

        return decorator

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove a solver and every alias pointing at it."""
        canonical = cls.canonical_name(name)
        del cls._solvers[canonical]
        cls._aliases = {a: c for a, c in cls._aliases.items() if c != canonical}
        if cls._default_solver == canonical:
            cls._default_solver = next(iter(cls._solvers), None)

    @classmethod
    def canonical_name(cls, name: str) -> str:
        """
        Resolve a name or alias to the canonical solver name.

        Raises:
            ValueError: If nothing is registered under ``name``
        """
        key = cls._key(name)
        key = cls._aliases.get(key, key)
        if key not in cls._solvers:
            known = ", ".join(cls.list_solvers())
            raise ValueError(f"Unknown solver '{name}' (known: {known})")
        return key

    @classmethod
    def set_default(cls, name: str) -> None:
        cls._default_solver = cls.canonical_name(name)

    @classmethod
    def get(cls, name: str | None = None) -> type[SolverBase]:
        """
        Get a solver class by name or alias.

        Args:
            name: Name of the solver, or None to get the default solver

        Returns:
            Solver class
        """
        if name is None:
            if cls._default_solver is None:
                raise ValueError("No solver registered")
            return cls._solvers[cls._default_solver]
        return cls._solvers[cls.canonical_name(name)]

    @classmethod
    def list_solvers(cls, include_aliases: bool = False) -> list[str]:
        """Registered canonical names, optionally followed by the aliases."""
        names = list(cls._solvers)
        if include_aliases:
            names.extend(cls._aliases)
        return names

    @classmethod
    def create(cls, name: str | None = None, **kwargs) -> SolverBase:
        """
        Instantiate a registered solver.

        Args:
            name: Name or alias of the solver, or None for the default solver
            **kwargs: Arguments to pass to the solver constructor
        """
        return cls.get(name)(**kwargs)


register_solver = SolverRegistry.register_as
