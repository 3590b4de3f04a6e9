"""Define the exceptions raised while loading and querying PDDL domains and problems."""

from __future__ import annotations

from pathlib import Path


class PDDLError(Exception):
    """Base class for all errors raised by this package."""


class LoadError(PDDLError):
    """A domain or problem could not be turned into a syntax tree."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize the error with a message and (optionally) the path of the offending file."""
        self.path = Path(path) if path is not None else None
        """Path to the file that failed to load (None if the PDDL came from a string)."""

        prefix = f"{self.path}: " if self.path is not None else ""
        super().__init__(f"{prefix}{message}")


class PDDLSyntaxError(LoadError):
    """PDDL text could not be tokenized or parsed."""


class DuplicateObjectError(LoadError):
    """Two constants or objects share the same name."""


class UnknownObjectError(PDDLError, LookupError):
    """A name does not refer to any object in the loaded domain and problem."""

    def __init__(self, name: str) -> None:
        """Initialize the error using the unresolved object name."""
        self.name = name
        super().__init__(f"Unknown object: '{name}'.")


class ActionParseError(PDDLError, ValueError):
    """A textual action call could not be parsed."""


class UnknownActionError(ActionParseError, LookupError):
    """An action call names an action that the domain does not define."""

    def __init__(self, name: str) -> None:
        """Initialize the error using the unresolved action name."""
        self.name = name
        super().__init__(f"Unknown action: '{name}'.")


class PropositionParseError(PDDLError, ValueError):
    """A textual proposition could not be parsed."""


class ArityMismatchError(PDDLError, ValueError):
    """The number of arguments differs from the number of declared parameters."""

    def __init__(self, name: str, expected: int, received: int) -> None:
        """Initialize the error for the named predicate or action."""
        self.name = name
        self.expected = expected
        self.received = received
        super().__init__(f"'{name}' expects {expected} argument(s) but received {received}.")


class UnboundVariableError(PDDLError, ValueError):
    """A goal or effect refers to a variable that no parameter or quantifier binds."""

    def __init__(self, variable: str) -> None:
        """Initialize the error using the unbound variable name."""
        self.variable = variable
        super().__init__(f"Variable '{variable}' is not bound to any object.")


class UnsupportedGoalConstructError(PDDLError, NotImplementedError):
    """A goal or effect contains a construct that cannot be evaluated."""


class ClosureDivergenceError(PDDLError, RuntimeError):
    """Derived-predicate closure failed to reach a fixpoint within its proven bound."""
