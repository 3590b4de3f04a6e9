"""Define a class to represent propositions (i.e., ground atoms) and their text form."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping

from pddl_semantics.exceptions import ArityMismatchError, PropositionParseError

if TYPE_CHECKING:
    from pddl_semantics.symbolic.objects import Object, ObjectRegistry

CALL_REGEX = re.compile(r"\A\s*(?P<name>[^\s(),]+)\s*\((?P<args>[^()]*)\)\s*\Z")
"""Matches the text form `name(arg1, arg2, ...)` shared by propositions and action calls."""


def parse_call(text: str) -> tuple[str, tuple[str, ...]] | None:
    """Split text of the form `name(arg1, arg2, ...)` into its lower-cased name and argument tokens.

    :param text: Text to be split
    :return: Pair of the name and argument tokens, or None if the text is malformed
    """
    mo = CALL_REGEX.match(text)
    if mo is None:
        return None

    args_text = mo.group("args").strip()
    tokens = tuple(token.strip().lower() for token in args_text.split(",")) if args_text else ()
    if any(not token for token in tokens):
        return None

    return mo.group("name").lower(), tokens


def format_call(name: str, arguments: tuple[Object, ...]) -> str:
    """Render a name and arguments in the text form `name(arg1, arg2, ...)`."""
    return f"{name}({', '.join(obj.name for obj in arguments)})"


@dataclass(frozen=True)
class Proposition:
    """A predicate name applied to an ordered tuple of objects."""

    name: str
    arguments: tuple[Object, ...] = ()

    def __str__(self) -> str:
        """Return the canonical text form of the proposition, e.g., `on(a, b)`."""
        return format_call(self.name, self.arguments)

    def to_pddl(self) -> str:
        """Return a PDDL representation of the proposition, e.g., `(on a b)`."""
        return f"({' '.join((self.name, *(obj.name for obj in self.arguments)))})"

    @classmethod
    def parse(
        cls,
        text: str,
        objects: ObjectRegistry,
        arities: Mapping[str, int] | None = None,
    ) -> Proposition:
        """Parse a proposition from its canonical text form.

        :param text: Text of the form `name(arg1, arg2, ...)`
        :param objects: Registry used to resolve argument names into objects
        :param arities: Optional map from predicate names to their declared arities
        :return: Parsed proposition
        :raises PropositionParseError: If the text is malformed
        :raises UnknownObjectError: If an argument doesn't name a known object
        :raises ArityMismatchError: If a known predicate receives the wrong number of arguments
        """
        parsed = parse_call(text)
        if parsed is None:
            raise PropositionParseError(f"Cannot parse proposition from text: '{text}'.")

        name, tokens = parsed
        if arities is not None and name in arities and arities[name] != len(tokens):
            raise ArityMismatchError(name, expected=arities[name], received=len(tokens))

        return cls(name, tuple(objects.get(token) for token in tokens))
