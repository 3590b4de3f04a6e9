"""Define the read-only syntax tree produced by parsing a PDDL domain and problem.

Goals and effects form closed sets of node classes. Code that walks the tree dispatches on
these classes with `match` statements and treats any other node as unsupported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

ROOT_TYPE = "object"
"""Every PDDL type implicitly descends from `object`."""

EQUALITY_PREDICATE = "="
"""Name of the built-in equality predicate."""


def is_variable(term: str) -> bool:
    """Check whether a term is a variable (e.g., `?x`) rather than an object name."""
    return term.startswith("?")


@dataclass(frozen=True)
class TypedName:
    """A variable or object name restricted to one or more types."""

    name: str
    types: tuple[str, ...] = (ROOT_TYPE,)
    """Allowed types; more than one comes from an `(either ...)` type."""

    def __str__(self) -> str:
        """Return the PDDL representation of the typed name."""
        if len(self.types) == 1:
            return f"{self.name} - {self.types[0]}"
        return f"{self.name} - (either {' '.join(self.types)})"


@dataclass(frozen=True)
class TypeDecl:
    """A declared type and its parent types in the type lattice."""

    name: str
    parents: tuple[str, ...] = (ROOT_TYPE,)


@dataclass(frozen=True)
class PredicateDecl:
    """A predicate symbol and its typed parameters."""

    name: str
    parameters: tuple[TypedName, ...] = ()

    @property
    def arity(self) -> int:
        """Retrieve the number of arguments expected by the predicate."""
        return len(self.parameters)


# Goal descriptions


@dataclass(frozen=True)
class AtomGoal:
    """An atomic formula: a predicate applied to variables and/or object names."""

    predicate: str
    terms: tuple[str, ...] = ()

    def __str__(self) -> str:
        """Return the PDDL representation of the atom."""
        return f"({' '.join((self.predicate, *self.terms))})"


@dataclass(frozen=True)
class AndGoal:
    """A conjunction of goal descriptions."""

    goals: tuple[Goal, ...]


@dataclass(frozen=True)
class OrGoal:
    """A disjunction of goal descriptions."""

    goals: tuple[Goal, ...]


@dataclass(frozen=True)
class NotGoal:
    """The negation of a goal description."""

    goal: Goal


@dataclass(frozen=True)
class ForAllGoal:
    """A universally quantified goal description."""

    variables: tuple[TypedName, ...]
    goal: Goal


@dataclass(frozen=True)
class ExistsGoal:
    """An existentially quantified goal description."""

    variables: tuple[TypedName, ...]
    goal: Goal


@dataclass(frozen=True)
class ImplyGoal:
    """An implication between goal descriptions (parsed, but not evaluated by this package)."""

    premise: Goal
    conclusion: Goal


Goal = Union[AtomGoal, AndGoal, OrGoal, NotGoal, ForAllGoal, ExistsGoal, ImplyGoal]
"""Any node of a goal description tree."""


# Effects


@dataclass(frozen=True)
class AddEffect:
    """An atom made true by an action."""

    atom: AtomGoal


@dataclass(frozen=True)
class DeleteEffect:
    """An atom made false by an action."""

    atom: AtomGoal


@dataclass(frozen=True)
class ConditionalEffect:
    """Effects that only occur if a condition holds before the action is applied."""

    condition: Goal
    effects: tuple[Effect, ...]


@dataclass(frozen=True)
class ForAllEffect:
    """Effects repeated for every binding of the quantified variables."""

    variables: tuple[TypedName, ...]
    effects: tuple[Effect, ...]


Effect = Union[AddEffect, DeleteEffect, ConditionalEffect, ForAllEffect]
"""Any node of an effect tree."""


# Operators


@dataclass(frozen=True)
class ActionDef:
    """A PDDL action definition."""

    name: str
    parameters: tuple[TypedName, ...]
    precondition: Goal | None
    effects: tuple[Effect, ...]


@dataclass(frozen=True)
class DerivedDef:
    """A derived predicate rule, `(:derived (head ?x - t) body)`."""

    name: str
    parameters: tuple[TypedName, ...]
    body: Goal


@dataclass(frozen=True)
class AxiomDef:
    """A PDDL 1.2 axiom, `(:axiom :vars (...) :context goal :implies literal)`."""

    name: str
    parameters: tuple[TypedName, ...]
    context: Goal
    implies: AtomGoal


# Domain and problem


@dataclass(frozen=True)
class DomainTree:
    """A parsed PDDL domain."""

    name: str
    requirements: frozenset[str] = frozenset()
    types: tuple[TypeDecl, ...] = ()
    constants: tuple[TypedName, ...] = ()
    predicates: tuple[PredicateDecl, ...] = ()
    actions: tuple[ActionDef, ...] = ()
    derived: tuple[DerivedDef, ...] = ()
    axioms: tuple[AxiomDef, ...] = ()

    def get_predicate(self, name: str) -> PredicateDecl | None:
        """Retrieve the declaration of the named predicate (None if it's not declared)."""
        return next((p for p in self.predicates if p.name == name), None)


@dataclass(frozen=True)
class ProblemTree:
    """A parsed PDDL problem."""

    name: str
    domain_name: str
    requirements: frozenset[str] = frozenset()
    objects: tuple[TypedName, ...] = ()
    initial_state: tuple[AtomGoal, ...] = ()
    """Ground atoms asserted by the problem's `:init` section."""

    goal: Goal = field(default_factory=lambda: AndGoal(()))


@dataclass(frozen=True)
class PDDLTree:
    """A parsed domain and problem, along with the files they were loaded from."""

    domain: DomainTree
    problem: ProblemTree
    domain_path: Path | None = None
    problem_path: Path | None = None
