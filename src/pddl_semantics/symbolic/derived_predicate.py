"""Define classes to represent derived predicates and axioms, and their closure over states."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from pddl_semantics.exceptions import ClosureDivergenceError
from pddl_semantics.io.logging import log_debug
from pddl_semantics.pddl.syntax import AtomGoal, AxiomDef, DerivedDef, Goal, TypedName
from pddl_semantics.symbolic.formula import Formula, bind_variables, ground_atom
from pddl_semantics.symbolic.parameter_generator import ParameterGenerator

if TYPE_CHECKING:
    from pddl_semantics.symbolic.objects import Object, ObjectRegistry
    from pddl_semantics.symbolic.proposition import Proposition
    from pddl_semantics.symbolic.state import State


class DerivedPredicate:
    """A predicate whose truth is inferred from other facts rather than set by actions."""

    def __init__(
        self,
        objects: ObjectRegistry,
        name: str,
        parameters: Sequence[TypedName],
        body: Goal,
        head: AtomGoal | None = None,
    ) -> None:
        """Initialize the derived predicate.

        :param objects: Registry used to resolve object names and enumerate groundings
        :param name: Name of the derived predicate
        :param parameters: Typed parameters ranging over the groundings of the predicate
        :param body: Goal description that must hold for the head to be derived
        :param head: Atom asserted when the body holds (defaults to the name over the parameters)
        """
        self.objects = objects
        self.name = name
        self.parameters = tuple(parameters)
        self.head_atom = head or AtomGoal(name, tuple(p.name for p in self.parameters))

        self.body = Formula(objects, body, self.parameters)
        self.groundings = ParameterGenerator(objects, self.parameters)

    @classmethod
    def from_definition(cls, objects: ObjectRegistry, definition: DerivedDef) -> DerivedPredicate:
        """Create a derived predicate from a parsed `:derived` rule."""
        return cls(objects, definition.name, definition.parameters, definition.body)

    def __repr__(self) -> str:
        """Create a readable representation of the derived predicate."""
        params = ", ".join(str(p) for p in self.parameters)
        return f"{type(self).__name__}({self.name}({params}))"

    def head(self, arguments: Sequence[Object]) -> Proposition:
        """Create the head proposition for the given arguments."""
        return ground_atom(self.head_atom, bind_variables(self.parameters, arguments), self.objects)

    def apply(self, state: State) -> bool:
        """Add every derivable head proposition to the state, seeing earlier additions.

        :return: True if any proposition was added, else False
        """
        changed = False
        for args in self.groundings:
            proposition = self.head(args)
            if proposition not in state and self.body(state, args):
                state.add(proposition)
                changed = True
        return changed

    @staticmethod
    def apply_all(predicates: Iterable[DerivedPredicate], state: State) -> bool:
        """Close the state under the derived predicates by repeated passes until a fixpoint.

        Derived predicates only add facts, so each pass that changes the state adds at least one
        of finitely many head groundings, which bounds the number of passes.

        :param predicates: Derived predicates to be materialized
        :param state: State to be modified in place
        :return: True if the state changed, else False
        :raises ClosureDivergenceError: If the fixpoint isn't reached within the bound
        """
        predicates = tuple(predicates)
        max_passes = sum(len(p.groundings) for p in predicates) + 1

        changed = False
        for num_passes in range(1, max_passes + 1):
            pass_changed = False
            for predicate in predicates:
                pass_changed |= predicate.apply(state)

            if not pass_changed:
                log_debug(f"Derived predicates reached a fixpoint after {num_passes} pass(es).")
                return changed
            changed = True

        raise ClosureDivergenceError(
            f"Derived predicates failed to reach a fixpoint within {max_passes} passes.",
        )


class Axiom(DerivedPredicate):
    """A PDDL 1.2 axiom; retained as domain metadata rather than applied after transitions."""

    @classmethod
    def from_axiom_definition(cls, objects: ObjectRegistry, definition: AxiomDef) -> Axiom:
        """Create an axiom from a parsed `:axiom` definition."""
        return cls(
            objects,
            definition.name,
            definition.parameters,
            definition.context,
            head=definition.implies,
        )
