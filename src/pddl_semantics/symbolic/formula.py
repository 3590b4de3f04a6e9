"""Define a class to evaluate PDDL goal descriptions in symbolic states.

Reference: Chapter 8.3 ("Using first-order logic"), pg. 264 of AIMA (4th Ed.) by Russell and Norvig.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Sequence

from pddl_semantics.exceptions import (
    ArityMismatchError,
    UnboundVariableError,
    UnsupportedGoalConstructError,
)
from pddl_semantics.pddl.syntax import (
    EQUALITY_PREDICATE,
    AndGoal,
    AtomGoal,
    ExistsGoal,
    ForAllGoal,
    Goal,
    ImplyGoal,
    NotGoal,
    OrGoal,
    TypedName,
    is_variable,
)
from pddl_semantics.symbolic.parameter_generator import ParameterGenerator
from pddl_semantics.symbolic.proposition import Proposition

if TYPE_CHECKING:
    from pddl_semantics.symbolic.objects import Object, ObjectRegistry
    from pddl_semantics.symbolic.state import State

Bindings = Dict[str, "Object"]
"""A mapping from variable names (e.g., `?x`) to their bound objects."""


def resolve_term(term: str, bindings: Bindings, objects: ObjectRegistry) -> Object:
    """Resolve a term into an object, using the bindings if the term is a variable.

    :raises UnboundVariableError: If the term is a variable without a binding
    :raises UnknownObjectError: If the term doesn't name a known object
    """
    if is_variable(term):
        if term not in bindings:
            raise UnboundVariableError(term)
        return bindings[term]
    return objects.get(term)


def ground_atom(atom: AtomGoal, bindings: Bindings, objects: ObjectRegistry) -> Proposition:
    """Substitute bound objects into an atomic formula to create a proposition."""
    arguments = tuple(resolve_term(term, bindings, objects) for term in atom.terms)
    return Proposition(atom.predicate, arguments)


def bind_variables(
    variables: Sequence[TypedName],
    arguments: Sequence[Object],
    bindings: Bindings | None = None,
) -> Bindings:
    """Extend (a copy of) the given bindings by binding variables to arguments positionally."""
    new_bindings = dict(bindings) if bindings else {}
    new_bindings.update(zip((v.name for v in variables), arguments))
    return new_bindings


class Formula:
    """A goal description evaluated against symbolic states under parameter bindings."""

    def __init__(
        self,
        objects: ObjectRegistry,
        goal: Goal | None,
        parameters: Iterable[TypedName] = (),
    ) -> None:
        """Initialize the formula and precompute the groundings of its quantified variables.

        :param objects: Registry used to resolve object names and enumerate quantifiers
        :param goal: Goal description to be evaluated (None is treated as always true)
        :param parameters: Parameters bound positionally when the formula is called
        """
        self.objects = objects
        self.goal = goal
        self.parameters = tuple(parameters)

        self._quantifiers: dict[int, ParameterGenerator] = {}
        """Maps the ID of each quantified goal node to a generator over its variables."""

        self._index_quantifiers(goal)

    def _index_quantifiers(self, goal: Goal | None) -> None:
        match goal:
            case ForAllGoal(variables=variables, goal=body) | ExistsGoal(
                variables=variables,
                goal=body,
            ):
                self._quantifiers[id(goal)] = ParameterGenerator(self.objects, variables)
                self._index_quantifiers(body)
            case AndGoal(goals=goals) | OrGoal(goals=goals):
                for subgoal in goals:
                    self._index_quantifiers(subgoal)
            case NotGoal(goal=negated):
                self._index_quantifiers(negated)
            case ImplyGoal(premise=premise, conclusion=conclusion):
                self._index_quantifiers(premise)
                self._index_quantifiers(conclusion)
            case _:
                pass

    def __call__(self, state: State, arguments: Sequence[Object] = ()) -> bool:
        """Evaluate the formula in a state, binding its parameters to the given arguments.

        :param state: Symbolic state in which the formula is evaluated
        :param arguments: Objects bound positionally to the formula's parameters
        :return: True if the formula holds in the state, else False
        :raises ArityMismatchError: If the number of arguments differs from the parameters
        """
        if len(arguments) != len(self.parameters):
            raise ArityMismatchError("formula", len(self.parameters), len(arguments))
        return self.evaluate(state, bind_variables(self.parameters, arguments))

    def evaluate(self, state: State, bindings: Bindings) -> bool:
        """Evaluate the formula in a state under an explicit mapping of variables to objects."""
        return self._evaluate(self.goal, state, bindings)

    def _evaluate(self, goal: Goal | None, state: State, bindings: Bindings) -> bool:
        """Recursively evaluate a goal node.

        :raises UnsupportedGoalConstructError: If the node isn't a supported goal construct
        """
        match goal:
            case None:
                return True

            case AtomGoal(predicate=predicate, terms=(lhs, rhs)) if predicate == EQUALITY_PREDICATE:
                lhs_obj = resolve_term(lhs, bindings, self.objects)
                return lhs_obj == resolve_term(rhs, bindings, self.objects)

            case AtomGoal():
                return ground_atom(goal, bindings, self.objects) in state

            case AndGoal(goals=goals):
                return all(self._evaluate(g, state, bindings) for g in goals)

            case OrGoal(goals=goals):
                return any(self._evaluate(g, state, bindings) for g in goals)

            case NotGoal(goal=negated):
                return not self._evaluate(negated, state, bindings)

            case ForAllGoal(variables=variables, goal=body):
                return all(
                    self._evaluate(body, state, bind_variables(variables, args, bindings))
                    for args in self._quantifiers[id(goal)]
                )

            case ExistsGoal(variables=variables, goal=body):
                return any(
                    self._evaluate(body, state, bind_variables(variables, args, bindings))
                    for args in self._quantifiers[id(goal)]
                )

            case ImplyGoal():
                raise UnsupportedGoalConstructError("Implications (imply) cannot be evaluated.")

            case _:
                raise UnsupportedGoalConstructError(f"Cannot evaluate goal construct: {goal!r}")
