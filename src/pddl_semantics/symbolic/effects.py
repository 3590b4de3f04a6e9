"""Define classes to compute and apply the effects of grounded actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from pddl_semantics.exceptions import UnsupportedGoalConstructError
from pddl_semantics.pddl.syntax import (
    AddEffect,
    ConditionalEffect,
    DeleteEffect,
    Effect,
    ForAllEffect,
)
from pddl_semantics.symbolic.formula import Bindings, Formula, bind_variables, ground_atom
from pddl_semantics.symbolic.parameter_generator import ParameterGenerator

if TYPE_CHECKING:
    from pddl_semantics.symbolic.objects import ObjectRegistry
    from pddl_semantics.symbolic.proposition import Proposition
    from pddl_semantics.symbolic.state import State


@dataclass
class EffectDelta:
    """The propositions added and deleted by a grounded action."""

    add: set[Proposition] = field(default_factory=set)
    delete: set[Proposition] = field(default_factory=set)

    def apply(self, state: State) -> State:
        """Create the successor of a state under this delta (deletes first, then adds)."""
        next_state = state.copy()
        self.apply_in_place(next_state)
        return next_state

    def apply_in_place(self, state: State) -> bool:
        """Modify the given state using this delta (deletes first, then adds).

        :return: True if the state changed, else False
        """
        changed = any(p not in state for p in self.add) or any(
            p in state and p not in self.add for p in self.delete
        )
        state.difference_update(self.delete)
        state.update(self.add)
        return changed


class Effects:
    """The lifted effects of an action, ready to be grounded with arguments."""

    def __init__(self, objects: ObjectRegistry, effects: Iterable[Effect]) -> None:
        """Initialize the effects, compiling conditions and quantified variables ahead of time.

        :param objects: Registry used to resolve object names and enumerate quantifiers
        :param effects: Effect nodes of an action definition
        """
        self.objects = objects
        self.effects = tuple(effects)

        self._conditions: dict[int, Formula] = {}
        """Maps the ID of each conditional effect node to its compiled condition."""

        self._quantifiers: dict[int, ParameterGenerator] = {}
        """Maps the ID of each `forall` effect node to a generator over its variables."""

        self._compile(self.effects)

    def _compile(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            match effect:
                case ConditionalEffect(condition=condition, effects=nested):
                    self._conditions[id(effect)] = Formula(self.objects, condition)
                    self._compile(nested)
                case ForAllEffect(variables=variables, effects=nested):
                    self._quantifiers[id(effect)] = ParameterGenerator(self.objects, variables)
                    self._compile(nested)
                case _:
                    pass

    def collect(self, state: State, bindings: Bindings) -> EffectDelta:
        """Compute the delta of the effects under the given bindings.

        Conditions are all evaluated in the given (pre-transition) state, so effects never see
        each other's changes.

        :param state: State in which the action is applied
        :param bindings: Map from the action's parameters to their bound objects
        :return: Propositions added and deleted by the effects
        """
        delta = EffectDelta()
        self._collect(self.effects, state, bindings, delta)
        return delta

    def _collect(
        self,
        effects: Iterable[Effect],
        state: State,
        bindings: Bindings,
        delta: EffectDelta,
    ) -> None:
        for effect in effects:
            match effect:
                case AddEffect(atom=atom):
                    delta.add.add(ground_atom(atom, bindings, self.objects))

                case DeleteEffect(atom=atom):
                    delta.delete.add(ground_atom(atom, bindings, self.objects))

                case ConditionalEffect(effects=nested):
                    if self._conditions[id(effect)].evaluate(state, bindings):
                        self._collect(nested, state, bindings, delta)

                case ForAllEffect(variables=variables, effects=nested):
                    for args in self._quantifiers[id(effect)]:
                        inner_bindings = bind_variables(variables, args, bindings)
                        self._collect(nested, state, inner_bindings, delta)

                case _:
                    raise UnsupportedGoalConstructError(f"Cannot apply effect: {effect!r}")
