"""Define a class to represent lifted PDDL actions applied to symbolic states."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Mapping, Sequence

from pddl_semantics.exceptions import ActionParseError, ArityMismatchError, UnknownActionError
from pddl_semantics.symbolic.effects import EffectDelta, Effects
from pddl_semantics.symbolic.formula import Formula, bind_variables
from pddl_semantics.symbolic.parameter_generator import ParameterGenerator
from pddl_semantics.symbolic.proposition import format_call, parse_call

if TYPE_CHECKING:
    from pddl_semantics.pddl.syntax import ActionDef, TypedName
    from pddl_semantics.symbolic.objects import Object, ObjectRegistry
    from pddl_semantics.symbolic.state import State


class Action:
    """A lifted action whose arguments are supplied on each call, never stored."""

    def __init__(self, objects: ObjectRegistry, definition: ActionDef) -> None:
        """Initialize the action from its PDDL definition.

        :param objects: Registry used to resolve object names and enumerate quantifiers
        :param definition: Parsed PDDL action definition
        """
        self.objects = objects
        self.definition = definition
        self.name = definition.name
        self.parameters: tuple[TypedName, ...] = definition.parameters

        self.precondition = Formula(objects, definition.precondition, self.parameters)
        """Goal description that must hold in a state for the action to be valid."""

        self.effects = Effects(objects, definition.effects)

    def __repr__(self) -> str:
        """Create a readable representation of the lifted action."""
        params = ", ".join(str(p) for p in self.parameters)
        return f"Action({self.name}({params}))"

    def _check_arity(self, arguments: Sequence[Object]) -> None:
        if len(arguments) != len(self.parameters):
            raise ArityMismatchError(self.name, len(self.parameters), len(arguments))

    def is_valid(self, state: State, arguments: Sequence[Object]) -> bool:
        """Evaluate whether the action's precondition holds in a state for the given arguments.

        :param state: Symbolic state in which the precondition is evaluated
        :param arguments: Objects bound positionally to the action's parameters
        :return: True if the precondition holds, else False
        """
        self._check_arity(arguments)
        return self.precondition(state, arguments)

    def compute_delta(self, state: State, arguments: Sequence[Object]) -> EffectDelta:
        """Compute the propositions added and deleted by applying the action in a state."""
        self._check_arity(arguments)
        return self.effects.collect(state, bind_variables(self.parameters, arguments))

    def apply(self, state: State, arguments: Sequence[Object]) -> State:
        """Compute the successor state of applying the action (the precondition isn't checked).

        :param state: State in which the action is applied (left unchanged)
        :param arguments: Objects bound positionally to the action's parameters
        :return: New state resulting from the action's effects
        """
        return self.compute_delta(state, arguments).apply(state)

    def apply_in_place(self, state: State, arguments: Sequence[Object]) -> bool:
        """Apply the action by modifying the given state (the precondition isn't checked).

        :return: True if the state changed, else False
        """
        return self.compute_delta(state, arguments).apply_in_place(state)

    def groundings(self) -> ParameterGenerator:
        """Create a generator over every tuple of objects that could ground the action."""
        return ParameterGenerator(self.objects, self.parameters)

    def valid_arguments(self, state: State) -> Iterator[tuple[Object, ...]]:
        """Iterate over all argument tuples for which the action is valid in a state."""
        return (args for args in self.groundings() if self.precondition(state, args))

    def to_string(self, arguments: Sequence[Object]) -> str:
        """Render a call of the action with the given arguments, e.g., `stack(a, b)`."""
        return format_call(self.name, tuple(arguments))

    @staticmethod
    def parse_call(
        action_call: str,
        actions: Mapping[str, Action],
        objects: ObjectRegistry,
    ) -> tuple[Action, tuple[Object, ...]]:
        """Parse a textual action call into an action and its arguments.

        :param action_call: Text of the form `name(arg1, arg2, ...)`
        :param actions: Map from action names to actions
        :param objects: Registry used to resolve argument names into objects
        :return: Pair of the called action and its arguments
        :raises ActionParseError: If the text is malformed
        :raises UnknownActionError: If the action name is unknown
        :raises ArityMismatchError: If the number of arguments differs from the parameters
        :raises UnknownObjectError: If an argument doesn't name a known object
        """
        parsed = parse_call(action_call)
        if parsed is None:
            raise ActionParseError(f"Cannot parse action call: '{action_call}'.")

        name, tokens = parsed
        if name not in actions:
            raise UnknownActionError(name)

        action = actions[name]
        if len(tokens) != len(action.parameters):
            raise ArityMismatchError(name, len(action.parameters), len(tokens))

        return action, tuple(objects.get(token) for token in tokens)
