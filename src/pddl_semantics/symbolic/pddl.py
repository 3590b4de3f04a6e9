"""Define the PDDL class, which answers state, action, and goal queries for a domain and problem."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, Union, overload

from pddl_semantics.exceptions import UnknownActionError
from pddl_semantics.io.formatting import format_pddl
from pddl_semantics.io.logging import log_debug, log_info
from pddl_semantics.pddl.loader import load_pddl, parse_pddl
from pddl_semantics.pddl.syntax import PDDLTree
from pddl_semantics.pddl.type_checker import TypeChecker, TypeCheckReport
from pddl_semantics.symbolic.action import Action
from pddl_semantics.symbolic.derived_predicate import Axiom, DerivedPredicate
from pddl_semantics.symbolic.formula import Formula
from pddl_semantics.symbolic.objects import Object, ObjectRegistry
from pddl_semantics.symbolic.proposition import Proposition
from pddl_semantics.symbolic.state import State

StateText = Iterable[str]
"""The text form of a state: the text forms of its true propositions."""

StateLike = Union[State, StateText]
"""Either a State or its text form."""


class Pddl:
    """A queryable model of a PDDL domain and problem.

    The model is immutable once constructed; every query operates on states supplied by the
    caller. Queries that accept a state also accept its text form (e.g., {"on(a, b)"}).

    The initial state is closed under the derived predicates, so `initial_state` already
    contains every derived fact that holds in it.
    """

    def __init__(self, tree: PDDLTree) -> None:
        """Build the objects, actions, derived predicates, goal, and initial state of a problem.

        :param tree: Syntax tree of the PDDL domain and problem
        """
        self.tree = tree
        self.domain = tree.domain
        self.problem = tree.problem

        self.objects = ObjectRegistry.from_tree(self.domain, self.problem)
        self.arities = {p.name: p.arity for p in self.domain.predicates}
        """Maps each declared predicate name to its number of parameters."""

        self.actions = tuple(Action(self.objects, a) for a in self.domain.actions)
        self._actions_by_name = {a.name: a for a in self.actions}

        self.axioms = tuple(
            Axiom.from_axiom_definition(self.objects, a) for a in self.domain.axioms
        )
        self.derived_predicates = tuple(
            DerivedPredicate.from_definition(self.objects, d) for d in self.domain.derived
        )

        self.goal = Formula(self.objects, self.problem.goal)

        # Undeclared names in `:init` are left for the type checker to report
        self.initial_state = State(
            Proposition(atom.predicate, tuple(self.objects.get_or_untyped(t) for t in atom.terms))
            for atom in self.problem.initial_state
        )
        DerivedPredicate.apply_all(self.derived_predicates, self.initial_state)

        log_info(
            f"Built PDDL model with {len(self.objects)} objects, {len(self.actions)} actions, and "
            f"{len(self.derived_predicates)} derived predicates.",
        )

    @classmethod
    def from_files(cls, domain_path: Path | str, problem_path: Path | str) -> Pddl:
        """Load the model from a PDDL domain file and problem file.

        :raises LoadError: If either file can't be read or parsed (the error names the file)
        """
        return cls(load_pddl(domain_path, problem_path))

    @classmethod
    def from_strings(cls, domain_pddl: str, problem_pddl: str) -> Pddl:
        """Build the model from strings containing a PDDL domain and problem."""
        return cls(parse_pddl(domain_pddl, problem_pddl))

    def __str__(self) -> str:
        """Create a diagnostic description of the loaded domain and problem."""
        return format_pddl(self)

    def type_check(self) -> TypeCheckReport:
        """Type check the domain and problem."""
        return TypeChecker(self.tree).check()

    def is_valid(self, verbose: bool = False) -> bool:
        """Evaluate whether the domain and problem pass type checking.

        :param verbose: Whether to log the type checker's diagnostics (defaults to False)
        :return: True if both the domain and the problem are valid, else False
        """
        report = self.type_check()
        if verbose:
            log_info(report.report())
        return report.is_valid

    def get_action(self, name: str) -> Action:
        """Retrieve the named action.

        :raises UnknownActionError: If the domain doesn't define the action
        """
        action = self._actions_by_name.get(name.lower())
        if action is None:
            raise UnknownActionError(name)
        return action

    def parse_action_call(self, action_call: str) -> tuple[Action, tuple[Object, ...]]:
        """Parse a textual action call (e.g., `stack(a, b)`) into an action and its arguments."""
        return Action.parse_call(action_call, self._actions_by_name, self.objects)

    def parse_state(self, state_text: StateText) -> State:
        """Parse a state from the text forms of its true propositions."""
        return State.parse(state_text, self.objects, self.arities)

    @staticmethod
    def stringify_state(state: State) -> set[str]:
        """Convert a state into the set of its propositions' text forms."""
        return state.to_strings()

    def _as_state(self, state: StateLike) -> State:
        return state if isinstance(state, State) else self.parse_state(state)

    def _transition(self, state: State, action: Action, arguments: Sequence[Object]) -> State:
        """Apply an action (ignoring its precondition), then close under derived predicates."""
        next_state = action.apply(state, arguments)
        DerivedPredicate.apply_all(self.derived_predicates, next_state)
        return next_state

    def apply_in_place(self, state: State, action_call: str) -> bool:
        """Apply an action call by modifying the given state, then close under derived predicates.

        The action's precondition isn't checked.

        :return: True if the state changed, else False
        """
        action, arguments = self.parse_action_call(action_call)
        changed = action.apply_in_place(state, arguments)
        changed |= DerivedPredicate.apply_all(self.derived_predicates, state)
        return changed

    @overload
    def next_state(self, state: State, action_call: str) -> State: ...

    @overload
    def next_state(self, state: StateText, action_call: str) -> set[str]: ...

    def next_state(self, state: StateLike, action_call: str) -> State | set[str]:
        """Compute the state resulting from an action call (its precondition isn't checked).

        :param state: State in which the action is applied (or its text form)
        :param action_call: Text of the action call, e.g., `pick-up(a)`
        :return: Resulting state, in the same form (State or text) as the given state
        """
        action, arguments = self.parse_action_call(action_call)
        next_state = self._transition(self._as_state(state), action, arguments)
        return next_state if isinstance(state, State) else next_state.to_strings()

    def is_valid_action(self, state: StateLike, action_call: str) -> bool:
        """Evaluate whether an action call's precondition holds in a state."""
        action, arguments = self.parse_action_call(action_call)
        return action.is_valid(self._as_state(state), arguments)

    def is_valid_tuple(self, state: StateLike, action_call: str, next_state: StateLike) -> bool:
        """Evaluate whether an action is valid in a state and results in the given next state."""
        action, arguments = self.parse_action_call(action_call)
        pre_state = self._as_state(state)
        return action.is_valid(pre_state, arguments) and (
            self._transition(pre_state, action, arguments) == self._as_state(next_state)
        )

    def is_goal_satisfied(self, state: StateLike) -> bool:
        """Evaluate whether the problem's goal holds in a state."""
        return self.goal(self._as_state(state))

    def is_valid_plan(self, action_calls: Iterable[str]) -> bool:
        """Evaluate whether a sequence of action calls is valid and achieves the goal.

        :param action_calls: Sequence of action calls, applied from the initial state
        :return: True if every action is valid when applied and the final state satisfies the goal
        """
        state = self.initial_state.copy()
        for step, action_call in enumerate(action_calls):
            action, arguments = self.parse_action_call(action_call)
            if not action.is_valid(state, arguments):
                log_debug(f"Plan step {step} ({action_call}) is not valid.")
                return False
            action.apply_in_place(state, arguments)
            DerivedPredicate.apply_all(self.derived_predicates, state)

        return self.goal(state)

    @overload
    def list_valid_arguments(
        self,
        state: State,
        action: Action | str,
    ) -> list[tuple[Object, ...]]: ...

    @overload
    def list_valid_arguments(self, state: StateText, action: Action | str) -> list[list[str]]: ...

    def list_valid_arguments(
        self,
        state: StateLike,
        action: Action | str,
    ) -> list[tuple[Object, ...]] | list[list[str]]:
        """List every tuple of arguments for which an action is valid in a state.

        :param state: State in which the action's precondition is evaluated (or its text form)
        :param action: Action (or the name of an action) being grounded
        :return: Valid argument tuples (lists of object names if the state was given as text)
        """
        if isinstance(action, str):
            action = self.get_action(action)

        arguments = list(action.valid_arguments(self._as_state(state)))
        if isinstance(state, State):
            return arguments
        return [[obj.name for obj in args] for args in arguments]

    def list_valid_actions(self, state: StateLike) -> list[str]:
        """List the text of every valid action call in a state.

        Calls are ordered by the domain's action order, then by grounding order.
        """
        state = self._as_state(state)
        valid_calls = [
            action.to_string(args)
            for action in self.actions
            for args in action.valid_arguments(state)
        ]
        log_debug(f"Found {len(valid_calls)} valid action call(s).")
        return valid_calls
