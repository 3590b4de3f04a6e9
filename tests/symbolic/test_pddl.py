"""Unit tests for the Pddl class, which answers queries about a domain and problem."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pddl_semantics import (
    ArityMismatchError,
    Pddl,
    State,
    UnboundVariableError,
    UnknownActionError,
    UnknownObjectError,
)
from pddl_semantics.symbolic import DerivedPredicate

from ..fixtures.pddl_fixtures import (
    BLOCKSWORLD_PLAN,
    PICK_UP_DOMAIN,
    PICK_UP_PROBLEM,
    UNBOUND_EFFECT_DOMAIN,
    UNDECLARED_INIT_PROBLEM,
)
from ..strategies.pddl_strategies import plans, states


def test_pick_up_scenario(pick_up_world: Pddl) -> None:
    """Verify validity, transitions, and plans in the two-block `pick-up-world` problem."""
    # Arrange - The initial state has both blocks on the table
    initial = pick_up_world.stringify_state(pick_up_world.initial_state)

    # Act - Query the model using text-form states
    valid_initially = pick_up_world.is_valid_action(initial, "pick-up(a)")
    next_state = pick_up_world.next_state(initial, "pick-up(a)")
    valid_afterwards = pick_up_world.is_valid_action(next_state, "pick-up(a)")
    plan_is_valid = pick_up_world.is_valid_plan(["pick-up(a)", "pick-up(b)"])

    # Assert - Expect the documented results
    assert initial == {"on-table(a)", "on-table(b)"}
    assert valid_initially
    assert next_state == {"on-table(b)"}
    assert not valid_afterwards
    assert plan_is_valid


def test_next_state_preserves_the_given_form(pick_up_world: Pddl) -> None:
    """Verify that State inputs give State outputs and text inputs give text outputs."""
    # Arrange - Express the initial state in both forms
    state = pick_up_world.initial_state
    state_text = pick_up_world.stringify_state(state)

    # Act - Compute the successor of each
    next_state = pick_up_world.next_state(state, "pick-up(b)")
    next_state_text = pick_up_world.next_state(state_text, "pick-up(b)")

    # Assert - Expect matching results in the matching forms, with the input unchanged
    assert isinstance(next_state, State)
    assert next_state_text == {"on-table(a)"}
    assert pick_up_world.stringify_state(next_state) == next_state_text
    assert len(state) == 2


def test_is_valid_tuple(pick_up_world: Pddl) -> None:
    """Verify that a transition is valid only if the action is valid and the states match."""
    # Arrange - The initial state has both blocks on the table
    initial = {"on-table(a)", "on-table(b)"}

    # Act/Assert - Expect only the correct successor of a valid action to be accepted
    assert pick_up_world.is_valid_tuple(initial, "pick-up(a)", {"on-table(b)"})
    assert not pick_up_world.is_valid_tuple(initial, "pick-up(a)", {"on-table(a)"})
    assert not pick_up_world.is_valid_tuple({"on-table(b)"}, "pick-up(a)", {"on-table(b)"})


def test_invalid_plans(pick_up_world: Pddl) -> None:
    """Verify that plans with an invalid step or an unsatisfied goal are rejected."""
    # Arrange/Act - Check a plan repeating an action and a plan that stops early
    repeated_step = pick_up_world.is_valid_plan(["pick-up(a)", "pick-up(a)", "pick-up(b)"])
    incomplete = pick_up_world.is_valid_plan(["pick-up(a)"])

    # Assert - Expect neither plan to be valid
    assert not repeated_step
    assert not incomplete


def test_blocksworld_plan(blocksworld: Pddl) -> None:
    """Verify that the model accepts a known plan for the Sussman anomaly."""
    # Arrange - The plan is defined alongside the test fixtures

    # Act - Validate the plan and a version missing its final step
    full_plan_valid = blocksworld.is_valid_plan(BLOCKSWORLD_PLAN)
    partial_plan_valid = blocksworld.is_valid_plan(BLOCKSWORLD_PLAN[:-1])

    # Assert - Expect only the full plan to reach the goal
    assert full_plan_valid
    assert not partial_plan_valid


def test_plan_validation_leaves_initial_state_unchanged(blocksworld: Pddl) -> None:
    """Verify that validating a plan doesn't modify the model's initial state."""
    # Arrange - Remember the initial state
    before = blocksworld.initial_state.copy()

    # Act - Validate a plan
    blocksworld.is_valid_plan(BLOCKSWORLD_PLAN)

    # Assert - Expect the initial state to be unchanged
    assert blocksworld.initial_state == before


def test_briefcase_plan(briefcase_world: Pddl) -> None:
    """Verify a plan relying on conditional and universally quantified effects."""
    # Arrange - Swap the paycheck for the dictionary before moving the briefcase
    plan = ["take-out(paycheck)", "put-in(dictionary, home)", "mov-b(home, office)"]

    # Act - Validate the plan and the plan without its first step
    plan_valid = briefcase_world.is_valid_plan(plan)
    paycheck_left_inside = briefcase_world.is_valid_plan(plan[1:])

    # Assert - Expect the paycheck to stay home only if it was taken out
    assert plan_valid
    assert not paycheck_left_inside


@given(data=st.data())
def test_plan_validation_matches_stepwise_folding(data: st.DataObject, blocksworld: Pddl) -> None:
    """Verify that plan validity equals checking and applying each step from the initial state."""
    # Arrange - Generate a random sequence of well-typed action calls
    plan = data.draw(plans(blocksworld))

    # Act - Validate the plan directly and by folding over its steps
    plan_valid = blocksworld.is_valid_plan(plan)

    state = blocksworld.initial_state
    folded_valid = True
    for action_call in plan:
        if not blocksworld.is_valid_action(state, action_call):
            folded_valid = False
            break
        state = blocksworld.next_state(state, action_call)
    folded_valid = folded_valid and blocksworld.is_goal_satisfied(state)

    # Assert - Expect both evaluations to agree
    assert plan_valid == folded_valid


@given(data=st.data())
def test_valid_action_enumeration(data: st.DataObject, blocksworld: Pddl) -> None:
    """Verify that the listed valid actions are exactly the valid action calls, without repeats."""
    # Arrange - Generate a random blocksworld state
    state = data.draw(states(blocksworld))
    all_calls = [
        action.to_string(args) for action in blocksworld.actions for args in action.groundings()
    ]

    # Act - List the valid actions in the state
    valid_calls = blocksworld.list_valid_actions(state)

    # Assert - Expect soundness, completeness, and no duplicates
    assert len(valid_calls) == len(set(valid_calls))
    assert set(valid_calls) == {c for c in all_calls if blocksworld.is_valid_action(state, c)}


def test_list_valid_actions_in_order(blocksworld: Pddl) -> None:
    """Verify that valid actions are listed by domain action order, then grounding order."""
    # Arrange - The initial state is provided by the model

    # Act - List the valid actions in the initial state
    valid_calls = blocksworld.list_valid_actions(blocksworld.initial_state)

    # Assert - Expect only picking up `c` and unstacking `a` from `b`
    assert valid_calls == ["pick-up(c)", "unstack(a, b)"]


def test_list_valid_arguments(transport: Pddl) -> None:
    """Verify listing valid arguments given an action or its name, with either state form."""
    # Arrange - Express the initial state in both forms
    state = transport.initial_state
    state_text = transport.stringify_state(state)

    # Act - List the valid arguments of `drive` in each form
    as_objects = transport.list_valid_arguments(state, transport.get_action("drive"))
    as_names = transport.list_valid_arguments(state_text, "drive")

    # Assert - Expect vehicles (but not the ferry) to drive, including to where they already are
    assert as_names == [
        ["t1", "home", "home"],
        ["t1", "home", "port"],
        ["duck", "port", "home"],
        ["duck", "port", "port"],
    ]
    assert [[obj.name for obj in args] for args in as_objects] == as_names


def test_vacuous_quantifiers_in_model(no_grippers: Pddl) -> None:
    """Verify vacuous quantification in an action's precondition and a problem's goal."""
    # Arrange - The problem declares no grippers
    state = no_grippers.initial_state

    # Act - Check the `forall` precondition and the `exists` goal
    can_wait = no_grippers.is_valid_action(state, "wait()")
    goal_satisfied = no_grippers.is_goal_satisfied(state)

    # Assert - Expect `forall` to be vacuously true and `exists` to be vacuously false
    assert can_wait
    assert not goal_satisfied
    assert no_grippers.list_valid_actions(state) == ["wait()"]


def test_apply_in_place(tower: Pddl) -> None:
    """Verify that applying an action call in place modifies the state and closes it."""
    # Arrange - Copy the initial state so the model's state is unaffected
    state = tower.initial_state.copy()

    # Act - Apply an action call in place
    changed = tower.apply_in_place(state, "place-on(c, d)")

    # Assert - Expect the state to match the pure transition
    assert changed
    assert state == tower.next_state(tower.initial_state, "place-on(c, d)")


def test_text_call_errors_leave_state_unchanged(blocksworld: Pddl) -> None:
    """Verify that failing action calls raise without modifying the given state."""
    # Arrange - Copy the initial state
    state = blocksworld.initial_state.copy()
    before = state.copy()

    # Act/Assert - Expect unknown actions, unknown objects, and arity mismatches to raise
    with pytest.raises(UnknownActionError):
        blocksworld.apply_in_place(state, "fly(a)")
    with pytest.raises(UnknownObjectError):
        blocksworld.apply_in_place(state, "pick-up(z)")
    with pytest.raises(ArityMismatchError):
        blocksworld.next_state(state, "stack(a)")
    with pytest.raises(UnknownObjectError):
        blocksworld.is_valid_action({"clear(z)"}, "pick-up(a)")
    assert state == before


def test_closure_after_transition_matches_explicit_closure(tower: Pddl) -> None:
    """Verify that next_state() equals applying the action and then closing the state."""
    # Arrange - Apply the action without closure
    action, arguments = tower.parse_action_call("place-on(c, d)")
    expected = action.apply(tower.initial_state, arguments)
    DerivedPredicate.apply_all(tower.derived_predicates, expected)

    # Act - Compute the next state through the model
    next_state = tower.next_state(tower.initial_state, "place-on(c, d)")

    # Assert - Expect both states to be equal
    assert next_state == expected


def test_type_check_and_dump(blocksworld: Pddl, blocksworld_domain: str) -> None:
    """Verify type checking and the diagnostic dump of the model."""
    # Arrange - Build a model whose problem refers to an unknown object
    broken = Pddl.from_strings(
        blocksworld_domain,
        "(define (problem p) (:domain blocksworld) (:objects a - block) (:goal (clear z)))",
    )

    # Act - Type check both models and describe the valid one
    valid = blocksworld.is_valid()
    broken_valid = broken.is_valid(verbose=True)
    dump = str(blocksworld)

    # Assert - Expect the dump to describe each section of the domain and problem
    assert valid
    assert not broken_valid
    assert "Name: blocksworld" in dump
    assert "stack(?x: block, ?y: block)" in dump
    assert "(-) (holding ?x)" in dump
    assert "on(a, b)" in dump


def test_undeclared_initial_object_fails_type_check() -> None:
    """Verify that an undeclared object in the initial state is reported rather than raised."""
    # Arrange/Act - Build a model whose initial state names an undeclared object
    pddl = Pddl.from_strings(PICK_UP_DOMAIN, UNDECLARED_INIT_PROBLEM)
    report = pddl.type_check()

    # Assert - Expect the model to be built and the type check to explain the failure
    assert not pddl.is_valid()
    assert report.domain_valid
    assert not report.problem_valid
    assert "Unknown object 'z'" in report.report()
    assert pddl.stringify_state(pddl.initial_state) == {"on-table(a)", "on-table(z)"}


def test_text_forms_are_case_insensitive(pick_up_world: Pddl) -> None:
    """Verify that action calls and propositions match names regardless of their case."""
    # Arrange - Write the initial state using upper-case names
    state = {"On-Table(A)", "ON-TABLE(b)"}

    # Act - Query the model using upper-case action calls
    valid = pick_up_world.is_valid_action(state, "Pick-Up(A)")
    next_state = pick_up_world.next_state(state, "PICK-UP(B)")

    # Assert - Expect the names to resolve to the lower-case names of the loaded PDDL
    assert valid
    assert next_state == {"on-table(a)"}
    assert pick_up_world.get_action("Pick-Up").name == "pick-up"


def test_unbound_effect_variable_raises() -> None:
    """Verify that an effect using an unbound variable raises an error from this package."""
    # Arrange - Build a model whose only action adds a fact over an unbound variable
    pddl = Pddl.from_strings(UNBOUND_EFFECT_DOMAIN, PICK_UP_PROBLEM)

    # Act/Assert - Expect type checking to fail and the transition to raise
    assert not pddl.is_valid()
    with pytest.raises(UnboundVariableError, match=r"\?c"):
        pddl.next_state(pddl.initial_state, "pick-up(a)")
