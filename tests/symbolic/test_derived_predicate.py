"""Unit tests for the DerivedPredicate and Axiom classes."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pddl_semantics import ClosureDivergenceError, Pddl, State
from pddl_semantics.pddl import PDDLParser
from pddl_semantics.symbolic import Axiom, DerivedPredicate

from ..strategies.pddl_strategies import states


def test_initial_state_is_closed(tower: Pddl) -> None:
    """Verify that the initial state includes every derivable `above` fact."""
    # Arrange - The model is provided by the test fixture

    # Act - Collect the derived facts of the initial state
    above_facts = {fact for fact in tower.stringify_state(tower.initial_state) if "above" in fact}

    # Assert - Expect the transitive closure of `on`, which needs more than one pass
    assert above_facts == {"above(a, b)", "above(b, c)", "above(a, c)"}


def test_transition_closes_next_state(tower: Pddl) -> None:
    """Verify that derived facts depending on other derived facts appear after a transition."""
    # Arrange - Placing `c` on `d` extends the tower by one block
    state = tower.initial_state

    # Act - Apply the action
    next_state = tower.next_state(state, "place-on(c, d)")

    # Assert - Expect every block above `c` to now be above `d`
    facts = tower.stringify_state(next_state)
    assert {"above(c, d)", "above(b, d)", "above(a, d)"} <= facts
    assert tower.is_goal_satisfied(next_state)
    assert not tower.is_goal_satisfied(state)


@given(data=st.data())
def test_closure_is_idempotent_and_monotonic(data: st.DataObject, tower: Pddl) -> None:
    """Verify that closure only adds facts and that closing twice equals closing once."""
    # Arrange - Generate a random state of the `tower` domain
    state = data.draw(states(tower))
    closed_once = state.copy()

    # Act - Close the state once, then close a copy of the result again
    DerivedPredicate.apply_all(tower.derived_predicates, closed_once)
    closed_twice = closed_once.copy()
    changed = DerivedPredicate.apply_all(tower.derived_predicates, closed_twice)

    # Assert - Expect a superset of the original facts and no change from the second closure
    assert closed_once.issuperset(state)
    assert not changed
    assert closed_twice == closed_once


def test_apply_adds_only_new_facts(tower: Pddl) -> None:
    """Verify that one application of a derived predicate adds facts and reports changes."""
    # Arrange - Create a state with a two-block tower and no derived facts
    state = tower.parse_state({"on(a, b)"})
    (above,) = tower.derived_predicates

    # Act - Apply the derived predicate twice
    changed = above.apply(state)
    changed_again = above.apply(state)

    # Assert - Expect one new fact, and nothing further once it has been added
    assert changed
    assert not changed_again
    assert tower.stringify_state(state) == {"on(a, b)", "above(a, b)"}


def test_closure_divergence_raises() -> None:
    """Verify that a closure failing to reach a fixpoint within its bound raises an error."""

    class Flicker:
        """Stands in for a derived predicate whose every pass reports a change."""

        groundings = ()

        def apply(self, state: State) -> bool:
            return True

    # Arrange - Create a predicate that never stabilizes
    predicates = [Flicker()]

    # Act/Assert - Expect the closure to give up after its bound
    with pytest.raises(ClosureDivergenceError):
        DerivedPredicate.apply_all(predicates, State())  # type: ignore[list-item]


def test_axiom_from_definition(tower: Pddl) -> None:
    """Verify that axioms use their context as the body and their implied atom as the head."""
    # Arrange - Parse a domain declaring one axiom
    domain = PDDLParser("""
        (define (domain axioms)
          (:predicates (on ?x ?y) (above ?x ?y))
          (:axiom :vars (?x ?y) :context (on ?x ?y) :implies (above ?x ?y)))""").domain()

    # Act - Build the axiom over the `tower` objects
    axiom = Axiom.from_axiom_definition(tower.objects, domain.axioms[0])
    state = tower.parse_state({"on(a, b)"})
    axiom.apply(state)

    # Assert - Expect the axiom to imply `above` from `on`
    assert axiom.name == "above"
    assert tower.stringify_state(state) == {"on(a, b)", "above(a, b)"}
