"""Define a class to represent symbolic states as sets of true propositions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, Mapping

from pddl_semantics.symbolic.proposition import Proposition

if TYPE_CHECKING:
    from pddl_semantics.symbolic.objects import ObjectRegistry


class State:
    """The set of propositions (i.e., facts) true in a state; all others are false."""

    def __init__(self, facts: Iterable[Proposition] = ()) -> None:
        """Initialize the state from an iterable of propositions (duplicates are merged)."""
        self.facts: set[Proposition] = set(facts)

    def __contains__(self, proposition: object) -> bool:
        """Evaluate whether a given proposition is true in the state."""
        return proposition in self.facts

    def __iter__(self) -> Iterator[Proposition]:
        """Iterate over the facts of the state (in no particular order)."""
        return iter(self.facts)

    def __len__(self) -> int:
        """Retrieve the number of facts in the state."""
        return len(self.facts)

    def __eq__(self, other: object) -> bool:
        """Evaluate whether two states contain exactly the same facts."""
        if not isinstance(other, State):
            return NotImplemented
        return self.facts == other.facts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Create an unambiguous string representation of the state."""
        return f"State({sorted(str(fact) for fact in self.facts)!r})"

    def __str__(self) -> str:
        """Create a readable string representation of the state."""
        sorted_facts = "\n\t".join(sorted(str(fact) for fact in self.facts))
        return f"State(\n\t{sorted_facts}\n)"

    def add(self, proposition: Proposition) -> bool:
        """Make a proposition true in the state.

        :return: True if the proposition was newly added, else False
        """
        if proposition in self.facts:
            return False
        self.facts.add(proposition)
        return True

    def discard(self, proposition: Proposition) -> bool:
        """Make a proposition false in the state.

        :return: True if the proposition was previously true, else False
        """
        if proposition not in self.facts:
            return False
        self.facts.remove(proposition)
        return True

    def update(self, propositions: Iterable[Proposition]) -> bool:
        """Add the given propositions, returning whether the state changed."""
        num_facts = len(self.facts)
        self.facts.update(propositions)
        return len(self.facts) != num_facts

    def difference_update(self, propositions: Iterable[Proposition]) -> bool:
        """Remove the given propositions, returning whether the state changed."""
        num_facts = len(self.facts)
        self.facts.difference_update(propositions)
        return len(self.facts) != num_facts

    def issuperset(self, other: State) -> bool:
        """Evaluate whether every fact of another state is also true in this state."""
        return self.facts.issuperset(other.facts)

    def copy(self) -> State:
        """Create an independent copy of the state."""
        return State(self.facts)

    def to_strings(self) -> set[str]:
        """Convert the state into its text form: the set of its facts' text forms."""
        return {str(fact) for fact in self.facts}

    def to_pddl(self) -> str:
        """Return a PDDL string representation of the state."""
        all_facts = "\n\t".join(sorted(fact.to_pddl() for fact in self.facts))
        return f"(and\n\t{all_facts}\n)"

    @classmethod
    def parse(
        cls,
        strings: Iterable[str],
        objects: ObjectRegistry,
        arities: Mapping[str, int] | None = None,
    ) -> State:
        """Parse a state from the text forms of its facts.

        :param strings: Text forms of the facts, e.g., {"on(a, b)", "clear(a)"}
        :param objects: Registry used to resolve argument names into objects
        :param arities: Optional map from predicate names to their declared arities
        :return: Parsed state
        """
        return cls(Proposition.parse(s, objects, arities) for s in strings)
