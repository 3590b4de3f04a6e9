"""Define a lazy generator over all groundings of a list of typed parameters."""

from __future__ import annotations

from itertools import product
from math import prod
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from pddl_semantics.pddl.syntax import TypedName
    from pddl_semantics.symbolic.objects import Object, ObjectRegistry


class ParameterGenerator:
    """A restartable iterable over every tuple of objects that can ground a parameter list.

    Tuples are generated in the order of the Cartesian product over the parameters, where each
    parameter ranges over the objects satisfying any of its allowed types. Different parameters
    may be bound to the same object.
    """

    def __init__(self, objects: ObjectRegistry, parameters: Iterable[TypedName]) -> None:
        """Initialize the generator by collecting the candidate objects of each parameter.

        :param objects: Registry providing the objects of each type
        :param parameters: Ordered parameters, each restricted to one or more types
        """
        self.parameters = tuple(parameters)
        self.candidates: tuple[tuple[Object, ...], ...] = tuple(
            self._candidates_for(objects, p.types) for p in self.parameters
        )
        """For each parameter, the objects satisfying any of its types (without repeats)."""

    @staticmethod
    def _candidates_for(objects: ObjectRegistry, types: tuple[str, ...]) -> tuple[Object, ...]:
        candidates = (obj for t in types for obj in objects.objects_of_type(t))
        return tuple(dict.fromkeys(candidates))  # Remove repeats from overlapping types

    def __iter__(self) -> Iterator[tuple[Object, ...]]:
        """Begin a new pass over all argument tuples."""
        return product(*self.candidates)

    def __len__(self) -> int:
        """Compute the number of argument tuples generated by a full pass."""
        return prod(len(c) for c in self.candidates)
