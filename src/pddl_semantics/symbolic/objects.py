"""Define classes to represent typed objects and the index of objects by type."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator

from pddl_semantics.exceptions import DuplicateObjectError, UnknownObjectError
from pddl_semantics.pddl.syntax import ROOT_TYPE
from pddl_semantics.pddl.type_hierarchy import TypeHierarchy

if TYPE_CHECKING:
    from pddl_semantics.pddl.syntax import DomainTree, ProblemTree, TypedName


@dataclass(frozen=True)
class Object:
    """A named object in a planning problem, along with every type it satisfies."""

    name: str
    types: frozenset[str] = field(default=frozenset(), compare=False)
    """The object's declared type(s) and all of their ancestor types."""

    def __str__(self) -> str:
        """Return the name of the object."""
        return self.name


class ObjectRegistry:
    """The objects of a domain and problem, indexed by name and by type."""

    def __init__(self, objects: Iterable[Object], types: TypeHierarchy) -> None:
        """Initialize the registry, indexing each object under every type it satisfies.

        :param objects: Objects in the order they were declared
        :param types: Type lattice used to resolve the objects' types
        :raises DuplicateObjectError: If two objects share a name
        """
        self.type_hierarchy = types

        self._objects: dict[str, Object] = {}
        """Maps object names to objects, in declaration order."""

        self._objects_of_type: dict[str, list[Object]] = defaultdict(list)
        """Maps each type name to the objects satisfying it, in declaration order."""

        for obj in objects:
            if obj.name in self._objects:
                raise DuplicateObjectError(f"Object '{obj.name}' is declared more than once.")
            self._objects[obj.name] = obj
            for obj_type in sorted(obj.types):
                self._objects_of_type[obj_type].append(obj)

    @classmethod
    def from_tree(cls, domain: DomainTree, problem: ProblemTree) -> ObjectRegistry:
        """Create the registry from a domain's constants followed by a problem's objects."""
        types = TypeHierarchy(domain.types)
        declared = (*domain.constants, *problem.objects)
        return cls((cls.create_object(typed_name, types) for typed_name in declared), types)

    @staticmethod
    def create_object(typed_name: TypedName, types: TypeHierarchy) -> Object:
        """Create an object satisfying its declared types and all of their ancestors."""
        satisfied = {t for declared in typed_name.types for t in types.ancestors(declared)}
        return Object(typed_name.name, frozenset(satisfied))

    def __contains__(self, name: str) -> bool:
        """Evaluate whether the named object is in the registry."""
        return name in self._objects

    def __iter__(self) -> Iterator[Object]:
        """Iterate over all objects in declaration order."""
        return iter(self._objects.values())

    def __len__(self) -> int:
        """Retrieve the number of objects in the registry."""
        return len(self._objects)

    @property
    def types(self) -> tuple[str, ...]:
        """Retrieve the names of all declared types."""
        return self.type_hierarchy.types

    def get(self, name: str) -> Object:
        """Retrieve the named object.

        :raises UnknownObjectError: If no object has the given name
        """
        try:
            return self._objects[name]
        except KeyError:
            raise UnknownObjectError(name) from None

    def get_or_untyped(self, name: str) -> Object:
        """Retrieve the named object, or an object of only the root type if none is declared."""
        return self._objects.get(name) or Object(name, frozenset({ROOT_TYPE}))

    def objects_of_type(self, type_name: str) -> tuple[Object, ...]:
        """Retrieve all objects satisfying the named type (empty if the type has no members)."""
        return tuple(self._objects_of_type.get(type_name, ()))
