"""Define a class to represent the lattice of object types declared by a PDDL domain."""

from __future__ import annotations

from typing import Iterable

from pddl_semantics.pddl.syntax import ROOT_TYPE, TypeDecl


class TypeHierarchy:
    """A lattice of object types, permitting types to have several parent types."""

    def __init__(self, type_decls: Iterable[TypeDecl]) -> None:
        """Initialize the type hierarchy from a domain's type declarations."""
        self._to_parents: dict[str, tuple[str, ...]] = {ROOT_TYPE: ()}
        """A map from each type name to the names of its parent types."""

        for decl in type_decls:
            known_parents = self._to_parents.get(decl.name, ())
            merged = known_parents + tuple(p for p in decl.parents if p not in known_parents)
            self._to_parents[decl.name] = merged

        for parents in list(self._to_parents.values()):  # Parent types may be declared implicitly
            for parent in parents:
                self._to_parents.setdefault(parent, (ROOT_TYPE,))

        self._ancestors: dict[str, tuple[str, ...]] = {}
        """Cache mapping each type to itself and all of its ancestor types."""

    @property
    def types(self) -> tuple[str, ...]:
        """Retrieve the names of all declared types (including `object`), in declaration order."""
        return tuple(self._to_parents)

    def __contains__(self, type_name: str) -> bool:
        """Evaluate whether the named type is declared."""
        return type_name in self._to_parents

    def parents_of(self, type_name: str) -> tuple[str, ...]:
        """Retrieve the direct parent types of the named type (empty for unknown types)."""
        return self._to_parents.get(type_name, ())

    def ancestors(self, type_name: str) -> tuple[str, ...]:
        """Compute the named type followed by all of its ancestors (always ending with `object`).

        Cycles in the declared lattice are tolerated; each type is listed once.
        """
        if type_name in self._ancestors:
            return self._ancestors[type_name]

        visited: list[str] = []
        frontier = [type_name]
        while frontier:
            t = frontier.pop(0)
            if t in visited:
                continue
            visited.append(t)
            frontier.extend(self.parents_of(t))

        if ROOT_TYPE in visited:
            visited.remove(ROOT_TYPE)
        visited.append(ROOT_TYPE)

        self._ancestors[type_name] = tuple(visited)
        return self._ancestors[type_name]

    def is_subtype(self, type_name: str, ancestor: str) -> bool:
        """Evaluate whether a type equals or descends from a (potential) ancestor type."""
        return ancestor in self.ancestors(type_name)
