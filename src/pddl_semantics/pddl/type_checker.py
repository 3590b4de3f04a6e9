"""Define a static type checker for parsed PDDL domains and problems."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pddl_semantics.pddl.syntax import (
    EQUALITY_PREDICATE,
    AddEffect,
    AndGoal,
    AtomGoal,
    ConditionalEffect,
    DeleteEffect,
    Effect,
    ExistsGoal,
    ForAllEffect,
    ForAllGoal,
    Goal,
    ImplyGoal,
    NotGoal,
    OrGoal,
    PDDLTree,
    TypedName,
    is_variable,
)
from pddl_semantics.pddl.type_hierarchy import TypeHierarchy


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found while type checking."""

    section: str
    """Either "domain" or "problem"."""

    location: str
    """Describes where the problem was found (e.g., "action 'pick-up'")."""

    message: str

    def __str__(self) -> str:
        """Return a readable one-line description of the diagnostic."""
        return f"[{self.section}] {self.location}: {self.message}"


@dataclass(frozen=True)
class TypeCheckReport:
    """The pass/fail result of type checking a domain and problem, with diagnostics."""

    domain_valid: bool
    problem_valid: bool
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        """Check whether both the domain and the problem passed type checking."""
        return self.domain_valid and self.problem_valid

    def report(self) -> str:
        """Render the diagnostics as text (one per line)."""
        if not self.diagnostics:
            return "No errors found."
        return "\n".join(str(d) for d in self.diagnostics)


class TypeChecker:
    """Checks that a parsed domain and problem use types, predicates, and names consistently."""

    def __init__(self, tree: PDDLTree) -> None:
        """Initialize the type checker for the given syntax tree."""
        self.tree = tree
        self.types = TypeHierarchy(tree.domain.types)
        self.arities = {p.name: p.arity for p in tree.domain.predicates}

        self.constants = {c.name: c.types for c in tree.domain.constants}
        self.objects = dict(self.constants)
        self.objects.update({o.name: o.types for o in tree.problem.objects})

        self._diagnostics: list[Diagnostic] = []
        self._section = "domain"

    def check(self) -> TypeCheckReport:
        """Type check the domain, then the problem.

        :return: Report stating whether each passed, along with all diagnostics
        """
        self._diagnostics = []

        self._section = "domain"
        self.check_domain()
        num_domain_errors = len(self._diagnostics)

        self._section = "problem"
        self.check_problem()
        num_problem_errors = len(self._diagnostics) - num_domain_errors

        return TypeCheckReport(
            domain_valid=num_domain_errors == 0,
            problem_valid=num_problem_errors == 0,
            diagnostics=tuple(self._diagnostics),
        )

    def _error(self, location: str, message: str) -> None:
        self._diagnostics.append(Diagnostic(self._section, location, message))

    def _check_typed_names(self, typed_names: Iterable[TypedName], location: str) -> None:
        """Verify that every type used in the given typed names is declared."""
        for typed_name in typed_names:
            for t in typed_name.types:
                if t not in self.types:
                    self._error(location, f"'{typed_name.name}' has undeclared type '{t}'.")

    def _check_atom(
        self,
        atom: AtomGoal,
        scope: dict[str, tuple[str, ...]],
        names: dict[str, tuple[str, ...]],
        location: str,
    ) -> None:
        """Verify an atom's predicate, arity, and terms.

        :param atom: Atomic formula to be checked
        :param scope: Map from variables in scope to their allowed types
        :param names: Map from object names usable as terms to their types
        :param location: Description of where the atom appears
        """
        if atom.predicate == EQUALITY_PREDICATE:
            expected_arity = 2
        elif atom.predicate not in self.arities:
            self._error(location, f"Unknown predicate '{atom.predicate}'.")
            return
        else:
            expected_arity = self.arities[atom.predicate]

        if len(atom.terms) != expected_arity:
            self._error(
                location,
                f"Predicate '{atom.predicate}' expects {expected_arity} argument(s) "
                f"but {atom} has {len(atom.terms)}.",
            )
            return

        predicate = self.tree.domain.get_predicate(atom.predicate)
        for idx, term in enumerate(atom.terms):
            if is_variable(term):
                if term not in scope:
                    self._error(location, f"Variable '{term}' in {atom} is not bound.")
                continue

            if term not in names:
                self._error(location, f"Unknown object '{term}' in {atom}.")
                continue

            if predicate is None:
                continue

            expected_types = predicate.parameters[idx].types
            if not any(self.types.is_subtype(t, e) for t in names[term] for e in expected_types):
                self._error(
                    location,
                    f"Object '{term}' in {atom} doesn't match parameter type(s) {expected_types}.",
                )

    def _check_goal(
        self,
        goal: Goal | None,
        scope: dict[str, tuple[str, ...]],
        names: dict[str, tuple[str, ...]],
        location: str,
    ) -> None:
        match goal:
            case None:
                return
            case AtomGoal():
                self._check_atom(goal, scope, names, location)
            case AndGoal(goals=goals) | OrGoal(goals=goals):
                for subgoal in goals:
                    self._check_goal(subgoal, scope, names, location)
            case NotGoal(goal=negated):
                self._check_goal(negated, scope, names, location)
            case ImplyGoal(premise=premise, conclusion=conclusion):
                self._check_goal(premise, scope, names, location)
                self._check_goal(conclusion, scope, names, location)
            case ForAllGoal(variables=variables, goal=body) | ExistsGoal(
                variables=variables,
                goal=body,
            ):
                self._check_typed_names(variables, location)
                inner_scope = dict(scope)
                inner_scope.update({v.name: v.types for v in variables})
                self._check_goal(body, inner_scope, names, location)
            case _:
                self._error(location, f"Unrecognized goal construct: {goal!r}.")

    def _check_effects(
        self,
        effects: Iterable[Effect],
        scope: dict[str, tuple[str, ...]],
        location: str,
    ) -> None:
        for effect in effects:
            match effect:
                case AddEffect(atom=atom) | DeleteEffect(atom=atom):
                    if atom.predicate == EQUALITY_PREDICATE:
                        self._error(location, "Equality can't be asserted or retracted by effects.")
                    else:
                        self._check_atom(atom, scope, self.constants, location)
                case ConditionalEffect(condition=condition, effects=nested):
                    self._check_goal(condition, scope, self.constants, location)
                    self._check_effects(nested, scope, location)
                case ForAllEffect(variables=variables, effects=nested):
                    self._check_typed_names(variables, location)
                    inner_scope = dict(scope)
                    inner_scope.update({v.name: v.types for v in variables})
                    self._check_effects(nested, inner_scope, location)
                case _:
                    self._error(location, f"Unrecognized effect construct: {effect!r}.")

    def check_domain(self) -> None:
        """Check the domain's constants, predicates, actions, derived predicates, and axioms."""
        domain = self.tree.domain
        self._check_typed_names(domain.constants, "constants")

        for predicate in domain.predicates:
            self._check_typed_names(predicate.parameters, f"predicate '{predicate.name}'")

        for action in domain.actions:
            location = f"action '{action.name}'"
            self._check_typed_names(action.parameters, location)
            scope = {p.name: p.types for p in action.parameters}
            self._check_goal(action.precondition, scope, self.constants, location)
            self._check_effects(action.effects, scope, location)

        for derived in domain.derived:
            location = f"derived predicate '{derived.name}'"
            self._check_typed_names(derived.parameters, location)
            if derived.name not in self.arities:
                self._error(location, "Derived predicate is not declared in :predicates.")
            elif self.arities[derived.name] != len(derived.parameters):
                self._error(location, "Derived predicate arity differs from its declaration.")
            scope = {p.name: p.types for p in derived.parameters}
            self._check_goal(derived.body, scope, self.constants, location)

        for axiom in domain.axioms:
            location = f"axiom '{axiom.name}'"
            self._check_typed_names(axiom.parameters, location)
            scope = {p.name: p.types for p in axiom.parameters}
            self._check_goal(axiom.context, scope, self.constants, location)
            self._check_atom(axiom.implies, scope, self.constants, location)

    def check_problem(self) -> None:
        """Check the problem's domain reference, objects, initial state, and goal."""
        problem = self.tree.problem
        if problem.domain_name != self.tree.domain.name:
            self._error(
                "header",
                f"Problem refers to domain '{problem.domain_name}' "
                f"but the loaded domain is '{self.tree.domain.name}'.",
            )

        self._check_typed_names(problem.objects, "objects")

        for atom in problem.initial_state:
            if atom.predicate == EQUALITY_PREDICATE:
                self._error("init", "Equality can't be asserted in the initial state.")
                continue
            self._check_atom(atom, {}, self.objects, "init")

        self._check_goal(problem.goal, {}, self.objects, "goal")
