"""Define functions to format a loaded PDDL domain and problem for diagnostic output."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from pddl_semantics.pddl.syntax import (
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
    TypedName,
)

if TYPE_CHECKING:
    from pddl_semantics.symbolic.pddl import Pddl


def format_types(types: Iterable[str]) -> str:
    """Format allowed types, separating alternatives with `|` (e.g., `truck | plane`)."""
    return " | ".join(types)


def format_typed_names(typed_names: Iterable[TypedName]) -> str:
    """Format typed names as a parenthesized list, e.g., `(?x: block, ?y: block)`."""
    params = [f"{t.name}: {format_types(t.types)}" for t in typed_names]
    return f"({', '.join(params)})"


def format_goal(goal: Goal | None, depth: int = 0) -> list[str]:
    """Format a goal description as indented lines (one node per line)."""
    padding = "\t" * depth

    match goal:
        case None:
            return [f"{padding}(none)"]
        case AtomGoal():
            return [f"{padding}{goal}"]
        case AndGoal(goals=goals):
            return [f"{padding}and:"] + [line for g in goals for line in format_goal(g, depth + 1)]
        case OrGoal(goals=goals):
            return [f"{padding}or:"] + [line for g in goals for line in format_goal(g, depth + 1)]
        case NotGoal(goal=negated):
            return [f"{padding}not:", *format_goal(negated, depth + 1)]
        case ForAllGoal(variables=variables, goal=body):
            header = f"{padding}forall{format_typed_names(variables)}:"
            return [header, *format_goal(body, depth + 1)]
        case ExistsGoal(variables=variables, goal=body):
            header = f"{padding}exists{format_typed_names(variables)}:"
            return [header, *format_goal(body, depth + 1)]
        case ImplyGoal(premise=premise, conclusion=conclusion):
            return [
                f"{padding}imply:",
                *format_goal(premise, depth + 1),
                *format_goal(conclusion, depth + 1),
            ]
        case _:
            return [f"{padding}(unrecognized goal: {goal!r})"]


def format_effects(effects: Iterable[Effect], depth: int = 0) -> list[str]:
    """Format action effects as indented lines, marking adds with (+) and deletes with (-)."""
    padding = "\t" * depth
    lines: list[str] = []

    for effect in effects:
        match effect:
            case AddEffect(atom=atom):
                lines.append(f"{padding}(+) {atom}")
            case DeleteEffect(atom=atom):
                lines.append(f"{padding}(-) {atom}")
            case ForAllEffect(variables=variables, effects=nested):
                lines.append(f"{padding}forall{format_typed_names(variables)}:")
                lines.extend(format_effects(nested, depth + 1))
            case ConditionalEffect(condition=condition, effects=nested):
                lines.append(f"{padding}when:")
                lines.extend(format_goal(condition, depth + 1))
                lines.append(f"{padding}then:")
                lines.extend(format_effects(nested, depth + 1))
            case _:
                lines.append(f"{padding}(unrecognized effect: {effect!r})")

    return lines


def format_pddl(pddl: Pddl) -> str:
    """Describe the types, predicates, actions, objects, initial state, and goal of a model."""
    domain = pddl.domain
    problem = pddl.problem

    lines = ["DOMAIN", "======", f"Name: {domain.name}"]
    lines.append(f"Requirements: {' '.join(sorted(domain.requirements))}")

    lines.append("Types:")
    lines.extend(f"\t{t.name}: {', '.join(t.parents)}" for t in domain.types)

    lines.append("Constants:")
    lines.extend(f"\t{c.name}: {format_types(c.types)}" for c in domain.constants)

    lines.append("Predicates:")
    lines.extend(f"\t{p.name}{format_typed_names(p.parameters)}" for p in domain.predicates)

    lines.append("Actions:")
    for action in domain.actions:
        lines.append(f"\t{action.name}{format_typed_names(action.parameters)}")
        lines.append("\t\tPreconditions:")
        lines.extend(format_goal(action.precondition, 3))
        lines.append("\t\tEffects:")
        lines.extend(format_effects(action.effects, 3))

    if domain.derived:
        lines.append("Derived Predicates:")
        for derived in domain.derived:
            lines.append(f"\t{derived.name}{format_typed_names(derived.parameters)}")
            lines.extend(format_goal(derived.body, 2))

    lines.extend(["", "PROBLEM", "======="])
    lines.extend([f"Name: {problem.name}", f"Domain: {problem.domain_name}"])

    lines.append("Objects:")
    lines.extend(f"\t{obj.name}: {', '.join(sorted(obj.types))}" for obj in pddl.objects)

    lines.append("Initial State:")
    lines.extend(f"\t{fact}" for fact in sorted(str(p) for p in pddl.initial_state))

    lines.append("Goal:")
    lines.extend(format_goal(problem.goal, 1))

    return "\n".join(lines)
