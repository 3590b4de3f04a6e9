"""Define a command-line interface for querying PDDL domains and problems."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import click
from rich.panel import Panel
from rich.table import Table

from pddl_semantics.exceptions import PDDLError
from pddl_semantics.io.config import EngineConfig
from pddl_semantics.io.logging import configure_logging, console
from pddl_semantics.symbolic import Pddl, State

EXISTING_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def read_lines(path: Path) -> list[str]:
    """Read the non-empty lines of a text file, skipping `;` comments."""
    lines = (line.strip() for line in path.read_text().splitlines())
    return [line for line in lines if line and not line.startswith(";")]


def pddl_sources(command: Callable) -> Callable:
    """Add the DOMAIN and PROBLEM arguments and the --config option to a command."""
    command = click.argument("problem", required=False, type=EXISTING_FILE)(command)
    command = click.argument("domain", required=False, type=EXISTING_FILE)(command)
    return click.option(
        "--config",
        "config_path",
        type=EXISTING_FILE,
        help="YAML configuration naming the PDDL files (replaces DOMAIN and PROBLEM).",
    )(command)


def load_model(
    domain: Path | None,
    problem: Path | None,
    config_path: Path | None,
    check: bool = True,
) -> tuple[Pddl, EngineConfig]:
    """Load the PDDL model named by either the command's arguments or a configuration file.

    :param domain: Path to the PDDL domain file (if not using a configuration)
    :param problem: Path to the PDDL problem file (if not using a configuration)
    :param config_path: Path to a YAML configuration file (optional)
    :param check: Whether to enforce the configuration's `require_valid` setting
    :return: Loaded model and the configuration used to load it
    :raises click.ClickException: If the model can't be loaded or fails a required type check
    """
    if config_path is not None:
        try:
            config = EngineConfig.from_yaml(config_path)
        except (ValueError, KeyError, RuntimeError) as error:
            raise click.ClickException(str(error)) from error
    elif domain is not None and problem is not None:
        config = EngineConfig(domain=domain, problem=problem)
    else:
        raise click.UsageError("Provide DOMAIN and PROBLEM files, or a --config file.")

    try:
        pddl = Pddl.from_files(config.domain, config.problem)
    except PDDLError as error:
        raise click.ClickException(str(error)) from error

    if check and config.require_valid and not pddl.is_valid(verbose=config.verbose):
        raise click.ClickException("The domain or problem failed type checking (run `check`).")

    return pddl, config


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug messages.")
def cli(verbose: bool) -> None:
    """Ground, apply, and validate actions in PDDL domains."""
    configure_logging(verbose)


@cli.command()
@pddl_sources
def check(domain: Path | None, problem: Path | None, config_path: Path | None) -> None:
    """Type check a PDDL domain and problem."""
    pddl, _ = load_model(domain, problem, config_path, check=False)
    report = pddl.type_check()

    table = Table(title="Type Check", show_lines=False)
    table.add_column("File", style="bold")
    table.add_column("Result")
    for name, valid in (("domain", report.domain_valid), ("problem", report.problem_valid)):
        table.add_row(name, "[green]valid[/]" if valid else "[red]invalid[/]")
    console.print(table)

    for diagnostic in report.diagnostics:
        console.print(str(diagnostic), style="red", markup=False, highlight=False)

    if not report.is_valid:
        raise SystemExit(1)


@cli.command()
@pddl_sources
def dump(domain: Path | None, problem: Path | None, config_path: Path | None) -> None:
    """Print a diagnostic description of a PDDL domain and problem."""
    pddl, _ = load_model(domain, problem, config_path)
    console.print(str(pddl), markup=False, highlight=False)


@cli.command()
@pddl_sources
@click.option("--state", "state_path", type=EXISTING_FILE, help="File listing one fact per line.")
def actions(
    domain: Path | None,
    problem: Path | None,
    config_path: Path | None,
    state_path: Path | None,
) -> None:
    """List the valid actions in the initial state (or in a given state)."""
    pddl, config = load_model(domain, problem, config_path)

    state = pddl.initial_state
    if state_path is not None:
        try:
            state = pddl.parse_state(read_lines(state_path))
        except PDDLError as error:
            raise click.ClickException(str(error)) from error

    valid_actions = pddl.list_valid_actions(state)
    shown = valid_actions
    if config.max_listed_actions is not None:
        shown = valid_actions[: config.max_listed_actions]

    table = Table(title=f"Valid Actions ({len(valid_actions)})", show_lines=False)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Action", style="bold")
    for idx, action_call in enumerate(shown, start=1):
        table.add_row(str(idx), action_call)
    console.print(table)

    if len(shown) < len(valid_actions):
        console.print(f"[yellow]{len(valid_actions) - len(shown)} more action(s) not shown.[/]")


@cli.command(name="validate-plan")
@pddl_sources
@click.option("--plan", "plan_path", type=EXISTING_FILE, required=True, help="Plan file.")
def validate_plan(
    domain: Path | None,
    problem: Path | None,
    config_path: Path | None,
    plan_path: Path,
) -> None:
    """Check that a plan (one action call per line) is valid and achieves the goal."""
    pddl, _ = load_model(domain, problem, config_path)

    try:
        is_valid = pddl.is_valid_plan(read_lines(plan_path))
    except PDDLError as error:
        raise click.ClickException(str(error)) from error

    if is_valid:
        console.print(Panel.fit("[bold green]Plan is valid[/]", border_style="green"))
    else:
        console.print(Panel.fit("[bold red]Plan is invalid[/]", border_style="red"))
        raise SystemExit(1)


@cli.command()
@pddl_sources
@click.option("--action", "-a", "action_calls", multiple=True, help="Action call to apply.")
def step(
    domain: Path | None,
    problem: Path | None,
    config_path: Path | None,
    action_calls: tuple[str, ...],
) -> None:
    """Apply action calls in sequence from the initial state and print the resulting state."""
    pddl, _ = load_model(domain, problem, config_path)
    state: State = pddl.initial_state

    for action_call in action_calls:
        try:
            if not pddl.is_valid_action(state, action_call):
                console.print(f"[yellow]Precondition of {action_call} doesn't hold.[/]")
            state = pddl.next_state(state, action_call)
        except PDDLError as error:
            raise click.ClickException(str(error)) from error

    for fact in sorted(pddl.stringify_state(state)):
        console.print(fact, markup=False, highlight=False)

    satisfied = pddl.is_goal_satisfied(state)
    console.print(f"Goal satisfied: {'[green]yes[/]' if satisfied else '[red]no[/]'}")


def main() -> None:
    """Run the command-line interface."""
    cli()


if __name__ == "__main__":
    main()
