"""Define functions to load PDDL domain and problem files into a syntax tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pddl_semantics.exceptions import LoadError, PDDLSyntaxError
from pddl_semantics.io.logging import log_info
from pddl_semantics.pddl.parser import PDDLParser
from pddl_semantics.pddl.syntax import DomainTree, PDDLTree, ProblemTree


@dataclass
class LoadSession:
    """State belonging to a single load of a PDDL domain and problem.

    A session is created for one call to `load_pddl()` and discarded afterwards.
    """

    current_path: Path | None = None
    """Path of the file currently being parsed (None between files)."""

    loaded_paths: list[Path] = field(default_factory=list)
    """Paths of the files parsed so far, in order."""

    def _read(self, path: Path) -> str:
        """Read the text of the given file, reporting failures as load errors."""
        self.current_path = path
        try:
            return path.read_text()
        except OSError as error:
            raise LoadError(f"Unable to read PDDL file: {error.strerror}", path) from error

    def parse_domain(self, path: Path) -> DomainTree:
        """Parse the PDDL domain contained in the given file."""
        text = self._read(path)
        try:
            domain = PDDLParser(text).domain()
        except PDDLSyntaxError as error:
            raise PDDLSyntaxError(f"Unable to parse domain: {error}", path) from error

        self.loaded_paths.append(path)
        self.current_path = None
        return domain

    def parse_problem(self, path: Path) -> ProblemTree:
        """Parse the PDDL problem contained in the given file."""
        text = self._read(path)
        try:
            problem = PDDLParser(text).problem()
        except PDDLSyntaxError as error:
            raise PDDLSyntaxError(f"Unable to parse problem: {error}", path) from error

        self.loaded_paths.append(path)
        self.current_path = None
        return problem


def load_pddl(domain_path: Path | str, problem_path: Path | str) -> PDDLTree:
    """Load a PDDL domain and problem from files.

    :param domain_path: Path to the PDDL domain file
    :param problem_path: Path to the PDDL problem file
    :return: Syntax tree of the domain and problem
    :raises LoadError: If either file can't be read or parsed (the error names the file)
    """
    session = LoadSession()
    domain = session.parse_domain(Path(domain_path))
    problem = session.parse_problem(Path(problem_path))
    log_info(f"Loaded PDDL domain '{domain.name}' and problem '{problem.name}'.")

    return PDDLTree(domain, problem, Path(domain_path), Path(problem_path))


def parse_pddl(domain_pddl: str, problem_pddl: str) -> PDDLTree:
    """Parse a PDDL domain and problem from strings.

    :raises PDDLSyntaxError: If either string can't be parsed
    """
    return PDDLTree(PDDLParser(domain_pddl).domain(), PDDLParser(problem_pddl).problem())
