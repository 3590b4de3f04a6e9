"""Unit tests for loading engine configurations from YAML."""

from pathlib import Path

import pytest

from pddl_semantics.io.config import EngineConfig
from pddl_semantics.io.yaml_utils import load_yaml_data


def test_from_yaml_resolves_relative_paths(tmp_path: Path) -> None:
    """Verify that relative PDDL paths are resolved against the configuration's directory."""
    # Arrange - Write a configuration with one relative and one absolute path
    absolute_problem = tmp_path / "problems" / "p01.pddl"
    config_path = tmp_path / "engine.yaml"
    config_path.write_text(
        f"domain: domain.pddl\nproblem: {absolute_problem}\nmax_listed_actions: 5\n",
    )

    # Act - Load the configuration
    config = EngineConfig.from_yaml(config_path)

    # Assert - Expect resolved paths and the remaining settings to be loaded
    assert config.domain == tmp_path / "domain.pddl"
    assert config.problem == absolute_problem
    assert config.max_listed_actions == 5
    assert config.require_valid
    assert not config.verbose


def test_from_yaml_rejects_unknown_keys(tmp_path: Path) -> None:
    """Verify that configurations with unexpected keys are rejected."""
    # Arrange - Write a configuration with a misspelled key
    config_path = tmp_path / "engine.yaml"
    config_path.write_text("domain: d.pddl\nproblem: p.pddl\nverbos: true\n")

    # Act/Assert - Expect validation to fail
    with pytest.raises(ValueError, match="Invalid configuration"):
        EngineConfig.from_yaml(config_path)


def test_from_yaml_rejects_nonpositive_limit(tmp_path: Path) -> None:
    """Verify that the cap on listed actions must be positive."""
    # Arrange - Write a configuration with a zero cap
    config_path = tmp_path / "engine.yaml"
    config_path.write_text("domain: d.pddl\nproblem: p.pddl\nmax_listed_actions: 0\n")

    # Act/Assert - Expect validation to fail
    with pytest.raises(ValueError):
        EngineConfig.from_yaml(config_path)


def test_load_yaml_data_requires_keys(tmp_path: Path) -> None:
    """Verify that load_yaml_data() reports missing required keys."""
    # Arrange - Write YAML data without a `problem` key
    yaml_path = tmp_path / "engine.yaml"
    yaml_path.write_text("domain: d.pddl\n")

    # Act/Assert - Expect a KeyError naming the missing key
    with pytest.raises(KeyError, match="problem"):
        load_yaml_data(yaml_path, required_keys={"domain", "problem"})


def test_load_yaml_data_missing_file(tmp_path: Path) -> None:
    """Verify that load_yaml_data() rejects nonexistent files."""
    # Arrange/Act/Assert - Expect loading a missing file to fail
    with pytest.raises(FileNotFoundError):
        load_yaml_data(tmp_path / "missing.yaml")
