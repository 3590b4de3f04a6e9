"""Define a Pydantic model for validating YAML configuration files for the PDDL engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pddl_semantics.io.yaml_utils import load_yaml_data


class EngineConfig(BaseModel):
    """Schema for a YAML file specifying which PDDL files to load and how to query them."""

    domain: Path = Field(description="Path to the PDDL domain file")
    problem: Path = Field(description="Path to the PDDL problem file")

    verbose: bool = Field(default=False, description="Report type-checking diagnostics")
    require_valid: bool = Field(
        default=True,
        description="Abort CLI commands if the domain or problem fails type checking",
    )
    max_listed_actions: Optional[int] = Field(
        default=None,
        gt=0,
        description="Maximum number of valid actions to list (None = no limit)",
    )

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> EngineConfig:
        """Load and validate a configuration from YAML.

        Relative PDDL paths are resolved relative to the directory containing the YAML file.

        :param yaml_path: Path to the YAML configuration file
        :return: Validated configuration
        :raises ValueError: If the YAML data doesn't match the schema
        """
        yaml_data = load_yaml_data(yaml_path, required_keys={"domain", "problem"})

        try:
            config = cls.model_validate(yaml_data)
        except ValidationError as error:
            raise ValueError(f"Invalid configuration in {yaml_path}:\n{error}") from error

        base_dir = yaml_path.parent
        return config.model_copy(
            update={
                "domain": (
                    config.domain if config.domain.is_absolute() else base_dir / config.domain
                ),
                "problem": (
                    config.problem if config.problem.is_absolute() else base_dir / config.problem
                ),
            },
        )
