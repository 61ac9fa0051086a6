"""Centralized configuration management for the readiness engine."""

import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .personas import PROFILES, validate_weights
from .schema import Persona


class PlanningConfig(BaseModel):
    """Settings for implementation plan synthesis."""
    base_weeks: int = Field(
        8,
        ge=1,
        description="Baseline duration in weeks before complexity and go-live multipliers"
    )


class TimelineConfidenceConfig(BaseModel):
    """Overall-score thresholds for timeline confidence."""
    high: int = Field(85, ge=0, le=100, description="Minimum overall score for high confidence")
    medium: int = Field(70, ge=0, le=100, description="Minimum overall score for medium confidence")

    @model_validator(mode="after")
    def check_order(self) -> "TimelineConfidenceConfig":
        if self.medium > self.high:
            raise ValueError("medium threshold must not exceed high threshold")
        return self

    def as_tuple(self) -> tuple[int, int]:
        return self.high, self.medium


class ScoringConfig(BaseModel):
    """Settings for readiness scoring.

    Weight overrides replace a persona's whole weight table. A table must
    name every section of the persona and sum to exactly 1.0.
    """
    weight_overrides: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        description="Per-persona section weight tables, keyed by persona (standard, prospect, ...)"
    )
    timeline_confidence: TimelineConfidenceConfig = Field(default_factory=TimelineConfidenceConfig)

    @field_validator("weight_overrides")
    @classmethod
    def check_weight_tables(cls, value: dict[str, dict[str, float]]) -> dict[str, dict[str, float]]:
        for persona_key, table in value.items():
            try:
                persona = Persona(persona_key)
            except ValueError:
                raise ValueError(f"Unknown persona in weight_overrides: {persona_key}") from None
            weights = {key: Decimal(str(weight)) for key, weight in table.items()}
            validate_weights(weights, PROFILES[persona].section_keys)
        return value


class EngineConfig(BaseModel):
    """Complete configuration for the readiness engine."""
    planning: PlanningConfig = Field(default_factory=PlanningConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)


def load_config(path: Path) -> EngineConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded EngineConfig.
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    return EngineConfig.model_validate(data or {})


def find_config_file() -> Optional[Path]:
    """Find a readiness engine configuration file.

    Looks in (order of priority):
    1. READINESS_ENGINE_CONFIG environment variable
    2. ./readiness-config.yaml
    3. ./readiness-config.yml
    4. ~/.config/readiness-engine/config.yaml
    """
    env_path = os.environ.get("READINESS_ENGINE_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["readiness-config.yaml", "readiness-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "readiness-engine" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    The built-in weight tables are written under scoring.weight_overrides
    so they can be edited in place.

    Args:
        path: Path where to save the configuration.
    """
    config = EngineConfig()
    data = config.model_dump()
    data["scoring"]["weight_overrides"] = {
        persona.value: {key: float(weight) for key, weight in profile.weights.items()}
        for persona, profile in PROFILES.items()
    }

    yaml_content = """# Readiness Engine Configuration
# ==============================
#
# This file configures plan duration, section weight tables and
# timeline confidence thresholds.
#
# Weight tables replace a persona's whole table: list every section
# and make the weights sum to exactly 1.0.
#
# Copy this file to one of these locations:
#   - ./readiness-config.yaml (current directory)
#   - ~/.config/readiness-engine/config.yaml (user config)
#
# Or set the READINESS_ENGINE_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
