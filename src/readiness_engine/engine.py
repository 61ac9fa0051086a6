"""Readiness Engine - scoring and planning entry point.

Ties the two deterministic paths together:
1. Score: section scorers -> weighted aggregate -> status band
2. Plan: axis resolution -> rule contributions -> phased plan

The engine holds only immutable configuration; every call builds its own
result, so a single instance can serve concurrent callers.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

from .aggregator import score_intake
from .config import EngineConfig
from .personas import PROFILES, get_profile
from .planner import plan_fields, synthesize_plan
from .schema import (
    ImplementationPlan,
    IntakeResponse,
    Persona,
    ReadinessAssessment,
    ReadinessResult,
)

logger = logging.getLogger(__name__)

SCORING_VERSION = "1.0.0"


class IntakeValidationError(ValueError):
    """Raised when an intake payload is not a JSON object."""


def parse_intake(payload: Union[IntakeResponse, dict[str, Any]]) -> IntakeResponse:
    """Normalize a raw payload into an IntakeResponse.

    Raises:
        IntakeValidationError: If the payload is not an object.
    """
    if isinstance(payload, IntakeResponse):
        return payload
    if not isinstance(payload, dict):
        raise IntakeValidationError(
            f"Intake payload must be a JSON object, got {type(payload).__name__}"
        )
    return IntakeResponse.from_payload(payload)


def validate_intake(payload: Any) -> tuple[bool, list[str]]:
    """Check an intake payload against its persona roster.

    Missing sections and non-object section values are reported as issues.
    They never stop scoring (they score as empty sections); the payload is
    invalid only when it is not an object at all.

    Returns:
        Tuple of (is_valid, issues)
    """
    if not isinstance(payload, dict):
        return False, [f"Intake payload must be a JSON object, got {type(payload).__name__}"]

    intake = IntakeResponse.from_payload(payload)
    issues = []
    user_type = payload.get("user_type")
    if user_type and intake.persona == Persona.STANDARD and str(user_type).lower() != Persona.STANDARD.value:
        issues.append(f"Unrecognized user_type '{user_type}', scored as {intake.persona.value}")

    profile = PROFILES[intake.persona]
    for spec in profile.roster:
        raw = payload.get(spec.payload_key)
        if raw is None:
            issues.append(f"Missing section: {spec.payload_key}")
        elif not isinstance(raw, dict):
            issues.append(f"Section {spec.payload_key} is not an object; scored as empty")

    known = {spec.payload_key for spec in profile.roster} | {"user_type"}
    for key in payload:
        if key not in known:
            issues.append(f"Unexpected key ignored: {key}")

    return True, issues


def load_intake_file(file_path: str) -> dict[str, Any]:
    """Load an intake JSON file from disk.

    Raises:
        IntakeValidationError: If the file is missing or not a JSON object.
    """
    path = Path(file_path)
    if not path.exists():
        raise IntakeValidationError(f"Intake file not found: {file_path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise IntakeValidationError(f"Intake file is not valid JSON: {e}") from e

    # Handle array wrapper (file is JSON array with one object)
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        raise IntakeValidationError(
            f"Intake payload must be a JSON object, got {type(data).__name__}"
        )
    return data


class ReadinessEngine:
    """Deterministic readiness scoring and implementation planning.

    Usage:
        engine = ReadinessEngine()
        assessment = engine.assess(payload)
        print(assessment.result.readiness_score.overall)
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize the engine with optional configuration (defaults otherwise)."""
        self.config = config or EngineConfig()

    def score(self, payload: Union[IntakeResponse, dict[str, Any]]) -> ReadinessResult:
        """Score an intake against its persona profile."""
        intake = parse_intake(payload)
        profile = get_profile(intake.persona, self.config.scoring.weight_overrides)
        return score_intake(
            intake,
            profile,
            confidence_thresholds=self.config.scoring.timeline_confidence.as_tuple(),
        )

    def plan(
        self,
        payload: Union[IntakeResponse, dict[str, Any]],
        today: Optional[date] = None,
    ) -> ImplementationPlan:
        """Synthesize an implementation plan from an intake."""
        intake = parse_intake(payload)
        return synthesize_plan(
            plan_fields(intake.sections),
            today=today,
            base_weeks=self.config.planning.base_weeks,
        )

    def assess(
        self,
        payload: Union[IntakeResponse, dict[str, Any]],
        today: Optional[date] = None,
        include_plan: bool = True,
    ) -> ReadinessAssessment:
        """Score an intake and, optionally, synthesize its plan.

        Args:
            payload: Raw intake object or a parsed IntakeResponse
            today: Plan start date (defaults to date.today())
            include_plan: Whether to synthesize the implementation plan

        Returns:
            ReadinessAssessment combining both results

        Raises:
            IntakeValidationError: If the payload is not an object.
        """
        intake = parse_intake(payload)
        logger.info("Assessing %s intake (%d sections)", intake.persona.value, len(intake.sections))

        result = self.score(intake)
        plan = self.plan(intake, today=today) if include_plan else None

        return ReadinessAssessment(
            scoring_version=SCORING_VERSION,
            result=result,
            implementation_plan=plan,
        )
