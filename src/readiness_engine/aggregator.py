"""Weighted Aggregator and Status Classifier.

Combines section scores into the overall readiness score with Decimal
arithmetic (ROUND_HALF_UP), picks a status band and derives the timeline
confidence.
"""

import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from .classifiers import round_half_up
from .personas import PersonaProfile, StatusBand, validate_weights
from .schema import IntakeResponse, ReadinessResult, ReadinessScore, StatusClassification

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLDS = (85, 70)  # high, medium


def aggregate(breakdown: Mapping[str, int], weights: Mapping[str, Decimal]) -> int:
    """Weighted sum of section scores, rounded half-up and clamped to [0, 100].

    Raises ValueError if the weights do not cover exactly the breakdown keys
    or do not sum to 1.
    """
    validate_weights(weights, list(breakdown))
    total = sum(
        (Decimal(breakdown[key]) * Decimal(weights[key]) for key in breakdown),
        Decimal("0"),
    )
    return max(0, min(100, round_half_up(total)))


def classify_status(overall: int, bands: Sequence[StatusBand]) -> StatusClassification:
    """Select the first band (descending) whose lower bound is <= overall."""
    for band in bands:
        if overall >= band.lower_bound:
            return StatusClassification(label=band.label, description=band.description)
    # Validated bands end at 0, so only negative input lands here
    lowest = bands[-1]
    return StatusClassification(label=lowest.label, description=lowest.description)


def classify_timeline_confidence(overall: int, thresholds: tuple[int, int] = DEFAULT_CONFIDENCE_THRESHOLDS) -> str:
    high, medium = thresholds
    if overall >= high:
        return "high"
    if overall >= medium:
        return "medium"
    return "low"


def score_intake(
    intake: IntakeResponse,
    profile: PersonaProfile,
    confidence_thresholds: Optional[tuple[int, int]] = None,
) -> ReadinessResult:
    """Score every section of the profile's roster and classify the result.

    Args:
        intake: Normalized intake response
        profile: Persona profile (roster, weights, bands)
        confidence_thresholds: (high, medium) overall-score thresholds

    Returns:
        ReadinessResult with breakdown, rationale trail and status
    """
    breakdown: dict[str, int] = {}
    rationales: dict[str, dict[str, str]] = {}

    for spec in profile.roster:
        section_score = spec.scorer(intake.section(spec.payload_key))
        breakdown[spec.key] = section_score.score
        rationales[spec.key] = section_score.rationale
        logger.debug("Section %s scored %d", spec.key, section_score.score)

    overall = aggregate(breakdown, profile.weights)
    status = classify_status(overall, profile.bands)
    confidence = classify_timeline_confidence(overall, confidence_thresholds or DEFAULT_CONFIDENCE_THRESHOLDS)

    logger.info("Readiness for %s persona: %d (%s)", profile.persona.value, overall, status.label)

    return ReadinessResult(
        persona=profile.persona,
        readiness_score=ReadinessScore(overall=overall, breakdown=breakdown),
        status_label=status.label,
        status_description=status.description,
        rationales=rationales,
        timeline_confidence=confidence,
    )
