"""Field Classifiers - shared by the scoring and planning paths.

Pure helpers that turn a raw questionnaire field (string, array, object)
into a completeness tier, a point value, or an enumerated tier. None of
them raise: unexpected shapes resolve to the "missing" equivalent and
unrecognized strings resolve to a caller-supplied default.
"""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence, TypeVar

from .schema import (
    Completeness,
    ComplexityTier,
    GoLiveTier,
    MigrationVolumeTier,
    SensitivityTier,
    TemplateVolumeTier,
    WorkflowComplexityTier,
)

T = TypeVar("T")

# Strings shorter than this are treated as a draft answer
PARTIAL_TEXT_LENGTH = 10

# Systems whose integration requires infosec sign-off
SENSITIVE_SYSTEMS = ("salesforce", "sap", "oracle", "workday", "okta", "azure", "aws")

_NUMBER_PATTERN = re.compile(r"\d[\d,]*")


# =============================================================================
# Shape normalization
# =============================================================================


def as_text(value: Any) -> str:
    """Return a stripped string for text-like values, "" otherwise."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def as_list(value: Any) -> list:
    """Return the non-empty items of a list value; scalars count as empty."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if item not in (None, "")]


def as_number(value: Any) -> Optional[float]:
    """Return a numeric value, parsing numeric strings; None if not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.replace(",", "").strip())
        except ValueError:
            return None
    return None


def as_mapping(value: Any) -> dict:
    """Return the value if it is an object, {} otherwise."""
    return value if isinstance(value, dict) else {}


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# Completeness, enum and multi-select classifiers
# =============================================================================


def classify_completeness(value: Any) -> Completeness:
    """Classify a raw field as missing, partial or complete.

    Missing: None, False, zero, blank strings, empty collections.
    Partial: strings shorter than PARTIAL_TEXT_LENGTH characters.
    Complete: everything else.
    """
    if value is None or value is False:
        return Completeness.MISSING
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return Completeness.MISSING
        if len(text) < PARTIAL_TEXT_LENGTH:
            return Completeness.PARTIAL
        return Completeness.COMPLETE
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Completeness.COMPLETE if value != 0 else Completeness.MISSING
    if isinstance(value, (list, tuple, dict, set)):
        return Completeness.COMPLETE if len(value) > 0 else Completeness.MISSING
    return Completeness.COMPLETE


def is_present(value: Any) -> bool:
    """True when a field is partial or complete."""
    return classify_completeness(value) != Completeness.MISSING


def presence_points(value: Any, max_points: int) -> tuple[int, Completeness]:
    """Award full, half (floored) or zero points by completeness."""
    completeness = classify_completeness(value)
    if completeness == Completeness.COMPLETE:
        return max_points, completeness
    if completeness == Completeness.PARTIAL:
        return max_points // 2, completeness
    return 0, completeness


def match_enum(value: Any, table: Sequence[tuple[str, T]]) -> Optional[T]:
    """Case-insensitive substring match against an ordered label table.

    The first label contained in the value wins; None when nothing matches.
    """
    text = as_text(value).lower()
    if not text:
        return None
    for label, result in table:
        if label in text:
            return result
    return None


def classify_enum(value: Any, table: Sequence[tuple[str, T]], default: T) -> T:
    """Like match_enum, but unmatched values resolve to a default."""
    result = match_enum(value, table)
    return default if result is None else result


def classify_multi_select(values: Any, base: int, increment: int, cap: int) -> int:
    """Points for a multi-select field: 0 if empty, else base + increment per extra item, capped."""
    count = len(as_list(values))
    if count == 0:
        return 0
    return min(cap, base + increment * (count - 1))


# =============================================================================
# Tier resolvers
# =============================================================================


_COMPLEXITY_LITERALS = {
    "low": ComplexityTier.LOW,
    "medium": ComplexityTier.MEDIUM,
    "moderate": ComplexityTier.MEDIUM,
    "high": ComplexityTier.HIGH,
}

_WORKFLOW_TABLE = (
    ("complex", WorkflowComplexityTier.COMPLEX),
    ("medium", WorkflowComplexityTier.MEDIUM),
    ("moderate", WorkflowComplexityTier.MEDIUM),
    ("simple", WorkflowComplexityTier.SIMPLE),
)

_GO_LIVE_TABLE = (
    ("16+", GoLiveTier.WEEKS_16_PLUS),
    ("12-16", GoLiveTier.WEEKS_12_16),
    ("8-12", GoLiveTier.WEEKS_8_12),
    ("4-8", GoLiveTier.WEEKS_4_8),
)


def classify_complexity(value: Any, default: Optional[ComplexityTier] = ComplexityTier.MEDIUM) -> Optional[ComplexityTier]:
    """Resolve complexity by literal match (low/medium/high)."""
    return _COMPLEXITY_LITERALS.get(as_text(value).lower(), default)


def classify_workflow_complexity(
    value: Any,
    default: Optional[WorkflowComplexityTier] = WorkflowComplexityTier.SIMPLE,
) -> Optional[WorkflowComplexityTier]:
    """Resolve workflow complexity by substring match."""
    return classify_enum(value, _WORKFLOW_TABLE, default)


def classify_go_live(value: Any, default: Optional[GoLiveTier] = GoLiveTier.WEEKS_8_12) -> Optional[GoLiveTier]:
    """Resolve a go-live expectation such as "8-12 weeks" into its bucket."""
    compact = as_text(value).replace(" ", "")
    return classify_enum(compact, _GO_LIVE_TABLE, default)


def count_lower_bound(value: Any) -> Optional[int]:
    """Lower bound of a count or count-range string ("20-50" -> 20, "<10" -> 9)."""
    text = as_text(value).lower()
    match = _NUMBER_PATTERN.search(text)
    if not match:
        return None
    number = int(match.group().replace(",", ""))
    if "<" in text[:match.start()] or text.startswith(("under", "less than")):
        number = max(0, number - 1)
    return number


def classify_template_volume(
    value: Any,
    default: Optional[TemplateVolumeTier] = TemplateVolumeTier.MEDIUM,
) -> Optional[TemplateVolumeTier]:
    """Bucket a template count (number or range string) into a volume tier."""
    text = as_text(value).lower()
    if not text:
        return default
    for tier in TemplateVolumeTier:
        if text == tier.value:
            return tier
    lower = count_lower_bound(text)
    if lower is None:
        return default
    if lower < 10:
        return TemplateVolumeTier.SMALL
    if lower < 50:
        return TemplateVolumeTier.MEDIUM
    return TemplateVolumeTier.LARGE


def classify_migration_volume(
    value: Any,
    default: Optional[MigrationVolumeTier] = MigrationVolumeTier.NONE,
) -> Optional[MigrationVolumeTier]:
    """Resolve migration volume by literal tier name, then by count range."""
    text = as_text(value).lower()
    if not text:
        return default
    for tier in MigrationVolumeTier:
        if text == tier.value:
            return tier
    lower = count_lower_bound(text)
    if lower is None:
        return default
    if lower == 0:
        return MigrationVolumeTier.NONE
    if lower < 1000:
        return MigrationVolumeTier.SMALL
    if lower < 5000:
        return MigrationVolumeTier.MEDIUM
    return MigrationVolumeTier.LARGE


def normalize_risk_tag(value: Any) -> str:
    """Normalize free text into a snake_case tag ("Security review delays" -> "security_review_delays")."""
    return re.sub(r"[^a-z0-9]+", "_", as_text(value).lower()).strip("_")


def has_sensitive_system(systems: Any) -> bool:
    """True when any selected system matches the sensitive-system list."""
    return any(
        sensitive in as_text(system).lower()
        for system in as_list(systems)
        for sensitive in SENSITIVE_SYSTEMS
    )


def classify_sensitivity(systems: Any, approval: Any) -> Optional[SensitivityTier]:
    """Sensitivity tier for an integration whose infosec approval is outstanding.

    Returns None when no penalty applies: no systems, a blank or "no"
    approval (nothing outstanding), or an approval state that carries no
    penalty.
    """
    approval_text = as_text(approval).lower()
    if not as_list(systems) or approval_text in ("", "no"):
        return None

    not_started = "not started" in approval_text
    in_progress = "in-progress" in approval_text or "in progress" in approval_text

    if has_sensitive_system(systems):
        if not_started:
            return SensitivityTier.HIGH
        if in_progress:
            return SensitivityTier.MEDIUM
        return None
    return SensitivityTier.LOW if not_started else None
