"""Plan Synthesizer - rule-based implementation plans.

Resolves each decision axis of an intake to a tier, collects the matching
PlanRule contributions into phases, then filters and renumbers the phases
and estimates the go-live date.

Algorithm:
1. Start from the eight canonical phases, all empty
2. Apply axes in order: complexity, risks, template volume, workflow,
   custom development, migration, integrations, timeline
3. Migration volume "none" skips every migration contribution
4. weeks = round_half_up(base_weeks * complexity_mult * go_live_mult)
5. Drop empty phases
6. Renumber 1..N and fill duration, dependencies and status

The synthesizer is total: unrecognized values fall back to default tiers
(recorded in internal_notes) and it never raises.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence

from .classifiers import (
    as_list,
    as_mapping,
    as_text,
    classify_complexity,
    classify_go_live,
    classify_migration_volume,
    classify_template_volume,
    classify_workflow_complexity,
    is_present,
    normalize_risk_tag,
    round_half_up,
)
from .plan_rules import (
    AXIS_COMPLEXITY,
    AXIS_CUSTOM_DEVELOPMENT,
    AXIS_INTEGRATIONS,
    AXIS_MIGRATION,
    AXIS_ORDER,
    AXIS_RISKS,
    AXIS_TEMPLATE_VOLUME,
    AXIS_TIMELINE,
    AXIS_WORKFLOW,
    CANONICAL_PHASES,
    COMPLEXITY_MULTIPLIERS,
    COMPLEXITY_RULES,
    CUSTOM_DEVELOPMENT_RULES,
    ENGINEERING_INTEGRATIONS,
    GO_LIVE_MULTIPLIERS,
    GO_LIVE_RULES,
    INSERTED_PHASES,
    INTEGRATION_ENGINEERING_RULE,
    INTEGRATION_RULES,
    INTEGRATIONS,
    MIGRATION_ENGINEERING_RULES,
    MIGRATION_UAT_HOURS,
    MIGRATION_VOLUME_RULES,
    RISK_RULES,
    TEMPLATE_VOLUME_RULES,
    WORKFLOW_RULES,
    PlanRule,
)
from .schema import (
    ComplexityTier,
    CustomDevelopmentFlag,
    GoLiveTier,
    ImplementationPlan,
    ImplementationPlanPhase,
    IntegrationType,
    MigrationVolumeTier,
    RiskTag,
    TemplateVolumeTier,
    WorkflowComplexityTier,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_WEEKS = 8

_NO_BLOCKERS = ("no", "none", "n/a", "na")


# =============================================================================
# Axis resolution
# =============================================================================


@dataclass(frozen=True)
class PlanInputs:
    """Tiers and flags resolved from an intake, one per decision axis."""
    complexity: ComplexityTier = ComplexityTier.MEDIUM
    risk_tags: tuple[RiskTag, ...] = ()
    template_volume: TemplateVolumeTier = TemplateVolumeTier.MEDIUM
    workflow: WorkflowComplexityTier = WorkflowComplexityTier.SIMPLE
    custom_development: CustomDevelopmentFlag = CustomDevelopmentFlag.NONE
    migration_volume: MigrationVolumeTier = MigrationVolumeTier.NONE
    csv_migration: bool = False
    integration_types: tuple[IntegrationType, ...] = ()
    integration_engineering: bool = False
    go_live: GoLiveTier = GoLiveTier.WEEKS_8_12
    has_blockers: bool = False
    notes: tuple[str, ...] = ()


def _resolve_tier(value: Any, resolver: Callable, default, label: str, notes: list[str]):
    """Resolve a tier, recording unrecognized (present) values in notes."""
    tier = resolver(value, default=None)
    if tier is not None:
        return tier
    if as_text(value):
        notes.append(f"Unrecognized {label} '{as_text(value)}'; planned as {default.value}")
        logger.debug("Unrecognized %s %r, defaulting to %s", label, value, default.value)
    return default


def match_risk_tag(value: Any) -> Optional[RiskTag]:
    """First vocabulary tag contained in the normalized risk text."""
    normalized = normalize_risk_tag(value)
    if not normalized:
        return None
    for tag in RiskTag:
        if tag.value in normalized:
            return tag
    return None


def resolve_plan_inputs(fields: Mapping[str, Any]) -> PlanInputs:
    """Resolve every planning axis from a flat field mapping."""
    fields = as_mapping(fields)
    notes: list[str] = []

    complexity = _resolve_tier(
        fields.get("complexity"), classify_complexity, ComplexityTier.MEDIUM, "complexity", notes,
    )
    template_volume = _resolve_tier(
        fields.get("template_count"), classify_template_volume, TemplateVolumeTier.MEDIUM,
        "template volume", notes,
    )
    workflow = _resolve_tier(
        fields.get("workflow_complexity"), classify_workflow_complexity, WorkflowComplexityTier.SIMPLE,
        "workflow complexity", notes,
    )
    migration_volume = _resolve_tier(
        fields.get("migration_volume"), classify_migration_volume, MigrationVolumeTier.NONE,
        "migration volume", notes,
    )
    go_live = _resolve_tier(
        fields.get("go_live_expectation"), classify_go_live, GoLiveTier.WEEKS_8_12,
        "go-live expectation", notes,
    )

    risk_tags: list[RiskTag] = []
    for risk in as_list(fields.get("known_risks")):
        tag = match_risk_tag(risk)
        if tag is None:
            notes.append(f"Risk '{as_text(risk)}' has no plan rule; review manually")
        elif tag not in risk_tags:
            risk_tags.append(tag)

    custom_development = CustomDevelopmentFlag.NONE
    if as_text(fields.get("custom_development")).lower().startswith("yes"):
        if is_present(fields.get("custom_development_details")):
            custom_development = CustomDevelopmentFlag.WITH_DETAILS
        else:
            custom_development = CustomDevelopmentFlag.NEEDS_SCOPING

    integration_types: list[IntegrationType] = []
    for raw in as_list(fields.get("integration_types")):
        integration_type = IntegrationType.from_string(raw)
        if integration_type is None:
            notes.append(f"Integration type '{as_text(raw)}' has no plan rule; scope separately")
        elif integration_type not in integration_types:
            integration_types.append(integration_type)

    effort = as_text(fields.get("integration_engineering_effort")).lower()
    integration_engineering = (
        "high" in effort
        or effort == "yes"
        or any(t in ENGINEERING_INTEGRATIONS for t in integration_types)
    )

    blockers = fields.get("pre_known_blockers") or fields.get("known_blockers")
    has_blockers = is_present(blockers) and as_text(blockers).lower() not in _NO_BLOCKERS

    return PlanInputs(
        complexity=complexity,
        risk_tags=tuple(risk_tags),
        template_volume=template_volume,
        workflow=workflow,
        custom_development=custom_development,
        migration_volume=migration_volume,
        csv_migration=as_text(fields.get("csv_migration_required")).lower().startswith("yes"),
        integration_types=tuple(integration_types),
        integration_engineering=integration_engineering,
        go_live=go_live,
        has_blockers=has_blockers,
        notes=tuple(notes),
    )


# =============================================================================
# Axis contributions
# =============================================================================

AxisContribution = tuple[list[PlanRule], list[str]]


def _complexity_rules(inputs: PlanInputs) -> AxisContribution:
    return list(COMPLEXITY_RULES[inputs.complexity]), []


def _risk_rules(inputs: PlanInputs) -> AxisContribution:
    return [rule for tag in inputs.risk_tags for rule in RISK_RULES[tag]], []


def _template_volume_rules(inputs: PlanInputs) -> AxisContribution:
    return list(TEMPLATE_VOLUME_RULES[inputs.template_volume]), []


def _workflow_rules(inputs: PlanInputs) -> AxisContribution:
    return list(WORKFLOW_RULES[inputs.workflow]), []


def _custom_development_rules(inputs: PlanInputs) -> AxisContribution:
    return list(CUSTOM_DEVELOPMENT_RULES[inputs.custom_development]), []


def _migration_rules(inputs: PlanInputs) -> AxisContribution:
    if inputs.migration_volume == MigrationVolumeTier.NONE:
        return [], []
    rules = list(MIGRATION_VOLUME_RULES[inputs.migration_volume])
    notes = []
    if inputs.csv_migration:
        rules.extend(MIGRATION_ENGINEERING_RULES)
        hours = MIGRATION_UAT_HOURS[inputs.migration_volume]
        notes.append(f"Reserve {hours}h of customer UAT for migrated contracts ({inputs.migration_volume.value} volume)")
    return rules, notes


def _integration_rules(inputs: PlanInputs) -> AxisContribution:
    rules = [rule for t in inputs.integration_types for rule in INTEGRATION_RULES[t]]
    if inputs.integration_engineering:
        rules.append(INTEGRATION_ENGINEERING_RULE)
    return rules, []


def _timeline_rules(inputs: PlanInputs) -> AxisContribution:
    return list(GO_LIVE_RULES[inputs.go_live]), []


AXIS_CONTRIBUTIONS: Mapping[str, Callable[[PlanInputs], AxisContribution]] = MappingProxyType({
    AXIS_COMPLEXITY: _complexity_rules,
    AXIS_RISKS: _risk_rules,
    AXIS_TEMPLATE_VOLUME: _template_volume_rules,
    AXIS_WORKFLOW: _workflow_rules,
    AXIS_CUSTOM_DEVELOPMENT: _custom_development_rules,
    AXIS_MIGRATION: _migration_rules,
    AXIS_INTEGRATIONS: _integration_rules,
    AXIS_TIMELINE: _timeline_rules,
})


# =============================================================================
# Synthesis
# =============================================================================


def _ordered_phase_names(phases: Mapping[str, list]) -> list[str]:
    """Canonical order, inserted phases after their anchor, any others last."""
    ordered: list[str] = []
    for name in CANONICAL_PHASES:
        ordered.append(name)
        ordered.extend(extra for extra, anchor in INSERTED_PHASES.items() if anchor == name and extra in phases)
    ordered.extend(sorted(name for name in phases if name not in ordered))
    return ordered


def _phase_status(index: int, name: str, inputs: PlanInputs) -> str:
    if index == 1:
        return "Ready"
    if name == INTEGRATIONS and inputs.has_blockers:
        return "Blocked"
    return "Scheduled"


def estimate_weeks(inputs: PlanInputs, base_weeks: int = DEFAULT_BASE_WEEKS) -> int:
    """Estimated weeks to go-live, never less than one."""
    weeks = round_half_up(
        Decimal(base_weeks) * COMPLEXITY_MULTIPLIERS[inputs.complexity] * GO_LIVE_MULTIPLIERS[inputs.go_live]
    )
    return max(1, weeks)


def synthesize_plan(
    fields: Mapping[str, Any],
    today: Optional[date] = None,
    base_weeks: int = DEFAULT_BASE_WEEKS,
    axis_order: Sequence[str] = AXIS_ORDER,
) -> ImplementationPlan:
    """Build an implementation plan from a flat intake field mapping.

    Args:
        fields: Flat mapping of intake fields (see plan_fields)
        today: Start date for the go-live estimate (defaults to date.today())
        base_weeks: Baseline duration before multipliers
        axis_order: Axis application order; any permutation yields the same phases

    Returns:
        ImplementationPlan with renumbered, non-empty phases
    """
    inputs = resolve_plan_inputs(fields)
    notes = list(inputs.notes)

    phases: dict[str, list[PlanRule]] = {name: [] for name in CANONICAL_PHASES}
    for axis in axis_order:
        contribute = AXIS_CONTRIBUTIONS.get(axis)
        if contribute is None:
            notes.append(f"Unknown plan axis '{axis}' ignored")
            continue
        rules, axis_notes = contribute(inputs)
        for rule in rules:
            phases.setdefault(rule.target_phase, []).append(rule)
        notes.extend(axis_notes)

    weeks = estimate_weeks(inputs, base_weeks)
    start = today or date.today()

    plan_phases: list[ImplementationPlanPhase] = []
    previous: Optional[str] = None
    for name in _ordered_phase_names(phases):
        rules = phases.get(name)
        if not rules:
            continue
        number = len(plan_phases) + 1
        plan_phases.append(ImplementationPlanPhase(
            phase=number,
            name=name,
            duration=f"{sum(rule.duration_hours for rule in rules)} hours",
            activities=[rule.format_activity() for rule in rules],
            dependencies=previous,
            status=_phase_status(number, name, inputs),
        ))
        previous = name

    logger.debug(
        "Synthesized plan: %d phases, %d weeks (complexity=%s, go_live=%s)",
        len(plan_phases), weeks, inputs.complexity.value, inputs.go_live.value,
    )

    return ImplementationPlan(
        recommended_go_live=start + timedelta(days=7 * weeks),
        estimated_timeline=f"{weeks} weeks",
        estimated_weeks=weeks,
        phases=plan_phases,
        internal_notes=notes,
    )


def plan_fields(sections: Mapping[str, Mapping[str, Any]]) -> dict[str, Any]:
    """Flatten intake sections into one field mapping (earlier sections win)."""
    fields: dict[str, Any] = {}
    for section in sections.values():
        for key, value in as_mapping(section).items():
            fields.setdefault(key, value)
    return fields
