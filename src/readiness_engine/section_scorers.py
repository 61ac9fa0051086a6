"""Section Scorers - one pure function per questionnaire section.

Each scorer maps a raw section object to a 0-100 SectionScore with a
rationale entry per criterion. With every field present at its best tier
and every gate open, the criterion maxima of a section sum to exactly 100.

Scoring policies:
- Presence fields: complete = full points, partial = half (floored), missing = 0
- Enumerated fields: explicit point table; present-but-unmapped values
  score at the documented mid-tier instead of 0
- Multi-select fields: classify_multi_select(base, increment, cap)
- Gated fields: scored only when the gate is not its opt-out literal; an
  opted-out gate leaves only the gate's own points
- Penalties subtract points (floored at 0); a blocking rule forces 0
"""

import logging
from typing import Any, Optional, Sequence

from .classifiers import (
    as_list,
    as_mapping,
    as_number,
    as_text,
    classify_complexity,
    classify_go_live,
    classify_migration_volume,
    classify_multi_select,
    classify_sensitivity,
    classify_template_volume,
    classify_workflow_complexity,
    count_lower_bound,
    is_present,
    match_enum,
    presence_points,
)
from .schema import (
    Completeness,
    ComplexityTier,
    GoLiveTier,
    SectionScore,
    SensitivityTier,
    TemplateVolumeTier,
    WorkflowComplexityTier,
)

logger = logging.getLogger(__name__)

# Points deducted for integrations whose infosec approval is outstanding
SENSITIVITY_PENALTIES = {
    SensitivityTier.HIGH: 25,
    SensitivityTier.MEDIUM: 15,
    SensitivityTier.LOW: 10,
}

_COMPLETENESS_TEXT = {
    Completeness.COMPLETE: "complete & clear",
    Completeness.PARTIAL: "partial / draft",
    Completeness.MISSING: "missing",
}


class SectionTally:
    """Accumulates points and rationale for one section."""

    def __init__(self):
        self.points = 0
        self.rationale: dict[str, str] = {}
        self.blocked = False

    def award(self, criterion: str, points: int, reason: str) -> int:
        self.points += points
        self.rationale[criterion] = f"{reason} → {points} pts"
        return points

    def note(self, criterion: str, reason: str) -> None:
        self.rationale[criterion] = reason

    def penalize(self, criterion: str, points: int, reason: str) -> None:
        self.points -= points
        self.rationale[criterion] = f"{reason} → -{points} pts penalty"

    def block(self, criterion: str, reason: str) -> None:
        self.blocked = True
        self.rationale[criterion] = f"{reason} → BLOCKING → section = 0"

    def result(self) -> SectionScore:
        score = 0 if self.blocked else max(0, min(100, self.points))
        return SectionScore(score=score, rationale=self.rationale)


# =============================================================================
# Criterion helpers
# =============================================================================


def _presence(tally: SectionTally, section: dict, field: str, max_points: int, label: str) -> int:
    points, completeness = presence_points(section.get(field), max_points)
    return tally.award(field, points, f"{label} {_COMPLETENESS_TEXT[completeness]}")


def _enum(
    tally: SectionTally,
    section: dict,
    field: str,
    table: Sequence[tuple[str, int]],
    mid_points: int,
    label: str,
) -> int:
    text = as_text(section.get(field))
    if not text:
        return tally.award(field, 0, f"{label} missing")
    points = match_enum(text, table)
    if points is None:
        return tally.award(field, mid_points, f"{label} '{text}' not recognized, mid-tier")
    return tally.award(field, points, f"{label}: {text}")


def _multi(
    tally: SectionTally,
    section: dict,
    field: str,
    base: int,
    increment: int,
    cap: int,
    label: str,
) -> int:
    items = as_list(section.get(field))
    points = classify_multi_select(items, base, increment, cap)
    if items:
        return tally.award(field, points, f"{len(items)} {label} specified")
    return tally.award(field, points, f"No {label} specified")


def _count(tally: SectionTally, section: dict, field: str, points: int, mid_points: int, label: str) -> int:
    """Full points for a parseable count or count range, mid-tier for other text."""
    raw = section.get(field)
    if count_lower_bound(raw) is not None:
        return tally.award(field, points, f"{label}: {as_text(raw)}")
    if as_text(raw):
        return tally.award(field, mid_points, f"{label} '{as_text(raw)}' not a count, mid-tier")
    return tally.award(field, 0, f"{label} missing")


def _tiered(
    tally: SectionTally,
    section: dict,
    field: str,
    tier: Optional[Any],
    points_by_tier: dict,
    mid_points: int,
    label: str,
) -> int:
    """Award points for a value already resolved to a tier (None = unrecognized)."""
    text = as_text(section.get(field))
    if not text:
        return tally.award(field, 0, f"{label} missing")
    if tier is None:
        return tally.award(field, mid_points, f"{label} '{text}' not recognized, mid-tier")
    return tally.award(field, points_by_tier[tier], f"{label}: {tier.value}")


def gate_open(value: Any, opt_out: str = "no") -> bool:
    """A gate is open unless it carries its opt-out literal."""
    return as_text(value).lower() != opt_out


def _gate(tally: SectionTally, section: dict, field: str, points: int, label: str, opt_out: str = "no") -> bool:
    raw = section.get(field)
    if as_text(raw):
        tally.award(field, points, f"{label} answered ({as_text(raw)})")
    else:
        tally.award(field, 0, f"{label} not answered")
    return gate_open(raw, opt_out)


def _requirement(
    tally: SectionTally,
    section: dict,
    field: str,
    table: Sequence[tuple[str, int]],
    mid_points: int,
    best_points: int,
    label: str,
) -> int:
    """Enum criterion for a requirement field: blank means nothing is required."""
    if not as_text(section.get(field)):
        return tally.award(field, best_points, f"{label}: no requirement stated")
    return _enum(tally, section, field, table, mid_points, label)


def _explicit_no(value: Any) -> bool:
    return as_text(value).lower() in ("no", "none")


def _apply_sensitivity_penalty(tally: SectionTally, systems: Any, approval: Any) -> None:
    tier = classify_sensitivity(systems, approval)
    if tier is None:
        return
    penalty = SENSITIVITY_PENALTIES[tier]
    tally.penalize(
        "infosec_penalty",
        penalty,
        f"{tier.value.capitalize()}-sensitivity integration without infosec approval",
    )


# Shared enum tables (first match wins, so longer/negated labels come first)
_YES_NO_UNSURE = (("not sure", 10), ("yes", 20), ("no", 0))


# =============================================================================
# Standard persona (seven-section questionnaire)
# =============================================================================


def _poc_complete(poc: dict) -> bool:
    return (
        is_present(poc.get("name"))
        and is_present(poc.get("email"))
        and (is_present(poc.get("role")) or is_present(poc.get("timezone")))
    )


def score_account_stakeholder(section: dict) -> SectionScore:
    """Account & Stakeholders."""
    tally = SectionTally()

    for field, full, label in (("primary_poc", 30, "Primary POC"), ("legal_poc", 20, "Legal POC")):
        poc = as_mapping(section.get(field))
        if _poc_complete(poc):
            tally.award(field, full, f"{label} complete (name, email, role/timezone)")
        elif poc:
            tally.award(field, full // 2, f"{label} partial")
        else:
            tally.award(field, 0, f"{label} missing")

    required = section.get("integrations_required")
    if is_present(required) and not _explicit_no(required):
        poc = as_mapping(section.get("technical_poc"))
        if _poc_complete(poc):
            tally.award("technical_poc", 20, "Technical POC complete")
        elif poc:
            tally.award("technical_poc", 10, "Technical POC partial")
        else:
            tally.award("technical_poc", 0, "Technical POC missing")
    else:
        tally.note("technical_poc", "No integrations required → N/A")

    # No dedicated decision-maker field: the primary (or legal) POC name stands in
    proxy = as_mapping(section.get("primary_poc")).get("name") or as_mapping(section.get("legal_poc")).get("name")
    points, completeness = presence_points(proxy, 20)
    tally.award("decision_maker", points, f"Decision-maker (POC name proxy) {_COMPLETENESS_TEXT[completeness]}")

    has_channels = bool(as_list(section.get("communication_channels")))
    has_availability = is_present(section.get("availability"))
    if has_channels and has_availability:
        tally.award("communication_cadence", 10, "Communication channels and availability specified")
    elif has_channels or has_availability:
        tally.award("communication_cadence", 5, "Partial communication info")
    else:
        tally.award("communication_cadence", 0, "Communication cadence missing")

    return tally.result()


def score_order_form_scope(section: dict) -> SectionScore:
    """Order Form Scope."""
    tally = SectionTally()
    _multi(tally, section, "purchased_modules", 20, 10, 40, "module(s)")
    _presence(tally, section, "additional_addons", 30, "Add-ons / custom features")

    addons = as_text(section.get("additional_addons"))
    if len(addons) > 50:
        tally.award("success_criteria", 30, "Success criteria / acceptance defined")
    elif is_present(addons):
        tally.award("success_criteria", 15, "Partial success criteria")
    else:
        tally.award("success_criteria", 0, "Success criteria missing")
    return tally.result()


_CONDITIONAL_LOGIC = (("none", 20), ("simple", 20), ("moderate", 10), ("complex", 0))


def score_template_readiness(section: dict) -> SectionScore:
    """Template Readiness."""
    tally = SectionTally()
    total = as_number(section.get("template_count")) or 0
    finalized = as_number(section.get("templates_finalized_count")) or 0

    if total > 0:
        ratio = finalized / total * 100
        summary = f"{finalized:g} of {total:g} templates finalized ({ratio:.1f}%)"
        if ratio >= 80:
            tally.award("templates_finalized_ratio", 30, f"{summary}, ≥80% bucket")
        elif ratio >= 30:
            tally.award("templates_finalized_ratio", 15, f"{summary}, 30-79% bucket")
        else:
            tally.award("templates_finalized_ratio", 0, f"{summary}, <30% bucket")
    else:
        tally.award("templates_finalized_ratio", 0, "Template count missing")

    _multi(tally, section, "template_formats", 15, 0, 15, "template format(s)")
    _enum(tally, section, "conditional_logic", _CONDITIONAL_LOGIC, 10, "Conditional logic")

    changes = section.get("clause_level_changes")
    if not is_present(changes) or _explicit_no(changes):
        tally.award("clause_library", 15, "Clause library present (no clause-level changes needed)")
    else:
        tally.award("clause_library", 0, "Clause library missing or incomplete")

    matrices = section.get("approval_matrices_exist")
    if is_present(matrices) and not _explicit_no(matrices):
        tally.award("approval_matrices", 10, "Approval matrices exist")
    else:
        tally.award("approval_matrices", 0, "Approval matrices missing")

    if total <= 0:
        tally.award("volume_impact", 0, "Template count missing")
    elif total <= 5:
        tally.award("volume_impact", 10, f"{total:g} templates, 0-5 bucket")
    elif total <= 12:
        tally.award("volume_impact", 5, f"{total:g} templates, 6-12 bucket")
    else:
        tally.award("volume_impact", 0, f"{total:g} templates, >12 bucket")

    return tally.result()


_STRUCTURED_NAMING = (("100%", 20), ("fully", 20), ("partial", 10), ("none", 0), ("no", 0))
_EXISTING_METADATA = (("fully", 25), ("partial", 12), ("none", 0), ("no", 0))


def score_migration_readiness(section: dict) -> SectionScore:
    """Migration Readiness."""
    tally = SectionTally()
    count = as_number(section.get("contract_count")) or 0
    if count > 0:
        tally.award("contract_count", 20, f"Contract count specified: {count:g}")
    else:
        tally.award("contract_count", 0, "Contract count missing")

    _enum(tally, section, "structured_naming", _STRUCTURED_NAMING, 10, "Naming conventions")
    _multi(tally, section, "contract_formats", 15, 0, 15, "usable file format(s)")
    _enum(tally, section, "existing_metadata", _EXISTING_METADATA, 12, "Metadata availability")
    _presence(tally, section, "contract_types", 20, "Contract types mapping")
    return tally.result()


_SECURITY_APPROVAL = (("not started", 5), ("not sure", 10), ("in-progress", 10), ("in progress", 10), ("no", 20))


def score_integration_readiness(section: dict) -> SectionScore:
    """Integration Readiness (with infosec penalty and blocking rule)."""
    tally = SectionTally()
    systems = as_list(section.get("systems_to_integrate"))
    _multi(tally, section, "systems_to_integrate", 20, 10, 30, "system(s)")

    api_access = is_present(section.get("api_webhook_access")) and not _explicit_no(section.get("api_webhook_access"))
    admin = as_text(section.get("admin_access")).lower().replace(" ", "")
    technical_access = api_access and ("yes-all" in admin or "yes-some" in admin)

    if systems and not technical_access:
        logger.debug("Integration readiness blocked: %d systems without technical access", len(systems))
        tally.block("technical_access", "No technical access for required integrations")
    elif technical_access:
        tally.award("technical_access", 30, "Technical access available (API/webhook + admin access)")
    elif api_access:
        tally.award("technical_access", 15, "Partial technical access")
    else:
        tally.award("technical_access", 0, "No technical access")

    # Any other approval state (pending, yes) is worth 5
    _requirement(tally, section, "security_approval", _SECURITY_APPROVAL, 5, 20, "Security approval")

    owner = as_mapping(section.get("decision_maker"))
    if is_present(owner.get("name")) or is_present(owner.get("email")):
        tally.award("integration_owner", 10, "Integration owner identified")
    else:
        tally.award("integration_owner", 0, "Integration owner missing")

    _multi(tally, section, "expected_outcomes", 10, 0, 10, "success metric(s)")
    _apply_sensitivity_penalty(tally, systems, section.get("security_approval"))
    return tally.result()


_APPROVAL_WORKFLOW = (("documented", 35), ("informal", 25), ("none", 0), ("no", 0))


def score_business_process(section: dict) -> SectionScore:
    """Business Process."""
    tally = SectionTally()
    _enum(tally, section, "approval_workflow", _APPROVAL_WORKFLOW, 17, "Approval workflow")
    _presence(tally, section, "phase1_must_haves", 25, "Phase 1 must-haves")
    _presence(tally, section, "bottlenecks", 20, "Bottlenecks and mitigations")
    _multi(tally, section, "contract_generators", 10, 0, 10, "contract generator(s)")
    _presence(tally, section, "workflow_details", 10, "Workflow details (SLAs, frequency)")
    return tally.result()


_SECURITY_REVIEW = (
    ("completed", 40),
    ("not started", 0),
    ("in-progress", 20),
    ("in progress", 20),
    ("yes", 20),
    ("no", 40),
)
_DATA_RESIDENCY = (("not sure", 15), ("no", 30))
_CUSTOM_SSO = (("no", 20),)


def score_security_compliance(section: dict) -> SectionScore:
    """Security & Compliance."""
    tally = SectionTally()
    _enum(tally, section, "security_review", _SECURITY_REVIEW, 20, "Security questionnaire")
    # Any defined residency requirement is worth 10
    _requirement(tally, section, "data_residency", _DATA_RESIDENCY, 10, 30, "Data residency")
    _requirement(tally, section, "custom_sso", _CUSTOM_SSO, 10, 20, "Custom SSO/SCIM")
    _multi(tally, section, "security_reviews_needed", 10, 0, 10, "security review timeline item(s)")
    return tally.result()


# =============================================================================
# Prospect persona
# =============================================================================


def score_prospect_basics(section: dict) -> SectionScore:
    tally = SectionTally()
    _presence(tally, section, "company_name", 40, "Company name")
    _presence(tally, section, "industry", 30, "Industry")
    _count(tally, section, "user_count", 30, 15, "User count")
    return tally.result()


_CONTRACT_TEMPLATES = (("all available", 25), ("some", 15), ("partial", 15), ("in progress", 15), ("not sure", 10), ("no", 0))
_LEGACY_CONTRACTS = (("all available", 15), ("some", 10), ("partial", 10), ("not sure", 5), ("no", 0))
_YES_OR_NO_ANSWERED = (("not sure", 8), ("yes", 15), ("no", 15))


def score_prospect_scope_clarity(section: dict) -> SectionScore:
    tally = SectionTally()
    _multi(tally, section, "modules_interested", 20, 5, 30, "module(s) of interest")
    _enum(tally, section, "contract_templates", _CONTRACT_TEMPLATES, 12, "Contract templates")
    _enum(tally, section, "assisted_workflows", _YES_OR_NO_ANSWERED, 8, "Assisted workflows decision")

    if _gate(tally, section, "assisted_migration", 15, "Assisted migration decision"):
        _enum(tally, section, "legacy_contracts", _LEGACY_CONTRACTS, 8, "Legacy contracts")
    else:
        tally.note("legacy_contracts", "Assisted migration not needed → N/A")
    return tally.result()


_PROSPECT_API_ACCESS = (("not sure", 25), ("yes", 50), ("no", 0))


def score_prospect_systems_integrations(section: dict) -> SectionScore:
    tally = SectionTally()
    _multi(tally, section, "systems_used", 30, 10, 50, "system(s)")
    _enum(tally, section, "api_access", _PROSPECT_API_ACCESS, 25, "API access")
    if as_list(section.get("systems_used")) and _explicit_no(section.get("api_access")):
        tally.block("api_access", "Systems listed but no API access")
    return tally.result()


_GO_LIVE_TIMELINE = (
    ("0-3 months", 30),
    ("1-3 months", 30),
    ("3-6 months", 50),
    ("6-12 months", 50),
    ("12+", 20),
    ("exploring", 20),
)
_BUDGET_APPROVED = (("not sure", 10), ("in progress", 10), ("approved", 20), ("yes", 20), ("no", 0))


def score_prospect_timeline_readiness(section: dict) -> SectionScore:
    tally = SectionTally()
    _enum(tally, section, "go_live_timeline", _GO_LIVE_TIMELINE, 25, "Go-live timeline")
    _presence(tally, section, "biggest_concern", 30, "Biggest concern")
    _enum(tally, section, "budget_approved", _BUDGET_APPROVED, 10, "Budget approval")
    return tally.result()


def score_prospect_additional_context(section: dict) -> SectionScore:
    tally = SectionTally()
    _presence(tally, section, "internal_bottlenecks", 35, "Internal bottlenecks")
    _presence(tally, section, "compliance_deadlines", 30, "Compliance deadlines")
    _presence(tally, section, "past_clm_experience", 35, "Past CLM experience")
    return tally.result()


# =============================================================================
# Customer persona
# =============================================================================


def score_customer_stakeholders(section: dict) -> SectionScore:
    tally = SectionTally()
    _presence(tally, section, "primary_contact_name", 20, "Primary contact name")
    _presence(tally, section, "primary_contact_role", 10, "Primary contact role")
    _presence(tally, section, "technical_contact_name", 15, "Technical contact name")
    _presence(tally, section, "technical_contact_role", 5, "Technical contact role")
    _multi(tally, section, "team_distribution", 10, 5, 20, "team(s)")
    _presence(tally, section, "decision_approver", 30, "Decision approver")
    return tally.result()


_TEMPLATE_READINESS = (
    ("not started", 0),
    ("not ready", 0),
    ("in progress", 20),
    ("in review", 20),
    ("partial", 20),
    ("ready", 30),
    ("finalized", 30),
)


def score_customer_purchased_scope(section: dict) -> SectionScore:
    tally = SectionTally()
    _multi(tally, section, "purchased_modules", 20, 10, 40, "purchased module(s)")
    _count(tally, section, "template_count", 30, 15, "Template count")
    _enum(tally, section, "template_readiness", _TEMPLATE_READINESS, 15, "Template readiness")
    return tally.result()


_DATA_CLEANLINESS = (
    ("not sure", 18),
    ("not ", 10),
    ("unclean", 10),
    ("mostly clean", 25),
    ("very clean", 35),
    ("messy", 10),
    ("needs cleanup", 10),
    ("clean", 35),
)


def score_customer_migration(section: dict) -> SectionScore:
    tally = SectionTally()
    if not _gate(tally, section, "migration_needed", 20, "Migration need"):
        tally.note("migration_details", "Migration not needed → N/A")
        return tally.result()
    _count(tally, section, "migration_contract_count", 25, 12, "Migration contract count")
    _presence(tally, section, "contract_storage", 20, "Contract storage")
    _enum(tally, section, "data_cleanliness", _DATA_CLEANLINESS, 18, "Data cleanliness")
    return tally.result()


_CUSTOMER_API_ACCESS = (("not sure", 15), ("yes", 30), ("no", 0))


def score_customer_integrations(section: dict) -> SectionScore:
    tally = SectionTally()
    systems = as_list(section.get("integration_systems"))
    _multi(tally, section, "integration_systems", 20, 5, 30, "integration system(s)")
    _enum(tally, section, "api_access", _CUSTOMER_API_ACCESS, 15, "API access")
    _enum(tally, section, "webhooks_support", _YES_NO_UNSURE, 10, "Webhook support")
    _presence(tally, section, "integration_owner", 20, "Integration owner")
    if systems and _explicit_no(section.get("api_access")):
        tally.block("api_access", "Integrations requested but no API access")
    _apply_sensitivity_penalty(tally, systems, section.get("security_approval"))
    return tally.result()


_APPROVAL_COMPLEXITY = (("simple", 40), ("moderate", 30), ("medium", 30), ("complex", 15))


def score_customer_business_processes(section: dict) -> SectionScore:
    tally = SectionTally()
    _enum(tally, section, "approval_complexity", _APPROVAL_COMPLEXITY, 20, "Approval complexity")

    signers = section.get("agreement_signers")
    lower = count_lower_bound(signers)
    if lower is not None:
        points = 30 if lower <= 5 else 20
        tally.award("agreement_signers", points, f"Agreement signers: {as_text(signers)}")
    elif as_text(signers):
        tally.award("agreement_signers", 15, f"Agreement signers '{as_text(signers)}' not a count, mid-tier")
    else:
        tally.award("agreement_signers", 0, "Agreement signers missing")

    _presence(tally, section, "process_owner", 30, "Process owner")
    return tally.result()


_SSO_REQUIRED = (("not sure", 10), ("yes", 20), ("no", 30))
_SECURITY_NEEDS = (("not sure", 10), ("yes", 15), ("no", 30))
_DPA_STATUS = (
    ("not started", 0),
    ("not signed", 0),
    ("unsigned", 0),
    ("not required", 40),
    ("signed", 40),
    ("in review", 25),
    ("in progress", 25),
    ("pending", 25),
)


def score_customer_security_access(section: dict) -> SectionScore:
    tally = SectionTally()
    _enum(tally, section, "sso_required", _SSO_REQUIRED, 15, "SSO requirement")
    _enum(tally, section, "security_needs", _SECURITY_NEEDS, 15, "Security needs")
    _enum(tally, section, "dpa_status", _DPA_STATUS, 20, "DPA status")
    return tally.result()


def score_customer_uploads(section: dict) -> SectionScore:
    tally = SectionTally()
    _multi(tally, section, "templates", 40, 10, 60, "template upload(s)")
    _multi(tally, section, "sample_contracts", 25, 5, 40, "sample contract upload(s)")
    return tally.result()


# =============================================================================
# Implementation manager persona
# =============================================================================


_PACKAGES = (
    ("enterprise", 25),
    ("professional", 25),
    ("business", 25),
    ("growth", 25),
    ("starter", 25),
    ("essentials", 25),
)
_COMPLEXITY_POINTS = {ComplexityTier.LOW: 25, ComplexityTier.MEDIUM: 18, ComplexityTier.HIGH: 10}


def score_im_customer_context(section: dict) -> SectionScore:
    tally = SectionTally()
    _presence(tally, section, "customer_name", 25, "Customer name")
    _enum(tally, section, "package", _PACKAGES, 12, "Package")
    _tiered(
        tally, section, "complexity",
        classify_complexity(section.get("complexity"), default=None),
        _COMPLEXITY_POINTS, 18, "Complexity",
    )
    _multi(tally, section, "known_risks", 15, 5, 25, "known risk(s)")
    return tally.result()


_TEMPLATE_VOLUME_POINTS = {
    TemplateVolumeTier.SMALL: 30,
    TemplateVolumeTier.MEDIUM: 20,
    TemplateVolumeTier.LARGE: 10,
}
_WORKFLOW_POINTS = {
    WorkflowComplexityTier.SIMPLE: 30,
    WorkflowComplexityTier.MEDIUM: 20,
    WorkflowComplexityTier.COMPLEX: 10,
}


def score_im_scope_deliverables(section: dict) -> SectionScore:
    tally = SectionTally()
    _tiered(
        tally, section, "template_count",
        classify_template_volume(section.get("template_count"), default=None),
        _TEMPLATE_VOLUME_POINTS, 15, "Template volume",
    )
    _tiered(
        tally, section, "workflow_complexity",
        classify_workflow_complexity(section.get("workflow_complexity"), default=None),
        _WORKFLOW_POINTS, 20, "Workflow complexity",
    )
    if _gate(tally, section, "custom_development", 20, "Custom development decision"):
        _presence(tally, section, "custom_development_details", 20, "Custom development details")
    else:
        tally.note("custom_development_details", "No custom development → N/A")
    return tally.result()


_ASSISTED_MIGRATION = (("not sure", 10), ("yes", 20), ("no", 10))
_METADATA_TYPE = (("semi", 20), ("unstructured", 5), ("structured", 30), ("none", 0))


def score_im_migration_details(section: dict) -> SectionScore:
    tally = SectionTally()
    if not _gate(tally, section, "csv_migration_required", 20, "CSV migration decision"):
        tally.note("migration_details", "CSV migration not required → N/A")
        return tally.result()
    _enum(tally, section, "assisted_migration", _ASSISTED_MIGRATION, 10, "Assisted migration")
    _enum(tally, section, "metadata_type", _METADATA_TYPE, 15, "Metadata type")

    volume = section.get("migration_volume")
    tier = classify_migration_volume(volume, default=None)
    if not as_text(volume):
        tally.award("migration_volume", 0, "Migration volume missing")
    elif tier is None:
        tally.award("migration_volume", 15, f"Migration volume '{as_text(volume)}' not recognized, mid-tier")
    else:
        tally.award("migration_volume", 30, f"Migration volume sized: {tier.value}")
    return tally.result()


_ENGINEERING_EFFORT = (("low", 25), ("none", 25), ("medium", 20), ("moderate", 20), ("high", 10))
_IM_API_ACCESS = (("not sure", 10), ("pending", 10), ("yes", 25), ("no", 0))


def score_im_integrations(section: dict) -> SectionScore:
    tally = SectionTally()
    _multi(tally, section, "integration_types", 20, 5, 30, "integration type(s)")
    _enum(tally, section, "integration_engineering_effort", _ENGINEERING_EFFORT, 15, "Engineering effort")

    rounds = section.get("integration_uat_rounds")
    lower = count_lower_bound(rounds)
    if lower is not None:
        points = 20 if lower <= 3 else 10
        tally.award("integration_uat_rounds", points, f"UAT rounds: {as_text(rounds)}")
    elif as_text(rounds):
        tally.award("integration_uat_rounds", 10, f"UAT rounds '{as_text(rounds)}' not a count, mid-tier")
    else:
        tally.award("integration_uat_rounds", 0, "UAT rounds missing")

    _enum(tally, section, "api_access", _IM_API_ACCESS, 10, "API access")
    if as_list(section.get("integration_types")) and _explicit_no(section.get("api_access")):
        tally.block("api_access", "Integrations requested but no API access")
    return tally.result()


_GO_LIVE_POINTS = {
    GoLiveTier.WEEKS_4_8: 25,
    GoLiveTier.WEEKS_8_12: 50,
    GoLiveTier.WEEKS_12_16: 50,
    GoLiveTier.WEEKS_16_PLUS: 40,
}


def score_im_timeline_expectations(section: dict) -> SectionScore:
    tally = SectionTally()
    _tiered(
        tally, section, "go_live_expectation",
        classify_go_live(section.get("go_live_expectation"), default=None),
        _GO_LIVE_POINTS, 25, "Go-live expectation",
    )
    _presence(tally, section, "known_blockers", 30, "Known blockers")
    _presence(tally, section, "kickoff_date", 20, "Kickoff date")
    return tally.result()
