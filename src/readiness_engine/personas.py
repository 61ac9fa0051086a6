"""Persona profiles - section roster, weight table and status bands.

A profile is the unit of swapping: selecting a persona replaces the roster,
the weights and the band text together, so mixed tables cannot occur.
Profiles validate themselves on construction:
- weights sum to exactly 1 (Decimal arithmetic)
- weight keys equal roster keys
- bands are descending, distinct, and end at 0
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from . import section_scorers as scorers
from .schema import Persona, SectionScore

SectionScorer = Callable[[dict], SectionScore]


@dataclass(frozen=True)
class SectionSpec:
    """One roster entry: payload key, breakdown key and scorer."""
    key: str  # breakdown key, e.g. "template_readiness"
    payload_key: str  # intake key, e.g. "section_3_template_readiness"
    scorer: SectionScorer


@dataclass(frozen=True)
class StatusBand:
    """A score band; applies to overall scores >= lower_bound."""
    lower_bound: int
    label: str
    description: str


@dataclass(frozen=True)
class PersonaProfile:
    """Roster, weights and status bands for one persona."""
    persona: Persona
    roster: tuple[SectionSpec, ...]
    weights: Mapping[str, Decimal]
    bands: tuple[StatusBand, ...]

    def __post_init__(self):
        # Freeze a plain dict handed in by the caller
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        validate_weights(self.weights, [spec.key for spec in self.roster])
        validate_bands(self.bands)

    @property
    def section_keys(self) -> list[str]:
        return [spec.key for spec in self.roster]

    def with_weights(self, weights: Mapping[str, object]) -> "PersonaProfile":
        """Copy of this profile with a whole replacement weight table."""
        return PersonaProfile(
            persona=self.persona,
            roster=self.roster,
            weights={key: Decimal(str(value)) for key, value in weights.items()},
            bands=self.bands,
        )


def validate_weights(weights: Mapping[str, Decimal], section_keys: list[str]) -> None:
    """Raise ValueError unless weights cover exactly the roster and sum to 1."""
    if set(weights) != set(section_keys):
        missing = sorted(set(section_keys) - set(weights))
        extra = sorted(set(weights) - set(section_keys))
        raise ValueError(f"Weight keys do not match sections (missing={missing}, extra={extra})")
    total = sum(weights.values(), Decimal("0"))
    if total != Decimal("1"):
        raise ValueError(f"Section weights must sum to 1, got {total}")
    if any(weight < 0 for weight in weights.values()):
        raise ValueError("Section weights must not be negative")


def validate_bands(bands: tuple[StatusBand, ...]) -> None:
    """Raise ValueError unless bands are strictly descending and end at 0."""
    if not bands:
        raise ValueError("At least one status band is required")
    bounds = [band.lower_bound for band in bands]
    if any(upper <= lower for upper, lower in zip(bounds, bounds[1:])):
        raise ValueError(f"Status bands must be strictly descending, got {bounds}")
    if bounds[-1] != 0 or bounds[0] > 100:
        raise ValueError(f"Status bands must cover [0, 100], got {bounds}")


def _weights(**values: str) -> dict[str, Decimal]:
    return {key: Decimal(value) for key, value in values.items()}


# =============================================================================
# Standard persona
# =============================================================================

STANDARD_PROFILE = PersonaProfile(
    persona=Persona.STANDARD,
    roster=(
        SectionSpec("account_stakeholder", "section_1_account_stakeholder", scorers.score_account_stakeholder),
        SectionSpec("order_form_scope", "section_2_order_form_scope", scorers.score_order_form_scope),
        SectionSpec("template_readiness", "section_3_template_readiness", scorers.score_template_readiness),
        SectionSpec("migration_readiness", "section_4_migration_readiness", scorers.score_migration_readiness),
        SectionSpec("integration_readiness", "section_5_integration_readiness", scorers.score_integration_readiness),
        SectionSpec("business_process", "section_6_business_process", scorers.score_business_process),
        SectionSpec("security_compliance", "section_7_security_compliance", scorers.score_security_compliance),
    ),
    weights=_weights(
        account_stakeholder="0.10",
        order_form_scope="0.10",
        template_readiness="0.25",
        migration_readiness="0.20",
        integration_readiness="0.20",
        business_process="0.10",
        security_compliance="0.05",
    ),
    bands=(
        StatusBand(
            80, "Ready to Proceed",
            "Your organization is well-prepared for implementation. Minor items may need attention, "
            "but you're ready to move forward.",
        ),
        StatusBand(
            60, "Ready with Minor Clarifications",
            "Your organization is well-prepared for implementation. A few items need clarification before go-live.",
        ),
        StatusBand(
            40, "Needs Preparation",
            "Some preparation is needed before implementation can begin. Address the identified blockers first.",
        ),
        StatusBand(
            0, "Significant Preparation Required",
            "Significant preparation is required before implementation. Please address the critical blockers identified.",
        ),
    ),
)


# =============================================================================
# Prospect persona
# =============================================================================

PROSPECT_PROFILE = PersonaProfile(
    persona=Persona.PROSPECT,
    roster=(
        SectionSpec("basics", "prospect_section_1_basics", scorers.score_prospect_basics),
        SectionSpec("scope_clarity", "prospect_section_2_scope_clarity", scorers.score_prospect_scope_clarity),
        SectionSpec(
            "systems_integrations", "prospect_section_3_systems_integrations",
            scorers.score_prospect_systems_integrations,
        ),
        SectionSpec(
            "timeline_readiness", "prospect_section_4_timeline_readiness",
            scorers.score_prospect_timeline_readiness,
        ),
        SectionSpec(
            "additional_context", "prospect_section_5_additional_context",
            scorers.score_prospect_additional_context,
        ),
    ),
    weights=_weights(
        basics="0.15",
        scope_clarity="0.30",
        systems_integrations="0.20",
        timeline_readiness="0.20",
        additional_context="0.15",
    ),
    bands=(
        StatusBand(
            80, "Strong Fit",
            "Scope, systems and timeline are clear. The opportunity is ready for a detailed implementation proposal.",
        ),
        StatusBand(
            60, "Good Fit with Open Questions",
            "The opportunity looks viable. A few scope or integration questions should be settled during discovery.",
        ),
        StatusBand(
            40, "Needs Discovery",
            "Key details about scope, systems or timeline are still unclear. Schedule a discovery session first.",
        ),
        StatusBand(
            0, "Early Stage",
            "The evaluation is at an early stage. Gather requirements before estimating an implementation.",
        ),
    ),
)


# =============================================================================
# Customer persona
# =============================================================================

CUSTOMER_PROFILE = PersonaProfile(
    persona=Persona.CUSTOMER,
    roster=(
        SectionSpec("stakeholders", "customer_section_1_stakeholders", scorers.score_customer_stakeholders),
        SectionSpec("purchased_scope", "customer_section_2_purchased_scope", scorers.score_customer_purchased_scope),
        SectionSpec("migration", "customer_section_3_migration", scorers.score_customer_migration),
        SectionSpec("integrations", "customer_section_4_integrations", scorers.score_customer_integrations),
        SectionSpec(
            "business_processes", "customer_section_5_business_processes",
            scorers.score_customer_business_processes,
        ),
        SectionSpec("security_access", "customer_section_6_security_access", scorers.score_customer_security_access),
        SectionSpec("uploads", "customer_section_7_uploads", scorers.score_customer_uploads),
    ),
    weights=_weights(
        stakeholders="0.15",
        purchased_scope="0.20",
        migration="0.15",
        integrations="0.15",
        business_processes="0.15",
        security_access="0.10",
        uploads="0.10",
    ),
    bands=(
        StatusBand(
            80, "Ready for Kickoff",
            "Your team has provided everything needed to start onboarding. We can schedule kickoff right away.",
        ),
        StatusBand(
            60, "Almost Ready",
            "Most onboarding inputs are in place. A few items need to be finalized before kickoff.",
        ),
        StatusBand(
            40, "Preparation Needed",
            "Several onboarding inputs are missing. Please complete the highlighted items before kickoff.",
        ),
        StatusBand(
            0, "Not Yet Ready",
            "Significant onboarding inputs are still outstanding. Please work with your onboarding contact "
            "to complete them.",
        ),
    ),
)


# =============================================================================
# Implementation manager persona
# =============================================================================

IMPLEMENTATION_MANAGER_PROFILE = PersonaProfile(
    persona=Persona.IMPLEMENTATION_MANAGER,
    roster=(
        SectionSpec("customer_context", "im_section_1_customer_context", scorers.score_im_customer_context),
        SectionSpec("scope_deliverables", "im_section_2_scope_deliverables", scorers.score_im_scope_deliverables),
        SectionSpec("migration_details", "im_section_3_migration_details", scorers.score_im_migration_details),
        SectionSpec("integrations", "im_section_4_integrations", scorers.score_im_integrations),
        SectionSpec(
            "timeline_expectations", "im_section_5_timeline_expectations",
            scorers.score_im_timeline_expectations,
        ),
    ),
    weights=_weights(
        customer_context="0.20",
        scope_deliverables="0.25",
        migration_details="0.20",
        integrations="0.20",
        timeline_expectations="0.15",
    ),
    bands=(
        StatusBand(
            80, "Ready to Staff",
            "The engagement is well defined. Resources can be assigned and the plan baselined.",
        ),
        StatusBand(
            60, "Ready with Follow-ups",
            "The engagement is mostly defined. Close the open follow-ups before baselining the plan.",
        ),
        StatusBand(
            40, "Scoping Required",
            "Important scope details are missing. Run a scoping session with the customer before staffing.",
        ),
        StatusBand(
            0, "High Delivery Risk",
            "The engagement is under-defined. Escalate and resolve blockers before committing to a timeline.",
        ),
    ),
)


PROFILES: Mapping[Persona, PersonaProfile] = MappingProxyType({
    profile.persona: profile
    for profile in (STANDARD_PROFILE, PROSPECT_PROFILE, CUSTOMER_PROFILE, IMPLEMENTATION_MANAGER_PROFILE)
})


def get_profile(persona: Persona, weight_overrides: Optional[Mapping[str, Mapping[str, object]]] = None) -> PersonaProfile:
    """Profile for a persona, with its weight table replaced if overridden.

    Overrides are keyed by persona value and must be whole tables.
    """
    profile = PROFILES[persona]
    if weight_overrides and persona.value in weight_overrides:
        profile = profile.with_weights(weight_overrides[persona.value])
    return profile
