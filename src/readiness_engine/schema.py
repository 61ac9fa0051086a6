"""Pydantic models for the Readiness Engine.

Input schema for intake questionnaires, tier enums shared by the scoring
and planning paths, and output schemas for scores and plans.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Persona and Tier Enums
# =============================================================================


class Persona(str, Enum):
    """Intake questionnaire shape."""
    STANDARD = "standard"
    PROSPECT = "prospect"
    CUSTOMER = "customer"
    IMPLEMENTATION_MANAGER = "implementation_manager"

    @classmethod
    def from_string(cls, value: Any) -> "Persona":
        """Parse persona from a user_type tag (unknown tags fall back to standard)."""
        if not isinstance(value, str) or not value:
            return cls.STANDARD
        mapping = {
            "standard": cls.STANDARD,
            "prospect": cls.PROSPECT,
            "customer": cls.CUSTOMER,
            "implementationmanager": cls.IMPLEMENTATION_MANAGER,
            "im": cls.IMPLEMENTATION_MANAGER,
        }
        return mapping.get(value.lower().replace("_", "").replace(" ", ""), cls.STANDARD)


class Completeness(str, Enum):
    """Completeness tier of a raw field."""
    MISSING = "missing"
    PARTIAL = "partial"
    COMPLETE = "complete"


class ComplexityTier(str, Enum):
    """Overall implementation complexity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TemplateVolumeTier(str, Enum):
    """Template volume bucket."""
    SMALL = "small"  # fewer than 10
    MEDIUM = "medium"  # 10-49
    LARGE = "large"  # 50 or more


class WorkflowComplexityTier(str, Enum):
    """Approval workflow complexity."""
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class MigrationVolumeTier(str, Enum):
    """Legacy contract migration volume."""
    NONE = "none"
    SMALL = "small"  # fewer than 1,000
    MEDIUM = "medium"  # 1,000-4,999
    LARGE = "large"  # 5,000 or more


class GoLiveTier(str, Enum):
    """Customer go-live expectation bucket."""
    WEEKS_4_8 = "4-8 weeks"
    WEEKS_8_12 = "8-12 weeks"
    WEEKS_12_16 = "12-16 weeks"
    WEEKS_16_PLUS = "16+ weeks"


class SensitivityTier(str, Enum):
    """Integration sensitivity used to scale infosec penalties."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CustomDevelopmentFlag(str, Enum):
    """Custom development decision as seen by the planner."""
    WITH_DETAILS = "with_details"
    NEEDS_SCOPING = "needs_scoping"  # "yes" without details
    NONE = "none"


class RiskTag(str, Enum):
    """Known risk vocabulary (normalized snake_case tags)."""
    SECURITY_REVIEW = "security_review"
    TEMPLATE_FINALIZATION = "template_finalization"
    DATA_QUALITY = "data_quality"
    STAKEHOLDER_AVAILABILITY = "stakeholder_availability"
    INTEGRATION_ACCESS = "integration_access"
    LEGAL_REVIEW = "legal_review"
    SCOPE_CREEP = "scope_creep"
    CHANGE_MANAGEMENT = "change_management"


class IntegrationType(str, Enum):
    """Integration types with their own plan tasks."""
    SALESFORCE = "Salesforce"
    DOCUSIGN = "DocuSign"
    SLACK = "Slack"
    HUBSPOT = "HubSpot"
    MICROSOFT_TEAMS = "Microsoft Teams"
    SHAREPOINT = "SharePoint"
    GOOGLE_DRIVE = "Google Drive"
    WORKDAY = "Workday"
    SAP = "SAP"
    NETSUITE = "NetSuite"
    CUSTOM_API = "Custom API"

    @classmethod
    def from_string(cls, value: Any) -> Optional["IntegrationType"]:
        """Parse an integration type, ignoring case and spacing. None if unknown."""
        if not isinstance(value, str):
            return None
        key = value.lower().replace(" ", "").replace("-", "")
        for member in cls:
            if member.value.lower().replace(" ", "") == key:
                return member
        return None


# =============================================================================
# Input Models
# =============================================================================


class IntakeResponse(BaseModel):
    """A persona-tagged intake questionnaire.

    Sections are kept as raw mappings. Scorers treat missing or malformed
    values as "missing" instead of failing.
    """
    persona: Persona = Persona.STANDARD
    sections: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "IntakeResponse":
        """Build an IntakeResponse from the raw JSON object.

        Non-object section values are dropped (treated as empty sections).
        """
        sections = {
            key: value
            for key, value in payload.items()
            if key != "user_type" and isinstance(value, dict)
        }
        return cls(
            persona=Persona.from_string(payload.get("user_type")),
            sections=sections,
        )

    def section(self, key: str) -> dict[str, Any]:
        """Get a section by key, defaulting to an empty mapping."""
        return self.sections.get(key) or {}


# =============================================================================
# Scoring Output Models
# =============================================================================


class SectionScore(BaseModel):
    """Score for one questionnaire section with its rationale trail."""
    score: int = Field(..., ge=0, le=100)
    rationale: dict[str, str] = Field(default_factory=dict)


class ReadinessScore(BaseModel):
    """Overall readiness score and per-section breakdown."""
    overall: int = Field(..., ge=0, le=100)
    breakdown: dict[str, int] = Field(default_factory=dict)


class StatusClassification(BaseModel):
    """Status label selected from a persona's score bands."""
    label: str
    description: str


class ReadinessResult(BaseModel):
    """Complete deterministic scoring output for one intake."""
    persona: Persona
    readiness_score: ReadinessScore
    status_label: str
    status_description: str
    rationales: dict[str, dict[str, str]] = Field(default_factory=dict)
    timeline_confidence: str = "low"  # high, medium, low


# =============================================================================
# Planning Output Models
# =============================================================================


class ImplementationPlanPhase(BaseModel):
    """One phase of a synthesized implementation plan."""
    phase: int
    name: str
    duration: str
    activities: list[str] = Field(default_factory=list)
    dependencies: Optional[str] = None
    status: str = "Scheduled"  # Ready, Blocked, Scheduled


class ImplementationPlan(BaseModel):
    """Rule-based implementation plan."""
    recommended_go_live: date
    estimated_timeline: str
    estimated_weeks: int
    phases: list[ImplementationPlanPhase] = Field(default_factory=list)
    internal_notes: list[str] = Field(default_factory=list)


class ReadinessAssessment(BaseModel):
    """Combined engine output handed to the calling layer."""
    scoring_version: str = Field(default="1.0.0")
    result: ReadinessResult
    implementation_plan: Optional[ImplementationPlan] = None
