"""Plan Rule Table - immutable, enum-keyed plan contributions.

Every decision axis maps each of its tiers to a tuple of PlanRule records.
Tables are MappingProxyType views and rules are frozen dataclasses; each
table is checked at import time to cover every member of its enum.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Type

from .schema import (
    ComplexityTier,
    CustomDevelopmentFlag,
    GoLiveTier,
    IntegrationType,
    MigrationVolumeTier,
    RiskTag,
    TemplateVolumeTier,
    WorkflowComplexityTier,
)


@dataclass(frozen=True)
class PlanRule:
    """One contribution: a task of fixed duration appended to a phase."""
    axis: str
    trigger_value: str
    target_phase: str
    task: str
    duration_hours: int
    assignee: str

    def format_activity(self) -> str:
        return f"{self.task} ({self.duration_hours}h, {self.assignee})"


# =============================================================================
# Phases and assignees
# =============================================================================

KICKOFF = "Kickoff & Discovery"
CONFIGURATION = "Platform Configuration"
TEMPLATES = "Template Setup"
WORKFLOWS = "Workflow Configuration"
MIGRATION = "Migration"
INTEGRATIONS = "Integrations"
TESTING = "Testing & UAT"
GO_LIVE = "Go-Live & Hypercare"

CANONICAL_PHASES = (
    KICKOFF,
    CONFIGURATION,
    TEMPLATES,
    WORKFLOWS,
    MIGRATION,
    INTEGRATIONS,
    TESTING,
    GO_LIVE,
)

# Non-canonical phase, placed right after INTEGRATIONS when present
CUSTOM_DEVELOPMENT = "Custom Development"
INSERTED_PHASES = MappingProxyType({CUSTOM_DEVELOPMENT: INTEGRATIONS})

IM = "Implementation Manager"
SC = "Solutions Consultant"
IE = "Integration Engineer"
DMS = "Data Migration Specialist"
CSM = "Customer Success Manager"
ENG = "Engineering"

# Axis names, in the default application order
AXIS_COMPLEXITY = "complexity"
AXIS_RISKS = "risks"
AXIS_TEMPLATE_VOLUME = "template_volume"
AXIS_WORKFLOW = "workflow_complexity"
AXIS_CUSTOM_DEVELOPMENT = "custom_development"
AXIS_MIGRATION = "migration"
AXIS_INTEGRATIONS = "integrations"
AXIS_TIMELINE = "timeline"

AXIS_ORDER = (
    AXIS_COMPLEXITY,
    AXIS_RISKS,
    AXIS_TEMPLATE_VOLUME,
    AXIS_WORKFLOW,
    AXIS_CUSTOM_DEVELOPMENT,
    AXIS_MIGRATION,
    AXIS_INTEGRATIONS,
    AXIS_TIMELINE,
)


def _rules(axis: str, trigger: Enum, *rows: tuple[str, str, int, str]) -> tuple[PlanRule, ...]:
    return tuple(
        PlanRule(axis, trigger.value, phase, task, hours, assignee)
        for phase, task, hours, assignee in rows
    )


def _check_exhaustive(table: Mapping, enum_cls: Type[Enum], name: str) -> None:
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise ValueError(f"Plan rule table {name} has no rows for: {missing}")


# =============================================================================
# Complexity
# =============================================================================

COMPLEXITY_MULTIPLIERS: Mapping[ComplexityTier, Decimal] = MappingProxyType({
    ComplexityTier.LOW: Decimal("0.8"),
    ComplexityTier.MEDIUM: Decimal("1.0"),
    ComplexityTier.HIGH: Decimal("1.3"),
})

COMPLEXITY_RULES: Mapping[ComplexityTier, tuple[PlanRule, ...]] = MappingProxyType({
    ComplexityTier.LOW: _rules(
        AXIS_COMPLEXITY, ComplexityTier.LOW,
        (KICKOFF, "Kickoff call and success criteria review", 4, IM),
        (CONFIGURATION, "Standard platform configuration", 8, SC),
        (TESTING, "UAT on standard configuration", 6, IM),
        (GO_LIVE, "Go-live checklist and hypercare handoff", 4, CSM),
    ),
    ComplexityTier.MEDIUM: _rules(
        AXIS_COMPLEXITY, ComplexityTier.MEDIUM,
        (KICKOFF, "Kickoff workshop and discovery sessions", 8, IM),
        (CONFIGURATION, "Platform configuration and user provisioning", 16, SC),
        (TESTING, "End-to-end UAT cycle", 12, IM),
        (GO_LIVE, "Go-live support and hypercare", 8, CSM),
    ),
    ComplexityTier.HIGH: _rules(
        AXIS_COMPLEXITY, ComplexityTier.HIGH,
        (KICKOFF, "Extended discovery workshops with stakeholder mapping", 16, IM),
        (KICKOFF, "Executive steering committee setup", 4, IM),
        (KICKOFF, "Risk register and mitigation plan", 6, IM),
        (CONFIGURATION, "Advanced platform configuration and permission modelling", 24, SC),
        (TESTING, "Multi-round UAT with regression passes", 24, IM),
        (GO_LIVE, "Phased go-live with extended hypercare", 16, CSM),
    ),
})


# =============================================================================
# Risks
# =============================================================================

RISK_RULES: Mapping[RiskTag, tuple[PlanRule, ...]] = MappingProxyType({
    RiskTag.SECURITY_REVIEW: _rules(
        AXIS_RISKS, RiskTag.SECURITY_REVIEW,
        (KICKOFF, "Initiate security review and share compliance documentation", 6, SC),
    ),
    RiskTag.TEMPLATE_FINALIZATION: _rules(
        AXIS_RISKS, RiskTag.TEMPLATE_FINALIZATION,
        (TEMPLATES, "Template finalization checkpoint with legal", 6, IM),
    ),
    RiskTag.DATA_QUALITY: _rules(
        AXIS_RISKS, RiskTag.DATA_QUALITY,
        (KICKOFF, "Data quality assessment of legacy contracts", 8, DMS),
    ),
    RiskTag.STAKEHOLDER_AVAILABILITY: _rules(
        AXIS_RISKS, RiskTag.STAKEHOLDER_AVAILABILITY,
        (KICKOFF, "Confirm stakeholder availability and backup approvers", 2, IM),
    ),
    RiskTag.INTEGRATION_ACCESS: _rules(
        AXIS_RISKS, RiskTag.INTEGRATION_ACCESS,
        (INTEGRATIONS, "Secure API credentials and sandbox access", 4, IE),
    ),
    RiskTag.LEGAL_REVIEW: _rules(
        AXIS_RISKS, RiskTag.LEGAL_REVIEW,
        (TEMPLATES, "Schedule legal review of template language", 4, IM),
    ),
    RiskTag.SCOPE_CREEP: _rules(
        AXIS_RISKS, RiskTag.SCOPE_CREEP,
        (KICKOFF, "Document scope baseline and change-control process", 4, IM),
    ),
    RiskTag.CHANGE_MANAGEMENT: _rules(
        AXIS_RISKS, RiskTag.CHANGE_MANAGEMENT,
        (GO_LIVE, "End-user training and change management plan", 8, CSM),
    ),
})


# =============================================================================
# Templates and workflows
# =============================================================================

TEMPLATE_VOLUME_RULES: Mapping[TemplateVolumeTier, tuple[PlanRule, ...]] = MappingProxyType({
    TemplateVolumeTier.SMALL: _rules(
        AXIS_TEMPLATE_VOLUME, TemplateVolumeTier.SMALL,
        (TEMPLATES, "Configure up to 10 templates", 12, SC),
    ),
    TemplateVolumeTier.MEDIUM: _rules(
        AXIS_TEMPLATE_VOLUME, TemplateVolumeTier.MEDIUM,
        (TEMPLATES, "Configure 10-49 templates in batches", 32, SC),
        (TEMPLATES, "Template QA review", 8, IM),
    ),
    TemplateVolumeTier.LARGE: _rules(
        AXIS_TEMPLATE_VOLUME, TemplateVolumeTier.LARGE,
        (TEMPLATES, "Template prioritization workshop", 4, IM),
        (TEMPLATES, "Bulk template configuration (50+ templates)", 60, SC),
        (TEMPLATES, "Template QA in waves", 16, IM),
    ),
})

WORKFLOW_RULES: Mapping[WorkflowComplexityTier, tuple[PlanRule, ...]] = MappingProxyType({
    WorkflowComplexityTier.SIMPLE: _rules(
        AXIS_WORKFLOW, WorkflowComplexityTier.SIMPLE,
        (WORKFLOWS, "Configure single-step approval workflow", 4, SC),
    ),
    WorkflowComplexityTier.MEDIUM: _rules(
        AXIS_WORKFLOW, WorkflowComplexityTier.MEDIUM,
        (WORKFLOWS, "Configure multi-step approval workflows", 12, SC),
    ),
    WorkflowComplexityTier.COMPLEX: _rules(
        AXIS_WORKFLOW, WorkflowComplexityTier.COMPLEX,
        (WORKFLOWS, "Design conditional approval routing", 16, SC),
        (WORKFLOWS, "Approval matrix validation with stakeholders", 6, IM),
    ),
})

CUSTOM_DEVELOPMENT_RULES: Mapping[CustomDevelopmentFlag, tuple[PlanRule, ...]] = MappingProxyType({
    CustomDevelopmentFlag.WITH_DETAILS: _rules(
        AXIS_CUSTOM_DEVELOPMENT, CustomDevelopmentFlag.WITH_DETAILS,
        (CUSTOM_DEVELOPMENT, "Technical design for custom development", 12, SC),
        (CUSTOM_DEVELOPMENT, "Build and unit test custom components", 40, ENG),
        (CUSTOM_DEVELOPMENT, "Custom development review and sign-off", 4, IM),
    ),
    CustomDevelopmentFlag.NEEDS_SCOPING: _rules(
        AXIS_CUSTOM_DEVELOPMENT, CustomDevelopmentFlag.NEEDS_SCOPING,
        (KICKOFF, "Scope custom development requirements", 4, SC),
    ),
    CustomDevelopmentFlag.NONE: (),
})


# =============================================================================
# Migration
# =============================================================================

MIGRATION_VOLUME_RULES: Mapping[MigrationVolumeTier, tuple[PlanRule, ...]] = MappingProxyType({
    MigrationVolumeTier.NONE: (),
    MigrationVolumeTier.SMALL: _rules(
        AXIS_MIGRATION, MigrationVolumeTier.SMALL,
        (MIGRATION, "Migrate up to 1,000 legacy contracts", 12, DMS),
        (MIGRATION, "Spot-check migrated metadata", 4, DMS),
    ),
    MigrationVolumeTier.MEDIUM: _rules(
        AXIS_MIGRATION, MigrationVolumeTier.MEDIUM,
        (MIGRATION, "Metadata mapping workshop", 6, DMS),
        (MIGRATION, "Migrate 1,000-4,999 legacy contracts in batches", 32, DMS),
        (MIGRATION, "Sample-based migration QA", 8, DMS),
    ),
    MigrationVolumeTier.LARGE: _rules(
        AXIS_MIGRATION, MigrationVolumeTier.LARGE,
        (MIGRATION, "Metadata mapping workshop", 8, DMS),
        (MIGRATION, "Pilot migration batch and validation", 12, DMS),
        (MIGRATION, "Bulk migration of 5,000+ legacy contracts", 60, DMS),
        (MIGRATION, "Full migration QA and reconciliation", 16, DMS),
    ),
})

# Added when a CSV migration is required (and volume is not "none")
MIGRATION_ENGINEERING_RULES: tuple[PlanRule, ...] = (
    PlanRule(AXIS_MIGRATION, "csv_migration", MIGRATION, "CSV template preparation and field mapping", 8, DMS),
    PlanRule(AXIS_MIGRATION, "csv_migration", MIGRATION, "CSV import scripting and dry run", 12, IE),
)

# Informational only; not added to any phase duration
MIGRATION_UAT_HOURS: Mapping[MigrationVolumeTier, int] = MappingProxyType({
    MigrationVolumeTier.NONE: 0,
    MigrationVolumeTier.SMALL: 4,
    MigrationVolumeTier.MEDIUM: 8,
    MigrationVolumeTier.LARGE: 16,
})


# =============================================================================
# Integrations
# =============================================================================

INTEGRATION_RULES: Mapping[IntegrationType, tuple[PlanRule, ...]] = MappingProxyType({
    IntegrationType.SALESFORCE: _rules(
        AXIS_INTEGRATIONS, IntegrationType.SALESFORCE,
        (INTEGRATIONS, "Configure Salesforce connector and object mapping", 16, IE),
        (INTEGRATIONS, "Salesforce sandbox end-to-end test", 6, IE),
    ),
    IntegrationType.DOCUSIGN: _rules(
        AXIS_INTEGRATIONS, IntegrationType.DOCUSIGN,
        (INTEGRATIONS, "Connect DocuSign account and signing templates", 6, IE),
    ),
    IntegrationType.SLACK: _rules(
        AXIS_INTEGRATIONS, IntegrationType.SLACK,
        (INTEGRATIONS, "Configure Slack notifications", 3, IE),
    ),
    IntegrationType.HUBSPOT: _rules(
        AXIS_INTEGRATIONS, IntegrationType.HUBSPOT,
        (INTEGRATIONS, "Configure HubSpot deal sync", 10, IE),
    ),
    IntegrationType.MICROSOFT_TEAMS: _rules(
        AXIS_INTEGRATIONS, IntegrationType.MICROSOFT_TEAMS,
        (INTEGRATIONS, "Configure Microsoft Teams notifications", 3, IE),
    ),
    IntegrationType.SHAREPOINT: _rules(
        AXIS_INTEGRATIONS, IntegrationType.SHAREPOINT,
        (INTEGRATIONS, "Configure SharePoint document sync", 8, IE),
    ),
    IntegrationType.GOOGLE_DRIVE: _rules(
        AXIS_INTEGRATIONS, IntegrationType.GOOGLE_DRIVE,
        (INTEGRATIONS, "Configure Google Drive storage sync", 6, IE),
    ),
    IntegrationType.WORKDAY: _rules(
        AXIS_INTEGRATIONS, IntegrationType.WORKDAY,
        (INTEGRATIONS, "Configure Workday HR data sync", 16, IE),
    ),
    IntegrationType.SAP: _rules(
        AXIS_INTEGRATIONS, IntegrationType.SAP,
        (INTEGRATIONS, "SAP field mapping review with customer IT", 6, IE),
        (INTEGRATIONS, "Configure SAP vendor and purchase order sync", 20, IE),
    ),
    IntegrationType.NETSUITE: _rules(
        AXIS_INTEGRATIONS, IntegrationType.NETSUITE,
        (INTEGRATIONS, "Configure NetSuite sync", 12, IE),
    ),
    IntegrationType.CUSTOM_API: _rules(
        AXIS_INTEGRATIONS, IntegrationType.CUSTOM_API,
        (INTEGRATIONS, "Design custom API integration", 12, IE),
        (INTEGRATIONS, "Build and test custom API integration", 24, ENG),
    ),
})

# Selecting any of these sets the engineering-effort flag
ENGINEERING_INTEGRATIONS = frozenset({
    IntegrationType.WORKDAY,
    IntegrationType.SAP,
    IntegrationType.CUSTOM_API,
})

INTEGRATION_ENGINEERING_RULE = PlanRule(
    AXIS_INTEGRATIONS, "engineering_effort", INTEGRATIONS,
    "Reserve engineering capacity for integration build", 16, ENG,
)


# =============================================================================
# Timeline
# =============================================================================

GO_LIVE_MULTIPLIERS: Mapping[GoLiveTier, Decimal] = MappingProxyType({
    GoLiveTier.WEEKS_4_8: Decimal("1.0"),
    GoLiveTier.WEEKS_8_12: Decimal("1.1"),
    GoLiveTier.WEEKS_12_16: Decimal("1.2"),
    GoLiveTier.WEEKS_16_PLUS: Decimal("1.3"),
})

GO_LIVE_RULES: Mapping[GoLiveTier, tuple[PlanRule, ...]] = MappingProxyType({
    GoLiveTier.WEEKS_4_8: _rules(
        AXIS_TIMELINE, GoLiveTier.WEEKS_4_8,
        (KICKOFF, "Compressed-timeline plan with parallel workstreams", 6, IM),
    ),
    GoLiveTier.WEEKS_8_12: (),
    GoLiveTier.WEEKS_12_16: (),
    GoLiveTier.WEEKS_16_PLUS: _rules(
        AXIS_TIMELINE, GoLiveTier.WEEKS_16_PLUS,
        (TESTING, "Mid-project re-baselining checkpoint", 2, IM),
    ),
})


for _table, _enum_cls, _name in (
    (COMPLEXITY_MULTIPLIERS, ComplexityTier, "COMPLEXITY_MULTIPLIERS"),
    (COMPLEXITY_RULES, ComplexityTier, "COMPLEXITY_RULES"),
    (RISK_RULES, RiskTag, "RISK_RULES"),
    (TEMPLATE_VOLUME_RULES, TemplateVolumeTier, "TEMPLATE_VOLUME_RULES"),
    (WORKFLOW_RULES, WorkflowComplexityTier, "WORKFLOW_RULES"),
    (CUSTOM_DEVELOPMENT_RULES, CustomDevelopmentFlag, "CUSTOM_DEVELOPMENT_RULES"),
    (MIGRATION_VOLUME_RULES, MigrationVolumeTier, "MIGRATION_VOLUME_RULES"),
    (MIGRATION_UAT_HOURS, MigrationVolumeTier, "MIGRATION_UAT_HOURS"),
    (INTEGRATION_RULES, IntegrationType, "INTEGRATION_RULES"),
    (GO_LIVE_MULTIPLIERS, GoLiveTier, "GO_LIVE_MULTIPLIERS"),
    (GO_LIVE_RULES, GoLiveTier, "GO_LIVE_RULES"),
):
    _check_exhaustive(_table, _enum_cls, _name)
