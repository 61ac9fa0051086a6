"""Tests for the rule table and plan synthesizer."""

import itertools
from collections import Counter
from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from readiness_engine import plan_rules
from readiness_engine.planner import (
    match_risk_tag,
    plan_fields,
    resolve_plan_inputs,
    synthesize_plan,
)
from readiness_engine.schema import (
    ComplexityTier,
    CustomDevelopmentFlag,
    GoLiveTier,
    IntegrationType,
    MigrationVolumeTier,
    RiskTag,
)

TODAY = date(2026, 1, 5)


@pytest.fixture
def e2e_fields(e2e_im_payload):
    return plan_fields({k: v for k, v in e2e_im_payload.items() if k != "user_type"})


def _phase(plan, name):
    return next((phase for phase in plan.phases if phase.name == name), None)


class TestRuleTable:
    """The rule table is immutable and exhaustive."""

    def test_rules_are_frozen(self):
        rule = plan_rules.COMPLEXITY_RULES[ComplexityTier.HIGH][0]
        with pytest.raises(FrozenInstanceError):
            rule.duration_hours = 1

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            plan_rules.GO_LIVE_MULTIPLIERS[GoLiveTier.WEEKS_4_8] = 2

    def test_every_enum_member_has_a_row(self):
        assert set(plan_rules.INTEGRATION_RULES) == set(IntegrationType)
        assert set(plan_rules.RISK_RULES) == set(RiskTag)
        assert set(plan_rules.MIGRATION_VOLUME_RULES) == set(MigrationVolumeTier)

    def test_every_complexity_tier_covers_core_phases(self):
        for tier, rules in plan_rules.COMPLEXITY_RULES.items():
            phases = {rule.target_phase for rule in rules}
            assert {plan_rules.KICKOFF, plan_rules.CONFIGURATION, plan_rules.TESTING, plan_rules.GO_LIVE} <= phases

    def test_format_activity(self):
        rule = plan_rules.PlanRule("risks", "x", plan_rules.KICKOFF, "Do the thing", 4, "Implementation Manager")
        assert rule.format_activity() == "Do the thing (4h, Implementation Manager)"

    def test_canonical_phase_order(self):
        assert plan_rules.CANONICAL_PHASES == (
            "Kickoff & Discovery",
            "Platform Configuration",
            "Template Setup",
            "Workflow Configuration",
            "Migration",
            "Integrations",
            "Testing & UAT",
            "Go-Live & Hypercare",
        )


class TestResolvePlanInputs:
    """Axis resolution from raw intake fields."""

    def test_defaults_for_empty_input(self):
        inputs = resolve_plan_inputs({})
        assert inputs.complexity == ComplexityTier.MEDIUM
        assert inputs.go_live == GoLiveTier.WEEKS_8_12
        assert inputs.migration_volume == MigrationVolumeTier.NONE
        assert inputs.notes == ()

    def test_unrecognized_values_are_noted(self):
        inputs = resolve_plan_inputs({"complexity": "extreme", "go_live_expectation": "whenever"})
        assert inputs.complexity == ComplexityTier.MEDIUM
        assert any("extreme" in note for note in inputs.notes)
        assert any("whenever" in note for note in inputs.notes)

    def test_risk_tags(self):
        assert match_risk_tag("Security review delays") == RiskTag.SECURITY_REVIEW
        assert match_risk_tag("Poor data quality in legacy repo") == RiskTag.DATA_QUALITY
        assert match_risk_tag("Budget freeze") is None

    def test_unknown_risk_is_noted(self):
        inputs = resolve_plan_inputs({"known_risks": ["Budget freeze"]})
        assert inputs.risk_tags == ()
        assert inputs.notes == ("Risk 'Budget freeze' has no plan rule; review manually",)

    def test_custom_development_flag(self):
        assert resolve_plan_inputs({"custom_development": "Yes"}).custom_development == \
            CustomDevelopmentFlag.NEEDS_SCOPING
        assert resolve_plan_inputs({
            "custom_development": "yes",
            "custom_development_details": "Custom CPQ bridge",
        }).custom_development == CustomDevelopmentFlag.WITH_DETAILS
        assert resolve_plan_inputs({"custom_development": "No"}).custom_development == CustomDevelopmentFlag.NONE

    def test_engineering_flag_from_type_or_effort(self):
        assert resolve_plan_inputs({"integration_types": ["SAP"]}).integration_engineering
        assert resolve_plan_inputs({"integration_engineering_effort": "High"}).integration_engineering
        assert not resolve_plan_inputs({"integration_types": ["Slack"]}).integration_engineering

    def test_integration_type_parsing(self):
        inputs = resolve_plan_inputs({"integration_types": ["salesforce", "Google drive", "Zapier"]})
        assert inputs.integration_types == (IntegrationType.SALESFORCE, IntegrationType.GOOGLE_DRIVE)
        assert any("Zapier" in note for note in inputs.notes)


class TestSynthesizePlan:
    """Plan synthesis behaviour."""

    def test_end_to_end_scenario(self, e2e_fields):
        plan = synthesize_plan(e2e_fields, today=TODAY)

        assert plan.estimated_weeks == 11
        assert plan.estimated_timeline == "11 weeks"
        assert plan.recommended_go_live == date(2026, 3, 23)

        migration = _phase(plan, "Migration")
        assert migration is not None
        assert len(migration.activities) >= 2

        integrations = _phase(plan, "Integrations")
        assert integrations is not None
        assert any("Salesforce" in activity for activity in integrations.activities)
        assert any("DocuSign" in activity for activity in integrations.activities)

        assert _phase(plan, "Custom Development") is None

    def test_migration_none_removes_phase(self, e2e_fields):
        e2e_fields["migration_volume"] = "none"
        plan = synthesize_plan(e2e_fields, today=TODAY)
        assert _phase(plan, "Migration") is None
        assert not any("UAT" in note and "migrated" in note for note in plan.internal_notes)

    def test_large_migration_has_activities_and_uat_note(self, e2e_fields):
        plan = synthesize_plan(e2e_fields, today=TODAY)
        assert len(_phase(plan, "Migration").activities) >= 2
        assert any("16h" in note for note in plan.internal_notes)

    def test_phases_renumbered_contiguously(self):
        plan = synthesize_plan({"complexity": "low"}, today=TODAY)
        assert [phase.phase for phase in plan.phases] == list(range(1, len(plan.phases) + 1))
        assert _phase(plan, "Migration") is None
        assert _phase(plan, "Integrations") is None

    def test_dependencies_and_status(self):
        plan = synthesize_plan({
            "integration_types": ["Slack"],
            "known_blockers": "Waiting on API credentials",
        }, today=TODAY)
        assert plan.phases[0].dependencies is None
        assert plan.phases[0].status == "Ready"
        for previous, current in zip(plan.phases, plan.phases[1:]):
            assert current.dependencies == previous.name
        assert _phase(plan, "Integrations").status == "Blocked"
        assert _phase(plan, "Testing & UAT").status == "Scheduled"

    def test_no_blockers_answer_does_not_block(self):
        plan = synthesize_plan({"integration_types": ["Slack"], "known_blockers": "None"}, today=TODAY)
        assert _phase(plan, "Integrations").status == "Scheduled"

    def test_duration_is_summed_hours(self):
        plan = synthesize_plan({"complexity": "medium", "workflow_complexity": "complex"}, today=TODAY)
        assert _phase(plan, "Workflow Configuration").duration == "22 hours"

    def test_custom_development_phase_after_integrations(self):
        plan = synthesize_plan({
            "custom_development": "Yes",
            "custom_development_details": "Bespoke renewal engine",
            "integration_types": ["HubSpot"],
        }, today=TODAY)
        names = [phase.name for phase in plan.phases]
        assert names.index("Custom Development") == names.index("Integrations") + 1

    def test_custom_development_without_details_adds_scoping_task(self):
        plan = synthesize_plan({"custom_development": "Yes"}, today=TODAY)
        assert _phase(plan, "Custom Development") is None
        assert any("Scope custom development" in a for a in _phase(plan, "Kickoff & Discovery").activities)

    @pytest.mark.parametrize("go_live,complexity,weeks", [
        ("4-8 weeks", "low", 6),
        ("8-12 weeks", "medium", 9),
        ("12-16 weeks", "medium", 10),
        ("16+ weeks", "high", 14),
    ])
    def test_estimated_weeks(self, go_live, complexity, weeks):
        plan = synthesize_plan({"go_live_expectation": go_live, "complexity": complexity}, today=TODAY)
        assert plan.estimated_weeks == weeks

    def test_base_weeks_is_configurable(self):
        plan = synthesize_plan({}, today=TODAY, base_weeks=10)
        assert plan.estimated_weeks == 11

    def test_never_raises_on_garbage(self):
        plan = synthesize_plan({
            "complexity": ["high"],
            "known_risks": "not a list",
            "integration_types": [None, 42, {"x": 1}],
            "migration_volume": {"count": 5},
        }, today=TODAY)
        assert plan.phases
        assert plan.estimated_weeks == 9

    def test_non_mapping_input(self):
        plan = synthesize_plan(None, today=TODAY)
        assert plan.phases[0].name == "Kickoff & Discovery"

    def test_unknown_axis_is_noted(self):
        plan = synthesize_plan({}, today=TODAY, axis_order=plan_rules.AXIS_ORDER + ("budget",))
        assert "Unknown plan axis 'budget' ignored" in plan.internal_notes


class TestOrderIndependence:
    """Applying axes in any order yields the same phases and activities."""

    def test_permutations(self, e2e_fields):
        e2e_fields["custom_development"] = "Yes"
        e2e_fields["custom_development_details"] = "Bespoke renewal engine"
        e2e_fields["known_risks"] = ["Security review delays", "Change management", "Integration access"]

        baseline = synthesize_plan(e2e_fields, today=TODAY)
        expected = {phase.name: Counter(phase.activities) for phase in baseline.phases}
        expected_order = [phase.name for phase in baseline.phases]

        # A spread of permutations, including the full reversal
        orders = list(itertools.islice(itertools.permutations(plan_rules.AXIS_ORDER), 0, 40320, 997))
        orders.append(tuple(reversed(plan_rules.AXIS_ORDER)))
        for order in orders:
            plan = synthesize_plan(e2e_fields, today=TODAY, axis_order=order)
            assert [phase.name for phase in plan.phases] == expected_order
            assert {phase.name: Counter(phase.activities) for phase in plan.phases} == expected
            assert plan.estimated_weeks == baseline.estimated_weeks


class TestPlanFields:
    """Flattening intake sections for the planner."""

    def test_earlier_sections_win(self):
        fields = plan_fields({
            "s1": {"complexity": "high"},
            "s2": {"complexity": "low", "migration_volume": "small"},
            "s3": "malformed",
        })
        assert fields == {"complexity": "high", "migration_volume": "small"}
