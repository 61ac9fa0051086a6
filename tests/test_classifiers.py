"""Tests for the field classifiers shared by scoring and planning."""

from decimal import Decimal

import pytest

from readiness_engine.classifiers import (
    as_list,
    as_number,
    as_text,
    classify_completeness,
    classify_complexity,
    classify_enum,
    classify_go_live,
    classify_migration_volume,
    classify_multi_select,
    classify_sensitivity,
    classify_template_volume,
    classify_workflow_complexity,
    count_lower_bound,
    normalize_risk_tag,
    presence_points,
    round_half_up,
)
from readiness_engine.schema import (
    Completeness,
    ComplexityTier,
    GoLiveTier,
    MigrationVolumeTier,
    SensitivityTier,
    TemplateVolumeTier,
    WorkflowComplexityTier,
)


class TestShapeNormalization:
    """Malformed shapes resolve to their missing equivalents."""

    def test_as_text(self):
        assert as_text("  hello ") == "hello"
        assert as_text(42) == "42"
        assert as_text(True) == ""
        assert as_text(["a"]) == ""
        assert as_text(None) == ""

    def test_as_list_drops_empty_items(self):
        assert as_list(["a", "", None, "b"]) == ["a", "b"]
        assert as_list("Salesforce") == []
        assert as_list({"a": 1}) == []

    def test_as_number(self):
        assert as_number(12) == 12
        assert as_number("1,200") == 1200.0
        assert as_number("about ten") is None
        assert as_number(False) is None


class TestCompleteness:
    """Tests for classify_completeness and presence_points."""

    @pytest.mark.parametrize("value", [None, False, 0, "", "   ", [], {}])
    def test_missing(self, value):
        assert classify_completeness(value) == Completeness.MISSING

    @pytest.mark.parametrize("value", ["Yes", "John Doe", "123456789"])
    def test_short_strings_are_partial(self, value):
        assert classify_completeness(value) == Completeness.PARTIAL

    @pytest.mark.parametrize("value", ["Jane Smith-Parker", ["x"], {"k": "v"}, 5, True])
    def test_complete(self, value):
        assert classify_completeness(value) == Completeness.COMPLETE

    def test_presence_points_floors_half(self):
        assert presence_points("Complete answer", 25) == (25, Completeness.COMPLETE)
        assert presence_points("Short", 25) == (12, Completeness.PARTIAL)
        assert presence_points(None, 25) == (0, Completeness.MISSING)


class TestEnumAndMultiSelect:
    """Tests for classify_enum and classify_multi_select."""

    TABLE = (("not started", 0), ("in progress", 20), ("no", 40))

    def test_first_match_wins(self):
        # "not started" also contains "no"
        assert classify_enum("Not Started", self.TABLE, default=10) == 0
        assert classify_enum("No", self.TABLE, default=10) == 40

    def test_unmatched_returns_default(self):
        assert classify_enum("Scheduled for Q3", self.TABLE, default=10) == 10
        assert classify_enum(None, self.TABLE, default=10) == 10
        assert classify_enum(["no"], self.TABLE, default=10) == 10

    def test_multi_select_capped_at_base(self):
        assert classify_multi_select(["a"], 50, 5, 50) == 50
        assert classify_multi_select(["a", "b", "c"], 50, 5, 50) == 50
        assert classify_multi_select([], 50, 5, 50) == 0

    def test_multi_select_increments(self):
        assert classify_multi_select(["a", "b"], 20, 10, 40) == 30
        assert classify_multi_select(["a", "b", "c", "d"], 20, 10, 40) == 40

    def test_multi_select_scalar_counts_as_empty(self):
        assert classify_multi_select("Salesforce", 20, 10, 40) == 0


class TestTierResolvers:
    """Tests for the tier resolvers used by scorers and the planner."""

    def test_complexity_literal_match(self):
        assert classify_complexity("High") == ComplexityTier.HIGH
        assert classify_complexity("low") == ComplexityTier.LOW
        assert classify_complexity("very high") == ComplexityTier.MEDIUM
        assert classify_complexity("very high", default=None) is None

    def test_workflow_complexity_substring(self):
        assert classify_workflow_complexity("Complex multi-level") == WorkflowComplexityTier.COMPLEX
        assert classify_workflow_complexity("Moderate") == WorkflowComplexityTier.MEDIUM
        assert classify_workflow_complexity("unknown") == WorkflowComplexityTier.SIMPLE

    @pytest.mark.parametrize("value,expected", [
        ("4-8 weeks", GoLiveTier.WEEKS_4_8),
        ("8 - 12 weeks", GoLiveTier.WEEKS_8_12),
        ("12-16 weeks", GoLiveTier.WEEKS_12_16),
        ("16+ weeks", GoLiveTier.WEEKS_16_PLUS),
        ("ASAP", GoLiveTier.WEEKS_8_12),
    ])
    def test_go_live(self, value, expected):
        assert classify_go_live(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("5", TemplateVolumeTier.SMALL),
        ("<10", TemplateVolumeTier.SMALL),
        ("10-49", TemplateVolumeTier.MEDIUM),
        ("20-50", TemplateVolumeTier.MEDIUM),
        ("50+", TemplateVolumeTier.LARGE),
        ("large", TemplateVolumeTier.LARGE),
        ("lots", TemplateVolumeTier.MEDIUM),
        (None, TemplateVolumeTier.MEDIUM),
    ])
    def test_template_volume(self, value, expected):
        assert classify_template_volume(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("none", MigrationVolumeTier.NONE),
        ("Large", MigrationVolumeTier.LARGE),
        ("0", MigrationVolumeTier.NONE),
        ("500-1,000", MigrationVolumeTier.SMALL),
        ("1,000-5,000", MigrationVolumeTier.MEDIUM),
        ("10000+", MigrationVolumeTier.LARGE),
        ("unknown", MigrationVolumeTier.NONE),
    ])
    def test_migration_volume(self, value, expected):
        assert classify_migration_volume(value) == expected

    def test_count_lower_bound(self):
        assert count_lower_bound("20-50") == 20
        assert count_lower_bound("<10") == 9
        assert count_lower_bound("under 100") == 99
        assert count_lower_bound(7) == 7
        assert count_lower_bound("several") is None

    def test_normalize_risk_tag(self):
        assert normalize_risk_tag("Security review delays") == "security_review_delays"
        assert normalize_risk_tag("  Data-quality issues! ") == "data_quality_issues"

    def test_round_half_up(self):
        assert round_half_up(Decimal("10.5")) == 11
        assert round_half_up(Decimal("11.44")) == 11
        assert round_half_up(Decimal("2.5")) == 3


class TestSensitivity:
    """Tests for the infosec sensitivity tier."""

    def test_sensitive_system_not_started_is_high(self):
        assert classify_sensitivity(["Salesforce"], "Not started") == SensitivityTier.HIGH

    def test_blank_approval_carries_no_penalty(self):
        assert classify_sensitivity(["SAP"], "") is None
        assert classify_sensitivity(["Slack"], None) is None

    def test_sensitive_system_in_progress_is_medium(self):
        assert classify_sensitivity(["Workday"], "In-progress") == SensitivityTier.MEDIUM

    def test_non_sensitive_system_not_started_is_low(self):
        assert classify_sensitivity(["Slack"], "Not started") == SensitivityTier.LOW
        assert classify_sensitivity(["Slack"], "In progress") is None

    def test_no_penalty_without_systems_or_when_not_needed(self):
        assert classify_sensitivity([], "Not started") is None
        assert classify_sensitivity(["Salesforce"], "No") is None
