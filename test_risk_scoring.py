from datetime import date

import pytest

from modules.risk.scoring import (
    NO_FACTORS_EXPLANATION,
    SignalBundle,
    build_signal_bundle,
    clamp_score,
    performance_percentage,
    score_attrition_risk,
    urgency_for_score,
)
from modules.risk.tenure import compute_tenure_months


class TestUrgencyTiers:

    @pytest.mark.parametrize("score, tier", [
        (0.75, "High"),
        (0.7, "Medium"),
        (0.41, "Medium"),
        (0.4, "Low"),
        (0.0, "Low"),
        (1.0, "High"),
    ])
    def test_thresholds_are_strictly_greater(self, score, tier):
        assert urgency_for_score(score) == tier


class TestScoring:

    def test_no_signals_in_neutral_tenure_band(self):
        result = score_attrition_risk(SignalBundle(tenure_months=24))
        assert result.score == 0.1
        assert result.urgency_level == "Low"
        assert result.factors == []
        assert result.explanation == NO_FACTORS_EXPLANATION

    def test_no_signals_new_employee_only_tenure_factor(self):
        result = score_attrition_risk(SignalBundle(tenure_months=3))
        assert result.score == pytest.approx(0.3)
        assert result.explanation == "new employee adjustment period"

    def test_no_signals_long_tenure(self):
        result = score_attrition_risk(SignalBundle(tenure_months=72))
        assert result.score == pytest.approx(0.2)
        assert result.explanation == "long tenure — potential stagnation"

    @pytest.mark.parametrize("months", [6, 60])
    def test_tenure_band_edges_are_neutral(self, months):
        assert score_attrition_risk(SignalBundle(tenure_months=months)).factors == []

    def test_all_factors_sum_to_exactly_one(self):
        signals = SignalBundle(
            tenure_months=2,
            satisfaction_scores=[30, 40, 20],
            performance_percentages=[50, 80],
        )
        result = score_attrition_risk(signals)
        assert result.score == 1.0
        assert result.urgency_level == "High"
        assert result.explanation == (
            "low satisfaction scores; declining performance; new employee adjustment period"
        )

    def test_low_satisfaction_plus_new_employee_lands_on_boundary(self):
        # 0.1 + 0.4 + 0.2 must be 0.7 (Medium), not a float a hair above it
        signals = SignalBundle(tenure_months=1, satisfaction_scores=[45])
        result = score_attrition_risk(signals)
        assert result.score == 0.7
        assert result.urgency_level == "Medium"

    def test_moderate_satisfaction(self):
        result = score_attrition_risk(SignalBundle(tenure_months=24, satisfaction_scores=[65, 60]))
        assert result.score == pytest.approx(0.3)
        assert result.factors == ["moderate satisfaction concerns"]

    def test_satisfaction_window_uses_three_most_recent(self):
        # Newest three average 80; the old low score is outside the window
        signals = SignalBundle(tenure_months=24, satisfaction_scores=[80, 80, 80, 0, 0])
        assert score_attrition_risk(signals).factors == []

    def test_drop_of_exactly_ten_points_is_not_a_decline(self):
        signals = SignalBundle(tenure_months=24, performance_percentages=[70, 80])
        assert score_attrition_risk(signals).factors == []

    def test_single_performance_record_skips_trend(self):
        signals = SignalBundle(tenure_months=24, performance_percentages=[10])
        assert score_attrition_risk(signals).factors == []

    def test_clamp_bounds(self):
        assert clamp_score(1.3) == 1.0
        assert clamp_score(-0.2) == 0.0


class TestSignalBundle:

    def test_orders_rows_newest_first(self):
        employee = {"hire_date": "2020-01-15"}
        surveys = [
            {"score": 90, "survey_date": "2024-01-01"},
            {"score": 40, "survey_date": "2024-06-01"},
        ]
        metrics = [
            {"period": "2024-Q1", "objective_completion_rate": 90},
            {"period": "2024-Q2", "objective_completion_rate": 60},
        ]
        bundle = build_signal_bundle(employee, surveys, metrics, as_of=date(2024, 7, 1))

        assert bundle.satisfaction_scores == [40.0, 90.0]
        assert bundle.performance_percentages == [60.0, 90.0]
        assert bundle.tenure_months == 53

    def test_performance_percentage_prefers_completion_rate(self):
        assert performance_percentage({"objective_completion_rate": 72, "score": 1.0}) == 72.0
        assert performance_percentage({"score": 4.0, "goals_met": 10}) == 80.0
        assert performance_percentage({"goals_met": 55}) == 55.0
        assert performance_percentage({}) is None

    def test_score_drop_on_five_point_scale_is_a_decline(self):
        employee = {"hire_date": "2020-01-15"}
        metrics = [
            {"period": "2024-Q1", "score": 4.2},
            {"period": "2024-Q2", "score": 2.8},
        ]
        bundle = build_signal_bundle(employee, [], metrics, as_of=date(2024, 7, 1))
        assert score_attrition_risk(bundle).factors == ["declining performance"]


class TestTenure:

    def test_counts_whole_months(self):
        assert compute_tenure_months("2024-01-20", date(2024, 3, 19)) == 1
        assert compute_tenure_months("2024-01-20", date(2024, 3, 20)) == 2

    def test_future_or_missing_hire_date(self):
        assert compute_tenure_months("2030-01-01", date(2024, 1, 1)) == 0
        assert compute_tenure_months(None, date(2024, 1, 1)) == 0
        assert compute_tenure_months("not-a-date", date(2024, 1, 1)) == 0
