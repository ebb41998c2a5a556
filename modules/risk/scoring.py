"""
modules/risk/scoring.py

Attrition risk scoring.

Blends three weak signals into a bounded, explainable score:
- average of the most recent satisfaction surveys (0-100)
- trend between the two most recent performance measurements
- tenure in months

All functions here are pure. Persisting the result is the caller's job.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from modules.risk.tenure import compute_tenure_months


# =============================================================================
# RULE TABLE
# =============================================================================

BASE_RISK = 0.1
SATISFACTION_WINDOW = 3

# (upper bound exclusive, delta, factor label), checked in order
SATISFACTION_RULES = [
    (50, 0.4, "low satisfaction scores"),
    (70, 0.2, "moderate satisfaction concerns"),
]

PERFORMANCE_DROP_POINTS = 10
PERFORMANCE_DECLINE_DELTA = 0.3
PERFORMANCE_DECLINE_LABEL = "declining performance"

NEW_EMPLOYEE_MONTHS = 6
NEW_EMPLOYEE_DELTA = 0.2
NEW_EMPLOYEE_LABEL = "new employee adjustment period"

LONG_TENURE_MONTHS = 60
LONG_TENURE_DELTA = 0.1
LONG_TENURE_LABEL = "long tenure — potential stagnation"

HIGH_URGENCY_ABOVE = 0.7
MEDIUM_URGENCY_ABOVE = 0.4

NO_FACTORS_EXPLANATION = "No significant risk factors identified"

# Rounding applied after clamping so 0.1 + 0.4 + 0.2 lands on 0.7, not 0.7000000000000001
SCORE_PRECISION = 4


@dataclass
class SignalBundle:
    """Normalized inputs for one employee. Sequences are newest first."""
    tenure_months: int
    satisfaction_scores: List[float] = field(default_factory=list)
    performance_percentages: List[float] = field(default_factory=list)


@dataclass
class RiskAssessment:
    score: float               # 0-1
    urgency_level: str         # "Low", "Medium", "High"
    factors: List[str]
    explanation: str


# =============================================================================
# SIGNAL NORMALIZATION
# =============================================================================

def performance_percentage(metric: Dict[str, Any]) -> Optional[float]:
    """
    Express one performance record as a 0-100 percentage.

    Prefers the objective completion rate, then the 0-5 score scaled by 20,
    then the goals-met percentage. Returns None if the record has none.
    """
    completion = metric.get("objective_completion_rate")
    if completion is not None:
        return float(completion)

    score = metric.get("score")
    if score is not None:
        return float(score) * 20

    goals_met = metric.get("goals_met")
    if goals_met is not None:
        return float(goals_met)

    return None


def build_signal_bundle(
    employee: Dict[str, Any],
    surveys: List[Dict[str, Any]],
    metrics: List[Dict[str, Any]],
    as_of: Optional[date] = None,
) -> SignalBundle:
    """
    Turn raw repository rows into a SignalBundle.

    Args:
        employee: employees row, needs "hire_date"
        surveys: satisfaction_surveys rows in any order
        metrics: performance_metrics rows in any order
        as_of: date tenure is measured to (defaults to today)
    """
    surveys_newest_first = sorted(
        (s for s in surveys if s.get("score") is not None),
        key=lambda s: str(s.get("survey_date") or ""),
        reverse=True,
    )
    metrics_newest_first = sorted(
        metrics,
        key=lambda m: str(m.get("period") or ""),
        reverse=True,
    )

    percentages = []
    for metric in metrics_newest_first:
        value = performance_percentage(metric)
        if value is not None:
            percentages.append(value)

    return SignalBundle(
        tenure_months=compute_tenure_months(employee.get("hire_date"), as_of),
        satisfaction_scores=[float(s["score"]) for s in surveys_newest_first],
        performance_percentages=percentages,
    )


# =============================================================================
# SCORING
# =============================================================================

def clamp_score(score: float) -> float:
    return round(max(0.0, min(1.0, score)), SCORE_PRECISION)


def urgency_for_score(score: float) -> str:
    """Strictly-greater thresholds: 0.7 is Medium, 0.4 is Low."""
    if score > HIGH_URGENCY_ABOVE:
        return "High"
    if score > MEDIUM_URGENCY_ABOVE:
        return "Medium"
    return "Low"


def _satisfaction_factor(scores: List[float]) -> Optional[tuple]:
    recent = scores[:SATISFACTION_WINDOW]
    if not recent:
        return None

    mean = sum(recent) / len(recent)
    for upper_bound, delta, label in SATISFACTION_RULES:
        if mean < upper_bound:
            return delta, label
    return None


def _performance_factor(percentages: List[float]) -> Optional[tuple]:
    if len(percentages) < 2:
        return None

    latest, prior = percentages[0], percentages[1]
    if prior - latest > PERFORMANCE_DROP_POINTS:
        return PERFORMANCE_DECLINE_DELTA, PERFORMANCE_DECLINE_LABEL
    return None


def _tenure_factor(tenure_months: int) -> Optional[tuple]:
    if tenure_months < NEW_EMPLOYEE_MONTHS:
        return NEW_EMPLOYEE_DELTA, NEW_EMPLOYEE_LABEL
    if tenure_months > LONG_TENURE_MONTHS:
        return LONG_TENURE_DELTA, LONG_TENURE_LABEL
    return None


def score_attrition_risk(signals: SignalBundle) -> RiskAssessment:
    """
    Score one employee's attrition risk.

    Starts from BASE_RISK, adds the delta of every factor that fires,
    clamps to [0, 1] and maps the result to an urgency tier.
    """
    score = BASE_RISK
    factors = []

    for factor in (
        _satisfaction_factor(signals.satisfaction_scores),
        _performance_factor(signals.performance_percentages),
        _tenure_factor(signals.tenure_months),
    ):
        if factor is None:
            continue
        delta, label = factor
        score += delta
        factors.append(label)

    score = clamp_score(score)
    explanation = "; ".join(factors) if factors else NO_FACTORS_EXPLANATION

    return RiskAssessment(
        score=score,
        urgency_level=urgency_for_score(score),
        factors=factors,
        explanation=explanation,
    )
