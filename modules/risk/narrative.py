"""
modules/risk/narrative.py

Prompt templates for the narrative generation service and the deterministic
fallback texts used when that service is unavailable.

Fallback builders take only data that has already been gathered and never
raise: every field lookup has a default.
"""

from typing import Any, Dict, List, Optional

from modules.risk.engagement import EngagementPlan
from modules.risk.policy import PolicySuggestion
from modules.risk.recommendations import TrainingRecommendations
from modules.risk.scoring import RiskAssessment

ATTRITION_ACTIONS = (
    "one-on-one discussions, workload assessment, and career development planning"
)


def employee_label(employee: Dict[str, Any]) -> str:
    name = f"{employee.get('first_name') or ''} {employee.get('last_name') or ''}".strip()
    return name or f"Employee {employee.get('id')}"


# =============================================================================
# ATTRITION RISK
# =============================================================================

def attrition_prompt(
    employee: Dict[str, Any],
    assessment: RiskAssessment,
    latest_survey: Optional[Dict[str, Any]],
    recent_metrics: List[Dict[str, Any]],
    feedback_excerpts: List[str],
    tenure_months: int,
) -> str:
    if latest_survey:
        satisfaction_lines = (
            f"- Latest Satisfaction Score: {latest_survey.get('score')}/100 "
            f"(Date: {latest_survey.get('survey_date')})\n"
            f"- Satisfaction Comments: \"{latest_survey.get('comments') or 'none'}\""
        )
    else:
        satisfaction_lines = "- Latest Satisfaction Score: no surveys recorded"

    if recent_metrics:
        current = recent_metrics[0]
        previous = recent_metrics[1] if len(recent_metrics) > 1 else None
        performance_lines = (
            f"- Performance Score: {current.get('score', 'n/a')}/5.0"
            f" (Previous: {previous.get('score', 'n/a') if previous else 'n/a'}/5.0)\n"
            f"- Objective Completion: {current.get('objective_completion_rate', 'n/a')}%\n"
            f"- Goals Met: {current.get('goals_met', 'n/a')}%"
        )
    else:
        performance_lines = "- Performance: no metrics recorded"

    feedback_line = "; ".join(feedback_excerpts) if feedback_excerpts else "none"

    return f"""
You are an HR analytics expert. Analyze the following employee data and explain the employee's attrition risk.

Employee Profile:
- Role: {employee.get('role')}
- Department: {employee.get('department')}
- Tenure: {tenure_months} months

Computed Risk:
- Risk Score: {assessment.score * 100:.1f}% ({assessment.urgency_level} urgency)
- Contributing Factors: {assessment.explanation}

Recent Signals:
{satisfaction_lines}
{performance_lines}
- Recent Feedback: {feedback_line}

Provide a clear, actionable explanation of the attrition risk factors in 2-3 paragraphs. Focus on:
1. Key risk indicators from the data
2. Potential underlying causes
3. Recommended intervention strategies

Keep the tone professional and constructive."""


def attrition_fallback(employee: Dict[str, Any], assessment: RiskAssessment) -> str:
    label = employee_label(employee)
    header = (
        f"Based on available data for {label}, the attrition risk score is "
        f"{assessment.score * 100:.1f}% ({assessment.urgency_level} urgency). "
    )
    if assessment.factors:
        return (
            header
            + f"Key risk factors include: {', '.join(assessment.factors)}. "
            + f"Recommended actions: {ATTRITION_ACTIONS}."
        )
    return (
        header
        + "The attrition risk appears to be within normal parameters. "
        + "Continue regular check-ins and maintain current engagement strategies."
    )


# =============================================================================
# FEEDBACK
# =============================================================================

def feedback_prompt(employee: Dict[str, Any], summary: Dict[str, Any], timeframe_days: int) -> str:
    by_type = ", ".join(f"{t}: {n}" for t, n in summary["by_type"].items()) or "none"
    excerpts = "\n".join(f"- {e}" for e in summary["excerpts"]) or "- none"
    return f"""
You are an HR business partner. Summarize the feedback received by this employee over the last {timeframe_days} days.

Employee: {employee.get('role')} in {employee.get('department')}
Feedback count by type: {by_type}
Recent feedback:
{excerpts}

Summarize recurring themes, strengths and development areas in one short paragraph."""


def feedback_fallback(employee: Dict[str, Any], summary: Dict[str, Any], timeframe_days: int) -> str:
    label = employee_label(employee)
    total = summary.get("total", 0)
    if not total:
        return f"No feedback recorded for {label} in the last {timeframe_days} days."

    by_type = ", ".join(f"{n} {t}" for t, n in summary.get("by_type", {}).items())
    text = f"{label} received {total} feedback entries in the last {timeframe_days} days ({by_type}). "
    if summary.get("concerns"):
        text += f"{summary['concerns']} entries raise concerns or improvement areas worth discussing. "
    else:
        text += "No entries raise concerns. "
    return text + "Review recent comments together during the next one-on-one."


# =============================================================================
# TRAINING
# =============================================================================

def training_prompt(employee: Dict[str, Any], result: TrainingRecommendations, gaps: str) -> str:
    return f"""
You are a learning and development specialist. Create a personalized training plan.

Employee: {employee.get('role')} in {employee.get('department')}
Identified gaps: {gaps or 'none provided'}
Rule-based recommendations: {result.text}

Return a short plan with 3-5 concrete steps and a suggested timeline."""


def training_fallback(employee: Dict[str, Any], result: TrainingRecommendations, gaps: str) -> str:
    plan = f"Training plan for {employee_label(employee)}"
    if gaps:
        plan += f" addressing: {gaps}"
    return plan + f". Recommended: {result.text} (confidence {result.confidence:.0%})."


# =============================================================================
# ENGAGEMENT
# =============================================================================

def engagement_prompt(department: str, plan: EngagementPlan, recent_trends: str) -> str:
    return f"""
You are an employee engagement consultant. Suggest engagement initiatives for the {department} department.

Average satisfaction: {plan.average_satisfaction:.1f}/100
Recent trends: {recent_trends or 'none provided'}
Baseline ideas: {plan.text}

Return 4 tailored, actionable ideas with one sentence each on expected impact."""


def engagement_fallback(department: str, plan: EngagementPlan) -> str:
    return (
        f"Engagement ideas for {department} (average satisfaction "
        f"{plan.average_satisfaction:.1f}/100, expected impact {plan.impact_estimate}): {plan.text}"
    )


# =============================================================================
# POLICY
# =============================================================================

def policy_prompt(suggestion: PolicySuggestion, recurrent_themes: str) -> str:
    return f"""
You are an HR policy advisor. Recommend policy enhancements for the organization.

Company-wide average satisfaction: {suggestion.average_satisfaction:.1f}/100
Recurring themes: {recurrent_themes or 'none provided'}
Suggested focus: {suggestion.theme}
Baseline suggestions: {suggestion.text}

Return prioritized policy recommendations with a brief rationale for each."""


def policy_fallback(suggestion: PolicySuggestion) -> str:
    return (
        f"Theme: {suggestion.theme}. Suggestions: {suggestion.text}. "
        f"Rationale: {suggestion.rationale}"
    )


# =============================================================================
# HIRING
# =============================================================================

def hiring_prompt(ranked_positions: List[Dict[str, Any]], attrition_forecast: str) -> str:
    lines = "\n".join(
        f"- {p.get('title')} ({p.get('department')}), priority {p.get('priority')}, "
        f"openings {p.get('openings', 1)}, department risk {p.get('department_risk', 0.0):.0%}"
        for p in ranked_positions
    ) or "- none"
    return f"""
You are a talent acquisition strategist. Prioritize the following open roles.

Open roles:
{lines}
Attrition forecast: {attrition_forecast or 'none provided'}

Return a ranked hiring plan with a one-line justification per role."""


def hiring_fallback(ranked_positions: List[Dict[str, Any]]) -> str:
    if not ranked_positions:
        return "No open positions to prioritize."
    ordered = "; ".join(
        f"{i}. {p.get('title')} ({p.get('department')}, {p.get('priority')} priority)"
        for i, p in enumerate(ranked_positions, start=1)
    )
    return f"Hiring priority: {ordered}"
