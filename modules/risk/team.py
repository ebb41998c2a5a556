from typing import Any, Dict, List, Optional

from modules.risk.scoring import performance_percentage

STRONG_TEAM_SCORE = 3.5
MODERATE_TEAM_SCORE = 2.5
TOP_COMPLETION = 90.0
TOP_SCORE = 4.0
LOW_COMPLETION = 70.0
LOW_GOALS_MET = 70.0
KEY_TALENT_MIN_PERCENT = 20.0


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _full_name(employee: Dict[str, Any]) -> str:
    name = f"{employee.get('first_name') or ''} {employee.get('last_name') or ''}".strip()
    return name or str(employee.get("employee_code") or employee.get("id"))


def performance_trend(avg_score: float) -> str:
    if avg_score >= STRONG_TEAM_SCORE:
        return "Strong"
    if avg_score >= MODERATE_TEAM_SCORE:
        return "Moderate"
    return "Needs Improvement"


def latest_metric_by_employee(metrics: List[Dict[str, Any]]) -> Dict[Any, Dict[str, Any]]:
    latest: Dict[Any, Dict[str, Any]] = {}
    for metric in sorted(metrics, key=lambda m: str(m.get("period") or "")):
        latest[metric.get("employee_id")] = metric
    return latest


def analyze_team(
    department: str,
    members: List[Dict[str, Any]],
    metrics: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Aggregate performance statistics for one department.

    Averages of score and goals met run over every record; completion and
    top performers use each member's latest record only.
    """
    scores = [float(m["score"]) for m in metrics if m.get("score") is not None]
    goals = [float(m["goals_met"]) for m in metrics if m.get("goals_met") is not None]
    avg_score = _mean(scores)
    avg_goals_met = _mean(goals)

    latest = latest_metric_by_employee(metrics)
    completions = {}
    for employee_id, metric in latest.items():
        value = performance_percentage(metric)
        if value is not None:
            completions[employee_id] = value
    avg_completion = _mean(list(completions.values()))

    top_performers = []
    below_target = 0
    ranked_members = sorted(
        members,
        key=lambda e: completions.get(e.get("id"), -1.0),
        reverse=True,
    )
    for employee in ranked_members:
        metric = latest.get(employee.get("id"))
        if metric is None:
            continue
        completion = completions.get(employee.get("id"))
        score = metric.get("score")
        if (completion is not None and completion >= TOP_COMPLETION) or (
            score is not None and float(score) >= TOP_SCORE
        ):
            top_performers.append(_full_name(employee))
        if completion is not None and completion < LOW_COMPLETION:
            below_target += 1

    key_talent_count = sum(1 for e in members if e.get("is_key_talent"))
    key_talent_percentage = (key_talent_count / len(members)) * 100 if members else 0.0

    improvement_areas = _improvement_areas(
        has_metrics=bool(metrics),
        avg_score=avg_score if scores else None,
        avg_goals_met=avg_goals_met if goals else None,
        below_target=below_target,
        key_talent_percentage=key_talent_percentage,
    )

    trend = performance_trend(avg_score)
    summary = (
        f"Team Performance Analysis for {department}: "
        f"{len(members)} employees, average score {avg_score:.2f}/5.00, "
        f"goals achievement {avg_goals_met:.1f}%, "
        f"key talent {key_talent_count} ({key_talent_percentage:.1f}%), "
        f"trend {trend}"
    )

    return {
        "department": department,
        "teamSize": len(members),
        "avgScore": round(avg_score, 2),
        "avgGoalsMet": round(avg_goals_met, 1),
        "avgCompletion": round(avg_completion, 1),
        "keyTalentCount": key_talent_count,
        "keyTalentPercentage": round(key_talent_percentage, 1),
        "performanceTrend": trend,
        "topPerformers": top_performers,
        "improvementAreas": improvement_areas,
        "summary": summary,
    }


def _improvement_areas(
    has_metrics: bool,
    avg_score: Optional[float],
    avg_goals_met: Optional[float],
    below_target: int,
    key_talent_percentage: float,
) -> List[str]:
    if not has_metrics:
        return ["No performance data recorded for this team"]

    areas = []
    if avg_score is not None and avg_score < MODERATE_TEAM_SCORE:
        areas.append("Overall performance scores below expectations")
    if avg_goals_met is not None and avg_goals_met < LOW_GOALS_MET:
        areas.append(f"Goal achievement below target ({avg_goals_met:.1f}%)")
    if below_target:
        areas.append(f"{below_target} team member(s) below {LOW_COMPLETION:.0f}% objective completion")
    if key_talent_percentage < KEY_TALENT_MIN_PERCENT:
        areas.append("Limited key talent depth")
    return areas
