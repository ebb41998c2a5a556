from dataclasses import dataclass
from typing import List, Optional

DEFAULT_CONFIDENCE = 0.7
GENERIC_CONFIDENCE = 0.5

LOW_SCORE_THRESHOLD = 3.0          # on the 0-5 scale
LOW_COMPLETION_THRESHOLD = 60.0    # same bar expressed as a completion rate
LOW_GOALS_MET_THRESHOLD = 70.0

PERFORMANCE_RECOMMENDATIONS = [
    "Performance improvement workshop",
    "Goal setting and time management training",
]
GOALS_RECOMMENDATIONS = ["Project management certification"]

# Role keyword (case-insensitive substring) -> recommendations
ROLE_RECOMMENDATIONS = [
    ("manager", ["Leadership development program", "Team building workshop"]),
    ("developer", ["Technical skills advancement", "Code review best practices"]),
]

GENERIC_RECOMMENDATIONS = [
    "Professional development seminar",
    "Industry trends and innovation workshop",
]


@dataclass
class TrainingRecommendations:
    recommendations: List[str]
    confidence: float

    @property
    def text(self) -> str:
        return "; ".join(self.recommendations)


def _is_low_performance(score: Optional[float], completion_rate: Optional[float]) -> bool:
    if score is not None:
        return score < LOW_SCORE_THRESHOLD
    if completion_rate is not None:
        return completion_rate < LOW_COMPLETION_THRESHOLD
    return False


def recommend_training(
    role: Optional[str],
    score: Optional[float] = None,
    goals_met: Optional[float] = None,
    completion_rate: Optional[float] = None,
) -> TrainingRecommendations:
    """
    Rule-based training recommendations for one employee.

    Args:
        role: job title, matched by keyword ("Engineering Manager" matches "manager")
        score: latest 0-5 performance score, if any
        goals_met: latest goals-met percentage, if any
        completion_rate: latest objective completion rate, used when score is missing

    Returns:
        Ordered recommendations and a confidence. Falls back to generic
        recommendations at lower confidence when no rule fires.
    """
    recommendations = []
    confidence = DEFAULT_CONFIDENCE

    if _is_low_performance(score, completion_rate):
        recommendations.extend(PERFORMANCE_RECOMMENDATIONS)

    if goals_met is not None and goals_met < LOW_GOALS_MET_THRESHOLD:
        recommendations.extend(GOALS_RECOMMENDATIONS)

    role_lower = (role or "").lower()
    for keyword, role_recommendations in ROLE_RECOMMENDATIONS:
        if keyword in role_lower:
            recommendations.extend(role_recommendations)

    if not recommendations:
        recommendations.extend(GENERIC_RECOMMENDATIONS)
        confidence = GENERIC_CONFIDENCE

    return TrainingRecommendations(recommendations=recommendations, confidence=confidence)
