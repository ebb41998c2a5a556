from dataclasses import dataclass
from typing import List, Optional

# Average used when a department has no survey data yet
DEFAULT_SATISFACTION = 50.0

LOW_SATISFACTION_IDEAS = [
    "Implement flexible working hours to improve work-life balance",
    "Organize team building activities and social events",
    "Establish mentorship programs for career development",
    "Create recognition and rewards program for achievements",
]

MODERATE_SATISFACTION_IDEAS = [
    "Launch innovation challenges and hackathons",
    "Provide professional development workshops",
    "Create cross-functional collaboration opportunities",
    "Implement employee feedback and suggestion system",
]

HIGH_SATISFACTION_IDEAS = [
    "Establish employee-led interest groups and clubs",
    "Create knowledge sharing sessions and lunch-and-learns",
    "Implement peer recognition programs",
    "Organize volunteer and community service opportunities",
]


@dataclass
class EngagementPlan:
    average_satisfaction: float
    ideas: List[str]
    impact_estimate: str       # "High" or "Medium"

    @property
    def text(self) -> str:
        return "; ".join(self.ideas)


def average_satisfaction(scores: List[float]) -> float:
    if not scores:
        return DEFAULT_SATISFACTION
    return sum(scores) / len(scores)


def engagement_ideas(scores: List[float], average: Optional[float] = None) -> EngagementPlan:
    """Pick a band of engagement ideas from the department's satisfaction scores."""
    avg = average_satisfaction(scores) if average is None else average

    if avg < 50:
        return EngagementPlan(avg, list(LOW_SATISFACTION_IDEAS), "High")
    if avg < 70:
        return EngagementPlan(avg, list(MODERATE_SATISFACTION_IDEAS), "Medium")
    return EngagementPlan(avg, list(HIGH_SATISFACTION_IDEAS), "Medium")
