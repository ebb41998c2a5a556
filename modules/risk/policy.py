from dataclasses import dataclass
from typing import List

from modules.risk.engagement import average_satisfaction

# Only the most recent surveys feed the company-wide analysis
POLICY_SURVEY_WINDOW = 100


@dataclass
class PolicySuggestion:
    average_satisfaction: float
    theme: str
    suggestions: List[str]
    rationale: str

    @property
    def text(self) -> str:
        return "; ".join(self.suggestions)


def policy_gap_suggestions(scores: List[float]) -> PolicySuggestion:
    """
    Suggest a policy theme from company-wide satisfaction.

    Scores are expected newest first; only the first POLICY_SURVEY_WINDOW
    are considered. No data counts as an average of 50.
    """
    avg = average_satisfaction(scores[:POLICY_SURVEY_WINDOW])

    if avg < 50:
        return PolicySuggestion(
            average_satisfaction=avg,
            theme="Employee Wellbeing and Retention",
            suggestions=[
                "Implement comprehensive mental health support programs",
                "Establish clear career progression pathways",
                "Create flexible work arrangement policies",
                "Develop conflict resolution and mediation procedures",
            ],
            rationale=(
                "Low satisfaction scores indicate need for fundamental policy improvements "
                "in employee support and career development."
            ),
        )

    if avg < 70:
        return PolicySuggestion(
            average_satisfaction=avg,
            theme="Performance and Development",
            suggestions=[
                "Enhance performance review and feedback processes",
                "Implement skills development and training policies",
                "Create innovation and idea submission frameworks",
                "Establish cross-departmental collaboration guidelines",
            ],
            rationale=(
                "Moderate satisfaction suggests opportunities to enhance performance management "
                "and professional development policies."
            ),
        )

    return PolicySuggestion(
        average_satisfaction=avg,
        theme="Excellence and Innovation",
        suggestions=[
            "Develop leadership development and succession planning policies",
            "Create employee recognition and rewards frameworks",
            "Implement knowledge management and sharing policies",
            "Establish sustainability and social responsibility guidelines",
        ],
        rationale=(
            "High satisfaction provides foundation for advanced policies focused on "
            "excellence and innovation."
        ),
    )
