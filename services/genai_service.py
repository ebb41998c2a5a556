import logging
from datetime import timedelta
from typing import Callable, Dict, Any, Optional, Tuple
from database.repository import Repository
from core.exceptions import ComputationError, ExternalServiceError
from core.genai_client import NarrativeClient
from modules.risk import narrative
from modules.risk.engagement import engagement_ideas
from modules.risk.feedback import summarize_feedback
from modules.risk.hiring import rank_open_positions
from modules.risk.policy import POLICY_SURVEY_WINDOW, policy_gap_suggestions
from services.hr_actions_service import HRActionsService

logger = logging.getLogger(__name__)

SOURCE_GENAI = "genai"
SOURCE_FALLBACK = "fallback"
RECENT_FEEDBACK_LIMIT = 5


class GenAIService:
    """
    Narrative actions. Each one gathers the same signals the rule engines
    use, asks the narrative client for prose and, if that fails, answers
    with a deterministic text built from those signals.
    """

    def __init__(self, repository: Repository, narrative_client: NarrativeClient, now=None):
        self.repository = repository
        self.narrative_client = narrative_client
        self.actions = HRActionsService(repository, now)

    async def _narrate(self, prompt: str, fallback: Callable[[], str]) -> Tuple[str, str]:
        """Returns (text, source). Never raises for generation failures."""
        try:
            result = await self.narrative_client.generate(prompt)
            if not result.ok:
                raise ExternalServiceError(result.error or "generation failed")
            return result.text, SOURCE_GENAI
        except Exception as e:
            logger.warning(f"Narrative generation failed, using fallback text: {e}")
            return fallback(), SOURCE_FALLBACK

    async def explain_attrition_risk(self, employee_id: int) -> Dict[str, Any]:
        employee, surveys, metrics = self.actions.gather_signals(employee_id)
        feedback = self.repository.find(
            'feedback', {'employee_id': employee_id},
            order_by='feedback_date', descending=True, limit=RECENT_FEEDBACK_LIMIT
        )

        try:
            signals, assessment = self.actions.assess(employee, surveys, metrics)
        except ComputationError as e:
            logger.error(f"Error calculating attrition risk for employee {employee_id}: {e}")
            return {"explanation": "Error calculating attrition risk", "source": SOURCE_FALLBACK}

        prompt = narrative.attrition_prompt(
            employee,
            assessment,
            latest_survey=surveys[0] if surveys else None,
            recent_metrics=metrics[:2],
            feedback_excerpts=summarize_feedback(feedback)["excerpts"],
            tenure_months=signals.tenure_months,
        )
        explanation, source = await self._narrate(
            prompt, lambda: narrative.attrition_fallback(employee, assessment)
        )
        return {"explanation": explanation, "source": source}

    async def summarize_feedback(self, employee_id: int, timeframe_days: int) -> Dict[str, Any]:
        employee = self.actions.require_employee(employee_id)
        cutoff = (self.actions.now().date() - timedelta(days=timeframe_days)).isoformat()
        feedback = [
            f for f in self.repository.find('feedback', {'employee_id': employee_id})
            if str(f.get('feedback_date') or '') >= cutoff
        ]

        summary = summarize_feedback(feedback)
        text, source = await self._narrate(
            narrative.feedback_prompt(employee, summary, timeframe_days),
            lambda: narrative.feedback_fallback(employee, summary, timeframe_days),
        )
        return {"summary": text, "source": source}

    async def suggest_training(self, employee_id: int, gaps: Optional[str]) -> Dict[str, Any]:
        employee, metrics = self.actions.employee_metrics(employee_id)

        try:
            result = self.actions.recommend_for(employee, metrics)
        except ComputationError as e:
            logger.error(f"Error calculating training plan for employee {employee_id}: {e}")
            return {"plan": "Error calculating training plan", "source": SOURCE_FALLBACK}

        plan, source = await self._narrate(
            narrative.training_prompt(employee, result, gaps or ""),
            lambda: narrative.training_fallback(employee, result, gaps or ""),
        )
        return {"plan": plan, "source": source}

    async def get_engagement_ideas(self, department: str, recent_trends: Optional[str]) -> Dict[str, Any]:
        members = self.actions.require_department(department)
        surveys = self.repository.find('satisfaction_surveys', {'employee_id': [m['id'] for m in members]})
        try:
            plan = engagement_ideas([float(s['score']) for s in surveys])
        except Exception as e:
            logger.error(f"Error calculating engagement ideas for {department}: {e}")
            return {"ideas": "Error calculating engagement ideas", "source": SOURCE_FALLBACK}

        ideas, source = await self._narrate(
            narrative.engagement_prompt(department, plan, recent_trends or ""),
            lambda: narrative.engagement_fallback(department, plan),
        )
        return {"ideas": ideas, "source": source}

    async def policy_enhancements(self, recurrent_themes: Optional[str]) -> Dict[str, Any]:
        surveys = self.repository.find(
            'satisfaction_surveys', order_by='survey_date', descending=True, limit=POLICY_SURVEY_WINDOW
        )
        try:
            suggestion = policy_gap_suggestions([float(s['score']) for s in surveys])
        except Exception as e:
            logger.error(f"Error calculating policy enhancements: {e}")
            return {"suggestions": "Error calculating policy enhancements", "source": SOURCE_FALLBACK}

        suggestions, source = await self._narrate(
            narrative.policy_prompt(suggestion, recurrent_themes or ""),
            lambda: narrative.policy_fallback(suggestion),
        )
        return {"suggestions": suggestions, "source": source}

    async def prioritize_hiring(self, attrition_forecast: Optional[str]) -> Dict[str, Any]:
        positions = self.repository.find('open_positions', {'status': 'Open'})
        ranked = rank_open_positions(positions, self.actions.department_risk_scores())

        recommendation, source = await self._narrate(
            narrative.hiring_prompt(ranked, attrition_forecast or ""),
            lambda: narrative.hiring_fallback(ranked),
        )
        return {"recommendation": recommendation, "source": source, "positions": ranked}
