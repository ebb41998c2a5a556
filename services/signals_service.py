import logging
from datetime import date
from typing import List, Dict, Any, Optional
from database.repository import Repository
from core.exceptions import NotFoundError, ValidationError
from models.signals import SatisfactionSurveyCreate, PerformanceMetricCreate, FeedbackCreate

logger = logging.getLogger(__name__)


class SignalsService:
    """
    Append-only writes for the signals the risk engine reads: satisfaction
    surveys, performance metrics and feedback.

    Range checks live on the request models, so a payload that reaches this
    service has already passed them.
    """

    def __init__(self, repository: Repository):
        self.repository = repository

    def _require_employee(self, employee_id: int) -> Dict[str, Any]:
        employee = self.repository.find_one('employees', {'id': employee_id})
        if not employee:
            raise NotFoundError(f"Employee with ID {employee_id} not found")
        return employee

    async def add_satisfaction_survey(self, survey: SatisfactionSurveyCreate) -> Dict[str, Any]:
        self._require_employee(survey.employee_id)
        row = self.repository.insert('satisfaction_surveys', survey.model_dump(mode='json'))
        logger.info(f"Satisfaction survey recorded for employee {survey.employee_id}: {survey.score}")
        return row

    async def add_performance_metric(self, metric: PerformanceMetricCreate) -> Dict[str, Any]:
        self._require_employee(metric.employee_id)
        if metric.score is None and metric.goals_met is None and metric.objective_completion_rate is None:
            raise ValidationError(
                "Performance metric needs a score, a goals met percentage or an objective completion rate"
            )
        row = self.repository.insert('performance_metrics', metric.model_dump(mode='json'))
        logger.info(f"Performance metric recorded for employee {metric.employee_id} ({metric.period})")
        return row

    async def add_feedback(self, feedback: FeedbackCreate) -> Dict[str, Any]:
        if feedback.employee_id == feedback.from_user_id:
            raise ValidationError("Employee cannot provide feedback to themselves")
        self._require_employee(feedback.employee_id)
        self._require_employee(feedback.from_user_id)

        row = feedback.model_dump(mode='json')
        row['feedback_date'] = row['feedback_date'] or date.today().isoformat()
        stored = self.repository.insert('feedback', row)
        logger.info(f"Feedback recorded for employee {feedback.employee_id} from {feedback.from_user_id}")
        return stored

    async def list_satisfaction_surveys(self, employee_id: Optional[int] = None) -> List[Dict[str, Any]]:
        filters = {'employee_id': employee_id} if employee_id is not None else None
        return self.repository.find('satisfaction_surveys', filters, order_by='survey_date', descending=True)

    async def list_performance_metrics(self, employee_id: Optional[int] = None) -> List[Dict[str, Any]]:
        filters = {'employee_id': employee_id} if employee_id is not None else None
        return self.repository.find('performance_metrics', filters, order_by='period', descending=True)

    async def list_feedback(self, employee_id: Optional[int] = None) -> List[Dict[str, Any]]:
        filters = {'employee_id': employee_id} if employee_id is not None else None
        return self.repository.find('feedback', filters, order_by='feedback_date', descending=True)
