import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Callable, Tuple
from database.repository import Repository
from core.exceptions import NotFoundError, ValidationError, ComputationError
from modules.risk.scoring import RiskAssessment, SignalBundle, build_signal_bundle, score_attrition_risk, urgency_for_score
from modules.risk.recommendations import TrainingRecommendations, recommend_training
from modules.risk.engagement import engagement_ideas
from modules.risk.policy import POLICY_SURVEY_WINDOW, policy_gap_suggestions
from modules.risk.team import analyze_team

logger = logging.getLogger(__name__)

PENDING = "Pending"
DISMISSED = "Dismissed"

# Generated-content table -> status an "apply" moves a Pending record to
APPLY_STATUS = {
    "training_recommendations": "Scheduled",
    "engagement_ideas": "Applied",
    "policy_enhancements": "Under Review",
}


class HRActionsService:
    """
    The HR action handlers: fetch signals, run the rule engines, persist
    the result and hand back a response body.

    Not-found and validation errors propagate. Failures inside the engines
    are logged and turned into a ``success: False`` result.
    """

    def __init__(self, repository: Repository, now: Optional[Callable[[], datetime]] = None):
        self.repository = repository
        self.now = now or (lambda: datetime.now(timezone.utc))

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def require_employee(self, employee_id: int) -> Dict[str, Any]:
        employee = self.repository.find_one('employees', {'id': employee_id})
        if not employee:
            raise NotFoundError(f"Employee with ID {employee_id} not found")
        return employee

    def require_department(self, department: str) -> List[Dict[str, Any]]:
        members = self.repository.find('employees', {'department': department}, order_by='id')
        if not members:
            raise NotFoundError(f"No employees found in department: {department}")
        return members

    def gather_signals(self, employee_id: int) -> Tuple[Dict[str, Any], List[Dict[str, Any]], List[Dict[str, Any]]]:
        """Employee row plus surveys and metrics, newest first"""
        employee, metrics = self.employee_metrics(employee_id)
        surveys = self.repository.find(
            'satisfaction_surveys', {'employee_id': employee_id}, order_by='survey_date', descending=True
        )
        return employee, surveys, metrics

    def employee_metrics(self, employee_id: int) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """Employee row plus performance metrics, newest first"""
        employee = self.require_employee(employee_id)
        metrics = self.repository.find(
            'performance_metrics', {'employee_id': employee_id}, order_by='period', descending=True
        )
        return employee, metrics

    def assess(
        self,
        employee: Dict[str, Any],
        surveys: List[Dict[str, Any]],
        metrics: List[Dict[str, Any]],
    ) -> Tuple[SignalBundle, RiskAssessment]:
        try:
            signals = build_signal_bundle(employee, surveys, metrics, as_of=self.now().date())
            return signals, score_attrition_risk(signals)
        except Exception as e:
            raise ComputationError(str(e)) from e

    # =========================================================================
    # ACTIONS
    # =========================================================================

    async def generate_attrition_risk(self, employee_id: int) -> Dict[str, Any]:
        """Score an employee and upsert their single attrition risk record"""
        employee, surveys, metrics = self.gather_signals(employee_id)

        try:
            _, assessment = self.assess(employee, surveys, metrics)
        except ComputationError as e:
            logger.error(f"Error calculating attrition risk for employee {employee_id}: {e}")
            return {"success": False, "message": "Error calculating attrition risk", "riskScore": None}

        record = {
            "employee_id": employee_id,
            "risk_score": assessment.score,
            "urgency_level": assessment.urgency_level,
            "explanation": assessment.explanation,
            "last_updated": self.now().isoformat(),
        }
        self.repository.upsert('attrition_risks', record, on_conflict='employee_id')
        logger.info(f"Attrition risk for employee {employee_id}: {assessment.score} ({assessment.urgency_level})")

        return {
            "success": True,
            "message": f"Attrition risk calculated: {assessment.score * 100:.1f}%",
            "riskScore": assessment.score,
            "urgencyLevel": assessment.urgency_level,
            "explanation": assessment.explanation,
        }

    def recommend_for(self, employee: Dict[str, Any], metrics: List[Dict[str, Any]]) -> TrainingRecommendations:
        latest = metrics[0] if metrics else {}
        try:
            return recommend_training(
                employee.get('role'),
                score=latest.get('score'),
                goals_met=latest.get('goals_met'),
                completion_rate=latest.get('objective_completion_rate'),
            )
        except Exception as e:
            raise ComputationError(str(e)) from e

    async def generate_training_recommendations(self, employee_id: int) -> Dict[str, Any]:
        """Append a new recommendation record; earlier ones are kept"""
        employee, metrics = self.employee_metrics(employee_id)

        try:
            result = self.recommend_for(employee, metrics)
        except ComputationError as e:
            logger.error(f"Error calculating training recommendations for employee {employee_id}: {e}")
            return {"success": False, "value": "Error calculating training recommendations"}

        self.repository.insert('training_recommendations', {
            "id": str(uuid.uuid4()),
            "employee_id": employee_id,
            "generated_date": self.now().date().isoformat(),
            "recommendation_text": result.text,
            "confidence_score": result.confidence,
            "status": PENDING,
        })
        logger.info(f"Training recommendations generated for employee {employee_id}")

        return {"success": True, "value": result.text, "confidenceScore": result.confidence}

    async def analyze_team_performance(self, department: str) -> Dict[str, Any]:
        members = self.require_department(department)
        metrics = self.repository.find(
            'performance_metrics', {'employee_id': [m['id'] for m in members]}, order_by='period'
        )

        try:
            analysis = analyze_team(department, members, metrics)
        except Exception as e:
            logger.error(f"Error calculating team performance for {department}: {e}")
            return {"success": False, "message": "Error calculating team performance"}

        return {"success": True, "analysis": analysis}

    async def generate_engagement_ideas(self, department: str) -> Dict[str, Any]:
        members = self.require_department(department)
        surveys = self.repository.find(
            'satisfaction_surveys', {'employee_id': [m['id'] for m in members]},
            order_by='survey_date', descending=True
        )

        try:
            plan = engagement_ideas([float(s['score']) for s in surveys])
        except Exception as e:
            logger.error(f"Error calculating engagement ideas for {department}: {e}")
            return {"success": False, "value": "Error calculating engagement ideas"}

        self.repository.insert('engagement_ideas', {
            "id": str(uuid.uuid4()),
            "department": department,
            "generated_date": self.now().isoformat(),
            "idea_text": plan.text,
            "impact_estimate": plan.impact_estimate,
            "status": PENDING,
        })
        logger.info(f"Engagement ideas generated for {department}")

        return {"success": True, "value": plan.text, "impactEstimate": plan.impact_estimate}

    async def analyze_policy_gaps(self) -> Dict[str, Any]:
        surveys = self.repository.find(
            'satisfaction_surveys', order_by='survey_date', descending=True, limit=POLICY_SURVEY_WINDOW
        )

        try:
            suggestion = policy_gap_suggestions([float(s['score']) for s in surveys])
        except Exception as e:
            logger.error(f"Error calculating policy gaps: {e}")
            return {"success": False, "value": "Error calculating policy gaps"}

        self.repository.insert('policy_enhancements', {
            "id": str(uuid.uuid4()),
            "generated_date": self.now().isoformat(),
            "theme": suggestion.theme,
            "suggestion_text": suggestion.text,
            "rationale": suggestion.rationale,
            "status": PENDING,
        })
        logger.info(f"Policy gap analysis stored under theme '{suggestion.theme}'")

        return {
            "success": True,
            "value": suggestion.text,
            "theme": suggestion.theme,
            "rationale": suggestion.rationale,
        }

    # =========================================================================
    # VIEWS
    # =========================================================================

    async def department_summary(self) -> List[Dict[str, Any]]:
        counts = defaultdict(lambda: {"employeeCount": 0, "keyTalentCount": 0})
        for employee in self.repository.find('employees'):
            entry = counts[employee.get('department')]
            entry["employeeCount"] += 1
            if employee.get('is_key_talent'):
                entry["keyTalentCount"] += 1

        return [{"department": d, **counts[d]} for d in sorted(counts, key=str)]

    def department_risk_scores(self) -> Dict[str, float]:
        """Average stored risk score per department"""
        risks = self.repository.find('attrition_risks')
        if not risks:
            return {}
        employees = self.repository.find('employees', {'id': [r['employee_id'] for r in risks]})
        department_of = {e['id']: e.get('department') for e in employees}

        scores = defaultdict(list)
        for risk in risks:
            department = department_of.get(risk['employee_id'])
            if department is not None:
                scores[department].append(float(risk['risk_score']))
        return {d: sum(v) / len(v) for d, v in scores.items()}

    async def attrition_risk_summary(self) -> List[Dict[str, Any]]:
        risks = self.repository.find('attrition_risks')
        employees = self.repository.find('employees', {'id': [r['employee_id'] for r in risks]}) if risks else []
        department_of = {e['id']: e.get('department') for e in employees}

        grouped = defaultdict(list)
        for risk in risks:
            department = department_of.get(risk['employee_id'])
            if department is not None:
                grouped[department].append(risk)

        summary = []
        for department in sorted(grouped, key=str):
            rows = grouped[department]
            avg = round(sum(float(r['risk_score']) for r in rows) / len(rows), 4)
            summary.append({
                "department": department,
                "assessedCount": len(rows),
                "avgRiskScore": avg,
                "highRiskCount": sum(1 for r in rows if r.get('urgency_level') == "High"),
                "riskLevel": urgency_for_score(avg),
            })
        return summary

    async def list_records(self, table: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return self.repository.find(table, filters, order_by='generated_date', descending=True)

    async def list_attrition_risks(self, employee_id: Optional[int] = None) -> List[Dict[str, Any]]:
        filters = {'employee_id': employee_id} if employee_id is not None else None
        return self.repository.find('attrition_risks', filters, order_by='risk_score', descending=True)

    # =========================================================================
    # STATUS WORKFLOW
    # =========================================================================

    async def transition_status(self, table: str, record_id: str, action: str) -> Dict[str, Any]:
        """Move a Pending generated record to its applied state or to Dismissed"""
        if table not in APPLY_STATUS:
            raise ValidationError(f"Records in {table} have no status workflow")
        if action not in ("apply", "dismiss"):
            raise ValidationError(f"Unknown action: {action}")

        record = self.repository.find_one(table, {'id': record_id})
        if not record:
            raise NotFoundError(f"Record {record_id} not found")
        if record.get('status') != PENDING:
            raise ValidationError(f"Record {record_id} is already {record.get('status')}")

        new_status = APPLY_STATUS[table] if action == "apply" else DISMISSED
        updated = self.repository.update(table, {'id': record_id}, {"status": new_status})
        logger.info(f"{table} {record_id}: {PENDING} -> {new_status}")
        return updated[0]
