import asyncio
from datetime import datetime, timezone

import pytest

from core.exceptions import NotFoundError
from services.hr_actions_service import HRActionsService


def add_signals(repository, employee_id, surveys=(), metrics=()):
    for score, survey_date in surveys:
        repository.insert("satisfaction_surveys", {
            "employee_id": employee_id, "score": score, "survey_date": survey_date,
        })
    for period, fields in metrics:
        repository.insert("performance_metrics", {"employee_id": employee_id, "period": period, **fields})


class TestGenerateAttritionRisk:

    def test_scores_and_persists(self, client, repository, add_employee, viewer_headers):
        employee = add_employee(tenure_months=3)
        add_signals(
            repository, employee["id"],
            surveys=[(40, "2024-05-01"), (45, "2024-06-01")],
            metrics=[("2024-Q1", {"objective_completion_rate": 90}), ("2024-Q2", {"objective_completion_rate": 60})],
        )

        response = client.post("/hr/generateAttritionRisk", json={"employeeId": employee["id"]}, headers=viewer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["riskScore"] == 1.0
        assert body["urgencyLevel"] == "High"
        assert body["message"] == "Attrition risk calculated: 100.0%"

        stored = repository.find("attrition_risks", {"employee_id": employee["id"]})
        assert len(stored) == 1
        assert stored[0]["explanation"] == (
            "low satisfaction scores; declining performance; new employee adjustment period"
        )

    def test_unknown_employee_is_404(self, client, viewer_headers):
        response = client.post("/hr/generateAttritionRisk", json={"employeeId": 999}, headers=viewer_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Employee with ID 999 not found"

    def test_requires_token(self, client):
        response = client.post("/hr/generateAttritionRisk", json={"employeeId": 1})
        assert response.status_code in (401, 403)

    def test_recompute_is_idempotent_upsert(self, repository, add_employee):
        fixed = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        service = HRActionsService(repository, now=lambda: fixed)
        employee = add_employee(hire_date="2022-01-10")
        add_signals(repository, employee["id"], surveys=[(65, "2025-01-15")])

        asyncio.run(service.generate_attrition_risk(employee["id"]))
        first = repository.find("attrition_risks", {"employee_id": employee["id"]})
        asyncio.run(service.generate_attrition_risk(employee["id"]))
        second = repository.find("attrition_risks", {"employee_id": employee["id"]})

        assert len(second) == 1
        assert first == second
        assert second[0]["risk_score"] == pytest.approx(0.3)
        assert second[0]["urgency_level"] == "Low"
        assert second[0]["last_updated"] == fixed.isoformat()

    def test_engine_failure_returns_failure_result(self, repository, add_employee):
        employee = add_employee()
        # A malformed score makes the engine blow up mid-computation
        repository.insert("satisfaction_surveys", {
            "employee_id": employee["id"], "score": "abc", "survey_date": "2024-01-01",
        })
        service = HRActionsService(repository)

        result = asyncio.run(service.generate_attrition_risk(employee["id"]))

        assert result == {"success": False, "message": "Error calculating attrition risk", "riskScore": None}
        assert repository.find("attrition_risks") == []

    def test_not_found_raised_before_scoring(self, repository):
        with pytest.raises(NotFoundError):
            asyncio.run(HRActionsService(repository).generate_attrition_risk(42))


class TestTrainingRecommendations:

    def test_appends_a_record_per_call(self, client, repository, add_employee, viewer_headers):
        employee = add_employee(role="Senior Engineering Manager")
        add_signals(repository, employee["id"], metrics=[("2024-Q4", {"score": 2.0, "goals_met": 50})])

        for _ in range(2):
            response = client.post(
                "/hr/generateTrainingRecommendations", json={"employeeId": employee["id"]}, headers=viewer_headers
            )
            assert response.status_code == 200

        body = response.json()
        assert body["value"].startswith("Performance improvement workshop; Goal setting")
        assert body["confidenceScore"] == 0.7

        records = repository.find("training_recommendations", {"employee_id": employee["id"]})
        assert len(records) == 2
        assert all(r["status"] == "Pending" for r in records)

    def test_uses_latest_period(self, client, repository, add_employee, viewer_headers):
        employee = add_employee(role="Accountant")
        add_signals(repository, employee["id"], metrics=[
            ("2024-Q1", {"score": 1.5, "goals_met": 20}),
            ("2024-Q2", {"score": 4.5, "goals_met": 95}),
        ])

        response = client.post(
            "/hr/generateTrainingRecommendations", json={"employeeId": employee["id"]}, headers=viewer_headers
        )
        assert response.json()["value"] == "Professional development seminar; Industry trends and innovation workshop"
        assert response.json()["confidenceScore"] == 0.5


class TestDepartmentActions:

    def test_team_performance(self, client, repository, add_employee, viewer_headers):
        ada = add_employee(first_name="Ada", last_name="Lovelace", is_key_talent=True)
        bob = add_employee(first_name="Bob", last_name="Stone")
        add_signals(repository, ada["id"], metrics=[("2024-Q2", {"score": 4.6, "goals_met": 92, "objective_completion_rate": 95})])
        add_signals(repository, bob["id"], metrics=[("2024-Q2", {"score": 3.0, "goals_met": 75, "objective_completion_rate": 65})])

        response = client.post("/hr/analyzeTeamPerformance", json={"department": "Engineering"}, headers=viewer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["analysis"]["avgCompletion"] == 80.0
        assert body["analysis"]["topPerformers"] == ["Ada Lovelace"]
        assert body["analysis"]["improvementAreas"] == ["1 team member(s) below 70% objective completion"]

    def test_unknown_department_is_404(self, client, viewer_headers):
        response = client.post("/hr/analyzeTeamPerformance", json={"department": "Nowhere"}, headers=viewer_headers)
        assert response.status_code == 404

    def test_engagement_ideas_persisted(self, client, repository, add_employee, viewer_headers):
        employee = add_employee(department="Sales")
        add_signals(repository, employee["id"], surveys=[(35, "2024-06-01")])

        response = client.post("/hr/generateEngagementIdeas", json={"department": "Sales"}, headers=viewer_headers)

        assert response.json()["impactEstimate"] == "High"
        assert response.json()["value"].startswith("Implement flexible working hours")
        ideas = repository.find("engagement_ideas", {"department": "Sales"})
        assert len(ideas) == 1
        assert ideas[0]["status"] == "Pending"

    def test_policy_gaps(self, client, repository, add_employee, viewer_headers):
        employee = add_employee()
        add_signals(repository, employee["id"], surveys=[(90, "2024-06-01"), (80, "2024-05-01")])

        response = client.post("/hr/analyzePolicyGaps", headers=viewer_headers)

        assert response.json()["theme"] == "Excellence and Innovation"
        assert len(repository.find("policy_enhancements")) == 1


class TestViews:

    def test_department_and_risk_summaries(self, client, repository, add_employee, viewer_headers):
        a = add_employee(department="Engineering", is_key_talent=True)
        b = add_employee(department="Engineering")
        c = add_employee(department="Sales")
        repository.insert("attrition_risks", {"employee_id": a["id"], "risk_score": 0.9, "urgency_level": "High"})
        repository.insert("attrition_risks", {"employee_id": b["id"], "risk_score": 0.5, "urgency_level": "Medium"})
        repository.insert("attrition_risks", {"employee_id": c["id"], "risk_score": 0.1, "urgency_level": "Low"})

        departments = client.get("/hr/DepartmentSummary", headers=viewer_headers).json()["value"]
        assert departments == [
            {"department": "Engineering", "employeeCount": 2, "keyTalentCount": 1},
            {"department": "Sales", "employeeCount": 1, "keyTalentCount": 0},
        ]

        risks = client.get("/hr/AttritionRiskSummary", headers=viewer_headers).json()["value"]
        assert risks[0]["department"] == "Engineering"
        assert risks[0]["avgRiskScore"] == 0.7
        assert risks[0]["riskLevel"] == "Medium"
        assert risks[0]["highRiskCount"] == 1
        assert risks[1]["riskLevel"] == "Low"


class TestStatusWorkflow:

    def test_apply_then_dismiss_rejected(self, client, repository, editor_headers):
        repository.insert("training_recommendations", {"id": "rec-1", "employee_id": 1, "status": "Pending"})

        response = client.post("/hr/TrainingRecommendation/rec-1/apply", headers=editor_headers)
        assert response.status_code == 200
        assert response.json()["value"]["status"] == "Scheduled"

        response = client.post("/hr/TrainingRecommendation/rec-1/dismiss", headers=editor_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("entity, table, action, status", [
        ("EngagementIdea", "engagement_ideas", "apply", "Applied"),
        ("PolicyEnhancement", "policy_enhancements", "apply", "Under Review"),
        ("PolicyEnhancement", "policy_enhancements", "dismiss", "Dismissed"),
    ])
    def test_transitions(self, client, repository, editor_headers, entity, table, action, status):
        repository.insert(table, {"id": "x1", "status": "Pending"})
        response = client.post(f"/hr/{entity}/x1/{action}", headers=editor_headers)
        assert response.json()["value"]["status"] == status

    def test_viewer_cannot_transition(self, client, repository, viewer_headers):
        repository.insert("engagement_ideas", {"id": "x1", "status": "Pending"})
        response = client.post("/hr/EngagementIdea/x1/apply", headers=viewer_headers)
        assert response.status_code == 403

    def test_unknown_record_and_entity(self, client, editor_headers):
        assert client.post("/hr/EngagementIdea/missing/apply", headers=editor_headers).status_code == 404
        assert client.post("/hr/Unknown/x1/apply", headers=editor_headers).status_code == 404


class TestOpenPositions:

    def test_create_and_list(self, client, repository, editor_headers, viewer_headers):
        response = client.post("/hr/OpenPositions", json={
            "title": "Data Engineer", "department": "Engineering", "priority": "High", "posted_date": "2024-05-01",
        }, headers=editor_headers)
        assert response.status_code == 201
        assert response.json()["value"]["status"] == "Open"

        repository.insert("open_positions", {"title": "Old", "department": "Engineering", "status": "Closed"})
        listed = client.get("/hr/OpenPositions", params={"department": "Engineering"}, headers=viewer_headers)
        assert [p["title"] for p in listed.json()["value"]] == ["Data Engineer"]

    def test_unknown_priority_rejected(self, client, editor_headers):
        response = client.post("/hr/OpenPositions", json={
            "title": "Data Engineer", "department": "Engineering", "priority": "Urgent",
        }, headers=editor_headers)
        assert response.status_code == 422


class TestSignalReads:

    def test_training_reads_only_metrics(self, repository, add_employee):
        employee = add_employee(role="Developer")
        read_tables = []
        find = repository.find

        def recording_find(table, *args, **kwargs):
            read_tables.append(table)
            return find(table, *args, **kwargs)

        repository.find = recording_find
        asyncio.run(HRActionsService(repository).generate_training_recommendations(employee["id"]))

        assert "satisfaction_surveys" not in read_tables
        assert "performance_metrics" in read_tables
