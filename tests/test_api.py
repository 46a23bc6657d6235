"""Tests for the IMNCI HTTP API."""

import pytest
from fastapi.testclient import TestClient

from src.backend.api import app


@pytest.fixture
def client():
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestClassifierEndpoints:
    def test_danger_signs(self, client):
        response = client.post("/api/imnci/danger-signs", json={"not_able_to_drink": True})
        assert response.status_code == 200
        data = response.json()
        assert data["classification"] == "General Danger Signs Present"
        assert data["color"] == "red"
        assert data["requires_referral"] is True
        assert data["urgency"] == "emergency"

    def test_cough_breathing(self, client):
        response = client.post("/api/imnci/cough-breathing", json={
            "has_cough_difficulty_breathing": True,
            "age_in_months": 10,
            "breaths_per_minute": 55,
        })
        data = response.json()
        assert data["classification"] == "Pneumonia"
        assert data["color"] == "yellow"
        assert data["urgency"] is None

    def test_diarrhea(self, client):
        response = client.post("/api/imnci/diarrhea", json={"has_diarrhea": True, "blood_in_stool": True})
        assert response.json()["classification"] == "Dysentery"

    def test_fever_malaria(self, client):
        response = client.post("/api/imnci/fever", json={"has_fever": True, "malaria_rdt_result": "positive"})
        assert response.json()["classification"] == "Malaria"

    def test_fever_rejects_unknown_rdt(self, client):
        response = client.post("/api/imnci/fever", json={"has_fever": True, "malaria_rdt_result": "maybe"})
        assert response.status_code == 422

    def test_ear(self, client):
        response = client.post("/api/imnci/ear", json={"has_ear_problem": True, "tender_swelling_behind_ear": True})
        data = response.json()
        assert data["classification"] == "Mastoiditis"
        assert data["urgency"] == "urgent"

    def test_nutrition(self, client):
        response = client.post("/api/imnci/nutrition", json={"muac_measurement": 11.0})
        assert response.json()["classification"] == "Severe Acute Malnutrition"


class TestOverallEndpoint:
    def test_overall(self, client):
        response = client.post("/api/imnci/overall", json=[
            {"classification": "Severe Dehydration", "color": "red",
             "requires_referral": True, "urgency": "emergency"},
            {"classification": "No Fever", "color": "green", "requires_referral": False},
        ])
        assert response.status_code == 200
        data = response.json()
        assert data["overall_classification"] == "REFER URGENTLY - Severe Classification"
        assert data["overall_color"] == "red"
        assert data["referral_urgency"] == "emergency"
        assert data["critical_findings"] == ["Severe Dehydration"]

    def test_overall_empty(self, client):
        response = client.post("/api/imnci/overall", json=[])
        assert response.json()["overall_classification"] == "Child can be treated at home"

    def test_overall_rejects_unknown_color(self, client):
        response = client.post("/api/imnci/overall", json=[
            {"classification": "x", "color": "blue", "requires_referral": False},
        ])
        assert response.status_code == 422


class TestColorEndpoints:
    def test_list_colors(self, client):
        data = client.get("/api/imnci/colors").json()
        assert [c["color"] for c in data] == ["green", "yellow", "pink", "red"]

    def test_get_color(self, client):
        data = client.get("/api/imnci/colors/PINK").json()
        assert data["label"] == "Referral Needed"

    def test_unknown_color(self, client):
        assert client.get("/api/imnci/colors/purple").status_code == 404


class TestAssessmentEndpoint:
    def test_complete_assessment(self, client):
        response = client.post("/api/imnci/assessments", json={
            "age_in_months": 10,
            "patient_id": "pt-7",
            "danger_signs": {"lethargic_unconscious": True},
            "cough_breathing": {"has_cough_difficulty_breathing": True, "breaths_per_minute": 30},
            "diarrhea": {"has_diarrhea": True},
            "nutrition": {"muac_measurement": 12.0},
            "immunization": {"immunization_up_to_date": True},
        })
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["results"]["cough_breathing"]["classification"] == \
            "Severe Pneumonia or Very Severe Disease"
        assert data["results"]["diarrhea"]["classification"] == "Severe Dehydration"
        assert "fever" not in data["results"]
        assert data["overall"]["overall_color"] == "red"
        assert data["overall"]["critical_findings"] == [
            "General Danger Signs Present",
            "Severe Pneumonia or Very Severe Disease",
            "Severe Dehydration",
        ]
        record = data["record"]
        assert record["patient_id"] == "pt-7"
        assert record["fever_completed"] is False
        assert record["nutrition_classification"] == "Moderate Acute Malnutrition"
        assert record["referral_urgency"] == "emergency"
        assert record["immunization_up_to_date"] is True

    def test_age_from_date_of_birth(self, client):
        response = client.post("/api/imnci/assessments", json={
            "date_of_birth": "2000-01-01",
            "cough_breathing": {"has_cough_difficulty_breathing": True, "breaths_per_minute": 45},
        })
        assert response.json()["results"]["cough_breathing"]["classification"] == "Pneumonia"

    def test_empty_assessment(self, client):
        data = client.post("/api/imnci/assessments", json={}).json()
        assert data["overall"]["overall_classification"] == "Child can be treated at home"
        assert data["record"]["referral_urgency"] is None

    def test_age_taken_from_cough_step(self, client):
        body = {"has_cough_difficulty_breathing": True, "age_in_months": 30, "breaths_per_minute": 45}
        direct = client.post("/api/imnci/cough-breathing", json=body).json()
        response = client.post("/api/imnci/assessments", json={"cough_breathing": body})
        assert response.status_code == 200
        assert response.json()["results"]["cough_breathing"]["classification"] == \
            direct["classification"] == "Pneumonia"

    def test_matching_cough_age_accepted(self, client):
        response = client.post("/api/imnci/assessments", json={
            "age_in_months": 30,
            "cough_breathing": {"has_cough_difficulty_breathing": True, "age_in_months": 30,
                                "breaths_per_minute": 45},
        })
        assert response.status_code == 200

    def test_conflicting_cough_age_rejected(self, client):
        response = client.post("/api/imnci/assessments", json={
            "age_in_months": 6,
            "cough_breathing": {"has_cough_difficulty_breathing": True, "age_in_months": 30},
        })
        assert response.status_code == 400
        assert "age_in_months" in response.json()["detail"]

    @pytest.mark.parametrize("field, observation", [
        ("cough_breathing", {"has_cough_difficulty_breathing": True, "has_danger_signs": True}),
        ("fever", {"has_fever": True, "has_danger_signs": True}),
        ("diarrhea", {"has_diarrhea": True, "lethargic_unconscious": True}),
    ])
    def test_danger_context_without_danger_step_rejected(self, client, field, observation):
        response = client.post("/api/imnci/assessments", json={field: observation})
        assert response.status_code == 400
        assert field in response.json()["detail"]

    def test_danger_context_consistent_with_danger_step(self, client):
        response = client.post("/api/imnci/assessments", json={
            "danger_signs": {"lethargic_unconscious": True},
            "fever": {"has_fever": True, "has_danger_signs": True},
            "diarrhea": {"has_diarrhea": True, "lethargic_unconscious": True},
        })
        assert response.status_code == 200
        assert response.json()["results"]["fever"]["classification"] == "Very Severe Febrile Disease"
