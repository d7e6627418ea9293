import json

import pytest
from fastapi.testclient import TestClient

import api
from config import Settings


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(api, "settings", Settings())
    api.resume_storage.clear()
    return TestClient(api.app)


@pytest.fixture
def session_id(client, master_data):
    response = client.post("/api/master-resume", json={"master_resume": master_data})
    assert response.status_code == 200
    return response.json()["session_id"]


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_llm_status_without_configuration(client):
    data = client.get("/api/llm-status").json()
    assert data["llm_available"] is False
    assert data["api_keys"]["openai"] == "not set"


def test_job_types(client):
    job_types = client.get("/api/job-types").json()["job_types"]
    names = [job["name"] for job in job_types]
    assert "DevOps Engineer" in names
    assert all(job["tags"] for job in job_types)


def test_gap_analysis_with_inline_master(client, master_data, job_description):
    response = client.post("/api/gap-analysis", json={
        "master_resume": master_data,
        "tailored_resume": master_data,
        "job_description": job_description,
    })

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert 0 <= analysis["overall_score"] <= 100
    assert analysis["skills_analysis"]["required_skills"][0]["name"] == "Python"


def test_gap_analysis_with_session(client, session_id, master_data, job_description):
    response = client.post("/api/gap-analysis", json={
        "session_id": session_id,
        "tailored_resume": master_data,
        "job_description": job_description,
    })
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_gap_analysis_unknown_session(client, master_data, job_description):
    response = client.post("/api/gap-analysis", json={
        "session_id": "missing",
        "tailored_resume": master_data,
        "job_description": job_description,
    })
    assert response.status_code == 404


def test_gap_analysis_requires_master(client, master_data, job_description):
    response = client.post("/api/gap-analysis", json={
        "tailored_resume": master_data,
        "job_description": job_description,
    })
    assert response.status_code == 400


def test_gap_analysis_rejects_empty_job_description(client, master_data):
    response = client.post("/api/gap-analysis", json={
        "master_resume": master_data,
        "tailored_resume": master_data,
        "job_description": "   ",
    })
    assert response.status_code == 400


def test_validation_errors_are_flattened(client, job_description):
    response = client.post("/api/gap-analysis", json={"job_description": job_description})

    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Validation error"
    assert any("tailored_resume" in error["field"] for error in body["errors"])


def test_gap_analysis_pdf(client, master_data, job_description):
    response = client.post("/api/gap-analysis/pdf", json={
        "master_resume": master_data,
        "tailored_resume": master_data,
        "job_description": job_description,
    })

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_gap_analysis_with_text_file(client, session_id, master_data, job_description):
    response = client.post(
        "/api/gap-analysis-with-file",
        files={"file": ("job.txt", job_description.encode("utf-8"), "text/plain")},
        data={"session_id": session_id, "tailored_resume": json.dumps(master_data)},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["filename"] == "job.txt"
    assert body["analysis"]["skills_analysis"]["match_percentage"] == 83


def test_gap_analysis_with_file_rejects_bad_json(client, session_id, job_description):
    response = client.post(
        "/api/gap-analysis-with-file",
        files={"file": ("job.txt", job_description.encode("utf-8"), "text/plain")},
        data={"session_id": session_id, "tailored_resume": "{not json"},
    )
    assert response.status_code == 400


def test_gap_analysis_with_unsupported_file(client, session_id, master_data):
    response = client.post(
        "/api/gap-analysis-with-file",
        files={"file": ("job.doc", b"\xff\xfe\x00binary", "application/msword")},
        data={"session_id": session_id, "tailored_resume": json.dumps(master_data)},
    )
    assert response.status_code == 400


def test_delete_session(client, session_id):
    assert client.delete(f"/api/session/{session_id}").status_code == 200
    assert client.delete(f"/api/session/{session_id}").status_code == 404


def test_extract_requirements(client, job_description):
    data = client.post("/api/extract-requirements", json={"job_description": job_description}).json()

    assert data["skills"] == ["Python", "AWS", "Docker", "Kubernetes"]
    assert data["keywords"][0] == "python"
    assert data["pay_range"] == "$140,000 - $170,000 per year"
    assert len(data["responsibilities"]) == 3


def test_analyze_bullet(client):
    data = client.post("/api/analyze-bullet", json={"bullet": "Led a team."}).json()
    assert data["analysis"]["score"] == 20


def test_tailor(client, session_id, job_description):
    response = client.post("/api/tailor", json={"session_id": session_id, "job_description": job_description})

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["method"] == "mock"
    assert result["job_breakdown"]["pay_range"] == "$140,000 - $170,000 per year"


def test_ideal_resume(client, job_description):
    resume = client.post("/api/ideal-resume", json={"job_description": job_description}).json()["resume"]
    assert len(resume["experience"]) == 3


def test_tag_resume_by_job_type(client, session_id):
    response = client.post("/api/tag-resume", json={"session_id": session_id, "job_type": "DevOps Engineer"})

    assert response.status_code == 200
    body = response.json()
    assert "Kubernetes" in body["tags"]
    assert [p["title"] for p in body["resume"]["projects"]] == ["Homelab"]


def test_tag_resume_unknown_job_type(client, session_id):
    response = client.post("/api/tag-resume", json={"session_id": session_id, "job_type": "Astronaut"})
    assert response.status_code == 404


def test_optimize_bullet_falls_back_to_mock(client):
    response = client.post("/api/optimize-bullet", json={
        "bullet": "Worked on internal tools.",
        "job_description": "Python role",
        "use_llm": True,
    })

    assert response.status_code == 200
    body = response.json()
    assert body["method"] == "mock"
    assert body["original_text"] == "Worked on internal tools."
    assert body["optimized_text"].startswith("Developed")


def test_tag_suggestions_for_session(client, session_id):
    data = client.get("/api/tags/suggest", params={"q": "ku", "session_id": session_id}).json()
    assert data["suggestions"] == ["Kubernetes"]


def test_tag_suggestions_without_session(client):
    data = client.get("/api/tags/suggest", params={"q": "kuber"}).json()
    assert data["suggestions"] == ["Kubernetes"]


def test_tag_suggestions_unknown_session(client):
    assert client.get("/api/tags/suggest", params={"session_id": "missing"}).status_code == 404


def test_tailor_includes_plain_text_resume(client, session_id, job_description):
    body = client.post("/api/tailor", json={"session_id": session_id, "job_description": job_description}).json()

    assert body["resume_text"].startswith("JANE DOE")
    assert "WORK EXPERIENCE" in body["resume_text"]


def test_tag_resume_includes_plain_text_resume(client, session_id):
    body = client.post("/api/tag-resume", json={"session_id": session_id, "tags": ["React"]}).json()

    assert body["resume_text"].startswith("JANE DOE")
    assert "Created React dashboards used by 500 internal users" in body["resume_text"]


def test_master_resume_with_numeric_tag_names(client):
    master = {"skills": [{"name": "Python", "tags": [{"name": 5}]}]}
    response = client.post("/api/master-resume", json={"master_resume": master})
    assert response.status_code == 200


def test_optimize_bullet_request_can_opt_out_of_llm(client, monkeypatch):
    monkeypatch.setattr(api, "settings", Settings(use_llm=True, openai_api_key="k"))

    calls = []
    monkeypatch.setattr(api.BulletOptimizer, "_call_llm", lambda self, *args, **kwargs: calls.append(args))

    body = client.post("/api/optimize-bullet", json={
        "bullet": "Worked on internal tools.",
        "job_description": "Python role",
        "use_llm": False,
    }).json()
    assert body["method"] == "mock"
    assert calls == []


def test_optimize_bullet_defaults_to_configured_llm(client, monkeypatch):
    monkeypatch.setattr(api, "settings", Settings(use_llm=True, openai_api_key="k"))
    monkeypatch.setattr(api.BulletOptimizer, "_call_llm", lambda self, *args, **kwargs: "Shipped internal tools")

    body = client.post("/api/optimize-bullet", json={
        "bullet": "Worked on internal tools.",
        "job_description": "Python role",
    }).json()
    assert body == {"success": True, "original_text": "Worked on internal tools.",
                    "optimized_text": "Shipped internal tools", "method": "ai"}


def test_added_tag_is_suggested_for_session(client, session_id):
    response = client.post("/api/tags", json={"session_id": session_id, "tag": "Rust"})
    assert response.status_code == 200

    data = client.get("/api/tags/suggest", params={"q": "ru", "session_id": session_id}).json()
    assert data["suggestions"] == ["Rust"]


def test_add_tag_unknown_session(client):
    assert client.post("/api/tags", json={"session_id": "missing", "tag": "Rust"}).status_code == 404


def test_add_tag_rejects_blank_tag(client, session_id):
    assert client.post("/api/tags", json={"session_id": session_id, "tag": "  "}).status_code == 400


def test_update_master_resume_refreshes_suggestions(client, session_id):
    assert client.get("/api/tags/suggest", params={"q": "kube", "session_id": session_id}).json()[
        "suggestions"] == ["Kubernetes"]

    replacement = {"skills": [{"name": "Go", "tags": ["Golang"]}]}
    response = client.put(f"/api/master-resume/{session_id}", json={"master_resume": replacement})
    assert response.status_code == 200

    assert client.get("/api/tags/suggest", params={"q": "kube", "session_id": session_id}).json()[
        "suggestions"] == []
    assert client.get("/api/tags/suggest", params={"q": "golang", "session_id": session_id}).json()[
        "suggestions"] == ["Golang"]


def test_update_master_resume_unknown_session(client, master_data):
    response = client.put("/api/master-resume/missing", json={"master_resume": master_data})
    assert response.status_code == 404
