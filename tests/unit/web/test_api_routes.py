"""
Tests for the personalization API routes.

The app is built around the app_context fixture (memory backend, frozen
clock), so every request hits the real engine without external services.
"""
import pytest
from fastapi.testclient import TestClient

from web.backend.app import create_app

JOB_POOL = [
    {
        "id": "job_strong",
        "title": "Site Engineer",
        "department": "Construction",
        "requirements": ["BIM", "AutoCAD"],
        "experience": "3+ years",
        "location": "Lima",
        "salary_range": {"min": 6000, "max": 9000},
        "education": "Bachelor's degree in Civil Engineering",
        "industries": ["construction"],
        "posted_at": "2026-03-08T12:00:00Z",
    },
    {
        "id": "job_weak",
        "title": "SAP Consultant",
        "department": "IT",
        "requirements": ["SAP", "ABAP"],
        "experience": 8,
        "location": "Cusco",
        "posted_at": "2026-03-09T12:00:00Z",
    },
]

ARTICLES = [
    {"id": "post_1", "title": "BIM adoption", "category": "technology", "tags": ["bim", "construction"],
     "reading_time_minutes": 5},
    {"id": "post_2", "title": "Green concrete", "category": "sustainability", "tags": ["sustainability"],
     "reading_time_minutes": 9},
    {"id": "post_3", "title": "Site safety", "category": "technology", "tags": ["safety"],
     "reading_time_minutes": 2},
]


@pytest.fixture
def client(app_context):
    app = create_app(app_context, background_cleanup=False)
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCacheRoutes:

    def test_01_put_then_get(self, client):
        response = client.put("/api/cache/careers/job_42", json={"value": {"title": "Site Engineer"}})
        assert response.status_code == 200

        response = client.get("/api/cache/careers/job_42")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["value"] == {"title": "Site Engineer"}

    def test_02_missing_key_is_404(self, client):
        response = client.get("/api/cache/careers/nope")
        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["type"] == "CacheKeyNotFoundException"

    def test_03_expired_key_is_404(self, client, clock):
        client.put("/api/cache/blog/post_1", json={"value": [1, 2, 3]})
        clock.advance(10 * 60 + 1)
        assert client.get("/api/cache/blog/post_1").status_code == 404

    def test_04_namespace_stats(self, client):
        client.put("/api/cache/careers/a", json={"value": 1})
        client.get("/api/cache/careers/a")
        client.get("/api/cache/careers/b")

        response = client.get("/api/cache/careers/stats")
        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["size"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5

    def test_05_overview_lists_configured_namespaces(self, client):
        response = client.get("/api/cache")
        assert response.status_code == 200
        data = response.json()
        assert {"blog", "careers", "content_metrics", "matches"} <= set(data["namespaces"])
        assert 0.0 <= data["total_hit_rate"] <= 1.0

    def test_06_unknown_namespace_reads_do_not_create_it(self, client):
        assert client.get("/api/cache/guessed/k").status_code == 404

        response = client.get("/api/cache/guessed/stats")
        assert response.status_code == 200
        assert response.json()["stats"]["size"] == 0
        assert response.json()["stats"]["misses"] == 0

        assert "guessed" not in client.get("/api/cache").json()["namespaces"]


class TestRankingRoutes:

    def test_01_rank_jobs(self, client):
        response = client.post("/api/rank/jobs", json={"candidate_id": "cand_1", "pool": JOB_POOL})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [m["target_id"] for m in data["matches"]] == ["job_strong", "job_weak"]
        top = data["matches"][0]
        assert top["kind"] == "job"
        assert set(top["breakdown"]) == {
            "skills", "experience", "location", "salary", "work_style", "education", "culture"
        }

    def test_02_rank_jobs_is_cached(self, client, app_context):
        payload = {"candidate_id": "cand_1", "pool": JOB_POOL, "limit": 1}
        first = client.post("/api/rank/jobs", json=payload).json()
        calls = app_context.matching.scoring_calls
        second = client.post("/api/rank/jobs", json=payload).json()

        assert app_context.matching.scoring_calls == calls
        assert first == second
        assert second["count"] == 1

    def test_03_unknown_candidate_is_404(self, client):
        response = client.post("/api/rank/jobs", json={"candidate_id": "ghost", "pool": JOB_POOL})
        assert response.status_code == 404
        assert response.json()["type"] == "SubjectNotFoundError"
        assert "ghost" in response.json()["error"]

    def test_04_limit_zero(self, client):
        response = client.post("/api/rank/jobs", json={"candidate_id": "cand_1", "pool": JOB_POOL, "limit": 0})
        assert response.json()["matches"] == []

    def test_05_negative_limit_rejected(self, client):
        response = client.post("/api/rank/jobs", json={"candidate_id": "cand_1", "pool": JOB_POOL, "limit": -1})
        assert response.status_code == 422

    def test_06_rank_content_excludes_current_item(self, client):
        response = client.post("/api/rank/content", json={
            "subject_id": "viewer_1",
            "items": ARTICLES,
            "jobs": JOB_POOL[:1],
            "context": {"time_of_day": "afternoon", "device": "mobile", "current_item_id": "post_1"},
        })

        assert response.status_code == 200
        ids = [m["target_id"] for m in response.json()["matches"]]
        assert "post_1" not in ids
        assert set(ids) == {"post_2", "post_3", "job_strong"}
        assert all(m["kind"] == "content" for m in response.json()["matches"])

    def test_07_rank_content_unknown_viewer(self, client):
        response = client.post("/api/rank/content", json={"subject_id": "ghost", "items": ARTICLES})
        assert response.status_code == 404


class TestMetricsRoutes:

    def test_01_record_and_read(self, client):
        for _ in range(3):
            client.post("/api/metrics/events", json={"item_id": "post_1", "type": "view"})
        response = client.post("/api/metrics/events", json={"item_id": "post_1", "type": "engage", "value": 45000})

        assert response.status_code == 200
        assert response.json()["metrics"]["engagement_rate"] == pytest.approx(0.2)

        metrics = client.get("/api/metrics/post_1").json()["metrics"]
        assert metrics["views"] == 3
        assert metrics["time_spent_ms"] == 45000
        assert metrics["last_updated"].startswith("2026-03-10T12:00:00")

    def test_02_negative_value_is_400(self, client):
        response = client.post("/api/metrics/events", json={"item_id": "post_1", "type": "view", "value": -2})
        assert response.status_code == 400
        assert response.json()["type"] == "InvalidInteractionError"
        assert client.get("/api/metrics/post_1").status_code == 404

    def test_03_unknown_type_rejected(self, client):
        response = client.post("/api/metrics/events", json={"item_id": "post_1", "type": "teleport"})
        assert response.status_code == 422

    def test_04_unknown_item_is_404(self, client):
        response = client.get("/api/metrics/never_seen")
        assert response.status_code == 404
        assert response.json()["type"] == "MetricsNotFoundException"

    @pytest.mark.parametrize("literal", ["NaN", "Infinity"])
    def test_05_non_finite_value_is_400(self, client, literal):
        body = '{"item_id": "post_1", "type": "view", "value": %s}' % literal
        response = client.post(
            "/api/metrics/events", content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["type"] == "InvalidInteractionError"
        assert client.get("/api/metrics/post_1").status_code == 404
