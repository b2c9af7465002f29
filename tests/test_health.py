from fastapi.testclient import TestClient

from video_ai.main import app


def test_health_ok():
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["service"] == "api"
    assert isinstance(body["version"], str)
    assert body["db_ok"] is True
    assert body["cached_items"] == 0


def test_api_index_lists_endpoints():
    client = TestClient(app)
    r = client.get("/api")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert set(body["endpoints"]) == {"generate", "history", "contentById", "validateAnswers"}
