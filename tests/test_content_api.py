from conftest import TRANSCRIPT, qa_json, quiz_json
from video_ai.services.identity import fingerprint


def _body(**overrides):
    body = {
        "pageTitle": "Indexes explained",
        "domain": "www.youtube.com",
        "pageUrl": "https://www.youtube.com/watch?v=idx",
        "videoSrc": "blob:https://www.youtube.com/1",
        "contentType": "quiz",
        "transcript": TRANSCRIPT,
        "videoDuration": 5400,
    }
    body.update(overrides)
    return body


def test_generate_then_cached(client, fake_llm):
    fake_llm.responses = [quiz_json(3, answers=[0, 1, 2])]

    r = client.post("/api/generate", json=_body())
    assert r.status_code == 201
    first = r.json()
    assert first["success"] is True
    assert first["cached"] is False
    assert first["contentType"] == "quiz"
    assert first["videoIdentifier"] == fingerprint("www.youtube.com", "https://www.youtube.com/watch?v=idx", "blob:https://www.youtube.com/1")
    assert first["generatedData"]["mcqCount"] == 15
    assert first["generatedData"]["videoDuration"] == 5400
    assert first["generatedData"]["questions"][0]["answerIndex"] == 0

    r2 = client.post("/api/generate", json=_body())
    assert r2.status_code == 200
    second = r2.json()
    assert second["cached"] is True
    assert second["contentId"] == first["contentId"]
    assert second["generatedData"] == first["generatedData"]


def test_quiz_and_qa_are_cached_separately(client, fake_llm):
    fake_llm.responses = [quiz_json(3), qa_json(3)]

    quiz = client.post("/api/generate", json=_body()).json()
    qa = client.post("/api/generate", json=_body(contentType="qa")).json()

    assert quiz["videoIdentifier"] == qa["videoIdentifier"]
    assert quiz["contentId"] != qa["contentId"]
    assert qa["generatedData"]["type"] == "qa"


def test_boundary_validation(client):
    assert client.post("/api/generate", json=_body(contentType="essay")).status_code == 400
    assert client.post("/api/generate", json=_body(pageTitle="x" * 501)).status_code == 400
    assert client.post("/api/generate", json=_body(transcript="x" * 50_001)).status_code == 400
    assert client.post("/api/generate", json=_body(videoDuration=0)).status_code == 400

    r = client.post("/api/generate", json=_body(domain="   "))
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_short_transcript_is_client_error(client, fake_llm):
    r = client.post("/api/generate", json=_body(transcript="too short"))
    assert r.status_code == 400
    assert "too short" in r.json()["message"]
    assert fake_llm.prompts == []


def test_generation_failure_is_structured_error(client, fake_llm):
    fake_llm.responses = ["no", "still no"]
    r = client.post("/api/generate", json=_body())
    assert r.status_code == 502
    body = r.json()
    assert body["success"] is False
    assert body["message"].startswith("Failed to generate quiz content")

    assert client.get("/api/history").json() == []


def test_history_detail_and_validate(client, fake_llm):
    fake_llm.responses = [quiz_json(3, answers=[0, 1, 2]), qa_json(2)]
    quiz = client.post("/api/generate", json=_body()).json()
    client.post("/api/generate", json=_body(contentType="qa", pageUrl="https://www.youtube.com/watch?v=other"))

    history = client.get("/api/history").json()
    assert len(history) == 2
    assert "generatedData" not in history[0]
    assert [h["contentType"] for h in client.get("/api/history", params={"type": "quiz"}).json()] == ["quiz"]
    assert client.get("/api/history", params={"type": "bogus"}).status_code == 400

    detail = client.get(f"/api/history/{quiz['contentId']}").json()
    assert all("answerIndex" not in q for q in detail["generatedData"]["questions"])
    assert all("explanation" not in q for q in detail["generatedData"]["questions"])
    assert [a["answerIndex"] for a in detail["answers"]] == [0, 1, 2]

    r = client.post(
        f"/api/history/{quiz['contentId']}/validate",
        json={"userAnswers": {"0": 0, "1": 2, "2": 2}},
    )
    assert r.status_code == 200
    result = r.json()
    assert result["success"] is True
    assert result["score"] == 2
    assert result["total"] == 3
    assert result["results"][1]["isCorrect"] is False


def test_unknown_content_is_404(client):
    r = client.get("/api/history/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Content not found"}

    r = client.post("/api/history/nope/validate", json={"userAnswers": {}})
    assert r.status_code == 404


def test_validate_requires_answer_object(client):
    r = client.post("/api/history/nope/validate", json={"userAnswers": [1, 2]})
    assert r.status_code == 400
