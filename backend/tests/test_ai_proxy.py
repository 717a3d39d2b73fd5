"""
AI proxy endpoints and their behaviour when the engine is down or failing.
"""
import requests

from fashion_api.services import resilience

from conftest import FakeResponse

IMAGE = {"image": ("shirt.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")}


def test_classify_without_image(client):
    response = client.post("/api/classify")
    assert response.status_code == 400
    assert response.json()["message"] == "No image file provided"


def test_classify_engine_down(client):
    response = client.post("/api/classify", files=IMAGE)
    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "message": "AI classification service is not available. Please ensure the AI service is running.",
        "error": "Service unavailable",
    }


def test_classify_normalizes_engine_answer(client, ai_session):
    ai_session.queue(FakeResponse(200, {
        "success": True,
        "classification": {"predicted_class": "dresses", "confidence": 0.93},
    }))
    response = client.post("/api/classify", files=IMAGE)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["classification"] == {"predicted_class": "dresses", "confidence": 0.93, "all_predictions": []}
    assert data["image_quality"] == {"overall_score": 0.5}
    assert response.json()["message"] == "Image classified successfully"


def test_classify_without_classification(client, ai_session):
    ai_session.queue(FakeResponse(200, {"success": True}))
    response = client.post("/api/classify", files=IMAGE)
    assert response.status_code == 500
    assert response.json()["message"] == "No classification data received from AI service"


def test_batch_limit(client):
    files = [("images", (f"{n}.jpg", b"\xff\xd8", "image/jpeg")) for n in range(11)]
    response = client.post("/api/classify/batch", files=files)
    assert response.status_code == 400
    assert response.json()["message"] == "Too many files. Maximum is 10"


def test_batch_passes_engine_answer_through(client, ai_session):
    ai_session.queue(FakeResponse(200, {"success": True, "results": [1, 2]}))
    files = [("images", (f"{n}.jpg", b"\xff\xd8", "image/jpeg")) for n in range(2)]
    response = client.post("/api/classify/batch", files=files)
    assert response.json() == {"success": True, "results": [1, 2]}
    assert ai_session.calls[0]["timeout"] == 60


def test_similarity_degraded_when_engine_down(client):
    response = client.post("/api/similarity/find", json={"item_id": "abc", "top_k": 3})
    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) == 3
    assert results[0]["id"] == "item_abc_similar_1"
    assert all(0.7 <= r["similarity_score"] < 1.0 for r in results)


def test_degraded_results_are_capped_at_five(client):
    response = client.post("/api/recommendations/style", json={"limit": 20})
    assert len(response.json()["recommendations"]) == 5


def test_compatibility_passes_upstream_status(client, ai_session):
    ai_session.queue(FakeResponse(422, {"error": "unknown item"}))
    response = client.post("/api/compatibility/check", json={"item1_id": "a", "item2_id": "b"})
    assert response.status_code == 422
    assert response.json()["message"] == "AI service error"
    assert response.json()["error"] == "unknown item"


def test_knowledge_timeout_is_a_failure(client, ai_session):
    ai_session.queue(requests.Timeout("read timed out"))
    response = client.post("/api/knowledge/query", json={"type": "trends"})
    assert response.status_code == 500
    assert response.json()["message"] == "Failed to query knowledge graph"


def test_attributes_degraded(client):
    response = client.post("/api/attributes/analyze", files=IMAGE)
    assert response.json()["attributes"]["material"] == "cotton"


def test_every_fallback_policy_reports_success():
    body = {"item_id": "x", "item1_id": "a", "item2_id": "b", "type": "trends"}
    for policy in (
        resilience.SIMILARITY,
        resilience.COMPATIBILITY,
        resilience.ATTRIBUTES,
        resilience.STYLE_RECOMMENDATIONS,
        resilience.KNOWLEDGE,
    ):
        assert policy.fallback.build(body)["success"] is True
    assert resilience.CLASSIFY.fallback is None
