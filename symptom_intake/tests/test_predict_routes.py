import io

from symptom_intake.models.search_history import SearchHistory
from symptom_intake.routes import predict_routes
from symptom_intake.services import enrichment, search_history

from .conftest import TestingSessionLocal


def _history_for(user_id):
    db = TestingSessionLocal()
    try:
        return db.query(SearchHistory).filter(SearchHistory.user_id == user_id).all()
    finally:
        db.close()


def test_predict_anonymous(client):
    r = client.post("/api/predict", data={"symptoms": "I have a fever and a headache"})
    assert r.status_code == 200, r.text
    j = r.json()
    assert j["disease"] == "Common Cold / Flu"
    assert j["severity"] == "Mild to Moderate"
    assert len(j["tips"]) == 6
    assert set(j["diet_plan"]) == {"foods_to_eat", "foods_to_avoid"}
    assert r.headers.get("x-trace-id")


def test_predict_authenticated_saves_history(client, user, auth_headers):
    text = "stomach cramps and nausea " * 20
    r = client.post("/api/predict", data={"symptoms": text}, headers=auth_headers)
    assert r.status_code == 200, r.text
    rows = _history_for(user.id)
    assert len(rows) == 1
    assert rows[0].disease == "Gastroenteritis / Stomach Flu"
    assert rows[0].severity == "Mild to Moderate"
    assert rows[0].symptoms == text[:200]
    assert rows[0].file_name is None


def test_predict_invalid_token_is_anonymous(client):
    r = client.post(
        "/api/predict",
        data={"symptoms": "itchy hives"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert r.status_code == 200
    assert r.json()["disease"] == "Allergic Reaction"


def test_predict_requires_some_text(client):
    r = client.post("/api/predict", data={"symptoms": "   "})
    assert r.status_code == 400
    j = r.json()
    assert j["code"] == "BAD_REQUEST"
    assert j["message"] == "Please provide symptoms description or upload a medical report"
    assert "trace_id" in j


def test_predict_without_any_fields(client):
    r = client.post("/api/predict", data={})
    assert r.status_code == 400


def test_predict_from_uploaded_report(client):
    files = {"file": ("labs.txt", io.BytesIO(b"Blood pressure 140/90\nHbA1c 7.2%"), "text/plain")}
    r = client.post("/api/predict", files=files)
    assert r.status_code == 200, r.text
    j = r.json()
    assert j["disease"] == (
        "Metabolic Syndrome / Type 2 Diabetes (Early Stage) + Hypertension (High Blood Pressure)"
    )
    assert j["severity"] == "Moderate to Serious"


def test_predict_merges_typed_text_and_report(client, user, auth_headers):
    files = {"file": ("labs.txt", io.BytesIO(b"TSH 6.4"), "text/plain")}
    r = client.post(
        "/api/predict",
        data={"symptoms": "always tired"},
        files=files,
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["disease"] == "Metabolic Syndrome / Hypothyroidism"
    rows = _history_for(user.id)
    assert rows[0].symptoms == "always tired\n\n--- Medical Report Content ---\nTSH 6.4"
    assert rows[0].file_name == "labs.txt"


def test_merge_symptoms():
    assert predict_routes.merge_symptoms("cough", None) == "cough"
    assert predict_routes.merge_symptoms("", "TSH 6.1") == "TSH 6.1"
    assert predict_routes.merge_symptoms("cough", "TSH 6.1") == (
        "cough\n\n--- Medical Report Content ---\nTSH 6.1"
    )


def test_predict_image_upload_uses_placeholder(client):
    files = {"file": ("photo.png", io.BytesIO(b"\x89PNG\r\n\x1a\n"), "image/png")}
    r = client.post("/api/predict", files=files)
    assert r.status_code == 200
    assert r.json()["disease"] == "Unspecified Condition"


def test_predict_rejects_oversized_upload(client, monkeypatch):
    monkeypatch.setattr(predict_routes, "MAX_FILE_MB", 0)
    files = {"file": ("big.txt", io.BytesIO(b"fever"), "text/plain")}
    r = client.post("/api/predict", files=files)
    assert r.status_code == 413
    assert r.json()["code"] == "PAYLOAD_TOO_LARGE"


def test_history_write_failure_does_not_fail_prediction(client, auth_headers, monkeypatch):
    def broken(*_a, **_k):
        raise RuntimeError("database unavailable")
    monkeypatch.setattr(search_history, "create_entry", broken)
    r = client.post("/api/predict", data={"symptoms": "migraine"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["disease"] == "Migraine / Tension Headache"


def test_enrichment_failure_does_not_affect_prediction(client, monkeypatch):
    monkeypatch.setenv("HUGGING_FACE_API_KEY", "hf_test")

    async def failing(text):
        raise RuntimeError("inference API down")

    monkeypatch.setattr(enrichment, "analyze", failing)
    r = client.post("/api/predict", data={"symptoms": "runny nose"})
    assert r.status_code == 200
    assert r.json()["disease"] == "Common Cold / Flu"


def test_enrichment_not_scheduled_without_api_key(client, monkeypatch):
    scheduled = []
    monkeypatch.setattr(enrichment, "schedule_analysis", lambda text: scheduled.append(text))
    r = client.post("/api/predict", data={"symptoms": "fatigue"})
    assert r.status_code == 200
    assert scheduled == []


def test_enrichment_scheduled_with_merged_text(client, monkeypatch):
    monkeypatch.setenv("HUGGING_FACE_API_KEY", "hf_test")
    scheduled = []
    monkeypatch.setattr(enrichment, "schedule_analysis", lambda text: scheduled.append(text))
    r = client.post("/api/predict", data={"symptoms": "fatigue"})
    assert r.status_code == 200
    assert scheduled == ["fatigue"]


def test_predict_rate_limited(client):
    for _ in range(30):
        assert client.post("/api/predict", data={"symptoms": "cough"}).status_code == 200
    r = client.post("/api/predict", data={"symptoms": "cough"})
    assert r.status_code == 429
    j = r.json()
    assert j["code"] == "TOO_MANY_REQUESTS"
    assert r.headers.get("retry-after")


def test_rules_endpoint(client):
    r = client.get("/api/rules")
    assert r.status_code == 200
    rules = r.json()
    assert rules[0]["key"] == "metabolic_panel"
    assert rules[-1]["disease"] == "Unspecified Condition"
    assert "Hypothyroidism" in rules[0]["conditions"]


def test_health(client):
    r = client.get("/api/health")
    assert r.json() == {"status": "ok", "message": "Backend server is running"}
