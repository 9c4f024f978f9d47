"""
Tests for the POST /api/chat relay endpoint
"""

from fastapi.testclient import TestClient

from conftest import FakeGemini, gemini_reply, make_settings
from studybot.main import create_app


def make_client(gemini: FakeGemini, **settings_overrides) -> TestClient:
    app = create_app(make_settings(**settings_overrides), http_client=gemini.client())
    return TestClient(app)


class TestRelayEndpoint:
    """Request validation, forwarding and response normalisation"""

    def test_forwards_message_verbatim(self):
        gemini = FakeGemini(payload=gemini_reply("Big-O describes growth rate."))
        client = make_client(gemini)

        resp = client.post("/api/chat", json={"message": "What is Big-O?"})

        assert resp.status_code == 200
        assert resp.json() == {"reply": "Big-O describes growth rate."}
        assert gemini.sent_bodies == [{"contents": [{"parts": [{"text": "What is Big-O?"}]}]}]

    def test_message_is_not_trimmed_or_rewritten(self):
        gemini = FakeGemini()
        client = make_client(gemini)
        message = "  <b>spaces</b> & symbols \n"

        client.post("/api/chat", json={"message": message})

        assert gemini.sent_bodies[0]["contents"][0]["parts"][0]["text"] == message

    def test_sends_key_and_model_in_url(self):
        gemini = FakeGemini()
        client = make_client(gemini, GEMINI_API_KEY="secret-key", GEMINI_MODEL="gemini-1.5-flash")

        client.post("/api/chat", json={"message": "hi"})

        url = gemini.requests[0].url
        assert url.path.endswith("/models/gemini-1.5-flash:generateContent")
        assert url.params["key"] == "secret-key"
        assert gemini.requests[0].method == "POST"

    def test_missing_message_is_bad_request(self):
        gemini = FakeGemini()
        client = make_client(gemini)

        resp = client.post("/api/chat", json={})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Message is required"}
        assert gemini.requests == []

    def test_empty_message_is_bad_request(self):
        gemini = FakeGemini()
        client = make_client(gemini)

        resp = client.post("/api/chat", json={"message": ""})

        assert resp.status_code == 400
        assert gemini.requests == []

    def test_missing_api_key(self):
        gemini = FakeGemini()
        client = make_client(gemini, GEMINI_API_KEY=None)

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "API key not configured"}
        assert gemini.requests == []

    def test_bad_request_checked_before_api_key(self):
        client = make_client(FakeGemini(), GEMINI_API_KEY=None)

        resp = client.post("/api/chat", json={})

        assert resp.status_code == 400

    def test_upstream_error_passes_status_and_message(self):
        gemini = FakeGemini(status_code=429, payload={"error": {"message": "Quota exceeded"}})
        client = make_client(gemini)

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 429
        assert resp.json() == {"error": "Quota exceeded"}

    def test_upstream_error_without_message(self):
        gemini = FakeGemini(status_code=503, payload={})
        client = make_client(gemini)

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 503
        assert resp.json() == {"error": "API error"}

    def test_no_candidates_falls_back(self):
        gemini = FakeGemini(payload={"candidates": []})
        client = make_client(gemini)

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 200
        assert resp.json() == {"reply": "No response from AI"}

    def test_malformed_json_body_is_server_error(self):
        gemini = FakeGemini()
        client = make_client(gemini)

        resp = client.post("/api/chat", content=b"{not json", headers={"Content-Type": "application/json"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error"}
        assert gemini.requests == []

    def test_non_object_body_is_server_error(self):
        client = make_client(FakeGemini())

        resp = client.post("/api/chat", json=["hi"])

        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error"}

    def test_non_json_upstream_payload_hides_details(self):
        gemini = FakeGemini(status_code=200, content=b"<html>gateway</html>")
        client = make_client(gemini)

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error"}


def test_health():
    client = make_client(FakeGemini(), APP_NAME="StudyBot", ENV="test")

    assert client.get("/health").json() == {"ok": True, "app": "StudyBot", "env": "test"}
