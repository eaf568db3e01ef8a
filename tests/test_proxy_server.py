import pytest

from sehat_saathi.core import search
from sehat_saathi.core.config import Settings
from sehat_saathi.jobs import proxy_server
from sehat_saathi.models import Coordinate, ProviderCandidate
from sehat_saathi.vendors import gemini, google_places, text_to_speech

from fakes import DummyResponse, DummySession, NonJsonResponse, place


def _settings(**overrides):
    values = dict(google_maps_api_key="maps", gemini_api_key="gem", google_tts_api_key="tts")
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(proxy_server, "get_settings", lambda: _settings())
    return proxy_server.app.test_client()


@pytest.fixture
def places_session(monkeypatch):
    session = DummySession(
        DummyResponse(
            payload={
                "status": "OK",
                "results": [place("p1", "District Hospital", 20.01, 78.0, rating=4.1, opening_hours={"open_now": True})],
            }
        )
    )
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_health_endpoint(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_preflight_returns_empty_ok_with_cors(client):
    for path in ("/nearby-hospitals", "/triage-assist", "/health-chat", "/text-to-speech"):
        response = client.options(path)
        assert response.status_code == 200
        assert response.get_data() == b""
        assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_nearby_hospitals_default_radius(client, places_session):
    response = client.post("/nearby-hospitals", json={"latitude": 20.0, "longitude": 78.0})

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.get_json() == {
        "hospitals": [
            {
                "id": "p1",
                "name": "District Hospital",
                "address": "District Hospital Road",
                "location": {"lat": 20.01, "lng": 78.0},
                "rating": 4.1,
                "isOpen": True,
            }
        ]
    }
    _, params, _ = places_session.calls[0]
    assert params["radius"] == 5000
    assert "rankby" not in params


def test_nearby_hospitals_rank_by_distance_drops_radius(client, places_session):
    response = client.post(
        "/nearby-hospitals",
        json={"latitude": 20.0, "longitude": 78.0, "radius": 9000, "specialty": "cardiology", "rankBy": "distance"},
    )

    assert response.status_code == 200
    _, params, _ = places_session.calls[0]
    assert params["rankby"] == "distance"
    assert params["keyword"] == "cardiology"
    assert "radius" not in params


def test_nearby_hospitals_specialty_without_rank_keeps_radius(client, places_session):
    client.post("/nearby-hospitals", json={"latitude": 20.0, "longitude": 78.0, "radius": 9000, "specialty": "eye"})

    _, params, _ = places_session.calls[0]
    assert params["radius"] == 9000
    assert params["keyword"] == "eye"
    assert "rankby" not in params


def test_nearby_hospitals_errors(client, monkeypatch, places_session):
    response = client.post("/nearby-hospitals", json={"latitude": 20.0})
    assert response.status_code == 500
    assert response.get_json()["error"] == "Latitude and longitude are required"

    response = client.post("/nearby-hospitals", json={"latitude": 200.0, "longitude": 78.0})
    assert response.status_code == 500

    monkeypatch.setattr(proxy_server, "get_settings", lambda: _settings(google_maps_api_key=""))
    response = client.post("/nearby-hospitals", json={"latitude": 20.0, "longitude": 78.0})
    assert response.status_code == 500
    assert "API key" in response.get_json()["error"]
    assert places_session.calls == []


def test_nearby_hospitals_accepts_zero_coordinates(client, monkeypatch):
    captured = {}

    def fake_nearby(self, origin, **kwargs):
        captured["origin"] = origin
        return [ProviderCandidate(id="x", name="X", address="", location=Coordinate(0.1, 0.1))]

    monkeypatch.setattr(search.ProviderSearchClient, "nearby", fake_nearby)

    response = client.post("/nearby-hospitals", json={"latitude": 0, "longitude": 0})

    assert response.status_code == 200
    assert captured["origin"] == Coordinate(0.0, 0.0)


def test_triage_assist_always_200(client, monkeypatch):
    def failing_generate(prompt, api_key, model):
        raise gemini.GeminiError("quota exceeded")

    monkeypatch.setattr(gemini, "generate_content", failing_generate)

    response = client.post("/triage-assist", json={"bodyPart": "Chest"})

    assert response.status_code == 200
    body = response.get_json()
    assert body["error"] == "quota exceeded"
    assert body["severity"] == "Low"
    assert set(body["action"]) == {"textEn", "textHi"}


def test_triage_assist_passes_model_json(client, monkeypatch):
    monkeypatch.setattr(
        gemini,
        "generate_content",
        lambda prompt, api_key, model: '{"severity": "Medium", "questions": [], "medicalTerm": "fever", '
        '"action": {"textEn": "Rest", "textHi": "आराम"}}',
    )

    response = client.post("/triage-assist", json={})

    assert response.status_code == 200
    assert response.get_json()["severity"] == "Medium"


def test_health_chat(client, monkeypatch):
    monkeypatch.setattr(gemini, "generate_content", lambda prompt, api_key, model: "Status: FALSE\nEnglish: No.")

    response = client.post("/health-chat", json={"message": "Is cold water bad?"})
    assert response.status_code == 200
    assert response.get_json() == {"reply": "Status: FALSE\nEnglish: No."}

    assert client.post("/health-chat", json={"message": " "}).status_code == 500


def test_health_chat_upstream_error(client, monkeypatch):
    def failing_generate(prompt, api_key, model):
        raise gemini.GeminiError("Failed to fetch from Gemini")

    monkeypatch.setattr(gemini, "generate_content", failing_generate)

    response = client.post("/health-chat", json={"message": "hi"})

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to fetch from Gemini"}


def test_text_to_speech(client, monkeypatch):
    tts = DummySession(DummyResponse(payload={"audioContent": "bXAz"}))
    monkeypatch.setattr(text_to_speech, "_SESSION", tts)

    response = client.post("/text-to-speech", json={"text": "Boil water before drinking.", "language": "hi"})

    assert response.status_code == 200
    assert response.get_json() == {"audioContent": "bXAz"}
    assert client.post("/text-to-speech", json={}).status_code == 500


def test_nearby_hospitals_skips_misshapen_results(client, places_session):
    places_session.response = DummyResponse(
        payload={"status": "OK", "results": [{"place_id": "p", "geometry": {"location": [20.0, 78.0]}}]}
    )

    response = client.post("/nearby-hospitals", json={"latitude": 20.0, "longitude": 78.0})

    assert response.status_code == 200
    assert response.get_json() == {"hospitals": []}


def test_nearby_hospitals_non_json_upstream_returns_json_error(client, places_session):
    places_session.response = NonJsonResponse()

    response = client.post("/nearby-hospitals", json={"latitude": 20.0, "longitude": 78.0})

    assert response.status_code == 500
    assert response.is_json
    assert response.get_json() == {"error": "Places response is not JSON"}
