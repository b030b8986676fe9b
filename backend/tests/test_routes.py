"""
Tests for the HTTP routes
"""
import pytest
from fastapi.testclient import TestClient

from appgen.main import app
from appgen.services.errors import CredentialError, QuotaExceededError, TransientUpstreamError
from appgen.services.fallback import FALLBACK_HTML
from appgen.services.llm_client import get_completion_client
from appgen.services.model_registry import DEFAULT_MODEL, MODELS

DOCUMENT = "<!DOCTYPE html><html><body>generated</body></html>"


@pytest.fixture
def api(fake_client):
    holder = {}

    def use(**kwargs):
        holder["client"] = fake_client(**kwargs)
        app.dependency_overrides[get_completion_client] = lambda: holder["client"]
        return holder["client"]

    with TestClient(app) as test_client:
        test_client.use_upstream = use
        yield test_client
    app.dependency_overrides.clear()


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_generate_returns_html(api):
    api.use_upstream(text="```html\n" + DOCUMENT + "\n```")
    resp = api.post("/generate", json={"idea": "a counter", "type": "tool", "style": "retro"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/html; charset=utf-8"
    assert resp.text == DOCUMENT


def test_generate_rejects_empty_idea(api):
    upstream = api.use_upstream(text=DOCUMENT)
    resp = api.post("/generate", json={"idea": "   "})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_request"
    assert upstream.calls == []


def test_generate_without_idea_field_is_rejected(api):
    api.use_upstream(text=DOCUMENT)
    resp = api.post("/generate", json={})
    assert resp.status_code == 400


@pytest.mark.parametrize("error,status,code", [
    (QuotaExceededError(), 429, "quota_exceeded"),
    (CredentialError(), 503, "upstream_credentials"),
    (TransientUpstreamError(), 502, "upstream_unavailable"),
])
def test_generate_maps_errors_to_status(api, error, status, code):
    api.use_upstream(error=error)
    resp = api.post("/generate", json={"idea": "x"})
    assert resp.status_code == status
    body = resp.json()
    assert body["error"] == code
    assert body["fallback"] == "/fallback"


def test_generate_malformed_output(api):
    api.use_upstream(text="just some text, no tags")
    resp = api.post("/generate", json={"idea": "x"})
    assert resp.status_code == 502
    assert resp.json()["error"] == "malformed_output"


def test_stream_relays_document_without_fences(api):
    api.use_upstream(chunks=["```", "html\n<div>hi</div>", "\n```"])
    resp = api.post("/generate/stream", json={"idea": "hello"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/html; charset=utf-8"
    assert resp.headers["cache-control"] == "no-cache"
    assert resp.text == "<div>hi</div>"


def test_stream_rejects_empty_idea_with_status(api):
    upstream = api.use_upstream(chunks=["<p>x</p>"])
    resp = api.post("/generate/stream", json={"idea": ""})
    assert resp.status_code == 400
    assert upstream.calls == []


def test_stream_failure_before_commit_returns_error_status(api):
    api.use_upstream(error=QuotaExceededError())
    resp = api.post("/generate/stream", json={"idea": "x"})
    assert resp.status_code == 429
    assert resp.json()["error"] == "quota_exceeded"


def test_stream_failure_after_commit_keeps_status(api):
    api.use_upstream(chunks=["<!DOCTYPE html>", "<p>partial"], error=TransientUpstreamError("lost"), stream_error_after=2)
    resp = api.post("/generate/stream", json={"idea": "x"})
    assert resp.status_code == 200
    assert resp.text.startswith("<!DOCTYPE html><p>partial")
    assert "<!-- generation interrupted: lost -->" in resp.text


def test_options_lists_selectors(api):
    body = api.get("/options").json()
    assert body["types"] == ["game", "tool", "landing", "dashboard", "form", "creative"]
    assert body["styles"] == ["modern", "retro", "neon", "glassmorphism", "brutalist", "playful"]
    assert [m["id"] for m in body["models"]] == [m.id for m in MODELS]
    assert body["default_model"] == DEFAULT_MODEL


def test_models_route(api):
    models = api.get("/models").json()
    assert models[0] == {
        "id": MODELS[0].id,
        "display_name": MODELS[0].display_name,
        "description": MODELS[0].description,
    }


def test_fallback_document_routes(api):
    resp = api.get("/fallback")
    assert resp.status_code == 200
    assert resp.text == FALLBACK_HTML
    assert api.get("/idea").json() == FALLBACK_HTML


def test_unknown_endpoint(api):
    resp = api.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Endpoint not found"}
