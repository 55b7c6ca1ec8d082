"""Tests for the FastAPI app that serves the site and the speech proxy."""

from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from meridian.config import MeridianConfig, SiteConfig, SpeechConfig
from meridian.entries.models import Entry
from meridian.entries.store import EntryStore
from meridian.server import create_app
from meridian.site.builder import SiteBuilder
from meridian.tts.client import ElevenLabsClient


def _config(tmp_path: Path, api_key: str = "") -> MeridianConfig:
    return MeridianConfig(
        site=SiteConfig(output_dir=str(tmp_path / "site")),
        speech=SpeechConfig(api_key=api_key),
    )


class TestCreateApp:
    def test_speech_client_on_state(self, tmp_path: Path):
        app = create_app(_config(tmp_path, api_key="xi"))
        assert isinstance(app.state.speech_client, ElevenLabsClient)
        assert app.state.speech_client.is_configured

    def test_proxy_without_key(self, tmp_path: Path):
        client = TestClient(create_app(_config(tmp_path)))
        resp = client.post("/api/tts", json={"text": "hi"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "ElevenLabs API key not configured"}

    def test_serves_built_site(self, tmp_path: Path):
        config = _config(tmp_path)
        store = EntryStore([Entry(date="2024-02-01", title="Served", body="Body.")])
        SiteBuilder(store).build(config.output_path)

        client = TestClient(create_app(config))

        page = client.get("/entry/2024-02-01/")
        assert page.status_code == 200
        assert "<h1>Served</h1>" in page.text
        assert client.get("/style.css").status_code == 200
        assert "refresh" in client.get("/").text

    def test_missing_page_uses_not_found_page(self, tmp_path: Path):
        config = _config(tmp_path)
        SiteBuilder(EntryStore()).build(config.output_path)

        resp = TestClient(create_app(config)).get("/entry/1999-01-01/")
        assert resp.status_code == 404
        assert "This day has not been written yet" in resp.text

    def test_proxy_route_wins_over_site(self, tmp_path: Path):
        config = _config(tmp_path)
        SiteBuilder(EntryStore()).build(config.output_path)

        resp = TestClient(create_app(config)).get("/api/tts")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}

    def test_without_built_site(self, tmp_path: Path):
        client = TestClient(create_app(_config(tmp_path)))
        assert client.get("/").status_code == 404
