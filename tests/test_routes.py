"""Integration tests for the HTTP surface using FastAPI TestClient."""

from __future__ import annotations

import asyncio
import datetime as dt

import pytest
from fastapi.testclient import TestClient

from app.core.services.monitor import FailoverMonitor, ProbeResult
from app.main import create_app

PRIMARY_IMAGE = "http://primary.test/banner.png"
PRIMARY_STYLE = "http://primary.test/site.css"
FALLBACK_IMAGE = "/static/img/fallback.svg"
FALLBACK_STYLE = "/static/css/fallback.css"


@pytest.fixture
def app(make_settings):
    return create_app(
        make_settings(
            PRIMARY_IMAGE_URL=PRIMARY_IMAGE,
            PRIMARY_STYLE_URL=PRIMARY_STYLE,
            FALLBACK_IMAGE_URL=FALLBACK_IMAGE,
            FALLBACK_STYLE_URL=FALLBACK_STYLE,
        )
    )


@pytest.fixture
def client(app):
    return TestClient(app)


class _DownProber:
    async def probe(self, resources, timeout):
        now = dt.datetime.now(dt.timezone.utc)
        return [
            ProbeResult(
                resource=r,
                reachable=r.name == "image",
                observed_at=now,
                status_code=200 if r.name == "image" else 503,
                error=None if r.name == "image" else "status: HTTP 503",
            )
            for r in resources
        ]


# =============================================================================
# HOME PAGE
# =============================================================================


class TestHomePage:
    def test_renders_primary_resources(self, client):
        r = client.get("/")

        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/html")
        assert PRIMARY_IMAGE in r.text
        assert PRIMARY_STYLE in r.text
        assert FALLBACK_IMAGE not in r.text
        assert 'data-mode="primary"' in r.text

    def test_renders_fallback_resources_when_failover_active(self, app, client):
        app.state.failover.set(True)

        r = client.get("/")

        assert r.status_code == 200
        assert FALLBACK_IMAGE in r.text
        assert FALLBACK_STYLE in r.text
        assert PRIMARY_IMAGE not in r.text
        assert 'data-mode="fallback"' in r.text

    def test_sets_demo_cookie(self, client):
        r = client.get("/")
        assert r.cookies.get("testcookiename") == "testcookievalue"

    def test_fallback_assets_are_served(self, client):
        assert client.get(FALLBACK_STYLE).status_code == 200
        assert client.get(FALLBACK_IMAGE).status_code == 200


# =============================================================================
# DIAGNOSTICS
# =============================================================================


class TestDiagnostics:
    def test_generic_echoes_request(self, client):
        r = client.get("/generic/page?color=purple")

        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/plain")
        assert "request.method      'GET'" in r.text
        assert "'/generic/page?color=purple'" in r.text
        assert "request.url.path    '/generic/page'" in r.text
        assert "{'color': ['purple']}" in r.text
        assert r.cookies.get("testcookiename") == "testcookievalue"

    def test_generic_root(self, client):
        r = client.get("/generic")
        assert r.status_code == 200
        assert "request.url.path    '/generic'" in r.text

    def test_item_json(self, client):
        r = client.get("/item/yellow")

        assert r.status_code == 200
        assert r.json() == {"what": "item", "name": "yellow"}
        assert r.cookies.get("testcookiename") == "testcookievalue"

    def test_item_rejects_non_word_names(self, client):
        r = client.get("/item/not-a-word")
        assert r.status_code == 404
        assert r.headers["content-type"].startswith("text/plain")
        assert r.text == "404 page not found\n"
        assert r.cookies.get("testcookiename") == "testcookievalue"

    def test_item_nested_path_not_found(self, client):
        assert client.get("/item/yellow/extra").status_code == 404

    def test_unknown_path_not_found(self, client):
        r = client.get("/other/path")
        assert r.status_code == 404
        assert r.text == "404 page not found\n"

    def test_generic_banner(self, client):
        assert client.get("/generic").text.startswith("FooWebHandler says ... \n")

    def test_generic_post_form_fields_are_echoed(self, client):
        r = client.post("/generic/page?size=large", data={"color": "purple"})

        assert r.status_code == 200
        assert "request.method      'POST'" in r.text
        assert "{'color': ['purple'], 'size': ['large']}" in r.text
        assert r.cookies.get("testcookiename") == "testcookievalue"

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE"])
    def test_generic_accepts_other_methods(self, client, method):
        r = client.request(method, "/generic/page")
        assert r.status_code == 200
        assert f"request.method      '{method}'" in r.text

    def test_item_accepts_post(self, client):
        r = client.post("/item/yellow")
        assert r.status_code == 200
        assert r.json() == {"what": "item", "name": "yellow"}


# =============================================================================
# STATUS / HEALTH
# =============================================================================


class TestStatusEndpoints:
    def test_healthz(self, client):
        r = client.get("/healthz")
        assert r.status_code == 200
        data = r.json()
        assert data["ok"] is True
        assert data["mode"] == "primary"
        assert data["env"] == "test"

    def test_failover_status_before_first_round(self, client):
        r = client.get("/api/failover/status")

        assert r.status_code == 200
        data = r.json()
        assert data["mode"] == "primary"
        assert data["rounds_completed"] == 0
        assert data["last_round"] is None
        assert [res["name"] for res in data["resources"]] == ["image", "style"]

    def test_failover_status_after_round(self, app, client):
        monitor = FailoverMonitor(
            app.state.monitor.resources,
            app.state.failover,
            prober=_DownProber(),
        )
        app.state.monitor = monitor
        asyncio.run(monitor.run_round())

        data = client.get("/api/failover/status").json()

        assert data["mode"] == "fallback"
        assert data["failover"] is True
        assert data["rounds_completed"] == 1
        results = data["last_round"]["results"]
        assert [res["reachable"] for res in results] == [True, False]
        assert results[1]["status_code"] == 503

        page = client.get("/")
        assert FALLBACK_IMAGE in page.text
