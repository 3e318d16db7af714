import asyncio

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from lirat_proxy.main import create_app
from lirat_proxy.routers.ui import build_ui_router


@pytest.fixture
def build_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html>app</html>")
    (tmp_path / "static").mkdir()
    (tmp_path / "static" / "main.js").write_text("console.log(1)")
    return tmp_path


@pytest.fixture
def prod_client(settings, build_dir, cache_store, upstream_client):
    prod = settings.model_copy(update={"node_env": "production", "static_dir": build_dir})
    app = create_app(prod, cache_store=cache_store, upstream=upstream_client)
    with TestClient(app) as c:
        yield c


def test_serves_static_file(prod_client):
    resp = prod_client.get("/static/main.js")
    assert resp.status_code == 200
    assert resp.text == "console.log(1)"


@pytest.mark.parametrize("path", ["/", "/history/damascus", "/some/deep/link"])
def test_spa_fallback_to_index(prod_client, path):
    resp = prod_client.get(path)
    assert resp.status_code == 200
    assert resp.text == "<html>app</html>"


def test_api_routes_take_precedence(prod_client):
    resp = prod_client.get("/api/health")
    assert resp.json()["status"] == "ok"


def test_encoded_traversal_outside_build_dir_refused(prod_client):
    resp = prod_client.get("/%2e%2e/%2e%2e/etc/passwd")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


@pytest.mark.parametrize("path", ["../secret.txt", "static/../../secret.txt", "../../etc/passwd"])
def test_dotdot_segments_refused(build_dir, path):
    (build_dir.parent / "secret.txt").write_text("hidden")
    spa = build_ui_router(build_dir).routes[0].endpoint
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(spa(path))
    assert excinfo.value.status_code == 404


def test_dotdot_inside_build_dir_still_served(build_dir):
    spa = build_ui_router(build_dir).routes[0].endpoint
    resp = asyncio.run(spa("static/../index.html"))
    assert resp.path == build_dir.resolve() / "index.html"


def test_missing_index_is_404(settings, tmp_path, cache_store, upstream_client):
    prod = settings.model_copy(update={"node_env": "production", "static_dir": tmp_path})
    app = create_app(prod, cache_store=cache_store, upstream=upstream_client)
    with TestClient(app) as c:
        assert c.get("/anything").status_code == 404


def test_not_mounted_outside_production(client):
    assert client.get("/").status_code == 404
