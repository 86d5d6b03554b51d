from fastapi import FastAPI
from fastapi.testclient import TestClient

from volunteer_tracker.api.main import add_client_routes


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "service": "volunteer-tracker"}


def test_features_lists_flags(client):
    flags = client.get("/api/features").json()
    assert flags == {"sheets_sync_enabled": True, "offline_replay_enabled": True, "auto_sync_enabled": False}


def test_unknown_api_path_is_json_404(client):
    for method, path in [("get", "/api/nope"), ("post", "/api/volunteers/1/archive"), ("delete", "/api/volunteers/1")]:
        resp = getattr(client, method)(path)
        assert resp.status_code == 404
        assert resp.json() == {"detail": "API endpoint not found"}


def test_client_routes_fall_back_to_index(tmp_path):
    (tmp_path / "index.html").write_text("<html>app shell</html>")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "main.js").write_text("console.log('hi')")
    (tmp_path.parent / "secret.txt").write_text("nope")
    shell = FastAPI()
    add_client_routes(shell, tmp_path)
    web = TestClient(shell)

    assert web.get("/").text == "<html>app shell</html>"
    assert web.get("/volunteers/3").text == "<html>app shell</html>"
    assert web.get("/assets/main.js").text == "console.log('hi')"
    assert "nope" not in web.get("/../secret.txt").text
