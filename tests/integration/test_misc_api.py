import json
import os


def test_health(client):
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/readyz").json() == {"status": "ready", "supabase": False}


def test_options(client):
    body = client.get("/api/v1/options").json()
    assert "English" in body["languages"]
    assert "English + Hindi" in body["languages"]
    assert "Friendly" in body["tones"]
    assert "Food & Beverage" in body["categories"]
    assert body["presets"][0]["key"] == "smit-hospital"


def test_ui_latency_logged(client, settings):
    r = client.post("/api/v1/metrics/ui", json={"name": "copy_and_redirect", "duration_ms": 42.5},
                    headers={"X-Correlation-Id": "c-1"})
    assert r.json() == {"ok": True}
    with open(os.path.join(settings.data_dir, settings.metrics_file), encoding="utf-8") as f:
        entry = json.loads(f.readlines()[-1])
    assert entry["origin"] == "frontend"
    assert entry["corr"] == "c-1"
    assert entry["duration_ms"] == 42.5


def test_ui_latency_rejects_negative(client):
    assert client.post("/api/v1/metrics/ui", json={"name": "x", "duration_ms": -1}).status_code == 422
