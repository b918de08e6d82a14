"""
Dashboard API Validation

Drives frames by hand (no background loop) and checks the endpoints.
"""

import asyncio
from contextlib import suppress

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from tea_factory.backend.config import Settings, SimulationConfig, DashboardConfig
from tea_factory.backend.main import create_app, frame_loop
from tea_factory.data_gateway.adapters import CSV_HEADER


def make_client(**dashboard):
    settings = Settings(simulation=SimulationConfig(), dashboard=DashboardConfig(**dashboard))
    app = create_app(settings, run_loop=False)
    return TestClient(app), app.state.dashboard


@pytest.fixture
def api():
    client, dashboard = make_client()
    with client:
        yield client, dashboard


def test_root(api):
    client, _ = api
    body = client.get("/").json()
    assert body["status"] == "ok"
    assert body["running"] is False
    assert body["batch_count"] == 1


def test_start_and_frames(api):
    client, dashboard = api
    assert client.post("/api/start").json()["running"] is True

    dashboard.run_frame(5.0)
    batch = client.get("/api/batches/0").json()
    assert batch["elapsed_seconds"] == 5
    assert batch["process"] == "STEAMING"

    state = client.get("/api/state").json()
    assert state["batch01.elapsed_seconds"] == 5
    assert state["Line.running"] is True


def test_pause_freezes_time(api):
    client, dashboard = api
    client.post("/api/start")
    dashboard.run_frame(2.0)
    client.post("/api/pause")
    dashboard.run_frame(2.0)

    assert client.get("/api/batches/0").json()["elapsed_seconds"] == 2


def test_model_locked_while_running(api):
    client, _ = api
    client.post("/api/start")
    assert client.put("/api/model", json={"model": "gentle"}).status_code == 409

    client.post("/api/pause")
    response = client.put("/api/model", json={"model": "gentle"})
    assert response.status_code == 200
    assert response.json()["model"] == "gentle"


def test_bad_model_rejected(api):
    client, _ = api
    assert client.put("/api/model", json={"model": "turbo"}).status_code == 422


def test_batch_count(api):
    client, _ = api
    assert client.put("/api/batches/count", json={"count": 3}).json()["batch_count"] == 3
    assert len(client.get("/api/batches").json()) == 3
    assert client.get("/api/batches/99").json()["index"] == 2

    # Clamped to the dashboard maximum
    assert client.put("/api/batches/count", json={"count": 40}).json()["batch_count"] == 16


def test_batch_count_locked_while_running(api):
    client, _ = api
    client.post("/api/start")
    assert client.put("/api/batches/count", json={"count": 2}).status_code == 409


def test_start_refused_when_finished(api):
    client, dashboard = api
    client.post("/api/start")
    dashboard.run_frame(200.0)

    assert client.get("/").json()["running"] is False
    assert client.post("/api/start").status_code == 409

    client.post("/api/reset")
    assert client.post("/api/start").status_code == 200


def test_history_and_chart(api):
    client, dashboard = api
    client.post("/api/start")
    for _ in range(3):
        dashboard.run_frame(1.0)

    history = client.get("/api/batches/0/history").json()
    assert [s["elapsed_seconds"] for s in history["samples"]] == [0, 1, 2, 3]

    chart = client.get("/api/batches/0/chart.png")
    assert chart.status_code == 200
    assert chart.headers["content-type"] == "image/png"
    assert chart.content[:4] == b"\x89PNG"


def test_csv_recording(tmp_path):
    client, dashboard = make_client(csv_dir=str(tmp_path))
    with client:
        client.post("/api/start")
        assert client.get("/").json()["recording"] is True
        dashboard.run_frame(1.0)
        dashboard.run_frame(0.5)
        dashboard.run_frame(0.5)
        client.post("/api/reset")
        assert client.get("/").json()["recording"] is False

    rows = (tmp_path / "tea_factory_gui.csv").read_text().splitlines()
    assert rows[0] == CSV_HEADER
    assert [r.split(",")[1] for r in rows[1:]] == ["0", "1", "2"]


def test_csv_per_batch_files(tmp_path):
    client, _ = make_client(csv_dir=str(tmp_path))
    with client:
        client.put("/api/batches/count", json={"count": 2})
        client.post("/api/start")

    assert (tmp_path / "tea_factory_gui_b01.csv").exists()
    assert (tmp_path / "tea_factory_gui_b02.csv").exists()


def test_endpoints_run_on_event_loop():
    app = create_app(Settings(), run_loop=False)
    routes = [r for r in app.routes if isinstance(r, APIRoute)]

    assert routes
    for route in routes:
        assert asyncio.iscoroutinefunction(route.endpoint), route.path


def test_frame_loop_survives_failed_frame(caplog):
    frames = []

    class FlakyDashboard:
        def run_frame(self, dt):
            frames.append(dt)
            if len(frames) == 1:
                raise ValueError("I/O operation on closed file.")

    async def drive():
        task = asyncio.create_task(frame_loop(FlakyDashboard(), 0.001))
        while len(frames) < 3:
            await asyncio.sleep(0.001)
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    asyncio.run(asyncio.wait_for(drive(), timeout=5.0))

    assert len(frames) >= 3
    assert "Frame failed" in caplog.text
