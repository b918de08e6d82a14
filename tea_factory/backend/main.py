"""
Tea Factory Dashboard API

Web counterpart of the desktop dashboard: a frame loop drives the batch
line, endpoints issue Start / Pause / Reset and read snapshots, charts
and history.

The frame loop is an asyncio task on the server's event loop and every
endpoint is a coroutine, so handlers and frames never run concurrently.
"""

import argparse
import asyncio
import io
import logging
import os
import sys
import time
from contextlib import asynccontextmanager, suppress
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import Settings, load_settings
from .scada.store import ScadaStore
from .simulation.charts import render_history
from .simulation.engine import BatchLine, GUI_MAX_BATCHES
from .simulation.factory import build_line
from .simulation.physics import ModelVariant
from ..data_gateway.adapters import BatchSourceAdapter, CsvFileSink
from ..data_gateway.core import DataEngine

logger = logging.getLogger("DashboardAPI")

GUI_CSV_STEM = "tea_factory_gui"


class ModelRequest(BaseModel):
    model: ModelVariant


class BatchCountRequest(BaseModel):
    count: int


class CsvRecorder:
    """
    One CSV per batch while recording.
    Opened on Start (if not already recording), closed on Reset.
    """
    def __init__(self, csv_dir: Optional[str]):
        self.csv_dir = csv_dir
        self.engines: List[DataEngine] = []
        self.sinks: List[CsvFileSink] = []

    @property
    def recording(self) -> bool:
        return bool(self.engines)

    def path_for(self, index: int, batch_count: int) -> str:
        if batch_count == 1:
            name = f"{GUI_CSV_STEM}.csv"
        else:
            name = f"{GUI_CSV_STEM}_b{index + 1:02d}.csv"
        return os.path.join(self.csv_dir, name)

    def start(self, line: BatchLine) -> None:
        if self.csv_dir is None or self.recording:
            return
        for i, batch in enumerate(line.batches):
            sink = CsvFileSink(self.path_for(i, line.batch_count))
            sink.connect()
            self.sinks.append(sink)
            self.engines.append(DataEngine(BatchSourceAdapter(batch), [sink]))
        logger.info(f"CSV recording started in {self.csv_dir} ({len(self.sinks)} file(s))")

    def step(self) -> None:
        for engine in self.engines:
            engine.step()

    def stop(self) -> None:
        for sink in self.sinks:
            sink.disconnect()
        if self.sinks:
            logger.info("CSV recording stopped")
        self.engines = []
        self.sinks = []


class Dashboard:
    """Command and frame handling shared by the endpoints and the loop."""

    def __init__(self, line: BatchLine, csv_dir: Optional[str] = None):
        self.line = line
        self.store = ScadaStore()
        self.recorder = CsvRecorder(csv_dir)
        self.publish()

    def publish(self) -> None:
        self.store.update(self.line.get_all_tags())

    def run_frame(self, dt: float) -> None:
        """
        1. Step the line (no-op unless running)
        2. Record CSV rows for new elapsed seconds
        3. Publish tags
        """
        self.line.update(dt)
        self.recorder.step()
        self.publish()

    def start(self) -> bool:
        accepted = self.line.start()
        if accepted:
            self.recorder.start(self.line)
            self.recorder.step()
        self.publish()
        return accepted

    def pause(self) -> bool:
        accepted = self.line.pause()
        self.publish()
        return accepted

    def reset(self) -> None:
        self.line.reset()
        self.recorder.stop()
        self.publish()

    def set_model(self, model: ModelVariant) -> bool:
        accepted = self.line.set_model(model)
        self.publish()
        return accepted

    def set_batch_count(self, count: int) -> bool:
        accepted = self.line.set_batch_count(count)
        if accepted:
            # Old batches are gone; their recorders point at stale objects
            self.recorder.stop()
        self.publish()
        return accepted

    def snapshot(self, index: int) -> Dict[str, Any]:
        i = self.line.clamp_index(index)
        state = self.line.batches[i].get_state()
        state['index'] = i
        return state

    def status(self) -> Dict[str, Any]:
        return {
            'running': self.line.is_running(),
            'model': self.line.model.value,
            'batch_count': self.line.batch_count,
            'recording': self.recorder.recording,
        }


async def frame_loop(dashboard: Dashboard, frame_seconds: float) -> None:
    """Measure real frame time and feed it to the line."""
    logger.info(">>> Simulation loop started")
    last = time.monotonic()
    try:
        while True:
            await asyncio.sleep(frame_seconds)
            now = time.monotonic()
            try:
                dashboard.run_frame(now - last)
            except Exception:
                logger.exception("Frame failed, continuing")
            last = now
    finally:
        logger.info(">>> Simulation loop stopped")


def create_app(settings: Optional[Settings] = None,
               line: Optional[BatchLine] = None,
               run_loop: bool = True) -> FastAPI:
    """
    Args:
        settings: Loaded settings (defaults to the packaged settings.json)
        line: Pre-built line (tests); otherwise built from settings
        run_loop: Start the background frame loop with the app lifespan
    """
    settings = settings or load_settings()
    if line is None:
        line = build_line(settings.simulation.validate(), max_batches=GUI_MAX_BATCHES)
    dashboard = Dashboard(line, csv_dir=settings.dashboard.csv_dir)
    frame_seconds = settings.dashboard.frame_seconds

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = asyncio.create_task(frame_loop(dashboard, frame_seconds)) if run_loop else None
        try:
            yield
        finally:
            if task is not None:
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
            dashboard.recorder.stop()

    app = FastAPI(title="Tea Factory Simulator Dashboard API", lifespan=lifespan)
    app.state.dashboard = dashboard

    # Allow CORS for browser dashboards
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def read_root():
        return {"status": "ok", "service": "Tea Factory Dashboard", **dashboard.status()}

    @app.get("/api/state")
    async def get_state():
        """Returns the full tag snapshot."""
        return dashboard.store.get_all()

    @app.get("/api/batches")
    async def list_batches():
        return [dashboard.snapshot(i) for i in range(dashboard.line.batch_count)]

    @app.get("/api/batches/{index}")
    async def get_batch(index: int):
        return dashboard.snapshot(index)

    @app.get("/api/batches/{index}/history")
    async def get_history(index: int):
        i = dashboard.line.clamp_index(index)
        history = dashboard.line.histories[i]
        return {"index": i, "samples": [s.to_dict() for s in history.samples()]}

    @app.get("/api/batches/{index}/chart.png")
    async def get_chart(index: int):
        i = dashboard.line.clamp_index(index)
        buf = io.BytesIO()
        render_history(dashboard.line.histories[i], buf,
                       title=f"{dashboard.line.batches[i].id} ({dashboard.line.model.value})")
        return Response(content=buf.getvalue(), media_type="image/png")

    @app.post("/api/start")
    async def start():
        if not dashboard.start():
            raise HTTPException(status_code=409, detail="Batch already finished; reset first")
        return dashboard.status()

    @app.post("/api/pause")
    async def pause():
        dashboard.pause()
        return dashboard.status()

    @app.post("/api/reset")
    async def reset():
        dashboard.reset()
        return dashboard.status()

    @app.put("/api/model")
    async def set_model(request: ModelRequest):
        if not dashboard.set_model(request.model):
            raise HTTPException(status_code=409, detail="Pause the line before changing the model")
        return dashboard.status()

    @app.put("/api/batches/count")
    async def set_batch_count(request: BatchCountRequest):
        if not dashboard.set_batch_count(request.count):
            raise HTTPException(status_code=409, detail="Pause the line before changing the batch count")
        return dashboard.status()

    return app


app = create_app()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Tea Factory Dashboard API")
    parser.add_argument("--config", help="Settings JSON file")
    parser.add_argument("--host", help="Bind address (overrides settings)")
    parser.add_argument("--port", type=int, help="Port (overrides settings)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    settings = load_settings(args.config)
    host = args.host or settings.dashboard.host
    port = args.port or settings.dashboard.port
    uvicorn.run(create_app(settings), host=host, port=port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
