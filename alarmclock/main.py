"""
main.py
───────
FastAPI application: the presentation layer over the alarm store.

Exposes:
  REST  /api/alarms        CRUD + clear
  REST  /api/settings      12h/24h display preference
  REST  /api/time          current time, formatted
  REST  /api/sounds        list / test the alarm tones
  WS    /ws                real-time push of ringing alarms
"""

import asyncio
import logging
import os
import platform
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request, Response, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from alarmclock.alarm_manager import AlarmManager
from alarmclock.alarm_store import AlarmStore
from alarmclock.config import AppConfig
from alarmclock.models import Alarm, AlarmCreate, AlarmUpdate, AlarmView, Settings, SoundKind
from alarmclock.notifier import detect_notifier
from alarmclock.settings import SettingsStore
from alarmclock.sound_engine import detect_sound_port, get_all_sounds
from alarmclock.storage import JsonFileStorage
from alarmclock.timefmt import TimeOfDay, format_display_time
from alarmclock.views import alarm_view

logger = logging.getLogger(__name__)


# ── WebSocket connection registry ─────────────────────────────────────────────

class ConnectionManager:
    def __init__(self):
        self.active: List[WebSocket] = []
        self._lock = asyncio.Lock()

    async def connect(self, ws: WebSocket):
        await ws.accept()
        async with self._lock:
            self.active.append(ws)

    async def disconnect(self, ws: WebSocket):
        async with self._lock:
            self.active = [c for c in self.active if c is not ws]

    async def broadcast(self, data: dict):
        async with self._lock:
            dead = []
            for ws in self.active:
                try:
                    await ws.send_json(data)
                except Exception:
                    dead.append(ws)
            self.active = [c for c in self.active if c not in dead]


def ring_event(alarm: Alarm) -> dict:
    return {
        "event": "alarm_ring",
        "alarm_id": alarm.id,
        "label": alarm.label,
        "sound": alarm.sound.value,
    }


# ── App factory ───────────────────────────────────────────────────────────────

def create_app(config: Optional[AppConfig] = None, storage=None) -> FastAPI:
    """
    Build the application.  ``storage`` defaults to a JsonFileStorage under
    ``config.data_dir``; tests pass a MemoryStorage.
    """
    config = config or AppConfig.from_env()
    ws_manager = ConnectionManager()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        loop = asyncio.get_running_loop()
        store_backend = storage if storage is not None else JsonFileStorage(config.data_dir)

        alarms = AlarmStore(store_backend)
        alarms.load()
        settings = SettingsStore(store_backend)
        settings.load()

        def on_ring(alarm: Alarm):
            # Called on the ticker thread
            asyncio.run_coroutine_threadsafe(ws_manager.broadcast(ring_event(alarm)), loop)

        manager = AlarmManager(
            alarms,
            sound=detect_sound_port(config.sound),
            notifier=detect_notifier(config.notifier),
            on_ring=on_ring,
            interval=config.tick_interval,
        )
        app.state.alarms = alarms
        app.state.settings = settings
        app.state.manager = manager

        logger.info("PID=%s | Platform=%s | %d alarm(s)", os.getpid(), platform.system(), len(alarms))
        if config.ticker:
            manager.start()

        yield   # Application runs here

        manager.stop()
        logger.info("Shutdown complete.")

    app = FastAPI(title="alarmclock", version="1.0.0", lifespan=lifespan)
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _use_24h(request: Request) -> bool:
        return request.app.state.settings.current.use_24h

    # ── WebSocket endpoint ────────────────────────────────────────────────────

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        await ws_manager.connect(ws)
        try:
            while True:
                data = await ws.receive_json()
                if data.get("type") == "ping":
                    await ws.send_json({"type": "pong"})
        except WebSocketDisconnect:
            await ws_manager.disconnect(ws)

    # ── Alarm endpoints ───────────────────────────────────────────────────────

    @app.get("/api/alarms", response_model=List[AlarmView])
    def list_alarms(request: Request):
        now, use_24h = datetime.now(), _use_24h(request)
        return [alarm_view(a, now, use_24h) for a in request.app.state.alarms.list()]

    @app.post("/api/alarms", response_model=Alarm, status_code=201)
    def create_alarm(body: AlarmCreate, request: Request):
        return request.app.state.alarms.add(body)

    @app.delete("/api/alarms", status_code=204)
    def clear_alarms(request: Request):
        request.app.state.alarms.clear()
        return Response(status_code=204)

    @app.get("/api/alarms/{alarm_id}", response_model=AlarmView)
    def get_alarm(alarm_id: str, request: Request):
        alarm = request.app.state.alarms.get(alarm_id)
        if not alarm:
            raise HTTPException(status_code=404, detail="Alarm not found")
        return alarm_view(alarm, datetime.now(), _use_24h(request))

    @app.patch("/api/alarms/{alarm_id}", response_model=Alarm)
    def update_alarm(alarm_id: str, body: AlarmUpdate, request: Request):
        updated = request.app.state.alarms.update(alarm_id, body)
        if not updated:
            raise HTTPException(status_code=404, detail="Alarm not found")
        return updated

    @app.delete("/api/alarms/{alarm_id}", status_code=204)
    def delete_alarm(alarm_id: str, request: Request):
        request.app.state.alarms.remove(alarm_id)
        return Response(status_code=204)

    # ── Settings / clock ──────────────────────────────────────────────────────

    @app.get("/api/settings", response_model=Settings)
    def get_settings(request: Request):
        return request.app.state.settings.current

    @app.put("/api/settings", response_model=Settings)
    def put_settings(body: Settings, request: Request):
        return request.app.state.settings.update(use_24h=body.use_24h)

    @app.get("/api/time")
    def current_time(request: Request):
        now = datetime.now()
        use_24h = _use_24h(request)
        return {
            "display": format_display_time(TimeOfDay(now.hour, now.minute, now.second), use_24h),
            "iso": now.isoformat(timespec="seconds"),
            "use24h": use_24h,
        }

    # ── Sounds ────────────────────────────────────────────────────────────────

    @app.get("/api/sounds")
    def list_sounds():
        return get_all_sounds()

    @app.post("/api/sounds/{kind}/test", status_code=204)
    def test_sound(kind: SoundKind, request: Request):
        request.app.state.manager.sound.play(kind.value)
        return Response(status_code=204)

    # ── Health / info ─────────────────────────────────────────────────────────

    @app.get("/api/health")
    def health(request: Request):
        return {
            "status": "ok",
            "pid": os.getpid(),
            "platform": platform.system(),
            "python": platform.python_version(),
            "ticker": request.app.state.manager.running,
        }

    return app
