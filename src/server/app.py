from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import asdict
from typing import Callable, Optional, Set, TypeVar

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dispatch import (
    Building,
    BuildingConfig,
    EventLog,
    InvariantViolation,
    Notifier,
    Simulation,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HallCallRequest(BaseModel):
    floor: int
    direction: str


class CabinRequest(BaseModel):
    floor: int


class DispatchManager:
    def __init__(
        self,
        num_floors: int = 5,
        elevator_count: int = 2,
        tick_interval: float = 0.5,
        autorun: bool = False,
    ) -> None:
        self.events = EventLog()
        building = Building(
            config=BuildingConfig(num_floors=num_floors, elevator_count=elevator_count),
            sink=Notifier([self.events]),
        )
        self.simulation = Simulation(building=building)
        self.tick_interval = tick_interval
        self.autorun = autorun
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def building(self) -> Building:
        return self.simulation.building

    async def start(self) -> None:
        if self.autorun and self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.simulation.step()
                payload = self.current_state(drain_events=True)
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self, drain_events: bool = False) -> dict:
        """Building state plus metrics; events are only handed out when published."""
        metrics = asdict(self.simulation.metrics.snapshot(self.simulation.current_time))
        return {
            "time": self.simulation.current_time,
            "building": self.building.snapshot(),
            "metrics": metrics,
            "events": [event.to_dict() for event in self.events.drain()] if drain_events else [],
        }

    async def apply(self, operation: Callable[[], T], result_key: Optional[str] = None) -> dict:
        """Run one core operation under the lock and publish what it caused."""
        async with self._lock:
            try:
                result = operation()
            except ValidationError as exc:
                self.events.drain()
                logger.warning("rejected request: %s", exc)
                raise HTTPException(status_code=400, detail=str(exc))
            except InvariantViolation as exc:
                self.events.drain()
                logger.warning("refused operation: %s", exc)
                raise HTTPException(status_code=409, detail=str(exc))
            state = self.current_state(drain_events=True)
            if result_key is not None:
                state[result_key] = result
        await self.broadcast(state)
        return state

    def reset(self) -> None:
        self.simulation.reset()


manager = DispatchManager()
app = FastAPI(title="LiftMode Dispatch API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    async with manager._lock:
        return manager.current_state()


@app.post("/reset")
async def reset() -> dict:
    return await manager.apply(manager.reset)


@app.post("/hall-calls")
async def register_hall_call(request: HallCallRequest) -> dict:
    return await manager.apply(
        lambda: manager.simulation.register_hall_call(request.floor, request.direction),
        result_key="newly_lit",
    )


@app.post("/elevators/{elevator_id}/requests")
async def request_from_cabin(elevator_id: int, request: CabinRequest) -> dict:
    return await manager.apply(lambda: manager.building.request_from_cabin(elevator_id, request.floor))


@app.post("/elevators/{elevator_id}/tick")
async def tick(elevator_id: int) -> dict:
    return await manager.apply(
        lambda: manager.building.tick(elevator_id).to_dict(), result_key="decision"
    )


@app.post("/elevators/{elevator_id}/run")
async def run_until_stop(elevator_id: int) -> dict:
    return await manager.apply(
        lambda: manager.building.run_until_stop(elevator_id).to_dict(), result_key="decision"
    )


@app.post("/elevators/{elevator_id}/open")
async def open_door(elevator_id: int) -> dict:
    return await manager.apply(lambda: manager.building.open(elevator_id))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    manager.autorun = True
    uvicorn.run(app, host="0.0.0.0", port=8000)
