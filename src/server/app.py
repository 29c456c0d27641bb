from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import List, Literal, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from dispatch import get_strategy
from simulation import Building, Direction, default_building

logger = logging.getLogger(__name__)


class CallRequest(BaseModel):
    floor: int = Field(ge=0)
    direction: Literal["up", "down"]
    count: int = Field(default=1, gt=0)


class TickRequest(BaseModel):
    count: int = Field(default=1, ge=1, le=10_000)


class AutoTickUpdate(BaseModel):
    enabled: bool


class ButtonPress(BaseModel):
    floor: int


class AvailabilityUpdate(BaseModel):
    available: bool
    reason: Optional[str] = None


class SimulationManager:
    """Holds one building and, when enabled, ticks it in the background."""

    def __init__(self, building: Optional[Building] = None, tick_interval: float = 0.3) -> None:
        self.building = building or default_building(get_strategy("nearest_available"))
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def auto_tick(self) -> bool:
        return self._task is not None

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("Auto-tick on (%.2fs)", self.tick_interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("Auto-tick off")

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.building.tick_all()
                payload = self.current_state()
                payload["events"] = self.building.drain_events()
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

    def current_state(self) -> dict:
        state = self.building.snapshot()
        state["auto_tick"] = self.auto_tick
        return state

    async def submit_call(self, floor: int, direction: str, count: int) -> dict:
        async with self._lock:
            passengers = self.building.submit_call(floor, Direction(direction), count)
            state = self.current_state()
            state["submitted"] = [p.passenger_id for p in passengers]
            return state

    async def tick(self, count: int) -> dict:
        async with self._lock:
            for _ in range(count):
                self.building.tick_all()
            return self.current_state()

    async def press_button(self, elevator_id: str, floor: int) -> dict:
        async with self._lock:
            elevator = self.building.get_elevator(elevator_id)
            if elevator is None:
                raise KeyError(elevator_id)
            if not elevator.in_range(floor):
                raise ValueError(f"Floor must be in [0..{self.building.num_floors - 1}], got {floor}")
            accepted = elevator.press_button(floor)
            state = self.current_state()
            state["accepted"] = accepted
            return state

    async def set_availability(self, elevator_id: str, available: bool, reason: Optional[str]) -> dict:
        async with self._lock:
            if not self.building.set_out_of_service(elevator_id, not available):
                raise KeyError(elevator_id)
            if reason:
                logger.info("Elevator %s availability=%s: %s", elevator_id, available, reason)
            state = self.current_state()
            state["elevator_id"] = elevator_id
            state["available"] = available
            state["reason"] = reason
            return state

    async def reset_metrics(self) -> dict:
        async with self._lock:
            self.building.reset_wait_metrics()
            return self.current_state()


manager = SimulationManager()
app = FastAPI(title="ElevatorSim API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.get("/waiting")
async def get_waiting() -> dict:
    return manager.building.waiting_summary()


@app.post("/calls")
async def submit_call(call: CallRequest) -> dict:
    try:
        return await manager.submit_call(call.floor, call.direction, call.count)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/tick")
async def tick(request: TickRequest) -> dict:
    return await manager.tick(request.count)


@app.post("/auto")
async def set_auto_tick(update: AutoTickUpdate) -> dict:
    if update.enabled:
        await manager.start()
    else:
        await manager.stop()
    return manager.current_state()


@app.post("/elevators/{elevator_id}/press")
async def press_button(elevator_id: str, press: ButtonPress) -> dict:
    try:
        return await manager.press_button(elevator_id, press.floor)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"No elevator '{elevator_id}'")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/elevators/{elevator_id}/availability")
async def update_availability(elevator_id: str, availability: AvailabilityUpdate) -> dict:
    try:
        return await manager.set_availability(elevator_id, availability.available, availability.reason)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"No elevator '{elevator_id}'")


@app.get("/events")
async def get_events(limit: int = 20) -> List[str]:
    return manager.building.get_recent_events(limit)


@app.get("/metrics")
async def get_metrics() -> dict:
    return manager.building.get_wait_metrics()._asdict()


@app.post("/metrics/reset")
async def reset_metrics() -> dict:
    return await manager.reset_metrics()


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

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
