"""Frame-clock driver for a ForceSimulation."""
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional
import asyncio

from loguru import logger

from .simulation import ForceSimulation

FrameClock = Callable[[], Awaitable[None]]


def sleep_clock(fps: float) -> FrameClock:
    interval = 1.0 / fps

    async def _wait() -> None:
        await asyncio.sleep(interval)
    return _wait


class SimulationLoop:
    """Steps the simulation once per frame on an asyncio task.

    The task handle is owned here; `running()` guarantees it is cancelled and
    awaited however the enclosing block exits. A tick that raises is logged
    when it happens and ends the task; the loop is not restarted and the
    error is raised again from `stop()`.
    """

    def __init__(self, simulation: ForceSimulation, fps: float = 60.0,
                 clock: Optional[FrameClock] = None,
                 on_frame: Optional[Callable[[int], None]] = None):
        self.simulation = simulation
        self.clock = clock or sleep_clock(fps)
        self.on_frame = on_frame
        self.frames = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                self.simulation.step()
                self.frames += 1
                if self.on_frame is not None:
                    self.on_frame(self.frames)
            except Exception:
                logger.exception("Simulation tick {} failed; stopping loop", self.frames)
                raise
            await self.clock()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="graph-simulation-loop")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @asynccontextmanager
    async def running(self) -> AsyncIterator["SimulationLoop"]:
        self.start()
        try:
            yield self
        finally:
            await self.stop()
