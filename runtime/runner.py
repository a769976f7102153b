import asyncio
from typing import List, Optional

from loguru import logger

from tactics.engine import Engine, Snapshot
from tactics.model import Event, Order
from .eventlog import EventLog

class TickRunner:
    """Async driver that steps the engine on a fixed tick cadence.

    The engine itself never sleeps; the runner supplies dt_ms each tick and
    is the only place that waits on the clock.
    """

    def __init__(self, engine: Engine, tick_ms: int = 100, time_compression: float = 1.0):
        self.engine = engine
        self.tick_ms = tick_ms
        self.time_compression = time_compression
        self.sleep_s = (tick_ms / 1000.0) / max(1.0, time_compression)
        self._orders: asyncio.Queue[List[Order]] = asyncio.Queue()
        self.events = EventLog()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None

    async def start(self):
        """Start the tick loop."""
        if self._task:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        """Stop the tick loop gracefully."""
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    def _drain(self) -> List[Order]:
        batched: List[Order] = []
        while not self._orders.empty():
            try:
                batched += self._orders.get_nowait()
            except asyncio.QueueEmpty:
                break
        return batched

    async def step_once(self) -> List[Event]:
        """Batch pending orders, step the engine one tick, log events."""
        batched = self._drain()
        async with self._lock:
            if batched:
                logger.debug(f"[TickRunner] Applying {len(batched)} orders to engine")
                self.engine.apply_orders(batched)
            evts: List[Event] = self.engine.step(self.tick_ms)

        if evts:
            logger.debug(f"[TickRunner] Tick produced {len(evts)} events")
        self.events.append_many(evts)
        return evts

    async def _loop(self):
        """Main tick loop."""
        while True:
            await self.step_once()
            await asyncio.sleep(self.sleep_s)

    async def enqueue_orders(self, orders: List[Order]):
        """Queue orders to be applied on next tick."""
        logger.debug(f"[TickRunner] Enqueuing {len(orders)} orders")
        await self._orders.put(orders)

    async def snapshot(self) -> Snapshot:
        """Get a view of the current tick (never mid-step)."""
        async with self._lock:
            return self.engine.snapshot()

    def set_time_compression(self, time_compression: float):
        """Update time compression factor (1.0 = real-time, higher = faster)."""
        self.time_compression = max(0.1, min(1000.0, time_compression))
        self.sleep_s = (self.tick_ms / 1000.0) / max(1.0, self.time_compression)
        logger.info(f"[TickRunner] Time compression set to {self.time_compression}x (sleep: {self.sleep_s:.4f}s)")
