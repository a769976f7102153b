import math
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from runtime.runner import TickRunner
from tactics.config import configure_logging, settings
from tactics.engine import Engine
from tactics.errors import RosterError
from tactics.grid import GridMap, GridPosition
from tactics.model import Order, State
from tactics.scenarios import default_state, skirmish_state
from .schemas import EventsResponse, OrderIn, StartRequest, TurnResponse

runner: Optional[TickRunner] = None

def _make_initial_state(req: StartRequest, grid: GridMap) -> State:
    """Build the starting roster for the requested scenario."""
    if req.scenario == "skirmish":
        return skirmish_state(req.seed, grid, players=req.players, enemies=req.enemies)
    return default_state(grid)

async def _launch(req: StartRequest) -> TickRunner:
    global runner
    # Build first so a rejected roster leaves the current battle running
    grid = GridMap.from_settings(settings)
    eng = Engine(_make_initial_state(req, grid), grid=grid, settings=settings)
    await _shutdown()
    runner = TickRunner(eng, tick_ms=settings.tick_ms, time_compression=settings.time_compression)
    autorun = settings.autorun if req.autorun is None else req.autorun
    if autorun:
        await runner.start()
    logger.info(f"[API] Battle {eng.state.battle_id} started ({req.scenario}, {len(eng.state.units)} units, autorun={autorun})")
    return runner

async def _shutdown():
    if runner:
        await runner.stop()

def _require_runner() -> TickRunner:
    if not runner:
        raise HTTPException(400, "Battle not started")
    return runner

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start a default battle on startup, stop the tick loop on shutdown."""
    configure_logging()
    await _launch(StartRequest(seed=settings.seed))
    yield
    await _shutdown()

app = FastAPI(title="Grid Tactics API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Grid Tactics API",
        "docs": "/docs",
        "version": "1.0"
    }

@app.post("/battle/start")
async def start_battle(req: StartRequest):
    """Start a new battle."""
    try:
        r = await _launch(req)
    except RosterError as e:
        raise HTTPException(422, str(e))
    return {"battle_id": r.engine.state.battle_id}

@app.post("/battle/local/orders")
async def post_orders(orders: list[OrderIn]):
    """Submit input events; they are applied on the next tick."""
    r = _require_runner()
    order_objs = []
    for o in orders:
        pos = None
        if o.x is not None and o.y is not None:
            if o.space == "world":
                pos = r.engine.grid.world_to_grid((o.x, o.y))
            else:
                pos = GridPosition(math.floor(o.x), math.floor(o.y))
        elif o.kind == "click":
            raise HTTPException(422, "click needs x and y")
        order_objs.append(Order(kind=o.kind, pos=pos))
    logger.debug(f"[API] Received {len(order_objs)} orders")
    await r.enqueue_orders(order_objs)
    return {"queued": len(orders)}

@app.post("/battle/local/step")
async def step_battle(ticks: int = Query(1, ge=1, le=1000)):
    """Advance the battle by hand, one tick at a time."""
    r = _require_runner()
    produced = 0
    for _ in range(ticks):
        produced += len(await r.step_once())
    return {"ts_ms": r.engine.state.ts_ms, "events": produced}

@app.get("/battle/local/state")
async def get_state():
    """Get current battle state snapshot."""
    r = _require_runner()
    s = await r.snapshot()
    return asdict(s)

@app.get("/battle/local/turn", response_model=TurnResponse)
async def get_turn():
    """Turn counter and active faction."""
    r = _require_runner()
    s = await r.snapshot()
    return TurnResponse(current_turn=s.current_turn, active_faction=s.active_faction, phase=s.phase)

@app.get("/battle/local/events")
async def get_events(since: int = 0, limit: int = 500):
    """Get events since offset."""
    r = _require_runner()
    evts, next_offset = r.events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        events=[{"kind": e.kind, "ts_ms": e.ts_ms, "data": e.data} for e in evts]
    )

@app.post("/battle/local/time-control")
async def set_time_control(time_compression: float):
    """Set simulation time compression (1.0 = real-time, higher = faster)."""
    r = _require_runner()
    r.set_time_compression(time_compression)
    return {"time_compression": r.time_compression}

@app.get("/battle/local/time-control")
async def get_time_control():
    """Get current time compression setting."""
    r = _require_runner()
    return {"time_compression": r.time_compression}
