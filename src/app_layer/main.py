"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import setup_logging
from src.app_layer.routers import decisions, rounds
from src.data_layer.errors import RoundSequenceError, SimulationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield


app = FastAPI(
    title="Quarter Simulation API",
    description="Resolve business-strategy simulation rounds",
    version="0.3.0",
    lifespan=lifespan,
)

app.include_router(
    rounds.router, prefix="/api/v1/rounds", tags=["rounds"]
)
app.include_router(
    decisions.router, prefix="/api/v1/decisions", tags=["decisions"]
)


@app.exception_handler(SimulationError)
async def simulation_error_handler(request: Request, exc: SimulationError):
    status = 409 if isinstance(exc, RoundSequenceError) else 400
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": type(exc).__name__, "detail": str(exc)})


@app.get("/health")
async def health_check():
    return {"status": "ok"}
