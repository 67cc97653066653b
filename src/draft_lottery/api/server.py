"""FastAPI server for the draft lottery.

Serves the league configuration and lottery history from the JSON store and
runs new lotteries on demand.

Usage:
    uvicorn draft_lottery.api.server:app --host 0.0.0.0 --port 8000

Endpoints:
    GET  /health          - Health check and store status
    GET  /config          - Current league configuration
    POST /config          - Replace the league configuration
    GET  /lottery         - All stored lotteries, newest first
    POST /lottery         - Store a lottery result
    GET  /lottery/{year}  - Stored lottery for one season
    POST /lottery/run     - Draw a new lottery (optionally saving it)
"""

from __future__ import annotations

import random
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from draft_lottery.api.models import (
    DraftConfigModel,
    DraftLotteryModel,
    DraftPickModel,
    ErrorResponse,
    HealthResponse,
    MovementSummaryModel,
    RunLotteryRequest,
    RunLotteryResponse,
    SuccessResponse,
)
from draft_lottery.config import get_config
from draft_lottery.data.schema import DraftLottery
from draft_lottery.data.store import LotteryStore, StoreError
from draft_lottery.engine import InitialOrderError, LotteryError, run_complete_lottery
from draft_lottery.utils import get_logger, setup_logging
from draft_lottery.utils.metrics import summarize_movements

logger = get_logger(__name__)

# Global state
_store: LotteryStore | None = None
_start_time: float = time.time()


def get_store() -> LotteryStore:
    """Return the active store, opening the configured one on first use."""
    global _store
    if _store is None:
        storage = get_config().storage
        _store = LotteryStore(storage.db_path, indent=storage.indent)
    return _store


def set_store(store: LotteryStore | None) -> None:
    """Point the API at a different store (``None`` reopens the configured one)."""
    global _store
    _store = store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the FastAPI app."""
    setup_logging(get_config().log_level)
    logger.info("Starting draft lottery API server...")
    store = get_store()
    try:
        store.initialize()
        logger.info(f"✓ Store ready at {store.path}")
    except StoreError as e:
        logger.error(f"Store not available on startup: {e}")
    yield
    logger.info("Shutting down draft lottery API server...")


app = FastAPI(
    title="Draft Lottery API",
    description="Weighted draft-order lottery with a per-team movement cap",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for browser front ends
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint with store status."""
    store = get_store()
    uptime = time.time() - _start_time
    try:
        count = len(store.get_all_lotteries())
    except StoreError as e:
        logger.warning(f"Health check could not read store: {e}")
        return HealthResponse(
            status="unhealthy",
            store_path=str(store.path),
            lotteries_stored=None,
            uptime_seconds=uptime,
        )

    return HealthResponse(
        status="healthy",
        store_path=str(store.path),
        lotteries_stored=count,
        uptime_seconds=uptime,
    )


@app.get("/config", response_model=DraftConfigModel, responses=_ERRORS)
def read_config() -> DraftConfigModel:
    try:
        return DraftConfigModel.from_domain(get_store().get_config())
    except StoreError as e:
        logger.error(f"Failed to fetch config: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch config"
        )


@app.post("/config", response_model=SuccessResponse, responses=_ERRORS)
def update_config(config: DraftConfigModel) -> SuccessResponse:
    try:
        get_store().update_config(config.to_domain())
    except StoreError as e:
        logger.error(f"Failed to update config: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update config"
        )
    return SuccessResponse()


@app.get("/lottery", response_model=list[DraftLotteryModel], responses=_ERRORS)
def list_lotteries() -> list[DraftLotteryModel]:
    try:
        lotteries = get_store().get_all_lotteries()
    except StoreError as e:
        logger.error(f"Failed to fetch lotteries: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch lotteries"
        )
    return [DraftLotteryModel.from_domain(lottery) for lottery in lotteries]


@app.post("/lottery", response_model=SuccessResponse, responses=_ERRORS)
def save_lottery(lottery: DraftLotteryModel) -> SuccessResponse:
    try:
        get_store().save_lottery(lottery.to_domain())
    except StoreError as e:
        logger.error(f"Failed to save lottery: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save lottery"
        )
    return SuccessResponse()


@app.post("/lottery/run", response_model=RunLotteryResponse, responses=_ERRORS)
def run_lottery(request: RunLotteryRequest) -> RunLotteryResponse:
    """Draw every round with the stored configuration.

    The initial order comes from the request, then the saved order, then 1..N.
    """
    settings = get_config()
    store = get_store()

    try:
        config = store.get_config()
    except StoreError as e:
        logger.error(f"Failed to fetch config: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch config"
        )

    initial_order = (
        request.initial_order if request.initial_order is not None else config.default_order()
    )
    seed = request.seed if request.seed is not None else settings.random_seed
    rng = random.Random(seed) if seed is not None else None

    try:
        picks = run_complete_lottery(config, initial_order, rules=settings.rules, rng=rng)
    except InitialOrderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LotteryError as e:
        logger.error(f"Lottery failed: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    lottery_model = None
    if request.save:
        year = request.year if request.year is not None else config.current_year
        lottery = DraftLottery.create(year, picks, config, initial_order)
        try:
            store.save_lottery(lottery)
        except StoreError as e:
            logger.error(f"Failed to save lottery: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save lottery"
            )
        lottery_model = DraftLotteryModel.from_domain(lottery)

    summary = summarize_movements(picks)
    return RunLotteryResponse(
        picks=[DraftPickModel.from_domain(pick) for pick in picks],
        initial_order=list(initial_order),
        movement=MovementSummaryModel(
            up=summary.up,
            down=summary.down,
            stayed=summary.stayed,
            mean_abs_movement=summary.mean_abs_movement,
        ),
        saved=request.save,
        lottery=lottery_model,
    )


@app.get(
    "/lottery/{year}",
    response_model=DraftLotteryModel,
    responses={**_ERRORS, 404: {"model": ErrorResponse}},
)
def get_lottery(year: str) -> DraftLotteryModel:
    try:
        year_value = int(year)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid year")

    try:
        lottery = get_store().get_lottery_by_year(year_value)
    except StoreError as e:
        logger.error(f"Failed to fetch lottery {year_value}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch lottery"
        )

    if lottery is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lottery not found")
    return DraftLotteryModel.from_domain(lottery)


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request body", "detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    # For development only
    logger.info("Starting development server...")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
