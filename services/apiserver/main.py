"""
BRM API server — REST front end for the blocking simulator.

Endpoints (all under ``/rest``):
    GET /simple     Immediate informational response.
    GET /blocking   Runs one blocking operation on the request thread, then
                    responds.  Optional query params: ``operation-type``,
                    ``min-block-period-ms``, ``max-block-period-ms``.

Handlers are plain functions, so FastAPI runs them on its worker thread
pool and each in-flight /blocking request holds one pool thread.  That is
the behaviour load generators use this service to measure.

Configuration (env vars / .env):
    BRM_BLOCKING_*   Simulator defaults, re-read on every request (see simulation/config.py)
    LOG_STRING       When set, echoed into the log by every handler
    LOG_LEVEL        default INFO
    API_HOST         default 0.0.0.0
    API_PORT         default 8080
"""

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Header, Query

from model.response import SimpleResponse, new_simple_response
from simulation.blocking import BlockingSimulator
from simulation.config import MAX_BLOCK_PERIOD_MS

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("BrmApiServer")

PATH = "/rest"
PATH_SIMPLE = "/simple"
PATH_BLOCKING = "/blocking"

LOG_STRING: Optional[str] = os.getenv("LOG_STRING")

blocking_simulator = BlockingSimulator()

router = APIRouter(prefix=PATH)


@router.get(PATH_SIMPLE, response_model=SimpleResponse)
def simple_response(
    trace_id: Optional[str] = Header(default=None, alias="x-b3-traceid"),
) -> SimpleResponse:
    if LOG_STRING is not None:
        logger.info(f"in simpleResponse. logString = {LOG_STRING}.")
    return new_simple_response(PATH_SIMPLE)


@router.get(PATH_BLOCKING, response_model=SimpleResponse)
def blocking_response(
    trace_id: Optional[str] = Header(default=None, alias="x-b3-traceid"),
    operation_type: Optional[str] = Query(default=None, alias="operation-type"),
    min_block_period_ms: Optional[int] = Query(default=None, alias="min-block-period-ms", ge=0, le=MAX_BLOCK_PERIOD_MS),
    max_block_period_ms: Optional[int] = Query(default=None, alias="max-block-period-ms", ge=0, le=MAX_BLOCK_PERIOD_MS),
) -> SimpleResponse:
    if LOG_STRING is not None:
        logger.info(f"in blockingResponse. logString = {LOG_STRING}.")

    blocking_simulator.perform_blocking_operation(operation_type, min_block_period_ms, max_block_period_ms)

    return new_simple_response(PATH_BLOCKING)


app = FastAPI(title="BRM API Server")
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8080"))
    logger.info(f"Starting BRM API server on {host}:{port}...")
    try:
        uvicorn.run(app, host=host, port=port)
    except KeyboardInterrupt:
        logger.info("BRM API server stopped.")
