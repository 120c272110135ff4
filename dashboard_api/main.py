from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashboard_api.schemas import AnalyticsResponse, ErrorResponse, LLMResponse, LLMStatusResponse
from dashboard_core.catalog import fetch_catalog
from dashboard_core.config import get_settings
from dashboard_core.errors import DashboardError, ValidationError, user_message
from dashboard_core.llm import generate, provider_status
from dashboard_core.logging import configure_logging
from dashboard_core.metrics_analytics import compute_analytics

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="AI Insights Dashboard API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        ),
    )


def _error(exc: Exception, op: str) -> JSONResponse:
    if isinstance(exc, DashboardError):
        logger.warning("%s failed: %s", op, exc)
        return JSONResponse(
            status_code=exc.http_status,
            content={"error": user_message(exc), "type": type(exc).__name__},
        )
    logger.exception("%s failed", op)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


@app.get("/api/analytics", response_model=AnalyticsResponse, responses=_ERROR_RESPONSES)
def analytics(category: Optional[str] = Query(default=None)):
    try:
        records = fetch_catalog(get_settings().catalog_url)
        return _json(compute_analytics(records, selected_category=category))
    except Exception as exc:
        return _error(exc, "analytics")


@app.get("/api/llm", response_model=LLMStatusResponse)
def llm_status():
    return _json(provider_status(get_settings()))


@app.post("/api/llm", response_model=LLMResponse, responses=_ERROR_RESPONSES)
async def llm_generate(request: Request):
    try:
        try:
            body = await request.json()
        except ValueError as exc:
            raise ValidationError("Invalid JSON body") from exc
        if not isinstance(body, dict):
            raise ValidationError("Invalid JSON body")
        result = await run_in_threadpool(generate, body.get("prompt"))
        return _json(result.to_payload())
    except Exception as exc:
        return _error(exc, "llm_generate")
