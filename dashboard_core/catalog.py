from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

import httpx
import numpy as np
import pandas as pd

from dashboard_core.config import get_settings
from dashboard_core.errors import CatalogFetchError, MalformedInputError

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = ["id", "title", "category", "price", "stock", "brand", "rating"]
NUMERIC_COLUMNS = ["price", "stock", "rating"]
TEXT_COLUMNS = ["category", "brand"]


def fetch_catalog(url: Optional[str] = None, *, client: Optional[httpx.Client] = None) -> List[Dict[str, Any]]:
    """GET the product catalog and return its records.

    A single request is made; failures are raised to the caller, which is
    expected to offer a manual retry.
    """
    url = url or get_settings().catalog_url
    logger.info("Fetching catalog from %s", url)
    try:
        if client is None:
            with httpx.Client() as owned:
                response = owned.get(url, headers={"Content-Type": "application/json"})
        else:
            response = client.get(url, headers={"Content-Type": "application/json"})
    except httpx.RequestError as exc:
        raise CatalogFetchError(
            "Network error: Unable to connect to the API. Please check your internet connection."
        ) from exc

    if response.is_error:
        raise CatalogFetchError(
            f"Server error: HTTP error! status: {response.status_code}",
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise MalformedInputError("Invalid data format received from API. Expected JSON body.") from exc

    products = unwrap_products(payload)
    logger.info("Catalog fetched: %d products", len(products))
    return products


def unwrap_products(payload: Any) -> List[Dict[str, Any]]:
    """Accept either ``{"products": [...]}`` or a bare list."""
    if isinstance(payload, Mapping) and "products" in payload:
        payload = payload["products"]
    return validate_records(payload)


def validate_records(records: Any) -> List[Dict[str, Any]]:
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
        raise MalformedInputError(
            f"Invalid data format received from API. Expected array, got: {_json_type(records)}"
        )
    out: List[Dict[str, Any]] = []
    for idx, item in enumerate(records):
        if not isinstance(item, Mapping):
            raise MalformedInputError(
                f"Invalid data format received from API. Expected object at index {idx}, got: {_json_type(item)}"
            )
        out.append(dict(item))
    return out


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence):
        return "array"
    return type(value).__name__


def records_frame(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """Build a typed frame; unparseable numbers and blank strings become NA."""
    df = pd.DataFrame(list(records))
    for col in PRODUCT_COLUMNS:
        if col not in df.columns:
            df[col] = np.nan if col in NUMERIC_COLUMNS else None
    df = numericize(df, NUMERIC_COLUMNS)
    df = coerce_str_safe(df, TEXT_COLUMNS)
    # Titles keep their whitespace; the brand heuristic anchors on the first character.
    df["title"] = df["title"].astype("string")
    return df


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            series = series.replace({"": pd.NA})
            df[col] = series
    return df


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def as_plain_number(value: object) -> Optional[float | int]:
    """Collapse numpy scalars; integral floats become ints."""
    if value is None or pd.isna(value):
        return None
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if out.is_integer():
        return int(out)
    return out


def format_currency_2(value: object) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"${float(value):,.2f}"
