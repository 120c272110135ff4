"""Catalog aggregation: category summaries and price/stock histograms.

The brand and subcategory guesses are title heuristics. They are lossy and
only promise to follow the token rules below.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from dashboard_core.catalog import as_plain_number, records_frame, round_half_up, validate_records
from dashboard_core.errors import EmptyInputError

BRAND_RE = re.compile(r"^([A-Z][a-z]+)")
SUBCATEGORY_STOP_WORDS = frozenset({"the", "and", "for", "with", "from"})
# The product table also hides generic department words.
TABLE_STOP_WORDS = SUBCATEGORY_STOP_WORDS | {"beauty", "skincare", "makeup", "hair", "fragrance"}

# Price bands are [lower, upper); stock bands are (lower, upper].
PRICE_BINS = [-np.inf, 10, 25, 50, 100, np.inf]
PRICE_LABELS = ["Under $10", "$10 - $25", "$25 - $50", "$50 - $100", "Over $100"]
STOCK_BINS = [-np.inf, 10, 50, 100, np.inf]
STOCK_LABELS = ["Low (0-10)", "Medium (11-50)", "High (51-100)", "Very High (100+)"]


@dataclass(frozen=True)
class CategorySummary:
    count: int
    total_price: float
    total_stock: int | float
    average_price: float
    brands: List[str] = field(default_factory=list)
    subcategories: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AggregateResult:
    total_products: int
    total_categories: int
    average_price: float
    total_stock: int | float
    category_counts: Dict[str, int]
    category_details: Dict[str, CategorySummary]
    price_ranges: Dict[str, int]
    stock_ranges: Dict[str, int]


def guess_brand(title: object) -> Optional[str]:
    if not isinstance(title, str):
        return None
    match = BRAND_RE.match(title)
    return match.group(1) if match else None


def guess_subcategory(title: object, stop_words: frozenset = SUBCATEGORY_STOP_WORDS) -> Optional[str]:
    if not isinstance(title, str):
        return None
    words = title.lower().split(" ")
    # The leading brand token is never its own subcategory.
    if guess_brand(title) is not None:
        words = words[1:]
    for word in words:
        if len(word) > 3 and word not in stop_words:
            return word[0].upper() + word[1:]
    return None


def _unique_in_order(values: pd.Series) -> List[str]:
    return list(dict.fromkeys(str(v) for v in values.dropna()))


def _bucket_counts(values: pd.Series, bins: List[float], labels: List[str], *, right: bool) -> Dict[str, int]:
    present = values.dropna()
    buckets = pd.cut(present, bins=bins, labels=labels, right=right)
    counts = buckets.value_counts(sort=False).reindex(labels, fill_value=0)
    return {label: int(n) for label, n in counts.items()}


def price_ranges(df: pd.DataFrame) -> Dict[str, int]:
    return _bucket_counts(df["price"], PRICE_BINS, PRICE_LABELS, right=False)


def stock_ranges(df: pd.DataFrame) -> Dict[str, int]:
    return _bucket_counts(df["stock"], STOCK_BINS, STOCK_LABELS, right=True)


def summarize_categories(df: pd.DataFrame) -> Dict[str, CategorySummary]:
    base = df[df["category"].notna()].copy()
    if base.empty:
        return {}
    base["brand_guess"] = base["title"].map(guess_brand)
    base["subcategory_guess"] = base["title"].map(guess_subcategory)

    out: Dict[str, CategorySummary] = {}
    for category, group in base.groupby("category", sort=False):
        count = int(len(group))
        total_price = float(group["price"].fillna(0).sum())
        out[str(category)] = CategorySummary(
            count=count,
            total_price=total_price,
            total_stock=as_plain_number(group["stock"].fillna(0).sum()) or 0,
            average_price=round_half_up(total_price / count, 2),
            brands=_unique_in_order(group["brand_guess"]),
            subcategories=_unique_in_order(group["subcategory_guess"]),
        )
    return out


def aggregate(records: Sequence[Mapping[str, Any]]) -> AggregateResult:
    """Derive summary statistics from a freshly fetched record list.

    Raises ``MalformedInputError`` when ``records`` is not a sequence of
    objects and ``EmptyInputError`` when it has no records.
    """
    return aggregate_frame(catalog_frame(records))


def catalog_frame(records: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    """Validate a record list and build the typed frame the aggregation reads."""
    rows = validate_records(records)
    if not rows:
        raise EmptyInputError()
    return records_frame(rows)


def aggregate_frame(df: pd.DataFrame) -> AggregateResult:
    details = summarize_categories(df)
    total_price = float(df["price"].fillna(0).sum())

    return AggregateResult(
        total_products=len(df),
        total_categories=len(details),
        average_price=round_half_up(total_price / len(df), 2),
        total_stock=as_plain_number(df["stock"].fillna(0).sum()) or 0,
        category_counts={name: s.count for name, s in details.items()},
        category_details=details,
        price_ranges=price_ranges(df),
        stock_ranges=stock_ranges(df),
    )
