from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from dashboard_core.aggregate import TABLE_STOP_WORDS, aggregate_frame, catalog_frame, guess_brand, guess_subcategory
from dashboard_core.catalog import as_plain_number
from dashboard_core.charts import (
    category_bar_chart,
    category_pie_chart,
    price_range_chart,
    stock_range_chart,
    to_vega_spec,
)
from dashboard_core.errors import ValidationError


def _text(value: object) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


def describe_product(record: Mapping[str, Any]) -> Dict[str, Any]:
    title = _text(record.get("title"))
    return {
        "id": as_plain_number(record.get("id")),
        "title": title,
        "category": _text(record.get("category")),
        "brand": _text(record.get("brand")) or guess_brand(title),
        "subcategory": guess_subcategory(title, TABLE_STOP_WORDS),
        "price": as_plain_number(record.get("price")),
        "stock": as_plain_number(record.get("stock")),
        "rating": as_plain_number(record.get("rating")),
    }


def product_table(df: pd.DataFrame, *, category: Optional[str] = None) -> List[Dict[str, Any]]:
    if category is not None:
        df = df[df["category"].eq(category).fillna(False).astype(bool)]
    return [describe_product(row) for row in df.to_dict(orient="records")]


def compute_analytics(records: Sequence[Mapping[str, Any]], *, selected_category: Optional[str] = None) -> Dict[str, Any]:
    df = catalog_frame(records)
    result = aggregate_frame(df)
    selected_category = (selected_category or "").strip() or None
    if selected_category is not None and selected_category not in result.category_details:
        raise ValidationError(f"Unknown category: {selected_category}")

    selected = None
    if selected_category is not None:
        selected = {"category": selected_category, **asdict(result.category_details[selected_category])}

    return {
        "kpis": {
            "total_products": result.total_products,
            "total_categories": result.total_categories,
            "average_price": result.average_price,
            "total_stock": result.total_stock,
        },
        "category_counts": result.category_counts,
        "category_details": {name: asdict(s) for name, s in result.category_details.items()},
        "price_ranges": result.price_ranges,
        "stock_ranges": result.stock_ranges,
        "selected": selected,
        "products": product_table(df, category=selected_category),
        "charts": {
            "category_distribution": to_vega_spec(category_bar_chart(result.category_counts)),
            "category_share": to_vega_spec(category_pie_chart(result.category_counts)),
            "price_ranges": to_vega_spec(price_range_chart(result.price_ranges)),
            "stock_ranges": to_vega_spec(stock_range_chart(result.stock_ranges)),
        },
    }
