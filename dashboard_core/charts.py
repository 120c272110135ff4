from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _counts_frame(counts: Dict[str, int], key: str) -> pd.DataFrame:
    return pd.DataFrame({key: list(counts.keys()), "products": list(counts.values())})


def category_bar_chart(category_counts: Dict[str, int]) -> alt.Chart:
    df = _counts_frame(category_counts, "category")
    return (
        alt.Chart(df, title="Products Distribution by Category")
        .mark_bar()
        .encode(
            x=alt.X("category:N", title="Category", sort=None, axis=alt.Axis(labelAngle=-40)),
            y=alt.Y("products:Q", title="Products", axis=alt.Axis(tickMinStep=1, gridDash=[4, 4])),
            color=alt.Color("category:N", legend=None),
            tooltip=["category", alt.Tooltip("products:Q", title="Products")],
        )
        .properties(height=300)
    )


def _arc_chart(counts: Dict[str, int], key: str, title: str, *, inner_radius: int = 0) -> alt.Chart:
    df = _counts_frame(counts, key)
    order = list(counts.keys())
    return (
        alt.Chart(df, title=title)
        .mark_arc(innerRadius=inner_radius)
        .encode(
            theta=alt.Theta("products:Q"),
            color=alt.Color(f"{key}:N", sort=order, title=None, legend=alt.Legend(orient="right")),
            tooltip=[key, alt.Tooltip("products:Q", title="Products")],
        )
        .properties(height=260)
    )


def price_range_chart(price_ranges: Dict[str, int]) -> alt.Chart:
    return _arc_chart(price_ranges, "price_range", "Products by Price Range")


def stock_range_chart(stock_ranges: Dict[str, int]) -> alt.Chart:
    return _arc_chart(stock_ranges, "stock_level", "Products by Stock Level", inner_radius=50)


def category_pie_chart(category_counts: Dict[str, int]) -> alt.Chart:
    return _arc_chart(category_counts, "category", "Category Distribution")
