from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from dashboard_core.catalog import fetch_catalog, format_currency_2
from dashboard_core.charts import category_bar_chart, category_pie_chart, price_range_chart, stock_range_chart
from dashboard_core.llm import generate, provider_status
from dashboard_core.metrics_analytics import compute_analytics
from dashboard_core.state import FlowState, FlowStatus

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str, chips: Optional[List[str]] = None):
    inject_base_styles()
    st.markdown(
        f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
        unsafe_allow_html=True,
    )
    if chips:
        html = "".join(f"<span class='chip'>{txt}</span>" for txt in chips)
        st.markdown(f"<div class='chip-row'>{html}</div>", unsafe_allow_html=True)


def flow_state(name: str) -> FlowState:
    key = f"flow:{name}"
    if key not in st.session_state:
        st.session_state[key] = FlowState(name)
    flow = st.session_state[key]
    # Runs are sequential per session; a call still "loading" here was abandoned by a rerun.
    if flow.busy:
        flow.dismiss()
    return flow


# ---------- Analytics ----------
def load_analytics() -> Dict[str, Any]:
    records = fetch_catalog()
    return {"records": records, "payload": compute_analytics(records)}


def render_kpi_tiles(kpis: Dict[str, Any]):
    cols = st.columns(4)
    cols[0].metric("Total Products", f"{kpis['total_products']:,}")
    cols[1].metric("Categories", f"{kpis['total_categories']:,}")
    cols[2].metric("Average Price", format_currency_2(kpis["average_price"]))
    cols[3].metric("Total Stock", f"{kpis['total_stock']:,}")


def category_table(details: Dict[str, Dict[str, Any]]) -> pd.DataFrame:
    rows = [
        {
            "Category": name,
            "Products": d["count"],
            "Average Price": format_currency_2(d["average_price"]),
            "Total Stock": d["total_stock"],
            "Brands": ", ".join(d["brands"]),
            "Subcategories": ", ".join(d["subcategories"]),
        }
        for name, d in details.items()
    ]
    return pd.DataFrame(rows)


def render_analytics_page():
    render_page_header("Analytics", "Home / Analytics", ["Source: product catalog"])
    flow = flow_state("analytics")

    if flow.status is FlowStatus.IDLE:
        with st.spinner("Loading analytics data..."):
            flow.run(load_analytics)

    if flow.status is FlowStatus.ERROR:
        with card("Error Loading Data"):
            st.error(flow.error)
            if st.button("Try Again"):
                flow.dismiss()
                st.rerun()
        return

    if flow.status is not FlowStatus.SUCCESS:
        return

    payload = flow.result["payload"]
    if st.button("Refresh"):
        flow.dismiss()
        st.rerun()

    with card("Summary"):
        render_kpi_tiles(payload["kpis"])

    cols = st.columns(2)
    with cols[0]:
        with card("Products per Category"):
            st.altair_chart(category_bar_chart(payload["category_counts"]), use_container_width=True)
    with cols[1]:
        with card("Category Distribution"):
            st.altair_chart(category_pie_chart(payload["category_counts"]), use_container_width=True)

    cols = st.columns(2)
    with cols[0]:
        with card("Price Ranges"):
            st.altair_chart(price_range_chart(payload["price_ranges"]), use_container_width=True)
    with cols[1]:
        with card("Stock Levels"):
            st.altair_chart(stock_range_chart(payload["stock_ranges"]), use_container_width=True)

    with card("Category Breakdown"):
        st.dataframe(category_table(payload["category_details"]), hide_index=True, use_container_width=True)

    with card("Products"):
        options = ["All Categories"] + list(payload["category_counts"].keys())
        choice = st.selectbox("Category", options=options, index=0)
        products = pd.DataFrame(payload["products"])
        if choice != "All Categories" and not products.empty:
            details = payload["category_details"][choice]
            st.caption(
                f"{details['count']} products · average {format_currency_2(details['average_price'])} · "
                f"{details['total_stock']:,} in stock"
            )
            products = products[products["category"] == choice]
        st.dataframe(products, hide_index=True, use_container_width=True)


# ---------- AI Tools ----------
def render_ai_tools_page():
    render_page_header("AI Tools", "Home / AI Tools")
    st.caption("Interact with AI models to get insights and answers to your questions")
    flow = flow_state("prompt")

    with card("Ask a question"):
        with st.form("prompt_form"):
            prompt = st.text_area("Your prompt", height=140, placeholder="Ask anything about your data...")
            submitted = st.form_submit_button("Send", disabled=flow.busy)
        if submitted and prompt.strip():
            with st.spinner("Generating response..."):
                flow.run(generate, prompt.strip())

    if flow.status is FlowStatus.ERROR:
        st.error(flow.error)
        if st.button("Dismiss"):
            flow.dismiss()
            st.rerun()
    elif flow.status is FlowStatus.SUCCESS:
        result = flow.result
        with card("AI Response"):
            st.markdown(result.text)
            st.caption(f"{result.provider} · {result.model} · {result.usage.get('total_tokens', 0)} chars")
            if st.button("Clear"):
                flow.dismiss()
                st.rerun()


def render_home_page():
    render_page_header("Welcome to AI Insights Dashboard", "Home")
    st.caption("Explore your data with powerful analytics and AI-powered insights")
    cols = st.columns(2)
    with cols[0]:
        with card("Analytics"):
            st.write("View detailed product analytics, charts, and insights from your data.")
    with cols[1]:
        with card("AI Tools"):
            st.write("Interact with AI models to get insights and answers to your questions.")


# ---------- UI setup ----------
st.set_page_config(page_title="AI Insights Dashboard", layout="wide")
inject_base_styles()

with st.sidebar:
    st.markdown("### Navigate")
    current_page = st.radio("Navigate", ["Home", "Analytics", "AI Tools"], index=0)
    st.markdown("---")
    with st.expander("AI service status", expanded=False):
        st.json(provider_status())

if current_page == "Analytics":
    render_analytics_page()
elif current_page == "AI Tools":
    render_ai_tools_page()
else:
    render_home_page()
