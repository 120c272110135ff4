"""Core (UI-agnostic) dashboard logic.

This package contains:
- catalog fetch and record normalization (JSON -> pandas)
- aggregation and page payloads (JSON-serializable)
- chart helpers (Altair -> Vega-Lite spec dict)
- the prompt proxy and its text providers
"""
