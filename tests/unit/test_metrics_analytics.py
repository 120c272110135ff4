from __future__ import annotations

import pytest

import dashboard_core.aggregate as aggregate_module
from dashboard_core.errors import ValidationError
from dashboard_core.metrics_analytics import compute_analytics, describe_product


def test_compute_analytics_payload(sample_records):
    payload = compute_analytics(sample_records)

    assert payload["kpis"] == {
        "total_products": 7,
        "total_categories": 4,
        "average_price": 303.85,
        "total_stock": 363,
    }
    assert payload["selected"] is None
    assert len(payload["products"]) == 7
    assert payload["category_details"]["beauty"]["brands"] == ["Essence", "Eyeshadow", "Powder"]
    assert set(payload["charts"]) == {"category_distribution", "category_share", "price_ranges", "stock_ranges"}
    assert payload["charts"]["category_share"]["mark"]["type"] == "arc"
    for spec in payload["charts"].values():
        assert "$schema" in spec


def test_selected_category_filters_product_table(sample_records):
    payload = compute_analytics(sample_records, selected_category="fragrances")

    assert [p["id"] for p in payload["products"]] == [4, 5]
    assert payload["selected"]["category"] == "fragrances"
    assert payload["selected"]["count"] == 2
    assert payload["selected"]["average_price"] == 89.99
    # Summary figures still cover the whole catalog.
    assert payload["kpis"]["total_products"] == 7


def test_unknown_category_is_rejected(sample_records):
    with pytest.raises(ValidationError):
        compute_analytics(sample_records, selected_category="spaceships")


def test_describe_product_prefers_record_brand():
    row = describe_product({"id": 4, "title": "Calvin Klein CK One", "category": "fragrances", "price": 49.99, "stock": 17, "brand": "Calvin Klein"})
    assert row["brand"] == "Calvin Klein"
    assert row["subcategory"] == "Klein"
    assert row["price"] == 49.99
    assert row["rating"] is None

    row = describe_product({"id": 1, "title": "Essence Mascara Lash Princess"})
    assert row["brand"] == "Essence"
    assert row["subcategory"] == "Mascara"
    assert row["category"] is None


def test_product_table_skips_department_words():
    row = describe_product({"id": 9, "title": "Organic Hair Serum"})
    assert row["subcategory"] == "Serum"

    row = describe_product({"id": 10, "title": "Gentle Skincare Cleanser"})
    assert row["subcategory"] == "Cleanser"

    row = describe_product({"id": 11, "title": "Matte Makeup Beauty Blender"})
    assert row["subcategory"] == "Blender"

    row = describe_product({"id": 12, "title": "the beauty fragrance set"})
    assert row["subcategory"] is None


def test_records_are_typed_once(monkeypatch, sample_records):
    calls = []
    real = aggregate_module.records_frame

    def counting(rows):
        calls.append(len(rows))
        return real(rows)

    monkeypatch.setattr(aggregate_module, "records_frame", counting)
    payload = compute_analytics(sample_records, selected_category="beauty")

    assert calls == [7]
    assert len(payload["products"]) == 3
