from __future__ import annotations

import httpx
import pytest

from dashboard_core.catalog import fetch_catalog, round_half_up, unwrap_products
from dashboard_core.errors import CatalogFetchError, MalformedInputError, user_message


def test_unwrap_products_accepts_envelope_or_bare_list():
    items = [{"id": 1}, {"id": 2}]
    assert unwrap_products({"products": items, "total": 2, "skip": 0, "limit": 30}) == items
    assert unwrap_products(items) == items


@pytest.mark.parametrize("payload", [{"products": "nope"}, {"items": []}, "text", 12, None, {"products": [1, 2]}])
def test_unwrap_products_rejects_non_arrays(payload):
    with pytest.raises(MalformedInputError):
        unwrap_products(payload)


def test_malformed_message_names_the_json_type():
    with pytest.raises(MalformedInputError) as info:
        unwrap_products({"products": "nope"})
    assert "got: string" in info.value.message
    assert user_message(info.value).startswith("Data format error:")


def test_fetch_catalog_unwraps_response(mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(200, json={"products": [{"id": 1, "title": "Apple", "category": "groceries"}]})

    client, calls = mock_client(handler)
    records = fetch_catalog("https://catalog.test/products", client=client)

    assert records == [{"id": 1, "title": "Apple", "category": "groceries"}]
    assert len(calls) == 1
    assert str(calls[0].url) == "https://catalog.test/products"


def test_fetch_catalog_http_error_is_not_retried(mock_client):
    client, calls = mock_client(lambda request: httpx.Response(503, json={"message": "down"}))

    with pytest.raises(CatalogFetchError) as info:
        fetch_catalog("https://catalog.test/products", client=client)

    assert info.value.status_code == 503
    assert info.value.http_status == 502
    assert user_message(info.value) == "Server error: HTTP error! status: 503"
    assert len(calls) == 1


def test_fetch_catalog_network_error(mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = mock_client(handler)
    with pytest.raises(CatalogFetchError) as info:
        fetch_catalog("https://catalog.test/products", client=client)
    assert user_message(info.value).startswith("Network error:")


def test_fetch_catalog_rejects_non_json_body(mock_client):
    client, _ = mock_client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(MalformedInputError):
        fetch_catalog("https://catalog.test/products", client=client)


def test_round_half_up():
    assert round_half_up(2.675, 2) == 2.68
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(None, 2) is None
