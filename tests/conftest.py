from __future__ import annotations

from typing import Callable, List, Tuple

import httpx
import pytest

from dashboard_core.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    # No stray .env or exported keys may leak into provider selection.
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("COHERE_API_KEY", raising=False)
    monkeypatch.delenv("HUGGINGFACE_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def sample_records() -> List[dict]:
    return [
        {"id": 1, "title": "Essence Mascara Lash Princess", "category": "beauty", "price": 9.99, "stock": 5, "brand": "Essence", "rating": 4.94},
        {"id": 2, "title": "Eyeshadow Palette with Mirror", "category": "beauty", "price": 19.99, "stock": 44, "rating": 3.28},
        {"id": 3, "title": "Powder Canister", "category": "beauty", "price": 14.99, "stock": 59},
        {"id": 4, "title": "Calvin Klein CK One", "category": "fragrances", "price": 49.99, "stock": 17, "brand": "Calvin Klein"},
        {"id": 5, "title": "Chanel Coco Noir Eau De", "category": "fragrances", "price": 129.99, "stock": 41},
        {"id": 6, "title": "Annibale Colombo Bed", "category": "furniture", "price": 1899.99, "stock": 47},
        {"id": 7, "title": "Apple", "category": "groceries", "price": 1.99, "stock": 150},
    ]


@pytest.fixture()
def mock_client() -> Callable[..., Tuple[httpx.Client, List[httpx.Request]]]:
    """Build an httpx client whose requests are answered by ``handler``.

    Returns the client and the list of requests it has seen.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> Tuple[httpx.Client, List[httpx.Request]]:
        calls: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return handler(request)

        return httpx.Client(transport=httpx.MockTransport(_record)), calls

    return _make
