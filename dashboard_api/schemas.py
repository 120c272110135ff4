from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class UsageModel(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class LLMResponse(BaseModel):
    response: str
    timestamp: str
    model: str
    provider: str
    usage: UsageModel


class LLMStatusResponse(BaseModel):
    message: str
    status: str
    hasCohere: bool
    hasHuggingFace: bool
    recommendations: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    type: Optional[str] = None


class AnalyticsKpis(BaseModel):
    total_products: int
    total_categories: int
    average_price: float
    total_stock: float


class AnalyticsResponse(BaseModel):
    kpis: AnalyticsKpis
    category_counts: Dict[str, int]
    category_details: Dict[str, Dict[str, Any]]
    price_ranges: Dict[str, int]
    stock_ranges: Dict[str, int]
    selected: Optional[Dict[str, Any]] = None
    products: List[Dict[str, Any]]
    charts: Dict[str, Any]
