"""Prompt proxy: forward a prompt to the first configured text provider.

Provider choice depends only on which credentials are present. When the
selected provider fails, the error is surfaced and no other provider is
tried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

import httpx

from dashboard_core.config import Settings, get_settings
from dashboard_core.errors import NoProviderConfiguredError, ValidationError
from dashboard_core.providers import TextProvider, cohere_from_settings, huggingface_from_settings

logger = logging.getLogger(__name__)

ProviderRole = Literal["primary", "fallback"]

RECOMMENDATIONS = [
    "Add COHERE_API_KEY for better quality (free tier: 5 req/min)",
    "Add HUGGINGFACE_API_KEY for completely free service (30k req/month)",
]


@dataclass(frozen=True)
class PromptResponse:
    text: str
    provider_used: ProviderRole
    provider: str
    model: str
    timestamp: str
    usage: Dict[str, int] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "response": self.text,
            "timestamp": self.timestamp,
            "model": self.model,
            "provider": self.provider,
            "usage": dict(self.usage),
        }


def default_providers(settings: Optional[Settings] = None) -> List[TextProvider]:
    settings = settings or get_settings()
    return [cohere_from_settings(settings), huggingface_from_settings(settings)]


def select_provider(providers: Sequence[TextProvider]) -> Tuple[ProviderRole, TextProvider]:
    for idx, provider in enumerate(providers):
        if provider.configured():
            return ("primary" if idx == 0 else "fallback"), provider
    raise NoProviderConfiguredError()


def validate_prompt(prompt: object) -> str:
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError("Prompt is required and must be a string")
    return prompt


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate(
    prompt: object,
    *,
    providers: Optional[Sequence[TextProvider]] = None,
    client: Optional[httpx.Client] = None,
) -> PromptResponse:
    prompt = validate_prompt(prompt)
    candidates = default_providers() if providers is None else providers
    role, provider = select_provider(candidates)

    if client is None:
        with httpx.Client() as owned:
            raw = provider.complete(prompt, owned)
    else:
        raw = provider.complete(prompt, client)

    return PromptResponse(
        text=raw.strip(),
        provider_used=role,
        provider=provider.name,
        model=provider.model_id,
        timestamp=_utc_timestamp(),
        usage={
            "prompt_tokens": len(prompt),
            "completion_tokens": len(raw),
            "total_tokens": len(prompt) + len(raw),
        },
    )


def provider_status(settings: Optional[Settings] = None) -> Dict[str, Any]:
    providers = default_providers(settings)
    flags = {p.name: p.configured() for p in providers}
    active = next((p for p in providers if p.configured()), None)

    message = "LLM API endpoint is ready"
    if active is not None:
        message += f" with {active.label} integration"
    else:
        message += " but no AI service is configured"

    return {
        "message": message,
        "status": "configured" if active is not None else "unconfigured",
        "hasCohere": flags.get("cohere", False),
        "hasHuggingFace": flags.get("huggingface", False),
        "recommendations": list(RECOMMENDATIONS),
    }
