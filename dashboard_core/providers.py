from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from dashboard_core.config import Settings
from dashboard_core.errors import UpstreamError

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response from AI"

COHERE_PREAMBLE = (
    "You are a helpful AI assistant that provides insightful analysis and helpful responses. "
    "Be concise but informative."
)
HUGGINGFACE_PREAMBLE = "You are a helpful AI assistant."


class TextProvider:
    """One upstream text-generation service.

    Subclasses describe the request body and the response envelope; the
    HTTP exchange itself is shared.
    """

    name: str = ""
    label: str = ""

    def __init__(self, api_key: str, url: str, model: str) -> None:
        self.api_key = api_key or ""
        self.url = url
        self.model = model

    def configured(self) -> bool:
        return bool(self.api_key.strip())

    @property
    def model_id(self) -> str:
        return self.model

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        raise NotImplementedError

    def extract_text(self, data: Any) -> Optional[str]:
        raise NotImplementedError

    def error_message(self, data: Any) -> str:
        raise NotImplementedError

    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def complete(self, prompt: str, client: httpx.Client) -> str:
        """Send one request and return the untrimmed generated text."""
        logger.info("Calling %s API with prompt length: %d", self.label, len(prompt))
        try:
            response = client.post(self.url, headers=self.headers(), json=self.build_payload(prompt))
        except httpx.RequestError as exc:
            raise UpstreamError(self.name, None, f"Failed to fetch ({type(exc).__name__})", label=self.label) from exc

        if response.is_error:
            try:
                data = response.json()
            except ValueError:
                data = {}
            message = self.error_message(data) or "Unknown error"
            logger.error("%s API error: status=%s message=%s", self.label, response.status_code, message)
            raise UpstreamError(self.name, response.status_code, message, label=self.label)

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(self.name, response.status_code, "Invalid JSON in response body", label=self.label) from exc

        text = self.extract_text(data) or NO_RESPONSE_TEXT
        logger.info("%s response received: length=%d", self.label, len(text))
        return text


class CohereProvider(TextProvider):
    name = "cohere"
    label = "Cohere"

    @property
    def model_id(self) -> str:
        return f"cohere-{self.model}"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "prompt": f"{COHERE_PREAMBLE}\n\nUser: {prompt}\n\nAssistant:",
            "max_tokens": 1000,
            "temperature": 0.7,
            "k": 0,
            "stop_sequences": [],
            "return_likelihoods": "NONE",
        }

    def extract_text(self, data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        generations = data.get("generations") or []
        if not isinstance(generations, list) or not generations or not isinstance(generations[0], dict):
            return None
        text = generations[0].get("text")
        return text if isinstance(text, str) else None

    def error_message(self, data: Any) -> str:
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return "Unknown error"


class HuggingFaceProvider(TextProvider):
    name = "huggingface"
    label = "Hugging Face"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "inputs": f"{HUGGINGFACE_PREAMBLE} User: {prompt} Assistant:",
            "parameters": {
                "max_length": 200,
                "temperature": 0.7,
                "do_sample": True,
            },
        }

    def extract_text(self, data: Any) -> Optional[str]:
        # The inference API returns a list of candidates; anything else has no text.
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return None
        text = data[0].get("generated_text")
        return text if isinstance(text, str) else None

    def error_message(self, data: Any) -> str:
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return "Unknown error"


def cohere_from_settings(settings: Settings) -> CohereProvider:
    return CohereProvider(settings.cohere_api_key, settings.cohere_api_url, settings.cohere_model)


def huggingface_from_settings(settings: Settings) -> HuggingFaceProvider:
    return HuggingFaceProvider(settings.huggingface_api_key, settings.huggingface_api_url, settings.huggingface_model)
