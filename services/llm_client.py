"""OpenAI-compatible chat completions client."""
import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request

from config import Settings

logger = logging.getLogger(__name__)


class LLMClientError(RuntimeError):
    """Raised when the completion endpoint cannot produce an answer."""


class LLMClient:
    """Thin async wrapper around a chat completions endpoint.

    One instance is created at application startup and closed at shutdown.
    Failed calls are not retried.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model = model
        self.configured = bool(api_key)
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        return cls(
            api_key=settings.openai_api_key or "",
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            timeout=settings.llm_timeout,
        )

    async def chat_completions(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Call the chat completions API and return the reply text.

        Args:
            messages: List of message dicts with "role" and "content"
            temperature: Sampling temperature
            max_tokens: Max tokens in response
            json_mode: Ask the model for a single JSON object

        Returns:
            Content of the first choice ("" if the reply has no choices).

        Raises:
            LLMClientError: If the request fails or the API returns an error.
        """
        if not self.configured:
            raise LLMClientError("OpenAI API key not configured")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }

        if max_tokens:
            payload["max_tokens"] = max_tokens

        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.post("/chat/completions", json=payload)
        except httpx.RequestError as e:
            logger.error("Completion request failed: %s", e)
            raise LLMClientError(f"Completion request failed: {str(e)}")

        if response.status_code != 200:
            logger.error("Completion API error %s: %s", response.status_code, response.text)
            raise LLMClientError(f"Completion API error {response.status_code}: {response.text}")

        try:
            data = response.json()
            if "choices" in data and data["choices"]:
                return data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Malformed completion reply: %s", response.text[:200])
            raise LLMClientError(f"Malformed completion reply: {str(e)}")

        return ""

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()


def get_llm_client(request: Request) -> LLMClient:
    """FastAPI dependency returning the client built at startup."""
    return request.app.state.llm_client
