"""OpenRouter (OpenAI-compatible chat completions) backend."""

import logging

import openai
from openai import AsyncOpenAI

from services.pipeline.base import CompletionClient, UpstreamError, classify_status

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterClient(CompletionClient):
    provider_name = "openrouter"

    def __init__(self, api_key: str = "", base_url: str = DEFAULT_BASE_URL, timeout_s: float = 60.0) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_s = timeout_s
        self._client: AsyncOpenAI | None = None

    def connect(self) -> None:
        if not self._api_key:
            logger.warning("No OPENROUTER_API_KEY set - upstream calls will be rejected")
        # The fallback orchestrator owns retries; the SDK must not add its own.
        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout_s,
            max_retries=0,
        )

    async def complete(
        self,
        model: str,
        system: str,
        user: str,
        max_tokens: int,
        strict: bool,
    ) -> str:
        self.ensure_connected()

        params = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": 0.0,
            "top_p": 0.1,
            "max_tokens": max_tokens,
        }
        if strict:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**params)
        except openai.APIStatusError as e:
            raise classify_status(_error_detail(e), e.status_code, strict) from e
        except openai.APITimeoutError as e:
            raise UpstreamError(f"Request to {model} timed out") from e
        except openai.APIConnectionError as e:
            raise UpstreamError(f"Connection error: {e}") from e

        choices = response.choices or []
        if not choices or choices[0].message is None:
            return ""
        return choices[0].message.content or ""


def _error_detail(exc: openai.APIStatusError) -> str:
    """Prefer the provider's own error message over the SDK's summary."""
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return exc.message
