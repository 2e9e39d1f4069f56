"""Google Gemini backend with error classification."""

import logging

import httpx
from google import genai
from google.genai import errors, types

from services.pipeline.base import CompletionClient, UpstreamError, classify_status

logger = logging.getLogger(__name__)


class GeminiClient(CompletionClient):
    provider_name = "gemini"

    def __init__(self, api_key: str = "", timeout_s: float = 60.0) -> None:
        self._api_key = api_key
        self._timeout_s = timeout_s
        self._client: genai.Client | None = None

    def connect(self) -> None:
        if not self._api_key:
            logger.warning("No GEMINI_API_KEY set - Gemini calls disabled")
            raise UpstreamError("GEMINI_API_KEY is not configured")
        self._client = genai.Client(
            api_key=self._api_key,
            http_options=types.HttpOptions(timeout=int(self._timeout_s * 1000)),
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

        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=0.0,
            top_p=0.1,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if strict else None,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=user,
                config=config,
            )
        except errors.APIError as e:
            raise classify_status(e.message or str(e), e.code, strict) from e
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Request to {model} timed out") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Connection error: {e}") from e

        return response.text or ""
