"""HTTP client for the assessment API: wake the backend, then submit."""

import logging

import httpx

from client.prober import BackendAsleepError, wake_backend
from models.responses import AssessmentResult

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:8787"

# A request sent to a backend that is still waking up has to absorb the
# remaining cold-start latency itself.
SUBMIT_TIMEOUT = 60.0
COLD_SUBMIT_TIMEOUT = 120.0


class AssessmentRequestError(Exception):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, payload: dict | str) -> None:
        detail = (payload.get("detail") or payload.get("error")) if isinstance(payload, dict) else payload
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.payload = payload


def join_url(base: str, path: str) -> str:
    return base.rstrip("/") + path


async def submit_answers(
    answers: list[str],
    base_url: str = DEFAULT_API_BASE,
    mock: bool = False,
    wake: bool = True,
    client: httpx.AsyncClient | None = None,
) -> AssessmentResult:
    """POST four answers to /assess and return the parsed result.

    Raises AssessmentRequestError for 4xx/5xx responses.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient()

    try:
        timeout = SUBMIT_TIMEOUT
        if wake:
            try:
                await wake_backend(join_url(base_url, "/"), client=client)
            except BackendAsleepError as e:
                logger.warning("%s; submitting anyway", e)
                timeout = COLD_SUBMIT_TIMEOUT

        resp = await client.post(
            join_url(base_url, "/assess"),
            json={"answers": list(answers)},
            params={"mock": "1"} if mock else None,
            timeout=timeout,
        )
        model = resp.headers.get("X-Model")
        if model:
            logger.info("Backend model: %s", model)

        if resp.status_code >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = resp.text
            raise AssessmentRequestError(resp.status_code, payload)

        return AssessmentResult.model_validate(resp.json())
    finally:
        if owns_client:
            await client.aclose()
