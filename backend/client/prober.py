"""Availability prober: wait out a cold backend before submitting answers.

Free-tier hosts put idle services to sleep; the first request after a
while can take tens of seconds. wake_backend() polls the liveness URL
with exponential backoff until it answers 2xx-3xx or the attempt
ceiling is reached.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_INITIAL_BACKOFF = 0.5
DEFAULT_MAX_BACKOFF = 8.0
DEFAULT_PROBE_TIMEOUT = 5.0


class BackendAsleepError(Exception):
    """The backend did not wake up within the attempt ceiling."""

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(f"{url} did not wake in time ({attempts} attempts)")
        self.url = url
        self.attempts = attempts


@dataclass
class ProbeState:
    attempts: int = 0
    backoff: float = DEFAULT_INITIAL_BACKOFF
    deadline: float | None = None  # time.monotonic() value

    def expired(self, now: float) -> bool:
        return self.deadline is not None and now >= self.deadline


def _is_up(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 400


async def _probe_once(client: httpx.AsyncClient, url: str, timeout: float) -> bool:
    """HEAD first; GET on the same attempt if HEAD is not 2xx-3xx."""
    for method in ("HEAD", "GET"):
        try:
            response = await client.request(method, url, timeout=timeout)
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, url, e)
            continue
        if _is_up(response):
            return True
        logger.debug("%s %s -> %d", method, url, response.status_code)
    return False


async def wake_backend(
    url: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    max_backoff: float = DEFAULT_MAX_BACKOFF,
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
    deadline_s: float | None = None,
    client: httpx.AsyncClient | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """Poll ``url`` until it responds. Returns the number of attempts used.

    Raises BackendAsleepError once ``max_attempts`` probes (or the optional
    overall ``deadline_s``) are used up.
    """
    state = ProbeState(
        backoff=initial_backoff,
        deadline=time.monotonic() + deadline_s if deadline_s else None,
    )

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(follow_redirects=False)

    try:
        while state.attempts < max_attempts:
            state.attempts += 1
            if await _probe_once(client, url, probe_timeout):
                logger.info("Backend awake after %d attempt(s)", state.attempts)
                return state.attempts

            if state.attempts >= max_attempts or state.expired(time.monotonic()):
                break
            logger.info(
                "Backend not ready (attempt %d/%d); retrying in %.1fs",
                state.attempts, max_attempts, state.backoff,
            )
            await sleep(state.backoff)
            state.backoff = min(state.backoff * 2, max_backoff)
    finally:
        if owns_client:
            await client.aclose()

    raise BackendAsleepError(url, state.attempts)
