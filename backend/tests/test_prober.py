import time

import httpx
import pytest
import respx
from httpx import Response

from client.prober import BackendAsleepError, wake_backend

URL = "http://backend.test/"


class _RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.mark.asyncio
async def test_wakes_on_third_attempt_after_two_backoffs():
    sleep = _RecordingSleep()
    with respx.mock(assert_all_called=True) as respx_mock:
        respx_mock.head(URL).mock(side_effect=[Response(503), Response(503), Response(200)])
        respx_mock.get(URL).mock(return_value=Response(503))

        attempts = await wake_backend(URL, initial_backoff=0.5, sleep=sleep)

    assert attempts == 3
    assert sleep.delays == [0.5, 1.0]
    assert sum(sleep.delays) == 1.5


@pytest.mark.asyncio
async def test_elapsed_delay_matches_backoff_sum():
    with respx.mock() as respx_mock:
        respx_mock.head(URL).mock(side_effect=[Response(502), Response(502), Response(204)])
        respx_mock.get(URL).mock(return_value=Response(502))

        started = time.monotonic()
        attempts = await wake_backend(URL, initial_backoff=0.02)
        elapsed = time.monotonic() - started

    assert attempts == 3
    assert elapsed >= 0.06 - 0.005


@pytest.mark.asyncio
async def test_falls_back_to_get_on_same_attempt():
    sleep = _RecordingSleep()
    with respx.mock(assert_all_called=True) as respx_mock:
        respx_mock.head(URL).mock(return_value=Response(405))
        respx_mock.get(URL).mock(return_value=Response(200, text="OK"))

        attempts = await wake_backend(URL, sleep=sleep)

    assert attempts == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_redirect_counts_as_awake():
    with respx.mock() as respx_mock:
        respx_mock.head(URL).mock(return_value=Response(302, headers={"Location": "/login"}))
        assert await wake_backend(URL, sleep=_RecordingSleep()) == 1


@pytest.mark.asyncio
async def test_network_errors_are_retried():
    sleep = _RecordingSleep()
    with respx.mock() as respx_mock:
        respx_mock.head(URL).mock(side_effect=[httpx.ConnectError("refused"), Response(200)])
        respx_mock.get(URL).mock(side_effect=httpx.ReadTimeout("cold start"))

        attempts = await wake_backend(URL, initial_backoff=0.25, sleep=sleep)

    assert attempts == 2
    assert sleep.delays == [0.25]


@pytest.mark.asyncio
async def test_gives_up_after_ceiling_without_trailing_sleep():
    sleep = _RecordingSleep()
    with respx.mock() as respx_mock:
        respx_mock.head(URL).mock(return_value=Response(503))
        respx_mock.get(URL).mock(return_value=Response(503))

        with pytest.raises(BackendAsleepError) as exc_info:
            await wake_backend(URL, max_attempts=3, initial_backoff=0.5, sleep=sleep)

    assert exc_info.value.attempts == 3
    assert sleep.delays == [0.5, 1.0]
    assert "did not wake in time" in str(exc_info.value)


@pytest.mark.asyncio
async def test_backoff_doubles_up_to_cap():
    sleep = _RecordingSleep()
    with respx.mock() as respx_mock:
        respx_mock.head(URL).mock(return_value=Response(500))
        respx_mock.get(URL).mock(return_value=Response(500))

        with pytest.raises(BackendAsleepError):
            await wake_backend(URL, max_attempts=6, initial_backoff=1.0, max_backoff=4.0, sleep=sleep)

    assert sleep.delays == [1.0, 2.0, 4.0, 4.0, 4.0]


@pytest.mark.asyncio
async def test_overall_deadline_stops_early():
    sleep = _RecordingSleep()
    with respx.mock() as respx_mock:
        respx_mock.head(URL).mock(return_value=Response(503))
        respx_mock.get(URL).mock(return_value=Response(503))

        with pytest.raises(BackendAsleepError) as exc_info:
            await wake_backend(URL, max_attempts=6, deadline_s=1e-6, sleep=sleep)

    assert exc_info.value.attempts == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_uses_provided_client_without_closing_it():
    async with httpx.AsyncClient() as client:
        with respx.mock() as respx_mock:
            respx_mock.head(URL).mock(return_value=Response(200))
            assert await wake_backend(URL, client=client) == 1
        assert not client.is_closed
