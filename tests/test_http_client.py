import pytest

from countryscope.config import Settings
from countryscope.http_client import SharedHttpClient, build_http_client


def test_build_http_client_applies_settings() -> None:
    settings = Settings(http_timeout=3.5, http_user_agent="countryscope-test/1.0")
    client = build_http_client(settings)

    assert client.timeout.read == 3.5
    assert client.headers["User-Agent"] == "countryscope-test/1.0"
    assert client.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_shared_client_is_reused_until_closed() -> None:
    shared = SharedHttpClient(settings_factory=Settings)
    first = await shared.acquire()
    try:
        assert await shared.acquire() is first
    finally:
        await shared.close()

    assert first.is_closed
    assert not shared.active


@pytest.mark.asyncio
async def test_shared_client_rebuilds_after_external_close() -> None:
    shared = SharedHttpClient(settings_factory=Settings)
    first = await shared.acquire()
    await first.aclose()

    second = await shared.acquire()
    try:
        assert second is not first
        assert not second.is_closed
    finally:
        await shared.close()
