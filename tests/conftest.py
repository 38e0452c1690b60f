from pathlib import Path
from unittest.mock import AsyncMock, Mock

import platformdirs
import pytest

_ASYNC_NETWORK_BLOCK_MSG = (
    "Async network access is blocked during tests. Mock aiohttp.ClientSession."
)


async def _async_block_network(*_args, **_kwargs):
    """
    Prevent async network calls during tests by raising a RuntimeError.

    Raises:
        RuntimeError: `_ASYNC_NETWORK_BLOCK_MSG` suggesting to mock `aiohttp.ClientSession`.
    """
    raise RuntimeError(_ASYNC_NETWORK_BLOCK_MSG)


def _sync_block_network(*_args, **_kwargs):
    raise RuntimeError(_ASYNC_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """
    Register the markers used across the suite.

    Parameters:
        config: pytest.Config
    """
    for marker in (
        "asyncio: mark test as an asyncio test (auto-detected)",
        "unit: fast isolated tests",
        "core: release resolution core",
        "infrastructure: cache, config and logging plumbing",
        "user_interface: command-line behaviour",
    ):
        config.addinivalue_line("markers", marker)


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and the config module at a temporary directory layout.

    Also clears BROWSERFETCH_* environment variables so the host's settings
    never leak into a test.
    """
    base = tmp_path_factory.mktemp("browserfetch")
    cache_dir = base / "cache"
    config_dir = base / "config"
    log_dir = base / "log"
    for path in (cache_dir, config_dir, log_dir):
        path.mkdir(parents=True, exist_ok=True)

    monkeypatch.delenv("BROWSERFETCH_MODE", raising=False)
    monkeypatch.delenv("BROWSERFETCH_LOG_LEVEL", raising=False)

    monkeypatch.setattr(
        platformdirs, "user_cache_dir", lambda *_args, **_kwargs: str(cache_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )

    import browserfetch.config as config

    monkeypatch.setattr(config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(
        config, "CONFIG_FILE", str(Path(config_dir) / "browserfetch.yaml")
    )


def pytest_runtest_setup():
    """
    Prevent real network requests during tests by replacing aiohttp entry points with blocking callables.
    """
    import aiohttp

    aiohttp.request = _sync_block_network
    aiohttp.ClientSession._request = _async_block_network  # type: ignore[assignment]


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def config_file():
    """Return the isolated configuration file path."""
    import browserfetch.config as config

    return Path(config.CONFIG_FILE)


@pytest.fixture
def mock_response():
    """
    Build a mock aiohttp response usable as `async with session.get(...)`.

    Returns:
        Callable[..., AsyncMock]: Factory taking `status` and `json_data` or `json_error`.
    """

    def _make(status=200, json_data=None, json_error=None):
        response = AsyncMock()
        response.status = status
        response.headers = {}
        if json_error is not None:
            response.json = AsyncMock(side_effect=json_error)
        else:
            response.json = AsyncMock(return_value=json_data)
        response.__aenter__ = AsyncMock(return_value=response)
        response.__aexit__ = AsyncMock(return_value=False)
        return response

    return _make


@pytest.fixture
def mock_session():
    """Provide a mock session whose `get` returns whatever the test configures."""
    session = Mock()
    session.closed = False
    session.close = AsyncMock()
    return session
