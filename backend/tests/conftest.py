import asyncio
import inspect
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from moneymap.config import AppSettings, get_settings  # noqa: E402

# Provider settings that stay unset unless a test supplies them.
_PROVIDER_ENV = (
    "MCP_BASE_URL",
    "MCP_SESSION_ID",
    "FINNHUB_API_KEY",
    "ALPHAVANTAGE_API_KEY",
    "OPENAI_API_KEY",
    "TELEMETRY_ENABLED",
)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            funcargs = pyfuncitem.funcargs
            testargs = {arg: funcargs[arg] for arg in pyfuncitem._fixtureinfo.argnames}
            loop.run_until_complete(test_function(**testargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test against default settings with no provider keys."""

    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings_factory():
    """Build ``AppSettings`` from keyword overrides without reading ``.env``."""

    def build(**overrides) -> AppSettings:
        return AppSettings(_env_file=None, **overrides)

    return build
