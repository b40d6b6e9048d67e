# tests/conftest.py
from __future__ import annotations

from typing import Callable, Mapping, Optional

import pytest
from fastapi.testclient import TestClient

from llm_relay.app import create_app
from llm_relay.core.config import Settings
from tests.fakes import FakeProvider

# Everything load_settings() reads; cleared so a developer's shell / .env can't leak in
RELAY_VARS = (
    "GG_API_KEY",
    "DS_API_KEY",
    "GG_MODEL",
    "DS_MODEL",
    "DS_BASE_URL",
    "REQUEST_TIMEOUT",
    "CLIENT_ORIGIN",
    "HOST",
    "PORT",
    "NODE_ENV",
    "DEBUG",
)


# ---------- Pytest controls ----------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "gemini_live: hits the real Gemini API (needs GG_API_KEY)")
    config.addinivalue_line("markers", "deepseek_live: hits the real DeepSeek API (needs DS_API_KEY)")


# ---------- Fixtures ----------
@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    """
    Unset all relay variables and run from an empty directory.

    setenv before delenv so monkeypatch also removes anything load_dotenv
    writes into os.environ during the test.
    """
    for var in RELAY_VARS:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    def _make(
        providers: Mapping[str, FakeProvider],
        settings: Optional[Settings] = None,
    ) -> TestClient:
        if settings is None:
            settings = Settings(
                gg_api_key="gg-test" if "google" in providers else None,
                ds_api_key="ds-test" if "deepseek" in providers or not providers else None,
            )
        return TestClient(create_app(settings, providers=dict(providers)))

    return _make
