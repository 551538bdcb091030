"""Shared pytest fixtures for slashbot tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in list(os.environ):
        if key.startswith("DISCORD_BOT_"):
            monkeypatch.delenv(key)
    env_path = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(env_path))
    return env_path


@pytest.fixture()
def env_path(_isolate_env: Path) -> Path:
    return _isolate_env

