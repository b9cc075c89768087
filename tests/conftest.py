"""Shared pytest fixtures."""

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the caller's PRT_* variables and .env file out of every test."""
    for name in list(os.environ):
        if name.startswith("PRT_") or name == "GEMINI_API_KEY":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
