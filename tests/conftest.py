"""Shared fixtures."""

import pytest

from helpers import build_pdf
from splitpack.config import get_settings


@pytest.fixture
def small_pdf() -> bytes:
    """Ten pages of about 10 KB each, no shared resources."""
    return build_pdf([10_000] * 10)


@pytest.fixture
def shared_font_pdf() -> bytes:
    """Twelve 2 KB pages all using one 10 KB embedded font."""
    return build_pdf([2_000] * 12, shared_font_bytes=10_000)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Settings read from an empty environment in an empty directory."""
    for name in ("SPLITPACK_DEFAULT_MAX_MB", "SPLITPACK_OUTPUT_DIR", "SPLITPACK_LOG_LEVEL"):
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
