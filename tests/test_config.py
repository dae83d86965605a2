"""
Tests for environment-driven settings.
"""

from __future__ import annotations

import pytest

from blockpaste.config import Settings, _get_bool, _get_int
from blockpaste.envelope import PasteFormat


def test_defaults():
    s = Settings()
    assert s.MAX_PASTE_SIZE == 1048576
    assert s.STORE_GET_TIMEOUT_MS == 250
    assert s.store_get_timeout == 0.25
    assert isinstance(s.PASTE_FORMAT, PasteFormat)


def test_get_int(monkeypatch):
    monkeypatch.setenv("BLOCKPASTE_TEST_INT", "42")
    assert _get_int("BLOCKPASTE_TEST_INT", 7) == 42
    monkeypatch.setenv("BLOCKPASTE_TEST_INT", "")
    assert _get_int("BLOCKPASTE_TEST_INT", 7) == 7
    monkeypatch.delenv("BLOCKPASTE_TEST_INT")
    assert _get_int("BLOCKPASTE_TEST_INT", 7) == 7


def test_get_int_rejects_garbage(monkeypatch):
    monkeypatch.setenv("BLOCKPASTE_TEST_INT", "lots")
    with pytest.raises(ValueError, match="BLOCKPASTE_TEST_INT"):
        _get_int("BLOCKPASTE_TEST_INT", 7)


@pytest.mark.parametrize(("raw", "expected"), [("true", True), ("1", True), ("YES", True), ("no", False)])
def test_get_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("BLOCKPASTE_TEST_BOOL", raw)
    assert _get_bool("BLOCKPASTE_TEST_BOOL", "False") is expected


def test_timeout_follows_instance_override():
    s = Settings()
    s.STORE_GET_TIMEOUT_MS = 100
    assert s.store_get_timeout == 0.1
