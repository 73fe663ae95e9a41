"""Tests for URL checks."""

import pytest

from entity_checker.urls import dirty_url_reason, is_dirty_url


@pytest.mark.parametrize(
    "url",
    ["http://x/e/42", "https://example.org/etypes/person", "urn:isbn:0451450523", "file:///tmp/schema"],
)
def test_clean_urls(url: str) -> None:
    """Test well formed URLs."""
    assert not is_dirty_url(url)


@pytest.mark.parametrize("url", [None, "", "   ", "null", "NULL", "none", "not a url", "example", "http://x/ e", 42])
def test_dirty_urls(url: object) -> None:
    """Test empty, placeholder and malformed URLs."""
    assert is_dirty_url(url)


def test_dirty_url_reason() -> None:
    """Test failure explanations."""
    assert dirty_url_reason(None) == "URL is missing"
    assert dirty_url_reason("") == "URL is empty"
    assert "placeholder" in dirty_url_reason("null")
    assert "malformed" in dirty_url_reason("example")
