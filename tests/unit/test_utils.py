"""Unit tests for settings and LLM helper utilities."""

import pytest

from dossier.utils.config import get_setting, load_settings
from dossier.utils.llm import BinaryPart, TextPart, credential_available, describe_parts, get_provider


@pytest.mark.unit
def test_settings_load():
    """Test that packaged defaults load as plain nested dicts."""
    settings = load_settings()
    assert isinstance(settings["export"], dict)
    assert get_setting("export.page_width_in") == 8.5
    assert get_setting("narrative.expanded_sections") == 2


@pytest.mark.unit
def test_missing_setting():
    """Test that unknown keys raise KeyError."""
    with pytest.raises(KeyError):
        get_setting("export.no_such_key")


@pytest.mark.unit
def test_credential_available(monkeypatch):
    """Test credential detection per provider."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    assert credential_available("openai")
    assert credential_available("OpenAI")
    assert not credential_available("anthropic")
    assert not credential_available("unknown")


@pytest.mark.unit
def test_unknown_provider():
    """Test that an unknown provider name is rejected."""
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("mystery")


@pytest.mark.unit
def test_describe_parts_never_includes_bytes():
    """Test that log summaries describe parts without their content."""
    summaries = describe_parts([TextPart("hello"), BinaryPart("application/pdf", b"%PDF-secret", "cv.pdf")])
    assert summaries == ["text (5 chars)", "application/pdf (11 bytes) cv.pdf"]


@pytest.mark.unit
def test_binary_part_data_url():
    """Test base64 encoding of attachment parts."""
    part = BinaryPart("text/plain", b"hi")
    assert part.data_url == "data:text/plain;base64,aGk="


@pytest.mark.unit
def test_anthropic_provider_retries_on_overload(monkeypatch):
    """Test that the Anthropic provider retries on overload, matching its retry log message."""
    anthropic = pytest.importorskip("anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

    provider = get_provider("anthropic")

    assert provider._retryable_exception is anthropic.OverloadedError
    assert provider._retry_message == "API overloaded"
