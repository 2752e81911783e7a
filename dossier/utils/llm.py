"""
LLM provider abstraction for streamed, multi-part generation.

Provides a provider-agnostic interface that accepts an ordered list of prompt
parts (text and binary attachments) and yields the model's text fragments in
the order the backend emits them. Opening the stream is retried with
exponential backoff on the provider's transient error; fragments are never
replayed once delivered.
"""

import asyncio
import base64
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from dotenv import load_dotenv
from loguru import logger

from dossier.utils.config import get_setting

load_dotenv()

# Retry configuration
MAX_RETRIES = 5
BASE_DELAY = 1.0

CREDENTIAL_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

T = TypeVar("T")


class MissingCredentialError(ValueError):
    """Raised when the backend access credential is not configured."""


async def _retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    retryable_exception: type[Exception],
    error_message: str,
) -> T:
    """
    Await operation with exponential backoff retry on a specific exception.

    Args:
        operation: Coroutine factory that performs the API request
        retryable_exception: Exception type that triggers retry
        error_message: Message prefix for retry logging (e.g., "API overloaded")
    """
    for attempt in range(MAX_RETRIES):
        try:
            return await operation()
        except retryable_exception:
            if attempt == MAX_RETRIES - 1:
                raise
            delay = BASE_DELAY * (2**attempt)
            logger.warning(
                f"{error_message}, retrying in {delay:.1f}s... (attempt {attempt + 1}/{MAX_RETRIES})"
            )
            await asyncio.sleep(delay)


# --- Prompt Parts ---


@dataclass(frozen=True)
class TextPart:
    """Plain text prompt part."""

    text: str


@dataclass(frozen=True)
class BinaryPart:
    """Self-contained binary prompt part (an uploaded attachment)."""

    mime_type: str
    data: bytes
    filename: str = ""

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


PromptPart = Union[TextPart, BinaryPart]


def _is_text_mime(mime_type: str) -> bool:
    return mime_type.startswith("text/") or mime_type in ("application/json", "application/xml")


def _decoded_attachment(part: BinaryPart) -> str:
    header = f"Attachment: {part.filename}\n" if part.filename else "Attachment:\n"
    return header + part.data.decode("utf-8", errors="replace")


# --- LLM Provider Classes ---


class LLMProvider(ABC):
    """
    Abstract base for streaming LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "anthropic", "openai")
    - Set self._retryable_exception to the exception type that triggers retry
    - Set self._retry_message for logging during retries
    - Implement _open_stream() returning an async iterator of text fragments
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str
    _retryable_exception: type[Exception]
    _retry_message: str

    name: str
    model: str

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @abstractmethod
    async def _open_stream(self, parts: Sequence[PromptPart]) -> AsyncIterator[str]:
        """Issue the request (no retries) and return an iterator of text fragments."""

    async def stream(self, parts: Sequence[PromptPart]) -> AsyncIterator[str]:
        """
        Stream the model's response as text fragments, in emission order.

        Transport errors raised mid-stream propagate unchanged.
        """
        fragments = await _retry_with_backoff(
            lambda: self._open_stream(parts),
            self._retryable_exception,
            self._retry_message,
        )
        async for fragment in fragments:
            if fragment:
                yield fragment


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider with exponential backoff retry."""

    _provider_prefix = "anthropic"
    _retry_message = "API overloaded"

    def __init__(self, model: str = None):
        # Lazy import - anthropic SDK is heavy, only load if this provider is used
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        api_key = os.getenv(CREDENTIAL_ENV_VARS["anthropic"])
        if not api_key:
            raise MissingCredentialError("ANTHROPIC_API_KEY environment variable not set")

        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self._retryable_exception = anthropic.OverloadedError
        self.update_model(model or get_setting("llm.models.anthropic"))

    @staticmethod
    def _content_block(part: PromptPart) -> Dict[str, Any]:
        if isinstance(part, TextPart):
            return {"type": "text", "text": part.text}
        if part.mime_type.startswith("image/"):
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": part.mime_type, "data": part.base64_data},
            }
        if part.mime_type == "application/pdf":
            return {
                "type": "document",
                "source": {"type": "base64", "media_type": part.mime_type, "data": part.base64_data},
            }
        return {"type": "text", "text": _decoded_attachment(part)}

    async def _open_stream(self, parts: Sequence[PromptPart]) -> AsyncIterator[str]:
        events = await self.client.messages.create(
            model=self.model,
            max_tokens=get_setting("llm.max_tokens"),
            temperature=get_setting("llm.temperature"),
            messages=[{"role": "user", "content": [self._content_block(p) for p in parts]}],
            stream=True,
        )
        return self._text_deltas(events)

    @staticmethod
    async def _text_deltas(events) -> AsyncIterator[str]:
        async for event in events:
            if event.type == "content_block_delta" and event.delta.type == "text_delta":
                yield event.delta.text


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider with exponential backoff retry."""

    _provider_prefix = "openai"
    _retry_message = "Rate limit hit"

    def __init__(self, model: str = None):
        # Lazy import - openai SDK is heavy, only load if this provider is used
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        api_key = os.getenv(CREDENTIAL_ENV_VARS["openai"])
        if not api_key:
            raise MissingCredentialError("OPENAI_API_KEY environment variable not set")

        self.client = openai.AsyncOpenAI(api_key=api_key)
        self._retryable_exception = openai.RateLimitError
        self.update_model(model or get_setting("llm.models.openai"))

    @staticmethod
    def _content_item(part: PromptPart) -> Dict[str, Any]:
        if isinstance(part, TextPart):
            return {"type": "text", "text": part.text}
        if part.mime_type.startswith("image/"):
            return {"type": "image_url", "image_url": {"url": part.data_url}}
        if _is_text_mime(part.mime_type):
            return {"type": "text", "text": _decoded_attachment(part)}
        return {
            "type": "file",
            "file": {"filename": part.filename or "attachment", "file_data": part.data_url},
        }

    async def _open_stream(self, parts: Sequence[PromptPart]) -> AsyncIterator[str]:
        chunks = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=get_setting("llm.max_tokens"),
            temperature=get_setting("llm.temperature"),
            messages=[{"role": "user", "content": [self._content_item(p) for p in parts]}],
            stream=True,
        )
        return self._text_deltas(chunks)

    @staticmethod
    async def _text_deltas(chunks) -> AsyncIterator[str]:
        async for chunk in chunks:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content


# --- Provider Factory ---


def _resolve_provider_name(provider_name: Optional[str]) -> str:
    if provider_name is None:
        provider_name = get_setting("llm.provider")
    return provider_name.lower()


def credential_available(provider_name: str = None) -> bool:
    """Check whether the credential for the provider is configured, without building a client."""
    env_var = CREDENTIAL_ENV_VARS.get(_resolve_provider_name(provider_name))
    return bool(env_var and os.getenv(env_var))


def get_provider(provider_name: str = None, model: str = None) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "anthropic" or "openai" (default: llm.provider setting / LLM_PROVIDER)
        model: Model name (default: LLM_MODEL env var, then provider-specific default)

    Returns:
        LLMProvider instance

    Raises:
        MissingCredentialError: If the provider's API key is not set
        ValueError: If the provider name is unknown
    """
    provider_name = _resolve_provider_name(provider_name)
    model = model or os.getenv("LLM_MODEL")

    if provider_name == "anthropic":
        return AnthropicProvider(model=model)
    elif provider_name == "openai":
        return OpenAIProvider(model=model)
    else:
        raise ValueError(f"Unknown provider: {provider_name}. Use 'anthropic' or 'openai'")


def describe_parts(parts: List[PromptPart]) -> List[str]:
    """One-line summaries of prompt parts for logging (never the raw bytes)."""
    summaries = []
    for part in parts:
        if isinstance(part, TextPart):
            summaries.append(f"text ({len(part.text)} chars)")
        else:
            summaries.append(f"{part.mime_type} ({len(part.data)} bytes) {part.filename}".rstrip())
    return summaries
