"""
Inline spellcheck for editable text fields.

The overlay is a pure function of the field value: find_misspellings() turns
(text, dictionary) into spans, render_overlay() turns spans into highlight
markup, and apply_suggestion() produces the new field value when a user picks
a suggestion. Nothing here holds state of its own, so the highlight layer can
never drift from the value it decorates.

Without a dictionary (not loaded yet, or failed to load) every function
degrades to plain, unhighlighted text.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Protocol

from loguru import logger
from markupsafe import escape

from dossier.utils.config import get_setting

# Separators kept as their own tokens when splitting
_DELIMITERS = re.compile(r'([,.\s!;?()"]+)')
# Numeric literals as a browser's Number() reads them: "inf", "nan" and "1_000" are words
_NUMBER = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
)


class SpellDictionary(Protocol):
    def check(self, word: str) -> bool: ...

    def suggest(self, word: str, limit: int) -> List[str]: ...


@dataclass(frozen=True)
class Span:
    """
    A run of text within a field value.

    Attributes:
        text: The run's text
        start: Character offset of the run in the field value (anchors the popover)
        misspelled: True for an individually addressable misspelled word
    """

    text: str
    start: int
    misspelled: bool = False


@dataclass(frozen=True)
class SuggestionPopover:
    """Suggestion surface for one activated misspelled word."""

    word: str
    anchor: int
    suggestions: List[str]


def tokenize(text: str) -> List[str]:
    """Split on whitespace/punctuation, keeping the separators; "".join() restores text."""
    return [token for token in _DELIMITERS.split(text) if token]


def _is_number(token: str) -> bool:
    return bool(_NUMBER.fullmatch(token))


def is_checkable(token: str) -> bool:
    return not _DELIMITERS.fullmatch(token) and not _is_number(token)


def find_misspellings(text: str, dictionary: Optional[SpellDictionary]) -> List[Span]:
    """
    Split a field value into plain and misspelled spans.

    Adjacent correct tokens and separators are merged into one plain span.
    """
    if dictionary is None or not text:
        return [Span(text, 0)] if text else []

    spans: List[Span] = []
    offset = 0
    plain_start, plain = 0, ""
    for token in tokenize(text):
        if is_checkable(token) and not dictionary.check(token):
            if plain:
                spans.append(Span(plain, plain_start))
            spans.append(Span(token, offset, misspelled=True))
            plain = ""
            plain_start = offset + len(token)
        else:
            plain += token
        offset += len(token)
    if plain:
        spans.append(Span(plain, plain_start))
    return spans


def misspelled_words(text: str, dictionary: Optional[SpellDictionary]) -> List[str]:
    return [span.text for span in find_misspellings(text, dictionary) if span.misspelled]


def render_overlay(spans: List[Span], multiline: bool = False) -> str:
    """
    Render spans as highlight-layer markup.

    Misspelled words become clickable <span class="spellcheck-error">
    elements carrying the word and its offset; every other character renders
    as plain escaped text. An empty field renders a non-breaking space so the
    layer keeps its height.
    """
    parts = []
    for span in spans:
        text = str(escape(span.text))
        if span.misspelled:
            parts.append(
                f'<span class="spellcheck-error" data-word="{text}" data-offset="{span.start}">{text}</span>'
            )
        else:
            parts.append(text)
    html = "".join(parts)
    if multiline:
        html = html.replace("\n", "<br>")
    return html or "&nbsp;"


def suggest(dictionary: Optional[SpellDictionary], word: str, limit: int = None) -> List[str]:
    if dictionary is None:
        return []
    if limit is None:
        limit = get_setting("spellcheck.max_suggestions")
    return list(dictionary.suggest(word, limit))[:limit]


def activate(
    spans: List[Span], index: int, dictionary: Optional[SpellDictionary]
) -> Optional[SuggestionPopover]:
    """Open the suggestion surface for spans[index]; None if it is not a misspelling."""
    span = spans[index]
    if not span.misspelled or dictionary is None:
        return None
    return SuggestionPopover(word=span.text, anchor=span.start, suggestions=suggest(dictionary, span.text))


def apply_suggestion(value: str, word: str, suggestion: str) -> str:
    """
    Replace the first whole-word occurrence of `word` in the live value.

    Occurrences inside longer words are left alone. Returns the value
    unchanged if the word no longer appears.
    """
    pattern = re.compile(rf"(?<!\w){re.escape(word)}(?!\w)")
    return pattern.sub(lambda _: suggestion, value, count=1)


# =============================================================================
# DICTIONARY
# =============================================================================


class PySpellDictionary:
    """SpellDictionary backed by pyspellchecker's word-frequency lists."""

    def __init__(self, language: str = None):
        from spellchecker import SpellChecker

        self._checker = SpellChecker(language=language or get_setting("spellcheck.language"))

    def check(self, word: str) -> bool:
        return bool(self._checker.known([word]))

    def suggest(self, word: str, limit: int) -> List[str]:
        candidates = self._checker.candidates(word) or set()
        ranked = sorted(candidates, key=lambda c: (-self._checker.word_usage_frequency(c), c))
        if word[:1].isupper():
            ranked = [c[:1].upper() + c[1:] for c in ranked]
        return [c for c in ranked if c != word][:limit]


def load_dictionary(language: str = None) -> Optional[SpellDictionary]:
    """
    Load the spell dictionary, or None if it cannot be loaded.

    Spellcheck is an enhancement: callers render plain text when this
    returns None.
    """
    try:
        return PySpellDictionary(language)
    except Exception as e:
        logger.error(f"Failed to load spellcheck dictionary: {e}")
        return None
