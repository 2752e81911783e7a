"""
Edit operations over dossier documents.

Every operation takes the current Document and returns a new one; nothing is
mutated in place. Removals re-pack list positions, and because validation is
recomputed from the returned document, no error can outlive the item it
belonged to.

Indices must be in range: an out-of-range index is a caller bug and raises
IndexError (negative indices included, they are never treated as
"from the end").
"""

from dataclasses import replace
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple, TypeVar, Union

from dossier.contexts.editing.document import (
    THEME_KEYS,
    ContactInfo,
    Document,
    ExperienceBlock,
    Licenses,
    Theme,
)
from dossier.utils.config import get_setting

T = TypeVar("T")

Edit = Callable[[Document], Document]

CONTACT_FIELDS = tuple(ContactInfo.__dataclass_fields__)
LICENSE_FIELDS = ("title", "values", "status")
EXPERIENCE_FIELDS = ("role", "company_info")


class ExperienceSection(str, Enum):
    PROFESSIONAL = "professional"
    FOUNDATIONAL = "foundational"

    @property
    def attribute(self) -> str:
        return f"{self.value}_experience"


# =============================================================================
# TUPLE HELPERS
# =============================================================================


def _check_index(items: Sequence, index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"index {index} out of range for {len(items)} items")


def _set_at(items: Tuple[T, ...], index: int, value: T) -> Tuple[T, ...]:
    _check_index(items, index)
    return items[:index] + (value,) + items[index + 1 :]


def _remove_at(items: Tuple[T, ...], index: int) -> Tuple[T, ...]:
    _check_index(items, index)
    return items[:index] + items[index + 1 :]


def _blocks(document: Document, section: ExperienceSection) -> Tuple[ExperienceBlock, ...]:
    return getattr(document, ExperienceSection(section).attribute) or ()


def _with_blocks(
    document: Document, section: ExperienceSection, blocks: Tuple[ExperienceBlock, ...]
) -> Document:
    return replace(document, **{ExperienceSection(section).attribute: blocks})


# =============================================================================
# SCALAR FIELDS
# =============================================================================


def set_contact_field(document: Document, name: str, value: str) -> Document:
    if name not in CONTACT_FIELDS:
        raise KeyError(f"Unknown contact field: {name}")
    return replace(document, contact_info=replace(document.contact_info, **{name: value}))


def set_executive_summary(document: Document, value: str) -> Document:
    return replace(document, executive_summary=value)


def parse_license_values(text: str) -> Tuple[str, ...]:
    """Split the comma-separated license entry field ("24, 7, 63")."""
    return tuple(v.strip() for v in text.split(","))


def set_license_field(document: Document, name: str, value: Union[str, Sequence[str]]) -> Document:
    """
    Set a field of the licenses section.

    "values" accepts either a sequence or the comma-separated text shown in
    the editor. The section must be present (see add_licenses).
    """
    if name not in LICENSE_FIELDS:
        raise KeyError(f"Unknown licenses field: {name}")
    if document.licenses is None:
        raise ValueError("Licenses section is not present")
    if name == "values":
        value = parse_license_values(value) if isinstance(value, str) else tuple(value)
    return replace(document, licenses=replace(document.licenses, **{name: value}))


def set_theme_color(document: Document, name: str, color: str) -> Document:
    """Set one theme slot; an absent theme is first filled from the defaults."""
    if name not in THEME_KEYS:
        raise KeyError(f"Unknown theme field: {name}")
    theme = document.theme or default_theme()
    return replace(document, theme=replace(theme, **{name: color}))


def default_theme() -> Theme:
    defaults = get_setting("theme.defaults")
    return Theme(**{name: defaults[name] for name in THEME_KEYS})


# =============================================================================
# CORE COMPETENCIES
# =============================================================================


def set_competency(document: Document, index: int, value: str) -> Document:
    return replace(
        document, core_competencies=_set_at(document.core_competencies, index, value)
    )


def add_competency(document: Document) -> Document:
    return replace(document, core_competencies=document.core_competencies + ("",))


def remove_competency(document: Document, index: int) -> Document:
    return replace(document, core_competencies=_remove_at(document.core_competencies, index))


# =============================================================================
# EXPERIENCE BLOCKS
# =============================================================================


def add_experience(document: Document, section: ExperienceSection) -> Document:
    """Append a blank block (one empty point slot); creates an absent section."""
    return _with_blocks(document, section, _blocks(document, section) + (ExperienceBlock(),))


def remove_experience(document: Document, section: ExperienceSection, index: int) -> Document:
    return _with_blocks(document, section, _remove_at(_blocks(document, section), index))


def set_experience_field(
    document: Document, section: ExperienceSection, index: int, name: str, value: str
) -> Document:
    if name not in EXPERIENCE_FIELDS:
        raise KeyError(f"Unknown experience field: {name}")
    blocks = _blocks(document, section)
    _check_index(blocks, index)
    return _with_blocks(
        document, section, _set_at(blocks, index, replace(blocks[index], **{name: value}))
    )


def _update_points(
    document: Document,
    section: ExperienceSection,
    index: int,
    update: Callable[[Tuple[str, ...]], Tuple[str, ...]],
) -> Document:
    blocks = _blocks(document, section)
    _check_index(blocks, index)
    block = blocks[index]
    return _with_blocks(
        document, section, _set_at(blocks, index, replace(block, points=update(block.points)))
    )


def add_point(document: Document, section: ExperienceSection, index: int) -> Document:
    return _update_points(document, section, index, lambda points: points + ("",))


def remove_point(
    document: Document, section: ExperienceSection, index: int, point_index: int
) -> Document:
    return _update_points(document, section, index, lambda points: _remove_at(points, point_index))


def set_point(
    document: Document, section: ExperienceSection, index: int, point_index: int, value: str
) -> Document:
    return _update_points(
        document, section, index, lambda points: _set_at(points, point_index, value)
    )


# =============================================================================
# OPTIONAL SECTIONS
# =============================================================================


def add_licenses(document: Document) -> Document:
    """Install the default licenses block; no-op when already present."""
    if document.licenses is not None:
        return document
    return replace(document, licenses=Licenses())


def remove_licenses(document: Document) -> Document:
    return replace(document, licenses=None)


def apply_edits(document: Document, edits: Sequence[Edit]) -> Document:
    """Apply edits in order, last write wins per field."""
    for edit in edits:
        document = edit(document)
    return document


def optional_blocks(document: Document, section: ExperienceSection) -> Optional[Tuple[ExperienceBlock, ...]]:
    """Raw section value: None when the section is absent."""
    return getattr(document, ExperienceSection(section).attribute)
