"""
Dossier Document Structure

Typed, immutable representation of the structured resume ("dossier") produced
by the generation backend. Documents are only ever replaced, never mutated:
edit operations build new instances with dataclasses.replace().

The JSON wire shape uses camelCase keys; from_dict()/to_dict() translate
between the two and from_dict() checks the shape of untrusted payloads.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple


class InvalidDocumentStructureError(ValueError):
    """
    Raised when a payload does not match the dossier schema.

    Attributes:
        path: Dotted location of the offending value (e.g., "professionalExperience[2].role")
    """

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


# =============================================================================
# SHAPE CHECKS
# =============================================================================


def _require_mapping(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidDocumentStructureError(f"expected object, got {type(value).__name__}", path)
    return value


def _require_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise InvalidDocumentStructureError(f"expected string, got {type(value).__name__}", path)
    return value


def _optional_str(data: Dict[str, Any], key: str, path: str) -> str:
    """Missing or null scalar strings become empty (validation flags them later)."""
    value = data.get(key)
    if value is None:
        return ""
    return _require_str(value, f"{path}.{key}")


def _require_str_list(value: Any, path: str) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise InvalidDocumentStructureError(f"expected array, got {type(value).__name__}", path)
    return tuple(_require_str(item, f"{path}[{i}]") for i, item in enumerate(value))


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class ContactInfo:
    name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    location: str = ""

    @classmethod
    def from_dict(cls, data: Any, path: str = "contactInfo") -> "ContactInfo":
        data = _require_mapping(data, path)
        return cls(**{f.name: _optional_str(data, f.name, path) for f in fields(cls)})

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ExperienceBlock:
    """
    One role entry.

    Attributes:
        role: Role / title
        company_info: Free-form "Company | Location | Dates" line
        points: Bulleted accomplishments (markdown enabled)
    """

    role: str = ""
    company_info: str = ""
    points: Tuple[str, ...] = ("",)

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "ExperienceBlock":
        data = _require_mapping(data, path)
        return cls(
            role=_optional_str(data, "role", path),
            company_info=_optional_str(data, "companyInfo", path),
            points=_require_str_list(data.get("points", []), f"{path}.points"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "companyInfo": self.company_info, "points": list(self.points)}


@dataclass(frozen=True)
class Education:
    degree: str = ""
    school_and_location: str = ""

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "Education":
        data = _require_mapping(data, path)
        return cls(
            degree=_optional_str(data, "degree", path),
            school_and_location=_optional_str(data, "schoolAndLocation", path),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"degree": self.degree, "schoolAndLocation": self.school_and_location}


@dataclass(frozen=True)
class Licenses:
    title: str = "Licenses & Certifications"
    values: Tuple[str, ...] = ("",)
    status: str = "(Active)"

    @classmethod
    def from_dict(cls, data: Any, path: str = "licenses") -> "Licenses":
        data = _require_mapping(data, path)
        return cls(
            title=_optional_str(data, "title", path),
            values=_require_str_list(data.get("values", []), f"{path}.values"),
            status=_optional_str(data, "status", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "values": list(self.values), "status": self.status}


# JSON key for each theme slot
THEME_KEYS = {
    "primary_color": "primaryColor",
    "accent_color": "accentColor",
    "background_color": "backgroundColor",
    "text_color": "textColor",
    "header_color": "headerColor",
}


@dataclass(frozen=True)
class Theme:
    """Color palette. Unset slots fall back to defaults at render time."""

    primary_color: Optional[str] = None
    accent_color: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    header_color: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "theme") -> "Theme":
        data = _require_mapping(data, path)
        values = {}
        for attr, key in THEME_KEYS.items():
            value = data.get(key)
            values[attr] = None if value is None else _require_str(value, f"{path}.{key}")
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return {
            key: getattr(self, attr)
            for attr, key in THEME_KEYS.items()
            if getattr(self, attr) is not None
        }


@dataclass(frozen=True)
class Document:
    """
    Structured dossier: contact details, narrative fields, experience blocks,
    optional sections and theme.

    foundational_experience, licenses and theme are optional: None means the
    section is absent, which is distinct from an empty section.
    """

    contact_info: ContactInfo = field(default_factory=ContactInfo)
    executive_summary: str = ""
    core_competencies: Tuple[str, ...] = ()
    key_metrics: Tuple[str, ...] = ()
    professional_experience: Tuple[ExperienceBlock, ...] = ()
    foundational_experience: Optional[Tuple[ExperienceBlock, ...]] = None
    education: Tuple[Education, ...] = ()
    licenses: Optional[Licenses] = None
    theme: Optional[Theme] = None

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_dict(cls, data: Any) -> "Document":
        """
        Build a Document from a decoded JSON payload.

        Required: contactInfo (object), executiveSummary (string),
        coreCompetencies (array of strings), professionalExperience (array of
        experience objects). keyMetrics and education default to empty when
        missing; foundationalExperience, licenses and theme stay absent when
        missing or null.

        Raises:
            InvalidDocumentStructureError: If a required field is missing or any
                present field has the wrong type
        """
        data = _require_mapping(data, "")
        for key in ("contactInfo", "executiveSummary", "coreCompetencies", "professionalExperience"):
            if key not in data or data[key] is None:
                raise InvalidDocumentStructureError("required field missing", key)

        foundational = data.get("foundationalExperience")
        licenses = data.get("licenses")
        theme = data.get("theme")

        return cls(
            contact_info=ContactInfo.from_dict(data["contactInfo"]),
            executive_summary=_require_str(data["executiveSummary"], "executiveSummary"),
            core_competencies=_require_str_list(data["coreCompetencies"], "coreCompetencies"),
            key_metrics=_require_str_list(data.get("keyMetrics") or [], "keyMetrics"),
            professional_experience=_experience_list(
                data["professionalExperience"], "professionalExperience"
            ),
            foundational_experience=(
                None
                if foundational is None
                else _experience_list(foundational, "foundationalExperience")
            ),
            education=tuple(
                Education.from_dict(item, f"education[{i}]")
                for i, item in enumerate(_require_list(data.get("education") or [], "education"))
            ),
            licenses=None if licenses is None else Licenses.from_dict(licenses),
            theme=None if theme is None else Theme.from_dict(theme),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape, omitting absent optional sections."""
        out: Dict[str, Any] = {
            "contactInfo": self.contact_info.to_dict(),
            "executiveSummary": self.executive_summary,
            "coreCompetencies": list(self.core_competencies),
            "keyMetrics": list(self.key_metrics),
            "professionalExperience": [b.to_dict() for b in self.professional_experience],
        }
        if self.foundational_experience is not None:
            out["foundationalExperience"] = [b.to_dict() for b in self.foundational_experience]
        out["education"] = [e.to_dict() for e in self.education]
        if self.licenses is not None:
            out["licenses"] = self.licenses.to_dict()
        if self.theme is not None:
            out["theme"] = self.theme.to_dict()
        return out


def _require_list(value: Any, path: str) -> List[Any]:
    if not isinstance(value, list):
        raise InvalidDocumentStructureError(f"expected array, got {type(value).__name__}", path)
    return value


def _experience_list(value: Any, path: str) -> Tuple[ExperienceBlock, ...]:
    return tuple(
        ExperienceBlock.from_dict(item, f"{path}[{i}]")
        for i, item in enumerate(_require_list(value, path))
    )
