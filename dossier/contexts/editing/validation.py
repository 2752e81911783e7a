"""
Validation engine for dossier documents.

validate_document() is a pure function of the Document: the report is rebuilt
from scratch on every call, so a corrected value can never keep a stale error
and list errors always line up with current list positions.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from dossier.contexts.editing.document import ContactInfo, Document, ExperienceBlock, Licenses

# anything@anything.anything, no whitespace anywhere
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")

MESSAGES = {
    "name": "Name is required.",
    "email": "Email is required.",
    "email_format": "Invalid email format.",
    "phone": "Phone number is required.",
    "location": "Location is required.",
    "linkedin": "LinkedIn URL is required.",
    "linkedin_host": "Must be a valid LinkedIn URL.",
    "linkedin_format": "Invalid URL format.",
    "executive_summary": "Executive Summary is required.",
    "role": "Role is required.",
    "company_info": "Company info is required.",
    "point": "Point cannot be empty.",
    "competencies": "At least one competency is required.",
    "competency": "Competency cannot be empty.",
    "license_title": "Title is required.",
    "license_values": "At least one license is required.",
    "license_status": "Status is required.",
}


@dataclass(frozen=True)
class ExperienceErrors:
    """
    Errors for one experience block.

    points is a parallel array ("" for valid points), present only when at
    least one point is empty.
    """

    role: Optional[str] = None
    company_info: Optional[str] = None
    points: Optional[Tuple[str, ...]] = None

    def point_error(self, index: int) -> Optional[str]:
        if self.points is None or index >= len(self.points):
            return None
        return self.points[index] or None


@dataclass(frozen=True)
class LicenseErrors:
    title: Optional[str] = None
    values: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class ValidationReport:
    """
    Field-shaped error state derived from a Document.

    Attributes:
        contact_info: Field name -> message, only for invalid contact fields
        executive_summary: Message or None
        core_competencies: List-level message ("at least one required")
        competency_items: Parallel per-item messages ("" for valid), or None if all valid
        professional_experience: Parallel per-block errors (None for valid blocks), or
            None if every block is valid
        foundational_experience: Same shape as professional_experience
        licenses: LicenseErrors or None
    """

    contact_info: Dict[str, str] = field(default_factory=dict)
    executive_summary: Optional[str] = None
    core_competencies: Optional[str] = None
    competency_items: Optional[Tuple[str, ...]] = None
    professional_experience: Optional[Tuple[Optional[ExperienceErrors], ...]] = None
    foundational_experience: Optional[Tuple[Optional[ExperienceErrors], ...]] = None
    licenses: Optional[LicenseErrors] = None

    @property
    def has_errors(self) -> bool:
        """True when any field is invalid; export and print are blocked while set."""
        return bool(
            self.contact_info
            or self.executive_summary
            or self.core_competencies
            or (self.competency_items and any(self.competency_items))
            or (self.professional_experience and any(self.professional_experience))
            or (self.foundational_experience and any(self.foundational_experience))
            or self.licenses
        )

    def competency_error(self, index: int) -> Optional[str]:
        if self.competency_items is None or index >= len(self.competency_items):
            return None
        return self.competency_items[index] or None

    def experience_errors(self, section: str, index: int) -> ExperienceErrors:
        """Errors for block `index` of "professional" or "foundational" experience."""
        errors = (
            self.professional_experience
            if section == "professional"
            else self.foundational_experience
        )
        if errors is None or index >= len(errors) or errors[index] is None:
            return ExperienceErrors()
        return errors[index]

    def messages(self) -> list[str]:
        """Flat "location: message" list, for CLI output and banners."""
        out = [f"contactInfo.{k}: {v}" for k, v in self.contact_info.items()]
        if self.executive_summary:
            out.append(f"executiveSummary: {self.executive_summary}")
        if self.core_competencies:
            out.append(f"coreCompetencies: {self.core_competencies}")
        for i, msg in enumerate(self.competency_items or ()):
            if msg:
                out.append(f"coreCompetencies[{i}]: {msg}")
        for label, errors in (
            ("professionalExperience", self.professional_experience),
            ("foundationalExperience", self.foundational_experience),
        ):
            for i, block in enumerate(errors or ()):
                if block is None:
                    continue
                if block.role:
                    out.append(f"{label}[{i}].role: {block.role}")
                if block.company_info:
                    out.append(f"{label}[{i}].companyInfo: {block.company_info}")
                for j, msg in enumerate(block.points or ()):
                    if msg:
                        out.append(f"{label}[{i}].points[{j}]: {msg}")
        if self.licenses:
            for name in ("title", "values", "status"):
                msg = getattr(self.licenses, name)
                if msg:
                    out.append(f"licenses.{name}: {msg}")
        return out


# =============================================================================
# FIELD VALIDATORS
# =============================================================================


def validate_email(value: str) -> Optional[str]:
    if not value.strip():
        return MESSAGES["email"]
    if not EMAIL_PATTERN.fullmatch(value):
        return MESSAGES["email_format"]
    return None


def validate_linkedin(value: str) -> Optional[str]:
    """
    Require an absolute URL whose host contains "linkedin.com".

    Only the hostname is checked, not the path shape.
    """
    if not value.strip():
        return MESSAGES["linkedin"]
    candidate = value.strip()
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname or ""
    except ValueError:
        return MESSAGES["linkedin_format"]
    if not parts.scheme or not _URL_SCHEME.match(parts.scheme):
        return MESSAGES["linkedin_format"]
    if "linkedin.com" not in hostname:
        return MESSAGES["linkedin_host"]
    return None


def validate_contact_info(contact: ContactInfo) -> Dict[str, str]:
    errors = {}
    if not contact.name.strip():
        errors["name"] = MESSAGES["name"]
    email_error = validate_email(contact.email)
    if email_error:
        errors["email"] = email_error
    if not contact.phone.strip():
        errors["phone"] = MESSAGES["phone"]
    if not contact.location.strip():
        errors["location"] = MESSAGES["location"]
    linkedin_error = validate_linkedin(contact.linkedin)
    if linkedin_error:
        errors["linkedin"] = linkedin_error
    return errors


def validate_executive_summary(summary: str) -> Optional[str]:
    return None if summary.strip() else MESSAGES["executive_summary"]


def validate_experience_block(block: ExperienceBlock) -> Optional[ExperienceErrors]:
    point_errors = tuple("" if p.strip() else MESSAGES["point"] for p in block.points)
    errors = ExperienceErrors(
        role=None if block.role.strip() else MESSAGES["role"],
        company_info=None if block.company_info.strip() else MESSAGES["company_info"],
        points=point_errors if any(point_errors) else None,
    )
    if errors == ExperienceErrors():
        return None
    return errors


def validate_experience_section(
    blocks: Optional[Sequence[ExperienceBlock]],
) -> Optional[Tuple[Optional[ExperienceErrors], ...]]:
    if not blocks:
        return None
    errors = tuple(validate_experience_block(b) for b in blocks)
    return errors if any(errors) else None


def validate_core_competencies(
    competencies: Sequence[str],
) -> Tuple[Optional[str], Optional[Tuple[str, ...]]]:
    """Return (list-level message, per-item messages)."""
    if not competencies:
        return MESSAGES["competencies"], None
    items = tuple("" if c.strip() else MESSAGES["competency"] for c in competencies)
    return None, items if any(items) else None


def validate_licenses(licenses: Optional[Licenses]) -> Optional[LicenseErrors]:
    if licenses is None:
        return None
    errors = LicenseErrors(
        title=None if licenses.title.strip() else MESSAGES["license_title"],
        values=None if any(v.strip() for v in licenses.values) else MESSAGES["license_values"],
        status=None if licenses.status.strip() else MESSAGES["license_status"],
    )
    return None if errors == LicenseErrors() else errors


def validate_document(document: Document) -> ValidationReport:
    """
    Recompute the full validation report for a document.

    Deterministic: identical documents always yield equal reports.
    """
    competencies_error, competency_items = validate_core_competencies(document.core_competencies)
    return ValidationReport(
        contact_info=validate_contact_info(document.contact_info),
        executive_summary=validate_executive_summary(document.executive_summary),
        core_competencies=competencies_error,
        competency_items=competency_items,
        professional_experience=validate_experience_section(document.professional_experience),
        foundational_experience=validate_experience_section(document.foundational_experience),
        licenses=validate_licenses(document.licenses),
    )
