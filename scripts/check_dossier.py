#!/usr/bin/env python3
"""
Check a dossier JSON file for validation errors and misspellings.

Usage:
    python scripts/check_dossier.py outs/dossiers/20251114_120000/dossier.json
    python scripts/check_dossier.py dossier.json --no-spellcheck
"""

import json
from pathlib import Path

import typer
from dotenv import load_dotenv

from dossier.contexts.editing import Document, InvalidDocumentStructureError, validate_document
from dossier.contexts.editing.spellcheck import load_dictionary, misspelled_words, suggest

load_dotenv()

app = typer.Typer(help="Validate and spellcheck a dossier JSON file.")


def editable_fields(document: Document):
    """Yield (location, text) for every spellchecked field."""
    contact = document.contact_info
    yield "contactInfo.name", contact.name
    yield "contactInfo.location", contact.location
    yield "executiveSummary", document.executive_summary
    for i, competency in enumerate(document.core_competencies):
        yield f"coreCompetencies[{i}]", competency
    for label, blocks in (
        ("professionalExperience", document.professional_experience),
        ("foundationalExperience", document.foundational_experience or ()),
    ):
        for i, block in enumerate(blocks):
            yield f"{label}[{i}].role", block.role
            yield f"{label}[{i}].companyInfo", block.company_info
            for j, point in enumerate(block.points):
                yield f"{label}[{i}].points[{j}]", point
    if document.licenses is not None:
        yield "licenses.title", document.licenses.title
        yield "licenses.status", document.licenses.status


@app.command()
def main(
    dossier_file: Path = typer.Argument(..., help="Dossier JSON file", exists=True),
    spellcheck: bool = typer.Option(True, "--spellcheck/--no-spellcheck", help="Report misspellings"),
):
    """Print the validation report and spellcheck findings."""
    try:
        document = Document.from_dict(json.loads(dossier_file.read_text()))
    except (json.JSONDecodeError, InvalidDocumentStructureError) as e:
        typer.echo(f"ERROR: Not a valid dossier: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Checking {dossier_file}")

    # Validation
    messages = validate_document(document).messages()
    typer.echo(f"\n=== Validation ({len(messages)} issues) ===")
    for message in messages:
        typer.echo(f"  {message}")

    # Spelling
    if spellcheck:
        dictionary = load_dictionary()
        if dictionary is None:
            typer.echo("\n(Spellcheck dictionary unavailable)")
        else:
            typer.echo("\n=== Spelling ===")
            for location, text in editable_fields(document):
                for word in misspelled_words(text, dictionary):
                    suggestions = ", ".join(suggest(dictionary, word)) or "no suggestions"
                    typer.echo(f"  {location}: {word} ({suggestions})")

    raise typer.Exit(1 if messages else 0)


if __name__ == "__main__":
    app()
