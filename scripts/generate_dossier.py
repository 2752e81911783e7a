#!/usr/bin/env python3
"""
Dossier Generation CLI

Runs the full generation pipeline from local files: candidate documents and/or
a LinkedIn URL plus a job description file. Writes the strategic briefing
(Strategic_Briefing.md) and the structured dossier (dossier.json).

Examples:\n

    generate_dossier.py jobs/vp_ops.md -a cv.pdf                        # One attachment

    generate_dossier.py jobs/vp_ops.md -l https://linkedin.com/in/jdoe  # Profile URL only

    generate_dossier.py jobs/vp_ops.md -a cv.pdf -a bio.docx --provider anthropic
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from dossier.contexts.briefing import BRIEFING_FILENAME
from dossier.contexts.editing import validate_document
from dossier.contexts.generation import MalformedPayloadError, MissingPayloadError, generate_dossier
from dossier.contexts.generation.logger import setup_generation_logger
from dossier.contexts.intake import AttachmentReadError, IntakeError, UploadedAttachment, check_sources
from dossier.utils.llm import MissingCredentialError, get_provider
from dossier.utils.logger import LOGS_PATH, session_log_dir
from dossier.utils.timestamp import now

load_dotenv()

DOSSIER_FILENAME = "dossier.json"
PAYLOAD_FILENAME = "payload.txt"

app = typer.Typer(
    help="Generate a strategic briefing and structured dossier from candidate documents",
    add_completion=False,
)


@app.command()
def main(
    job_description_file: Annotated[
        Path,
        typer.Argument(help="Text/markdown file holding the target job description", exists=True),
    ],
    attachments: Annotated[
        Optional[List[Path]],
        typer.Option("--attachment", "-a", help="Candidate document (repeatable)", exists=True),
    ] = None,
    linkedin_url: Annotated[
        str,
        typer.Option("--linkedin", "-l", help="Candidate's LinkedIn profile URL"),
    ] = "",
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Output directory (default: outs/dossiers/<timestamp>)"),
    ] = None,
    provider_name: Annotated[
        Optional[str],
        typer.Option("--provider", help="LLM provider: openai or anthropic (default: LLM_PROVIDER)"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", help="Model override (default: LLM_MODEL or provider default)"),
    ] = None,
):
    """Generate a dossier and write the briefing and JSON payload to disk."""
    uploads = [UploadedAttachment.from_path(path) for path in attachments or []]
    try:
        check_sources(linkedin_url, uploads)
    except IntakeError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output_dir = output_dir or LOGS_PATH.parent / "dossiers" / now()
    log_file = setup_generation_logger(session_log_dir("generate"))

    typer.secho(f"\nGenerating dossier for: {job_description_file.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Attachments: {len(uploads)}")
    typer.echo("")

    try:
        provider = get_provider(provider_name, model)
        result = asyncio.run(
            generate_dossier(provider, job_description_file.read_text(), linkedin_url, uploads)
        )
    except MissingPayloadError as e:
        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / BRIEFING_FILENAME).write_text(e.narrative)
        typer.secho(f"✗ {e}", fg=typer.colors.RED, bold=True)
        typer.echo(f"  Raw response: {output_dir / BRIEFING_FILENAME}")
        raise typer.Exit(code=1)
    except MalformedPayloadError as e:
        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / BRIEFING_FILENAME).write_text(e.narrative)
        (output_dir / PAYLOAD_FILENAME).write_text(e.payload_text)
        typer.secho(f"✗ {e}", fg=typer.colors.RED, bold=True)
        typer.echo(f"  Raw payload: {output_dir / PAYLOAD_FILENAME}")
        raise typer.Exit(code=1)
    except (MissingCredentialError, IntakeError, AttachmentReadError, ValueError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / BRIEFING_FILENAME).write_text(result.narrative)
    (output_dir / DOSSIER_FILENAME).write_text(json.dumps(result.document.to_dict(), indent=2))

    report = validate_document(result.document)
    typer.echo("")
    typer.secho("✓ Dossier generated", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Briefing: {output_dir / BRIEFING_FILENAME}")
    typer.echo(f"  Dossier: {output_dir / DOSSIER_FILENAME}")
    if report.has_errors:
        typer.secho(f"  {len(report.messages())} validation issues (see check_dossier.py)", fg=typer.colors.YELLOW)
    typer.echo(f"  Log: {log_file}")
    typer.echo("")


if __name__ == "__main__":
    app()
