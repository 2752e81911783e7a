#!/usr/bin/env python3
"""
Dossier Export CLI

Renders a dossier JSON file into a paginated US-letter PDF (headless Chromium
rasterization) or into a static, print-ready HTML page.

Commands:
    pdf   - Export the dossier to an image-based PDF
    print - Write the static print view as HTML

Examples:\n

    export_pdf.py pdf outs/dossiers/20251114_120000/dossier.json               # Executive template

    export_pdf.py pdf dossier.json --template classic -o out/                   # Classic template

    export_pdf.py pdf dossier.json --force                                      # Ignore validation errors

    export_pdf.py print dossier.json --template modern                          # Print-ready HTML
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from dossier.contexts.editing import Document, InvalidDocumentStructureError
from dossier.contexts.rendering import (
    PlaywrightRasterizer,
    RasterizationError,
    RenderTargetNotFoundError,
    ValidationBlockedError,
    available_templates,
    export_document,
    render_print_html,
)
from dossier.contexts.rendering.logger import setup_rendering_logger
from dossier.utils.logger import session_log_dir

load_dotenv()

app = typer.Typer(
    help="Export dossier JSON files to PDF or print-ready HTML",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_document(path: Path) -> Document:
    """Load a dossier JSON file, exiting with an error message if it is unusable."""
    try:
        return Document.from_dict(json.loads(path.read_text()))
    except (json.JSONDecodeError, InvalidDocumentStructureError) as e:
        typer.secho(f"Error: {path} is not a valid dossier: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def check_template(template: str) -> None:
    if template not in available_templates():
        typer.secho(
            f"Error: unknown template '{template}'. Use one of: {', '.join(available_templates())}\n",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)


@app.command("pdf")
def pdf_command(
    dossier_file: Annotated[Path, typer.Argument(help="Dossier JSON file", exists=True)],
    template: Annotated[
        str,
        typer.Option("--template", "-t", help="Resume template: executive, modern or classic"),
    ] = "executive",
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Output directory (default: next to the JSON file)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Export even when the dossier has validation errors"),
    ] = False,
):
    """
    Export a dossier to an image-based, paginated PDF.

    Refuses documents with validation errors unless --force is given.

    Examples:\n

        $ export_pdf.py pdf dossier.json                      # Export with executive template

        $ export_pdf.py pdf dossier.json -t modern --force    # Modern template, skip validation
    """
    check_template(template)
    document = load_document(dossier_file)
    output_dir = output_dir or dossier_file.parent
    log_file = setup_rendering_logger(session_log_dir("export"))

    typer.secho(f"\nExporting: {dossier_file}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Template: {template}")
    typer.echo("")

    try:
        result = asyncio.run(
            export_document(document, PlaywrightRasterizer(), template=template, force=force)
        )
    except ValidationBlockedError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, bold=True)
        for message in e.messages[:10]:
            typer.secho(f"  - {message}", fg=typer.colors.RED)
        if len(e.messages) > 10:
            typer.echo(f"  ... and {len(e.messages) - 10} more")
        typer.echo("Fix the dossier or retry with --force.")
        raise typer.Exit(code=1)
    except (RenderTargetNotFoundError, RasterizationError) as e:
        typer.secho(f"✗ Export failed: {e}", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=1)

    output_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = output_dir / result.filename
    pdf_path.write_bytes(result.pdf_bytes)

    typer.secho("✓ Export succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  PDF: {pdf_path}")
    typer.echo(f"  Log: {log_file}")
    typer.echo("")


@app.command("print")
def print_command(
    dossier_file: Annotated[Path, typer.Argument(help="Dossier JSON file", exists=True)],
    template: Annotated[
        str,
        typer.Option("--template", "-t", help="Resume template: executive, modern or classic"),
    ] = "executive",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output HTML file (default: <json stem>.html)"),
    ] = None,
):
    """
    Write the static print view of a dossier as a standalone HTML page.

    Examples:\n

        $ export_pdf.py print dossier.json                   # Writes dossier.html

        $ export_pdf.py print dossier.json -t classic -o cv.html
    """
    check_template(template)
    document = load_document(dossier_file)
    output = output or dossier_file.with_suffix(".html")

    try:
        html = render_print_html(document, template=template)
    except ValidationBlockedError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, bold=True)
        for message in e.messages:
            typer.secho(f"  - {message}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    output.write_text(html)
    typer.secho(f"✓ Print view written: {output}", fg=typer.colors.GREEN, bold=True)


if __name__ == "__main__":
    app()
