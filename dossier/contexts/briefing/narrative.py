"""
Strategic Briefing Renderer

Splits the narrative into collapsible sections at "## " heading lines and
renders each section body as a sequence of blocks:

- complete <table>...</table> markup (skill heatmaps), passed through verbatim
- ```chart-bar fenced blocks, rendered as SVG bar charts
- everything else, rendered as Markdown

A chart block that cannot be parsed is shown as raw text rather than dropped.
A narrative with no "## " headings renders as one preformatted block.
"""

import re
from dataclasses import dataclass
from typing import List, Union

import markdown
from loguru import logger
from markupsafe import escape

from dossier.contexts.briefing.charts import ChartSpec, ChartSpecError, parse_chart_spec, render_bar_chart
from dossier.utils.config import get_setting

SECTION_MARKER = "## "
BRIEFING_FILENAME = "Strategic_Briefing.md"
BRIEFING_MIME_TYPE = "text/markdown;charset=utf-8"

_SPECIAL_BLOCK = re.compile(r"(<table[\s\S]*?</table>|```chart-bar\n[\s\S]*?```)")
_CHART_FENCE = re.compile(r"```chart-bar\n|```")


@dataclass(frozen=True)
class NarrativeSection:
    """
    One collapsible briefing section.

    Attributes:
        title: Heading text ("" for the preamble before the first heading)
        content: Raw section body (markdown with embedded blocks)
        expanded: Initial open/closed state
    """

    title: str
    content: str
    expanded: bool = False

    @property
    def is_preamble(self) -> bool:
        return self.title == ""


@dataclass(frozen=True)
class TableBlock:
    html: str


@dataclass(frozen=True)
class ChartBlock:
    chart: ChartSpec


@dataclass(frozen=True)
class ChartFallbackBlock:
    raw: str
    reason: str


@dataclass(frozen=True)
class MarkdownBlock:
    text: str


Block = Union[TableBlock, ChartBlock, ChartFallbackBlock, MarkdownBlock]


def split_sections(text: str) -> List[NarrativeSection]:
    """
    Split narrative text at lines beginning with "## ".

    Text before the first heading becomes an untitled preamble (only if it is
    not blank). The first N titled sections are expanded, N from
    narrative.expanded_sections. Returns [] when there are no headings.
    """
    expanded_count = get_setting("narrative.expanded_sections")
    preamble_lines: List[str] = []
    titled: List[tuple[str, List[str]]] = []

    for line in text.split("\n"):
        if line.startswith(SECTION_MARKER):
            titled.append((line[len(SECTION_MARKER) :].strip(), []))
        elif titled:
            titled[-1][1].append(line)
        else:
            preamble_lines.append(line)

    if not titled:
        return []

    sections = []
    preamble = "\n".join(preamble_lines)
    if preamble.strip():
        sections.append(NarrativeSection(title="", content=preamble + "\n", expanded=True))
    for i, (title, lines) in enumerate(titled):
        content = "".join(line + "\n" for line in lines)
        sections.append(NarrativeSection(title=title, content=content, expanded=i < expanded_count))
    return sections


def segment_blocks(content: str) -> List[Block]:
    """Segment a section body into tables, charts and markdown (blank parts dropped)."""
    blocks: List[Block] = []
    for part in _SPECIAL_BLOCK.split(content):
        if not part.strip():
            continue
        if part.startswith("<table"):
            blocks.append(TableBlock(part))
        elif part.startswith("```chart-bar"):
            try:
                blocks.append(ChartBlock(parse_chart_spec(_CHART_FENCE.sub("", part))))
            except ChartSpecError as e:
                logger.warning(f"Failed to parse chart block: {e}")
                blocks.append(ChartFallbackBlock(raw=part, reason=str(e)))
        else:
            blocks.append(MarkdownBlock(part))
    return blocks


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=["tables", "fenced_code"])


def render_block(block: Block) -> str:
    if isinstance(block, TableBlock):
        return f'<div class="heatmap-container">{block.html}</div>'
    if isinstance(block, ChartBlock):
        return render_bar_chart(block.chart)
    if isinstance(block, ChartFallbackBlock):
        return f"<pre>{escape(block.raw)}</pre>"
    return f"<div>{render_markdown(block.text)}</div>"


def render_section_body(content: str) -> str:
    return "\n".join(render_block(b) for b in segment_blocks(content))


def render_narrative_html(text: str) -> str:
    """
    Render the full briefing as HTML with <details> sections.

    Falls back to a single <pre> block when the text has no headings.
    """
    sections = split_sections(text)
    if not sections:
        return f"<pre>{escape(text)}</pre>"

    out = []
    for section in sections:
        body = render_section_body(section.content)
        if section.is_preamble:
            out.append(f'<div class="briefing-preamble">{body}</div>')
            continue
        open_attr = " open" if section.expanded else ""
        out.append(
            f'<details class="collapsible-section"{open_attr}>'
            f"<summary>{escape(section.title)}</summary>"
            f'<div class="section-content">{body}</div>'
            f"</details>"
        )
    return "\n".join(out)
