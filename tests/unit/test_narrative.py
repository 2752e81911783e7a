"""Unit tests for the strategic briefing renderer."""

import pytest

from dossier.contexts.briefing import render_narrative_html, segment_blocks, split_sections
from dossier.contexts.briefing.narrative import ChartBlock, ChartFallbackBlock, MarkdownBlock, TableBlock

BRIEFING = """Intro line.

## Fit Analysis
Strong match.

## Skill Heatmap
<table><tr><td>SQL</td></tr></table>

## Gaps
None worth noting.
"""


@pytest.mark.unit
def test_split_sections():
    """Test that headings split sections and only the first two are open."""
    sections = split_sections(BRIEFING)

    assert [s.title for s in sections] == ["", "Fit Analysis", "Skill Heatmap", "Gaps"]
    assert sections[0].is_preamble
    assert [s.expanded for s in sections[1:]] == [True, True, False]
    assert sections[1].content == "Strong match.\n\n"


@pytest.mark.unit
def test_blank_preamble_is_dropped():
    """Test that whitespace before the first heading does not create a section."""
    sections = split_sections("\n\n## Only\nBody")
    assert [s.title for s in sections] == ["Only"]


@pytest.mark.unit
def test_no_headings_renders_preformatted():
    """Test that a heading-free narrative renders as one escaped block."""
    assert split_sections("plain <text>") == []
    assert render_narrative_html("plain <text>") == "<pre>plain &lt;text&gt;</pre>"


@pytest.mark.unit
def test_segment_blocks():
    """Test that tables and charts are split out of prose."""
    content = (
        "Before\n"
        "<table><tr><td>x</td></tr></table>\n"
        "Middle\n"
        '```chart-bar\n{"title": "Fit", "data": [{"label": "SQL", "value": 80}]}\n```\n'
        "After\n"
    )

    blocks = segment_blocks(content)

    assert [type(b) for b in blocks] == [MarkdownBlock, TableBlock, MarkdownBlock, ChartBlock, MarkdownBlock]
    assert blocks[1].html == "<table><tr><td>x</td></tr></table>"
    assert blocks[3].chart.title == "Fit"


@pytest.mark.unit
def test_bad_chart_falls_back_to_raw_text():
    """Test that an unparseable chart is shown as text, not dropped."""
    blocks = segment_blocks("```chart-bar\n{oops\n```")
    assert len(blocks) == 1
    assert isinstance(blocks[0], ChartFallbackBlock)
    assert "{oops" in blocks[0].raw


@pytest.mark.unit
def test_render_narrative_html():
    """Test section markup, table wrapping and markdown rendering."""
    html = render_narrative_html(BRIEFING.replace("Strong match.", "**Strong** match."))

    assert '<div class="briefing-preamble">' in html
    assert '<details class="collapsible-section" open><summary>Fit Analysis</summary>' in html
    assert '<details class="collapsible-section"><summary>Gaps</summary>' in html
    assert "<strong>Strong</strong>" in html
    assert '<div class="heatmap-container"><table>' in html
