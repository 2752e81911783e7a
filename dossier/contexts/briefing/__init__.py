"""
Briefing Context

Responsibilities:
- Splits the strategic briefing into collapsible sections
- Renders embedded heatmap tables and chart-bar blocks distinctly from prose
- Offers the raw briefing as a markdown download

Owns: Narrative sectioning, chart rendering
Never: Touches the structured dossier
"""

from dossier.contexts.briefing.narrative import (
    BRIEFING_FILENAME,
    BRIEFING_MIME_TYPE,
    NarrativeSection,
    render_narrative_html,
    segment_blocks,
    split_sections,
)

__all__ = [
    "BRIEFING_FILENAME",
    "BRIEFING_MIME_TYPE",
    "NarrativeSection",
    "render_narrative_html",
    "segment_blocks",
    "split_sections",
]
