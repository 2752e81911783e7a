"""
DOSSIER - Document Orchestration for Strategic Summaries, Interviews, Executive Resumes

Turns a candidate's uploaded documents, LinkedIn URL and a target job description
into a strategic briefing (markdown) and an editable, themeable two-page resume
that can be exported to a paginated PDF.

Architecture:
- Intake Context: Attachments and prompt assembly
- Generation Context: Backend streaming, response accumulation and two-part parsing
- Editing Context: Document model, validation, edit operations and spellcheck
- Briefing Context: Strategic briefing sections, heatmap tables and bar charts
- Rendering Context: Themed document markup and the PDF export compositor
- Session Context: Immutable session snapshots and the action reducer
"""

__version__ = "0.1.0"
