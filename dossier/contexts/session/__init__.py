"""
Session Context

Responsibilities:
- Holds the single-user session as one immutable state snapshot
- Applies named actions through a reducer
- Runs generation and export behind catch boundaries that turn failures into state

Owns: Wizard steps, busy flags, error banners, template and spellcheck toggles
Never: Persists anything beyond the running session
"""

from dossier.contexts.session.runner import run_export, run_generation
from dossier.contexts.session.state import SessionState, Step, reduce

__all__ = ["SessionState", "Step", "reduce", "run_export", "run_generation"]
