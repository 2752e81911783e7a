"""
Shared utilities for DOSSIER.

Common functionality used across contexts:
- Settings loading
- LLM providers
- Logging setup
- PDF inspection
"""

from dossier.utils.config import get_setting, load_settings
from dossier.utils.timestamp import now

__all__ = ["get_setting", "load_settings", "now"]
