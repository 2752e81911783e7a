"""
Template Registry

Loads and caches Jinja2 templates shipped inside a context package
(prompt text, chart SVG, resume markup).
"""

from pathlib import Path
from typing import Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound, select_autoescape


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates from one directory.

    Autoescaping is on for .html/.svg templates and off for plain-text
    prompt templates.
    """

    def __init__(self, base_path: Path):
        """
        Initialize the template registry.

        Args:
            base_path: Directory holding the *.jinja files
        """
        self.base_path = base_path
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(base_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            autoescape=select_autoescape(enabled_extensions=("html.jinja", "svg.jinja")),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by file name, loading and caching it if necessary.

        Raises:
            TemplateNotFound: If the template file doesn't exist
            TemplateSyntaxError: If the template has Jinja2 syntax errors
        """
        if name in self._cache:
            return self._cache[name]

        try:
            template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateNotFound(f"Template '{name}' not found in {self.base_path}") from e

        self._cache[name] = template
        return template

    def render(self, name: str, **context) -> str:
        return self.get_template(name).render(**context)

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()
