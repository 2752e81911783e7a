"""Unit tests for TemplateRegistry class."""

import pytest
from jinja2 import TemplateNotFound, UndefinedError

from dossier.contexts.briefing.charts import TEMPLATES_PATH as CHART_TEMPLATES
from dossier.contexts.intake.prompt import PROMPTS_PATH
from dossier.utils.templates import TemplateRegistry


@pytest.mark.unit
def test_template_registry_init():
    """Test TemplateRegistry initialization."""
    registry = TemplateRegistry(CHART_TEMPLATES)
    assert registry.base_path.exists()
    assert registry._cache == {}


@pytest.mark.unit
def test_template_caching():
    """Test that templates are cached after first load."""
    registry = TemplateRegistry(CHART_TEMPLATES)

    template1 = registry.get_template("bar_chart.svg.jinja")
    template2 = registry.get_template("bar_chart.svg.jinja")

    assert template1 is template2
    assert "bar_chart.svg.jinja" in registry._cache


@pytest.mark.unit
def test_get_template_not_found():
    """Test error handling for missing template."""
    registry = TemplateRegistry(CHART_TEMPLATES)

    with pytest.raises(TemplateNotFound, match="not found in"):
        registry.get_template("nonexistent.svg.jinja")


@pytest.mark.unit
def test_clear_cache():
    """Test cache clearing."""
    registry = TemplateRegistry(CHART_TEMPLATES)
    registry.get_template("bar_chart.svg.jinja")
    assert len(registry._cache) == 1

    registry.clear_cache()
    assert len(registry._cache) == 0


@pytest.mark.unit
def test_strict_undefined():
    """Test that missing template variables fail loudly."""
    registry = TemplateRegistry(CHART_TEMPLATES)
    with pytest.raises(UndefinedError):
        registry.render("bar_chart.svg.jinja", title="t")


@pytest.mark.unit
def test_autoescape_by_extension():
    """Test that prompt text is not HTML-escaped while SVG markup is."""
    prompts = TemplateRegistry(PROMPTS_PATH)
    assert "<&>" in prompts.render("dossier_instructions.txt.jinja", separator="<&>")

    charts = TemplateRegistry(CHART_TEMPLATES)
    svg = charts.render("bar_chart.svg.jinja", title="<&>", bars=[], height=10, width=10)
    assert "&lt;&amp;&gt;" in svg
