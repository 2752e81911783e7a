"""
Bar chart blocks embedded in the strategic briefing.

A chart block is a fenced code block tagged chart-bar:

    ```chart-bar
    {"title": "Skill Alignment", "data": [{"label": "SQL", "value": 80}]}
    ```

Bars are scaled against max(values, 100), so scores out of 100 keep their
proportions even when every value is small.
"""

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

from dossier.utils.config import get_setting
from dossier.utils.templates import TemplateRegistry

TEMPLATES_PATH = Path(__file__).parent / "templates"

_registry = TemplateRegistry(TEMPLATES_PATH)


class ChartSpecError(ValueError):
    """Raised when a chart-bar block is not valid chart JSON."""


@dataclass(frozen=True)
class ChartPoint:
    label: str
    value: float
    color: Optional[str] = None


@dataclass(frozen=True)
class ChartSpec:
    title: str
    data: Tuple[ChartPoint, ...]


@dataclass(frozen=True)
class Bar:
    """Geometry of one rendered bar, in viewBox units."""

    label: str
    value_text: str
    x: float
    y: float
    width: float
    height: float
    color: str

    @property
    def center(self) -> float:
        return self.x + self.width / 2


def _number(value: Any, path: str) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ChartSpecError(f"{path}: expected a finite number, got {value!r}")
    return float(value)


def parse_chart_spec(body: str) -> ChartSpec:
    """
    Parse the JSON body of a chart-bar block.

    Raises:
        ChartSpecError: On invalid JSON or an unexpected shape
    """
    try:
        raw = json.loads(body)
    except json.JSONDecodeError as e:
        raise ChartSpecError(f"invalid chart JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ChartSpecError("chart JSON must be an object")

    data = raw.get("data")
    if not isinstance(data, list):
        raise ChartSpecError("chart JSON needs a 'data' array")

    points = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ChartSpecError(f"data[{i}]: expected an object")
        color = item.get("color")
        points.append(
            ChartPoint(
                label=str(item.get("label", "")),
                value=_number(item.get("value"), f"data[{i}].value"),
                color=color if isinstance(color, str) else None,
            )
        )

    title = raw.get("title") or get_setting("narrative.chart.default_title")
    return ChartSpec(title=str(title), data=tuple(points))


def _format_value(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def layout_bars(chart: ChartSpec) -> List[Bar]:
    settings = get_setting("narrative.chart")
    height = settings["height"]
    bar_width = settings["bar_width"]
    margin = settings["bar_margin"]
    colors = settings["colors"]

    scale = max([p.value for p in chart.data] + [settings["min_scale"]])
    bars = []
    for i, point in enumerate(chart.data):
        bar_height = max(point.value, 0) / scale * height
        bars.append(
            Bar(
                label=point.label,
                value_text=_format_value(point.value),
                x=i * (bar_width + margin) + margin / 2,
                y=height - bar_height,
                width=bar_width,
                height=bar_height,
                color=point.color or colors[i % len(colors)],
            )
        )
    return bars


def render_bar_chart(chart: ChartSpec) -> str:
    """Render a chart as an inline SVG block; an empty data list renders nothing."""
    if not chart.data:
        return ""
    settings = get_setting("narrative.chart")
    return _registry.render(
        "bar_chart.svg.jinja",
        title=chart.title,
        bars=layout_bars(chart),
        height=settings["height"],
        width=len(chart.data) * (settings["bar_width"] + settings["bar_margin"]),
    )
