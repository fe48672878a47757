"""
HTML chart document rendering.

Design & Rationale:
- The ECharts option is built DETERMINISTICALLY as plain Python data, then
  serialized into the page with Jinja2's `tojson` filter. Text shown in the
  markup goes through autoescaping. Model output cannot break out of either.
- Rendering is pure: the template is loaded once at import, and the
  generation time is an argument.
- Chart drawing and PNG export happen in the browser.
"""

import os
from datetime import datetime
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, select_autoescape

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")

ECHARTS_URL = "https://cdn.jsdelivr.net/npm/echarts@5.4.3/dist/echarts.min.js"

DEFAULT_TITLE = "AI 생성 차트"
DEFAULT_CATEGORIES = ["A", "B", "C", "D", "E"]

MONO_PALETTE = ["#666666", "#888888", "#aaaaaa", "#cccccc", "#eeeeee"]
COLOR_PALETTE = ["#5470c6", "#91cc75", "#fac858", "#ee6666", "#73c0de"]

_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)
_template = _env.get_template("chart.html")


def select_palette(style: str) -> List[str]:
    """Grayscale for 'mono', the qualitative palette for anything else."""
    return list(MONO_PALETTE if style == "mono" else COLOR_PALETTE)


def _axes(chart_data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "xAxis": {
            "type": "category",
            "data": chart_data.get("categories") or list(DEFAULT_CATEGORIES),
        },
        "yAxis": {"type": "value"},
    }


def build_series_config(chart_type: str, chart_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Series and axis configuration for a chart type.

    - pie:  pie series, no axes
    - line: line series on category/value axes
    - area: line series with an area fill
    - bar and anything unknown: bar series on category/value axes
    """
    data = chart_data.get("data") or []

    if chart_type == "pie":
        return {"series": [{"type": "pie", "radius": "50%", "data": data}]}

    if chart_type == "line":
        series = {"type": "line", "data": data}
    elif chart_type == "area":
        series = {"type": "line", "areaStyle": {}, "data": data}
    else:
        series = {"type": "bar", "data": data}

    config = {"series": [series]}
    config.update(_axes(chart_data))
    return config


def chart_title(chart_data: Dict[str, Any]) -> str:
    return chart_data.get("title") or DEFAULT_TITLE


def build_chart_option(chart_type: str, style: str, chart_data: Dict[str, Any]) -> Dict[str, Any]:
    """Complete ECharts option object for the page."""
    option = {
        "title": {
            "text": chart_title(chart_data),
            "left": "center",
            "textStyle": {"color": "#333", "fontSize": 18},
        },
        "tooltip": {"trigger": "axis"},
        "legend": {"orient": "vertical", "left": "left"},
        "color": select_palette(style),
    }
    option.update(build_series_config(chart_type, chart_data))
    return option


def format_timestamp(generated_at: datetime) -> str:
    """Korean locale style, e.g. '2024. 1. 5. 오후 3:04:05'."""
    meridiem = "오전" if generated_at.hour < 12 else "오후"
    hour = generated_at.hour % 12 or 12
    return (
        f"{generated_at.year}. {generated_at.month}. {generated_at.day}. "
        f"{meridiem} {hour}:{generated_at.minute:02d}:{generated_at.second:02d}"
    )


def render_chart_html(
    chart_type: str,
    style: str,
    chart_data: Dict[str, Any],
    generated_at: datetime,
) -> str:
    """Render a self-contained HTML document for one chart."""
    return _template.render(
        title=chart_title(chart_data),
        chart_type=chart_type,
        style=style,
        generated_at=format_timestamp(generated_at),
        option=build_chart_option(chart_type, style, chart_data),
        echarts_url=ECHARTS_URL,
        export_stamp=int(generated_at.timestamp() * 1000),
    )
