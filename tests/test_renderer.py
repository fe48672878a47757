import copy
from datetime import datetime

import pytest

from ai_chart_builder.app.renderer import (
    COLOR_PALETTE,
    DEFAULT_CATEGORIES,
    DEFAULT_TITLE,
    ECHARTS_URL,
    MONO_PALETTE,
    build_chart_option,
    build_series_config,
    format_timestamp,
    render_chart_html,
    select_palette,
)

GENERATED_AT = datetime(2024, 1, 5, 15, 4, 5)


@pytest.fixture
def chart_data():
    return {
        "title": "월별 매출",
        "data": [120, 200, 150],
        "categories": ["1월", "2월", "3월"],
        "style": "color",
    }


# ================================================================================
# SERIES / AXES
# ================================================================================

@pytest.mark.parametrize("chart_type", ["bar", "line", "area"])
def test_axis_types_define_category_axis(chart_type, chart_data):
    config = build_series_config(chart_type, chart_data)
    assert config["xAxis"] == {"type": "category", "data": ["1월", "2월", "3월"]}
    assert config["yAxis"] == {"type": "value"}


@pytest.mark.parametrize("chart_type", ["bar", "line", "area", "scatter"])
def test_categories_default_when_absent(chart_type):
    config = build_series_config(chart_type, {"data": [1, 2, 3, 4, 5]})
    assert config["xAxis"]["data"] == DEFAULT_CATEGORIES


def test_pie_has_no_axes(chart_data):
    config = build_series_config("pie", chart_data)
    assert config == {"series": [{"type": "pie", "radius": "50%", "data": [120, 200, 150]}]}


def test_area_is_filled_line(chart_data):
    series = build_series_config("area", chart_data)["series"][0]
    assert series["type"] == "line"
    assert series["areaStyle"] == {}


def test_line_series(chart_data):
    series = build_series_config("line", chart_data)["series"][0]
    assert series == {"type": "line", "data": [120, 200, 150]}


@pytest.mark.parametrize("chart_type", ["scatter", "doughnut", "", "BAR"])
def test_unknown_type_falls_back_to_bar(chart_type, chart_data):
    assert build_series_config(chart_type, chart_data) == build_series_config("bar", chart_data)


@pytest.mark.parametrize("data", [None, "", 0, []])
def test_missing_data_becomes_empty_list(data):
    assert build_series_config("bar", {"data": data})["series"][0]["data"] == []


# ================================================================================
# PALETTE / OPTION
# ================================================================================

def test_mono_palette():
    assert select_palette("mono") == MONO_PALETTE


@pytest.mark.parametrize("style", ["color", "MONO", "", "pastel"])
def test_other_styles_use_color_palette(style):
    assert select_palette(style) == COLOR_PALETTE


def test_option_title_defaults():
    option = build_chart_option("bar", "color", {})
    assert option["title"]["text"] == DEFAULT_TITLE
    assert option["tooltip"] == {"trigger": "axis"}
    assert option["color"] == COLOR_PALETTE


# ================================================================================
# DOCUMENT
# ================================================================================

def test_document_structure(chart_data):
    html = render_chart_html("bar", "color", chart_data, GENERATED_AT)

    assert html.startswith("<!DOCTYPE html>")
    assert ECHARTS_URL in html
    assert '<div id="chart"></div>' in html
    assert "downloadChart()" in html
    assert "getDataURL" in html
    assert "<title>월별 매출</title>" in html
    assert '"bar"' in html
    assert "2024. 1. 5. 오후 3:04:05" in html
    assert f"chart-{int(GENERATED_AT.timestamp() * 1000)}.png" in html


def test_render_is_deterministic(chart_data):
    first = render_chart_html("line", "mono", chart_data, GENERATED_AT)
    second = render_chart_html("line", "mono", chart_data, GENERATED_AT)
    assert first == second


def test_render_does_not_mutate_input(chart_data):
    before = copy.deepcopy(chart_data)
    render_chart_html("area", "mono", chart_data, GENERATED_AT)
    assert chart_data == before


def test_pie_document_has_no_axes(chart_data):
    html = render_chart_html("pie", "color", chart_data, GENERATED_AT)
    assert "xAxis" not in html
    assert "yAxis" not in html


def test_mono_document_uses_grayscale(chart_data):
    html = render_chart_html("bar", "mono", chart_data, GENERATED_AT)
    assert "#666666" in html
    assert "#5470c6" not in html


def test_model_text_is_escaped():
    payload = "</script><script>alert(1)</script>"
    html = render_chart_html("bar", "color", {"title": payload, "data": payload}, GENERATED_AT)
    assert "<script>alert(1)" not in html


def test_timestamp_format_morning():
    assert format_timestamp(datetime(2023, 12, 31, 0, 5, 9)) == "2023. 12. 31. 오전 12:05:09"
