"""Tests for the bolded-section response formatter."""
from services.formatter import extract_chart, format_response

REVENUE_REPLY = """📊 Revenue by Region

**Total Revenue**: $1,234.56

**Breakdown by Region**
- East: $600.00 (48.6%)
- West: $634.56 (51.4%)

**Key Insights**
- West leads slightly
- Both regions are close

**Recommendations**
- Grow East marketing
"""


def test_revenue_breakdown():
    formatted = format_response(REVENUE_REPLY)

    assert formatted.structured is True
    assert formatted.title == "Revenue by Region"
    assert formatted.metric.label == "Total Revenue"
    assert formatted.metric.value == "$1,234.56"
    assert formatted.breakdown_label == "Region"

    assert [row.label for row in formatted.breakdown] == ["East", "West"]
    assert [row.value for row in formatted.breakdown] == ["$600.00", "$634.56"]
    assert [row.percentage for row in formatted.breakdown] == ["48.6%", "51.4%"]


def test_insights_and_recommendations():
    formatted = format_response(REVENUE_REPLY)

    assert formatted.insights == ["West leads slightly", "Both regions are close"]
    assert formatted.recommendations == ["Grow East marketing"]
    assert formatted.unparsed == []


def test_pass_through_without_marker():
    text = "Here is a plain answer.\n- with a bullet"

    formatted = format_response(text)

    assert formatted.structured is False
    assert formatted.raw == text
    assert formatted.breakdown == []


def test_average_marker_with_colon_inside_bold():
    formatted = format_response("# Prices\n**Average Price:** $156.78\n")

    assert formatted.title == "Prices"
    assert formatted.metric.label == "Average Price"
    assert formatted.metric.value == "$156.78"


def test_reply_starting_with_metric_has_no_title():
    formatted = format_response("**Total Revenue**: $5\n**Key Insights**\n- Small\n")

    assert formatted.title is None
    assert formatted.metric.label == "Total Revenue"
    assert formatted.metric.value == "$5"
    assert formatted.insights == ["Small"]


def test_missing_sections_are_empty():
    formatted = format_response("Summary\n**Total Orders**: 47\n")

    assert formatted.structured is True
    assert formatted.breakdown == []
    assert formatted.insights == []
    assert formatted.recommendations == []
    assert formatted.breakdown_label is None


def test_bullet_without_percentage_and_unparsed_bullet():
    reply = (
        "Meals\n"
        "**Total Meals**: 47\n"
        "**Breakdown by Meal**\n"
        "- Lunch: 18 meals (38.3% of total)\n"
        "- Dinner: 29\n"
        "- something odd\n"
    )

    formatted = format_response(reply)

    assert [(r.label, r.value, r.percentage) for r in formatted.breakdown] == [
        ("Lunch", "18 meals", "38.3%"),
        ("Dinner", "29", None),
    ]
    assert formatted.unparsed == ["- something odd"]


def test_extract_chart():
    reply = (
        "Revenue\n"
        "```json\n"
        '{"chartType": "bar", "title": "By region", '
        '"data": [{"name": "East", "value": 600}, {"name": "West", "value": 634.56}]}\n'
        "```\n"
    )

    chart = extract_chart(reply)

    assert chart.chartType == "bar"
    assert [p.name for p in chart.data] == ["East", "West"]


def test_extract_chart_skips_invalid_blocks():
    reply = (
        "```json\nnot json\n```\n"
        '```json\n{"chartType": "scatter", "data": [{"name": "a", "value": 1}]}\n```\n'
        '```json\n{"chartType": "pie", "data": [{"name": 2020, "value": 3}]}\n```\n'
    )

    chart = extract_chart(reply)

    assert chart.chartType == "pie"
    assert chart.data[0].name == "2020"


def test_extract_chart_none():
    assert extract_chart("no charts here") is None
