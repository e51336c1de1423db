"""Turn bolded-section analyst replies into a presentational view model."""
import json
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.schemas import BreakdownRow, ChartSpec, FormattedResponse, Metric

METRIC_MARKERS = ("**Total", "**Average")

BREAKDOWN = "breakdown"
INSIGHTS = "insights"
RECOMMENDATIONS = "recommendations"

SECTION_HEADERS = {
    BREAKDOWN: "**Breakdown by",
    INSIGHTS: "**Key Insights",
    RECOMMENDATIONS: "**Recommendations",
}

# **Total Revenue**: $1,234.56  or  **Average Price:** $156.78
METRIC_RE = re.compile(r"\*\*((?:Total|Average)[^*]*?):?\*\*:?\s*(.+)")

# - East: $600.00 (48.6%)  /  - Lunch: 18 meals (38.3% of total)  /  - Other: 12
BULLET_RE = re.compile(r"^-\s*(.+?):\s*(.+?)(?:\s*\((\d+(?:\.\d+)?%)[^)]*\))?\s*$")

JSON_BLOCK_RE = re.compile(r"```json\s*(.*?)```", re.DOTALL)


def format_response(content: str) -> FormattedResponse:
    """Parse a reply into title, metric, breakdown, insights and recommendations.

    Text without a "**Total"/"**Average" marker is passed through untouched.
    Missing sections come back empty; breakdown bullets that do not fit the
    "- Label: Value (NN.N%)" shape are returned in `unparsed`.
    """
    if not any(marker in content for marker in METRIC_MARKERS):
        return FormattedResponse(structured=False, raw=content)

    lines = [line.strip() for line in content.split("\n") if line.strip()]

    # a reply that opens with the metric line has no title
    title = None
    if not any(marker in lines[0] for marker in METRIC_MARKERS):
        title = re.sub(r"^(📊|#+)\s*", "", lines[0]).strip()

    metric = None
    for line in lines:
        if any(marker in line for marker in METRIC_MARKERS):
            match = METRIC_RE.search(line)
            if match:
                metric = Metric(label=match.group(1).strip(), value=match.group(2).strip())
            break

    sections = _split_sections(lines)

    breakdown: List[BreakdownRow] = []
    unparsed: List[str] = []
    for bullet in sections[BREAKDOWN]:
        match = BULLET_RE.match(bullet)
        if match:
            breakdown.append(BreakdownRow(
                label=match.group(1).strip(),
                value=match.group(2).strip(),
                percentage=match.group(3),
            ))
        else:
            unparsed.append(bullet)

    return FormattedResponse(
        structured=True,
        raw=content,
        title=title,
        metric=metric,
        breakdown_label=_breakdown_label(lines),
        breakdown=breakdown,
        insights=[_strip_bullet(b) for b in sections[INSIGHTS]],
        recommendations=[_strip_bullet(b) for b in sections[RECOMMENDATIONS]],
        unparsed=unparsed,
    )


def _split_sections(lines: List[str]) -> Dict[str, List[str]]:
    """Collect the bullet lines under each known header.

    A section runs until the next known header or the end of the text.
    """
    starts = {}
    for name, header in SECTION_HEADERS.items():
        idx = next((i for i, line in enumerate(lines) if header in line), None)
        if idx is not None:
            starts[name] = idx

    sections: Dict[str, List[str]] = {name: [] for name in SECTION_HEADERS}
    boundaries = sorted(starts.values())
    for name, start in starts.items():
        end = next((b for b in boundaries if b > start), len(lines))
        sections[name] = [line for line in lines[start + 1:end] if line.startswith("-")]

    return sections


def _breakdown_label(lines: List[str]) -> Optional[str]:
    for line in lines:
        if SECTION_HEADERS[BREAKDOWN] in line:
            match = re.search(r"\*\*Breakdown by\s*([^*:]*)", line)
            return match.group(1).strip() if match else None
    return None


def _strip_bullet(line: str) -> str:
    return re.sub(r"^-\s*", "", line).strip()


def extract_chart(content: str) -> Optional[ChartSpec]:
    """Return the first fenced ```json block that is a valid chart spec."""
    for block in JSON_BLOCK_RE.findall(content):
        try:
            payload: Any = json.loads(block)
        except json.JSONDecodeError:
            continue
        if not isinstance(payload, dict) or "chartType" not in payload:
            continue
        try:
            return ChartSpec.model_validate(payload)
        except ValidationError:
            continue
    return None
