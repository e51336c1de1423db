"""Rule-based routing of a question to one of the three answer sections."""
from typing import List, Tuple

OBSERVATION = "observation"
INTERPRETATION = "interpretation"
ACTIONABLE = "actionable"

CATEGORIES = (OBSERVATION, INTERPRETATION, ACTIONABLE)

# Evaluated in order; the first rule with a matching keyword wins.
ROUTING_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    (ACTIONABLE, (
        "should", "recommend", "suggest", "advice", "advise", "increase", "decrease",
        "improve", "reduce", "optimi", "boost", "strategy", "action", "next step",
        "what can we do", "how can we", "how do we", "prioriti",
    )),
    (INTERPRETATION, (
        "why", "reason", "cause", "correlat", "relationship", "explain", "pattern",
        "trend", "impact", "affect", "driver", "driving", "insight", "interpret",
        "compare", "significan",
    )),
]


def classify_question(question: str) -> str:
    """Return the section a question most likely targets.

    Falls back to "observation" when no keyword matches.
    """
    text = question.lower()
    for category, keywords in ROUTING_RULES:
        if any(k in text for k in keywords):
            return category
    return OBSERVATION
