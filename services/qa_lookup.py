"""Predefined answers that short-circuit the model call."""
from typing import Any, Dict, Iterable, List, Optional


def normalize_keywords(keywords: Iterable[str]) -> List[str]:
    """Trim keywords and drop the empty ones."""
    return [k.strip() for k in keywords if k and k.strip()]


def matches(question: str, rule: Dict[str, Any]) -> bool:
    text = question.lower()
    return any(k.lower() in text for k in normalize_keywords(rule.get("keywords") or []))


def find_override(question: str, rules: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return the first active rule whose keywords occur in the question.

    Rules are checked in the order given.
    """
    for rule in rules:
        if rule.get("is_active", True) and matches(question, rule):
            return rule
    return None


def override_answer(rule: Dict[str, Any]) -> Dict[str, str]:
    """The three stored sections of a rule, verbatim."""
    observation = rule.get("observation_content") or ""
    interpretation = rule.get("interpretation_content") or ""
    actionable = rule.get("actionable_content") or ""
    return {
        "content": "\n\n".join(part for part in (observation, interpretation, actionable) if part),
        "observation": observation,
        "interpretation": interpretation,
        "actionable_conclusion": actionable,
    }
