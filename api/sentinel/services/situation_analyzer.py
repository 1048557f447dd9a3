"""Keyword/pattern situation analyzer.

Intent is max-score over independent patterns per category; urgency is
first-match over levels in fixed priority order. The two algorithms differ on
purpose and must not be merged.
"""

from __future__ import annotations

import re
from typing import Any

from sentinel.models.composition import IntentType, UrgencyLevel
from sentinel.models.situation import AnalysisResult


def _compile(*patterns: str) -> list[re.Pattern[str]]:
    return [re.compile(pattern, re.I | re.ASCII) for pattern in patterns]


# Declaration order is the tie-break order for intent scoring.
INTENT_PATTERNS: dict[IntentType, list[re.Pattern[str]]] = {
    IntentType.INCIDENT: _compile(
        r"fail(ure|ing|ed)?",
        r"down\b",
        r"error",
        r"broken",
        r"outage",
        r"crash",
        r"login\s+fail",
        r"not\s+work",
        r"report(ing|ed)?",
        r"issue",
        r"bug",
        r"500",
        r"timeout",
    ),
    IntentType.OVERVIEW: _compile(
        r"overview",
        r"summary",
        r"today",
        r"status",
        r"how\s+(are|is)\s+things",
        r"high[\s-]level",
        r"dashboard",
        r"what'?s\s+happening",
        r"general",
        r"brief(ing)?",
    ),
    IntentType.INVESTIGATION: _compile(
        r"investigat",
        r"something\s+(feels?|seems?)",
        r"\boff\b",
        r"anomal",
        r"suspicious",
        r"dig\s+(in|into)",
        r"look\s+into",
        r"root\s+cause",
        r"\bwhy\b",
        r"weird",
        r"strange",
        r"unusual",
    ),
    IntentType.ESCALATION: _compile(
        r"escalat",
        r"urgent",
        r"critical",
        r"what\s+should\s+I\s+do",
        r"action",
        r"\bhelp\b",
        r"\bnow\b",
        r"immediate",
        r"emergency",
        r"worst",
        r"getting\s+worse",
        r"spreading",
    ),
    IntentType.EXPLORATION: _compile(
        r"show\s+me",
        r"explore",
        r"tell\s+me\s+about",
        r"details",
        r"more\s+info",
        r"drill",
        r"\bdeep\b",
        r"break\s*down",
    ),
}

# Checked top to bottom; the first level with any matching pattern wins.
URGENCY_SIGNALS: list[tuple[UrgencyLevel, list[re.Pattern[str]]]] = [
    (
        UrgencyLevel.CRITICAL,
        _compile(r"escalat", r"emergency", r"critical", r"\bnow\b", r"immediate", r"worst", r"spreading"),
    ),
    (
        UrgencyLevel.HIGH,
        _compile(r"fail", r"broken", r"down\b", r"outage", r"crash", r"urgent", r"reporting"),
    ),
    (
        UrgencyLevel.MEDIUM,
        _compile(r"investigat", r"something", r"\boff\b", r"anomal", r"suspicious", r"weird"),
    ),
    (
        UrgencyLevel.LOW,
        _compile(r"overview", r"summary", r"today", r"general", r"status", r"brief"),
    ),
]

FALLBACK_INTENT = IntentType.EXPLORATION
FALLBACK_URGENCY = UrgencyLevel.LOW

BASE_CONFIDENCE: dict[IntentType, float] = {
    IntentType.INVESTIGATION: 0.45,
    IntentType.EXPLORATION: 0.60,
}
DEFAULT_BASE_CONFIDENCE = 0.70
MATCH_BONUS = 0.08
MAX_BONUS = 0.25
MAX_CONFIDENCE = 0.95

_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)


def _clean(value: Any) -> str:
    return value if isinstance(value, str) else str(value or "")


def _match_count(patterns: list[re.Pattern[str]], text: str) -> int:
    return sum(1 for pattern in patterns if pattern.search(text))


def score_intents(text: Any) -> dict[IntentType, int]:
    """Count matching patterns per intent. Categories are not mutually exclusive."""
    cleaned = _clean(text)
    return {intent: _match_count(patterns, cleaned) for intent, patterns in INTENT_PATTERNS.items()}


def classify_intent(text: Any) -> IntentType:
    scores = score_intents(text)
    best_intent = FALLBACK_INTENT
    best_score = 0
    for intent in INTENT_PATTERNS:
        if scores[intent] > best_score:
            best_intent = intent
            best_score = scores[intent]
    return best_intent


def classify_urgency(text: Any) -> UrgencyLevel:
    cleaned = _clean(text)
    for level, patterns in URGENCY_SIGNALS:
        for pattern in patterns:
            if pattern.search(cleaned):
                return level
    return FALLBACK_URGENCY


def calculate_confidence(intent: IntentType, text: Any) -> float:
    """Base per intent plus 0.08 per matching pattern of that intent (bonus <= 0.25, total <= 0.95)."""
    match_count = _match_count(INTENT_PATTERNS.get(intent, []), _clean(text))
    base = BASE_CONFIDENCE.get(intent, DEFAULT_BASE_CONFIDENCE)
    bonus = min(match_count * MATCH_BONUS, MAX_BONUS)
    return min(base + bonus, MAX_CONFIDENCE)


def extract_keywords(text: Any) -> list[str]:
    stripped = _NON_WORD_RE.sub("", _clean(text).lower())
    return [word for word in stripped.split() if len(word) > 3]


def analyze(text: Any) -> AnalysisResult:
    cleaned = _clean(text)
    scores = score_intents(cleaned)
    intent = classify_intent(cleaned)
    return AnalysisResult(
        intent=intent,
        urgency=classify_urgency(cleaned),
        confidence=calculate_confidence(intent, cleaned),
        keywords=extract_keywords(cleaned),
        intent_scores=scores,
    )
