from __future__ import annotations

import pytest

from sentinel.models.composition import IntentType, UrgencyLevel
from sentinel.services import situation_analyzer


@pytest.mark.parametrize(
    ("text", "intent", "urgency"),
    [
        ("Users are reporting login failures", IntentType.INCIDENT, UrgencyLevel.HIGH),
        ("Give me a high-level overview of today", IntentType.OVERVIEW, UrgencyLevel.LOW),
        ("Something feels off, help me investigate", IntentType.INVESTIGATION, UrgencyLevel.MEDIUM),
        ("This is escalating, what should I do now?", IntentType.ESCALATION, UrgencyLevel.CRITICAL),
        ("Show me the details, I want to explore", IntentType.EXPLORATION, UrgencyLevel.LOW),
        ("", IntentType.EXPLORATION, UrgencyLevel.LOW),
    ],
)
def test_analyze_classifies_demo_scenarios(text: str, intent: IntentType, urgency: UrgencyLevel) -> None:
    result = situation_analyzer.analyze(text)
    assert result.intent == intent
    assert result.urgency == urgency


def test_empty_input_uses_fallback_defaults() -> None:
    result = situation_analyzer.analyze("")
    assert result.intent == IntentType.EXPLORATION
    assert result.urgency == UrgencyLevel.LOW
    assert result.confidence == 0.60
    assert result.keywords == []


def test_login_failure_confidence_gets_match_bonus() -> None:
    text = "Users are reporting login failures"
    scores = situation_analyzer.score_intents(text)
    assert scores[IntentType.INCIDENT] == 3
    result = situation_analyzer.analyze(text)
    assert 0.70 < result.confidence <= 0.95
    assert result.confidence == pytest.approx(0.70 + 3 * 0.08)


def test_intent_scores_are_not_mutually_exclusive() -> None:
    scores = situation_analyzer.score_intents("Something feels off, help me investigate")
    assert scores[IntentType.INVESTIGATION] == 3
    assert scores[IntentType.ESCALATION] == 1
    assert scores[IntentType.INCIDENT] == 0


def test_intent_tie_breaks_on_declaration_order() -> None:
    # "error" -> incident (1), "summary" -> overview (1)
    assert situation_analyzer.classify_intent("error summary") == IntentType.INCIDENT
    # "summary" -> overview (1), "weird" -> investigation (1)
    assert situation_analyzer.classify_intent("weird summary") == IntentType.OVERVIEW
    # "weird" -> investigation (1), "urgent" -> escalation (1)
    assert situation_analyzer.classify_intent("urgent and weird") == IntentType.INVESTIGATION


def test_strictly_higher_score_beats_declaration_order() -> None:
    # overview scores 2 (summary, status) vs incident 1 (error)
    assert situation_analyzer.classify_intent("error status summary") == IntentType.OVERVIEW


def test_urgency_is_first_match_not_max_score() -> None:
    # Many low-urgency signals, a single critical one: critical still wins.
    text = "overview summary today general status brief now"
    assert situation_analyzer.classify_urgency(text) == UrgencyLevel.CRITICAL
    # Medium and high both present: high is tested first.
    assert situation_analyzer.classify_urgency("weird outage") == UrgencyLevel.HIGH


def test_confidence_bonus_is_capped() -> None:
    text = "failure down error broken outage crash login fail not working reported issue bug 500 timeout"
    assert situation_analyzer.score_intents(text)[IntentType.INCIDENT] >= 4
    assert situation_analyzer.calculate_confidence(IntentType.INCIDENT, text) == pytest.approx(0.95)


def test_confidence_uses_winning_intent_base() -> None:
    assert situation_analyzer.calculate_confidence(IntentType.INVESTIGATION, "") == pytest.approx(0.45)
    assert situation_analyzer.calculate_confidence(IntentType.EXPLORATION, "") == pytest.approx(0.60)
    assert situation_analyzer.calculate_confidence(IntentType.ESCALATION, "") == pytest.approx(0.70)
    assert situation_analyzer.calculate_confidence(IntentType.INVESTIGATION, "why so weird") == pytest.approx(0.61)


def test_patterns_are_case_insensitive() -> None:
    assert situation_analyzer.analyze("OUTAGE IN PROGRESS").intent == IntentType.INCIDENT
    assert situation_analyzer.analyze("OUTAGE IN PROGRESS").urgency == UrgencyLevel.HIGH


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "???",
        "a" * 5000,
        "naïve ünïcödé text with emoji \U0001F525",
        "fail now overview investigate explore escalate",
    ],
)
def test_analyze_is_total_and_bounded(text: str) -> None:
    result = situation_analyzer.analyze(text)
    assert result.intent in set(IntentType)
    assert result.urgency in set(UrgencyLevel)
    assert 0.0 <= result.confidence <= 0.95


def test_analyze_tolerates_non_string_input() -> None:
    result = situation_analyzer.analyze(None)
    assert result.intent == IntentType.EXPLORATION
    assert result.confidence == 0.60


def test_extract_keywords_drops_short_words_and_punctuation() -> None:
    keywords = situation_analyzer.extract_keywords("Users are reporting login failures!")
    assert keywords == ["users", "reporting", "login", "failures"]


def test_word_boundaries_and_case_folding_are_ascii_only() -> None:
    # Accented letters are not word characters, so "now" still stands alone.
    assert situation_analyzer.classify_urgency("énow") == UrgencyLevel.CRITICAL
    # The long s only folds to "s" under Unicode matching.
    assert situation_analyzer.score_intents("ſtatus")[IntentType.OVERVIEW] == 0


def test_extract_keywords_drops_non_ascii_letters() -> None:
    assert situation_analyzer.extract_keywords("café crème brûlée") == ["crme", "brle"]
