"""
Deterministic text-to-wellness classifier for quick check-ins.

A lexical AFINN score gives the baseline; fixed keyword sets then override the
category and cap or floor the 0-100 wellness score.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from afinn import Afinn

from crewwell.core.exceptions import ValidationError
from crewwell.utils.numbers import clamp, round_half_up

DEFAULT_MAX_LENGTH = 1000

STRESS_KEYWORDS = (
    "overwhelmed", "exhausted", "burned out", "anxious", "stressed",
    "depressed", "lonely", "isolated", "worried", "scared", "panicked",
    "frustrated", "angry", "irritated", "hopeless", "helpless",
    "tired", "drained", "struggling", "difficult", "hard time",
    "can't cope", "breaking down", "falling apart",
)

HIGH_RISK_KEYWORDS = (
    "suicide", "kill myself", "end it all", "worthless", "no point",
    "give up", "can't go on", "better off dead", "harm myself",
    "self harm", "cutting", "hurt myself",
)

POSITIVE_KEYWORDS = (
    "happy", "joyful", "excited", "grateful", "blessed", "wonderful",
    "amazing", "fantastic", "great", "excellent", "peaceful", "calm",
    "relaxed", "energized", "motivated", "optimistic", "confident",
    "proud", "satisfied", "content", "thankful",
)

_TOKEN_RE = re.compile(r"[a-z0-9']+")


@dataclass(slots=True)
class SentimentAnalysis:
    score: int
    normalized_score: float
    wellness_score: int
    category: str
    tokens: list[str] = field(default_factory=list)
    positive_words: list[str] = field(default_factory=list)
    negative_words: list[str] = field(default_factory=list)


@lru_cache(maxsize=1)
def _lexicon() -> Afinn:
    return Afinn(language="en")


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def validate_mood_input(text: Optional[str], *, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Trim and bound-check free text. Returns the trimmed text.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Mood input is required")
    if len(cleaned) > max_length:
        raise ValidationError(f"Mood input cannot be more than {max_length} characters")
    return cleaned


def categorize(normalized_score: float, *, high_risk: bool, stress: bool, positive: bool) -> str:
    """First match wins: high_risk, stressed, positive, neutral."""
    if high_risk or normalized_score <= -0.8:
        return "high_risk"
    if stress or normalized_score <= -0.3:
        return "stressed"
    if positive or normalized_score >= 0.3:
        return "positive"
    return "neutral"


def wellness_from(normalized_score: float, *, high_risk: bool, stress: bool, positive: bool) -> int:
    wellness = 50 + normalized_score * 50
    if high_risk:
        wellness = min(wellness, 20)
    elif stress:
        wellness = min(wellness, 40)
    elif positive:
        wellness = max(wellness, 70)
    return int(clamp(round_half_up(wellness), 0, 100))


def analyze_sentiment(text: str, *, max_length: int = DEFAULT_MAX_LENGTH) -> SentimentAnalysis:
    """
    Classify a free-text check-in.

    Raises ValidationError for empty text or text over `max_length` characters.
    """
    cleaned = validate_mood_input(text, max_length=max_length)
    lower = cleaned.lower()

    lexicon = _lexicon()
    matched = lexicon.find_all(lower)
    valences = lexicon.scores(lower)
    score = int(sum(valences))
    positive_words = [w for w, v in zip(matched, valences) if v > 0]
    negative_words = [w for w, v in zip(matched, valences) if v < 0]

    normalized = clamp(score / 10, -1.0, 1.0)

    high_risk = _contains_any(lower, HIGH_RISK_KEYWORDS)
    stress = _contains_any(lower, STRESS_KEYWORDS)
    positive = _contains_any(lower, POSITIVE_KEYWORDS)

    return SentimentAnalysis(
        score=score,
        normalized_score=normalized,
        wellness_score=wellness_from(normalized, high_risk=high_risk, stress=stress, positive=positive),
        category=categorize(normalized, high_risk=high_risk, stress=stress, positive=positive),
        tokens=_TOKEN_RE.findall(lower),
        positive_words=positive_words,
        negative_words=negative_words,
    )


def wellness_band(score: int) -> str:
    """
    Display band for a 0-100 wellness score.
    """
    if score >= 70:
        return "good"
    if score >= 50:
        return "fair"
    if score >= 30:
        return "poor"
    return "critical"
