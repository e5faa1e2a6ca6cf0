from __future__ import annotations

import logging
from typing import Optional, Sequence

from crewwell.core.exceptions import ServiceUnavailableError, ValidationError
from crewwell.services.ai import EmployeeProfile, FallbackWellnessAI, QAPair, ScoreResult, WellnessAI
from crewwell.utils.numbers import clamp, round_half_up

log = logging.getLogger(__name__)

ANSWER_POSITIVE_WORDS = ("good", "great", "excellent", "fine", "well", "positive", "happy", "satisfied")
ANSWER_NEGATIVE_WORDS = ("bad", "terrible", "awful", "stressed", "tired", "overwhelmed", "difficult")


def score_answer(answer: str) -> int:
    """
    1-5 score for a single answer from word presence and length.
    Used for the stored per-response breakdown, not the overall score.
    """
    lower = answer.lower()
    positive = sum(1 for word in ANSWER_POSITIVE_WORDS if word in lower)
    negative = sum(1 for word in ANSWER_NEGATIVE_WORDS if word in lower)

    score: float = 3
    if positive > negative:
        score = min(5, 3 + positive)
    elif negative > positive:
        score = max(1, 3 - negative)

    if len(answer) > 50:
        score = min(5, score + 0.5)
    if len(answer) < 10:
        score = max(1, score - 0.5)
    return int(clamp(round_half_up(score), 1, 5))


def score_answers(responses: Sequence[QAPair]) -> list[dict]:
    return [
        {"question": r.question, "answer": r.answer, "score": score_answer(r.answer)}
        for r in responses
    ]


class ResponseScorer:
    """Overall 0-100 score plus insights for a completed assessment."""

    def __init__(self, ai: WellnessAI, fallback: Optional[WellnessAI] = None):
        self.ai = ai
        self.fallback = fallback or FallbackWellnessAI()

    async def score(self, responses: Sequence[QAPair], profile: EmployeeProfile) -> ScoreResult:
        if not responses:
            raise ValidationError("At least one response is required")

        try:
            result = await self.ai.score_responses(responses, profile)
            result.score = int(clamp(result.score, 0, 100))
            return result
        except ServiceUnavailableError as e:
            log.warning("Response scoring unavailable for user %s, using fallback: %s", profile.id, e.message)
        except Exception:
            log.exception("Unexpected response scoring failure for user %s, using fallback", profile.id)
        return await self.fallback.score_responses(responses, profile)
