from __future__ import annotations

import logging
from typing import Optional, Sequence

from crewwell.core.exceptions import ServiceUnavailableError
from crewwell.services.ai import QUESTION_COUNT, EmployeeProfile, FallbackWellnessAI, WellnessAI

log = logging.getLogger(__name__)

RECENT_SCORE_LIMIT = 7


def scale_recent_scores(overall_scores: Sequence[int]) -> list[float]:
    """
    Up to the 7 most recent 0-100 overall scores (newest first) on a 1-5 scale.
    """
    return [score / 20 for score in list(overall_scores)[:RECENT_SCORE_LIMIT]]


def _well_formed(questions: object) -> bool:
    return (
        isinstance(questions, list)
        and len(questions) == QUESTION_COUNT
        and all(isinstance(q, str) and q.strip() for q in questions)
    )


class QuestionGenerator:
    """
    Personalised daily questions. Always returns exactly five; a generation outage
    never blocks a check-in.
    """

    def __init__(self, ai: WellnessAI, fallback: Optional[WellnessAI] = None):
        self.ai = ai
        self.fallback = fallback or FallbackWellnessAI()

    async def generate(self, profile: EmployeeProfile, recent_overall_scores: Sequence[int] = ()) -> list[str]:
        recent = scale_recent_scores(recent_overall_scores)
        try:
            questions = await self.ai.generate_questions(profile, recent)
            if _well_formed(questions):
                log.info("Generated %s questions for user %s", len(questions), profile.id)
                return questions
            log.warning("Malformed question set for user %s, using fallback", profile.id)
        except ServiceUnavailableError as e:
            log.warning("Question generation unavailable for user %s, using fallback: %s", profile.id, e.message)
        except Exception:
            log.exception("Unexpected question generation failure for user %s, using fallback", profile.id)
        return await self.fallback.generate_questions(profile, recent)
