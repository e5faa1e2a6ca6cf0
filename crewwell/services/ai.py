from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_fixed

from crewwell.core.config import Settings
from crewwell.core.exceptions import ServiceUnavailableError
from crewwell.utils.numbers import clamp, mean, round_half_up

log = logging.getLogger(__name__)

QUESTION_COUNT = 5

FALLBACK_INSIGHT = "Unable to generate detailed insights at this time."

DEFAULT_QUESTIONS = (
    "How are you feeling physically today?",
    "What's your energy level like right now?",
    "How would you rate your stress level today?",
    "How satisfied are you with your work today?",
    "Is there anything specific worrying you today?",
)

VESSEL_QUESTIONS = {
    3: "How are you managing being away from home?",
    4: "Are you comfortable with the safety conditions on board?",
}

SCORE_RE = re.compile(r"SCORE:\s*(\d+)", re.IGNORECASE)


@dataclass(slots=True)
class EmployeeProfile:
    id: str
    name: str
    role: str
    department: str
    vessel: Optional[str] = None


@dataclass(slots=True)
class QAPair:
    question: str
    answer: str


@dataclass(slots=True)
class ScoreResult:
    score: int
    insights: list[str] = field(default_factory=list)
    used_fallback: bool = False


class WellnessAI(Protocol):
    """Generative backend for the structured assessment path."""

    async def generate_questions(self, profile: EmployeeProfile, recent_scores: Sequence[float]) -> list[str]: ...

    async def score_responses(self, responses: Sequence[QAPair], profile: EmployeeProfile) -> ScoreResult: ...


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429 or exc.response.status_code >= 500
    return False


class GenerativeTextClient:
    """
    Thin chat-completions client. Every failure surfaces as ServiceUnavailableError.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _timeout(self) -> httpx.Timeout:
        total = self.settings.AI_TIMEOUT_SECONDS
        return httpx.Timeout(total, connect=min(10.0, total))

    async def _post(self, prompt: str, max_tokens: int) -> str:
        req = {
            "model": self.settings.OPENAI_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.settings.OPENAI_TEMPERATURE,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.settings.OPENAI_API_KEY}"}
        url = f"{self.settings.OPENAI_BASE_URL.rstrip('/')}/chat/completions"
        async with httpx.AsyncClient(timeout=self._timeout()) as client:
            r = await client.post(url, json=req, headers=headers)
            r.raise_for_status()
            data = r.json()
        content = data["choices"][0]["message"]["content"]
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Empty completion content")
        return content

    async def generate(self, prompt: str, max_tokens: int = 1000) -> str:
        if not self.settings.OPENAI_API_KEY:
            raise ServiceUnavailableError("OPENAI_API_KEY is not configured")

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max(1, self.settings.AI_MAX_ATTEMPTS)),
                wait=wait_fixed(self.settings.AI_RETRY_WAIT_SECONDS),
                retry=retry_if_exception(_is_transient),
                reraise=True,
            ):
                with attempt:
                    return await self._post(prompt, max_tokens)
        except httpx.TimeoutException as e:
            raise ServiceUnavailableError(f"Generative service timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise ServiceUnavailableError(
                f"Generative service HTTP error: {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            raise ServiceUnavailableError(f"Generative service connection error: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ServiceUnavailableError(f"Malformed generative service response: {e}") from e
        raise ServiceUnavailableError("Generative service returned no result")


def build_questions_prompt(profile: EmployeeProfile, recent_scores: Sequence[float]) -> str:
    avg = mean(recent_scores)
    recent = f"{avg:.1f}/5" if avg else "No previous data"
    return f"""You are a wellness expert generating personalized daily check-in questions for a maritime employee.

Employee Details:
- Name: {profile.name}
- Role: {profile.role}
- Department: {profile.department}
- Vessel: {profile.vessel or 'Shore-based'}
- Recent wellness average: {recent}

Context:
- Maritime work environment with unique challenges (isolation, long shifts, weather conditions)
- Focus on mental health, physical wellbeing, work-life balance, and job satisfaction
- Questions should be empathetic and relevant to their specific role

Generate exactly {QUESTION_COUNT} personalized wellness questions that:
1. Are relevant to maritime work environment
2. Vary based on their role (officer vs crew vs shore staff)
3. Include mix of mental health, physical health, job satisfaction, and social connection
4. Are conversational and easy to answer
5. Help identify stress, burnout, or wellbeing concerns
6. Consider their vessel type and department

Format: Return only the questions, one per line, without numbering or bullet points."""


def build_scoring_prompt(responses: Sequence[QAPair], profile: EmployeeProfile) -> str:
    answered = "\n\n".join(
        f"{i}. Q: {r.question}\n   A: {r.answer}" for i, r in enumerate(responses, start=1)
    )
    return f"""You are analyzing wellness check-in responses from a maritime employee.

Employee: {profile.name} ({profile.role} - {profile.department}, {profile.vessel or 'Shore-based'})

Responses:
{answered}

Please provide:
1. A wellness score from 0-100 (where 100 is excellent wellbeing)
2. 2-3 brief insights about their current state
3. Any red flags or areas of concern

Consider:
- Maritime work challenges (isolation, long hours, physical demands)
- Signs of stress, burnout, or mental health concerns
- Positive indicators of wellbeing
- Work-life balance issues

Format your response as:
SCORE: [number]
INSIGHTS:
- [insight 1]
- [insight 2]
- [insight 3 if applicable]"""


def parse_questions(text: str) -> list[str]:
    """
    One question per non-blank line, first five kept.
    Fewer than five is a malformed response; it is never padded.
    """
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    if len(lines) < QUESTION_COUNT:
        raise ServiceUnavailableError(f"Expected {QUESTION_COUNT} questions, got {len(lines)}")
    return lines[:QUESTION_COUNT]


def parse_score(text: str) -> ScoreResult:
    match = SCORE_RE.search(text)
    score = int(match.group(1)) if match else 50

    insights: list[str] = []
    _, marker, section = text.partition("INSIGHTS:")
    if marker:
        for line in section.split("\n"):
            line = line.strip()
            if line.startswith("-"):
                insights.append(line[1:].strip())

    return ScoreResult(score=int(clamp(score, 0, 100)), insights=insights)


class LLMWellnessAI:
    def __init__(self, client: GenerativeTextClient):
        self.client = client

    async def generate_questions(self, profile: EmployeeProfile, recent_scores: Sequence[float]) -> list[str]:
        text = await self.client.generate(build_questions_prompt(profile, recent_scores), max_tokens=1000)
        return parse_questions(text)

    async def score_responses(self, responses: Sequence[QAPair], profile: EmployeeProfile) -> ScoreResult:
        text = await self.client.generate(build_scoring_prompt(responses, profile), max_tokens=500)
        return parse_score(text)


def default_questions(profile: EmployeeProfile) -> list[str]:
    questions = list(DEFAULT_QUESTIONS)
    if profile.vessel:
        for index, question in VESSEL_QUESTIONS.items():
            questions[index] = question
    return questions


class FallbackWellnessAI:
    """Deterministic stand-in used whenever the generative service is unavailable."""

    async def generate_questions(self, profile: EmployeeProfile, recent_scores: Sequence[float]) -> list[str]:
        return default_questions(profile)

    async def score_responses(self, responses: Sequence[QAPair], profile: EmployeeProfile) -> ScoreResult:
        avg = mean(70 if len(r.answer) > 20 else 40 for r in responses)
        return ScoreResult(
            score=round_half_up(avg) if avg is not None else 50,
            insights=[FALLBACK_INSIGHT],
            used_fallback=True,
        )
