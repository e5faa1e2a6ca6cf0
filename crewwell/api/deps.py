from uuid import UUID

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from crewwell.core.config import Settings, get_settings
from crewwell.core.security import get_current_user
from crewwell.db.session import get_db
from crewwell.repositories.user_repo import get_user
from crewwell.services.ai import GenerativeTextClient, LLMWellnessAI, WellnessAI
from crewwell.services.questions import QuestionGenerator
from crewwell.services.scoring import ResponseScorer


async def Authed(db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    try:
        user_id = UUID(str(user["user_id"]))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user ID")
    record = await get_user(db, user_id)
    if record is None or not record.is_active:
        raise HTTPException(status_code=404, detail="User not found")
    return {"db": db, "user": record}


async def ManagementAuthed(ctx=Depends(Authed)):
    if ctx["user"].role != "management":
        raise HTTPException(status_code=403, detail="Management access required")
    return ctx


def get_wellness_ai(settings: Settings = Depends(get_settings)) -> WellnessAI:
    # a missing key surfaces as ServiceUnavailableError and is absorbed by the fallback
    return LLMWellnessAI(GenerativeTextClient(settings))


def get_question_generator(ai: WellnessAI = Depends(get_wellness_ai)) -> QuestionGenerator:
    return QuestionGenerator(ai)


def get_response_scorer(ai: WellnessAI = Depends(get_wellness_ai)) -> ResponseScorer:
    return ResponseScorer(ai)
