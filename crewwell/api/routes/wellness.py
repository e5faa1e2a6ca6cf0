from dataclasses import asdict
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from crewwell.api.deps import Authed, ManagementAuthed, get_question_generator, get_response_scorer
from crewwell.core.config import Settings, get_settings
from crewwell.schemas.wellness import AssessmentOut, AssessmentSubmit, HistoryItem, HistoryOut, QuestionsOut, TeamOut
from crewwell.services.ai import QAPair
from crewwell.services.checkin import issue_questions, submit_assessment
from crewwell.services.questions import QuestionGenerator
from crewwell.services.reporting import team_wellness, wellness_history
from crewwell.services.scoring import ResponseScorer

router = APIRouter(prefix="/api/wellness", tags=["wellness"])


@router.get("/questions", response_model=QuestionsOut)
async def questions(ctx=Depends(Authed), generator: QuestionGenerator = Depends(get_question_generator)):
    issued = await issue_questions(ctx["db"], user=ctx["user"], generator=generator)
    return {
        "questions": issued.questions,
        "check_id": issued.assessment.id,
        "already_completed": issued.already_completed,
    }


@router.post("/submit", response_model=AssessmentOut)
async def submit(
    payload: AssessmentSubmit,
    ctx=Depends(Authed),
    scorer: ResponseScorer = Depends(get_response_scorer),
    settings: Settings = Depends(get_settings),
):
    result = await submit_assessment(
        ctx["db"],
        user=ctx["user"],
        check_id=payload.check_id,
        responses=[QAPair(question=r.question, answer=r.answer) for r in payload.responses],
        scorer=scorer,
        mood=payload.mood,
        stress_level=payload.stress_level,
        energy_level=payload.energy_level,
        work_satisfaction=payload.work_satisfaction,
        max_length=settings.CHECKIN_MAX_LENGTH,
    )
    return {
        "message": "Wellness check completed successfully",
        "wellness_score": result.score,
        "insights": result.insights,
        "check_id": result.assessment.id,
        "breakdown": {
            "mood": payload.mood,
            "stress_level": payload.stress_level,
            "energy_level": payload.energy_level,
            "work_satisfaction": payload.work_satisfaction,
            "response_scores": result.response_scores,
        },
    }


@router.get("/history", response_model=HistoryOut)
async def history(
    days: int = Query(30, ge=1, le=365),
    limit: int = Query(50, ge=1, le=500),
    user_id: Optional[UUID] = None,
    ctx=Depends(Authed),
):
    user = ctx["user"]
    target = user.id
    if user_id is not None and user_id != user.id:
        if user.role != "management":
            raise HTTPException(status_code=403, detail="Management access required")
        target = user_id

    report = await wellness_history(ctx["db"], target, days=days, limit=limit)
    return {
        "history": [HistoryItem.model_validate(a) for a in report.history],
        "statistics": asdict(report.statistics),
        "insights": report.insights,
    }


@router.get("/team", response_model=TeamOut)
async def team(
    days: int = Query(7, ge=1, le=365),
    selected_date: Optional[date] = Query(None, alias="date"),
    vessel: Optional[str] = None,
    department: Optional[str] = None,
    ctx=Depends(ManagementAuthed),
):
    report = await team_wellness(ctx["db"], days=days, selected=selected_date, vessel=vessel, department=department)
    return asdict(report)
