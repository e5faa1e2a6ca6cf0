from fastapi import APIRouter, Depends, Query

from crewwell.api.deps import Authed
from crewwell.core.config import Settings, get_settings
from crewwell.repositories import checkin_repo
from crewwell.schemas.checkin import CheckinCreate, CheckinHistoryOut, CheckinOut
from crewwell.services.checkin import submit_quick_checkin
from crewwell.services.sentiment import wellness_band
from crewwell.utils.time import day_window

router = APIRouter(prefix="/api/checkins", tags=["checkins"])


def _summary(ci):
    return {
        "id": ci.id,
        "date": ci.date,
        "wellness_score": ci.wellness_score,
        "mood_category": ci.mood_category,
        "sentiment_score": ci.sentiment_score,
    }


@router.post("", response_model=CheckinOut, status_code=201)
async def create(payload: CheckinCreate, ctx=Depends(Authed), settings: Settings = Depends(get_settings)):
    result = await submit_quick_checkin(
        ctx["db"],
        user_id=ctx["user"].id,
        mood_input=payload.mood_input,
        input_type=payload.input_type,
        max_length=settings.CHECKIN_MAX_LENGTH,
    )
    a = result.analysis
    return {
        "message": "Check-in submitted successfully",
        "check_in": _summary(result.checkin),
        "analysis": {
            "category": a.category,
            "wellness_score": a.wellness_score,
            "wellness_band": wellness_band(a.wellness_score),
            "positive_words": a.positive_words,
            "negative_words": a.negative_words,
        },
    }


@router.get("", response_model=CheckinHistoryOut)
async def history(
    limit: int = Query(30, ge=1, le=200),
    offset: int = Query(0, ge=0),
    ctx=Depends(Authed),
):
    db = ctx["db"]
    uid = ctx["user"].id
    items = await checkin_repo.list_for_user(db, uid, limit=limit, offset=offset)
    start, end = day_window()
    today = await checkin_repo.find_by_user_and_day_window(db, uid, start, end)
    return {
        "check_ins": [{**_summary(ci), "mood_input": ci.mood_input} for ci in items],
        "has_checked_in_today": today is not None,
        "today_check_in": _summary(today) if today else None,
    }
