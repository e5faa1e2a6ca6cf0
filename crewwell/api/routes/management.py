from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from crewwell.api.deps import ManagementAuthed
from crewwell.schemas.dashboard import DashboardOut
from crewwell.services.reporting import management_dashboard

router = APIRouter(prefix="/api/management", tags=["management"])


@router.get("/dashboard", response_model=DashboardOut)
async def dashboard(timeframe: int = Query(7, ge=1, le=365), ctx=Depends(ManagementAuthed)):
    snapshot = await management_dashboard(ctx["db"], timeframe_days=timeframe)
    data = asdict(snapshot)
    return {
        "employees": data["employees"],
        "stats": data["stats"],
        "alerts": data["alerts"],
        "timeframe": timeframe,
    }
