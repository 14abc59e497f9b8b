"""Player, snapshot and summary endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from coursequest.core.state_store import get_export_filename
from coursequest.web.deps import get_tracker, player_to_response
from coursequest.web.schemas import (
    CareerGoalUpdate,
    ImportResponse,
    PlayerResponse,
    SummaryResponse,
)

router = APIRouter(prefix="/api", tags=["state"])


@router.get("/state")
async def get_state() -> dict[str, Any]:
    """Full state snapshot."""
    return get_tracker().state.to_dict()


@router.get("/summary", response_model=SummaryResponse)
async def get_summary() -> SummaryResponse:
    """Dashboard view: player, skills and course progress."""
    return SummaryResponse(**get_tracker().state.summary())


@router.get("/player", response_model=PlayerResponse)
async def get_player() -> PlayerResponse:
    """Player level, exp and skills."""
    return player_to_response(get_tracker().state.player)


@router.put("/player/career-goal", response_model=PlayerResponse)
async def set_career_goal(update: CareerGoalUpdate) -> PlayerResponse:
    """Replace the career goal."""
    tracker = get_tracker()
    tracker.set_career_goal(update.career_goal)
    return player_to_response(tracker.state.player)


@router.get("/export")
async def export_state() -> JSONResponse:
    """Download the full state as a JSON file."""
    return JSONResponse(
        content=get_tracker().state.to_dict(),
        headers={"Content-Disposition": f'attachment; filename="{get_export_filename()}"'},
    )


@router.post("/import", response_model=ImportResponse)
async def import_state(request: Request) -> ImportResponse:
    """Replace the full state with an uploaded JSON document."""
    body = await request.body()
    tracker = get_tracker()

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file format. Please upload a valid JSON file.",
        )

    result = tracker.import_text(text)
    if not result.success or result.state is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.message,
        )

    return ImportResponse(
        success=True,
        message=result.message,
        courses=len(result.state.courses),
        quests=len(result.state.quests),
    )
