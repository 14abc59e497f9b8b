"""Quest endpoints."""

from fastapi import APIRouter, HTTPException, status

from coursequest.core.models import QUEST_TYPES
from coursequest.core.progression import QuestValidationError
from coursequest.web.deps import get_tracker, player_to_response, quest_to_response
from coursequest.web.schemas import (
    QuestActionResponse,
    QuestCreate,
    QuestListResponse,
    QuestResponse,
    QuestTypeResponse,
)

router = APIRouter(prefix="/api/quests", tags=["quests"])


def _not_found(quest_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Quest '{quest_id}' not found",
    )


@router.get("/types", response_model=list[QuestTypeResponse])
async def list_quest_types() -> list[QuestTypeResponse]:
    """Static quest type catalog."""
    return [
        QuestTypeResponse(key=t.key, name=t.name, icon=t.icon, base_reward=t.base_reward)
        for t in QUEST_TYPES.values()
    ]


@router.get("", response_model=QuestListResponse)
async def list_quests(course_id: int | None = None) -> QuestListResponse:
    """List quests, optionally for one course."""
    state = get_tracker().state
    quests = state.quests if course_id is None else state.quests_for_course(course_id)
    return QuestListResponse(
        quests=[quest_to_response(q) for q in quests],
        count=len(quests),
    )


@router.post("", response_model=QuestResponse, status_code=status.HTTP_201_CREATED)
async def create_quest(quest_data: QuestCreate) -> QuestResponse:
    """Add a custom quest to a course."""
    tracker = get_tracker()

    if tracker.state.get_course(quest_data.course_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course '{quest_data.course_id}' not found",
        )

    try:
        quest = tracker.add_quest(quest_data.name, quest_data.course_id, quest_data.quest_type)
    except QuestValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return quest_to_response(quest)


@router.post("/{quest_id}/toggle", response_model=QuestActionResponse)
async def toggle_quest(quest_id: str) -> QuestActionResponse:
    """Toggle completion, granting or revoking the reward."""
    tracker = get_tracker()
    quest = tracker.toggle_quest(quest_id)

    if quest is None:
        raise _not_found(quest_id)

    return QuestActionResponse(
        quest=quest_to_response(quest),
        player=player_to_response(tracker.state.player),
    )


@router.post("/{quest_id}/complete", response_model=QuestActionResponse)
async def complete_quest(quest_id: str) -> QuestActionResponse:
    """Complete a quest once."""
    tracker = get_tracker()
    existing = tracker.state.get_quest(quest_id)

    if existing is None:
        raise _not_found(quest_id)

    if existing.completed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Quest '{quest_id}' already completed",
        )

    quest = tracker.complete_quest(quest_id)
    return QuestActionResponse(
        quest=quest_to_response(quest),
        player=player_to_response(tracker.state.player),
    )


@router.delete("/{quest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quest(quest_id: str) -> None:
    """Delete a quest by ID."""
    tracker = get_tracker()

    if not tracker.delete_quest(quest_id):
        raise _not_found(quest_id)
