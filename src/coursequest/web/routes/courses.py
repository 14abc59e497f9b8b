"""Course endpoints."""

from fastapi import APIRouter, HTTPException, status

from coursequest.core.progression import CourseValidationError
from coursequest.web.deps import course_to_response, get_tracker
from coursequest.web.schemas import (
    CourseCreate,
    CourseDeleteResponse,
    CourseListResponse,
    CourseResponse,
)

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("", response_model=CourseListResponse)
async def list_courses() -> CourseListResponse:
    """List all courses with their progress."""
    state = get_tracker().state
    courses = [course_to_response(c, state) for c in state.courses]
    return CourseListResponse(courses=courses, count=len(courses))


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int) -> CourseResponse:
    """Get a specific course by ID."""
    state = get_tracker().state
    course = state.get_course(course_id)

    if course is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course '{course_id}' not found",
        )

    return course_to_response(course, state)


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(course_data: CourseCreate) -> CourseResponse:
    """Create a course (and its default quests)."""
    tracker = get_tracker()

    try:
        course = tracker.add_course(
            name=course_data.name,
            skill_name=course_data.skill_name,
            skill_icon=course_data.skill_icon,
            skill_id=course_data.skill_id,
        )
    except CourseValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return course_to_response(course, tracker.state)


@router.delete("/{course_id}", response_model=CourseDeleteResponse)
async def delete_course(course_id: int) -> CourseDeleteResponse:
    """Delete a course and its quests."""
    tracker = get_tracker()
    removed = tracker.delete_course(course_id)

    if removed is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course '{course_id}' not found",
        )

    return CourseDeleteResponse(course_id=course_id, quests_removed=removed)
