"""Pydantic schemas for Web API.

Serialization models for Player, Skill, Course and Quest.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# PLAYER SCHEMAS
# =============================================================================


class SkillResponse(BaseModel):
    """Response for a skill."""

    skill_id: str
    name: str
    icon: str
    effect: str
    level: int
    exp: int


class PlayerResponse(BaseModel):
    """Response for the player."""

    name: str
    level: int
    exp: int
    exp_into_level: int
    next_level_exp: int
    career_goal: str
    skills: list[SkillResponse]


class CareerGoalUpdate(BaseModel):
    """Request body for setting the career goal."""

    career_goal: str = Field(default="", max_length=500)


# =============================================================================
# COURSE SCHEMAS
# =============================================================================


class CourseCreate(BaseModel):
    """Request body for creating a course."""

    name: str = Field(..., min_length=1, max_length=100)
    skill_name: str = Field(default="", max_length=100)
    skill_icon: str = Field(default="Star", max_length=50)
    skill_id: str | None = None


class CourseResponse(BaseModel):
    """Response for a course."""

    id: int
    name: str
    related_skill: str
    total_tasks: int
    progress: int
    completed_quests: int
    total_quests: int


class CourseListResponse(BaseModel):
    """Response for list of courses."""

    courses: list[CourseResponse]
    count: int


class CourseDeleteResponse(BaseModel):
    """Response for a deleted course."""

    course_id: int
    quests_removed: int


# =============================================================================
# QUEST SCHEMAS
# =============================================================================


class QuestTypeResponse(BaseModel):
    """Quest type catalog entry."""

    key: str
    name: str
    icon: str
    base_reward: int


class QuestCreate(BaseModel):
    """Request body for creating a quest."""

    name: str = Field(..., min_length=1, max_length=200)
    course_id: int
    quest_type: str = Field(default="ASSIGNMENT")


class QuestResponse(BaseModel):
    """Response for a quest."""

    id: str
    course_id: int
    name: str
    type: QuestTypeResponse
    reward: int
    completed: bool


class QuestListResponse(BaseModel):
    """Response for list of quests."""

    quests: list[QuestResponse]
    count: int


class QuestActionResponse(BaseModel):
    """Quest plus player after a toggle/complete."""

    quest: QuestResponse
    player: PlayerResponse


# =============================================================================
# SNAPSHOT SCHEMAS
# =============================================================================


class ImportResponse(BaseModel):
    """Response for a snapshot import."""

    success: bool
    message: str
    courses: int = 0
    quests: int = 0


class SummaryResponse(BaseModel):
    """Dashboard view."""

    player: dict[str, Any]
    skills: list[dict[str, Any]]
    courses: list[dict[str, Any]]
    quests_completed: int
    quests_total: int


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
