"""Shared helpers for route handlers."""

from coursequest.config.app_config import get_data_dir, load_app_config
from coursequest.core.models import Course, Player, Quest
from coursequest.core.progression import GameState
from coursequest.core.tracker import Tracker
from coursequest.web.schemas import (
    CourseResponse,
    PlayerResponse,
    QuestResponse,
    QuestTypeResponse,
    SkillResponse,
)


def get_tracker() -> Tracker:
    """Load the tracker state from disk."""
    config = load_app_config()
    return Tracker(get_data_dir(), player_name=config.player.default_name)


def player_to_response(player: Player) -> PlayerResponse:
    return PlayerResponse(
        name=player.name,
        level=player.level,
        exp=player.exp,
        exp_into_level=player.exp_into_level,
        next_level_exp=player.next_level_exp,
        career_goal=player.career_goal,
        skills=[
            SkillResponse(
                skill_id=skill.skill_id,
                name=skill.name,
                icon=skill.icon,
                effect=skill.effect,
                level=skill.level,
                exp=skill.exp,
            )
            for skill in player.skills.values()
        ],
    )


def course_to_response(course: Course, state: GameState) -> CourseResponse:
    progress = state.course_progress(course.id)
    return CourseResponse(
        id=course.id,
        name=course.name,
        related_skill=course.related_skill,
        total_tasks=course.total_tasks,
        progress=course.progress,
        completed_quests=progress.completed,
        total_quests=progress.total,
    )


def quest_to_response(quest: Quest) -> QuestResponse:
    return QuestResponse(
        id=quest.id,
        course_id=quest.course_id,
        name=quest.name,
        type=QuestTypeResponse(
            key=quest.type.key,
            name=quest.type.name,
            icon=quest.type.icon,
            base_reward=quest.type.base_reward,
        ),
        reward=quest.reward,
        completed=quest.completed,
    )
