"""Progression model: the reward state-transition rules.

Responsibilities:
- Own the {player, courses, quests} state value
- Seed the default quests for each course
- Apply quest completion rewards to the player and to skills
- Keep course progress counters and cascades consistent

All transitions mutate the single GameState instance they are called on.
Unknown ids are a silent no-op for toggle/complete/delete: the caller learns
about it from the return value.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursequest.core.models import (
    QUEST_TYPES,
    Course,
    Player,
    Quest,
    QuestType,
    Skill,
    get_quest_type,
)
from coursequest.core.seed import DEFAULT_PLAYER_NAME, default_courses, default_player

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

STATE_SCHEMA = "game_state_v1"

# Share of a quest reward granted to skills
RELATED_SKILL_SHARE = 0.5
TRICKLE_SKILL_SHARE = 0.1
TOGGLE_SKILL_SHARE = 0.1

# (quest type key, id tag, name suffix) for auto-generated quests
SEEDED_QUESTS = [
    ("ASSIGNMENT", "assignment1", "Assignment 1"),
    ("MIDTERM", "midterm", "Midterm"),
    ("FINAL", "final", "Final Exam"),
]


# =============================================================================
# ERRORS
# =============================================================================


class ProgressionError(Exception):
    """Base error for rejected transitions."""

    pass


class QuestValidationError(ProgressionError):
    """Error validating a new quest."""

    pass


class CourseValidationError(ProgressionError):
    """Error validating a new course."""

    pass


# =============================================================================
# HELPERS
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _seeded_quests_for(course: Course) -> list[Quest]:
    quests = []
    for type_key, tag, suffix in SEEDED_QUESTS:
        quest_type = QUEST_TYPES[type_key]
        quests.append(
            Quest(
                id=f"{course.id}-{tag}",
                course_id=course.id,
                name=f"{course.name} {suffix}",
                type=quest_type,
                reward=quest_type.base_reward,
                completed=False,
            )
        )
    return quests


@dataclass
class CourseProgress:
    """Derived completion counts for one course."""

    course_id: int
    completed: int
    total: int

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.completed / self.total


# =============================================================================
# GAME STATE
# =============================================================================


@dataclass
class GameState:
    """Authoritative tracker state with its transition operations."""

    player: Player = field(default_factory=Player)
    courses: list[Course] = field(default_factory=list)
    quests: list[Quest] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_course(self, course_id: int) -> Course | None:
        """Get course by ID."""
        for course in self.courses:
            if course.id == course_id:
                return course
        return None

    def get_quest(self, quest_id: str) -> Quest | None:
        """Get quest by ID."""
        for quest in self.quests:
            if quest.id == quest_id:
                return quest
        return None

    def get_skill(self, skill_id: str) -> Skill | None:
        return self.player.skills.get(skill_id)

    def quests_for_course(self, course_id: int) -> list[Quest]:
        return [q for q in self.quests if q.course_id == course_id]

    def generate_next_course_id(self) -> int:
        return max((c.id for c in self.courses), default=0) + 1

    def generate_next_skill_id(self) -> str:
        """Generate next available skill ID (skill01, skill02, ...)."""
        existing_nums = []
        for skill_id in self.player.skills:
            if skill_id.startswith("skill"):
                try:
                    existing_nums.append(int(skill_id[5:]))
                except ValueError:
                    pass
        next_num = max(existing_nums, default=0) + 1
        return f"skill{next_num:02d}"

    def generate_quest_id(self) -> str:
        """Generate a unique id for a user-created quest."""
        base = f"custom-{int(time.time() * 1000)}"
        quest_id = base
        suffix = 1
        while self.get_quest(quest_id) is not None:
            suffix += 1
            quest_id = f"{base}-{suffix}"
        return quest_id

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def initialize_quests(self) -> int:
        """Generate the default three quests per course.

        Only runs while the quest collection is empty.

        Returns:
            Number of quests created (0 when quests already exist)
        """
        if self.quests:
            return 0

        for course in self.courses:
            self.quests.extend(_seeded_quests_for(course))

        logger.info("quests_initialized", count=len(self.quests))
        return len(self.quests)

    def _revoke_skill_grants(self, quest: Quest, course: Course) -> None:
        """Take back the skill exp the quest's completion granted.

        Completed quests imported without a grant record fall back to the
        toggle share on the course's skill.
        """
        grants = quest.skill_grants or {
            course.related_skill: round_half_up(quest.reward * TOGGLE_SKILL_SHARE)
        }
        for skill_id, amount in grants.items():
            skill = self.get_skill(skill_id)
            if skill is not None:
                skill.add_exp(-amount)

    def toggle_quest_completion(self, quest_id: str) -> Quest | None:
        """Flip a quest's completed flag, granting or revoking its reward.

        Completing adds the reward to the player and a tenth of it to the
        course's skill. Un-completing removes the reward from the player and
        takes back whatever skill exp the completion granted, including the
        larger amounts from complete_quest (all clamped at 0).
        Quests whose course was deleted only affect the player.

        Args:
            quest_id: Quest identifier

        Returns:
            The toggled quest, or None if not found
        """
        quest = self.get_quest(quest_id)
        if quest is None:
            logger.debug("toggle_quest_not_found", quest_id=quest_id)
            return None

        quest.completed = not quest.completed
        course = self.get_course(quest.course_id)

        if quest.completed:
            self.player.add_exp(quest.reward)
            quest.skill_grants = {}
            if course is not None:
                skill = self.get_skill(course.related_skill)
                if skill is not None:
                    gain = round_half_up(quest.reward * TOGGLE_SKILL_SHARE)
                    skill.add_exp(gain)
                    quest.skill_grants = {course.related_skill: gain}
                course.progress = min(course.total_tasks, course.progress + 1)
        else:
            self.player.add_exp(-quest.reward)
            if course is not None:
                self._revoke_skill_grants(quest, course)
                course.progress = max(0, course.progress - 1)
            quest.skill_grants = {}

        logger.info(
            "quest_toggled",
            quest_id=quest_id,
            completed=quest.completed,
            player_exp=self.player.exp,
            player_level=self.player.level,
        )
        return quest

    def complete_quest(self, quest_id: str) -> Quest | None:
        """Complete a quest once, granting its reward to the player and skills.

        The course's skill gains half the reward; every other skill gains a
        tenth as general study.

        Args:
            quest_id: Quest identifier

        Returns:
            The completed quest, or None if missing or already completed
        """
        quest = self.get_quest(quest_id)
        if quest is None:
            logger.debug("complete_quest_not_found", quest_id=quest_id)
            return None
        if quest.completed:
            logger.debug("complete_quest_already_completed", quest_id=quest_id)
            return None

        quest.completed = True
        self.player.add_exp(quest.reward)

        course = self.get_course(quest.course_id)
        related_key = course.related_skill if course is not None else None

        related_gain = round_half_up(quest.reward * RELATED_SKILL_SHARE)
        trickle_gain = round_half_up(quest.reward * TRICKLE_SKILL_SHARE)
        quest.skill_grants = {}
        for key, skill in self.player.skills.items():
            gain = related_gain if key == related_key else trickle_gain
            skill.add_exp(gain)
            quest.skill_grants[key] = gain

        if course is not None:
            course.progress = min(course.total_tasks, course.progress + 1)

        logger.info(
            "quest_completed",
            quest_id=quest_id,
            reward=quest.reward,
            player_exp=self.player.exp,
            player_level=self.player.level,
        )
        return quest

    def delete_quest(self, quest_id: str) -> bool:
        """Remove a quest. Exp already granted is kept.

        The owning course stops counting the quest in total_tasks, and in
        progress when it was completed.

        Returns:
            True if removed
        """
        quest = self.get_quest(quest_id)
        if quest is None:
            return False

        self.quests.remove(quest)

        course = self.get_course(quest.course_id)
        if course is not None:
            course.total_tasks = max(0, course.total_tasks - 1)
            if quest.completed:
                course.progress = max(0, course.progress - 1)
            course.progress = min(course.progress, course.total_tasks)

        logger.info("quest_deleted", quest_id=quest_id, completed=quest.completed)
        return True

    def add_course(
        self,
        name: str,
        skill_name: str = "",
        skill_icon: str = "Star",
        skill_id: str | None = None,
    ) -> Course:
        """Add a course, registering or sharing its skill.

        The new course gets its three default quests right away.

        Args:
            name: Course name (e.g., "CS2360")
            skill_name: Display name for a new skill
            skill_icon: Presentation icon key for a new skill
            skill_id: Existing skill to share instead of creating one

        Returns:
            The newly created Course

        Raises:
            CourseValidationError: If name is empty, skill_id is unknown,
                or no skill name is given for a new skill
        """
        name = name.strip()
        if not name:
            raise CourseValidationError("Course name must not be empty")

        if skill_id is not None:
            if skill_id not in self.player.skills:
                raise CourseValidationError(f"Skill not found: {skill_id}")
            related = skill_id
        else:
            skill_name = skill_name.strip()
            if not skill_name:
                raise CourseValidationError("Skill name must not be empty")
            related = self.generate_next_skill_id()
            self.player.skills[related] = Skill(
                skill_id=related,
                name=skill_name,
                icon=skill_icon or "Star",
                effect=f"Enhances skills in {name}",
            )

        course = Course(
            id=self.generate_next_course_id(),
            name=name,
            related_skill=related,
            total_tasks=len(SEEDED_QUESTS),
        )
        self.courses.append(course)
        self.quests.extend(_seeded_quests_for(course))

        logger.info("course_added", course_id=course.id, skill_id=related)
        return course

    def delete_course(self, course_id: int) -> int | None:
        """Remove a course and cascade to its quests.

        Skills are kept since other courses may share them.

        Returns:
            Number of quests removed, or None if the course does not exist
        """
        course = self.get_course(course_id)
        if course is None:
            return None

        self.courses.remove(course)
        before = len(self.quests)
        self.quests = [q for q in self.quests if q.course_id != course_id]
        removed = before - len(self.quests)

        logger.info("course_deleted", course_id=course_id, quests_removed=removed)
        return removed

    def add_quest(self, name: str, course_id: int, quest_type_key: str) -> Quest:
        """Add a custom quest to an existing course.

        Raises:
            QuestValidationError: If name is empty, the course does not
                exist, or the quest type key is not in the catalog
        """
        name = name.strip()
        if not name:
            raise QuestValidationError("Quest name must not be empty")

        course = self.get_course(course_id)
        if course is None:
            raise QuestValidationError(f"Course not found: {course_id}")

        quest_type: QuestType | None = get_quest_type(quest_type_key)
        if quest_type is None:
            raise QuestValidationError(
                f"Unknown quest type: {quest_type_key} "
                f"(expected one of {', '.join(QUEST_TYPES)})"
            )

        quest = Quest(
            id=self.generate_quest_id(),
            course_id=course_id,
            name=name,
            type=quest_type,
            reward=quest_type.base_reward,
            completed=False,
        )
        self.quests.append(quest)
        course.total_tasks += 1

        logger.info("quest_added", quest_id=quest.id, course_id=course_id, type=quest_type.key)
        return quest

    def set_career_goal(self, text: str) -> None:
        self.player.career_goal = text

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def course_progress(self, course_id: int) -> CourseProgress:
        """Count completed vs total quests for a course."""
        quests = self.quests_for_course(course_id)
        completed = sum(1 for q in quests if q.completed)
        return CourseProgress(course_id=course_id, completed=completed, total=len(quests))

    def summary(self) -> dict[str, Any]:
        """Dashboard view of the state."""
        courses = []
        for course in self.courses:
            progress = self.course_progress(course.id)
            skill = self.get_skill(course.related_skill)
            courses.append(
                {
                    "id": course.id,
                    "name": course.name,
                    "skill": skill.name if skill else None,
                    "completed": progress.completed,
                    "total": progress.total,
                    "progress": course.progress,
                    "total_tasks": course.total_tasks,
                }
            )

        return {
            "player": {
                "name": self.player.name,
                "level": self.player.level,
                "exp": self.player.exp,
                "exp_into_level": self.player.exp_into_level,
                "next_level_exp": self.player.next_level_exp,
                "career_goal": self.player.career_goal,
            },
            "skills": [
                {
                    "skill_id": skill.skill_id,
                    "name": skill.name,
                    "icon": skill.icon,
                    "level": skill.level,
                    "exp": skill.exp,
                }
                for skill in self.player.skills.values()
            ],
            "courses": courses,
            "quests_completed": sum(1 for q in self.quests if q.completed),
            "quests_total": len(self.quests),
        }

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "$schema": STATE_SCHEMA,
            "player": self.player.to_dict(),
            "courses": [c.to_dict() for c in self.courses],
            "quests": [q.to_dict() for q in self.quests],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        """Rebuild a state from its snapshot dictionary.

        JSON exported by the browser tracker embeds a skill object in each
        course; those skills move into player.skills under generated ids.

        Raises:
            KeyError, TypeError, ValueError: If the data does not describe
                a consistent game state
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        if "player" not in data or "courses" not in data:
            raise KeyError("snapshot must contain 'player' and 'courses'")

        state = cls(player=Player.from_dict(data["player"]))

        migrated: list[Course] = []
        for c_data in data["courses"]:
            related = c_data["relatedSkill"]
            if isinstance(related, dict):
                skill_id = state.generate_next_skill_id()
                state.player.skills[skill_id] = Skill.from_dict(related, skill_id=skill_id)
                course = Course.from_dict({**c_data, "relatedSkill": skill_id})
                migrated.append(course)
            else:
                course = Course.from_dict(c_data)
            state.courses.append(course)

        state.quests = [Quest.from_dict(q) for q in data.get("quests", [])]

        for course in migrated:
            quests = state.quests_for_course(course.id)
            course.total_tasks = len(quests) or len(SEEDED_QUESTS)
            course.progress = sum(1 for q in quests if q.completed)

        state._check_consistency()
        if migrated:
            logger.info("embedded_skills_migrated", courses=len(migrated))
        return state

    def _check_consistency(self) -> None:
        """Raise ValueError on duplicate ids or dangling skill references."""
        course_ids = [c.id for c in self.courses]
        if len(course_ids) != len(set(course_ids)):
            raise ValueError("duplicate course ids")

        quest_ids = [q.id for q in self.quests]
        if len(quest_ids) != len(set(quest_ids)):
            raise ValueError("duplicate quest ids")

        for course in self.courses:
            if course.related_skill not in self.player.skills:
                raise ValueError(
                    f"course {course.id} references unknown skill {course.related_skill!r}"
                )


def create_default_game_state(player_name: str = DEFAULT_PLAYER_NAME) -> GameState:
    """Create a fresh state: default player, three courses, no quests."""
    return GameState(player=default_player(player_name), courses=default_courses())
