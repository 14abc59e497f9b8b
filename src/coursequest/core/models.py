"""Domain entities for the coursework tracker.

Entities:
- Skill: progression track shared by one or more courses
- Player: experience accumulator plus the skill dictionary
- Course: container of quests pointing at one skill
- Quest: gradable unit of coursework carrying an experience reward

Levels are never stored: they are derived from exp on every read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# CONSTANTS
# =============================================================================

PLAYER_LEVEL_DIVISOR = 100
SKILL_LEVEL_DIVISOR = 50


def level_for_exp(exp: int, divisor: int) -> int:
    """Derive a level from accumulated exp (level 1 at 0 exp)."""
    return max(0, exp) // divisor + 1


# =============================================================================
# QUEST TYPE CATALOG
# =============================================================================


@dataclass(frozen=True)
class QuestType:
    """Static quest type definition."""

    key: str
    name: str
    icon: str
    base_reward: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "name": self.name,
            "icon": self.icon,
            "baseReward": self.base_reward,
        }


QUEST_TYPES: dict[str, QuestType] = {
    "ASSIGNMENT": QuestType("ASSIGNMENT", "Assignment", "FileText", 50),
    "MIDTERM": QuestType("MIDTERM", "Midterm", "PenTool", 150),
    "FINAL": QuestType("FINAL", "Final Exam", "GraduationCap", 300),
}


def get_quest_type(key: str) -> QuestType | None:
    """Look up a catalog entry by key (case-insensitive)."""
    return QUEST_TYPES.get(key.strip().upper())


def _quest_type_from_dict(data: dict[str, Any]) -> QuestType:
    """Resolve a serialized quest type back to its catalog entry.

    JSON exported by the browser tracker (embedded skill per course) carries
    only the display name, so fall back to matching on it.
    """
    key = data.get("key")
    if key and key in QUEST_TYPES:
        return QUEST_TYPES[key]
    for quest_type in QUEST_TYPES.values():
        if quest_type.name == data.get("name"):
            return quest_type
    raise KeyError(f"unknown quest type: {data!r}")


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class Skill:
    """A progression track leveled independently of the player."""

    skill_id: str
    name: str
    icon: str = "Star"
    effect: str = ""
    exp: int = 0

    @property
    def level(self) -> int:
        return level_for_exp(self.exp, SKILL_LEVEL_DIVISOR)

    def add_exp(self, delta: int) -> int:
        """Apply a signed exp delta, clamped at 0. Returns the new exp."""
        self.exp = max(0, self.exp + delta)
        return self.exp

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "skill_id": self.skill_id,
            "name": self.name,
            "icon": self.icon,
            "effect": self.effect,
            "level": self.level,
            "exp": self.exp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], skill_id: str | None = None) -> Skill:
        return cls(
            skill_id=data.get("skill_id", skill_id or ""),
            name=data["name"],
            icon=data.get("icon", "Star"),
            effect=data.get("effect", ""),
            exp=max(0, int(data.get("exp", 0))),
        )


@dataclass
class Player:
    """The single player profile."""

    name: str = "Student"
    exp: int = 0
    career_goal: str = ""
    skills: dict[str, Skill] = field(default_factory=dict)

    @property
    def level(self) -> int:
        return level_for_exp(self.exp, PLAYER_LEVEL_DIVISOR)

    @property
    def exp_into_level(self) -> int:
        """Exp accumulated inside the current level."""
        return self.exp % PLAYER_LEVEL_DIVISOR

    @property
    def next_level_exp(self) -> int:
        """Total exp at which the next level is reached."""
        return self.level * PLAYER_LEVEL_DIVISOR

    def add_exp(self, delta: int) -> int:
        """Apply a signed exp delta, clamped at 0. Returns the new exp."""
        self.exp = max(0, self.exp + delta)
        return self.exp

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "level": self.level,
            "exp": self.exp,
            "careerGoal": self.career_goal,
            "skills": {key: skill.to_dict() for key, skill in self.skills.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        skills = {
            key: Skill.from_dict(s_data, skill_id=key)
            for key, s_data in data.get("skills", {}).items()
        }
        return cls(
            name=data.get("name", "Student"),
            exp=max(0, int(data.get("exp", 0))),
            career_goal=data.get("careerGoal", ""),
            skills=skills,
        )


@dataclass
class Course:
    """A course tied to one shared skill."""

    id: int
    name: str
    related_skill: str
    total_tasks: int = 3
    progress: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "relatedSkill": self.related_skill,
            "totalTasks": self.total_tasks,
            "progress": self.progress,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Course:
        """Rebuild a course.

        Raises:
            ValueError: If relatedSkill is not a skill id
        """
        if not isinstance(data["relatedSkill"], str):
            raise ValueError(
                f"course {data.get('id')}: relatedSkill must be a skill id, "
                f"got {type(data['relatedSkill']).__name__}"
            )
        return cls(
            id=int(data["id"]),
            name=data["name"],
            related_skill=data["relatedSkill"],
            total_tasks=int(data.get("totalTasks", 3)),
            progress=int(data.get("progress", 0)),
        )


@dataclass
class Quest:
    """A gradable unit of coursework."""

    id: str
    course_id: int
    name: str
    type: QuestType
    reward: int
    completed: bool = False
    # skill id -> exp granted to it by the current completion
    skill_grants: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "courseId": self.course_id,
            "name": self.name,
            "type": self.type.to_dict(),
            "reward": self.reward,
            "completed": self.completed,
            "skillGrants": dict(self.skill_grants),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Quest:
        quest_type = _quest_type_from_dict(data["type"])
        return cls(
            id=str(data["id"]),
            course_id=int(data["courseId"]),
            name=data["name"],
            type=quest_type,
            reward=int(data.get("reward", quest_type.base_reward)),
            completed=bool(data.get("completed", False)),
            skill_grants={
                str(key): int(value) for key, value in data.get("skillGrants", {}).items()
            },
        )
