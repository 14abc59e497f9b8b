"""Default catalog used on first load."""

from __future__ import annotations

from coursequest.core.models import Course, Player, Skill

DEFAULT_PLAYER_NAME = "Student"

# (skill_id, name, icon, effect)
DEFAULT_SKILLS = [
    ("DISCRETE_MATH", "Discrete Math", "Calculator", "Enhances problem-solving in MA2509"),
    ("STATISTICS_PROBABILITY", "Statistics & Probability", "BarChart", "Improves data analysis in MA2510"),
    ("JAVA_PROGRAMMING", "Java Programming", "Coffee", "Boosts coding efficiency in CS2360"),
]

# (course_id, name, skill_id)
DEFAULT_COURSES = [
    (1, "MA2509", "DISCRETE_MATH"),
    (2, "MA2510", "STATISTICS_PROBABILITY"),
    (3, "CS2360", "JAVA_PROGRAMMING"),
]


def default_player(name: str = DEFAULT_PLAYER_NAME) -> Player:
    """Fresh player owning the default skills."""
    skills = {
        skill_id: Skill(skill_id=skill_id, name=skill_name, icon=icon, effect=effect)
        for skill_id, skill_name, icon, effect in DEFAULT_SKILLS
    }
    return Player(name=name, skills=skills)


def default_courses() -> list[Course]:
    """Fresh copies of the three default courses."""
    return [
        Course(id=course_id, name=name, related_skill=skill_id)
        for course_id, name, skill_id in DEFAULT_COURSES
    ]
