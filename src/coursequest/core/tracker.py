"""Tracker controller.

Owns the single GameState instance for a data directory and persists it
after every transition (action -> transition -> save).
"""

from __future__ import annotations

from pathlib import Path

import structlog

from coursequest.core.models import Course, Quest
from coursequest.core.progression import CourseProgress, GameState
from coursequest.core.state_store import (
    ImportResult,
    export_game_state,
    import_game_state,
    import_game_state_text,
    load_game_state,
    save_game_state,
)

logger = structlog.get_logger(__name__)


class Tracker:
    """Application controller around one GameState."""

    def __init__(self, data_dir: Path | None = None, player_name: str = "Student"):
        self.data_dir = data_dir if data_dir is not None else Path("data")
        self.state: GameState = load_game_state(self.data_dir, player_name=player_name)

        created = self.state.initialize_quests()
        if created:
            self.save()

    def save(self) -> Path:
        return save_game_state(self.state, self.data_dir)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def toggle_quest(self, quest_id: str) -> Quest | None:
        quest = self.state.toggle_quest_completion(quest_id)
        if quest is not None:
            self.save()
        return quest

    def complete_quest(self, quest_id: str) -> Quest | None:
        quest = self.state.complete_quest(quest_id)
        if quest is not None:
            self.save()
        return quest

    def delete_quest(self, quest_id: str) -> bool:
        removed = self.state.delete_quest(quest_id)
        if removed:
            self.save()
        return removed

    def add_quest(self, name: str, course_id: int, quest_type_key: str) -> Quest:
        quest = self.state.add_quest(name, course_id, quest_type_key)
        self.save()
        return quest

    def add_course(
        self,
        name: str,
        skill_name: str = "",
        skill_icon: str = "Star",
        skill_id: str | None = None,
    ) -> Course:
        course = self.state.add_course(name, skill_name, skill_icon, skill_id)
        self.save()
        return course

    def delete_course(self, course_id: int) -> int | None:
        removed = self.state.delete_course(course_id)
        if removed is not None:
            self.save()
        return removed

    def set_career_goal(self, text: str) -> None:
        self.state.set_career_goal(text)
        self.save()

    def course_progress(self, course_id: int) -> CourseProgress:
        return self.state.course_progress(course_id)

    # -------------------------------------------------------------------------
    # Snapshot files
    # -------------------------------------------------------------------------

    def export_snapshot(self, path: Path) -> Path:
        return export_game_state(self.state, path)

    def import_snapshot(self, path: Path) -> ImportResult:
        """Replace the current state with an imported snapshot.

        On failure the in-memory state and the saved snapshot are unchanged.
        """
        return self._swap(import_game_state(path, self.data_dir))

    def import_text(self, text: str, source: str = "upload") -> ImportResult:
        return self._swap(import_game_state_text(text, self.data_dir, source=source))

    def _swap(self, result: ImportResult) -> ImportResult:
        if result.success and result.state is not None:
            self.state = result.state
        return result
