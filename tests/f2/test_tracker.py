"""Tests for the tracker controller."""

import json

from coursequest.core.state_store import get_state_path, load_game_state
from coursequest.core.tracker import Tracker


def _saved(data_dir) -> dict:
    return json.loads(get_state_path(data_dir).read_text(encoding="utf-8"))


class TestTrackerStartup:
    """Tests for first load."""

    def test_first_load_seeds_and_persists_quests(self, tmp_path):
        """After the first load, 9 quests exist and are saved."""
        tracker = Tracker(tmp_path)

        assert len(tracker.state.quests) == 9
        assert len(_saved(tmp_path)["quests"]) == 9

    def test_reload_keeps_progress(self, tmp_path):
        """A second tracker sees the first one's changes."""
        Tracker(tmp_path).toggle_quest("2-midterm")

        tracker = Tracker(tmp_path)

        assert tracker.state.get_quest("2-midterm").completed is True
        assert tracker.state.player.exp == 150
        assert len(tracker.state.quests) == 9


class TestTrackerPersistence:
    """Every transition rewrites the snapshot."""

    def test_toggle_persists(self, tmp_path):
        """Toggle is saved."""
        tracker = Tracker(tmp_path)
        tracker.toggle_quest("1-midterm")
        assert _saved(tmp_path)["player"]["exp"] == 150

    def test_complete_persists(self, tmp_path):
        """Complete is saved with skill gains."""
        tracker = Tracker(tmp_path)
        tracker.complete_quest("1-assignment1")

        skills = _saved(tmp_path)["player"]["skills"]
        assert skills["DISCRETE_MATH"]["exp"] == 25
        assert skills["JAVA_PROGRAMMING"]["exp"] == 5

    def test_noop_does_not_write(self, tmp_path):
        """Unknown ids leave the file alone."""
        tracker = Tracker(tmp_path)
        path = get_state_path(tmp_path)
        mtime = path.stat().st_mtime_ns

        assert tracker.toggle_quest("missing") is None
        assert tracker.delete_quest("missing") is False
        assert tracker.delete_course(99) is None
        assert path.stat().st_mtime_ns == mtime

    def test_course_and_quest_edits_persist(self, tmp_path):
        """Add/delete operations are saved."""
        tracker = Tracker(tmp_path)
        course = tracker.add_course("CS3000", "Algorithms", "Cpu")
        quest = tracker.add_quest("Lab 1", course.id, "ASSIGNMENT")
        tracker.delete_course(1)
        tracker.set_career_goal("SRE")

        saved = load_game_state(tmp_path)
        assert saved.get_course(1) is None
        assert saved.get_quest(quest.id) is not None
        assert len(saved.quests) == 10
        assert saved.player.career_goal == "SRE"


class TestTrackerImportExport:
    """Tests for snapshot swapping."""

    def test_import_replaces_state(self, tmp_path):
        """Successful import swaps in-memory state."""
        source = Tracker(tmp_path / "a")
        source.complete_quest("3-final")
        exported = source.export_snapshot(tmp_path / "export.json")

        target = Tracker(tmp_path / "b")
        result = target.import_snapshot(exported)

        assert result.success is True
        assert target.state == source.state
        assert Tracker(tmp_path / "b").state == source.state

    def test_failed_import_keeps_state(self, tmp_path):
        """Invalid file leaves memory and disk untouched."""
        tracker = Tracker(tmp_path / "data")
        tracker.toggle_quest("1-final")
        before_state = tracker.state
        before_file = get_state_path(tmp_path / "data").read_bytes()

        bad = tmp_path / "bad.json"
        bad.write_text("{]", encoding="utf-8")
        result = tracker.import_snapshot(bad)

        assert result.success is False
        assert tracker.state is before_state
        assert get_state_path(tmp_path / "data").read_bytes() == before_file

    def test_import_text(self, tmp_path):
        """Text import works like file import."""
        tracker = Tracker(tmp_path)
        result = tracker.import_text("null")
        assert result.success is False
        assert len(tracker.state.quests) == 9
