"""Tests for the quest CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from coursequest.cli.commands import app
from coursequest.config.app_config import clear_config_cache
from coursequest.core.state_store import get_state_path, load_game_state, save_game_state

runner = CliRunner()


@pytest.fixture
def data_env(tmp_path) -> dict[str, str]:
    """Point the CLI at an isolated data directory."""
    return {"COURSEQUEST_DATA_DIR": str(tmp_path)}


def _invoke(args, env, **kwargs):
    return runner.invoke(app, args, env=env, **kwargs)


class TestViewCommands:
    """Tests for status, courses and quests."""

    def test_status_seeds_on_first_run(self, tmp_path, data_env):
        """First command creates the snapshot with 9 quests."""
        result = _invoke(["status"], data_env)

        assert result.exit_code == 0
        assert "Student - Level 1" in result.stdout
        assert "Discrete Math" in result.stdout
        assert len(load_game_state(tmp_path).quests) == 9

    def test_courses_lists_default_catalog(self, data_env):
        """Courses table shows the three defaults."""
        result = _invoke(["courses"], data_env)

        assert result.exit_code == 0
        for name in ("MA2509", "MA2510", "CS2360"):
            assert name in result.stdout

    def test_quests_filtered_by_course(self, data_env):
        """--course limits the listing."""
        result = _invoke(["quests", "--course", "2"], data_env)

        assert result.exit_code == 0
        assert "2-midterm" in result.stdout
        assert "1-midterm" not in result.stdout


class TestQuestCommands:
    """Tests for toggle, complete, add-quest and delete-quest."""

    def test_toggle_completes_and_reopens(self, tmp_path, data_env):
        """Toggle twice restores exp."""
        result = _invoke(["toggle", "1-midterm"], data_env)
        assert result.exit_code == 0
        assert "Completed" in result.stdout
        assert load_game_state(tmp_path).player.exp == 150

        result = _invoke(["toggle", "1-midterm"], data_env)
        assert result.exit_code == 0
        assert "Reopened" in result.stdout
        assert load_game_state(tmp_path).player.exp == 0

    def test_toggle_reports_level_up(self, data_env):
        """Crossing a level threshold is announced."""
        result = _invoke(["toggle", "3-final"], data_env)
        assert "Level up" in result.stdout

    def test_toggle_accepts_unique_prefix(self, tmp_path, data_env):
        """Prefixes resolve to the full id."""
        result = _invoke(["toggle", "2-mid"], data_env)
        assert result.exit_code == 0
        assert load_game_state(tmp_path).get_quest("2-midterm").completed is True

    def test_toggle_ambiguous_prefix(self, data_env):
        """Ambiguous prefix exits with error."""
        result = _invoke(["toggle", "1-"], data_env)
        assert result.exit_code == 1
        assert "ambiguous" in result.stdout

    def test_toggle_unknown(self, data_env):
        """Unknown quest exits with error."""
        result = _invoke(["toggle", "zzz"], data_env)
        assert result.exit_code == 1
        assert "No quest found" in result.stdout

    def test_complete_once(self, tmp_path, data_env):
        """Second complete is a warning, not a second reward."""
        assert _invoke(["complete", "1-assignment1"], data_env).exit_code == 0
        result = _invoke(["complete", "1-assignment1"], data_env)

        assert result.exit_code == 0
        assert "already completed" in result.stdout
        state = load_game_state(tmp_path)
        assert state.player.exp == 50
        assert state.get_skill("DISCRETE_MATH").exp == 25

    def test_add_quest(self, tmp_path, data_env):
        """Custom quest is created with catalog reward."""
        result = _invoke(["add-quest", "Lab 2", "--course", "3", "--type", "final"], data_env)

        assert result.exit_code == 0
        assert "Quest added" in result.stdout
        quests = load_game_state(tmp_path).quests_for_course(3)
        assert quests[-1].name == "Lab 2"
        assert quests[-1].reward == 300

    def test_add_quest_invalid_type(self, data_env):
        """Unknown quest type is rejected."""
        result = _invoke(["add-quest", "Lab", "--course", "1", "--type", "quiz"], data_env)
        assert result.exit_code == 1
        assert "Unknown quest type" in result.stdout

    def test_add_quest_unknown_course(self, data_env):
        """Unknown course is rejected."""
        result = _invoke(["add-quest", "Lab", "--course", "42"], data_env)
        assert result.exit_code == 1
        assert "Course not found" in result.stdout

    def test_delete_quest(self, tmp_path, data_env):
        """Quest is removed."""
        result = _invoke(["delete-quest", "1-final"], data_env)
        assert result.exit_code == 0
        assert load_game_state(tmp_path).get_quest("1-final") is None


class TestCourseCommands:
    """Tests for add-course and delete-course."""

    def test_add_course(self, tmp_path, data_env):
        """New course gets a skill and three quests."""
        result = _invoke(
            ["add-course", "CS3000", "--skill-name", "Algorithms", "--skill-icon", "Cpu"],
            data_env,
        )

        assert result.exit_code == 0
        assert "Course added: CS3000" in result.stdout
        state = load_game_state(tmp_path)
        assert state.get_course(4).related_skill == "skill01"
        assert len(state.quests_for_course(4)) == 3

    def test_add_course_without_skill(self, data_env):
        """Missing skill name is an error."""
        result = _invoke(["add-course", "CS3000"], data_env)
        assert result.exit_code == 1

    def test_delete_course_with_yes(self, tmp_path, data_env):
        """--yes skips the prompt and cascades."""
        result = _invoke(["delete-course", "2", "--yes"], data_env)

        assert result.exit_code == 0
        assert "3 quests removed" in result.stdout
        state = load_game_state(tmp_path)
        assert state.get_course(2) is None
        assert state.quests_for_course(2) == []

    def test_delete_course_cancelled(self, tmp_path, data_env):
        """Answering no keeps the course."""
        result = _invoke(["delete-course", "2"], data_env, input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.stdout
        assert load_game_state(tmp_path).get_course(2) is not None

    def test_delete_unknown_course(self, data_env):
        """Unknown course exits with error."""
        result = _invoke(["delete-course", "99", "--yes"], data_env)
        assert result.exit_code == 1


class TestDataCommands:
    """Tests for goal, export and import."""

    def test_goal(self, tmp_path, data_env):
        """Career goal is stored."""
        result = _invoke(["goal", "Machine learning engineer"], data_env)
        assert result.exit_code == 0
        assert load_game_state(tmp_path).player.career_goal == "Machine learning engineer"

    def test_export_import_roundtrip(self, tmp_path, data_env):
        """Exported file imports back into another data dir."""
        _invoke(["toggle", "1-final"], data_env)
        out = tmp_path / "backup.json"
        result = _invoke(["export", str(out)], data_env)
        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["player"]["exp"] == 300

        other = tmp_path / "other"
        result = _invoke(["import", str(out)], {"COURSEQUEST_DATA_DIR": str(other)})

        assert result.exit_code == 0
        assert load_game_state(other) == load_game_state(tmp_path)

    def test_import_invalid_json(self, tmp_path, data_env):
        """Invalid file fails and leaves the snapshot untouched."""
        _invoke(["toggle", "1-final"], data_env)
        before = get_state_path(tmp_path).read_bytes()

        bad = tmp_path / "bad.json"
        bad.write_text("not json at all", encoding="utf-8")
        result = _invoke(["import", str(bad)], data_env)

        assert result.exit_code == 1
        assert "Invalid file format" in result.stdout
        assert get_state_path(tmp_path).read_bytes() == before

    def test_import_missing_file(self, tmp_path, data_env):
        """Missing file exits with error."""
        result = _invoke(["import", str(tmp_path / "nope.json")], data_env)
        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_status_after_import_uses_new_state(self, tmp_path, data_env):
        """Status reflects an imported level."""
        from coursequest.core.progression import create_default_game_state

        state = create_default_game_state("Ana")
        state.initialize_quests()
        state.complete_quest("3-final")
        source_dir = tmp_path / "src"
        save_game_state(state, source_dir)

        _invoke(["import", str(get_state_path(source_dir))], data_env)
        result = _invoke(["status"], data_env)

        assert "Ana - Level 4" in result.stdout

    def test_export_default_uses_configured_filename(self, tmp_path, monkeypatch):
        """Without a path, export writes paths.export_filename in the cwd."""
        monkeypatch.chdir(tmp_path)
        config_file = tmp_path / "data" / "config" / "app_config_v1.yaml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("paths:\n  export_filename: my-quests.json\n", encoding="utf-8")
        clear_config_cache()
        try:
            result = _invoke(["export"], {"COURSEQUEST_DATA_DIR": str(tmp_path / "store")})
        finally:
            clear_config_cache()

        assert result.exit_code == 0
        assert json.loads((tmp_path / "my-quests.json").read_text(encoding="utf-8"))["quests"]
