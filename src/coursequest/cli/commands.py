"""CLI commands for the coursework tracker.

Commands:
- status: Player level, skills and course progress
- courses / quests: List entities
- toggle / complete: Grant (or revoke) quest rewards
- add-quest / delete-quest / add-course / delete-course: Edit the catalog
- goal: Set the career goal
- export / import: JSON snapshot files
- serve: Run the local web API
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from coursequest.config.app_config import get_data_dir, load_app_config
from coursequest.core.models import QUEST_TYPES
from coursequest.core.progression import ProgressionError
from coursequest.core.state_store import get_export_filename
from coursequest.core.tracker import Tracker
from coursequest.utils.validators import (
    AmbiguousQuestIdError,
    QuestNotFoundError,
    resolve_quest_id,
)

app = typer.Typer(
    name="quest",
    help="Gamified coursework tracker: complete quests, earn exp, level up skills.",
    no_args_is_help=True,
)

console = Console()


def _get_tracker() -> Tracker:
    """Open the tracker for the configured data directory."""
    config = load_app_config()
    return Tracker(get_data_dir(), player_name=config.player.default_name)


def _resolve_quest_id_or_exit(tracker: Tracker, prefix: str) -> str:
    """Resolve quest id prefix to full ID, or exit with helpful error."""
    candidates = [q.id for q in tracker.state.quests]
    try:
        return resolve_quest_id(prefix, candidates)
    except QuestNotFoundError as e:
        console.print(f"[red]✗ {e}[/red]")
        console.print("  Use: quest quests")
        raise typer.Exit(code=1)
    except AmbiguousQuestIdError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)


def _bar(current: int, total: int, width: int = 20) -> str:
    """Render a plain text progress bar."""
    if total <= 0:
        return "░" * width
    filled = min(width, round(width * current / total))
    return "█" * filled + "░" * (width - filled)


# =============================================================================
# VIEW COMMANDS
# =============================================================================


@app.command()
def status() -> None:
    """Show player level, skills and course progress."""
    tracker = _get_tracker()
    summary = tracker.state.summary()
    player = summary["player"]

    console.print(f"\n[bold]{player['name']} - Level {player['level']}[/bold]")
    console.print(
        f"  {_bar(player['exp_into_level'], 100)} "
        f"EXP: {player['exp']} / {player['next_level_exp']}"
    )
    if player["career_goal"]:
        console.print(f"  [dim]career goal:[/dim] {player['career_goal']}")

    console.print("\n[bold]Skills[/bold]")
    for skill in summary["skills"]:
        console.print(
            f"  {skill['name']:<28} Lv {skill['level']:<3} "
            f"{_bar(skill['exp'] % 50, 50, width=10)} {skill['exp']} exp"
        )

    console.print("\n[bold]Courses[/bold]")
    for course in summary["courses"]:
        console.print(
            f"  {course['name']:<10} {_bar(course['completed'], course['total'])} "
            f"{course['completed']}/{course['total']}"
        )
    console.print()


@app.command(name="courses")
def list_courses() -> None:
    """List all courses."""
    tracker = _get_tracker()
    state = tracker.state

    if not state.courses:
        console.print("[yellow]No courses yet[/yellow]")
        console.print("  Use: quest add-course <name> --skill-name <skill>")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Course")
    table.add_column("Skill")
    table.add_column("Lv", justify="right")
    table.add_column("Quests", justify="right")
    table.add_column("Progress", justify="right")

    for course in state.courses:
        skill = state.get_skill(course.related_skill)
        progress = state.course_progress(course.id)
        table.add_row(
            str(course.id),
            course.name,
            skill.name if skill else f"[red]{course.related_skill}[/red]",
            str(skill.level) if skill else "-",
            f"{progress.completed}/{progress.total}",
            f"{course.progress}/{course.total_tasks}",
        )

    console.print(table)


@app.command(name="quests")
def list_quests(
    course_id: int | None = typer.Option(None, "--course", "-c", help="Only this course"),
) -> None:
    """List quests, optionally filtered by course."""
    tracker = _get_tracker()
    state = tracker.state

    quests = state.quests if course_id is None else state.quests_for_course(course_id)
    if not quests:
        console.print("[yellow]No quests found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Quest")
    table.add_column("Course")
    table.add_column("Type")
    table.add_column("Reward", justify="right")
    table.add_column("Done", justify="center")

    for quest in quests:
        course = state.get_course(quest.course_id)
        table.add_row(
            quest.id,
            quest.name,
            course.name if course else "[dim]deleted[/dim]",
            quest.type.name,
            str(quest.reward),
            "[green]✓[/green]" if quest.completed else "",
        )

    console.print(table)


# =============================================================================
# QUEST COMMANDS
# =============================================================================


@app.command()
def toggle(
    quest_id: str = typer.Argument(..., help="Quest ID (unique prefix accepted)"),
) -> None:
    """Toggle a quest between completed and not completed."""
    tracker = _get_tracker()
    resolved = _resolve_quest_id_or_exit(tracker, quest_id)

    before_level = tracker.state.player.level
    quest = tracker.toggle_quest(resolved)
    if quest is None:
        console.print(f"[yellow]⚠ Quest not found: {resolved}[/yellow]")
        raise typer.Exit(code=1)

    player = tracker.state.player
    if quest.completed:
        console.print(f"[green]✓ Completed: {quest.name} (+{quest.reward} exp)[/green]")
    else:
        console.print(f"[yellow]↺ Reopened: {quest.name} (-{quest.reward} exp)[/yellow]")
    console.print(f"  [dim]level:[/dim] {player.level}  [dim]exp:[/dim] {player.exp}")
    if player.level > before_level:
        console.print(f"[bold magenta]🎉 Level up! You are now level {player.level}[/bold magenta]")


@app.command()
def complete(
    quest_id: str = typer.Argument(..., help="Quest ID (unique prefix accepted)"),
) -> None:
    """Complete a quest once (rewards every skill)."""
    tracker = _get_tracker()
    resolved = _resolve_quest_id_or_exit(tracker, quest_id)

    before_level = tracker.state.player.level
    quest = tracker.complete_quest(resolved)
    if quest is None:
        console.print(f"[yellow]⚠ Quest already completed: {resolved}[/yellow]")
        return

    player = tracker.state.player
    console.print(f"[green]✓ Completed: {quest.name} (+{quest.reward} exp)[/green]")
    console.print(f"  [dim]level:[/dim] {player.level}  [dim]exp:[/dim] {player.exp}")
    if player.level > before_level:
        console.print(f"[bold magenta]🎉 Level up! You are now level {player.level}[/bold magenta]")


@app.command(name="add-quest")
def add_quest(
    name: str = typer.Argument(..., help="Quest name"),
    course_id: int = typer.Option(..., "--course", "-c", help="Course ID"),
    quest_type: str = typer.Option(
        "ASSIGNMENT", "--type", "-t", help=f"Quest type: {', '.join(QUEST_TYPES)}"
    ),
) -> None:
    """Add a custom quest to a course."""
    tracker = _get_tracker()
    try:
        quest = tracker.add_quest(name, course_id, quest_type)
    except ProgressionError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Quest added: {quest.name}[/green]")
    console.print(f"  [dim]id:[/dim]     {quest.id}")
    console.print(f"  [dim]reward:[/dim] {quest.reward}")


@app.command(name="delete-quest")
def delete_quest(
    quest_id: str = typer.Argument(..., help="Quest ID (unique prefix accepted)"),
) -> None:
    """Delete a quest (exp already earned is kept)."""
    tracker = _get_tracker()
    resolved = _resolve_quest_id_or_exit(tracker, quest_id)

    if not tracker.delete_quest(resolved):
        console.print(f"[yellow]⚠ Quest not found: {resolved}[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ Quest deleted: {resolved}[/green]")


# =============================================================================
# COURSE COMMANDS
# =============================================================================


@app.command(name="add-course")
def add_course(
    name: str = typer.Argument(..., help="Course name (e.g., 'CS2360')"),
    skill_name: str = typer.Option("", "--skill-name", "-s", help="Name of a new skill"),
    skill_icon: str = typer.Option("Star", "--skill-icon", "-i", help="Icon key for a new skill"),
    skill_id: str | None = typer.Option(
        None, "--skill-id", "-k", help="Share an existing skill instead"
    ),
) -> None:
    """Add a course with its three default quests."""
    tracker = _get_tracker()
    try:
        course = tracker.add_course(name, skill_name, skill_icon, skill_id)
    except ProgressionError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    skill = tracker.state.get_skill(course.related_skill)
    console.print(f"[green]✓ Course added: {course.name}[/green]")
    console.print(f"  [dim]id:[/dim]    {course.id}")
    console.print(f"  [dim]skill:[/dim] {skill.name if skill else course.related_skill}")
    console.print(f"  [dim]quests:[/dim] {len(tracker.state.quests_for_course(course.id))}")


@app.command(name="delete-course")
def delete_course(
    course_id: int = typer.Argument(..., help="Course ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Delete a course and all of its quests."""
    tracker = _get_tracker()
    course = tracker.state.get_course(course_id)
    if course is None:
        console.print(f"[red]✗ Course not found: {course_id}[/red]")
        raise typer.Exit(code=1)

    n_quests = len(tracker.state.quests_for_course(course_id))
    if not yes:
        confirm = typer.confirm(f"Delete {course.name} and its {n_quests} quests?")
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(code=0)

    removed = tracker.delete_course(course_id)
    console.print(f"[green]✓ Course deleted: {course.name} ({removed} quests removed)[/green]")


# =============================================================================
# PLAYER COMMANDS
# =============================================================================


@app.command()
def goal(
    text: str = typer.Argument(..., help="Career goal (empty string clears it)"),
) -> None:
    """Set your career goal."""
    tracker = _get_tracker()
    tracker.set_career_goal(text)
    if text:
        console.print(f"[green]✓ Career goal set: {text}[/green]")
    else:
        console.print("[green]✓ Career goal cleared[/green]")


# =============================================================================
# DATA COMMANDS
# =============================================================================


@app.command(name="export")
def export_data(
    path: Path | None = typer.Argument(
        None, help="Output JSON file or directory (default: paths.export_filename)"
    ),
) -> None:
    """Export the full state to a JSON file."""
    tracker = _get_tracker()
    if path is None:
        path = Path(get_export_filename())
    out_path = tracker.export_snapshot(path)
    console.print(f"[green]✓ Exported: {out_path}[/green]")


@app.command(name="import")
def import_data(
    path: Path = typer.Argument(..., help="JSON file previously exported"),
) -> None:
    """Replace the full state with an exported JSON file."""
    if not path.exists():
        console.print(f"[red]✗ File not found: {path}[/red]")
        raise typer.Exit(code=1)

    tracker = _get_tracker()
    result = tracker.import_snapshot(path)
    if not result.success:
        console.print(f"[red]✗ {result.message}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ {result.message}[/green]")
    console.print(f"  [dim]state:[/dim] {result.state_path}")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port"),
) -> None:
    """Run the local web API."""
    import uvicorn

    config = load_app_config()
    uvicorn.run(
        "coursequest.web.api:app",
        host=host or config.server.host,
        port=port or config.server.port,
    )


if __name__ == "__main__":
    app()
