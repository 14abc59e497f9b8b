"""Game state persistence.

Responsibilities:
- Load the state snapshot at startup (default seed when absent)
- Rewrite the whole snapshot after every transition
- Export the snapshot to a standalone JSON file
- Import a JSON file, swapping state only after it parses cleanly

State persistence:
- data/state/game_state_v1.json
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import structlog

from coursequest.config.app_config import load_app_config
from coursequest.core.progression import (
    STATE_SCHEMA,
    GameState,
    create_default_game_state,
)

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Fallbacks when paths.state_filename / paths.export_filename are unset
STATE_FILENAME = "game_state_v1.json"
EXPORT_FILENAME = "coursework-rpg-data.json"


# =============================================================================
# ERRORS & RESULTS
# =============================================================================


class StateImportError(Exception):
    """Error reading an imported snapshot."""

    pass


@dataclass
class ImportResult:
    """Result of a snapshot import."""

    success: bool
    state: GameState | None
    state_path: Path | None
    message: str


# =============================================================================
# HELPERS
# =============================================================================


def get_state_filename() -> str:
    return load_app_config().paths.get("state_filename") or STATE_FILENAME


def get_export_filename() -> str:
    """Default name for exported snapshots (paths.export_filename)."""
    return load_app_config().paths.get("export_filename") or EXPORT_FILENAME


def get_state_path(data_dir: Path | None = None) -> Path:
    if data_dir is None:
        data_dir = Path("data")
    return data_dir / "state" / get_state_filename()


def _write_json_atomic(path: Path, payload: dict) -> None:
    """Write JSON next to the target, then rename over it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    os.replace(tmp_path, path)


def parse_snapshot(text: str) -> GameState:
    """Parse snapshot JSON text into a GameState.

    Snapshots without a "$schema" key are accepted; a different schema is not.

    Raises:
        StateImportError: If the text is not valid JSON or not a game state
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StateImportError(f"Invalid JSON: {e}") from e

    if isinstance(data, dict) and data.get("$schema", STATE_SCHEMA) != STATE_SCHEMA:
        raise StateImportError(
            f"Unsupported schema: {data.get('$schema')} (expected {STATE_SCHEMA})"
        )

    try:
        return GameState.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise StateImportError(f"Not a game state snapshot: {e}") from e


# =============================================================================
# LOAD / SAVE
# =============================================================================


def load_game_state(
    data_dir: Path | None = None,
    player_name: str = "Student",
) -> GameState:
    """Load game state from disk, or return the default seed.

    Args:
        data_dir: Base data directory. Defaults to ./data
        player_name: Name for a freshly seeded player

    Returns:
        GameState (default seed if file missing or corrupted)
    """
    state_path = get_state_path(data_dir)

    if not state_path.exists():
        logger.debug("game_state_not_found", path=str(state_path))
        return create_default_game_state(player_name)

    try:
        text = state_path.read_text(encoding="utf-8")
        return parse_snapshot(text)
    except (StateImportError, OSError) as e:
        logger.error("game_state_load_failed", path=str(state_path), error=str(e))
        return create_default_game_state(player_name)


def save_game_state(state: GameState, data_dir: Path | None = None) -> Path:
    """Persist the whole game state to disk.

    Args:
        state: GameState to save
        data_dir: Base data directory. Defaults to ./data

    Returns:
        Path to saved state file
    """
    state_path = get_state_path(data_dir)
    _write_json_atomic(state_path, state.to_dict())

    logger.debug("game_state_saved", path=str(state_path))
    return state_path


# =============================================================================
# EXPORT / IMPORT
# =============================================================================


def export_game_state(state: GameState, path: Path) -> Path:
    """Write the exact current snapshot to a standalone JSON file.

    If path is a directory, the configured export filename is used inside it.
    """
    if path.is_dir():
        path = path / get_export_filename()

    _write_json_atomic(path, state.to_dict())

    logger.info("game_state_exported", path=str(path))
    return path


def _import_failed(source: str, error: Exception) -> ImportResult:
    logger.warning("state_import_failed", source=source, error=str(error))
    return ImportResult(
        success=False,
        state=None,
        state_path=None,
        message=f"Invalid file format. Please upload a valid JSON file. ({error})",
    )


def import_game_state(path: Path, data_dir: Path | None = None) -> ImportResult:
    """Import a snapshot file and make it the persisted state.

    Args:
        path: JSON file to import
        data_dir: Base data directory. Defaults to ./data

    Returns:
        ImportResult with the new state on success
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return _import_failed(str(path), e)

    return import_game_state_text(text, data_dir, source=str(path))


def import_game_state_text(
    text: str,
    data_dir: Path | None = None,
    source: str = "upload",
) -> ImportResult:
    """Import snapshot JSON text and make it the persisted state.

    The text is parsed completely before anything is written, so a failed
    import leaves the persisted snapshot untouched.
    """
    try:
        state = parse_snapshot(text)
    except StateImportError as e:
        return _import_failed(source, e)

    state_path = save_game_state(state, data_dir)

    logger.info(
        "game_state_imported",
        source=source,
        courses=len(state.courses),
        quests=len(state.quests),
    )
    return ImportResult(
        success=True,
        state=state,
        state_path=state_path,
        message=f"Imported {len(state.courses)} courses and {len(state.quests)} quests",
    )
