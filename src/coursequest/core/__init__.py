"""Core business logic module.

Modules:
- models: Player, Skill, Course, Quest and the quest type catalog
- seed: Default player, skills and courses
- progression: GameState and its reward transitions
- state_store: Snapshot load/save and JSON import/export
- tracker: Controller that persists after every transition
"""

__all__ = [
    "models",
    "seed",
    "progression",
    "state_store",
    "tracker",
]
