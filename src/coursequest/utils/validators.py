"""Data validation helpers.

ID conventions:
- Seeded quests: "{course_id}-assignment1", "{course_id}-midterm", "{course_id}-final"
- Custom quests: "custom-{epoch_ms}"

Functions:
- resolve_quest_id(prefix, candidates) -> str: Resolve prefix to unique quest id
"""


class AmbiguousQuestIdError(Exception):
    """Raised when a quest id prefix matches multiple quests."""

    def __init__(self, prefix: str, candidates: list[str]):
        self.prefix = prefix
        self.candidates = candidates
        super().__init__(
            f"Prefix '{prefix}' is ambiguous. Candidates:\n"
            + "\n".join(f"  - {c}" for c in candidates)
        )


class QuestNotFoundError(Exception):
    """Raised when no quest matches the given prefix."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"No quest found with prefix '{prefix}'")


def resolve_quest_id(prefix: str, candidates: list[str]) -> str:
    """Resolve a quest id prefix to a unique full quest id.

    Args:
        prefix: Partial or full quest id (e.g., "custom-17" or "1-midterm")
        candidates: List of all quest ids

    Returns:
        The unique matching quest id

    Raises:
        QuestNotFoundError: If no candidates match the prefix
        AmbiguousQuestIdError: If multiple candidates match the prefix
    """
    # Exact match first
    if prefix in candidates:
        return prefix

    # Prefix match
    matches = [c for c in candidates if c.startswith(prefix)]

    if len(matches) == 0:
        raise QuestNotFoundError(prefix)
    elif len(matches) == 1:
        return matches[0]
    else:
        raise AmbiguousQuestIdError(prefix, sorted(matches))
