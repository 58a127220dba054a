from dataclasses import dataclass
from typing import Optional, Tuple

# Error kinds
NOT_FOUND = "NotFound"
ALREADY_EXISTS = "AlreadyExists"
EMPTY_STATE = "EmptyState"
INVALID = "Invalid"

# Toggle outcomes
ADDED = "added"
REMOVED = "removed"


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a store operation or session command.

    Failures carry an error kind and leave state untouched; successes
    carry the entities the host needs to refresh.
    """
    ok: bool
    action: str = ""
    error: Optional[str] = None
    message: str = ""
    bookmarks: Tuple = ()
    groups: Tuple[str, ...] = ()
    count: int = 0

    def __bool__(self) -> bool:
        return self.ok


def success(action: str, message: str = "", bookmarks=(), groups=(), count: int = 0) -> CommandResult:
    return CommandResult(
        ok=True,
        action=action,
        message=message,
        bookmarks=tuple(bookmarks),
        groups=tuple(groups),
        count=count,
    )


def failure(error: str, message: str) -> CommandResult:
    return CommandResult(ok=False, error=error, message=message)
