import logging
from typing import Dict, Optional

from .colors import color_for_new_group
from .config import DEFAULT_GROUP, Config
from .results import (
    ALREADY_EXISTS,
    INVALID,
    NOT_FOUND,
    CommandResult,
    failure,
    success,
)

log = logging.getLogger("linemarks.groups")

GROUPS_KEY = "bookmark_groups"
ACTIVE_GROUP_KEY = "active_bookmark_group"


class GroupStore:
    """
    Group name -> color map plus the active-group pointer.

    The map is never empty and the active pointer always names a group.
    Renames and deletes cascade into the bookmark store.
    """

    def __init__(self, state, bookmarks, config: Optional[Config] = None, rng=None):
        self._state = state
        self._bookmarks = bookmarks
        self._config = config or Config()
        self._rng = rng
        self._groups: Dict[str, str] = {}
        self._active: Optional[str] = None
        self.load()

    # -----------------------
    # Persistence
    # -----------------------
    def load(self) -> None:
        raw = self._state.get(GROUPS_KEY, {})
        if not isinstance(raw, dict):
            raise RuntimeError(f"Persisted '{GROUPS_KEY}' is not a mapping")
        self._groups = {str(k): str(v) for k, v in raw.items()}

        changed = self._merge_overrides()
        if self._ensure_not_empty():
            changed = True
        if changed:
            self._save_groups()

        self._active = self._state.get(ACTIVE_GROUP_KEY)
        self._validate_active()

    def apply_config(self, config: Config) -> bool:
        """Re-merge color overrides after a configuration change."""
        self._config = config
        changed = self._merge_overrides()
        if changed:
            self._save_groups()
        return changed

    def _merge_overrides(self) -> bool:
        changed = False
        for name, color in self._config.group_color_overrides.items():
            if self._groups.get(name) != color:
                self._groups[name] = color
                changed = True
        return changed

    def _ensure_not_empty(self) -> bool:
        if self._groups:
            return False
        self._groups[DEFAULT_GROUP] = self._config.first_default_color
        log.info("Seeded '%s' group", DEFAULT_GROUP)
        return True

    def _validate_active(self) -> None:
        if self._active in self._groups:
            return
        fallback = next(iter(self._groups))
        log.debug("Active group %r invalid, falling back to %r", self._active, fallback)
        self._set_active(fallback)

    def _set_active(self, name: str) -> None:
        self._active = name
        self._state.set(ACTIVE_GROUP_KEY, name)

    def _save_groups(self) -> None:
        self._state.set(GROUPS_KEY, dict(self._groups))

    # -----------------------
    # Read views
    # -----------------------
    @property
    def active_group(self) -> str:
        return self._active

    def list_groups(self) -> Dict[str, str]:
        return dict(self._groups)

    def has_group(self, name: str) -> bool:
        return name in self._groups

    def color_of(self, name: str) -> Optional[str]:
        return self._groups.get(name)

    def resolve_group(self, name: Optional[str] = None) -> str:
        """
        Pick the group a new bookmark lands in: name when known, otherwise
        the active group.
        """
        if name is not None and name in self._groups:
            return name
        if name is not None:
            log.debug("Unknown group %r, using active group", name)
        if self._ensure_not_empty():
            self._save_groups()
        self._validate_active()
        return self._active

    def ensure_color(self, name: str) -> str:
        """
        Color for a group referenced by bookmarks; unknown names get a color
        assigned and persisted.
        """
        color = self._groups.get(name)
        if color is None:
            color = color_for_new_group(self._rng)
            self._groups[name] = color
            self._save_groups()
            log.info("Assigned color %s to group %s", color, name)
        return color

    # -----------------------
    # Mutations
    # -----------------------
    def create_group(self, name: str) -> CommandResult:
        name = (name or "").strip()
        if not name:
            return failure(INVALID, "Group name must not be empty")
        if name in self._groups:
            return failure(ALREADY_EXISTS, f"Group '{name}' already exists")

        color = color_for_new_group(self._rng)
        self._groups[name] = color
        self._save_groups()
        log.info("Created group %s (%s)", name, color)
        return success("created", message=f"Created group {name}", groups=[name])

    def rename_group(self, old: str, new: str) -> CommandResult:
        new = (new or "").strip()
        if old not in self._groups:
            return failure(NOT_FOUND, f"Group '{old}' not found")
        if not new:
            return failure(INVALID, "Group name must not be empty")
        if new == old:
            return success("renamed", groups=[old])
        if new in self._groups:
            return failure(ALREADY_EXISTS, f"Group '{new}' already exists")

        # keep the renamed group in its original position
        self._groups = {
            (new if k == old else k): v for k, v in self._groups.items()
        }
        self._save_groups()
        moved = self._bookmarks.rename_group(old, new)
        if self._active == old:
            self._set_active(new)

        log.info("Renamed group %s to %s (%d bookmarks)", old, new, moved)
        return success(
            "renamed",
            message=f"Renamed {old} to {new}",
            groups=[old, new],
            count=moved,
        )

    def delete_group(self, name: str) -> CommandResult:
        if name not in self._groups:
            return failure(NOT_FOUND, f"Group '{name}' not found")

        del self._groups[name]
        self._ensure_not_empty()
        self._save_groups()
        removed = self._bookmarks.clear_group(name)
        if self._active == name or self._active not in self._groups:
            self._set_active(next(iter(self._groups)))

        log.info("Deleted group %s (%d bookmarks), active is %s", name, removed, self._active)
        return success(
            "deleted",
            message=f"Deleted {name} and {removed} bookmarks",
            groups=[name, self._active],
            count=removed,
        )

    def set_active_group(self, name: str) -> CommandResult:
        if name not in self._groups:
            return failure(NOT_FOUND, f"Group '{name}' not found")

        if self._active != name:
            self._set_active(name)
            log.info("Active group is now %s", name)
        return success("activated", message=f"Active group changed to: {name}", groups=[name])
