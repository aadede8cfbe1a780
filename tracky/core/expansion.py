"""Expand/collapse state for day nodes in the timeline.

The store is a plain set of day keys owned by the session. It outlives
individual renders so that re-fetching notes after a create, edit or delete
reopens exactly the days the user had opened. Keys for days that no longer
have notes are kept; the set only grows until the session ends.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class ExpansionState:
    """Session-scoped set of day keys the user has opened."""

    def __init__(self, keys: set[str] | None = None):
        self._expanded: set[str] = set(keys) if keys else set()

    def is_expanded(self, day_key: str) -> bool:
        """Check if a day was opened by the user."""
        return day_key in self._expanded

    def set_expanded(self, day_key: str, open: bool) -> None:
        """Record a day as open or closed. Repeating a call is a no-op."""
        if open:
            if day_key not in self._expanded:
                self._expanded.add(day_key)
                logger.debug("Expanded day %s", day_key)
        elif day_key in self._expanded:
            self._expanded.discard(day_key)
            logger.debug("Collapsed day %s", day_key)

    def on_day_toggled(self, day_key: str, now_open: bool) -> None:
        """Handle a toggle event from the renderer."""
        self.set_expanded(day_key, now_open)

    def toggle(self, day_key: str) -> bool:
        """Flip a day's state and return the new state."""
        now_open = not self.is_expanded(day_key)
        self.set_expanded(day_key, now_open)
        return now_open

    def clear(self) -> None:
        """Forget every opened day (used on login and logout)."""
        self._expanded.clear()

    def keys(self) -> list[str]:
        """Return the opened day keys, most recent first."""
        return sorted(self._expanded, reverse=True)

    def __contains__(self, day_key: object) -> bool:
        return day_key in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)

    def __repr__(self) -> str:
        return f"ExpansionState({self.keys()!r})"
