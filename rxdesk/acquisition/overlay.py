"""Single-expansion overlay editor.

One editor is shared by the staged and committed surfaces of a list, so at
most one item is being configured at any time.
"""

from __future__ import annotations

from dataclasses import dataclass

from rxdesk.common.logger import get_logger

logger = get_logger("rxdesk.acquisition.overlay")


@dataclass(frozen=True)
class OverlayState:
    target: str | None = None

    @property
    def expanded(self) -> bool:
        return self.target is not None


COLLAPSED = OverlayState()


class OverlayEditor:
    """States: collapsed, expanded(target). No terminal state."""

    def __init__(self) -> None:
        self._state = COLLAPSED

    @property
    def state(self) -> OverlayState:
        return self._state

    @property
    def target(self) -> str | None:
        return self._state.target

    def is_expanded(self, identity: str) -> bool:
        return self._state.target == identity

    def expand(self, identity: str) -> OverlayState:
        """Expand `identity`, replacing any current target."""
        if self._state.target != identity:
            logger.debug("overlay expand %s (was %s)", identity, self._state.target)
        self._state = OverlayState(target=identity)
        return self._state

    def collapse(self) -> OverlayState:
        self._state = COLLAPSED
        return self._state

    def toggle(self, identity: str) -> OverlayState:
        if self._state.target == identity:
            return self.collapse()
        return self.expand(identity)

    def release(self, identity: str) -> OverlayState:
        """Collapse only if `identity` is the expanded target."""
        if self._state.target == identity:
            return self.collapse()
        return self._state


__all__ = ["OverlayEditor", "OverlayState", "COLLAPSED"]
