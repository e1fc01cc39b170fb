"""Modal login and create-item forms, driven one key at a time.

The dashboard owns a single OverlayState value and feeds it every key
while it is not Closed:

    Closed --trigger--> Active --toggle--> Submitting --ok--> Closed
    Submitting --fail--> ErrorShown --any key--> Closed
    Closed --create trigger, no token--> Notice --toggle--> Closed
"""

import curses
import logging
from typing import Optional

from .backend import FeedBackend, SubmissionError
from .cli.client import ServiceError
from .models import (
    CLOSED,
    Active,
    ErrorShown,
    FormField,
    Notice,
    OverlayKind,
    OverlayState,
    Submitting,
)

logger = logging.getLogger(__name__)

TOGGLE_KEYS = {
    OverlayKind.LOGIN: curses.KEY_F1,
    OverlayKind.CREATE_ITEM: curses.KEY_F2,
}
DELETE_KEYS = frozenset({curses.KEY_BACKSPACE, 127, 8})
LOGIN_REQUIRED = "Please login first to create an item."


def login_fields() -> list[FormField]:
    return [FormField("Username"), FormField("Password", masked=True)]


def create_item_fields() -> list[FormField]:
    # Blank body falls back to the draft file
    return [FormField("Title"), FormField("Body")]


def _is_printable(key: int) -> bool:
    return 32 <= key <= 126


class FormOverlayEngine:
    """Opens, edits and submits form overlays."""

    def __init__(self, backend: FeedBackend, toggle_keys: Optional[dict[OverlayKind, int]] = None):
        self.backend = backend
        self.toggle_keys = dict(toggle_keys or TOGGLE_KEYS)

    def kind_for_trigger(self, key: int) -> Optional[OverlayKind]:
        for kind, toggle in self.toggle_keys.items():
            if toggle == key:
                return kind
        return None

    def open(self, kind: OverlayKind) -> OverlayState:
        """Build the overlay for a trigger key pressed in normal mode."""
        if kind == OverlayKind.LOGIN:
            return Active(kind, login_fields())
        if not self.backend.has_credentials():
            logger.info("Create item requested without a stored token")
            return Notice(kind, LOGIN_REQUIRED)
        return Active(kind, create_item_fields())

    def handle_key(self, state: OverlayState, key: int) -> OverlayState:
        """Apply one keystroke and return the next overlay state."""
        if isinstance(state, ErrorShown):
            return CLOSED
        if isinstance(state, Notice):
            return CLOSED if key == self.toggle_keys[state.kind] else state
        if isinstance(state, Active):
            return self._edit(state, key)
        # Closed and Submitting take no keys
        return state

    def _edit(self, state: Active, key: int) -> OverlayState:
        if key == self.toggle_keys[state.kind]:
            return Submitting(state.kind, state.fields)

        if key == curses.KEY_DOWN:
            state.focus_index = (state.focus_index + 1) % len(state.fields)
            state.focused.move_to_end()
        elif key == curses.KEY_UP:
            state.focus_index = (state.focus_index - 1) % len(state.fields)
            state.focused.move_to_end()
        elif key in DELETE_KEYS:
            state.focused.delete_prev()
        elif _is_printable(key):
            state.focused.insert(chr(key))
        return state

    def submit(self, state: Submitting) -> OverlayState:
        """Hand trimmed field values to the backend. Blocks on the network."""
        values = [f.value() for f in state.fields]
        try:
            if state.kind == OverlayKind.LOGIN:
                self.backend.login(values[0], values[1])
            else:
                self.backend.create_item(values[0], values[1])
        except (ServiceError, SubmissionError) as e:
            logger.warning(f"{state.kind.value} submission failed: {e}")
            return ErrorShown(state.kind, str(e))
        except OSError as e:
            logger.error(f"{state.kind.value} submission failed on local I/O: {e}")
            return ErrorShown(state.kind, f"Local I/O error: {e.strerror or e}")
        return CLOSED
