"""Data models for the feedterm dashboard."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class OverlayKind(Enum):
    """Modal form overlays the dashboard can open."""
    LOGIN = "login"
    CREATE_ITEM = "create_item"


@dataclass(frozen=True)
class FeedItem:
    """A single item fetched from the content service."""
    id: int
    title: str
    body: str
    published_at: str
    author_id: int
    author_name: str = "Unknown Author"


@dataclass(frozen=True)
class NavigationState:
    """Cursor and view offsets for the two-pane layout.

    sidebar_offset is advanced by its own wrapping counter rather than
    derived from selected_index, so the two can drift apart.
    """
    selected_index: int = 0
    sidebar_offset: int = 0
    content_offset: int = 0


@dataclass
class FormField:
    """One editable line inside a form overlay."""
    label: str
    buffer: str = ""
    cursor: int = 0
    masked: bool = False

    def insert(self, char: str):
        self.buffer = self.buffer[: self.cursor] + char + self.buffer[self.cursor:]
        self.cursor += len(char)

    def delete_prev(self):
        if self.cursor <= 0:
            return
        self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor:]
        self.cursor -= 1

    def move_to_end(self):
        self.cursor = len(self.buffer)

    def value(self) -> str:
        """Buffer contents trimmed of surrounding whitespace."""
        return self.buffer.strip()


@dataclass(frozen=True)
class SidebarEntry:
    """A render row in the item list pane."""
    index: int
    label: str
    selected: bool = False


@dataclass(frozen=True)
class ContentView:
    """Title, visible body lines and footer for the reading pane."""
    title: str
    lines: List[str]
    footer: str


@dataclass(frozen=True)
class Closed:
    """No overlay; keys go to normal navigation."""


@dataclass
class Active:
    """A form overlay capturing keystrokes."""
    kind: OverlayKind
    fields: List[FormField] = field(default_factory=list)
    focus_index: int = 0

    @property
    def focused(self) -> FormField:
        return self.fields[self.focus_index]


@dataclass
class Submitting:
    """Form values handed off, waiting on the content service."""
    kind: OverlayKind
    fields: List[FormField] = field(default_factory=list)


@dataclass(frozen=True)
class ErrorShown:
    """Submission failed; any key dismisses."""
    kind: OverlayKind
    message: str


@dataclass(frozen=True)
class Notice:
    """Read-only message dismissed only by its kind's toggle key."""
    kind: OverlayKind
    message: str


OverlayState = Union[Closed, Active, Submitting, ErrorShown, Notice]

CLOSED = Closed()


def is_open(state: Optional[OverlayState]) -> bool:
    """True when an overlay supersedes normal navigation."""
    return state is not None and not isinstance(state, Closed)
