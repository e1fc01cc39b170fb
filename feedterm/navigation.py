"""Selection, sidebar and content scroll policies for the two-pane view.

Every operation takes the current NavigationState and returns a new one;
nothing here touches the terminal.
"""

from dataclasses import replace
from itertools import islice
from typing import Optional, Sequence

from .models import ContentView, FeedItem, NavigationState, SidebarEntry
from .text_wrap import printable, wrap_text

SIDEBAR_LABEL_WIDTH = 20
ELLIPSIS = "..."


def scroll_content_down(state: NavigationState, max_offset: Optional[int] = None) -> NavigationState:
    """Scroll the reading pane one line down.

    Unbounded unless ``max_offset`` is given, so the body can be scrolled
    past its last line.
    """
    offset = state.content_offset + 1
    if max_offset is not None:
        offset = min(offset, max(0, max_offset))
    return replace(state, content_offset=offset)


def scroll_content_up(state: NavigationState) -> NavigationState:
    return replace(state, content_offset=max(0, state.content_offset - 1))


def next_item(state: NavigationState, items: Sequence[FeedItem]) -> NavigationState:
    """Select the next item, wrapping to the first.

    The sidebar offset runs 0..len(items)-1 on its own counter and wraps
    to 0 independently of the selection.
    """
    count = len(items)
    if count == 0:
        return state
    if state.sidebar_offset <= count - 2:
        sidebar_offset = state.sidebar_offset + 1
    else:
        sidebar_offset = 0
    return NavigationState(
        selected_index=(state.selected_index + 1) % count,
        sidebar_offset=sidebar_offset,
        content_offset=0,
    )


def prev_item(state: NavigationState, items: Sequence[FeedItem]) -> NavigationState:
    """Select the previous item, wrapping to the last."""
    count = len(items)
    if count == 0:
        return state
    if state.sidebar_offset > 0:
        sidebar_offset = state.sidebar_offset - 1
    else:
        sidebar_offset = count - 1
    selected_index = state.selected_index - 1
    if selected_index < 0:
        selected_index = count - 1
    return NavigationState(
        selected_index=selected_index,
        sidebar_offset=sidebar_offset,
        content_offset=0,
    )


def truncate_label(title: str, width: int = SIDEBAR_LABEL_WIDTH) -> str:
    title = printable(title)
    if len(title) > width:
        return title[:width] + ELLIPSIS
    return title


def visible_sidebar_slice(
    state: NavigationState,
    items: Sequence[FeedItem],
    viewport_height: int,
) -> list[SidebarEntry]:
    """Items shown in the list pane, starting at the sidebar offset."""
    if viewport_height <= 0 or not items:
        return []
    start = max(0, state.sidebar_offset)
    entries = []
    for index in range(start, min(len(items), start + viewport_height)):
        entries.append(
            SidebarEntry(
                index=index,
                label=truncate_label(items[index].title),
                selected=index == state.selected_index,
            )
        )
    return entries


def center_title(title: str, width: int) -> str:
    if width <= 0:
        return ""
    title = printable(title)[:width]
    start = max(0, (width - len(title)) // 2)
    return " " * start + title


def footer_line(item: FeedItem) -> str:
    return printable(f"Author: {item.author_name}, Published: {item.published_at}")


def visible_content_lines(
    state: NavigationState,
    item: FeedItem,
    viewport_width: int,
    viewport_height: int,
) -> ContentView:
    """Wrapped body lines below the title, from the content offset.

    The body gets ``viewport_height - 1`` rows; the last row is kept for
    the author/publication footer.
    """
    body_rows = max(0, viewport_height - 1)
    lines: list[str] = []
    if viewport_width > 0 and body_rows > 0:
        wrapped = wrap_text(item.body, viewport_width)
        start = max(0, state.content_offset)
        lines = list(islice(wrapped, start, start + body_rows))
    return ContentView(
        title=center_title(item.title, viewport_width),
        lines=lines,
        footer=footer_line(item),
    )


def max_content_offset(item: FeedItem, viewport_width: int, viewport_height: int) -> int:
    """Largest offset that still fills the body rows."""
    if viewport_width <= 0:
        return 0
    body_rows = max(0, viewport_height - 1)
    return max(0, wrap_text(item.body, viewport_width).count() - body_rows)
