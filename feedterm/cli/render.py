"""Curses drawing for the feed dashboard: sidebar, reading pane and overlays."""

from __future__ import annotations

import curses
from typing import Optional, Sequence

from ..models import (
    Active,
    ErrorShown,
    FeedItem,
    FormField,
    NavigationState,
    Notice,
    OverlayKind,
    OverlayState,
    Submitting,
)
from ..navigation import visible_content_lines, visible_sidebar_slice
from ..overlay import TOGGLE_KEYS

SIDEBAR_WIDTH = 23  # 20-char label + ellipsis
DIVIDER_X = 23
CONTENT_X = 25
NO_DATA_MESSAGE = "No items available or failed to fetch items."

# height, width, top, left
_FORM_BOX = (10, 40, 6, 10)
_NOTICE_BOX = (10, 50, 6, 10)
_FIELD_X = 11


def init_colors() -> dict[str, int]:
    palette = {"sidebar": 0, "content": 0, "overlay": 0, "error": 0, "status": 0}

    if not curses.has_colors():
        return palette

    try:
        curses.start_color()
        curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLUE)
        curses.init_pair(2, curses.COLOR_BLACK, curses.COLOR_WHITE)
        curses.init_pair(3, curses.COLOR_RED, curses.COLOR_BLACK)
        curses.init_pair(4, curses.COLOR_GREEN, curses.COLOR_BLACK)

        palette["sidebar"] = curses.color_pair(1)
        palette["overlay"] = curses.color_pair(2)
        palette["error"] = curses.color_pair(3)
        palette["status"] = curses.color_pair(4)
    except curses.error:
        return {k: 0 for k in palette}

    return palette


def key_label(key: int) -> str:
    if curses.KEY_F0 < key <= curses.KEY_F0 + 63:
        return f"F{key - curses.KEY_F0}"
    if 32 <= key <= 126:
        return chr(key)
    return str(key)


def field_display(form_field: FormField, width: int, mask_secrets: bool = True) -> tuple[str, int]:
    """Visible text of a field and the cursor column within it.

    Buffers wider than the box scroll so the cursor stays in view.
    """
    if width <= 0:
        return "", 0
    text = form_field.buffer
    if form_field.masked and mask_secrets:
        text = "*" * len(text)
    start = max(0, form_field.cursor - width + 1)
    return text[start: start + width], form_field.cursor - start


def _put(win, y: int, x: int, text: str, attr: int = 0):
    height, width = win.getmaxyx()
    if y < 0 or y >= height or x < 0 or x >= width:
        return
    limit = width - x
    if y == height - 1:
        # Writing the bottom-right cell raises in curses
        limit -= 1
    if limit <= 0:
        return
    win.addnstr(y, x, text, limit, attr)


def render_sidebar(win, items: Sequence[FeedItem], nav: NavigationState, palette: dict[str, int]):
    height, _ = win.getmaxyx()
    for row, entry in enumerate(visible_sidebar_slice(nav, items, height)):
        attr = palette.get("sidebar", 0)
        if entry.selected:
            attr |= curses.A_REVERSE
        _put(win, row, 0, entry.label[:SIDEBAR_WIDTH], attr)


def render_content(win, items: Sequence[FeedItem], nav: NavigationState, palette: dict[str, int]):
    height, width = win.getmaxyx()
    content_width = width - CONTENT_X
    if content_width <= 0 or height <= 0:
        return
    if not items or not 0 <= nav.selected_index < len(items):
        _put(win, 0, CONTENT_X, NO_DATA_MESSAGE, palette.get("content", 0))
        return

    view = visible_content_lines(nav, items[nav.selected_index], content_width, height - 1)
    _put(win, 0, CONTENT_X, view.title, curses.A_BOLD)
    for row, line in enumerate(view.lines, start=1):
        _put(win, row, CONTENT_X, line, palette.get("content", 0))
    if height > 1:
        _put(win, height - 1, CONTENT_X, view.footer, curses.A_DIM)


def _box(win, geometry: tuple[int, int, int, int]):
    height, width = win.getmaxyx()
    box_h, box_w, top, left = geometry
    box_h = min(box_h, height)
    box_w = min(box_w, width)
    if box_h < 3 or box_w < 3:
        return None
    top = max(0, min(top, height - box_h))
    left = max(0, min(left, width - box_w))
    sub = win.derwin(box_h, box_w, top, left)
    sub.erase()
    sub.box()
    return sub


def render_overlay(
    win,
    overlay: OverlayState,
    palette: dict[str, int],
    mask_secrets: bool = True,
) -> Optional[tuple[int, int]]:
    """Draw the modal box for any overlay state other than Closed.

    Returns the screen position of the edit cursor while a form is Active.
    """
    if isinstance(overlay, Notice):
        box = _box(win, _NOTICE_BOX)
        if box is None:
            return None
        _put(box, 1, 1, overlay.message, palette.get("overlay", 0))
        _put(box, 2, 1, f"Press {key_label(TOGGLE_KEYS[overlay.kind])} to close.")
        return None

    if not isinstance(overlay, (Active, Submitting, ErrorShown)):
        return None

    box = _box(win, _FORM_BOX)
    if box is None:
        return None
    _, box_w = box.getmaxyx()
    field_width = box_w - _FIELD_X - 1

    fields = overlay.fields if isinstance(overlay, (Active, Submitting)) else []
    for row, form_field in enumerate(fields, start=1):
        _put(box, row, 1, f"{form_field.label}:")
        shown, _ = field_display(form_field, field_width, mask_secrets)
        _put(box, row, _FIELD_X, shown.ljust(field_width), curses.A_UNDERLINE)

    hint_row = len(fields) + 2
    toggle = key_label(TOGGLE_KEYS[overlay.kind])
    if isinstance(overlay, Active):
        action = "login" if overlay.kind == OverlayKind.LOGIN else "submit"
        _put(box, hint_row, 1, f"Press {toggle} again to {action}.")
        _, cursor_x = field_display(overlay.focused, field_width, mask_secrets)
        if field_width > 0:
            top, left = box.getparyx()
            return top + overlay.focus_index + 1, left + _FIELD_X + cursor_x
    elif isinstance(overlay, Submitting):
        _put(box, hint_row, 1, "Submitting...")
    else:
        title = "Login failed." if overlay.kind == OverlayKind.LOGIN else "Create item failed."
        _put(box, 1, 1, title, palette.get("error", 0) | curses.A_BOLD)
        _put(box, 2, 1, overlay.message, palette.get("error", 0))
        _put(box, 4, 1, "Press any key to close.")
    return None


def render_dashboard(
    stdscr,
    items: Sequence[FeedItem],
    nav: NavigationState,
    overlay: OverlayState,
    palette: Optional[dict[str, int]] = None,
    status_message: Optional[str] = None,
    mask_secrets: bool = True,
):
    """Redraw the whole screen for the current state."""
    palette = palette or {}
    stdscr.erase()
    height, width = stdscr.getmaxyx()

    render_sidebar(stdscr, items, nav, palette)
    if width > DIVIDER_X:
        stdscr.vline(0, DIVIDER_X, getattr(curses, "ACS_VLINE", ord("|")), height)
    render_content(stdscr, items, nav, palette)

    if status_message and height > 0:
        _put(stdscr, height - 1, CONTENT_X, status_message.ljust(max(0, width - CONTENT_X)),
             palette.get("status", 0) | curses.A_BOLD)

    cursor = render_overlay(stdscr, overlay, palette, mask_secrets=mask_secrets)
    if cursor is not None:
        stdscr.move(*cursor)
    stdscr.refresh()
