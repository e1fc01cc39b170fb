"""Two-pane curses dashboard for browsing and posting feed items."""

from __future__ import annotations

import curses
import logging
from typing import Optional

from ..backend import FeedBackend, TokenStore
from ..config import DashboardConfig
from ..models import (
    CLOSED,
    Active,
    FeedItem,
    NavigationState,
    OverlayKind,
    OverlayState,
    Submitting,
    is_open,
)
from ..navigation import (
    max_content_offset,
    next_item,
    prev_item,
    scroll_content_down,
    scroll_content_up,
)
from ..overlay import FormOverlayEngine
from .client import ContentServiceClient
from .render import CONTENT_X, init_colors, render_dashboard

logger = logging.getLogger(__name__)

QUIT_KEY = ord("q")
REFRESH_KEY = curses.KEY_F5

_SUCCESS_MESSAGES = {
    OverlayKind.LOGIN: "Logged in.",
    OverlayKind.CREATE_ITEM: "Item created. Press F5 to refresh.",
}


class FeedDashboard:
    """Routes keys to navigation or to the open overlay.

    Owns the item list, the NavigationState and the one OverlayState.
    The curses loop in ``run`` is the only place that waits for a key.
    """

    def __init__(
        self,
        backend: FeedBackend,
        engine: Optional[FormOverlayEngine] = None,
        clamp_content_scroll: bool = False,
        mask_secrets: bool = True,
    ):
        self.backend = backend
        self.engine = engine or FormOverlayEngine(backend)
        self.clamp_content_scroll = clamp_content_scroll
        self.mask_secrets = mask_secrets

        self.items: list[FeedItem] = []
        self.nav = NavigationState()
        self.overlay: OverlayState = CLOSED
        self.status_message: Optional[str] = None
        self.running = True
        self.screen_size = (24, 80)

    @property
    def selected_item(self) -> Optional[FeedItem]:
        if 0 <= self.nav.selected_index < len(self.items):
            return self.items[self.nav.selected_index]
        return None

    def refresh(self):
        """Replace the item list and reset navigation."""
        self.items = self.backend.list_items()
        self.nav = NavigationState()
        if not self.items:
            logger.warning("Refresh returned no items")

    def handle_key(self, key: int):
        """Process one keystroke to completion."""
        if is_open(self.overlay):
            self.overlay = self.engine.handle_key(self.overlay, key)
            logger.debug(f"Overlay key {key} -> {type(self.overlay).__name__}")
            return

        self.status_message = None

        if key == QUIT_KEY:
            self.running = False
        elif key == curses.KEY_DOWN:
            self.nav = scroll_content_down(self.nav, self._content_limit())
        elif key == curses.KEY_UP:
            self.nav = scroll_content_up(self.nav)
        elif key == curses.KEY_NPAGE:
            self.nav = next_item(self.nav, self.items)
        elif key == curses.KEY_PPAGE:
            self.nav = prev_item(self.nav, self.items)
        elif key == REFRESH_KEY:
            self.refresh()
        else:
            kind = self.engine.kind_for_trigger(key)
            if kind is not None:
                self.overlay = self.engine.open(kind)
                logger.debug(f"Opened {kind.value} overlay")

    def complete_submission(self):
        """Run the blocking service call for a Submitting overlay."""
        if not isinstance(self.overlay, Submitting):
            return
        kind = self.overlay.kind
        self.overlay = self.engine.submit(self.overlay)
        if not is_open(self.overlay):
            self.status_message = _SUCCESS_MESSAGES[kind]

    def _content_limit(self) -> Optional[int]:
        if not self.clamp_content_scroll:
            return None
        item = self.selected_item
        if item is None:
            return 0
        height, width = self.screen_size
        return max_content_offset(item, width - CONTENT_X, height - 1)

    def render(self, stdscr, palette: Optional[dict[str, int]] = None):
        self.screen_size = stdscr.getmaxyx()
        render_dashboard(
            stdscr,
            self.items,
            self.nav,
            self.overlay,
            palette=palette,
            status_message=self.status_message,
            mask_secrets=self.mask_secrets,
        )
        _set_cursor(isinstance(self.overlay, Active))

    def run(self, stdscr) -> int:
        """Event loop; call through curses.wrapper."""
        stdscr.keypad(True)
        stdscr.nodelay(False)
        palette = init_colors()
        self.refresh()

        while self.running:
            self.render(stdscr, palette)
            if isinstance(self.overlay, Submitting):
                self.complete_submission()
                continue
            self.handle_key(stdscr.getch())
        return 0


def _set_cursor(visible: bool):
    try:
        curses.curs_set(1 if visible else 0)
    except curses.error:
        # Terminal has no cursor visibility control
        pass


def run_dashboard(config: DashboardConfig) -> int:
    """Entry point for the `feedterm` command."""
    client = ContentServiceClient(api_url=config.api_url, timeout=config.request_timeout)
    backend = FeedBackend(
        client=client,
        token_store=TokenStore(config.token_file),
        draft_file=config.draft_file,
    )
    dashboard = FeedDashboard(
        backend,
        clamp_content_scroll=config.clamp_content_scroll,
        mask_secrets=config.mask_secrets,
    )
    logger.info(f"Starting dashboard against {client.api_url}")
    try:
        return curses.wrapper(dashboard.run)
    finally:
        client.close()
