"""Shared pytest fixtures for feedterm tests."""

from typing import Callable
from unittest.mock import MagicMock

import pytest

from feedterm.backend import FeedBackend
from feedterm.models import FeedItem


def _item(item_id: int, title: str, body: str) -> FeedItem:
    return FeedItem(
        id=item_id,
        title=title,
        body=body,
        published_at="2024-01-15T10:00:00",
        author_id=1,
        author_name="alice",
    )


def _screen(height: int = 24, width: int = 80) -> MagicMock:
    screen = MagicMock()
    screen.getmaxyx.return_value = (height, width)
    screen.subwindows = []

    def derwin(box_h, box_w, top, left):
        sub = MagicMock()
        sub.getmaxyx.return_value = (box_h, box_w)
        sub.getparyx.return_value = (top, left)
        screen.subwindows.append(sub)
        return sub

    screen.derwin.side_effect = derwin
    return screen


@pytest.fixture
def sample_items() -> list[FeedItem]:
    """Three items titled A, B and C."""
    return [
        _item(1, "A", "first body"),
        _item(2, "B", "second body\n\nwith a gap"),
        _item(3, "C", "third body"),
    ]


@pytest.fixture
def mock_backend(sample_items) -> MagicMock:
    """
    Mock FeedBackend for testing without the content service.

    Returns:
        MagicMock with a stored credential and the sample items listed
    """
    mock = MagicMock(spec=FeedBackend)
    mock.list_items.return_value = list(sample_items)
    mock.has_credentials.return_value = True
    mock.login.return_value = None
    mock.create_item.return_value = {"id": 99}
    return mock


@pytest.fixture
def screen_factory() -> Callable[..., MagicMock]:
    """
    Build mock curses windows for rendering without a terminal.

    derwin() returns child mocks sized to the requested box; they are
    collected on ``screen.subwindows``.
    """
    return _screen
