"""Collaborators behind the dashboard: token storage, drafts, and service calls."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .cli.client import ContentServiceClient
from .models import FeedItem

logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    """A submission could not be attempted (missing title, draft or credential)."""


class TokenStore:
    """Persisted access token, one line in a private file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def save(self, token: str):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token)
        try:
            os.chmod(self.path, 0o600)
        except OSError as e:
            logger.warning(f"Could not restrict permissions on {self.path}: {e}")

    def load(self) -> Optional[str]:
        """Stored token, or None when absent, blank or unreadable."""
        if not self.path.is_file():
            return None
        try:
            token = self.path.read_text().strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None
        return token or None


def load_draft(path: Union[str, Path]) -> str:
    """Read the body draft file used when the form's Body field is blank.

    Raises:
        SubmissionError: If the file is missing, unreadable or empty
    """
    draft_path = Path(path).expanduser()
    try:
        content = draft_path.read_text()
    except OSError as e:
        raise SubmissionError(f"Cannot read draft {draft_path}: {e.strerror or e}")
    except UnicodeDecodeError:
        raise SubmissionError(f"Cannot read draft {draft_path}: not valid UTF-8 text")
    if not content.strip():
        raise SubmissionError("Draft is empty, nothing to post")
    return content


class FeedBackend:
    """Everything the dashboard needs from the outside world."""

    def __init__(
        self,
        client: ContentServiceClient,
        token_store: TokenStore,
        draft_file: Union[str, Path] = "post.txt",
    ):
        self.client = client
        self.token_store = token_store
        self.draft_file = Path(draft_file)

    def list_items(self) -> list[FeedItem]:
        items = self.client.list_items()
        logger.info(f"Fetched {len(items)} item(s)")
        return items

    def has_credentials(self) -> bool:
        return self.token_store.load() is not None

    def login(self, username: str, password: str):
        """Authenticate and persist the returned token.

        Raises:
            ServiceError: If the service rejects the credentials
            SubmissionError: If username or password is blank
        """
        if not username or not password:
            raise SubmissionError("Username and password are required")
        token = self.client.authenticate(username, password)
        self.token_store.save(token)
        logger.info(f"Logged in as {username}")

    def create_item(self, title: str, body: str = "") -> dict:
        """Submit a new item, falling back to the draft file for the body.

        Raises:
            ServiceError: If the service rejects the item
            SubmissionError: If the title, body or stored token is missing
        """
        if not title:
            raise SubmissionError("Title cannot be empty")
        token = self.token_store.load()
        if token is None:
            raise SubmissionError("Please login first to create an item")
        if not body:
            body = load_draft(self.draft_file)
        result = self.client.submit_item(token, title, body)
        logger.info(f"Created item {title!r}")
        return result
