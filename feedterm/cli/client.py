"""HTTP client for the feed content service."""

import logging
import os
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ..models import FeedItem

logger = logging.getLogger(__name__)

# Default API endpoint
DEFAULT_API_URL = "http://127.0.0.1:8000"
API_TIMEOUT = 10  # seconds
UNKNOWN_AUTHOR = "Unknown Author"


class ServiceError(RuntimeError):
    """A content service call failed.

    ``status_code`` is None when the service could not be reached at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PostPayload(BaseModel):
    """One entry of GET /posts."""
    id: int
    title: str
    content: str
    published: str
    author_id: int


class UserPayload(BaseModel):
    """Response of GET /users/{id}."""
    username: str


class TokenPayload(BaseModel):
    """Response of POST /login."""
    access_token: str


class ContentServiceClient:
    """Client for the content service API."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: float = API_TIMEOUT,
        http: Optional[httpx.Client] = None,
    ):
        """
        Initialize client.

        Args:
            api_url: Base URL for API (default: http://127.0.0.1:8000)
            timeout: Per-request timeout in seconds
            http: Pre-built httpx client; tests pass a FastAPI TestClient here
        """
        self.api_url = (api_url or os.environ.get("FEEDTERM_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout
        self._http = http or httpx.Client(timeout=timeout)

    def close(self):
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        data: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> tuple[Any, bool, bool, Optional[int]]:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST)
            path: API path
            json: Optional JSON body
            data: Optional form-encoded body
            headers: Optional extra headers

        Returns:
            Tuple of (response_data, success, unavailable, status_code)
            - success=True, unavailable=False: 200/201 with a JSON body
            - success=False, unavailable=True: connection error or timeout
            - success=False, unavailable=False: API error or non-JSON body
        """
        url = f"{self.api_url}{path}"
        try:
            response = self._http.request(method, url, json=json, data=data, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            return None, False, True, None

        if response.status_code not in (200, 201):
            logger.warning(f"{method} {path} returned HTTP {response.status_code}")
            return None, False, False, response.status_code

        try:
            return response.json(), True, False, response.status_code
        except ValueError:
            logger.warning(f"{method} {path} returned a non-JSON body")
            return None, False, False, response.status_code

    def get_author_name(self, author_id: int) -> str:
        """Resolve an author's display name, or the placeholder on any failure."""
        data, success, _, _ = self._request("GET", f"/users/{author_id}")
        if not success:
            return UNKNOWN_AUTHOR
        try:
            return UserPayload.model_validate(data).username
        except ValidationError:
            logger.warning(f"Malformed user payload for author {author_id}")
            return UNKNOWN_AUTHOR

    def list_items(self) -> list[FeedItem]:
        """Fetch all items with author names resolved. Empty on failure."""
        data, success, _, _ = self._request("GET", "/posts")
        if not success:
            return []
        if not isinstance(data, list):
            logger.warning("Malformed /posts payload: expected a list")
            return []

        try:
            posts = [PostPayload.model_validate(entry) for entry in data]
        except ValidationError as e:
            logger.warning(f"Malformed /posts payload: {e.error_count()} error(s)")
            return []

        authors: dict[int, str] = {}
        items = []
        for post in posts:
            if post.author_id not in authors:
                authors[post.author_id] = self.get_author_name(post.author_id)
            items.append(
                FeedItem(
                    id=post.id,
                    title=post.title,
                    body=post.content,
                    published_at=post.published,
                    author_id=post.author_id,
                    author_name=authors[post.author_id],
                )
            )
        return items

    def authenticate(self, username: str, password: str) -> str:
        """Exchange credentials for an access token.

        Raises:
            ServiceError: If the service rejects the login or is unreachable
        """
        data, success, unavailable, status_code = self._request(
            "POST",
            "/login",
            data={"username": username, "password": password},
        )
        if unavailable:
            raise ServiceError("Content service unavailable")
        if not success:
            raise ServiceError(f"Login failed (HTTP {status_code})", status_code)
        try:
            return TokenPayload.model_validate(data).access_token
        except ValidationError:
            raise ServiceError("Login succeeded but no access token was provided", status_code)

    def submit_item(self, token: str, title: str, body: str) -> dict:
        """Create a new item on behalf of the token's owner.

        Raises:
            ServiceError: If the service rejects the item or is unreachable
        """
        data, success, unavailable, status_code = self._request(
            "POST",
            "/posts",
            json={"title": title, "content": body},
            headers={"Authorization": f"Bearer {token}"},
        )
        if unavailable:
            raise ServiceError("Content service unavailable")
        if not success or status_code != 201:
            raise ServiceError(f"Failed to create item (HTTP {status_code})", status_code)
        return data if isinstance(data, dict) else {}
