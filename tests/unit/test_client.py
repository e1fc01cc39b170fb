"""Unit tests for ContentServiceClient request building and error mapping."""

from unittest.mock import patch

import httpx
import pytest

from feedterm.cli.client import UNKNOWN_AUTHOR, ContentServiceClient, ServiceError


def _make_client(handler=None) -> ContentServiceClient:
    transport = httpx.MockTransport(handler or (lambda request: httpx.Response(404)))
    return ContentServiceClient(api_url="http://feed.test/", http=httpx.Client(transport=transport))


def _post(post_id: int, author_id: int = 1) -> dict:
    return {
        "id": post_id,
        "title": f"post {post_id}",
        "content": "body",
        "published": "2024-01-15",
        "author_id": author_id,
    }


def test_api_url_from_environment(monkeypatch):
    monkeypatch.setenv("FEEDTERM_API_URL", "http://env.test")
    client = ContentServiceClient()
    assert client.api_url == "http://env.test"
    client.close()


def test_authenticate_posts_form_payload():
    client = _make_client()
    captured = {}

    def fake_request(method, path, json=None, data=None, headers=None):
        captured.update(method=method, path=path, data=data, json=json)
        return {"access_token": "tok", "token_type": "bearer"}, True, False, 200

    with patch.object(client, "_request", side_effect=fake_request):
        token = client.authenticate("bob", "pw")

    assert token == "tok"
    assert captured == {"method": "POST", "path": "/login", "data": {"username": "bob", "password": "pw"}, "json": None}


def test_authenticate_without_token_fails():
    client = _make_client()
    with patch.object(client, "_request", return_value=({"detail": "ok"}, True, False, 200)):
        with pytest.raises(ServiceError, match="no access token"):
            client.authenticate("bob", "pw")


def test_authenticate_rejected():
    client = _make_client(lambda request: httpx.Response(403, json={"detail": "Invalid Credentials"}))
    with pytest.raises(ServiceError) as exc_info:
        client.authenticate("bob", "bad")
    assert exc_info.value.status_code == 403
    assert "HTTP 403" in str(exc_info.value)


def test_authenticate_unreachable():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _make_client(refuse)
    with pytest.raises(ServiceError, match="unavailable") as exc_info:
        client.authenticate("bob", "pw")
    assert exc_info.value.status_code is None


def test_submit_item_sends_bearer_token():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content
        return httpx.Response(201, json={"id": 11})

    client = _make_client(handler)
    assert client.submit_item("tok", "Hi", "there") == {"id": 11}
    assert seen["auth"] == "Bearer tok"
    assert b'"content"' in seen["body"]


def test_submit_item_requires_created_status():
    client = _make_client(lambda request: httpx.Response(200, json={"id": 11}))
    with pytest.raises(ServiceError, match="HTTP 200"):
        client.submit_item("tok", "Hi", "there")


def test_list_items_resolves_each_author_once():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        if request.url.path == "/posts":
            return httpx.Response(200, json=[_post(1, 7), _post(2, 7), _post(3, 8)])
        if request.url.path == "/users/7":
            return httpx.Response(200, json={"username": "alice"})
        return httpx.Response(404)

    items = _make_client(handler).list_items()

    assert [(i.id, i.author_name) for i in items] == [(1, "alice"), (2, "alice"), (3, UNKNOWN_AUTHOR)]
    assert items[0].body == "body"
    assert items[0].published_at == "2024-01-15"
    assert calls == ["/posts", "/users/7", "/users/8"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500),
        httpx.Response(200, json={"posts": []}),
        httpx.Response(200, json=[{"id": 1}]),
        httpx.Response(200, text="<html>"),
    ],
)
def test_list_items_returns_empty_on_failure(response):
    assert _make_client(lambda request: response).list_items() == []


def test_author_name_placeholder_on_malformed_payload():
    client = _make_client(lambda request: httpx.Response(200, json={"name": "x"}))
    assert client.get_author_name(3) == UNKNOWN_AUTHOR
