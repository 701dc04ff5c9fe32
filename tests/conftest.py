"""Shared pytest fixtures for the Beeper Desktop SDK tests."""

import os
from collections.abc import Callable
from unittest.mock import patch

import httpx
import pytest

from beeper_desktop import AsyncBeeperDesktop, BeeperDesktop, RetryLogic


@pytest.fixture(autouse=True)
def clean_env():
    """Hide any BEEPER_* variables from the developer's shell."""
    env_vars = {key: value for key, value in os.environ.items() if not key.startswith("BEEPER_")}
    with patch.dict(os.environ, env_vars, clear=True):
        yield


@pytest.fixture
def base_url():
    return "http://beeper.test:23373"


@pytest.fixture
def access_token():
    return "test-access-token"


class ScriptedHandler:
    """MockTransport handler replaying a fixed list of responses.

    Each entry is either an ``httpx.Response`` or an exception instance to
    raise.  Every request seen is recorded in ``requests``.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def handle_async(self, request: httpx.Request) -> httpx.Response:
        return self(request)


@pytest.fixture
def make_client(base_url, access_token) -> Callable[..., BeeperDesktop]:
    """Build a sync client over a ScriptedHandler with instant retries."""
    clients = []

    def factory(handler: Callable, **kwargs) -> BeeperDesktop:
        kwargs.setdefault("max_retries", 0)
        client = BeeperDesktop(
            access_token,
            base_url=base_url,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        client._retry = RetryLogic(client.max_retries, base_delay=0.0)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def make_async_client(base_url, access_token) -> Callable[..., AsyncBeeperDesktop]:
    """Build an async client over a ScriptedHandler with instant retries."""

    def factory(handler: ScriptedHandler, **kwargs) -> AsyncBeeperDesktop:
        kwargs.setdefault("max_retries", 0)
        client = AsyncBeeperDesktop(
            access_token,
            base_url=base_url,
            transport=httpx.MockTransport(handler.handle_async),
            **kwargs,
        )
        client._retry = RetryLogic(client.max_retries, base_delay=0.0)
        return client

    return factory


@pytest.fixture
def mock_chat_response():
    return {
        "id": "chat-1",
        "accountID": "whatsapp",
        "network": "WhatsApp",
        "title": "Project Updates",
        "type": "group",
        "unreadCount": 2,
        "participants": {
            "hasMore": False,
            "items": [{"id": "user-1", "fullName": "Sam Doe", "isSelf": True}],
            "total": 1,
        },
        "isMuted": False,
        "lastReadMessageSortKey": 1024,
    }


@pytest.fixture
def mock_message_response():
    return {
        "id": "m-1",
        "accountID": "whatsapp",
        "chatID": "chat-1",
        "messageID": "msg-1",
        "senderID": "user-1",
        "sortKey": "000123",
        "timestamp": "2024-01-15T10:00:00Z",
        "senderName": "Sam Doe",
        "text": "hello",
        "attachments": [{"type": "img", "fileName": "cat.png", "size": {"height": 10, "width": 20}}],
        "reactions": [{"id": "r-1", "participantID": "user-2", "reactionKey": "+1", "emoji": True}],
    }


def page(items, cursor=None, has_more=None, **pagination):
    """Build a paginated JSON response; pass has_more=None to omit pagination."""
    body = {"items": items}
    if has_more is not None:
        body["pagination"] = {"cursor": cursor, "has_more": has_more, **pagination}
    return httpx.Response(200, json=body)


@pytest.fixture
def scripted():
    return ScriptedHandler


@pytest.fixture
def make_page():
    return page
