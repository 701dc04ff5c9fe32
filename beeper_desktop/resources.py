"""Typed resource wrappers.

Each resource maps its parameters onto one of the client's two primitives:
``request`` for JSON bodies and ``request_with_query`` for GET filters.
Every resource exists in a synchronous and an asynchronous flavour.
"""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING

from .models import (
    Account,
    AppDownloadAssetParams,
    AppDownloadAssetResponse,
    AppOpenParams,
    AppOpenResponse,
    AppSearchParams,
    AppSearchResponse,
    BaseResponse,
    Chat,
    ChatArchiveParams,
    ChatCreateParams,
    ChatCreateResponse,
    ChatSearchParams,
    ContactSearchParams,
    ContactSearchResponse,
    Message,
    MessageSearchParams,
    MessageSendParams,
    MessageSendResponse,
    ReminderCreateParams,
    ReminderDeleteParams,
    UserInfo,
)
from .pagination import AsyncCursorIterator, Cursor, CursorIterator

if TYPE_CHECKING:
    from .client import AsyncBeeperDesktop, BeeperDesktop

SEARCH_CHATS_PATH = "/v0/search-chats"
SEARCH_MESSAGES_PATH = "/v0/search-messages"


class SyncAPIResource:
    def __init__(self, client: BeeperDesktop) -> None:
        self._client = client


class AsyncAPIResource:
    def __init__(self, client: AsyncBeeperDesktop) -> None:
        self._client = client


# -------------------------------------------------------------------------
# Synchronous resources
# -------------------------------------------------------------------------


class Accounts(SyncAPIResource):
    def list(self, cancel_event: threading.Event | None = None) -> list[Account]:
        """List the chat accounts connected on this device."""
        return self._client.request("GET", "/v0/get-accounts", cast_to=list[Account], cancel_event=cancel_event)


class App(SyncAPIResource):
    def download_asset(
        self, params: AppDownloadAssetParams, cancel_event: threading.Event | None = None
    ) -> AppDownloadAssetResponse:
        """Download an ``mxc://`` or remote asset into the local cache."""
        return self._client.request(
            "POST", "/v0/download-asset", params, cast_to=AppDownloadAssetResponse, cancel_event=cancel_event
        )

    def open(self, params: AppOpenParams | None = None, cancel_event: threading.Event | None = None) -> AppOpenResponse:
        """Focus Beeper Desktop, optionally on a chat, message or draft."""
        return self._client.request(
            "POST", "/v0/open-app", params or AppOpenParams(), cast_to=AppOpenResponse, cancel_event=cancel_event
        )

    def search(self, params: AppSearchParams, cancel_event: threading.Event | None = None) -> AppSearchResponse:
        """Search chats and messages in one call."""
        return self._client.request_with_query(
            "GET", "/v0/search", params, cast_to=AppSearchResponse, cancel_event=cancel_event
        )


class Reminders(SyncAPIResource):
    def create(self, params: ReminderCreateParams, cancel_event: threading.Event | None = None) -> BaseResponse:
        """Set a reminder on a chat."""
        return self._client.request(
            "POST", "/v0/set-chat-reminder", params, cast_to=BaseResponse, cancel_event=cancel_event
        )

    def delete(self, params: ReminderDeleteParams, cancel_event: threading.Event | None = None) -> BaseResponse:
        """Clear the reminder on a chat."""
        return self._client.request(
            "POST", "/v0/clear-chat-reminder", params, cast_to=BaseResponse, cancel_event=cancel_event
        )


class Chats(SyncAPIResource):
    def __init__(self, client: BeeperDesktop) -> None:
        super().__init__(client)
        self.reminders = Reminders(client)

    def create(self, params: ChatCreateParams, cancel_event: threading.Event | None = None) -> ChatCreateResponse:
        """Create a single or group chat on an account."""
        return self._client.request(
            "POST", "/v0/create-chat", params, cast_to=ChatCreateResponse, cancel_event=cancel_event
        )

    def retrieve(self, chat_id: str, cancel_event: threading.Event | None = None) -> Chat:
        """Fetch one chat with its participants."""
        return self._client.request_with_query(
            "GET", "/v0/get-chat", {"chatID": chat_id}, cast_to=Chat, cancel_event=cancel_event
        )

    def archive(self, params: ChatArchiveParams, cancel_event: threading.Event | None = None) -> BaseResponse:
        """Archive or unarchive a chat."""
        return self._client.request("POST", "/v0/archive-chat", params, cast_to=BaseResponse, cancel_event=cancel_event)

    def search(
        self, params: ChatSearchParams | None = None, cancel_event: threading.Event | None = None
    ) -> Cursor[Chat]:
        """Fetch one page of chats matching *params*."""
        return self._client.request_with_query(
            "GET", SEARCH_CHATS_PATH, params or ChatSearchParams(), cast_to=Cursor[Chat], cancel_event=cancel_event
        )

    def iterate(self, params: ChatSearchParams | None = None) -> CursorIterator[Chat]:
        """Iterate over every chat matching *params*, page by page."""
        return self._client.new_iterator(SEARCH_CHATS_PATH, Chat, params or ChatSearchParams())


class Contacts(SyncAPIResource):
    def search(
        self, params: ContactSearchParams, cancel_event: threading.Event | None = None
    ) -> ContactSearchResponse:
        """Search users reachable on one account."""
        return self._client.request_with_query(
            "GET", "/v0/search-users", params, cast_to=ContactSearchResponse, cancel_event=cancel_event
        )


class Messages(SyncAPIResource):
    def search(
        self, params: MessageSearchParams | None = None, cancel_event: threading.Event | None = None
    ) -> Cursor[Message]:
        """Fetch one page of messages matching *params*."""
        return self._client.request_with_query(
            "GET",
            SEARCH_MESSAGES_PATH,
            params or MessageSearchParams(),
            cast_to=Cursor[Message],
            cancel_event=cancel_event,
        )

    def iterate(self, params: MessageSearchParams | None = None) -> CursorIterator[Message]:
        """Iterate over every message matching *params*, page by page."""
        return self._client.new_iterator(SEARCH_MESSAGES_PATH, Message, params or MessageSearchParams())

    def send(self, params: MessageSendParams, cancel_event: threading.Event | None = None) -> MessageSendResponse:
        """Send a text message to a chat."""
        return self._client.request(
            "POST", "/v0/send-message", params, cast_to=MessageSendResponse, cancel_event=cancel_event
        )


class Token(SyncAPIResource):
    def info(self, cancel_event: threading.Event | None = None) -> UserInfo:
        """Describe the access token in use."""
        return self._client.request("GET", "/oauth/userinfo", cast_to=UserInfo, cancel_event=cancel_event)


# -------------------------------------------------------------------------
# Asynchronous resources
# -------------------------------------------------------------------------


class AsyncAccounts(AsyncAPIResource):
    async def list(self, cancel_event: asyncio.Event | None = None) -> list[Account]:
        """List the chat accounts connected on this device."""
        return await self._client.request(
            "GET", "/v0/get-accounts", cast_to=list[Account], cancel_event=cancel_event
        )


class AsyncApp(AsyncAPIResource):
    async def download_asset(
        self, params: AppDownloadAssetParams, cancel_event: asyncio.Event | None = None
    ) -> AppDownloadAssetResponse:
        return await self._client.request(
            "POST", "/v0/download-asset", params, cast_to=AppDownloadAssetResponse, cancel_event=cancel_event
        )

    async def open(
        self, params: AppOpenParams | None = None, cancel_event: asyncio.Event | None = None
    ) -> AppOpenResponse:
        return await self._client.request(
            "POST", "/v0/open-app", params or AppOpenParams(), cast_to=AppOpenResponse, cancel_event=cancel_event
        )

    async def search(self, params: AppSearchParams, cancel_event: asyncio.Event | None = None) -> AppSearchResponse:
        return await self._client.request_with_query(
            "GET", "/v0/search", params, cast_to=AppSearchResponse, cancel_event=cancel_event
        )


class AsyncReminders(AsyncAPIResource):
    async def create(self, params: ReminderCreateParams, cancel_event: asyncio.Event | None = None) -> BaseResponse:
        return await self._client.request(
            "POST", "/v0/set-chat-reminder", params, cast_to=BaseResponse, cancel_event=cancel_event
        )

    async def delete(self, params: ReminderDeleteParams, cancel_event: asyncio.Event | None = None) -> BaseResponse:
        return await self._client.request(
            "POST", "/v0/clear-chat-reminder", params, cast_to=BaseResponse, cancel_event=cancel_event
        )


class AsyncChats(AsyncAPIResource):
    def __init__(self, client: AsyncBeeperDesktop) -> None:
        super().__init__(client)
        self.reminders = AsyncReminders(client)

    async def create(self, params: ChatCreateParams, cancel_event: asyncio.Event | None = None) -> ChatCreateResponse:
        return await self._client.request(
            "POST", "/v0/create-chat", params, cast_to=ChatCreateResponse, cancel_event=cancel_event
        )

    async def retrieve(self, chat_id: str, cancel_event: asyncio.Event | None = None) -> Chat:
        return await self._client.request_with_query(
            "GET", "/v0/get-chat", {"chatID": chat_id}, cast_to=Chat, cancel_event=cancel_event
        )

    async def archive(self, params: ChatArchiveParams, cancel_event: asyncio.Event | None = None) -> BaseResponse:
        return await self._client.request(
            "POST", "/v0/archive-chat", params, cast_to=BaseResponse, cancel_event=cancel_event
        )

    async def search(
        self, params: ChatSearchParams | None = None, cancel_event: asyncio.Event | None = None
    ) -> Cursor[Chat]:
        return await self._client.request_with_query(
            "GET", SEARCH_CHATS_PATH, params or ChatSearchParams(), cast_to=Cursor[Chat], cancel_event=cancel_event
        )

    def iterate(self, params: ChatSearchParams | None = None) -> AsyncCursorIterator[Chat]:
        return self._client.new_iterator(SEARCH_CHATS_PATH, Chat, params or ChatSearchParams())


class AsyncContacts(AsyncAPIResource):
    async def search(
        self, params: ContactSearchParams, cancel_event: asyncio.Event | None = None
    ) -> ContactSearchResponse:
        return await self._client.request_with_query(
            "GET", "/v0/search-users", params, cast_to=ContactSearchResponse, cancel_event=cancel_event
        )


class AsyncMessages(AsyncAPIResource):
    async def search(
        self, params: MessageSearchParams | None = None, cancel_event: asyncio.Event | None = None
    ) -> Cursor[Message]:
        return await self._client.request_with_query(
            "GET",
            SEARCH_MESSAGES_PATH,
            params or MessageSearchParams(),
            cast_to=Cursor[Message],
            cancel_event=cancel_event,
        )

    def iterate(self, params: MessageSearchParams | None = None) -> AsyncCursorIterator[Message]:
        return self._client.new_iterator(SEARCH_MESSAGES_PATH, Message, params or MessageSearchParams())

    async def send(self, params: MessageSendParams, cancel_event: asyncio.Event | None = None) -> MessageSendResponse:
        return await self._client.request(
            "POST", "/v0/send-message", params, cast_to=MessageSendResponse, cancel_event=cancel_event
        )


class AsyncToken(AsyncAPIResource):
    async def info(self, cancel_event: asyncio.Event | None = None) -> UserInfo:
        return await self._client.request("GET", "/oauth/userinfo", cast_to=UserInfo, cancel_event=cancel_event)
