"""Tests for the typed resource wrappers."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from beeper_desktop import (
    AppDownloadAssetParams,
    AppOpenParams,
    AppSearchParams,
    ChatArchiveParams,
    ChatCreateParams,
    ChatSearchParams,
    ChatType,
    ContactSearchParams,
    Direction,
    MessageSearchParams,
    MessageSendParams,
    ReminderCreateParams,
    ReminderDeleteParams,
)


class TestAccounts:
    def test_list(self, make_client, scripted):
        accounts = [
            {"accountID": "whatsapp", "network": "WhatsApp", "user": {"id": "u-1", "fullName": "Sam Doe"}},
            {"accountID": "signal", "network": "Signal", "user": {"id": "u-2"}},
        ]
        handler = scripted(httpx.Response(200, json=accounts))
        client = make_client(handler)

        result = client.accounts.list()

        assert [account.account_id for account in result] == ["whatsapp", "signal"]
        assert result[0].user.full_name == "Sam Doe"
        assert handler.requests[0].method == "GET"
        assert handler.requests[0].url.path == "/v0/get-accounts"


class TestMessages:
    def test_search_uses_indexed_lists(self, make_client, scripted, make_page, mock_message_response):
        handler = scripted(make_page([mock_message_response], cursor="c1", has_more=True))
        client = make_client(handler)
        params = MessageSearchParams(
            account_ids=["whatsapp", "signal"],
            chat_ids=["chat-1"],
            limit=25,
            direction=Direction.BEFORE,
            include_muted=True,
        )

        page = client.messages.search(params)

        assert page.items[0].message_id == "msg-1"
        assert page.items[0].attachments[0].size.width == 20
        assert page.pagination.cursor == "c1"
        request = handler.requests[0]
        assert request.url.path == "/v0/search-messages"
        assert dict(request.url.params) == {
            "accountIDs[0]": "whatsapp",
            "accountIDs[1]": "signal",
            "chatIDs[0]": "chat-1",
            "limit": "25",
            "direction": "before",
            "includeMuted": "true",
        }
        assert request.content == b""

    def test_send(self, make_client, scripted):
        handler = scripted(
            httpx.Response(200, json={"success": True, "messageID": "msg-9", "deeplink": "beeper://msg-9"})
        )
        client = make_client(handler)

        result = client.messages.send(MessageSendParams(chat_id="chat-1", text="hi"))

        assert result.success
        assert result.message_id == "msg-9"
        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v0/send-message"
        assert json.loads(request.content) == {"chatID": "chat-1", "text": "hi"}

    def test_iterate_defaults_to_all_messages(self, make_client, scripted, make_page):
        handler = scripted(make_page([], has_more=False))
        client = make_client(handler)

        assert client.messages.iterate().to_list() == []
        assert str(handler.requests[0].url) == "http://beeper.test:23373/v0/search-messages"


class TestChats:
    def test_search_uses_comma_lists(self, make_client, scripted, make_page, mock_chat_response):
        handler = scripted(make_page([mock_chat_response], has_more=False))
        client = make_client(handler)

        page = client.chats.search(
            ChatSearchParams(account_ids=["whatsapp", "signal"], chat_type=ChatType.GROUP, limit=10)
        )

        assert page.items[0].title == "Project Updates"
        assert page.items[0].type == "group"
        request = handler.requests[0]
        assert request.method == "GET"
        assert dict(request.url.params) == {"accountIDs": "whatsapp,signal", "chatType": "group", "limit": "10"}
        assert request.content == b""
        assert "Content-Type" not in request.headers

    def test_retrieve(self, make_client, scripted, mock_chat_response):
        handler = scripted(httpx.Response(200, json=mock_chat_response))
        client = make_client(handler)

        chat = client.chats.retrieve("!room:beeper.local")

        assert chat.id == "chat-1"
        assert chat.participants.total == 1
        url = handler.requests[0].url
        assert url.path == "/v0/get-chat"
        assert url.params["chatID"] == "!room:beeper.local"

    def test_create(self, make_client, scripted, mock_chat_response):
        handler = scripted(httpx.Response(200, json={"success": True, "chat": mock_chat_response}))
        client = make_client(handler)
        params = ChatCreateParams(
            account_id="whatsapp", participant_ids=["u-2", "u-3"], type=ChatType.GROUP, title="Team"
        )

        result = client.chats.create(params)

        assert result.chat.id == "chat-1"
        assert json.loads(handler.requests[0].content) == {
            "accountID": "whatsapp",
            "participantIDs": ["u-2", "u-3"],
            "type": "group",
            "title": "Team",
        }

    def test_archive(self, make_client, scripted):
        handler = scripted(httpx.Response(200, json={"success": True}))
        client = make_client(handler)

        client.chats.archive(ChatArchiveParams(chat_id="chat-1", archived=False))

        assert handler.requests[0].url.path == "/v0/archive-chat"
        assert json.loads(handler.requests[0].content) == {"chatID": "chat-1", "archived": False}

    def test_reminders(self, make_client, scripted):
        handler = scripted(
            httpx.Response(200, json={"success": True}),
            httpx.Response(200, json={"success": True}),
        )
        client = make_client(handler)
        when = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

        created = client.chats.reminders.create(ReminderCreateParams(chat_id="chat-1", timestamp=when))
        deleted = client.chats.reminders.delete(ReminderDeleteParams(chat_id="chat-1"))

        assert created.success and deleted.success
        set_request, clear_request = handler.requests
        assert set_request.url.path == "/v0/set-chat-reminder"
        body = json.loads(set_request.content)
        assert body["chatID"] == "chat-1"
        assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00")) == when
        assert clear_request.url.path == "/v0/clear-chat-reminder"
        assert json.loads(clear_request.content) == {"chatID": "chat-1"}


class TestContacts:
    def test_search(self, make_client, scripted):
        handler = scripted(httpx.Response(200, json={"items": [{"id": "u-5", "username": "sam"}]}))
        client = make_client(handler)

        result = client.contacts.search(ContactSearchParams(account_id="signal", query="sam"))

        assert result.items[0].username == "sam"
        url = handler.requests[0].url
        assert url.path == "/v0/search-users"
        assert dict(url.params) == {"accountID": "signal", "query": "sam"}


class TestApp:
    def test_open_without_params(self, make_client, scripted):
        handler = scripted(httpx.Response(200, json={"success": True}))
        client = make_client(handler)

        assert client.app.open().success
        assert json.loads(handler.requests[0].content) == {}

    def test_open_on_chat(self, make_client, scripted):
        handler = scripted(httpx.Response(200, json={"success": True}))
        client = make_client(handler)

        client.app.open(AppOpenParams(chat_id="chat-1", draft_text="hello"))

        assert json.loads(handler.requests[0].content) == {"chatId": "chat-1", "draftText": "hello"}

    def test_download_asset(self, make_client, scripted):
        handler = scripted(httpx.Response(200, json={"success": True, "localPath": "/tmp/cat.png"}))
        client = make_client(handler)

        result = client.app.download_asset(AppDownloadAssetParams(asset_url="mxc://beeper.com/abc"))

        assert result.local_path == "/tmp/cat.png"
        assert json.loads(handler.requests[0].content) == {"assetUrl": "mxc://beeper.com/abc"}

    def test_search(self, make_client, scripted, mock_chat_response, mock_message_response):
        body = {
            "chats": [{"chat": mock_chat_response, "messages": [mock_message_response]}],
            "messages": [{"message": mock_message_response, "chat": mock_chat_response}],
        }
        handler = scripted(httpx.Response(200, json=body))
        client = make_client(handler)

        result = client.app.search(AppSearchParams(query="hello", account_ids=["a", "b"], message_limit=3))

        assert result.chats[0].messages[0].text == "hello"
        assert result.messages[0].chat.id == "chat-1"
        assert dict(handler.requests[0].url.params) == {"query": "hello", "accountIDs": "a,b", "messageLimit": "3"}


class TestToken:
    def test_info(self, make_client, scripted):
        handler = scripted(
            httpx.Response(200, json={"iat": 1, "scope": "read", "sub": "token-1", "token_use": "access", "exp": 99})
        )
        client = make_client(handler)

        info = client.token.info()

        assert info.exp == 99
        assert handler.requests[0].url.path == "/oauth/userinfo"


class TestAsyncResources:
    @pytest.mark.asyncio
    async def test_accounts_and_token(self, make_async_client, scripted):
        handler = scripted(
            httpx.Response(200, json=[{"accountID": "a", "network": "Slack", "user": {"id": "u"}}]),
            httpx.Response(200, json={"iat": 1, "scope": "read", "sub": "s", "token_use": "access"}),
        )

        async with make_async_client(handler) as client:
            accounts = await client.accounts.list()
            info = await client.token.info()

        assert accounts[0].network == "Slack"
        assert info.sub == "s"

    @pytest.mark.asyncio
    async def test_message_search_and_send(self, make_async_client, scripted, make_page, mock_message_response):
        handler = scripted(
            make_page([mock_message_response], has_more=False),
            httpx.Response(200, json={"success": True, "messageID": "msg-2"}),
        )

        async with make_async_client(handler) as client:
            page = await client.messages.search(MessageSearchParams(sender_ids=["u-1"]))
            sent = await client.messages.send(MessageSendParams(chat_id="chat-1", text="ok"))

        assert page.items[0].sender_name == "Sam Doe"
        assert handler.requests[0].url.params["senderIDs[0]"] == "u-1"
        assert sent.message_id == "msg-2"

    @pytest.mark.asyncio
    async def test_chats(self, make_async_client, scripted, make_page, mock_chat_response):
        handler = scripted(
            httpx.Response(200, json=mock_chat_response),
            make_page([mock_chat_response], cursor="c1", has_more=True),
            make_page([], has_more=False),
            httpx.Response(200, json={"success": True}),
        )

        async with make_async_client(handler) as client:
            chat = await client.chats.retrieve("chat-1")
            chats = await client.chats.iterate(ChatSearchParams(limit=1)).to_list()
            await client.chats.reminders.delete(ReminderDeleteParams(chat_id=chat.id))

        assert [c.id for c in chats] == ["chat-1"]
        assert handler.requests[2].url.params["cursor"] == "c1"
        assert handler.requests[3].url.path == "/v0/clear-chat-reminder"

    @pytest.mark.asyncio
    async def test_contacts_and_app(self, make_async_client, scripted):
        handler = scripted(
            httpx.Response(200, json={"items": []}),
            httpx.Response(200, json={"success": True}),
        )

        async with make_async_client(handler) as client:
            contacts = await client.contacts.search(ContactSearchParams(account_id="a", query="q"))
            opened = await client.app.open()

        assert contacts.items == []
        assert opened.success
