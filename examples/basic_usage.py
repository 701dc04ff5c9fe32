#!/usr/bin/env python3
"""
Beeper Desktop Python SDK - Basic Usage Example

This example demonstrates fundamental operations with the SDK:
- Client initialization
- Listing accounts
- Searching and paginating chats and messages
- Sending a message
- Error handling

Prerequisites:
    pip install beeper-desktop-api
    Beeper Desktop running with the local API enabled

Run with:
    BEEPER_ACCESS_TOKEN=... python basic_usage.py
"""

import asyncio
import logging
import os
import sys

from beeper_desktop import AsyncBeeperDesktop, BeeperDesktop
from beeper_desktop.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    RetryExhaustedError,
)
from beeper_desktop.models import (
    ChatSearchParams,
    ChatType,
    Direction,
    MessageSearchParams,
    MessageSendParams,
)

# =============================================================================
# Configuration
# =============================================================================

# BEEPER_ACCESS_TOKEN and BEEPER_DESKTOP_BASE_URL are read by the client
# itself; the chat to post into is specific to this example.
TARGET_CHAT_ID = os.environ.get("BEEPER_EXAMPLE_CHAT_ID", "")


# =============================================================================
# Client Initialization
# =============================================================================

def initialize_client() -> BeeperDesktop:
    """
    Create a client from the environment.

    The client handles authentication, retries, and error classification.
    """
    return BeeperDesktop(
        timeout=30.0,     # 30 seconds per attempt
        max_retries=3,    # Retry transient failures up to 3 times
    )


# =============================================================================
# Account Examples
# =============================================================================

def list_accounts_example(client: BeeperDesktop) -> None:
    """List the chat networks connected to Beeper Desktop."""
    print("\n--- Accounts ---\n")

    accounts = client.accounts.list()
    print(f"Found {len(accounts)} accounts:")
    for account in accounts:
        name = account.user.full_name or account.user.username or account.user.id
        print(f"  - {account.network}: {name} ({account.account_id})")


# =============================================================================
# Chat Examples
# =============================================================================

def search_chats_example(client: BeeperDesktop) -> None:
    """
    Fetch one page of group chats, then walk every unmuted chat.

    ``search`` returns a single page; ``iterate`` follows the cursor.
    """
    print("\n--- Chats ---\n")

    page = client.chats.search(ChatSearchParams(chat_type=ChatType.GROUP, limit=5))
    print("First page of group chats:")
    for chat in page.items:
        print(f"  - {chat.title} [{chat.network}] unread={chat.unread_count}")
    if page.pagination and page.pagination.has_more:
        print("  (more available)")

    total = 0
    for chat in client.chats.iterate(ChatSearchParams(include_muted=False, limit=50)):
        total += 1
    print(f"Unmuted chats in total: {total}")


# =============================================================================
# Message Examples
# =============================================================================

def search_messages_example(client: BeeperDesktop) -> None:
    """Collect the latest messages mentioning a keyword."""
    print("\n--- Messages ---\n")

    params = MessageSearchParams(query="meeting", limit=20, direction=Direction.BEFORE)
    iterator = client.messages.iterate(params)

    shown = 0
    while iterator.has_next() and shown < 10:
        message = iterator.next()
        if message is None:
            break
        print(f"  [{message.timestamp:%Y-%m-%d %H:%M}] {message.sender_name}: {message.text}")
        shown += 1


def send_message_example(client: BeeperDesktop) -> None:
    """Send a text message if a target chat is configured."""
    print("\n--- Send Message ---\n")

    if not TARGET_CHAT_ID:
        print("Set BEEPER_EXAMPLE_CHAT_ID to try sending a message")
        return

    result = client.messages.send(MessageSendParams(chat_id=TARGET_CHAT_ID, text="Hello from the SDK!"))
    print(f"Sent: {result.message_id} ({result.deeplink})")


# =============================================================================
# Error Handling Examples
# =============================================================================

def error_handling_example(client: BeeperDesktop) -> None:
    """
    Demonstrate error handling.

    The SDK raises typed exceptions that can be caught and handled appropriately.
    """
    print("\n--- Error Handling ---\n")

    try:
        client.chats.retrieve("non-existent-chat-id")
    except NotFoundError as e:
        print(f"Chat not found (expected): {e}")
        print(f"  Status: {e.status}, code: {e.code}")
    except AuthenticationError as e:
        print(f"Authentication failed: {e.message}")
    except RateLimitError as e:
        print(f"Rate limited: {e.message}")
    except APIConnectionError as e:
        print(f"Is Beeper Desktop running? {e}")
    except RetryExhaustedError as e:
        print(f"Gave up after {e.attempts} attempts: {e.last_error}")
    except APIError as e:
        print(f"API error: {e}")


# =============================================================================
# Async Example
# =============================================================================

async def async_example() -> None:
    """The async client mirrors the sync one."""
    print("\n--- Async ---\n")

    async with AsyncBeeperDesktop() as client:
        accounts, info = await asyncio.gather(client.accounts.list(), client.token.info())
        print(f"{len(accounts)} accounts, token scope: {info.scope}")

        async for chat in client.chats.iterate(ChatSearchParams(limit=3)):
            print(f"  - {chat.title}")
            break


def main() -> None:
    """Main function to run all examples."""
    logging.basicConfig(level=logging.INFO)

    print("=" * 60)
    print("Beeper Desktop Python SDK - Basic Usage Examples")
    print("=" * 60)

    try:
        client = initialize_client()
    except AuthenticationError:
        print("Set BEEPER_ACCESS_TOKEN to run the examples")
        sys.exit(1)

    try:
        with client:
            list_accounts_example(client)
            search_chats_example(client)
            search_messages_example(client)
            send_message_example(client)
            error_handling_example(client)

        asyncio.run(async_example())

        print("\n" + "=" * 60)
        print("All examples completed successfully!")
        print("=" * 60)

    except APIError as e:
        print(f"\nExample failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
