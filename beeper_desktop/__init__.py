"""
Beeper Desktop SDK - Python client for the local Beeper Desktop API.

This SDK provides both synchronous and asynchronous clients for the REST
service that Beeper Desktop exposes on the local machine, with automatic
retries, typed errors and cursor pagination.

Example usage:

    # Synchronous client (token from BEEPER_ACCESS_TOKEN)
    from beeper_desktop import BeeperDesktop, ChatSearchParams

    client = BeeperDesktop()
    for chat in client.chats.iterate(ChatSearchParams(limit=20)):
        print(chat.title)

    # Asynchronous client
    from beeper_desktop import AsyncBeeperDesktop

    async with AsyncBeeperDesktop(access_token="your-token") as client:
        accounts = await client.accounts.list()
        print([account.network for account in accounts])

    # Matching on error kinds
    from beeper_desktop import NotFoundError

    try:
        client.chats.retrieve("missing")
    except NotFoundError as e:
        print(e.code, e.message)
"""

from .client import AsyncBeeperDesktop, BaseBeeperClient, BeeperDesktop
from .config import VERSION, ClientConfig, ClientSettings, resolve_config
from .exceptions import (
    APIConnectionError,
    APIConnectionTimeoutError,
    APIError,
    AuthenticationError,
    BadRequestError,
    BeeperDesktopError,
    ConflictError,
    InternalServerError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    RequestCancelledError,
    RequestSerializationError,
    ResponseDecodeError,
    RetryExhaustedError,
    UnprocessableEntityError,
    classify_error,
    is_retryable_error,
)
from .models import (
    Account,
    AppDownloadAssetParams,
    AppDownloadAssetResponse,
    AppOpenParams,
    AppOpenResponse,
    AppSearchParams,
    AppSearchResponse,
    Attachment,
    AttachmentSize,
    AttachmentType,
    BaseResponse,
    Chat,
    ChatArchiveParams,
    ChatCreateParams,
    ChatCreateResponse,
    ChatParticipants,
    ChatSearchParams,
    ChatSearchResult,
    ChatType,
    ContactSearchParams,
    ContactSearchResponse,
    Direction,
    ErrorResponse,
    Message,
    MessageSearchParams,
    MessageSearchResult,
    MessageSendParams,
    MessageSendResponse,
    Reaction,
    ReminderCreateParams,
    ReminderDeleteParams,
    User,
    UserInfo,
)
from .pagination import AsyncCursorIterator, Cursor, CursorIterator, PaginationInfo
from .query import ListFormat, QueryParams, build_query_string, encode_query
from .retry import RetryLogic

__version__ = VERSION

__all__ = [
    # Version
    "__version__",
    # Clients
    "BaseBeeperClient",
    "BeeperDesktop",
    "AsyncBeeperDesktop",
    # Configuration
    "ClientConfig",
    "ClientSettings",
    "resolve_config",
    # Exceptions
    "BeeperDesktopError",
    "APIError",
    "BadRequestError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableEntityError",
    "RateLimitError",
    "InternalServerError",
    "APIConnectionError",
    "APIConnectionTimeoutError",
    "ResponseDecodeError",
    "RequestSerializationError",
    "RequestCancelledError",
    "RetryExhaustedError",
    "classify_error",
    "is_retryable_error",
    # Request pipeline
    "RetryLogic",
    "ListFormat",
    "QueryParams",
    "encode_query",
    "build_query_string",
    # Pagination
    "Cursor",
    "PaginationInfo",
    "CursorIterator",
    "AsyncCursorIterator",
    # Account and User Models
    "Account",
    "User",
    "UserInfo",
    # Chat Models
    "Chat",
    "ChatType",
    "ChatParticipants",
    "ChatCreateParams",
    "ChatCreateResponse",
    "ChatArchiveParams",
    "ChatSearchParams",
    "ReminderCreateParams",
    "ReminderDeleteParams",
    # Message Models
    "Message",
    "Attachment",
    "AttachmentSize",
    "AttachmentType",
    "Reaction",
    "Direction",
    "MessageSearchParams",
    "MessageSendParams",
    "MessageSendResponse",
    # Contact Models
    "ContactSearchParams",
    "ContactSearchResponse",
    # App Models
    "AppDownloadAssetParams",
    "AppDownloadAssetResponse",
    "AppOpenParams",
    "AppOpenResponse",
    "AppSearchParams",
    "AppSearchResponse",
    "ChatSearchResult",
    "MessageSearchResult",
    # Utility Models
    "BaseResponse",
    "ErrorResponse",
]
