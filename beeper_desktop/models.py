"""Pydantic models for the Beeper Desktop SDK."""

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from .query import ListFormat, QueryParams


# Enums


class ChatType(str, Enum):
    """Chat type."""

    SINGLE = "single"
    GROUP = "group"
    ANY = "any"


class AttachmentType(str, Enum):
    """Attachment media type."""

    UNKNOWN = "unknown"
    IMG = "img"
    VIDEO = "video"
    AUDIO = "audio"


class Direction(str, Enum):
    """Pagination direction relative to the cursor."""

    BEFORE = "before"
    AFTER = "after"


# Base Models


class BeeperBaseModel(BaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )


class BaseResponse(BeeperBaseModel):
    """Generic success/failure acknowledgement."""

    success: bool
    error: str | None = None


class ErrorResponse(BeeperBaseModel):
    """Error envelope returned with 4xx/5xx responses."""

    error: str = ""
    code: str | None = None
    details: dict[str, str] | None = None


# Users and Accounts


class User(BeeperBaseModel):
    """A person on or reachable through Beeper."""

    id: str
    cannot_message: bool | None = Field(default=None, alias="cannotMessage")
    email: str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    img_url: str | None = Field(default=None, alias="imgURL")
    is_self: bool | None = Field(default=None, alias="isSelf")
    phone_number: str | None = Field(default=None, alias="phoneNumber")
    username: str | None = None


class Account(BeeperBaseModel):
    """A chat account added to Beeper."""

    account_id: str = Field(alias="accountID")
    network: str
    user: User


class UserInfo(BeeperBaseModel):
    """Information about the authenticated token."""

    iat: int
    scope: str
    sub: str
    token_use: str
    aud: str | None = None
    client_id: str | None = None
    exp: int | None = None


# Messages


class AttachmentSize(BeeperBaseModel):
    """Pixel dimensions of an attachment."""

    height: int | None = None
    width: int | None = None


class Attachment(BeeperBaseModel):
    """A file attached to a message."""

    type: AttachmentType = AttachmentType.UNKNOWN
    duration: int | None = None
    file_name: str | None = Field(default=None, alias="fileName")
    file_size: int | None = Field(default=None, alias="fileSize")
    is_gif: bool | None = Field(default=None, alias="isGif")
    is_sticker: bool | None = Field(default=None, alias="isSticker")
    is_voice_note: bool | None = Field(default=None, alias="isVoiceNote")
    mime_type: str | None = Field(default=None, alias="mimeType")
    poster_img: str | None = Field(default=None, alias="posterImg")
    size: AttachmentSize | None = None
    src_url: str | None = Field(default=None, alias="srcURL")


class Reaction(BeeperBaseModel):
    """A reaction on a message."""

    id: str
    participant_id: str = Field(alias="participantID")
    reaction_key: str = Field(alias="reactionKey")
    emoji: bool | None = None
    img_url: str | None = Field(default=None, alias="imgURL")


class Message(BeeperBaseModel):
    """A chat message."""

    id: str
    account_id: str = Field(alias="accountID")
    chat_id: str = Field(alias="chatID")
    message_id: str = Field(alias="messageID")
    sender_id: str = Field(alias="senderID")
    sort_key: str | int | float = Field(alias="sortKey")
    timestamp: datetime
    attachments: list[Attachment] = Field(default_factory=list)
    is_sender: bool | None = Field(default=None, alias="isSender")
    is_unread: bool | None = Field(default=None, alias="isUnread")
    reactions: list[Reaction] = Field(default_factory=list)
    sender_name: str | None = Field(default=None, alias="senderName")
    text: str | None = None


class MessageSearchParams(QueryParams):
    """Filters for searching messages. List filters use indexed keys."""

    list_format: ClassVar[ListFormat] = ListFormat.INDICES

    account_ids: list[str] | None = Field(default=None, alias="accountIDs")
    chat_ids: list[str] | None = Field(default=None, alias="chatIDs")
    chat_type: ChatType | None = Field(default=None, alias="chatType")
    cursor: str | None = None
    date_after: datetime | None = Field(default=None, alias="dateAfter")
    date_before: datetime | None = Field(default=None, alias="dateBefore")
    direction: Direction | None = None
    exclude_low_priority: bool | None = Field(default=None, alias="excludeLowPriority")
    include_muted: bool | None = Field(default=None, alias="includeMuted")
    limit: int | None = Field(default=None, ge=1)
    media_types: list[AttachmentType] | None = Field(default=None, alias="mediaTypes")
    query: str | None = None
    sender_ids: list[str] | None = Field(default=None, alias="senderIDs")


class MessageSendParams(BeeperBaseModel):
    """Request model for sending a text message."""

    chat_id: str = Field(alias="chatID")
    text: str
    reply_to_id: str | None = Field(default=None, alias="replyToId")
    attachment: str | None = None


class MessageSendResponse(BeeperBaseModel):
    """Response from sending a message."""

    message_id: str = Field(default="", alias="messageID")
    deeplink: str = ""
    success: bool
    error: str | None = None


# Chats


class ChatParticipants(BeeperBaseModel):
    """Participants of a chat, possibly truncated."""

    has_more: bool = Field(default=False, alias="hasMore")
    items: list[User] = Field(default_factory=list)
    total: int = 0


class Chat(BeeperBaseModel):
    """A chat or conversation."""

    id: str
    account_id: str = Field(alias="accountID")
    network: str
    title: str = ""
    type: ChatType
    unread_count: int = Field(default=0, alias="unreadCount")
    participants: ChatParticipants = Field(default_factory=ChatParticipants)
    is_archived: bool | None = Field(default=None, alias="isArchived")
    is_muted: bool | None = Field(default=None, alias="isMuted")
    is_pinned: bool | None = Field(default=None, alias="isPinned")
    last_activity: str | None = Field(default=None, alias="lastActivity")
    last_read_message_sort_key: str | int | float | None = Field(default=None, alias="lastReadMessageSortKey")
    local_chat_id: str | None = Field(default=None, alias="localChatID")


class ChatCreateParams(BeeperBaseModel):
    """Request model for creating a chat."""

    account_id: str = Field(alias="accountID")
    participant_ids: list[str] = Field(alias="participantIDs", min_length=1)
    type: ChatType
    title: str | None = None


class ChatCreateResponse(BeeperBaseModel):
    """Response from creating a chat."""

    chat: Chat | None = None
    success: bool
    error: str | None = None


class ChatArchiveParams(BeeperBaseModel):
    """Request model for archiving or unarchiving a chat."""

    chat_id: str = Field(alias="chatID")
    archived: bool = True


class ChatSearchParams(QueryParams):
    """Filters for searching chats. List filters are comma-joined."""

    account_ids: list[str] | None = Field(default=None, alias="accountIDs")
    chat_type: ChatType | None = Field(default=None, alias="chatType")
    include_muted: bool | None = Field(default=None, alias="includeMuted")
    limit: int | None = Field(default=None, ge=1)
    cursor: str | None = None
    direction: Direction | None = None
    scope: str | None = None
    query: str | None = None


class ReminderCreateParams(BeeperBaseModel):
    """Request model for setting a chat reminder."""

    chat_id: str = Field(alias="chatID")
    timestamp: datetime
    message: str | None = None


class ReminderDeleteParams(BeeperBaseModel):
    """Request model for clearing a chat reminder."""

    chat_id: str = Field(alias="chatID")


# Contacts


class ContactSearchParams(QueryParams):
    """Filters for searching users on one account."""

    account_id: str = Field(alias="accountID")
    query: str


class ContactSearchResponse(BeeperBaseModel):
    """Users matching a contact search."""

    items: list[User] = Field(default_factory=list)


# App


class AppDownloadAssetParams(BeeperBaseModel):
    """Request model for downloading an asset to the local cache."""

    asset_url: str = Field(alias="assetUrl")


class AppDownloadAssetResponse(BeeperBaseModel):
    """Response from downloading an asset."""

    local_path: str = Field(default="", alias="localPath")
    success: bool
    error: str | None = None


class AppOpenParams(BeeperBaseModel):
    """Request model for focusing Beeper Desktop, optionally on a chat."""

    chat_id: str | None = Field(default=None, alias="chatId")
    message_id: str | None = Field(default=None, alias="messageId")
    draft_text: str | None = Field(default=None, alias="draftText")
    draft_attachment: str | None = Field(default=None, alias="draftAttachment")


class AppOpenResponse(BeeperBaseModel):
    """Response from opening the app."""

    success: bool
    error: str | None = None


class AppSearchParams(QueryParams):
    """Filters for the combined chat and message search."""

    query: str
    account_ids: list[str] | None = Field(default=None, alias="accountIDs")
    chat_type: ChatType | None = Field(default=None, alias="chatType")
    include_muted: bool | None = Field(default=None, alias="includeMuted")
    limit: int | None = Field(default=None, ge=1)
    message_limit: int | None = Field(default=None, alias="messageLimit", ge=1)
    participant_limit: int | None = Field(default=None, alias="participantLimit", ge=1)


class ChatSearchResult(BeeperBaseModel):
    """A chat hit in the combined search."""

    chat: Chat
    participants: list[User] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)


class MessageSearchResult(BeeperBaseModel):
    """A message hit in the combined search."""

    message: Message
    chat: Chat


class AppSearchResponse(BeeperBaseModel):
    """Response from the combined search."""

    chats: list[ChatSearchResult] = Field(default_factory=list)
    messages: list[MessageSearchResult] = Field(default_factory=list)

