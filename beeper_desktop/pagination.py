"""Cursor-based pagination.

Collection endpoints answer with a :class:`Cursor` envelope: a page of
``items`` plus optional ``pagination`` metadata.  :class:`CursorIterator` and
:class:`AsyncCursorIterator` walk such an endpoint lazily, echoing the
server's opaque cursor back until a page reports ``has_more == false`` or
carries no pagination metadata at all.

Iterators are single-consumer objects with no internal locking.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import ConfigDict, Field

from .models import BeeperBaseModel
from .query import ListFormat, QueryParams

if TYPE_CHECKING:
    from .client import AsyncBeeperDesktop, BeeperDesktop

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ADVANCING_KEYS = ("cursor", "limit", "direction")


class PaginationInfo(BeeperBaseModel):
    """Pagination metadata attached to a page."""

    cursor: str | None = None
    limit: int | None = None
    direction: str | None = None
    has_more: bool


class Cursor(BeeperBaseModel, Generic[T]):
    """A single page of a paginated collection."""

    model_config = ConfigDict(frozen=True)

    items: list[T] = Field(default_factory=list)
    pagination: PaginationInfo | None = None


class _BaseCursorIterator(Generic[T]):
    """State shared by the sync and async iterators."""

    def __init__(
        self,
        path: str,
        item_type: type[T],
        params: Mapping[str, Any] | QueryParams | None = None,
        list_format: ListFormat | None = None,
    ) -> None:
        if isinstance(params, QueryParams):
            query = params.to_query_dict()
            list_format = list_format or params.list_format
        else:
            query = dict(params or {})

        self.path = path
        self.item_type = item_type
        self._cursor_type = Cursor[item_type]
        self._list_format = list_format or ListFormat.COMMA
        self._cursor: str | None = query.pop("cursor", None) or None
        self._limit: int | None = query.pop("limit", None) or None
        self._direction: str | None = query.pop("direction", None) or None
        self._params = query
        self._has_more = True
        self._page: list[T] = []
        self._index = 0

    def has_next(self) -> bool:
        """Return ``True`` while buffered items remain or more pages may exist.

        This is optimistic before the first fetch: a page may still turn out
        to be empty.
        """
        return self._index < len(self._page) or self._has_more

    def _page_query(self) -> dict[str, Any]:
        query = dict(self._params)
        if self._cursor:
            query["cursor"] = self._cursor
        if self._limit:
            query["limit"] = self._limit
        if self._direction:
            query["direction"] = self._direction
        return query

    def _load(self, page: Cursor[T]) -> None:
        self._page = list(page.items)
        self._index = 0
        if page.pagination is None:
            self._has_more = False
        else:
            self._cursor = page.pagination.cursor
            self._has_more = page.pagination.has_more
        logger.debug(
            "Fetched page of %s: %d items, cursor=%s, has_more=%s",
            self.path,
            len(self._page),
            self._cursor,
            self._has_more,
        )

    def _take(self) -> T | None:
        if self._index < len(self._page):
            item = self._page[self._index]
            self._index += 1
            return item
        return None


class CursorIterator(_BaseCursorIterator[T]):
    """Lazy iterator over a paginated endpoint for the synchronous client.

    Example::

        it = client.new_iterator("/v0/search-chats", Chat, {"limit": 50})
        for chat in it:
            print(chat.title)
    """

    def __init__(
        self,
        client: BeeperDesktop,
        path: str,
        item_type: type[T],
        params: Mapping[str, Any] | QueryParams | None = None,
        list_format: ListFormat | None = None,
    ) -> None:
        super().__init__(path, item_type, params, list_format)
        self._client = client

    def next(self, cancel_event: threading.Event | None = None) -> T | None:
        """Return the next item, fetching a page if needed, or ``None`` when done."""
        item = self._take()
        if item is not None or not self._has_more:
            return item
        self._fetch_next_page(cancel_event)
        return self._take()

    def to_list(self, cancel_event: threading.Event | None = None) -> list[T]:
        """Drain the remaining items into a list.

        Errors propagate; the partially collected items are discarded.
        """
        items: list[T] = []
        while self.has_next():
            item = self.next(cancel_event)
            if item is None:
                break
            items.append(item)
        return items

    def __iter__(self) -> CursorIterator[T]:
        return self

    def __next__(self) -> T:
        item = self.next()
        if item is None:
            raise StopIteration
        return item

    def _fetch_next_page(self, cancel_event: threading.Event | None) -> None:
        page = self._client.request_with_query(
            "GET",
            self.path,
            self._page_query(),
            cast_to=self._cursor_type,
            list_format=self._list_format,
            cancel_event=cancel_event,
        )
        self._load(page)


class AsyncCursorIterator(_BaseCursorIterator[T]):
    """Lazy iterator over a paginated endpoint for the asynchronous client.

    Example::

        async for message in client.messages.iterate(params):
            print(message.text)
    """

    def __init__(
        self,
        client: AsyncBeeperDesktop,
        path: str,
        item_type: type[T],
        params: Mapping[str, Any] | QueryParams | None = None,
        list_format: ListFormat | None = None,
    ) -> None:
        super().__init__(path, item_type, params, list_format)
        self._client = client

    async def next(self, cancel_event: asyncio.Event | None = None) -> T | None:
        """Return the next item, fetching a page if needed, or ``None`` when done."""
        item = self._take()
        if item is not None or not self._has_more:
            return item
        await self._fetch_next_page(cancel_event)
        return self._take()

    async def to_list(self, cancel_event: asyncio.Event | None = None) -> list[T]:
        """Drain the remaining items into a list.

        Errors propagate; the partially collected items are discarded.
        """
        items: list[T] = []
        while self.has_next():
            item = await self.next(cancel_event)
            if item is None:
                break
            items.append(item)
        return items

    def __aiter__(self) -> AsyncCursorIterator[T]:
        return self

    async def __anext__(self) -> T:
        item = await self.next()
        if item is None:
            raise StopAsyncIteration
        return item

    async def _fetch_next_page(self, cancel_event: asyncio.Event | None) -> None:
        page = await self._client.request_with_query(
            "GET",
            self.path,
            self._page_query(),
            cast_to=self._cursor_type,
            list_format=self._list_format,
            cancel_event=cancel_event,
        )
        self._load(page)
