"""Sync and async HTTP clients for the Beeper Desktop API.

This module provides two client implementations for the local Beeper Desktop
REST service:

- :class:`BeeperDesktop` -- synchronous client backed by ``httpx.Client``
- :class:`AsyncBeeperDesktop` -- asynchronous client backed by ``httpx.AsyncClient``

Both clients share a common base (:class:`BaseBeeperClient`) that handles
configuration, header management, URL building and error mapping.  Transient
errors (connection failures, 408/409/429/5xx) are retried automatically with
exponential back-off by :class:`~beeper_desktop.retry.RetryLogic`.

Quick start (synchronous)::

    from beeper_desktop import BeeperDesktop

    with BeeperDesktop(access_token="my-token") as client:
        for account in client.accounts.list():
            print(account.network)

Quick start (asynchronous)::

    import asyncio
    from beeper_desktop import AsyncBeeperDesktop

    async def main():
        async with AsyncBeeperDesktop() as client:  # token from BEEPER_ACCESS_TOKEN
            info = await client.token.info()
            print(info.sub)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from .config import ClientConfig, resolve_config
from .exceptions import (
    APIConnectionError,
    APIConnectionTimeoutError,
    APIError,
    RequestSerializationError,
    ResponseDecodeError,
    classify_error,
)
from .models import ErrorResponse
from .pagination import AsyncCursorIterator, CursorIterator
from .query import ListFormat, QueryParams, build_query_string
from .resources import (
    Accounts,
    App,
    AsyncAccounts,
    AsyncApp,
    AsyncChats,
    AsyncContacts,
    AsyncMessages,
    AsyncToken,
    Chats,
    Contacts,
    Messages,
    Token,
)
from .retry import RetryLogic

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=None)
def _type_adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


class BaseBeeperClient:
    """Base class with shared configuration for Beeper Desktop clients.

    This class is not intended to be instantiated directly.  Use
    :class:`BeeperDesktop` for synchronous access or
    :class:`AsyncBeeperDesktop` for ``async``/``await`` workflows.

    The base class centralises:

    * Configuration resolution (environment defaults plus overrides).
    * Bearer authentication and the fixed request headers.
    * URL and query-string construction.
    * Mapping of HTTP error responses to typed SDK exceptions.
    """

    def __init__(
        self,
        access_token: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        user_agent: str | None = None,
        transport: Any = None,
        http_client: Any = None,
        config: ClientConfig | None = None,
    ) -> None:
        """Resolve configuration shared by sync and async clients.

        Args:
            access_token: Bearer token. Defaults to ``BEEPER_ACCESS_TOKEN``.
            base_url: Root URL of the local API. Defaults to
                ``BEEPER_DESKTOP_BASE_URL`` or ``http://localhost:23373``.
                A trailing slash is added automatically.
            timeout: Per-request timeout in seconds (default 30).
            max_retries: Retries after the first attempt for transient
                errors (default 2).
            user_agent: Value of the ``User-Agent`` header.
            transport: httpx transport for the client built by the SDK,
                e.g. ``httpx.MockTransport`` in tests.
            http_client: A ready httpx client to use instead of building one.
            config: A fully resolved :class:`ClientConfig`; when given, the
                other arguments are ignored.

        Raises:
            AuthenticationError: No access token was configured.
        """
        self.config = config or resolve_config(
            access_token=access_token,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            user_agent=user_agent,
            transport=transport,
            http_client=http_client,
        )
        self._retry = RetryLogic(self.config.max_retries)
        self._owns_client = self.config.http_client is None

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def timeout(self) -> float:
        return self.config.timeout

    @property
    def max_retries(self) -> int:
        return self.config.max_retries

    def _build_url(self, path: str) -> str:
        """Join *path* onto the base URL, dropping one leading slash."""
        if path.startswith("/"):
            path = path[1:]
        return self.config.base_url + path

    @staticmethod
    def _with_query(
        path: str,
        query: Mapping[str, Any] | QueryParams | None,
        list_format: ListFormat | None,
    ) -> str:
        if isinstance(query, QueryParams):
            query_string = build_query_string(query)
        else:
            query_string = build_query_string(query, list_format or ListFormat.COMMA)
        if not query_string:
            return path
        separator = "&" if "?" in path else "?"
        return f"{path}{separator}{query_string}"

    def _get_headers(self, has_body: bool) -> dict[str, str]:
        """Build request headers.

        Always includes ``Authorization: Bearer``, ``User-Agent`` and
        ``Accept: application/json``; ``Content-Type`` only when a body is sent.
        """
        headers = {
            "Authorization": f"Bearer {self.config.access_token}",
            "User-Agent": self.config.user_agent,
            "Accept": "application/json",
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _serialize_body(body: Any) -> bytes | None:
        if body is None:
            return None
        try:
            return to_json(body, by_alias=True, exclude_none=True)
        except PydanticSerializationError as e:
            raise RequestSerializationError(f"failed to marshal request body: {e}") from e

    @staticmethod
    def _connection_error(exc: httpx.RequestError) -> APIConnectionError:
        if isinstance(exc, httpx.TimeoutException):
            return APIConnectionTimeoutError(f"request timed out: {exc}", cause=exc)
        return APIConnectionError(f"request failed: {exc}", cause=exc)

    def _handle_error_response(self, response: httpx.Response) -> APIError:
        """Decode the error envelope of a 4xx/5xx response into a typed exception.

        The body is expected to be ``{"error": ..., "code": ..., "details": {...}}``.
        When it is not, the raw body becomes the message.
        """
        status_code = response.status_code
        message = response.text
        code: str | None = None
        details: dict[str, str] | None = None
        try:
            envelope = ErrorResponse.model_validate_json(response.content)
        except ValidationError:
            envelope = None
        if envelope is not None:
            code, details = envelope.code, envelope.details
            if envelope.error:
                message = envelope.error
        if not message:
            message = f"HTTP {status_code}"

        logger.debug("HTTP %d from %s: %s", status_code, response.request.url.path, message)
        return classify_error(status_code, message, code, details)

    def _process_response(self, response: httpx.Response, cast_to: Any) -> Any:
        if response.status_code >= 400:
            raise self._handle_error_response(response)
        if cast_to is None:
            return None
        try:
            return _type_adapter(cast_to).validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"failed to unmarshal response: {e}",
                status=response.status_code,
                body=response.content,
            ) from e


class BeeperDesktop(BaseBeeperClient):
    """Synchronous HTTP client for the Beeper Desktop API.

    Wraps ``httpx.Client`` and exposes typed resources (``accounts``,
    ``app``, ``chats``, ``contacts``, ``messages``, ``token``) on top of two
    primitives, :meth:`request` and :meth:`request_with_query`.  Supports the
    context-manager protocol::

        with BeeperDesktop(access_token="token") as client:
            chats = client.chats.search(ChatSearchParams(limit=5))

    The client is safe to share between threads; each request only reads
    the immutable configuration.

    See :class:`AsyncBeeperDesktop` for the ``async``/``await`` variant.
    """

    def __init__(self, access_token: str | None = None, **kwargs: Any) -> None:
        super().__init__(access_token, **kwargs)
        self._client: httpx.Client = self.config.http_client or httpx.Client(
            transport=self.config.transport,
            timeout=self.config.timeout,
        )

        self.accounts = Accounts(self)
        self.app = App(self)
        self.chats = Chats(self)
        self.contacts = Contacts(self)
        self.messages = Messages(self)
        self.token = Token(self)

    def __enter__(self) -> "BeeperDesktop":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool if the SDK created it."""
        if self._owns_client:
            self._client.close()

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        cast_to: type[T] | Any = None,
        cancel_event: threading.Event | None = None,
    ) -> T | None:
        """Execute an HTTP request with automatic retry on transient errors.

        Args:
            method: HTTP method (``GET``, ``POST``, ...).
            path: Path relative to the base URL; a leading slash is optional.
            body: Optional JSON-serializable body (models are dumped by alias).
            cast_to: Type to decode a successful response into, e.g.
                ``Chat`` or ``list[Account]``.  ``None`` skips decoding.
            cancel_event: Optional event; once set, no further attempt or
                back-off sleep happens.

        Returns:
            The decoded response, or ``None`` when *cast_to* is ``None``.

        Raises:
            APIError: The server returned a non-success status (a subclass
                per status, see :func:`~beeper_desktop.exceptions.classify_error`).
            APIConnectionError: Unable to reach the server.
            ResponseDecodeError: A 2xx body did not match *cast_to*.
            RetryExhaustedError: Every attempt failed with a transient error.
            RequestCancelledError: *cancel_event* was set.
        """
        url = self._build_url(path)
        content = self._serialize_body(body)
        headers = self._get_headers(content is not None)
        return self._retry.call(
            lambda: self._request_once(method, url, content, headers, cast_to),
            cancel_event,
        )

    def request_with_query(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | QueryParams | None = None,
        *,
        cast_to: type[T] | Any = None,
        list_format: ListFormat | None = None,
        cancel_event: threading.Event | None = None,
    ) -> T | None:
        """Execute a body-less request with *query* encoded into the URL.

        Args:
            query: A mapping or :class:`~beeper_desktop.query.QueryParams`
                model.  Models carry their own list format.
            list_format: List rendering for plain mappings (default comma).

        See :meth:`request` for the remaining arguments and errors.
        """
        return self.request(
            method,
            self._with_query(path, query, list_format),
            cast_to=cast_to,
            cancel_event=cancel_event,
        )

    def new_iterator(
        self,
        path: str,
        item_type: type[T],
        params: Mapping[str, Any] | QueryParams | None = None,
        list_format: ListFormat | None = None,
    ) -> CursorIterator[T]:
        """Return a lazy iterator over the paginated collection at *path*."""
        return CursorIterator(self, path, item_type, params, list_format)

    def _request_once(
        self,
        method: str,
        url: str,
        content: bytes | None,
        headers: dict[str, str],
        cast_to: Any,
    ) -> Any:
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, content=content, headers=headers)
        except httpx.RequestError as e:
            raise self._connection_error(e) from e
        return self._process_response(response, cast_to)


class AsyncBeeperDesktop(BaseBeeperClient):
    """Asynchronous HTTP client for the Beeper Desktop API.

    Wraps ``httpx.AsyncClient`` and mirrors the synchronous
    :class:`BeeperDesktop` interface using ``async``/``await``.  Cancelling
    the calling task aborts an in-flight request or back-off sleep.
    Supports the async context-manager protocol::

        async with AsyncBeeperDesktop(access_token="token") as client:
            messages = await client.messages.iterate(params).to_list()
    """

    def __init__(self, access_token: str | None = None, **kwargs: Any) -> None:
        super().__init__(access_token, **kwargs)
        self._client: httpx.AsyncClient = self.config.http_client or httpx.AsyncClient(
            transport=self.config.transport,
            timeout=self.config.timeout,
        )

        self.accounts = AsyncAccounts(self)
        self.app = AsyncApp(self)
        self.chats = AsyncChats(self)
        self.contacts = AsyncContacts(self)
        self.messages = AsyncMessages(self)
        self.token = AsyncToken(self)

    async def __aenter__(self) -> "AsyncBeeperDesktop":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP connection pool if the SDK created it."""
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        cast_to: type[T] | Any = None,
        cancel_event: asyncio.Event | None = None,
    ) -> T | None:
        """Execute an async HTTP request with automatic retry.

        See :meth:`BeeperDesktop.request`.
        """
        url = self._build_url(path)
        content = self._serialize_body(body)
        headers = self._get_headers(content is not None)
        return await self._retry.acall(
            lambda: self._request_once(method, url, content, headers, cast_to),
            cancel_event,
        )

    async def request_with_query(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | QueryParams | None = None,
        *,
        cast_to: type[T] | Any = None,
        list_format: ListFormat | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> T | None:
        """Execute a body-less async request with *query* encoded into the URL.

        See :meth:`BeeperDesktop.request_with_query`.
        """
        return await self.request(
            method,
            self._with_query(path, query, list_format),
            cast_to=cast_to,
            cancel_event=cancel_event,
        )

    def new_iterator(
        self,
        path: str,
        item_type: type[T],
        params: Mapping[str, Any] | QueryParams | None = None,
        list_format: ListFormat | None = None,
    ) -> AsyncCursorIterator[T]:
        """Return a lazy async iterator over the paginated collection at *path*."""
        return AsyncCursorIterator(self, path, item_type, params, list_format)

    async def _request_once(
        self,
        method: str,
        url: str,
        content: bytes | None,
        headers: dict[str, str],
        cast_to: Any,
    ) -> Any:
        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, content=content, headers=headers)
        except httpx.RequestError as e:
            raise self._connection_error(e) from e
        return self._process_response(response, cast_to)
