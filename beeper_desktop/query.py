"""Query-string encoding for GET endpoints.

Parameters are given either as a plain mapping or as a :class:`QueryParams`
model.  Models declare how their list fields are rendered through the
``list_format`` class attribute, so the encoding of each endpoint is fixed in
code next to the parameter definitions:

* :attr:`ListFormat.COMMA` -- ``mediaTypes=img,video``
* :attr:`ListFormat.INDICES` -- ``accountIDs[0]=a&accountIDs[1]=b``

Mapping values are flattened one level deep using dot notation
(``filter.kind=dm``).  ``None`` values, empty strings and empty containers are
omitted entirely.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

import httpx
from pydantic import BaseModel, ConfigDict

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class ListFormat(str, Enum):
    """How list values are rendered in a query string."""

    COMMA = "comma"
    INDICES = "indices"


class QueryParams(BaseModel):
    """Base class for request parameters sent in the query string."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    list_format: ClassVar[ListFormat] = ListFormat.COMMA

    def to_query_dict(self) -> dict[str, Any]:
        """Return the set fields keyed by their wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def encode(self) -> list[tuple[str, str]]:
        return encode_query(self.to_query_dict(), self.list_format)


def format_value(value: Any) -> str:
    """Render a scalar the way the API expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return format_value(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def format_datetime(value: datetime) -> str:
    """Render *value* as RFC 3339 with an explicit offset.

    Naive datetimes are taken to be UTC.  A zero offset is written as ``Z``
    and trailing zeros of the fraction are dropped.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    stamp = value.replace(tzinfo=None).isoformat()
    offset = value.isoformat()[len(stamp):]
    if "." in stamp:
        stamp = stamp.rstrip("0").rstrip(".")
    return stamp + ("Z" if offset == "+00:00" else offset)


def encode_query(
    params: Mapping[str, Any] | QueryParams | None,
    list_format: ListFormat = ListFormat.COMMA,
) -> list[tuple[str, str]]:
    """Flatten *params* into ordered ``(key, value)`` pairs.

    Args:
        params: A mapping of wire names to values, or a :class:`QueryParams`
            model (whose own ``list_format`` then wins over *list_format*).
        list_format: Rendering of list values for plain mappings.

    Returns:
        Pairs ready for URL encoding.  Keys with nothing to send are absent.
    """
    if params is None:
        return []
    if isinstance(params, QueryParams):
        return params.encode()

    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                if sub_value is None or isinstance(sub_value, (Mapping, *_SEQUENCE_TYPES)):
                    continue
                text = format_value(sub_value)
                if text:
                    pairs.append((f"{key}.{sub_key}", text))
        elif isinstance(value, _SEQUENCE_TYPES):
            items = [format_value(item) for item in value if item is not None]
            items = [item for item in items if item]
            if not items:
                continue
            if ListFormat(list_format) is ListFormat.INDICES:
                pairs.extend((f"{key}[{index}]", item) for index, item in enumerate(items))
            else:
                pairs.append((key, ",".join(items)))
        else:
            text = format_value(value)
            if text:
                pairs.append((key, text))
    return pairs


def build_query_string(
    params: Mapping[str, Any] | QueryParams | None,
    list_format: ListFormat = ListFormat.COMMA,
) -> str:
    """Encode *params* as a URL query string without the leading ``?``."""
    pairs = encode_query(params, list_format)
    if not pairs:
        return ""
    return str(httpx.QueryParams(pairs))
