# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Mutable, case-insensitive HTTP headers with typed multi-value entries.

Purpose
=======
HTTP header names are case-insensitive per RFC 7230 and the same header can
appear multiple times (e.g., Set-Cookie, Accept). Both the request and the
response model keep their headers in a ``MutableHeaders`` store.

Values are kept as written: strings, numbers or datetimes. They are only
turned into strings on read, so a date header set from a timestamp can be
read back as a timestamp without a round trip through text.

This module provides:
- ``HeaderValue``: Ordered values of one header, with string coercion
- ``MutableHeaders``: Case-insensitive, insertion-ordered header store

Processing Schema::

    set("Content-Type", "text/html")      add("X-Count", 3)
                  ↓                               ↓
         Normalization (lowercase key)
                  ↓
    Internal storage (dict, insertion ordered):
    {"content-type": ("Content-Type", HeaderValue(["text/html"])),
     "x-count":      ("X-Count",      HeaderValue([3]))}
                  ↓
         Case-insensitive lookup, coercion on read
                  ↓
    headers.get("CONTENT-TYPE") → "text/html"
    headers.get("x-count")      → "3"

Definition::

    class HeaderValue:
        __slots__ = ("_values",)

        def add_value(self, value: Any) -> None
        def add_values(self, values: Iterable[Any]) -> None
        def set_value(self, value: Any) -> None
        value: Any                  # primary (first) value
        values: list[Any]
        string_value: str | None
        string_values: list[str]

    class MutableHeaders:
        __slots__ = ("_store",)

        def set(self, name: str, value: Any, replace: bool = True) -> None
        def add(self, name: str, value: Any) -> None
        def get(self, name: str, default: str | None = None) -> str | None
        def getlist(self, name: str) -> list[str]
        def get_value(self, name: str) -> Any
        def get_values(self, name: str) -> list[Any]
        def get_int(self, name: str) -> int
        def get_date(self, name: str) -> int
        def names(self) -> list[str]
        def remove(self, name: str) -> None
        def clear(self) -> None

Design Notes
============
- Uses ``__slots__`` for memory efficiency
- Names are stored lowercase for lookup, the case of the first insertion is
  kept for enumeration
- Replacing a header keeps its position in the enumeration order
- ``None`` is never a valid header value

References
==========
- HTTP Headers (RFC 7230): https://tools.ietf.org/html/rfc7230#section-3.2
- HTTP Dates (RFC 7231): https://tools.ietf.org/html/rfc7231#section-7.1.1.1
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Iterator

from ..exceptions import FormatError
from .dates import format_http_date, parse_http_date, to_epoch_millis

__all__ = ["HeaderValue", "MutableHeaders", "coerce_header_value"]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_header_value(value: Any) -> str:
    """
    Convert a raw header value to its wire string.

    Datetimes become IMF-fixdate strings in GMT, numbers their decimal form,
    anything else goes through ``str()``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return format_http_date(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class HeaderValue:
    """
    All values of a single header, in insertion order.

    The first value is the primary one, returned by single-value accessors.

    Example:
        >>> hv = HeaderValue()
        >>> hv.add_value("gzip")
        >>> hv.add_value(["br", "deflate"])
        >>> hv.string_values
        ['gzip', 'br', 'deflate']
        >>> hv.set_value(42)
        >>> hv.string_value
        '42'
    """

    __slots__ = ("_values",)

    def __init__(self, value: Any = None) -> None:
        self._values: list[Any] = []
        if value is not None:
            self.add_value(value)

    def add_value(self, value: Any) -> None:
        """Append a value. Lists and tuples are flattened one level."""
        if isinstance(value, (list, tuple)):
            self.add_values(value)
        else:
            self._values.append(value)

    def add_values(self, values: Iterable[Any]) -> None:
        """Append every item of ``values``."""
        self._values.extend(values)

    def set_value(self, value: Any) -> None:
        """Discard all values and keep only ``value``."""
        self._values.clear()
        self.add_value(value)

    @property
    def value(self) -> Any:
        """Primary raw value, None if empty."""
        return self._values[0] if self._values else None

    @property
    def values(self) -> list[Any]:
        """Copy of all raw values."""
        return list(self._values)

    @property
    def string_value(self) -> str | None:
        """Primary value as string, None if empty."""
        if not self._values:
            return None
        return coerce_header_value(self._values[0])

    @property
    def string_values(self) -> list[str]:
        """All values as strings."""
        return [coerce_header_value(v) for v in self._values]

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"HeaderValue({self._values!r})"


class MutableHeaders:
    """
    Mutable, case-insensitive HTTP headers with multi-value support.

    Lookup and mutation ignore case. ``names()`` returns each distinct header
    once, with the case it was first written in, in insertion order.

    Example:
        >>> headers = MutableHeaders()
        >>> headers.set("X-Foo", "1")
        >>> headers.get("x-foo")
        '1'
        >>> headers.add("Accept", "text/html")
        >>> headers.add("accept", "application/json")
        >>> headers.getlist("ACCEPT")
        ['text/html', 'application/json']
        >>> headers.names()
        ['X-Foo', 'Accept']
    """

    __slots__ = ("_store",)

    def __init__(self, raw_headers: Iterable[tuple[str, Any]] | None = None) -> None:
        """
        Initialize headers, optionally from ``(name, value)`` pairs.

        Args:
            raw_headers: Pairs to add in order. Repeated names accumulate.
        """
        self._store: dict[str, tuple[str, HeaderValue]] = {}
        if raw_headers is not None:
            for name, value in raw_headers:
                self.add(name, value)

    def set(self, name: str, value: Any, replace: bool = True) -> None:
        """
        Store a header value.

        Args:
            name: Header name (case-insensitive).
            value: String, number, datetime, or a list/tuple of those.
            replace: If True, previous values are discarded. If False the
                value is appended, creating the header if absent.

        Raises:
            ValueError: If ``value`` is None.
        """
        if value is None:
            raise ValueError(f"Header value for {name!r} must not be None")
        key = name.lower()
        entry = self._store.get(key)
        if entry is None:
            self._store[key] = (name, HeaderValue(value))
        elif replace:
            entry[1].set_value(value)
        else:
            entry[1].add_value(value)

    def add(self, name: str, value: Any) -> None:
        """Append a value to a header (``set`` with ``replace=False``)."""
        self.set(name, value, replace=False)

    def get_header_value(self, name: str) -> HeaderValue | None:
        """Return the ``HeaderValue`` holder for a header, None if absent."""
        entry = self._store.get(name.lower())
        return entry[1] if entry is not None else None

    def get(self, name: str, default: str | None = None) -> str | None:
        """
        Get the primary value of a header as string (case-insensitive).

        Args:
            name: Header name.
            default: Value to return if the header is absent.
        """
        header = self.get_header_value(name)
        if header is None or not len(header):
            return default
        return header.string_value

    def getlist(self, name: str) -> list[str]:
        """Get all values of a header as strings, empty list if absent."""
        header = self.get_header_value(name)
        return header.string_values if header is not None else []

    def get_value(self, name: str) -> Any:
        """Get the primary raw value of a header, None if absent."""
        header = self.get_header_value(name)
        return header.value if header is not None else None

    def get_values(self, name: str) -> list[Any]:
        """Get all raw values of a header, empty list if absent."""
        header = self.get_header_value(name)
        return header.values if header is not None else []

    def get_int(self, name: str) -> int:
        """
        Read a header as an integer.

        Returns:
            The integer value, or -1 if the header is absent.

        Raises:
            FormatError: If the primary value is not a number or numeric string.
        """
        value = self.get_value(name)
        if value is None:
            return -1
        if _is_number(value):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                raise FormatError(
                    f"Value for header {name!r} is not a number: {value!r}", value
                ) from None
        raise FormatError(f"Value for header {name!r} is not a number: {value!r}", value)

    def get_date(self, name: str) -> int:
        """
        Read a header as a date in epoch milliseconds.

        Datetimes and numbers are returned directly, strings are parsed with
        the three RFC 7231 date formats.

        Returns:
            Epoch milliseconds, or -1 if the header is absent.

        Raises:
            FormatError: If the value cannot be interpreted as a date.
        """
        value = self.get_value(name)
        if value is None:
            return -1
        if isinstance(value, datetime):
            return to_epoch_millis(value)
        if _is_number(value):
            return int(value)
        if isinstance(value, str):
            try:
                return parse_http_date(value)
            except FormatError:
                raise FormatError(
                    f"Cannot parse date value {value!r} for {name!r} header", value
                ) from None
        raise FormatError(
            f"Value for header {name!r} is not a date, number, or string: {value!r}", value
        )

    def names(self) -> list[str]:
        """Return distinct header names in insertion order, original case."""
        return [name for name, _ in self._store.values()]

    def items(self) -> list[tuple[str, list[str]]]:
        """Return ``(name, string_values)`` pairs in insertion order."""
        return [(name, header.string_values) for name, header in self._store.values()]

    def raw_items(self) -> list[tuple[str, str]]:
        """
        Return flat ``(name, value)`` string pairs, one per value.

        This is the shape a harness serializes onto the wire.
        """
        return [
            (name, value)
            for name, header in self._store.values()
            for value in header.string_values
        ]

    def remove(self, name: str) -> None:
        """Remove a header. Missing names are ignored."""
        self._store.pop(name.lower(), None)

    def clear(self) -> None:
        """Remove every header."""
        self._store.clear()

    def __getitem__(self, name: str) -> str:
        """
        Get the primary value of a header, raising KeyError if absent.
        """
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        if name.lower() not in self._store:
            raise KeyError(name)
        del self._store[name.lower()]

    def __contains__(self, name: object) -> bool:
        """Check if header exists (case-insensitive)."""
        if not isinstance(name, str):
            return False
        return name.lower() in self._store

    def __iter__(self) -> Iterator[str]:
        """Iterate over distinct header names."""
        return iter(self.names())

    def __len__(self) -> int:
        """Return number of distinct headers."""
        return len(self._store)

    def __repr__(self) -> str:
        return f"MutableHeaders({self.raw_items()!r})"
