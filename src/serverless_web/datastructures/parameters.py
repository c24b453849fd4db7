# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Mutable request parameters with multi-value support.

Purpose
=======
Request parameters are a plain ``name -> [values]`` map, filled in by whoever
builds the request. They are never derived from the query string or the body:
a harness that wants query parameters available must add them itself.

Values are always lists of strings internally, even when a single string is
stored. Mapping input is validated: each value must be a string or a
list/tuple of strings, anything else is a ``FormatError``.

Comparison with Headers::

    +-----------------+------------------+------------------+
    | Feature         | MutableHeaders   | Parameters       |
    +-----------------+------------------+------------------+
    | Case            | Case-insensitive | Case-sensitive   |
    | Value types     | str/num/datetime | str only         |
    | Storage         | dict[str, tuple] | dict[str, list]  |
    +-----------------+------------------+------------------+

Definition::

    class Parameters:
        __slots__ = ("_params",)

        def set(self, name: str, *values: str) -> None
        def add(self, name: str, *values: str) -> None
        def update(self, params: Mapping[str, Any]) -> None
        def extend(self, params: Mapping[str, Any]) -> None
        def remove(self, name: str) -> None
        def clear(self) -> None
        def get(self, name: str, default: str | None = None) -> str | None
        def getlist(self, name: str) -> list[str] | None
        def keys(self) -> list[str]
        def multi_items(self) -> list[tuple[str, str]]
        def as_mapping(self) -> Mapping[str, tuple[str, ...]]

Example::

    >>> params = Parameters()
    >>> params.set("tags", "python", "web")
    >>> params.add("tags", "http")
    >>> params.getlist("tags")
    ['python', 'web', 'http']
    >>> params.get("tags")
    'python'
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterator

from ..exceptions import FormatError

__all__ = ["Parameters"]


def _require_name(name: str) -> None:
    if name is None:
        raise ValueError("Parameter name must not be None")


def _as_values(name: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise FormatError(
        f"Parameter map value for {name!r} must be a single string or a list of strings, "
        f"got {type(value).__name__}",
        value,
    )


class Parameters:
    """
    Case-sensitive, insertion-ordered multi-value parameter map.

    Example:
        >>> params = Parameters({"page": "1", "tag": ["a", "b"]})
        >>> params.get("page")
        '1'
        >>> params.getlist("tag")
        ['a', 'b']
        >>> "missing" in params
        False
    """

    __slots__ = ("_params",)

    def __init__(self, params: Mapping[str, Any] | None = None) -> None:
        self._params: dict[str, list[str]] = {}
        if params is not None:
            self.update(params)

    def set(self, name: str, *values: str) -> None:
        """Replace the values of a parameter."""
        _require_name(name)
        self._params[name] = list(values)

    def add(self, name: str, *values: str) -> None:
        """Append values to a parameter, creating it if absent."""
        _require_name(name)
        self._params.setdefault(name, []).extend(values)

    def update(self, params: Mapping[str, Any]) -> None:
        """
        Replace parameters from a mapping.

        Raises:
            FormatError: If a value is not a string or a list of strings.
        """
        for name, value in params.items():
            self.set(name, *_as_values(name, value))

    def extend(self, params: Mapping[str, Any]) -> None:
        """
        Append parameters from a mapping.

        Raises:
            FormatError: If a value is not a string or a list of strings.
        """
        for name, value in params.items():
            self.add(name, *_as_values(name, value))

    def remove(self, name: str) -> None:
        """Remove a parameter. Missing names are ignored."""
        _require_name(name)
        self._params.pop(name, None)

    def clear(self) -> None:
        self._params.clear()

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of a parameter, or ``default``."""
        _require_name(name)
        values = self._params.get(name)
        if values:
            return values[0]
        return default

    def getlist(self, name: str) -> list[str] | None:
        """Return all values of a parameter, or None if it was never set."""
        _require_name(name)
        values = self._params.get(name)
        return list(values) if values is not None else None

    def keys(self) -> list[str]:
        return list(self._params)

    def multi_items(self) -> list[tuple[str, str]]:
        """Return all ``(name, value)`` pairs including duplicates."""
        return [(name, value) for name, values in self._params.items() for value in values]

    def as_mapping(self) -> Mapping[str, tuple[str, ...]]:
        """Return a read-only snapshot ``name -> tuple of values``."""
        return MappingProxyType({name: tuple(values) for name, values in self._params.items()})

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __bool__(self) -> bool:
        return bool(self._params)

    def __repr__(self) -> str:
        return f"Parameters({self._params!r})"
