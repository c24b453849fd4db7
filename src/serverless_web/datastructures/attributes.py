# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Request-scoped attributes.

A ``name -> value`` container that lives as long as the request. Storing
``None`` under a name removes it, so "absent" and "set to None" cannot be told
apart.

Definition::

    class Attributes:
        __slots__ = ("_attributes",)

        def get(self, name: str, default: Any = None) -> Any
        def set(self, name: str, value: Any) -> None
        def remove(self, name: str) -> None
        def clear(self) -> None
        def names(self) -> list[str]

Example::

    >>> attrs = Attributes()
    >>> attrs.set("user", "alice")
    >>> attrs.get("user")
    'alice'
    >>> attrs.set("user", None)
    >>> "user" in attrs
    False
"""

from typing import Any, Iterator

__all__ = ["Attributes"]


class Attributes:
    """Insertion-ordered attribute map where ``None`` means removal."""

    __slots__ = ("_attributes",)

    def __init__(self) -> None:
        self._attributes: dict[str, Any] = {}

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """
        Store an attribute, or remove it when ``value`` is None.

        Raises:
            ValueError: If ``name`` is None.
        """
        if name is None:
            raise ValueError("Attribute name must not be None")
        if value is None:
            self._attributes.pop(name, None)
        else:
            self._attributes[name] = value

    def remove(self, name: str) -> None:
        if name is None:
            raise ValueError("Attribute name must not be None")
        self._attributes.pop(name, None)

    def clear(self) -> None:
        self._attributes.clear()

    def names(self) -> list[str]:
        """Return attribute names in insertion order."""
        return list(self._attributes)

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._attributes))

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"Attributes({self._attributes!r})"
