# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Locales and Accept-Language negotiation.

Purpose
=======
The request keeps an explicit, ordered list of preferred locales. The
``Accept-Language`` header is derived from that list, never the other way
round, except when a caller adds the header itself: then the header is parsed
once and the list replaced.

Definition::

    class Locale:
        language: str
        country: str
        variant: str

        @classmethod
        def from_language_tag(cls, tag: str) -> Locale
        def to_language_tag(self) -> str

    def parse_accept_language(value: str) -> list[Locale]
    def format_accept_language(locales: Iterable[Locale]) -> str

Example::

    >>> parse_accept_language("fr-CH, fr;q=0.9, en;q=0.8")
    [Locale('fr-CH'), Locale('fr'), Locale('en')]
    >>> format_accept_language([Locale("de"), Locale("en", "US")])
    'de, en-US'

Design Notes
============
- Ranges are sorted by descending quality, ties keep header order
- The wildcard range ``*`` and ranges with ``q=0`` are skipped
- Any malformed range makes the whole value invalid (``FormatError``)

References
==========
- Accept-Language (RFC 7231): https://tools.ietf.org/html/rfc7231#section-5.3.5
- Language tags (RFC 5646): https://tools.ietf.org/html/rfc5646
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from ..exceptions import FormatError

__all__ = ["Locale", "parse_accept_language", "format_accept_language"]

_TAG = re.compile(r"^[A-Za-z]{1,8}(?:-[A-Za-z0-9]{1,8})*$")
_QUALITY = re.compile(r"^q\s*=\s*(?P<q>[01](?:\.\d{0,3})?)$", re.IGNORECASE)


class Locale:
    """
    Language, country and variant, compared by value.

    Language is stored lowercase and country uppercase, the way language tags
    are conventionally written.

    Example:
        >>> Locale.from_language_tag("fr-ch")
        Locale('fr-CH')
        >>> Locale("en", "US").to_language_tag()
        'en-US'
    """

    __slots__ = ("language", "country", "variant")

    def __init__(self, language: str, country: str = "", variant: str = "") -> None:
        self.language = language.lower()
        self.country = country.upper()
        self.variant = variant

    @classmethod
    def from_language_tag(cls, tag: str) -> Locale:
        """
        Build a locale from a tag like ``"en-US"`` or ``"en_US"``.

        Raises:
            FormatError: If the tag is not well formed.
        """
        normalized = tag.strip().replace("_", "-")
        if not _TAG.match(normalized):
            raise FormatError(f"Invalid language tag: {tag!r}", tag)
        parts = normalized.split("-")
        language = parts[0]
        country = ""
        variant = ""
        rest = parts[1:]
        # Skip a four letter script subtag (e.g. zh-Hant-TW)
        if rest and len(rest[0]) == 4 and rest[0].isalpha():
            rest = rest[1:]
        if rest and ((len(rest[0]) == 2 and rest[0].isalpha()) or (len(rest[0]) == 3 and rest[0].isdigit())):
            country = rest[0]
            rest = rest[1:]
        if rest:
            variant = "-".join(rest)
        return cls(language, country, variant)

    def to_language_tag(self) -> str:
        """Return the locale as a language tag, e.g. ``"fr-CH"``."""
        return "-".join(part for part in (self.language, self.country, self.variant) if part)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locale):
            return NotImplemented
        return (self.language, self.country, self.variant) == (
            other.language,
            other.country,
            other.variant,
        )

    def __hash__(self) -> int:
        return hash((self.language, self.country, self.variant))

    def __str__(self) -> str:
        return self.to_language_tag()

    def __repr__(self) -> str:
        return f"Locale({self.to_language_tag()!r})"


def parse_accept_language(value: str) -> list[Locale]:
    """
    Parse an Accept-Language header into locales, most preferred first.

    Args:
        value: Header value, e.g. ``"fr-CH, fr;q=0.9, en;q=0.8"``.

    Returns:
        Locales sorted by descending quality. May be empty if the header only
        holds wildcards or zero-quality ranges.

    Raises:
        FormatError: If any range or quality value is malformed.
    """
    ranges: list[tuple[float, int, Locale]] = []
    for position, item in enumerate(value.split(",")):
        item = item.strip()
        if not item:
            continue
        tag, *params = (part.strip() for part in item.split(";"))
        quality = 1.0
        for param in params:
            match = _QUALITY.match(param)
            if match is None:
                raise FormatError(f"Invalid Accept-Language range: {item!r}", value)
            quality = float(match.group("q"))
            if quality > 1.0:
                raise FormatError(f"Invalid Accept-Language quality: {item!r}", value)
        if tag == "*":
            continue
        locale = Locale.from_language_tag(tag)
        if quality > 0:
            ranges.append((quality, position, locale))
    ranges.sort(key=lambda entry: (-entry[0], entry[1]))
    return [locale for _, _, locale in ranges]


def format_accept_language(locales: Iterable[Locale]) -> str:
    """Render locales as an Accept-Language value, in the given order."""
    return ", ".join(locale.to_language_tag() for locale in locales)
