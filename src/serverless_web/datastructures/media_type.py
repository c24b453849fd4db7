# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Media type parsing and the Content-Type / charset coupling.

Both models keep ``content_type`` and ``character_encoding`` in sync with the
``Content-Type`` header. This module holds the string handling:

- ``parse_media_type()``: strict ``type/subtype; name=value`` parser
- ``extract_charset()``: charset of a content type, lenient on bad input
- ``with_charset()``: replace the charset parameter, or append one
- ``check_charset()``: reject charsets Python has no codec for

Lenient extraction
==================
A malformed value like ``"text/plain; broken; charset=UTF-8"`` is rejected by
the strict parser, but the charset is still recoverable. ``extract_charset``
falls back to a plain substring search for ``charset=`` and takes the rest of
the string::

    >>> extract_charset("text/plain; charset=UTF-8")
    'UTF-8'
    >>> extract_charset("text/plain; broken; charset=UTF-8")
    'UTF-8'
    >>> extract_charset("text/plain")
"""

from __future__ import annotations

import codecs
import re

from ..exceptions import FormatError

__all__ = [
    "CHARSET_PREFIX",
    "check_charset",
    "parse_media_type",
    "extract_charset",
    "with_charset",
]

CHARSET_PREFIX = "charset="

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_TYPE = re.compile(rf"^(?P<type>{_TOKEN})/(?P<subtype>{_TOKEN})$")
_PARAM = re.compile(rf'^(?P<name>{_TOKEN})\s*=\s*(?P<value>{_TOKEN}|"(?:[^"\\]|\\.)*")$')
_CHARSET_PARAM = re.compile(r'(?<![\w-])(charset\s*=\s*)("[^"]*"|[^;\s]*)', re.IGNORECASE)


def parse_media_type(value: str) -> tuple[str, str, dict[str, str]]:
    """
    Parse a media type into ``(type, subtype, parameters)``.

    Type, subtype and parameter names are lowercased; quoted parameter values
    are unquoted.

    Raises:
        FormatError: If the value is not a well formed media type.
    """
    head, *raw_params = value.split(";")
    match = _TYPE.match(head.strip())
    if match is None:
        raise FormatError(f"Invalid media type: {value!r}", value)
    params: dict[str, str] = {}
    for raw in raw_params:
        raw = raw.strip()
        if not raw:
            continue
        param = _PARAM.match(raw)
        if param is None:
            raise FormatError(f"Invalid media type parameter {raw!r} in {value!r}", value)
        param_value = param.group("value")
        if param_value.startswith('"'):
            param_value = re.sub(r"\\(.)", r"\1", param_value[1:-1])
        params[param.group("name").lower()] = param_value
    return match.group("type").lower(), match.group("subtype").lower(), params


def extract_charset(content_type: str) -> str | None:
    """
    Return the charset parameter of a content type, or None.

    Falls back to a substring search when the value does not parse.
    """
    try:
        _, _, params = parse_media_type(content_type)
    except FormatError:
        index = content_type.lower().find(CHARSET_PREFIX)
        if index == -1:
            return None
        return content_type[index + len(CHARSET_PREFIX):]
    return params.get("charset")


def with_charset(content_type: str, charset: str | None) -> str:
    """
    Put ``charset`` into a content type.

    An existing charset parameter gets its value replaced, otherwise
    ``;charset=<charset>`` is appended. A falsy ``charset`` leaves the value
    untouched.
    """
    if not charset:
        return content_type
    if _CHARSET_PARAM.search(content_type):
        return _CHARSET_PARAM.sub(lambda m: m.group(1) + charset, content_type, count=1)
    return f"{content_type};{CHARSET_PREFIX}{charset}"


def check_charset(charset: str) -> str:
    """
    Return ``charset`` unchanged if a codec exists for it.

    Raises:
        FormatError: If the charset is unknown.
    """
    try:
        codecs.lookup(charset)
    except LookupError:
        raise FormatError(f"Unsupported character encoding {charset!r}", charset) from None
    return charset
