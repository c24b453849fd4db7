# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Data structures shared by the request and response models.

Mapping from HTTP message parts to classes::

    HTTP message part                      serverless-web Classes
    ─────────────────                      ──────────────────────
    headers (multi-value, any case)    →  MutableHeaders / HeaderValue
    Date, Last-Modified, Expires       →  format_http_date / parse_http_date
    Accept-Language, Content-Language  →  Locale, parse_accept_language
    Content-Type charset parameter     →  extract_charset, with_charset,
                                          check_charset
    request parameters                 →  Parameters
    request attributes                 →  Attributes

Public Exports
==============
::

    from serverless_web.datastructures import (
        Attributes,
        HeaderValue,
        Locale,
        MutableHeaders,
        Parameters,
        check_charset,
        extract_charset,
        format_accept_language,
        format_http_date,
        parse_accept_language,
        parse_http_date,
        parse_media_type,
        with_charset,
    )

Modules
=======
- ``headers``: Case-insensitive, typed multi-value headers
- ``dates``: RFC 7231 date formatting and parsing
- ``locales``: Locale value type and Accept-Language handling
- ``media_type``: Content-Type parsing and charset coupling
- ``parameters``: Multi-value request parameters
- ``attributes``: Request-scoped attributes
"""

from .attributes import Attributes
from .dates import format_http_date, parse_http_date
from .headers import HeaderValue, MutableHeaders
from .locales import Locale, format_accept_language, parse_accept_language
from .media_type import check_charset, extract_charset, parse_media_type, with_charset
from .parameters import Parameters

__all__ = [
    "Attributes",
    "HeaderValue",
    "Locale",
    "MutableHeaders",
    "Parameters",
    "check_charset",
    "extract_charset",
    "format_accept_language",
    "format_http_date",
    "parse_accept_language",
    "parse_http_date",
    "parse_media_type",
    "with_charset",
]
