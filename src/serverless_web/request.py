# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
In-memory HTTP request model.

A harness that receives one structured event (not a socket) builds a
``ProxyRequest`` from it, hands it to code written for a blocking
request/response contract, and throws it away afterwards.

Everything the harness knows is set explicitly. Nothing is derived
implicitly: the query string does not fill the parameters, the URI parts are
not cross-checked, the ``Accept-Language`` header does not drive
``locale`` unless it is added through ``add_header``.

Coupled state
=============
Two pairs of fields are kept consistent in both directions:

- ``content_type`` / ``character_encoding`` / ``Content-Type`` header::

      set_content_type("text/plain; charset=UTF-8")
          → character_encoding = "UTF-8", header rewritten
      set_character_encoding("ISO-8859-1")
          → charset parameter replaced (or appended) in content type and header

- ``locales`` / ``Accept-Language`` header::

      add_preferred_locale(Locale("it"))  → header rewritten from the list
      add_header("Accept-Language", ...)  → list replaced from the header

Body access
===========
See ``serverless_web.body``: the byte stream and the text reader are mutually
exclusive for the lifetime of the content.

Example:
    request = ProxyRequest("POST", "/orders")
    request.add_header("Content-Type", "application/json; charset=UTF-8")
    request.set_content(b'{"id": 1}')
    request.set_parameter("verbose", "1")

    request.character_encoding      # "UTF-8"
    request.get_reader().read()     # '{"id": 1}'
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from .body import BodyState, RequestBody
from .config import WebConfig, get_default_config
from .datastructures import (
    Attributes,
    Locale,
    MutableHeaders,
    Parameters,
    check_charset,
    extract_charset,
    format_accept_language,
    parse_accept_language,
    with_charset,
)
from .exceptions import FormatError, StateError

__all__ = ["ProxyRequest", "DispatcherType"]

logger = logging.getLogger("serverless_web.request")

CONTENT_TYPE = "Content-Type"
ACCEPT_LANGUAGE = "Accept-Language"


class DispatcherType(Enum):
    """How the request reached the application. Only a label here."""

    FORWARD = "FORWARD"
    INCLUDE = "INCLUDE"
    REQUEST = "REQUEST"
    ASYNC = "ASYNC"
    ERROR = "ERROR"


class ProxyRequest:
    """
    Mutable HTTP request held entirely in memory.

    Args:
        method: HTTP method, stored as given.
        request_uri: Request URI (path part), stored as given.
        config: Defaults for locale and reader encoding. Uses the shared
            default config when omitted.
    """

    __slots__ = (
        "_config",
        "_headers",
        "_parameters",
        "_attributes",
        "_locales",
        "_body",
        "_content_type",
        "_character_encoding",
        "_parts",
        "method",
        "request_uri",
        "path_info",
        "context_path",
        "servlet_path",
        "query_string",
        "auth_type",
        "remote_user",
        "user_principal",
        "user_roles",
        "cookies",
        "session",
        "requested_session_id",
        "requested_session_id_valid",
        "requested_session_id_from_cookie",
        "requested_session_id_from_url",
        "async_started",
        "async_supported",
        "dispatcher_type",
    )

    remote_addr = "proxy"
    local_addr = "proxy"

    def __init__(
        self,
        method: str | None = None,
        request_uri: str | None = None,
        config: WebConfig | None = None,
    ) -> None:
        self._config = config if config is not None else get_default_config()
        self._headers = MutableHeaders()
        self._parameters = Parameters()
        self._attributes = Attributes()
        self._locales: list[Locale] = [self._config.default_locale]
        self._body = RequestBody()
        self._content_type: str | None = None
        self._character_encoding: str | None = None
        self._parts: dict[str, list[Any]] = {}

        # URI parts, free-form
        self.method: str | None = method
        self.request_uri: str | None = request_uri
        self.path_info: str | None = None
        self.context_path: str = ""
        self.servlet_path: str = ""
        self.query_string: str | None = None

        # Authentication and session placeholders
        self.auth_type: str | None = None
        self.remote_user: str | None = None
        self.user_principal: Any = None
        self.user_roles: set[str] = set()
        self.cookies: list[Any] | None = None
        self.session: Any = None
        self.requested_session_id: str | None = None
        self.requested_session_id_valid = True
        self.requested_session_id_from_cookie = True
        self.requested_session_id_from_url = False

        # Async and dispatch flags, no scheduling behind them
        self.async_started = False
        self.async_supported = False
        self.dispatcher_type = DispatcherType.REQUEST

    @property
    def config(self) -> WebConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Headers
    # -------------------------------------------------------------------------

    @property
    def headers(self) -> MutableHeaders:
        """Request headers (case-insensitive, multi-value)."""
        return self._headers

    def add_header(self, name: str, value: Any) -> None:
        """
        Add a header value.

        ``Content-Type`` and ``Accept-Language`` update the coupled fields:

        - The first ``Content-Type`` goes through ``set_content_type``; later
          ones are appended as raw values.
        - ``Accept-Language`` replaces the locale list when it parses; when it
          does not the locales are left alone. The header value is stored
          either way, replacing any previous one.

        Raises:
            ValueError: If ``value`` is None.
        """
        if value is None:
            raise ValueError(f"Header value for {name!r} must not be None")
        key = name.lower()
        if key == CONTENT_TYPE.lower() and CONTENT_TYPE not in self._headers:
            self.set_content_type(str(value))
        elif key == ACCEPT_LANGUAGE.lower():
            try:
                locales = parse_accept_language(str(value))
            except FormatError as exc:
                logger.debug("Ignoring invalid Accept-Language %r: %s", value, exc)
            else:
                self._locales = locales or [self._config.default_locale]
            self._headers.set(name, value, replace=True)
        else:
            self._headers.add(name, value)

    def get_header(self, name: str) -> str | None:
        return self._headers.get(name)

    def get_headers(self, name: str) -> list[str]:
        return self._headers.getlist(name)

    def get_header_names(self) -> list[str]:
        return self._headers.names()

    def get_int_header(self, name: str) -> int:
        """Header as int, -1 if absent. Raises FormatError if not numeric."""
        return self._headers.get_int(name)

    def get_date_header(self, name: str) -> int:
        """Header as epoch milliseconds, -1 if absent. Raises FormatError if unparsable."""
        return self._headers.get_date(name)

    # -------------------------------------------------------------------------
    # Content type and character encoding
    # -------------------------------------------------------------------------

    @property
    def content_type(self) -> str | None:
        return self._content_type

    @content_type.setter
    def content_type(self, value: str | None) -> None:
        self.set_content_type(value)

    @property
    def character_encoding(self) -> str | None:
        return self._character_encoding

    @character_encoding.setter
    def character_encoding(self, value: str | None) -> None:
        self.set_character_encoding(value)

    def set_content_type(self, content_type: str | None) -> None:
        """
        Set the content type, adopting its charset as character encoding.

        A malformed media type still yields a charset if ``charset=`` occurs
        in it. The ``Content-Type`` header is rewritten afterwards.
        """
        self._content_type = content_type
        if content_type is None:
            return
        charset = extract_charset(content_type)
        if charset:
            self._character_encoding = charset
        self._update_content_type_header()

    def set_character_encoding(self, encoding: str | None) -> None:
        """Set the character encoding and sync it into the ``Content-Type`` header."""
        self._character_encoding = encoding
        self._update_content_type_header()

    def _update_content_type_header(self) -> None:
        if self._content_type is not None:
            self._content_type = with_charset(self._content_type, self._character_encoding)
            self._headers.set(CONTENT_TYPE, self._content_type, replace=True)

    # -------------------------------------------------------------------------
    # Body
    # -------------------------------------------------------------------------

    def set_content(self, content: bytes | None) -> None:
        """Replace the body. Any stream or reader handed out is forgotten."""
        self._body.set_content(content)

    @property
    def content(self) -> bytes | None:
        """Raw body bytes, None if no body was set."""
        return self._body.content

    @property
    def content_length(self) -> int:
        """Body length in bytes, -1 if no body was set."""
        content = self._body.content
        return len(content) if content is not None else -1

    @property
    def body_state(self) -> BodyState:
        return self._body.state

    def get_content_as_string(self) -> str | None:
        """
        Decode the body with the request character encoding.

        Returns:
            The decoded body, None if no body was set.

        Raises:
            StateError: If no character encoding is set.
            FormatError: If the character encoding is unknown.
        """
        if self._character_encoding is None:
            raise StateError(
                "Cannot get content as a string for a null character encoding. "
                "Consider setting the character encoding in the request."
            )
        content = self._body.content
        if content is None:
            return None
        return content.decode(check_charset(self._character_encoding))

    def get_input_stream(self) -> io.BytesIO:
        """
        Return the body as a binary stream.

        Raises:
            StateError: If the reader was already obtained.
        """
        return self._body.get_stream()

    def get_reader(self) -> io.TextIOBase:
        """
        Return the body as a text reader, memoized.

        Decodes with the request character encoding, or the configured
        default charset when none is set.

        Raises:
            StateError: If the input stream was already obtained.
            FormatError: If the encoding is unknown.
        """
        encoding = self._character_encoding or self._config.default_charset
        return self._body.get_reader(encoding)

    # -------------------------------------------------------------------------
    # Parameters
    # -------------------------------------------------------------------------

    @property
    def parameters(self) -> Parameters:
        return self._parameters

    def set_parameter(self, name: str, *values: str) -> None:
        self._parameters.set(name, *values)

    def set_parameters(self, params: Mapping[str, Any]) -> None:
        """Set parameters from a mapping of strings or lists of strings."""
        self._parameters.update(params)

    def add_parameter(self, name: str, *values: str) -> None:
        self._parameters.add(name, *values)

    def add_parameters(self, params: Mapping[str, Any]) -> None:
        """Append parameters from a mapping of strings or lists of strings."""
        self._parameters.extend(params)

    def remove_parameter(self, name: str) -> None:
        self._parameters.remove(name)

    def remove_all_parameters(self) -> None:
        self._parameters.clear()

    def get_parameter(self, name: str) -> str | None:
        return self._parameters.get(name)

    def get_parameter_names(self) -> list[str]:
        return self._parameters.keys()

    def get_parameter_values(self, name: str) -> list[str] | None:
        return self._parameters.getlist(name)

    def get_parameter_map(self) -> Mapping[str, tuple[str, ...]]:
        return self._parameters.as_mapping()

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    @property
    def attributes(self) -> Attributes:
        return self._attributes

    def get_attribute(self, name: str) -> Any:
        return self._attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        """Store an attribute; ``None`` removes it."""
        self._attributes.set(name, value)

    def remove_attribute(self, name: str) -> None:
        self._attributes.remove(name)

    def clear_attributes(self) -> None:
        self._attributes.clear()

    def get_attribute_names(self) -> list[str]:
        return self._attributes.names()

    # -------------------------------------------------------------------------
    # Locales
    # -------------------------------------------------------------------------

    @property
    def locale(self) -> Locale:
        """Most preferred locale."""
        return self._locales[0]

    @property
    def locales(self) -> list[Locale]:
        """Preferred locales, most preferred first."""
        return list(self._locales)

    def add_preferred_locale(self, locale: Locale) -> None:
        """Insert a locale in front of the others and rewrite ``Accept-Language``."""
        if locale is None:
            raise ValueError("Locale must not be None")
        self._locales.insert(0, locale)
        self._update_accept_language_header()

    def set_preferred_locales(self, locales: Iterable[Locale]) -> None:
        """
        Replace the locale list and rewrite ``Accept-Language``.

        Raises:
            ValueError: If ``locales`` is empty.
        """
        new_locales = list(locales)
        if not new_locales:
            raise ValueError("Locale list must not be empty")
        self._locales = new_locales
        self._update_accept_language_header()

    def _update_accept_language_header(self) -> None:
        self._headers.set(ACCEPT_LANGUAGE, format_accept_language(self._locales), replace=True)

    # -------------------------------------------------------------------------
    # Parts, session, authentication
    # -------------------------------------------------------------------------

    def add_part(self, part: Any) -> None:
        """Store an already decoded part. The part must expose ``name``."""
        self._parts.setdefault(part.name, []).append(part)

    def get_part(self, name: str) -> Any:
        parts = self._parts.get(name)
        return parts[0] if parts else None

    def get_parts(self) -> list[Any]:
        return [part for parts in self._parts.values() for part in parts]

    def get_session(self, create: bool = True) -> Any:
        """Return the session placeholder. No session is ever created here."""
        return self.session

    def add_user_role(self, role: str) -> None:
        self.user_roles.add(role)

    def logout(self) -> None:
        self.user_principal = None
        self.remote_user = None
        self.auth_type = None

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} "
            f"method={self.method} uri={self.request_uri!r} "
            f"body={self._body.state.name}>"
        )
