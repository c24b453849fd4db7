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
In-memory HTTP response model.

The hosted code writes status, headers and body into a ``ProxyResponse``;
after it returns, the harness reads back ``status``, ``headers`` and
``content`` and serializes them into whatever its invocation protocol wants.

Commit State Machine
====================
::

    committed = False ──────────────────────────> committed = True
        set_status, reset_buffer, reset,            set_status → ignored
        send_error, send_redirect all work          reset_buffer, send_error,
                                                    send_redirect → StateError
        commit triggers:                            reset → back to False
        set_committed(True), flush_buffer(),
        send_error(), send_redirect(),
        closing the output stream                   set_committed(False) → StateError

Writes to the output stream keep appending after commit: only re-committing
operations are blocked.

``buffer_size`` is advisory. The body is never truncated and growing past
the buffer size does not commit; every write, through ``write()`` or the
output stream, logs at DEBUG once the body is larger.

Character Encoding
==================
``character_encoding`` starts at the configured default charset. Setting it
explicitly (directly, or through a ``charset`` parameter in the content type)
marks it as explicit and syncs it into the ``Content-Type`` header. When the
body is decoded as text the explicit encoding wins, then the caller fallback,
then the configured default.

Example:
    response = ProxyResponse()
    response.set_content_type("application/json")
    response.set_character_encoding("UTF-8")
    with response.get_output_stream() as out:
        out.write(b'{"ok": true}')

    response.committed                 # True
    response.get_header("content-type")  # "application/json;charset=UTF-8"
"""

from __future__ import annotations

import logging
from typing import Any

from .body import ResponseBody
from .config import WebConfig, get_default_config
from .datastructures import (
    Locale,
    MutableHeaders,
    check_charset,
    extract_charset,
    format_http_date,
    with_charset,
)
from .datastructures.dates import IMF_FIXDATE, parse_http_date
from .exceptions import FormatError, StateError

__all__ = ["ProxyResponse", "SC_OK", "SC_FOUND"]

logger = logging.getLogger("serverless_web.response")

SC_OK = 200
SC_FOUND = 302

CONTENT_TYPE = "Content-Type"
CONTENT_LANGUAGE = "Content-Language"
LOCATION = "Location"


class ProxyResponse:
    """
    Mutable HTTP response held entirely in memory.

    Args:
        config: Defaults for charset, locale and buffer size. Uses the shared
            default config when omitted.
    """

    __slots__ = (
        "_config",
        "_headers",
        "_body",
        "_status",
        "_error_message",
        "_content_type",
        "_character_encoding",
        "_character_encoding_set",
        "_committed",
        "_locale",
        "buffer_size",
        "cookies",
    )

    def __init__(self, config: WebConfig | None = None) -> None:
        self._config = config if config is not None else get_default_config()
        self._headers = MutableHeaders()
        self._body = ResponseBody(
            on_commit=self._commit_from_stream, on_write=self._check_buffer_size
        )
        self._status = SC_OK
        self._error_message: str | None = None
        self._content_type: str | None = None
        self._character_encoding = self._config.default_charset
        self._character_encoding_set = False
        self._committed = False
        self._locale: Locale = self._config.default_locale
        self.buffer_size: int = self._config.buffer_size
        self.cookies: list[Any] = []

    @property
    def config(self) -> WebConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Status and commit state
    # -------------------------------------------------------------------------

    @property
    def status(self) -> int:
        return self._status

    @status.setter
    def status(self, value: int) -> None:
        self.set_status(value)

    def set_status(self, status: int) -> None:
        """Set the status code. Silently ignored once committed."""
        if not self._committed:
            self._status = status

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def committed(self) -> bool:
        return self._committed

    def set_committed(self, committed: bool = True) -> None:
        """
        Commit the response. Only ``reset()`` can undo a commit.

        Raises:
            StateError: If ``committed`` is False.
        """
        if not committed:
            raise StateError("Cannot un-commit a response - use reset() instead")
        if not self._committed:
            logger.debug("Response committed with status %d", self._status)
        self._committed = True

    def _commit_from_stream(self) -> None:
        self.set_committed(True)

    def _check_buffer_size(self, size: int) -> None:
        if size > self.buffer_size:
            # advisory: no truncation, no commit
            logger.debug("Response body (%d bytes) exceeds buffer size %d", size, self.buffer_size)

    def flush_buffer(self) -> None:
        """Nothing is sent anywhere; flushing only commits the response."""
        self.set_committed(True)

    def reset_buffer(self) -> None:
        """
        Discard the body written so far.

        Raises:
            StateError: If the response is already committed.
        """
        if self._committed:
            raise StateError("Cannot reset buffer - response is already committed")
        self._body.reset()

    def reset(self) -> None:
        """
        Return to the initial state, committed or not.

        Clears body, headers, cookies, status, error message, content type,
        explicit encoding and locale, and un-commits.
        """
        self._body.reset()
        self._headers.clear()
        self.cookies.clear()
        self._status = SC_OK
        self._error_message = None
        self._content_type = None
        self._character_encoding = self._config.default_charset
        self._character_encoding_set = False
        self._locale = self._config.default_locale
        self._committed = False
        logger.debug("Response reset")

    def send_error(self, status: int, message: str | None = None) -> None:
        """
        Set an error status (and message) and commit.

        Raises:
            StateError: If the response is already committed.
        """
        if self._committed:
            raise StateError("Cannot set error status - response is already committed")
        self._status = status
        if message is not None:
            self._error_message = message
        logger.debug("Sending error %d: %s", status, message)
        self.set_committed(True)

    def send_redirect(self, url: str) -> None:
        """
        Redirect to ``url`` with 302 Found and commit.

        Preconditions are checked before anything changes.

        Raises:
            StateError: If the response is already committed.
            ValueError: If ``url`` is None.
        """
        if self._committed:
            raise StateError("Cannot send redirect - response is already committed")
        if url is None:
            raise ValueError("Redirect URL must not be None")
        self._headers.set(LOCATION, url, replace=True)
        self._status = SC_FOUND
        logger.debug("Redirecting to %s", url)
        self.set_committed(True)

    @property
    def redirected_url(self) -> str | None:
        return self._headers.get(LOCATION)

    def encode_url(self, url: str) -> str:
        """No session ids go into URLs: returned unchanged."""
        return url

    def encode_redirect_url(self, url: str) -> str:
        return self.encode_url(url)

    # -------------------------------------------------------------------------
    # Headers
    # -------------------------------------------------------------------------

    @property
    def headers(self) -> MutableHeaders:
        """Response headers (case-insensitive, multi-value)."""
        return self._headers

    def set_header(self, name: str, value: Any) -> None:
        """Replace a header. ``None`` values are ignored."""
        if value is not None:
            self._headers.set(name, value, replace=True)

    def add_header(self, name: str, value: Any) -> None:
        """Append a header value. ``None`` values are ignored."""
        if value is not None:
            self._headers.add(name, value)

    def set_int_header(self, name: str, value: int) -> None:
        self.set_header(name, int(value))

    def add_int_header(self, name: str, value: int) -> None:
        self.add_header(name, int(value))

    def set_date_header(self, name: str, value: int) -> None:
        """Replace a header with an IMF-fixdate built from epoch milliseconds."""
        self.set_header(name, format_http_date(value))

    def add_date_header(self, name: str, value: int) -> None:
        """Append an IMF-fixdate built from epoch milliseconds."""
        self.add_header(name, format_http_date(value))

    def contains_header(self, name: str) -> bool:
        return name in self._headers

    def get_header(self, name: str) -> str | None:
        return self._headers.get(name)

    def get_headers(self, name: str) -> list[str]:
        return self._headers.getlist(name)

    def get_header_names(self) -> list[str]:
        return self._headers.names()

    def get_header_value(self, name: str) -> Any:
        """Primary raw value of a header, None if absent."""
        return self._headers.get_value(name)

    def get_header_values(self, name: str) -> list[Any]:
        return self._headers.get_values(name)

    def get_date_header(self, name: str) -> int:
        """
        Read a header written as IMF-fixdate back as epoch milliseconds.

        Returns:
            Epoch milliseconds, -1 if absent.

        Raises:
            FormatError: If the header is not an IMF-fixdate.
        """
        value = self._headers.get(name)
        if value is None:
            return -1
        try:
            return parse_http_date(value, formats=(IMF_FIXDATE,))
        except FormatError:
            raise FormatError(
                f"Value for header {name!r} is not a valid date: {value!r}", value
            ) from None

    # -------------------------------------------------------------------------
    # Content type, character encoding, locale
    # -------------------------------------------------------------------------

    @property
    def content_type(self) -> str | None:
        return self._content_type

    @content_type.setter
    def content_type(self, value: str | None) -> None:
        self.set_content_type(value)

    @property
    def character_encoding(self) -> str:
        return self._character_encoding

    @character_encoding.setter
    def character_encoding(self, value: str) -> None:
        self.set_character_encoding(value)

    @property
    def character_encoding_set(self) -> bool:
        """True once an encoding was set explicitly."""
        return self._character_encoding_set

    def set_content_type(self, content_type: str | None) -> None:
        """
        Set the content type and sync the ``Content-Type`` header.

        A charset parameter in ``content_type`` becomes the explicit
        character encoding; without one, an explicit encoding set earlier is
        appended.
        """
        self._content_type = content_type
        if content_type is None:
            return
        charset = extract_charset(content_type)
        if charset:
            self._character_encoding = charset
            self._character_encoding_set = True
        self._update_content_type_header()

    def set_character_encoding(self, encoding: str) -> None:
        """
        Set the character encoding explicitly and sync the content type.

        Raises:
            ValueError: If ``encoding`` is None.
        """
        if encoding is None:
            raise ValueError("Character encoding must not be None")
        self._character_encoding = encoding
        self._character_encoding_set = True
        self._update_content_type_header()

    def _update_content_type_header(self) -> None:
        if self._content_type is not None:
            if self._character_encoding_set:
                self._content_type = with_charset(self._content_type, self._character_encoding)
            self._headers.set(CONTENT_TYPE, self._content_type, replace=True)

    @property
    def locale(self) -> Locale:
        return self._locale

    def set_locale(self, locale: Locale | None) -> None:
        """Set the locale and ``Content-Language``. ``None`` is ignored."""
        if locale is None:
            return
        self._locale = locale
        self._headers.set(CONTENT_LANGUAGE, locale.to_language_tag(), replace=True)

    # -------------------------------------------------------------------------
    # Body
    # -------------------------------------------------------------------------

    def get_output_stream(self) -> ResponseBody:
        """Return the append-only body sink. Closing it commits the response."""
        return self._body

    def write(self, data: bytes | str) -> int:
        """
        Append to the body. Strings are encoded with the current character encoding.

        Raises:
            FormatError: If a string is written and the encoding is unknown.
        """
        if isinstance(data, str):
            data = data.encode(check_charset(self._character_encoding))
        return self._body.write(data)

    @property
    def content(self) -> bytes:
        """Body bytes written so far."""
        return self._body.getvalue()

    def get_content_as_string(self, fallback_charset: str | None = None) -> str:
        """
        Decode the body.

        Uses the explicit encoding if one was set, otherwise
        ``fallback_charset``, otherwise the configured default charset.

        Raises:
            FormatError: If the chosen charset is unknown.
        """
        if self._character_encoding_set:
            charset = self._character_encoding
        else:
            charset = fallback_charset or self._config.default_charset
        return self._body.getvalue().decode(check_charset(charset))

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} status={self._status} "
            f"committed={self._committed} size={len(self._body)}>"
        )


if __name__ == "__main__":
    response = ProxyResponse()
    response.set_content_type("text/plain")
    response.set_character_encoding("UTF-8")
    response.write("Hello!")
    response.send_redirect("/elsewhere")
    response.set_status(200)

    print(f"Status: {response.status}")
    print(f"Headers: {response.headers.raw_items()}")
    print(f"Body: {response.content!r}")
