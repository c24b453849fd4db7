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
In-memory message bodies.

Request Body State Machine
==========================
A request body can be consumed either as bytes or as text, not both::

                 get_stream()
    UNCONSUMED  ─────────────>  STREAM   (get_reader() → StateError)
        │
        │        get_reader()
        └──────────────────────>  READER   (get_stream() → StateError)

    set_content() from any state  ─────>  UNCONSUMED

Asking again for the accessor already handed out returns the same object.

The ``BodyState`` enum represents these states.

Response Body
=============
``ResponseBody`` is the append-only byte sink behind the response output
accessor. Everything stays in memory; ``close()`` notifies the
owning response so it can commit, further writes still append.

Definition::

    class BodyState(IntEnum):
        UNCONSUMED = 0
        STREAM = 1
        READER = 2

    class RequestBody:
        def set_content(self, content: bytes | None) -> None
        def get_stream(self) -> io.BytesIO
        def get_reader(self, encoding: str) -> io.TextIOBase
        content: bytes | None
        state: BodyState

    class ResponseBody:
        def write(self, data: bytes | bytearray | memoryview | int) -> int
        def flush(self) -> None
        def close(self) -> None
        def getvalue(self) -> bytes
        def reset(self) -> None
"""

from __future__ import annotations

import io
import logging
from enum import IntEnum
from typing import Callable

from .datastructures.media_type import check_charset
from .exceptions import StateError

__all__ = ["BodyState", "RequestBody", "ResponseBody"]

logger = logging.getLogger("serverless_web.body")


class BodyState(IntEnum):
    """
    Consumption state of a request body.

    - UNCONSUMED: No accessor handed out since the content was last set
    - STREAM: The byte stream was handed out
    - READER: The text reader was handed out

    Example:
        >>> body = RequestBody(b"hello")
        >>> body.state == BodyState.UNCONSUMED
        True
        >>> _ = body.get_stream()
        >>> body.state == BodyState.STREAM
        True
    """

    UNCONSUMED = 0
    STREAM = 1
    READER = 2


class RequestBody:
    """Request content with stream XOR reader access."""

    __slots__ = ("_content", "_state", "_stream", "_reader")

    def __init__(self, content: bytes | None = None) -> None:
        self._content: bytes | None = None
        self._state = BodyState.UNCONSUMED
        self._stream: io.BytesIO | None = None
        self._reader: io.TextIOBase | None = None
        self.set_content(content)

    @property
    def content(self) -> bytes | None:
        """Raw content, None if never set."""
        return self._content

    @property
    def state(self) -> BodyState:
        return self._state

    def set_content(self, content: bytes | None) -> None:
        """Replace the content and forget any accessor handed out."""
        self._content = bytes(content) if content is not None else None
        self._state = BodyState.UNCONSUMED
        self._stream = None
        self._reader = None

    def get_stream(self) -> io.BytesIO:
        """
        Return the body as a binary stream.

        Raises:
            StateError: If the reader was already handed out.
        """
        if self._state == BodyState.READER:
            raise StateError(
                "Cannot get the input stream after the reader has already been obtained for this request"
            )
        if self._stream is None:
            self._stream = io.BytesIO(self._content or b"")
            self._state = BodyState.STREAM
            logger.debug("Request body consumed as stream (%d bytes)", len(self._content or b""))
        return self._stream

    def get_reader(self, encoding: str) -> io.TextIOBase:
        """
        Return the body as a buffered text reader.

        Args:
            encoding: Codec used to decode the content.

        Raises:
            StateError: If the byte stream was already handed out.
            FormatError: If ``encoding`` is unknown.
        """
        if self._state == BodyState.STREAM:
            raise StateError(
                "Cannot get the reader after the input stream has already been obtained for this request"
            )
        if self._reader is None:
            check_charset(encoding)
            if self._content is not None:
                self._reader = io.TextIOWrapper(io.BytesIO(self._content), encoding=encoding)
            else:
                self._reader = io.StringIO("")
            self._state = BodyState.READER
            logger.debug("Request body consumed as reader (encoding=%s)", encoding)
        return self._reader

    def __len__(self) -> int:
        return len(self._content) if self._content is not None else 0

    def __repr__(self) -> str:
        size = len(self._content) if self._content is not None else None
        return f"RequestBody(size={size}, state={self._state.name})"


class ResponseBody:
    """
    Append-only in-memory byte sink.

    Example:
        >>> body = ResponseBody()
        >>> body.write(b"Hello, ")
        7
        >>> body.write("world".encode())
        5
        >>> body.getvalue()
        b'Hello, world'
    """

    __slots__ = ("_buffer", "_on_commit", "_on_write")

    def __init__(
        self,
        on_commit: Callable[[], None] | None = None,
        on_write: Callable[[int], None] | None = None,
    ) -> None:
        """
        Args:
            on_commit: Called by ``close()``.
            on_write: Called after every write with the total body size.
        """
        self._buffer = bytearray()
        self._on_commit = on_commit
        self._on_write = on_write

    def write(self, data: bytes | bytearray | memoryview | int) -> int:
        """
        Append bytes, or a single byte given as int.

        Returns:
            Number of bytes appended.
        """
        if isinstance(data, int):
            self._buffer.append(data & 0xFF)
            written = 1
        else:
            self._buffer.extend(data)
            written = len(data)
        if self._on_write is not None:
            self._on_write(len(self._buffer))
        return written

    def writelines(self, lines: list[bytes]) -> None:
        for line in lines:
            self.write(line)

    def writable(self) -> bool:
        return True

    def is_ready(self) -> bool:
        """Writes never block."""
        return True

    def flush(self) -> None:
        """Nothing to push out, content is already in memory."""

    def close(self) -> None:
        """Commit the owning response. The buffer stays writable."""
        if self._on_commit is not None:
            self._on_commit()

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)

    def __enter__(self) -> ResponseBody:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ResponseBody(size={len(self._buffer)})"
