# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for the in-memory request/response models.

The models never touch a socket, so every failure is immediate and
synchronous. Callers get one of three distinct signals:

1. StateError - the object was used wrong (precondition violated)
2. FormatError - the data was bad (a value cannot be parsed)
3. NotSupportedError - the operation makes no sense without a real container

Design Decisions
----------------
- Each class inherits from the closest builtin so generic handlers keep
  working: ``StateError`` is a ``RuntimeError``, ``FormatError`` is a
  ``ValueError``, ``NotSupportedError`` is a ``NotImplementedError``.
- No common base: catch several with tuple syntax,
  ``except (StateError, FormatError)``.
- Missing required arguments (``None`` where a name or URL is needed) raise a
  plain ``ValueError``, not ``FormatError``: nothing was parsed.

StateError
----------
Raised when an operation's precondition does not hold.

Example:
    >>> response.send_redirect("/login")
    >>> response.send_redirect("/again")
    Traceback (most recent call last):
        ...
    StateError: Cannot send redirect - response is already committed

FormatError
-----------
Raised when a value cannot be converted to its target representation:
unparsable date headers, non-numeric integer headers, Accept-Language values,
parameter map entries that are not strings.

NotSupportedError
-----------------
Raised by operations the serverless environment cannot honour: network
identity, request dispatching, async contexts, session management, upgrades.

Example:
    >>> try:
    ...     servlet_request.get_server_port()
    ... except NotSupportedError as e:
    ...     print(e.operation)
    get_server_port
"""

__all__ = ["StateError", "FormatError", "NotSupportedError"]


class StateError(RuntimeError):
    """
    Operation called while the object is in the wrong state.

    Examples: committing twice, asking for the body reader after the byte
    stream was handed out, decoding a body without a character encoding.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"StateError({self.message!r})"


class FormatError(ValueError):
    """
    Value could not be parsed into its target representation.

    Attributes:
        value: The offending input, when available.
    """

    def __init__(self, message: str, value: object = None) -> None:
        self.message = message
        self.value = value
        super().__init__(message)

    def __repr__(self) -> str:
        return f"FormatError({self.message!r}, value={self.value!r})"


class NotSupportedError(NotImplementedError):
    """
    Operation is part of the contract but has no meaning in this environment.

    Attributes:
        operation: Name of the unsupported operation.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"{operation} is not supported in a serverless environment"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def __repr__(self) -> str:
        return f"NotSupportedError(operation={self.operation!r})"
