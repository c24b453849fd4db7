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
Servlet-style adapters over the request and response models.

Code written for a servlet container expects a wide, fixed interface: every
getter and setter of the request and response, including the ones that only
make sense with a live connection. ``ProxyRequest`` and ``ProxyResponse``
implement only what a function-invocation environment can honour. The
adapters here present the full interface on top of them:

- supported operations delegate to the model
- environment-bound operations raise ``NotSupportedError``

Architecture::

    hosted code ──> ProxyServletRequest  ──delegates──> ProxyRequest
                    ProxyServletResponse ──delegates──> ProxyResponse
                          │
                          └── network info, dispatching, async, sessions,
                              upgrades, writers, cookies → NotSupportedError

The adapters hold no state of their own; the harness keeps using the models
to build the request and read back the response.

Example:
    request = ProxyRequest("GET", "/hello")
    response = ProxyResponse()
    app(ProxyServletRequest(request), ProxyServletResponse(response))
    status, body = response.status, response.content
"""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import Any, NoReturn

from .body import ResponseBody
from .datastructures import Locale
from .exceptions import NotSupportedError
from .request import DispatcherType, ProxyRequest
from .response import ProxyResponse

__all__ = ["ProxyServletRequest", "ProxyServletResponse"]


def _unsupported(operation: str, detail: str = "") -> NoReturn:
    raise NotSupportedError(operation, detail)


class ProxyServletRequest:
    """Full request interface over a ``ProxyRequest``."""

    __slots__ = ("_request",)

    def __init__(self, request: ProxyRequest) -> None:
        self._request = request

    @property
    def model(self) -> ProxyRequest:
        return self._request

    # Request line and URI parts

    def get_method(self) -> str | None:
        return self._request.method

    def get_request_uri(self) -> str | None:
        return self._request.request_uri

    def get_path_info(self) -> str | None:
        return self._request.path_info

    def get_path_translated(self) -> str | None:
        _unsupported("get_path_translated", "no servlet context to resolve real paths")

    def get_context_path(self) -> str:
        return self._request.context_path

    def get_servlet_path(self) -> str:
        return self._request.servlet_path

    def get_query_string(self) -> str | None:
        return self._request.query_string

    def get_request_url(self) -> str:
        _unsupported("get_request_url", "scheme and host are unknown")

    def get_protocol(self) -> str:
        _unsupported("get_protocol")

    def get_scheme(self) -> str:
        _unsupported("get_scheme")

    def is_secure(self) -> bool:
        _unsupported("is_secure")

    # Network identity

    def get_server_name(self) -> str:
        _unsupported("get_server_name")

    def get_server_port(self) -> int:
        _unsupported("get_server_port")

    def get_remote_addr(self) -> str:
        return self._request.remote_addr

    def get_remote_host(self) -> str:
        _unsupported("get_remote_host")

    def get_remote_port(self) -> int:
        _unsupported("get_remote_port")

    def get_local_addr(self) -> str:
        return self._request.local_addr

    def get_local_name(self) -> str:
        _unsupported("get_local_name")

    def get_local_port(self) -> int:
        _unsupported("get_local_port")

    # Headers

    def get_header(self, name: str) -> str | None:
        return self._request.get_header(name)

    def get_headers(self, name: str) -> list[str]:
        return self._request.get_headers(name)

    def get_header_names(self) -> list[str]:
        return self._request.get_header_names()

    def get_int_header(self, name: str) -> int:
        return self._request.get_int_header(name)

    def get_date_header(self, name: str) -> int:
        return self._request.get_date_header(name)

    # Content

    def get_character_encoding(self) -> str | None:
        return self._request.character_encoding

    def set_character_encoding(self, encoding: str | None) -> None:
        self._request.set_character_encoding(encoding)

    def get_content_type(self) -> str | None:
        return self._request.content_type

    def get_content_length(self) -> int:
        return self._request.content_length

    def get_input_stream(self) -> io.BytesIO:
        return self._request.get_input_stream()

    def get_reader(self) -> io.TextIOBase:
        return self._request.get_reader()

    def get_parts(self) -> list[Any]:
        return self._request.get_parts()

    def get_part(self, name: str) -> Any:
        return self._request.get_part(name)

    # Parameters and attributes

    def get_parameter(self, name: str) -> str | None:
        return self._request.get_parameter(name)

    def get_parameter_names(self) -> list[str]:
        return self._request.get_parameter_names()

    def get_parameter_values(self, name: str) -> list[str] | None:
        return self._request.get_parameter_values(name)

    def get_parameter_map(self) -> Mapping[str, tuple[str, ...]]:
        return self._request.get_parameter_map()

    def get_attribute(self, name: str) -> Any:
        return self._request.get_attribute(name)

    def get_attribute_names(self) -> list[str]:
        return self._request.get_attribute_names()

    def set_attribute(self, name: str, value: Any) -> None:
        self._request.set_attribute(name, value)

    def remove_attribute(self, name: str) -> None:
        self._request.remove_attribute(name)

    # Locales

    def get_locale(self) -> Locale:
        return self._request.locale

    def get_locales(self) -> list[Locale]:
        return self._request.locales

    # Dispatching and async

    def get_request_dispatcher(self, path: str) -> Any:
        _unsupported("get_request_dispatcher", "forward and include need a container")

    def get_dispatcher_type(self) -> DispatcherType:
        return self._request.dispatcher_type

    def start_async(self, request: Any = None, response: Any = None) -> Any:
        _unsupported("start_async")

    def is_async_started(self) -> bool:
        return self._request.async_started

    def is_async_supported(self) -> bool:
        return self._request.async_supported

    def get_async_context(self) -> Any:
        return None

    def upgrade(self, handler_class: type) -> Any:
        _unsupported("upgrade")

    # Authentication and session

    def get_auth_type(self) -> str | None:
        return self._request.auth_type

    def get_cookies(self) -> list[Any] | None:
        return self._request.cookies

    def get_remote_user(self) -> str | None:
        return self._request.remote_user

    def get_user_principal(self) -> Any:
        return self._request.user_principal

    def is_user_in_role(self, role: str) -> bool:
        _unsupported("is_user_in_role")

    def authenticate(self, response: Any) -> bool:
        _unsupported("authenticate")

    def login(self, username: str, password: str) -> None:
        _unsupported("login")

    def logout(self) -> None:
        self._request.logout()

    def get_session(self, create: bool = True) -> Any:
        return self._request.get_session(create)

    def set_session(self, session: Any) -> None:
        _unsupported("set_session", "no session store is available")

    def change_session_id(self) -> str:
        _unsupported("change_session_id")

    def get_requested_session_id(self) -> str | None:
        return self._request.requested_session_id

    def is_requested_session_id_valid(self) -> bool:
        return self._request.requested_session_id_valid

    def is_requested_session_id_from_cookie(self) -> bool:
        return self._request.requested_session_id_from_cookie

    def is_requested_session_id_from_url(self) -> bool:
        return self._request.requested_session_id_from_url

    def __repr__(self) -> str:
        return f"ProxyServletRequest({self._request!r})"


class ProxyServletResponse:
    """Full response interface over a ``ProxyResponse``."""

    __slots__ = ("_response",)

    def __init__(self, response: ProxyResponse) -> None:
        self._response = response

    @property
    def model(self) -> ProxyResponse:
        return self._response

    # Status

    def get_status(self) -> int:
        return self._response.status

    def set_status(self, status: int) -> None:
        self._response.set_status(status)

    def set_status_with_message(self, status: int, message: str) -> None:
        _unsupported("set_status_with_message", "use send_error instead")

    def send_error(self, status: int, message: str | None = None) -> None:
        self._response.send_error(status, message)

    def send_redirect(self, location: str) -> None:
        self._response.send_redirect(location)

    def is_committed(self) -> bool:
        return self._response.committed

    def flush_buffer(self) -> None:
        self._response.flush_buffer()

    def reset_buffer(self) -> None:
        self._response.reset_buffer()

    def reset(self) -> None:
        self._response.reset()

    def get_buffer_size(self) -> int:
        return self._response.buffer_size

    def set_buffer_size(self, size: int) -> None:
        self._response.buffer_size = size

    # Headers

    def contains_header(self, name: str) -> bool:
        return self._response.contains_header(name)

    def get_header(self, name: str) -> str | None:
        return self._response.get_header(name)

    def get_headers(self, name: str) -> list[str]:
        return self._response.get_headers(name)

    def get_header_names(self) -> list[str]:
        return self._response.get_header_names()

    def set_header(self, name: str, value: str | None) -> None:
        self._response.set_header(name, value)

    def add_header(self, name: str, value: str | None) -> None:
        self._response.add_header(name, value)

    def set_int_header(self, name: str, value: int) -> None:
        self._response.set_int_header(name, value)

    def add_int_header(self, name: str, value: int) -> None:
        self._response.add_int_header(name, value)

    def set_date_header(self, name: str, value: int) -> None:
        self._response.set_date_header(name, value)

    def add_date_header(self, name: str, value: int) -> None:
        self._response.add_date_header(name, value)

    # Content

    def get_character_encoding(self) -> str:
        return self._response.character_encoding

    def set_character_encoding(self, encoding: str) -> None:
        self._response.set_character_encoding(encoding)

    def get_content_type(self) -> str | None:
        return self._response.content_type

    def set_content_type(self, content_type: str | None) -> None:
        self._response.set_content_type(content_type)

    def set_content_length(self, length: int) -> None:
        _unsupported("set_content_length", "length is taken from the buffered body")

    def get_output_stream(self) -> ResponseBody:
        return self._response.get_output_stream()

    def get_writer(self) -> Any:
        _unsupported("get_writer", "write encoded bytes to get_output_stream()")

    def get_locale(self) -> Locale:
        return self._response.locale

    def set_locale(self, locale: Locale | None) -> None:
        self._response.set_locale(locale)

    # URLs and cookies

    def encode_url(self, url: str) -> str:
        return self._response.encode_url(url)

    def encode_redirect_url(self, url: str) -> str:
        return self._response.encode_redirect_url(url)

    def add_cookie(self, cookie: Any) -> None:
        _unsupported("add_cookie")

    def get_cookie(self, name: str) -> Any:
        _unsupported("get_cookie")

    def get_forwarded_url(self) -> str | None:
        _unsupported("get_forwarded_url")

    def get_included_url(self) -> str | None:
        _unsupported("get_included_url")

    def __repr__(self) -> str:
        return f"ProxyServletResponse({self._response!r})"
