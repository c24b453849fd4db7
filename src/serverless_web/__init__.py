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

"""serverless-web - In-memory HTTP request/response models for serverless hosts.

Lets code written against a blocking "request in, response out" contract run
inside a function-invocation harness that never owns a socket.

Main components:
    ProxyRequest: Inbound message state (method, URI parts, headers, body...)
    ProxyResponse: Outbound message state with commit/reset state machine
    MutableHeaders: Case-insensitive, typed multi-value header store

Adapters:
    ProxyServletRequest: Full servlet-style request interface
    ProxyServletResponse: Full servlet-style response interface

Errors:
    StateError: Precondition violated
    FormatError: Unparsable value
    NotSupportedError: Operation needs a real container

Usage:
    from serverless_web import ProxyRequest, ProxyResponse

    request = ProxyRequest("GET", "/hello")
    request.add_header("Accept-Language", "fr-CH, fr;q=0.9")
    response = ProxyResponse()
    handler(request, response)
    status, headers, body = response.status, response.headers, response.content
"""

__version__ = "0.1.0"

from .body import BodyState, RequestBody, ResponseBody
from .config import WebConfig, get_default_config, set_default_config
from .datastructures import (
    Attributes,
    HeaderValue,
    Locale,
    MutableHeaders,
    Parameters,
    format_accept_language,
    format_http_date,
    parse_accept_language,
    parse_http_date,
)
from .exceptions import FormatError, NotSupportedError, StateError
from .request import DispatcherType, ProxyRequest
from .response import ProxyResponse
from .servlet import ProxyServletRequest, ProxyServletResponse

__all__ = [
    # Models
    "ProxyRequest",
    "ProxyResponse",
    "DispatcherType",
    # Adapters
    "ProxyServletRequest",
    "ProxyServletResponse",
    # Bodies
    "BodyState",
    "RequestBody",
    "ResponseBody",
    # Data structures
    "Attributes",
    "HeaderValue",
    "Locale",
    "MutableHeaders",
    "Parameters",
    "format_accept_language",
    "format_http_date",
    "parse_accept_language",
    "parse_http_date",
    # Configuration
    "WebConfig",
    "get_default_config",
    "set_default_config",
    # Exceptions
    "StateError",
    "FormatError",
    "NotSupportedError",
]
