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

"""Tests for ProxyRequest."""

from types import SimpleNamespace

import pytest

from serverless_web import BodyState, DispatcherType, ProxyRequest, WebConfig
from serverless_web.datastructures import Locale
from serverless_web.exceptions import FormatError, StateError


class TestRequestBasics:
    """Construction and free-form fields."""

    def test_method_and_uri(self):
        request = ProxyRequest("POST", "/orders")
        assert request.method == "POST"
        assert request.request_uri == "/orders"

    def test_defaults(self, request_model):
        assert request_model.context_path == ""
        assert request_model.servlet_path == ""
        assert request_model.path_info is None
        assert request_model.query_string is None
        assert request_model.content_type is None
        assert request_model.character_encoding is None
        assert request_model.dispatcher_type is DispatcherType.REQUEST
        assert request_model.async_started is False
        assert request_model.async_supported is False

    def test_query_string_does_not_fill_parameters(self, request_model):
        request_model.query_string = "a=1&b=2"
        assert request_model.get_parameter_names() == []

    def test_remote_and_local_addr(self, request_model):
        assert request_model.remote_addr == "proxy"
        assert request_model.local_addr == "proxy"

    def test_uses_shared_config(self, default_config):
        assert ProxyRequest().config is default_config

    def test_repr(self):
        text = repr(ProxyRequest("GET", "/x"))
        assert "ProxyRequest" in text
        assert "GET" in text
        assert "UNCONSUMED" in text


class TestRequestHeaders:
    """Header access."""

    def test_add_header_appends(self, request_model):
        request_model.add_header("X-Tag", "a")
        request_model.add_header("x-tag", "b")
        assert request_model.get_header("X-TAG") == "a"
        assert request_model.get_headers("x-tag") == ["a", "b"]

    def test_header_names(self, request_model):
        request_model.add_header("X-One", "1")
        request_model.add_header("X-Two", "2")
        assert request_model.get_header_names() == ["X-One", "X-Two"]

    def test_none_value_rejected(self, request_model):
        with pytest.raises(ValueError):
            request_model.add_header("X-Tag", None)

    def test_int_header(self, request_model):
        assert request_model.get_int_header("Max-Forwards") == -1
        request_model.add_header("Max-Forwards", "10")
        assert request_model.get_int_header("max-forwards") == 10

    def test_int_header_not_numeric(self, request_model):
        request_model.add_header("Max-Forwards", "ten")
        with pytest.raises(FormatError):
            request_model.get_int_header("Max-Forwards")

    def test_date_header(self, request_model):
        assert request_model.get_date_header("If-Modified-Since") == -1
        request_model.add_header("If-Modified-Since", "Sun, 06 Nov 1994 08:49:37 GMT")
        assert request_model.get_date_header("If-Modified-Since") == 784111777000

    def test_date_header_not_a_date(self, request_model):
        request_model.add_header("If-Modified-Since", "not-a-date")
        with pytest.raises(FormatError):
            request_model.get_date_header("If-Modified-Since")


class TestRequestContentType:
    """Content-Type, charset and header kept in sync."""

    def test_content_type_adopts_charset(self, request_model):
        request_model.set_content_type("text/plain; charset=UTF-8")
        assert request_model.character_encoding == "UTF-8"
        assert request_model.get_header("Content-Type") == "text/plain; charset=UTF-8"

    def test_encoding_then_content_type(self, request_model):
        request_model.set_character_encoding("UTF-8")
        request_model.set_content_type("text/plain")
        assert request_model.content_type == "text/plain;charset=UTF-8"
        assert request_model.get_header("Content-Type") == "text/plain;charset=UTF-8"

    def test_new_encoding_reaches_header(self, request_model):
        request_model.set_content_type("text/plain; charset=UTF-8")
        request_model.set_character_encoding("ISO-8859-1")
        header = request_model.get_header("Content-Type")
        assert "ISO-8859-1" in header
        assert "UTF-8" not in header
        assert request_model.content_type == header

    def test_encoding_without_content_type(self, request_model):
        request_model.set_character_encoding("UTF-8")
        assert request_model.character_encoding == "UTF-8"
        assert "Content-Type" not in request_model.headers

    def test_property_setters(self, request_model):
        request_model.content_type = "application/json"
        request_model.character_encoding = "UTF-8"
        assert request_model.get_header("Content-Type") == "application/json;charset=UTF-8"

    def test_lenient_charset(self, request_model):
        request_model.set_content_type("text/plain; broken; charset=UTF-8")
        assert request_model.character_encoding == "UTF-8"

    def test_add_header_routes_first_content_type(self, request_model):
        request_model.add_header("content-type", "application/json; charset=UTF-8")
        assert request_model.content_type == "application/json; charset=UTF-8"
        assert request_model.character_encoding == "UTF-8"

    def test_add_header_appends_later_content_type(self, request_model):
        request_model.add_header("Content-Type", "text/plain")
        request_model.add_header("Content-Type", "text/html")
        assert request_model.content_type == "text/plain"
        assert request_model.get_headers("Content-Type") == ["text/plain", "text/html"]

    def test_empty_content_type_is_stored(self, request_model):
        request_model.add_header("Content-Type", "")
        assert request_model.content_type == ""
        assert request_model.get_header_names() == ["Content-Type"]
        request_model.add_header("Content-Type", "text/html")
        assert request_model.content_type == ""
        assert request_model.get_headers("Content-Type") == ["", "text/html"]

    def test_none_content_type(self, request_model):
        request_model.set_content_type(None)
        assert request_model.content_type is None
        assert "Content-Type" not in request_model.headers


class TestRequestLocales:
    """Preferred locales and the Accept-Language header."""

    def test_default_locale(self, request_model):
        assert request_model.locale == Locale("en")
        assert request_model.locales == [Locale("en")]

    def test_configured_default_locale(self):
        request = ProxyRequest(config=WebConfig(default_locale="it-IT", env=None))
        assert request.locale == Locale("it", "IT")

    def test_accept_language_header(self, request_model):
        request_model.add_header("Accept-Language", "fr-CH, fr;q=0.9, en;q=0.8")
        assert request_model.locale == Locale("fr", "CH")
        assert request_model.locales == [Locale("fr", "CH"), Locale("fr"), Locale("en")]

    def test_accept_language_replaces_header(self, request_model):
        request_model.add_header("Accept-Language", "de")
        request_model.add_header("Accept-Language", "es")
        assert request_model.get_headers("Accept-Language") == ["es"]
        assert request_model.locale == Locale("es")

    def test_invalid_accept_language_keeps_locales(self, request_model):
        request_model.add_header("Accept-Language", "en;q=abc")
        assert request_model.locales == [Locale("en")]
        assert request_model.get_header("Accept-Language") == "en;q=abc"

    def test_wildcard_only_falls_back_to_default(self, request_model):
        request_model.add_header("Accept-Language", "*")
        assert request_model.locales == [Locale("en")]

    def test_add_preferred_locale(self, request_model):
        request_model.add_preferred_locale(Locale("it"))
        assert request_model.locale == Locale("it")
        assert request_model.get_header("Accept-Language") == "it, en"

    def test_set_preferred_locales(self, request_model):
        request_model.set_preferred_locales([Locale("de"), Locale("en", "US")])
        assert request_model.locales == [Locale("de"), Locale("en", "US")]
        assert request_model.get_header("Accept-Language") == "de, en-US"

    def test_empty_locale_list_rejected(self, request_model):
        with pytest.raises(ValueError):
            request_model.set_preferred_locales([])

    def test_none_locale_rejected(self, request_model):
        with pytest.raises(ValueError):
            request_model.add_preferred_locale(None)

    def test_locales_is_copy(self, request_model):
        request_model.locales.append(Locale("zz"))
        assert request_model.locales == [Locale("en")]


class TestRequestBody:
    """Body access through the request."""

    def test_no_content(self, request_model):
        assert request_model.content is None
        assert request_model.content_length == -1

    def test_content_length(self, request_model):
        request_model.set_content(b"12345")
        assert request_model.content_length == 5

    def test_content_as_string(self, request_model):
        request_model.set_character_encoding("UTF-8")
        request_model.set_content("héllo".encode("utf-8"))
        assert request_model.get_content_as_string() == "héllo"

    def test_content_as_string_without_content(self, request_model):
        request_model.set_character_encoding("UTF-8")
        assert request_model.get_content_as_string() is None

    def test_content_as_string_without_encoding(self, request_model):
        request_model.set_content(b"abc")
        with pytest.raises(StateError):
            request_model.get_content_as_string()

    def test_content_as_string_unknown_encoding(self, request_model):
        request_model.set_character_encoding("no-such-charset")
        request_model.set_content(b"abc")
        with pytest.raises(FormatError) as exc_info:
            request_model.get_content_as_string()
        assert exc_info.value.value == "no-such-charset"

    def test_reader_unknown_encoding(self, request_model):
        request_model.set_character_encoding("no-such-charset")
        request_model.set_content(b"abc")
        with pytest.raises(FormatError):
            request_model.get_reader()
        assert request_model.body_state == BodyState.UNCONSUMED

    def test_stream_then_reader(self, request_model):
        request_model.set_content(b"abc")
        assert request_model.get_input_stream().read() == b"abc"
        assert request_model.body_state == BodyState.STREAM
        with pytest.raises(StateError):
            request_model.get_reader()

    def test_reader_then_stream(self, request_model):
        request_model.set_content(b"abc")
        request_model.get_reader()
        with pytest.raises(StateError):
            request_model.get_input_stream()

    def test_reader_twice_same_object(self, request_model):
        request_model.set_content(b"abc")
        assert request_model.get_reader() is request_model.get_reader()

    def test_reader_default_encoding(self, request_model):
        request_model.set_content("café".encode("iso-8859-1"))
        assert request_model.get_reader().read() == "café"

    def test_reader_request_encoding(self, request_model):
        request_model.set_character_encoding("UTF-8")
        request_model.set_content("café".encode("utf-8"))
        assert request_model.get_reader().read() == "café"

    def test_set_content_resets_access(self, request_model):
        request_model.set_content(b"abc")
        request_model.get_input_stream()
        request_model.set_content(b"def")
        assert request_model.get_reader().read() == "def"


class TestRequestParameters:
    """Parameter operations."""

    def test_set_and_get(self, request_model):
        request_model.set_parameter("page", "1")
        assert request_model.get_parameter("page") == "1"
        assert request_model.get_parameter_values("page") == ["1"]

    def test_add(self, request_model):
        request_model.add_parameter("tag", "a")
        request_model.add_parameter("tag", "b")
        assert request_model.get_parameter_values("tag") == ["a", "b"]

    def test_set_parameters_map(self, request_model):
        request_model.set_parameters({"a": "1", "b": ["2", "3"]})
        assert request_model.get_parameter_names() == ["a", "b"]
        assert request_model.get_parameter_map() == {"a": ("1",), "b": ("2", "3")}

    def test_add_parameters_map(self, request_model):
        request_model.set_parameter("a", "1")
        request_model.add_parameters({"a": ["2"]})
        assert request_model.get_parameter_values("a") == ["1", "2"]

    def test_bad_map_value(self, request_model):
        with pytest.raises(FormatError):
            request_model.set_parameters({"a": 1})
        with pytest.raises(FormatError):
            request_model.add_parameters({"a": [1, 2]})

    def test_remove(self, request_model):
        request_model.set_parameters({"a": "1", "b": "2"})
        request_model.remove_parameter("a")
        assert request_model.get_parameter("a") is None
        request_model.remove_all_parameters()
        assert request_model.get_parameter_names() == []

    def test_missing(self, request_model):
        assert request_model.get_parameter("missing") is None
        assert request_model.get_parameter_values("missing") is None


class TestRequestAttributes:
    """Attribute operations."""

    def test_set_and_get(self, request_model):
        request_model.set_attribute("user", "alice")
        assert request_model.get_attribute("user") == "alice"
        assert request_model.get_attribute_names() == ["user"]

    def test_none_removes(self, request_model):
        request_model.set_attribute("user", "alice")
        request_model.set_attribute("user", None)
        assert request_model.get_attribute("user") is None
        assert request_model.get_attribute_names() == []

    def test_remove_and_clear(self, request_model):
        request_model.set_attribute("a", 1)
        request_model.set_attribute("b", 2)
        request_model.remove_attribute("a")
        assert request_model.get_attribute_names() == ["b"]
        request_model.clear_attributes()
        assert request_model.get_attribute_names() == []


class TestRequestMisc:
    """Parts, session and authentication placeholders."""

    def test_parts(self, request_model):
        upload = SimpleNamespace(name="file")
        other = SimpleNamespace(name="meta")
        request_model.add_part(upload)
        request_model.add_part(other)
        assert request_model.get_part("file") is upload
        assert request_model.get_part("missing") is None
        assert request_model.get_parts() == [upload, other]

    def test_session_placeholder(self, request_model):
        assert request_model.get_session() is None
        marker = object()
        request_model.session = marker
        assert request_model.get_session(create=False) is marker

    def test_roles_and_logout(self, request_model):
        request_model.add_user_role("admin")
        request_model.remote_user = "alice"
        request_model.auth_type = "BASIC"
        request_model.user_principal = "alice"
        assert "admin" in request_model.user_roles
        request_model.logout()
        assert request_model.remote_user is None
        assert request_model.auth_type is None
        assert request_model.user_principal is None
