# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for the in-memory request and response bodies."""

import io

import pytest

from serverless_web.body import BodyState, RequestBody, ResponseBody
from serverless_web.exceptions import FormatError, StateError


class TestBodyState:
    """Test BodyState enum."""

    def test_values(self):
        assert BodyState.UNCONSUMED == 0
        assert BodyState.STREAM == 1
        assert BodyState.READER == 2


class TestRequestBody:
    """Test stream XOR reader access."""

    def test_initial_state(self):
        body = RequestBody(b"abc")
        assert body.state == BodyState.UNCONSUMED
        assert body.content == b"abc"
        assert len(body) == 3

    def test_no_content(self):
        body = RequestBody()
        assert body.content is None
        assert len(body) == 0

    def test_stream(self):
        body = RequestBody(b"hello")
        stream = body.get_stream()
        assert isinstance(stream, io.BytesIO)
        assert stream.read() == b"hello"
        assert body.state == BodyState.STREAM

    def test_stream_is_memoized(self):
        body = RequestBody(b"hello")
        assert body.get_stream() is body.get_stream()

    def test_reader(self):
        body = RequestBody("héllo".encode("utf-8"))
        reader = body.get_reader("utf-8")
        assert reader.read() == "héllo"
        assert body.state == BodyState.READER

    def test_reader_is_memoized(self):
        body = RequestBody(b"hello")
        assert body.get_reader("utf-8") is body.get_reader("utf-8")

    def test_reader_without_content(self):
        reader = RequestBody().get_reader("utf-8")
        assert reader.read() == ""

    def test_reader_unknown_encoding(self):
        body = RequestBody(b"hello")
        with pytest.raises(FormatError):
            body.get_reader("no-such-charset")
        assert body.state == BodyState.UNCONSUMED

    def test_reader_after_stream(self):
        body = RequestBody(b"hello")
        body.get_stream()
        with pytest.raises(StateError):
            body.get_reader("utf-8")

    def test_stream_after_reader(self):
        body = RequestBody(b"hello")
        body.get_reader("utf-8")
        with pytest.raises(StateError):
            body.get_stream()

    def test_set_content_resets_state(self):
        body = RequestBody(b"old")
        stream = body.get_stream()
        body.set_content(b"new")
        assert body.state == BodyState.UNCONSUMED
        assert body.get_reader("ascii").read() == "new"
        assert body.get_reader("ascii") is not stream

    def test_content_is_copied(self):
        data = bytearray(b"abc")
        body = RequestBody(data)
        data[0] = ord("x")
        assert body.content == b"abc"

    def test_repr(self):
        assert repr(RequestBody(b"ab")) == "RequestBody(size=2, state=UNCONSUMED)"


class TestResponseBody:
    """Test the response byte sink."""

    def test_write_bytes(self):
        body = ResponseBody()
        assert body.write(b"Hello, ") == 7
        assert body.write(bytearray(b"world")) == 5
        assert body.getvalue() == b"Hello, world"
        assert len(body) == 12

    def test_write_int(self):
        body = ResponseBody()
        assert body.write(65) == 1
        assert body.getvalue() == b"A"

    def test_writelines(self):
        body = ResponseBody()
        body.writelines([b"a", b"b"])
        assert body.getvalue() == b"ab"

    def test_always_ready(self):
        body = ResponseBody()
        assert body.writable()
        assert body.is_ready()

    def test_flush_does_not_commit(self):
        calls = []
        body = ResponseBody(on_commit=lambda: calls.append(True))
        body.flush()
        assert calls == []

    def test_close_commits(self):
        calls = []
        body = ResponseBody(on_commit=lambda: calls.append(True))
        body.close()
        assert calls == [True]

    def test_write_after_close(self):
        body = ResponseBody()
        body.close()
        body.write(b"late")
        assert body.getvalue() == b"late"

    def test_context_manager_closes(self):
        calls = []
        with ResponseBody(on_commit=lambda: calls.append(True)) as body:
            body.write(b"x")
        assert calls == [True]

    def test_on_write_reports_total_size(self):
        sizes = []
        body = ResponseBody(on_write=sizes.append)
        body.write(b"abc")
        body.write(65)
        assert sizes == [3, 4]

    def test_reset(self):
        body = ResponseBody()
        body.write(b"data")
        body.reset()
        assert body.getvalue() == b""
