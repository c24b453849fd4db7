# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from serverless_web import ProxyRequest, ProxyResponse, WebConfig, set_default_config


@pytest.fixture(autouse=True)
def default_config() -> Iterator[WebConfig]:
    """Pin the shared config to built-in defaults, ignoring the environment."""
    config = WebConfig(env=None)
    set_default_config(config)
    yield config
    set_default_config(None)


@pytest.fixture
def request_model(default_config: WebConfig) -> ProxyRequest:
    return ProxyRequest("GET", "/", config=default_config)


@pytest.fixture
def response_model(default_config: WebConfig) -> ProxyResponse:
    return ProxyResponse(config=default_config)
