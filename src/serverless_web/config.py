# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Process-wide defaults for the request and response models.

The defaults come from several sources, merged with SmartOptions. Later
sources override earlier ones:

    built-in DEFAULTS < environment variables < constructor arguments

Environment variables use the prefix ``SERVERLESS_WEB_``::

    SERVERLESS_WEB_DEFAULT_CHARSET=UTF-8
    SERVERLESS_WEB_DEFAULT_LOCALE=it-IT
    SERVERLESS_WEB_BUFFER_SIZE=8192

Keys:
    default_charset: Response encoding when none was set explicitly, and the
        request reader encoding when the request has none.
    default_locale: Initial request locale and response locale.
    buffer_size: Advisory response buffer size.
"""

from __future__ import annotations

from typing import Any

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

from .datastructures import Locale

__all__ = ["WebConfig", "DEFAULTS", "ENV_PREFIX", "get_default_config", "set_default_config"]

ENV_PREFIX = "SERVERLESS_WEB"

DEFAULTS: dict[str, Any] = {
    "default_charset": "ISO-8859-1",
    "default_locale": "en",
    "buffer_size": 4096,
}


def _web_opts_spec(
    default_charset: str,
    default_locale: str,
    buffer_size: int,
) -> None:
    """Reference function for SmartOptions type extraction (no defaults)."""


class WebConfig:
    """Defaults shared by every request/response pair built with it."""

    __slots__ = ("_opts",)

    def __init__(
        self,
        default_charset: str | None = None,
        default_locale: str | None = None,
        buffer_size: int | None = None,
        env: str | None = ENV_PREFIX,
    ) -> None:
        self._opts = self._build_config(
            default_charset=default_charset,
            default_locale=default_locale,
            buffer_size=buffer_size,
            env=env,
        )

    def _build_config(
        self,
        default_charset: str | None,
        default_locale: str | None,
        buffer_size: int | None,
        env: str | None,
    ) -> SmartOptions:
        """Merge defaults, environment and explicit arguments."""
        caller_opts = SmartOptions(
            dict(
                default_charset=default_charset,
                default_locale=default_locale,
                buffer_size=buffer_size,
            ),
            ignore_none=True,
        )
        opts = SmartOptions(DEFAULTS)
        if env:
            opts = opts + SmartOptions(_web_opts_spec, env=env, argv=[])
        return opts + caller_opts

    @property
    def default_charset(self) -> str:
        result: str = self._opts["default_charset"] or DEFAULTS["default_charset"]
        return result

    @property
    def default_locale(self) -> Locale:
        tag = self._opts["default_locale"] or DEFAULTS["default_locale"]
        return Locale.from_language_tag(str(tag))

    @property
    def buffer_size(self) -> int:
        return int(self._opts["buffer_size"] or DEFAULTS["buffer_size"])

    def __getitem__(self, name: str) -> Any:
        """Proxy bracket access to underlying opts."""
        return self._opts[name]

    def __repr__(self) -> str:
        return (
            f"WebConfig(default_charset={self.default_charset!r}, "
            f"default_locale={self.default_locale!r}, buffer_size={self.buffer_size})"
        )


_default_config: WebConfig | None = None


def get_default_config() -> WebConfig:
    """Return the shared config, built from defaults and environment on first use."""
    global _default_config
    if _default_config is None:
        _default_config = WebConfig()
    return _default_config


def set_default_config(config: WebConfig | None) -> None:
    """Replace the shared config. ``None`` rebuilds it on next access."""
    global _default_config
    _default_config = config


if __name__ == "__main__":
    config = get_default_config()
    print(f"Charset: {config.default_charset}")
    print(f"Locale: {config.default_locale}")
    print(f"Buffer size: {config.buffer_size}")
