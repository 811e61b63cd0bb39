"""Runtime configuration, loaded from the command line or the environment."""

from __future__ import annotations

import argparse
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_CONCURRENCY = 10
DEFAULT_LOG_LEVEL = "off"
DEFAULT_LOG_FILE: str | None = None
DEFAULT_TOOL_CALL_TIMEOUT = 60
DEFAULT_AUTH = ""


class ConfigError(ValueError):
    """Raised when the configuration is missing a value or holds a bad one."""


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid digit found in string: {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"value must not be negative: {text!r}")
    return value


@dataclass
class Config:
    """Settings of the bridge between standard input/output and an MCP gateway."""

    mcp_server_url: str
    mcp_auth: str = DEFAULT_AUTH
    concurrency: int = DEFAULT_CONCURRENCY
    mcp_wrapper_log_level: str = DEFAULT_LOG_LEVEL
    mcp_wrapper_log_file: str | None = DEFAULT_LOG_FILE
    mcp_tool_call_timeout: int = DEFAULT_TOOL_CALL_TIMEOUT

    @classmethod
    def from_cli(cls, args: Iterable[str]) -> Config:
        """Parse command-line arguments; the first item is the program name.

        Exits through ``SystemExit`` on bad or missing arguments.
        """
        items = [str(arg) for arg in args]
        prog = items[0] if items else None
        parser = argparse.ArgumentParser(prog=prog)
        parser.add_argument("--url", dest="mcp_server_url", required=True,
                            help="Gateway MCP endpoint URL")
        parser.add_argument("--auth", dest="mcp_auth", default=DEFAULT_AUTH,
                            help="Authorization header value")
        parser.add_argument("--concurrency", type=_non_negative_int,
                            default=DEFAULT_CONCURRENCY, help="Max concurrent tool calls")
        parser.add_argument("--log-level", dest="mcp_wrapper_log_level",
                            default=DEFAULT_LOG_LEVEL,
                            help='Logging level, or "off" to disable')
        parser.add_argument("--log-file", dest="mcp_wrapper_log_file",
                            default=DEFAULT_LOG_FILE)
        parser.add_argument("--timeout", dest="mcp_tool_call_timeout",
                            type=_non_negative_int, default=DEFAULT_TOOL_CALL_TIMEOUT,
                            help="Response timeout in seconds")
        namespace = parser.parse_args(items[1:])
        return cls(**vars(namespace))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Load settings from environment variables named after the fields.

        Without an explicit mapping, a ``.env`` file is loaded first and the
        process environment is used. Raises ``ConfigError`` on missing or
        unparsable values.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ
        values = {key.lower(): value for key, value in environ.items()}

        def integer(name: str, default: int) -> int:
            raw = values.get(name)
            if raw is None:
                return default
            try:
                number = int(raw)
            except ValueError as exc:
                raise ConfigError(f"invalid value {raw!r} for field {name}") from exc
            if number < 0:
                raise ConfigError(f"invalid value {raw!r} for field {name}")
            return number

        if "mcp_server_url" not in values:
            raise ConfigError("missing value for field mcp_server_url")

        return cls(
            mcp_server_url=values["mcp_server_url"],
            mcp_auth=values.get("mcp_auth", DEFAULT_AUTH),
            concurrency=integer("concurrency", DEFAULT_CONCURRENCY),
            mcp_wrapper_log_level=values.get("mcp_wrapper_log_level", DEFAULT_LOG_LEVEL),
            mcp_wrapper_log_file=values.get("mcp_wrapper_log_file", DEFAULT_LOG_FILE),
            mcp_tool_call_timeout=integer("mcp_tool_call_timeout", DEFAULT_TOOL_CALL_TIMEOUT),
        )