import pytest

from mcpbridge.config import Config, ConfigError


def test_from_cli_only_url_uses_defaults():
    config = Config.from_cli(["wrapper", "--url", "url"])
    assert config.mcp_server_url == "url"
    assert config.mcp_auth == ""
    assert config.concurrency == 10
    assert config.mcp_wrapper_log_level == "off"
    assert config.mcp_wrapper_log_file is None
    assert config.mcp_tool_call_timeout == 60


def test_from_cli_all_options():
    config = Config.from_cli([
        "wrapper", "--url", "http://localhost/mcp", "--auth", "Bearer token",
        "--concurrency", "3", "--log-level", "debug", "--log-file", "out.log",
        "--timeout", "5",
    ])
    assert config == Config(
        mcp_server_url="http://localhost/mcp",
        mcp_auth="Bearer token",
        concurrency=3,
        mcp_wrapper_log_level="debug",
        mcp_wrapper_log_file="out.log",
        mcp_tool_call_timeout=5,
    )


def test_from_cli_missing_url_exits():
    with pytest.raises(SystemExit):
        Config.from_cli(["wrapper"])


def test_from_cli_negative_timeout_exits():
    with pytest.raises(SystemExit):
        Config.from_cli(["wrapper", "--url", "u", "--timeout", "-1"])


def test_from_env_defaults():
    config = Config.from_env({"MCP_SERVER_URL": "http://localhost/mcp"})
    assert config == Config(mcp_server_url="http://localhost/mcp")


def test_from_env_values():
    config = Config.from_env({
        "MCP_SERVER_URL": "http://localhost/mcp",
        "MCP_AUTH": "Bearer token",
        "CONCURRENCY": "4",
        "MCP_WRAPPER_LOG_LEVEL": "info",
        "MCP_WRAPPER_LOG_FILE": "wrapper.log",
        "MCP_TOOL_CALL_TIMEOUT": "30",
    })
    assert config.mcp_auth == "Bearer token"
    assert config.concurrency == 4
    assert config.mcp_wrapper_log_level == "info"
    assert config.mcp_wrapper_log_file == "wrapper.log"
    assert config.mcp_tool_call_timeout == 30


def test_from_env_missing_url():
    with pytest.raises(ConfigError):
        Config.from_env({"CONCURRENCY": "4"})


def test_from_env_bad_number():
    with pytest.raises(ConfigError):
        Config.from_env({"MCP_SERVER_URL": "u", "CONCURRENCY": "many"})