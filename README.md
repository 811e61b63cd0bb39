# mcpbridge

`mcpbridge` lets an MCP client that speaks JSON-RPC over standard input and
output talk to an MCP server reachable over streamable HTTP.

Every line read from stdin is posted as a request body to the gateway URL.
The response body is written back to stdout one message per line, with blank
lines dropped. When the server answers with `text/event-stream`, only the
payloads of `data: ` lines are forwarded. Requests are handled by a pool of
concurrent workers, so replies may arrive in a different order than the
requests were sent.

The first `mcp-session-id` header returned by the server is remembered and
sent with every following request; a session id with characters outside
visible ASCII is ignored. If a request fails (network error, timeout,
non-2xx status, interrupted body or an invalid `--auth` value), a JSON-RPC
error with code `-32603` (internal error) is written to stdout instead,
carrying the `id` of the failed request, or `null` when no id could be found.

## Installation

```
pip install mcpbridge
```

## Usage

```
mcpbridge --url http://localhost:8000/mcp
```

Options:

| Option          | Default | Meaning                                             |
|-----------------|---------|-----------------------------------------------------|
| `--url`         | —       | Gateway MCP endpoint URL (required)                 |
| `--auth`        | empty   | Value sent verbatim as the `Authorization` header   |
| `--concurrency` | `10`    | Number of workers, i.e. requests in flight at most  |
| `--log-level`   | `off`   | `off`, `error`, `warn`, `info`, `debug` or `trace`  |
| `--log-file`    | none    | Append logs to this file instead of stderr          |
| `--timeout`     | `60`    | Response timeout in seconds                         |

An unknown log level turns logging off. If the log file cannot be opened, a
warning is printed and logs go to stderr.

Example with an authorization header and logging to a file:

```
mcpbridge --url http://localhost:8000/mcp --auth "Bearer token" \
    --log-level debug --log-file bridge.log
```

Logs never go to stdout, which is reserved for protocol messages. The bridge
exits once stdin is closed and every pending request has been answered.

To use the bridge from an MCP client, configure the client to start the
`mcpbridge` command with the options above as its stdio server.

## Library use

The pieces are available for embedding:

- `mcpbridge.config.Config` — settings, built with `Config.from_cli(args)`
  (the first item is the program name) or `Config.from_env(environ)`. Without
  a mapping, `from_env` reads a `.env` file and the process environment,
  using the variables `MCP_SERVER_URL` (required), `MCP_AUTH`, `CONCURRENCY`,
  `MCP_WRAPPER_LOG_LEVEL`, `MCP_WRAPPER_LOG_FILE` and `MCP_TOOL_CALL_TIMEOUT`
  (names are matched case-insensitively). Missing or bad values raise
  `ConfigError`.
- `mcpbridge.logger.init_logger(log_level, log_file)` — sets up logging once
  per process.
- `mcpbridge.client.McpStreamClient(config, transport=None)` — an async
  context manager; `await client.stream_post(payload)` returns a
  `PostResult` (`out`, `session_id`, `sse`) and raises `PostError` on failure.
- `mcpbridge.jsonrpc` — `find_first_id`, `parse_id`, `error_response` and
  `mcp_error`.
- `mcpbridge.stdio` — `read_lines`, `write_messages` and `process_message`,
  moving lines between streams and `asyncio.Queue`s.
- `mcpbridge.workers` — `spawn_workers`, `run_worker`, `write_output` and
  `output_lines`.
- `mcpbridge.main.main_loop(concurrency, client, reader, writer)` — runs the
  whole bridge; `reader` is any object with an async `readline()` (such as
  an `asyncio.StreamReader`) and `writer` a binary file-like object with
  `write()` and `flush()`.

## What it does not do

The `mcpbridge` command takes its settings from the command line only;
environment variables and `.env` files are read only through
`Config.from_env` when the package is used as a library. The bridge is a
client-side relay: it does not serve MCP itself and does not interpret the
messages it forwards beyond looking up request ids for error replies.

## Development

```
pip install -e ".[test]"
pytest
```