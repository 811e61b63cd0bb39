"""Entry point: bridge standard input/output to an MCP gateway over HTTP."""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import BinaryIO

from .client import McpStreamClient
from .config import Config
from .logger import init_logger
from .stdio import read_lines, write_messages
from .workers import spawn_workers

logger = logging.getLogger(__name__)

PROG = "mcpbridge"


class _ThreadedLineReader:
    """Reads lines from a blocking binary stream on a daemon thread."""

    def __init__(self, stream: BinaryIO) -> None:
        self._loop = asyncio.get_running_loop()
        self._lines: asyncio.Queue[bytes] = asyncio.Queue()
        threading.Thread(target=self._pump, args=(stream,), daemon=True).start()

    def _deliver(self, line: bytes) -> bool:
        try:
            self._loop.call_soon_threadsafe(self._lines.put_nowait, line)
        except RuntimeError:
            return False
        return True

    def _pump(self, stream: BinaryIO) -> None:
        try:
            for line in iter(stream.readline, b""):
                if not self._deliver(line):
                    return
        except (OSError, ValueError):
            pass
        self._deliver(b"")

    async def readline(self) -> bytes:
        return await self._lines.get()


async def main_loop(concurrency: int, client: McpStreamClient, reader, writer: BinaryIO) -> None:
    """Pump lines from ``reader`` through ``concurrency`` workers to ``writer``.

    Returns when the writer stops: after all input has been answered, or on
    a write error, in which case the remaining tasks are cancelled.
    """
    logger.debug("Mcp client: %r", client)
    input_queue: asyncio.Queue = asyncio.Queue()
    output_queue: asyncio.Queue = asyncio.Queue()

    reader_task = asyncio.create_task(read_lines(input_queue, reader))
    workers_task = spawn_workers(concurrency, client, input_queue, output_queue)
    try:
        await write_messages(output_queue, writer)
    finally:
        for task in (reader_task, workers_task):
            task.cancel()
        await asyncio.gather(reader_task, workers_task, return_exceptions=True)


async def _run(config: Config) -> None:
    async with McpStreamClient(config) as client:
        reader = _ThreadedLineReader(sys.stdin.buffer)
        await main_loop(config.concurrency, client, reader, sys.stdout.buffer)


def main(argv: list[str] | None = None) -> int:
    """Run the bridge with command-line arguments (program name excluded)."""
    if argv is None:
        prog = sys.argv[0] if sys.argv else PROG
        args = sys.argv[1:]
    else:
        prog = PROG
        args = list(argv)
    config = Config.from_cli([prog, *args])
    init_logger(config.mcp_wrapper_log_level, config.mcp_wrapper_log_file)
    logger.debug("%r", config)
    logger.debug("Start")
    asyncio.run(_run(config))
    logger.debug("Finish")
    return 0


if __name__ == "__main__":
    sys.exit(main())