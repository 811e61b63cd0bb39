"""Workers that forward input lines to the gateway and queue the replies."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator

from .client import McpStreamClient, PostError, PostResult
from .jsonrpc import mcp_error
from .stdio import EOF

logger = logging.getLogger(__name__)

_SSE_PREFIX = "data: "


def output_lines(result: PostResult) -> Iterator[str]:
    """Yield the non-empty lines of a gateway reply.

    For event streams only the payload of ``data: `` lines is kept.
    """
    for line in result.out.split("\n"):
        if result.sse:
            line = line[len(_SSE_PREFIX):].strip() if line.startswith(_SSE_PREFIX) else ""
        else:
            line = line.strip()
        if line:
            yield line


async def write_output(worker_id: int, queue: asyncio.Queue, result: PostResult) -> None:
    """Put every output line of ``result`` onto the output queue."""
    for line in output_lines(result):
        await queue.put(line)
    logger.debug("Worker %d: reply queued", worker_id)


async def run_worker(
    worker_id: int,
    client: McpStreamClient,
    input_queue: asyncio.Queue,
    output_queue: asyncio.Queue,
) -> None:
    """Forward lines from ``input_queue`` until ``EOF``, which is put back for the others."""
    while True:
        line = await input_queue.get()
        if line is EOF:
            input_queue.put_nowait(EOF)
            break
        logger.debug("Worker %d processing message: %s", worker_id, line)
        try:
            result = await client.stream_post(line)
        except PostError as exc:
            logger.error("Worker %d: Post failed: %s", worker_id, exc)
            await mcp_error(worker_id, line, str(exc), output_queue)
        else:
            await write_output(worker_id, output_queue, result)
    logger.debug("Worker %d shutting down", worker_id)


async def _close_when_done(workers: list[asyncio.Task], output_queue: asyncio.Queue) -> None:
    try:
        await asyncio.gather(*workers, return_exceptions=True)
    finally:
        output_queue.put_nowait(EOF)


def spawn_workers(
    concurrency: int,
    client: McpStreamClient,
    input_queue: asyncio.Queue,
    output_queue: asyncio.Queue,
) -> asyncio.Task:
    """Start ``concurrency`` workers.

    Returns a task that finishes once every worker has stopped and ``EOF``
    has been put onto the output queue; cancelling it cancels the workers.
    """
    workers = [
        asyncio.create_task(run_worker(worker_id, client, input_queue, output_queue))
        for worker_id in range(concurrency)
    ]
    return asyncio.create_task(_close_when_done(workers, output_queue))