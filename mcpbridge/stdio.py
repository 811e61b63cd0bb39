"""Line-oriented pumps between byte streams and asyncio queues."""

from __future__ import annotations

import asyncio
import logging
from typing import BinaryIO, Protocol

logger = logging.getLogger(__name__)


class _EndOfStream:
    """Marker placed on a queue once no further items will follow."""

    def __repr__(self) -> str:
        return "EOF"


EOF = _EndOfStream()


class _LineSource(Protocol):
    async def readline(self) -> bytes | str: ...


def process_message(writer: BinaryIO, message: str) -> None:
    """Write one message as a line and flush; raises ``OSError`` or ``ValueError`` on failure."""
    logger.debug("Write: %s", message)
    writer.write(message.encode("utf-8"))
    if not message.endswith("\n"):
        writer.write(b"\n")
    writer.flush()


async def read_lines(queue: asyncio.Queue, reader: _LineSource) -> int:
    """Put each line of ``reader`` (without its line ending) onto ``queue``.

    Stops at end of input, on a read error or on invalid UTF-8, then puts
    ``EOF`` onto the queue. Returns the number of lines forwarded.
    """
    count = 0
    try:
        while True:
            try:
                raw = await reader.readline()
                if not raw:
                    break
                line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            except (OSError, ValueError) as exc:
                logger.debug("Reader stopped: %s", exc)
                break
            if line.endswith("\n"):
                line = line[:-1]
                if line.endswith("\r"):
                    line = line[:-1]
            logger.debug("Read: %s", line)
            await queue.put(line)
            count += 1
    finally:
        queue.put_nowait(EOF)
    logger.debug("Exit reader loop")
    return count


async def write_messages(queue: asyncio.Queue, writer: BinaryIO) -> int:
    """Write messages from ``queue`` to ``writer`` until ``EOF`` or a write error.

    Returns the number of messages written.
    """
    count = 0
    while True:
        message = await queue.get()
        if message is EOF:
            break
        try:
            process_message(writer, message)
        except (OSError, ValueError) as exc:
            logger.error("Failed to process message in writer: %s", exc)
            break
        count += 1
    logger.info("Writer task shutting down")
    return count