"""StdioTransport: newline-delimited JSON over standard input/output."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import IO, TYPE_CHECKING

from anet_mcp.protocol.codec import encode_response
from anet_mcp.protocol.errors import TransportDecodeError, TransportIOError

if TYPE_CHECKING:
    from anet_mcp.protocol.models import JsonRpcResponse
    from anet_mcp.transport.base import RequestHandler

logger = logging.getLogger(__name__)


class StdioTransport:
    """Reads one JSON request per line and writes one JSON response per line.

    End of input ends :meth:`run` normally. A line that is not JSON aborts
    the run with :class:`TransportDecodeError` when *strict* (the default);
    otherwise it is logged and skipped. Blank lines are ignored.

    Each response is flushed as soon as it is written.
    """

    def __init__(
        self,
        stdin: IO[bytes] | None = None,
        stdout: IO[bytes] | None = None,
        *,
        strict: bool = True,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self._stdout = stdout if stdout is not None else sys.stdout.buffer
        self._strict = strict
        self._closed = False

    @property
    def strict(self) -> bool:
        return self._strict

    async def run(self, handler: RequestHandler) -> None:
        """Serve requests until end of input or :meth:`close`."""
        logger.info("Serving on stdio")
        while not self._closed:
            line = await self._read_line()
            if not line:
                logger.info("End of input, shutting down")
                return
            if not line.strip():
                continue

            try:
                response = await handler.handle_message(line)
            except TransportDecodeError as exc:
                if self._strict:
                    raise
                logger.error("Skipping undecodable line: %s", exc)
                continue
            self._write(response)

    async def close(self) -> None:
        self._closed = True

    async def _read_line(self) -> bytes:
        try:
            return await asyncio.to_thread(self._stdin.readline)
        except (OSError, ValueError) as exc:
            raise TransportIOError(f"read failed: {exc}") from exc

    def _write(self, response: JsonRpcResponse) -> None:
        try:
            self._stdout.write(encode_response(response) + b"\n")
            self._stdout.flush()
        except (OSError, ValueError) as exc:
            raise TransportIOError(f"write failed: {exc}") from exc
