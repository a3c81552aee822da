"""NatsTransport: request-reply over a NATS subject.

Each inbound message payload is a JSON request. When the message carries a
reply subject the encoded response is published there; otherwise the
response is computed and dropped, so fire-and-forget publishers are
supported.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import nats
from nats.errors import Error as NatsError

from anet_mcp.protocol.codec import encode_response
from anet_mcp.protocol.errors import TransportDecodeError, TransportIOError

if TYPE_CHECKING:
    from nats.aio.client import Client
    from nats.aio.msg import Msg

    from anet_mcp.transport.base import RequestHandler

logger = logging.getLogger(__name__)

DEFAULT_URL = "nats://localhost:4222"
DEFAULT_SUBJECT = "mcp.requests"


async def connect_with_retry(
    url: str,
    *,
    retries: int = 10,
    retry_wait: float = 2.0,
    connect_timeout: float = 2.0,
    **options: Any,
) -> Client:
    """Connect to NATS, retrying the initial connection.

    Once connected the client reconnects on its own. *retries* ``<= 0``
    retries forever.

    Raises:
        TransportIOError: Every attempt failed.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await nats.connect(
                servers=url,
                connect_timeout=connect_timeout,
                allow_reconnect=True,
                max_reconnect_attempts=-1,
                **options,
            )
        except (NatsError, OSError, TimeoutError) as exc:
            if 0 < retries <= attempt:
                raise TransportIOError(f"could not connect to {url}: {exc}") from exc
            logger.warning(
                "NATS connect to %s failed (attempt %d): %s; retrying in %.1fs",
                url,
                attempt,
                exc,
                retry_wait,
            )
            await asyncio.sleep(retry_wait)


class NatsTransport:
    """Serves requests arriving on a NATS subject.

    Pass an already-connected *client* to share a connection; otherwise
    :meth:`connect` (or :meth:`run`) opens one, and :meth:`close` drains it.
    Undecodable payloads are logged and skipped.
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        subject: str = DEFAULT_SUBJECT,
        *,
        client: Client | None = None,
        connect_retries: int = 10,
        retry_wait: float = 2.0,
        connect_timeout: float = 2.0,
    ) -> None:
        self._url = url
        self._subject = subject
        self._client = client
        self._owns_client = client is None
        self._connect_retries = connect_retries
        self._retry_wait = retry_wait
        self._connect_timeout = connect_timeout
        self._subscription: Any = None

    @property
    def subject(self) -> str:
        return self._subject

    async def connect(self) -> None:
        """Open the NATS connection if none is held yet."""
        if self._client is not None:
            return
        self._client = await connect_with_retry(
            self._url,
            retries=self._connect_retries,
            retry_wait=self._retry_wait,
            connect_timeout=self._connect_timeout,
        )
        self._owns_client = True

    async def run(self, handler: RequestHandler) -> None:
        """Subscribe and serve until the subscription ends."""
        await self.connect()
        assert self._client is not None

        logger.info("Listening on NATS subject '%s'", self._subject)
        try:
            self._subscription = await self._client.subscribe(self._subject)
        except NatsError as exc:
            raise TransportIOError(f"subscribe to {self._subject!r} failed: {exc}") from exc

        async for msg in self._subscription.messages:
            await self._serve(handler, msg)

    async def close(self) -> None:
        """Unsubscribe and, when the connection is ours, drain it."""
        if self._subscription is not None:
            try:
                await self._subscription.unsubscribe()
            except NatsError:
                logger.debug("Unsubscribe failed", exc_info=True)
            self._subscription = None
        if self._client is not None and self._owns_client:
            try:
                await self._client.drain()
            except NatsError:
                logger.debug("Drain failed", exc_info=True)
            self._client = None

    async def _serve(self, handler: RequestHandler, msg: Msg) -> None:
        logger.debug("Received message on subject '%s'", msg.subject)
        try:
            response = await handler.handle_message(msg.data)
        except TransportDecodeError as exc:
            logger.error("Failed to parse JSON-RPC request from NATS: %s", exc)
            return

        if not msg.reply:
            logger.debug("No reply subject provided, response not sent")
            return

        assert self._client is not None
        logger.debug("Sending response to reply subject '%s'", msg.reply)
        try:
            await self._client.publish(msg.reply, encode_response(response))
        except NatsError as exc:
            raise TransportIOError(f"publish to {msg.reply!r} failed: {exc}") from exc
