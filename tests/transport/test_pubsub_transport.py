"""Tests for NatsTransport with a mocked NATS client."""

import json
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from nats.errors import Error as NatsError

from anet_mcp.protocol.dispatcher import RequestDispatcher
from anet_mcp.protocol.errors import TransportIOError
from anet_mcp.protocol.models import ServerInfo
from anet_mcp.tools.builtin import builtin_tools
from anet_mcp.tools.registry import ToolRegistry
from anet_mcp.transport.base import Transport
from anet_mcp.transport.pubsub import NatsTransport, connect_with_retry

_SUBJECT = "mcp.requests"


class _FakeSubscription:
    def __init__(self, messages: list[MagicMock]) -> None:
        self._messages = messages
        self.unsubscribe = AsyncMock()

    @property
    def messages(self) -> AsyncIterator[MagicMock]:
        async def _gen() -> AsyncIterator[MagicMock]:
            for msg in self._messages:
                yield msg

        return _gen()


def _msg(data: bytes, reply: str = "") -> MagicMock:
    msg = MagicMock()
    msg.subject = _SUBJECT
    msg.data = data
    msg.reply = reply
    return msg


def _make_client(messages: list[MagicMock]) -> MagicMock:
    client = MagicMock()
    client.subscribe = AsyncMock(return_value=_FakeSubscription(messages))
    client.publish = AsyncMock()
    client.drain = AsyncMock()
    return client


def _dispatcher() -> RequestDispatcher:
    return RequestDispatcher(
        ToolRegistry(builtin_tools()),
        ServerInfo(server_name="nats-test", server_version="0.0.1"),
    )


class TestNatsTransport:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(NatsTransport(client=MagicMock()), Transport)

    async def test_subscribes_to_subject(self) -> None:
        client = _make_client([])
        await NatsTransport(subject="tools.rpc", client=client).run(_dispatcher())
        client.subscribe.assert_awaited_once_with("tools.rpc")

    async def test_publishes_response_to_reply_subject(self) -> None:
        client = _make_client([
            _msg(b'{"jsonrpc":"2.0","id":"1","method":"listTools"}', reply="_INBOX.abc"),
        ])

        await NatsTransport(client=client).run(_dispatcher())

        client.publish.assert_awaited_once()
        subject, payload = client.publish.call_args[0]
        assert subject == "_INBOX.abc"
        body = json.loads(payload)
        assert body["id"] == "1"
        assert {t["name"] for t in body["result"]["tools"]} == {"example_tool", "echo"}

    async def test_no_reply_subject_drops_response(self) -> None:
        handler = MagicMock()
        handler.handle_message = AsyncMock()
        client = _make_client([_msg(b'{"jsonrpc":"2.0","id":"1","method":"listTools"}')])

        await NatsTransport(client=client).run(handler)

        handler.handle_message.assert_awaited_once()
        client.publish.assert_not_awaited()

    async def test_undecodable_payload_skipped(self) -> None:
        client = _make_client([
            _msg(b"not json", reply="_INBOX.1"),
            _msg(b'{"jsonrpc":"2.0","id":"2","method":"listPrompts"}', reply="_INBOX.2"),
        ])

        await NatsTransport(client=client).run(_dispatcher())

        client.publish.assert_awaited_once()
        assert client.publish.call_args[0][0] == "_INBOX.2"

    async def test_messages_handled_in_arrival_order(self) -> None:
        client = _make_client([
            _msg(f'{{"jsonrpc":"2.0","id":"{i}","method":"listPrompts"}}'.encode(), f"_INBOX.{i}")
            for i in range(5)
        ])

        await NatsTransport(client=client).run(_dispatcher())

        replies = [c.args[0] for c in client.publish.call_args_list]
        assert replies == [f"_INBOX.{i}" for i in range(5)]

    async def test_dispatch_errors_still_replied(self) -> None:
        client = _make_client([_msg(b'{"jsonrpc":"2.0","id":"3","method":"bogus"}', "_INBOX.3")])

        await NatsTransport(client=client).run(_dispatcher())

        body = json.loads(client.publish.call_args[0][1])
        assert body["error"]["code"] == -32601
        assert "result" not in body

    async def test_publish_failure_raises_io_error(self) -> None:
        client = _make_client([_msg(b'{"jsonrpc":"2.0","id":"1","method":"listTools"}', "_INBOX")])
        client.publish = AsyncMock(side_effect=NatsError("connection closed"))

        with pytest.raises(TransportIOError, match="publish"):
            await NatsTransport(client=client).run(_dispatcher())

    async def test_shared_client_not_drained(self) -> None:
        client = _make_client([])
        transport = NatsTransport(client=client)
        await transport.run(_dispatcher())
        await transport.close()
        client.drain.assert_not_awaited()

    async def test_owned_client_drained_on_close(self) -> None:
        client = _make_client([])
        with patch(
            "anet_mcp.transport.pubsub.connect_with_retry",
            AsyncMock(return_value=client),
        ) as mock_connect:
            transport = NatsTransport("nats://bus:4222", connect_retries=3)
            await transport.run(_dispatcher())
            await transport.close()

        assert mock_connect.await_args.args == ("nats://bus:4222",)
        assert mock_connect.await_args.kwargs["retries"] == 3
        client.drain.assert_awaited_once()


class TestConnectWithRetry:
    async def test_retries_until_connected(self) -> None:
        client = MagicMock()
        with (
            patch(
                "anet_mcp.transport.pubsub.nats.connect",
                AsyncMock(side_effect=[OSError("refused"), OSError("refused"), client]),
            ) as mock_connect,
            patch("anet_mcp.transport.pubsub.asyncio.sleep", AsyncMock()) as mock_sleep,
        ):
            result = await connect_with_retry("nats://bus:4222", retries=5, retry_wait=0.5)

        assert result is client
        assert mock_connect.await_count == 3
        assert mock_sleep.await_count == 2
        mock_sleep.assert_awaited_with(0.5)

    async def test_gives_up_after_retries(self) -> None:
        with (
            patch(
                "anet_mcp.transport.pubsub.nats.connect",
                AsyncMock(side_effect=OSError("refused")),
            ) as mock_connect,
            patch("anet_mcp.transport.pubsub.asyncio.sleep", AsyncMock()),
            pytest.raises(TransportIOError, match="could not connect"),
        ):
            await connect_with_retry("nats://bus:4222", retries=2)

        assert mock_connect.await_count == 2
