"""Transports: stdio lines and NATS request-reply."""

from anet_mcp.transport.base import RequestHandler, Transport
from anet_mcp.transport.pubsub import NatsTransport
from anet_mcp.transport.stdio import StdioTransport

__all__ = [
    "NatsTransport",
    "RequestHandler",
    "StdioTransport",
    "Transport",
]
