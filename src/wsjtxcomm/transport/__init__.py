"""UDP transport for talking to WSJT-X.

This module provides the Server that receives WSJT-X datagrams and sends
commands back to the instance it has heard from.
"""

from __future__ import annotations

from .channel import Channel, ChannelClosed
from .config import DEFAULT_MULTICAST_ADDRESS, DEFAULT_PORT, ServerConfig
from .server import Server

__all__ = [
    "Server",
    "ServerConfig",
    "Channel",
    "ChannelClosed",
    "DEFAULT_PORT",
    "DEFAULT_MULTICAST_ADDRESS",
]
