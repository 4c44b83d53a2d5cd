"""Configuration for the WSJT-X UDP server.

This module provides the configuration dataclass for :class:`~wsjtxcomm.transport.Server`.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass

# WSJT-X's default UDP server port
DEFAULT_PORT = 2237

# Multicast group WSJT-X suggests for sharing its output between several clients
DEFAULT_MULTICAST_ADDRESS = "224.0.0.1"

MIN_BUFFER_SIZE = 1024


@dataclass
class ServerConfig:
    """Configuration for a WSJT-X UDP server.

    WSJT-X sends to whatever address is set under Settings > Reporting >
    UDP Server. That can be a unicast address (usually ``127.0.0.1``) or a
    multicast group, which lets several programs listen at once.

    Attributes:
        address: Address to listen on (default "224.0.0.1").
            A multicast group is joined on ``interface``; a unicast address
            is bound directly.

        port: UDP port (default 2237, WSJT-X's default). 0 lets the OS pick
            one, which is mainly useful in tests.

        interface: Local interface address used to join a multicast group
            (default "0.0.0.0", the OS's choice).

        multicast_fallback: If joining the multicast group fails, bind
            ``127.0.0.1`` instead of raising (default True).

        buffer_size: Receive buffer size in bytes (default 65535, the largest
            UDP payload). Must be at least 1024.

        queue_size: Capacity of the ``messages`` and ``errors`` channels
            (default 5). When a channel is full the oldest item is dropped.

        strict_schema: Drop datagrams with an unknown schema version instead
            of decoding them best-effort (default False).

        poll_interval: Socket timeout in seconds used by the receive loop to
            notice ``close()`` (default 0.1).

    Examples:
        ```python
        from wsjtxcomm.transport import Server, ServerConfig

        # Unicast, as configured by a fresh WSJT-X install
        config = ServerConfig(address="127.0.0.1")

        # Multicast on a specific interface, larger queues
        config = ServerConfig(
            address="239.255.0.1",
            interface="192.168.1.10",
            queue_size=50,
        )

        server = Server(config)
        ```
    """

    # Socket
    address: str = DEFAULT_MULTICAST_ADDRESS
    port: int = DEFAULT_PORT
    interface: str = "0.0.0.0"
    multicast_fallback: bool = True
    buffer_size: int = 65535

    # Receive loop
    queue_size: int = 5
    strict_schema: bool = False
    poll_interval: float = 0.1  # seconds

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        try:
            ipaddress.IPv4Address(self.address)
        except ValueError as e:
            raise ValueError(f"address must be an IPv4 address, got {self.address!r}") from e

        try:
            ipaddress.IPv4Address(self.interface)
        except ValueError as e:
            raise ValueError(f"interface must be an IPv4 address, got {self.interface!r}") from e

        if not 0 <= self.port <= 65535:
            raise ValueError(f"port must be 0-65535, got {self.port}")

        if not MIN_BUFFER_SIZE <= self.buffer_size <= 65535:
            raise ValueError(
                f"buffer_size must be {MIN_BUFFER_SIZE}-65535, got {self.buffer_size}"
            )

        if self.queue_size <= 0:
            raise ValueError(f"queue_size must be > 0, got {self.queue_size}")

        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")

    @property
    def is_multicast(self) -> bool:
        """True when ``address`` is a multicast group."""
        return ipaddress.IPv4Address(self.address).is_multicast
