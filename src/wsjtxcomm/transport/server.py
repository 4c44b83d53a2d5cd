"""UDP server that talks to a single WSJT-X instance.

WSJT-X is the UDP *client*: it sends its datagrams to a configured address
and accepts commands from wherever its datagrams are answered from. This
module provides the other end:

- Bind the configured unicast address or join the multicast group
- Receive loop: decode every datagram, feed ``messages`` and ``errors``
- Learn the peer address from inbound traffic
- Send encoded commands back to that peer

Design Patterns:
- Queue-based decoupling: the receive loop produces into bounded channels
- Background thread: ``start()`` runs the loop without blocking the caller
- Polling shutdown: a socket timeout lets the loop notice ``close()``
"""

from __future__ import annotations

import logging
import socket
import struct
import threading
from typing import Optional, Tuple

from ..codec.decoder import decode
from ..codec.encoder import encode
from ..exceptions import NotConnectedError, TransportError
from ..framing.envelope import is_wsjtx_datagram
from ..models.base import BaseMessage
from ..models.messages import (
    ClearMessage,
    CloseMessage,
    ConfigureMessage,
    FreeTextMessage,
    HaltTxMessage,
    HeartbeatMessage,
    HighlightCallsignMessage,
    LocationMessage,
    ReplayMessage,
    ReplyMessage,
    SwitchConfigurationMessage,
)
from .channel import Channel
from .config import ServerConfig

logger = logging.getLogger(__name__)

Address = Tuple[str, int]

_FALLBACK_ADDRESS = "127.0.0.1"


class Server:
    """UDP endpoint for exchanging messages with WSJT-X.

    The socket is bound on construction. Received messages and decode errors
    are delivered on two bounded channels, ``messages`` and ``errors``, once the
    receive loop is running (``listen()`` in the calling thread or ``start()``
    on a background thread).

    No command can be sent until WSJT-X has been heard from: the first
    datagram carrying the WSJT-X magic sets the peer address, and every later
    one refreshes it, so a restarted WSJT-X on a new port is followed.

    Attributes:
        config: Server configuration
        messages: Channel of decoded messages
        errors: Channel of decode and transport errors

    Examples:
        ```python
        from wsjtxcomm import ReplayMessage
        from wsjtxcomm.transport import Server, ServerConfig

        with Server(ServerConfig(address="127.0.0.1")) as server:
            server.start()
            first = server.messages.get()      # usually a Heartbeat
            print(f"WSJT-X is at {server.peer_address}")
            server.send_replay(ReplayMessage(id=first.id))
            for message in server.messages:
                print(message)
        ```
    """

    def __init__(self, config: Optional[ServerConfig] = None) -> None:
        """Create the server and bind its socket.

        Args:
            config: Server configuration. If None, uses default config.

        Raises:
            TransportError: If the socket cannot be bound
        """
        self.config = config if config is not None else ServerConfig()
        self.messages: Channel[BaseMessage] = Channel(self.config.queue_size, name="messages")
        self.errors: Channel[Exception] = Channel(self.config.queue_size, name="errors")

        self._peer: Optional[Address] = None
        self._peer_lock = threading.Lock()
        self._running = False
        self._closed = False
        self._thread: Optional[threading.Thread] = None

        self._sock = self._open_socket()
        self._sock.settimeout(self.config.poll_interval)
        logger.info("Listening for WSJT-X on %s:%d", *self.local_address)

    # Socket setup

    def _open_socket(self) -> socket.socket:
        if not self.config.is_multicast:
            return self._bind(self.config.address)

        try:
            return self._join_multicast()
        except OSError as e:
            if not self.config.multicast_fallback:
                raise TransportError(
                    f"could not join multicast group {self.config.address}:{self.config.port}: {e}"
                ) from e
            logger.warning(
                "Could not join multicast group %s (%s), falling back to %s",
                self.config.address,
                e,
                _FALLBACK_ADDRESS,
            )
            return self._bind(_FALLBACK_ADDRESS)

    def _bind(self, address: str) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.bind((address, self.config.port))
        except OSError as e:
            sock.close()
            raise TransportError(f"could not bind {address}:{self.config.port}: {e}") from e
        return sock

    def _join_multicast(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            # Several programs may share the group port
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(("", self.config.port))
            membership = struct.pack(
                "4s4s",
                socket.inet_aton(self.config.address),
                socket.inet_aton(self.config.interface),
            )
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        except OSError:
            sock.close()
            raise
        return sock

    # Properties

    @property
    def local_address(self) -> Address:
        """The (host, port) the socket is bound to."""
        host, port = self._sock.getsockname()[:2]
        return host, port

    @property
    def peer_address(self) -> Optional[Address]:
        """Address of the WSJT-X instance last heard from, or None."""
        with self._peer_lock:
            return self._peer

    @property
    def running(self) -> bool:
        return self._running

    # Receive loop

    def listen(self) -> None:
        """Run the receive loop in the calling thread until ``close()`` or a socket failure.

        A malformed datagram never stops the loop; its error goes to ``errors``.
        A socket read failure is fatal: it is reported on ``errors`` and both
        channels are closed.
        """
        if self._running:
            logger.warning("Receive loop already running")
            return
        if self._closed:
            raise TransportError("server is closed")

        self._running = True
        logger.debug("Receive loop started")
        try:
            while self._running:
                try:
                    data, address = self._sock.recvfrom(self.config.buffer_size)
                except socket.timeout:
                    continue
                except OSError as e:
                    if not self._closed:
                        logger.error("Socket read failed, stopping receive loop: %s", e)
                        self.errors.put(TransportError(f"reading from socket: {e}"))
                    break
                self._handle_datagram(data, address)
        finally:
            self._running = False
            self.messages.close()
            self.errors.close()
            logger.debug("Receive loop stopped")

    def start(self) -> threading.Thread:
        """Run the receive loop on a daemon thread.

        Returns:
            The started thread

        Raises:
            TransportError: If the server has been closed
        """
        if self._closed:
            raise TransportError("server is closed")
        if self._thread is not None and self._thread.is_alive():
            logger.warning("Receive loop already running")
            return self._thread

        self._thread = threading.Thread(target=self.listen, daemon=True, name="wsjtxcomm-rx")
        self._thread.start()
        return self._thread

    def _handle_datagram(self, data: bytes, address: Address) -> None:
        if not is_wsjtx_datagram(data):
            logger.debug("Ignoring %d byte datagram from %s:%d without WSJT-X magic", len(data), *address)
            return

        with self._peer_lock:
            if self._peer != address:
                logger.info("WSJT-X peer is now %s:%d", *address)
            self._peer = address

        message, error = decode(data, strict_schema=self.config.strict_schema)
        logger.debug(
            "Received %d bytes from %s:%d: %s",
            len(data),
            *address,
            type(message).__name__ if message is not None else "no message",
        )
        if message is not None:
            self.messages.put(message)
        if error is not None:
            self.errors.put(error)

    def close(self) -> None:
        """Stop the receive loop and release the socket. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._running = False
        self._sock.close()

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.config.poll_interval * 10)

        self.messages.close()
        self.errors.close()
        logger.info("Server closed")

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Sending

    def send(self, message: BaseMessage) -> int:
        """Encode a message and send it to the WSJT-X peer.

        Args:
            message: Message to send

        Returns:
            Number of bytes sent

        Raises:
            NotConnectedError: If no WSJT-X datagram has been received yet
            EncodeError: If the message cannot be encoded
            TransportError: If the socket write fails
        """
        peer = self.peer_address
        if peer is None:
            raise NotConnectedError(
                f"cannot send {type(message).__name__}: no WSJT-X peer has been heard from yet"
            )

        data = encode(message)
        try:
            sent = self._sock.sendto(data, peer)
        except OSError as e:
            raise TransportError(f"sending {type(message).__name__} to {peer[0]}:{peer[1]}: {e}") from e

        logger.debug("Sent %s (%d bytes) to %s:%d", type(message).__name__, sent, *peer)
        return sent

    def _send_as(self, message: BaseMessage, expected: type[BaseMessage]) -> int:
        if not isinstance(message, expected):
            raise TypeError(f"expected {expected.__name__}, got {type(message).__name__}")
        return self.send(message)

    def send_heartbeat(self, message: HeartbeatMessage) -> int:
        """Send a heartbeat, advertising this client's maximum schema."""
        return self._send_as(message, HeartbeatMessage)

    def send_clear(self, message: ClearMessage) -> int:
        """Clear the Band Activity window, the Rx Frequency window, or both."""
        return self._send_as(message, ClearMessage)

    def send_reply(self, message: ReplyMessage) -> int:
        """Reply to a CQ or QRZ decode, as if the user double-clicked it."""
        return self._send_as(message, ReplyMessage)

    def send_close(self, message: CloseMessage) -> int:
        """Ask WSJT-X to shut down."""
        return self._send_as(message, CloseMessage)

    def send_replay(self, message: ReplayMessage) -> int:
        """Ask WSJT-X to resend the decodes in its Band Activity window."""
        return self._send_as(message, ReplayMessage)

    def send_halt_tx(self, message: HaltTxMessage) -> int:
        return self._send_as(message, HaltTxMessage)

    def send_free_text(self, message: FreeTextMessage) -> int:
        return self._send_as(message, FreeTextMessage)

    def send_location(self, message: LocationMessage) -> int:
        return self._send_as(message, LocationMessage)

    def send_highlight_callsign(self, message: HighlightCallsignMessage) -> int:
        """Highlight (or, with ``reset=True``, un-highlight) a callsign."""
        return self._send_as(message, HighlightCallsignMessage)

    def send_switch_configuration(self, message: SwitchConfigurationMessage) -> int:
        return self._send_as(message, SwitchConfigurationMessage)

    def send_configure(self, message: ConfigureMessage) -> int:
        """Change several WSJT-X settings at once."""
        return self._send_as(message, ConfigureMessage)
