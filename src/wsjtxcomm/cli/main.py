"""Main CLI entry point for wsjtxcomm."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from queue import Empty
from typing import Callable, Optional, Sequence, TextIO

from .. import __version__
from ..codec.decoder import decode
from ..exceptions import TransportError
from ..models.base import BaseMessage
from ..models.messages import (
    CLEAR_BOTH,
    ClearMessage,
    CloseMessage,
    HaltTxMessage,
    HeartbeatMessage,
    ReplayMessage,
)
from ..transport import ChannelClosed, Server, ServerConfig
from ..transport.config import DEFAULT_MULTICAST_ADDRESS, DEFAULT_PORT
from .describe import describe_messages


def _message_json(message: BaseMessage) -> str:
    payload = {
        "type": type(message).__name__,
        "message": message.model_dump(mode="json", by_alias=True),
    }
    return json.dumps(payload)


def decode_hex(text: str) -> int:
    """Decode one datagram given as hex and print it as JSON.

    Returns:
        Exit code (1 if the datagram was not clean)
    """
    try:
        data = bytes.fromhex(text.strip())
    except ValueError as e:
        print(f"Error: not a hex string: {e}", file=sys.stderr)
        return 1

    message, error = decode(data)
    if message is None and error is None:
        print("Error: not a WSJT-X datagram (bad magic)", file=sys.stderr)
        return 1

    if message is not None:
        print(_message_json(message))
    if error is not None:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


# Client id used in commands until a heartbeat names the WSJT-X instance
DEFAULT_CLIENT_ID = "WSJT-X"

# Commands accepted on stdin while listening
COMMANDS: dict[str, Callable[[Server, str], int]] = {
    "clear": lambda server, client_id: server.send_clear(ClearMessage(id=client_id, window=CLEAR_BOTH)),
    "replay": lambda server, client_id: server.send_replay(ReplayMessage(id=client_id)),
    "halt": lambda server, client_id: server.send_halt_tx(HaltTxMessage(id=client_id, auto_tx_only=False)),
    "close": lambda server, client_id: server.send_close(CloseMessage(id=client_id)),
}


def run_command(server: Server, line: str, client_id: str = DEFAULT_CLIENT_ID) -> bool:
    """Send the message for one command line.

    Args:
        server: Server to send through
        line: Command name, case-insensitive (blank lines are ignored)
        client_id: ``id`` of the WSJT-X instance being commanded

    Returns:
        True if the command was sent (or the line was blank)
    """
    command = line.strip().lower()
    if not command:
        return True

    send = COMMANDS.get(command)
    if send is None:
        print(f"Error: unknown command {command!r}, expected one of: {', '.join(COMMANDS)}", file=sys.stderr)
        return False

    try:
        sent = send(server, client_id)
    except TransportError as e:
        print(f"Error: {e}", file=sys.stderr, flush=True)
        return False

    print(f"Sent {command} ({sent} bytes)", file=sys.stderr, flush=True)
    return True


class CommandReader:
    """Reads commands line by line and sends them through a server.

    ``client_id`` starts as ``DEFAULT_CLIENT_ID``; the listen loop replaces it
    with the id of each heartbeat it sees.
    """

    def __init__(self, server: Server, stream: TextIO) -> None:
        self.server = server
        self.stream = stream
        self.client_id = DEFAULT_CLIENT_ID

    def run(self) -> None:
        """Handle lines until the stream ends."""
        for line in self.stream:
            run_command(self.server, line, self.client_id)

    def start(self) -> threading.Thread:
        """Run on a daemon thread."""
        thread = threading.Thread(target=self.run, daemon=True, name="wsjtxcomm-stdin")
        thread.start()
        return thread


def listen(config: ServerConfig, commands: Optional[TextIO] = None) -> int:
    """Print every message and error from WSJT-X until interrupted.

    Lines read from ``commands`` (stdin by default) are sent to WSJT-X, see
    ``COMMANDS``.

    Returns:
        Exit code (1 if the socket failed)
    """
    try:
        server = Server(config)
    except TransportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    host, port = server.local_address
    print(f"Listening for WSJT-X on {host}:{port}...", file=sys.stderr)
    failed = False

    reader = CommandReader(server, commands if commands is not None else sys.stdin)

    with server:
        server.start()
        reader.start()
        try:
            while True:
                try:
                    message = server.messages.get(timeout=0.25)
                    if isinstance(message, HeartbeatMessage):
                        reader.client_id = message.id
                    print(_message_json(message), flush=True)
                except Empty:
                    pass
                except ChannelClosed:
                    break
                finally:
                    failed = _drain_errors(server) or failed
        except KeyboardInterrupt:
            print("Stopping.", file=sys.stderr)

    return 1 if failed else 0


def _drain_errors(server: Server) -> bool:
    failed = False
    while True:
        try:
            error = server.errors.get_nowait()
        except (Empty, ChannelClosed):
            return failed
        failed = failed or isinstance(error, TransportError)
        print(f"Error: {error}", file=sys.stderr, flush=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the wsjtxcomm CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="wsjtxcomm: WSJT-X UDP protocol codec and server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wsjtxcomm --listen                           Listen on 224.0.0.1:2237
                                               (type clear, replay, halt or close to command WSJT-X)
  wsjtxcomm --listen --address 127.0.0.1       Listen on a unicast address
  wsjtxcomm --decode adbccbda000000020000...   Decode one datagram
  wsjtxcomm --describe Status                  Show a message's wire layout
  wsjtxcomm --version                          Show version
        """,
    )

    command = parser.add_mutually_exclusive_group()
    command.add_argument(
        "--decode",
        metavar="HEX",
        type=str,
        help="Decode one datagram given as a hex string and print it as JSON",
    )
    command.add_argument(
        "--listen",
        action="store_true",
        help="Listen for WSJT-X and print every message as JSON; "
        "commands typed on stdin (clear, replay, halt, close) are sent to it",
    )
    command.add_argument(
        "--describe",
        metavar="TYPE",
        nargs="?",
        const="",
        help="Show the wire layout of one message type (tag or name) or of all of them",
    )

    parser.add_argument(
        "--address",
        default=DEFAULT_MULTICAST_ADDRESS,
        help=f"Address to listen on, unicast or multicast (default {DEFAULT_MULTICAST_ADDRESS})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"UDP port (default {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--queue-size",
        type=int,
        default=5,
        help="Capacity of the message and error queues (default 5)",
    )
    parser.add_argument(
        "--strict-schema",
        action="store_true",
        help="Drop datagrams with an unknown schema version",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"wsjtxcomm {__version__}",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.decode is not None:
        return decode_hex(args.decode)

    if args.describe is not None:
        return 0 if describe_messages(args.describe or None) else 1

    if args.listen:
        try:
            config = ServerConfig(
                address=args.address,
                port=args.port,
                queue_size=args.queue_size,
                strict_schema=args.strict_schema,
            )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return listen(config)

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
