"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import socket
from typing import Callable, Iterator

import pytest

from wsjtxcomm.transport import Server, ServerConfig

# Datagrams captured from WSJT-X 2.2.2 / 2.3.1 and from known-good encoders
CAPTURES: dict[str, str] = {
    "heartbeat": (
        "adbccbda00000002000000000000000657534a542d580000000300000005322e322e32"
        "00000006306439623936"
    ),
    "status": (
        "adbccbda00000002000000010000000657534a542d5800000000006bf0d000000003465438"
        "ffffffff000000032d313500000003465438000000000003730000079e000000054b305357"
        "4500000006444d37394c56ffffffff00ffffffff0000ffffffffffffffff000000074465666175"
        "6c74"
    ),
    "decode": (
        "adbccbda00000002000000020000000657534a542d58010259baf8fffffffb3fc99999a0000000"
        "00000516000000017e0000000e4a4132454a50204e3442502037330000"
    ),
    "clear": "adbccbda00000002000000030000000657534a542d58",
    "clear_both": "adbccbda00000002000000030000000657534a542d5802",
    "reply": (
        "adbccbda00000002000000040000000657534a542d58000004d2fffffff13fe0000000000000"
        "00000929000000034654380000000d4351204b3053574520444d37390000"
    ),
    "qso_logged": (
        "adbccbda00000002000000050000000657534a542d5800000000002586110277ac4801000000"
        "0454335354000000044a4b373300000000006bf86e00000003465438000000022d3300000002"
        "2d37000000013500000007436f6d6d656e74000000034a6f6500000000002586110276c1e801"
        "000000055433535452000000054b3053574500000006444d37394c56000000023142000000023144"
    ),
    "close": "adbccbda00000002000000060000000657534a542d58",
    "replay": "adbccbda00000002000000070000000657534a542d58",
    "halt_tx": "adbccbda00000002000000080000000657534a542d5800",
    "free_text": (
        "adbccbda00000002000000090000000657534a542d58000000114a3732494d53204b30535745"
        "20522d313501"
    ),
    "wspr_decode": (
        "adbccbda000000020000000a0000000657534a542d580102b5f840ffffffeebfe00000000000"
        "0000000000006b6c7300000000000000054b3654475700000004434d39350000001700"
    ),
    "location": "adbccbda000000020000000b0000000657534a542d5800000006444d37396a78",
    "logged_adif": (
        "adbccbda000000020000000c0000000657534a542d580000015c0a3c616469665f7665723a35"
        "3e332e312e300a3c70726f6772616d69643a363e57534a542d580a3c454f483e0a3c63616c6c"
        "3a343e54335354203c677269647371756172653a343e4a4b3733203c6d6f64653a333e465438"
        "203c7273745f73656e743a323e2d38203c7273745f726376643a323e2d39203c71736f5f6461"
        "74653a383e3230323031303330203c74696d655f6f6e3a363e313230383136203c71736f5f64"
        "6174655f6f66663a383e3230323031303330203c74696d655f6f66663a363e31323039313620"
        "3c62616e643a333e34306d203c667265713a383e372e303735393530203c73746174696f6e5f"
        "63616c6c7369676e3a353e4b30535745203c6d795f677269647371756172653a363e444d3739"
        "4c56203c74785f7077723a313e35203c636f6d6d656e743a373e436f6d6d656e74203c6e616d"
        "653a343e4a657373203c6f70657261746f723a353e5433535452203c454f523e"
    ),
    "highlight_callsign": (
        "adbccbda000000020000000d0000000657534a542d58000000064b4d3441434b01ffffffff00"
        "000000000001ffff000000000000000001"
    ),
    "switch_configuration": (
        "adbccbda000000020000000e0000000657534a542d580000000749432d37333030"
    ),
    "configure": (
        "adbccbda000000020000000f0000000657534a542d58000000034a5439ffffffffffffffff00"
        "00000000ffffffff000000064b49364e415a00000004444d303300"
    ),
}


def capture_bytes(name: str) -> bytes:
    return bytes.fromhex(CAPTURES[name])


@pytest.fixture
def capture() -> Callable[[str], bytes]:
    """Look up a captured datagram by name."""
    return capture_bytes


@pytest.fixture
def server() -> Iterator[Server]:
    """Running server bound to an OS-assigned loopback port."""
    server = Server(ServerConfig(address="127.0.0.1", port=0, poll_interval=0.05))
    server.start()
    yield server
    server.close()


def _fake_wsjtx(server: Server) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5.0)
    sock.connect(server.local_address)
    return sock


@pytest.fixture
def fake_wsjtx(server: Server) -> Iterator[socket.socket]:
    """UDP socket playing the part of WSJT-X, connected to ``server``."""
    sock = _fake_wsjtx(server)
    yield sock
    sock.close()


@pytest.fixture
def second_fake_wsjtx(server: Server) -> Iterator[socket.socket]:
    """Another WSJT-X instance (e.g. a restart on a new port)."""
    sock = _fake_wsjtx(server)
    yield sock
    sock.close()
