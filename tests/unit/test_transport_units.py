"""Tests for the server configuration and channels."""

from __future__ import annotations

import logging
import threading
from queue import Empty

import pytest

from wsjtxcomm.transport import Channel, ChannelClosed, ServerConfig


class TestServerConfig:
    """Tests for ServerConfig validation."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = ServerConfig()

        assert config.address == "224.0.0.1"
        assert config.port == 2237
        assert config.interface == "0.0.0.0"
        assert config.multicast_fallback is True
        assert config.buffer_size == 65535
        assert config.queue_size == 5
        assert config.strict_schema is False
        assert config.poll_interval == 0.1
        assert config.is_multicast is True

    def test_custom_config(self) -> None:
        """Test custom configuration."""
        config = ServerConfig(
            address="127.0.0.1",
            port=0,
            buffer_size=2048,
            queue_size=50,
            strict_schema=True,
            poll_interval=0.5,
        )

        assert config.address == "127.0.0.1"
        assert config.port == 0
        assert config.buffer_size == 2048
        assert config.queue_size == 50
        assert config.strict_schema is True
        assert config.is_multicast is False

    def test_invalid_address_raises(self) -> None:
        """Test that a non-IPv4 address raises ValueError."""
        with pytest.raises(ValueError, match="address must be an IPv4 address"):
            ServerConfig(address="wsjtx.local")

        with pytest.raises(ValueError, match="interface must be an IPv4 address"):
            ServerConfig(interface="eth0")

    def test_invalid_port_raises(self) -> None:
        """Test that an out-of-range port raises ValueError."""
        with pytest.raises(ValueError, match="port must be 0-65535"):
            ServerConfig(port=70000)

        with pytest.raises(ValueError, match="port must be 0-65535"):
            ServerConfig(port=-1)

    def test_invalid_buffer_size_raises(self) -> None:
        """Test that a buffer too small for WSJT-X datagrams raises ValueError."""
        with pytest.raises(ValueError, match="buffer_size must be 1024-65535"):
            ServerConfig(buffer_size=512)

    def test_invalid_queue_size_raises(self) -> None:
        """Test that a non-positive queue size raises ValueError."""
        with pytest.raises(ValueError, match="queue_size must be > 0"):
            ServerConfig(queue_size=0)

    def test_invalid_poll_interval_raises(self) -> None:
        """Test that a non-positive poll interval raises ValueError."""
        with pytest.raises(ValueError, match="poll_interval must be > 0"):
            ServerConfig(poll_interval=0)


class TestChannel:
    """Tests for the bounded drop-oldest channel."""

    def test_fifo(self) -> None:
        """Test items come out in order."""
        channel: Channel[int] = Channel(3)
        for item in (1, 2, 3):
            assert channel.put(item) is True

        assert channel.qsize() == 3
        assert [channel.get_nowait() for _ in range(3)] == [1, 2, 3]

    def test_drop_oldest(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a full channel drops its oldest item instead of blocking."""
        channel: Channel[int] = Channel(2, name="messages")
        with caplog.at_level(logging.WARNING, logger="wsjtxcomm"):
            for item in range(5):
                channel.put(item)

        assert channel.dropped == 3
        assert channel.qsize() == 2
        assert channel.get_nowait() == 3
        assert channel.get_nowait() == 4
        assert "messages channel full" in caplog.text

    def test_empty_get_times_out(self) -> None:
        """Test get() on an open, empty channel."""
        channel: Channel[int] = Channel(1)
        with pytest.raises(Empty):
            channel.get(timeout=0.01)
        with pytest.raises(Empty):
            channel.get_nowait()

    def test_close_drains_then_raises(self) -> None:
        """Test queued items survive close()."""
        channel: Channel[str] = Channel(2)
        channel.put("a")
        channel.close()

        assert channel.closed is True
        assert channel.put("b") is False
        assert channel.get_nowait() == "a"
        with pytest.raises(ChannelClosed):
            channel.get_nowait()
        # Still closed for the next consumer
        with pytest.raises(ChannelClosed):
            channel.get(timeout=0.01)

    def test_close_when_full(self) -> None:
        """Test close() succeeds on a full channel."""
        channel: Channel[int] = Channel(1)
        channel.put(1)
        channel.close()
        channel.close()
        assert list(channel) == [1]

    def test_iteration_stops_on_close(self) -> None:
        """Test iterating ends when the channel is closed."""
        channel: Channel[int] = Channel(5)
        channel.put(1)
        channel.put(2)

        timer = threading.Timer(0.05, channel.close)
        timer.start()
        try:
            assert list(channel) == [1, 2]
        finally:
            timer.cancel()

    def test_close_wakes_blocked_consumer(self) -> None:
        """Test a consumer blocked in get() sees the close."""
        channel: Channel[int] = Channel(1)
        outcome: list[str] = []

        def consume() -> None:
            try:
                channel.get(timeout=5.0)
            except ChannelClosed:
                outcome.append("closed")

        consumer = threading.Thread(target=consume)
        consumer.start()
        channel.close()
        consumer.join(timeout=5.0)

        assert outcome == ["closed"]

    def test_invalid_size(self) -> None:
        """Test a channel needs room for at least one item."""
        with pytest.raises(ValueError, match="maxsize must be > 0"):
            Channel(0)
