"""Tests for MockTransport."""

import pytest

from fp705.exceptions import TimeoutError, TransportError
from fp705.protocol.constants import CommandCode
from fp705.protocol.frame_builder import build_packet
from fp705.protocol.frame_reader import parse_response
from fp705.transport.mock import MockTransport, device_reply, status_bytes


class TestMockTransport:
    """Tests for MockTransport class."""

    @pytest.fixture
    def transport(self):
        """Create a closed MockTransport instance."""
        return MockTransport(auto_open=False)

    def test_auto_open(self):
        """Test that the transport starts open by default."""
        assert MockTransport().is_open

    @pytest.mark.asyncio
    async def test_open_close(self, transport):
        """Test opening and closing transport."""
        assert not transport.is_open
        await transport.open()
        assert transport.is_open
        await transport.close()
        assert not transport.is_open

    @pytest.mark.asyncio
    async def test_double_open_raises(self, transport):
        """Test that opening twice raises error."""
        await transport.open()
        with pytest.raises(TransportError):
            await transport.open()

    @pytest.mark.asyncio
    async def test_write_records_data(self, transport):
        """Test that write records data."""
        await transport.open()
        await transport.write(b"hello")
        await transport.write(b"world")
        assert transport.written_data == [b"hello", b"world"]
        assert transport.last_written == b"world"

    @pytest.mark.asyncio
    async def test_write_when_closed_raises(self, transport):
        """Test that writing to closed transport raises."""
        with pytest.raises(TransportError):
            await transport.write(b"test")

    @pytest.mark.asyncio
    async def test_read_byte_from_response(self, transport):
        """Test reading single byte from queued response."""
        await transport.open()
        transport.add_response(bytes([0x16]))
        assert await transport.read_byte() == 0x16

    @pytest.mark.asyncio
    async def test_read_byte_no_data_raises(self, transport):
        """Test that reading with no data raises timeout."""
        await transport.open()
        with pytest.raises(TimeoutError):
            await transport.read_byte()

    @pytest.mark.asyncio
    async def test_read_until_terminator(self, transport):
        """Test reading until the default terminator."""
        await transport.open()
        transport.add_responses(b"\x30\x31", b"\x05\x03\x16")
        assert await transport.read_until() == b"\x30\x31\x05\x03"
        assert await transport.read_byte() == 0x16

    @pytest.mark.asyncio
    async def test_read_until_missing_terminator_raises(self, transport):
        """Test that a frame without terminator times out."""
        await transport.open()
        transport.add_response(b"\x01\x30\x30")
        with pytest.raises(TimeoutError):
            await transport.read_until()

    @pytest.mark.asyncio
    async def test_read_exact_bytes(self, transport):
        """Test reading exact number of bytes."""
        await transport.open()
        transport.add_response(b"hello world")
        assert await transport.read(5) == b"hello"
        assert await transport.read(6) == b" world"

    @pytest.mark.asyncio
    async def test_response_callback(self, transport):
        """Test that the callback answers each written frame."""
        await transport.open()
        transport.set_response_callback(lambda data: data[::-1])
        await transport.write(b"\x03ab")
        assert await transport.read_until() == b"ba\x03"

    @pytest.mark.asyncio
    async def test_silent_callback(self, transport):
        """Test that a callback returning None sends nothing."""
        await transport.open()
        transport.set_response_callback(lambda data: None)
        await transport.write(b"test")
        with pytest.raises(TimeoutError):
            await transport.read_byte()

    @pytest.mark.asyncio
    async def test_discard_buffers(self, transport):
        """Test that discarding drops pending callback output."""
        await transport.open()
        transport.set_response_callback(lambda data: b"\x16\x16")
        await transport.write(b"test")
        transport.discard_buffers()
        with pytest.raises(TimeoutError):
            await transport.read_byte()

    @pytest.mark.asyncio
    async def test_assert_helpers(self, transport):
        """Test the write assertion helpers."""
        await transport.open()
        await transport.write(b"one")
        await transport.write(b"two")

        transport.assert_written(b"two")
        transport.assert_written(b"one", index=0)
        transport.assert_write_count(2)
        with pytest.raises(AssertionError):
            transport.assert_write_count(3)

    @pytest.mark.asyncio
    async def test_clear(self, transport):
        """Test clearing history and pending responses."""
        await transport.open()
        transport.add_response(b"\x16")
        await transport.write(b"test")
        transport.clear()
        assert transport.written_data == []
        with pytest.raises(TimeoutError):
            await transport.read_byte()


class TestDeviceReply:
    """Tests for the device_reply helper."""

    def test_echoes_sequence_and_command(self):
        """Test that the reply echoes the request header."""
        request = build_packet(0x42, CommandCode.TEXT_RECEIPT_OPEN)

        response = parse_response(device_reply(request))

        assert response.sequence == 0x42
        assert response.command == CommandCode.TEXT_RECEIPT_OPEN

    def test_status_bytes(self):
        """Test building status bytes with flags set."""
        assert status_bytes((2, 0x20)).hex() == "8080a08080808080"
        assert status_bytes((0, 0x01), (0, 0x40)).hex() == "c180808080808080"
