"""Tests for the BLE session."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from d30printer.connection import Session, find_write_characteristic
from d30printer.errors import CharacteristicNotFound, ConnectFailed, WriteFailed


def make_char(uuid, properties):
    return SimpleNamespace(uuid=uuid, properties=properties)


def make_client(*services):
    client = MagicMock()
    client.connect = AsyncMock()
    client.disconnect = AsyncMock()
    client.write_gatt_char = AsyncMock()
    client.is_connected = True
    client.services = [SimpleNamespace(characteristics=chars) for chars in services]
    return client


WRITE_CHAR = make_char("0000ff02-0000-1000-8000-00805f9b34fb", ["write-without-response", "write"])


class TestFindWriteCharacteristic:
    """Test exact property matching."""

    def test_exact_match(self):
        client = make_client([WRITE_CHAR])
        assert find_write_characteristic(client) is WRITE_CHAR

    def test_superset_is_rejected(self):
        """Extra properties disqualify a characteristic."""
        client = make_client([
            make_char("a", ["write", "write-without-response", "notify"]),
            make_char("b", ["write"]),
            make_char("c", ["write-without-response"]),
        ])
        assert find_write_characteristic(client) is None

    def test_searches_all_services(self):
        client = make_client([make_char("a", ["read"])], [WRITE_CHAR])
        assert find_write_characteristic(client) is WRITE_CHAR

    def test_first_match_wins(self):
        other = make_char("b", ["write", "write-without-response"])
        client = make_client([WRITE_CHAR, other])
        assert find_write_characteristic(client) is WRITE_CHAR


class TestSessionConnect:
    """Test connection and characteristic resolution."""

    @pytest.mark.asyncio
    async def test_connect_success(self, mocker):
        client = make_client([WRITE_CHAR])
        mocker.patch("d30printer.connection.BleakClient", return_value=client)
        device = SimpleNamespace(address="AA:BB:CC:DD:EE:FF")

        session = await Session.connect(device)

        client.connect.assert_awaited_once()
        assert session.characteristic is WRITE_CHAR
        assert session.is_connected

    @pytest.mark.asyncio
    async def test_connect_failure_is_wrapped(self, mocker):
        client = make_client([WRITE_CHAR])
        error = OSError("device went away")
        client.connect = AsyncMock(side_effect=error)
        mocker.patch("d30printer.connection.BleakClient", return_value=client)

        with pytest.raises(ConnectFailed) as exc_info:
            await Session.connect(SimpleNamespace(address="AA:BB:CC:DD:EE:FF"))

        assert exc_info.value.cause is error
        assert "device went away" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_characteristic_disconnects(self, mocker):
        client = make_client([make_char("a", ["write", "notify"])])
        mocker.patch("d30printer.connection.BleakClient", return_value=client)

        with pytest.raises(CharacteristicNotFound):
            await Session.connect(SimpleNamespace(address="AA:BB:CC:DD:EE:FF"))

        client.disconnect.assert_awaited_once()


class TestSessionWrite:
    """Test acknowledged writes."""

    @pytest.mark.asyncio
    async def test_write_uses_response(self):
        client = make_client([WRITE_CHAR])
        session = Session(client, WRITE_CHAR)

        await session.write(b"\x01\x02")

        client.write_gatt_char.assert_awaited_once_with(WRITE_CHAR, b"\x01\x02", response=True)

    @pytest.mark.asyncio
    async def test_write_failure_is_wrapped(self):
        client = make_client([WRITE_CHAR])
        error = RuntimeError("ATT error")
        client.write_gatt_char = AsyncMock(side_effect=error)
        session = Session(client, WRITE_CHAR)

        with pytest.raises(WriteFailed) as exc_info:
            await session.write(b"\x00")

        assert exc_info.value.cause is error
        assert client.write_gatt_char.await_count == 1

    @pytest.mark.asyncio
    async def test_write_after_close_fails(self):
        client = make_client([WRITE_CHAR])
        session = Session(client, WRITE_CHAR)
        await session.close()

        with pytest.raises(WriteFailed, match="closed"):
            await session.write(b"\x00")
        client.write_gatt_char.assert_not_awaited()


class TestSessionClose:
    """Test releasing the device."""

    @pytest.mark.asyncio
    async def test_close_disconnects_once(self):
        client = make_client([WRITE_CHAR])
        session = Session(client, WRITE_CHAR)

        await session.close()
        await session.close()

        client.disconnect.assert_awaited_once()
        assert not session.is_connected

    @pytest.mark.asyncio
    async def test_close_skips_disconnect_when_dropped(self):
        client = make_client([WRITE_CHAR])
        client.is_connected = False
        session = Session(client, WRITE_CHAR)

        await session.close()

        client.disconnect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_context_manager_closes_on_error(self):
        client = make_client([WRITE_CHAR])

        with pytest.raises(ValueError):
            async with Session(client, WRITE_CHAR):
                raise ValueError("boom")

        client.disconnect.assert_awaited_once()
