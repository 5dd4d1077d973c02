"""
BLE Session for the D30 Printer.

Connects to a discovered printer, finds its write characteristic and sends
payloads with acknowledged GATT writes using the Bleak library.
"""

import logging
from typing import Optional

from bleak import BleakClient
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice

from .errors import CharacteristicNotFound, ConnectFailed, WriteFailed

logger = logging.getLogger(__name__)

# The printer's data endpoint advertises exactly these properties
WRITE_PROPERTIES = frozenset({"write", "write-without-response"})


def find_write_characteristic(client: BleakClient) -> Optional[BleakGATTCharacteristic]:
    """Return the first characteristic whose properties equal WRITE_PROPERTIES."""
    for service in client.services:
        for char in service.characteristics:
            if frozenset(char.properties) == WRITE_PROPERTIES:
                return char
    return None


class Session:
    """Write channel to one connected printer."""

    def __init__(self, client: BleakClient, characteristic: BleakGATTCharacteristic):
        self.client = client
        self.characteristic = characteristic
        self._closed = False

    @classmethod
    async def connect(cls, device: BLEDevice) -> "Session":
        """
        Connect to a printer and resolve its write characteristic.

        Raises:
            ConnectFailed: If the connection request fails
            CharacteristicNotFound: If no characteristic has exactly the
                write and write-without-response properties
        """
        client = BleakClient(device)

        logger.info("Connecting to %s...", device.address)
        try:
            await client.connect()
        except Exception as e:
            raise ConnectFailed(f"Failed to connect to D30: {e}", cause=e) from e

        characteristic = find_write_characteristic(client)
        if characteristic is None:
            await client.disconnect()
            raise CharacteristicNotFound(
                "Failed to find D30 Bluetooth characteristics."
            )

        logger.debug("Using write characteristic %s", characteristic.uuid)
        return cls(client, characteristic)

    async def write(self, data: bytes):
        """
        Send one payload and wait for the printer to acknowledge it.

        Raises:
            WriteFailed: If the session is closed or the write fails
        """
        if self._closed:
            raise WriteFailed("Session is closed")

        try:
            await self.client.write_gatt_char(self.characteristic, data, response=True)
        except Exception as e:
            raise WriteFailed(f"Write failed: {e}", cause=e) from e

    async def close(self):
        """Disconnect from the printer."""
        if self._closed:
            return
        self._closed = True
        if self.client.is_connected:
            await self.client.disconnect()
        logger.debug("Disconnected")

    @property
    def is_connected(self) -> bool:
        """Check if currently connected."""
        return not self._closed and self.client.is_connected

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
