"""
Device Discovery for the D30 Printer.

Scans Bluetooth adapters for the printer, driven by Bleak detection
callbacks. The whole scan runs as one task raced against a deadline; the
task is cancelled when the deadline fires and every adapter that started
scanning is told to stop again.
"""

import asyncio
import logging
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Sequence, Union

from bleak import BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData

from .address import BDAddr
from .errors import (
    DeviceNotFound,
    DiscoveryError,
    DiscoveryTaskFailed,
    DiscoveryTimeout,
    NoAdaptersFound,
    PropertiesFetchError,
)

logger = logging.getLogger(__name__)

# Name the printer advertises
DEVICE_NAME = "D30"

# Default scan deadline in seconds
DEFAULT_SCAN_TIME = 5.0

# BlueZ exposes one hciN entry per radio
SYSFS_BLUETOOTH = Path("/sys/class/bluetooth")


@dataclass(frozen=True)
class DeviceDescriptor:
    """Address and advertised name of a device seen while scanning."""

    address: BDAddr
    name: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name or 'Unknown'} [{self.address}]"


@dataclass(frozen=True)
class ByAddress:
    """Match the device with exactly this address."""

    address: BDAddr

    def matches(self, descriptor: DeviceDescriptor) -> bool:
        return descriptor.address == self.address

    def __str__(self) -> str:
        return f"address {self.address}"


@dataclass(frozen=True)
class ByName:
    """Match the device whose advertised name is exactly ``name``."""

    name: str = DEVICE_NAME

    def matches(self, descriptor: DeviceDescriptor) -> bool:
        return descriptor.name == self.name

    def __str__(self) -> str:
        return f"name {self.name!r}"


MatchCriterion = Union[ByAddress, ByName]


def criterion_for(address: Optional[str]) -> MatchCriterion:
    """
    Pick the match criterion for an optional address string.

    Raises:
        ValueError: If the address is not a colon-delimited MAC address
    """
    if address is None:
        return ByName()
    return ByAddress(BDAddr.parse(address))


def describe(device: BLEDevice, adv_data: AdvertisementData) -> DeviceDescriptor:
    """
    Read the address and advertised name of a discovered device.

    Raises:
        PropertiesFetchError: If the platform identifier is not a MAC address
            (CoreBluetooth hands out UUIDs instead)
    """
    try:
        address = BDAddr.parse(device.address)
    except ValueError as e:
        raise PropertiesFetchError(
            f"Cannot read address of device {device.address!r}: {e}"
        ) from e

    name = adv_data.local_name if adv_data.local_name is not None else device.name
    return DeviceDescriptor(address=address, name=name)


class BleakAdapter:
    """One host Bluetooth radio, scanned through Bleak."""

    # Bleak reports every advertisement packet; oldest detections are dropped
    MAX_QUEUE_SIZE = 256

    def __init__(self, name: Optional[str] = None):
        """
        Args:
            name: Platform adapter name (e.g. "hci0"), or None for the
                platform default
        """
        self.name = name
        self._scanner: Optional[BleakScanner] = None
        self._events: asyncio.Queue = asyncio.Queue(maxsize=self.MAX_QUEUE_SIZE)

    def __str__(self) -> str:
        return self.name or "default"

    def _handle_detection(self, device: BLEDevice, adv_data: AdvertisementData):
        if self._events.full():
            self._events.get_nowait()
        self._events.put_nowait((device, adv_data))

    async def start_scan(self):
        """Start scanning; detections are queued for ``events()``."""
        kwargs = {} if self.name is None else {"adapter": self.name}
        self._scanner = BleakScanner(
            detection_callback=self._handle_detection, **kwargs
        )
        await self._scanner.start()

    async def stop_scan(self):
        """Stop scanning. Safe to call when no scan is running."""
        scanner, self._scanner = self._scanner, None
        if scanner is not None:
            await scanner.stop()

    async def events(self) -> AsyncIterator[tuple]:
        """Yield ``(device, advertisement)`` pairs as they are detected."""
        while True:
            yield await self._events.get()


def list_adapters() -> list:
    """
    Enumerate the host's Bluetooth adapters.

    On Linux the BlueZ radios are read from sysfs. Elsewhere, or when sysfs
    has no Bluetooth class, Bleak picks the adapter itself and a single
    default adapter is returned.
    """
    if platform.system() == "Linux" and SYSFS_BLUETOOTH.is_dir():
        return [
            BleakAdapter(entry.name)
            for entry in sorted(SYSFS_BLUETOOTH.iterdir())
            if entry.name.startswith("hci") and ":" not in entry.name
        ]
    return [BleakAdapter()]


async def _scan_adapter(adapter, criterion: MatchCriterion) -> Optional[BLEDevice]:
    """Scan one adapter until a device matches or its event stream ends."""
    logger.info("Scanning for D30 (%s) on adapter %s", criterion, adapter)
    try:
        await adapter.start_scan()
        async for device, adv_data in adapter.events():
            try:
                descriptor = describe(device, adv_data)
            except PropertiesFetchError as e:
                logger.warning("Error reading Bluetooth device properties: %s", e)
                continue

            logger.debug("Found BLE device: %s", descriptor)
            if criterion.matches(descriptor):
                logger.info("Found D30: %s", descriptor)
                return device
    finally:
        logger.debug("Stopping scan on adapter %s", adapter)
        try:
            await adapter.stop_scan()
        except Exception as e:
            logger.warning("Error stopping scan on adapter %s: %s", adapter, e)

    return None


async def _scan_adapters(adapters: Sequence, criterion: MatchCriterion) -> BLEDevice:
    for adapter in adapters:
        device = await _scan_adapter(adapter, criterion)
        if device is not None:
            return device

    raise DeviceNotFound(f"Could not find D30 ({criterion}) from any adapter.")


async def discover(
    criterion: Optional[MatchCriterion] = None,
    time_limit: float = DEFAULT_SCAN_TIME,
    adapters: Optional[Sequence] = None,
) -> BLEDevice:
    """
    Find the printer.

    Args:
        criterion: ByAddress or ByName; defaults to ByName("D30")
        time_limit: Hard deadline for the whole scan, in seconds
        adapters: Adapters to scan, in order; defaults to ``list_adapters()``

    Returns:
        The matching Bleak device, ready to connect

    Raises:
        NoAdaptersFound: If there is no adapter to scan with
        DiscoveryTimeout: If the deadline elapsed first
        DeviceNotFound: If every adapter finished without a match
        DiscoveryTaskFailed: If the scan task failed for any other reason
    """
    if criterion is None:
        criterion = ByName()
    if adapters is None:
        adapters = list_adapters()
    if not adapters:
        raise NoAdaptersFound("Unable to find any Bluetooth adapters.")

    task = asyncio.ensure_future(_scan_adapters(adapters, criterion))
    try:
        done, _ = await asyncio.wait({task}, timeout=time_limit)
    finally:
        if not task.done():
            task.cancel()
            # Wait for the scan to unwind so stop-scan has been issued
            await asyncio.gather(task, return_exceptions=True)

    if task not in done:
        raise DiscoveryTimeout(
            f"No D30 ({criterion}) found within {time_limit:g} seconds."
        )
    if task.cancelled():
        raise DiscoveryTaskFailed("Discovery task was cancelled.")

    error = task.exception()
    if error is None:
        return task.result()
    if isinstance(error, DiscoveryError):
        raise error
    raise DiscoveryTaskFailed(f"Discovery task failed: {error}") from error
