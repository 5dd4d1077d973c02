"""Phomemo D30 Label Printer Driver for Linux/macOS."""

__version__ = "0.1.0"

from .address import BDAddr
from .config import PrintConfig
from .connection import Session
from .discovery import (
    DEFAULT_SCAN_TIME,
    DEVICE_NAME,
    BleakAdapter,
    ByAddress,
    ByName,
    DeviceDescriptor,
    discover,
)
from .errors import (
    CharacteristicNotFound,
    ConnectFailed,
    DeviceNotFound,
    DiscoveryError,
    DiscoveryTaskFailed,
    DiscoveryTimeout,
    FontError,
    ImageError,
    LabelError,
    NoAdaptersFound,
    PrinterError,
    PrintError,
    PropertiesFetchError,
    SessionError,
    WriteFailed,
)
from .image import MAX_BAND_HEIGHT, PREAMBLE, encode_band, iter_bands
from .label import render_label
from .printer import D30Printer, print_job

__all__ = [
    "D30Printer",
    "print_job",
    "PrintConfig",
    "Session",
    "discover",
    "BleakAdapter",
    "ByAddress",
    "ByName",
    "DeviceDescriptor",
    "BDAddr",
    "DEFAULT_SCAN_TIME",
    "DEVICE_NAME",
    "PREAMBLE",
    "MAX_BAND_HEIGHT",
    "encode_band",
    "iter_bands",
    "render_label",
    "PrinterError",
    "DiscoveryError",
    "NoAdaptersFound",
    "DiscoveryTimeout",
    "DeviceNotFound",
    "DiscoveryTaskFailed",
    "PropertiesFetchError",
    "SessionError",
    "ConnectFailed",
    "CharacteristicNotFound",
    "PrintError",
    "WriteFailed",
    "ImageError",
    "LabelError",
    "FontError",
]
