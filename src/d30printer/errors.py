"""Exception hierarchy for the D30 printer driver."""

from typing import Optional


class PrinterError(Exception):
    """Base exception for all printer errors."""

    pass


# --- Discovery ---


class DiscoveryError(PrinterError):
    """Error while looking for the printer."""

    pass


class NoAdaptersFound(DiscoveryError):
    """No Bluetooth adapter is available on this host."""

    pass


class DiscoveryTimeout(DiscoveryError):
    """The scan deadline elapsed before a matching device was seen."""

    pass


class DeviceNotFound(DiscoveryError):
    """Every adapter finished scanning without a matching device."""

    pass


class DiscoveryTaskFailed(DiscoveryError):
    """The scan task terminated abnormally (not by timeout)."""

    pass


class PropertiesFetchError(DiscoveryError):
    """Advertised properties of a candidate device could not be read.

    Recoverable: discovery skips the candidate and keeps scanning.
    """

    pass


# --- Session ---


class SessionError(PrinterError):
    """Error setting up the write channel to the printer."""

    pass


class ConnectFailed(SessionError):
    """The transport refused or dropped the connection request."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class CharacteristicNotFound(SessionError):
    """The device exposes no characteristic with the expected write flags."""

    pass


# --- Printing ---


class PrintError(PrinterError):
    """Error during print operation."""

    pass


class WriteFailed(PrintError):
    """A band payload could not be delivered."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ImageError(PrinterError):
    """Error processing image for printing."""

    pass


class LabelError(ImageError):
    """The label could not be rendered."""

    pass


class FontError(LabelError):
    """The requested font could not be loaded."""

    pass
