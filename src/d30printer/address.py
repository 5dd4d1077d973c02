"""Bluetooth device addresses."""

import re
from dataclasses import dataclass

# XX:XX:XX:XX:XX:XX (hex pairs separated by colons)
BLUETOOTH_MAC_PATTERN = re.compile(r"^([0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}$")


@dataclass(frozen=True)
class BDAddr:
    """A 6-byte Bluetooth device address."""

    octets: bytes

    def __post_init__(self):
        if len(self.octets) != 6:
            raise ValueError(
                f"Bluetooth address must be 6 bytes, got {len(self.octets)}"
            )

    @classmethod
    def parse(cls, text: str) -> "BDAddr":
        """
        Parse a colon-delimited address such as ``AA:BB:CC:DD:EE:FF``.

        Raises:
            ValueError: If the text is not a colon-delimited MAC address
        """
        if not isinstance(text, str) or not BLUETOOTH_MAC_PATTERN.match(text):
            raise ValueError(
                f"Invalid Bluetooth address format: {text!r}. "
                "Expected format: XX:XX:XX:XX:XX:XX"
            )
        return cls(bytes.fromhex(text.replace(":", "")))

    def __str__(self) -> str:
        return ":".join(f"{b:02X}" for b in self.octets)
