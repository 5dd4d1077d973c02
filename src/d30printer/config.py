"""Print job settings."""

from dataclasses import dataclass
from typing import Optional

from .discovery import DEFAULT_SCAN_TIME, MatchCriterion, criterion_for


@dataclass
class PrintConfig:
    """
    Settings for one print job.

    Attributes:
        text: The text to be printed on the label
        address: MAC address of the printer (XX:XX:XX:XX:XX:XX), or None to
            match the advertised name instead
        font: Font name or path to a font file; None uses the embedded font
        scan_time: Discovery deadline in seconds
    """

    text: str
    address: Optional[str] = None
    font: Optional[str] = None
    scan_time: float = DEFAULT_SCAN_TIME

    def criterion(self) -> MatchCriterion:
        """Return the discovery criterion for this job."""
        return criterion_for(self.address)
