"""Data models for offline finding reports."""

from pyfindr.models._base import FindrBaseModel, UtcDatetime, ensure_utc
from pyfindr.models.fused import FusedLocation
from pyfindr.models.outcome import DecryptionFailure, ReportOutcome
from pyfindr.models.report import (
    BatteryStatus,
    DecodedLocation,
    DecodedReport,
    DecryptedPayload,
    RawReport,
)

__all__ = [
    "BatteryStatus",
    "DecodedLocation",
    "DecodedReport",
    "DecryptedPayload",
    "DecryptionFailure",
    "FindrBaseModel",
    "FusedLocation",
    "RawReport",
    "ReportOutcome",
    "UtcDatetime",
    "ensure_utc",
]
