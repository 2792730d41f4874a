"""Raw and decoded offline finding reports."""

from __future__ import annotations

import base64
import binascii
import math
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyfindr.models._base import FindrBaseModel, UtcDatetime


class BatteryStatus(StrEnum):
    """Battery level reported by the accessory, in protocol order."""

    FULL = "Full"
    MEDIUM = "Medium"
    LOW = "Low"
    CRITICAL = "Critical"


class RawReport(FindrBaseModel):
    """An encrypted report as received from a report server.

    Parameters
    ----------
    id : str
        Server-side identifier of the report.
    payload : bytes
        Encrypted report. Base64 text is decoded on validation.
    received_at : datetime or None
        When the server received the report, if it says.
    """

    id: str
    payload: bytes = Field(validation_alias=AliasChoices("payload", "encrypted_report", "encryptedReport"))
    received_at: UtcDatetime | None = Field(
        default=None,
        validation_alias=AliasChoices("received_at", "receivedAt"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("payload", mode="before")
    @classmethod
    def _decode_base64(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return base64.b64decode(value.strip(), validate=True)
            except (binascii.Error, ValueError) as exc:
                raise ValueError("payload is not valid base64") from exc
        return value


class DecodedLocation(FindrBaseModel):
    """Position carried in a decrypted report body.

    Coordinates are kept exactly as decoded. Values outside the valid
    range are not rejected here; :attr:`is_valid` reports them and the
    fusion engine skips them.
    """

    latitude: float
    longitude: float
    accuracy: int = Field(ge=0)

    @property
    def is_valid(self) -> bool:
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and abs(self.latitude) <= 90
            and abs(self.longitude) <= 180
        )


class DecryptedPayload(FindrBaseModel):
    """Fields recovered from one encrypted payload.

    Parameters
    ----------
    seen_at : datetime
        When the accessory was observed (UTC).
    confidence : int
        Confidence byte from the unencrypted header, 0-255.
    battery : BatteryStatus
        Battery level from the decrypted body.
    location : DecodedLocation
        Position from the decrypted body.
    """

    seen_at: UtcDatetime
    confidence: int = Field(ge=0, le=255)
    battery: BatteryStatus
    location: DecodedLocation


class DecodedReport(DecryptedPayload):
    """A decrypted payload tied to the raw report it came from."""

    source_id: str

    @classmethod
    def from_payload(cls, source_id: str, payload: DecryptedPayload) -> DecodedReport:
        return cls(
            source_id=source_id,
            seen_at=payload.seen_at,
            confidence=payload.confidence,
            battery=payload.battery,
            location=payload.location,
        )
