"""Byte layout of offline finding reports.

Raw payload::

    [0:4]    seen time, u32 BE seconds since 2001-01-01T00:00:00Z
    [4]      confidence
    ...      (some servers insert extra header bytes here)
    [-83:-26] ephemeral public key, 57-byte uncompressed P-224 point
    [-26:-16] AES-GCM ciphertext
    [-16:]   AES-GCM tag

The encrypted section is located from the end of the payload so
variable-length headers decode the same way.

Decrypted body::

    [0:4]  latitude,  i32 BE, degrees * 1e7
    [4:8]  longitude, i32 BE, degrees * 1e7
    [8]    horizontal accuracy in meters
    [9]    status; top two bits are the battery level
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime, timedelta

from pyfindr._constants import (
    CIPHERTEXT_LENGTH,
    COORDINATE_SCALE,
    EPHEMERAL_KEY_LENGTH,
    MIN_PAYLOAD_LENGTH,
    PLAINTEXT_LENGTH,
    REPORT_EPOCH,
    TAG_LENGTH,
)
from pyfindr.exceptions import MalformedPayloadError
from pyfindr.models.report import BatteryStatus, DecodedLocation

_BATTERY_LEVELS: tuple[BatteryStatus, ...] = (
    BatteryStatus.FULL,
    BatteryStatus.MEDIUM,
    BatteryStatus.LOW,
    BatteryStatus.CRITICAL,
)

_LOCATION = struct.Struct(">iiB")


@dataclass(frozen=True)
class PayloadParts:
    """Encrypted section of a raw payload."""

    ephemeral_key: bytes
    ciphertext: bytes
    tag: bytes


def _require_payload(payload: bytes) -> None:
    if len(payload) < MIN_PAYLOAD_LENGTH:
        raise MalformedPayloadError(f"Payload must be at least {MIN_PAYLOAD_LENGTH} bytes (got {len(payload)})")


def _require_plaintext(plaintext: bytes) -> None:
    if len(plaintext) < PLAINTEXT_LENGTH:
        raise MalformedPayloadError(f"Plaintext must be at least {PLAINTEXT_LENGTH} bytes (got {len(plaintext)})")


def split_payload(payload: bytes) -> PayloadParts:
    """Slice the ephemeral key, ciphertext and tag off the end of *payload*.

    Raises
    ------
    MalformedPayloadError
        If *payload* is shorter than 83 bytes.
    """
    _require_payload(payload)
    tag_start = len(payload) - TAG_LENGTH
    ct_start = tag_start - CIPHERTEXT_LENGTH
    key_start = ct_start - EPHEMERAL_KEY_LENGTH
    return PayloadParts(
        ephemeral_key=bytes(payload[key_start:ct_start]),
        ciphertext=bytes(payload[ct_start:tag_start]),
        tag=bytes(payload[tag_start:]),
    )


def decode_seen_time(payload: bytes) -> datetime:
    _require_payload(payload)
    (seconds,) = struct.unpack_from(">I", payload, 0)
    return REPORT_EPOCH + timedelta(seconds=seconds)


def decode_confidence(payload: bytes) -> int:
    _require_payload(payload)
    return payload[4]


def decode_location(plaintext: bytes) -> DecodedLocation:
    """Decode latitude, longitude and accuracy from a decrypted body."""
    _require_plaintext(plaintext)
    lat_raw, lon_raw, accuracy = _LOCATION.unpack_from(plaintext, 0)
    return DecodedLocation(
        latitude=lat_raw / COORDINATE_SCALE,
        longitude=lon_raw / COORDINATE_SCALE,
        accuracy=accuracy,
    )


def decode_battery(plaintext: bytes) -> BatteryStatus:
    """Map the top two bits of the status byte to a battery level.

    The lower six bits are ignored.
    """
    _require_plaintext(plaintext)
    return _BATTERY_LEVELS[(plaintext[9] >> 6) & 0b11]
