"""Tests for the binary payload layout."""

from __future__ import annotations

import struct
from datetime import UTC, datetime

import pytest

from pyfindr.decoding import (
    decode_battery,
    decode_confidence,
    decode_location,
    decode_seen_time,
    split_payload,
)
from pyfindr.exceptions import MalformedPayloadError
from pyfindr.models.report import BatteryStatus


def _payload(header: bytes = b"\x00\x00\x00\x00\x00") -> bytes:
    ephemeral = b"\x04" + bytes(range(1, 57))
    ciphertext = bytes(range(100, 110))
    tag = bytes(range(200, 216))
    return header + ephemeral + ciphertext + tag


class TestSplitPayload:
    def test_slices_from_the_end(self) -> None:
        parts = split_payload(_payload())
        assert parts.ephemeral_key == b"\x04" + bytes(range(1, 57))
        assert parts.ciphertext == bytes(range(100, 110))
        assert parts.tag == bytes(range(200, 216))

    def test_longer_header_is_tolerated(self) -> None:
        parts = split_payload(_payload(b"\x00" * 6))
        assert parts.ephemeral_key[0] == 0x04
        assert parts.tag == bytes(range(200, 216))

    def test_minimum_length_is_83(self) -> None:
        parts = split_payload(_payload()[5:])
        assert len(parts.ephemeral_key) == 57

    @pytest.mark.parametrize("length", [0, 1, 16, 26, 82])
    def test_short_payload_raises(self, length: int) -> None:
        with pytest.raises(MalformedPayloadError, match="at least 83 bytes"):
            split_payload(bytes(length))


class TestHeader:
    def test_seen_time_epoch(self) -> None:
        assert decode_seen_time(_payload()) == datetime(2001, 1, 1, tzinfo=UTC)

    def test_seen_time_offset(self) -> None:
        seconds = 24 * 3600 + 61
        payload = struct.pack(">I", seconds) + _payload()[4:]
        assert decode_seen_time(payload) == datetime(2001, 1, 2, 0, 1, 1, tzinfo=UTC)

    def test_seen_time_is_unsigned(self) -> None:
        payload = b"\xff\xff\xff\xff" + _payload()[4:]
        assert decode_seen_time(payload).year == 2137

    def test_confidence(self) -> None:
        payload = b"\x00\x00\x00\x00\xfe" + _payload()[5:]
        assert decode_confidence(payload) == 254

    def test_header_needs_full_payload(self) -> None:
        with pytest.raises(MalformedPayloadError):
            decode_seen_time(b"\x00" * 5)


class TestBody:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (0b00000000, BatteryStatus.FULL),
            (0b01000000, BatteryStatus.MEDIUM),
            (0b10000000, BatteryStatus.LOW),
            (0b11000000, BatteryStatus.CRITICAL),
            (0b00111111, BatteryStatus.FULL),
            (0b01010101, BatteryStatus.MEDIUM),
            (0b10101010, BatteryStatus.LOW),
            (0b11111111, BatteryStatus.CRITICAL),
        ],
    )
    def test_battery_uses_top_two_bits(self, status: int, expected: BatteryStatus) -> None:
        plaintext = bytes(9) + bytes([status])
        assert decode_battery(plaintext) == expected

    def test_location(self) -> None:
        plaintext = struct.pack(">iiBB", 403123456, 37038000, 42, 0)
        location = decode_location(plaintext)
        assert location.latitude == pytest.approx(40.3123456)
        assert location.longitude == pytest.approx(3.7038)
        assert location.accuracy == 42

    def test_location_is_signed(self) -> None:
        plaintext = struct.pack(">iiBB", -337000000, -1800000000, 255, 0)
        location = decode_location(plaintext)
        assert location.latitude == pytest.approx(-33.7)
        assert location.longitude == pytest.approx(-180.0)
        assert location.accuracy == 255

    def test_out_of_range_coordinates_are_kept(self) -> None:
        plaintext = struct.pack(">iiBB", 2_000_000_000, 0, 5, 0)
        location = decode_location(plaintext)
        assert location.latitude == pytest.approx(200.0)
        assert not location.is_valid

    @pytest.mark.parametrize("length", [0, 8, 9])
    def test_short_plaintext_raises(self, length: int) -> None:
        with pytest.raises(MalformedPayloadError, match="at least 10 bytes"):
            decode_location(bytes(length))
        with pytest.raises(MalformedPayloadError):
            decode_battery(bytes(length))
