"""Tests for pydantic report models."""

from __future__ import annotations

import base64
from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pyfindr.exceptions import FailureKind, MalformedPayloadError
from pyfindr.models import (
    BatteryStatus,
    DecodedLocation,
    DecodedReport,
    DecryptionFailure,
    FusedLocation,
    RawReport,
    ReportOutcome,
)

# ------------------------------------------------------------------
# RawReport
# ------------------------------------------------------------------


class TestRawReport:
    def test_base64_payload_is_decoded(self) -> None:
        raw = RawReport.model_validate({"id": "r1", "payload": base64.b64encode(b"\x01\x02\x03").decode()})
        assert raw.payload == b"\x01\x02\x03"

    def test_bytes_payload_passes_through(self) -> None:
        assert RawReport(id="r1", payload=b"\xff").payload == b"\xff"

    def test_poller_aliases(self) -> None:
        raw = RawReport.model_validate(
            {
                "id": 17,
                "encrypted_report": "SGVsbG8=",
                "received_at": "2026-01-01T10:00:00Z",
            }
        )
        assert raw.id == "17"
        assert raw.payload == b"Hello"
        assert raw.received_at == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)

    def test_camel_case_received_at(self) -> None:
        raw = RawReport.model_validate({"id": "x", "payload": "", "receivedAt": "2026-01-01T12:00:00+02:00"})
        assert raw.received_at == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
        assert raw.received_at is not None and raw.received_at.tzinfo == UTC

    def test_invalid_base64_rejected(self) -> None:
        with pytest.raises(ValidationError, match="base64"):
            RawReport.model_validate({"id": "x", "payload": "***"})

    def test_frozen(self) -> None:
        raw = RawReport(id="r1", payload=b"")
        with pytest.raises(ValidationError):
            raw.id = "r2"  # type: ignore[misc]


# ------------------------------------------------------------------
# Decoded records
# ------------------------------------------------------------------


class TestDecodedReport:
    def test_naive_seen_at_becomes_utc(self) -> None:
        report = DecodedReport(
            source_id="a",
            seen_at=datetime(2026, 1, 1, 12, 0),
            confidence=0,
            battery=BatteryStatus.FULL,
            location=DecodedLocation(latitude=0.0, longitude=0.0, accuracy=0),
        )
        assert report.seen_at.tzinfo == UTC

    def test_offset_seen_at_is_converted(self) -> None:
        report = DecodedReport(
            source_id="a",
            seen_at=datetime(2026, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2))),
            confidence=0,
            battery="Low",
            location={"latitude": 0.0, "longitude": 0.0, "accuracy": 3},
        )
        assert report.seen_at == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        assert report.battery == BatteryStatus.LOW

    def test_confidence_range(self) -> None:
        with pytest.raises(ValidationError):
            DecodedReport(
                source_id="a",
                seen_at=datetime(2026, 1, 1, tzinfo=UTC),
                confidence=256,
                battery=BatteryStatus.FULL,
                location=DecodedLocation(latitude=0.0, longitude=0.0, accuracy=0),
            )

    def test_to_dict(self) -> None:
        report = DecodedReport(
            source_id="a",
            seen_at=datetime(2026, 1, 1, tzinfo=UTC),
            confidence=1,
            battery=BatteryStatus.MEDIUM,
            location=DecodedLocation(latitude=1.5, longitude=-2.5, accuracy=9),
        )
        data = report.to_dict()
        assert data["battery"] == "Medium"
        assert data["location"] == {"latitude": 1.5, "longitude": -2.5, "accuracy": 9}


class TestDecodedLocation:
    @pytest.mark.parametrize(
        ("latitude", "longitude", "valid"),
        [
            (90.0, 180.0, True),
            (-90.0, -180.0, True),
            (90.0001, 0.0, False),
            (0.0, 180.0001, False),
            (float("inf"), 0.0, False),
        ],
    )
    def test_is_valid(self, latitude: float, longitude: float, valid: bool) -> None:
        assert DecodedLocation(latitude=latitude, longitude=longitude, accuracy=1).is_valid is valid

    def test_negative_accuracy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DecodedLocation(latitude=0.0, longitude=0.0, accuracy=-1)


# ------------------------------------------------------------------
# Outcomes
# ------------------------------------------------------------------


class TestReportOutcome:
    def test_needs_exactly_one_side(self) -> None:
        with pytest.raises(ValidationError):
            ReportOutcome()

    def test_failure_from_error(self) -> None:
        failure = DecryptionFailure.from_error("r1", MalformedPayloadError("too short"))
        outcome = ReportOutcome.failed(failure)
        assert not outcome.ok
        assert failure.kind == FailureKind.MALFORMED_PAYLOAD
        assert failure.message == "too short"


def test_fused_location_counts_positive() -> None:
    with pytest.raises(ValidationError):
        FusedLocation(latitude=0.0, longitude=0.0, reports_in_cluster=0, total_valid_reports=0)
