"""Per-report decryption outcomes."""

from __future__ import annotations

from pydantic import model_validator

from pyfindr.exceptions import FailureKind, ReportDecodeError
from pyfindr.models._base import FindrBaseModel
from pyfindr.models.report import DecodedReport


class DecryptionFailure(FindrBaseModel):
    """Why a single report was dropped from a batch."""

    source_id: str
    kind: FailureKind
    message: str = ""

    @classmethod
    def from_error(cls, source_id: str, error: ReportDecodeError) -> DecryptionFailure:
        return cls(source_id=source_id, kind=error.kind, message=str(error))


class ReportOutcome(FindrBaseModel):
    """Tagged result of decrypting one report: exactly one side is set."""

    report: DecodedReport | None = None
    failure: DecryptionFailure | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> ReportOutcome:
        if (self.report is None) == (self.failure is None):
            raise ValueError("ReportOutcome needs exactly one of report or failure")
        return self

    @property
    def ok(self) -> bool:
        return self.report is not None

    @classmethod
    def success(cls, report: DecodedReport) -> ReportOutcome:
        return cls(report=report)

    @classmethod
    def failed(cls, failure: DecryptionFailure) -> ReportOutcome:
        return cls(failure=failure)
