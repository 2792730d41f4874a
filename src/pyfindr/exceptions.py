"""Custom exception hierarchy for pyfindr."""

from __future__ import annotations

from enum import StrEnum


class FailureKind(StrEnum):
    """Per-report failure categories.

    Each one is recoverable at the report boundary: the report is dropped
    and the rest of the batch carries on.
    """

    INVALID_POINT = "invalid_point"
    AUTHENTICATION_FAILED = "authentication_failed"
    MALFORMED_PAYLOAD = "malformed_payload"


class FindrError(Exception):
    """Base exception for all pyfindr errors."""


class FindrConfigError(FindrError):
    """Invalid or missing configuration."""


class FindrCryptoError(FindrError):
    """Key handling, key agreement or decryption failure."""


class InvalidKeyError(FindrCryptoError):
    """Private key material cannot be interpreted as a P-224 scalar.

    Fatal for the accessory owning the key: a whole batch decrypted with
    it is aborted instead of silently yielding nothing.
    """


class ReportDecodeError(FindrCryptoError):
    """A single report could not be turned into a decoded report."""

    kind: FailureKind = FailureKind.MALFORMED_PAYLOAD


class InvalidPointError(ReportDecodeError):
    """Ephemeral public key does not decode to a point on the curve."""

    kind = FailureKind.INVALID_POINT


class AuthenticationFailedError(ReportDecodeError):
    """AES-GCM tag verification failed.

    Usually a tampered or truncated payload, but a report decrypted with
    the wrong accessory key fails the same way.
    """

    kind = FailureKind.AUTHENTICATION_FAILED


class MalformedPayloadError(ReportDecodeError):
    """Payload or plaintext has the wrong length or shape."""

    kind = FailureKind.MALFORMED_PAYLOAD


class FindrTransportError(FindrError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FindrApiError(FindrError):
    """Report server answered with a non-OK status code in its body."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)
