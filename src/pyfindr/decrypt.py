"""Report decryption pipeline.

One report runs key agreement, key derivation, AES-GCM and the binary
decoder in sequence. A batch decodes every report independently and
keeps only the successes, sorted ascending by ``seen_at``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from pyfindr._crypto.aes import aes_gcm_decrypt
from pyfindr._crypto.ecdh import derive_shared_secret
from pyfindr._crypto.kdf import derive_symmetric_material, split_symmetric_material
from pyfindr._crypto.keys import PrivateKeyInput, load_private_key
from pyfindr.decoding import (
    decode_battery,
    decode_confidence,
    decode_location,
    decode_seen_time,
    split_payload,
)
from pyfindr.exceptions import FailureKind, ReportDecodeError
from pyfindr.models.outcome import DecryptionFailure, ReportOutcome
from pyfindr.models.report import DecodedReport, DecryptedPayload, RawReport

_logger = logging.getLogger(__name__)

FailureCallback = Callable[[DecryptionFailure], None]


def decrypt_payload(payload: bytes, private_key: PrivateKeyInput) -> DecryptedPayload:
    """Decrypt and decode one raw payload.

    Raises
    ------
    InvalidKeyError
        If *private_key* is not a valid P-224 scalar.
    InvalidPointError
        If the embedded ephemeral key is not a curve point.
    AuthenticationFailedError
        If the GCM tag does not verify.
    MalformedPayloadError
        If the payload is too short.
    """
    parts = split_payload(payload)
    shared_secret = derive_shared_secret(parts.ephemeral_key, private_key)
    material = derive_symmetric_material(shared_secret, parts.ephemeral_key)
    key, iv = split_symmetric_material(material)
    plaintext = aes_gcm_decrypt(parts.ciphertext, key, iv, parts.tag)
    return DecryptedPayload(
        seen_at=decode_seen_time(payload),
        confidence=decode_confidence(payload),
        battery=decode_battery(plaintext),
        location=decode_location(plaintext),
    )


def decrypt_report(raw: RawReport, private_key: PrivateKeyInput) -> DecodedReport:
    """Decrypt one :class:`RawReport`; errors as for :func:`decrypt_payload`."""
    return DecodedReport.from_payload(raw.id, decrypt_payload(raw.payload, private_key))


def decrypt_report_outcome(raw: RawReport, private_key: PrivateKeyInput) -> ReportOutcome:
    """Decrypt one report into a tagged outcome.

    Per-report failures become :class:`DecryptionFailure` values.
    ``InvalidKeyError`` is not per-report and still propagates.
    """
    try:
        return ReportOutcome.success(decrypt_report(raw, private_key))
    except ReportDecodeError as exc:
        return ReportOutcome.failed(DecryptionFailure.from_error(raw.id, exc))


def _log_failure(failure: DecryptionFailure) -> None:
    if failure.kind == FailureKind.AUTHENTICATION_FAILED:
        _logger.warning("Report %s failed authentication (wrong key?): %s", failure.source_id, failure.message)
    else:
        _logger.debug("Dropping report %s (%s): %s", failure.source_id, failure.kind, failure.message)


def _collect(outcomes: Iterable[ReportOutcome], on_failure: FailureCallback | None) -> list[DecodedReport]:
    decoded: list[DecodedReport] = []
    for outcome in outcomes:
        if outcome.report is not None:
            decoded.append(outcome.report)
        elif outcome.failure is not None:
            _log_failure(outcome.failure)
            if on_failure is not None:
                try:
                    on_failure(outcome.failure)
                except Exception:
                    _logger.debug("on_failure callback failed", exc_info=True)
    decoded.sort(key=lambda report: report.seen_at)
    return decoded


def decrypt_batch(
    raw_reports: Iterable[RawReport],
    private_key: PrivateKeyInput,
    *,
    on_failure: FailureCallback | None = None,
    max_workers: int | None = None,
) -> list[DecodedReport]:
    """Decrypt a batch of reports for one accessory.

    Parameters
    ----------
    raw_reports : iterable of RawReport
        Encrypted reports, in any order.
    private_key : bytes, str or EllipticCurvePrivateKey
        The accessory's private key.
    on_failure : callable, optional
        Called with a :class:`DecryptionFailure` for each dropped report.
    max_workers : int, optional
        Decrypt on a thread pool of this size. ``None`` or ``1`` decrypts
        sequentially.

    Returns
    -------
    list[DecodedReport]
        Successfully decoded reports, ascending by ``seen_at``.

    Raises
    ------
    InvalidKeyError
        If *private_key* is invalid. No report is decrypted.
    """
    key = load_private_key(private_key)
    reports = list(raw_reports)

    if max_workers is not None and max_workers > 1 and len(reports) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(lambda raw: decrypt_report_outcome(raw, key), reports))
    else:
        outcomes = [decrypt_report_outcome(raw, key) for raw in reports]

    decoded = _collect(outcomes, on_failure)
    _logger.debug("Decrypted %d of %d reports", len(decoded), len(reports))
    return decoded


async def async_decrypt_batch(
    raw_reports: Iterable[RawReport],
    private_key: PrivateKeyInput,
    *,
    on_failure: FailureCallback | None = None,
    max_workers: int | None = None,
) -> list[DecodedReport]:
    """Run :func:`decrypt_batch` off the event loop."""
    return await asyncio.to_thread(
        decrypt_batch,
        list(raw_reports),
        private_key,
        on_failure=on_failure,
        max_workers=max_workers,
    )


def latest_report(reports: Sequence[DecodedReport]) -> DecodedReport | None:
    """Most recent report of a sorted batch: the accessory's latest status."""
    if not reports:
        return None
    return reports[-1]


def merge_reports(existing: Sequence[DecodedReport], incoming: Iterable[DecodedReport]) -> list[DecodedReport]:
    """Append *incoming* reports not already in *existing* (by ``source_id``), re-sorted."""
    known = {report.source_id for report in existing}
    merged = list(existing)
    for report in incoming:
        if report.source_id in known:
            continue
        known.add(report.source_id)
        merged.append(report)
    merged.sort(key=lambda report: report.seen_at)
    return merged
