"""High-level async client: fetch, decrypt and fuse reports per accessory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import aiohttp
from pydantic import ValidationError

from pyfindr._crypto.keys import advertisement_key_b64
from pyfindr._redact import fingerprint
from pyfindr._transport import ReportTransport, Transport
from pyfindr.config import Accessory, FindrConfig
from pyfindr.decrypt import FailureCallback, async_decrypt_batch, merge_reports
from pyfindr.exceptions import FindrError
from pyfindr.fusion import fuse_best_location
from pyfindr.models.fused import FusedLocation
from pyfindr.models.report import DecodedReport, RawReport

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _AccessoryReports:
    """Decoded reports held for one accessory between polls."""

    reports: list[DecodedReport] = field(default_factory=list)
    latest_received_at: datetime | None = None


def _parse_raw_reports(items: list[dict[str, Any]]) -> list[RawReport]:
    parsed: list[RawReport] = []
    for item in items:
        try:
            parsed.append(RawReport.model_validate(item))
        except ValidationError:
            _logger.debug("Skipping unparseable report id=%s", item.get("id"), exc_info=True)
    return parsed


class FindrClient:
    """Async client for offline finding report servers.

    Usage::

        async with FindrClient(config) as client:
            reports = await client.get_reports(accessory)
            best = await client.get_best_location(accessory)
    """

    def __init__(
        self,
        config: FindrConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        on_failure: FailureCallback | None = None,
    ) -> None:
        config.validate()
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None
        self._on_failure = on_failure
        self._accessories: dict[str, _AccessoryReports] = {}

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FindrClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = ReportTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise FindrError("Client is not open; use 'async with FindrClient(...)'")
        return self._transport

    def _entry(self, accessory: Accessory) -> _AccessoryReports:
        entry = self._accessories.get(accessory.id)
        if entry is None:
            entry = _AccessoryReports()
            self._accessories[accessory.id] = entry
        return entry

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    @staticmethod
    def advertisement_key(accessory: Accessory) -> str:
        """Base64 advertisement key used to query servers for *accessory*.

        Raises
        ------
        InvalidKeyError
            If the accessory's private key is invalid.
        """
        return advertisement_key_b64(accessory.private_key)

    async def fetch_raw_reports(self, accessory: Accessory, *, after: datetime | None = None) -> list[RawReport]:
        """Fetch encrypted reports for *accessory* from the configured source.

        ``after`` is only honoured by the poller service.
        """
        transport = self._require_transport()
        key = self.advertisement_key(accessory)

        if self._config.poller_enabled:
            items = await transport.fetch_poller_reports(key, after.isoformat() if after else None)
        else:
            items = await transport.fetch_server_reports([key], self._config.days)

        raw_reports = _parse_raw_reports(items)
        _logger.debug(
            "Fetched %d raw reports for accessory=%s key=%s",
            len(raw_reports),
            accessory.id,
            fingerprint(key),
        )
        return raw_reports

    async def get_reports(self, accessory: Accessory) -> list[DecodedReport]:
        """Fetch and decrypt reports for *accessory*, ascending by ``seen_at``.

        With the poller service only reports received since the previous
        call are fetched and merged into the held set by report id.

        Raises
        ------
        InvalidKeyError
            If the accessory's private key is invalid.
        FindrTransportError, FindrApiError
            If the report source cannot be read.
        """
        entry = self._entry(accessory)
        delta = self._config.poller_enabled and entry.latest_received_at is not None

        raw_reports = await self.fetch_raw_reports(accessory, after=entry.latest_received_at if delta else None)
        decoded = await async_decrypt_batch(
            raw_reports,
            accessory.private_key,
            on_failure=self._on_failure,
            max_workers=self._config.decrypt_workers,
        )

        received = [raw.received_at for raw in raw_reports if raw.received_at is not None]
        if received:
            newest = max(received)
            if entry.latest_received_at is None or newest > entry.latest_received_at:
                entry.latest_received_at = newest

        entry.reports = merge_reports(entry.reports, decoded) if delta else decoded
        return list(entry.reports)

    def cached_reports(self, accessory: Accessory) -> list[DecodedReport]:
        """Reports held from the last :meth:`get_reports` call."""
        entry = self._accessories.get(accessory.id)
        return list(entry.reports) if entry is not None else []

    async def get_best_location(self, accessory: Accessory, *, now: datetime | None = None) -> FusedLocation | None:
        """Refresh reports for *accessory* and fuse them into one estimate."""
        reports = await self.get_reports(accessory)
        return fuse_best_location(reports, now=now)

    def cached_best_location(self, accessory: Accessory, *, now: datetime | None = None) -> FusedLocation | None:
        """Fuse the reports held from the last :meth:`get_reports` call without fetching."""
        return fuse_best_location(self.cached_reports(accessory), now=now)
