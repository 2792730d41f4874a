"""HTTP transport for report servers.

Two sources are supported: a self-hosted report server that answers
``{"statusCode": "200", "results": [...]}`` to a POST of advertisement
keys, and the hosted poller service that lists reports per key.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp

from pyfindr._constants import USER_AGENT
from pyfindr._redact import redact_for_log
from pyfindr.config import FindrConfig
from pyfindr.exceptions import FindrApiError, FindrTransportError

_logger = logging.getLogger(__name__)

_DEMO_MARKER = "sample.json"


class Transport(Protocol):
    """Structural transport interface used by the client.

    Lets tests pass doubles while ``ReportTransport`` stays concrete.
    """

    async def fetch_server_reports(self, ids: Sequence[str], days: int) -> list[dict[str, Any]]: ...

    async def fetch_poller_reports(self, advertisement_key: str, after: str | None = None) -> list[dict[str, Any]]: ...


class ReportTransport:
    """aiohttp-backed transport. Performs no retries."""

    def __init__(self, config: FindrConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        endpoint: str,
        headers: dict[str, str],
        body: Any = None,
        params: dict[str, str] | None = None,
        auth: aiohttp.BasicAuth | None = None,
    ) -> Any:
        _logger.debug("%s %s body=%s", method, url, redact_for_log(body))
        try:
            async with self._http.request(
                method,
                url,
                json=body,
                params=params,
                headers=headers,
                auth=auth,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FindrTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FindrTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError, UnicodeDecodeError) as exc:
            raise FindrTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FindrTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

    async def fetch_server_reports(self, ids: Sequence[str], days: int) -> list[dict[str, Any]]:
        """Fetch raw reports for *ids* (base64 advertisement keys) from the report server.

        Raises
        ------
        FindrTransportError
            On network failure, a non-200 response or invalid JSON.
        FindrApiError
            If the body's ``statusCode`` is not ``"200"``.
        """
        url = self._config.api_url
        is_demo = _DEMO_MARKER in url
        auth = (
            aiohttp.BasicAuth(self._config.username, self._config.password)
            if self._config.basic_auth_enabled
            else None
        )
        headers = {"content-type": "application/json", "user-agent": USER_AGENT}

        data = await self._request_json(
            "GET" if is_demo else "POST",
            url,
            endpoint=url,
            headers=headers,
            body=None if is_demo else {"ids": list(ids), "days": days},
            auth=auth,
        )

        code = str(data.get("statusCode", "")) if isinstance(data, dict) else ""
        if code != "200":
            raise FindrApiError(f"Report server returned statusCode={code or '<missing>'}", code=code, endpoint=url)

        results = data.get("results")
        if not isinstance(results, list):
            raise FindrApiError("Report server response missing results", code=code, endpoint=url)
        return [item for item in results if isinstance(item, dict)]

    async def fetch_poller_reports(self, advertisement_key: str, after: str | None = None) -> list[dict[str, Any]]:
        """Fetch raw reports for one advertisement key from the poller service.

        Parameters
        ----------
        advertisement_key : str
            Base64 advertisement key.
        after : str, optional
            Only return reports received after this ISO timestamp.

        Raises
        ------
        FindrTransportError
            On network failure, a non-200 response or invalid JSON.
        FindrApiError
            If the body is not a list of reports.
        """
        base = self._config.poller_url.rstrip("/")
        url = f"{base}/{quote(advertisement_key, safe='')}"
        headers = {"X-API-Key": self._config.poller_api_key, "user-agent": USER_AGENT}
        params = {"after": after} if after else None

        data = await self._request_json("GET", url, endpoint=base, headers=headers, params=params)
        if not isinstance(data, list):
            raise FindrApiError("Poller response is not a list", endpoint=base)

        return [
            {
                "id": item.get("id"),
                "payload": item.get("encrypted_report"),
                "received_at": item.get("received_at"),
            }
            for item in data
            if isinstance(item, dict)
        ]
