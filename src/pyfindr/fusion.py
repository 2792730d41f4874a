"""Best-location fusion over a snapshot of decoded reports.

The newest valid report anchors a cluster of every valid report within
``cluster_radius_m`` of it. Cluster members are averaged with weight
``(1 / max(1, accuracy)) * 0.5 ** (age_hours / half_life_hours)``, so a
precise recent fix dominates and stale fixes fade with a one-hour
half-life by default.

Nothing here is stateful; rerun it whenever the report set changes.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import UTC, datetime

from pyfindr._constants import CLUSTER_RADIUS_M, EARTH_RADIUS_M, RECENCY_HALF_LIFE_HOURS
from pyfindr.models.fused import FusedLocation
from pyfindr.models.report import DecodedReport

_MIN_HALF_LIVES = -1000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in meters."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    a = min(1.0, a)
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _is_valid(report: DecodedReport) -> bool:
    return report.seen_at is not None and report.location.accuracy is not None and report.location.is_valid


def _weight(report: DecodedReport, now: datetime, half_life_hours: float) -> float:
    # Negative for reports stamped after ``now``; those weigh more than fresh ones.
    age_hours = (now - report.seen_at).total_seconds() / 3600.0
    accuracy = max(1, report.location.accuracy)
    # Bounded so 0.5 ** x stays a finite float.
    half_lives = max(age_hours / half_life_hours, _MIN_HALF_LIVES)
    return (1.0 / accuracy) * 0.5**half_lives


def fuse_best_location(
    reports: Iterable[DecodedReport],
    *,
    now: datetime | None = None,
    cluster_radius_m: float = CLUSTER_RADIUS_M,
    half_life_hours: float = RECENCY_HALF_LIFE_HOURS,
) -> FusedLocation | None:
    """Estimate the current location from decoded reports.

    Parameters
    ----------
    reports : iterable of DecodedReport
        Any order. Not mutated or retained.
    now : datetime, optional
        Reference time for report ages. Defaults to the current UTC time.
    cluster_radius_m : float
        Cluster radius around the newest report.
    half_life_hours : float
        Recency half-life of the weights.

    Returns
    -------
    FusedLocation or None
        ``None`` when no report is valid.
    """
    valid = sorted(
        (report for report in reports if _is_valid(report)),
        key=lambda report: report.seen_at,
        reverse=True,
    )
    if not valid:
        return None

    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    anchor = valid[0].location
    cluster = [
        report
        for report in valid
        if haversine_meters(anchor.latitude, anchor.longitude, report.location.latitude, report.location.longitude)
        <= cluster_radius_m
    ]

    total_lat = 0.0
    total_lon = 0.0
    total_weight = 0.0
    for report in cluster:
        weight = _weight(report, now, half_life_hours)
        total_lat += report.location.latitude * weight
        total_lon += report.location.longitude * weight
        total_weight += weight

    if total_weight <= 0.0:
        # Every weight underflowed; fall back to the anchor.
        return FusedLocation(
            latitude=anchor.latitude,
            longitude=anchor.longitude,
            reports_in_cluster=len(cluster),
            total_valid_reports=len(valid),
        )

    return FusedLocation(
        latitude=total_lat / total_weight,
        longitude=total_lon / total_weight,
        reports_in_cluster=len(cluster),
        total_valid_reports=len(valid),
    )
