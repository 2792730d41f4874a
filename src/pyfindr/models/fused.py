"""Fused best-location estimate."""

from __future__ import annotations

from pydantic import Field

from pyfindr.models._base import FindrBaseModel


class FusedLocation(FindrBaseModel):
    """Best estimate of an accessory's current position.

    Parameters
    ----------
    latitude : float
        Weighted centroid latitude in degrees.
    longitude : float
        Weighted centroid longitude in degrees.
    reports_in_cluster : int
        Reports within the cluster radius of the newest report.
    total_valid_reports : int
        Reports that passed validation, clustered or not.
    """

    latitude: float
    longitude: float
    reports_in_cluster: int = Field(ge=1)
    total_valid_reports: int = Field(ge=1)
