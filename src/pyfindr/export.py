"""KML export of decoded report trails."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from xml.sax.saxutils import escape

from pyfindr.models.report import DecodedReport

_logger = logging.getLogger(__name__)


def reports_to_kml(reports: Iterable[DecodedReport], name: str = "Device Trail") -> str:
    """Render reports as a KML document, one Placemark per report.

    Placemarks are named by the report's ISO timestamp; KML coordinates
    are ``longitude,latitude,altitude``.
    """
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<kml xmlns="http://www.opengis.net/kml/2.2">',
        "  <Document>",
        f"    <name>{escape(name)}</name>",
    ]
    for report in reports:
        loc = report.location
        lines += [
            "    <Placemark>",
            f"      <name>{report.seen_at.isoformat()}</name>",
            "      <Point>",
            f"        <coordinates>{loc.longitude:.7f},{loc.latitude:.7f},0</coordinates>",
            "      </Point>",
            "    </Placemark>",
        ]
    lines += ["  </Document>", "</kml>", ""]
    return "\n".join(lines)


def write_kml(reports: Iterable[DecodedReport], path: str | Path, name: str = "Device Trail") -> None:
    """Write :func:`reports_to_kml` output to *path*."""
    target = Path(path)
    target.write_text(reports_to_kml(reports, name=name), encoding="utf-8")
    _logger.debug("KML written to %s", target)
