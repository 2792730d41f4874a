"""Protocol constants for offline finding reports."""

from __future__ import annotations

from datetime import UTC, datetime

# P-224 field / scalar width in bytes.
FIELD_SIZE = 28

# SEC1 uncompressed point: 0x04 || x || y.
EPHEMERAL_KEY_LENGTH = 1 + 2 * FIELD_SIZE
CIPHERTEXT_LENGTH = 10
TAG_LENGTH = 16
MIN_PAYLOAD_LENGTH = EPHEMERAL_KEY_LENGTH + CIPHERTEXT_LENGTH + TAG_LENGTH

PLAINTEXT_LENGTH = 10
AES_KEY_LENGTH = 16

# Single-round KDF counter, big-endian.
KDF_COUNTER = b"\x00\x00\x00\x01"

# Reference epoch for "seen" timestamps: 2001-01-01 00:00:00 UTC.
REPORT_EPOCH = datetime(2001, 1, 1, tzinfo=UTC)

# Coordinates are transmitted as int32 degrees * 1e7.
COORDINATE_SCALE = 10_000_000.0

EARTH_RADIUS_M = 6_371_000.0
CLUSTER_RADIUS_M = 500.0
RECENCY_HALF_LIFE_HOURS = 1.0

DEFAULT_POLLER_URL = "https://findr.ninoverstraeten.com/api/reports"
USER_AGENT = "pyfindr"

# P-224 group order; valid private scalars are in [1, order).
P224_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFF16A2E0B8F03E13DD29455C5C2A3D
