from __future__ import annotations

import base64
import struct
from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from pyfindr._constants import REPORT_EPOCH
from pyfindr._crypto.aes import aes_gcm_encrypt
from pyfindr._crypto.kdf import derive_symmetric_material, split_symmetric_material
from pyfindr.models.report import RawReport

FIXED_SCALAR_HEX = "00112233445566778899aabbccddeeff00112233445566778899aabb"

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def encode_body(latitude: float, longitude: float, accuracy: int = 10, status: int = 0) -> bytes:
    """Plaintext report body: lat/lon as i32 BE * 1e7, accuracy, status."""
    return struct.pack(
        ">iiBB",
        round(latitude * 10_000_000),
        round(longitude * 10_000_000),
        accuracy,
        status,
    )


def encrypt_payload(
    public_key: ec.EllipticCurvePublicKey,
    body: bytes,
    seen_at: datetime,
    confidence: int = 2,
) -> bytes:
    """Build a payload the way an accessory does, with a fresh ephemeral key."""
    ephemeral = ec.generate_private_key(ec.SECP224R1())
    ephemeral_bytes = ephemeral.public_key().public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)
    shared = ephemeral.exchange(ec.ECDH(), public_key)
    key, iv = split_symmetric_material(derive_symmetric_material(shared, ephemeral_bytes))
    ciphertext, tag = aes_gcm_encrypt(body, key, iv)
    seconds = int((seen_at - REPORT_EPOCH).total_seconds())
    return struct.pack(">IB", seconds, confidence) + ephemeral_bytes + ciphertext + tag


@pytest.fixture
def accessory_key() -> ec.EllipticCurvePrivateKey:
    return ec.derive_private_key(int(FIXED_SCALAR_HEX, 16), ec.SECP224R1())


@pytest.fixture
def private_key_bytes() -> bytes:
    return bytes.fromhex(FIXED_SCALAR_HEX)


@pytest.fixture
def private_key_b64(private_key_bytes: bytes) -> str:
    return base64.b64encode(private_key_bytes).decode("ascii")


@pytest.fixture
def make_payload(accessory_key: ec.EllipticCurvePrivateKey) -> Callable[..., bytes]:
    def _make(
        latitude: float = 52.3702,
        longitude: float = 4.8952,
        *,
        accuracy: int = 10,
        status: int = 0,
        seen_at: datetime = NOW,
        confidence: int = 2,
    ) -> bytes:
        body = encode_body(latitude, longitude, accuracy, status)
        return encrypt_payload(accessory_key.public_key(), body, seen_at, confidence)

    return _make


@pytest.fixture
def make_raw_report(make_payload: Callable[..., bytes]) -> Callable[..., RawReport]:
    def _make(report_id: str, **kwargs: object) -> RawReport:
        return RawReport(id=report_id, payload=make_payload(**kwargs))

    return _make
