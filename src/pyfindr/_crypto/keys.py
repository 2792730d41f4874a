"""Accessory key loading and advertisement key derivation.

The advertisement key is the public, non-secret identifier a report
server indexes reports by. It is the SHA-256 digest of the accessory's
public key x-coordinate, rendered at the full 28-byte field width.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from typing import Union

from cryptography.hazmat.primitives.asymmetric import ec

from pyfindr._constants import FIELD_SIZE, P224_ORDER
from pyfindr.exceptions import InvalidKeyError

PrivateKeyInput = Union[bytes, bytearray, str, ec.EllipticCurvePrivateKey]
"""Accepted private key forms: raw scalar bytes, base64 text, or a loaded key."""


def _decode_base64_key(value: str) -> bytes:
    text = value.strip()
    if not text:
        raise InvalidKeyError("Private key is empty")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidKeyError("Private key must be base64-encoded") from exc


def load_private_key(private_key: PrivateKeyInput) -> ec.EllipticCurvePrivateKey:
    """Interpret *private_key* as a P-224 private key.

    Parameters
    ----------
    private_key : bytes, str or EllipticCurvePrivateKey
        28-byte big-endian scalar, its base64 encoding, or an already
        loaded ``cryptography`` key on SECP224R1.

    Returns
    -------
    EllipticCurvePrivateKey
        The loaded key.

    Raises
    ------
    InvalidKeyError
        If the input is not a valid scalar on the curve.
    """
    if isinstance(private_key, ec.EllipticCurvePrivateKey):
        if not isinstance(private_key.curve, ec.SECP224R1):
            raise InvalidKeyError(f"Private key is on {private_key.curve.name}, expected secp224r1")
        return private_key

    if isinstance(private_key, str):
        raw = _decode_base64_key(private_key)
    elif isinstance(private_key, (bytes, bytearray)):
        raw = bytes(private_key)
    else:
        raise InvalidKeyError(f"Unsupported private key type: {type(private_key).__name__}")

    if len(raw) != FIELD_SIZE:
        raise InvalidKeyError(f"Private key must be {FIELD_SIZE} bytes (got {len(raw)})")

    scalar = int.from_bytes(raw, "big")
    if not 0 < scalar < P224_ORDER:
        raise InvalidKeyError("Private key scalar is outside the curve order")
    try:
        return ec.derive_private_key(scalar, ec.SECP224R1())
    except ValueError as exc:
        raise InvalidKeyError(f"Private key rejected: {exc}") from exc


def public_key_x(private_key: PrivateKeyInput) -> bytes:
    """Return the public key x-coordinate as 28 left-padded bytes."""
    key = load_private_key(private_key)
    x = key.public_key().public_numbers().x
    return bytes.fromhex(f"{x:0{FIELD_SIZE * 2}x}")


def derive_advertisement_key(private_key: PrivateKeyInput) -> bytes:
    """Derive the 32-byte advertisement key for an accessory.

    Raises
    ------
    InvalidKeyError
        If *private_key* is not a valid P-224 scalar.
    """
    return hashlib.sha256(public_key_x(private_key)).digest()


def advertisement_key_b64(private_key: PrivateKeyInput) -> str:
    """Base64 form of :func:`derive_advertisement_key`, as report servers expect it."""
    return base64.b64encode(derive_advertisement_key(private_key)).decode("ascii")
