"""ECDH key agreement between the accessory key and a report's ephemeral key."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec

from pyfindr._constants import EPHEMERAL_KEY_LENGTH
from pyfindr._crypto.keys import PrivateKeyInput, load_private_key
from pyfindr.exceptions import InvalidPointError


def load_ephemeral_key(ephemeral_public_key: bytes) -> ec.EllipticCurvePublicKey:
    """Decode a 57-byte uncompressed SEC1 point on P-224.

    Raises
    ------
    InvalidPointError
        If the bytes are not an uncompressed point on the curve.
    """
    if len(ephemeral_public_key) != EPHEMERAL_KEY_LENGTH:
        raise InvalidPointError(
            f"Ephemeral key must be {EPHEMERAL_KEY_LENGTH} bytes (got {len(ephemeral_public_key)})"
        )
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP224R1(), bytes(ephemeral_public_key))
    except ValueError as exc:
        raise InvalidPointError(f"Ephemeral key is not a point on secp224r1: {exc}") from exc


def derive_shared_secret(ephemeral_public_key: bytes, private_key: PrivateKeyInput) -> bytes:
    """Compute the ECDH shared secret.

    The secret is the x-coordinate of ``d * E`` as 28 big-endian bytes,
    where ``d`` is the accessory scalar and ``E`` the ephemeral point.

    Raises
    ------
    InvalidKeyError
        If *private_key* is not a valid scalar.
    InvalidPointError
        If *ephemeral_public_key* does not decode to a curve point.
    """
    key = load_private_key(private_key)
    public = load_ephemeral_key(ephemeral_public_key)
    return key.exchange(ec.ECDH(), public)
