"""Single-block concatenation KDF for report decryption.

``SHA-256(shared_secret || 00000001 || ephemeral_public_key)``: one
round of the NIST SP 800-56A / ANSI X9.63 construction with the
ephemeral key as the only shared info.
"""

from __future__ import annotations

import hashlib

from pyfindr._constants import AES_KEY_LENGTH, KDF_COUNTER


def derive_symmetric_material(shared_secret: bytes, ephemeral_public_key: bytes) -> bytes:
    """Return the 32 bytes of AES key and IV material."""
    h = hashlib.sha256()
    h.update(shared_secret)
    h.update(KDF_COUNTER)
    h.update(ephemeral_public_key)
    return h.digest()


def split_symmetric_material(material: bytes) -> tuple[bytes, bytes]:
    """Split KDF output into ``(aes_key, iv)``: first 16 bytes and last 16 bytes."""
    return material[:AES_KEY_LENGTH], material[AES_KEY_LENGTH:]
