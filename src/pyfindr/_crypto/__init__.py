"""Cryptographic primitives for offline finding reports."""

from __future__ import annotations

from pyfindr._crypto.aes import aes_gcm_decrypt, aes_gcm_encrypt
from pyfindr._crypto.ecdh import derive_shared_secret, load_ephemeral_key
from pyfindr._crypto.kdf import derive_symmetric_material, split_symmetric_material
from pyfindr._crypto.keys import (
    PrivateKeyInput,
    advertisement_key_b64,
    derive_advertisement_key,
    load_private_key,
    public_key_x,
)

__all__ = [
    "PrivateKeyInput",
    "advertisement_key_b64",
    "aes_gcm_decrypt",
    "aes_gcm_encrypt",
    "derive_advertisement_key",
    "derive_shared_secret",
    "derive_symmetric_material",
    "load_ephemeral_key",
    "load_private_key",
    "public_key_x",
    "split_symmetric_material",
]
