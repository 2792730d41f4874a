"""AES-128-GCM for report bodies."""

from __future__ import annotations

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from pyfindr._constants import AES_KEY_LENGTH, TAG_LENGTH
from pyfindr.exceptions import AuthenticationFailedError, MalformedPayloadError


def _check_key(key: bytes) -> None:
    if len(key) != AES_KEY_LENGTH:
        raise MalformedPayloadError(f"AES key must be {AES_KEY_LENGTH} bytes (got {len(key)})")


def aes_gcm_decrypt(ciphertext: bytes, key: bytes, iv: bytes, tag: bytes) -> bytes:
    """Decrypt and authenticate a report body.

    The tag is appended to the ciphertext before the AEAD call; there is
    no associated data.

    Parameters
    ----------
    ciphertext : bytes
        Encrypted body (10 bytes for location reports).
    key : bytes
        16-byte AES key.
    iv : bytes
        16-byte GCM nonce.
    tag : bytes
        16-byte authentication tag.

    Returns
    -------
    bytes
        Plaintext, same length as *ciphertext*.

    Raises
    ------
    AuthenticationFailedError
        If the tag does not verify.
    MalformedPayloadError
        If the key or tag has the wrong length.
    """
    _check_key(key)
    if len(tag) != TAG_LENGTH:
        raise MalformedPayloadError(f"GCM tag must be {TAG_LENGTH} bytes (got {len(tag)})")
    try:
        return AESGCM(key).decrypt(iv, bytes(ciphertext) + bytes(tag), None)
    except InvalidTag as exc:
        raise AuthenticationFailedError("GCM tag verification failed") from exc


def aes_gcm_encrypt(plaintext: bytes, key: bytes, iv: bytes) -> tuple[bytes, bytes]:
    """Encrypt *plaintext*, returning ``(ciphertext, tag)``."""
    _check_key(key)
    sealed = AESGCM(key).encrypt(iv, bytes(plaintext), None)
    return sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
