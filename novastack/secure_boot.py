"""Verification of boot images against an RSA PKCS#1 v1.5 SHA-256 signature."""

from __future__ import annotations

import hashlib
import logging
from typing import Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

logger = logging.getLogger(__name__)

HASH_SIZE = 32

Buffer = Union[bytes, bytearray, memoryview]
PublicKey = Union[rsa.RSAPublicKey, bytes, bytearray, memoryview]


def compute_sha256(data: Buffer) -> bytes:
    """Return the SHA-256 digest of data."""
    return hashlib.sha256(bytes(data)).digest()


def _load_public_key(public_key: PublicKey) -> rsa.RSAPublicKey:
    if isinstance(public_key, rsa.RSAPublicKey):
        return public_key
    material = bytes(public_key)
    if material.lstrip().startswith(b"-----"):
        key = serialization.load_pem_public_key(material)
    else:
        key = serialization.load_der_public_key(material)
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("public key is not an RSA key")
    return key


def verify_image(image: Buffer, signature: Buffer, public_key: PublicKey) -> bool:
    """Check that signature is a PKCS#1 v1.5 SHA-256 signature of image."""
    try:
        key = _load_public_key(public_key)
    except (ValueError, TypeError, UnsupportedAlgorithm):
        logger.warning("[SecureBoot] Public key could not be loaded")
        return False
    try:
        key.verify(bytes(signature), bytes(image), padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature:
        logger.warning("[SecureBoot] Signature verification failed")
        return False
    logger.info("[SecureBoot] Kernel/module verified successfully")
    return True