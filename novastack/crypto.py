"""AES-256-CBC encryption of buffers, files, network packets and IPC messages."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

logger = logging.getLogger(__name__)

AES_BLOCK_SIZE = 16
AES_KEY_SIZE = 32

Buffer = Union[bytes, bytearray, memoryview]
PathLike = Union[str, "os.PathLike[str]"]


class EncryptionError(Exception):
    """Raised when data cannot be encrypted or decrypted."""


def _cipher(key: Buffer) -> Cipher:
    key = bytes(key)
    if len(key) != AES_KEY_SIZE:
        raise EncryptionError(f"key must be {AES_KEY_SIZE} bytes, got {len(key)}")
    # A zero IV, with no padding: input must be a whole number of blocks.
    return Cipher(algorithms.AES(key), modes.CBC(bytes(AES_BLOCK_SIZE)))


def _check_blocks(data: bytes) -> None:
    if len(data) % AES_BLOCK_SIZE:
        raise EncryptionError(
            f"data length {len(data)} is not a multiple of {AES_BLOCK_SIZE}"
        )


def encrypt_data(plaintext: Buffer, key: Buffer) -> bytes:
    """Encrypt whole AES blocks with AES-256-CBC and a zero IV."""
    plaintext = bytes(plaintext)
    encryptor = _cipher(key).encryptor()
    _check_blocks(plaintext)
    return encryptor.update(plaintext) + encryptor.finalize()


def decrypt_data(ciphertext: Buffer, key: Buffer) -> bytes:
    """Decrypt whole AES blocks with AES-256-CBC and a zero IV."""
    ciphertext = bytes(ciphertext)
    decryptor = _cipher(key).decryptor()
    _check_blocks(ciphertext)
    return decryptor.update(ciphertext) + decryptor.finalize()


def _transform_file(path: PathLike, suffix: str, key: Buffer, encrypt: bool) -> Path:
    source = Path(path)
    data = source.read_bytes()
    result = encrypt_data(data, key) if encrypt else decrypt_data(data, key)
    target = source.with_name(source.name + suffix)
    target.write_bytes(result)
    return target


def encrypt_file(path: PathLike, key: Buffer) -> Path:
    """Encrypt a file into '<path>.enc' and return the new path."""
    logger.info("[Encryption] Encrypting file: %s", path)
    target = _transform_file(path, ".enc", key, encrypt=True)
    logger.info("[Encryption] File encrypted to %s", target)
    return target


def decrypt_file(path: PathLike, key: Buffer) -> Path:
    """Decrypt a file into '<path>.dec' and return the new path."""
    logger.info("[Encryption] Decrypting file: %s", path)
    target = _transform_file(path, ".dec", key, encrypt=False)
    logger.info("[Encryption] File decrypted to %s", target)
    return target


def encrypt_network(data: Buffer, key: Buffer) -> bytes:
    logger.info("[Encryption] Encrypting network packet")
    return encrypt_data(data, key)


def decrypt_network(data: Buffer, key: Buffer) -> bytes:
    logger.info("[Encryption] Decrypting network packet")
    return decrypt_data(data, key)


def encrypt_ipc(data: Buffer, key: Buffer) -> bytes:
    logger.info("[Encryption] Encrypting IPC message")
    return encrypt_data(data, key)


def decrypt_ipc(data: Buffer, key: Buffer) -> bytes:
    logger.info("[Encryption] Decrypting IPC message")
    return decrypt_data(data, key)