"""A file-backed key store with HMAC attestation."""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import re
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_ATTEST_KEY = "TPMKey"
_KEY_ID = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9._-]*")

Buffer = Union[bytes, bytearray, memoryview]
PathLike = Union[str, "os.PathLike[str]"]


class KeyStoreError(Exception):
    """Raised when a key cannot be stored, found or used."""


class KeyStore:
    """Persists named keys as files under a root directory."""

    def __init__(self, root: PathLike) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key_id: str) -> Path:
        if not _KEY_ID.fullmatch(key_id):
            raise ValueError(f"invalid key id {key_id!r}")
        return self.root / f"{key_id}.key"

    def store(self, key_id: str, key: Buffer) -> None:
        """Persist a new key; an existing key of the same id is never overwritten."""
        path = self._path(key_id)
        material = bytes(key)
        if not material:
            raise KeyStoreError("key must not be empty")
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except FileExistsError:
            raise KeyStoreError(f"key {key_id!r} already exists") from None
        with os.fdopen(fd, "wb") as handle:
            handle.write(material)
        logger.info("[KeyStore] Stored key %s", key_id)

    def load(self, key_id: str) -> bytes:
        path = self._path(key_id)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise KeyStoreError(f"no key named {key_id!r}") from None

    def attest(self, data: Buffer, key_id: str = DEFAULT_ATTEST_KEY) -> bytes:
        """Sign data with the stored key using HMAC-SHA256."""
        key = self.load(key_id)
        return hmac.new(key, bytes(data), hashlib.sha256).digest()