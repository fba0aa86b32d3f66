"""Bookkeeping of application sandboxes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

MAX_SANDBOXES = 32


class SandboxError(Exception):
    """Raised when a sandbox cannot be created or is unknown."""


@dataclass
class Sandbox:
    id: int
    resources: Optional[Any] = None


class SandboxManager:
    """Creates and destroys sandboxes with increasing ids."""

    def __init__(self) -> None:
        self._sandboxes: list[Sandbox] = []
        self._next_id = 1

    def create(self) -> Sandbox:
        if len(self._sandboxes) >= MAX_SANDBOXES:
            raise SandboxError("sandbox table full")
        sandbox = Sandbox(self._next_id)
        self._next_id += 1
        self._sandboxes.append(sandbox)
        logger.info("[Sandbox] Created sandbox %d", sandbox.id)
        return sandbox

    def destroy(self, sandbox: Sandbox) -> None:
        for index, existing in enumerate(self._sandboxes):
            if existing.id == sandbox.id:
                del self._sandboxes[index]
                logger.info("[Sandbox] Destroyed sandbox %d", sandbox.id)
                return
        raise SandboxError(f"no sandbox with id {sandbox.id}")

    def sandboxes(self) -> list[Sandbox]:
        """Return the live sandboxes in creation order."""
        return list(self._sandboxes)