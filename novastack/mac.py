"""Mandatory access control: subject/object policies with permission masks."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)

MAX_POLICIES = 32


class Permission(enum.IntFlag):
    NONE = 0
    READ = 1
    WRITE = 2
    EXECUTE = 4


@dataclass(frozen=True)
class MacPolicy:
    subject: str
    object: str
    permissions: int


class AccessControl:
    """Holds the loaded policies; access is denied unless a policy grants it."""

    def __init__(self) -> None:
        self.policies: list[MacPolicy] = []

    def load_policy(self, policies: Iterable[MacPolicy]) -> int:
        """Replace the policies with at most MAX_POLICIES of the given ones; returns how many."""
        self.policies = list(policies)[:MAX_POLICIES]
        return len(self.policies)

    def check_access(self, subject: str, obj: str, perm: int) -> bool:
        """The first policy for subject and obj decides; every bit of perm must be granted."""
        perm = int(perm)
        for policy in self.policies:
            if policy.subject == subject and policy.object == obj:
                if int(policy.permissions) & perm == perm:
                    return True
                logger.info("[MAC] Access denied: %s -> %s (perm 0x%X)", subject, obj, perm)
                return False
        logger.info("[MAC] Access denied (no policy): %s -> %s (perm 0x%X)", subject, obj, perm)
        return False