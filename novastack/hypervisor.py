"""Tracking of virtual machine instances."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class VirtualMachine:
    vm_id: int
    running: bool = False

    def stop(self) -> bool:
        """Stop the VM; returns whether it was running."""
        if not self.running:
            return False
        logger.info("[Hypervisor] VM %d stopped.", self.vm_id)
        self.running = False
        return True

    def status(self) -> str:
        state = "running" if self.running else "stopped"
        logger.info("[Hypervisor] VM %d status: %s", self.vm_id, state)
        return state


def launch_vm(vm_id: int) -> VirtualMachine:
    """Start a VM with the given id."""
    vm = VirtualMachine(vm_id, running=True)
    logger.info("[Hypervisor] VM %d launched.", vm_id)
    return vm