"""
Guest VM backends for dockvm.
The guest is the single virtual machine that hosts every container runtime.
"""
from .base import VMError, VMRuntime
from .lima import LimaVM

__all__ = ["VMError", "VMRuntime", "LimaVM"]
