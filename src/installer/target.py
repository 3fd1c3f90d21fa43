"""Map the running platform onto release asset naming."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PlatformTarget:
    os_name: str
    arch: str


def map_os(system: str) -> str:
    s = system.lower()
    if s.startswith("darwin") or s.startswith("mac"):
        return "darwin"
    if s.startswith("win"):
        return "windows"
    return s


def map_arch(machine: str) -> str:
    m = machine.lower()
    if m in ("x86_64", "amd64"):
        return "amd64"
    if m in ("aarch64", "arm64"):
        return "arm64"
    if m in ("i386", "i686", "x86"):
        return "386"
    return m


def resolve_target(system: Optional[str] = None, machine: Optional[str] = None) -> PlatformTarget:
    """Target for the given (or current) ``platform.system()``/``platform.machine()``."""
    return PlatformTarget(
        os_name=map_os(system if system is not None else platform.system()),
        arch=map_arch(machine if machine is not None else platform.machine()),
    )
