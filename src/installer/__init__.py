"""Release installation under the versions directory."""

from .installer import Installer
from .target import PlatformTarget, resolve_target

__all__ = ["Installer", "PlatformTarget", "resolve_target"]
