"""Command handlers behind the tfenv sub-commands.

Handlers print user-facing results to stdout and return a process exit
code. Core errors propagate to ``tfenv.main`` which reports them.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from constants import ExitCodes
from errors import ResolutionError
from installer import Installer
from products import get_product
from settings import Settings
from versioning import RemoteCatalog, VersionResolver, classify
from versioning.models import ConstraintKind

logger = logging.getLogger(__name__)


def exec_binary(path, args: List[str]) -> int:
    """Run ``path`` with ``args``, inheriting the standard streams."""
    return subprocess.call([str(path), *args])


def ensure_installed(settings: Settings, resolver: VersionResolver, installer: Installer) -> str:
    """Resolve the current version and install it when allowed."""
    version = resolver.resolve()
    if installer.is_installed(version):
        return version
    if not settings.auto_install:
        raise ResolutionError(
            f"{settings.product.name} binary for version '{version}' not installed at "
            f"{installer.binary_path(version)} and auto-install disabled"
        )
    logger.info("Version %s not installed; auto-installing...", version)
    installer.install(version)
    return version


def run_exec(settings: Settings, args: List[str], resolver=None, installer=None, runner=exec_binary) -> int:
    resolver = resolver or VersionResolver(settings)
    installer = installer or Installer(settings)
    version = ensure_installed(settings, resolver, installer)
    return runner(installer.binary_path(version), args)


def print_version(settings: Settings, resolver=None) -> int:
    resolver = resolver or VersionResolver(settings)
    print(resolver.resolve())
    return ExitCodes.SUCCESS.value


def set_default_version(settings: Settings, version: str) -> int:
    """Pin ``version`` in ``<config_dir>/version``."""
    path = settings.default_version_file
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(version.strip() + "\n", encoding="utf-8")
    except OSError as e:
        logger.error("Could not write version file %s: %s", path, e)
        return ExitCodes.FILE_ERROR.value
    print(f"Set default version to {version.strip()}")
    return ExitCodes.SUCCESS.value


def install(settings: Settings, requested: Optional[str], resolver=None, installer=None) -> int:
    """Install an explicit or resolved version.

    An explicit latest-family request is answered from the remote catalog so
    that ``install latest`` fetches the newest release even when an older one
    is installed.
    """
    resolver = resolver or VersionResolver(settings)
    installer = installer or Installer(settings)

    if requested:
        constraint = classify(requested)
        if constraint.kind == ConstraintKind.EXACT:
            version = constraint.raw
        else:
            version = resolver.resolve_requested(requested, local_first=False)
    else:
        version = resolver.resolve()

    if installer.is_installed(version):
        logger.info("%s %s is already installed", settings.product.name, version)
        return ExitCodes.SUCCESS.value
    installer.install(version)
    return ExitCodes.SUCCESS.value


def list_installed(settings: Settings, installer=None) -> int:
    installer = installer or Installer(settings)
    versions = installer.installed_versions()
    if not versions:
        print("(no versions installed)")
        return ExitCodes.SUCCESS.value
    for version in versions:
        print(version)
    return ExitCodes.SUCCESS.value


def list_remote(settings: Settings, product_name: Optional[str] = None, catalog=None) -> int:
    """Print ``<version> <product>`` for ``product_name`` (default: the configured product)."""
    if catalog is None:
        product = get_product(product_name) if product_name else settings.product
        remote = settings.remote if product.name == settings.product.name else product.default_remote
        catalog = RemoteCatalog(product, remote)
    for entry in catalog.list():
        print(f"{entry.version} {entry.product}")
    return ExitCodes.SUCCESS.value
