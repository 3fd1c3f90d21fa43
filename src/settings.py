"""Runtime settings assembled from the environment and an optional YAML file.

Precedence, highest first:

1. ``TFENV_*`` environment variables
2. ``<config_dir>/tfenv.yml``
3. Built-in defaults from ``Constants``

Settings are read once per invocation and passed explicitly to the
resolver and installer; nothing reads the environment behind their back.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from errors import ConfigError
from products import Product, get_product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Immutable view of the configuration surface."""

    root: Path
    config_dir: Path
    workdir: Path
    home: Optional[Path]
    product: Product
    remote: str
    auto_install: bool = True
    trust_tfenv: bool = False
    version_override: Optional[str] = None
    log_level: str = Constants.DEFAULT_LOG_LEVEL

    @property
    def versions_dir(self) -> Path:
        return self.config_dir / Constants.VERSIONS_DIR

    @property
    def default_version_file(self) -> Path:
        return self.config_dir / Constants.DEFAULT_VERSION_FILE

    @property
    def signature_enabled(self) -> bool:
        """Signature checks run when trusted explicitly or the marker file exists."""
        return self.trust_tfenv or (self.root / Constants.GPGV_MARKER_FILE).exists()


def detect_root(environ: Mapping[str, str]) -> Path:
    """Return TFENV_ROOT, else the parent of the directory holding the entry script."""
    root = environ.get(Constants.ENV_ROOT, "").strip()
    if root:
        return Path(root)
    exe = Path(sys.argv[0]).resolve() if sys.argv and sys.argv[0] else Path.cwd()
    return exe.parent.parent


def load_yaml_config(path: Path) -> Dict[str, Any]:
    """Load the optional YAML config file; a missing file yields ``{}``.

    Raises:
        ConfigError: If the file exists but is not a YAML mapping.
    """
    if not path.is_file():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.debug("Loaded config file %s", path)
    return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in Constants.TRUE_VALUES


def _first(environ: Mapping[str, str], env_key: str, file_cfg: Mapping[str, Any], file_key: str) -> Optional[Any]:
    value = environ.get(env_key)
    if value is not None and str(value).strip() != "":
        return value
    return file_cfg.get(file_key)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ

    root = detect_root(env)
    config_dir_raw = env.get(Constants.ENV_CONFIG_DIR, "").strip()
    config_dir = Path(config_dir_raw) if config_dir_raw else root
    workdir_raw = env.get(Constants.ENV_DIR, "").strip()
    workdir = Path(workdir_raw) if workdir_raw else Path.cwd()
    home_raw = env.get("HOME", "").strip()
    home = Path(home_raw) if home_raw else Path.home()

    file_cfg = load_yaml_config(config_dir / Constants.CONFIG_FILE)

    product_name = _first(env, Constants.ENV_PRODUCT, file_cfg, "product") or Constants.DEFAULT_PRODUCT
    product = get_product(str(product_name))

    remote = _first(env, Constants.ENV_REMOTE, file_cfg, "remote") or product.default_remote

    auto_install_raw = _first(env, Constants.ENV_AUTO_INSTALL, file_cfg, "auto_install")
    auto_install = True if auto_install_raw is None else _as_bool(auto_install_raw)

    trust_raw = _first(env, Constants.ENV_TRUST, file_cfg, "trust_tfenv")
    trust_tfenv = False if trust_raw is None else _as_bool(trust_raw)

    override = env.get(Constants.ENV_VERSION_OVERRIDE, "").strip() or None
    log_level = str(_first(env, Constants.ENV_LOG_LEVEL, file_cfg, "log_level") or Constants.DEFAULT_LOG_LEVEL)

    return Settings(
        root=root,
        config_dir=config_dir,
        workdir=workdir,
        home=home,
        product=product,
        remote=str(remote),
        auto_install=auto_install,
        trust_tfenv=trust_tfenv,
        version_override=override,
        log_level=log_level.upper(),
    )
