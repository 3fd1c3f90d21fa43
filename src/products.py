"""Per-product release layouts.

Each managed product differs in binary name, asset naming, where its release
index lives, how version links appear on that index and whether the canonical
trust root publishes checksums for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from constants import Constants, ProductNames
from errors import ConfigError

HASHICORP_LAYOUT = "hashicorp"
GITHUB_LAYOUT = "github"


@dataclass(frozen=True)
class Product:
    """Static description of a product family."""

    name: str
    binary: str
    asset_prefix: str
    default_remote: str
    link_marker: str
    download_layout: str
    trust_root_covered: bool
    index_url: Optional[str] = None

    def binary_name(self, os_name: str) -> str:
        if os_name == "windows":
            return f"{self.binary}.exe"
        return self.binary

    def asset_name(self, version: str, os_name: str, arch: str) -> str:
        return f"{self.asset_prefix}_{version}_{os_name}_{arch}.zip"

    def index_location(self, remote: str) -> str:
        """URL of the release index; a fixed page when the product has one."""
        return self.index_url or remote

    def download_url(self, remote: str, version: str, asset: str) -> str:
        base = remote if remote.endswith("/") else remote + "/"
        if self.download_layout == HASHICORP_LAYOUT:
            return f"{base}{version}/{asset}"
        return f"{base}v{version}/{asset}"

    def version_from_href(self, href: str) -> Optional[str]:
        """Extract the version text from an index link, or None if it is not one."""
        if self.download_layout == HASHICORP_LAYOUT:
            if not href.startswith(self.link_marker):
                return None
            tail = href[len(self.link_marker):]
        else:
            pos = href.find(self.link_marker)
            if pos < 0:
                return None
            tail = href[pos + len(self.link_marker):]
        tail = tail.rstrip("/")
        return tail or None


PRODUCTS: Dict[str, Product] = {
    ProductNames.TERRAFORM.value: Product(
        name=ProductNames.TERRAFORM.value,
        binary="terraform",
        asset_prefix="terraform",
        default_remote=Constants.REMOTE_URL_TERRAFORM,
        link_marker="/terraform/",
        download_layout=HASHICORP_LAYOUT,
        trust_root_covered=True,
    ),
    ProductNames.OPENTOFU.value: Product(
        name=ProductNames.OPENTOFU.value,
        binary="tofu",
        asset_prefix="tofu",
        default_remote=Constants.REMOTE_URL_OPENTOFU,
        link_marker="/opentofu/opentofu/releases/tag/v",
        download_layout=GITHUB_LAYOUT,
        trust_root_covered=False,
        index_url=Constants.INDEX_URL_OPENTOFU,
    ),
}


def get_product(name: str) -> Product:
    """Look up a product by case-insensitive name.

    Raises:
        ConfigError: For names outside Constants.SUPPORTED_PRODUCTS.
    """
    product = PRODUCTS.get(name.strip().lower())
    if product is None:
        raise ConfigError(
            f"Unsupported product '{name}'; expected one of {', '.join(Constants.SUPPORTED_PRODUCTS)}"
        )
    return product
