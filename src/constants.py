"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3
    TRUST_ERROR = 4
    EXTRACTION_ERROR = 5
    CONFIG_ERROR = 6


class ProductNames(Enum):
    """Products the program can manage.

    Args:
        Enum (string): Product names accepted in TFENV_PRODUCT.
    """

    TERRAFORM = "terraform"
    OPENTOFU = "opentofu"


class ConstraintKeywords(Enum):
    """Keywords recognised in a requested version string."""

    LATEST = "latest"
    LATEST_ALLOWED = "latest-allowed"
    MIN_REQUIRED = "min-required"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SUPPORTED_PRODUCTS = [
        ProductNames.TERRAFORM.value,
        ProductNames.OPENTOFU.value,
    ]
    DEFAULT_PRODUCT = ProductNames.TERRAFORM.value

    # Environment variables
    ENV_ROOT = "TFENV_ROOT"
    ENV_CONFIG_DIR = "TFENV_CONFIG_DIR"
    ENV_DIR = "TFENV_DIR"
    ENV_PRODUCT = "TFENV_PRODUCT"
    ENV_REMOTE = "TFENV_REMOTE"
    ENV_AUTO_INSTALL = "TFENV_AUTO_INSTALL"
    ENV_TRUST = "TFENV_TRUST_TFENV"
    ENV_VERSION_OVERRIDE = "TFENV_TERRAFORM_VERSION"
    ENV_LOG_LEVEL = "TFENV_LOG_LEVEL"

    # Persisted state layout
    VERSION_FILE = ".terraform-version"
    DEFAULT_VERSION_FILE = "version"
    VERSIONS_DIR = "versions"
    CONFIG_FILE = "tfenv.yml"
    GPGV_MARKER_FILE = "use-gpgv"
    BUNDLED_KEYS = ("share", "hashicorp-keys.pgp")
    DECLARATION_SUFFIXES = (".tf", ".tf.json")

    # Version matching
    DEFAULT_LATEST_PATTERN = r"^[0-9]+\.[0-9]+\.[0-9]+$"

    # Remote locations
    REMOTE_URL_TERRAFORM = "https://releases.hashicorp.com/terraform/"
    REMOTE_URL_OPENTOFU = "https://github.com/opentofu/opentofu/releases/download/"
    INDEX_URL_OPENTOFU = "https://github.com/opentofu/opentofu/releases"

    # Canonical trust root; never derived from TFENV_REMOTE
    TRUST_ROOT_URL = "https://releases.hashicorp.com/terraform/"
    SHA256SUMS_TEMPLATE = "{base}{version}/terraform_{version}_SHA256SUMS"
    SHA256SUMS_SIG_TEMPLATE = "{base}{version}/terraform_{version}_SHA256SUMS.sig"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    DEFAULT_LOG_LEVEL = "INFO"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    USER_AGENT = "tfenv-py/0.4 (+https://github.com/tfutils/tfenv)"
    TRUE_VALUES = ("1", "true", "yes", "on")
