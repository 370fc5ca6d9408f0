"""Search, install, update and uninstall Scoop packages from a quick launcher."""

from .config import ScoopSettings
from .errors import (
    BucketNotFoundError,
    FetchError,
    InitializationError,
    NotInitializedError,
    NotInstalledError,
    PackageNotFoundError,
)
from .fetchers import ScoopSearchClient, fetch_api_key, fetch_manifest, fetch_official_buckets
from .launcher import ContextMenuEntry, QueryResult, ScoopPlugin
from .manager import ActionResult, ScoopManager, make_scoop_manager
from .models import Manifest, Package, PackageAction, PackageMetadata
from .progress import ProgressTracker, classify_line
from .scanner import parse_installed_buckets, parse_installed_packages

__version__ = "0.1.0"

__all__ = [
    "ActionResult",
    "BucketNotFoundError",
    "ContextMenuEntry",
    "FetchError",
    "InitializationError",
    "Manifest",
    "NotInitializedError",
    "NotInstalledError",
    "Package",
    "PackageAction",
    "PackageMetadata",
    "PackageNotFoundError",
    "ProgressTracker",
    "QueryResult",
    "ScoopManager",
    "ScoopPlugin",
    "ScoopSearchClient",
    "ScoopSettings",
    "__version__",
    "classify_line",
    "fetch_api_key",
    "fetch_manifest",
    "fetch_official_buckets",
    "make_scoop_manager",
    "parse_installed_buckets",
    "parse_installed_packages",
]
