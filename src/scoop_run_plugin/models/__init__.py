from .manifest import Manifest
from .package import Package, PackageAction, PackageMetadata
from .search import SearchRequest, SearchResponse

__all__ = [
    "Manifest",
    "Package",
    "PackageAction",
    "PackageMetadata",
    "SearchRequest",
    "SearchResponse",
]
