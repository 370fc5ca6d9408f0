from ._http import (
    fetch_api_key,
    fetch_json,
    fetch_manifest,
    fetch_official_buckets,
    fetch_text,
    manifest_url,
)
from ._search import ScoopSearchClient

__all__ = [
    "ScoopSearchClient",
    "fetch_api_key",
    "fetch_json",
    "fetch_manifest",
    "fetch_official_buckets",
    "fetch_text",
    "manifest_url",
]
