from __future__ import annotations

import re

import httpx
from pydantic import ValidationError

from ..errors import FetchError
from ..models.manifest import Manifest

_API_KEY = re.compile(r'VITE_APP_AZURESEARCH_KEY\s=\s"([^"]+)"')


def fetch_text(url: str, timeout: float = 30) -> str:
    """GET ``url`` and return the body as text."""
    return _get(url, timeout).text


def fetch_json(url: str, timeout: float = 30) -> object:
    response = _get(url, timeout)
    try:
        return response.json()
    except ValueError as e:
        raise FetchError(f"Invalid JSON at {url}: {e}", url=url) from e


def fetch_api_key(url: str, timeout: float = 30) -> str:
    """Extract the search API key from the scoop website's public .env file."""
    match = _API_KEY.search(fetch_text(url, timeout))
    if match is None:
        raise FetchError(f"No search API key found in {url}", url=url)
    return match.group(1)


def fetch_official_buckets(url: str, timeout: float = 30) -> dict[str, str]:
    """Fetch the official bucket list as name -> source URL."""
    data = fetch_json(url, timeout)
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise FetchError(f"Unexpected bucket list format at {url}", url=url)
    return data


def manifest_url(repository: str, file_path: str) -> str:
    """Raw URL of a manifest inside a GitHub-hosted bucket."""
    raw = repository.rstrip("/").replace("github.com", "raw.githubusercontent.com")
    return f"{raw}/master/{file_path}"


def fetch_manifest(repository: str, file_path: str, timeout: float = 30) -> Manifest:
    url = manifest_url(repository, file_path)
    data = fetch_json(url, timeout)
    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise FetchError(f"Invalid manifest at {url}: {e}", url=url) from e


def _get(url: str, timeout: float) -> httpx.Response:
    try:
        response = httpx.get(url, follow_redirects=True, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(f"HTTP {e.response.status_code} fetching {url}", url=url) from e
    except httpx.HTTPError as e:
        raise FetchError(f"Network error fetching {url}: {e}", url=url) from e
    return response
