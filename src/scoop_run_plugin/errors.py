from __future__ import annotations


class FetchError(Exception):
    """Raised when a remote fetch fails (network, HTTP error, timeout, bad payload).

    Attributes:
        url: The URL that failed, if applicable.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class InitializationError(Exception):
    """Raised when gathering the API key, official buckets or installed state fails."""


class NotInitializedError(Exception):
    """Raised when a package action is requested before a successful init()."""

    def __init__(self) -> None:
        super().__init__("Scoop manager is not initialized")


class BucketNotFoundError(Exception):
    """Raised when a package's repository is not one of the official buckets."""

    def __init__(self, repository: str) -> None:
        self.repository = repository
        super().__init__(f"No official bucket for repository: {repository}")


class NotInstalledError(Exception):
    """Raised when updating/uninstalling a package that is not installed."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Package not installed: {name}")


class PackageNotFoundError(Exception):
    """Raised when a package name has no exact match in the search index."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Package not found: {name}")
