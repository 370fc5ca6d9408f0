import pytest

from scoop_run_plugin.errors import (
    BucketNotFoundError,
    FetchError,
    NotInitializedError,
    NotInstalledError,
    PackageNotFoundError,
)


def test_fetch_error_message():
    err = FetchError("something went wrong")
    assert str(err) == "something went wrong"
    assert err.url is None


def test_fetch_error_with_url():
    err = FetchError("not found", url="https://example.com/x.json")
    assert err.url == "https://example.com/x.json"


def test_bucket_not_found_carries_repository():
    err = BucketNotFoundError("https://github.com/someone/bucket")
    assert err.repository == "https://github.com/someone/bucket"
    assert "someone/bucket" in str(err)


def test_not_installed_and_not_found_carry_name():
    assert NotInstalledError("git").name == "git"
    assert PackageNotFoundError("nope").name == "nope"


def test_not_initialized_is_exception():
    with pytest.raises(NotInitializedError, match="not initialized"):
        raise NotInitializedError()
