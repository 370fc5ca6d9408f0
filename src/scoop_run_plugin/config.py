"""Runtime settings: remote endpoints, search shape and retry policy.

Every field can be overridden from the environment as ``SCOOP_RUN_<FIELD>``
(e.g. ``SCOOP_RUN_SEARCH_TOP=10``); values are validated by pydantic.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "SCOOP_RUN_"

SEARCH_URL = (
    "https://scoopsearch.search.windows.net/indexes/apps/docs/search?api-version=2020-06-30"
)
OFFICIAL_BUCKETS_URL = "https://raw.githubusercontent.com/ScoopInstaller/Scoop/master/buckets.json"
WEBSITE_ENV_URL = (
    "https://raw.githubusercontent.com/ScoopInstaller/scoopinstaller.github.io/main/.env"
)
SCOOP_HOMEPAGE_URL = "https://scoop.sh/"
NEW_ISSUE_URL = "https://github.com/Quriz/PowerToysRunScoop/issues/new?labels=bug&title={title}&body={body}"


def _default_start_menu() -> Path:
    appdata = os.environ.get("APPDATA")
    base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    return base / "Microsoft" / "Windows" / "Start Menu"


class ScoopSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    search_url: str = SEARCH_URL
    official_buckets_url: str = OFFICIAL_BUCKETS_URL
    website_env_url: str = WEBSITE_ENV_URL
    scoop_homepage_url: str = SCOOP_HOMEPAGE_URL
    new_issue_url: str = NEW_ISSUE_URL

    search_filter: str = "Metadata/OfficialRepositoryNumber eq 1 and Metadata/DuplicateOf eq null"
    search_order_by: str = (
        "search.score() desc, Metadata/OfficialRepositoryNumber desc, NameSortable asc"
    )
    search_select: str = "Name,Description,Version,Homepage,Metadata/Repository,Metadata/FilePath"
    search_mode: str = "all"
    search_top: int = Field(6, ge=1)
    min_query_length: int = Field(2, ge=1)

    http_timeout: float = Field(30.0, gt=0)
    init_attempts: int = Field(7, ge=1)
    init_retry_delay: float = Field(30.0, ge=0)

    start_menu_dir: Path = Field(default_factory=_default_start_menu)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ScoopSettings:
        """Build settings, overriding defaults with ``SCOOP_RUN_*`` variables."""
        environ = os.environ if environ is None else environ
        overrides = {
            name: environ[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in environ
        }
        return cls.model_validate(overrides)

    @property
    def scoop_apps_shortcut_dir(self) -> Path:
        return self.start_menu_dir / "Programs" / "Scoop Apps"
