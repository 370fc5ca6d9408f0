"""Request and response bodies of the hosted search index."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .package import Package  # noqa: TC001


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    filter: str
    order_by: str = Field(alias="orderby")
    search: str
    search_mode: str = Field("all", alias="searchMode")
    select: str
    top: int = 6


class SearchResponse(BaseModel):
    """Root of a search response; ``@odata.*`` keys are ignored."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    packages: list[Package] = Field(alias="value")
