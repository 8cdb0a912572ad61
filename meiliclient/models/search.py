"""Search request and response models."""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from meiliclient.models.attributes import Attributes

DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 20

FilterExpression = Union[str, list[Any]]
"""A filter string, or nested lists of filter strings.

The lists are forwarded as-is. The engine reads the outer list as an AND of
its elements and any inner list as an OR of its elements; whether the
expression is valid is decided by the server.
"""


def normalize_filter(value: Any) -> Any:
    """Turn tuples into lists and check that every leaf is a string."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return [normalize_filter(item) for item in value]
    raise ValueError(
        f"filter must be a string or a nested list of strings, got {type(value).__name__}"
    )


class SearchParameters(BaseModel):
    """Every option accepted by the search route.

    Unset options are not sent. Options explicitly set to ``None`` are sent
    as ``null`` so the server applies its own default. ``offset`` and
    ``limit`` are always sent.
    """

    offset: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)
    filter: FilterExpression | None = None
    sort: list[str] | None = None
    attributes_to_retrieve: Attributes | None = Field(
        default=None, alias="attributesToRetrieve"
    )
    attributes_to_crop: Attributes | None = Field(default=None, alias="attributesToCrop")
    crop_length: int | None = Field(default=None, ge=0, alias="cropLength")
    attributes_to_highlight: Attributes | None = Field(
        default=None, alias="attributesToHighlight"
    )
    matches: bool | None = None
    facets_distribution: list[str] | None = Field(
        default=None, alias="facetsDistribution"
    )

    model_config = ConfigDict(
        populate_by_name=True, arbitrary_types_allowed=True, extra="forbid"
    )

    @field_validator("filter", mode="before")
    @classmethod
    def _check_filter(cls, value: Any) -> Any:
        return normalize_filter(value)

    def to_body(self, query: str | None = None) -> dict[str, Any]:
        """Build the JSON body of a search request.

        ``None`` and ``""`` both produce a placeholder search: the ``q`` key
        is omitted and every document matching the filters is returned.
        """
        body: dict[str, Any] = {}
        if query:
            body["q"] = query
        options = self.model_dump(by_alias=True, exclude_unset=True, mode="json")
        offset = options.pop("offset", None)
        limit = options.pop("limit", None)
        body["offset"] = DEFAULT_OFFSET if offset is None else offset
        body["limit"] = DEFAULT_LIMIT if limit is None else limit
        body.update(options)
        return body


class MatchRange(BaseModel):
    """Position of one match inside a field, in codepoints."""

    start: int
    length: int


class Hit(BaseModel):
    """One document of a search result.

    The document's own fields are kept as extra data; ``_formatted`` and
    ``_matchesInfo`` are exposed as ``formatted`` and ``matches_info``.
    """

    formatted: dict[str, Any] | None = Field(default=None, alias="_formatted")
    matches_info: dict[str, list[MatchRange]] | None = Field(
        default=None, alias="_matchesInfo"
    )

    model_config = ConfigDict(extra="allow")

    @property
    def document(self) -> dict[str, Any]:
        """The document fields, without the formatting metadata."""
        return dict(self.model_extra or {})

    def __getitem__(self, key: str) -> Any:
        return self.document[key]

    def __contains__(self, key: object) -> bool:
        return key in (self.model_extra or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self.document.get(key, default)


class SearchResult(BaseModel):
    """Response of the search route."""

    hits: list[Hit] = Field(default_factory=list)
    offset: int = DEFAULT_OFFSET
    limit: int = DEFAULT_LIMIT
    nb_hits: int | None = Field(default=None, alias="nbHits")
    exhaustive_nb_hits: bool | None = Field(default=None, alias="exhaustiveNbHits")
    estimated_total_hits: int | None = Field(default=None, alias="estimatedTotalHits")
    processing_time_ms: int = Field(default=0, alias="processingTimeMs")
    query: str = ""
    facets_distribution: dict[str, dict[str, int]] | None = Field(
        default=None, alias="facetsDistribution"
    )
    exhaustive_facets_count: bool | None = Field(
        default=None, alias="exhaustiveFacetsCount"
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def documents(self) -> list[dict[str, Any]]:
        """Plain documents of every hit."""
        return [hit.document for hit in self.hits]
