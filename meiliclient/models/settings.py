"""Index settings models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from meiliclient.models.attributes import AttributeSelection, Attributes

DEFAULT_RANKING_RULES = [
    "words",
    "typo",
    "proximity",
    "attribute",
    "sort",
    "exactness",
]


class TypoToleranceSettings(BaseModel):
    """Typo tolerance settings."""

    enabled: bool = True
    min_word_size_for_typos: dict[str, int] = Field(
        default_factory=lambda: {"oneTypo": 5, "twoTypos": 9},
        alias="minWordSizeForTypos",
    )
    disable_on_words: list[str] = Field(default_factory=list, alias="disableOnWords")
    disable_on_attributes: list[str] = Field(
        default_factory=list, alias="disableOnAttributes"
    )

    model_config = {"populate_by_name": True}


class FacetingSettings(BaseModel):
    """Faceting settings."""

    max_values_per_facet: int = Field(default=100, alias="maxValuesPerFacet")

    model_config = {"populate_by_name": True}


class PaginationSettings(BaseModel):
    """Pagination settings."""

    max_total_hits: int = Field(default=1000, alias="maxTotalHits")

    model_config = {"populate_by_name": True}


class Settings(BaseModel):
    """Effective settings of an index, as returned by the settings route."""

    ranking_rules: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RANKING_RULES), alias="rankingRules"
    )
    distinct_attribute: str | None = Field(default=None, alias="distinctAttribute")
    searchable_attributes: Attributes = Field(
        default_factory=AttributeSelection.all, alias="searchableAttributes"
    )
    displayed_attributes: Attributes = Field(
        default_factory=AttributeSelection.all, alias="displayedAttributes"
    )
    filterable_attributes: Attributes = Field(
        default_factory=AttributeSelection, alias="filterableAttributes"
    )
    sortable_attributes: Attributes = Field(
        default_factory=AttributeSelection, alias="sortableAttributes"
    )
    stop_words: list[str] = Field(default_factory=list, alias="stopWords")
    synonyms: dict[str, list[str]] = Field(default_factory=dict)
    typo_tolerance: TypoToleranceSettings | None = Field(
        default=None, alias="typoTolerance"
    )
    faceting: FacetingSettings | None = None
    pagination: PaginationSettings | None = None

    model_config = ConfigDict(
        populate_by_name=True, arbitrary_types_allowed=True, extra="allow"
    )


class SettingsUpdate(BaseModel):
    """Partial settings update.

    Each field has three states. A field that is never assigned is left out
    of the payload and the server keeps its value. A field assigned ``None``
    is sent as ``null`` and the server resets it to its default. Any other
    value replaces the current one.

    Example:
        SettingsUpdate(distinctAttribute="title", stopWords=None)
        # -> {"distinctAttribute": "title", "stopWords": null}
    """

    ranking_rules: list[str] | None = Field(default=None, alias="rankingRules")
    distinct_attribute: str | None = Field(default=None, alias="distinctAttribute")
    searchable_attributes: Attributes | None = Field(
        default=None, alias="searchableAttributes"
    )
    displayed_attributes: Attributes | None = Field(
        default=None, alias="displayedAttributes"
    )
    filterable_attributes: Attributes | None = Field(
        default=None, alias="filterableAttributes"
    )
    sortable_attributes: Attributes | None = Field(
        default=None, alias="sortableAttributes"
    )
    stop_words: list[str] | None = Field(default=None, alias="stopWords")
    synonyms: dict[str, list[str]] | None = None
    typo_tolerance: TypoToleranceSettings | None = Field(
        default=None, alias="typoTolerance"
    )
    faceting: FacetingSettings | None = None
    pagination: PaginationSettings | None = None

    model_config = ConfigDict(
        populate_by_name=True, arbitrary_types_allowed=True, extra="forbid"
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialise only the fields that were explicitly provided."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")
