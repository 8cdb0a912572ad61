"""Tests for search models."""

import pytest
from pydantic import ValidationError

from meiliclient.models.attributes import AttributeSelection
from meiliclient.models.search import SearchParameters, SearchResult


class TestSearchParameters:
    """Tests for building search request bodies."""

    def test_defaults(self):
        """Test that offset and limit defaults are always sent."""
        assert SearchParameters().to_body("prince") == {
            "q": "prince",
            "offset": 0,
            "limit": 20,
        }

    @pytest.mark.parametrize("query", [None, ""])
    def test_placeholder_search(self, query):
        """Test that None and empty queries build the same placeholder body."""
        params = SearchParameters(filter=["genre = fantasy"])
        assert params.to_body(query) == {
            "offset": 0,
            "limit": 20,
            "filter": ["genre = fantasy"],
        }

    def test_null_offset_and_limit_fall_back(self):
        """Test that explicit None offset/limit use the defaults."""
        body = SearchParameters(offset=None, limit=None).to_body("a")
        assert body["offset"] == 0
        assert body["limit"] == 20

    def test_all_options(self):
        """Test the wire names of every option."""
        params = SearchParameters(
            offset=1,
            limit=5,
            filter='title = "Le Petit Prince"',
            sort=["id:asc"],
            attributes_to_retrieve=["id", "title"],
            attributes_to_crop=AttributeSelection.all(),
            crop_length=6,
            attributes_to_highlight=["*"],
            matches=True,
            facets_distribution=["genre"],
        )
        assert params.to_body("prince") == {
            "q": "prince",
            "offset": 1,
            "limit": 5,
            "filter": 'title = "Le Petit Prince"',
            "sort": ["id:asc"],
            "attributesToRetrieve": ["id", "title"],
            "attributesToCrop": ["*"],
            "cropLength": 6,
            "attributesToHighlight": ["*"],
            "matches": True,
            "facetsDistribution": ["genre"],
        }

    def test_explicit_null_option_is_sent(self):
        """Test that an option set to None is forwarded as null."""
        body = SearchParameters(attributesToHighlight=None).to_body("a")
        assert body["attributesToHighlight"] is None

    def test_nested_filter_forwarded_verbatim(self):
        """Test that nested filters keep their structure."""
        params = SearchParameters(
            filter=("genre = romance", ("genre = romance", "genre = fantasy"))
        )
        assert params.to_body("a")["filter"] == [
            "genre = romance",
            ["genre = romance", "genre = fantasy"],
        ]

    def test_filter_leaves_must_be_strings(self):
        """Test that non-string filter leaves are rejected."""
        with pytest.raises(ValidationError):
            SearchParameters(filter=["id < 3", 4])

    def test_unknown_option_rejected(self):
        """Test that misspelled options fail instead of being dropped."""
        with pytest.raises(ValidationError):
            SearchParameters(limt=3)

    def test_negative_limit_rejected(self):
        """Test that a negative limit is rejected."""
        with pytest.raises(ValidationError):
            SearchParameters(limit=-1)


class TestSearchResult:
    """Tests for decoding search responses."""

    def test_decode_with_formatting(self):
        """Test that _formatted and _matchesInfo are exposed."""
        result = SearchResult.model_validate(
            {
                "hits": [
                    {
                        "id": 456,
                        "title": "Le Petit Prince",
                        "_formatted": {"id": "456", "title": "Petit <em>Prince</em>"},
                        "_matchesInfo": {
                            "comment": [{"start": 22, "length": 6}],
                            "title": [{"start": 9, "length": 6}],
                        },
                    }
                ],
                "offset": 0,
                "limit": 20,
                "nbHits": 1,
                "exhaustiveNbHits": False,
                "processingTimeMs": 1,
                "query": "prince",
            }
        )

        hit = result.hits[0]
        assert hit["id"] == 456
        assert hit.document == {"id": 456, "title": "Le Petit Prince"}
        assert "_formatted" not in hit
        assert hit.formatted["title"] == "Petit <em>Prince</em>"
        assert hit.matches_info["title"][0].start == 9
        assert hit.matches_info["comment"][0].length == 6
        assert result.nb_hits == 1
        assert result.query == "prince"

    def test_decode_facets(self):
        """Test decoding the facet distribution."""
        result = SearchResult.model_validate(
            {
                "hits": [{"id": 1}, {"id": 2}],
                "offset": 0,
                "limit": 20,
                "nbHits": 2,
                "exhaustiveNbHits": False,
                "facetsDistribution": {"genre": {"romance": 2}},
                "exhaustiveFacetsCount": False,
                "processingTimeMs": 0,
                "query": "a",
            }
        )
        assert result.facets_distribution == {"genre": {"romance": 2}}
        assert result.exhaustive_facets_count is False
        assert result.documents == [{"id": 1}, {"id": 2}]

    def test_hit_without_formatting(self):
        """Test that plain hits have no formatting metadata."""
        result = SearchResult.model_validate({"hits": [{"id": 1, "formatted": "x"}]})
        assert result.hits[0].formatted is None
        assert result.hits[0]["formatted"] == "x"
