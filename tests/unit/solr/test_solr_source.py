"""Tests for solr_facets.solr.source module."""

from unittest.mock import Mock

import pysolr
import pytest
import requests

from solr_facets.exceptions import ConnectionError, QueryError, SolrError
from solr_facets.query_types.string import StringQueryType
from solr_facets.solr.query import SolrQuery
from solr_facets.solr.schema import FieldManager
from solr_facets.solr.source import SolrFacetSource, parse_facet_fields


@pytest.fixture
def mock_solr_client(mocker):
    """Create a mocked pysolr client."""
    client = mocker.Mock(spec=pysolr.Solr)
    results = mocker.Mock()
    results.hits = 54
    results.facets = {
        "facet_queries": {},
        "facet_fields": {"category": ["llama", 10, "badger", 20, "duck", 15, "alpaca", 9]},
    }
    client.search.return_value = results
    return client


@pytest.fixture
def mock_field_manager(mocker):
    """Create a mocked FieldManager."""
    manager = mocker.Mock(spec=FieldManager)
    manager.get_query_types.return_value = {"string"}
    return manager


@pytest.fixture
def facet_source(solr_config, mock_solr_client, mock_field_manager):
    """Create a Solr facet source with mocked collaborators."""
    return SolrFacetSource(
        "search",
        solr_config,
        solr_client=mock_solr_client,
        field_manager=mock_field_manager,
    )


class TestParseFacetFields:
    """Test cases for parse_facet_fields."""

    def test_parse(self):
        """Test flat value/count lists become raw entries."""
        facets = {"facet_fields": {"category": ["llama", 10, 'say "hi"', 1], "tags": []}}
        assert parse_facet_fields(facets) == {
            "category": [
                {"filter": '"llama"', "count": 10},
                {"filter": '"say "hi""', "count": 1},
            ],
            "tags": [],
        }

    def test_special_characters_survive(self, facet):
        """Test values with quotes and backslashes filter on their exact value."""
        raw = parse_facet_fields({"facet_fields": {"category": ['12" ruler', 3, "a\\b", 2]}})

        StringQueryType(facet, results=raw["category"]).build()
        assert sorted(result.raw_value for result in facet.get_results()) == ['12" ruler', "a\\b"]

        facet.set_active_items(['12" ruler', "a\\b"])
        query = SolrQuery()
        StringQueryType(facet, query=query).execute()

        assert query.get_filter_queries() == [
            '{!tag=facet:category}(category:"12\\" ruler" AND category:"a\\\\b")'
        ]

    def test_parse_empty(self):
        """Test missing facet data."""
        assert parse_facet_fields(None) == {}
        assert parse_facet_fields({}) == {}


class TestSolrFacetSource:
    """Test cases for SolrFacetSource."""

    def test_init(self, facet_source):
        """Test the default collection is used."""
        assert facet_source.source_id == "search"
        assert facet_source.collection == "products"
        assert facet_source.get_query() is None
        assert facet_source.is_rendered_in_current_request() is False

    def test_init_without_collection(self, solr_config):
        """Test a collection is required."""
        solr_config.default_collection = None
        with pytest.raises(SolrError, match="No collection specified"):
            SolrFacetSource("search", solr_config)

    def test_default_client(self, solr_config, mocker):
        """Test the pysolr client is created on first use."""
        mock_solr = mocker.patch("solr_facets.solr.source.pysolr.Solr")
        source = SolrFacetSource("search", solr_config, collection="articles")

        assert source.solr_client is mock_solr.return_value
        assert source.solr_client is mock_solr.return_value
        mock_solr.assert_called_once_with("http://localhost:8983/solr/articles", timeout=10)

    def test_search(self, facet_source):
        """Test starting a search activates the source."""
        query = facet_source.search("title:llama", sort="score desc")
        assert facet_source.get_query() is query
        assert query.q == "title:llama"
        assert query.get_options() == {"sort": "score desc"}
        assert facet_source.is_rendered_in_current_request() is True

    def test_get_query_types_for_facet(self, facet_source, mock_field_manager, facet):
        """Test query types come from the schema."""
        assert facet_source.get_query_types_for_facet(facet) == {"string"}
        mock_field_manager.get_query_types.assert_called_once_with("products", "category")

    def test_execute(self, facet_source, mock_solr_client):
        """Test the query is sent to Solr and facet fields are parsed."""
        query = facet_source.search("title:llama")
        query.get_options()["facets"] = {
            "category": {"field": "category", "limit": 0, "operator": "and", "min_count": 1, "missing": False},
        }

        raw_results = facet_source.execute(query)

        mock_solr_client.search.assert_called_once_with(
            "title:llama",
            rows=0,
            facet="true",
            **{
                "facet.field": ["category"],
                "f.category.facet.limit": -1,
                "f.category.facet.mincount": 1,
                "f.category.facet.missing": "false",
            }
        )
        assert [entry["filter"] for entry in raw_results["category"]] == ['"llama"', '"badger"', '"duck"', '"alpaca"']
        assert sum(entry["count"] for entry in raw_results["category"]) == 54

    def test_execute_keeps_rows(self, facet_source, mock_solr_client):
        """Test an explicit rows option is kept."""
        facet_source.execute(facet_source.search(rows=10))
        assert mock_solr_client.search.call_args[1]["rows"] == 10

    def test_execute_connection_error(self, facet_source, mock_solr_client):
        """Test connection failures."""
        mock_solr_client.search.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(ConnectionError, match="Failed to connect to Solr"):
            facet_source.execute(facet_source.search())

    def test_execute_query_error(self, facet_source, mock_solr_client):
        """Test Solr rejecting the query."""
        mock_solr_client.search.side_effect = pysolr.SolrError("undefined field")
        with pytest.raises(QueryError, match="Facet query failed: undefined field"):
            facet_source.execute(facet_source.search())

    def test_execute_without_facets(self, facet_source, mock_solr_client):
        """Test responses without facet data."""
        mock_solr_client.search.return_value = Mock(hits=0, facets={})
        assert facet_source.execute(facet_source.search()) == {}
