"""Test configuration and fixtures."""

from typing import Any, Dict, List, Optional, Set

import pytest

from solr_facets.config import FacetConfig, SolrConfig
from solr_facets.facet import Facet
from solr_facets.interfaces import FacetSource
from solr_facets.solr.query import SolrQuery

MOCK_SOLR_CONFIG = {
    "solr_base_url": "http://localhost:8983/solr",
    "default_collection": "products",
    "connection_timeout": 10,
}

MOCK_FACET_CONFIG = {
    "id": "category",
    "name": "Category",
    "field_identifier": "category",
    "facet_source_id": "search",
}

MOCK_RAW_RESULTS = {
    "category": [
        {"filter": '"llama"', "count": 10},
        {"filter": '"badger"', "count": 20},
        {"filter": '"duck"', "count": 15},
        {"filter": '"alpaca"', "count": 9},
    ],
}


class StubFacetSource(FacetSource):
    """In-memory facet source."""

    def __init__(
        self,
        source_id: str = "search",
        query_types: Optional[Dict[str, Set[str]]] = None,
        raw_results: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        query: Optional[SolrQuery] = None
    ):
        self.source_id = source_id
        self.query_types = query_types or {}
        self.raw_results = raw_results or {}
        self.query = query
        self.executed: List[SolrQuery] = []

    def get_query_types_for_facet(self, facet: Any) -> Set[str]:
        return set(self.query_types.get(facet.field_identifier, {"string"}))

    def get_query(self) -> Optional[SolrQuery]:
        return self.query

    def execute(self, query: SolrQuery) -> Dict[str, List[Dict[str, Any]]]:
        self.executed.append(query)
        return self.raw_results


@pytest.fixture
def solr_config() -> SolrConfig:
    """Create a Solr configuration."""
    return SolrConfig(**MOCK_SOLR_CONFIG)


@pytest.fixture
def facet_config_dict() -> Dict[str, Any]:
    """Create a minimal facet definition."""
    return dict(MOCK_FACET_CONFIG)


@pytest.fixture
def make_facet():
    """Create facets from a definition, overriding the defaults."""
    def _make_facet(**overrides: Any) -> Facet:
        return Facet(FacetConfig(**{**MOCK_FACET_CONFIG, **overrides}))
    return _make_facet


@pytest.fixture
def facet(make_facet) -> Facet:
    """Create a default string facet."""
    return make_facet()


@pytest.fixture
def solr_query() -> SolrQuery:
    """Create an empty Solr query."""
    return SolrQuery()


@pytest.fixture
def facet_source(solr_query, raw_results) -> StubFacetSource:
    """Create an active facet source returning the animal buckets."""
    return StubFacetSource(raw_results=raw_results, query=solr_query)


@pytest.fixture
def raw_results() -> Dict[str, List[Dict[str, Any]]]:
    """Create raw aggregation entries keyed by field."""
    return {field: [dict(entry) for entry in entries] for field, entries in MOCK_RAW_RESULTS.items()}
