"""Solr backend for the facet engine."""

from solr_facets.solr.query import SolrConditionGroup, SolrQuery
from solr_facets.solr.schema import FieldManager
from solr_facets.solr.source import SolrFacetSource, parse_facet_fields

__all__ = [
    "SolrConditionGroup",
    "SolrQuery",
    "FieldManager",
    "SolrFacetSource",
    "parse_facet_fields",
]
