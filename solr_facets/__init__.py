"""Faceted navigation engine for Solr."""

__version__ = "0.1.0"

from solr_facets.config import FacetConfig, SolrConfig
from solr_facets.facet import Facet
from solr_facets.manager import FacetManager
from solr_facets.result import Result

__all__ = [
    "FacetConfig",
    "SolrConfig",
    "Facet",
    "FacetManager",
    "Result",
]
