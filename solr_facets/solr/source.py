"""Facet source backed by a Solr collection."""

from typing import Any, Dict, List, Optional, Set

import pysolr
import requests
from loguru import logger

from solr_facets.config import SolrConfig
from solr_facets.exceptions import ConnectionError, QueryError, SolrError
from solr_facets.interfaces import FacetSource
from solr_facets.solr.constants import DEFAULT_QUERY
from solr_facets.solr.query import SolrQuery
from solr_facets.solr.schema import FieldManager


def parse_facet_fields(facets: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """Convert Solr facet_fields into raw aggregation entries.

    Solr returns each field as a flat [value, count, value, count, ...] list.
    Values are wrapped in plain double quotes, the way query types expect
    them. Escaping is left to the filter queries built from them.
    """
    raw_results = {}
    for field, values in (facets or {}).get("facet_fields", {}).items():
        entries = []
        for index in range(0, len(values) - 1, 2):
            entries.append({"filter": f'"{values[index]}"', "count": int(values[index + 1])})
        raw_results[field] = entries
    return raw_results


class SolrFacetSource(FacetSource):
    """Facet source for searches on one Solr collection."""

    def __init__(
        self,
        source_id: str,
        config: SolrConfig,
        collection: Optional[str] = None,
        solr_client: Optional[pysolr.Solr] = None,
        field_manager: Optional[FieldManager] = None
    ):
        """Initialize the facet source.

        Args:
            source_id: Id facets use to reference this source
            config: Solr connection settings
            collection: Collection to search, defaults to the configured one
            solr_client: Optional pre-configured Solr client
            field_manager: Optional pre-configured field manager

        Raises:
            SolrError: If no collection is given and none is configured
        """
        self.source_id = source_id
        self.config = config
        self.collection = collection or config.default_collection
        if not self.collection:
            raise SolrError("No collection specified and no default collection configured")

        self.field_manager = field_manager or FieldManager(
            config.solr_base_url, timeout=config.connection_timeout
        )
        self._solr_client = solr_client
        self._query: Optional[SolrQuery] = None

        logger.info(f"Initialized facet source {source_id} on collection {self.collection}")

    @property
    def solr_client(self) -> pysolr.Solr:
        if self._solr_client is None:
            self._solr_client = pysolr.Solr(
                f"{self.config.solr_base_url}/{self.collection}",
                timeout=self.config.connection_timeout
            )
        return self._solr_client

    def search(self, q: str = DEFAULT_QUERY, **options: Any) -> SolrQuery:
        """Start the search of the current request.

        Args:
            q: Main query
            **options: Extra Solr parameters (rows, sort, ...)

        Returns:
            The query facets will be attached to
        """
        self._query = SolrQuery(q, options)
        return self._query

    def get_query(self) -> Optional[SolrQuery]:
        return self._query

    def get_query_types_for_facet(self, facet: Any) -> Set[str]:
        return self.field_manager.get_query_types(self.collection, facet.field_identifier)

    def execute(self, query: SolrQuery) -> Dict[str, List[Dict[str, Any]]]:
        """Send the query to Solr.

        Returns:
            Raw aggregation entries keyed by field

        Raises:
            ConnectionError: If Solr cannot be reached
            QueryError: If Solr rejects the query
        """
        params = query.to_params()
        q = params.pop("q", DEFAULT_QUERY)
        params.setdefault("rows", 0)
        try:
            results = self.solr_client.search(q, **params)
        except requests.exceptions.ConnectionError as e:
            raise ConnectionError(f"Failed to connect to Solr: {str(e)}")
        except pysolr.SolrError as e:
            raise QueryError(f"Facet query failed: {str(e)}")

        logger.debug(f"Solr returned {getattr(results, 'hits', 0)} hits")
        return parse_facet_fields(getattr(results, "facets", None))
