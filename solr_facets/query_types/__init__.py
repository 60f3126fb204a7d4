"""Query types available to facets."""

from typing import Any, Dict, List, Optional, Type

from solr_facets.exceptions import QueryTypeError
from solr_facets.interfaces import Query
from solr_facets.query_types.base import FACET_OPTIONS_KEY, QueryType
from solr_facets.query_types.date import DateQueryType
from solr_facets.query_types.numeric import NumericGranularQueryType
from solr_facets.query_types.range import RangeQueryType
from solr_facets.query_types.string import StringQueryType

QUERY_TYPES: Dict[str, Type[QueryType]] = {
    query_type.id: query_type
    for query_type in (StringQueryType, NumericGranularQueryType, DateQueryType)
}


def create_query_type(
    query_type_id: str,
    facet: Any,
    query: Optional[Query] = None,
    results: Optional[List[Dict[str, Any]]] = None,
    query_types: Optional[Dict[str, Type[QueryType]]] = None
) -> QueryType:
    """Instantiate a query type by id.

    Raises:
        QueryTypeError: If the id is unknown
    """
    query_types = QUERY_TYPES if query_types is None else query_types
    try:
        query_type_class = query_types[query_type_id]
    except KeyError:
        raise QueryTypeError(f"Unknown query type: {query_type_id}")
    return query_type_class(facet, query=query, results=results)


__all__ = [
    "FACET_OPTIONS_KEY",
    "QueryType",
    "RangeQueryType",
    "StringQueryType",
    "NumericGranularQueryType",
    "DateQueryType",
    "QUERY_TYPES",
    "create_query_type",
]
