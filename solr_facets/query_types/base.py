"""Base query type."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from solr_facets.exceptions import QueryTypeError
from solr_facets.interfaces import Query
from solr_facets.result import Result

FACET_OPTIONS_KEY = "facets"


def unwrap_quotes(value: str) -> str:
    """Remove one pair of wrapping double quotes, keeping quotes inside the value."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


class QueryType(ABC):
    """Translates a facet into backend directives and backend output into results.

    An instance is bound to one facet, one query and, once the backend
    answered, the raw aggregation entries of the facet's field.
    """

    id = ""

    def __init__(
        self,
        facet: Any,
        query: Optional[Query] = None,
        results: Optional[List[Dict[str, Any]]] = None
    ):
        """Initialize the query type.

        Args:
            facet: Facet the query type works for
            query: Backend query to shape, None when the facet source is inactive
            results: Raw aggregation entries ({"filter": ..., "count": ...})
        """
        self.facet = facet
        self.query = query
        self.results = results or []

    def add_facet_options(self) -> None:
        """Request the aggregation of the facet's field on the query."""
        field = self.facet.field_identifier
        options = self.query.get_options()
        options.setdefault(FACET_OPTIONS_KEY, {})[field] = {
            "field": field,
            "limit": self.facet.hard_limit,
            "operator": self.facet.query_operator,
            "min_count": self.facet.min_count,
            "missing": False,
        }

    def create_filter(self) -> Any:
        field = self.facet.field_identifier
        return self.query.create_condition_group(
            self.facet.query_operator.upper(), [f"facet:{field}"]
        )

    @abstractmethod
    def execute(self) -> None:
        """Alter the bound query for the facet. No-op without a query."""
        pass

    @abstractmethod
    def calculate_result_filter(self, value: str) -> Dict[str, str]:
        """Interpret a raw backend value.

        Args:
            value: Raw value with wrapping quotes stripped

        Returns:
            Dictionary with "raw", the bucket key used for filtering, and
            "display", the label shown to users
        """
        pass

    def build(self, results: Optional[List[Dict[str, Any]]] = None) -> Any:
        """Turn raw aggregation entries into the facet's results.

        Entries mapping to the same bucket are merged and their counts added.
        Zero counts are dropped unless the facet uses the "or" operator.

        Args:
            results: Raw entries, replacing the bound ones when given

        Returns:
            The facet, with its results set

        Raises:
            QueryTypeError: If an entry cannot be interpreted
        """
        if results is not None:
            self.results = results

        operator = self.facet.query_operator
        facet_results: Dict[str, Result] = {}
        for entry in self.results:
            try:
                count = int(entry["count"])
                value = str(entry["filter"])
            except (KeyError, TypeError, ValueError) as e:
                raise QueryTypeError(f"Invalid aggregation entry {entry!r}: {str(e)}")

            if not count and operator != "or":
                continue

            result_filter = self.calculate_result_filter(unwrap_quotes(value))
            raw = result_filter["raw"]
            if raw in facet_results:
                existing = facet_results[raw]
                existing.set_count(existing.count + count)
            else:
                facet_results[raw] = Result(raw, result_filter["display"], count)

        self.facet.set_results(list(facet_results.values()))
        return self.facet
