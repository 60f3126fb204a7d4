"""Base query type for interval buckets."""

from abc import abstractmethod
from typing import Any, Dict

from solr_facets.query_types.base import QueryType


class RangeQueryType(QueryType):
    """Groups raw values into intervals.

    ``calculate_result_filter`` maps a raw value to the key of its interval;
    ``calculate_range`` maps that key back to the interval bounds. Values
    falling into the same interval are merged into one result by ``build``.
    """

    def execute(self) -> None:
        if self.query is None:
            return

        self.add_facet_options()

        active_items = self.facet.get_active_items()
        if not active_items:
            return

        field = self.facet.field_identifier
        exclude = self.facet.exclude
        item_filters = self.create_filter()
        for value in active_items:
            bounds = self.calculate_range(value)
            item_filter = self.query.create_condition_group(
                "OR" if exclude else "AND", [f"facet:{field}"]
            )
            item_filter.add_condition(field, bounds["start"], "<" if exclude else ">=")
            item_filter.add_condition(field, bounds["stop"], ">" if exclude else "<=")
            item_filters.add_condition_group(item_filter)
        self.query.add_condition_group(item_filters)

    @abstractmethod
    def calculate_range(self, value: str) -> Dict[str, Any]:
        """Calculate the interval of an active filter value.

        Args:
            value: Bucket key, as produced by calculate_result_filter()["raw"]

        Returns:
            Dictionary with "start" and "stop" bounds
        """
        pass
