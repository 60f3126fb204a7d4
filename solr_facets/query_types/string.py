"""Exact-match query type."""

from typing import Dict

from solr_facets.query_types.base import QueryType


class StringQueryType(QueryType):
    """One bucket per distinct field value."""

    id = "string"

    def execute(self) -> None:
        if self.query is None:
            return

        self.add_facet_options()

        active_items = self.facet.get_active_items()
        if active_items:
            field = self.facet.field_identifier
            comparison = "<>" if self.facet.exclude else "="
            item_filter = self.create_filter()
            for value in active_items:
                item_filter.add_condition(field, value, comparison)
            self.query.add_condition_group(item_filter)

    def calculate_result_filter(self, value: str) -> Dict[str, str]:
        return {"raw": value, "display": value}
