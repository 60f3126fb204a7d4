"""Base widget."""

from typing import Any, Collection, Dict, List, Optional

from solr_facets.exceptions import QueryTypeError
from solr_facets.result import Result


class Widget:
    """Presentation of a facet.

    A widget chooses which query type a facet uses, among those its facet
    source supports, and shapes result data for renderers.
    """

    id = "links"
    label = "List of links"
    preferred_query_type = "string"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.configuration = {**self.default_configuration(), **(config or {})}

    def default_configuration(self) -> Dict[str, Any]:
        return {"show_numbers": False, "soft_limit": 0}

    def get_query_type(self, query_types: Collection[str]) -> str:
        """Pick the query type of a facet.

        Args:
            query_types: Query type ids supported by the facet source

        Returns:
            One of the given query type ids

        Raises:
            QueryTypeError: If the preferred query type is not available
        """
        if self.preferred_query_type not in query_types:
            raise QueryTypeError(
                f"Widget {self.id} requires query type {self.preferred_query_type}, "
                f"available: {', '.join(sorted(query_types)) or 'none'}"
            )
        return self.preferred_query_type

    def build_item(self, result: Result) -> Dict[str, Any]:
        show_numbers = bool(self.configuration.get("show_numbers"))
        item = {
            "value": result.display_value,
            "raw_value": result.raw_value,
            "show_count": show_numbers,
            "count": result.count if show_numbers else None,
            "is_active": result.active,
            "url": result.url,
        }
        if result.children:
            item["children"] = [self.build_item(child) for child in result.children]
        return item

    def build(self, facet: Any) -> List[Dict[str, Any]]:
        """Build render data for a facet's results.

        Items beyond the soft limit are flagged ``hidden`` so renderers can
        collapse them; they are not dropped.
        """
        soft_limit = int(self.configuration.get("soft_limit") or 0)
        items = []
        for position, result in enumerate(facet.get_results()):
            item = self.build_item(result)
            item["hidden"] = bool(soft_limit) and position >= soft_limit
            items.append(item)
        return items
