"""Formatting of facet output for renderers and API consumers."""

import json
from typing import Any, Dict, Iterable, List, Optional

from solr_facets.exceptions import FacetError
from solr_facets.result import Result


def format_result(result: Result, show_numbers: bool = True) -> Dict[str, Any]:
    """Format a single result.

    Args:
        result: Result to format
        show_numbers: Include the count

    Returns:
        JSON-serializable dictionary
    """
    formatted = {
        "value": result.display_value,
        "raw_value": result.raw_value,
        "active": result.active,
    }
    if show_numbers:
        formatted["count"] = result.count
    if result.url is not None:
        formatted["url"] = result.url
    if result.children:
        formatted["children"] = [format_result(child, show_numbers) for child in result.children]
    return formatted


def format_facet(
    facet: Any,
    items: Optional[List[Dict[str, Any]]] = None,
    empty_text: Optional[str] = None
) -> Dict[str, Any]:
    """Format a facet and its render items.

    Args:
        facet: Facet to format
        items: Widget render items, defaults to formatted results
        empty_text: Text shown instead of items when there are none

    Returns:
        JSON-serializable dictionary
    """
    if items is None:
        items = [format_result(result) for result in facet.get_results()]

    formatted = {
        "id": facet.id,
        "name": facet.name,
        "field": facet.field_identifier,
        "alias": facet.field_alias,
        "operator": facet.query_operator,
        "active_items": facet.get_active_items(),
        "items": items,
    }
    if not items and empty_text:
        formatted["empty_text"] = empty_text
    return formatted


def format_facets(formatted_facets: Iterable[Dict[str, Any]]) -> str:
    """Serialize formatted facets to JSON."""
    return json.dumps({"facets": list(formatted_facets)}, default=str)


def format_error(error: Exception) -> Dict[str, str]:
    """Format an error for the facet output.

    Args:
        error: Exception to format

    Returns:
        Dictionary with the error code, type and message
    """
    error_code = "FACET_ERROR" if isinstance(error, FacetError) else "INTERNAL_ERROR"
    return {"code": error_code, "type": type(error).__name__, "message": str(error)}
