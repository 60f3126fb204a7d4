"""Facet engine utilities package."""

from solr_facets.utils.formatting import (
    format_error,
    format_facet,
    format_facets,
    format_result,
)

__all__ = [
    "format_error",
    "format_facet",
    "format_facets",
    "format_result",
]
