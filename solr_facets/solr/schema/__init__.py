"""Schema management package for the Solr facet source."""

from solr_facets.solr.schema.fields import FieldManager

__all__ = ["FieldManager"]
