"""Schema lookups for choosing facet query types."""

from typing import Any, Dict, Set

import requests
from loguru import logger

from solr_facets.exceptions import SchemaError
from solr_facets.solr.constants import (
    DATE_FIELD_CLASSES,
    FIELD_TYPE_MAPPING,
    NUMERIC_FIELD_CLASSES,
    QUERY_TYPES_BY_FAMILY,
)


def classify_field_class(field_class: str) -> str:
    """Map a Solr field type class to a field family."""
    if field_class in NUMERIC_FIELD_CLASSES:
        return "numeric"
    if field_class in DATE_FIELD_CLASSES:
        return "date"
    return "string"


class FieldManager:
    """Reads Solr schemas and maps fields to the query types they support.

    Schemas are fetched once per collection and kept until clear_cache().
    """

    def __init__(self, solr_base_url: str, timeout: int = 10):
        """Initialize the field manager.

        Args:
            solr_base_url: Base URL for Solr instance
            timeout: Request timeout in seconds
        """
        self.solr_base_url = solr_base_url.rstrip("/")
        self.timeout = timeout
        self._schema_cache: Dict[str, Dict[str, Any]] = {}

    def _fetch_schema(self, collection: str) -> Dict[str, Any]:
        url = f"{self.solr_base_url}/{collection}/schema"
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to get schema for collection {collection}: {str(e)}")
            raise SchemaError(f"Failed to get schema for collection {collection}: {str(e)}")

        if not isinstance(payload, dict) or "schema" not in payload:
            raise SchemaError(f"Invalid schema response for collection {collection}")
        logger.debug(f"Loaded schema of collection {collection}")
        return payload["schema"]

    def get_schema(self, collection: str) -> Dict[str, Any]:
        """Get the schema of a collection, fetching it on first use.

        Raises:
            SchemaError: If schema cannot be retrieved
        """
        if collection not in self._schema_cache:
            self._schema_cache[collection] = self._fetch_schema(collection)
        return self._schema_cache[collection]

    @staticmethod
    def _find_field_type(schema: Dict[str, Any], field_name: str) -> str:
        for field in schema.get("fields", []):
            if field.get("name") == field_name and "type" in field:
                return field["type"]
        raise SchemaError(f"Field not found: {field_name}")

    def get_field_type(self, collection: str, field_name: str) -> str:
        """Get the field type name of a field.

        Raises:
            SchemaError: If the field does not exist
        """
        return self._find_field_type(self.get_schema(collection), field_name)

    def get_field_family(self, collection: str, field_name: str) -> str:
        """Classify a field as "string", "numeric" or "date".

        The class of the field's type decides; type names missing from the
        schema's fieldTypes fall back to well-known Solr type names.
        """
        schema = self.get_schema(collection)
        field_type = self._find_field_type(schema, field_name)

        for type_definition in schema.get("fieldTypes", []):
            if type_definition.get("name") == field_type:
                return classify_field_class(type_definition.get("class", ""))
        return FIELD_TYPE_MAPPING.get(field_type, "string")

    def get_query_types(self, collection: str, field_name: str) -> Set[str]:
        """Query type ids usable to facet on a field."""
        return set(QUERY_TYPES_BY_FAMILY[self.get_field_family(collection, field_name)])

    def clear_cache(self) -> None:
        self._schema_cache = {}
