"""Exceptions for the facet engine and its Solr backend."""


class FacetError(Exception):
    """Base exception for facet-related errors."""
    pass


class ConfigurationError(FacetError):
    """Configuration-related errors."""
    pass


class QueryTypeError(FacetError):
    """Raised when a query type cannot be resolved or cannot interpret a value."""
    pass


class ProcessorError(FacetError):
    """Processor-related errors."""
    pass


class SolrError(FacetError):
    """Base exception for Solr-related errors."""
    pass


class ConnectionError(SolrError):
    """Connection-related errors."""
    pass


class QueryError(SolrError):
    """Query-related errors."""
    pass


class SchemaError(SolrError):
    """Schema-related errors."""
    pass
