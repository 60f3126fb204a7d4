"""Interfaces for the collaborators the facet engine talks to."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set


class ConditionGroup(ABC):
    """Interface for a group of filter conditions joined by one conjunction."""

    @abstractmethod
    def add_condition(self, field: str, value: Any, operator: str = "=") -> "ConditionGroup":
        """Add a single field condition.

        Args:
            field: Backend field the condition applies to
            value: Value to compare against
            operator: One of "=", "<>", "<", "<=", ">", ">="

        Returns:
            The group itself, for chaining
        """
        pass

    @abstractmethod
    def add_condition_group(self, group: "ConditionGroup") -> "ConditionGroup":
        """Nest another condition group inside this one.

        Args:
            group: Group to nest

        Returns:
            The group itself, for chaining
        """
        pass


class Query(ABC):
    """Interface for the backend query object facets are attached to."""

    @abstractmethod
    def get_options(self) -> Dict[str, Any]:
        """Get the mutable option bag of the query.

        Returns:
            Options dictionary, mutated in place by query types
        """
        pass

    @abstractmethod
    def create_condition_group(
        self,
        conjunction: str = "AND",
        tags: Optional[List[str]] = None
    ) -> ConditionGroup:
        """Create a new, detached condition group.

        Args:
            conjunction: "AND" or "OR"
            tags: Tags identifying the group (e.g. "facet:category")

        Returns:
            New condition group
        """
        pass

    @abstractmethod
    def add_condition_group(self, group: ConditionGroup) -> "Query":
        """Attach a condition group to the query.

        Args:
            group: Group to attach

        Returns:
            The query itself, for chaining
        """
        pass


class FacetSource(ABC):
    """Interface for the collaborator owning the backend query of a set of facets."""

    @abstractmethod
    def get_query_types_for_facet(self, facet: Any) -> Set[str]:
        """List the query type ids the backend supports for a facet's field.

        Args:
            facet: Facet to inspect

        Returns:
            Set of query type ids

        Raises:
            SchemaError: If the field cannot be inspected
        """
        pass

    @abstractmethod
    def get_query(self) -> Optional[Query]:
        """Get the query of the current request.

        Returns:
            The query, or None when the source is not active in this request
        """
        pass

    @abstractmethod
    def execute(self, query: Query) -> Dict[str, List[Dict[str, Any]]]:
        """Dispatch a query and return its raw facet aggregations.

        Args:
            query: Query shaped by the facets' query types

        Returns:
            Raw entries ({"filter": ..., "count": ...}) keyed by field identifier

        Raises:
            SolrError: If the backend call fails
        """
        pass

    def is_rendered_in_current_request(self) -> bool:
        """Whether the search page of this source is shown in the current request."""
        return self.get_query() is not None
