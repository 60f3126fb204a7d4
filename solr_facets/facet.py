"""Facet configuration and per-request state."""

import re
from typing import Any, Dict, Iterable, List, Optional, Type

from solr_facets.config import FacetConfig, ProcessorSettings
from solr_facets.exceptions import QueryTypeError
from solr_facets.interfaces import FacetSource
from solr_facets.result import Result
from solr_facets.widgets import Widget, create_widget


class Facet:
    """A navigational dimension over search results.

    Wraps a persisted FacetConfig and carries the state of one request: the
    active items taken from the request filters and the results built from
    the backend response.
    """

    def __init__(self, config: FacetConfig):
        self.config = config
        self._active_items: List[str] = []
        self._results: List[Result] = []

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Facet":
        return cls(FacetConfig(**data))

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name or self.config.id

    @property
    def description(self) -> str:
        return self.config.description

    @property
    def field_identifier(self) -> str:
        return self.config.field_identifier

    @property
    def facet_source_id(self) -> str:
        return self.config.facet_source_id

    @property
    def field_alias(self) -> str:
        """Identifier of the facet in request filters."""
        if self.config.url_alias:
            return self.config.url_alias
        return re.sub(r"[:/]+", "_", self.config.field_identifier)

    @property
    def query_operator(self) -> str:
        return self.config.query_operator

    @property
    def hard_limit(self) -> int:
        return self.config.hard_limit

    @property
    def min_count(self) -> int:
        return self.config.min_count

    @property
    def exclude(self) -> bool:
        return self.config.exclude

    @property
    def empty_behavior(self) -> Dict[str, Any]:
        return self.config.empty_behavior

    @property
    def only_visible_when_facet_source_is_visible(self) -> bool:
        return self.config.only_visible_when_facet_source_is_visible

    def get_processor_configs(self) -> Dict[str, ProcessorSettings]:
        return self.config.processor_configs

    def set_processor_configs(self, processor_configs: Dict[str, ProcessorSettings]) -> None:
        self.config.processor_configs = dict(processor_configs)

    def get_widget(self, widgets: Optional[Dict[str, Type[Widget]]] = None) -> Widget:
        """Instantiate the configured widget with its settings."""
        return create_widget(self.config.widget.type, self.config.widget.config, widgets)

    def get_query_type(
        self,
        facet_source: FacetSource,
        widgets: Optional[Dict[str, Type[Widget]]] = None
    ) -> str:
        """Resolve the query type id of the facet.

        The facet source lists what the backend supports for the field and the
        widget picks among those, unless the facet pins a query_type_name.

        Raises:
            QueryTypeError: If no supported query type can be picked
        """
        query_types = set(facet_source.get_query_types_for_facet(self))
        if self.config.query_type_name:
            query_type = self.config.query_type_name
        else:
            query_type = self.get_widget(widgets).get_query_type(query_types)
        if query_type not in query_types:
            raise QueryTypeError(
                f"Unsupported query type {query_type} selected for facet {self.id} "
                f"(widget {self.config.widget.type})"
            )
        return query_type

    def set_active_item(self, value: str) -> None:
        value = str(value)
        if value not in self._active_items:
            self._active_items.append(value)

    def set_active_items(self, values: Iterable[str]) -> None:
        for value in values:
            self.set_active_item(value)

    def get_active_items(self) -> List[str]:
        return list(self._active_items)

    def is_active_value(self, value: str) -> bool:
        return str(value) in self._active_items

    def get_results(self) -> List[Result]:
        return list(self._results)

    def set_results(self, results: Iterable[Result]) -> None:
        """Replace the results and mark the active ones.

        Active state is recomputed from the active items on every call.
        """
        self._results = list(results)
        self._mark_active(self._results)

    def _mark_active(self, results: List[Result]) -> None:
        for result in results:
            result.set_active_state(result.raw_value in self._active_items)
            if result.children:
                self._mark_active(result.children)

    def reset(self) -> None:
        """Drop the per-request state."""
        self._active_items = []
        self._results = []

    def __repr__(self) -> str:
        return f"Facet(id={self.id!r}, field={self.field_identifier!r})"
