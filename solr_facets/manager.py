"""Coordinates the facets of one facet source through a request."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Type

from loguru import logger

from solr_facets.exceptions import ConfigurationError, FacetError
from solr_facets.facet import Facet
from solr_facets.interfaces import FacetSource, Query
from solr_facets.processors import ProcessorPipeline
from solr_facets.query_types import create_query_type
from solr_facets.utils.formatting import format_error, format_facet, format_facets
from solr_facets.widgets import WIDGETS, Widget


class FacetManager:
    """Runs every facet of a facet source through query, build and render.

    Failures are isolated per facet: a facet whose computation raises is
    logged, recorded in ``errors`` and left with no results, while the other
    facets are computed normally.
    """

    def __init__(
        self,
        facet_source: FacetSource,
        pipeline: Optional[ProcessorPipeline] = None,
        widgets: Optional[Dict[str, Type[Widget]]] = None
    ):
        """Initialize the manager.

        Args:
            facet_source: Source the facets aggregate over
            pipeline: Processor pipeline, defaults to the built-in processors
            widgets: Widget classes by id, defaults to the built-in widgets
        """
        self.facet_source = facet_source
        self.pipeline = pipeline or ProcessorPipeline()
        self.widgets = WIDGETS if widgets is None else widgets
        self.errors: Dict[str, FacetError] = {}
        self._facets: Dict[str, Facet] = {}

    def add_facet(self, facet: Facet) -> None:
        """Register a facet.

        Raises:
            ConfigurationError: If the facet belongs to another facet source
        """
        source_id = getattr(self.facet_source, "source_id", None)
        if source_id is not None and facet.facet_source_id != source_id:
            raise ConfigurationError(
                f"Facet {facet.id} belongs to facet source {facet.facet_source_id}, not {source_id}"
            )
        self._facets[facet.id] = facet

    def get_facets(self) -> List[Facet]:
        return list(self._facets.values())

    def get_facet(self, facet_id: str) -> Optional[Facet]:
        return self._facets.get(facet_id)

    def set_active_filters(self, filters: Mapping[str, Iterable[str]]) -> None:
        """Set the active items of each facet from request filters keyed by field alias."""
        facets_by_alias = {facet.field_alias: facet for facet in self._facets.values()}
        for alias, values in filters.items():
            facet = facets_by_alias.get(alias)
            if facet is None:
                logger.debug(f"Ignoring filter {alias}: no facet uses this alias")
                continue
            if isinstance(values, str):
                values = [values]
            facet.set_active_items(values)

    def _fail(self, facet: Facet, error: FacetError) -> None:
        logger.error(f"Facet {facet.id} failed: {str(error)}")
        self.errors[facet.id] = error
        facet.set_results([])

    def alter_query(self, query: Query) -> None:
        """Let every facet shape the backend query."""
        for facet in self._facets.values():
            if facet.id in self.errors:
                continue
            try:
                self.pipeline.run_pre_query(facet)
                query_type_id = facet.get_query_type(self.facet_source, self.widgets)
                create_query_type(query_type_id, facet, query=query).execute()
            except FacetError as e:
                self._fail(facet, e)

    def process_facets(self) -> List[Facet]:
        """Compute the results of every facet for the current request.

        Returns:
            The registered facets, with results set
        """
        self.errors = {}
        query = self.facet_source.get_query()
        if query is None:
            logger.debug("Facet source has no active query, facets stay empty")
            for facet in self._facets.values():
                facet.set_results([])
            return self.get_facets()

        self.alter_query(query)

        try:
            raw_results = self.facet_source.execute(query)
        except FacetError as e:
            for facet in self._facets.values():
                self._fail(facet, e)
            return self.get_facets()

        for facet in self._facets.values():
            if facet.id in self.errors:
                continue
            try:
                query_type_id = facet.get_query_type(self.facet_source, self.widgets)
                query_type = create_query_type(
                    query_type_id,
                    facet,
                    query=query,
                    results=raw_results.get(facet.field_identifier, []),
                )
                query_type.build()
                self.pipeline.run_build(facet)
                self.pipeline.run_sort(facet)
                self.pipeline.run_post_query(facet)
            except FacetError as e:
                self._fail(facet, e)

        return self.get_facets()

    def build(self, facet: Facet) -> Dict[str, Any]:
        """Build the render output of a facet.

        Returns an empty dict when the facet is only shown alongside its facet
        source and the source is not part of the current request.
        """
        if (
            facet.only_visible_when_facet_source_is_visible
            and not self.facet_source.is_rendered_in_current_request()
        ):
            return {}

        widget = facet.get_widget(self.widgets)
        items = widget.build(facet)

        empty_text = None
        if facet.empty_behavior.get("behavior") == "text":
            empty_text = facet.empty_behavior.get("text", "")

        formatted = format_facet(facet, items, empty_text)
        formatted["widget"] = widget.id
        if facet.id in self.errors:
            formatted["error"] = format_error(self.errors[facet.id])
        return formatted

    def build_all(self) -> str:
        """Build every visible facet and serialize them to JSON."""
        built = (self.build(facet) for facet in self._facets.values())
        return format_facets(formatted for formatted in built if formatted)
