"""Base classes for facet processors."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from solr_facets.result import Result


class Stage(str, Enum):
    """Extension points of the facet lifecycle, in pipeline order."""

    PRE_QUERY = "pre_query"
    BUILD = "build"
    SORT = "sort"
    POST_QUERY = "post_query"


class Processor(ABC):
    """A unit of work applied to a facet at one or more stages.

    Subclasses declare their stages and default weights in ``stages`` and
    implement the hook of every declared stage.
    """

    id: str = ""
    label: str = ""
    description: str = ""
    stages: Dict[Stage, int] = {}
    locked: bool = False
    hidden: bool = False

    def __init__(self, settings: Optional[Dict[str, Any]] = None, facet: Any = None):
        """Initialize the processor.

        Args:
            settings: Facet-scoped settings, merged over default_configuration()
            facet: Facet the processor is configured for
        """
        self.facet = facet
        self.configuration = {**self.default_configuration(), **(settings or {})}

    def default_configuration(self) -> Dict[str, Any]:
        return {}

    def get_configuration(self) -> Dict[str, Any]:
        return dict(self.configuration)

    def get_stage_weights(self) -> Dict[Stage, int]:
        return {Stage(stage): weight for stage, weight in self.stages.items()}

    def supports_stage(self, stage: Stage) -> bool:
        return Stage(stage) in self.get_stage_weights()

    def get_default_weight(self, stage: Stage) -> int:
        return self.get_stage_weights().get(Stage(stage), 0)

    def is_locked(self) -> bool:
        return self.locked

    def is_hidden(self) -> bool:
        return self.hidden

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class PreQueryProcessor(Processor):
    """Processor running before the query is dispatched."""

    @abstractmethod
    def pre_query(self, facet: Any) -> None:
        """Alter the facet before its query type shapes the query."""
        pass


class BuildProcessor(Processor):
    """Processor transforming results right after they are built."""

    @abstractmethod
    def build(self, facet: Any, results: List[Result]) -> List[Result]:
        """Transform the facet's results.

        Args:
            facet: Facet being processed
            results: Output of the previous processor

        Returns:
            Results handed to the next processor
        """
        pass


class SortProcessor(Processor):
    """Processor contributing one comparison to the sort stage."""

    def default_configuration(self) -> Dict[str, Any]:
        return {"sort": "ASC"}

    @abstractmethod
    def sort_results(self, a: Result, b: Result) -> int:
        """Compare two results in ascending order.

        Returns:
            Negative, zero or positive, like a cmp function
        """
        pass

    def compare(self, a: Result, b: Result) -> int:
        """Compare two results honoring the configured direction."""
        result = self.sort_results(a, b)
        if str(self.configuration.get("sort", "ASC")).upper() == "DESC":
            return -result
        return result


class PostQueryProcessor(Processor):
    """Processor transforming results after sorting."""

    @abstractmethod
    def post_query(self, facet: Any, results: List[Result]) -> List[Result]:
        """Transform the facet's sorted results."""
        pass


STAGE_INTERFACES = {
    Stage.PRE_QUERY: PreQueryProcessor,
    Stage.BUILD: BuildProcessor,
    Stage.SORT: SortProcessor,
    Stage.POST_QUERY: PostQueryProcessor,
}
