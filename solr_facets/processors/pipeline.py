"""Resolution and execution of a facet's processors, stage by stage."""

import functools
from typing import Any, Callable, Dict, List, Mapping, Optional

from loguru import logger

from solr_facets.exceptions import FacetError, ProcessorError
from solr_facets.processors.base import STAGE_INTERFACES, Processor, SortProcessor, Stage
from solr_facets.processors.registry import ProcessorRegistry
from solr_facets.result import Result


def effective_weight(
    stage_defaults: Mapping[Stage, int],
    overrides: Mapping[str, int],
    stage: Stage
) -> int:
    """Weight of a processor for a stage: the facet override, else the default.

    Args:
        stage_defaults: Default weights declared by the processor
        overrides: Weights stored in the facet's processor configuration
        stage: Stage to resolve

    Returns:
        Effective weight, 0 when neither is set
    """
    stage = Stage(stage)
    for key, weight in overrides.items():
        if getattr(key, "value", key) == stage.value:
            return int(weight)
    for key, weight in stage_defaults.items():
        if getattr(key, "value", key) == stage.value:
            return int(weight)
    return 0


class ProcessorPipeline:
    """Runs the enabled processors of a facet in weight order.

    The pipeline holds no facet state; instances are created per facet from
    the registry each time the facet's processors are loaded.
    """

    def __init__(self, registry: Optional[ProcessorRegistry] = None):
        if registry is None:
            from solr_facets.processors import PROCESSORS
            registry = PROCESSORS
        self.registry = registry

    def load_processors(self, facet: Any) -> Dict[str, Processor]:
        """Instantiate every resolvable processor for a facet.

        Definitions whose implementation cannot be resolved are skipped with
        a warning.

        Returns:
            Processors keyed by id, in registry order
        """
        configs = facet.get_processor_configs()
        processors = {}
        for processor_id in self.registry.get_definitions():
            config = configs.get(processor_id)
            settings = config.settings if config is not None else {}
            processor = self.registry.create_instance(processor_id, settings, facet=facet)
            if processor is not None:
                processors[processor_id] = processor
        return processors

    def enabled_processors(self, facet: Any) -> Dict[str, Processor]:
        """Processors enabled for a facet: configured ones and locked ones."""
        configs = facet.get_processor_configs()
        enabled = {}
        for processor_id, processor in self.load_processors(facet).items():
            if processor_id in configs:
                enabled[processor_id] = processor
            elif processor.is_locked():
                logger.warning(
                    f"Locked processor {processor_id} has no configuration on facet {facet.id}"
                )
                enabled[processor_id] = processor
        return enabled

    def get_processors(self, facet: Any, only_enabled: bool = True) -> Dict[str, Processor]:
        if only_enabled:
            return self.enabled_processors(facet)
        return self.load_processors(facet)

    def processors_for_stage(
        self,
        facet: Any,
        stage: Stage,
        only_enabled: bool = True
    ) -> List[Processor]:
        """Processors supporting a stage, ordered by effective weight.

        Equal weights keep registry order, as sorted() is stable.

        Args:
            facet: Facet to resolve processors for
            stage: Stage to run
            only_enabled: Skip processors that are not enabled on the facet

        Returns:
            Processors in execution order
        """
        stage = Stage(stage)
        configs = facet.get_processor_configs()
        weighted = []
        for processor_id, processor in self.get_processors(facet, only_enabled).items():
            if not processor.supports_stage(stage):
                continue
            config = configs.get(processor_id)
            overrides = config.weights if config is not None else {}
            weighted.append((effective_weight(processor.get_stage_weights(), overrides, stage), processor))

        weighted = sorted(weighted, key=lambda item: item[0])
        return [processor for _, processor in weighted]

    def _runnable(self, facet: Any, stage: Stage) -> List[Processor]:
        interface = STAGE_INTERFACES[stage]
        processors = []
        for processor in self.processors_for_stage(facet, stage):
            if not isinstance(processor, interface):
                logger.warning(
                    f"Processor {processor.id} declares stage {stage.value} "
                    f"but does not implement it"
                )
                continue
            processors.append(processor)
        return processors

    def _call(self, facet: Any, processor: Processor, stage: Stage, hook: Callable, *args: Any) -> Any:
        """Call a processor hook, turning unexpected exceptions into ProcessorError.

        Raises:
            ProcessorError: If the hook fails or a result stage does not return a list
        """
        try:
            output = hook(*args)
        except FacetError:
            raise
        except Exception as e:
            raise ProcessorError(
                f"Processor {processor.id} failed at stage {stage.value} on facet {facet.id}: {str(e)}"
            ) from e
        if stage in (Stage.BUILD, Stage.POST_QUERY) and not isinstance(output, list):
            raise ProcessorError(
                f"Processor {processor.id} returned {type(output).__name__} "
                f"instead of a list at stage {stage.value} on facet {facet.id}"
            )
        return output

    def run_pre_query(self, facet: Any) -> None:
        """Run the pre_query stage."""
        for processor in self._runnable(facet, Stage.PRE_QUERY):
            self._call(facet, processor, Stage.PRE_QUERY, processor.pre_query, facet)

    def run_build(self, facet: Any) -> List[Result]:
        """Run the build stage, chaining each processor's output into the next."""
        results = list(facet.get_results())
        for processor in self._runnable(facet, Stage.BUILD):
            results = self._call(facet, processor, Stage.BUILD, processor.build, facet, results)
        facet.set_results(results)
        return facet.get_results()

    def run_sort(self, facet: Any) -> List[Result]:
        """Run the sort stage.

        The sort processors form one comparison: for every pair of results the
        lowest-weight processor with a non-zero answer decides.
        """
        sorters: List[SortProcessor] = self._runnable(facet, Stage.SORT)
        if not sorters:
            return facet.get_results()

        def compare(a: Result, b: Result) -> int:
            for sorter in sorters:
                result = self._call(facet, sorter, Stage.SORT, sorter.compare, a, b)
                if result:
                    return result
            return 0

        facet.set_results(sorted(facet.get_results(), key=functools.cmp_to_key(compare)))
        return facet.get_results()

    def run_post_query(self, facet: Any) -> List[Result]:
        """Run the post_query stage, chaining outputs like the build stage."""
        results = list(facet.get_results())
        for processor in self._runnable(facet, Stage.POST_QUERY):
            results = self._call(facet, processor, Stage.POST_QUERY, processor.post_query, facet, results)
        facet.set_results(results)
        return facet.get_results()

    def run_stage(self, facet: Any, stage: Stage) -> Optional[List[Result]]:
        """Run one stage by name."""
        stage = Stage(stage)
        if stage is Stage.PRE_QUERY:
            self.run_pre_query(facet)
            return None
        if stage is Stage.BUILD:
            return self.run_build(facet)
        if stage is Stage.SORT:
            return self.run_sort(facet)
        return self.run_post_query(facet)
