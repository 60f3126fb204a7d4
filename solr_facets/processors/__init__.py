"""Facet processors and the pipeline running them."""

from solr_facets.processors.base import (
    BuildProcessor,
    PostQueryProcessor,
    PreQueryProcessor,
    Processor,
    SortProcessor,
    Stage,
)
from solr_facets.processors.builtin import BUILTIN_PROCESSORS
from solr_facets.processors.pipeline import ProcessorPipeline, effective_weight
from solr_facets.processors.registry import ProcessorDefinition, ProcessorRegistry

PROCESSORS = ProcessorRegistry()
for _processor_class in BUILTIN_PROCESSORS:
    PROCESSORS.register(_processor_class)

__all__ = [
    "BuildProcessor",
    "PostQueryProcessor",
    "PreQueryProcessor",
    "Processor",
    "SortProcessor",
    "Stage",
    "ProcessorDefinition",
    "ProcessorRegistry",
    "ProcessorPipeline",
    "effective_weight",
    "PROCESSORS",
]
