"""Registry of available processor definitions."""

import pkgutil
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Type, Union

from loguru import logger

from solr_facets.exceptions import ProcessorError
from solr_facets.processors.base import Processor


@dataclass
class ProcessorDefinition:
    """A processor known to the registry.

    ``implementation`` is either the processor class or a dotted path
    ("package.module:ClassName") resolved on first use.
    """

    id: str
    implementation: Union[Type[Processor], str, None]
    label: str = ""
    description: str = ""


class ProcessorRegistry:
    """Ordered collection of processor definitions.

    Iteration order is registration order; it breaks weight ties in the
    processor pipeline.
    """

    def __init__(self, definitions: Optional[List[ProcessorDefinition]] = None):
        self._definitions: Dict[str, ProcessorDefinition] = {}
        for definition in definitions or []:
            self.add_definition(definition)

    def add_definition(self, definition: ProcessorDefinition) -> None:
        """Add a definition.

        Raises:
            ProcessorError: If a definition with the same id already exists
        """
        if definition.id in self._definitions:
            raise ProcessorError(f"Processor {definition.id} is already registered")
        self._definitions[definition.id] = definition

    def register(self, processor_class: Type[Processor]) -> Type[Processor]:
        """Register a processor class under its own id. Usable as a decorator."""
        self.add_definition(ProcessorDefinition(
            id=processor_class.id,
            implementation=processor_class,
            label=processor_class.label,
            description=processor_class.description,
        ))
        return processor_class

    def get_definitions(self) -> Dict[str, ProcessorDefinition]:
        """Definitions keyed by id, in registration order."""
        return dict(self._definitions)

    def get_definition(self, processor_id: str) -> ProcessorDefinition:
        try:
            return self._definitions[processor_id]
        except KeyError:
            raise ProcessorError(f"Unknown processor: {processor_id}")

    def resolve(self, definition: ProcessorDefinition) -> Optional[Type[Processor]]:
        """Resolve the implementation class of a definition.

        Returns:
            The processor class, or None (with a logged warning) when it cannot
            be resolved
        """
        implementation = definition.implementation
        if isinstance(implementation, str):
            try:
                implementation = pkgutil.resolve_name(implementation)
            except (ImportError, AttributeError, ValueError):
                logger.warning(
                    f"Processor {definition.id} specifies a non-existing class "
                    f"{definition.implementation}"
                )
                return None

        if not isinstance(implementation, type) or not issubclass(implementation, Processor):
            logger.warning(
                f"Processor {definition.id} specifies a non-existing class "
                f"{definition.implementation!r}"
            )
            return None
        return implementation

    def create_instance(
        self,
        processor_id: str,
        settings: Optional[Dict[str, Any]] = None,
        facet: Any = None
    ) -> Optional[Processor]:
        """Instantiate a registered processor.

        Returns:
            The processor, or None when its implementation cannot be resolved

        Raises:
            ProcessorError: If the processor id is unknown
        """
        processor_class = self.resolve(self.get_definition(processor_id))
        if processor_class is None:
            return None
        processor = processor_class(settings=settings, facet=facet)
        # A definition may register a class under an alias.
        processor.id = processor_id
        return processor

    def __iter__(self) -> Iterator[ProcessorDefinition]:
        return iter(list(self._definitions.values()))

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, processor_id: object) -> bool:
        return processor_id in self._definitions
