"""Processors shipped with the engine."""

import re
from typing import Any, Dict, List

from solr_facets.exceptions import ProcessorError
from solr_facets.processors.base import BuildProcessor, PostQueryProcessor, SortProcessor, Stage
from solr_facets.result import Result


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _natural_key(value: str) -> List[Any]:
    """Split a string into text and number chunks for natural ordering."""
    return [
        (0, int(chunk), "") if chunk.isdigit() else (1, 0, chunk)
        for chunk in re.split(r"(\d+)", value.casefold())
        if chunk
    ]


class CountLimitProcessor(BuildProcessor):
    """Drops results whose count is outside the configured bounds."""

    id = "count_limit"
    label = "Count limit"
    description = "Show only results whose count is within the configured bounds."
    stages = {Stage.BUILD: 50}

    def default_configuration(self) -> Dict[str, Any]:
        return {"minimum_items": 1, "maximum_items": 0}

    def build(self, facet: Any, results: List[Result]) -> List[Result]:
        minimum = int(self.configuration.get("minimum_items") or 0)
        maximum = int(self.configuration.get("maximum_items") or 0)
        if maximum and minimum > maximum:
            raise ProcessorError(
                f"count_limit on facet {getattr(facet, 'id', None)}: "
                f"minimum_items {minimum} exceeds maximum_items {maximum}"
            )
        return [
            result for result in results
            if result.count >= minimum and (not maximum or result.count <= maximum)
        ]


class ExcludeSpecifiedItemsProcessor(BuildProcessor):
    """Drops results matching a list of values or a regular expression."""

    id = "exclude_specified_items"
    label = "Exclude specified items"
    description = "Exclude items by raw value, as a comma separated list or a regular expression."
    stages = {Stage.BUILD: 50}

    def default_configuration(self) -> Dict[str, Any]:
        return {"exclude": "", "regex": False, "invert": False}

    def _matches(self, raw_value: str) -> bool:
        exclude = str(self.configuration.get("exclude") or "")
        if self.configuration.get("regex"):
            try:
                return re.search(exclude, raw_value) is not None
            except re.error as e:
                raise ProcessorError(f"Invalid exclude pattern {exclude!r}: {str(e)}")
        items = [item.strip() for item in exclude.split(",") if item.strip()]
        return raw_value in items

    def build(self, facet: Any, results: List[Result]) -> List[Result]:
        if not self.configuration.get("exclude"):
            return results
        invert = bool(self.configuration.get("invert"))
        return [result for result in results if self._matches(result.raw_value) == invert]


class BooleanItemProcessor(BuildProcessor):
    """Relabels boolean buckets."""

    id = "boolean_item"
    label = "Boolean item label"
    description = "Display configurable labels for boolean values."
    stages = {Stage.BUILD: 35}

    TRUE_VALUES = ("1", "true")
    FALSE_VALUES = ("0", "false")

    def default_configuration(self) -> Dict[str, Any]:
        return {"on_value": "On", "off_value": "Off"}

    def build(self, facet: Any, results: List[Result]) -> List[Result]:
        for result in results:
            value = result.raw_value.lower()
            if value in self.TRUE_VALUES:
                result.display_value = str(self.configuration["on_value"])
            elif value in self.FALSE_VALUES:
                result.display_value = str(self.configuration["off_value"])
        return results


class HideActiveItemsProcessor(BuildProcessor):
    """Drops results that are currently active."""

    id = "hide_active_items"
    label = "Hide active items"
    description = "Do not display items that are active."
    stages = {Stage.BUILD: 60}

    def build(self, facet: Any, results: List[Result]) -> List[Result]:
        return [result for result in results if not result.active]


class ActiveWidgetOrderProcessor(SortProcessor):
    id = "active_widget_order"
    label = "Sort by active state"
    description = "Sorts the widget results by active state."
    stages = {Stage.SORT: 10}

    def default_configuration(self) -> Dict[str, Any]:
        return {"sort": "DESC"}

    def sort_results(self, a: Result, b: Result) -> int:
        return _cmp(a.active, b.active)


class CountWidgetOrderProcessor(SortProcessor):
    id = "count_widget_order"
    label = "Sort by count"
    description = "Sorts the widget results by count."
    stages = {Stage.SORT: 30}

    def default_configuration(self) -> Dict[str, Any]:
        return {"sort": "DESC"}

    def sort_results(self, a: Result, b: Result) -> int:
        return _cmp(a.count, b.count)


class DisplayValueWidgetOrderProcessor(SortProcessor):
    id = "display_value_widget_order"
    label = "Sort by display value"
    description = "Sorts the widget results by display value, naturally and case-insensitively."
    stages = {Stage.SORT: 40}

    def sort_results(self, a: Result, b: Result) -> int:
        return _cmp(_natural_key(a.display_value), _natural_key(b.display_value))


class RawValueWidgetOrderProcessor(SortProcessor):
    id = "raw_value_widget_order"
    label = "Sort by raw value"
    description = "Sorts the widget results by raw value."
    stages = {Stage.SORT: 50}

    def sort_results(self, a: Result, b: Result) -> int:
        return _cmp(a.raw_value, b.raw_value)


class HardLimitProcessor(PostQueryProcessor):
    """Keeps only the first results after sorting."""

    id = "hard_limit"
    label = "Hard limit"
    description = "Limit the number of displayed results."
    stages = {Stage.POST_QUERY: 50}

    def default_configuration(self) -> Dict[str, Any]:
        return {"limit": 0}

    def post_query(self, facet: Any, results: List[Result]) -> List[Result]:
        limit = int(self.configuration.get("limit") or 0)
        if limit <= 0:
            return results
        return results[:limit]


BUILTIN_PROCESSORS = [
    BooleanItemProcessor,
    CountLimitProcessor,
    ExcludeSpecifiedItemsProcessor,
    HideActiveItemsProcessor,
    ActiveWidgetOrderProcessor,
    CountWidgetOrderProcessor,
    DisplayValueWidgetOrderProcessor,
    RawValueWidgetOrderProcessor,
    HardLimitProcessor,
]
