"""Widgets available to facets."""

from typing import Any, Dict, Optional, Type

from solr_facets.exceptions import ConfigurationError
from solr_facets.widgets.base import Widget


class CheckboxWidget(Widget):
    id = "checkbox"
    label = "List of checkboxes"


class DropdownWidget(Widget):
    id = "dropdown"
    label = "Dropdown"


class DateWidget(Widget):
    """Date facets need the date query type even where string is available."""

    id = "date"
    label = "Date"
    preferred_query_type = "date"

    def default_configuration(self) -> Dict[str, Any]:
        return {**super().default_configuration(), "granularity": "month"}


class RangeSliderWidget(Widget):
    id = "range_slider"
    label = "Range slider"
    preferred_query_type = "numeric"

    def default_configuration(self) -> Dict[str, Any]:
        return {**super().default_configuration(), "granularity": 1}


WIDGETS: Dict[str, Type[Widget]] = {
    widget.id: widget
    for widget in (Widget, CheckboxWidget, DropdownWidget, DateWidget, RangeSliderWidget)
}


def create_widget(
    widget_id: str,
    config: Optional[Dict[str, Any]] = None,
    widgets: Optional[Dict[str, Type[Widget]]] = None
) -> Widget:
    """Instantiate a widget by id.

    Raises:
        ConfigurationError: If the widget id is unknown
    """
    widgets = WIDGETS if widgets is None else widgets
    try:
        widget_class = widgets[widget_id]
    except KeyError:
        raise ConfigurationError(f"Unknown widget: {widget_id}")
    return widget_class(config)


__all__ = [
    "Widget",
    "CheckboxWidget",
    "DropdownWidget",
    "DateWidget",
    "RangeSliderWidget",
    "WIDGETS",
    "create_widget",
]
