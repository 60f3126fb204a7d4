"""Numeric query type with fixed-width buckets."""

from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, Dict

from solr_facets.exceptions import ConfigurationError, QueryTypeError
from solr_facets.query_types.range import RangeQueryType


def format_number(value: Decimal) -> str:
    """Render a decimal without exponent or trailing zeros."""
    return format(value.normalize(), "f")


class NumericGranularQueryType(RangeQueryType):
    """Buckets numbers into intervals of ``granularity`` width.

    A value v falls into the bucket starting at floor(v / granularity) *
    granularity.
    """

    id = "numeric"
    default_granularity = 1

    @property
    def granularity(self) -> Decimal:
        setting = self.facet.config.widget.config.get("granularity", self.default_granularity)
        try:
            granularity = Decimal(str(setting))
        except InvalidOperation:
            raise ConfigurationError(f"Invalid granularity {setting!r} on facet {self.facet.id}")
        if not granularity.is_finite() or granularity <= 0:
            raise ConfigurationError(f"Granularity must be positive on facet {self.facet.id}")
        return granularity

    def _to_decimal(self, value: str) -> Decimal:
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise QueryTypeError(f"Not a number: {value!r}")
        if not number.is_finite():
            raise QueryTypeError(f"Not a finite number: {value!r}")
        return number

    def calculate_range(self, value: str) -> Dict[str, Any]:
        """Bounds of a bucket, both inclusive when filtering.

        A value equal to ``stop`` is counted in the next bucket, but an active
        bucket still matches it: selecting 10 - 20 also matches 20.
        """
        start = self._to_decimal(value)
        return {
            "start": format_number(start),
            "stop": format_number(start + self.granularity),
        }

    def calculate_result_filter(self, value: str) -> Dict[str, str]:
        granularity = self.granularity
        number = self._to_decimal(value)
        start = (number / granularity).to_integral_value(rounding=ROUND_FLOOR) * granularity
        return {
            "raw": format_number(start),
            "display": f"{format_number(start)} - {format_number(start + granularity)}",
        }
