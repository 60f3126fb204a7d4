"""Date query type with calendar buckets."""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from solr_facets.exceptions import ConfigurationError, QueryTypeError
from solr_facets.query_types.range import RangeQueryType

SOLR_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Solr stores dates with millisecond precision.
STOP_PRECISION = timedelta(milliseconds=1)

# granularity: (bucket key format, display format)
GRANULARITIES = {
    "year": ("%Y", "%Y"),
    "month": ("%Y-%m", "%B %Y"),
    "day": ("%Y-%m-%d", "%B %d, %Y"),
    "hour": ("%Y-%m-%dT%H", "%B %d, %Y %H:00"),
    "minute": ("%Y-%m-%dT%H:%M", "%B %d, %Y %H:%M"),
    "second": ("%Y-%m-%dT%H:%M:%S", "%B %d, %Y %H:%M:%S"),
}

TIMESTAMP_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")


def parse_date(value: str) -> datetime:
    """Parse a unix timestamp or an ISO-8601 date into an aware UTC datetime.

    Raises:
        QueryTypeError: If the value is neither
    """
    value = str(value).strip()
    try:
        if TIMESTAMP_PATTERN.match(value):
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except (ValueError, OverflowError, OSError):
        raise QueryTypeError(f"Not a date: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _next_interval(start: datetime, granularity: str) -> datetime:
    if granularity == "year":
        return start.replace(year=start.year + 1)
    if granularity == "month":
        if start.month == 12:
            return start.replace(year=start.year + 1, month=1)
        return start.replace(month=start.month + 1)
    step = {
        "day": timedelta(days=1),
        "hour": timedelta(hours=1),
        "minute": timedelta(minutes=1),
        "second": timedelta(seconds=1),
    }[granularity]
    return start + step


def format_solr_date(date: datetime) -> str:
    """Render a UTC datetime for Solr, with milliseconds when it has any."""
    if date.microsecond:
        return date.strftime("%Y-%m-%dT%H:%M:%S") + f".{date.microsecond // 1000:03d}Z"
    return date.strftime(SOLR_DATE_FORMAT)


class DateQueryType(RangeQueryType):
    """Buckets dates by year, month, day, hour, minute or second (UTC)."""

    id = "date"
    default_granularity = "month"

    @property
    def granularity(self) -> str:
        granularity = self.facet.config.widget.config.get("granularity", self.default_granularity)
        if granularity not in GRANULARITIES:
            raise ConfigurationError(
                f"Unknown date granularity {granularity!r} on facet {self.facet.id}"
            )
        return granularity

    def calculate_range(self, value: str) -> Dict[str, Any]:
        granularity = self.granularity
        key_format = GRANULARITIES[granularity][0]
        try:
            start = datetime.strptime(value, key_format).replace(tzinfo=timezone.utc)
        except ValueError:
            raise QueryTypeError(f"Not a {granularity} bucket: {value!r}")
        stop = _next_interval(start, granularity) - STOP_PRECISION
        return {
            "start": format_solr_date(start),
            "stop": format_solr_date(stop),
        }

    def calculate_result_filter(self, value: str) -> Dict[str, str]:
        key_format, display_format = GRANULARITIES[self.granularity]
        date = parse_date(value)
        return {
            "raw": date.strftime(key_format),
            "display": date.strftime(display_format),
        }
