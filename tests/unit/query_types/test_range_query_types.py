"""Tests for the numeric and date query types."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from solr_facets.exceptions import ConfigurationError, QueryTypeError
from solr_facets.query_types import DateQueryType, NumericGranularQueryType
from solr_facets.query_types.date import parse_date
from solr_facets.query_types.numeric import format_number
from solr_facets.solr.query import SolrQuery


@pytest.fixture
def price_facet(make_facet):
    """Create a numeric facet with buckets of 10."""
    return make_facet(
        id="price",
        field_identifier="price",
        widget={"type": "range_slider", "config": {"granularity": 10}},
    )


@pytest.fixture
def created_facet(make_facet):
    """Create a date facet with monthly buckets."""
    return make_facet(
        id="created",
        field_identifier="created",
        widget={"type": "date", "config": {"granularity": "month"}},
    )


class TestNumericGranularQueryType:
    """Test cases for NumericGranularQueryType."""

    @pytest.mark.parametrize("value,raw,display", [
        ("0", "0", "0 - 10"),
        ("9.99", "0", "0 - 10"),
        ("10", "10", "10 - 20"),
        ("57", "50", "50 - 60"),
        ("-3", "-10", "-10 - 0"),
    ])
    def test_calculate_result_filter(self, price_facet, value, raw, display):
        """Test values are floored to their bucket."""
        result_filter = NumericGranularQueryType(price_facet).calculate_result_filter(value)
        assert result_filter == {"raw": raw, "display": display}

    def test_decimal_granularity(self, make_facet):
        """Test fractional bucket widths."""
        facet = make_facet(widget={"type": "range_slider", "config": {"granularity": 0.5}})
        query_type = NumericGranularQueryType(facet)
        assert query_type.calculate_result_filter("1.7") == {"raw": "1.5", "display": "1.5 - 2"}
        assert query_type.calculate_range("1.5") == {"start": "1.5", "stop": "2"}

    def test_default_granularity(self, facet):
        """Test the granularity defaults to 1."""
        assert NumericGranularQueryType(facet).calculate_result_filter("4.2")["raw"] == "4"

    def test_round_trip(self, price_facet):
        """Test a value lies within the range of its bucket."""
        query_type = NumericGranularQueryType(price_facet)
        for value in ("0", "13", "99.5", "-7"):
            bounds = query_type.calculate_range(query_type.calculate_result_filter(value)["raw"])
            assert float(bounds["start"]) <= float(value) < float(bounds["stop"])

    def test_shared_boundary(self, price_facet):
        """Test a bucket's upper bound is inclusive and also starts the next bucket."""
        query_type = NumericGranularQueryType(price_facet)
        assert query_type.calculate_result_filter("20")["raw"] == "20"
        assert query_type.calculate_range("10") == {"start": "10", "stop": "20"}

        query = SolrQuery()
        price_facet.set_active_item("10")
        NumericGranularQueryType(price_facet, query).execute()

        assert query.get_filter_queries() == ["{!tag=facet:price}(price:[10 TO *] AND price:[* TO 20])"]

    @pytest.mark.parametrize("granularity", [0, -5, "wide"])
    def test_invalid_granularity(self, make_facet, granularity):
        """Test invalid granularities raise ConfigurationError."""
        facet = make_facet(widget={"type": "range_slider", "config": {"granularity": granularity}})
        with pytest.raises(ConfigurationError):
            NumericGranularQueryType(facet).calculate_result_filter("5")

    def test_not_a_number(self, price_facet):
        """Test non numeric values raise QueryTypeError."""
        with pytest.raises(QueryTypeError, match="Not a number"):
            NumericGranularQueryType(price_facet).calculate_result_filter("cheap")
        with pytest.raises(QueryTypeError, match="Not a finite number"):
            NumericGranularQueryType(price_facet).calculate_range("NaN")

    def test_build_merges_buckets(self, price_facet):
        """Test values in the same bucket are merged into one result."""
        entries = [
            {"filter": "12", "count": 2},
            {"filter": "17", "count": 3},
            {"filter": "25", "count": 1},
        ]
        NumericGranularQueryType(price_facet, results=entries).build()
        assert [(r.raw_value, r.display_value, r.count) for r in price_facet.get_results()] == [
            ("10", "10 - 20", 5),
            ("20", "20 - 30", 1),
        ]

    def test_execute(self, price_facet):
        """Test active buckets become range conditions."""
        query = SolrQuery()
        price_facet.set_active_item("10")
        NumericGranularQueryType(price_facet, query).execute()

        assert len(query.condition_groups) == 1
        group = query.condition_groups[0]
        assert group.tags == ["facet:price"]
        assert len(group.conditions) == 1
        item_filter = group.conditions[0]
        assert item_filter.conjunction == "AND"
        assert item_filter.conditions == [("price", "10", ">="), ("price", "20", "<=")]
        assert query.get_filter_queries() == ["{!tag=facet:price}(price:[10 TO *] AND price:[* TO 20])"]

    def test_execute_exclude(self, make_facet):
        """Test excluded buckets use strict bounds joined by OR."""
        facet = make_facet(
            field_identifier="price",
            exclude=True,
            widget={"type": "range_slider", "config": {"granularity": 10}},
        )
        query = SolrQuery()
        facet.set_active_item("10")
        NumericGranularQueryType(facet, query).execute()

        item_filter = query.condition_groups[0].conditions[0]
        assert item_filter.conjunction == "OR"
        assert item_filter.conditions == [("price", "10", "<"), ("price", "20", ">")]

    def test_execute_several_ranges_with_and(self, price_facet):
        """Test several active buckets are all required under "and"."""
        query = SolrQuery()
        price_facet.set_active_items(["10", "30"])
        NumericGranularQueryType(price_facet, query).execute()

        group = query.condition_groups[0]
        assert group.conjunction == "AND"
        assert len(group.conditions) == 2

    def test_execute_without_active_items(self, price_facet):
        """Test only the aggregation is requested when nothing is active."""
        query = SolrQuery()
        NumericGranularQueryType(price_facet, query).execute()
        assert "price" in query.get_options()["facets"]
        assert query.condition_groups == []

    def test_format_number(self):
        """Test decimals are rendered without exponent."""
        assert format_number(Decimal("1E+2")) == "100"
        assert format_number(Decimal("2.50")) == "2.5"


class TestParseDate:
    """Test cases for parse_date."""

    def test_iso_with_z(self):
        """Test Solr dates."""
        assert parse_date("2016-03-07T10:11:12Z") == datetime(2016, 3, 7, 10, 11, 12, tzinfo=timezone.utc)

    def test_timestamp(self):
        """Test unix timestamps."""
        assert parse_date("0") == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        """Test dates without timezone are taken as UTC."""
        assert parse_date("2016-03-07T10:00:00").tzinfo == timezone.utc

    def test_invalid(self):
        """Test invalid dates raise QueryTypeError."""
        with pytest.raises(QueryTypeError, match="Not a date"):
            parse_date("yesterday")


class TestDateQueryType:
    """Test cases for DateQueryType."""

    @pytest.mark.parametrize("granularity,raw,display", [
        ("year", "2016", "2016"),
        ("month", "2016-03", "March 2016"),
        ("day", "2016-03-07", "March 07, 2016"),
        ("hour", "2016-03-07T10", "March 07, 2016 10:00"),
        ("minute", "2016-03-07T10:11", "March 07, 2016 10:11"),
        ("second", "2016-03-07T10:11:12", "March 07, 2016 10:11:12"),
    ])
    def test_calculate_result_filter(self, make_facet, granularity, raw, display):
        """Test dates are truncated to their bucket."""
        facet = make_facet(widget={"type": "date", "config": {"granularity": granularity}})
        result_filter = DateQueryType(facet).calculate_result_filter("2016-03-07T10:11:12Z")
        assert result_filter == {"raw": raw, "display": display}

    @pytest.mark.parametrize("granularity,raw,start,stop", [
        ("year", "2016", "2016-01-01T00:00:00Z", "2016-12-31T23:59:59.999Z"),
        ("month", "2016-02", "2016-02-01T00:00:00Z", "2016-02-29T23:59:59.999Z"),
        ("month", "2016-12", "2016-12-01T00:00:00Z", "2016-12-31T23:59:59.999Z"),
        ("day", "2016-03-07", "2016-03-07T00:00:00Z", "2016-03-07T23:59:59.999Z"),
        ("hour", "2016-03-07T10", "2016-03-07T10:00:00Z", "2016-03-07T10:59:59.999Z"),
        ("minute", "2016-03-07T10:11", "2016-03-07T10:11:00Z", "2016-03-07T10:11:59.999Z"),
        ("second", "2016-03-07T10:11:12", "2016-03-07T10:11:12Z", "2016-03-07T10:11:12.999Z"),
    ])
    def test_calculate_range(self, make_facet, granularity, raw, start, stop):
        """Test bucket keys map back to their interval."""
        facet = make_facet(widget={"type": "date", "config": {"granularity": granularity}})
        assert DateQueryType(facet).calculate_range(raw) == {"start": start, "stop": stop}

    def test_round_trip(self, created_facet):
        """Test a date lies within the range of its bucket."""
        query_type = DateQueryType(created_facet)
        values = ("2016-03-01T00:00:00Z", "2016-03-31T23:59:59Z", "2016-03-31T23:59:59.500Z", "1457345472")
        for value in values:
            bounds = query_type.calculate_range(query_type.calculate_result_filter(value)["raw"])
            assert parse_date(bounds["start"]) <= parse_date(value) <= parse_date(bounds["stop"])

    def test_default_granularity(self, facet):
        """Test the granularity defaults to month."""
        assert DateQueryType(facet).calculate_result_filter("2016-03-07T10:11:12Z")["raw"] == "2016-03"

    def test_unknown_granularity(self, make_facet):
        """Test unknown granularities raise ConfigurationError."""
        facet = make_facet(widget={"type": "date", "config": {"granularity": "week"}})
        with pytest.raises(ConfigurationError, match="Unknown date granularity"):
            DateQueryType(facet).calculate_result_filter("2016-03-07T10:11:12Z")

    def test_invalid_bucket_key(self, created_facet):
        """Test keys not matching the granularity raise QueryTypeError."""
        with pytest.raises(QueryTypeError, match="Not a month bucket"):
            DateQueryType(created_facet).calculate_range("2016")

    def test_build(self, created_facet):
        """Test dates in the same month are merged."""
        entries = [
            {"filter": '"2016-03-01T00:00:00Z"', "count": 2},
            {"filter": '"2016-03-20T12:00:00Z"', "count": 1},
            {"filter": '"2016-04-02T08:30:00Z"', "count": 4},
        ]
        created_facet.set_active_item("2016-04")
        DateQueryType(created_facet, results=entries).build()

        assert [(r.raw_value, r.display_value, r.count, r.active) for r in created_facet.get_results()] == [
            ("2016-03", "March 2016", 3, False),
            ("2016-04", "April 2016", 4, True),
        ]

    def test_execute(self, created_facet):
        """Test active months become date range filters."""
        query = SolrQuery()
        created_facet.set_active_item("2016-03")
        DateQueryType(created_facet, query).execute()

        assert query.get_filter_queries() == [
            "{!tag=facet:created}(created:[2016-03-01T00:00:00Z TO *] AND created:[* TO 2016-03-31T23:59:59.999Z])"
        ]
