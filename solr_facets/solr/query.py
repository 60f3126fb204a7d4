"""Solr query object facets are attached to."""

import re
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from solr_facets.exceptions import QueryError
from solr_facets.interfaces import ConditionGroup, Query
from solr_facets.query_types.base import FACET_OPTIONS_KEY
from solr_facets.solr.constants import DEFAULT_QUERY

CONJUNCTIONS = ("AND", "OR")
OPERATORS = ("=", "<>", "<", "<=", ">", ">=")

PLAIN_TERM = re.compile(r"^[\w.:+-]+$")


def quote_value(value: Any) -> str:
    """Quote a value as a Lucene phrase."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def range_value(value: Any) -> str:
    """Render a range bound, quoting it only when needed."""
    value = str(value)
    if PLAIN_TERM.match(value):
        return value
    return quote_value(value)


def render_condition(field: str, value: Any, operator: str) -> str:
    """Render one field condition in Lucene syntax.

    Raises:
        QueryError: If the operator is unknown
    """
    if operator == "=":
        return f"{field}:{quote_value(value)}"
    if operator == "<>":
        return f"(*:* -{field}:{quote_value(value)})"
    if operator == ">=":
        return f"{field}:[{range_value(value)} TO *]"
    if operator == ">":
        return f"{field}:{{{range_value(value)} TO *]"
    if operator == "<=":
        return f"{field}:[* TO {range_value(value)}]"
    if operator == "<":
        return f"{field}:[* TO {range_value(value)}}}"
    raise QueryError(f"Unsupported operator: {operator}")


class SolrConditionGroup(ConditionGroup):
    """Conditions and nested groups joined by AND or OR."""

    def __init__(self, conjunction: str = "AND", tags: Optional[List[str]] = None):
        conjunction = conjunction.upper()
        if conjunction not in CONJUNCTIONS:
            raise QueryError(f"Unsupported conjunction: {conjunction}")
        self.conjunction = conjunction
        self.tags = list(tags or [])
        self.conditions: List[Union[tuple, "SolrConditionGroup"]] = []

    def add_condition(self, field: str, value: Any, operator: str = "=") -> "SolrConditionGroup":
        if operator not in OPERATORS:
            raise QueryError(f"Unsupported operator: {operator}")
        self.conditions.append((field, value, operator))
        return self

    def add_condition_group(self, group: ConditionGroup) -> "SolrConditionGroup":
        self.conditions.append(group)
        return self

    def is_empty(self) -> bool:
        return not self.conditions

    def to_solr(self) -> str:
        """Render the group as a Lucene query string."""
        clauses = []
        for condition in self.conditions:
            if isinstance(condition, SolrConditionGroup):
                if not condition.is_empty():
                    clauses.append(condition.to_solr())
            else:
                clauses.append(render_condition(*condition))
        if len(clauses) == 1:
            return clauses[0]
        return "(" + f" {self.conjunction} ".join(clauses) + ")"


class SolrQuery(Query):
    """A Solr search request being shaped by facets."""

    def __init__(self, q: str = DEFAULT_QUERY, options: Optional[Dict[str, Any]] = None):
        self.q = q or DEFAULT_QUERY
        self.options: Dict[str, Any] = dict(options or {})
        self.condition_groups: List[SolrConditionGroup] = []

    def get_options(self) -> Dict[str, Any]:
        return self.options

    def create_condition_group(
        self,
        conjunction: str = "AND",
        tags: Optional[List[str]] = None
    ) -> SolrConditionGroup:
        return SolrConditionGroup(conjunction, tags)

    def add_condition_group(self, group: ConditionGroup) -> "SolrQuery":
        self.condition_groups.append(group)
        return self

    def get_filter_queries(self) -> List[str]:
        """Render one filter query per non-empty condition group."""
        filter_queries = []
        for group in self.condition_groups:
            if group.is_empty():
                continue
            prefix = f"{{!tag={','.join(group.tags)}}}" if group.tags else ""
            filter_queries.append(prefix + group.to_solr())
        return filter_queries

    def to_params(self) -> Dict[str, Any]:
        """Convert the query into Solr request parameters.

        Facets using the "or" operator exclude their own filter from their
        counts, so unselected values of the same facet stay available.
        """
        params: Dict[str, Any] = {"q": self.q}

        filter_queries = self.get_filter_queries()
        if filter_queries:
            params["fq"] = filter_queries

        facets = self.options.get(FACET_OPTIONS_KEY, {})
        if facets:
            params["facet"] = "true"
            params["facet.field"] = []
            for field, facet_options in facets.items():
                if facet_options.get("operator") == "or":
                    params["facet.field"].append(f"{{!ex=facet:{field}}}{field}")
                else:
                    params["facet.field"].append(field)
                params[f"f.{field}.facet.limit"] = facet_options.get("limit") or -1
                params[f"f.{field}.facet.mincount"] = facet_options.get("min_count", 1)
                params[f"f.{field}.facet.missing"] = "true" if facet_options.get("missing") else "false"

        for key, value in self.options.items():
            if key != FACET_OPTIONS_KEY:
                params[key] = value

        logger.debug(f"Solr query parameters: {params}")
        return params
