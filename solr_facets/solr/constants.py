"""Constants for the Solr facet source."""

# Solr field type classes, by the query type family they support
NUMERIC_FIELD_CLASSES = {
    "solr.IntPointField",
    "solr.LongPointField",
    "solr.FloatPointField",
    "solr.DoublePointField",
    "solr.TrieIntField",
    "solr.TrieLongField",
    "solr.TrieFloatField",
    "solr.TrieDoubleField",
}

DATE_FIELD_CLASSES = {
    "solr.DatePointField",
    "solr.TrieDateField",
    "solr.DateRangeField",
}

# Field type names of the default configset, used when a schema does not
# list the class of a type
FIELD_TYPE_MAPPING = {
    "pint": "numeric",
    "pints": "numeric",
    "plong": "numeric",
    "plongs": "numeric",
    "pfloat": "numeric",
    "pfloats": "numeric",
    "pdouble": "numeric",
    "pdoubles": "numeric",
    "pdate": "date",
    "pdates": "date",
}

# Query types available per field family
QUERY_TYPES_BY_FAMILY = {
    "string": {"string"},
    "numeric": {"string", "numeric"},
    "date": {"string", "date"},
}

DEFAULT_QUERY = "*:*"
