"""Static mapping between index schema fields and GSA output tags.

The tables here are the single source of truth for which fields the writer
understands: the transcoder dispatches on them and the search request
projects onto them.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class SchemaField(str, Enum):
    """Index fields read by the writer."""

    ID = "id"
    SKU = "sku"
    TITLE = "title"
    DESCRIPTION = "description"
    LAST_MODIFIED = "last_modified"
    LOAD_DATE = "load_date_dt"
    TEXT = "text_t"
    H1 = "h1_txt"
    H2 = "h2_txt"
    H3 = "h3_txt"
    H4 = "h4_txt"
    H5 = "h5_txt"
    H6 = "h6_txt"
    SIZE = "size_i"
    LANGUAGE = "language_s"


class GsaToken(str, Enum):
    """Result-level tags of the GSA XML protocol."""

    CACHE_LAST_MODIFIED = "CACHE_LAST_MODIFIED"  # date the document was crawled
    CRAWLDATE = "CRAWLDATE"
    U = "U"  # result url
    UE = "UE"  # url-encoded result url
    GD = "GD"  # keymatch description
    T = "T"  # title
    RK = "RK"
    ENT_SOURCE = "ENT_SOURCE"  # identity of the contributing node
    FS = "FS"
    S = "S"  # snippet
    LANG = "LANG"
    HAS = "HAS"  # special features of the result


class FieldRule(Enum):
    """Specific handling applied to a field without a generic tag."""

    IDENTIFIER = "identifier"
    URL = "url"
    TITLE = "title"
    DESCRIPTION = "description"
    LAST_MODIFIED = "last_modified"
    LOAD_DATE = "load_date"
    BODY = "body"
    HEADING = "heading"
    SIZE = "size"


HEADING_FIELDS = (
    SchemaField.H1,
    SchemaField.H2,
    SchemaField.H3,
    SchemaField.H4,
    SchemaField.H5,
    SchemaField.H6,
)

GENERIC_TAGS = MappingProxyType({
    SchemaField.LANGUAGE.value: GsaToken.LANG.value,
})

SPECIFIC_RULES = MappingProxyType({
    SchemaField.ID.value: FieldRule.IDENTIFIER,
    SchemaField.SKU.value: FieldRule.URL,
    SchemaField.TITLE.value: FieldRule.TITLE,
    SchemaField.DESCRIPTION.value: FieldRule.DESCRIPTION,
    SchemaField.LAST_MODIFIED.value: FieldRule.LAST_MODIFIED,
    SchemaField.LOAD_DATE.value: FieldRule.LOAD_DATE,
    SchemaField.TEXT.value: FieldRule.BODY,
    **{heading.value: FieldRule.HEADING for heading in HEADING_FIELDS},
    SchemaField.SIZE.value: FieldRule.SIZE,
})

_REQUESTED_FIELDS = frozenset(GENERIC_TAGS) | frozenset(SPECIFIC_RULES)


def generic_tag(field_name: str) -> str | None:
    return GENERIC_TAGS.get(field_name)


def field_rule(field_name: str) -> FieldRule | None:
    return SPECIFIC_RULES.get(field_name)


def requested_fields() -> frozenset[str]:
    """Projection the search engine should load for each hit."""
    return _REQUESTED_FIELDS
