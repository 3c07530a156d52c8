"""Transcodes one search hit into GSA `<R>` content."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from urllib.parse import quote

from gsa_response.config import WriterConfig
from gsa_response.errors import MalformedFieldError
from gsa_response.protocol.fields import FieldRule, GsaToken, SchemaField, field_rule, generic_tag
from gsa_response.protocol.wire import escape_attr
from gsa_response.types import (
    Element,
    Hit,
    HitDigest,
    MarkupElement,
    OutputElement,
    SnippetIndex,
)

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?\d+")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# RFC 3986 reserved characters survive; everything else is percent-encoded.
_URL_SAFE = ":/?#[]@!$&'()*+,;=%~"

FieldHandler = Callable[[HitDigest, str, str, WriterConfig], None]


def parse_integer(field_name: str, value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise MalformedFieldError(field_name, value)
    return int(value)


def format_rfc1123(epoch_ms: int) -> str:
    """Format epoch milliseconds as an RFC-1123 GMT date."""
    return format_datetime(_EPOCH + timedelta(milliseconds=epoch_ms), usegmt=True)


def _timestamp(field_name: str, value: str) -> str:
    epoch_ms = parse_integer(field_name, value)
    try:
        return format_rfc1123(epoch_ms)
    except (OverflowError, ValueError) as exc:
        # integer outside the datetime range
        raise MalformedFieldError(field_name, value) from exc


def size_bucket(size_bytes: int) -> str:
    """Kilobyte bucket, truncating toward zero."""
    kilobytes = abs(size_bytes) // 1024
    return f"{-kilobytes if size_bytes < 0 else kilobytes}k"


def _identifier(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    digest.document_id = value


def _url(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    digest.url = value
    digest.tags.append(Element(GsaToken.U.value, value))
    encoded = quote(value, safe=_URL_SAFE) if config.encode_ue_url else value
    digest.tags.append(Element(GsaToken.UE.value, encoded))


def _title(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    digest.title = value
    digest.tags.append(Element(GsaToken.T.value, value))
    digest.texts.append(value)


def _description(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    digest.description = value
    digest.texts.append(value)


def _last_modified(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    formatted = _timestamp(field_name, value)
    digest.last_modified = formatted
    digest.tags.append(Element(GsaToken.CACHE_LAST_MODIFIED.value, formatted))
    digest.texts.append(value)


def _load_date(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    formatted = _timestamp(field_name, value)
    digest.load_date = formatted
    digest.tags.append(Element(GsaToken.CRAWLDATE.value, formatted))
    digest.texts.append(value)


def _text(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    digest.texts.append(value)


def _size(digest: HitDigest, field_name: str, value: str, config: WriterConfig) -> None:
    digest.size_bytes = parse_integer(field_name, value)


HANDLERS: dict[FieldRule, FieldHandler] = {
    FieldRule.IDENTIFIER: _identifier,
    FieldRule.URL: _url,
    FieldRule.TITLE: _title,
    FieldRule.DESCRIPTION: _description,
    FieldRule.LAST_MODIFIED: _last_modified,
    FieldRule.LOAD_DATE: _load_date,
    FieldRule.BODY: _text,
    # headings are multi-valued, every occurrence counts
    FieldRule.HEADING: _text,
    FieldRule.SIZE: _size,
}


def digest_hit(hit: Hit, config: WriterConfig | None = None) -> HitDigest:
    """Interpret a hit's fields in iteration order.

    Positional tags (language, url, title, dates) keep the order in which
    their fields were encountered. A malformed number raises
    `MalformedFieldError` unless `strict_numeric_fields` is off, in which
    case the value is dropped.
    """
    config = config or WriterConfig()
    digest = HitDigest()
    for field_name, values in hit.fields.items():
        tag = generic_tag(field_name)
        rule = field_rule(field_name) if tag is None else None
        for value in values:
            if tag is not None:
                digest.tags.append(Element(tag, value))
                if field_name == SchemaField.LANGUAGE.value:
                    digest.language = value
                continue
            if rule is None:
                continue
            try:
                HANDLERS[rule](digest, field_name, value, config)
            except MalformedFieldError as exc:
                if config.strict_numeric_fields:
                    raise
                logger.warning("Skipping %s on hit %s: %s", field_name, digest.document_id, exc)
    return digest


def resolve_snippet(digest: HitDigest, snippets: SnippetIndex) -> str:
    """First highlighting candidate, else the stored description."""
    candidates = snippets.get(digest.document_id) if digest.document_id is not None else None
    if candidates:
        return candidates[0]
    return digest.description


def features_markup(digest: HitDigest) -> str:
    return (
        f'<HAS><L/><C SZ="{size_bucket(digest.size_bytes)}" '
        f'CID="{escape_attr(digest.document_id or "")}" ENC="UTF-8"/></HAS>'
    )


def transcode(
    hit: Hit,
    snippets: SnippetIndex,
    *,
    source_identity: str,
    config: WriterConfig | None = None,
) -> list[OutputElement]:
    digest = digest_hit(hit, config)
    elements: list[OutputElement] = list(digest.tags)
    elements.append(Element(GsaToken.S.value, resolve_snippet(digest, snippets)))
    elements.append(Element(GsaToken.GD.value, digest.description))
    elements.append(MarkupElement(features_markup(digest)))
    elements.append(Element(GsaToken.ENT_SOURCE.value, source_identity))
    return elements
