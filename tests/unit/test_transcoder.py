import logging

import pytest

from gsa_response.config import WriterConfig
from gsa_response.errors import MalformedFieldError
from gsa_response.protocol.transcoder import (
    digest_hit,
    format_rfc1123,
    resolve_snippet,
    size_bucket,
    transcode,
)
from gsa_response.types import Element, Hit, MarkupElement

NEW_YEAR_2021_MS = "1609459200000"


def _hit(**fields: str | list[str]) -> Hit:
    return Hit(fields={name: [v] if isinstance(v, str) else v for name, v in fields.items()})


def _element(elements: list, name: str) -> Element:
    return next(e for e in elements if isinstance(e, Element) and e.name == name)


def test_snippet_wins_over_description() -> None:
    hit = _hit(id="doc-1", description="stored description")

    elements = transcode(hit, {"doc-1": ["first <b>hit</b>", "second"]}, source_identity="n/1")

    assert _element(elements, "S").value == "first <b>hit</b>"
    assert _element(elements, "GD").value == "stored description"


@pytest.mark.parametrize("snippets", [{}, {"doc-1": []}, {"other": ["x"]}])
def test_description_is_fallback_snippet(snippets: dict[str, list[str]]) -> None:
    hit = _hit(id="doc-1", description="stored description")

    elements = transcode(hit, snippets, source_identity="n/1")

    assert _element(elements, "S").value == "stored description"


def test_missing_description_falls_back_to_empty() -> None:
    digest = digest_hit(_hit(id="doc-1", title="T"))

    assert resolve_snippet(digest, {}) == ""


def test_missing_identifier_gets_no_snippet_and_empty_cid() -> None:
    hit = _hit(description="desc")

    elements = transcode(hit, {"": ["never"]}, source_identity="n/1")

    assert _element(elements, "S").value == "desc"
    markup = next(e for e in elements if isinstance(e, MarkupElement)).markup
    assert 'CID=""' in markup


def test_headings_keep_every_occurrence_in_order() -> None:
    hit = _hit(title="Title", h2_txt=["A", "B", "C"], h1_txt="Top", text_t="body")

    digest = digest_hit(hit)

    assert digest.texts == ["Title", "A", "B", "C", "Top", "body"]


def test_texts_accumulate_title_description_body_and_dates() -> None:
    hit = _hit(title="T", description="D", last_modified=NEW_YEAR_2021_MS, text_t="B")

    digest = digest_hit(hit)

    assert digest.texts == ["T", "D", NEW_YEAR_2021_MS, "B"]
    assert digest.description == "D"
    assert digest.title == "T"


@pytest.mark.parametrize(
    ("size", "bucket"),
    [(2048, "2k"), (1000, "0k"), (0, "0k"), (4096, "4k"), (1048575, "1023k"), (-2048, "-2k")],
)
def test_size_bucket(size: int, bucket: str) -> None:
    assert size_bucket(size) == bucket


def test_timestamps_render_rfc1123() -> None:
    hit = _hit(last_modified=NEW_YEAR_2021_MS, load_date_dt="0")

    digest = digest_hit(hit)

    assert format_rfc1123(int(NEW_YEAR_2021_MS)) == "Fri, 01 Jan 2021 00:00:00 GMT"
    assert digest.tags == [
        Element("CACHE_LAST_MODIFIED", "Fri, 01 Jan 2021 00:00:00 GMT"),
        Element("CRAWLDATE", "Thu, 01 Jan 1970 00:00:00 GMT"),
    ]


def test_positional_tags_follow_field_order() -> None:
    hit = _hit(title="Hello", language_s="en", sku="http://example.com/x")

    digest = digest_hit(hit)

    assert [tag.name for tag in digest.tags] == ["T", "LANG", "U", "UE"]
    assert digest.language == "en"
    assert digest.url == "http://example.com/x"


def test_ue_repeats_url_by_default() -> None:
    digest = digest_hit(_hit(sku="http://example.com/a b"))

    assert digest.tags == [
        Element("U", "http://example.com/a b"),
        Element("UE", "http://example.com/a b"),
    ]


def test_ue_can_be_url_encoded() -> None:
    digest = digest_hit(_hit(sku="http://example.com/a b?x=ü"), WriterConfig(encode_ue_url=True))

    assert digest.tags[1] == Element("UE", "http://example.com/a%20b?x=%C3%BC")


def test_unknown_fields_are_ignored() -> None:
    digest = digest_hit(_hit(id="x", author_s="someone"))

    assert digest.tags == []
    assert digest.texts == []


@pytest.mark.parametrize("field", ["size_i", "last_modified", "load_date_dt"])
def test_malformed_number_is_fatal_by_default(field: str) -> None:
    with pytest.raises(MalformedFieldError) as info:
        digest_hit(_hit(id="x", **{field: "12kb"}))

    assert info.value.field == field
    assert info.value.value == "12kb"
    assert isinstance(info.value, ValueError)


def test_malformed_number_is_skipped_when_lenient(caplog: pytest.LogCaptureFixture) -> None:
    hit = _hit(id="x", size_i="huge", last_modified="yesterday", title="T")

    with caplog.at_level(logging.WARNING, logger="gsa_response.protocol.transcoder"):
        digest = digest_hit(hit, WriterConfig(strict_numeric_fields=False))

    assert digest.size_bytes == 0
    assert digest.tags == [Element("T", "T")]
    assert len(caplog.records) == 2


@pytest.mark.parametrize("field", ["last_modified", "load_date_dt"])
def test_out_of_range_timestamp_is_fatal_by_default(field: str) -> None:
    with pytest.raises(MalformedFieldError) as info:
        digest_hit(_hit(id="x", **{field: "300000000000000"}))

    assert info.value.field == field
    assert info.value.value == "300000000000000"


@pytest.mark.parametrize("field", ["last_modified", "load_date_dt"])
def test_out_of_range_timestamp_is_skipped_when_lenient(
    field: str, caplog: pytest.LogCaptureFixture
) -> None:
    hit = _hit(id="x", title="T", **{field: "300000000000000"})

    with caplog.at_level(logging.WARNING, logger="gsa_response.protocol.transcoder"):
        digest = digest_hit(hit, WriterConfig(strict_numeric_fields=False))

    assert digest.tags == [Element("T", "T")]
    assert digest.texts == ["T"]
    assert digest.last_modified is None
    assert digest.load_date is None
    assert len(caplog.records) == 1


def test_element_order_after_fields() -> None:
    hit = _hit(id="abc", title="T", size_i="2048")

    elements = transcode(hit, {}, source_identity="release/node")

    assert elements == [
        Element("T", "T"),
        Element("S", ""),
        Element("GD", ""),
        MarkupElement('<HAS><L/><C SZ="2k" CID="abc" ENC="UTF-8"/></HAS>'),
        Element("ENT_SOURCE", "release/node"),
    ]
