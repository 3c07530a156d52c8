import io

import pytest

from gsa_response.protocol.wire import (
    close_tag,
    escape_attr,
    escaped_tag,
    param_tag,
    write_elements,
)
from gsa_response.types import Element, MarkupElement


def test_escaped_tag_escapes_char_data() -> None:
    out = io.StringIO()
    escaped_tag(out, "T", "Fish & <Chips>")

    assert out.getvalue() == "<T>Fish &amp; &lt;Chips&gt;</T>\n"


def test_escaped_tag_skips_empty_and_none() -> None:
    out = io.StringIO()
    escaped_tag(out, "T", "")
    escaped_tag(out, "T", None)

    assert out.getvalue() == ""


def test_param_tag_keeps_original_unescaped() -> None:
    out = io.StringIO()
    param_tag(out, "q", "a&b")

    assert out.getvalue() == '<PARAM name="q" value="a&amp;b" original_value="a&b"/>\n'


def test_param_tag_can_escape_original() -> None:
    out = io.StringIO()
    param_tag(out, "q", 'say "hi"', escape_original=True)

    assert out.getvalue() == (
        '<PARAM name="q" value="say &quot;hi&quot;" original_value="say &quot;hi&quot;"/>\n'
    )


@pytest.mark.parametrize("value", ["", None])
def test_param_tag_skips_empty(value: str | None) -> None:
    out = io.StringIO()
    param_tag(out, "site", value)

    assert out.getvalue() == ""


def test_close_tag_and_elements() -> None:
    out = io.StringIO()
    write_elements(out, [Element("S", "x"), Element("GD", ""), MarkupElement("<HAS/>")])
    close_tag(out, "R")

    assert out.getvalue() == "<S>x</S>\n<HAS/></R>\n"


def test_escape_attr_quotes() -> None:
    assert escape_attr('a"b<') == "a&quot;b&lt;"


def test_stream_failure_propagates() -> None:
    class _Broken:
        def write(self, text: str) -> int:
            raise BrokenPipeError("client went away")

    with pytest.raises(BrokenPipeError):
        escaped_tag(_Broken(), "T", "value")
