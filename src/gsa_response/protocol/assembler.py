"""Writes a full GSA search result document.

Example request served by this writer:
`GET /gsa/searchresult?q=chicken+teriyaki&output=xml&client=test&site=test&sort=date:D:S:d1`.
The document layout follows the appliance's XML reference (`GSP VER="3.2"`).
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable

from gsa_response.config import WriterConfig
from gsa_response.identity import version_identity
from gsa_response.obs.timing import Timer
from gsa_response.protocol.sort import SortDescriptor
from gsa_response.protocol.transcoder import transcode
from gsa_response.protocol.wire import (
    LB,
    TextWriter,
    close_tag,
    escape_attr,
    escape_text,
    escaped_tag,
    param_tag,
    write_elements,
)
from gsa_response.types import RequestContext, ResultPage, SnippetIndex

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/xml; charset=UTF-8"
XML_START = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n<GSP VER="3.2">\n'
XML_STOP = "</GSP>\n"
OUTPUT_MODE = "xml_no_dtd"
ENCODING = "UTF-8"


class ResultPageAssembler:
    """Streams header, paging markers and transcoded hits of one page.

    Nothing is buffered or rolled back: if a hit fails to transcode, the
    output written so far stays on the stream.
    """

    def __init__(
        self,
        config: WriterConfig | None = None,
        *,
        identity: Callable[[], str] = version_identity,
    ) -> None:
        self.config = config or WriterConfig()
        self._identity = identity

    def write(
        self,
        writer: TextWriter,
        page: ResultPage,
        snippets: SnippetIndex,
        context: RequestContext,
    ) -> None:
        with Timer() as timer:
            sort = SortDescriptor.parse(context.sort) if context.sort else None

            writer.write(XML_START)
            escaped_tag(writer, "TM", str(int(timer.elapsed_ms)))
            escaped_tag(writer, "Q", context.query)
            self._write_params(writer, page, context, sort)

            hit_count = len(page.hits)
            # 1-based index of the first and last result on this page
            writer.write(f'<RES SN="{page.offset + 1}" EN="{page.offset + hit_count}">{LB}')
            writer.write(f"<M>{page.num_found}</M>{LB}")
            writer.write(f"<FI/>{LB}")
            writer.write(f"<NB><NU>{escape_text(self.next_page_link(context, page))}</NU></NB>{LB}")

            for index, hit in enumerate(page.hits):
                writer.write(self._result_open(page.offset, index))
                elements = transcode(
                    hit,
                    snippets,
                    source_identity=self._identity(),
                    config=self.config,
                )
                write_elements(writer, elements)
                close_tag(writer, "R")

            writer.write(f"</RES>{LB}")
            writer.write(XML_STOP)

        logger.debug(
            "Wrote GSA page offset=%d hits=%d num_found=%d engine_sort=%s in %.2fms",
            page.offset,
            hit_count,
            page.num_found,
            sort.to_engine_syntax() if sort else None,
            timer.elapsed_ms,
        )

    def assemble(
        self,
        page: ResultPage,
        snippets: SnippetIndex,
        context: RequestContext,
    ) -> bytes:
        buffer = io.StringIO()
        self.write(buffer, page, snippets, context)
        return buffer.getvalue().encode("utf-8")

    def next_page_link(self, context: RequestContext, page: ResultPage) -> str:
        """Relative link to the following page, unescaped."""
        start = page.offset + len(page.hits)
        return (
            f"{self.config.next_page_path}?q={context.query or ''}&site={context.site or ''}"
            f"&lr=&ie={ENCODING}&oe={ENCODING}&output={OUTPUT_MODE}"
            f"&client={context.client or ''}&access={context.access or ''}"
            f"&sort={context.sort or ''}&start={start}&sa=N"
        )

    def _write_params(
        self,
        writer: TextWriter,
        page: ResultPage,
        context: RequestContext,
        sort: SortDescriptor | None,
    ) -> None:
        escape_original = self.config.escape_param_original
        params = (
            ("sort", sort.raw if sort else None),
            ("output", OUTPUT_MODE),
            ("ie", ENCODING),
            ("oe", ENCODING),
            ("client", context.client),
            ("q", context.query),
            ("site", context.site),
            ("start", str(page.offset)),
            ("num", str(page.rows)),
            ("ip", context.ip),
            # p: public content only, s: secure content only, a: all
            ("access", context.access),
            # query expansion policy
            ("entqr", context.entqr),
        )
        for name, value in params:
            param_tag(writer, name, value, escape_original=escape_original)

    def _result_open(self, offset: int, index: int) -> str:
        attributes = "".join(
            f' {attr.name}="{escape_attr(attr.value)}"'
            for attr in self.config.positional_attributes
            if attr.index == index
        )
        return f'<R N="{offset + index + 1}"{attributes}>{LB}'
