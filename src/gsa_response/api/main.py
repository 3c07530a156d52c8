"""FastAPI entrypoint serving GSA-compatible search results."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request, Response
from pydantic import BaseModel, Field

from gsa_response.config import EngineConfig, WriterConfig
from gsa_response.engine.highlighting import snippets_from_highlighting
from gsa_response.engine.search import InMemorySearchEngine, SearchEngine, SearchRequest
from gsa_response.errors import MalformedFieldError
from gsa_response.protocol.assembler import CONTENT_TYPE, ResultPageAssembler
from gsa_response.protocol.fields import requested_fields
from gsa_response.protocol.sort import SortDescriptor
from gsa_response.types import RequestContext

logger = logging.getLogger(__name__)

_ENGINE_CONFIG = EngineConfig()


class DocumentRequest(BaseModel):
    fields: dict[str, str | list[str]] = Field(min_length=1)


app = FastAPI(title="GSA Response Writer", version="0.1.0")

_engine: SearchEngine = InMemorySearchEngine()
_assembler = ResultPageAssembler(WriterConfig())


@app.get("/health")
def health() -> dict[str, Any]:
    indexed = len(_engine) if isinstance(_engine, InMemorySearchEngine) else None
    return {"status": "ok", "documents": indexed}


@app.post("/documents")
def add_document(request: DocumentRequest) -> dict[str, Any]:
    if not isinstance(_engine, InMemorySearchEngine):
        raise HTTPException(status_code=405, detail="Engine does not accept documents")
    try:
        doc_id = _engine.add(request.fields)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"id": doc_id}


@app.get("/gsa/searchresult")
def search_result(
    request: Request,
    q: str = "",
    client: str | None = None,
    site: str | None = None,
    sort: str | None = None,
    access: str | None = None,
    entqr: str | None = None,
    output: str | None = None,
    start: int = Query(default=0, ge=0),
    num: int = Query(default=_ENGINE_CONFIG.default_rows, ge=1, le=_ENGINE_CONFIG.max_rows),
) -> Response:
    del output  # always answered as xml_no_dtd
    descriptor = SortDescriptor.parse(sort) if sort else None
    result = _engine.search(
        SearchRequest(
            query=q,
            offset=start,
            rows=num,
            sort=descriptor.to_engine_syntax() if descriptor else None,
            fields=requested_fields(),
        )
    )
    context = RequestContext(
        query=q,
        sort=sort,
        client=client,
        site=site,
        ip=request.client.host if request.client else None,
        access=access,
        entqr=entqr,
    )
    try:
        body = _assembler.assemble(
            result.page,
            snippets_from_highlighting(result.highlighting),
            context,
        )
    except MalformedFieldError as exc:
        logger.error("Cannot write result page for %r: %s", q, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return Response(content=body, media_type=CONTENT_TYPE)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
