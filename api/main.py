"""
FastAPI backend for the Template Transformer.
Run from project root: uvicorn api.main:app --reload --port 8000
"""
import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

from backend import TemplateSession
from transformer.docx_to_html import DOCX_MEDIA_TYPE
from transformer.errors import (
    ConflictError,
    DocumentParseError,
    InvalidFileError,
    MissingInputError,
    NotFoundError,
    TemplateTransformerError,
    TransformError,
    TransformInProgressError,
)
from transformer.logging_config import setup_logging
from transformer.rendering import render_output
from transformer.templates import Template

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Template Transformer API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STATUS_FOR_ERROR = [
    (InvalidFileError, 400),
    (MissingInputError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (TransformInProgressError, 409),
    (DocumentParseError, 422),
    (TransformError, 502),
]


class TemplateOut(BaseModel):
    id: str
    name: str
    content: str
    styled_markup: str | None = None

    @classmethod
    def from_template(cls, template: Template) -> "TemplateOut":
        return cls(id=template.id, name=template.name, content=template.content, styled_markup=template.styled_markup)


class TemplateListOut(BaseModel):
    templates: list[TemplateOut]
    selected_id: str | None = None


class TransformBody(BaseModel):
    text: str


class TransformOut(BaseModel):
    text: str
    styled: bool
    kind: str
    body: str


def get_session(request: Request) -> TemplateSession:
    """Single shared session for this process (one active user)."""
    if not hasattr(request.app.state, "session"):
        request.app.state.session = TemplateSession()
    return request.app.state.session


def _http_error(e: TemplateTransformerError) -> HTTPException:
    for error_type, status in _STATUS_FOR_ERROR:
        if isinstance(e, error_type):
            return HTTPException(status_code=status, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.get("/api/templates", response_model=TemplateListOut)
def list_templates(session: TemplateSession = Depends(get_session)):
    selected = session.selected
    return TemplateListOut(
        templates=[TemplateOut.from_template(t) for t in session.templates],
        selected_id=selected.id if selected else None,
    )


@app.post("/api/templates", response_model=TemplateOut, status_code=201)
async def upload_template(file: UploadFile = File(...), session: TemplateSession = Depends(get_session)):
    """Upload a .txt or .docx template; it is stored and selected."""
    contents = await file.read()
    try:
        template = session.upload(file.filename or "", contents, file.content_type)
    except TemplateTransformerError as e:
        logger.warning("Upload of %s rejected: %s", file.filename, e)
        raise _http_error(e)
    return TemplateOut.from_template(template)


@app.delete("/api/templates/{template_id}", status_code=204)
def delete_template(template_id: str, session: TemplateSession = Depends(get_session)):
    session.delete(template_id)
    return Response(status_code=204)


@app.post("/api/templates/{template_id}/select", response_model=TemplateOut)
def select_template(template_id: str, session: TemplateSession = Depends(get_session)):
    try:
        return TemplateOut.from_template(session.select(template_id))
    except TemplateTransformerError as e:
        raise _http_error(e)


@app.post("/api/transform", response_model=TransformOut)
def transform(body: TransformBody, session: TemplateSession = Depends(get_session)):
    """Transform text with the selected template; returns the raw text and the rendered body."""
    try:
        result = session.transform(body.text)
    except TemplateTransformerError as e:
        raise _http_error(e)
    except ValueError as e:
        # model client not configured (missing API key)
        raise HTTPException(status_code=503, detail=str(e))
    rendered = render_output(result)
    return TransformOut(text=result.text, styled=result.styled, kind=rendered.kind, body=rendered.body)


@app.post("/api/export")
def export_docx(session: TemplateSession = Depends(get_session)):
    """Build a DOCX from the last transformation output."""
    try:
        docx_bytes = session.export_docx()
    except TemplateTransformerError as e:
        raise _http_error(e)
    return Response(
        content=docx_bytes,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=transformed_output.docx"},
    )
