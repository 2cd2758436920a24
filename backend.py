import logging
import threading
from typing import Callable

from transformer.docx_to_html import ExtractedDocument, extract_upload
from transformer.errors import MissingInputError, NotFoundError, TransformInProgressError
from transformer.html_to_docx import output_to_docx_bytes
from transformer.llm_client import TransformationClient
from transformer.prompts import build_prompt
from transformer.rendering import TransformResult
from transformer.templates import Template, TemplateStore

logger = logging.getLogger(__name__)

Extractor = Callable[..., ExtractedDocument]


class TemplateSession:
    """One user's templates, selection and last output.

    The extractor and transformation client are injected so the pipeline can
    run without real document parsing or network access. The client is built
    from the environment on first use when none is given.
    """

    def __init__(self, extractor: Extractor = extract_upload, client: TransformationClient | None = None):
        self.store = TemplateStore()
        self.last_result: TransformResult | None = None
        self._transform_lock = threading.Lock()
        self._extractor = extractor
        self._client = client

    @property
    def in_flight(self) -> bool:
        return self._transform_lock.locked()

    @property
    def client(self) -> TransformationClient:
        if self._client is None:
            self._client = TransformationClient.from_env()
        return self._client

    @property
    def templates(self) -> list[Template]:
        return self.store.list()

    @property
    def selected(self) -> Template | None:
        return self.store.selected

    def upload(self, filename: str, data: bytes, media_type: str | None = None) -> Template:
        """Extract an uploaded file, store it as a template and select it.
        Extraction errors propagate and leave the store unchanged."""
        extracted = self._extractor(filename, data, media_type)
        template = Template(name=filename, content=extracted.text, styled_markup=extracted.markup)
        self.store.add(template)
        self.store.select(template.id)
        return template

    def delete(self, template_id: str) -> None:
        self.store.remove(template_id)

    def select(self, template_id: str) -> Template:
        return self.store.select(template_id)

    def transform(self, user_input: str) -> TransformResult:
        """
        Transform user_input into the selected template's style.
        On failure the previous last_result is kept and the error propagates.
        """
        template = self.store.selected
        if template is None:
            raise NotFoundError("Please select a template before transforming")
        if not (user_input or "").strip():
            raise MissingInputError("Please enter text to transform")
        prompt = build_prompt(template, user_input)
        # transform routes run in a threadpool; take the slot without waiting
        if not self._transform_lock.acquire(blocking=False):
            raise TransformInProgressError("A transformation is already running")
        try:
            text = self.client.transform(prompt)
        finally:
            self._transform_lock.release()

        result = TransformResult(text=text, styled=template.has_markup)
        self.last_result = result
        logger.info("Transformed %d characters with template %s", len(user_input), template.name)
        return result

    def export_docx(self) -> bytes:
        if self.last_result is None:
            raise NotFoundError("Nothing to export yet; transform some text first")
        return output_to_docx_bytes(self.last_result)
