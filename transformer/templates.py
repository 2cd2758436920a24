"""In-memory template store with single selection."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

from transformer.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def new_template_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Template:
    """An uploaded style template. content and styled_markup come from the same upload."""

    name: str
    content: str
    styled_markup: str | None = None
    id: str = field(default_factory=new_template_id)

    @property
    def has_markup(self) -> bool:
        return bool(self.styled_markup)

    def preview(self, length: int = 60) -> str:
        text = " ".join(self.content.split())
        return text if len(text) <= length else text[:length] + "..."


class TemplateStore:
    """Ordered collection of templates; at most one is selected."""

    def __init__(self):
        self._templates: list[Template] = []
        self._selected_id: str | None = None

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: str) -> bool:
        return any(t.id == template_id for t in self._templates)

    def add(self, template: Template) -> None:
        if template.id in self:
            raise ConflictError(f"Template {template.id!r} already exists")
        self._templates.append(template)
        logger.info("Added template %s (%s)", template.id, template.name)

    def remove(self, template_id: str) -> None:
        """Remove a template if present; clears the selection when it pointed at it."""
        before = len(self._templates)
        self._templates = [t for t in self._templates if t.id != template_id]
        if self._selected_id == template_id:
            self._selected_id = None
        if len(self._templates) != before:
            logger.info("Removed template %s", template_id)

    def get(self, template_id: str) -> Template:
        for t in self._templates:
            if t.id == template_id:
                return t
        raise NotFoundError(f"Template {template_id!r} not found")

    def select(self, template_id: str) -> Template:
        template = self.get(template_id)
        self._selected_id = template.id
        return template

    def clear_selection(self) -> None:
        self._selected_id = None

    @property
    def selected(self) -> Template | None:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def list(self) -> list[Template]:
        return list(self._templates)
