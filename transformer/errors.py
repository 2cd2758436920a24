"""Errors raised by the template transformation pipeline."""


class TemplateTransformerError(Exception):
    """Base class for all pipeline errors."""


class InvalidFileError(TemplateTransformerError):
    """Upload is neither a .txt nor a .docx file."""


class DocumentParseError(TemplateTransformerError):
    """Uploaded .docx could not be opened as a word-processor package."""


class ConflictError(TemplateTransformerError):
    """A template with the same id is already stored."""


class NotFoundError(TemplateTransformerError):
    """No template with the requested id (or no template selected)."""


class MissingInputError(TemplateTransformerError, ValueError):
    """Transform was requested with blank input text."""


class TransformInProgressError(TemplateTransformerError):
    """A transformation is already running for this session."""


class TransformError(TemplateTransformerError):
    """The model call failed or returned no usable text."""
