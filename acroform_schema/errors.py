from __future__ import annotations


class FormParseError(Exception):
    """Base error for the extraction pipeline; ``error_code`` keys config.ERROR_MESSAGES."""
    error_code = "parse_failed"

    def __init__(self, message: str, error_code: str | None = None):
        if error_code:
            self.error_code = error_code
        self.message = message
        super().__init__(message)


class DocumentLoadError(FormParseError):
    """Buffer is not a readable PDF document."""
    error_code = "parse_failed"


class NotPDFError(DocumentLoadError):
    error_code = "not_pdf"


class EncryptedPDFError(DocumentLoadError):
    error_code = "encrypted_pdf"


class EmptyFormError(FormParseError):
    """Document loaded but exposes no form widgets."""
    error_code = "no_fields"


class UnexpectedStructuralError(FormParseError):
    """Decomposition, grouping or section assembly failed."""
    error_code = "structural_error"
