"""
Exception types raised by the client.
"""


class LegalRagError(Exception):
    """Base class for every error this package raises on purpose"""


class ApiError(LegalRagError):
    """Backend answered with a non-2xx status"""
    def __init__(self, message: str, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class StreamUnavailableError(LegalRagError):
    """Response carried no readable body"""
    def __init__(self, message: str = "No reader available"):
        super().__init__(message)


class UploadValidationError(LegalRagError):
    """Rejected before any network call: size, extension or batch count"""
    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class FormValidationError(LegalRagError):
    """Missing or invalid form fields, keyed by field name"""
    def __init__(self, errors: dict[str, str]):
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors
