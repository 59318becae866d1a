from typing import List, Optional


class ContentValidationError(ValueError):
    """A payload did not match the content bundle's structure."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid data")


class AuthError(Exception):
    """Missing, unknown or expired admin token, or admin access disabled."""

    def __init__(self, reason: str = "Unauthorized"):
        self.reason = reason
        super().__init__(reason)


class PersistenceIOError(OSError):
    """Writing the content document to disk failed."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write content to {path}: {cause}")


class RemoteError(Exception):
    """The content API could not be reached or answered with something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
