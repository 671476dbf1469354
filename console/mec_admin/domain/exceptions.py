"""Domain-specific exceptions — framework-independent."""


class ConsoleError(Exception):
    """Base class for every error the console core raises."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FetchError(ConsoleError):
    """Raised when a list or detail load fails. The cache is left untouched."""

    def __init__(self, entity_type: str, message: str):
        self.entity_type = entity_type
        super().__init__(message)


class MutationError(ConsoleError):
    """Raised when a create, update or delete is rejected or cannot be sent.

    ``message`` is the backend-provided message when there was one,
    otherwise a generic fallback.
    """

    def __init__(self, entity_type: str, message: str):
        self.entity_type = entity_type
        super().__init__(message)


class UploadError(ConsoleError):
    """Raised when the storage backend rejects a file or the transport fails."""


class AssetReleaseError(ConsoleError):
    """Raised when one or more asset references could not be released."""

    def __init__(self, references: list[str], message: str = "Failed to delete image"):
        self.references = list(references)
        super().__init__(message)


class ValidationError(ConsoleError):
    """Raised before any network call when a required field or asset is missing."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NoSelectionError(ConsoleError):
    """Raised when a bulk action is attempted with an empty selection."""


class SessionStateError(ConsoleError):
    """Raised when a form session is used in a state that does not allow it."""
