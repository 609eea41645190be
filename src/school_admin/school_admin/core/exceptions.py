class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a teacher lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class SyncError(Exception):
    """Base exception for backend routing."""


class ConfigurationAbsent(SyncError):
    """A backend tier has no credentials. A routing signal, not a failure."""


class BackendUnavailable(SyncError):
    """A call to a configured backend raised. Triggers fallback to the next tier."""

    def __init__(self, source, cause: BaseException):
        super().__init__(f"{source.value} backend failed: {cause}")
        self.source = source
        self.cause = cause


class RecordMissing(SyncError):
    """A reachable backend does not hold the record a write targets.

    The write moves on to the next tier without marking this one degraded.
    """

    def __init__(self, source, record_id: str):
        super().__init__(f"{source.value} backend has no record {record_id!r}")
        self.source = source
        self.record_id = record_id
