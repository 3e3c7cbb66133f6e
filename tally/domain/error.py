"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Request rejected before any read (bad direction, missing ids)."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ConflictError(DomainError):
    """A concurrent write for the same vote key won the race.

    Raised on a stale optimistic version or a duplicate first vote. The whole
    transition can be retried from a fresh read.
    """

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)


class StorageError(DomainError):
    """A ledger or score write failed; the transition was rolled back."""

    pass


class SinkError(DomainError):
    """The recommender could not be reached.

    Never surfaced as a failure of a vote: the vote and score are already
    committed when preference delivery runs.
    """

    pass
