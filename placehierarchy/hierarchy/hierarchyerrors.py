"""Error types raised by hierarchy resolution."""


class IndexAccessError(RuntimeError):
    """The hierarchy index could not be opened, read or queried.

    Raised for the whole call; lookups are never retried internally.
    """


class MalformedAncestorDataError(IndexAccessError):
    """A place record carries an ancestor id that is not a valid identifier."""


class InvalidReferenceError(ValueError):
    """A place reference cannot be turned into an index query.

    Raised per reference and caught by the batch resolver, which reports
    it as a diagnostic and carries on with the remaining references.
    """

    def __init__(self, reference, reason: str):
        super().__init__(f"{reason}: {reference!r}")
        self.reference = reference
        self.reason = reason


__all__ = [
    "IndexAccessError",
    "MalformedAncestorDataError",
    "InvalidReferenceError",
]
