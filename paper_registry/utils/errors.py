"""Custom exceptions for the paper registry."""


class PaperRegistryError(Exception):
    """Base exception for all paper registry errors."""

    pass


class ValidationError(PaperRegistryError):
    """User input rejected before any I/O."""

    pass


class APIError(PaperRegistryError):
    """Metadata source request failed."""

    pass


# A failed metadata fetch aborts the submission before any store write.
FetchFailure = APIError


class NotFoundError(APIError):
    """DOI is unknown to the metadata source."""

    pass


class MalformedResponseError(APIError):
    """Metadata response is missing a required field."""

    pass


class LookupFailure(PaperRegistryError):
    """Ranking store query failed. Always absorbed by the ranking lookup."""

    pass


class DatabaseError(PaperRegistryError):
    """Paper store operation failed."""

    pass


class StoreWriteFailure(DatabaseError):
    """Inserting a paper record failed."""

    pass


class StoreDeleteFailure(DatabaseError):
    """Deleting a paper record failed."""

    pass
