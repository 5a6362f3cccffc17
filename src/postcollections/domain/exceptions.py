"""Exceptions raised by the collection domain.

Every error carries a human-readable ``message`` and an optional
``context`` string with further detail for the caller.
"""


class CollectionError(Exception):
    """Base class for all collection errors."""

    def __init__(self, message: str, context: str | None = None) -> None:
        self.message = message
        self.context = context
        super().__init__(message)


class CollectionValidationError(CollectionError):
    """Raised when collection data breaks an invariant."""
    pass


class MissingRequiredFieldError(CollectionValidationError):
    """A required field (the title) is absent or empty."""
    pass


class InvalidIdentifierError(CollectionValidationError):
    """The supplied ID is not a well-formed ObjectId."""
    pass


class InvalidDateError(CollectionValidationError):
    """A supplied created_at/updated_at value does not parse as a date."""
    pass


class InvalidCollectionTypeError(CollectionValidationError):
    """The supplied type is neither manual nor automatic."""
    pass


class InvalidFilterError(CollectionValidationError):
    """An automatic collection is left without a filter."""
    pass


class SlugNotUniqueError(CollectionError):
    """Another collection already uses the requested slug."""
    pass


class CollectionNotFoundError(CollectionError):
    """No collection exists for the requested ID or slug."""
    pass
