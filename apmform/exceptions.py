class FormNotFoundError(Exception):
    """Raised when a form definition does not exist in the store."""


class FormDefinitionError(Exception):
    """Raised when a stored form definition cannot be decoded."""
