"""Domain-level exceptions.

All failures the edit surface can report are expressed as subclasses of
DomainException so the CLI layer can catch them uniformly and display
user-friendly messages.
"""


class DomainException(Exception):
    """Base class for every error the edit session reports."""


class ValidationError(DomainException):
    """An edit or input was rejected (bad field, missing reason, bad ETA)."""


class EntityNotFoundError(DomainException):
    """An order, catalog item or line item could not be found."""


class ExternalServiceError(DomainException):
    """A backend collaborator (catalog, order API) failed or was unreachable."""


class OrderPersistError(DomainException):
    """The final order update was rejected; the save attempt failed."""
