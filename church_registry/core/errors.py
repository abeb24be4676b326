# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Domain errors raised by services and repositories, mapped to HTTP by the controllers."""


class RegistryError(Exception):
    """Base class for every domain error."""


class ValidationError(RegistryError):
    """Missing or invalid input (HTTP 400)."""


class NotFoundError(RegistryError):
    """The targeted record does not exist (HTTP 404)."""


class StorageError(RegistryError):
    """The database is unreachable or a statement failed (HTTP 500)."""
