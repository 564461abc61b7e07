"""Errors raised by the catalog and trending gateways."""


class CatalogError(Exception):
    """Base class for every failure of a remote catalog call."""


class TransportFailure(CatalogError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""


class RemoteLogicalFailure(CatalogError):
    """The remote answered, but with an error status or an error-shaped payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
