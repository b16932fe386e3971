"""Catalog error types."""


class CatalogError(Exception):
    """Base error for catalog operations."""


class UnauthenticatedError(CatalogError):
    """Raised when a write is attempted without an actor id."""


class DuplicateBarcodeError(CatalogError):
    """Raised when a custom food reuses an existing barcode."""
