"""Catalog API errors."""


class CatalogError(Exception):
    """Base error for catalog API failures."""

    def __init__(self, message: str = "Catalog request failed"):
        self.message = message
        super().__init__(self.message)


class CatalogNotFoundError(CatalogError):
    """Unknown user, private collection or missing item."""

    def __init__(self, message: str = "Not found in catalog"):
        super().__init__(message)


class CatalogPendingError(CatalogError):
    """Catalog still processing the request after the retry."""

    def __init__(self, message: str = "Catalog is still processing the request, try again later"):
        super().__init__(message)


class CatalogUnavailableError(CatalogError):
    """Network failure or server error after retries."""

    def __init__(self, message: str = "Catalog is unavailable"):
        super().__init__(message)
