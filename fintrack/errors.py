"""Domain-specific exceptions raised by the handlers and mapped to HTTP status codes by the API."""


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when a referenced user, category, subcategory or payment method cannot be located."""


class AuthenticationError(Exception):
    """Raised when credentials or bearer tokens are missing or invalid."""
