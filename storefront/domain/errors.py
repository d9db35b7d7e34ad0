# storefront/domain/errors.py


class NotFoundError(ValueError):
    """Requested row does not exist (404)."""


class ConflictError(RuntimeError):
    """Optimistic version check failed (409)."""
