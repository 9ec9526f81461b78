# shop_service/errors.py


class ShopError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShopError):
    """Missing or malformed input."""
    status_code = 400


class DuplicateError(ShopError):
    """A uniqueness rule would be violated."""
    status_code = 400


class NotFoundError(ShopError):
    """The referenced entity does not exist."""
    status_code = 404


class StoreError(ShopError):
    """The database failed underneath a request."""
    status_code = 500
