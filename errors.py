class CRMError(Exception):
    """Base for every error surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CRMError):
    """A required field is missing or a value breaks a lifecycle rule."""

    status_code = 422


class AccessDeniedError(CRMError):
    """The actor's role lacks authority for the action."""

    status_code = 403


class NotFoundError(CRMError):
    """A referenced lead, profile or appointment does not resolve."""

    status_code = 404


class StoreError(CRMError):
    """The underlying persistence call failed."""

    status_code = 500
