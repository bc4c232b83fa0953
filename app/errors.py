"""Domain errors raised by the identity, relationship and favorites layers.

Each error carries the HTTP status code routers translate it to.
"""
from typing import List, Optional
from fastapi import HTTPException


class RelationshipError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(RelationshipError):
    status_code = 404


class ForbiddenError(RelationshipError):
    status_code = 403


class InvalidContextError(RelationshipError):
    status_code = 400

    def __init__(self, detail: str = "Invalid context type"):
        super().__init__(detail)


class NoIdentityInContextError(RelationshipError):
    status_code = 400

    def __init__(self, detail: str = "You do not have an identity in this context"):
        super().__init__(detail)


class RecipientNotFoundError(NotFoundError):

    def __init__(self, detail: str = "Recipient identity not found"):
        super().__init__(detail)


class SelfRelationshipError(RelationshipError):
    status_code = 400


class IdentityConflictError(RelationshipError):
    status_code = 400


class ValidationFailedError(RelationshipError):
    """Input rejected by field validation; ``errors`` lists every problem found."""
    status_code = 400

    def __init__(self, errors: List[str], detail: Optional[str] = None):
        super().__init__(detail or "; ".join(errors))
        self.errors = errors


def http_error(error: RelationshipError) -> HTTPException:
    """Translate a domain error into the HTTPException a router raises."""
    if isinstance(error, ValidationFailedError):
        return HTTPException(status_code=error.status_code, detail={"errors": error.errors})
    return HTTPException(status_code=error.status_code, detail=error.detail)
