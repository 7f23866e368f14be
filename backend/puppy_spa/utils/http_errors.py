"""
Mapping from service-layer errors to HTTP errors.

Server-side failures are reported without detail; the cause has already been
logged where it happened.
"""

from fastapi import HTTPException

from puppy_spa.services.errors import WaitingListError


def http_error_for(exc: WaitingListError) -> HTTPException:
    if exc.status_code >= 500:
        return HTTPException(status_code=500, detail="Internal server error")
    return HTTPException(status_code=exc.status_code, detail=str(exc))
