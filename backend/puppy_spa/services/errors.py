"""
Domain errors raised by the services layer.

Routes translate these to HTTP responses (see utils.http_errors); services
never raise HTTPException themselves.
"""


class WaitingListError(Exception):
    """Base exception for waiting list operations"""

    status_code = 500


class InvalidInputError(WaitingListError):
    """Malformed date/month or a missing required field"""

    status_code = 400


class NotFoundError(WaitingListError):
    """Waiting list or entry does not exist"""

    status_code = 404


class ConflictError(WaitingListError):
    """Duplicate list date or a position outside the list"""

    status_code = 409


class InternalError(WaitingListError):
    """Unexpected persistence failure; the transaction was rolled back"""

    status_code = 500
