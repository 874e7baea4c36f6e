"""
ERRORS
======

Every service raises one of these. The app factory registers a single
handler that turns them into a JSON body with the matching status code.
"""


class SwalletError(Exception):
    """Base exception for all Swallet operations"""
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class InvalidArgument(SwalletError):
    """Bad enum value, non-positive amount, malformed body"""
    status_code = 400


class Forbidden(SwalletError):
    """Caller is not a member, or lacks the role for the action"""
    status_code = 403


class NotFound(SwalletError):
    """Missing group, transaction, account..."""
    status_code = 404


class Conflict(SwalletError):
    """Resource already exists"""
    status_code = 409


class Internal(SwalletError):
    """Unexpected persistence failure"""
    status_code = 500


class Unauthorized(SwalletError):
    """Missing or bad credentials"""
    status_code = 401
