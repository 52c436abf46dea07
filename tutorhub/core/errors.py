"""HTTP errors raised by the account workflows.

Each class pins a status code so handlers can raise by meaning,
e.g. ``raise ConflictError('User already exists')``.
"""

from fastapi import HTTPException, status


class ConflictError(HTTPException):
    def __init__(self, detail: str = 'Account already exists') -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidRequestError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidOrExpiredTokenError(InvalidRequestError):
    def __init__(self, detail: str = 'Invalid or expired confirmation token') -> None:
        super().__init__(detail)


class UnauthorizedError(HTTPException):
    """401 with a message naming which check failed."""

    def __init__(self, detail: str = 'Not authorized') -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={'WWW-Authenticate': 'Bearer'},
        )


class ForbiddenError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AccountNotConfirmedError(ForbiddenError):
    def __init__(self, detail: str = 'Please confirm your email before logging in') -> None:
        super().__init__(detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DatabaseUnavailableError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL.',
        )
