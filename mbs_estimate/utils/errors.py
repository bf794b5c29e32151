"""
Custom Exceptions
HTTP errors raised by the API layer
Source: https://fastapi.tiangolo.com/tutorial/handling-errors/
"""

from fastapi import HTTPException, status


class BadRequestError(HTTPException):
    """Raised when user input is missing or malformed"""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class NotFoundError(HTTPException):
    """Raised when an MBS item is not found or is not current"""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class DataSourceUnavailableError(HTTPException):
    """Raised when the fee schedule store fails"""

    def __init__(self, detail: str = "Error fetching data from the fee schedule"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
