# bookstore/core/errors.py
"""
Domain errors raised by services.

Each error is an HTTPException so FastAPI renders it directly, while
callers (and tests) can still tell the kinds apart by class.
"""
from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BadRequestError(HTTPException):
    def __init__(self, detail: Any = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ExpiredError(BadRequestError):
    pass


class AlreadyRedeemedError(BadRequestError):
    pass


class UsageLimitExceededError(BadRequestError):
    pass


class IneligibleError(BadRequestError):
    """
    Promo code fails the cart-shape criteria.

    `report` is the per-criterion eligibility report; it is also sent to
    the client so the UI can explain why the code does not apply.
    """

    def __init__(self, report: Any, message: str = "PromoCode Not Eligible"):
        self.report = report
        super().__init__(
            detail={
                "message": message,
                "eligibility": report.model_dump(mode="json"),
            }
        )
