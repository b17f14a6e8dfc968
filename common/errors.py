"""
Domain error taxonomy.

Services and the pure core raise these; `main.py` turns them into JSON error
responses carrying a machine-readable `kind` next to the human message.
"""
from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    kind = "AppError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed."

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFound(AppError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class InvalidAmount(AppError):
    kind = "InvalidAmount"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Amount must be a positive number."


class AmountExceedsBalance(AppError):
    kind = "AmountExceedsBalance"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Amount exceeds the outstanding balance."


class ReceivingIncomplete(AppError):
    kind = "ReceivingIncomplete"
    status_code = status.HTTP_409_CONFLICT
    default_message = "The order has not been fully received."


class InvalidLine(AppError):
    kind = "InvalidLine"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid line."


class InvalidRelation(AppError):
    kind = "InvalidRelation"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Third party is not eligible for this operation."


class Conflict(AppError):
    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."


class StoreUnavailable(AppError):
    kind = "StoreUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Data store is unavailable, please try again later."
