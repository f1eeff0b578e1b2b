"""Structured service errors shared by every domain"""

from typing import Optional

from fastapi import HTTPException


class ServiceError(HTTPException):
    """Base error: an HTTP status plus a machine readable kind"""

    kind = "SERVICE_ERROR"
    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(status_code=status_code or self.status_code, detail=message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


class NotFound(ServiceError):
    kind = "NOT_FOUND"
    status_code = 404


class InsufficientStock(ServiceError):
    kind = "INSUFFICIENT_STOCK"
    status_code = 400

    def __init__(self, part_id: int, message: Optional[str] = None):
        super().__init__(message or f"Insufficient stock for part: {part_id}")
        self.part_id = part_id

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["part_id"] = self.part_id
        return payload


class ValidationFailed(ServiceError):
    kind = "VALIDATION_FAILED"
    status_code = 422


class Unauthorized(ServiceError):
    kind = "UNAUTHORIZED"
    status_code = 403


class Conflict(ServiceError):
    kind = "CONFLICT"
    status_code = 409


class InvalidTransition(ServiceError):
    kind = "INVALID_TRANSITION"
    status_code = 409
