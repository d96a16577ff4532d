"""
Custom exceptions for the bakery admin backend.

Services raise these instead of HTTPException; the app maps each class
to its status code in a single handler (see main.py).
"""

from typing import Optional, Any, Dict


class AdminError(Exception):
    """Base exception for all bakery admin errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            "details": self.details
        }


class NotFoundError(AdminError):
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity} not found",
            code="NOT_FOUND",
            details={"entity": entity, "id": str(entity_id)}
        )


class ValidationError(AdminError):
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, code="VALIDATION_ERROR", details={"field": field} if field else None)


class InvalidTransitionError(AdminError):
    """Order status change not allowed from the current status"""

    status_code = 409

    def __init__(self, current: str, requested: str, allowed):
        super().__init__(
            f"Cannot change order status from {current} to {requested}",
            code="INVALID_TRANSITION",
            details={"current": current, "requested": requested, "allowed": list(allowed)}
        )


class AuthenticationError(AdminError):
    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(AdminError):
    status_code = 403

    def __init__(self, message: str = "Unauthorized access"):
        super().__init__(message, code="FORBIDDEN")


class UpstreamError(AdminError):
    """An external service (prediction API, image host) failed"""

    status_code = 502

    def __init__(self, service: str, message: str):
        super().__init__(f"{service} request failed: {message}", code="UPSTREAM_ERROR", details={"service": service})
