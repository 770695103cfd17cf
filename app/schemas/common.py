from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


# ─── Response Envelopes ───────────────────────────────────────────────────────
class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


class ErrorResponse(BaseModel):
    """Shape produced by app.middleware.error_handler for every 4xx/5xx."""
    success: bool = False
    message: str
    error: dict[str, Any]


def success_response(message: str, data: Any = None) -> dict:
    return {"success": True, "message": message, "data": data}
