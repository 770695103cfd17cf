from fastapi import HTTPException, status


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES: machine-readable constants for frontend switch/case
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode:
    VALIDATION_ERROR        = "VALIDATION_ERROR"
    UNAUTHORIZED            = "UNAUTHORIZED"
    FORBIDDEN               = "FORBIDDEN"
    NOT_FOUND               = "NOT_FOUND"
    DUPLICATE_ENTRY         = "DUPLICATE_ENTRY"
    INTERNAL_SERVER_ERROR   = "INTERNAL_SERVER_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(HTTPException):
    """
    Base exception for all application-level errors.
    Carries a machine-readable error_code for frontend handling.
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str,
        details: list | None = None,
        field: str | None = None,
    ):
        super().__init__(status_code=status_code, detail={
            "message": message,
            "error": {
                "code": error_code,
                "details": details,
                "field": field,
            }
        })


# ═══════════════════════════════════════════════════════════════════════════════
# CONCRETE EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class ValidationException(AppException):
    def __init__(self, message: str = "Invalid input", field: str | None = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, ErrorCode.VALIDATION_ERROR, field=field)


class UnauthorizedException(AppException):
    # Same message for unknown email, wrong password and bad tokens
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, ErrorCode.UNAUTHORIZED)


class ForbiddenException(AppException):
    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(status.HTTP_403_FORBIDDEN, message, ErrorCode.FORBIDDEN)


class NotFoundException(AppException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found", ErrorCode.NOT_FOUND)


class DuplicateEntryException(AppException):
    def __init__(self, message: str = "Record already exists", field: str | None = None):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.DUPLICATE_ENTRY, field=field)
