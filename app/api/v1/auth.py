from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import LoginRequest
from app.schemas.common import SuccessResponse, ErrorResponse, success_response
from app.services.auth_service import auth_service
from app.services.user_service import user_service

router = APIRouter(prefix="/auth")


# ─── POST /auth/login ─────────────────────────────────────────────────────────
@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    summary="Login and receive an access token",
    response_model=SuccessResponse,
    responses={401: {"model": ErrorResponse}},
)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate with email + password.
    Unknown email and wrong password return the same 401.
    """
    result = auth_service.login(db, data)
    return success_response("Login successful", result)


# ─── GET /auth/me ─────────────────────────────────────────────────────────────
@router.get("/me", summary="Current user profile", response_model=SuccessResponse)
def me(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return success_response("Profile retrieved", user_service.get_user_by_id(db, current_user.id))
