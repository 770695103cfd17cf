from sqlalchemy.orm import Session

from app.config import settings
from app.schemas.auth import LoginRequest
from app.services.user_service import user_service
from app.utils.security import create_access_token


class AuthService:

    # ─── Login ────────────────────────────────────────────────────────────────
    def login(self, db: Session, data: LoginRequest) -> dict:
        user = user_service.authenticate(db, data.email, data.password)
        access_token = create_access_token(user["id"], user["role"])

        return {
            "accessToken": access_token,
            "tokenType":   "Bearer",
            "expiresIn":   settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user": {
                "id":    user["id"],
                "name":  user["name"],
                "email": user["email"],
                "role":  user["role"],
            }
        }


auth_service = AuthService()
