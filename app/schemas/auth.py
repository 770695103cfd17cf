from pydantic import BaseModel, EmailStr


# ─── Request Schemas ──────────────────────────────────────────────────────────
class LoginRequest(BaseModel):
    email:    EmailStr
    password: str
