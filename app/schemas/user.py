from pydantic import BaseModel, EmailStr, field_validator

from app.models.role import RoleName


class UserCreateRequest(BaseModel):
    name:     str
    email:    EmailStr
    password: str | None = None
    role:     RoleName

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()
