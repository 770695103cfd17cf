from pydantic import BaseModel, field_validator

from app.models.fuel import FUEL_NAME_MAX


class FuelCreateRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        v = v.strip()
        if not v: raise ValueError("Fuel name cannot be empty")
        if len(v) > FUEL_NAME_MAX: raise ValueError(f"Fuel name must be at most {FUEL_NAME_MAX} characters")
        return v
