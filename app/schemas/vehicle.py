import math
import re
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.fuel import FUEL_NAME_MAX


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Largest value an INTEGER column holds on every supported database
INT_COLUMN_MAX = 2_147_483_647


# ─── Coercion Helpers ─────────────────────────────────────────────────────────
def coerce_price(v: Any) -> float:
    """Any input becomes a finite, non-negative number; anything else is 0."""
    if isinstance(v, bool) or v is None:
        return 0.0
    try:
        price = float(str(v).strip() or 0) if isinstance(v, str) else float(v)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def coerce_optional_int(v: Any) -> Optional[int]:
    """
    Blank or unparsable input means "unknown" (None), never 0.
    Strings are read up to the first non-digit ("2020 " -> 2020, "1.6" -> 1).
    Negative values and values too large for the column are also unknown.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        number = v
    elif isinstance(v, float):
        if not math.isfinite(v):
            return None
        number = int(v)
    else:
        match = _LEADING_INT.match(str(v))
        if not match:
            return None
        number = int(match.group(1))
    return number if 0 <= number <= INT_COLUMN_MAX else None


_INT_FIELDS = ("year", "hp", "seats", "displacement")


# ─── Requests ─────────────────────────────────────────────────────────────────
class VehicleCreateRequest(BaseModel):
    title:        str           = ""
    description:  str           = ""
    price:        float         = 0
    year:         Optional[int] = None
    fuel:         str           = Field("", max_length=FUEL_NAME_MAX)
    hp:           Optional[int] = None
    seats:        Optional[int] = None
    displacement: Optional[int] = None

    @field_validator("title", "description", "fuel", mode="before")
    @classmethod
    def text_or_empty(cls, v):
        return "" if v is None else str(v)

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, v):
        return coerce_price(v)

    @field_validator(*_INT_FIELDS, mode="before")
    @classmethod
    def check_int(cls, v):
        return coerce_optional_int(v)


class VehicleUpdateRequest(BaseModel):
    """
    Partial update: only fields explicitly supplied (see `model_fields_set`)
    are written. Same coercion rules as create.
    """
    title:        Optional[str]   = None
    description:  Optional[str]   = None
    price:        Optional[float] = None
    year:         Optional[int]   = None
    fuel:         Optional[str]   = Field(None, max_length=FUEL_NAME_MAX)
    hp:           Optional[int]   = None
    seats:        Optional[int]   = None
    displacement: Optional[int]   = None

    @field_validator("title", "description", "fuel", mode="before")
    @classmethod
    def text_or_empty(cls, v):
        return "" if v is None else str(v)

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, v):
        return coerce_price(v)

    @field_validator(*_INT_FIELDS, mode="before")
    @classmethod
    def check_int(cls, v):
        return coerce_optional_int(v)


class VehicleFilter(BaseModel):
    q:        Optional[str] = None
    fuel:     Optional[str] = None
    hp_min:   Optional[int] = None
    hp_max:   Optional[int] = None
    disp_min: Optional[int] = None
    disp_max: Optional[int] = None
    sort:     Optional[str] = None   # price_asc | price_desc | year_desc
