from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_staff_user
from app.models.user import User
from app.schemas.fuel import FuelCreateRequest
from app.schemas.common import success_response
from app.services.fuel_service import fuel_service

router = APIRouter(prefix="/fuels")


@router.get("", summary="List fuel types (alphabetical)")
def list_fuels(db: Session = Depends(get_db)):
    return success_response("Fuels retrieved", fuel_service.list_fuels(db))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create fuel type (Owner/Partner)")
def create_fuel(
    body: FuelCreateRequest,
    db:   Session = Depends(get_db),
    _:    User    = Depends(get_staff_user),
):
    fuel_id = fuel_service.create_fuel(db, body.name)
    return success_response("Fuel saved", {"id": fuel_id})
