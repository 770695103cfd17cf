from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional

from app.config import settings
from app.database import get_db
from app.dependencies import get_staff_user
from app.models.user import User
from app.models.fuel import FUEL_NAME_MAX
from app.schemas.vehicle import VehicleCreateRequest, VehicleUpdateRequest, VehicleFilter, INT_COLUMN_MAX
from app.schemas.common import success_response
from app.services.vehicle_service import vehicle_service
from app.utils.exceptions import NotFoundException, ValidationException
from app.utils.storage import remove_uploads, save_uploads

router = APIRouter(prefix="/vehicles")


def vehicle_form(
    title:        Optional[str] = Form(None),
    description:  Optional[str] = Form(None),
    price:        Optional[str] = Form(None),
    year:         Optional[str] = Form(None),
    fuel:         Optional[str] = Form(None, max_length=FUEL_NAME_MAX),
    hp:           Optional[str] = Form(None),
    seats:        Optional[str] = Form(None),
    displacement: Optional[str] = Form(None),
) -> dict:
    """Form fields actually sent by the client (absent ones are left out)."""
    fields = {
        "title": title, "description": description, "price": price, "year": year,
        "fuel": fuel, "hp": hp, "seats": seats, "displacement": displacement,
    }
    return {k: v for k, v in fields.items() if v is not None}


def _store_images(images: list[UploadFile] | None) -> list[str]:
    images = [f for f in images or [] if f.filename]
    if len(images) > settings.MAX_IMAGES_PER_REQUEST:
        raise ValidationException(
            f"At most {settings.MAX_IMAGES_PER_REQUEST} images per request", field="images"
        )
    return save_uploads(images)


@router.get("", summary="List vehicles (filter + sort)")
def list_vehicles(
    q:        Optional[str] = Query(None, description="Text search in title and description"),
    fuel:     Optional[str] = Query(None),
    hp_min:   Optional[int] = Query(None, ge=0, le=INT_COLUMN_MAX),
    hp_max:   Optional[int] = Query(None, ge=0, le=INT_COLUMN_MAX),
    disp_min: Optional[int] = Query(None, ge=0, le=INT_COLUMN_MAX),
    disp_max: Optional[int] = Query(None, ge=0, le=INT_COLUMN_MAX),
    sort:     Optional[str] = Query(None, description="price_asc | price_desc | year_desc"),
    db:       Session       = Depends(get_db),
):
    filters = VehicleFilter(q=q, fuel=fuel, hp_min=hp_min, hp_max=hp_max,
                            disp_min=disp_min, disp_max=disp_max, sort=sort)
    data = vehicle_service.list_vehicles(db, filters)
    return success_response("Vehicles retrieved successfully", data)


@router.get("/{vehicle_id}", summary="Get vehicle by ID with all images")
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    data = vehicle_service.get_vehicle(db, vehicle_id)
    if data is None:
        raise NotFoundException("Vehicle")
    return success_response("Vehicle retrieved", data)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create vehicle (Owner/Partner)")
def create_vehicle(
    fields: dict                         = Depends(vehicle_form),
    images: Optional[list[UploadFile]]   = File(None),
    db:     Session                      = Depends(get_db),
    current_user: User                   = Depends(get_staff_user),
):
    data = VehicleCreateRequest(**fields)
    urls = _store_images(images)
    try:
        vehicle_id = vehicle_service.create_vehicle(db, data, current_user.id, urls)
    except Exception:
        remove_uploads(urls)
        raise
    return success_response("Vehicle created successfully", {"id": vehicle_id})


@router.put("/{vehicle_id}", summary="Update vehicle (Owner, or the Partner who listed it)")
def update_vehicle(
    vehicle_id: int,
    fields: dict                         = Depends(vehicle_form),
    images: Optional[list[UploadFile]]   = File(None),
    db:     Session                      = Depends(get_db),
    current_user: User                   = Depends(get_staff_user),
):
    vehicle_service.get_for_modification(db, vehicle_id, current_user)
    data = VehicleUpdateRequest(**fields)
    urls = _store_images(images)
    try:
        vehicle_service.update_vehicle(db, vehicle_id, data, urls)
    except Exception:
        remove_uploads(urls)
        raise
    return success_response("Vehicle updated successfully", vehicle_service.get_vehicle(db, vehicle_id))


@router.delete("/{vehicle_id}", summary="Delete vehicle and its images (Owner, or the Partner who listed it)")
def delete_vehicle(
    vehicle_id: int,
    db:         Session = Depends(get_db),
    current_user: User  = Depends(get_staff_user),
):
    vehicle_service.get_for_modification(db, vehicle_id, current_user)
    vehicle_service.delete_vehicle(db, vehicle_id)
    return success_response("Vehicle deleted successfully", None)
