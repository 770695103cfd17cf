from sqlalchemy import String, func, select
from sqlalchemy.orm import Session

from app.models.image import Image
from app.models.role import RoleName
from app.models.user import User
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreateRequest, VehicleUpdateRequest, VehicleFilter
from app.utils.exceptions import NotFoundException, ForbiddenException


def _serialize(v: Vehicle) -> dict:
    return {
        "id":           v.id,
        "owner_id":     v.owner_id,
        "title":        v.title,
        "description":  v.description,
        "price":        float(v.price) if v.price is not None else 0,
        "year":         v.year,
        "fuel":         v.fuel,
        "hp":           v.hp,
        "seats":        v.seats,
        "displacement": v.displacement,
    }


def _first_image_url():
    return (
        select(Image.url)
        .where(Image.vehicle_id == Vehicle.id)
        .order_by(Image.id)
        .limit(1)
        .correlate(Vehicle)
        .scalar_subquery()
    )


class VehicleService:

    # ─── Query ────────────────────────────────────────────────────────────────
    def list_vehicles(self, db: Session, filters: VehicleFilter | None = None) -> list[dict]:
        f = filters or VehicleFilter()
        q = db.query(Vehicle, _first_image_url().label("image"))

        if f.q:
            haystack = func.lower(Vehicle.title + " " + func.coalesce(Vehicle.description, ""), type_=String)
            q = q.filter(haystack.contains(f.q.lower(), autoescape=True))
        if f.fuel:
            q = q.filter(func.lower(Vehicle.fuel) == f.fuel.lower())
        if f.hp_min is not None:   q = q.filter(Vehicle.hp >= f.hp_min)
        if f.hp_max is not None:   q = q.filter(Vehicle.hp <= f.hp_max)
        if f.disp_min is not None: q = q.filter(Vehicle.displacement >= f.disp_min)
        if f.disp_max is not None: q = q.filter(Vehicle.displacement <= f.disp_max)

        if f.sort == "price_asc":
            q = q.order_by(Vehicle.price.asc(), Vehicle.id)
        elif f.sort == "price_desc":
            q = q.order_by(Vehicle.price.desc(), Vehicle.id)
        elif f.sort == "year_desc":
            q = q.order_by(Vehicle.year.desc().nulls_last(), Vehicle.id)
        else:
            q = q.order_by(Vehicle.id)

        return [{**_serialize(v), "image": image} for v, image in q.all()]

    def get_vehicle(self, db: Session, vehicle_id: int) -> dict | None:
        v = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if not v:
            return None
        return {**_serialize(v), "images": self.list_images(db, vehicle_id)}

    def list_images(self, db: Session, vehicle_id: int) -> list[str]:
        rows = db.query(Image.url).filter(Image.vehicle_id == vehicle_id).order_by(Image.id).all()
        return [url for (url,) in rows]

    # ─── Mutations ────────────────────────────────────────────────────────────
    def create_vehicle(
        self, db: Session, data: VehicleCreateRequest, owner_id: int | None,
        image_urls: list[str] | None = None,
    ) -> int:
        vehicle = Vehicle(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            price=data.price,
            year=data.year,
            fuel=data.fuel,
            hp=data.hp,
            seats=data.seats,
            displacement=data.displacement,
        )
        db.add(vehicle)
        db.flush()
        for url in image_urls or []:
            db.add(Image(vehicle_id=vehicle.id, url=url))
        db.commit()
        return vehicle.id

    def update_vehicle(
        self, db: Session, vehicle_id: int, data: VehicleUpdateRequest,
        image_urls: list[str] | None = None,
    ) -> None:
        v = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if not v:
            raise NotFoundException("Vehicle")

        supplied = data.model_fields_set
        if "title" in supplied:        v.title        = data.title
        if "description" in supplied:  v.description  = data.description
        if "price" in supplied:        v.price        = data.price
        if "year" in supplied:         v.year         = data.year
        if "fuel" in supplied:         v.fuel         = data.fuel
        if "hp" in supplied:           v.hp           = data.hp
        if "seats" in supplied:        v.seats        = data.seats
        if "displacement" in supplied: v.displacement = data.displacement

        for url in image_urls or []:
            db.add(Image(vehicle_id=v.id, url=url))
        db.commit()

    def delete_vehicle(self, db: Session, vehicle_id: int) -> None:
        # Images first, then the vehicle, in one transaction
        db.query(Image).filter(Image.vehicle_id == vehicle_id).delete(synchronize_session=False)
        db.query(Vehicle).filter(Vehicle.id == vehicle_id).delete(synchronize_session=False)
        db.commit()

    def add_image(self, db: Session, vehicle_id: int, url: str) -> int:
        if not db.query(Vehicle.id).filter(Vehicle.id == vehicle_id).first():
            raise NotFoundException("Vehicle")
        image = Image(vehicle_id=vehicle_id, url=url)
        db.add(image)
        db.commit()
        return image.id

    # ─── Authorization ────────────────────────────────────────────────────────
    def get_for_modification(self, db: Session, vehicle_id: int, actor: User) -> Vehicle:
        """Owners may modify any vehicle; partners only the ones they created."""
        v = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if not v:
            raise NotFoundException("Vehicle")
        if actor.role == RoleName.OWNER.value:
            return v
        if actor.role == RoleName.PARTNER.value and v.owner_id == actor.id:
            return v
        raise ForbiddenException("You can only modify vehicles you listed")


vehicle_service = VehicleService()
