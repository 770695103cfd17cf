import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.fuel import Fuel, FUEL_NAME_MAX
from app.utils.exceptions import DuplicateEntryException, ValidationException

logger = logging.getLogger(__name__)

CREATE_ATTEMPTS = 3


class FuelService:

    def list_fuels(self, db: Session) -> list[dict]:
        fuels = db.query(Fuel).order_by(Fuel.name).all()
        return [{"id": f.id, "name": f.name} for f in fuels]

    def create_fuel(self, db: Session, name: str) -> int:
        """
        Insert a fuel type, or return the id of the existing row with the
        same name. The unique constraint decides concurrent inserts: the
        loser rolls back and re-reads the winner.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationException("Fuel name cannot be empty", field="name")
        if len(name) > FUEL_NAME_MAX:
            raise ValidationException(f"Fuel name must be at most {FUEL_NAME_MAX} characters", field="name")

        for attempt in range(1, CREATE_ATTEMPTS + 1):
            existing = db.query(Fuel.id).filter(Fuel.name == name).first()
            if existing:
                return existing.id

            fuel = Fuel(name=name)
            db.add(fuel)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.info(f"Fuel {name!r} inserted concurrently (attempt {attempt}), re-reading")
                continue
            return fuel.id

        raise DuplicateEntryException("Fuel type could not be created", field="name")


fuel_service = FuelService()
