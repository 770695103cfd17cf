from sqlalchemy import Column, Integer, String
from app.database import Base

FUEL_NAME_MAX = 64


class Fuel(Base):
    __tablename__ = "fuels"

    id   = Column(Integer, primary_key=True, index=True)
    name = Column(String(FUEL_NAME_MAX), unique=True, nullable=False)

    def __repr__(self):
        return f"<Fuel id={self.id} name={self.name}>"
