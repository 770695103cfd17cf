from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.fuel import FUEL_NAME_MAX


class Vehicle(Base):
    __tablename__ = "vehicles"

    id           = Column(Integer, primary_key=True, index=True)
    owner_id     = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title        = Column(Text, nullable=False, default="")
    description  = Column(Text, nullable=False, default="")
    price        = Column(Float, nullable=False, default=0)
    year         = Column(Integer, nullable=True)
    fuel         = Column(String(FUEL_NAME_MAX), nullable=False, default="")
    hp           = Column(Integer, nullable=True)
    seats        = Column(Integer, nullable=True)
    displacement = Column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_vehicle_price_non_negative"),
    )

    # ─── Relationships ─────────────────────────────────────────────────────────
    images = relationship("Image", back_populates="vehicle", order_by="Image.id",
                          cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Vehicle id={self.id} title={self.title!r}>"
