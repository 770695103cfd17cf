from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Image(Base):
    __tablename__ = "images"

    id         = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    url        = Column(Text, nullable=False)

    vehicle = relationship("Vehicle", back_populates="images")

    def __repr__(self):
        return f"<Image id={self.id} vehicle={self.vehicle_id}>"
