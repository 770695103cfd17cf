from sqlalchemy import Column, Integer, String, Text, TIMESTAMP
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id              = Column(Integer, primary_key=True, index=True)
    name            = Column(Text, nullable=True)
    email_encrypted = Column(Text, nullable=True)
    email_hash      = Column(String(128), unique=True, nullable=False, index=True)
    password_hash   = Column(String(255), nullable=True)
    role            = Column(String(32), nullable=False)
    created_at      = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User id={self.id} role={self.role}>"
