from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db import Base, utcnow


ADMIN = "admin"
GUEST = "guest"
STAFF = "staff"
ROLE_NAMES = (ADMIN, GUEST, STAFF)


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(20), unique=True, nullable=False)

    users = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    hashed_password = Column(String, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    role = relationship("Role", back_populates="users", lazy="joined")
    bookings = relationship("Booking", back_populates="user")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
