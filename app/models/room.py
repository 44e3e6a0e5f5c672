from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String, Numeric, Text, ForeignKey
from app.db import Base


CATEGORY_NAMES = ("Standard", "Deluxe", "Suite")

AVAILABLE = "Available"
OCCUPIED = "Occupied"
MAINTENANCE = "Maintenance"
ROOM_STATUS_NAMES = (AVAILABLE, OCCUPIED, MAINTENANCE)


class RoomCategory(Base):
    __tablename__ = "room_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)


class RoomStatus(Base):
    __tablename__ = "room_statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(20), unique=True, index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("room_categories.id"), nullable=False)
    status_id = Column(Integer, ForeignKey("room_statuses.id"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    maintenance_notes = Column(Text, nullable=True)

    category = relationship("RoomCategory", lazy="joined")
    status = relationship("RoomStatus", lazy="joined")
    bookings = relationship("Booking", back_populates="room")

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def status_name(self):
        return self.status.name if self.status else None
