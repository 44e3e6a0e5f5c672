from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.db import Base, utcnow


PENDING = "Pending"
CONFIRMED = "Confirmed"
CANCELLED = "Cancelled"
COMPLETED = "Completed"
BOOKING_STATUS_NAMES = (PENDING, CONFIRMED, CANCELLED, COMPLETED)


class BookingStatus(Base):
    __tablename__ = "booking_statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(20), unique=True, nullable=False)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="check_booking_dates_order"),
        CheckConstraint("number_of_guests >= 1", name="check_booking_guests_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    status_id = Column(Integer, ForeignKey("booking_statuses.id"), nullable=False)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    number_of_guests = Column(Integer, nullable=False, default=1)
    special_requests = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    payment_session_id = Column(String(255), nullable=True, index=True)
    booking_date = Column(DateTime, nullable=False, default=utcnow)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    room = relationship("Room", back_populates="bookings", lazy="joined")
    user = relationship("User", back_populates="bookings", lazy="joined")
    status = relationship("BookingStatus", lazy="joined")

    # Flattened join columns for the API responses
    @property
    def status_name(self):
        return self.status.name

    @property
    def user_name(self):
        return self.user.full_name

    @property
    def user_email(self):
        return self.user.email

    @property
    def room_number(self):
        return self.room.room_number

    @property
    def room_price(self):
        return self.room.price

    @property
    def room_category(self):
        return self.room.category_name
