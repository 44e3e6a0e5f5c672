from datetime import date
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.booking import Booking, BookingStatus, CANCELLED
from app.models.room import Room, RoomCategory, RoomStatus, MAINTENANCE


def conflicting_bookings(
    db: Session,
    room_id: int,
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[int] = None,
):
    """
    Query for non-cancelled bookings of a room that overlap the given stay.

    Boundaries are inclusive: a booking checking out on the day another
    checks in counts as a conflict.
    """
    query = (
        db.query(Booking)
        .join(BookingStatus, Booking.status_id == BookingStatus.id)
        .filter(
            Booking.room_id == room_id,
            BookingStatus.name != CANCELLED,
            Booking.check_in_date <= check_out,
            Booking.check_out_date >= check_in,
        )
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query


def is_available(
    db: Session,
    room_id: int,
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[int] = None,
) -> bool:
    conflict = conflicting_bookings(db, room_id, check_in, check_out, exclude_booking_id).first()
    return conflict is None


def find_available_rooms(
    db: Session, check_in: date, check_out: date, category: Optional[str] = None
) -> List[Room]:
    """
    List rooms that can be booked for the whole stay, optionally limited to one category.
    Rooms under maintenance are never offered.
    """
    query = (
        db.query(Room)
        .join(RoomStatus, Room.status_id == RoomStatus.id)
        .filter(RoomStatus.name != MAINTENANCE)
    )
    if category:
        query = query.join(RoomCategory, Room.category_id == RoomCategory.id).filter(
            func.lower(RoomCategory.name) == category.lower()
        )

    available_rooms = []
    for room in query.order_by(Room.room_number).all():
        if is_available(db, room.id, check_in, check_out):
            available_rooms.append(room)
    return available_rooms
