"""
Booking lifecycle: creation with payment handoff, edits, status changes and
removal. Every operation takes the caller's AuthContext explicitly.

Create and edit lock the room row before checking availability and keep the
check and the write in one transaction, so two requests for the same room
cannot both pass the overlap check.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app.db import utcnow
from app.models.booking import Booking, BookingStatus, PENDING, CONFIRMED, CANCELLED
from app.models.room import Room, MAINTENANCE
from app.schemas.auth import AuthContext
from app.schemas.booking import BookingCreate, BookingUpdate
from app.utils.availability import is_available
from app.utils.errors import Forbidden, NotFound, RoomNotFound, RoomUnavailable, ValidationError
from app.utils.payments import PaymentGateway
from app.utils.pricing import compute_total
from app.utils.status_machine import (
    PAYMENT_PROVIDER,
    TERMINAL_STATUSES,
    append_notes,
    check_transition,
    is_terminal,
    stamp_note,
)
from app.utils.validation_helpers import validate_stay_dates

logger = logging.getLogger(__name__)


def get_status(db: Session, name: str) -> BookingStatus:
    status = db.query(BookingStatus).filter(BookingStatus.name == name).first()
    if status is None:
        logger.error(f"Booking status lookup row missing: {name}")
        raise RuntimeError(f"Booking status lookup row missing: {name}")
    return status


def _get_booking(db: Session, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFound()
    return booking


def _lock_room(db: Session, room_id: int) -> Room:
    room = db.query(Room).filter(Room.id == room_id).with_for_update(of=Room).first()
    if not room:
        logger.error(f"Room not found: {room_id}")
        raise RoomNotFound()
    return room


def _ensure_bookable(room: Room) -> None:
    if room.status_name == MAINTENANCE:
        logger.error(f"Room {room.id} is under maintenance")
        raise RoomUnavailable("Room is under maintenance")


def _authorize(booking: Booking, auth: AuthContext, action: str) -> None:
    if booking.user_id != auth.user_id and not auth.is_admin:
        logger.error(f"User {auth.user_id} not authorized to {action} booking {booking.id}")
        raise Forbidden(f"Not authorized to {action} this booking")


def _ensure_available(db: Session, room_id: int, check_in: date, check_out: date, exclude_booking_id=None):
    if not is_available(db, room_id, check_in, check_out, exclude_booking_id):
        logger.error(f"Overlapping booking found for room_id: {room_id}, dates: {check_in} to {check_out}")
        raise RoomUnavailable()


def list_bookings(
    db: Session, auth: AuthContext, active_only: bool = False, skip: int = 0, limit: int = 100
) -> List[Booking]:
    query = db.query(Booking)
    if active_only:
        query = query.join(BookingStatus, Booking.status_id == BookingStatus.id).filter(
            BookingStatus.name.notin_(TERMINAL_STATUSES)
        )
    bookings = (
        query.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(skip).limit(limit).all()
    )
    logger.debug(f"Retrieved {len(bookings)} bookings for user {auth.user_id}")
    return bookings


def get_booking(db: Session, auth: AuthContext, booking_id: int) -> Booking:
    booking = _get_booking(db, booking_id)
    logger.debug(f"Retrieved booking: {booking_id} for user {auth.user_id}")
    return booking


def create_booking(
    db: Session,
    auth: AuthContext,
    data: BookingCreate,
    gateway: PaymentGateway,
    today: Optional[date] = None,
) -> Tuple[Booking, str]:
    """
    Reserve a room as Pending and open a checkout session for it.

    Returns the booking and the checkout session id the client redirects to.
    The booking is only committed once the session exists.
    """
    logger.debug(
        f"Creating booking for user: {auth.user_id}, room_id: {data.room_id}, "
        f"dates: {data.check_in_date} to {data.check_out_date}"
    )
    validate_stay_dates(data.check_in_date, data.check_out_date, today)

    try:
        room = _lock_room(db, data.room_id)
        _ensure_bookable(room)
        _ensure_available(db, room.id, data.check_in_date, data.check_out_date)
        total = compute_total(room.price, data.check_in_date, data.check_out_date)

        booking = Booking(
            user_id=auth.user_id,
            room=room,
            status=get_status(db, PENDING),
            check_in_date=data.check_in_date,
            check_out_date=data.check_out_date,
            number_of_guests=data.number_of_guests,
            special_requests=data.special_requests,
            total_amount=total,
        )
        db.add(booking)
        db.flush()

        session_id = gateway.create_checkout_session(booking, total)
        booking.payment_session_id = session_id
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    logger.debug(f"Created booking: {booking.id}, total: {booking.total_amount}, session: {session_id}")
    return booking, session_id


def update_booking(
    db: Session,
    auth: AuthContext,
    booking_id: int,
    data: BookingUpdate,
    today: Optional[date] = None,
) -> Booking:
    db_booking = _get_booking(db, booking_id)
    _authorize(db_booking, auth, "update")

    if is_terminal(db_booking.status_name):
        logger.error(f"Booking {booking_id} is {db_booking.status_name} and cannot be edited")
        raise ValidationError(f"A {db_booking.status_name.lower()} booking cannot be edited")

    # explicit nulls on required columns mean "leave unchanged"
    update_data = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in ("special_requests", "notes")
    }
    if "notes" in update_data and not auth.is_admin:
        logger.error(f"User {auth.user_id} tried to edit internal notes of booking {booking_id}")
        raise Forbidden("Only administrators may edit internal notes")

    room_id = update_data.get("room_id", db_booking.room_id)
    check_in = update_data.get("check_in_date", db_booking.check_in_date)
    check_out = update_data.get("check_out_date", db_booking.check_out_date)
    validate_stay_dates(
        check_in,
        check_out,
        today,
        check_past=check_in != db_booking.check_in_date,
    )

    try:
        stay_changed = (
            room_id != db_booking.room_id
            or check_in != db_booking.check_in_date
            or check_out != db_booking.check_out_date
        )
        if stay_changed:
            room = _lock_room(db, room_id)
            if room_id != db_booking.room_id:
                _ensure_bookable(room)
            _ensure_available(db, room.id, check_in, check_out, exclude_booking_id=db_booking.id)
            db_booking.room = room
            db_booking.total_amount = compute_total(room.price, check_in, check_out)

        for key, value in update_data.items():
            setattr(db_booking, key, value)
        db_booking.updated_at = utcnow()
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_booking)
    logger.debug(f"Updated booking: {booking_id}, total: {db_booking.total_amount}")
    return db_booking


def _apply_transition(
    db: Session, booking: Booking, target: BookingStatus, actor: str, notes: Optional[str] = None
) -> Booking:
    current = booking.status_name
    check_transition(actor, current, target.name)

    try:
        if target.name != CANCELLED:
            _lock_room(db, booking.room_id)
            _ensure_available(
                db, booking.room_id, booking.check_in_date, booking.check_out_date,
                exclude_booking_id=booking.id,
            )
        booking.status = target
        booking.notes = append_notes(booking.notes, stamp_note(current, target.name, actor), notes)
        booking.updated_at = utcnow()
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(booking)
    logger.debug(f"Booking {booking.id} moved from {current} to {target.name} by {actor}")
    return booking


def update_booking_status(
    db: Session, auth: AuthContext, booking_id: int, status_id: int, notes: Optional[str] = None
) -> Booking:
    """Check-in/check-out/cancel workflow entry point."""
    booking = _get_booking(db, booking_id)
    _authorize(booking, auth, "change the status of")
    if notes and not auth.is_admin:
        logger.error(f"User {auth.user_id} tried to add internal notes to booking {booking_id}")
        raise Forbidden("Only administrators may edit internal notes")

    target = db.get(BookingStatus, status_id)
    if target is None:
        logger.error(f"Unknown booking status id: {status_id}")
        raise ValidationError("Unknown booking status")
    return _apply_transition(db, booking, target, auth.role.name, notes)


def confirm_payment(
    db: Session, auth: AuthContext, booking_id: int, session_id: str, gateway: PaymentGateway
) -> Booking:
    """
    Record a successful checkout for a booking. Calling it again for an
    already confirmed booking with the same session is a no-op.
    """
    booking = _get_booking(db, booking_id)
    _authorize(booking, auth, "confirm payment for")

    if booking.payment_session_id != session_id:
        logger.error(f"Checkout session {session_id} does not belong to booking {booking_id}")
        raise ValidationError("Checkout session does not belong to this booking")
    if booking.status_name == CONFIRMED:
        logger.debug(f"Payment for booking {booking_id} already confirmed")
        return booking
    if not gateway.is_session_paid(session_id):
        logger.error(f"Checkout session {session_id} for booking {booking_id} is not paid")
        raise ValidationError("Payment has not been completed")

    return _apply_transition(db, booking, get_status(db, CONFIRMED), PAYMENT_PROVIDER)


def delete_booking(db: Session, auth: AuthContext, booking_id: int) -> None:
    db_booking = _get_booking(db, booking_id)
    _authorize(db_booking, auth, "delete")

    db.delete(db_booking)
    db.commit()
    logger.debug(f"Deleted booking: {booking_id}")
