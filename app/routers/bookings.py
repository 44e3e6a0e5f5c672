from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.schemas.auth import AuthContext
from app.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    BookingStatusUpdate,
    BookingResponse,
    BookingCheckoutResponse,
    PaymentConfirmation,
)
from app.services import bookings as booking_service
from app.utils.auth import get_current_user
from app.utils.payments import PaymentGateway, get_payment_gateway

router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings"],
)

@router.post(
    "/",
    response_model=BookingCheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Reserve a room for a stay and open a payment checkout session. Requires authentication."
)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Create a Pending booking and start payment for it.

    - **room_id**: ID of the room to book.
    - **check_in_date**: First night of the stay (not in the past).
    - **check_out_date**: Departure date, after the check-in date.
    - **number_of_guests**: At least one.
    - **special_requests**: Optional free text.

    Returns the booking together with the checkout **session_id** to redirect to.
    """
    db_booking, session_id = booking_service.create_booking(db, current_user, booking, gateway)
    payload = BookingResponse.model_validate(db_booking).model_dump()
    return BookingCheckoutResponse(**payload, session_id=session_id)

@router.get(
    "/",
    response_model=List[BookingResponse],
    summary="List all bookings",
    description="Retrieve bookings, newest first. Requires authentication."
)
def get_bookings(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    """
    Retrieve a list of all bookings with guest, room and status details.

    - **skip**: Number of bookings to skip.
    - **limit**: Maximum number of bookings to return.
    """
    return booking_service.list_bookings(db, current_user, skip=skip, limit=limit)

@router.get(
    "/active",
    response_model=List[BookingResponse],
    summary="List active bookings",
    description="Bookings that are neither completed nor cancelled, for operational dashboards."
)
def get_active_bookings(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return booking_service.list_bookings(db, current_user, active_only=True, skip=skip, limit=limit)

@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Retrieve a specific booking by its ID."
)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return booking_service.get_booking(db, current_user, booking_id)

@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    description="Update a booking's stay or details. Requires ownership or the admin role."
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    """
    Update a booking. Changing the room or dates re-checks availability and
    recomputes the total from the room's current nightly rate.

    - **room_id**: (Optional) New room ID.
    - **check_in_date** / **check_out_date**: (Optional) New stay dates.
    - **number_of_guests**: (Optional) New guest count.
    - **special_requests**: (Optional) New requests.
    - **notes**: (Optional, admin only) Internal notes.
    """
    return booking_service.update_booking(db, current_user, booking_id, booking_update)

@router.patch(
    "/{booking_id}/status",
    response_model=BookingResponse,
    summary="Change booking status",
    description="Check in, check out or cancel a booking. Requires ownership or the admin role."
)
def update_booking_status(
    booking_id: int,
    status_update: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    """
    Move a booking to another status.

    - Pending -> Confirmed: check-in (admin)
    - Confirmed -> Completed: check-out (admin)
    - Pending/Confirmed -> Cancelled: owner or admin

    A timestamped note is added for every change; **notes** are appended after it.
    """
    return booking_service.update_booking_status(
        db, current_user, booking_id, status_update.status_id, status_update.notes
    )

@router.post(
    "/{booking_id}/payment-success",
    response_model=BookingResponse,
    summary="Confirm payment",
    description="Called after the checkout redirect; confirms a Pending booking once the session is paid."
)
def confirm_payment(
    booking_id: int,
    confirmation: PaymentConfirmation,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    return booking_service.confirm_payment(
        db, current_user, booking_id, confirmation.session_id, gateway
    )

@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a booking",
    description="Delete a booking. Requires ownership or the admin role."
)
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    """
    Delete a booking permanently.

    - **booking_id**: ID of the booking to delete.
    """
    booking_service.delete_booking(db, current_user, booking_id)
    return None
