import logging
from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.db import get_db
from app.models.room import Room, RoomCategory, RoomStatus, MAINTENANCE
from app.schemas.auth import AuthContext
from app.schemas.room import RoomCreate, RoomResponse
from app.utils.auth import get_current_user, require_admin
from app.utils.availability import find_available_rooms
from app.utils.errors import RoomNotFound, ValidationError
from app.utils.validation_helpers import validate_stay_dates

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
)


def _lookup(db, model, name, label):
    row = db.query(model).filter(model.name == name).first()
    if row is None:
        logger.error(f"Unknown room {label}: {name}")
        raise ValidationError(f"Unknown room {label}: {name}")
    return row


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(room: RoomCreate, db: Session = Depends(get_db), current_user: AuthContext = Depends(require_admin)):
    """
    Add a room to the inventory.
    Requires the admin role. Maintenance notes are required for rooms under maintenance only.
    """
    if room.status == MAINTENANCE and not room.maintenance_notes:
        logger.error(f"Room {room.room_number} under maintenance created without notes")
        raise ValidationError("Maintenance notes are required for rooms under maintenance")
    if room.status != MAINTENANCE and room.maintenance_notes:
        logger.error(f"Maintenance notes given for room {room.room_number} with status {room.status}")
        raise ValidationError("Maintenance notes are only allowed for rooms under maintenance")
    if db.query(Room).filter(Room.room_number == room.room_number).first():
        logger.error(f"Room number already exists: {room.room_number}")
        raise ValidationError(f"Room number {room.room_number} already exists")

    db_room = Room(
        room_number=room.room_number,
        price=room.price,
        maintenance_notes=room.maintenance_notes,
        category=_lookup(db, RoomCategory, room.category, "category"),
        status=_lookup(db, RoomStatus, room.status, "status"),
    )
    db.add(db_room)
    db.commit()
    db.refresh(db_room)
    logger.debug(f"Created room {db_room.room_number} by user {current_user.user_id}")
    return db_room


@router.get("/", response_model=List[RoomResponse])
def get_rooms(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """
    Retrieve a list of all rooms.
    """
    rooms = db.query(Room).order_by(Room.room_number).offset(skip).limit(limit).all()
    return rooms


@router.get("/availability", response_model=List[RoomResponse])
def get_available_rooms(
    check_in: date,
    check_out: date,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    """
    List rooms free for the whole stay.

    - **check_in** / **check_out**: Stay dates (e.g., 2025-05-04).
    - **category**: (Optional) Standard, Deluxe or Suite.
    """
    validate_stay_dates(check_in, check_out, check_past=False)
    rooms = find_available_rooms(db, check_in, check_out, category)
    logger.debug(f"Found {len(rooms)} available rooms for {check_in} to {check_out}, category: {category}")
    return rooms


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a specific room by ID.
    """
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        logger.error(f"Room not found: {room_id}")
        raise RoomNotFound()
    return room
