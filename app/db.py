import os
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import DATABASE_URL


def _connect_args(url):
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(DATABASE_URL, connect_args=_connect_args(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def utcnow():
    """Naive UTC timestamp, as stored in the audit columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def seed_lookups(db):
    """Insert the fixed lookup rows that are missing. Safe to call repeatedly."""
    from app.models.user import Role, ROLE_NAMES
    from app.models.room import RoomCategory, RoomStatus, CATEGORY_NAMES, ROOM_STATUS_NAMES
    from app.models.booking import BookingStatus, BOOKING_STATUS_NAMES

    for model, names in (
        (Role, ROLE_NAMES),
        (RoomCategory, CATEGORY_NAMES),
        (RoomStatus, ROOM_STATUS_NAMES),
        (BookingStatus, BOOKING_STATUS_NAMES),
    ):
        existing = {row.name for row in db.query(model).all()}
        for name in names:
            if name not in existing:
                db.add(model(name=name))
    db.commit()


def init_database():
    if DATABASE_URL.startswith("sqlite:///./data") and not os.path.exists("./data"):
        os.makedirs("./data")
    # models must be imported before create_all
    import app.models.user  # noqa: F401
    import app.models.room  # noqa: F401
    import app.models.booking  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_lookups(db)
    finally:
        db.close()


def get_db():
    """Provide a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
