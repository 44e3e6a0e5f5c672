import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.config import LOG_LEVEL
from app.routers import auth, rooms, bookings
from app.db import init_database

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing database"
    init_database()
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Hotel booker",
    description="Hotel room bookings with availability checks, payment checkout and check-in/out tracking.",
    version="0.1.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
)


app.include_router(auth.router)
app.include_router(rooms.router)
app.include_router(bookings.router)
