import logging
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from app.db import get_db
from app.models.user import User, Role, GUEST
from app.schemas.auth import AuthContext
from app.schemas.user import UserCreate, UserResponse, Token
from app.utils.auth import create_access_token, get_current_user, get_password_hash, verify_password
from app.utils.errors import Unauthorized, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new guest account.
    """
    if db.query(User).filter(User.email == user.email).first():
        logger.error(f"Registration with existing email: {user.email}")
        raise ValidationError("Email is already registered")

    guest_role = db.query(Role).filter(Role.name == GUEST).first()
    db_user = User(
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        hashed_password=get_password_hash(user.password),
        role=guest_role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.debug(f"Registered user: {db_user.id}")
    return db_user


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Exchange email and password for a bearer token. The email goes in the **username** field.
    """
    user = db.query(User).filter(User.email == form_data.username).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.error(f"Failed login for: {form_data.username}")
        raise Unauthorized("Incorrect email or password")
    return Token(access_token=create_access_token(user))


@router.get("/me", response_model=UserResponse)
def read_me(current_user: AuthContext = Depends(get_current_user), db: Session = Depends(get_db)):
    return db.query(User).filter(User.id == current_user.user_id).first()
