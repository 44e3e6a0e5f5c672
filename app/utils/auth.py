import logging
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from app.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from app.db import get_db
from app.models.user import User
from app.schemas.auth import AuthContext, Role
from app.utils.errors import Unauthorized, Forbidden

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# HTTP Bearer scheme for JWT token
bearer_scheme = HTTPBearer(
    scheme_name="JWT",
    description="Enter 'Bearer <your_jwt_token>' in the Value field. Obtain the token via /auth/login.",
    auto_error=False,
)


def verify_password(plain_password, hashed_password):
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    """Hash a password for storage."""
    return pwd_context.hash(password)


def create_access_token(user: User):
    """Create a JWT access token carrying the user id and role."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(user.id), "role": user.role.name, "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def auth_context_for(user: User) -> AuthContext:
    return AuthContext(user_id=user.id, role=Role.normalize(user.role))


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Verify JWT token from Bearer header and return the caller's identity."""
    if credentials is None:
        logger.error("Request without bearer credentials")
        raise Unauthorized("Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError) as e:
        logger.error(f"Invalid access token: {e}")
        raise Unauthorized(f"Could not validate credentials: {str(e)}")

    # role comes from the database so a role change takes effect immediately
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.error(f"Token subject not found: {user_id}")
        raise Unauthorized()
    return auth_context_for(user)


def require_admin(current_user: AuthContext = Depends(get_current_user)) -> AuthContext:
    if not current_user.is_admin:
        logger.error(f"User {current_user.user_id} is not an admin")
        raise Forbidden("Admin role required")
    return current_user
