"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from postfeed.config import get_settings
from postfeed.errors import AuthenticationError, ConflictError
from postfeed.models.user import User
from postfeed.schemas.auth import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

settings = get_settings()

INVALID_CREDENTIALS = "Invalid email or password"

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__default_rounds=settings.bcrypt_rounds
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int) -> str:
    """Create a JWT access token."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by normalized email."""
    return db.query(User).filter(User.email == email).first()


def register_user(db: Session, data: SignupRequest) -> User:
    """Create a new user, rejecting an email that is already registered."""
    if get_user_by_email(db, data.email):
        logger.info(f"Signup rejected, email already exists: {data.email}")
        raise ConflictError("Email already exists")

    user = User(name=data.name, email=data.email, password_hash=get_password_hash(data.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        logger.info(f"Signup rejected by unique index: {data.email}")
        raise ConflictError("Email already exists") from e
    db.refresh(user)
    logger.info(f"User signed up: {user.email}")
    return user


def authenticate_user(db: Session, data: LoginRequest) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password raise the same error, and both paths
    perform one hash verification.
    """
    user = get_user_by_email(db, data.email)
    if user is None:
        pwd_context.dummy_verify()
        logger.info(f"Login failed for {data.email}: unknown email")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not verify_password(data.password, user.password_hash):
        logger.info(f"Login failed for {data.email}: wrong password")
        raise AuthenticationError(INVALID_CREDENTIALS)
    logger.info(f"User logged in: {user.email}")
    return user
