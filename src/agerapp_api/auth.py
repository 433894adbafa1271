"""
Authentication utilities and JWT token handling
"""
import hashlib
import logging
import os
import uuid
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .database import get_db, User
from .db.models import UserRole

logger = logging.getLogger(__name__)


def get_secret_key():
    """Get secret key from config module"""
    from .config import config
    return config.SECRET_KEY


# Security configuration
ALGORITHM = "HS256"

# Cost factor (rounds): each increment doubles hashing time
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS
)


def _prepare_password(password: str) -> bytes:
    """bcrypt only reads 72 bytes; longer passwords are SHA-256 pre-hashed"""
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        return hashlib.sha256(password_bytes).hexdigest().encode('utf-8')
    return password_bytes


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if not plain_password or not hashed_password:
        return False

    prepared = _prepare_password(plain_password)
    try:
        return pwd_context.verify(prepared, hashed_password)
    except (ValueError, TypeError):
        # passlib rejects some bcrypt backends' hash variants; check directly
        try:
            return bcrypt.checkpw(prepared, hashed_password.encode('utf-8'))
        except ValueError as e:
            logger.warning(f"Password verification failed: {type(e).__name__}")
            return False


def get_password_hash(password: str) -> str:
    """Hash a password, handling bcrypt's 72-byte limit"""
    if not password:
        raise ValueError("Password cannot be empty")

    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prepare_password(password), salt).decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """
    Create a JWT access token

    Args:
        data: Claims; must include 'sub' (user id). 'email' and 'role' are
            carried so clients can read them without a profile request.
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    from .config import config

    to_encode = data.copy()
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(days=config.ACCESS_TOKEN_EXPIRE_DAYS))

    to_encode.update({
        "exp": expire,
        "jti": str(uuid.uuid4()),
        "iat": now,
    })

    return jwt.encode(to_encode, get_secret_key(), algorithm=ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode a JWT token"""
    try:
        return jwt.decode(token, get_secret_key(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Token verification failed: Token has expired")
        return None
    except JWTError as e:
        logger.warning(f"Token verification failed: {type(e).__name__} - {str(e)}")
        return None


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the user behind the Authorization: Bearer header

    Failure messages distinguish a missing header, an empty token, a token
    that does not verify, and a token whose user no longer exists.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer"):
        logger.warning("Authentication failed: No authorization header provided")
        raise _unauthorized("You are not authorized to view this page")

    token = auth_header[len("Bearer"):].strip()
    if not token:
        logger.warning("Authentication failed: Empty bearer token")
        raise _unauthorized("Login required")

    payload = verify_token(token)
    if payload is None or not payload.get("sub"):
        raise _unauthorized("Invalid or expired token")

    user = db.query(User).filter(User.id == str(payload["sub"])).first()
    if user is None:
        logger.warning(f"Authentication failed: User {payload['sub']} not found")
        raise _unauthorized("Please check login credentials again")

    if user.is_blocked is not None:
        logger.warning(f"Authentication failed: User {user.id} is deleted or blocked")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deleted or blocked")

    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Allow only administrators through"""
    if not current_user.role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    if current_user.role != UserRole.ADMIN:
        logger.warning(f"Admin access denied for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return current_user
