"""
One-time codes for registration, password reset and account deletion
"""
import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..config import config
from ..db.models import Token, AccountDeletionToken, User

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Numeric code of exactly `length` digits"""
    return "".join(secrets.choice("0123456789") for _ in range(length))


def hash_email(email: str) -> str:
    """Stable keyed hash of a normalised email, used to remember deleted accounts"""
    normalized = email.strip().lower()
    return hashlib.sha256(f"{normalized}|{config.get_email_hash_secret()}".encode("utf-8")).hexdigest()


class OTPService:
    """Issues and checks codes stored in the tokens table"""

    def __init__(self, db: Session):
        self.db = db

    def issue(self, email: str, telephone: Optional[str] = None) -> str:
        """
        Replace any outstanding code for the email with a fresh one

        The token column is unique, so a colliding code is regenerated.
        """
        self.db.query(Token).filter(Token.email == email).delete(synchronize_session=False)

        code = generate_otp()
        while self.db.query(Token.id).filter(Token.token == code).first() is not None:
            code = generate_otp()

        self.db.add(Token(email=email, telephone=telephone, token=code))
        self.db.flush()
        return code

    def verify(self, email: str, code: str, max_age_minutes: Optional[int] = None) -> bool:
        """
        Check a code for an email, optionally rejecting codes older than max_age_minutes
        """
        query = self.db.query(Token).filter(Token.email == email, Token.token == str(code))
        if max_age_minutes is not None:
            cutoff = datetime.utcnow() - timedelta(minutes=max_age_minutes)
            query = query.filter(Token.created_at >= cutoff)
        return query.first() is not None

    def clear(self, email: str) -> None:
        self.db.query(Token).filter(Token.email == email).delete(synchronize_session=False)


class DeletionCodeService:
    """Codes confirming account deletion; each expires OTP_TTL_MINUTES after issue"""

    def __init__(self, db: Session):
        self.db = db

    def issue(self, user: User) -> str:
        self.clear(user)

        code = generate_otp()
        self.db.add(AccountDeletionToken(
            user_id=user.id,
            email=user.email,
            token=code,
            expires_at=datetime.utcnow() + timedelta(minutes=config.OTP_TTL_MINUTES),
        ))
        self.db.flush()
        return code

    def find_valid(self, user: User, email: str, code: str) -> Optional[AccountDeletionToken]:
        """Newest unexpired token matching user, email and code"""
        return (
            self.db.query(AccountDeletionToken)
            .filter(
                AccountDeletionToken.user_id == user.id,
                AccountDeletionToken.email == email,
                AccountDeletionToken.token == str(code),
                AccountDeletionToken.expires_at > datetime.utcnow(),
            )
            .order_by(AccountDeletionToken.created_at.desc())
            .first()
        )

    def clear(self, user: User) -> None:
        self.db.query(AccountDeletionToken).filter(
            AccountDeletionToken.user_id == user.id
        ).delete(synchronize_session=False)
