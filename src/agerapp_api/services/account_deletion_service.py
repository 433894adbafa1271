"""
Account Deletion Service
Anonymises a user in place and blocks the email from re-registering for a cooldown
"""
import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Dict, Any, Optional

from sqlalchemy.orm import Session

from ..auth import get_password_hash
from ..config import config
from ..db.models import DeletedAccount, User, UserBankDetails
from .otp_service import hash_email, DeletionCodeService, OTPService

logger = logging.getLogger(__name__)

DELETED_EMAIL_DOMAIN = "agerapp.local"


def redact_email(email: str) -> str:
    """
    Redact email for logging

    Returns:
        First 2 chars of the local part + short hash + domain
    """
    if not email or '@' not in email:
        return "***@***"

    local, domain = email.split('@', 1)
    if len(local) <= 2:
        return f"**@{domain}"

    email_hash = hashlib.sha256(email.encode()).hexdigest()[:6]
    return f"{local[:2]}***{email_hash}@{domain}"


def find_registration_block(db: Session, email: str) -> Optional[DeletedAccount]:
    """Deleted-account record still inside its cooldown for this email, if any"""
    return (
        db.query(DeletedAccount)
        .filter(
            DeletedAccount.email_hash == hash_email(email),
            DeletedAccount.allow_after > datetime.utcnow(),
        )
        .first()
    )


class AccountDeletionService:
    """Soft delete: scrub personal data, keep the row for referential integrity"""

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    def _remember_email(self, email: str, now: datetime) -> DeletedAccount:
        email_hash = hash_email(email)
        allow_after = now + timedelta(days=config.DELETED_ACCOUNT_COOLDOWN_DAYS)

        record = self.db.query(DeletedAccount).filter(DeletedAccount.email_hash == email_hash).first()
        if record is None:
            record = DeletedAccount(email_hash=email_hash, deleted_at=now, allow_after=allow_after)
            self.db.add(record)
        else:
            record.deleted_at = now
            record.allow_after = allow_after
        return record

    def soft_delete(self) -> Dict[str, Any]:
        """
        Anonymise the account and commit

        Returns:
            Summary with the date the email may register again
        """
        user = self.user
        original_email = user.email
        now = datetime.utcnow()
        logger.info(f"Starting account deletion for user {user.id} ({redact_email(original_email)})")

        record = self._remember_email(original_email, now)

        user.email = f"deleted+{user.id}@{DELETED_EMAIL_DOMAIN}"
        user.full_name = "Deleted User"
        user.business_name = "Deleted Business"
        user.business_category = "Deleted"
        user.user_name = None
        user.phone = None
        user.picture = None
        user.country = None
        user.state = None
        user.address = None
        user.socials = None
        user.is_verified = False
        user.is_blocked = now
        user.password = get_password_hash(secrets.token_hex(32))

        self.db.query(UserBankDetails).filter(UserBankDetails.user_id == user.id).delete(synchronize_session=False)
        DeletionCodeService(self.db).clear(user)
        OTPService(self.db).clear(original_email)

        self.db.commit()

        logger.info(f"Account deletion completed for user {user.id}, email blocked until {record.allow_after}")
        return {
            "deletedAt": now.isoformat(),
            "allowAfter": record.allow_after.isoformat(),
        }
