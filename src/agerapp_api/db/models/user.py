"""
User account models: users, settings, bank details and one-time codes
"""
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship

from ..base import Base, TimestampMixin, new_uuid, isoformat


class UserRole:
    USER = "user"
    ADMIN = "admin"


class User(TimestampMixin, Base):
    """User account model"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    full_name = Column(String, nullable=False)
    user_name = Column(String, unique=True, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    picture = Column(String, nullable=True)
    role = Column(String(20), default=UserRole.USER, nullable=False)
    country = Column(String, nullable=True)
    state = Column(String, nullable=True)
    address = Column(String, nullable=True)
    business_name = Column(String, nullable=True, index=True)
    business_category = Column(String, nullable=True)
    password = Column(String, nullable=True)
    socials = Column(JSON, nullable=True)  # list of {"social": PLATFORM, "link": url}
    is_verified = Column(Boolean, default=False, nullable=False)
    is_blocked = Column(DateTime, nullable=True)  # set when the account is deleted

    settings = relationship("UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan")
    bank_details = relationship("UserBankDetails", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def to_dict(self) -> dict:
        """Public representation; never includes the password hash"""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "userName": self.user_name,
            "email": self.email,
            "phone": self.phone,
            "picture": self.picture,
            "role": self.role,
            "country": self.country,
            "state": self.state,
            "address": self.address,
            "business_name": self.business_name,
            "business_category": self.business_category,
            "socials": self.socials,
            "isVerified": bool(self.is_verified),
            "isBlocked": isoformat(self.is_blocked),
            **self.timestamps(),
        }

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "picture": self.picture,
        }


class Token(Base):
    """One-time code for registration and password reset"""
    __tablename__ = "tokens"

    id = Column(String(36), primary_key=True, default=new_uuid)
    email = Column(String, index=True, nullable=True)
    telephone = Column(String, nullable=True)
    token = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class AccountDeletionToken(TimestampMixin, Base):
    """One-time code confirming an account deletion request"""
    __tablename__ = "account_deletion_tokens"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False)
    token = Column(String, nullable=False)
    expires_at = Column(DateTime, nullable=False)


class DeletedAccount(TimestampMixin, Base):
    """Hashed email of a deleted account and the date it may register again"""
    __tablename__ = "deleted_accounts"

    id = Column(String(36), primary_key=True, default=new_uuid)
    email_hash = Column(String(64), unique=True, nullable=False)
    deleted_at = Column(DateTime, nullable=False)
    allow_after = Column(DateTime, nullable=False)


class UserSettings(TimestampMixin, Base):
    __tablename__ = "user_settings"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    currency = Column(String(10), nullable=True)
    notification = Column(Boolean, default=True, nullable=False)
    taxes_rate = Column(Float, nullable=True)
    taxes_enabled = Column(Boolean, default=False, nullable=False)
    language = Column(String(30), nullable=True)

    user = relationship("User", back_populates="settings")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "currency": self.currency,
            "notification": self.notification,
            "taxes_rate": self.taxes_rate,
            "taxes_enabled": self.taxes_enabled,
            "language": self.language,
            **self.timestamps(),
        }


class UserBankDetails(TimestampMixin, Base):
    __tablename__ = "user_bank_details"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bank_name = Column(String, nullable=False)
    account_number = Column(String(20), nullable=False)
    account_name = Column(String, nullable=False)

    user = relationship("User", back_populates="bank_details")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "bank_name": self.bank_name,
            "account_number": self.account_number,
            "account_name": self.account_name,
            **self.timestamps(),
        }
