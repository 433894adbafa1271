"""
Declarative base and shared column helpers
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_uuid() -> str:
    """String primary key for new rows"""
    return str(uuid.uuid4())


def isoformat(value):
    return value.isoformat() if value else None


class TimestampMixin:
    """created_at / updated_at maintained by SQLAlchemy"""
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def timestamps(self) -> dict:
        return {
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
