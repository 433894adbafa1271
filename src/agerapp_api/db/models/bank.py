"""
Bank directory synced from Paystack
"""
from sqlalchemy import Column, String

from ..base import Base, TimestampMixin, new_uuid


class Bank(TimestampMixin, Base):
    __tablename__ = "banks"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String, nullable=False)
    code = Column(String(20), unique=True, nullable=False)
    currency = Column(String(10), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "currency": self.currency,
            **self.timestamps(),
        }
