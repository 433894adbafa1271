"""
Customer and invoice models
"""
from sqlalchemy import Column, String, Float, Boolean, ForeignKey, JSON

from ..base import Base, TimestampMixin, new_uuid


class Customer(TimestampMixin, Base):
    """A business user's customer, optionally linked to another registered user"""
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_uuid)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    location = Column(String, nullable=False)
    email = Column(String, nullable=True)

    def snapshot(self) -> dict:
        """Customer fields copied into an invoice when it is issued"""
        return {
            "id": self.id,
            "name": self.name,
            "phone_number": self.phone_number,
            "location": self.location,
            "email": self.email,
        }

    def to_dict(self) -> dict:
        return {
            **self.snapshot(),
            "owner_id": self.owner_id,
            "user_id": self.user_id,
            **self.timestamps(),
        }


class Invoice(TimestampMixin, Base):
    """
    Invoice issued by a business user to one of its customers

    The id is the human readable INV-<epoch ms> string. Line items and the
    customer details are stored as JSON snapshots so later edits to products
    or customers do not rewrite issued invoices.
    """
    __tablename__ = "invoices"

    id = Column(String(40), primary_key=True)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_details = Column(JSON, nullable=True)
    products = Column(JSON, nullable=False)  # list of {product_id?, name, quantity, price}
    tax = Column(Float, nullable=True)
    total = Column(Float, nullable=True)
    narration = Column(String, nullable=True)
    delivery_fees = Column(Float, nullable=True)
    auto_approve = Column(Boolean, default=False, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "customer_id": self.customer_id,
            "customer_details": self.customer_details,
            "products": self.products or [],
            "tax": self.tax,
            "total": self.total,
            "narration": self.narration,
            "delivery_fees": self.delivery_fees,
            "auto_approve": bool(self.auto_approve),
            **self.timestamps(),
        }
