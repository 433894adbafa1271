"""
Inventory models
"""
from sqlalchemy import Column, String, Integer, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship

from ..base import Base, TimestampMixin, new_uuid


class Product(TimestampMixin, Base):
    """Stock item owned by a single business user"""
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_uuid)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    image = Column(JSON, nullable=True)  # list of image URLs
    name = Column(String, nullable=False)
    measurement = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    quantity_type = Column(String, nullable=True)
    price = Column(Float, nullable=False, default=0)
    expiry_date = Column(String, nullable=True)
    restock_alert = Column(Integer, nullable=False, default=0)
    number_of_restocks = Column(Integer, nullable=False, default=1)

    restocks = relationship("RestockHistory", back_populates="product", cascade="all, delete-orphan")

    def to_dict(self, include_image: bool = True) -> dict:
        data = {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "measurement": self.measurement,
            "quantity": self.quantity,
            "quantity_type": self.quantity_type,
            "price": self.price,
            "expiry_date": self.expiry_date,
            "restock_alert": self.restock_alert,
            "number_of_restocks": self.number_of_restocks,
            **self.timestamps(),
        }
        if include_image:
            data["image"] = self.image or []
        return data


class RestockHistory(TimestampMixin, Base):
    """One restock event for a product"""
    __tablename__ = "restock_history"

    id = Column(String(36), primary_key=True, default=new_uuid)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    restocked_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)

    product = relationship("Product", back_populates="restocks")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "owner_id": self.owner_id,
            "restocked_by": self.restocked_by,
            "quantity": self.quantity,
            "product_name": self.product.name if self.product else None,
            "product_measurement": self.product.measurement if self.product else None,
            **self.timestamps(),
        }
