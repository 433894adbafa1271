"""
Database models for AgerApp API
"""
from .user import (
    User,
    UserRole,
    Token,
    AccountDeletionToken,
    DeletedAccount,
    UserSettings,
    UserBankDetails,
)
from .product import Product, RestockHistory
from .customer import Customer, Invoice
from .content import BlogPost, Community, CommunityMember
from .bank import Bank

__all__ = [
    "User",
    "UserRole",
    "Token",
    "AccountDeletionToken",
    "DeletedAccount",
    "UserSettings",
    "UserBankDetails",
    "Product",
    "RestockHistory",
    "Customer",
    "Invoice",
    "BlogPost",
    "Community",
    "CommunityMember",
    "Bank",
]
