"""
Pydantic request schemas and pagination helpers

Fields are optional at the schema level so handlers can answer missing
input with the API's own messages; type errors still surface as 400s
through the validation handler.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_REGEX.match(value) is not None


class CamelModel(BaseModel):
    """Accepts both the camelCase wire names and the Python field names"""
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------- users

class RegisterRequest(CamelModel):
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    business_name: Optional[str] = Field(None, alias="businessName")
    business_category: Optional[str] = Field(None, alias="businessCategory")
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class VerifyOTPRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None

    @field_validator("otp", mode="before")
    @classmethod
    def otp_as_string(cls, v):
        """Clients send the code as a number as often as a string"""
        return str(v) if isinstance(v, int) else v


class EmailRequest(BaseModel):
    email: Optional[str] = None


class PasswordResetVerifyRequest(VerifyOTPRequest):
    password: Optional[str] = None


class AdminCreateRequest(CamelModel):
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    secret: Optional[str] = None


class SocialRequest(BaseModel):
    social: Optional[str] = None
    link: Optional[str] = None


class BusinessNameRequest(BaseModel):
    business_name: Optional[str] = None


class BankDetailsRequest(BaseModel):
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None


class UserSettingsRequest(BaseModel):
    currency: Optional[str] = None
    notification: Optional[bool] = None
    taxes_rate: Optional[float] = None
    taxes_enabled: Optional[bool] = None
    language: Optional[str] = None


class DeletionConfirmRequest(BaseModel):
    email: Optional[str] = None
    code: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def code_as_string(cls, v):
        return str(v) if isinstance(v, int) else v


# ---------------------------------------------------------------- products

class RestockRequest(BaseModel):
    quantity: Optional[float] = None


# ---------------------------------------------------------------- customers

class CustomerRequest(BaseModel):
    name: Optional[str] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    email: Optional[str] = None


class CustomerFromUserRequest(BaseModel):
    user_id: Optional[str] = None
    location: Optional[str] = None


# ---------------------------------------------------------------- invoices

class InvoiceLineItem(BaseModel):
    """Line item snapshot stored on the invoice"""
    product_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=500)
    quantity: float = Field(..., gt=0)
    price: float = Field(..., ge=0)


class CreateInvoiceRequest(BaseModel):
    customer_id: Optional[str] = None
    products: Optional[List[InvoiceLineItem]] = None
    tax: Optional[float] = None
    total: Optional[float] = None
    narration: Optional[str] = Field(None, max_length=1000)
    delivery_fees: Optional[float] = None
    auto_approve: Optional[bool] = None


class UpdateInvoiceRequest(CreateInvoiceRequest):
    pass


# ---------------------------------------------------------------- banks

class ResolveAccountRequest(BaseModel):
    account_number: Optional[str] = None
    bank_code: Optional[str] = None


# ---------------------------------------------------------------- communities

class CommunityMembersRequest(CamelModel):
    user_ids: Optional[List[str]] = Field(None, alias="userIds")


# ---------------------------------------------------------------- contact

class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


# ---------------------------------------------------------------- pagination

@dataclass
class PageParams:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def page_params(
    page: int = Query(1),
    per_page: int = Query(10, alias="perPage"),
) -> PageParams:
    """page/perPage query parameters, clamped to at least 1"""
    return PageParams(page=max(page, 1), per_page=max(per_page, 1))


def order_direction(order: Optional[str]) -> str:
    return "asc" if (order or "").lower() == "asc" else "desc"


def paginate(
    query,
    params: PageParams,
    serialize: Callable[[Any], Dict[str, Any]],
    size_key: str = "perPage",
) -> Dict[str, Any]:
    """
    Run a query for one page

    Returns:
        {"items": [...], "pagination": {total, page, <size_key>, totalPages}}
    """
    total = query.order_by(None).count()
    rows = query.offset(params.offset).limit(params.per_page).all()
    return {
        "items": [serialize(row) for row in rows],
        "pagination": {
            "total": total,
            "page": params.page,
            size_key: params.per_page,
            "totalPages": math.ceil(total / params.per_page) or 1,
        },
    }


def like_pattern(keyword: str) -> str:
    """%keyword% with LIKE wildcards in the keyword escaped"""
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

