"""
Customer book routes (owner scoped)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .auth import get_current_user
from .database import get_db, User, Customer
from .exceptions import api_error, send_response
from .schemas import (
    CustomerFromUserRequest,
    CustomerRequest,
    PageParams,
    is_valid_email,
    like_pattern,
    page_params,
    paginate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/customers", tags=["customers"])


def get_owned_customer(db: Session, owner: User, customer_id: str) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id, Customer.owner_id == owner.id).first()
    if customer is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Customer not found")
    return customer


@router.post("")
async def add_customer(
    body: CustomerRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.name or not body.phone_number or not body.location or not body.email:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Missing fields")
    if not is_valid_email(body.email):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid email format")

    customer = Customer(
        owner_id=current_user.id,
        name=body.name,
        phone_number=body.phone_number,
        location=body.location,
        email=body.email,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return send_response(status.HTTP_200_OK, "Customer added", customer.to_dict())


@router.post("/user")
async def add_customer_from_user(
    body: CustomerFromUserRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Add a registered user as a customer

    Location falls back to the user's address, then state, then country.
    """
    if not body.user_id:
        raise api_error(status.HTTP_400_BAD_REQUEST, "user_id is required")
    if body.user_id == current_user.id:
        raise api_error(status.HTTP_400_BAD_REQUEST, "You cannot add yourself as a customer")

    user = db.query(User).filter(User.id == body.user_id).first()
    if user is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "User not found")

    existing = (
        db.query(Customer)
        .filter(Customer.owner_id == current_user.id, Customer.user_id == user.id)
        .first()
    )
    if existing is not None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "User already added as customer")

    location = next(
        (value for value in (body.location, user.address, user.state, user.country) if value is not None),
        "",
    )
    if not location:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Customer location is required")
    if not user.phone:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Customer phone number is required")

    customer = Customer(
        owner_id=current_user.id,
        user_id=user.id,
        name=user.full_name,
        phone_number=user.phone,
        location=location,
        email=user.email,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info(f"User {user.id} added as customer of {current_user.id}")
    return send_response(status.HTTP_200_OK, "Customer added", customer.to_dict())


@router.get("")
async def list_customers(
    params: PageParams = Depends(page_params),
    keyword: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Newest first; keyword matches name, email, phone number or location"""
    query = db.query(Customer).filter(Customer.owner_id == current_user.id)
    keyword = (keyword or "").strip()
    if keyword:
        pattern = like_pattern(keyword)
        query = query.filter(or_(
            Customer.name.ilike(pattern, escape="\\"),
            Customer.email.ilike(pattern, escape="\\"),
            Customer.phone_number.ilike(pattern, escape="\\"),
            Customer.location.ilike(pattern, escape="\\"),
        ))

    result = paginate(query.order_by(Customer.created_at.desc()), params, Customer.to_dict)
    return send_response(status.HTTP_200_OK, "Customers fetched", result)


@router.get("/{customer_id}")
async def get_customer(
    customer_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    customer = get_owned_customer(db, current_user, customer_id)
    return send_response(status.HTTP_200_OK, "Customer fetched", customer.to_dict())


@router.put("/{customer_id}")
async def edit_customer(
    customer_id: str,
    body: CustomerRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Fields left out of the body keep their stored value"""
    customer = get_owned_customer(db, current_user, customer_id)
    if body.email is not None and not is_valid_email(body.email):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid email format")

    for field, value in body.model_dump(exclude_none=True).items():
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return send_response(status.HTTP_200_OK, "Customer updated", customer.to_dict())


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    customer = get_owned_customer(db, current_user, customer_id)
    db.delete(customer)
    db.commit()
    logger.info(f"Customer {customer_id} deleted by {current_user.id}")
    return send_response(status.HTTP_200_OK, "Customer deleted")
