"""
Invoice routes (owner scoped)
"""
import logging
import time

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .auth import get_current_user
from .customer_routes import get_owned_customer
from .database import get_db, User, Invoice
from .exceptions import api_error, send_response
from .schemas import CreateInvoiceRequest, PageParams, UpdateInvoiceRequest, page_params, paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/invoices", tags=["invoices"])


def next_invoice_id(db: Session) -> str:
    """INV-<epoch ms>, stepping forward a millisecond while the id is taken"""
    stamp = int(time.time() * 1000)
    while db.query(Invoice.id).filter(Invoice.id == f"INV-{stamp}").first() is not None:
        stamp += 1
    return f"INV-{stamp}"


@router.post("")
async def create_invoice(
    body: CreateInvoiceRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Issue an invoice to one of the caller's customers"""
    if not body.customer_id or not body.products:
        raise api_error(status.HTTP_400_BAD_REQUEST, "customer_id and products are required")

    customer = get_owned_customer(db, current_user, body.customer_id)

    invoice = Invoice(
        id=next_invoice_id(db),
        owner_id=current_user.id,
        customer_id=customer.id,
        customer_details=customer.snapshot(),
        products=[item.model_dump(exclude_none=True) for item in body.products],
        tax=body.tax,
        total=body.total,
        narration=body.narration,
        delivery_fees=body.delivery_fees,
        auto_approve=bool(body.auto_approve),
    )
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    logger.info(f"Invoice {invoice.id} created for customer {customer.id}")
    return send_response(status.HTTP_200_OK, "Invoice created", invoice.to_dict())


@router.get("")
async def list_invoices(
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(Invoice).filter(Invoice.owner_id == current_user.id)
    result = paginate(query.order_by(Invoice.created_at.desc()), params, Invoice.to_dict)
    return send_response(status.HTTP_200_OK, "User invoices fetched", result)


@router.put("/{invoice_id}")
async def update_invoice(
    invoice_id: str,
    body: UpdateInvoiceRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update an invoice; omitted fields keep their value.
    Switching customer re-snapshots the customer details.
    """
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.owner_id == current_user.id).first()
    if invoice is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invoice not found")

    if body.customer_id and body.customer_id != invoice.customer_id:
        customer = get_owned_customer(db, current_user, body.customer_id)
        invoice.customer_id = customer.id
        invoice.customer_details = customer.snapshot()

    if body.products is not None:
        if not body.products:
            raise api_error(status.HTTP_400_BAD_REQUEST, "products must be a non-empty array")
        invoice.products = [item.model_dump(exclude_none=True) for item in body.products]

    for field in ("tax", "total", "narration", "delivery_fees", "auto_approve"):
        value = getattr(body, field)
        if value is not None:
            setattr(invoice, field, value)

    db.commit()
    db.refresh(invoice)
    return send_response(status.HTTP_200_OK, "Invoice updated", invoice.to_dict())


@router.get("/customer/{customer_id}")
async def customer_invoices(
    customer_id: str,
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    customer = get_owned_customer(db, current_user, customer_id)
    query = db.query(Invoice).filter(Invoice.owner_id == current_user.id, Invoice.customer_id == customer.id)
    result = paginate(query.order_by(Invoice.created_at.desc()), params, Invoice.to_dict)
    return send_response(status.HTTP_200_OK, "Customer invoices fetched", result)
