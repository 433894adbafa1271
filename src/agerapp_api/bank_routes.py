"""
Bank directory and account-name resolution via Paystack
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .auth import get_current_user, require_admin
from .database import get_db, User, Bank
from .exceptions import api_error, send_response
from .schemas import ResolveAccountRequest
from .services.paystack_client import PaystackError, PaystackNotConfiguredError, get_paystack_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/banks", tags=["banks"])


@router.get("")
async def list_banks(db: Session = Depends(get_db)):
    banks = db.query(Bank).order_by(Bank.name.asc()).all()
    return send_response(status.HTTP_200_OK, "Banks fetched successfully", [bank.to_dict() for bank in banks])


@router.post("/sync")
async def sync_banks(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Pull the Paystack bank list and upsert it by bank code"""
    try:
        client = get_paystack_client()
        remote_banks = client.list_banks()
    except PaystackNotConfiguredError as e:
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message)
    except PaystackError as e:
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch banks", e.body or e.message)

    existing = {bank.code: bank for bank in db.query(Bank).all()}
    synced = 0
    for entry in remote_banks:
        code = str(entry.get("code") or "")
        if not code or not entry.get("name"):
            continue
        bank = existing.get(code)
        if bank is None:
            bank = Bank(code=code)
            db.add(bank)
            existing[code] = bank
        bank.name = entry.get("name")
        bank.currency = entry.get("currency")
        synced += 1

    db.commit()
    logger.info(f"Synced {synced} banks from Paystack")
    return send_response(status.HTTP_200_OK, "Banks synced", {"total": synced})


@router.post("/resolve")
async def resolve_account(body: ResolveAccountRequest, current_user: User = Depends(get_current_user)):
    """Look up the account holder name for an account number and bank code"""
    if not body.account_number or not body.bank_code:
        raise api_error(status.HTTP_400_BAD_REQUEST, "account_number and bank_code are required")

    try:
        client = get_paystack_client()
        payload = client.resolve_account(body.account_number, body.bank_code)
    except PaystackNotConfiguredError as e:
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message)
    except PaystackError as e:
        if e.status_code is None:
            raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", e.message)
        raise api_error(status.HTTP_400_BAD_REQUEST, "Failed to resolve account", e.body)

    if not payload.get("status"):
        raise api_error(status.HTTP_400_BAD_REQUEST, payload.get("message") or "Account not resolved")

    return send_response(status.HTTP_200_OK, "Account resolved", payload.get("data"))
