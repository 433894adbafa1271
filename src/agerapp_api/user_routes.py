"""
User account routes: registration, login, one-time codes, profile,
settings, bank details, directory search and account deletion
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .auth import (
    create_user_token,
    get_current_user,
    get_password_hash,
    require_admin,
    verify_password,
)
from .config import config
from .database import get_db, User, Community, UserBankDetails
from .db.models import UserRole
from .exceptions import api_error, send_response
from .middleware.uploads import has_file, save_image
from .schemas import (
    AdminCreateRequest,
    BankDetailsRequest,
    BusinessNameRequest,
    DeletionConfirmRequest,
    EmailRequest,
    LoginRequest,
    PageParams,
    PasswordResetVerifyRequest,
    RegisterRequest,
    SocialRequest,
    UserSettingsRequest,
    VerifyOTPRequest,
    is_valid_email,
    like_pattern,
    order_direction,
    page_params,
    paginate,
)
from .services.account_deletion_service import (
    AccountDeletionService,
    find_registration_block,
    redact_email,
)
from .services.email_provider import EmailDeliveryError, send_email
from .services.otp_service import DeletionCodeService, OTPService
from .services.storage_provider import delete_local_upload
from .services.user_service import SettingsService, merge_social, normalize_platform

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/users", tags=["users"])


def _find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def _deliver(email: str, subject: str, text: str) -> None:
    """Send a code email; delivery failure is a 500 for the caller"""
    try:
        send_email(email, subject, text)
    except EmailDeliveryError:
        logger.error(f"Could not deliver '{subject}' to {redact_email(email)}")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send email. Please try again.")


# ------------------------------------------------------------------ signup

@router.post("/register")
async def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an unverified account and email a registration code"""
    if not body.full_name or not body.email or not body.phone or not body.password:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Missing fields")
    if not is_valid_email(body.email):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid email format")

    if _find_by_email(db, body.email):
        logger.warning(f"Signup failed: Email already registered - {redact_email(body.email)}")
        raise api_error(status.HTTP_400_BAD_REQUEST, "Email already registered")

    block = find_registration_block(db, body.email)
    if block is not None:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            f"This email was recently deleted. Please try again after {block.allow_after.strftime('%Y-%m-%d')}",
        )

    user = User(
        full_name=body.full_name,
        email=body.email,
        phone=body.phone,
        role=UserRole.USER,
        country=body.country,
        business_name=body.business_name,
        business_category=body.business_category,
        password=get_password_hash(body.password),
        is_verified=False,
    )
    db.add(user)
    otp = OTPService(db).issue(body.email, telephone=body.phone)
    db.commit()
    logger.info(f"User created with ID: {user.id}")

    _deliver(body.email, "AgerApp Registration", f"Your registration OTP code is {otp}")
    return send_response(status.HTTP_200_OK, f"OTP sent to {body.email}")


@router.post("/login")
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    if not body.email:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Email is required to login")
    if not body.password:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Password is required to login")
    if not is_valid_email(body.email):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid email format")

    user = _find_by_email(db, body.email)
    if user is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, f"Account with {body.email} does not exist")
    if user.is_blocked:
        raise api_error(status.HTTP_403_FORBIDDEN, "Account is deleted or blocked")
    if not verify_password(body.password, user.password):
        logger.warning(f"Login failed: wrong password for user {user.id}")
        raise api_error(status.HTTP_400_BAD_REQUEST, "Incorrect password")

    return send_response(status.HTTP_200_OK, "Login successful", {
        "user": user.to_dict(),
        "token": create_user_token(user),
    })


@router.post("/verify")
async def verify_account(body: VerifyOTPRequest, db: Session = Depends(get_db)):
    """Mark the account verified when the registration code matches"""
    otp_service = OTPService(db)
    if not body.email or not body.otp or not otp_service.verify(body.email, body.otp):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Incorrect OTP")

    db.query(User).filter(User.email == body.email).update({"is_verified": True}, synchronize_session=False)
    otp_service.clear(body.email)
    db.commit()
    return send_response(status.HTTP_200_OK, "OTP verified")


@router.post("/resend-otp")
async def resend_signup_otp(body: EmailRequest, db: Session = Depends(get_db)):
    if not body.email:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Email is required")

    user = _find_by_email(db, body.email)
    if user is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Account with this email does not exist")
    if user.is_verified:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Account is already verified")

    otp = OTPService(db).issue(body.email, telephone=user.phone)
    db.commit()

    _deliver(body.email, "AgerApp Registration", f"Your registration OTP code is {otp}")
    return send_response(status.HTTP_200_OK, f"OTP sent to {body.email}")


# ------------------------------------------------------------------ password reset

@router.post("/password/reset/resend")
async def resend_password_reset(body: EmailRequest, db: Session = Depends(get_db)):
    if not body.email:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Email is required")

    user = _find_by_email(db, body.email)
    if user is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Account with this email does not exist")
    if user.is_blocked:
        raise api_error(status.HTTP_403_FORBIDDEN, "Account is deleted or blocked")

    otp = OTPService(db).issue(body.email, telephone=user.phone)
    db.commit()

    _deliver(
        body.email,
        "AgerApp Password Reset",
        f"Your password reset code is {otp}. This code expires in {config.OTP_TTL_MINUTES} minutes.",
    )
    return send_response(status.HTTP_200_OK, f"OTP sent to {body.email}")


@router.post("/password/reset/verify")
async def verify_password_reset(body: PasswordResetVerifyRequest, db: Session = Depends(get_db)):
    if not body.email or not body.otp or not body.password:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Email, otp, and password are required")

    user = _find_by_email(db, body.email)
    if user is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Account with this email does not exist")
    if user.is_blocked:
        raise api_error(status.HTTP_403_FORBIDDEN, "Account is deleted or blocked")

    otp_service = OTPService(db)
    if not otp_service.verify(body.email, body.otp, max_age_minutes=config.OTP_TTL_MINUTES):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Incorrect or expired OTP")

    user.password = get_password_hash(body.password)
    otp_service.clear(body.email)
    db.commit()
    logger.info(f"Password reset for user {user.id}")
    return send_response(status.HTTP_200_OK, "Password reset successful")


# ------------------------------------------------------------------ admin

@router.post("/admin/create")
async def create_admin(body: AdminCreateRequest, db: Session = Depends(get_db)):
    """Bootstrap an administrator; guarded by ADMIN_CREATION_SECRET"""
    if not config.ADMIN_CREATION_SECRET:
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Admin creation is not configured on this server")
    if not body.secret or body.secret != config.ADMIN_CREATION_SECRET:
        logger.warning("Admin creation rejected: wrong secret")
        raise api_error(status.HTTP_403_FORBIDDEN, "Unauthorized request")
    if not body.full_name or not body.email or not body.password:
        raise api_error(status.HTTP_400_BAD_REQUEST, "fullName, email, and password are required")
    if _find_by_email(db, body.email):
        raise api_error(status.HTTP_409_CONFLICT, "A user with this email already exists")

    admin = User(
        full_name=body.full_name,
        email=body.email,
        phone=body.phone,
        role=UserRole.ADMIN,
        password=get_password_hash(body.password),
        is_verified=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin account created: {admin.id}")
    return send_response(status.HTTP_200_OK, "Admin account created", admin.to_dict())


# ------------------------------------------------------------------ profile

@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    return send_response(status.HTTP_200_OK, "User profile fetched", current_user.to_dict())


@router.post("/socials")
async def add_social(
    body: SocialRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add or replace one social profile link"""
    if not body.social or not body.link:
        raise api_error(status.HTTP_400_BAD_REQUEST, "social and link are required")

    platform = normalize_platform(body.social)
    if platform is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid social platform")

    current_user.socials = merge_social(current_user.socials, platform, body.link)
    db.commit()
    db.refresh(current_user)
    return send_response(status.HTTP_200_OK, "Social profile updated", current_user.to_dict())


@router.patch("/business-name")
async def update_business_name(
    body: BusinessNameRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    business_name = (body.business_name or "").strip()
    if not business_name:
        raise api_error(status.HTTP_400_BAD_REQUEST, "business_name is required")

    current_user.business_name = business_name
    db.commit()
    db.refresh(current_user)
    return send_response(status.HTTP_200_OK, "Business name updated", current_user.to_dict())


@router.patch("/photo")
async def update_photo(
    picture: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not has_file(picture):
        raise api_error(status.HTTP_400_BAD_REQUEST, "picture file is required")

    old_url = current_user.picture
    current_user.picture = await save_image(picture, "users")
    db.commit()
    delete_local_upload("users", old_url)
    db.refresh(current_user)
    return send_response(status.HTTP_200_OK, "User photo updated", current_user.to_dict())


# ------------------------------------------------------------------ settings

@router.get("/settings")
async def get_settings(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    settings = SettingsService(db).get(current_user.id)
    if settings is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "User settings not found")
    return send_response(status.HTTP_200_OK, "User settings fetched", settings.to_dict())


@router.put("/settings")
async def update_settings(
    body: UserSettingsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = body.model_dump(exclude_none=True)
    if not changes:
        raise api_error(status.HTTP_400_BAD_REQUEST, "No settings fields provided")

    settings = SettingsService(db).upsert(current_user.id, changes)
    return send_response(status.HTTP_200_OK, "User settings updated", settings.to_dict())


@router.post("/settings/defaults")
async def apply_default_settings(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Backfill settings for every user (administrators only)"""
    if db.query(User.id).first() is None:
        return send_response(status.HTTP_200_OK, "No users found", {"created": 0, "updated": 0})

    result = SettingsService(db).apply_defaults()
    return send_response(status.HTTP_200_OK, "Default user settings applied", result)


# ------------------------------------------------------------------ bank details

@router.get("/bank-details")
async def get_bank_details(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    details = db.query(UserBankDetails).filter(UserBankDetails.user_id == current_user.id).first()
    if details is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Bank details not found")
    return send_response(status.HTTP_200_OK, "Bank details fetched", details.to_dict())


@router.post("/bank-details")
async def update_bank_details(
    body: BankDetailsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.bank_name or not body.account_number or not body.account_name:
        raise api_error(status.HTTP_400_BAD_REQUEST, "bank_name, account_number, and account_name are required")

    details = db.query(UserBankDetails).filter(UserBankDetails.user_id == current_user.id).first()
    if details is None:
        details = UserBankDetails(user_id=current_user.id)
        db.add(details)
    details.bank_name = body.bank_name
    details.account_number = body.account_number
    details.account_name = body.account_name

    db.commit()
    db.refresh(details)
    return send_response(status.HTTP_200_OK, "Bank details updated", details.to_dict())


# ------------------------------------------------------------------ directory

@router.get("/businesses")
async def list_businesses(
    keyword: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(User).filter(User.business_name.isnot(None), User.is_blocked.is_(None))
    keyword = (keyword or "").strip()
    if keyword:
        query = query.filter(User.business_name.ilike(like_pattern(keyword), escape="\\"))

    created = User.created_at.asc() if order_direction(order) == "asc" else User.created_at.desc()
    page = paginate(query.order_by(created), params, User.to_dict)
    return send_response(status.HTTP_200_OK, "Businesses fetched", page)


@router.get("/search")
async def search_users(
    keyword: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(User).filter(User.is_blocked.is_(None))
    keyword = (keyword or "").strip()
    if keyword:
        pattern = like_pattern(keyword)
        query = query.filter(or_(
            User.full_name.ilike(pattern, escape="\\"),
            User.email.ilike(pattern, escape="\\"),
            User.user_name.ilike(pattern, escape="\\"),
            User.phone.ilike(pattern, escape="\\"),
        ))

    page = paginate(query.order_by(User.created_at.desc()), params, User.to_dict)
    return send_response(status.HTTP_200_OK, "Users fetched", page)


@router.get("/whats-new")
async def whats_new(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Three newest users and three newest communities"""
    users = db.query(User).filter(User.is_blocked.is_(None)).order_by(User.created_at.desc()).limit(3).all()
    communities = db.query(Community).order_by(Community.created_at.desc()).limit(3).all()
    return send_response(status.HTTP_200_OK, "Recent users and communities fetched", {
        "users": [user.to_dict() for user in users],
        "communities": [community.to_dict() for community in communities],
    })


# ------------------------------------------------------------------ account deletion

@router.post("/delete-account/request")
async def request_account_deletion(body: EmailRequest, db: Session = Depends(get_db)):
    if not body.email:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Email is required")

    user = _find_by_email(db, body.email)
    if user is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "User not found")
    if user.is_blocked:
        raise api_error(status.HTTP_403_FORBIDDEN, "Account is deleted or blocked")

    code = DeletionCodeService(db).issue(user)
    db.commit()
    logger.info(f"Account deletion requested for user {user.id} ({redact_email(user.email)})")

    _deliver(
        body.email,
        "AgerApp Account Deletion",
        f"Your account deletion code is {code}. This code expires in {config.OTP_TTL_MINUTES} minutes.",
    )
    return send_response(status.HTTP_200_OK, "Deletion code sent to your email")


@router.post("/delete-account/confirm")
async def confirm_account_deletion(body: DeletionConfirmRequest, db: Session = Depends(get_db)):
    if not body.email or not body.code:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Email and code are required")

    user = _find_by_email(db, body.email)
    if user is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "User not found")

    if DeletionCodeService(db).find_valid(user, body.email, body.code) is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid or expired code")

    summary = AccountDeletionService(db, user).soft_delete()
    return send_response(status.HTTP_200_OK, "Account deleted successfully", summary)
