"""
Central configuration module for AgerApp API
Reads and validates environment variables with strict checks for production
"""
import os
import sys
from typing import Optional, List

from dotenv import load_dotenv

# Only load .env in development
if os.getenv("ENV", "dev").lower() == "dev":
    load_dotenv()


class Config:
    """Central configuration class with environment variable validation"""

    # Environment
    ENV: str = os.getenv("ENV", "dev").lower()

    # Required for all environments
    SECRET_KEY: str = os.getenv("SECRET_KEY", os.getenv("APP_SECRET", ""))
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./agerapp.db")

    PORT: int = int(os.getenv("PORT", "8000"))

    # Public base URL used when building links to uploaded files
    API_URL: str = os.getenv("API_URL", "").rstrip("/")
    UPLOADS_DIR: str = os.getenv("UPLOADS_DIR", "./uploads")

    # CORS
    CORS_ORIGINS: List[str] = []

    # Auth
    ACCESS_TOKEN_EXPIRE_DAYS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "365"))
    ADMIN_CREATION_SECRET: Optional[str] = os.getenv("ADMIN_CREATION_SECRET")
    EMAIL_HASH_SECRET: Optional[str] = os.getenv("EMAIL_HASH_SECRET")

    # One-time codes
    OTP_TTL_MINUTES: int = int(os.getenv("OTP_TTL_MINUTES", "15"))
    DELETED_ACCOUNT_COOLDOWN_DAYS: int = int(os.getenv("DELETED_ACCOUNT_COOLDOWN_DAYS", "30"))

    # Paystack
    PAYSTACK_SECRET: Optional[str] = os.getenv("PAYSTACK_SECRET")
    PAYSTACK_BASE_URL: str = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co")
    PAYSTACK_TIMEOUT: float = float(os.getenv("PAYSTACK_TIMEOUT", "10"))

    # Email
    SMTP_HOST: Optional[str] = os.getenv("SMTP_HOST", os.getenv("MAIL_HOST"))
    SMTP_PORT: str = os.getenv("SMTP_PORT", os.getenv("MAIL_PORT", "587"))
    SMTP_USER: Optional[str] = os.getenv("SMTP_USER", os.getenv("MAIL_USERNAME"))
    SMTP_PASSWORD: Optional[str] = os.getenv("SMTP_PASSWORD", os.getenv("MAIL_PASSWORD"))
    SMTP_FROM_ADDRESS: Optional[str] = os.getenv("SMTP_FROM_ADDRESS")
    MAIL_FROM_NAME: str = os.getenv("MAIL_FROM_NAME", "AgerApp")
    CONTACT_RECIPIENT: str = os.getenv("CONTACT_RECIPIENT", "adetolajide@agerapp.com.ng")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __init__(self):
        """Initialize configuration and validate required variables"""
        self._load_cors_origins()
        self._validate()

    def _load_cors_origins(self):
        """Load CORS origins from environment variable"""
        default_origins = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]

        cors_env = os.getenv("CORS_ORIGINS", "")
        if cors_env:
            env_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]
            self.CORS_ORIGINS = default_origins + env_origins
        else:
            self.CORS_ORIGINS = default_origins

    def _validate(self):
        """Validate required configuration based on environment"""
        errors = []

        if self.ENV not in ["dev", "test", "staging", "prod"]:
            errors.append(f"Invalid ENV value: {self.ENV}. Must be 'dev', 'test', 'staging', or 'prod'")

        # SECRET_KEY signs every access token
        if not self.SECRET_KEY:
            errors.append("SECRET_KEY is required but not set")
        elif len(self.SECRET_KEY) < 32:
            errors.append(f"SECRET_KEY must be at least 32 characters (current: {len(self.SECRET_KEY)})")

        if not self.DATABASE_URL:
            errors.append("DATABASE_URL is required but not set")
        elif self.ENV in ["staging", "prod"] and not self.DATABASE_URL.startswith("postgresql"):
            errors.append(f"DATABASE_URL must be a PostgreSQL connection string in {self.ENV} (got: {self.DATABASE_URL[:30]}...)")

        if self.ENV in ["staging", "prod"]:
            if self.API_URL and not self.API_URL.startswith("https://"):
                errors.append("API_URL must use HTTPS in staging/production")
            if not self.SMTP_HOST:
                errors.append("SMTP_HOST is required in staging/production (OTP emails cannot be delivered)")

        # Fail fast in staging/prod
        if errors and self.ENV in ["staging", "prod"]:
            print("=" * 60, file=sys.stderr)
            print("CONFIGURATION VALIDATION FAILED", file=sys.stderr)
            print("=" * 60, file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            print("=" * 60, file=sys.stderr)
            sys.exit(1)

        # Warn in dev
        if errors and self.ENV == "dev":
            print("=" * 60, file=sys.stderr)
            print("CONFIGURATION WARNINGS (dev mode - continuing)", file=sys.stderr)
            print("=" * 60, file=sys.stderr)
            for error in errors:
                print(f"  {error}", file=sys.stderr)
            print("=" * 60, file=sys.stderr)

    @property
    def is_dev(self) -> bool:
        """Check if running in development mode"""
        return self.ENV == "dev"

    @property
    def is_test(self) -> bool:
        return self.ENV == "test"

    def get_email_hash_secret(self) -> str:
        """Secret mixed into deleted-account email hashes"""
        return self.EMAIL_HASH_SECRET or self.SECRET_KEY or "agerapp"


# Create global config instance
config = Config()
