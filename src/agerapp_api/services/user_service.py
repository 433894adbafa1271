"""
User profile helpers: social links and per-user settings
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..db.models import User, UserSettings

logger = logging.getLogger(__name__)

SOCIAL_PLATFORMS = ("INSTAGRAM", "FACEBOOK", "LINKEDIN", "DISCORD", "TELEGRAM", "WHATSAPP")

DEFAULT_SETTINGS = {
    "currency": "NGN",
    "notification": True,
    "taxes_rate": 7.5,
    "taxes_enabled": True,
    "language": "ENGLISH",
}

SETTINGS_FIELDS = ("currency", "notification", "taxes_rate", "taxes_enabled", "language")


def normalize_platform(value: Any) -> Optional[str]:
    """Upper-cased platform name, None when unsupported"""
    platform = str(value or "").upper()
    return platform if platform in SOCIAL_PLATFORMS else None


def normalize_socials(raw: Any) -> List[Dict[str, str]]:
    """
    Coerce stored socials into a list of {"social", "link"}

    Older rows hold a single {"social", "link"} object or a
    {"PLATFORM": link} mapping; unsupported platforms are dropped.
    """
    if isinstance(raw, list):
        return [entry for entry in raw if isinstance(entry, dict)]

    if isinstance(raw, dict):
        if "social" in raw and "link" in raw:
            platform = normalize_platform(raw.get("social"))
            if platform is None:
                return []
            return [{"social": platform, "link": str(raw.get("link") or "")}]

        socials = []
        for key, link in raw.items():
            platform = normalize_platform(key)
            if platform is not None:
                socials.append({"social": platform, "link": str(link or "")})
        return socials

    return []


def merge_social(existing: Any, platform: str, link: str) -> List[Dict[str, str]]:
    """Drop any entry for the platform, then append the new link"""
    socials = [entry for entry in normalize_socials(existing) if entry.get("social") != platform]
    socials.append({"social": platform, "link": link})
    return socials


class SettingsService:
    """Per-user preferences (currency, tax, notifications, language)"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[UserSettings]:
        return self.db.query(UserSettings).filter(UserSettings.user_id == user_id).first()

    def upsert(self, user_id: str, changes: Dict[str, Any]) -> UserSettings:
        """
        Apply the non-null values in changes

        A missing row is created with notification on and taxes off.
        """
        settings = self.get(user_id)
        if settings is None:
            settings = UserSettings(
                user_id=user_id,
                currency=changes.get("currency"),
                notification=changes.get("notification") if changes.get("notification") is not None else True,
                taxes_rate=changes.get("taxes_rate"),
                taxes_enabled=changes.get("taxes_enabled") if changes.get("taxes_enabled") is not None else False,
                language=changes.get("language"),
            )
            self.db.add(settings)
        else:
            for field in SETTINGS_FIELDS:
                value = changes.get(field)
                if value is not None:
                    setattr(settings, field, value)

        self.db.commit()
        self.db.refresh(settings)
        return settings

    def apply_defaults(self) -> Dict[str, int]:
        """
        Create default rows for users without settings and fill null
        currency, taxes_rate and language on existing rows

        Returns:
            {"created": rows created, "updated": null fields filled}
        """
        user_ids = [row[0] for row in self.db.query(User.id).all()]

        existing = {row[0] for row in self.db.query(UserSettings.user_id).all()}
        missing = [user_id for user_id in user_ids if user_id not in existing]
        for user_id in missing:
            self.db.add(UserSettings(user_id=user_id, **DEFAULT_SETTINGS))
        self.db.flush()

        updated = 0
        for field in ("currency", "taxes_rate", "language"):
            column = getattr(UserSettings, field)
            updated += (
                self.db.query(UserSettings)
                .filter(column.is_(None))
                .update({field: DEFAULT_SETTINGS[field]}, synchronize_session=False)
            )

        self.db.commit()
        logger.info(f"Default settings applied: {len(missing)} created, {updated} fields filled")
        return {"created": len(missing), "updated": updated}
