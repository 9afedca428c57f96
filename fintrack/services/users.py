"""
User Handlers - accounts and per-user settings

Local accounts register with email + password. Users arriving from the
external identity provider are upserted by subject. Either way a user
gets default settings (FY April 1 - March 31, USD) on first sight.
"""

from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.database import User, UserSettings
from fintrack.errors import AuthenticationError, RecordNotFoundError, ValidationError
from fintrack.logger import create_logger, classify_error
from fintrack.periods import parse_month_day
from fintrack.schemas.users import RegisterRequest, UserRead, UserSettingsRead, UserSettingsUpdate
from fintrack.security import hash_password, verify_password

# Create logger for this module
logger = create_logger("users")


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def _ensure_settings(db: Session, user_id: str) -> UserSettings:
    existing = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if existing:
        return existing
    user_settings = UserSettings(
        user_id=user_id,
        financial_year_start=settings.default_financial_year_start,
        financial_year_end=settings.default_financial_year_end,
        currency=settings.default_currency,
    )
    db.add(user_settings)
    return user_settings


def get_user(db: Session, user_id: str) -> UserRead:
    user = db.get(User, user_id)
    if user is None:
        raise RecordNotFoundError(f"User {user_id} not found")
    return UserRead.model_validate(user)


def upsert_user(db: Session, user_id: str, claims: Optional[Dict[str, Any]] = None) -> UserRead:
    """
    Create or refresh a user from identity-provider claims.

    Known claim names: email, given_name, family_name, picture.
    """
    claims = claims or {}
    started_at = logger.operation_start("upsert_user", {"user_id": user_id})
    try:
        user = db.get(User, user_id)
        created = user is None
        if created:
            user = User(id=user_id)
            db.add(user)

        email = _normalize_email(claims.get("email"))
        if email and email != user.email:
            owner = db.query(User.id).filter(func.lower(User.email) == email, User.id != user_id).first()
            if owner:
                # Emails are unique; the address stays with the account that holds it
                logger.warn("Email claim already in use", {"user_id": user_id, "email": email})
            else:
                user.email = email
        if claims.get("given_name"):
            user.first_name = claims["given_name"]
        if claims.get("family_name"):
            user.last_name = claims["family_name"]
        if claims.get("picture"):
            user.profile_image_url = claims["picture"]

        db.flush()
        _ensure_settings(db, user_id)
        db.commit()
        db.refresh(user)

        logger.operation_end("upsert_user", started_at, {"created": created})
        return UserRead.model_validate(user)
    except Exception as e:
        db.rollback()
        logger.operation_error("upsert_user", started_at, e, classify_error(e))
        raise


def register_user(db: Session, payload: RegisterRequest) -> UserRead:
    email = _normalize_email(payload.email)
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")

    with logger.operation("register_user", {"email": email}):
        exists = db.query(User.id).filter(func.lower(User.email) == email).first()
        if exists:
            raise ValidationError("User already exists")

        try:
            user = User(
                email=email,
                first_name=payload.first_name or email.split("@")[0],
                last_name=payload.last_name,
                password_hash=hash_password(payload.password),
            )
            db.add(user)
            db.flush()
            _ensure_settings(db, user.id)
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            raise

        return UserRead.model_validate(user)


def authenticate_user(db: Session, email: str, password: str) -> UserRead:
    """Return the user for valid credentials, AuthenticationError otherwise."""
    normalized = _normalize_email(email)
    user = None
    if normalized:
        user = db.query(User).filter(func.lower(User.email) == normalized).first()

    # Identity-provider users have no password hash and cannot log in locally
    if user is None or not verify_password(password or "", user.password_hash):
        logger.warn("Login rejected", {"email": normalized})
        raise AuthenticationError("Invalid credentials")

    return UserRead.model_validate(user)


# ============================================================================
# USER SETTINGS
# ============================================================================

def get_or_create_user_settings(db: Session, user_id: str) -> UserSettingsRead:
    user_settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if user_settings is None:
        if db.get(User, user_id) is None:
            raise RecordNotFoundError(f"User {user_id} not found")
        user_settings = _ensure_settings(db, user_id)
        db.commit()
        db.refresh(user_settings)
        logger.info("Default user settings created", {"user_id": user_id})
    return UserSettingsRead.model_validate(user_settings)


def update_user_settings(db: Session, user_id: str, payload: UserSettingsUpdate) -> UserSettingsRead:
    """
    Update financial-year boundaries and/or currency.

    Boundaries must be MM-DD; currency is upper-cased and 3-10 characters.
    """
    updates: Dict[str, str] = {}

    if payload.financial_year_start is not None:
        parse_month_day(payload.financial_year_start)
        updates["financial_year_start"] = payload.financial_year_start
    if payload.financial_year_end is not None:
        parse_month_day(payload.financial_year_end)
        updates["financial_year_end"] = payload.financial_year_end
    if payload.currency is not None:
        currency = payload.currency.strip().upper()
        if not (3 <= len(currency) <= 10) or not currency.isalpha():
            raise ValidationError(f"Invalid currency: {payload.currency}")
        updates["currency"] = currency

    started_at = logger.operation_start("update_user_settings", {"user_id": user_id, "fields": sorted(updates)})
    try:
        if db.get(User, user_id) is None:
            raise RecordNotFoundError(f"User {user_id} not found")
        user_settings = _ensure_settings(db, user_id)
        for field, value in updates.items():
            setattr(user_settings, field, value)
        db.commit()
        db.refresh(user_settings)

        logger.operation_end("update_user_settings", started_at)
        return UserSettingsRead.model_validate(user_settings)
    except Exception as e:
        db.rollback()
        logger.operation_error("update_user_settings", started_at, e, classify_error(e))
        raise
