"""
Registration, login and bearer-token resolution.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import jwt
from email_validator import EmailNotValidError, validate_email

from watertrack.config import Settings
from watertrack.db import DbClient, UserRecord, new_id
from watertrack.errors import (
    FieldError,
    UnauthorizedError,
    ValidationError,
)
from watertrack.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from watertrack.users import merge_household, merge_preferences

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, db: DbClient, settings: Settings):
        self.db = db
        self.settings = settings

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        household: Optional[Mapping[str, Any]] = None,
        preferences: Optional[Mapping[str, Any]] = None,
    ) -> tuple[UserRecord, str]:
        """
        Create a user and return it with a fresh access token.

        Raises ``ValidationError`` listing every bad field, or ``ConflictError``
        when the email is already registered.
        """
        errors: list[FieldError] = []
        if not name or not name.strip():
            errors.append(FieldError("name", "is required"))
        if not email:
            errors.append(FieldError("email", "is required"))
        else:
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError as exc:
                errors.append(FieldError("email", str(exc)))
        if not password:
            errors.append(FieldError("password", "is required"))
        elif len(password) < MIN_PASSWORD_LENGTH:
            errors.append(
                FieldError(
                    "password", f"must be at least {MIN_PASSWORD_LENGTH} characters"
                )
            )
        try:
            household_doc = merge_household(None, household)
        except ValidationError as exc:
            errors.extend(exc.errors)
            household_doc = None
        try:
            preferences_doc = merge_preferences(None, preferences)
        except ValidationError as exc:
            errors.extend(exc.errors)
            preferences_doc = None
        if errors:
            raise ValidationError(errors)

        user = self.db.create_user(
            UserRecord(
                user_id=new_id(),
                name=name.strip(),
                email=normalize_email(email),
                password_hash=hash_password(password, self.settings),
                household=household_doc,
                preferences=preferences_doc,
            )
        )
        logger.info("Registered user %s", user.user_id)
        return user, create_access_token(user.user_id, self.settings)

    def login(self, email: str, password: str) -> tuple[UserRecord, str]:
        # Unknown email and wrong password raise the same error.
        user = self.db.get_user_by_email(normalize_email(email or ""))
        if not user or not verify_password(password or "", user.password_hash, self.settings):
            logger.warning("Failed login attempt")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return user, create_access_token(user.user_id, self.settings)

    def authenticate_token(self, token: Optional[str]) -> UserRecord:
        if not token:
            raise UnauthorizedError("Authentication token missing")
        try:
            user_id = decode_access_token(token, self.settings)
        except jwt.ExpiredSignatureError:
            logger.warning("Rejected expired token")
            raise UnauthorizedError("Token expired")
        except jwt.InvalidTokenError:
            logger.warning("Rejected invalid token")
            raise UnauthorizedError("Invalid token")
        user = self.db.get_user(user_id)
        if not user:
            raise UnauthorizedError("Invalid token")
        return user
