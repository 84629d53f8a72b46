"""
User Service - credential store and seeker profiles.

Handles:
- Registration (seekers and recruiters) and login
- Seeker profile reads/updates and resume references
- Password recovery (single-use, time-boxed reset tokens)
"""

import logging
from typing import Optional
from pymongo.errors import DuplicateKeyError

from careercraft.core.auth import (
    CurrentUser,
    create_password_reset_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from careercraft.core.config import get_settings
from careercraft.core.exceptions import (
    DuplicateIdentity,
    Forbidden,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFound,
    ValidationError,
)
from careercraft.db.mongodb import COLLECTIONS
from careercraft.schemas.schemas import SeekerProfileUpdate, UserRole
from careercraft.services.mongo_service import CollectionService, to_object_id, utcnow

logger = logging.getLogger(__name__)

GENERIC_RESET_MESSAGE = "If an account with that email exists, a password reset link has been sent."
MIN_PASSWORD_LENGTH = 6


class ResetLinkNotifier:
    """
    Delivers password-reset links. Email delivery is not wired up yet,
    so the link is written to the application log.
    """

    def send_reset_link(self, email: str, reset_url: str) -> None:
        logger.info("Password reset link for %s: %s", email, reset_url)


class UserService(CollectionService):
    collection_name = COLLECTIONS["users"]

    def __init__(self, db=None, notifier: ResetLinkNotifier = None):
        super().__init__(db)
        self.notifier = notifier or ResetLinkNotifier()

    # ------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------

    def get_by_id(self, user_id) -> Optional[dict]:
        return self.collection.find_one({"_id": to_object_id(user_id, "User")}, {"password_hash": 0})

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email.strip().lower()})

    # ------------------------------------------------------------
    # Registration / login
    # ------------------------------------------------------------

    def register(
        self,
        role: UserRole,
        full_name: str,
        email: str,
        password: str,
        company_name: Optional[str] = None,
    ) -> dict:
        """Create a user and return it (without the password hash)."""
        if not full_name or not email or not password:
            raise ValidationError("Please provide all required fields.")
        if role == UserRole.company_recruiter and not company_name:
            raise ValidationError("Please provide full name, email, password, and company name.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

        email = email.strip().lower()
        if self.collection.find_one({"email": email}, {"_id": 1}):
            raise DuplicateIdentity()

        now = utcnow()
        doc = {
            "full_name": full_name,
            "email": email,
            "password_hash": hash_password(password),
            "role": UserRole(role).value,
            "company_name": company_name if role == UserRole.company_recruiter else None,
            "bio": "",
            "skills": [],
            "resume_url": "",
            "resume_file_name": "",
            "resume_key": "",
            "profile_photo_url": "",
            "linkedin_url": "",
            "portfolio_url": "",
            "password_reset_token": None,
            "password_reset_expires": None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            # Unique index on email closes the check-then-insert race
            raise DuplicateIdentity()

        logger.info("Registered %s account %s", doc["role"], result.inserted_id)
        doc.pop("password_hash")
        doc["_id"] = result.inserted_id
        return doc

    def authenticate(self, email: str, password: str) -> dict:
        """Return the user for valid credentials; same error for unknown email and wrong password."""
        user = self.get_by_email(email) if email else None
        if not user or not verify_password(password or "", user["password_hash"]):
            logger.warning("Failed login attempt for %s", email)
            raise InvalidCredentials()
        user.pop("password_hash", None)
        return user

    # ------------------------------------------------------------
    # Seeker profile
    # ------------------------------------------------------------

    def get_seeker_profile(self, actor: CurrentUser) -> dict:
        if actor.role != UserRole.seeker.value:
            raise Forbidden("Access denied. User is not a seeker.")
        user = self.get_by_id(actor.id)
        if not user:
            raise NotFound("User not found.")
        return user

    def update_seeker_profile(self, actor: CurrentUser, update: SeekerProfileUpdate) -> dict:
        """Partial update: only fields present in the request are written."""
        self.get_seeker_profile(actor)

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            changes["updated_at"] = utcnow()
            self.collection.update_one({"_id": to_object_id(actor.id, "User")}, {"$set": changes})
        return self.get_by_id(actor.id)

    def set_resume(self, actor: CurrentUser, resume_url: str, resume_file_name: str, resume_key: str) -> dict:
        self.get_seeker_profile(actor)
        self.collection.update_one(
            {"_id": to_object_id(actor.id, "User")},
            {"$set": {
                "resume_url": resume_url,
                "resume_file_name": resume_file_name,
                "resume_key": resume_key,
                "updated_at": utcnow(),
            }},
        )
        return self.get_by_id(actor.id)

    # ------------------------------------------------------------
    # Password recovery
    # ------------------------------------------------------------

    def request_password_reset(self, email: str) -> str:
        """
        Generate a reset token for the account (if any) and hand the link to
        the notifier. Always returns the same message so callers can't probe
        which emails are registered.
        """
        if not email:
            raise ValidationError("Please provide an email address.")

        user = self.get_by_email(email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return GENERIC_RESET_MESSAGE

        raw_token, token_hash, expires_at = create_password_reset_token()
        self.collection.update_one(
            {"_id": user["_id"]},
            {"$set": {"password_reset_token": token_hash, "password_reset_expires": expires_at}},
        )

        reset_url = f"{get_settings().frontend_url}/reset-password/{raw_token}"
        self.notifier.send_reset_link(user["email"], reset_url)
        return GENERIC_RESET_MESSAGE

    def reset_password(self, raw_token: str, new_password: str) -> None:
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Please provide a new password with at least {MIN_PASSWORD_LENGTH} characters."
            )
        if not raw_token:
            raise InvalidOrExpiredToken()

        user = self.collection.find_one({
            "password_reset_token": hash_reset_token(raw_token),
            "password_reset_expires": {"$gt": utcnow()},
        })
        if not user:
            raise InvalidOrExpiredToken()

        self.collection.update_one(
            {"_id": user["_id"]},
            {"$set": {
                "password_hash": hash_password(new_password),
                "password_reset_token": None,
                "password_reset_expires": None,
                "updated_at": utcnow(),
            }},
        )
        logger.info("Password reset completed for user %s", user["_id"])
