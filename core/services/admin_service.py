# =============================================================================
# core/services/admin_service.py - Admin Credential Operations
# =============================================================================
# The dashboard is gated by one shared admin credential:
# - ensure_default_admin(): create it on first start
# - verify_login(): check a username/password pair
# - change_password(): rotate the password after checking the current one
#
# There is no session or token model; each call stands alone.
# =============================================================================

import logging

from app.exceptions import ConstraintViolationError, InvalidCredentialsError, InvalidInputError
from core.models import Credential
from core.stores import RecordStore
from lib.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class AdminService:
    """Service for the admin credential."""

    def __init__(
        self,
        store: RecordStore,
        username: str = "admin",
        default_password: str = "admin123",
        min_password_length: int = 6,
        bcrypt_rounds: int = 10,
    ):
        self.store = store
        self.username = username
        self.default_password = default_password
        self.min_password_length = min_password_length
        self.bcrypt_rounds = bcrypt_rounds

    @classmethod
    def from_settings(cls, store: RecordStore, settings) -> "AdminService":
        return cls(
            store,
            username=settings.ADMIN_USERNAME,
            default_password=settings.ADMIN_DEFAULT_PASSWORD,
            min_password_length=settings.MIN_PASSWORD_LENGTH,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )

    def ensure_default_admin(self) -> bool:
        """
        Create the admin credential if it doesn't exist yet.

        Returns:
            True if a credential was created
        """
        if self.store.credentials.find_by("username", self.username) is not None:
            return False
        try:
            self.store.credentials.create({
                "username": self.username,
                "password": hash_password(self.default_password, self.bcrypt_rounds),
            })
        except ConstraintViolationError:
            # Another worker created it first
            return False
        logger.warning(
            f"Created admin credential '{self.username}' with the default password; "
            "change it from the dashboard"
        )
        return True

    def verify_login(self, username: str, password: str) -> Credential:
        """
        Check a login attempt.

        Raises:
            InvalidCredentialsError: If the username is unknown or the password is wrong
        """
        credential = self.store.credentials.find_by("username", (username or "").strip())
        if credential is None or not verify_password(password or "", credential.password):
            logger.info(f"Failed admin login for '{username}'")
            raise InvalidCredentialsError()
        return credential

    def change_password(self, current_password: str, new_password: str, username: str | None = None) -> None:
        """
        Replace the stored hash after checking the current password.

        Raises:
            InvalidCredentialsError: If the current password is wrong
            InvalidInputError: If the new password is too short
        """
        username = username or self.username
        credential = self.store.credentials.find_by("username", username)
        if credential is None or not verify_password(current_password or "", credential.password):
            raise InvalidCredentialsError("Current password is incorrect")

        if len(new_password or "") < self.min_password_length:
            raise InvalidInputError(
                f"New password must be at least {self.min_password_length} characters",
                field="newPassword",
            )

        self.store.credentials.update(credential.id, {
            "password": hash_password(new_password, self.bcrypt_rounds),
        })
        logger.info(f"Password changed for admin '{username}'")
