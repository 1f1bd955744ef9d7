"""Login and password changes."""

from typing import Optional

from classbook.config import Settings, get_settings
from classbook.database import Failed, NotFound, User, UserRepository
from classbook.errors import (
    NotFoundError,
    PersistenceError,
    UnknownAccountError,
    ValidationError,
    WrongPasswordError,
)
from classbook.logutils import get_logger, with_context

from . import credentials

logger = get_logger(__name__)


class AuthenticationService:
    """Checks credentials and migrates old password formats.

    Example:
        auth = AuthenticationService(store.users)
        try:
            user = auth.authenticate("ana@example.org", "secret123")
        except InvalidCredentialsError as e:
            show(str(e))  # "Invalid email or password"
    """

    def __init__(self, users: UserRepository, settings: Optional[Settings] = None):
        self.users = users
        self.settings = settings or get_settings()

    def authenticate(self, email: str, password: str, upgrade: bool = True) -> User:
        """Return the user whose email and password match.

        When the stored password is plaintext, an old PBKDF2 value or a
        deprecated passlib hash, it is replaced with an argon2 hash after a
        successful check (unless ``upgrade`` is False). A failed replacement
        is logged and does not fail the login.

        Raises:
            UnknownAccountError: No user has this email.
            WrongPasswordError: The password does not match.
            PersistenceError: The user could not be read.
        """
        with with_context(operation="authenticate", entity="User"):
            result = self.users.lookup_by_email(email)
            if isinstance(result, Failed):
                logger.error(
                    "Could not load account",
                    extra={"extra_data": {"email": email, "error": str(result.cause)}},
                )
                raise PersistenceError("Could not load account") from result.cause
            if isinstance(result, NotFound):
                logger.info(
                    "Login rejected",
                    extra={"extra_data": {"email": email, "reason": UnknownAccountError.reason}},
                )
                # Same hashing cost as a wrong password
                credentials.pwd_context.dummy_verify()
                raise UnknownAccountError(email)

            user = result.value
            credential = credentials.parse_credential(user.password)
            if not credentials.verify_credential(credential, password):
                logger.info(
                    "Login rejected",
                    extra={"extra_data": {"user_id": user.user_id, "reason": WrongPasswordError.reason}},
                )
                raise WrongPasswordError(email)

            if upgrade and credentials.needs_upgrade(credential):
                self.upgrade_credential(user, password)

            logger.info("User authenticated", extra={"extra_data": {"user_id": user.user_id}})
            return user

    def upgrade_credential(self, user: User, password: str) -> bool:
        """Rehash ``password`` with argon2 and store it on ``user``.

        Returns:
            True when the new hash was written; on failure ``user`` keeps its
            previous password value.
        """
        previous = user.password
        user.password = credentials.hash_password(password)
        try:
            updated = self.users.update(user)
        except PersistenceError as e:
            logger.warning(
                "Password upgrade failed",
                extra={"extra_data": {"user_id": user.user_id, "error": str(e)}},
            )
            updated = False
        if not updated:
            user.password = previous
            return False
        logger.info("Password hash upgraded", extra={"extra_data": {"user_id": user.user_id}})
        return True

    def validate_new_password(self, new_password: str, confirm_password: str) -> None:
        if new_password != confirm_password:
            raise ValidationError("New passwords don't match")
        minimum = self.settings.min_password_length
        if len(new_password) < minimum:
            raise ValidationError(f"New password must be at least {minimum} characters long")

    def change_password(
        self, user: User, current_password: str, new_password: str, confirm_password: str
    ) -> User:
        """Replace the password of ``user`` after checking the current one.

        Raises:
            ValidationError: Confirmation differs, the new password is too
                short, or the current password is wrong.
            NotFoundError: The user row no longer exists.
            PersistenceError: The update failed.
        """
        with with_context(operation="change_password", user_id=user.user_id, entity="User"):
            self.validate_new_password(new_password, confirm_password)
            if not self.verify_password(user.password, current_password):
                raise ValidationError("Current password is incorrect")

            new_hash = self.hash_password(new_password)
            if not self.users.update_password(user.user_id, new_hash):
                raise NotFoundError(f"User ID {user.user_id} does not exist")
            user.password = new_hash
            logger.info("Password changed", extra={"extra_data": {"user_id": user.user_id}})
            return user

    @staticmethod
    def verify_password(stored: str, password: str) -> bool:
        return credentials.verify_password(stored, password)

    @staticmethod
    def hash_password(password: str) -> str:
        return credentials.hash_password(password)
