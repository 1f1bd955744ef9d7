"""Account and profile creation flows.

Each flow runs its checks and inserts inside one ``Database.transaction()``:
either every row is written or none is, and the error that stopped the flow
reaches the caller unchanged.
"""

import re
from typing import Optional

from classbook.config import Settings, get_settings
from classbook.database import AccountType, Parent, Student, Teacher, User, check_account_type
from classbook.errors import ValidationError
from classbook.logutils import get_logger, with_context
from classbook.store import SchoolStore

from .credentials import hash_password

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@(.+)$")


class RegistrationService:
    """Creates users together with their role profiles.

    Example:
        registration = RegistrationService(store)
        parent_id = registration.add_parent_with_validation(
            Parent(number_of_children=2),
            User(full_name="Ana Diaz", email="ana@example.org",
                 password=hash_password("secret123"), account_type=AccountType.PARENT),
        )
    """

    def __init__(self, store: SchoolStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    # ==================== ROLE PROFILES ====================

    def add_parent_with_validation(self, parent: Parent, user: User) -> int:
        """Create a PARENT user and its parent profile as one unit.

        ``user.user_id`` and ``parent.user_id`` receive the new user id; both
        are reset if the flow fails.

        Returns:
            The new ``parent_id``.

        Raises:
            ValidationError: ``user`` is not a PARENT account.
            PersistenceError: Either insert failed; nothing was written.
        """
        store = self.store
        previous_user_id, previous_parent_user_id = user.user_id, parent.user_id
        with with_context(operation="add_parent", entity="Parent"):
            try:
                with store.db.transaction():
                    user_id, parent_id = self._insert_parent(parent, user)
            except Exception:
                user.user_id, parent.user_id = previous_user_id, previous_parent_user_id
                parent.parent_id = None
                raise

            logger.info(
                "Parent account created",
                extra={"extra_data": {"user_id": user_id, "parent_id": parent_id}},
            )
            return parent_id

    def add_teacher_with_validation(self, teacher: Teacher) -> int:
        """Create a teacher profile for an existing TEACHER user.

        Raises:
            ValidationError: The user is not a TEACHER account or the class
                does not exist.
            PersistenceError: A check or the insert could not run.
        """
        store = self.store
        with with_context(operation="add_teacher", user_id=teacher.user_id, entity="Teacher"):
            with store.db.transaction():
                if not store.validator.is_valid_teacher_user(teacher.user_id):
                    raise ValidationError(f"User ID {teacher.user_id} is not a valid teacher account")
                if not store.validator.class_exists(teacher.class_id):
                    raise ValidationError(f"Class ID {teacher.class_id} does not exist")
                teacher_id = store.teachers.create(teacher)

            logger.info("Teacher profile created", extra={"extra_data": {"teacher_id": teacher_id}})
            return teacher_id

    def add_student_with_validation(self, student: Student) -> int:
        """Create a student after checking its parent and class exist.

        Raises:
            ValidationError: The parent or the class does not exist.
            PersistenceError: A check or the insert could not run.
        """
        store = self.store
        with with_context(operation="add_student", entity="Student"):
            with store.db.transaction():
                if not store.validator.parent_exists(student.parent_id):
                    raise ValidationError(f"Parent ID {student.parent_id} does not exist")
                if not store.validator.class_exists(student.class_id):
                    raise ValidationError(f"Class ID {student.class_id} does not exist")
                student_id = store.students.create(student)

            logger.info("Student created", extra={"extra_data": {"student_id": student_id}})
            return student_id

    def create_teacher_account(self, user: User, class_id: int) -> int:
        """Create a TEACHER user and its teacher profile as one unit.

        Returns:
            The new ``teacher_id``.
        """
        store = self.store
        previous_user_id = user.user_id
        with with_context(operation="create_teacher_account", entity="Teacher"):
            try:
                with store.db.transaction():
                    user_id, teacher_id = self._insert_teacher_account(user, class_id)
            except Exception:
                user.user_id = previous_user_id
                raise

            logger.info(
                "Teacher account created",
                extra={"extra_data": {"user_id": user_id, "teacher_id": teacher_id}},
            )
            return teacher_id

    # Inserts shared by the flows; the caller owns the transaction.

    def _insert_parent(self, parent: Parent, user: User) -> tuple:
        check_account_type(user, AccountType.PARENT)
        user_id = self.store.users.create(user)
        parent.user_id = user_id
        return user_id, self.store.parents.create(parent)

    def _insert_teacher_account(self, user: User, class_id: int) -> tuple:
        if not self.store.validator.class_exists(class_id):
            raise ValidationError(f"Class ID {class_id} does not exist")
        check_account_type(user, AccountType.TEACHER)
        user_id = self.store.users.create(user)
        return user_id, self.store.teachers.create(Teacher(user_id=user_id, class_id=class_id))

    # ==================== SELF-REGISTRATION ====================

    def validate_registration(
        self, full_name: str, email: str, password: str, confirm_password: str
    ) -> None:
        """Field checks made before any account is written.

        Raises:
            ValidationError: With the first rule that failed.
        """
        if not full_name or not email or not password:
            raise ValidationError("Please fill in all required fields")
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        minimum = self.settings.min_password_length
        if len(password) < minimum:
            raise ValidationError(f"Password must be at least {minimum} characters long")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Invalid email format")

    def register_user(
        self,
        full_name: str,
        email: str,
        password: str,
        confirm_password: str,
        account_type: AccountType,
        address: Optional[str] = None,
        phone_number: Optional[str] = None,
        class_id: Optional[int] = None,
        number_of_children: int = 0,
    ) -> int:
        """Register a new account from form input.

        Teachers get a teacher profile for ``class_id``; parents get a parent
        profile with ``number_of_children``. The password is stored as an
        argon2 hash.

        Returns:
            The new ``user_id``.

        Raises:
            ValidationError: A field rule failed, the email is already
                registered, or a teacher was registered without a class.
            PersistenceError: The store failed; nothing was written.
        """
        full_name = full_name.strip()
        email = email.strip()
        self.validate_registration(full_name, email, password, confirm_password)

        user = User(
            full_name=full_name,
            email=email,
            password=hash_password(password),
            account_type=account_type,
            address=address or None,
            phone_number=phone_number or None,
        )
        if user.account_type == AccountType.TEACHER and class_id is None:
            raise ValidationError("Class ID is required for teacher accounts")

        with with_context(operation="register_user", entity="User"):
            # The email check and the inserts share one write lock
            with self.store.db.transaction():
                if self.store.users.is_email_taken(email):
                    raise ValidationError(f"Email {email} is already registered")
                if user.account_type == AccountType.TEACHER:
                    self._insert_teacher_account(user, class_id)
                elif user.account_type == AccountType.PARENT:
                    self._insert_parent(Parent(number_of_children=number_of_children), user)
                else:
                    self.store.users.create(user)

        logger.info(
            "User registered",
            extra={"extra_data": {"user_id": user.user_id, "account_type": user.account_type.value}},
        )
        return user.user_id
