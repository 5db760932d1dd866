from datetime import datetime
from typing import List, Optional, Tuple, Union

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models import db
from models.user import User, Admin, ADMIN_ROLES
from bidhaa.auth.permissions import is_user_role, is_admin_role
from bidhaa.utils.passwords import hash_password, check_password
from bidhaa.utils.auth import LOGIN_REQUIRED

DUPLICATE_USER_MESSAGE = "An account with this email already exists. Please log in instead."
DUPLICATE_ADMIN_MESSAGE = "An admin account with this email already exists."


class AccountError(Exception):
    status = 400
    action = None


class InvalidRole(AccountError):
    pass


class DuplicateAccount(AccountError):
    status = 409
    action = LOGIN_REQUIRED


class SuperAdminLimitReached(AccountError):
    pass


class InvalidCredentials(AccountError):
    status = 401

    def __init__(self, message="Invalid email or password"):
        super().__init__(message)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def register_user(username: str, email: str, password: str, role: str,
                  phone_number: Optional[str] = None) -> User:
    """Create a storefront account. Flushes, does NOT commit."""
    if not is_user_role(role):
        raise InvalidRole("Invalid role selected")
    email = _normalize_email(email)
    if User.query.filter_by(email=email).first():
        raise DuplicateAccount(DUPLICATE_USER_MESSAGE)

    user = User(
        username=username.strip(),
        email=email,
        phone_number=phone_number,
        password=hash_password(password),
        role=role,
    )
    return _insert(user, DUPLICATE_USER_MESSAGE)


def _insert(account, duplicate_message):
    """Add and flush; a unique-email race that slipped past the lookup is a duplicate."""
    db.session.add(account)
    try:
        db.session.flush()
    except IntegrityError as e:
        raise DuplicateAccount(duplicate_message) from e
    return account


def super_admin_count() -> int:
    return db.session.query(func.count(Admin.id)).filter(Admin.admin_role == "super_admin").scalar() or 0


def register_admin(username: str, email: str, password: str, admin_role: str,
                   phone_number: Optional[str] = None, created_by: Optional[int] = None) -> Admin:
    """Create a back-office account, enforcing the super_admin cap. Does NOT commit."""
    if not is_admin_role(admin_role):
        raise InvalidRole(f"Invalid admin role. Must be one of: {', '.join(ADMIN_ROLES)}")
    email = _normalize_email(email)
    if Admin.query.filter_by(email=email).first():
        raise DuplicateAccount(DUPLICATE_ADMIN_MESSAGE)

    if admin_role == "super_admin":
        cap = current_app.config.get("MAX_SUPER_ADMINS", 3)
        if super_admin_count() >= cap:
            raise SuperAdminLimitReached(f"Maximum number of super admins ({cap}) has been reached")

    admin = Admin(
        username=username.strip(),
        email=email,
        phone_number=phone_number,
        password=hash_password(password),
        admin_role=admin_role,
        created_by=created_by,
    )
    return _insert(admin, DUPLICATE_ADMIN_MESSAGE)


def authenticate_admin(email: str, password: str) -> Admin:
    admin = Admin.query.filter_by(email=_normalize_email(email)).first()
    if not admin or not check_password(password, admin.password):
        raise InvalidCredentials()
    admin.last_login = datetime.utcnow()
    return admin


def authenticate(email: str, password: str) -> Tuple[str, Union[User, Admin]]:
    """Try the users table first, then admins. Returns ("user"|"admin", account)."""
    user = User.query.filter_by(email=_normalize_email(email)).first()
    if user is None:
        return "admin", authenticate_admin(email, password)
    if not check_password(password, user.password):
        raise InvalidCredentials()
    user.last_login = datetime.utcnow()
    return "user", user


def update_admin_profile(admin: Admin, username=None, email=None, phone_number=None,
                         current_password=None, new_password=None) -> List[str]:
    """Apply profile changes; returns the names of the changed fields (never the password)."""
    if new_password and not check_password(current_password, admin.password):
        raise InvalidCredentials("Current password is incorrect")

    changed = []
    if username:
        admin.username = username.strip()
        changed.append("username")
    if email:
        email = _normalize_email(email)
        if email != admin.email:
            taken = Admin.query.filter(Admin.email == email, Admin.id != admin.id).first()
            if taken:
                raise DuplicateAccount("Email already registered")
        admin.email = email
        changed.append("email")
    if phone_number:
        admin.phone_number = phone_number
        changed.append("phone_number")
    if new_password:
        admin.password = hash_password(new_password)
    db.session.flush()
    return changed
