import logging
from functools import wraps
from flask import request, g, current_app, make_response
from sqlalchemy.exc import SQLAlchemyError
from .responses import error, internal_error_response
from .jwt import decode_token, TokenError
from models import db
from models.user import User, Admin
from bidhaa.auth.permissions import admin_role_has_scope

SIGNUP_REQUIRED = "SIGNUP_REQUIRED"
LOGIN_REQUIRED = "LOGIN_REQUIRED"


def _bearer_token():
    auth = request.headers.get("Authorization", "")
    if not auth:
        return None
    return auth.split(" ", 1)[1].strip() if auth.startswith("Bearer ") else auth.strip()


def auth_required(func):
    """Bearer-token guard for the storefront API."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return error(
                "Please sign up or log in to continue",
                status=401,
                error="Authentication required",
                action=SIGNUP_REQUIRED,
            )
        try:
            payload = decode_token(token, expected_claim="userId")
        except TokenError as e:
            logging.info("Rejected bearer token: %s", e)
            return error(
                "Please log in again",
                status=401,
                error="Invalid or expired session",
                action=LOGIN_REQUIRED,
            )

        try:
            user = db.session.get(User, payload["userId"])
        except SQLAlchemyError as e:
            logging.error("User lookup failed: %s", e, exc_info=True)
            return internal_error_response("Server error", exc=e)
        if user is None:
            return error(
                "Please sign up to create an account",
                status=401,
                error="User not found",
                action=SIGNUP_REQUIRED,
            )

        g.current_user = user
        g.role = user.role
        return func(*args, **kwargs)

    return wrapper


def role_required(*roles, label=None):
    """Allow only accounts whose role equals one of ``roles``.

    Must run after ``auth_required`` so ``g.current_user`` is populated.
    """
    allowed = set(roles)
    denied = f"Access denied. {label} only." if label else "Access denied."

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "current_user", None)
            if user is None or user.role not in allowed:
                return error(denied, status=403)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


tutor_required = role_required("tutor", label="Tutor")
student_required = role_required("student", label="Student")
shopper_required = role_required("shopper", label="Shopper")
school_required = role_required("school", label="School")


def _reject_admin(message, clear_cookie=False):
    resp = make_response(error(message, status=401))
    if clear_cookie:
        resp.delete_cookie(current_app.config["ADMIN_COOKIE_NAME"])
    return resp


def admin_cookie_required(func):
    """Cookie guard for the admin web UI; clears the cookie on a bad token."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = request.cookies.get(current_app.config["ADMIN_COOKIE_NAME"])
        if not token:
            return _reject_admin("Access denied. Please login.")
        try:
            payload = decode_token(token, expected_claim="adminId")
        except TokenError as e:
            logging.info("Rejected admin cookie: %s", e)
            return _reject_admin("Invalid token", clear_cookie=True)

        try:
            admin = db.session.get(Admin, payload["adminId"])
        except SQLAlchemyError as e:
            logging.error("Admin lookup failed: %s", e, exc_info=True)
            return internal_error_response("Internal server error", exc=e)
        if admin is None:
            return _reject_admin("Invalid admin account")

        g.current_admin = admin
        return func(*args, **kwargs)

    return wrapper


def admin_scope_required(action, message="Insufficient admin privileges"):
    """Allow admins whose admin_role grants ``action``."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            admin = getattr(g, "current_admin", None)
            if admin is None or not admin_role_has_scope(admin.admin_role, action):
                return error(message, status=403)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
