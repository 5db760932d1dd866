from flask import Blueprint, request, jsonify, current_app
from flask_limiter.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError
import logging

from extensions import limiter
from bidhaa.schemas.auth import RegisterRequest, LoginRequest
from bidhaa.services.accounts import AccountError, register_user, authenticate
from bidhaa.utils import (
    error,
    internal_error_response,
    transactional,
    validate_schema,
    create_user_token,
    create_admin_token,
)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def account_error(e: AccountError):
    extra = {"action": e.action} if e.action else {}
    return error(str(e), status=e.status, **extra)


# --- Register ---

@auth_bp.route("/register", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["REGISTER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many registrations from this IP",
)
@validate_schema(RegisterRequest)
def register_handler():
    """
    Register a storefront account
    ---
    tags: [Auth]
    responses:
      201: {description: Account created, token issued}
      400: {description: Validation error or invalid role}
      409: {description: Email already registered}
    """
    data: RegisterRequest = request.validated_data
    try:
        with transactional("Failed to create user"):
            user = register_user(
                username=data.username,
                email=data.email,
                password=data.password,
                role=data.role,
                phone_number=data.phone_number,
            )
    except AccountError as e:
        return account_error(e)
    except SQLAlchemyError as e:
        return internal_error_response("Could not create user account", exc=e)

    logging.info("User registered id=%s role=%s", user.id, user.role)
    return jsonify({
        "success": True,
        "message": "Registration successful",
        "token": create_user_token(user.id, user.role),
        "user": user.to_dict(),
    }), 201


# --- Login (users first, then admins) ---

@auth_bp.route("/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many logins from this IP",
)
@validate_schema(LoginRequest)
def login_handler():
    data: LoginRequest = request.validated_data
    try:
        with transactional("Failed to record login"):
            kind, account = authenticate(data.email, data.password)
    except AccountError as e:
        return account_error(e)
    except SQLAlchemyError as e:
        return internal_error_response("Database error occurred", exc=e)

    if kind == "admin":
        token = create_admin_token(account.id, account.admin_role)
        summary = {
            "id": account.id,
            "username": account.username,
            "email": account.email,
            "role": "admin",
            "admin_role": account.admin_role,
        }
    else:
        token = create_user_token(account.id, account.role)
        summary = account.to_dict()

    logging.info("Login succeeded kind=%s id=%s", kind, account.id)
    return jsonify({
        "success": True,
        "message": "Login successful",
        "redirect": "/index.html",
        "token": token,
        "user": summary,
    }), 200
