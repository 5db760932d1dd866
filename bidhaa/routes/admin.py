from flask import Blueprint, request, jsonify, current_app, g
from flask_limiter.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError
import logging

from extensions import limiter
from bidhaa.routes.auth import account_error
from bidhaa.schemas.auth import LoginRequest, AdminRegisterRequest, AdminProfileUpdate
from bidhaa.services.accounts import (
    AccountError,
    authenticate_admin,
    register_admin,
    update_admin_profile,
)
from bidhaa.utils import (
    admin_cookie_required,
    admin_scope_required,
    create_admin_token,
    internal_error_response,
    transactional,
    validate_schema,
)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


def _set_admin_cookie(resp, token):
    cfg = current_app.config
    resp.set_cookie(
        cfg["ADMIN_COOKIE_NAME"],
        token,
        max_age=cfg["TOKEN_LIFETIME_HOURS"] * 3600,
        httponly=True,
        secure=cfg.get("ADMIN_COOKIE_SECURE", False),
        samesite="Strict",
    )
    return resp


# --- Login / logout ---

@admin_bp.route("/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many logins from this IP",
)
@validate_schema(LoginRequest)
def admin_login():
    data: LoginRequest = request.validated_data
    try:
        with transactional("Failed to record admin login"):
            admin = authenticate_admin(data.email, data.password)
    except AccountError as e:
        return account_error(e)
    except SQLAlchemyError as e:
        return internal_error_response("Server error during login", exc=e)

    token = create_admin_token(admin.id, admin.admin_role)
    logging.info("Admin login id=%s admin_role=%s", admin.id, admin.admin_role)
    resp = jsonify({
        "success": True,
        "message": "Login successful",
        "token": token,
        "admin": admin.to_dict(),
    })
    return _set_admin_cookie(resp, token), 200


@admin_bp.route("/logout", methods=["POST"])
def admin_logout():
    resp = jsonify({"success": True, "message": "Logged out successfully"})
    resp.delete_cookie(current_app.config["ADMIN_COOKIE_NAME"])
    return resp, 200


# --- Session checks ---

@admin_bp.route("/verify-auth", methods=["GET"])
@admin_cookie_required
def verify_auth():
    admin = g.current_admin
    return jsonify({
        "authenticated": True,
        "admin": {
            "username": admin.username,
            "email": admin.email,
            "role": admin.admin_role,
        },
    }), 200


@admin_bp.route("/profile", methods=["GET"])
@admin_cookie_required
def get_profile():
    admin = g.current_admin
    return jsonify({
        "success": True,
        "admin": {
            "username": admin.username,
            "email": admin.email,
            "phone_number": admin.phone_number,
            "admin_role": admin.admin_role,
        },
    }), 200


@admin_bp.route("/profile", methods=["PUT"])
@admin_cookie_required
@validate_schema(AdminProfileUpdate)
def update_profile():
    data: AdminProfileUpdate = request.validated_data
    try:
        with transactional("Could not update profile"):
            updates = update_admin_profile(
                g.current_admin,
                username=data.username,
                email=data.email,
                phone_number=data.phone_number,
                current_password=data.current_password,
                new_password=data.new_password,
            )
    except AccountError as e:
        return account_error(e)
    except SQLAlchemyError as e:
        return internal_error_response("Could not update profile", exc=e)

    return jsonify({
        "success": True,
        "message": "Profile updated successfully",
        "updates": updates,
    }), 200


# --- Admin management (super admins only) ---

@admin_bp.route("/register", methods=["POST"])
@admin_cookie_required
@admin_scope_required("register_admin", message="Only super admins can register new admins")
@validate_schema(AdminRegisterRequest)
def register_admin_handler():
    data: AdminRegisterRequest = request.validated_data
    creator = g.current_admin
    try:
        with transactional("Admin creation failed"):
            admin = register_admin(
                username=data.username,
                email=data.email,
                password=data.password,
                admin_role=data.admin_role,
                phone_number=data.phone_number,
                created_by=creator.id,
            )
    except AccountError as e:
        return account_error(e)
    except SQLAlchemyError as e:
        return internal_error_response("Could not create admin account", exc=e)

    logging.info("Admin id=%s (%s) created by id=%s", admin.id, admin.admin_role, creator.id)
    body = admin.to_dict()
    body["created_by"] = creator.username
    return jsonify({
        "success": True,
        "message": "Admin registered successfully",
        "admin": body,
    }), 201
