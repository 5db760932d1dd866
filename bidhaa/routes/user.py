from flask import Blueprint, jsonify, g
from bidhaa.utils import auth_required, ok

user_bp = Blueprint("user", __name__, url_prefix="/user")


@user_bp.route("/", methods=["GET"])
def index():
    return jsonify({"success": True, "message": "User routes working"}), 200


@user_bp.route("/me", methods=["GET"])
@auth_required
def me():
    return ok(g.current_user.to_dict())
