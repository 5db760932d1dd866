import datetime as dt
from typing import Dict
import jwt
from flask import current_app


def _secret() -> str:
    return current_app.config["JWT_SECRET"]


def _utcnow():
    return dt.datetime.now(dt.timezone.utc)


def _exp(hours: int = None):
    hours = hours or current_app.config["TOKEN_LIFETIME_HOURS"]
    return _utcnow() + dt.timedelta(hours=hours)


def create_user_token(user_id: int, role: str) -> str:
    payload: Dict = {
        "userId": user_id,
        "role": role,
        "exp": _exp(),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


def create_admin_token(admin_id: int, admin_role: str) -> str:
    payload: Dict = {
        "adminId": admin_id,
        "role": "admin",
        "admin_role": admin_role,
        "exp": _exp(),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


class TokenError(Exception):
    pass


def decode_token(token: str, expected_claim: str = "userId") -> Dict:
    """Verify signature and expiry; the token must carry ``expected_claim``."""
    try:
        data = jwt.decode(token, _secret(), algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")

    if data.get(expected_claim) is None:
        raise TokenError(f"token missing {expected_claim}")
    return data
