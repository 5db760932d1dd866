from .responses import (
    ok,
    error,
    internal_error_response,
    validation_error_response,
)
from .auth import (
    auth_required,
    role_required,
    tutor_required,
    student_required,
    shopper_required,
    school_required,
    admin_cookie_required,
    admin_scope_required,
    SIGNUP_REQUIRED,
    LOGIN_REQUIRED,
)
from .validation import validate_schema, validate_query
from .db import transactional
from .jwt import (
    create_user_token,
    create_admin_token,
    decode_token,
    TokenError,
)
from .passwords import hash_password, check_password

__all__ = [
    'ok',
    'error',
    'internal_error_response',
    'validation_error_response',
    'auth_required',
    'role_required',
    'tutor_required',
    'student_required',
    'shopper_required',
    'school_required',
    'admin_cookie_required',
    'admin_scope_required',
    'SIGNUP_REQUIRED',
    'LOGIN_REQUIRED',
    'create_user_token',
    'create_admin_token',
    'decode_token',
    'TokenError',
    'validate_schema',
    'validate_query',
    'transactional',
    'hash_password',
    'check_password',
]
