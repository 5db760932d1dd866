from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                payload = request.get_json(silent=True)
                obj = schema(**(payload if isinstance(payload, dict) else {}))
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator


def validate_query(schema, multi=()):
    """Same as ``validate_schema`` for query strings; ``multi`` keys keep every value."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            raw = {k: v for k, v in request.args.items() if k not in multi}
            for key in multi:
                values = [v for v in request.args.getlist(key) if v]
                if values:
                    raw[key] = values
            try:
                obj = schema(**raw)
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_args = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
