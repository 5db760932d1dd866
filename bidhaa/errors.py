import logging
from flask import Blueprint, request
from werkzeug.exceptions import HTTPException

from bidhaa.utils.responses import error, internal_error_response

errors_bp = Blueprint("errors_bp", __name__)


@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    if e.code == 429:
        logging.warning("Rate limit hit on %s %s", request.method, request.path)
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code, code=e.code)


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception on %s %s", request.method, request.path)
    return internal_error_response(
        "An unexpected error occurred. Please try again later.", exc=e
    )
