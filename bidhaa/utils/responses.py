from flask import jsonify, current_app


def ok(data=None, message="success", status=200):
    payload = {"success": True, "status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def error(message, status=400, code=None, **extra):
    payload = {
        "success": False,
        "status": "error",
        "message": message,
        "code": code or status,
    }
    payload.update(extra)
    return jsonify(payload), status


def validation_error_response(errors):
    details = [
        {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg")}
        for e in errors
    ]
    message = details[0]["message"] if details else "Invalid request"
    return error(message, status=400, errors=details)


def internal_error_response(message="An unexpected error occurred, please try again later", exc=None):
    extra = {}
    if exc is not None and current_app.config.get("EXPOSE_ERROR_DETAILS"):
        extra["error"] = str(exc)
    return error(message, status=500, **extra)
