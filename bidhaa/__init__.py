from flask import Flask, request, g
from bidhaa.config import get_config_class
from bidhaa.logging import configure_logging
from bidhaa.errors import errors_bp
from bidhaa.cli import register_cli
from bidhaa.api import register_api
from bidhaa import metrics as app_metrics
from flask_cors import CORS
from flasgger import Swagger
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics
from flask_migrate import Migrate
import extensions
import logging
import os
import uuid
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from bidhaa.telemetry import init_tracing
from models import db

__version__ = "1.0.0"

EXPOSED_HEADERS = ("X-Request-ID", "traceparent")


def _parse_origins(allowed):
    if isinstance(allowed, str):
        allowed = allowed.strip()
        return "*" if allowed == "*" else [o.strip() for o in allowed.split(",") if o.strip()]
    return allowed or "*"


def create_app(config_object=None):
    """Application factory."""
    app = Flask(__name__)

    if config_object is not None:
        app.config.from_object(config_object)
    else:
        app.config.from_object(get_config_class())

    if not app.config.get("JWT_SECRET"):
        raise RuntimeError("JWT_SECRET is not configured")

    configure_logging(app)
    register_cli(app)

    limiter = extensions.limiter
    limiter.init_app(app)
    app.limiter = limiter

    Migrate(app, db, compare_type=True, render_as_batch=True)
    Swagger(
        app,
        config={
            "headers": [],
            "specs": [
                {
                    "endpoint": "apispec",
                    "route": "/apispec.json",
                    "rule_filter": lambda rule: not rule.rule.startswith(("/__", "/static", "/metrics")),
                    "model_filter": lambda tag: True,
                }
            ],
            "swagger_ui": True,
            "specs_route": "/docs/",
        },
        template={
            "info": {"title": "MyBidhaa API", "version": __version__},
            "tags": [
                {"name": "Auth", "description": "Storefront accounts"},
                {"name": "Admin", "description": "Back-office accounts"},
                {"name": "Catalog", "description": "Product listings"},
                {"name": "Search", "description": "Cross-catalog keyword search"},
                {"name": "Checkout", "description": "Cart totals and WhatsApp ordering"},
            ],
        },
    )

    # A private registry keeps repeated factory calls under test from colliding
    registry = CollectorRegistry() if app.config.get("TESTING") else None
    metrics = PrometheusMetrics(app, path="/metrics", registry=registry)
    if not app.config.get("TESTING") and not os.environ.get("METRICS_APP_INFO_SET"):
        metrics.info("app_info", "Application info", version=__version__)
        os.environ["METRICS_APP_INFO_SET"] = "1"

    CORS(
        app,
        origins=_parse_origins(app.config.get("CORS_ALLOWED_ORIGINS", "*")),
        supports_credentials=True,
        expose_headers=list(EXPOSED_HEADERS),
    )

    app.register_blueprint(errors_bp)
    if app.config.get("TESTING"):
        from bidhaa.test_support import test_support_bp
        app.register_blueprint(test_support_bp)

    register_api(app)

    @app.before_request
    def _set_request_id():
        incoming = request.headers.get("X-Request-ID")
        g.request_id = (incoming or uuid.uuid4().hex)[:100]
        app.logger.debug("request start %s %s", request.method, request.path)

    @app.after_request
    def _add_request_id_header(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers["X-Request-ID"] = rid
        return resp

    @app.after_request
    def _set_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        exposed = [h.strip() for h in resp.headers.get("Access-Control-Expose-Headers", "").split(",") if h.strip()]
        for header in EXPOSED_HEADERS:
            if header not in exposed:
                exposed.append(header)
        resp.headers["Access-Control-Expose-Headers"] = ",".join(exposed)
        return resp

    @app.after_request
    def _add_trace_header(resp):
        carrier = {}
        TraceContextTextMapPropagator().inject(carrier)
        tp = carrier.get("traceparent")
        if tp:
            resp.headers["traceparent"] = tp
        return resp

    db.init_app(app)
    app_metrics.init_app(app)
    init_tracing(app)
    if app.config.get("DEBUG") or app.config.get("TESTING"):
        with app.app_context():
            db.create_all()
            logging.info("Tables created")

    @app.route("/health")
    def health():
        return {"status": "ok"}, 200

    return app
