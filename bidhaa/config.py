import os

from dotenv import find_dotenv, load_dotenv

# Config classes read the environment at import time, so .env must be loaded first
load_dotenv(find_dotenv(usecwd=True))


def _database_url():
    """DATABASE_URL wins; otherwise compose a MySQL URL from the DB_* parts."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    host = os.getenv("DB_HOST")
    name = os.getenv("DB_NAME")
    if not (host and name):
        return None
    user = os.getenv("DB_USER", "root")
    password = os.getenv("DB_PASSWORD", "")
    return f"mysql+pymysql://{user}:{password}@{host}/{name}"


def _engine_options(uri):
    # SQLite gets Flask-SQLAlchemy's own pool handling
    if not uri or uri.startswith("sqlite"):
        return {}
    return {
        "pool_size": int(os.getenv("DB_POOL_SIZE", 10)),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", 5)),
        "pool_pre_ping": True,
        "pool_recycle": 1800,
    }


class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    LOGIN_LIMIT_PER_IP = os.getenv("LOGIN_LIMIT_PER_IP", "10 per 30 minutes")
    REGISTER_LIMIT_PER_IP = os.getenv("REGISTER_LIMIT_PER_IP", "20 per hour")
    JWT_SECRET = os.getenv("JWT_SECRET")
    TOKEN_LIFETIME_HOURS = int(os.getenv("TOKEN_LIFETIME_HOURS", 24))
    ADMIN_COOKIE_NAME = "adminToken"
    ADMIN_COOKIE_SECURE = False
    MAX_SUPER_ADMINS = 3
    PORT = int(os.getenv("PORT", 3000))
    SEARCH_DEFAULT_LIMIT = int(os.getenv("SEARCH_DEFAULT_LIMIT", 12))
    SEARCH_MAX_LIMIT = int(os.getenv("SEARCH_MAX_LIMIT", 100))
    WHATSAPP_NUMBER = os.getenv("WHATSAPP_NUMBER", "254797100500")
    SHIPPING_FEE = float(os.getenv("SHIPPING_FEE", 200))
    EXPOSE_ERROR_DETAILS = True
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "mybidhaa-backend")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces"
    )


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-insecure-jwt-key")
    SQLALCHEMY_DATABASE_URI = _database_url() or "sqlite:///dev.db"
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    JWT_SECRET = "test-jwt-secret"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    LOGIN_LIMIT_PER_IP = "100 per minute"
    REGISTER_LIMIT_PER_IP = "100 per minute"


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)
    CORS_ALLOWED_ORIGINS = os.getenv(
        "CORS_ALLOWED_ORIGINS", "https://mybidhaa.com,https://www.mybidhaa.com"
    )
    ADMIN_COOKIE_SECURE = True
    EXPOSE_ERROR_DETAILS = False

    @staticmethod
    def validate():
        missing = []
        if not os.getenv("SECRET_KEY"):
            missing.append("SECRET_KEY")
        if not os.getenv("JWT_SECRET"):
            missing.append("JWT_SECRET")
        if not _database_url():
            missing.append("DATABASE_URL")
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )


def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
