from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()

# Re-export common models for convenience
from .user import User, Admin  # noqa: F401,E402
from .product import (  # noqa: F401,E402
    Book,
    Apparatus,
    ScienceApparatus,
    Stationery,
    PlaygroundEquipment,
    Electronics,
)
