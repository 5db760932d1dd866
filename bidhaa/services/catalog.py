"""
Catalog registry: which tables hold products and how to read them.

The registry is derived from the live schema once and cached on the app,
so every search request sees the same entity list without touching the
catalog metadata again.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import inspect

from models import db

logger = logging.getLogger(__name__)

EXCLUDED_TABLES = {
    "users", "admins", "sessions", "logs", "migrations", "orders",
    "order_items", "settings", "permissions", "carts", "alembic_version",
}

SEARCHABLE_EXACT = {
    "description", "book_title", "product_title", "book_name", "product_name",
    "apparatus_name", "item_name", "stationery_name", "text", "keywords",
    "details", "sku", "code", "model", "brand", "publisher", "author",
}

REGISTRY_KEY = "bidhaa.catalog_registry"


class CatalogIntrospectionError(Exception):
    pass


@dataclass(frozen=True)
class SearchableEntity:
    table: str
    id_column: str
    title_column: str
    searchable_columns: Tuple[str, ...]
    columns: Tuple[str, ...] = field(default_factory=tuple)

    def has_column(self, name: str) -> bool:
        return name in self.columns


def is_product_table(name: str) -> bool:
    lowered = name.lower()
    return (
        lowered not in EXCLUDED_TABLES
        and "schema_" not in lowered
        and not lowered.startswith("_")
        and not lowered.startswith("sqlite_")
    )


def is_searchable_column(name: str) -> bool:
    lowered = name.lower()
    return "name" in lowered or "title" in lowered or lowered in SEARCHABLE_EXACT


def pick_title_column(searchable: List[str]) -> str:
    for col in searchable:
        if col.lower() in ("title", "name"):
            return col
    for col in searchable:
        if "name" in col.lower() or "title" in col.lower():
            return col
    return searchable[0]


def pick_id_column(columns: List[str], primary_key: List[str]) -> Optional[str]:
    if "id" in columns:
        return "id"
    if primary_key:
        return primary_key[0]
    for col in columns:
        if col.lower().endswith("id"):
            return col
    return columns[0] if columns else None


def describe_table(inspector, table: str) -> Optional[SearchableEntity]:
    """Build the entity for one table, or None when nothing in it is searchable."""
    columns = [c["name"] for c in inspector.get_columns(table)]
    searchable = [c for c in columns if is_searchable_column(c)]
    if not searchable:
        logger.debug("Table %s has no searchable columns", table)
        return None
    pk = inspector.get_pk_constraint(table).get("constrained_columns") or []
    id_column = pick_id_column(columns, pk)
    if id_column is None:
        return None
    return SearchableEntity(
        table=table,
        id_column=id_column,
        title_column=pick_title_column(searchable),
        searchable_columns=tuple(searchable),
        columns=tuple(columns),
    )


def build_registry(engine) -> List[SearchableEntity]:
    try:
        inspector = inspect(engine)
        tables = [t for t in inspector.get_table_names() if is_product_table(t)]
        entities = [describe_table(inspector, t) for t in sorted(tables)]
    except Exception as e:
        raise CatalogIntrospectionError(str(e)) from e
    entities = [e for e in entities if e is not None]
    logger.info("Catalog registry built: %s", ", ".join(e.table for e in entities) or "(empty)")
    return entities


def get_registry(app=None) -> List[SearchableEntity]:
    app = app or current_app._get_current_object()
    registry = app.extensions.get(REGISTRY_KEY)
    if registry is None:
        registry = build_registry(db.engine)
        app.extensions[REGISTRY_KEY] = registry
    return registry


def reset_registry(app=None) -> None:
    app = app or current_app._get_current_object()
    app.extensions.pop(REGISTRY_KEY, None)
