"""
Cross-table keyword search.

Every registered product table contributes one COUNT select and one row
select. The selects are combined with UNION ALL: the counts are summed for
pagination, the rows are ranked by relevance tier and then by title.

Relevance tiers, per searchable column, case-insensitive LIKE:

    1. the whole phrase           %math book%
    2. the words in order         %math%book%
    3. any single word (>= 3 ch)  %math%, %book%   (multi-word terms only)
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy import (
    String,
    and_,
    case,
    column,
    func,
    literal,
    or_,
    select,
    table,
    true,
    union_all,
)
from sqlalchemy.exc import SQLAlchemyError

from bidhaa.services.catalog import SearchableEntity

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 2
MIN_WORD_LENGTH = 3
LIKE_ESCAPE = "\\"


class QueryConstructionError(Exception):
    pass


class SearchCountError(Exception):
    """The COUNT query failed; carries the database error as __cause__."""


@dataclass
class SearchParams:
    term: Optional[str] = None
    page: int = 1
    limit: int = 12
    grade: Optional[str] = None
    publisher: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    elements: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.term = clean_term(self.term) or None
        if self.grade in ("", "all"):
            self.grade = None
        if self.grade:
            self.grade = self.grade.replace("grade-", "", 1)
        if self.publisher in ("", "all"):
            self.publisher = None
        self.categories = [c for c in self.categories if c]
        self.elements = [e for e in self.elements if e]

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def has_term(self) -> bool:
        return bool(self.term)

    @property
    def has_filters(self) -> bool:
        return bool(self.grade or self.publisher or self.categories or self.elements)

    def is_empty(self) -> bool:
        """A term shorter than MIN_TERM_LENGTH only counts alongside filters."""
        long_enough = self.has_term and len(self.term) >= MIN_TERM_LENGTH
        return not long_enough and not self.has_filters


@dataclass
class SearchResult:
    items: List[dict]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict:
        return {
            "success": True,
            "items": self.items,
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass
class TableQuery:
    entity: SearchableEntity
    count: object
    rows: object


def clean_term(term: Optional[str]) -> str:
    return " ".join((term or "").split())


def _escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def expand_patterns(term: str):
    """Return (phrase, ordered_words, single_words) LIKE patterns, lower-cased."""
    raw = term.lower().split(" ")
    words = [_escape_like(w) for w in raw]
    phrase = f"%{' '.join(words)}%"
    ordered = f"%{'%'.join(words)}%"
    singles = []
    if len(raw) > 1:
        # word length is measured before escaping
        singles = [f"%{_escape_like(w)}%" for w in raw if len(w) >= MIN_WORD_LENGTH]
    return phrase, ordered, singles


def _like_any(tbl, columns: Sequence[str], patterns: Sequence[str]):
    return or_(*[
        func.lower(tbl.c[col]).like(pattern, escape=LIKE_ESCAPE)
        for pattern in patterns
        for col in columns
    ])


def relevance_tiers(entity: SearchableEntity, tbl, term: str):
    """List of (tier, condition) for the term over every searchable column."""
    phrase, ordered, singles = expand_patterns(term)
    tiers = [
        (1, _like_any(tbl, entity.searchable_columns, [phrase])),
        (2, _like_any(tbl, entity.searchable_columns, [ordered])),
    ]
    if singles:
        tiers.append((3, _like_any(tbl, entity.searchable_columns, singles)))
    return tiers


def _require(entity: SearchableEntity, name: str):
    if not entity.has_column(name):
        raise QueryConstructionError(f"{entity.table} has no {name} column")


def filter_conditions(entity: SearchableEntity, tbl, params: SearchParams):
    conditions = []
    if params.grade:
        _require(entity, "grade")
        conditions.append(tbl.c.grade == params.grade)
    if params.publisher:
        _require(entity, "publisher")
        conditions.append(tbl.c.publisher == params.publisher)
    if params.categories:
        _require(entity, "category")
        conditions.append(tbl.c.category.in_(params.categories))
    if params.elements:
        _require(entity, "element")
        conditions.append(tbl.c.element.in_(params.elements))
    return conditions


def _optional(tbl, entity: SearchableEntity, name: str, default):
    if entity.has_column(name):
        return tbl.c[name].label(name)
    return literal(default).label(name)


def build_table_query(entity: SearchableEntity, params: SearchParams) -> TableQuery:
    tbl = table(entity.table, *[column(c) for c in entity.columns])

    conditions = filter_conditions(entity, tbl, params)
    if params.has_term:
        tiers = relevance_tiers(entity, tbl, params.term)
        conditions.append(or_(*[cond for _, cond in tiers]))
        relevance = case(*[(cond, tier) for tier, cond in tiers], else_=len(tiers))
    else:
        relevance = literal(1)
    where = and_(true(), *conditions)

    count = select(func.count().label("count")).select_from(tbl).where(where)
    rows = select(
        tbl.c[entity.id_column].label("id"),
        tbl.c[entity.title_column].label("title"),
        _optional(tbl, entity, "description", ""),
        _optional(tbl, entity, "price", 0),
        _optional(tbl, entity, "image_url", ""),
        literal(entity.table, type_=String).label("type"),
        relevance.label("relevance"),
    ).where(where)
    return TableQuery(entity=entity, count=count, rows=rows)


def build_table_queries(entities: Sequence[SearchableEntity], params: SearchParams) -> List[TableQuery]:
    """Per-table queries; a table whose query cannot be built is left out."""
    queries = []
    for entity in entities:
        try:
            queries.append(build_table_query(entity, params))
        except (QueryConstructionError, KeyError) as e:
            logger.info("Skipping table %s in search: %s", entity.table, e)
    return queries


def count_statement(queries: Sequence[TableQuery]):
    counts = union_all(*[q.count for q in queries]).subquery("counts")
    return select(func.coalesce(func.sum(counts.c["count"]), 0).label("total"))


def rows_statement(queries: Sequence[TableQuery], params: SearchParams):
    rows = union_all(*[q.rows for q in queries]).subquery("results")
    return (
        select(rows)
        .order_by(rows.c.relevance, func.lower(rows.c.title), rows.c.title)
        .limit(params.limit)
        .offset(params.offset)
    )


def format_item(row) -> dict:
    data = row._mapping
    price = data["price"]
    return {
        "id": data["id"],
        "title": data["title"],
        "description": data["description"] or "",
        "price": float(price) if price is not None else 0.0,
        "image_url": data["image_url"] or "",
        "type": data["type"],
    }


def search_catalog(session, entities: Sequence[SearchableEntity], params: SearchParams) -> SearchResult:
    """Run the count and, when the page is in range, the row query."""
    queries = build_table_queries(entities, params)
    if not queries:
        return SearchResult(items=[], page=params.page, limit=params.limit, total=0)

    try:
        total = int(session.execute(count_statement(queries)).scalar() or 0)
    except SQLAlchemyError as e:
        raise SearchCountError(str(e)) from e
    result = SearchResult(items=[], page=params.page, limit=params.limit, total=total)
    if total == 0 or params.page > result.total_pages:
        return result

    rows = session.execute(rows_statement(queries, params)).all()
    result.items = [format_item(r) for r in rows]
    logger.debug("Search %r page %s -> %s of %s", params.term, params.page, len(result.items), total)
    return result
