from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
import logging

from models import db
from bidhaa.metrics import SEARCH_REQUESTS
from bidhaa.schemas.search import SearchQuery
from bidhaa.services.catalog import CatalogIntrospectionError, get_registry
from bidhaa.services.search import SearchCountError, SearchParams, search_catalog
from bidhaa.utils import error, internal_error_response, validate_query

search_bp = Blueprint("search", __name__, url_prefix="/api/search")


@search_bp.route("", methods=["GET"])
@search_bp.route("/", methods=["GET"])
@validate_query(SearchQuery, multi=("category", "element"))
def search_handler():
    """
    Keyword search across every product table
    ---
    tags: [Search]
    parameters:
      - {name: q, in: query, type: string}
      - {name: page, in: query, type: integer, default: 1}
      - {name: limit, in: query, type: integer, default: 12}
      - {name: grade, in: query, type: string}
      - {name: publisher, in: query, type: string}
      - {name: category, in: query, type: array, items: {type: string}, collectionFormat: multi}
      - {name: element, in: query, type: array, items: {type: string}, collectionFormat: multi}
    responses:
      200: {description: "{success, items, page, limit, total, totalPages}"}
      400: {description: No search term and no filters}
    """
    args: SearchQuery = request.validated_args
    cfg = current_app.config
    params = SearchParams(
        term=args.q,
        page=args.page,
        limit=min(args.limit or cfg["SEARCH_DEFAULT_LIMIT"], cfg["SEARCH_MAX_LIMIT"]),
        grade=args.grade,
        publisher=args.publisher,
        categories=args.category,
        elements=args.element,
    )
    if params.is_empty():
        SEARCH_REQUESTS.labels("rejected").inc()
        return error("Please provide a search term or select filters", status=400)

    try:
        entities = get_registry()
    except CatalogIntrospectionError as e:
        logging.error("Error checking table structures: %s", e)
        SEARCH_REQUESTS.labels("error").inc()
        return internal_error_response("Error checking table structures", exc=e)

    try:
        result = search_catalog(db.session, entities, params)
    except SearchCountError as e:
        logging.error("Error counting search results: %s", e, exc_info=True)
        SEARCH_REQUESTS.labels("error").inc()
        return internal_error_response("Error counting search results", exc=e)
    except SQLAlchemyError as e:
        logging.error("Error searching database: %s", e, exc_info=True)
        SEARCH_REQUESTS.labels("error").inc()
        return internal_error_response("Error searching database", exc=e)

    SEARCH_REQUESTS.labels("hit" if result.total else "miss").inc()
    return jsonify(result.to_dict()), 200
