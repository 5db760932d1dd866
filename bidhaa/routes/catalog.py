from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
import logging

from models.product import (
    Book,
    Apparatus,
    ScienceApparatus,
    Stationery,
    PlaygroundEquipment,
    Electronics,
)
from bidhaa.schemas.search import ListingQuery
from bidhaa.utils import internal_error_response, validate_query

catalog_bp = Blueprint("catalog", __name__)


def paginated_listing(model, key, default_limit, order_by):
    """Shared page/limit listing: ``{key: [...], total, totalPages, currentPage}``."""
    args: ListingQuery = request.validated_args
    limit = args.limit or default_limit
    try:
        page = model.query.order_by(order_by).paginate(
            page=args.page, per_page=limit, error_out=False
        )
    except SQLAlchemyError as e:
        logging.error("Error fetching %s: %s", key, e, exc_info=True)
        return internal_error_response(f"Error fetching {key}", exc=e)
    return jsonify({
        key: [row.to_dict() for row in page.items],
        "total": page.total,
        "totalPages": page.pages,
        "currentPage": args.page,
    }), 200


@catalog_bp.route("/books", methods=["GET"])
@validate_query(ListingQuery)
def list_books():
    """
    Paginated books
    ---
    tags: [Catalog]
    parameters:
      - {name: page, in: query, type: integer, default: 1}
      - {name: limit, in: query, type: integer, default: 10}
    responses:
      200: {description: "{books, total, totalPages, currentPage}"}
    """
    return paginated_listing(Book, "books", 10, Book.book_id)


@catalog_bp.route("/apparatus", methods=["GET"])
@validate_query(ListingQuery)
def list_apparatus():
    return paginated_listing(Apparatus, "apparatus", 10, Apparatus.apparatus_id)


@catalog_bp.route("/apparatus/science", methods=["GET"])
def list_science_apparatus():
    try:
        rows = ScienceApparatus.query.order_by(ScienceApparatus.id).all()
    except SQLAlchemyError as e:
        logging.error("Error fetching science apparatus: %s", e, exc_info=True)
        return internal_error_response("Error fetching science apparatus", exc=e)
    return jsonify({
        "apparatus": [r.to_dict() for r in rows],
        "total": len(rows),
    }), 200


@catalog_bp.route("/stationeries", methods=["GET"])
@validate_query(ListingQuery)
def list_stationeries():
    return paginated_listing(Stationery, "stationeries", 12, Stationery.id)


@catalog_bp.route("/playground", methods=["GET"])
@validate_query(ListingQuery)
def list_playground():
    return paginated_listing(PlaygroundEquipment, "equipment", 12, PlaygroundEquipment.id)


@catalog_bp.route("/electronics", methods=["GET"])
@validate_query(ListingQuery)
def list_electronics():
    return paginated_listing(Electronics, "electronics", 12, Electronics.id)
