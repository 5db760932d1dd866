from flask import Blueprint, request, jsonify, current_app

from bidhaa.schemas.checkout import CheckoutSummaryRequest, WhatsAppOrderRequest
from bidhaa.services.cart import Cart
from bidhaa.services.checkout import CheckoutError, OrderDraft
from bidhaa.utils import error, validate_schema

checkout_bp = Blueprint("checkout", __name__, url_prefix="/api/checkout")


def _draft_for(items) -> OrderDraft:
    cart = Cart(i.model_dump(exclude_none=True) for i in items)
    return OrderDraft(cart=cart, shipping_fee=current_app.config["SHIPPING_FEE"])


@checkout_bp.route("/summary", methods=["POST"])
@validate_schema(CheckoutSummaryRequest)
def checkout_summary():
    data: CheckoutSummaryRequest = request.validated_data
    draft = _draft_for(data.cart)
    if data.county is not None:
        draft.select_county(data.county)
    return jsonify({
        "success": True,
        **draft.totals(),
        "totalQuantity": draft.cart.total_quantity,
    }), 200


@checkout_bp.route("/whatsapp", methods=["POST"])
@validate_schema(WhatsAppOrderRequest)
def checkout_whatsapp():
    data: WhatsAppOrderRequest = request.validated_data
    draft = _draft_for(data.cart)
    try:
        draft.submit_customer(data.customer.email, data.customer.subscribed)
        draft.submit_shipping(**data.shipping.model_dump())
        url = draft.whatsapp_link(current_app.config["WHATSAPP_NUMBER"])
    except CheckoutError as e:
        return error(str(e), status=400)
    return jsonify({
        "success": True,
        "url": url,
        "totals": draft.totals(),
        "currentStep": draft.step.value,
    }), 200
