# Overview: Flask API routes for the sell-page cart; the cart lives in the signed client session.

"""
Cart routes. The cart starts empty on each visit to the sell page
(GET /pages/sellproduct) and is written back after every change.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..context import load_cart, save_cart
from ..decorators import require_login
from ..services.cart_service import CartSession, CartLineNotFoundError
from ..services.inventory_service import ProductNotFoundError
from ..services.receipt_service import format_receipt
from ..time_utils import now_iso
from ..validation import ValidationError, coerce_value


cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


def _cart_body(cart: CartSession) -> dict:
    return {"lines": cart.to_list(), "count": len(cart), "total": cart.total}


@cart_bp.get("")
@require_login
def get_cart_route():
    return jsonify(_cart_body(load_cart())), 200


@cart_bp.post("/scan")
@require_login
def scan_route():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    cart = load_cart()
    try:
        result = cart.scan(str(data.get("barcode") or ""))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ProductNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    save_cart(cart)
    return jsonify({
        "action": result.action,
        "product": result.product.to_dict(),
        "cart": _cart_body(cart),
    }), 200


@cart_bp.put("/lines/<int:index>")
@require_login
def set_line_quantity_route(index: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    cart = load_cart()
    try:
        quantity = coerce_value("quantity", data.get("quantity"), int)
        if quantity is None:
            raise ValidationError("quantity is required")
        cart.set_line_quantity(index, quantity)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except CartLineNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    save_cart(cart)
    return jsonify(_cart_body(cart)), 200


@cart_bp.delete("/lines/<int:index>")
@require_login
def remove_line_route(index: int):
    cart = load_cart()
    try:
        cart.remove_line(index)
    except CartLineNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    save_cart(cart)
    return jsonify(_cart_body(cart)), 200


@cart_bp.delete("")
@require_login
def clear_cart_route():
    cart = load_cart()
    cart.clear()
    save_cart(cart)
    return jsonify(_cart_body(cart)), 200


@cart_bp.post("/checkout")
@require_login
def checkout_route():
    """
    Sell every cart line.

    200: all lines sold, cart cleared, receipt included.
    409: at least one line failed; lines sold before it stay sold and the
         cart is returned unchanged with per-line results.
    """
    cart = load_cart()
    try:
        result = cart.checkout()
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Checkout failed")
        return jsonify({"error": "Internal server error"}), 500

    save_cart(cart)
    body = result.to_dict()
    body["cart"] = _cart_body(cart)

    if not result.ok:
        body["error"] = "Some items couldn't be sold"
        return jsonify(body), 409

    body["receipt"] = format_receipt(
        result,
        shop_name=current_app.config["SHOP_NAME"],
        cashier_name=g.current_user.name,
        date_time=now_iso(),
    )
    current_app.logger.info(
        "Checkout by user id=%s: %s lines, total %.2f", g.current_user.id, result.items_sold, result.total
    )
    return jsonify(body), 200
