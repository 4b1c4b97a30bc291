# Overview: Flask API routes for products; parses input and returns JSON responses.

# backend/spos/routes/products.py
"""
Product management routes. All routes require a logged-in operator.

POST /api/products is the add-product form: it creates a product, or
answers 409 with the existing product when the barcode is already on
file so the page can offer a restock instead.
"""
from flask import Blueprint, request, jsonify, current_app

from ..context import get_ledger
from ..decorators import require_login
from ..services.inventory_service import ProductNotFoundError, InsufficientStockError
from ..services.page_service import AddProductController, PRODUCT_FORM_POLICY
from ..validation import validate_payload, enforce_rules_product, ValidationError

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_login
def list_products_route():
    products = get_ledger().list_products()
    return jsonify({"items": [p.to_dict() for p in products], "count": len(products)}), 200


@products_bp.post("")
@require_login
def create_product_route():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        outcome = AddProductController(get_ledger()).submit(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500

    body = {"status": outcome.status, "product": outcome.product.to_dict(), "message": outcome.message}
    if outcome.status == "exists":
        return jsonify(body), 409

    current_app.logger.info("Created product id=%s barcode=%s", outcome.product.id, outcome.product.barcode)
    return jsonify(body), 201


@products_bp.get("/barcode/<code>")
@require_login
def product_by_barcode_route(code: str):
    product = get_ledger().find_by_barcode(code)
    if product is None:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product.to_dict()), 200


@products_bp.put("/<int:product_id>")
@require_login
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_FORM_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    ledger = get_ledger()
    if not ledger.update(product_id, patch):
        return jsonify({"error": "Product not found"}), 404
    return jsonify(ledger.get_product(product_id).to_dict()), 200


@products_bp.delete("/<int:product_id>")
@require_login
def delete_product_route(product_id: int):
    get_ledger().delete(product_id)
    return jsonify({"ok": True}), 200


@products_bp.post("/<int:product_id>/restock")
@require_login
def restock_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        outcome = AddProductController(get_ledger()).restock(product_id, payload.get("quantity"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ProductNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    return jsonify({"product": outcome.product.to_dict(), "message": outcome.message}), 200


@products_bp.post("/<int:product_id>/sell")
@require_login
def sell_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    quantity = payload.get("quantity")
    try:
        result = get_ledger().sell(product_id, quantity)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ProductNotFoundError as e:
        return jsonify({"error": str(e), "reason": e.reason}), 404
    except InsufficientStockError as e:
        return jsonify({"error": str(e), "reason": e.reason, "details": e.details}), 409
    except Exception:
        current_app.logger.exception("Failed to sell product id=%s", product_id)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "success": True,
        "message": result.message,
        "remaining": result.remaining,
        "sale": result.sale.to_dict(),
    }), 200
