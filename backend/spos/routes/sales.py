# Overview: Flask API route for the recorded sales; read-only.

from flask import Blueprint, request, jsonify

from ..context import get_ledger
from ..decorators import require_login
from ..validation import ValidationError


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_login
def list_sales_route():
    """
    Query params:
    - since: ISO-8601 timestamp (optional) - only sales at or after it
    """
    try:
        sales = get_ledger().list_sales(since=request.args.get("since"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
        "total": sum(s.total for s in sales),
    }), 200
