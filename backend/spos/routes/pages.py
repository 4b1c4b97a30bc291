# Overview: Page entry points; run the session guard, then return the page's projection.

"""
Page routes.

Each page visit first goes through the session guard: logged-out
visitors are redirected to the login page, logged-in visitors opening
login/register are sent to the landing page. Allowed visits get the
data their page renders (the markup itself lives in the page layer).
"""

from flask import Blueprint, current_app, jsonify, redirect, url_for

from ..context import get_ledger, get_session_manager, start_cart
from ..services.page_service import home_stats, dashboard_rows


pages_bp = Blueprint("pages", __name__, url_prefix="/pages")

KNOWN_PAGES = {"login", "register", "home", "dashboard", "addproduct", "sellproduct"}


def _home_payload() -> dict:
    threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    return {"stats": home_stats(get_ledger(), low_stock_threshold=threshold)}


def _dashboard_payload() -> dict:
    return dashboard_rows(get_ledger())


def _sell_payload() -> dict:
    cart = start_cart()
    return {"cart": {"lines": cart.to_list(), "total": cart.total}}


PAGE_PAYLOADS = {
    "home": _home_payload,
    "dashboard": _dashboard_payload,
    "sellproduct": _sell_payload,
}


@pages_bp.get("/")
@pages_bp.get("/<path:page>")
def page_route(page: str = ""):
    sessions = get_session_manager()
    access = sessions.guard_page(page)

    if not access.allowed:
        return redirect(url_for("pages.page_route", page=access.redirect_to))

    if access.page not in KNOWN_PAGES:
        return jsonify({"error": "Page not found"}), 404

    user = sessions.current_user()
    payload = {
        "page": access.page,
        "user": user.to_public_dict() if user else None,
    }
    build = PAGE_PAYLOADS.get(access.page)
    if build is not None:
        payload.update(build())
    return jsonify(payload), 200
