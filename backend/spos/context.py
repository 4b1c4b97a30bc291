# Overview: Per-request construction of the store and services; the cart rides in the signed Flask session.

from __future__ import annotations

from flask import current_app, g, session

from .extensions import db
from .services.storage_service import KeyValueStore
from .services.inventory_service import InventoryLedger
from .services.auth_service import SessionManager
from .services.cart_service import CartSession, CartLine

CART_SESSION_KEY = "cart"


def get_store() -> KeyValueStore:
    if "spos_store" not in g:
        g.spos_store = KeyValueStore(db.session, prefix=current_app.config["STORAGE_KEY_PREFIX"])
    return g.spos_store


def get_ledger() -> InventoryLedger:
    if "spos_ledger" not in g:
        g.spos_ledger = InventoryLedger(get_store())
    return g.spos_ledger


def get_session_manager() -> SessionManager:
    if "spos_sessions" not in g:
        g.spos_sessions = SessionManager(get_store())
    return g.spos_sessions


def load_cart() -> CartSession:
    lines = [CartLine.from_dict(row) for row in session.get(CART_SESSION_KEY, [])]
    return CartSession(get_ledger(), lines)


def save_cart(cart: CartSession) -> None:
    session[CART_SESSION_KEY] = cart.to_list()


def start_cart() -> CartSession:
    """A new sell-page visit starts from an empty cart."""
    cart = CartSession(get_ledger())
    save_cart(cart)
    return cart
