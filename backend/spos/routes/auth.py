# Overview: Flask API routes for registration, login and logout on the terminal.

from flask import Blueprint, request, jsonify, current_app

from ..context import get_session_manager
from ..services.auth_service import DuplicateEmailError, InvalidCredentialsError
from ..validation import ValidationError


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    """
    Create an account and log it in on this terminal.

    Body: name, email, password
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        user = get_session_manager().register(
            data.get("name"),
            data.get("email"),
            data.get("password"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except DuplicateEmailError as e:
        return jsonify({"error": str(e)}), 409

    current_app.logger.info("Registered user id=%s", user.id)
    return jsonify({
        "user": user.to_public_dict(),
        "message": f"Welcome {user.name}! Registration successful.",
    }), 201


@auth_bp.post("/login")
def login_route():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        user = get_session_manager().login(data.get("email"), data.get("password"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except InvalidCredentialsError as e:
        return jsonify({"error": str(e)}), 401

    current_app.logger.info("User id=%s logged in", user.id)
    return jsonify({"user": user.to_public_dict(), "message": "Login successful"}), 200


@auth_bp.post("/logout")
def logout_route():
    get_session_manager().logout()
    current_app.logger.info("Terminal session cleared")
    return jsonify({"ok": True}), 200


@auth_bp.get("/me")
def me_route():
    user = get_session_manager().current_user()
    if user is None:
        return jsonify({"user": None}), 200
    return jsonify({"user": user.to_public_dict()}), 200
