# backend/spos/routes/system.py
"""
System health endpoint.
"""

import time
from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..context import get_store
from ..time_utils import now_iso

system_bp = Blueprint("system", __name__)


def check_store_health() -> dict:
    """
    Check store connectivity and list the collections present.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        collections = get_store().keys()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"collections": collections},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Store health check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    store = check_store_health()
    status_code = 200 if store["status"] == "healthy" else 503
    return {"status": store["status"], "checked_at": now_iso(), "store": store}, status_code
