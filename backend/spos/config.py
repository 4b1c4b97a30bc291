# backend/spos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key (signs the cart cookie)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB backing the key-value store
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///spos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Collection keys are "<prefix>products", "<prefix>sales", ...
    STORAGE_KEY_PREFIX = os.environ.get("SPOS_STORAGE_PREFIX", "spos_")

    LOW_STOCK_THRESHOLD = int(os.environ.get("SPOS_LOW_STOCK_THRESHOLD", "10"))
    SHOP_NAME = os.environ.get("SPOS_SHOP_NAME", "Smart Retail System")

    LOG_LEVEL = os.environ.get("SPOS_LOG_LEVEL", "INFO")

    # Browser origins allowed to call the API (page layer served separately)
    CORS_ALLOWED_ORIGINS = tuple(
        o.strip()
        for o in os.environ.get(
            "SPOS_CORS_ORIGINS",
            "http://localhost:5500,http://127.0.0.1:5500",
        ).split(",")
        if o.strip()
    )
