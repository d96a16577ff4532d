#!/usr/bin/env python3
"""
Configuration management for the bakery admin backend.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "bakery_admin.db")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    """Configuration class for the application."""

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.abspath(_DEFAULT_DB_PATH)}")

    # Redis Configuration (admin sessions)
    USE_REDIS = _env_bool("USE_REDIS", "true")
    REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
    REDIS_DB = int(os.getenv("REDIS_DB", 0))
    SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 8 * 60 * 60))

    # Password hashing
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

    # External services
    PREDICTION_API_URL = os.getenv(
        "PREDICTION_API_URL",
        "https://toshan-bakery-prediction-api.onrender.com/api/predictions",
    )
    PREDICTION_TIMEOUT = float(os.getenv("PREDICTION_TIMEOUT", 15))
    VALIDATE_IMAGE_URLS = _env_bool("VALIDATE_IMAGE_URLS", "false")
    IMAGE_CHECK_TIMEOUT = float(os.getenv("IMAGE_CHECK_TIMEOUT", 5))

    # Application Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    ORDERS_PAGE_SIZE = int(os.getenv("ORDERS_PAGE_SIZE", 10))

    # Analytics revenue rule: delivered orders below the threshold carry a flat fee
    ANALYTICS_SHIPPING_FEE = float(os.getenv("ANALYTICS_SHIPPING_FEE", 10))
    ANALYTICS_FREE_SHIPPING_ABOVE = float(os.getenv("ANALYTICS_FREE_SHIPPING_ABOVE", 100))
    TOP_PRODUCTS_LIMIT = int(os.getenv("TOP_PRODUCTS_LIMIT", 5))

    @classmethod
    def debug_print(cls):
        print(f"[CONFIG] DATABASE_URL={cls.DATABASE_URL}")
        print(f"[CONFIG] USE_REDIS={cls.USE_REDIS} host={cls.REDIS_HOST}:{cls.REDIS_PORT}/{cls.REDIS_DB}")
        print(f"[CONFIG] PREDICTION_API_URL={cls.PREDICTION_API_URL}")
        print(f"[CONFIG] VALIDATE_IMAGE_URLS={cls.VALIDATE_IMAGE_URLS}")

    @classmethod
    def validate(cls):
        """Validate that all required configuration is present."""
        missing = []

        if not cls.DATABASE_URL:
            missing.append("DATABASE_URL")
        if cls.USE_REDIS and not cls.REDIS_HOST:
            missing.append("REDIS_HOST")
        if cls.SESSION_TTL_SECONDS <= 0:
            missing.append("SESSION_TTL_SECONDS (must be positive)")
        if cls.ORDERS_PAGE_SIZE <= 0:
            missing.append("ORDERS_PAGE_SIZE (must be positive)")
        if cls.TOP_PRODUCTS_LIMIT <= 0:
            missing.append("TOP_PRODUCTS_LIMIT (must be positive)")

        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        return True

# Validate configuration on import
Config.validate()
