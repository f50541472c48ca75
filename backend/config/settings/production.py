"""
Production settings.
"""

import structlog

from .base import *  # noqa

DEBUG = False

# Security settings
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])  # noqa

# Database - PostgreSQL in production
DATABASES = {
    "default": env.db("DATABASE_URL"),  # noqa
}

# Machine-readable logs
LOGGING["formatters"]["structlog"]["processor"] = structlog.processors.JSONRenderer()  # noqa
