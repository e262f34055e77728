"""Configuration settings for the storefront service."""
import os
from typing import List, Optional, Set

# Database Configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() in ("1", "true", "yes")

# Observability (exporters are only attached when an endpoint is configured)
OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or None

# Authentication
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "admin-token-456")
VALID_TOKENS: Set[str] = {ADMIN_TOKEN}

# CORS
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# Rate limiting (requests per client IP per window)
CHECKOUT_RATE_LIMIT = int(os.getenv("CHECKOUT_RATE_LIMIT", "100"))
LOGIN_RATE_LIMIT = int(os.getenv("LOGIN_RATE_LIMIT", "20"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "600"))
# Only enable behind a reverse proxy that sets X-Forwarded-For itself
TRUST_PROXY_HEADERS = os.getenv("TRUST_PROXY_HEADERS", "false").lower() in ("1", "true", "yes")

# Application Settings
PING_MESSAGE = os.getenv("PING_MESSAGE", "ping")
SERVICE_NAME = "storefront-service"
API_VERSION = "1.0.0"
STORE_SETTINGS_SCOPE = "store"
