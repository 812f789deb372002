import os
from decimal import Decimal
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./bellafleurs.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    # "development" exposes error details in API responses
    ENVIRONMENT = data.get("ENVIRONMENT", "production")

    # Identity tokens are issued by the auth provider, we only verify them
    JWT_SECRET = data.get("JWT_SECRET", "change-me")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")

    # Payments
    STRIPE_SECRET_KEY = data.get("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET = data.get("STRIPE_WEBHOOK_SECRET", "")
    CURRENCY = data.get("CURRENCY", "eur")

    # Transactional e-mail API (empty URL = log only)
    EMAIL_API_URL = data.get("EMAIL_API_URL", None)
    EMAIL_API_KEY = data.get("EMAIL_API_KEY", "")
    EMAIL_SENDER = data.get("EMAIL_SENDER", "Bella Fleurs <contact@bellafleurs.fr>")
    ADMIN_EMAIL = data.get("ADMIN_EMAIL", "contact@bellafleurs.fr")
    SITE_URL = data.get("SITE_URL", "http://localhost:3000")

    # Corporate invoicing
    INVOICE_VAT_RATE = Decimal(str(data.get("INVOICE_VAT_RATE", "0.20")))
    INVOICE_PAYMENT_TERM_DAYS = data.get("INVOICE_PAYMENT_TERM_DAYS", 30)

    # Closure windows are whole days in the shop's local time
    SHOP_TIMEZONE = data.get("SHOP_TIMEZONE", "Europe/Paris")
