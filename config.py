import os
import sys
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from enums.currency import Currency
from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test suites to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)


def _config_error(name: str, reason, expected: str, example: str):
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    print(f"Expected: {expected}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: {name}={example}\n", file=sys.stderr)
    sys.exit(1)


try:
    _runtime_env_str = os.environ.get("RUNTIME_ENVIRONMENT")
    if not _runtime_env_str:
        raise ValueError("RUNTIME_ENVIRONMENT environment variable is not set")
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(_runtime_env_str)
except ValueError as e:
    _config_error("RUNTIME_ENVIRONMENT", e, ", ".join(env.value for env in RuntimeEnvironment), "DEV")

PLATFORM_NAME = os.environ.get("PLATFORM_NAME", "PhotoMarket")

try:
    CURRENCY = Currency(os.environ.get("CURRENCY", "USD"))
except ValueError as e:
    _config_error("CURRENCY", e, ", ".join(c.value for c in Currency), "USD")

# Platform commission as a decimal fraction of the gross sale (0.10 = 10%)
# Kept as a string so the pricing code can build an exact Decimal from it
COMMISSION_RATE = os.environ.get("COMMISSION_RATE", "0.10")
try:
    if not 0 <= Decimal(COMMISSION_RATE) <= 1:
        _config_error("COMMISSION_RATE", "rate is outside 0..1", "Decimal fraction between 0 and 1", "0.10")
except InvalidOperation:
    _config_error("COMMISSION_RATE", "not a number", "Decimal fraction between 0 and 1", "0.10")

# Cart persistence
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "photomarket_cart")
CART_TTL_SECONDS = int(os.environ.get("CART_TTL_SECONDS", "0"))  # 0 = carts never expire
REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD")
DB_URL = os.environ.get("DB_URL", "sqlite+aiosqlite:///data/photomarket.db")

# Checkout redirects and payment gateway
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:5173").rstrip("/")
STRIPE_API_URL = os.environ.get("STRIPE_API_URL", "https://api.stripe.com").rstrip("/")
STRIPE_SECRET_KEY = os.environ.get("STRIPE_SECRET_KEY", "")
STRIPE_TIMEOUT_SECONDS = int(os.environ.get("STRIPE_TIMEOUT_SECONDS", "30"))
CHECKOUT_LINE_ITEM_NAME = os.environ.get("CHECKOUT_LINE_ITEM_NAME", "Photo Album Access")

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask Stripe keys, accounts, e-mails

# Log retention: a month in DEV for debugging, a week elsewhere to save disk space
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "7"))
