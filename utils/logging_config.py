"""
Logging setup for the cart engine.

Engine modules log through the root logger with a component tag
("[Cart]", "[Pricing]", "[Checkout]", "[Stripe]"). The embedding application
calls setup_logging() once; until then records go wherever the host
application routes them.
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Pattern

import config

LOG_FILE_NAME = "photomarket.log"
LOG_FORMAT = '%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Client libraries that flood DEBUG output, with the lowest level let through
NOISY_LOGGERS = {
    "aiohttp": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
}


class SecretMaskingFilter(logging.Filter):
    """
    Redacts payment credentials and buyer data before a record is written.

    Checkout logs carry the gateway request context, so without this filter
    Stripe keys and connected-account ids would end up in log files.
    """

    PATTERNS: list[tuple[Pattern, str]] = [
        # sk_live_..., sk_test_..., rk_live_...
        (re.compile(r'\b(sk|rk)_(live|test)_[A-Za-z0-9]{8,}'), '[REDACTED_STRIPE_KEY]'),
        (re.compile(r'(Bearer\s+)([A-Za-z0-9_\-\.]+)', re.IGNORECASE), r'\1[REDACTED_BEARER_TOKEN]'),
        # Photographer payout accounts
        (re.compile(r'\bacct_[A-Za-z0-9]{6,}'), '[REDACTED_ACCOUNT]'),
        (re.compile(r'\b([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b'), '[REDACTED_EMAIL]'),
    ]

    @classmethod
    def mask(cls, text: str) -> str:
        for pattern, replacement in cls.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        # Records are rewritten in place, never dropped
        if record.msg:
            record.msg = self.mask(str(record.msg))
        if record.args:
            record.args = tuple(self.mask(arg) if isinstance(arg, str) else arg for arg in record.args)
        return True


def _build_handlers(log_dir: Path, log_level: int, retention_days: int) -> list[logging.Handler]:
    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_dir / LOG_FILE_NAME,
        when="midnight",
        backupCount=retention_days,
        encoding="utf-8"
    )
    console_handler = logging.StreamHandler()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
    return [file_handler, console_handler]


def setup_logging(log_dir: Path | str = "logs"):
    """
    Route all log records to a daily-rotated file and the console.

    Reads config.LOG_LEVEL, config.LOG_RETENTION_DAYS and
    config.LOG_MASK_SECRETS. Calling it again replaces the handlers of the
    previous call.

    Args:
        log_dir: Directory receiving photomarket.log and its rotated copies
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_level_str = getattr(config, "LOG_LEVEL", "INFO")
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    retention_days = getattr(config, "LOG_RETENTION_DAYS", 7)
    mask_secrets = getattr(config, "LOG_MASK_SECRETS", True)

    handlers = _build_handlers(log_dir, log_level, retention_days)
    if mask_secrets:
        for handler in handlers:
            handler.addFilter(SecretMaskingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    for logger_name, min_level in NOISY_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(max(log_level, min_level))

    logging.info(
        f"Logging initialized: Level={log_level_str}, Retention={retention_days} days, "
        f"Masking={'ENABLED' if mask_secrets else 'DISABLED'}"
    )
