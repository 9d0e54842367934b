"""Business settings for the ordering context.

Values are read from the environment once, at import time, with the
defaults the storefront has always used. Protean's own configuration
(providers, brokers, event store) stays in Protean's config files and
``PROTEAN_ENV``.
"""

import os
from datetime import timedelta


def _int_setting(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = int(raw)
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def _float_setting(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


RETURN_WINDOW_DAYS = _int_setting("ORDER_RETURN_WINDOW_DAYS", 14)
RETURN_WINDOW = timedelta(days=RETURN_WINDOW_DAYS)

MAX_RETURN_ATTACHMENTS = _int_setting("ORDER_MAX_RETURN_ATTACHMENTS", 5)

ORDER_NUMBER_PREFIX = os.environ.get("ORDER_NUMBER_PREFIX", "ORD")

# Seconds a writer waits for the store before giving up with StoreUnavailable
STORE_LOCK_TIMEOUT = _float_setting("ORDER_STORE_LOCK_TIMEOUT", 5.0)

LOG_FORMAT = os.environ.get("ORDER_LOG_FORMAT", "console")
