"""Order number generation.

Numbers look like ``DTU482913K7Q2ZA``: the configured prefix, the last six
digits of the epoch time in milliseconds and six random base-36 characters.
"""

import secrets
import string
import time

from storefront.errors import OrderNumberExhausted
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 6
NUMBER_MAX_LENGTH = 20
MAX_PREFIX_LENGTH = NUMBER_MAX_LENGTH - 6 - SUFFIX_LENGTH


def generate_order_number(prefix, now_ms=None, choice=secrets.choice):
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    suffix = "".join(choice(ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}{str(now_ms)[-6:]}{suffix}"


def allocate_order_number(is_taken, prefix, attempts, generate=generate_order_number):
    """Return a number for which ``is_taken`` is false, regenerating on collision."""
    for attempt in range(1, attempts + 1):
        candidate = generate(prefix)
        if not is_taken(candidate):
            return candidate
        logger.warning("order_number_collision", order_number=candidate, attempt=attempt)

    raise OrderNumberExhausted(attempts)
