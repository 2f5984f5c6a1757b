"""Storage lifecycle and failure translation.

The providers themselves are owned by the Protean domain. This module bounds
every SQL connection and statement with the configured timeout before the
domain is initialised, closes providers on shutdown, and turns driver
failures into ``StorageTimeout`` / ``StorageUnavailable``.
"""

import time
from contextlib import contextmanager
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from protean.domain import Domain
from sqlalchemy import exc as sa_exc

from storefront.config import Settings, get_settings
from storefront.errors import StorageTimeout, StorageUnavailable, StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_TIMEOUT_MARKERS = ("timeout", "timed out", "canceling statement")


def with_timeouts(database_uri: str, timeout_seconds: float) -> str:
    """Return ``database_uri`` with connect and statement timeouts for psycopg2."""
    parts = urlsplit(database_uri)
    query = dict(parse_qsl(parts.query))
    query.setdefault("connect_timeout", str(max(1, int(timeout_seconds))))
    query.setdefault("options", f"-c statement_timeout={int(timeout_seconds * 1000)}")
    return urlunsplit(parts._replace(query=urlencode(query)))


def configure_storage(domain: Domain, settings: Settings | None = None) -> None:
    """Apply storage timeouts to the domain configuration. Call before ``domain.init()``."""
    settings = settings or get_settings()

    for name, conn_info in domain.config["databases"].items():
        uri = conn_info.get("database_uri")
        if conn_info.get("provider") != "postgresql" or not uri or uri.startswith("${"):
            continue
        conn_info["database_uri"] = with_timeouts(uri, settings.storage_timeout_seconds)
        logger.info("storage_timeouts_applied", database=name, timeout=settings.storage_timeout_seconds)


def shutdown_storage(domain: Domain) -> None:
    """Release provider connections."""
    with domain.domain_context():
        for name, provider in domain.providers.items():
            close = getattr(provider, "close", None)
            if close is None:
                continue
            close()
            logger.info("storage_closed", database=name)


def translate_storage_error(exc: Exception, operation: str) -> StorefrontError | None:
    """Map a driver or pool failure to a storefront error, or ``None`` if it is not one."""
    if isinstance(exc, sa_exc.TimeoutError | TimeoutError):
        return StorageTimeout(operation)

    if isinstance(exc, sa_exc.OperationalError):
        text = str(exc.orig if exc.orig is not None else exc).lower()
        if any(marker in text for marker in _TIMEOUT_MARKERS):
            return StorageTimeout(operation)
        return StorageUnavailable(operation)

    if isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        return StorageUnavailable(operation)

    if isinstance(exc, sa_exc.InterfaceError | ConnectionError):
        return StorageUnavailable(operation)

    return None


@contextmanager
def storage_guard(operation: str):
    """Run a block of storage work, translating failures and logging slow calls."""
    settings = get_settings()
    started = time.perf_counter()
    try:
        yield
    except (sa_exc.SQLAlchemyError, TimeoutError, ConnectionError) as exc:
        translated = translate_storage_error(exc, operation)
        if translated is None:
            raise
        logger.error("storage_failure", operation=operation, error_type=type(exc).__name__, error=str(exc))
        raise translated from exc
    finally:
        elapsed = time.perf_counter() - started
        if elapsed > settings.slow_operation_seconds:
            logger.warning("slow_storage_operation", operation=operation, seconds=round(elapsed, 3))
