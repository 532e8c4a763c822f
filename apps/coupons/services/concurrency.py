"""
Store access helpers for the coupon services.

Retries lock contention and bounds each unit of work by the configured
store timeout. The timeout is one budget for the whole unit: retries
only happen while budget is left, and every attempt runs with whatever
remains of it.
"""

from contextlib import contextmanager
import logging
import threading
import time

from django.db import OperationalError, connection

from apps.coupons.conf import coupon_setting

from .exceptions import StoreTimeoutError

logger = logging.getLogger('coupons.store')

_local = threading.local()


def run_with_retry(func, *, attempts: int = 5, backoff_base: float = 0.05):
    """
    Execute a DB operation with retry on concurrency-related failures.

    ``func`` must open its own atomic block so that every attempt starts
    from a clean transaction. OperationalError (locked table, deadlock,
    statement timeout) is retried with exponential backoff while the
    STORE_TIMEOUT_SECONDS budget allows another attempt; after that the
    failure is reported as StoreTimeoutError.
    """
    timeout = coupon_setting('STORE_TIMEOUT_SECONDS')
    deadline = time.monotonic() + timeout
    _local.deadline = deadline
    try:
        for attempt in range(attempts):
            try:
                return func()
            except OperationalError as exc:
                delay = backoff_base * (2 ** attempt)
                if attempt >= attempts - 1 or time.monotonic() + delay >= deadline:
                    logger.warning(
                        "Store operation failed after %d attempt(s): %s", attempt + 1, exc
                    )
                    raise StoreTimeoutError(
                        attempts=attempt + 1,
                        timeout_seconds=timeout,
                    ) from exc
                logger.debug(
                    "Store contention on attempt %d, retrying in %.2fs: %s",
                    attempt + 1, delay, exc
                )
                time.sleep(delay)
    finally:
        _local.deadline = None


def remaining_seconds() -> float:
    """Seconds left in the current unit's budget, or the full timeout outside one."""
    deadline = getattr(_local, 'deadline', None)
    if deadline is None:
        return coupon_setting('STORE_TIMEOUT_SECONDS')
    return max(deadline - time.monotonic(), 0.0)


@contextmanager
def store_deadline():
    """
    Bound the statements of the current attempt by the remaining budget.

    PostgreSQL gets a transaction-local ``statement_timeout``; SQLite gets
    its busy timeout lowered for the duration of the block. Must be
    entered inside ``transaction.atomic``.
    """
    timeout_ms = max(int(remaining_seconds() * 1000), 1)

    if connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute('SET LOCAL statement_timeout = %s', [timeout_ms])
        yield
    elif connection.vendor == 'sqlite':
        with connection.cursor() as cursor:
            cursor.execute('PRAGMA busy_timeout')
            previous_ms = cursor.fetchone()[0]
            cursor.execute(f'PRAGMA busy_timeout = {timeout_ms}')
        try:
            yield
        finally:
            # Raw connection: the atomic block may already be marked for rollback
            connection.connection.execute(f'PRAGMA busy_timeout = {previous_ms}')
    else:
        yield
