"""
Tests for the store timeout budget shared by all attempts of a unit.
"""

from unittest.mock import patch

import pytest
from django.db import OperationalError, connection, transaction

from apps.coupons.services.concurrency import (
    remaining_seconds,
    run_with_retry,
    store_deadline,
)
from apps.coupons.services.exceptions import StoreTimeoutError


class FakeClock:

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    fake = FakeClock()
    with patch('apps.coupons.services.concurrency.time.monotonic', new=fake), \
            patch('apps.coupons.services.concurrency.time.sleep'):
        yield fake


class TestRunWithRetry:

    @pytest.fixture(autouse=True)
    def _coupons_settings(self, settings):
        settings.COUPONS = {'STORE_TIMEOUT_SECONDS': 100}

    def test_statement_timeout_is_not_retried_past_the_budget(self, clock):
        calls = []

        def slow_failure():
            calls.append(clock.now)
            clock.now += 60
            raise OperationalError('canceling statement due to statement timeout')

        with pytest.raises(StoreTimeoutError) as exc_info:
            run_with_retry(slow_failure)

        assert len(calls) == 2
        assert exc_info.value.details == {'attempts': 2, 'timeout_seconds': 100}

    def test_fast_contention_uses_every_attempt(self, clock):
        calls = []

        def locked():
            calls.append(clock.now)
            raise OperationalError('database is locked')

        with pytest.raises(StoreTimeoutError) as exc_info:
            run_with_retry(locked)

        assert len(calls) == 5
        assert exc_info.value.details['attempts'] == 5

    def test_later_attempts_get_what_is_left(self, clock):
        budgets = []

        def flaky():
            budgets.append(remaining_seconds())
            clock.now += 30
            if len(budgets) < 3:
                raise OperationalError('database is locked')
            return 'done'

        assert run_with_retry(flaky) == 'done'
        assert budgets == [100, 70, 40]

    def test_budget_is_released_after_the_unit(self, clock):
        run_with_retry(lambda: None)
        clock.now += 500

        assert remaining_seconds() == 100


@pytest.mark.django_db
class TestStoreDeadline:

    @pytest.fixture(autouse=True)
    def _coupons_settings(self, settings):
        settings.COUPONS = {'STORE_TIMEOUT_SECONDS': 5}

    def busy_timeout(self):
        with connection.cursor() as cursor:
            cursor.execute('PRAGMA busy_timeout')
            return cursor.fetchone()[0]

    @pytest.mark.skipif(connection.vendor != 'sqlite', reason='SQLite busy timeout')
    def test_busy_timeout_follows_remaining_budget(self, clock):
        seen = []

        def unit():
            clock.now += 2
            with transaction.atomic(), store_deadline():
                seen.append(self.busy_timeout())

        before = self.busy_timeout()
        run_with_retry(unit)

        assert seen == [3000]
        assert self.busy_timeout() == before
