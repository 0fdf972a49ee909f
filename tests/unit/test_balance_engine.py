"""
Тесты для BalanceEngine

Покрывает:
- Линейное начисление без событий
- Остановку входящих потоков в моменты событий
- Clamp внешне видимого баланса
- Settlement с учётом прошедших событий
- Ошибки нарушенных инвариантов
"""

import pytest

from src.core.domain import Account
from src.ledger import (
    AgreementStore,
    LedgerInvariantViolation,
    UnknownAgreement,
    real_time_balance,
    settle,
    unclamped_balance,
)


@pytest.fixture
def agreements():
    store = AgreementStore()
    store.get_or_create("a", "b", 0).flow_rate = 2.0
    store.get_or_create("c", "b", 0).flow_rate = 1.0
    return store


@pytest.fixture
def receiver():
    """Получатель двух потоков: a->b (2/s) до t=10, c->b (1/s) до t=20."""
    account = Account(account_id="b", settled_time=0, net_flow_rate=3.0)
    account.schedule_event("a:b", 10.0)
    account.schedule_event("c:b", 20.0)
    return account


class TestLinearBalance:
    """Баланс без событий."""

    def test_settled_balance_at_settled_time(self, agreements):
        account = Account(account_id="x", settled_time=100, settled_balance=42.0)
        assert real_time_balance(account, agreements, 100) == 42.0

    def test_outgoing_rate(self, agreements):
        account = Account(
            account_id="x", settled_time=0, settled_balance=100.0, net_flow_rate=-1.0
        )
        assert real_time_balance(account, agreements, 30) == 70.0

    def test_clamped_at_zero(self, agreements):
        account = Account(
            account_id="x", settled_time=0, settled_balance=100.0, net_flow_rate=-1.0
        )
        assert unclamped_balance(account, agreements, 150) == -50.0
        assert real_time_balance(account, agreements, 150) == 0.0


class TestEventWalk:
    """Баланс с остановками входящих потоков."""

    def test_before_first_event(self, receiver, agreements):
        assert real_time_balance(receiver, agreements, 5) == 15.0

    def test_event_at_now_not_applied_yet(self, receiver, agreements):
        assert real_time_balance(receiver, agreements, 10) == 30.0

    def test_between_events(self, receiver, agreements):
        # 3/s до t=10, затем 1/s
        assert real_time_balance(receiver, agreements, 15) == 35.0

    def test_after_all_events(self, receiver, agreements):
        # 30 + 1 * 10, дальше ставка 0
        assert real_time_balance(receiver, agreements, 100) == 40.0

    def test_unknown_agreement(self, agreements):
        account = Account(account_id="x", settled_time=0, net_flow_rate=1.0)
        account.schedule_event("ghost:x", 5.0)
        with pytest.raises(UnknownAgreement):
            real_time_balance(account, agreements, 10)

    def test_query_before_settlement_rejected(self, receiver, agreements):
        receiver.settled_time = 50
        with pytest.raises(LedgerInvariantViolation):
            real_time_balance(receiver, agreements, 40)


class TestSettle:
    """Settlement."""

    def test_settle_without_events(self, agreements):
        account = Account(
            account_id="x", settled_time=0, settled_balance=10.0, net_flow_rate=0.5
        )
        settle(account, agreements, 100)

        assert account.settled_balance == 60.0
        assert account.settled_time == 100
        assert account.net_flow_rate == 0.5

    def test_settle_folds_past_events_once(self, receiver, agreements):
        settle(receiver, agreements, 15)

        assert receiver.settled_balance == 35.0
        assert receiver.settled_time == 15
        # ставка остаётся суммой agreements, очередь не меняется
        assert receiver.net_flow_rate == 3.0
        assert len(receiver.net_flow_changes) == 2
        # a->b уже остановлен: дальше только c->b до t=20
        assert real_time_balance(receiver, agreements, 15) == 35.0
        assert real_time_balance(receiver, agreements, 18) == 38.0
        assert real_time_balance(receiver, agreements, 100) == 40.0

    def test_settle_matches_real_time_balance(self, receiver, agreements):
        expected = unclamped_balance(receiver, agreements, 25)
        settle(receiver, agreements, 25)
        assert receiver.settled_balance == expected
        assert unclamped_balance(receiver, agreements, 25) == expected

    def test_settle_keeps_negative_trajectory(self, agreements):
        account = Account(
            account_id="x", settled_time=0, settled_balance=10.0, net_flow_rate=-1.0
        )
        settle(account, agreements, 30)
        assert account.settled_balance == -20.0
        assert real_time_balance(account, agreements, 30) == 0.0
