"""
Tests for month aggregation.

Covers:
- Meal rate, including months without meals
- Per-member meal bill and meal balance
- Even expense shares and expense balance
- Member profile summary and expense history
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from mealbook.models.ledger import (
    DepositInDB,
    ExpenseCreate,
    ExpenseInDB,
    GroceryCreate,
    GroceryInDB,
    MealBatch,
    MealCount,
    MealInDB,
)
from mealbook.services.aggregation import (
    expense_share,
    meal_rate,
    member_expense_history,
    summarize_member,
    summarize_month,
)

from conftest import make_user

MONTH = "2025-01"


def meal(member, count, day=1):
    return MealInDB(date=datetime(2025, 1, day), month=MONTH, member_id=member.id, count=count)


def grocery(member, amount, day=1):
    return GroceryInDB(
        date=datetime(2025, 1, day), month=MONTH, done_by=member.id,
        description="Rice", amount=amount
    )


def deposit(member, amount, day=1):
    return DepositInDB(date=datetime(2025, 1, day), month=MONTH, member_id=member.id, amount=amount)


def expense(paid_by, split_among, amount, day=1):
    return ExpenseInDB(
        date=datetime(2025, 1, day), month=MONTH, paid_by=paid_by.id,
        split_among=[m.id for m in split_among], description="Internet", amount=amount
    )


@pytest.fixture
def alice():
    return make_user("Alice")


@pytest.fixture
def bob():
    return make_user("Bob")


@pytest.fixture
def carol():
    return make_user("Carol")


def test_meal_rate_without_meals_is_zero():
    assert meal_rate(300.0, 0) == 0.0
    assert meal_rate(0.0, 0) == 0.0


def test_empty_month_yields_zeros(alice, bob):
    data = summarize_month(MONTH, [alice, bob], [], [], [], [])

    assert data.meal_rate == 0.0
    assert data.total_meals == 0.0
    assert data.total_balance == 0.0
    assert [s.bill for s in data.member_stats] == [0.0, 0.0]
    assert [s.balance for s in data.member_stats] == [0.0, 0.0]


def test_groceries_without_meals_do_not_divide_by_zero(alice):
    data = summarize_month(MONTH, [alice], [], [grocery(alice, 120)], [deposit(alice, 50)], [])

    assert data.meal_rate == 0.0
    assert data.total_balance == -70.0
    assert data.member_stats[0].meal_bill == 0.0


def test_two_member_household_scenario(alice, bob):
    """A eats 20, B eats 10, groceries 300 → rate 10; A deposits 250, B 80."""
    meals = [meal(alice, 12, day=1), meal(alice, 8, day=2), meal(bob, 10, day=1)]
    groceries = [grocery(alice, 200), grocery(bob, 100)]
    deposits = [deposit(alice, 250), deposit(bob, 80)]

    data = summarize_month(MONTH, [alice, bob], meals, groceries, deposits, [])
    a, b = data.member_stats

    assert data.meal_rate == 10.0
    assert data.total_meals == 30.0
    assert data.total_deposit == 330.0
    assert data.total_balance == 30.0
    assert a.meal_bill == 200.0
    assert b.meal_bill == 100.0
    assert a.balance == 50.0
    assert b.balance == -20.0


def test_member_meals_partition_total(alice, bob, carol):
    meals = [meal(alice, 2.5), meal(bob, 3), meal(carol, 1.5, day=2), meal(alice, 1, day=3)]

    data = summarize_month(MONTH, [alice, bob, carol], meals, [grocery(bob, 80)], [], [])

    assert sum(s.meals for s in data.member_stats) == data.total_meals
    assert sum(s.meal_bill for s in data.member_stats) == pytest.approx(80.0)


def test_expense_shares_reconstruct_amount(alice, bob, carol):
    e = expense(alice, [alice, bob, carol], 100.0)

    shares = [expense_share(e, m.id) for m in (alice, bob, carol)]

    assert sum(shares) == pytest.approx(100.0)
    # Remainders are not redistributed
    assert shares[0] == shares[1] == shares[2] == 100.0 / 3


def test_expense_balance_is_reported_separately(alice, bob):
    expenses = [expense(alice, [alice, bob], 60.0)]

    data = summarize_month(MONTH, [alice, bob], [], [], [deposit(bob, 10)], expenses)
    a, b = data.member_stats

    assert data.total_expense == 60.0
    assert a.expense_paid == 60.0
    assert a.expense_share == 30.0
    assert a.expense_balance == 30.0
    assert b.expense_balance == -30.0
    # Headline balance is the meal balance only
    assert b.balance == 10.0
    assert b.bill == 30.0


def test_split_cannot_repeat_a_member(alice, bob):
    # A repeated member would be charged once but counted twice in the divisor
    with pytest.raises(ValidationError):
        ExpenseCreate(
            date=datetime(2025, 1, 1), paid_by=alice.id,
            split_among=[alice.id, alice.id, bob.id], description="Internet", amount=90.0
        )

    e = expense(alice, [alice, bob], 90.0)
    data = summarize_month(MONTH, [alice, bob], [], [], [], [e])
    assert sum(s.expense_share for s in data.member_stats) == pytest.approx(data.total_expense)


def test_day_cannot_repeat_a_member(alice):
    with pytest.raises(ValidationError):
        MealBatch(
            date=datetime(2025, 1, 1),
            meals=[MealCount(member_id=alice.id, count=2), MealCount(member_id=alice.id, count=0)]
        )


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_amounts_are_rejected(alice, value):
    with pytest.raises(ValidationError):
        GroceryCreate(date=datetime(2025, 1, 1), done_by=alice.id, description="Rice", amount=value)
    with pytest.raises(ValidationError):
        MealCount(member_id=alice.id, count=value)


def test_member_outside_split_owes_nothing(alice, bob, carol):
    expenses = [expense(alice, [alice, bob], 50.0)]

    data = summarize_month(MONTH, [alice, bob, carol], [], [], [], expenses)

    assert data.member_stats[2].expense_share == 0.0
    assert data.member_stats[2].bill == 0.0


def test_empty_split_contributes_no_share(alice):
    e = ExpenseInDB(
        date=datetime(2025, 1, 1), month=MONTH, paid_by=alice.id,
        split_among=[], description="Gas", amount=40.0
    )

    assert e.share() == 0.0
    assert expense_share(e, alice.id) == 0.0


def test_bill_combines_meal_and_expense_share(alice, bob):
    meals = [meal(alice, 10), meal(bob, 10)]
    expenses = [expense(bob, [alice, bob], 40.0)]

    data = summarize_month(MONTH, [alice, bob], meals, [grocery(alice, 100)], [], expenses)
    a = data.member_stats[0]

    assert a.meal_bill == 50.0
    assert a.bill == 70.0


def test_summarize_member(alice, bob):
    expenses = [expense(alice, [alice, bob], 90.0), expense(bob, [bob], 15.0)]

    summary = summarize_member(
        alice.id, 12.5,
        meals=[meal(alice, 4)],
        groceries=[grocery(alice, 75)],
        deposits=[deposit(alice, 40), deposit(alice, 20, day=5)],
        expenses=expenses
    )

    assert summary.total_meals == 4.0
    assert summary.total_meal_bill == 50.0
    assert summary.total_deposit == 60.0
    assert summary.current_balance == 10.0
    assert summary.total_grocery == 75.0
    assert summary.expense_paid == 90.0
    assert summary.expense_share == 45.0
    assert summary.expense_balance == 45.0


def test_member_expense_history(alice, bob, carol):
    older = expense(bob, [alice, bob], 30.0, day=2)
    newer = expense(alice, [bob, carol], 50.0, day=9)
    unrelated = expense(bob, [bob, carol], 10.0, day=5)
    names = {str(alice.id): "Alice", str(bob.id): "Bob"}

    history = member_expense_history(alice.id, [older, unrelated, newer], names)

    assert [h.id for h in history] == [str(newer.id), str(older.id)]
    assert history[0].member_paid == 50.0
    assert history[0].member_share == 0.0
    assert history[0].member_balance == 50.0
    assert history[1].member_paid == 0.0
    assert history[1].member_share == 15.0
    assert history[1].member_balance == -15.0
    assert history[1].paid_by.name == "Bob"
    assert history[0].split_among[1].name is None
