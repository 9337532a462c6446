from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from budget_api.core.errors import InvalidPeriodError
from budget_api.schemas.spending import SpendingAggregationParams
from budget_api.services.spending_aggregation import aggregate_monthly_spending, month_date_range

USER = "user-123"


def trx(amount, day, category_id=1, month=1, year=2025, user_id=USER):
    return {"user_id": user_id, "category_id": category_id, "amount": amount, "date": date(year, month, day)}


def params(month=1, year=2025, user_id=USER):
    return SpendingAggregationParams(user_id=user_id, month=month, year=year)


def by_category(response):
    return {r.category_id: r for r in response.spending_by_category}


def test_single_category_multiple_transactions() -> None:
    result = aggregate_monthly_spending(params(), [trx(-50, 5), trx(-30, 15), trx(-20, 25)])

    assert len(result.spending_by_category) == 1
    groceries = result.spending_by_category[0]
    assert groceries.category_id == 1
    assert groceries.total_spent == pytest.approx(-100)
    assert groceries.transaction_count == 3


def test_refunds_reduce_total() -> None:
    result = aggregate_monthly_spending(params(), [trx(-100, 5), trx(25, 10), trx(-50, 20)])
    assert result.spending_by_category[0].total_spent == pytest.approx(-125)


def test_category_with_only_refunds_is_positive() -> None:
    result = aggregate_monthly_spending(params(), [trx(25, 5), trx(15, 10)])
    assert result.spending_by_category[0].total_spent == pytest.approx(40)


def test_mixed_categories_totals() -> None:
    rows = [
        trx(-100, 2, 1), trx(25, 3, 1), trx(-50, 4, 1),
        trx(-200, 5, 2), trx(50, 6, 2),
        trx(100, 7, 3),
    ]
    result = aggregate_monthly_spending(params(), rows)
    spend = by_category(result)

    assert spend[1].total_spent == pytest.approx(-125)
    assert spend[2].total_spent == pytest.approx(-150)
    assert spend[3].total_spent == pytest.approx(100)
    assert result.total_spending == pytest.approx(-175)
    assert result.total_transaction_count == 6
    assert [r.category_id for r in result.spending_by_category] == [1, 2, 3]


def test_uncategorized_transactions_are_excluded() -> None:
    rows = [trx(-50, 5, 1), trx(-30, 6, None), trx(-20, 7, 2)]
    result = aggregate_monthly_spending(params(), rows)

    assert set(by_category(result)) == {1, 2}
    assert result.total_spending == pytest.approx(-70)
    assert result.total_transaction_count == 2


def test_excludes_transactions_outside_month() -> None:
    rows = [
        trx(-50, 31, month=12, year=2024),
        trx(-100, 15),
        trx(-75, 1, month=2),
    ]
    result = aggregate_monthly_spending(params(), rows)

    assert result.spending_by_category[0].total_spent == pytest.approx(-100)
    assert result.total_transaction_count == 1


def test_includes_first_and_last_day_of_month() -> None:
    result = aggregate_monthly_spending(params(), [trx(-50, 1), trx(-30, 31)])
    assert result.total_transaction_count == 2


def test_only_requested_user_is_counted() -> None:
    rows = [trx(-10, 3), trx(-99, 3, user_id="someone-else")]
    result = aggregate_monthly_spending(params(), rows)
    assert result.total_spending == pytest.approx(-10)


def test_leap_year_february_includes_29th() -> None:
    result = aggregate_monthly_spending(params(month=2, year=2024), [trx(-50, 29, month=2, year=2024)])
    assert result.total_transaction_count == 1
    assert result.total_spending == pytest.approx(-50)


def test_non_leap_february_stops_at_28th() -> None:
    rows = [trx(-10, 28, month=2), trx(-20, 1, month=3)]
    result = aggregate_monthly_spending(params(month=2), rows)
    assert result.total_transaction_count == 1
    assert result.total_spending == pytest.approx(-10)


@pytest.mark.parametrize(
    "month, year, last_day",
    [(1, 2025, 31), (4, 2025, 30), (2, 2024, 29), (2, 2025, 28), (2, 1900, 28), (2, 2000, 29)],
)
def test_month_date_range(month, year, last_day) -> None:
    assert month_date_range(month, year) == (date(year, month, 1), date(year, month, last_day))


@pytest.mark.parametrize("month", [0, 13, -1])
def test_invalid_month_raises(month) -> None:
    with pytest.raises(InvalidPeriodError):
        aggregate_monthly_spending(params(month=month), [])


def test_no_transactions_returns_empty_result() -> None:
    result = aggregate_monthly_spending(params(), [])

    assert result.month == 1
    assert result.year == 2025
    assert result.spending_by_category == []
    assert result.total_spending == 0
    assert result.total_transaction_count == 0


def test_result_is_independent_of_input_order() -> None:
    rows = [trx(-0.1, 1, 1), trx(-0.2, 2, 2), trx(-0.3, 3, 1), trx(0.7, 4, 2), trx(-1.05, 5, 1)]
    forward = aggregate_monthly_spending(params(), rows)
    backward = aggregate_monthly_spending(params(), list(reversed(rows)))

    assert forward == backward


def test_accepts_objects_and_mixed_date_types() -> None:
    rows = [
        SimpleNamespace(user_id=USER, category_id=4, amount=-5.0, date=datetime(2025, 1, 31, 23, 59)),
        {"user_id": USER, "category_id": 4, "amount": -7.5, "date": "2025-01-02"},
    ]
    result = aggregate_monthly_spending(params(), rows)

    assert result.spending_by_category[0].total_spent == pytest.approx(-12.5)
    assert result.spending_by_category[0].transaction_count == 2


def test_timezone_aware_dates_use_their_calendar_day() -> None:
    rows = [
        {"user_id": USER, "category_id": 2, "amount": -10.0, "date": "2025-01-15T10:00:00Z"},
        SimpleNamespace(user_id=USER, category_id=2, amount=-20.0,
                        date=datetime(2025, 1, 15, tzinfo=timezone.utc)),
        # Still January 31st locally, even though it is February 1st in UTC
        {"user_id": USER, "category_id": 2, "amount": -5.0, "date": "2025-01-31T23:30:00-05:00"},
        {"user_id": USER, "category_id": 2, "amount": -99.0, "date": "2025-02-01T00:30:00+02:00"},
        trx(-1.0, 3, 2),
    ]
    result = aggregate_monthly_spending(params(), rows)

    assert result.spending_by_category[0].total_spent == pytest.approx(-36)
    assert result.total_transaction_count == 4
