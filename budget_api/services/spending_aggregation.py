import calendar
from collections.abc import Mapping
from datetime import date
from typing import Iterable, Tuple

import pandas as pd

from budget_api.core.errors import InvalidPeriodError
from budget_api.schemas.spending import (
    CategorySpendingResult, SpendingAggregationParams, SpendingAggregationResponse
)

TRANSACTION_COLUMNS = ["user_id", "category_id", "amount", "date"]


def month_date_range(month: int, year: int) -> Tuple[date, date]:
    """First and last calendar day of the month, both inclusive."""
    if not isinstance(month, int) or isinstance(month, bool) or month < 1 or month > 12:
        raise InvalidPeriodError(f"Invalid month: {month}. Must be between 1 and 12.")

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _to_day(value) -> pd.Timestamp:
    """Reduce a date, datetime or ISO string to a naive day-level Timestamp.

    Timezone-aware values keep their local calendar day.
    """
    if value is None:
        return pd.NaT
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.normalize()


def _to_frame(transactions: Iterable) -> pd.DataFrame:
    rows = []
    for trx in transactions:
        if isinstance(trx, Mapping):
            row = {col: trx.get(col) for col in TRANSACTION_COLUMNS}
        else:
            row = {col: getattr(trx, col, None) for col in TRANSACTION_COLUMNS}
        row['date'] = _to_day(row['date'])
        rows.append(row)
    return pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)


def aggregate_monthly_spending(
        params: SpendingAggregationParams,
        transactions: Iterable
) -> SpendingAggregationResponse:
    """Sum signed transaction amounts per category for one user and month.

    Transactions without a category are left out entirely: they have no entry
    in ``spending_by_category`` and do not count towards the totals.
    """
    start, end = month_date_range(params.month, params.year)
    df = _to_frame(transactions)

    empty = SpendingAggregationResponse(month=params.month, year=params.year)
    if df.empty:
        return empty

    mask = (
        (df['user_id'] == params.user_id)
        & df['category_id'].notna()
        & (df['date'] >= pd.Timestamp(start))
        & (df['date'] <= pd.Timestamp(end))
    )
    df = df.loc[mask]
    if df.empty:
        return empty

    df = df.assign(
        category_id=df['category_id'].astype(int),
        amount=df['amount'].astype(float)
    )
    # Fixed summation order so the result does not depend on input order
    df = df.sort_values(['category_id', 'amount'], kind='mergesort')

    grouped = df.groupby('category_id', sort=True)['amount'].agg(['sum', 'count'])

    results = [
        CategorySpendingResult(
            category_id=int(category_id),
            total_spent=float(row['sum']),
            transaction_count=int(row['count'])
        )
        for category_id, row in grouped.iterrows()
    ]

    return SpendingAggregationResponse(
        month=params.month,
        year=params.year,
        spending_by_category=results,
        total_spending=sum(r.total_spent for r in results),
        total_transaction_count=sum(r.transaction_count for r in results)
    )
