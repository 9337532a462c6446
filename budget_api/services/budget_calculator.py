"""Budget-vs-actual arithmetic.

Pure calculation layer: no database access, nothing persisted. Spent amounts
keep the transaction sign convention (expenses negative), so
``remaining = budgeted - spent`` grows when an expense is recorded as a
negative spend. Percentages use the magnitude of spend and are not clamped.
"""
from typing import Mapping, Sequence

from budget_api.schemas.budget import (
    BudgetAllocation, BudgetPageResponse, BudgetSummary, CategoryBudgetItem
)
from budget_api.schemas.spending import CategorySpendingResult


def calculate_category_remaining(budgeted_amount: float, spent_amount: float) -> float:
    return budgeted_amount - spent_amount


def calculate_percentage_used(spent_amount: float, budgeted_amount: float) -> float:
    if budgeted_amount == 0:
        return 0.0
    return (abs(spent_amount) / budgeted_amount) * 100


def build_category_budget_items(
        budgets: Sequence[BudgetAllocation],
        spending: Mapping[int, CategorySpendingResult]
) -> list[CategoryBudgetItem]:
    """Combine budget allocations with aggregated spend, one item per budget.

    Output order follows ``budgets``. A category with no entry in ``spending``
    is treated as having spent nothing.
    """
    items = []
    for budget in budgets:
        spending_data = spending.get(budget.category_id)
        spent = spending_data.total_spent if spending_data is not None else 0.0

        items.append(CategoryBudgetItem(
            category_id=budget.category_id,
            category_name=budget.category_name,
            budgeted_amount=budget.budgeted_amount,
            spent_amount=spent,
            remaining_amount=calculate_category_remaining(budget.budgeted_amount, spent),
            percentage_used=calculate_percentage_used(spent, budget.budgeted_amount)
        ))
    return items


def calculate_budget_summary(items: Sequence[CategoryBudgetItem]) -> BudgetSummary:
    total_budgeted = sum(item.budgeted_amount for item in items)
    total_spent = sum(item.spent_amount for item in items)

    return BudgetSummary(
        total_budgeted=total_budgeted,
        total_spent=total_spent,
        total_remaining=sum(item.remaining_amount for item in items),
        overall_percentage_used=calculate_percentage_used(total_spent, total_budgeted)
    )


def compose_budget_page_response(
        month: int,
        year: int,
        items: Sequence[CategoryBudgetItem]
) -> BudgetPageResponse:
    # Callers are responsible for a valid month/year
    return BudgetPageResponse(
        month=month,
        year=year,
        category_budgets=list(items),
        summary=calculate_budget_summary(items)
    )
